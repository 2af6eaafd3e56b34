"""Grid geometry helpers shared by the grid model and the solvers."""

from typing import Dict, List, Tuple

Coord = Tuple[int, int]
Neighborhoods = Dict[Coord, Tuple[Coord, ...]]

# (width, height) -> {(x, z): ((nx, nz), ...)}
_NEIGHBORHOODS_CACHE: Dict[Tuple[int, int], Neighborhoods] = {}


def get_neighborhoods(width: int, height: int) -> Neighborhoods:
    """
    Return the 8-connected neighbor coordinates of every cell of a grid size.

    Tables are built once per (width, height) and shared between grids, so
    callers must treat the result as read-only.

    Args:
        width: Number of columns (x axis). Must be positive.
        height: Number of rows (z axis). Must be positive.

    Returns:
        Mapping from each cell (x, z) to the tuple of its in-bounds neighbors.

    Raises:
        ValueError: If width or height is non-positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive.")

    key = (width, height)
    cached = _NEIGHBORHOODS_CACHE.get(key)
    if cached is not None:
        return cached

    table: Neighborhoods = {}
    for z in range(height):
        for x in range(width):
            around: List[Coord] = [
                (x + dx, z + dz)
                for dz in (-1, 0, 1)
                for dx in (-1, 0, 1)
                if (dx or dz) and 0 <= x + dx < width and 0 <= z + dz < height
            ]
            table[(x, z)] = tuple(around)

    _NEIGHBORHOODS_CACHE[key] = table
    return table


def block_around(width: int, height: int, x: int, z: int) -> Tuple[Coord, ...]:
    """Return the in-bounds 3x3 block centered on (x, z), center included."""
    return ((x, z),) + get_neighborhoods(width, height)[(x, z)]
