"""Single-point deduction: local inference from one numbered cell at a time."""

from typing import List

from .grid import GameState, Grid, RevealState
from .utils import Coord


def deduce_around(grid: Grid, x: int, z: int) -> bool:
    """
    Apply the two single-cell rules to the open numbered cell at (x, z).

    1. If the hint equals flagged + closed neighbors, every closed neighbor
       is a mine and gets flagged.
    2. If the hint equals the (recounted) flagged neighbors, every remaining
       closed neighbor is safe and gets revealed.

    Returns:
        True if at least one neighbor was flagged or revealed.
    """
    hint = grid.cell(x, z).hint
    closed: List[Coord] = [
        (n.x, n.z) for n in grid.neighbor_cells(x, z) if n.is_closed
    ]
    if not closed:
        return False

    changed = False
    flagged_n = grid.count_neighbors(x, z, RevealState.FLAGGED)

    if hint == flagged_n + len(closed):
        for nx, nz in closed:
            changed |= grid.flag(nx, nz)
        flagged_n = grid.count_neighbors(x, z, RevealState.FLAGGED)

    if hint == flagged_n:
        for nx, nz in closed:
            if grid.cell(nx, nz).is_closed:
                grid.reveal(nx, nz)
                changed = True

    return changed


def deduction_pass(grid: Grid) -> bool:
    """
    Sweep every open numbered cell once, applying `deduce_around`.

    Only local information is used; the global mine count is never consulted.
    The sweep stops early if a reveal hits a mine, which can only happen on a
    grid whose flags were not placed by sound inference.

    Returns:
        True if the sweep flagged or revealed anything.
    """
    progressed = False
    for z in range(grid.height):
        for x in range(grid.width):
            cell = grid.cells[z][x]
            if not cell.is_open or cell.hint == 0:
                continue
            if deduce_around(grid, x, z):
                progressed = True
                if grid.game_state is GameState.FAILED:
                    return True
    return progressed
