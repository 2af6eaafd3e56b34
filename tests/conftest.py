import os

os.environ.setdefault("MPLBACKEND", "Agg")

import random
from typing import Callable, Tuple

import pytest

from noguess import Grid, create_grid, deduction_pass, place_random_mines

# Three closed cells on top of a 1-2-1 row: single-point deduction stalls,
# enumeration finds the only layout.
ONE_TWO_ONE = """
M 2 M
1 2 1
0 0 0
"""

# A column of mines splits the board into two zero regions.
MINE_WALL = """
0 2 M 2 0
0 3 M 3 0
0 2 M 2 0
"""

# Solvable from (0, 0) by deduction alone.
TWO_CORNERS = """
0 0 1 M 1
0 0 1 1 1
1 1 0 0 0
M 1 0 0 0
"""


@pytest.fixture
def one_two_one() -> Grid:
    return Grid.from_text(ONE_TWO_ONE)


@pytest.fixture
def mine_wall() -> Grid:
    return Grid.from_text(MINE_WALL)


@pytest.fixture
def two_corners() -> Grid:
    return Grid.from_text(TWO_CORNERS)


@pytest.fixture
def random_board() -> Callable[..., Grid]:
    """Factory for seeded random boards with the start cell already opened."""

    def build(
        seed: int,
        width: int = 6,
        height: int = 6,
        mines: int = 5,
        start: Tuple[int, int] = (2, 2),
    ) -> Grid:
        grid = create_grid(mines, width, height)
        place_random_mines(grid, *start, rng=random.Random(seed))
        grid.reveal(*start)
        return grid

    return build


@pytest.fixture
def deduce_to_fixpoint() -> Callable[[Grid], int]:
    def run(grid: Grid) -> int:
        sweeps = 0
        while deduction_pass(grid):
            sweeps += 1
        return sweeps

    return run
