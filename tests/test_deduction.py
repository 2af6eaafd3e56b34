import pytest

from noguess import GameState, Grid, deduction_pass
from noguess.deduction import deduce_around

CORNER_MINE = """
0 0 0
0 1 1
0 1 M
"""


def test_single_closed_neighbor_of_a_one_is_flagged():
    grid = Grid.from_text(CORNER_MINE)
    grid.reveal(0, 0)

    # Every cell but the mine is open after the cascade.
    assert [(c.x, c.z) for c in grid.iter_cells() if c.is_closed] == [(2, 2)]

    assert deduction_pass(grid)
    assert grid.cell(2, 2).is_flagged
    assert grid.game_state is GameState.PLAYING
    assert not deduction_pass(grid)


def test_satisfied_hint_reveals_remaining_neighbors():
    grid = Grid.from_text("1 1\n1 M")
    grid.reveal(0, 0)
    assert not deduction_pass(grid)

    grid.flag(1, 1)

    assert deduce_around(grid, 0, 0)
    assert grid.cell(1, 0).is_open
    assert grid.cell(0, 1).is_open


def test_stalls_without_enough_local_information(one_two_one):
    one_two_one.reveal(0, 2)

    assert not deduction_pass(one_two_one)
    assert sum(1 for c in one_two_one.iter_cells() if c.is_closed) == 3


def test_deduction_finishes_two_corners(two_corners):
    two_corners.reveal(0, 0)

    assert deduction_pass(two_corners)
    assert {(c.x, c.z) for c in two_corners.iter_cells() if c.is_flagged} == {(3, 0), (0, 3)}
    assert two_corners.cell(4, 0).is_open


@pytest.mark.parametrize("seed", range(12))
def test_deduction_never_flags_a_safe_cell(seed, random_board, deduce_to_fixpoint):
    grid = random_board(seed, width=9, height=9, mines=10, start=(4, 4))

    deduce_to_fixpoint(grid)

    assert grid.game_state is not GameState.FAILED
    for cell in grid.iter_cells():
        if cell.is_flagged:
            assert cell.mine
        if cell.is_open:
            assert not cell.mine
