import logging
import random

import pytest

from noguess import (
    GameState,
    GenerationBudgetExceeded,
    GenerationStrategy,
    create_grid,
    generate_board,
    generate_guaranteed_solvable,
    place_random_mines,
    solve,
)
from noguess.utils import block_around


def ambiguous_grid():
    # Five mines on a 5x2 board leave a single safe cell outside the start
    # block, and no layout lets the solver tell which one it is.
    return create_grid(5, 5, 2)


@pytest.mark.parametrize("seed", range(4))
def test_no_guess_board_is_solvable_from_the_start(seed):
    grid = create_grid(3, 5, 5)

    report = generate_board(grid, 2, 2, max_attempts=1000, rng=random.Random(seed))

    assert report.attempts >= 1
    assert report.deduction_sweeps >= 1
    assert grid.game_state is GameState.PRE_GAME
    assert all(c.is_closed for c in grid.iter_cells())
    assert len(grid.mine_positions()) == 3
    assert not grid.mine_positions() & set(block_around(5, 5, 2, 2))
    for cell in grid.iter_cells():
        assert cell.hint == sum(1 for n in grid.neighbor_cells(cell.x, cell.z) if n.mine)

    grid.reveal(2, 2)
    assert solve(grid) is GameState.SOLVED


def test_generate_guaranteed_solvable_returns_fresh_grid():
    grid = generate_guaranteed_solvable(4, 6, 6, 3, 3, max_attempts=1000, rng=random.Random(11))

    assert (grid.width, grid.height, grid.mine_count) == (6, 6, 4)
    assert grid.mines_placed
    assert grid.game_state is GameState.PRE_GAME


def test_default_strategy_only_protects_the_start():
    grid = create_grid(8, 3, 3)

    report = generate_board(grid, 1, 1, GenerationStrategy.DEFAULT)

    assert report.attempts == 1
    assert not grid.cell(1, 1).mine
    assert grid.cell(1, 1).hint == 8
    assert grid.game_state is GameState.PRE_GAME


def test_exclude_start_fills_only_the_ring():
    grid = create_grid(16, 5, 5)

    generate_board(grid, 2, 2, GenerationStrategy.EXCLUDE_START, rng=random.Random(0))

    ring = {(x, z) for z in range(5) for x in range(5)} - set(block_around(5, 5, 2, 2))
    assert grid.mine_positions() == ring


def test_strategy_accepts_its_string_value():
    grid = create_grid(2, 4, 4)

    generate_board(grid, 0, 0, "safe_first_action_rule", rng=random.Random(5))

    assert len(grid.mine_positions()) == 2
    assert (0, 0) not in grid.mine_positions()


def test_exclusion_zone_must_leave_room_for_mines():
    with pytest.raises(ValueError):
        generate_board(create_grid(1, 3, 3), 1, 1, GenerationStrategy.EXCLUDE_START)


def test_out_of_bounds_start_is_rejected():
    with pytest.raises(ValueError):
        place_random_mines(create_grid(1, 3, 3), 3, 0)


def test_unknown_strategy_lists_valid_values():
    with pytest.raises(ValueError, match="no_guess_rule"):
        generate_board(create_grid(1, 4, 4), 0, 0, "lucky_guess_rule")


def test_grid_with_mines_is_rejected():
    grid = create_grid(1, 4, 4)
    grid.place_mines([(3, 3)])

    with pytest.raises(ValueError):
        generate_board(grid, 0, 0)


def test_attempt_budget_must_be_positive():
    with pytest.raises(ValueError):
        generate_board(create_grid(1, 4, 4), 0, 0, max_attempts=0)


def test_attempt_budget_is_enforced(caplog):
    grid = ambiguous_grid()

    with caplog.at_level(logging.DEBUG, logger="noguess.generator"):
        with pytest.raises(GenerationBudgetExceeded) as info:
            generate_board(grid, 0, 0, max_attempts=3, rng=random.Random(2))

    assert info.value.attempts == 3
    assert info.value.elapsed_ms >= 0
    assert caplog.text.count("needs a guess") == 3
    assert not grid.mines_placed
    assert grid.game_state is GameState.PRE_GAME


def test_time_budget_still_runs_one_attempt():
    with pytest.raises(GenerationBudgetExceeded) as info:
        generate_board(ambiguous_grid(), 0, 0, time_limit=0.0, rng=random.Random(2))

    assert info.value.attempts == 1
    assert isinstance(info.value, RuntimeError)


def test_success_is_logged(caplog):
    with caplog.at_level(logging.INFO, logger="noguess.generator"):
        generate_guaranteed_solvable(1, 4, 4, 0, 0, max_attempts=100, rng=random.Random(1))

    assert "Found guess-free 4x4 board with 1 mines" in caplog.text
