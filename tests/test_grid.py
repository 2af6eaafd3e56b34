import random

import pytest

from noguess import GameState, Grid, RevealState, create_grid, flag, place_random_mines, reveal


def test_create_grid_is_empty_and_pre_game():
    grid = create_grid(4, 5, 3)

    assert grid.width == 5
    assert grid.height == 3
    assert grid.mine_count == 4
    assert grid.game_state is GameState.PRE_GAME
    assert not grid.mines_placed
    assert all(c.is_closed and not c.mine and c.hint == 0 for c in grid.iter_cells())
    assert [(c.x, c.z) for c in grid.cells[1]] == [(x, 1) for x in range(5)]


@pytest.mark.parametrize("mines, width, height", [(10, 3, 3), (-1, 3, 3), (0, 0, 3), (0, 3, -2)])
def test_create_grid_rejects_invalid_sizes(mines, width, height):
    with pytest.raises(ValueError):
        create_grid(mines, width, height)


def test_in_bounds():
    grid = create_grid(0, 4, 2)

    assert grid.in_bounds(0, 0)
    assert grid.in_bounds(3, 1)
    assert not grid.in_bounds(4, 0)
    assert not grid.in_bounds(0, 2)
    assert not grid.in_bounds(-1, 1)


def test_out_of_bounds_reveal_and_flag_raise():
    grid = create_grid(0, 3, 3)

    with pytest.raises(ValueError):
        grid.reveal(3, 0)
    with pytest.raises(ValueError):
        grid.flag(0, -1)


def test_zero_cascade_stops_at_numbered_ring(mine_wall):
    opened = reveal(mine_wall, 0, 0)

    assert mine_wall.game_state is GameState.PLAYING
    assert sorted((x, z) for x, z, _ in opened) == [(x, z) for x in (0, 1) for z in range(3)]
    assert all(mine_wall.cell(x, z).is_closed for x in (2, 3, 4) for z in range(3))

    # Every opened zero has only open neighbors; every opened number touches an opened zero.
    for x, z, hint in opened:
        around = list(mine_wall.neighbor_cells(x, z))
        if hint == 0:
            assert all(n.is_open for n in around)
        else:
            assert any(n.is_open and n.hint == 0 for n in around)


def test_cascade_covers_large_zero_region_without_recursion():
    grid = create_grid(1, 300, 300)
    grid.place_mines([(299, 299)])

    opened = grid.reveal(0, 0)

    assert len(opened) == 300 * 300 - 1
    assert grid.cell(299, 299).is_closed


def test_reveal_is_idempotent(mine_wall):
    reveal(mine_wall, 0, 1)
    before = [c.reveal_state for c in mine_wall.iter_cells()]

    assert reveal(mine_wall, 0, 1) == []
    assert reveal(mine_wall, 1, 1) == []
    assert [c.reveal_state for c in mine_wall.iter_cells()] == before


def test_reveal_of_flagged_cell_is_noop(mine_wall):
    assert flag(mine_wall, 3, 1)

    assert reveal(mine_wall, 3, 1) == []
    assert mine_wall.cell(3, 1).is_flagged


def test_flag_only_changes_closed_cells(mine_wall):
    reveal(mine_wall, 0, 0)

    assert not flag(mine_wall, 0, 0)
    assert mine_wall.cell(0, 0).is_open
    assert flag(mine_wall, 2, 0)
    assert not flag(mine_wall, 2, 0)
    assert mine_wall.flagged_count() == 1


def test_revealing_a_mine_fails_without_mutation(mine_wall):
    opened = reveal(mine_wall, 2, 1)

    assert opened == []
    assert mine_wall.game_state is GameState.FAILED
    assert all(c.is_closed for c in mine_wall.iter_cells())


def test_hints_match_neighbor_mines():
    grid = create_grid(20, 12, 9)
    place_random_mines(grid, 6, 4, rng=random.Random(3))

    assert len(grid.mine_positions()) == 20
    for cell in grid.iter_cells():
        assert cell.hint == sum(1 for n in grid.neighbor_cells(cell.x, cell.z) if n.mine)


def test_place_mines_only_once():
    grid = create_grid(1, 3, 3)
    grid.place_mines([(0, 0)])

    with pytest.raises(ValueError):
        grid.place_mines([(1, 1)])


def test_place_mines_requires_exact_count():
    grid = create_grid(2, 3, 3)

    with pytest.raises(ValueError):
        grid.place_mines([(0, 0), (0, 0)])


def test_from_text_reads_layout(one_two_one):
    assert one_two_one.width == 3
    assert one_two_one.height == 3
    assert one_two_one.mine_count == 2
    assert one_two_one.mine_positions() == {(0, 0), (2, 0)}
    assert one_two_one.cell(1, 1).hint == 2
    assert one_two_one.game_state is GameState.PRE_GAME
    assert all(c.reveal_state is RevealState.CLOSED for c in one_two_one.iter_cells())


def test_to_text_matches_from_text(two_corners):
    text = two_corners.to_text()

    assert text.splitlines()[0] == "0 0 1 M 1"
    assert Grid.from_text(text).mine_positions() == two_corners.mine_positions()


@pytest.mark.parametrize(
    "text",
    [
        "M 1\n1 2",  # wrong hint
        "M 1\n1",  # ragged rows
        "M x\n1 1",  # unknown token
        "   \n ",  # empty
    ],
)
def test_from_text_rejects_bad_fixtures(text):
    with pytest.raises(ValueError):
        Grid.from_text(text)


def test_reset_reveal_states_keeps_layout(two_corners):
    two_corners.reveal(0, 0)
    two_corners.flag(3, 0)

    two_corners.reset_reveal_states()

    assert two_corners.game_state is GameState.PRE_GAME
    assert all(c.is_closed for c in two_corners.iter_cells())
    assert two_corners.mine_positions() == {(3, 0), (0, 3)}
    assert two_corners.cell(2, 0).hint == 1


def test_clear_wipes_layout(two_corners):
    two_corners.reveal(0, 0)

    two_corners.clear()

    assert two_corners.game_state is GameState.PRE_GAME
    assert not two_corners.mines_placed
    assert all(c.is_closed and not c.mine and c.hint == 0 for c in two_corners.iter_cells())


def test_format_board_hides_closed_cells(one_two_one):
    one_two_one.reveal(0, 2)
    one_two_one.flag(0, 0)

    lines = one_two_one.format_board(color=False).splitlines()
    full = one_two_one.format_board(reveal_all=True, color=False).splitlines()

    assert lines[2] == " 0 | F  .  ."
    assert lines[3] == " 1 | 1  2  1"
    assert full[2] == " 0 | F  2  M"
