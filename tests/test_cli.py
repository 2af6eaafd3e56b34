import pytest

from noguess import GameState
from noguess.cli import main, play_cli


@pytest.fixture
def feed(monkeypatch):
    def _feed(*moves):
        it = iter(moves)
        monkeypatch.setattr("builtins.input", lambda prompt="": next(it))

    return _feed


def test_solver_hints_finish_the_board(one_two_one, feed, capsys):
    feed("0 2", "h", "h")

    assert play_cli(one_two_one) is GameState.SOLVED
    assert "Solved without guessing." in capsys.readouterr().out


def test_revealing_every_safe_cell_wins(two_corners, feed, capsys):
    feed("0 0", "4 0")

    assert play_cli(two_corners) is GameState.SOLVED
    assert "You won!" in capsys.readouterr().out


def test_hitting_a_mine_loses(two_corners, feed, capsys):
    feed("3 0")

    assert play_cli(two_corners) is GameState.FAILED
    assert "You lost." in capsys.readouterr().out


def test_bad_input_is_reported_and_flags_apply(one_two_one, feed, capsys):
    feed("9 9", "a b", "1", "f 0 0", "q")

    assert play_cli(one_two_one) is GameState.PRE_GAME
    assert one_two_one.cell(0, 0).is_flagged

    out = capsys.readouterr().out
    assert "The grid is 3x3." in out
    assert "Coordinates must be integers." in out
    assert "Example: 3 5 or f 3 5" in out


def test_main_rejects_unknown_level(capsys):
    main(["impossible"])

    assert "Unknown level 'impossible'" in capsys.readouterr().out
