"""Terminal play loop for generated guess-free boards."""

import logging
import sys
from typing import List, Optional

from .config import DIFFICULTY_LEVELS
from .generator import generate_guaranteed_solvable
from .grid import GameState, Grid
from .solver import Solver


def play_cli(grid: Grid, solver: Optional[Solver] = None) -> GameState:
    """
    Run a simple terminal UI for playing a grid.

    Commands: "x z" reveals a cell, "f x z" flags one, "h" lets the solver
    make one step, "q" quits.

    Args:
        grid: Grid with mines placed.
        solver: Solver used for hints; one is created when omitted.

    Returns:
        The grid's game state when the loop ends.
    """
    solver = solver or Solver(grid)

    print("Minesweeper CLI (x z | f x z | h | q). Coordinates are 0-based.\n")
    print(grid.format_board(reveal_all=False))

    while True:
        s = input("\nMove: ").strip().lower()
        if s in {"q", "quit", "exit"}:
            print("Quit.")
            return grid.game_state

        if s in {"h", "hint"}:
            progressed, terminal = solver.step()
            print(f"\nSolver {solver.state.phase.value}: {'progress' if progressed else 'no progress'}.\n")
            print(grid.format_board(reveal_all=False))
            if terminal is GameState.SOLVED:
                print("\nSolved without guessing.")
                return terminal
            if terminal is GameState.FAILED:
                print("\nThe solver cannot continue without a guess.")
                return terminal
            continue

        parts = s.replace(",", " ").split()
        flagging = bool(parts) and parts[0] == "f"
        if flagging:
            parts = parts[1:]

        if len(parts) != 2:
            print("Invalid input. Example: 3 5 or f 3 5")
            continue

        try:
            x = int(parts[0])
            z = int(parts[1])
        except ValueError:
            print("Invalid input. Coordinates must be integers.")
            continue

        if not grid.in_bounds(x, z):
            print(f"Invalid input. The grid is {grid.width}x{grid.height}.")
            continue

        if flagging:
            grid.flag(x, z)
            print(f"\nYou flagged ({x}, {z}).\n")
        else:
            grid.reveal(x, z)
            print(f"\nYou decided to reveal ({x}, {z}).\n")
        print(grid.format_board(reveal_all=False))

        if grid.game_state is GameState.FAILED:
            print("\nYou hit a mine. You lost.")
            print("\nFull board:")
            print(grid.format_board(reveal_all=True))
            return grid.game_state

        if all(c.is_open or c.mine for c in grid.iter_cells()):
            grid.game_state = GameState.SOLVED
            print("\nYou revealed all safe cells. You won!")
            return grid.game_state


def main(argv: Optional[List[str]] = None) -> None:
    """Generate a guess-free board for a difficulty level and play it."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    args = sys.argv[1:] if argv is None else argv
    level = args[0] if args else "beginner"
    if level not in DIFFICULTY_LEVELS:
        print(f"Unknown level {level!r}; choose from {', '.join(DIFFICULTY_LEVELS)}.")
        return

    width, height, mines = DIFFICULTY_LEVELS[level]
    start_x, start_z = width // 2, height // 2
    grid = generate_guaranteed_solvable(mines, width, height, start_x, start_z, time_limit=60)

    print(f"Start by revealing ({start_x}, {start_z}); the rest never needs a guess.")
    play_cli(grid)


if __name__ == "__main__":
    main()
