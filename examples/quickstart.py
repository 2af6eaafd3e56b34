"""
Quickstart example for the no-guess Minesweeper generator.

This script demonstrates basic usage of the generator and the solver.
"""

import logging
import random

from noguess import (
    GameState,
    Solver,
    generate_guaranteed_solvable,
    run_generator_many_tests,
)
from noguess.config import DIFFICULTY_LEVELS


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("No-guess Minesweeper - Quickstart Example")
    print("=" * 60)

    # Example 1: Generate a single board
    print("\n1. Generating an Intermediate board (16x16, 40 mines)...")
    print("-" * 60)

    grid = generate_guaranteed_solvable(40, 16, 16, 8, 8, time_limit=30, rng=random.Random(42))
    print(grid.format_board(reveal_all=True))

    # Example 2: Replay the solver from the start cell
    print("\n2. Solving it from (8, 8) without guessing...")
    print("-" * 60)

    grid.reveal(8, 8)
    solver = Solver(grid)
    result = solver.solve()

    print(f"Result: {'SOLVED' if result is GameState.SOLVED else result.name}")
    print(f"Solver steps: {solver.steps}")
    print(f"Deduction sweeps: {solver.deduction_sweeps}")
    print(f"Backtracking attempts: {solver.backtracking_attempts}")
    print(grid.format_board())

    # Example 3: Generation cost by difficulty level
    print("\n3. Generation cost by difficulty level (10 boards each)...")
    print("-" * 60)

    for name, (w, h, m) in DIFFICULTY_LEVELS.items():
        logging.getLogger("noguess").setLevel(logging.WARNING)
        results = run_generator_many_tests(w, h, m, runs=10, max_attempts=500, seed=0)
        print(
            f"{name:15s} ({w}x{h}, {m:2d} mines): "
            f"{results['avg_attempts']:6.1f} attempts, "
            f"{results['avg_elapsed_ms']:8.1f} ms, "
            f"{results['success_rate']*100:5.1f}% within budget"
        )

    print("\n" + "=" * 60)
    print("Done!")
    print("=" * 60)


if __name__ == "__main__":
    main()
