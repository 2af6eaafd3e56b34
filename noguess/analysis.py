"""Benchmarking tools for guess-free board generation."""

import random
from typing import Dict, List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np

from .config import DIFFICULTY_LEVELS
from .generator import GenerationBudgetExceeded, generate_board
from .grid import create_grid


def run_generator_single_test(
    width: int,
    height: int,
    mine_count: int,
    *,
    start: Optional[Tuple[int, int]] = None,
    show_boards: bool = False,
    max_attempts: Optional[int] = None,
    time_limit: Optional[float] = None,
    rng: Optional[random.Random] = None,
) -> Dict[str, float]:
    """
    Generate one guess-free board and report what it cost.

    Args:
        width: Board width.
        height: Board height.
        mine_count: Total number of mines on the board.
        start: First cell to open; the board center when omitted.
        show_boards: If True, print the accepted layout.
        max_attempts: Attempt budget passed to the generator.
        time_limit: Time budget in seconds passed to the generator.
        rng: Random source for reproducible runs.

    Returns:
        Dict with "attempts", "elapsed_ms", "deduction_sweeps",
        "backtracking_attempts" and "success" (1.0, or 0.0 when the budget ran
        out, in which case the other values describe the abandoned search).
    """
    start_x, start_z = start if start is not None else (width // 2, height // 2)
    grid = create_grid(mine_count, width, height)

    try:
        report = generate_board(
            grid, start_x, start_z, max_attempts=max_attempts, time_limit=time_limit, rng=rng
        )
    except GenerationBudgetExceeded as exc:
        return {
            "attempts": float(exc.attempts),
            "elapsed_ms": exc.elapsed_ms,
            "deduction_sweeps": 0.0,
            "backtracking_attempts": 0.0,
            "success": 0.0,
        }

    if show_boards:
        print(f"Accepted layout ({width}x{height}, {mine_count} mines, start {start_x},{start_z}):")
        print(grid.format_board(reveal_all=True))
        print(f"\nFound after {report.attempts} attempts in {report.elapsed_ms:.0f} ms.")

    return {
        "attempts": float(report.attempts),
        "elapsed_ms": report.elapsed_ms,
        "deduction_sweeps": float(report.deduction_sweeps),
        "backtracking_attempts": float(report.backtracking_attempts),
        "success": 1.0,
    }


def run_generator_many_tests(
    width: int,
    height: int,
    mine_count: int,
    runs: int,
    *,
    max_attempts: Optional[int] = None,
    time_limit: Optional[float] = None,
    seed: Optional[int] = None,
) -> Dict[str, float]:
    """
    Generate many independent guess-free boards and summarize the cost.

    Args:
        width: Board width.
        height: Board height.
        mine_count: Total number of mines on the board.
        runs: Number of boards to generate, must be positive.
        max_attempts: Per-board attempt budget.
        time_limit: Per-board time budget in seconds.
        seed: Seed for a shared random source, for reproducible summaries.

    Returns:
        Averages of the single-test values (prefixed with "avg_"), plus
        median_attempts, p90_attempts, worst_attempts, median_elapsed_ms
        and success_rate.
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    rng = random.Random(seed)
    results = [
        run_generator_single_test(
            width, height, mine_count, max_attempts=max_attempts, time_limit=time_limit, rng=rng
        )
        for _ in range(runs)
    ]

    attempts = np.array([r["attempts"] for r in results])
    elapsed = np.array([r["elapsed_ms"] for r in results])
    success = np.array([r["success"] for r in results])

    out: Dict[str, float] = {
        f"avg_{k}": float(np.mean([r[k] for r in results]))
        for k in ("attempts", "elapsed_ms", "deduction_sweeps", "backtracking_attempts")
    }
    out["median_attempts"] = float(np.median(attempts))
    out["p90_attempts"] = float(np.percentile(attempts, 90))
    out["worst_attempts"] = float(attempts.max())
    out["median_elapsed_ms"] = float(np.median(elapsed))
    out["success_rate"] = float(success.mean())
    return out


def run_generator_density_analysis(
    width: int,
    height: int,
    densities: Sequence[float],
    runs: int,
    *,
    max_attempts: Optional[int] = 500,
    seed: Optional[int] = None,
    show: bool = True,
) -> Dict[float, Dict[str, float]]:
    """
    Measure generation cost across mine densities and plot the trend.

    Args:
        width: Board width.
        height: Board height.
        densities: Mine fractions of the board area to test, e.g. (0.1, 0.15).
        runs: Boards generated per density.
        max_attempts: Per-board attempt budget, keeps dense settings bounded.
        seed: Seed for reproducible summaries.
        show: If True, draw the plots with matplotlib.

    Returns:
        Mapping from density to the summary returned by run_generator_many_tests().
    """
    results: Dict[float, Dict[str, float]] = {}
    for density in densities:
        mines = int(round(density * width * height))
        results[density] = run_generator_many_tests(
            width, height, mines, runs, max_attempts=max_attempts, seed=seed
        )

    if not show:
        return results

    x = np.array(list(results.keys()))

    # 1) Attempts per accepted board
    plt.figure()  # type: ignore[misc]
    plt.plot(x, [results[d]["avg_attempts"] for d in results], marker="o", label="mean")  # type: ignore[misc]
    plt.plot(x, [results[d]["p90_attempts"] for d in results], marker="s", label="p90")  # type: ignore[misc]
    plt.xlabel("Mine density")  # type: ignore[misc]
    plt.ylabel("Attempts per board")  # type: ignore[misc]
    plt.title(f"Generation attempts ({width}x{height})")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    # 2) Time and success rate
    fig, ax_time = plt.subplots()  # type: ignore[misc]
    ax_time.plot(x, [results[d]["avg_elapsed_ms"] for d in results], marker="o", color="tab:blue")
    ax_time.set_xlabel("Mine density")
    ax_time.set_ylabel("Average time per board (ms)", color="tab:blue")
    ax_rate = ax_time.twinx()
    ax_rate.plot(x, [results[d]["success_rate"] for d in results], marker="s", color="tab:red")
    ax_rate.set_ylabel("Success rate within budget", color="tab:red")
    ax_rate.set_ylim(0.0, 1.05)
    fig.tight_layout()
    plt.show()  # type: ignore[misc]

    return results


def run_generator_level_analysis(
    runs: int,
    *,
    max_attempts: Optional[int] = 500,
    seed: Optional[int] = None,
    show: bool = True,
) -> Dict[str, Dict[str, float]]:
    """
    Summarize generation cost on the standard difficulty levels.

    Standard difficulty levels:
        - Beginner: 9x9, 10 mines
        - Intermediate: 16x16, 40 mines
        - Expert: 30x16, 99 mines
    """
    results: Dict[str, Dict[str, float]] = {}
    for level, (w, h, m) in DIFFICULTY_LEVELS.items():
        results[level] = run_generator_many_tests(
            w, h, m, runs, max_attempts=max_attempts, seed=seed
        )

    if not show:
        return results

    level_names: List[str] = list(results.keys())
    x = np.arange(len(level_names))
    bar_w = 0.35

    plt.figure()  # type: ignore[misc]
    plt.bar(x - bar_w / 2, [results[n]["avg_attempts"] for n in level_names], width=bar_w, label="mean")  # type: ignore[misc]
    plt.bar(x + bar_w / 2, [results[n]["p90_attempts"] for n in level_names], width=bar_w, label="p90")  # type: ignore[misc]
    plt.xticks(x, level_names)  # type: ignore[misc]
    plt.ylabel("Attempts per board")  # type: ignore[misc]
    plt.title("Guess-free generation attempts by level")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    return results
