"""
No-guess Minesweeper

A Minesweeper solving agent and board generator that never guesses:
- Deduction: single-point inference from each numbered cell
- Backtracking: exhaustive enumeration over independent frontier components
- Orchestration: stepwise alternation of the two until the board is done
- Generation: reject-and-retry layouts until one is solvable from the start cell
"""

from .grid import Cell, GameState, Grid, RevealState, create_grid, flag, reveal
from .deduction import deduction_pass
from .backtracking import (
    Frontier,
    backtrack,
    combine_components,
    enumerate_component,
    resolve_component,
    segregate,
)
from .solver import Phase, SolveState, Solver, is_solved, solve, solve_step
from .generator import (
    GenerationBudgetExceeded,
    GenerationReport,
    GenerationStrategy,
    generate_board,
    generate_guaranteed_solvable,
    place_random_mines,
)
from .analysis import (
    run_generator_single_test,
    run_generator_many_tests,
    run_generator_density_analysis,
    run_generator_level_analysis,
)

__version__ = "1.0.0"

__all__ = [
    # Grid model
    "Cell",
    "GameState",
    "Grid",
    "RevealState",
    "create_grid",
    "reveal",
    "flag",
    # Inference
    "deduction_pass",
    "Frontier",
    "segregate",
    "enumerate_component",
    "combine_components",
    "resolve_component",
    "backtrack",
    # Orchestration
    "Phase",
    "SolveState",
    "Solver",
    "solve_step",
    "solve",
    "is_solved",
    # Generation
    "GenerationStrategy",
    "GenerationReport",
    "GenerationBudgetExceeded",
    "place_random_mines",
    "generate_board",
    "generate_guaranteed_solvable",
    # Analysis functions
    "run_generator_single_test",
    "run_generator_many_tests",
    "run_generator_density_analysis",
    "run_generator_level_analysis",
]
