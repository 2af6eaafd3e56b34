"""Solve orchestrator: alternates deduction and backtracking without guessing."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .backtracking import backtrack
from .config import BORDER_OPTIMIZATION_THRESHOLD
from .deduction import deduction_pass
from .grid import GameState, Grid, terminal_state

logger = logging.getLogger(__name__)


class Phase(Enum):
    DEDUCING = "deducing"
    BACKTRACKING = "backtracking"


@dataclass
class SolveState:
    """
    Progress record threaded through successive `solve_step` calls.

    Attributes:
        phase: Which action the next step performs.
        made_progress: Whether the last step flagged or revealed anything.
        retries: Number of backtracking attempts made so far.
        tried_backtracking: Whether backtracking already ran since the last
            productive step.
    """

    phase: Phase = Phase.DEDUCING
    made_progress: bool = False
    retries: int = 0
    tried_backtracking: bool = False


StepResult = Tuple[bool, Optional[GameState], SolveState]


def is_solved(grid: Grid) -> bool:
    """True iff exactly mine_count cells are flagged and no safe cell is closed."""
    if grid.flagged_count() != grid.mine_count:
        return False
    return not any(c.is_closed and not c.mine for c in grid.iter_cells())


def _finish(grid: Grid) -> GameState:
    grid.game_state = GameState.SOLVED if is_solved(grid) else GameState.FAILED
    return grid.game_state


def solve_step(
    grid: Grid,
    state: Optional[SolveState] = None,
    threshold: int = BORDER_OPTIMIZATION_THRESHOLD,
) -> StepResult:
    """
    Advance the solver by exactly one action: a deduction sweep or one full
    backtracking attempt.

    Deduction runs until it stops making progress, then backtracking gets one
    try. Productive backtracking hands control back to deduction; fruitless
    backtracking ends the solve with SOLVED if the grid is complete, FAILED
    (cannot continue without guessing) otherwise.

    Args:
        grid: Grid to work on; mutated in place.
        state: Record returned by the previous call, or None to start fresh.
        threshold: Border optimization threshold passed to backtracking.

    Returns:
        Tuple of (progressed, terminal_state, state) where terminal_state is
        SOLVED or FAILED once the solve has ended and None while it continues.
    """
    if state is None:
        state = SolveState()

    done = terminal_state(grid)
    if done is not None:
        state.made_progress = False
        return False, done, state

    if state.phase is Phase.DEDUCING:
        progressed = deduction_pass(grid)
        if not progressed:
            state.phase = Phase.BACKTRACKING
    else:
        progressed = backtrack(grid, threshold)
        state.retries += 1
        state.tried_backtracking = True
        if progressed:
            state.phase = Phase.DEDUCING
        else:
            state.made_progress = False
            finished = _finish(grid)
            logger.debug("Solve ended %s after %d backtracking attempts", finished.name, state.retries)
            return False, finished, state

    state.made_progress = progressed
    if progressed:
        state.tried_backtracking = False

    if grid.game_state is GameState.FAILED:
        return progressed, GameState.FAILED, state
    if progressed and is_solved(grid):
        grid.game_state = GameState.SOLVED
        return True, GameState.SOLVED, state
    return progressed, None, state


def solve(grid: Grid, threshold: int = BORDER_OPTIMIZATION_THRESHOLD) -> GameState:
    """Drive `solve_step` until the grid reaches SOLVED or FAILED."""
    return Solver(grid, threshold).solve()


class Solver:
    """
    Stepwise no-guess solver bound to one grid.

    Wraps `solve_step` with its state record and keeps counters describing
    how much work each kind of inference did.
    """

    def __init__(
        self, grid: Grid, threshold: int = BORDER_OPTIMIZATION_THRESHOLD
    ) -> None:
        self.grid = grid
        self.threshold = threshold
        self.state = SolveState()

        self.steps: int = 0
        self.deduction_sweeps: int = 0
        self.backtracking_attempts: int = 0

    def step(self) -> Tuple[bool, Optional[GameState]]:
        """Advance one action; returns (progressed, terminal_state)."""
        if terminal_state(self.grid) is None:
            self.steps += 1
            if self.state.phase is Phase.DEDUCING:
                self.deduction_sweeps += 1
            else:
                self.backtracking_attempts += 1

        progressed, terminal, self.state = solve_step(self.grid, self.state, self.threshold)
        return progressed, terminal

    def solve(self) -> GameState:
        """Step until the grid is SOLVED or FAILED and return that state."""
        while True:
            _, terminal = self.step()
            if terminal is not None:
                return terminal
