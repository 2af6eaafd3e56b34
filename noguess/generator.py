"""Mine placement strategies, including generation of boards that never need a guess."""

import logging
import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Set, Union

from .grid import GameState, Grid, create_grid
from .solver import Solver
from .utils import Coord, block_around

logger = logging.getLogger(__name__)


class GenerationStrategy(str, Enum):
    """
    Closed set of board generation policies.

    DEFAULT keeps only the start cell free of mines, EXCLUDE_START keeps the
    whole 3x3 block around it free, NO_GUESS repeats EXCLUDE_START until the
    solver can finish the board from the start cell without guessing.
    """

    DEFAULT = "safe_first_action_rule"
    EXCLUDE_START = "safe_neighborhood_rule"
    NO_GUESS = "no_guess_rule"


class GenerationBudgetExceeded(RuntimeError):
    """The no-guess retry loop ran out of attempts or time."""

    def __init__(self, attempts: int, elapsed_ms: float) -> None:
        super().__init__(
            f"No guess-free board found after {attempts} attempts ({elapsed_ms:.0f} ms)."
        )
        self.attempts = attempts
        self.elapsed_ms = elapsed_ms


@dataclass
class GenerationReport:
    """How much work producing one board took."""

    attempts: int
    elapsed_ms: float
    deduction_sweeps: int = 0
    backtracking_attempts: int = 0


def _safe_zone(grid: Grid, strategy: GenerationStrategy, x: int, z: int) -> Set[Coord]:
    if strategy is GenerationStrategy.DEFAULT:
        return {(x, z)}
    return set(block_around(grid.width, grid.height, x, z))


def place_random_mines(
    grid: Grid,
    start_x: int,
    start_z: int,
    strategy: GenerationStrategy = GenerationStrategy.EXCLUDE_START,
    rng: Optional[random.Random] = None,
) -> None:
    """
    Place grid.mine_count mines uniformly at random outside the safe zone.

    Mines are drawn without replacement from the eligible cells, which gives
    the same distribution as rejecting draws that land in the safe zone.

    Raises:
        ValueError: If the start is out of bounds or the safe zone leaves too
            few cells for the requested mines.
    """
    if not grid.in_bounds(start_x, start_z):
        raise ValueError(f"Start cell ({start_x}, {start_z}) is outside the grid.")

    safe = _safe_zone(grid, strategy, start_x, start_z)
    eligible: List[Coord] = [
        (x, z)
        for z in range(grid.height)
        for x in range(grid.width)
        if (x, z) not in safe
    ]
    if grid.mine_count > len(eligible):
        raise ValueError(
            f"Cannot place {grid.mine_count} mines outside a safe zone of "
            f"{len(safe)} cells on a {grid.width}x{grid.height} grid."
        )

    source = rng if rng is not None else random
    grid.place_mines(source.sample(eligible, grid.mine_count))


def _generate_default(
    grid: Grid, start_x: int, start_z: int, *, rng: Optional[random.Random] = None, **_
) -> GenerationReport:
    began = time.perf_counter()
    place_random_mines(grid, start_x, start_z, GenerationStrategy.DEFAULT, rng)
    return GenerationReport(1, (time.perf_counter() - began) * 1000)


def _generate_exclude_start(
    grid: Grid, start_x: int, start_z: int, *, rng: Optional[random.Random] = None, **_
) -> GenerationReport:
    began = time.perf_counter()
    place_random_mines(grid, start_x, start_z, GenerationStrategy.EXCLUDE_START, rng)
    return GenerationReport(1, (time.perf_counter() - began) * 1000)


def _generate_no_guess(
    grid: Grid,
    start_x: int,
    start_z: int,
    *,
    rng: Optional[random.Random] = None,
    max_attempts: Optional[int] = None,
    time_limit: Optional[float] = None,
) -> GenerationReport:
    """
    Place, open the start cell, solve; keep the layout only if solving succeeds.

    On success every cell is closed again and the grid is back in PRE_GAME
    with its mines and hints kept. Failed layouts are wiped before the next
    attempt.
    """
    began = time.perf_counter()
    attempts = 0
    sweeps = 0
    backtracks = 0

    while True:
        elapsed_ms = (time.perf_counter() - began) * 1000
        if max_attempts is not None and attempts >= max_attempts:
            raise GenerationBudgetExceeded(attempts, elapsed_ms)
        if time_limit is not None and attempts and elapsed_ms >= time_limit * 1000:
            raise GenerationBudgetExceeded(attempts, elapsed_ms)

        attempts += 1
        place_random_mines(grid, start_x, start_z, GenerationStrategy.EXCLUDE_START, rng)
        grid.reveal(start_x, start_z)

        solver = Solver(grid)
        outcome = solver.solve()
        sweeps += solver.deduction_sweeps
        backtracks += solver.backtracking_attempts

        if outcome is GameState.SOLVED:
            break

        logger.debug("Attempt %d needs a guess, trying another board.", attempts)
        grid.clear()

    grid.reset_reveal_states()
    elapsed_ms = (time.perf_counter() - began) * 1000
    logger.info(
        "Found guess-free %dx%d board with %d mines in %.0f ms after %d attempts",
        grid.width,
        grid.height,
        grid.mine_count,
        elapsed_ms,
        attempts,
    )
    return GenerationReport(attempts, elapsed_ms, sweeps, backtracks)


_STRATEGIES: Dict[GenerationStrategy, Callable[..., GenerationReport]] = {
    GenerationStrategy.DEFAULT: _generate_default,
    GenerationStrategy.EXCLUDE_START: _generate_exclude_start,
    GenerationStrategy.NO_GUESS: _generate_no_guess,
}


def generate_board(
    grid: Grid,
    start_x: int,
    start_z: int,
    strategy: Union[GenerationStrategy, str] = GenerationStrategy.NO_GUESS,
    *,
    max_attempts: Optional[int] = None,
    time_limit: Optional[float] = None,
    rng: Optional[random.Random] = None,
) -> GenerationReport:
    """
    Fill an empty grid with mines according to a generation strategy.

    Args:
        grid: Grid without mines; its mine_count is the number placed.
        start_x: Column of the cell the player will open first.
        start_z: Row of the cell the player will open first.
        strategy: A GenerationStrategy or its string value.
        max_attempts: NO_GUESS only; give up after this many layouts.
        time_limit: NO_GUESS only; give up after this many seconds (checked
            between attempts, so at least one attempt always runs).
        rng: Random source; the random module is used when omitted.

    Returns:
        A GenerationReport with attempt count, elapsed time and solver effort.

    Raises:
        ValueError: If the strategy is unknown, the grid already holds mines,
            or the mines do not fit outside the safe zone.
        GenerationBudgetExceeded: If a NO_GUESS budget runs out.
    """
    try:
        strategy = GenerationStrategy(strategy)
    except ValueError:
        raise ValueError(
            "strategy must be one of "
            + ", ".join(f'"{s.value}"' for s in GenerationStrategy)
            + "."
        ) from None

    if grid.mines_placed:
        raise ValueError("The grid already holds mines.")
    if max_attempts is not None and max_attempts <= 0:
        raise ValueError("max_attempts must be positive.")

    return _STRATEGIES[strategy](
        grid, start_x, start_z, rng=rng, max_attempts=max_attempts, time_limit=time_limit
    )


def generate_guaranteed_solvable(
    mine_count: int,
    width: int,
    height: int,
    start_x: int,
    start_z: int,
    *,
    max_attempts: Optional[int] = None,
    time_limit: Optional[float] = None,
    rng: Optional[random.Random] = None,
) -> Grid:
    """
    Return a PRE_GAME grid that the solver finishes from (start_x, start_z).

    Without max_attempts or time_limit this may loop for a very long time on
    dense configurations.
    """
    grid = create_grid(mine_count, width, height)
    generate_board(
        grid,
        start_x,
        start_z,
        GenerationStrategy.NO_GUESS,
        max_attempts=max_attempts,
        time_limit=time_limit,
        rng=rng,
    )
    return grid
