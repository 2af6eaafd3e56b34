"""
Exhaustive frontier solver.

When single-point deduction stalls, the closed cells next to numbered cells
are split into independent components and every mine/safe assignment of each
component that satisfies all visible hints is enumerated. The components are
then combined under the remaining mine count. Cells that are a mine in every
surviving assignment get flagged, cells that are safe in every one get
revealed, everything else is left for later.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional, Sequence, Set, Tuple

from .config import BORDER_OPTIMIZATION_THRESHOLD
from .grid import GameState, Grid
from .utils import Coord

logger = logging.getLogger(__name__)

Solution = Tuple[bool, ...]


@dataclass
class Frontier:
    """
    Result of segregation.

    `components` are the border cells split by shared hints. `interior` holds
    the closed cells no hint touches; it is only filled when border
    optimization is off, since only then does the exact mine count reach it.
    """

    components: List[List[Coord]]
    border_optimization: bool
    interior: List[Coord] = field(default_factory=list)

    @property
    def size(self) -> int:
        return sum(len(c) for c in self.components) + len(self.interior)


@dataclass
class _Constraint:
    hint: int
    flagged: int
    members: List[int]  # component indexes of the closed neighbors
    outside: int  # closed neighbors that are not part of the component


def numbered_neighbors(grid: Grid, x: int, z: int) -> List[Coord]:
    """Return the open numbered cells around (x, z): the hints constraining it."""
    return [(n.x, n.z) for n in grid.neighbor_cells(x, z) if n.is_open and n.hint > 0]


def closed_cells(grid: Grid) -> List[Coord]:
    return [(c.x, c.z) for c in grid.iter_cells() if c.is_closed]


def border_cells(grid: Grid) -> List[Coord]:
    """Closed cells adjacent to at least one open numbered cell, row-major."""
    return [
        (c.x, c.z)
        for c in grid.iter_cells()
        if c.is_closed and numbered_neighbors(grid, c.x, c.z)
    ]


def remaining_mines(grid: Grid) -> int:
    """Mines not yet accounted for by flags."""
    return grid.mine_count - grid.flagged_count()


def segregate(
    grid: Grid, threshold: int = BORDER_OPTIMIZATION_THRESHOLD
) -> Frontier:
    """
    Split the border into components and decide whether the interior counts.

    Border cells are partitioned by breadth first traversal: two cells are
    connected when one open numbered cell touches both. If more than
    `threshold` closed cells lie off the border, border optimization is on
    and those cells are ignored. Otherwise they are returned as the interior
    pool, to be reasoned about through the exact mine count.

    Args:
        grid: Grid to inspect.
        threshold: Maximum number of off-border closed cells for which the
            exact mine count is still enforced.

    Returns:
        The border components, the mode, and the interior pool.
    """
    border = border_cells(grid)
    on_border = set(border)
    interior = [cell for cell in closed_cells(grid) if cell not in on_border]
    border_optimization = len(interior) > threshold

    constraints_of: Dict[Coord, List[Coord]] = {
        cell: numbered_neighbors(grid, *cell) for cell in border
    }
    members_of: Dict[Coord, List[Coord]] = {}
    for cell, constraints in constraints_of.items():
        for constraint in constraints:
            members_of.setdefault(constraint, []).append(cell)

    components: List[List[Coord]] = []
    seen: Set[Coord] = set()
    for start in border:
        if start in seen:
            continue

        seen.add(start)
        queue: Deque[Coord] = deque([start])
        component: List[Coord] = []
        while queue:
            cell = queue.popleft()
            component.append(cell)
            for constraint in constraints_of[cell]:
                for other in members_of[constraint]:
                    if other not in seen:
                        seen.add(other)
                        queue.append(other)

        components.append(component)

    return Frontier(components, border_optimization, [] if border_optimization else interior)


def _build_constraints(
    grid: Grid, component: Sequence[Coord], index: Dict[Coord, int]
) -> List[List[_Constraint]]:
    """For every candidate, the hints that must be rechecked once it is assigned."""
    by_position: Dict[Coord, _Constraint] = {}
    per_candidate: List[List[_Constraint]] = []

    for x, z in component:
        touching: List[_Constraint] = []
        for cx, cz in numbered_neighbors(grid, x, z):
            constraint = by_position.get((cx, cz))
            if constraint is None:
                constraint = _Constraint(grid.cell(cx, cz).hint, 0, [], 0)
                for n in grid.neighbor_cells(cx, cz):
                    if n.is_flagged:
                        constraint.flagged += 1
                    elif n.is_closed:
                        i = index.get((n.x, n.z))
                        if i is None:
                            constraint.outside += 1
                        else:
                            constraint.members.append(i)
                by_position[(cx, cz)] = constraint
            touching.append(constraint)
        per_candidate.append(touching)

    return per_candidate


def enumerate_component(grid: Grid, component: Sequence[Coord]) -> List[Solution]:
    """
    Enumerate every assignment of one component that its hints allow.

    Candidates are assigned in order, mine first then safe, on an explicit
    stack. After each assignment the hints touching the assigned cell are
    checked: known mines (flags plus hypotheses) may not exceed a hint, and
    known mines plus undetermined closed cells must still be able to reach
    it. Known mines may never exceed the mines left after flags; the exact
    count is applied later, across components, by `combine_components`.

    Args:
        grid: Grid holding the visible hints and flags.
        component: Closed candidate cells, in assignment order.

    Returns:
        One tuple per consistent assignment; entry i is True when
        component[i] is a mine in that assignment.
    """
    n = len(component)
    index = {cell: i for i, cell in enumerate(component)}
    constraints = _build_constraints(grid, component, index)

    known_mine = [False] * n
    known_safe = [False] * n
    budget = remaining_mines(grid)
    mines_assigned = 0

    def consistent(depth: int) -> bool:
        if mines_assigned > budget:
            return False

        for constraint in constraints[depth]:
            mines = constraint.flagged
            undetermined = constraint.outside
            for i in constraint.members:
                if known_mine[i]:
                    mines += 1
                elif not known_safe[i]:
                    undetermined += 1
            if mines > constraint.hint or mines + undetermined < constraint.hint:
                return False
        return True

    solutions: List[Solution] = []
    tried: List[Optional[bool]] = [None] * n
    depth = 0
    while depth >= 0:
        if depth == n:
            solutions.append(tuple(known_mine))
            depth -= 1
            continue

        if tried[depth] is None:
            tried[depth] = True
            known_mine[depth] = True
            mines_assigned += 1
        elif tried[depth]:
            tried[depth] = False
            known_mine[depth] = False
            mines_assigned -= 1
            known_safe[depth] = True
        else:
            tried[depth] = None
            known_safe[depth] = False
            depth -= 1
            continue

        if consistent(depth):
            depth += 1

    return solutions


def _add_counts(totals: Set[int], counts: Set[int], cap: int) -> Set[int]:
    return {t + c for t in totals for c in counts if t + c <= cap}


def combine_components(
    solutions: Sequence[Sequence[Solution]],
    budget: int,
    interior_size: Optional[int] = None,
) -> Tuple[List[List[Solution]], Set[int]]:
    """
    Keep the component layouts that fit the remaining mine count together.

    Components only meet through the mine count, so each is summarized by
    the set of mine counts its layouts use. A layout survives if the other
    components, plus 0..interior_size mines in the interior pool, can make
    up exactly `budget`. With interior_size None (border optimization) the
    total only has to stay within `budget`.

    Args:
        solutions: Per component, the layouts from `enumerate_component`.
        budget: Mines left after flags.
        interior_size: Size of the interior pool, or None to ignore it.

    Returns:
        The surviving layouts per component, and the mine counts the
        interior pool can still hold (empty when there is no pool).
    """
    counts = [{sum(s) for s in layouts} for layouts in solutions]
    pool = set(range(interior_size + 1)) if interior_size is not None else {0}

    # prefix[i]: totals reachable by components before i; suffix[i]: from i on.
    prefix = [{0}]
    for c in counts:
        prefix.append(_add_counts(prefix[-1], c, budget))
    suffix = [{0}]
    for c in reversed(counts):
        suffix.append(_add_counts(suffix[-1], c, budget))
    suffix.reverse()

    kept: List[List[Solution]] = []
    for i, layouts in enumerate(solutions):
        others = _add_counts(_add_counts(prefix[i], suffix[i + 1], budget), pool, budget)
        if interior_size is None:
            lowest = min(others, default=None)
            kept.append(
                [s for s in layouts if lowest is not None and sum(s) + lowest <= budget]
            )
        else:
            kept.append([s for s in layouts if budget - sum(s) in others])

    if interior_size is None:
        return kept, set()
    return kept, {j for j in pool if budget - j in prefix[-1]}


def resolve_component(
    grid: Grid, component: Sequence[Coord], solutions: Sequence[Solution]
) -> bool:
    """
    Flag cells that are mines in every solution, reveal cells safe in every one.

    An empty solution list means the visible hints contradict each other; it
    is logged and nothing is resolved.

    Returns:
        True if at least one cell was flagged or revealed.
    """
    if not solutions:
        logger.warning(
            "No consistent assignment for a component of %d cells; leaving it closed.",
            len(component),
        )
        return False

    changed = False
    for i, (x, z) in enumerate(component):
        if not grid.cell(x, z).is_closed:
            continue
        if all(s[i] for s in solutions):
            changed |= grid.flag(x, z)
        elif not any(s[i] for s in solutions):
            grid.reveal(x, z)
            changed = True
    return changed


def resolve_interior(grid: Grid, interior: Sequence[Coord], mine_counts: Set[int]) -> bool:
    """Flag the whole pool if it must be all mines, reveal it if it must be empty."""
    if not interior or len(mine_counts) != 1:
        return False

    all_mines = mine_counts == {len(interior)}
    if not all_mines and mine_counts != {0}:
        return False

    changed = False
    for x, z in interior:
        if not grid.cell(x, z).is_closed:
            continue
        if all_mines:
            changed |= grid.flag(x, z)
        else:
            grid.reveal(x, z)
            changed = True
    return changed


def backtrack(grid: Grid, threshold: int = BORDER_OPTIMIZATION_THRESHOLD) -> bool:
    """
    Run one full backtracking attempt across every frontier component.

    Returns:
        True if any cell was flagged or revealed.
    """
    frontier = segregate(grid, threshold)
    logger.debug(
        "Backtracking over %d components and %d interior cells, border optimization %s",
        len(frontier.components),
        len(frontier.interior),
        "on" if frontier.border_optimization else "off",
    )

    enumerated = []
    for component in frontier.components:
        solutions = enumerate_component(grid, component)
        logger.debug(
            "Component of %d cells has %d solutions", len(component), len(solutions)
        )
        if not solutions:
            return resolve_component(grid, component, solutions)
        enumerated.append(solutions)

    interior_size = None if frontier.border_optimization else len(frontier.interior)
    kept, interior_counts = combine_components(
        enumerated, remaining_mines(grid), interior_size
    )

    progressed = False
    for component, solutions in zip(frontier.components, kept):
        if resolve_component(grid, component, solutions):
            progressed = True
        if grid.game_state is GameState.FAILED:
            return progressed

    if resolve_interior(grid, frontier.interior, interior_counts):
        progressed = True
    return progressed
