"""
Central constants for the solver, the generator and the text interchange.

Runtime knobs (attempt budgets, random sources, strategies) are keyword
arguments of the functions that use them; only fixed values live here.
"""

from typing import Dict, Tuple

# Closed cells outside the border above this count switch the backtracking
# solver to border-only candidates without the exact mine-count constraint.
BORDER_OPTIMIZATION_THRESHOLD = 8

# Text interchange
ROW_DELIMITER = "\n"
CELL_DELIMITER = " "
MINE_SENTINEL = "M"

# Standard difficulty presets: name -> (width, height, mines)
DIFFICULTY_LEVELS: Dict[str, Tuple[int, int, int]] = {
    "beginner": (9, 9, 10),
    "intermediate": (16, 16, 40),
    "expert": (30, 16, 99),
}
