"""Grid model: cell state, cascading reveal, flagging and text interchange."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Set, Tuple

from .config import CELL_DELIMITER, MINE_SENTINEL, ROW_DELIMITER
from .utils import Coord, get_neighborhoods


class RevealState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    FLAGGED = "flagged"


class GameState(Enum):
    PRE_GAME = "pre_game"
    PLAYING = "playing"
    SOLVED = "solved"
    FAILED = "failed"


TERMINAL_STATES = (GameState.SOLVED, GameState.FAILED)


@dataclass
class Cell:
    """One square of the grid. `hint` is only meaningful for non-mine cells."""

    x: int
    z: int
    hint: int = 0
    mine: bool = False
    reveal_state: RevealState = RevealState.CLOSED

    @property
    def is_closed(self) -> bool:
        return self.reveal_state is RevealState.CLOSED

    @property
    def is_open(self) -> bool:
        return self.reveal_state is RevealState.OPEN

    @property
    def is_flagged(self) -> bool:
        return self.reveal_state is RevealState.FLAGGED


class Grid:
    """Fixed-size Minesweeper grid addressed by (x, z), x being the column."""

    def __init__(self, mine_count: int, width: int, height: int) -> None:
        """
        Create an empty grid: every cell closed, no mines placed, PRE_GAME.

        Args:
            mine_count: Number of mines the grid will hold, 0 <= mine_count <= width * height.
            width: Number of columns, must be > 0.
            height: Number of rows, must be > 0.

        Raises:
            ValueError: If the dimensions or the mine count are invalid.
        """
        if width <= 0 or height <= 0:
            raise ValueError("Width and height must be positive.")
        if mine_count < 0:
            raise ValueError("mine_count must be non-negative.")
        if mine_count > width * height:
            raise ValueError("mine_count cannot exceed the number of cells.")

        self.width: int = width
        self.height: int = height
        self.mine_count: int = mine_count
        self.game_state: GameState = GameState.PRE_GAME
        self.mines_placed: bool = False

        self.cells: List[List[Cell]] = [
            [Cell(x, z) for x in range(width)] for z in range(height)
        ]
        self._neighborhoods = get_neighborhoods(width, height)

    def __repr__(self) -> str:
        return (
            f"Grid(width={self.width}, height={self.height}, "
            f"mine_count={self.mine_count}, game_state={self.game_state.name})"
        )

    # -------------------------------------------------------------------------
    # Geometry and queries
    # -------------------------------------------------------------------------

    def in_bounds(self, x: int, z: int) -> bool:
        return 0 <= x < self.width and 0 <= z < self.height

    def _check_bounds(self, x: int, z: int) -> None:
        if not self.in_bounds(x, z):
            raise ValueError(f"Cell ({x}, {z}) is outside the grid.")

    def cell(self, x: int, z: int) -> Cell:
        return self.cells[z][x]

    def neighbors(self, x: int, z: int) -> Tuple[Coord, ...]:
        """Return precomputed in-bounds 8-neighbors of (x, z)."""
        return self._neighborhoods[(x, z)]

    def neighbor_cells(self, x: int, z: int) -> Iterator[Cell]:
        for nx, nz in self._neighborhoods[(x, z)]:
            yield self.cells[nz][nx]

    def iter_cells(self) -> Iterator[Cell]:
        """Yield every cell row by row."""
        for row in self.cells:
            yield from row

    def count_neighbors(self, x: int, z: int, state: RevealState) -> int:
        return sum(1 for c in self.neighbor_cells(x, z) if c.reveal_state is state)

    def flagged_count(self) -> int:
        return sum(1 for c in self.iter_cells() if c.is_flagged)

    def mine_positions(self) -> Set[Coord]:
        return {(c.x, c.z) for c in self.iter_cells() if c.mine}

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def place_mines(self, positions: Iterable[Coord]) -> None:
        """
        Place mines once and compute every cell's hint from the final layout.

        Raises:
            ValueError: If mines are already placed, a position is out of
                bounds, or the number of distinct positions differs from
                mine_count.
        """
        if self.mines_placed:
            raise ValueError("Mines are already placed on this grid.")

        mines: Set[Coord] = set(positions)
        if len(mines) != self.mine_count:
            raise ValueError(
                f"Expected {self.mine_count} mine positions, got {len(mines)}."
            )
        for x, z in mines:
            self._check_bounds(x, z)
            self.cells[z][x].mine = True

        for cell in self.iter_cells():
            cell.hint = sum(1 for n in self.neighbor_cells(cell.x, cell.z) if n.mine)

        self.mines_placed = True

    def reveal(self, x: int, z: int) -> List[Tuple[int, int, int]]:
        """
        Open a cell, flooding outward from zero hints.

        The first call moves the grid from PRE_GAME to PLAYING. Non-closed
        cells are left alone. Revealing a mine fails the game and leaves
        every cell untouched.

        Args:
            x: Column of the cell.
            z: Row of the cell.

        Returns:
            Newly opened cells as (x, z, hint), in opening order.

        Raises:
            ValueError: If (x, z) is outside the grid.
        """
        self._check_bounds(x, z)

        if self.game_state is GameState.PRE_GAME:
            self.game_state = GameState.PLAYING

        target = self.cells[z][x]
        if not target.is_closed:
            return []

        if target.mine:
            self.game_state = GameState.FAILED
            return []

        opened: List[Tuple[int, int, int]] = []
        stack: List[Cell] = [target]
        while stack:
            cell = stack.pop()
            if not cell.is_closed:
                continue

            cell.reveal_state = RevealState.OPEN
            opened.append((cell.x, cell.z, cell.hint))

            if cell.hint == 0:
                stack.extend(n for n in self.neighbor_cells(cell.x, cell.z) if n.is_closed)

        return opened

    def flag(self, x: int, z: int) -> bool:
        """
        Mark a closed cell as a mine.

        Returns:
            True if the cell changed from CLOSED to FLAGGED.

        Raises:
            ValueError: If (x, z) is outside the grid.
        """
        self._check_bounds(x, z)
        cell = self.cells[z][x]
        if not cell.is_closed:
            return False
        cell.reveal_state = RevealState.FLAGGED
        return True

    def reset_reveal_states(self) -> None:
        """Close every cell and return to PRE_GAME, keeping mines and hints."""
        for cell in self.iter_cells():
            cell.reveal_state = RevealState.CLOSED
        self.game_state = GameState.PRE_GAME

    def clear(self) -> None:
        """Wipe mines, hints and reveal states so the grid can be regenerated."""
        for cell in self.iter_cells():
            cell.mine = False
            cell.hint = 0
            cell.reveal_state = RevealState.CLOSED
        self.mines_placed = False
        self.game_state = GameState.PRE_GAME

    # -------------------------------------------------------------------------
    # Text interchange
    # -------------------------------------------------------------------------

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        row_delimiter: str = ROW_DELIMITER,
        cell_delimiter: str = CELL_DELIMITER,
        mine_sentinel: str = MINE_SENTINEL,
    ) -> "Grid":
        """
        Build a fully labeled grid (all cells closed, PRE_GAME) from text.

        Each row holds one token per cell: a hint digit or the mine sentinel.
        The mine count is taken from the layout and every digit is checked
        against the hint the layout implies.

        Raises:
            ValueError: On empty input, ragged rows, unknown tokens, or a digit
                that disagrees with the surrounding mines.
        """
        rows = [r.split(cell_delimiter) for r in text.strip().split(row_delimiter)]
        rows = [[t for t in r if t] for r in rows]
        rows = [r for r in rows if r]
        if not rows:
            raise ValueError("Grid text is empty.")

        width = len(rows[0])
        if any(len(r) != width for r in rows):
            raise ValueError("All grid rows must have the same number of cells.")

        mines: List[Coord] = []
        given: List[Tuple[int, int, int]] = []
        for z, row in enumerate(rows):
            for x, token in enumerate(row):
                if token == mine_sentinel:
                    mines.append((x, z))
                elif token.isdigit() and len(token) == 1:
                    given.append((x, z, int(token)))
                else:
                    raise ValueError(f"Unrecognized cell token {token!r} at ({x}, {z}).")

        grid = cls(len(mines), width, len(rows))
        grid.place_mines(mines)

        for x, z, hint in given:
            if grid.cells[z][x].hint != hint:
                raise ValueError(
                    f"Hint {hint} at ({x}, {z}) does not match the "
                    f"{grid.cells[z][x].hint} surrounding mines."
                )
        return grid

    def to_text(
        self,
        *,
        row_delimiter: str = ROW_DELIMITER,
        cell_delimiter: str = CELL_DELIMITER,
        mine_sentinel: str = MINE_SENTINEL,
    ) -> str:
        """Serialize the ground-truth layout in the `from_text` format."""
        return row_delimiter.join(
            cell_delimiter.join(mine_sentinel if c.mine else str(c.hint) for c in row)
            for row in self.cells
        )

    # -------------------------------------------------------------------------
    # Display methods
    # -------------------------------------------------------------------------

    _ANSI_RESET = "\033[0m"
    _ANSI_COORD = "\033[96m"
    _ANSI_MINE = "\033[91m"
    _ANSI_FLAG = "\033[93m"

    def _c(self, s: str) -> str:
        """Wrap string in coordinate color."""
        return f"{self._ANSI_COORD}{s}{self._ANSI_RESET}"

    def _m(self, s: str) -> str:
        """Wrap string in mine color (red)."""
        return f"{self._ANSI_MINE}{s}{self._ANSI_RESET}"

    def _f(self, s: str) -> str:
        return f"{self._ANSI_FLAG}{s}{self._ANSI_RESET}"

    def format_board(self, reveal_all: bool = False, color: bool = True) -> str:
        """
        Render the grid as a multi-line string for terminal display.

        Closed cells show '.', flags 'F', open cells their hint. With
        reveal_all, mines show 'M' and closed safe cells their hint.

        Args:
            reveal_all: If True, show the underlying layout.
            color: If False, emit plain text without ANSI escapes.

        Returns:
            The board with x labels across the top and z labels down the side.
        """
        paint = (lambda f, s: f(s)) if color else (lambda f, s: s)

        def cell_str(cell: Cell) -> str:
            if cell.is_flagged:
                return paint(self._f, "F")
            if reveal_all or cell.is_open:
                return paint(self._m, "M") if cell.mine else str(cell.hint)
            return "."

        header_cells = " ".join(f"{x:2d}" for x in range(self.width))
        out = [paint(self._c, "   " + header_cells)]
        out.append(paint(self._c, "   " + "-" * (3 * self.width - 1)))

        for z, row in enumerate(self.cells):
            row_cells = " ".join(f" {cell_str(cell)}" for cell in row)
            out.append(paint(self._c, f"{z:2d} |") + row_cells)

        return "\n".join(out)

    def print_board(self) -> None:
        """Print the visible grid state to stdout."""
        print(self.format_board(reveal_all=False))

    def print_full_board(self) -> None:
        """Print the underlying layout to stdout (for debugging)."""
        print(self.format_board(reveal_all=True))


def create_grid(mine_count: int, width: int, height: int) -> Grid:
    """Return an empty PRE_GAME grid with every cell closed and no mines."""
    return Grid(mine_count, width, height)


def reveal(grid: Grid, x: int, z: int) -> List[Tuple[int, int, int]]:
    return grid.reveal(x, z)


def flag(grid: Grid, x: int, z: int) -> bool:
    return grid.flag(x, z)


def terminal_state(grid: Grid) -> Optional[GameState]:
    """Return the grid's state if it is SOLVED or FAILED, else None."""
    return grid.game_state if grid.game_state in TERMINAL_STATES else None
