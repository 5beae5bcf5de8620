"""
4x4 board of tile exponents.

Cells are stored row-major (index = row * 4 + col). A cell holds the
exponent of its tile: 0 means empty, e means a tile of value 2**e.

Directions:
- 0: up
- 1: right
- 2: down
- 3: left

Slides are executed per line through the LEFT lookup tables in
game.lookup_tables; each direction only changes the order in which a
line's cells are read and written back.
"""

from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from game.lookup_tables import LEFT_ROWS, LEFT_SCORES, MAX_EXPONENT, encode_row


# Action constants
UP = 0
RIGHT = 1
DOWN = 2
LEFT = 3

DIRECTIONS = (UP, RIGHT, DOWN, LEFT)
DIRECTION_NAMES = ("up", "right", "down", "left")

# Returned by slide() when the board did not change
INVALID = -1

CELL_COUNT = 16


def _build_lines() -> Tuple[Tuple[Tuple[int, int, int, int], ...], ...]:
    """Cell indices of every line, ordered from the edge tiles slide toward."""
    up = tuple((c, c + 4, c + 8, c + 12) for c in range(4))
    right = tuple((4 * r + 3, 4 * r + 2, 4 * r + 1, 4 * r) for r in range(4))
    down = tuple((c + 12, c + 8, c + 4, c) for c in range(4))
    left = tuple((4 * r, 4 * r + 1, 4 * r + 2, 4 * r + 3) for r in range(4))
    return up, right, down, left


_LINES = _build_lines()

# new[i] = old[ROTATE_RIGHT[i]] for a 90 degree clockwise rotation
ROTATE_RIGHT = tuple(4 * (3 - (i % 4)) + (i // 4) for i in range(CELL_COUNT))
REFLECT_HORIZONTAL = tuple(4 * (i // 4) + 3 - (i % 4) for i in range(CELL_COUNT))


def _check_exponent(exponent: int) -> None:
    if not 0 <= exponent <= MAX_EXPONENT:
        raise ValueError(f"Tile exponent {exponent} outside [0, {MAX_EXPONENT}]")


def _check_cell(index: int) -> None:
    if not 0 <= index < CELL_COUNT:
        raise ValueError(f"Cell index {index} outside [0, {CELL_COUNT - 1}]")


def _check_direction(direction: int) -> None:
    if direction not in DIRECTIONS:
        raise ValueError(f"Invalid direction {direction}. Must be one of {DIRECTIONS}")


class Board:
    """A single 2048 board.

    The board is mutated only through slide(), rotate(),
    reflect_horizontal() and cell assignment; everything else reads it.

    Args:
        cells: Optional 16 exponents in row-major order (default: empty board)
    """

    __slots__ = ("_cells",)

    def __init__(self, cells: Optional[Iterable[int]] = None):
        if cells is None:
            self._cells: List[int] = [0] * CELL_COUNT
            return
        values = [int(v) for v in cells]
        if len(values) != CELL_COUNT:
            raise ValueError(f"Board needs {CELL_COUNT} cells, got {len(values)}")
        for value in values:
            _check_exponent(value)
        self._cells = values

    @classmethod
    def from_grid(cls, grid: Sequence[Sequence[int]]) -> "Board":
        """Create a board from a 4x4 grid of raw tile values (0, 2, 4, 8, ...).

        Raises:
            ValueError: If the grid is not 4x4 or holds a non power of two
        """
        if len(grid) != 4 or any(len(row) != 4 for row in grid):
            raise ValueError("Grid must be 4x4")
        cells = []
        for row in grid:
            for value in row:
                if value == 0:
                    cells.append(0)
                elif value > 1 and value & (value - 1) == 0:
                    cells.append(value.bit_length() - 1)
                else:
                    raise ValueError(f"Tile value {value} is not a power of two")
        return cls(cells)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def cell(self, index: int) -> int:
        """Exponent stored at a cell."""
        return self._cells[index]

    def __getitem__(self, index: int) -> int:
        _check_cell(index)
        return self._cells[index]

    def __setitem__(self, index: int, exponent: int) -> None:
        _check_cell(index)
        _check_exponent(exponent)
        self._cells[index] = exponent

    def __iter__(self) -> Iterator[int]:
        return iter(self._cells)

    def __len__(self) -> int:
        return CELL_COUNT

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._cells == other._cells

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"Board({self._cells})"

    def __str__(self) -> str:
        rows = []
        for r in range(4):
            row = self._cells[4 * r:4 * r + 4]
            rows.append(" ".join(f"{(1 << e) if e else 0:>6}" for e in row))
        return "\n".join(rows)

    @property
    def cells(self) -> Tuple[int, ...]:
        return tuple(self._cells)

    def copy(self) -> "Board":
        clone = Board.__new__(Board)
        clone._cells = list(self._cells)
        return clone

    def grid(self) -> List[List[int]]:
        """Board as a 4x4 grid of raw tile values."""
        return [
            [(1 << e) if e else 0 for e in self._cells[4 * r:4 * r + 4]]
            for r in range(4)
        ]

    def max_exponent(self) -> int:
        return max(self._cells)

    def empty_cells(self) -> List[int]:
        return [i for i, e in enumerate(self._cells) if e == 0]

    def score_value(self) -> int:
        """Sum of the raw tile values on the board."""
        return sum((1 << e) for e in self._cells if e)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def slide(self, direction: int) -> int:
        """Slide all tiles toward one edge.

        Args:
            direction: 0 (up), 1 (right), 2 (down) or 3 (left)

        Returns:
            Merge reward (sum of merged tile values), or INVALID if the
            board did not change. An invalid slide leaves the board untouched.
        """
        _check_direction(direction)
        cells = self._cells
        result = list(cells)
        reward = 0
        changed = False
        for a, b, c, d in _LINES[direction]:
            code = encode_row(cells[a], cells[b], cells[c], cells[d])
            row = LEFT_ROWS[code]
            if row != (cells[a], cells[b], cells[c], cells[d]):
                changed = True
                result[a], result[b], result[c], result[d] = row
                reward += LEFT_SCORES[code]
        if not changed:
            return INVALID
        self._cells = result
        return reward

    def rotate(self, times: int = 1) -> None:
        """Rotate clockwise by 90 degrees `times` times (negative: anticlockwise)."""
        for _ in range(times % 4):
            cells = self._cells
            self._cells = [cells[src] for src in ROTATE_RIGHT]

    def rotate_right(self) -> None:
        self.rotate(1)

    def rotate_left(self) -> None:
        self.rotate(-1)

    def reflect_horizontal(self) -> None:
        """Mirror every row (column c <-> column 3 - c)."""
        cells = self._cells
        self._cells = [cells[src] for src in REFLECT_HORIZONTAL]

    # ------------------------------------------------------------------
    # Queries built on slide()
    # ------------------------------------------------------------------

    def can_slide(self, direction: int) -> bool:
        return self.copy().slide(direction) != INVALID

    def valid_moves(self) -> List[int]:
        return [op for op in DIRECTIONS if self.can_slide(op)]

    def has_valid_move(self) -> bool:
        return any(self.can_slide(op) for op in DIRECTIONS)
