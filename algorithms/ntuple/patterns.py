"""
N-tuple feature patterns.

Each pattern is a fixed 6-cell tuple. Reading its cells from a board as
base-15 digits (first cell most significant) gives an index into that
pattern's weight table.

Every pattern is read on the 8 symmetric variants of the board:
- s = 0..3: the board rotated clockwise s times
- s = 4..7: the horizontally reflected board rotated clockwise s - 4 times

Instead of building 8 transformed boards per evaluation, the symmetry is
folded into the pattern: SYMMETRIC_TUPLES[s][p] lists the cells of the
original board that pattern p reads on symmetry s.
"""

from typing import Iterator, List, Sequence, Tuple

from game.board import Board, CELL_COUNT, REFLECT_HORIZONTAL, ROTATE_RIGHT


TUPLE_BASE = 15
TUPLE_LENGTH = 6
TABLE_SIZE = TUPLE_BASE ** TUPLE_LENGTH

PATTERNS: Tuple[Tuple[int, ...], ...] = (
    (0, 1, 2, 3, 4, 5),
    (8, 9, 10, 11, 12, 13),
    (5, 6, 7, 9, 10, 11),
    (9, 10, 11, 13, 14, 15),
)

SYMMETRY_COUNT = 8

_PLACE_VALUES = tuple(TUPLE_BASE ** (TUPLE_LENGTH - 1 - k) for k in range(TUPLE_LENGTH))


def _symmetry_maps() -> Tuple[Tuple[int, ...], ...]:
    """Source cell of every transformed cell, for each symmetry.

    Built by applying the board's own rotate/reflect permutations to the
    identity labelling, so the maps cannot drift from Board.rotate().
    """
    maps = []
    labels = list(range(CELL_COUNT))
    for s in range(SYMMETRY_COUNT):
        maps.append(tuple(labels))
        labels = [labels[src] for src in ROTATE_RIGHT]
        if s == 3:
            labels = [labels[src] for src in REFLECT_HORIZONTAL]
    return tuple(maps)


SYMMETRY_MAPS = _symmetry_maps()


def check_pattern(pattern: Sequence[int]) -> None:
    if len(pattern) != TUPLE_LENGTH:
        raise ValueError(f"Pattern must have {TUPLE_LENGTH} cells, got {len(pattern)}")
    for cell in pattern:
        if not 0 <= cell < CELL_COUNT:
            raise ValueError(f"Pattern cell {cell} outside [0, {CELL_COUNT - 1}]")


def transform_pattern(pattern: Sequence[int], symmetry: int) -> Tuple[int, ...]:
    """Cells of the original board that `pattern` reads on `symmetry`."""
    mapping = SYMMETRY_MAPS[symmetry]
    return tuple(mapping[cell] for cell in pattern)


def symmetric_tuples(
    patterns: Sequence[Sequence[int]] = PATTERNS,
) -> Tuple[Tuple[Tuple[int, ...], ...], ...]:
    """All (symmetry, pattern) cell tuples, grouped by symmetry."""
    for pattern in patterns:
        check_pattern(pattern)
    return tuple(
        tuple(transform_pattern(pattern, s) for pattern in patterns)
        for s in range(SYMMETRY_COUNT)
    )


SYMMETRIC_TUPLES = symmetric_tuples(PATTERNS)


def feature_index(board: Board, pattern: Sequence[int]) -> int:
    """Base-15 index of the pattern's cells on the board.

    Raises:
        ValueError: If a cell holds an exponent that is not a base-15 digit
    """
    index = 0
    for cell in pattern:
        digit = board.cell(cell)
        if not 0 <= digit < TUPLE_BASE:
            raise ValueError(f"Exponent {digit} at cell {cell} is not a base-{TUPLE_BASE} digit")
        index = index * TUPLE_BASE + digit
    return index


def decode_index(index: int) -> List[int]:
    """Digits of a feature index, most significant first."""
    if not 0 <= index < TABLE_SIZE:
        raise ValueError(f"Feature index {index} outside [0, {TABLE_SIZE})")
    return [(index // place) % TUPLE_BASE for place in _PLACE_VALUES]


def symmetries(board: Board) -> Iterator[Board]:
    """Yield the 8 symmetric variants of a board, in symmetry order."""
    tmp = board.copy()
    for s in range(SYMMETRY_COUNT):
        yield tmp.copy()
        tmp.rotate(1)
        if s == 3:
            tmp.reflect_horizontal()
