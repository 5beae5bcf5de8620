"""
Symmetry-averaged n-tuple value function.

V(b) = sum over 8 symmetries s and 4 patterns p of W_p[index(s(b), p)]

The 32 (symmetry, pattern) indices of a board are exposed so that the
learner can update exactly the entries that produced an evaluation.
"""

from typing import Sequence, Tuple

from algorithms.ntuple.patterns import (
    PATTERNS,
    SYMMETRY_COUNT,
    TUPLE_BASE,
    feature_index,
    symmetric_tuples,
)
from algorithms.ntuple.weights import WeightStore
from game.board import Board


# indices[s][p]: feature index of pattern p on symmetry s
FeatureIndices = Tuple[Tuple[int, ...], ...]


class ValueFunction:
    """Afterstate value function over shared weight tables.

    Evaluation is a pure read of the weight store.

    Args:
        weights: Weight store with one table per pattern
        patterns: 6-cell tuples (default: PATTERNS)
    """

    def __init__(self, weights: WeightStore, patterns: Sequence[Sequence[int]] = PATTERNS):
        if weights.table_count != len(patterns):
            raise ValueError(
                f"Weight store has {weights.table_count} tables for {len(patterns)} patterns"
            )
        for p, pattern in enumerate(patterns):
            needed = TUPLE_BASE ** len(pattern)
            if weights.table_size(p) < needed:
                raise ValueError(
                    f"Table {p} has {weights.table_size(p)} entries, pattern needs {needed}"
                )
        self.weights = weights
        self.patterns = tuple(tuple(p) for p in patterns)
        self._tuples = symmetric_tuples(self.patterns)

    @property
    def entries_per_state(self) -> int:
        return SYMMETRY_COUNT * len(self.patterns)

    def feature_indices(self, board: Board) -> FeatureIndices:
        """Feature indices grouped as 8 symmetries x len(patterns)."""
        return tuple(
            tuple(feature_index(board, cells) for cells in group)
            for group in self._tuples
        )

    def _by_pattern(self, indices: FeatureIndices):
        if len(indices) != SYMMETRY_COUNT or any(len(group) != len(self.patterns) for group in indices):
            raise ValueError(
                f"Expected {SYMMETRY_COUNT} x {len(self.patterns)} feature indices"
            )
        for p in range(len(self.patterns)):
            yield p, [group[p] for group in indices]

    def value_of_indices(self, indices: FeatureIndices) -> float:
        """Sum of the weights addressed by precomputed feature indices."""
        total = 0.0
        for p, column in self._by_pattern(indices):
            total += self.weights.gather(p, column).double().sum().item()
        return total

    def evaluate(self, board: Board) -> float:
        return self.value_of_indices(self.feature_indices(board))

    def accumulate(self, pattern: int, index: int, delta: float) -> None:
        self.weights.accumulate(pattern, [index], delta)

    def reset(self, pattern: int, index: int) -> None:
        self.weights.reset(pattern, [index])

    def update_entries(self, indices: FeatureIndices, delta: float) -> None:
        """Add `delta` to every one of the 32 entries (repeats add again)."""
        for p, column in self._by_pattern(indices):
            self.weights.accumulate(p, column, delta)

    def reset_entries(self, indices: FeatureIndices) -> None:
        for p, column in self._by_pattern(indices):
            self.weights.reset(p, column)
