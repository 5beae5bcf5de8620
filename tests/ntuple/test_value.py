"""
Tests for the symmetry-summed value function.
"""

import pytest
import torch

from algorithms.ntuple.patterns import PATTERNS, feature_index
from algorithms.ntuple.value import ValueFunction
from algorithms.ntuple.weights import WeightStore
from game.board import Board


def _board() -> Board:
    board = Board()
    board[0] = 1
    board[1] = 2
    board[6] = 3
    board[15] = 5
    return board


class TestEvaluate:
    """Evaluation reads the 32 addressed entries."""

    def test_zero_weights(self, value_function):
        assert value_function.evaluate(_board()) == 0.0

    def test_entries_per_state(self, value_function):
        assert value_function.entries_per_state == 32

    def test_sum_of_32_entries(self, weights, value_function):
        """Every table filled with 1.0: any board evaluates to 32."""
        for table in weights.tables:
            table.fill_(1.0)
        assert value_function.evaluate(_board()) == pytest.approx(32.0)

    def test_empty_board_reads_index_zero(self, weights, value_function):
        weights.accumulate(1, [0], 0.5)
        # All 8 symmetries of pattern 1 read index 0 on an empty board
        assert value_function.evaluate(Board()) == pytest.approx(4.0)

    def test_single_entry(self, weights, value_function):
        board = _board()
        index = feature_index(board, PATTERNS[0])
        weights.accumulate(0, [index], 2.0)
        indices = value_function.feature_indices(board)
        hits = sum(1 for group in indices if group[0] == index)
        assert value_function.evaluate(board) == pytest.approx(2.0 * hits)

    def test_evaluate_does_not_modify(self, weights, value_function):
        weights.tables[3][:100] = torch.linspace(-1, 1, 100)
        before = [t.clone() for t in weights.tables]
        value_function.evaluate(_board())
        assert all(torch.equal(a, b) for a, b in zip(before, weights.tables))

    def test_symmetric_boards_evaluate_equal(self, weights, value_function):
        generator = torch.Generator().manual_seed(0)
        for table in weights.tables:
            table.copy_(torch.rand(table.numel(), generator=generator))

        board = _board()
        rotated = board.copy()
        rotated.rotate_right()
        reflected = board.copy()
        reflected.reflect_horizontal()

        value = value_function.evaluate(board)
        assert value_function.evaluate(rotated) == pytest.approx(value, rel=1e-6)
        assert value_function.evaluate(reflected) == pytest.approx(value, rel=1e-6)


class TestUpdates:
    """Entry updates and resets."""

    def test_update_entries_adds_to_each_entry(self, weights, value_function):
        board = _board()
        indices = value_function.feature_indices(board)
        value_function.update_entries(indices, 0.25)

        # An entry addressed k times gets k * 0.25 and is read k times
        expected = 0.0
        for p in range(len(PATTERNS)):
            column = [group[p] for group in indices]
            expected += sum(0.25 * column.count(index) for index in column)
        assert value_function.evaluate(board) == pytest.approx(expected)

    def test_update_counts_duplicates(self, weights, value_function):
        """An empty board reads index 0 from every table 8 times."""
        indices = value_function.feature_indices(Board())
        value_function.update_entries(indices, 0.5)
        assert weights.get(0, 0) == pytest.approx(4.0)
        assert value_function.evaluate(Board()) == pytest.approx(4 * 8 * 4.0)

    def test_reset_entries(self, weights, value_function):
        board = _board()
        indices = value_function.feature_indices(board)
        value_function.update_entries(indices, 1.0)
        value_function.reset_entries(indices)
        assert value_function.evaluate(board) == 0.0

    def test_accumulate_and_reset_single(self, weights, value_function):
        value_function.accumulate(2, 17, 1.5)
        assert weights.get(2, 17) == pytest.approx(1.5)
        value_function.reset(2, 17)
        assert weights.get(2, 17) == 0.0

    def test_malformed_indices(self, value_function):
        with pytest.raises(ValueError):
            value_function.update_entries(((0, 0, 0, 0),), 1.0)


class TestConstruction:

    def test_table_count_mismatch(self):
        with pytest.raises(ValueError):
            ValueFunction(WeightStore.initialize(table_count=3, table_size=8))

    def test_undersized_tables(self):
        """Tables must hold every base-15 index of their pattern."""
        with pytest.raises(ValueError) as exc_info:
            ValueFunction(WeightStore.initialize(table_count=4, table_size=16))
        assert "entries" in str(exc_info.value)
