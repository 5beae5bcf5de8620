"""
Root pytest configuration for the 2048 n-tuple project tests.

Provides shared markers and fixtures:
- board_from_grid: build a Board from raw tile values
- weights / value_function: fresh zeroed full-size weight tables
- turn: a fresh TurnContext
"""

from typing import List

import pytest

from algorithms.ntuple.value import ValueFunction
from algorithms.ntuple.weights import WeightStore
from game.board import Board
from game.turn import TurnContext


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow-running"
    )


@pytest.fixture
def board_from_grid():
    """Create a Board from a 4x4 grid of raw tile values (0, 2, 4, ...)."""
    def _board_from_grid(grid: List[List[int]]) -> Board:
        return Board.from_grid(grid)
    return _board_from_grid


@pytest.fixture
def weights() -> WeightStore:
    """Four zeroed 15^6 tables."""
    return WeightStore.initialize()


@pytest.fixture
def value_function(weights) -> ValueFunction:
    return ValueFunction(weights)


@pytest.fixture
def turn() -> TurnContext:
    return TurnContext()
