"""
N-tuple Network TD(0) Algorithm Module.

An afterstate value function built from 4 six-cell tuples read on all 8
board symmetries, trained online by a backward TD(0) sweep at the end of
every episode.

The episode driver and train()/evaluate() live in algorithms.ntuple.run.
"""

from algorithms.ntuple.patterns import PATTERNS, TABLE_SIZE
from algorithms.ntuple.weights import WeightStore, WeightFileError
from algorithms.ntuple.value import ValueFunction
from algorithms.ntuple.agent import NTuplePlayer, DEFAULT_LEARNING_RATE

__all__ = [
    "PATTERNS",
    "TABLE_SIZE",
    "WeightStore",
    "WeightFileError",
    "ValueFunction",
    "NTuplePlayer",
    "DEFAULT_LEARNING_RATE",
]
