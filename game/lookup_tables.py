"""
Precomputed lookup tables for 2048 row operations.

Tables are generated once at module import time with vectorized torch ops
and then flattened into plain Python lists so that single-board slides are
a handful of list lookups.

A row is encoded as a base-15 number, leftmost cell most significant:
    code = t0 * 15**3 + t1 * 15**2 + t2 * 15 + t3

Tables (indexed by row code, all for the LEFT direction):
- LEFT_ROWS: resulting row as a 4-tuple of exponents
- LEFT_SCORES: points earned from merges (sum of merged tile values)

Other directions are handled by reading the board's rows or columns in the
appropriate order before lookup.
"""

from typing import List, Tuple

import torch
from torch import Tensor


# Exponents 0..14 are representable; 15 is reserved and never produced.
EXPONENT_BASE = 15
MAX_EXPONENT = EXPONENT_BASE - 1
ROW_COUNT = EXPONENT_BASE ** 4


def _generate_tables() -> Tuple[Tensor, Tensor]:
    """Generate row transition and score tables for all 15^4 rows.

    The merge logic implements the merge-once rule:
    - Each tile merges at most once per move
    - [2,2,2,2] -> [4,4,0,0], NOT [8,0,0,0]
    - Merges happen left-to-right for left move
    - Two tiles at MAX_EXPONENT do not merge

    Returns:
        (outputs, score): (15^4, 4) int64 rows and (15^4,) int64 scores
    """
    vals = torch.arange(EXPONENT_BASE, dtype=torch.int64)
    t0, t1, t2, t3 = torch.meshgrid(vals, vals, vals, vals, indexing='ij')
    inputs = torch.stack([t0.flatten(), t1.flatten(), t2.flatten(), t3.flatten()], dim=1)
    n_rows = inputs.shape[0]

    # Compact non-zeros to the left, keeping their order
    is_nonzero = inputs > 0
    positions = torch.arange(4).unsqueeze(0).expand(n_rows, -1)
    sort_keys = torch.where(is_nonzero, positions, positions + 4)
    sorted_indices = sort_keys.argsort(dim=1, stable=True)
    compacted = torch.gather(inputs, 1, sorted_indices)
    c0, c1, c2, c3 = compacted[:, 0], compacted[:, 1], compacted[:, 2], compacted[:, 3]

    def mergeable(a: Tensor, b: Tensor) -> Tensor:
        return (a == b) & (a > 0) & (a < MAX_EXPONENT)

    merge_01 = mergeable(c0, c1)
    merge_23_after_01 = merge_01 & mergeable(c2, c3)
    merge_12 = (~merge_01) & mergeable(c1, c2)
    merge_23_no_prior = (~merge_01) & (~merge_12) & mergeable(c2, c3)

    zeros = torch.zeros(n_rows, dtype=torch.int64)
    out0, out1, out2, out3 = zeros, zeros, zeros, zeros

    # [m01, m23, 0, 0]
    case1 = merge_01 & merge_23_after_01
    out0 = torch.where(case1, c0 + 1, out0)
    out1 = torch.where(case1, c2 + 1, out1)

    # [m01, c2, c3, 0]
    case2 = merge_01 & (~merge_23_after_01)
    out0 = torch.where(case2, c0 + 1, out0)
    out1 = torch.where(case2, c2, out1)
    out2 = torch.where(case2, c3, out2)

    # [c0, m12, c3, 0]
    case3 = merge_12
    out0 = torch.where(case3, c0, out0)
    out1 = torch.where(case3, c1 + 1, out1)
    out2 = torch.where(case3, c3, out2)

    # [c0, c1, m23, 0]
    case4 = merge_23_no_prior
    out0 = torch.where(case4, c0, out0)
    out1 = torch.where(case4, c1, out1)
    out2 = torch.where(case4, c2 + 1, out2)

    # No merges: compacted row as is
    case5 = (~merge_01) & (~merge_12) & (~merge_23_no_prior)
    out0 = torch.where(case5, c0, out0)
    out1 = torch.where(case5, c1, out1)
    out2 = torch.where(case5, c2, out2)
    out3 = torch.where(case5, c3, out3)

    outputs = torch.stack([out0, out1, out2, out3], dim=1)

    # Score is the sum of 2^merged_exponent for each merge
    score = torch.zeros(n_rows, dtype=torch.int64)
    score = torch.where(merge_01, score + (1 << (c0 + 1)), score)
    score = torch.where(merge_23_after_01, score + (1 << (c2 + 1)), score)
    score = torch.where(merge_12, score + (1 << (c1 + 1)), score)
    score = torch.where(merge_23_no_prior, score + (1 << (c2 + 1)), score)

    return outputs, score


def _to_lists(outputs: Tensor, score: Tensor) -> Tuple[List[Tuple[int, ...]], List[int]]:
    rows = [tuple(row) for row in outputs.tolist()]
    return rows, score.tolist()


LEFT_ROWS, LEFT_SCORES = _to_lists(*_generate_tables())


def encode_row(t0: int, t1: int, t2: int, t3: int) -> int:
    """Encode four exponents (leftmost first) as a row code."""
    return ((t0 * EXPONENT_BASE + t1) * EXPONENT_BASE + t2) * EXPONENT_BASE + t3
