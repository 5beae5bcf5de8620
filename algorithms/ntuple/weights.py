"""
Weight tables for the n-tuple network.

One flat float32 tensor per pattern, addressed by feature index.

Binary file layout (little endian):
    uint32 table_count
    for each table:
        uint64 element_count
        element_count x float32
"""

import struct
from pathlib import Path
from typing import List, Optional, Sequence, Union

import numpy as np
import torch
from torch import Tensor

from algorithms.ntuple.patterns import PATTERNS, TABLE_SIZE


_COUNT_HEADER = struct.Struct("<I")
_SIZE_HEADER = struct.Struct("<Q")
_FLOAT_DTYPE = np.dtype("<f4")


class WeightFileError(Exception):
    """Raised when a weight file cannot be read or written.

    Running with partially loaded or unsaved weights is never acceptable,
    so callers treat this as fatal.
    """
    pass


class WeightStore:
    """Flat weight tables with in-place accumulation.

    Args:
        tables: Optional list of 1-D float32 tensors (default: no tables;
            use initialize() or load())
    """

    def __init__(self, tables: Optional[List[Tensor]] = None):
        self.tables: List[Tensor] = []
        for table in tables or []:
            if table.dim() != 1:
                raise ValueError("Weight tables must be 1-D tensors")
            self.tables.append(table.to(torch.float32).contiguous())

    @classmethod
    def initialize(cls, table_count: int = len(PATTERNS), table_size: int = TABLE_SIZE) -> "WeightStore":
        """Create zeroed tables."""
        if table_count <= 0 or table_size <= 0:
            raise ValueError("table_count and table_size must be positive")
        return cls([torch.zeros(table_size, dtype=torch.float32) for _ in range(table_count)])

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "WeightStore":
        store = cls()
        store.load(path)
        return store

    @property
    def table_count(self) -> int:
        return len(self.tables)

    def table_size(self, table: int) -> int:
        return self.tables[table].numel()

    def _check(self, table: int, indices: Sequence[int]) -> Tensor:
        if not 0 <= table < len(self.tables):
            raise ValueError(f"Table {table} outside [0, {len(self.tables)})")
        idx = torch.as_tensor(indices, dtype=torch.long)
        if idx.numel() and (idx.min() < 0 or idx.max() >= self.tables[table].numel()):
            raise ValueError(
                f"Index out of range for table {table} of size {self.tables[table].numel()}"
            )
        return idx

    # ------------------------------------------------------------------
    # Lookup and update
    # ------------------------------------------------------------------

    def get(self, table: int, index: int) -> float:
        idx = self._check(table, [index])
        return float(self.tables[table][idx[0]])

    def gather(self, table: int, indices: Sequence[int]) -> Tensor:
        """Weights at `indices` (duplicates repeated)."""
        idx = self._check(table, indices)
        return self.tables[table][idx]

    def accumulate(self, table: int, indices: Sequence[int], delta: float) -> None:
        """Add `delta` at every index; an index listed twice gets 2 * delta."""
        idx = self._check(table, indices)
        values = torch.full((idx.numel(),), float(delta), dtype=torch.float32)
        self.tables[table].index_add_(0, idx, values)

    def reset(self, table: int, indices: Sequence[int]) -> None:
        """Set the weights at `indices` to zero."""
        idx = self._check(table, indices)
        self.tables[table][idx] = 0.0

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self, path: Union[str, Path]) -> None:
        """Replace all tables with the contents of a weight file.

        Raises:
            WeightFileError: If the file is missing, unreadable or truncated
        """
        try:
            with open(path, "rb") as f:
                header = f.read(_COUNT_HEADER.size)
                if len(header) != _COUNT_HEADER.size:
                    raise WeightFileError(f"Truncated weight file header: {path}")
                (count,) = _COUNT_HEADER.unpack(header)

                tables = []
                for i in range(count):
                    size_bytes = f.read(_SIZE_HEADER.size)
                    if len(size_bytes) != _SIZE_HEADER.size:
                        raise WeightFileError(f"Truncated size header for table {i}: {path}")
                    (size,) = _SIZE_HEADER.unpack(size_bytes)
                    data = f.read(size * _FLOAT_DTYPE.itemsize)
                    if len(data) != size * _FLOAT_DTYPE.itemsize:
                        raise WeightFileError(f"Truncated data for table {i}: {path}")
                    array = np.frombuffer(data, dtype=_FLOAT_DTYPE).astype(np.float32)
                    tables.append(torch.from_numpy(array))
        except OSError as e:
            raise WeightFileError(f"Cannot read weight file {path}: {e}") from e

        self.tables = tables

    def save(self, path: Union[str, Path]) -> None:
        """Write all tables, truncating any existing file.

        Raises:
            WeightFileError: If the file cannot be written
        """
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "wb") as f:
                f.write(_COUNT_HEADER.pack(len(self.tables)))
                for table in self.tables:
                    f.write(_SIZE_HEADER.pack(table.numel()))
                    f.write(table.detach().cpu().numpy().astype(_FLOAT_DTYPE).tobytes())
        except OSError as e:
            raise WeightFileError(f"Cannot write weight file {path}: {e}") from e
