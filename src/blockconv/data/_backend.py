"""Storage Modes and the Density Rule.

This module defines how a matrix block stores its cells and how the
storage mode is chosen:

- Storage modes (DENSE, SPARSE)
- In-memory size estimates for both representations
- The density rule shared by every producer of matrix blocks

Design Philosophy:
    Every component that materializes a matrix block (array conversion,
    coordinate maps, frame conversion, readers) picks the storage mode
    through ``evaluate_sparse_format``. A block converted to sparse is
    never larger than its dense equivalent, and a block converted to
    dense holds at least a threshold fraction of non-zeros.

Example:
    >>> evaluate_sparse_format(1000, 1000, 5000)
    True
    >>> evaluate_sparse_format(2, 2, 4)
    False
"""

from enum import Enum
from typing import Optional, Tuple
from dataclasses import dataclass
import math

__all__ = [
    'StorageMode',
    'StorageInfo',
    'estimate_size_dense',
    'estimate_size_sparse',
    'evaluate_sparse_format',
]


# =============================================================================
# Enumerations
# =============================================================================

class StorageMode(Enum):
    """Matrix block storage mode.

    Attributes:
        DENSE: One flat row-major float64 buffer of rows*cols cells.
               Zeros are stored explicitly.

        SPARSE: One row buffer per row holding (column, value) pairs.
                Zeros are never stored. Pairs are sorted by column once
                the block is finalized.
    """
    DENSE = 'dense'
    SPARSE = 'sparse'


# =============================================================================
# Size Estimates
# =============================================================================

# Object header of a block, regardless of mode.
_BLOCK_OVERHEAD = 44
# Per-row container: header plus index/value array headers.
_SPARSE_ROW_OVERHEAD = 40
# Initial capacity of a sparse row buffer.
_SPARSE_ROW_MIN_CAPACITY = 4
# Bytes per stored sparse cell: int32 column index + float64 value.
_SPARSE_CELL_BYTES = 12
# Bytes per dense cell.
_DENSE_CELL_BYTES = 8


def estimate_size_dense(rows: int, cols: int) -> float:
    """Estimated in-memory bytes of a dense block."""
    return _BLOCK_OVERHEAD + _DENSE_CELL_BYTES * float(rows) * float(cols)


def estimate_size_sparse(rows: int, cols: int, sparsity: float) -> float:
    """Estimated in-memory bytes of a sparse block.

    Args:
        rows: Number of rows.
        cols: Number of columns.
        sparsity: Expected fraction of non-zero cells.
    """
    nnz = max(0.0, sparsity) * float(rows) * float(cols)
    # row pointer array
    size = _BLOCK_OVERHEAD + 8.0 * rows
    allocated_rows = min(float(rows), nnz)
    if allocated_rows > 0:
        per_row = max(_SPARSE_ROW_MIN_CAPACITY, math.ceil(nnz / allocated_rows))
        size += allocated_rows * (_SPARSE_ROW_OVERHEAD + _SPARSE_CELL_BYTES * per_row)
    return size


def evaluate_sparse_format(
    rows: int,
    cols: int,
    nnz: int,
    threshold: Optional[float] = None,
) -> bool:
    """Decide whether a block of the given shape and nnz should be sparse.

    A block is sparse iff its density is below the configured threshold
    and the sparse representation is estimated to be smaller than the
    dense one. Blocks with zero cells are dense.

    Args:
        rows: Number of rows.
        cols: Number of columns.
        nnz: Number (or estimate) of non-zero cells.
        threshold: Density threshold; defaults to ``config.sparsity.threshold``.

    Returns:
        True if SPARSE should be used.
    """
    if rows <= 0 or cols <= 0:
        return False
    if threshold is None:
        from .._config import config
        threshold = config.sparsity.threshold

    sparsity = float(nnz) / rows / cols
    if not sparsity < threshold:
        return False
    return estimate_size_sparse(rows, cols, sparsity) < estimate_size_dense(rows, cols)


# =============================================================================
# Storage Information
# =============================================================================

@dataclass
class StorageInfo:
    """Storage metadata for a matrix block.

    Primarily for introspection and debugging.
    """
    mode: StorageMode
    shape: Tuple[int, int]
    nnz: int
    allocated: bool = True

    @property
    def sparsity(self) -> float:
        cells = self.shape[0] * self.shape[1]
        return self.nnz / cells if cells > 0 else 0.0

    @property
    def estimated_bytes(self) -> float:
        if self.mode is StorageMode.SPARSE:
            return estimate_size_sparse(self.shape[0], self.shape[1], self.sparsity)
        return estimate_size_dense(self.shape[0], self.shape[1])

    def __repr__(self) -> str:
        return (
            f"StorageInfo(mode={self.mode.value}, shape={self.shape}, "
            f"nnz={self.nnz}, allocated={self.allocated})"
        )
