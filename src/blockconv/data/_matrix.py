"""
Matrix Block (Dense/Sparse Rectangular Container)

The matrix container the conversion layer reads from and writes to.

Memory Layout:
    DENSE:  _dense[rows * cols]        float64, row-major
    SPARSE: _sparse_rows[rows]         one SparseRow (or None) per row
            SparseRow.indexes[size]    column indices
            SparseRow.values[size]     non-zero values

Assembly Model:
    Bulk producers call ``append_value`` (unsorted O(1) append per cell)
    and finish with a single ``sort_sparse_rows`` pass. ``quick_set_value``
    keeps rows sorted on every call and is meant for point updates only.

Example:
    >>> mb = MatrixBlock(2, 3, sparse=True, estimated_nnz=2)
    >>> mb.append_value(1, 2, 5.0)
    >>> mb.append_value(1, 0, 4.0)
    >>> mb.sort_sparse_rows()
    >>> list(mb.iter_nonzeros())
    [IJV(i=1, j=0, v=4.0), IJV(i=1, j=2, v=5.0)]
"""

import logging
import math
from typing import Iterator, List, NamedTuple, Optional, Tuple

import numpy as np

from ._base import BlockBase
from ._backend import StorageMode, StorageInfo, evaluate_sparse_format

__all__ = ['IJV', 'SparseRow', 'MatrixBlock']

logger = logging.getLogger("blockconv.data")


class IJV(NamedTuple):
    """One stored cell: 0-based row, 0-based column, value."""
    i: int
    j: int
    v: float


# =============================================================================
# Sparse Row Buffer
# =============================================================================

class SparseRow:
    """
    Growable (column, value) buffer for one row of a sparse block.

    Appends are unsorted; ``sort()`` restores ascending column order.
    ``get``/``set`` assume the row is sorted.
    """

    __slots__ = ('_indexes', '_values', '_size')

    MIN_CAPACITY = 4

    def __init__(self, capacity: int = MIN_CAPACITY):
        capacity = max(int(capacity), 1)
        self._indexes = np.empty(capacity, dtype=np.int64)
        self._values = np.empty(capacity, dtype=np.float64)
        self._size = 0

    @classmethod
    def from_arrays(cls, indexes: np.ndarray, values: np.ndarray) -> 'SparseRow':
        """Create a row from parallel index/value arrays (copied)."""
        row = cls(max(len(indexes), cls.MIN_CAPACITY))
        n = len(indexes)
        row._indexes[:n] = indexes
        row._values[:n] = values
        row._size = n
        return row

    @property
    def size(self) -> int:
        return self._size

    @property
    def capacity(self) -> int:
        return self._indexes.shape[0]

    def is_empty(self) -> bool:
        return self._size == 0

    @property
    def indexes(self) -> np.ndarray:
        """Column indices of the stored cells (view)."""
        return self._indexes[:self._size]

    @property
    def values(self) -> np.ndarray:
        """Values of the stored cells (view)."""
        return self._values[:self._size]

    def _ensure_capacity(self, required: int) -> None:
        if required <= self.capacity:
            return
        new_capacity = max(required, 2 * self.capacity)
        indexes = np.empty(new_capacity, dtype=np.int64)
        values = np.empty(new_capacity, dtype=np.float64)
        indexes[:self._size] = self._indexes[:self._size]
        values[:self._size] = self._values[:self._size]
        self._indexes = indexes
        self._values = values

    def append(self, col: int, value: float) -> None:
        """Append a cell without ordering."""
        self._ensure_capacity(self._size + 1)
        self._indexes[self._size] = col
        self._values[self._size] = value
        self._size += 1

    def is_sorted(self) -> bool:
        idx = self.indexes
        return idx.shape[0] < 2 or bool(np.all(idx[1:] >= idx[:-1]))

    def sort(self) -> None:
        """Sort cells ascending by column (stable)."""
        if self.is_sorted():
            return
        n = self._size
        order = np.argsort(self._indexes[:n], kind='stable')
        self._indexes[:n] = self._indexes[:n][order]
        self._values[:n] = self._values[:n][order]

    def get(self, col: int) -> float:
        n = self._size
        pos = int(np.searchsorted(self._indexes[:n], col))
        if pos < n and self._indexes[pos] == col:
            return float(self._values[pos])
        return 0.0

    def set(self, col: int, value: float) -> int:
        """
        Sorted insert, update or delete.

        Returns:
            Change in the number of stored cells (-1, 0 or +1)
        """
        n = self._size
        pos = int(np.searchsorted(self._indexes[:n], col))
        exists = pos < n and self._indexes[pos] == col

        if exists:
            if value != 0:
                self._values[pos] = value
                return 0
            self._indexes[pos:n - 1] = self._indexes[pos + 1:n]
            self._values[pos:n - 1] = self._values[pos + 1:n]
            self._size -= 1
            return -1

        if value == 0:
            return 0
        self._ensure_capacity(n + 1)
        self._indexes[pos + 1:n + 1] = self._indexes[pos:n]
        self._values[pos + 1:n + 1] = self._values[pos:n]
        self._indexes[pos] = col
        self._values[pos] = value
        self._size += 1
        return 1

    def copy(self) -> 'SparseRow':
        return SparseRow.from_arrays(self.indexes, self.values)

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return f"SparseRow(size={self._size}, capacity={self.capacity})"


# =============================================================================
# Matrix Block
# =============================================================================

class MatrixBlock(BlockBase):
    """
    Rectangular double matrix with DENSE or SPARSE storage.

    Attributes:
        shape (Tuple[int, int]): Dimensions (rows, cols)
        nnz (int): Number of stored non-zero cells
        is_sparse (bool): Whether SPARSE storage is active
        estimated_nnz (int): Capacity hint used when allocating rows

    Invariants:
        - ``nnz`` equals the number of non-zero cells held in storage
        - Switching storage mode never changes a cell value

    Example:
        >>> mb = MatrixBlock(2, 2)
        >>> mb.init_from_array([[0.0, 0.0], [0.0, 7.0]])
        >>> mb.nnz
        1
    """

    def __init__(
        self,
        rows: int = 0,
        cols: int = 0,
        sparse: bool = False,
        estimated_nnz: Optional[int] = None,
    ):
        """
        Create an empty (all-zero) block.

        Args:
            rows: Number of rows
            cols: Number of columns
            sparse: Initial storage mode
            estimated_nnz: Expected number of non-zeros (capacity hint only)
        """
        if rows < 0 or cols < 0:
            raise ValueError(f"Matrix dimensions must be non-negative, got ({rows}, {cols})")

        self._rows = int(rows)
        self._cols = int(cols)
        self._sparse = bool(sparse)
        self._nnz = 0
        self._estimated_nnz = (
            int(estimated_nnz) if estimated_nnz is not None else 0
        )
        self._dense: Optional[np.ndarray] = None
        self._sparse_rows: Optional[List[Optional[SparseRow]]] = None

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def shape(self) -> Tuple[int, int]:
        return (self._rows, self._cols)

    @property
    def nnz(self) -> int:
        """Number of non-zero cells."""
        return self._nnz

    @property
    def is_sparse(self) -> bool:
        return self._sparse

    @property
    def storage_mode(self) -> StorageMode:
        return StorageMode.SPARSE if self._sparse else StorageMode.DENSE

    @property
    def estimated_nnz(self) -> int:
        return self._estimated_nnz

    @property
    def sparsity(self) -> float:
        """Fraction of non-zero cells."""
        cells = self._rows * self._cols
        return self._nnz / cells if cells > 0 else 0.0

    @property
    def is_allocated(self) -> bool:
        if self._sparse:
            return self._sparse_rows is not None
        return self._dense is not None

    def storage_info(self) -> StorageInfo:
        return StorageInfo(
            mode=self.storage_mode,
            shape=self.shape,
            nnz=self._nnz,
            allocated=self.is_allocated,
        )

    def is_empty(self) -> bool:
        """True if the block holds no non-zero cell."""
        return self._nnz == 0

    # -------------------------------------------------------------------------
    # Allocation
    # -------------------------------------------------------------------------

    def allocate_dense_block(self, clear: bool = True) -> np.ndarray:
        """Allocate (or reuse) the row-major dense buffer and return it."""
        size = self._rows * self._cols
        if self._dense is None or self._dense.shape[0] != size:
            self._dense = np.zeros(size, dtype=np.float64)
        elif clear:
            self._dense.fill(0.0)
            self._nnz = 0
        return self._dense

    def allocate_sparse_rows(self) -> List[Optional[SparseRow]]:
        """Allocate the per-row table of a sparse block and return it."""
        if self._sparse_rows is None or len(self._sparse_rows) != self._rows:
            self._sparse_rows = [None] * self._rows
        return self._sparse_rows

    def _row_capacity(self) -> int:
        if self._rows == 0 or self._estimated_nnz <= 0:
            return SparseRow.MIN_CAPACITY
        per_row = math.ceil(self._estimated_nnz / self._rows)
        return max(SparseRow.MIN_CAPACITY, min(per_row, max(self._cols, 1)))

    def get_dense_block(self) -> Optional[np.ndarray]:
        """Flat row-major buffer, or None if not allocated or sparse."""
        if self._sparse:
            return None
        return self._dense

    def get_dense_view(self) -> Optional[np.ndarray]:
        """(rows, cols) view of the dense buffer, or None."""
        buf = self.get_dense_block()
        if buf is None:
            return None
        return buf.reshape(self._rows, self._cols)

    def get_sparse_rows(self) -> Optional[List[Optional[SparseRow]]]:
        """Per-row table, or None if not allocated or dense."""
        if not self._sparse:
            return None
        return self._sparse_rows

    def reset(
        self,
        rows: Optional[int] = None,
        cols: Optional[int] = None,
        sparse: Optional[bool] = None,
        estimated_nnz: int = 0,
    ) -> None:
        """Drop all content and optionally change dimensions / mode."""
        if rows is not None:
            if rows < 0:
                raise ValueError(f"rows must be non-negative, got {rows}")
            self._rows = int(rows)
        if cols is not None:
            if cols < 0:
                raise ValueError(f"cols must be non-negative, got {cols}")
            self._cols = int(cols)
        if sparse is not None:
            self._sparse = bool(sparse)
        self._estimated_nnz = int(estimated_nnz)
        self._nnz = 0
        self._dense = None
        self._sparse_rows = None

    # -------------------------------------------------------------------------
    # Element Access
    # -------------------------------------------------------------------------

    def _check_index(self, i: int, j: int) -> None:
        if not (0 <= i < self._rows and 0 <= j < self._cols):
            raise IndexError(
                f"Cell ({i}, {j}) out of bounds for shape {self.shape}"
            )

    def quick_get_value(self, i: int, j: int) -> float:
        """Value at (i, j) without bounds checks."""
        if self._sparse:
            if self._sparse_rows is None:
                return 0.0
            row = self._sparse_rows[i]
            return 0.0 if row is None else row.get(j)
        if self._dense is None:
            return 0.0
        return float(self._dense[i * self._cols + j])

    def get_value(self, i: int, j: int) -> float:
        """Value at (i, j)."""
        self._check_index(i, j)
        return self.quick_get_value(i, j)

    def quick_set_value(self, i: int, j: int, value: float) -> None:
        """Set (i, j) keeping sparse rows sorted and nnz exact."""
        if self._sparse:
            rows = self.allocate_sparse_rows()
            row = rows[i]
            if row is None:
                if value == 0:
                    return
                row = rows[i] = SparseRow(self._row_capacity())
            self._nnz += row.set(j, value)
            return

        if self._dense is None:
            if value == 0:
                return
            self.allocate_dense_block()
        k = i * self._cols + j
        old = self._dense[k]
        self._dense[k] = value
        if old == 0 and value != 0:
            self._nnz += 1
        elif old != 0 and value == 0:
            self._nnz -= 1

    def set_value(self, i: int, j: int, value: float) -> None:
        """Set (i, j) with bounds checks."""
        self._check_index(i, j)
        self.quick_set_value(i, j, value)

    def append_value(self, i: int, j: int, value: float) -> None:
        """
        Append a non-zero cell.

        Zeros are ignored. On sparse storage the cell is appended to the
        row buffer without ordering; call ``sort_sparse_rows`` afterwards.
        """
        if value == 0:
            return
        if not self._sparse:
            self.quick_set_value(i, j, value)
            return
        rows = self.allocate_sparse_rows()
        row = rows[i]
        if row is None:
            row = rows[i] = SparseRow(self._row_capacity())
        row.append(j, value)
        self._nnz += 1

    def sort_sparse_rows(self) -> None:
        """Sort every sparse row by column index. No-op on dense storage."""
        if not self._sparse or self._sparse_rows is None:
            return
        for row in self._sparse_rows:
            if row is not None:
                row.sort()

    # -------------------------------------------------------------------------
    # Iteration
    # -------------------------------------------------------------------------

    def iter_nonzeros(self) -> Iterator[IJV]:
        """Yield non-zero cells in storage order (row by row)."""
        if self._nnz == 0:
            return
        if self._sparse:
            if self._sparse_rows is None:
                return
            for i, row in enumerate(self._sparse_rows):
                if row is None or row.is_empty():
                    continue
                for j, v in zip(row.indexes.tolist(), row.values.tolist()):
                    yield IJV(i, j, v)
        else:
            view = self.get_dense_view()
            if view is None:
                return
            for i in range(self._rows):
                row = view[i]
                for j in np.flatnonzero(row).tolist():
                    yield IJV(i, j, float(row[j]))

    def get_nonzero_cells(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Non-zero cells as parallel (rows, cols, values) arrays.

        Order matches ``iter_nonzeros``.
        """
        if self._nnz == 0 or not self.is_allocated:
            return (np.empty(0, dtype=np.int64),
                    np.empty(0, dtype=np.int64),
                    np.empty(0, dtype=np.float64))
        if not self._sparse:
            flat = np.flatnonzero(self._dense)
            ri, ci = np.divmod(flat, self._cols)
            return ri.astype(np.int64), ci.astype(np.int64), self._dense[flat].copy()

        filled = [(i, row) for i, row in enumerate(self._sparse_rows)
                  if row is not None and not row.is_empty()]
        if not filled:
            return (np.empty(0, dtype=np.int64),
                    np.empty(0, dtype=np.int64),
                    np.empty(0, dtype=np.float64))
        ri = np.concatenate([np.full(row.size, i, dtype=np.int64) for i, row in filled])
        ci = np.concatenate([row.indexes for _, row in filled])
        vals = np.concatenate([row.values for _, row in filled])
        return ri, ci, vals

    # -------------------------------------------------------------------------
    # Storage Mode
    # -------------------------------------------------------------------------

    def recompute_nonzeros(self) -> int:
        """Recount non-zeros from storage and return the count."""
        if self._sparse:
            if self._sparse_rows is None:
                self._nnz = 0
            else:
                self._nnz = sum(
                    int(np.count_nonzero(row.values))
                    for row in self._sparse_rows if row is not None
                )
        else:
            self._nnz = 0 if self._dense is None else int(np.count_nonzero(self._dense))
        return self._nnz

    def exam_sparsity(self) -> None:
        """Re-evaluate the storage mode and convert if the rule says so."""
        target_sparse = evaluate_sparse_format(self._rows, self._cols, self._nnz)
        if self._sparse and not target_sparse:
            logger.debug("exam_sparsity %s nnz=%d: sparse -> dense", self.shape, self._nnz)
            self.to_dense_storage()
        elif not self._sparse and target_sparse:
            logger.debug("exam_sparsity %s nnz=%d: dense -> sparse", self.shape, self._nnz)
            self.to_sparse_storage()

    def to_dense_storage(self) -> None:
        """Switch to DENSE storage, preserving values."""
        if not self._sparse:
            return
        rows = self._sparse_rows
        self._sparse = False
        self._sparse_rows = None
        self._dense = None
        if self._nnz == 0 or rows is None:
            return
        buf = self.allocate_dense_block()
        for i, row in enumerate(rows):
            if row is not None and not row.is_empty():
                buf[i * self._cols + row.indexes] = row.values

    def to_sparse_storage(self) -> None:
        """Switch to SPARSE storage, preserving values."""
        if self._sparse:
            return
        view = self.get_dense_view()
        self._sparse = True
        self._dense = None
        self._sparse_rows = None
        self._estimated_nnz = self._nnz
        if self._nnz == 0 or view is None:
            return
        rows = self.allocate_sparse_rows()
        for i in range(self._rows):
            nz = np.flatnonzero(view[i])
            if nz.shape[0] > 0:
                rows[i] = SparseRow.from_arrays(nz, view[i, nz])

    # -------------------------------------------------------------------------
    # Bulk Initialization
    # -------------------------------------------------------------------------

    def init_from_array(self, data) -> None:
        """
        Copy a dense array of this block's shape into DENSE storage.

        Args:
            data: 2-D array-like of shape (rows, cols), or 1-D array-like
                  of length rows*cols in row-major order
        """
        arr = np.asarray(data, dtype=np.float64)
        if arr.ndim == 2:
            if arr.shape != self.shape:
                raise ValueError(f"Array shape {arr.shape} does not match block shape {self.shape}")
        elif arr.ndim == 1:
            if arr.shape[0] != self._rows * self._cols:
                raise ValueError(
                    f"Array length {arr.shape[0]} does not match block size {self._rows * self._cols}"
                )
        else:
            raise ValueError(f"Expected 1D or 2D array, got {arr.ndim}D")

        self._sparse = False
        self._sparse_rows = None
        self._dense = np.array(arr.reshape(-1), dtype=np.float64, copy=True)
        self._nnz = int(np.count_nonzero(self._dense))

    # -------------------------------------------------------------------------
    # Slicing
    # -------------------------------------------------------------------------

    def slice(
        self,
        row_start: int,
        row_end: int,
        col_start: int,
        col_end: int,
        out: Optional['MatrixBlock'] = None,
    ) -> 'MatrixBlock':
        """
        Copy the half-open sub-range [row_start:row_end, col_start:col_end].

        Args:
            row_start, row_end: Row range
            col_start, col_end: Column range
            out: Optional target block; it is reset to the slice shape and
                 keeps its own storage mode

        Returns:
            The populated output block
        """
        if not (0 <= row_start <= row_end <= self._rows):
            raise IndexError(f"Row range [{row_start}, {row_end}) invalid for {self._rows} rows")
        if not (0 <= col_start <= col_end <= self._cols):
            raise IndexError(f"Column range [{col_start}, {col_end}) invalid for {self._cols} cols")

        n_rows = row_end - row_start
        n_cols = col_end - col_start
        if out is None:
            cells = n_rows * n_cols
            est = int(cells * self.sparsity) if cells > 0 else 0
            out = MatrixBlock(n_rows, n_cols, sparse=self._sparse, estimated_nnz=est)
        else:
            out.reset(n_rows, n_cols, sparse=out.is_sparse, estimated_nnz=out.estimated_nnz)

        if self._nnz == 0 or n_rows == 0 or n_cols == 0:
            return out

        if self._sparse:
            for i in range(row_start, row_end):
                row = self._sparse_rows[i] if self._sparse_rows is not None else None
                if row is None or row.is_empty():
                    continue
                idx = row.indexes
                mask = (idx >= col_start) & (idx < col_end)
                for j, v in zip((idx[mask] - col_start).tolist(), row.values[mask].tolist()):
                    out.append_value(i - row_start, j, v)
            out.sort_sparse_rows()
        else:
            sub = self.get_dense_view()[row_start:row_end, col_start:col_end]
            if out.is_sparse:
                rows = out.allocate_sparse_rows()
                for i in range(n_rows):
                    nz = np.flatnonzero(sub[i])
                    if nz.shape[0] > 0:
                        rows[i] = SparseRow.from_arrays(nz, sub[i, nz])
                        out._nnz += nz.shape[0]
            else:
                out.init_from_array(sub)
        return out

    # -------------------------------------------------------------------------
    # Copy / Representation
    # -------------------------------------------------------------------------

    def copy(self) -> 'MatrixBlock':
        """Create a deep copy."""
        new = MatrixBlock(self._rows, self._cols, self._sparse, self._estimated_nnz)
        new._nnz = self._nnz
        if self._dense is not None:
            new._dense = self._dense.copy()
        if self._sparse_rows is not None:
            new._sparse_rows = [None if row is None else row.copy() for row in self._sparse_rows]
        return new

    def __repr__(self) -> str:
        return (f"MatrixBlock(shape={self.shape}, nnz={self._nnz}, "
                f"mode={self.storage_mode.value})")
