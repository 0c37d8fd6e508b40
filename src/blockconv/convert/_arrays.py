"""Matrix <-> Flat Array Conversions.

This module flattens matrix blocks into numpy arrays and Python lists and
builds matrix blocks back from them:

- Matrix -> 2-D double array, 1-D double/int/boolean vectors
- Matrix -> ordered list of doubles
- 2-D array / 1-D vector -> matrix (storage mode re-evaluated)

Sparse inputs only touch their non-zero cells (the outputs start
zero-filled), so flattening a sparse block costs O(nnz) plus the
allocation of the output.

Example:
    >>> mb = from_double_matrix([[1.0, 0.0], [0.0, 2.0]])
    >>> to_double_matrix(mb)
    array([[1., 0.],
           [0., 2.]])
    >>> to_boolean_vector(mb)
    array([ True, False, False,  True])
"""

import logging
from typing import List

import numpy as np

from ..data import MatrixBlock

__all__ = [
    'to_double_matrix',
    'to_boolean_vector',
    'to_int_vector',
    'to_double_vector',
    'to_double_list',
    'copy_to_double_vector',
    'from_double_matrix',
    'from_double_vector',
]

logger = logging.getLogger("blockconv.convert")

# Saturation bounds for double -> int64 truncation.
_INT_MIN_F = -(2.0 ** 63)
_INT_MAX_F = float(np.nextafter(2.0 ** 63, 0.0))


def _flat_positions(mb: MatrixBlock):
    """Row-major positions and values of the non-zero cells."""
    ri, ci, vals = mb.get_nonzero_cells()
    return ri * mb.cols + ci, vals


def _truncate_to_int(values: np.ndarray) -> np.ndarray:
    clean = np.where(np.isnan(values), 0.0, values)
    return np.trunc(np.clip(clean, _INT_MIN_F, _INT_MAX_F)).astype(np.int64)


# =============================================================================
# Matrix -> Arrays
# =============================================================================

def to_double_matrix(mb: MatrixBlock) -> np.ndarray:
    """Convert a matrix block into a (rows, cols) float64 array.

    Args:
        mb: Source block (not modified).

    Returns:
        New 2-D array holding every cell.
    """
    ret = np.zeros(mb.shape, dtype=np.float64)
    if mb.nnz > 0:
        if mb.is_sparse:
            ri, ci, vals = mb.get_nonzero_cells()
            ret[ri, ci] = vals
        else:
            ret[:, :] = mb.get_dense_view()
    return ret


def to_boolean_vector(mb: MatrixBlock) -> np.ndarray:
    """Row-major boolean vector of length rows*cols; non-zero -> True."""
    ret = np.zeros(mb.size, dtype=np.bool_)
    if mb.nnz > 0:
        if mb.is_sparse:
            pos, vals = _flat_positions(mb)
            ret[pos] = vals != 0.0
        else:
            ret[:] = mb.get_dense_block() != 0.0
    return ret


def to_int_vector(mb: MatrixBlock) -> np.ndarray:
    """Row-major int64 vector of length rows*cols.

    Values are truncated toward zero; NaN becomes 0 and out-of-range
    values saturate.
    """
    ret = np.zeros(mb.size, dtype=np.int64)
    if mb.nnz > 0:
        if mb.is_sparse:
            pos, vals = _flat_positions(mb)
            ret[pos] = _truncate_to_int(vals)
        else:
            ret[:] = _truncate_to_int(mb.get_dense_block())
    return ret


def to_double_vector(mb: MatrixBlock) -> np.ndarray:
    """Row-major float64 vector of length rows*cols."""
    ret = np.zeros(mb.size, dtype=np.float64)
    if mb.nnz > 0:
        if mb.is_sparse:
            pos, vals = _flat_positions(mb)
            ret[pos] = vals
        else:
            ret[:] = mb.get_dense_block()
    return ret


def to_double_list(mb: MatrixBlock) -> List[float]:
    """Flatten a matrix block into a list of rows*cols doubles.

    Dense blocks yield every cell in row-major order. Sparse blocks yield
    their stored non-zeros in iteration order followed by rows*cols - nnz
    zeros, so positions are only row-major when no zero precedes a
    non-zero.
    """
    if mb.is_sparse:
        ret = [cell.v for cell in mb.iter_nonzeros()]
        ret.extend([0.0] * (mb.size - len(ret)))
        return ret
    buf = mb.get_dense_block()
    if buf is None:
        return [0.0] * mb.size
    return buf.tolist()


def copy_to_double_vector(mb: MatrixBlock, dest: np.ndarray, dest_pos: int = 0) -> None:
    """Write a matrix block row-major into ``dest`` starting at ``dest_pos``.

    Sparse blocks only write their non-zero cells; dense blocks overwrite
    the whole target range. Empty blocks leave ``dest`` untouched.

    Raises:
        ValueError: If ``dest`` is too small.
    """
    if mb.is_empty():
        return
    if dest_pos < 0 or dest_pos + mb.size > dest.shape[0]:
        raise ValueError(
            f"Destination of length {dest.shape[0]} cannot hold {mb.size} cells at offset {dest_pos}"
        )
    if mb.is_sparse:
        pos, vals = _flat_positions(mb)
        dest[dest_pos + pos] = vals
    else:
        dest[dest_pos:dest_pos + mb.size] = mb.get_dense_block()


# =============================================================================
# Arrays -> Matrix
# =============================================================================

def from_double_matrix(data) -> MatrixBlock:
    """Create a matrix block from a 2-D array of doubles.

    The data is bulk-copied into dense storage and the storage mode is
    then re-evaluated.

    Args:
        data: 2-D array-like (nested lists or ndarray). An empty sequence
              yields a 0x0 block.

    Raises:
        ValueError: If ``data`` is not rectangular 2-D.
    """
    arr = np.asarray(data, dtype=np.float64)
    if arr.ndim == 1 and arr.shape[0] == 0:
        arr = arr.reshape(0, 0)
    if arr.ndim != 2:
        raise ValueError(f"Expected 2D array, got {arr.ndim}D")

    rows, cols = arr.shape
    mb = MatrixBlock(rows, cols, sparse=False)
    mb.init_from_array(arr)
    mb.exam_sparsity()
    logger.debug("from_double_matrix %s -> %r", arr.shape, mb)
    return mb


def from_double_vector(data, column_vector: bool = False) -> MatrixBlock:
    """Create a row (1 x n) or column (n x 1) vector block.

    Args:
        data: 1-D array-like of doubles.
        column_vector: If True build n x 1, otherwise 1 x n.
    """
    arr = np.asarray(data, dtype=np.float64)
    if arr.ndim != 1:
        raise ValueError(f"Expected 1D array, got {arr.ndim}D")

    n = arr.shape[0]
    rows, cols = (n, 1) if column_vector else (1, n)
    mb = MatrixBlock(rows, cols, sparse=False)
    mb.init_from_array(arr)
    mb.exam_sparsity()
    return mb
