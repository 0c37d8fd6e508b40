"""
Numeric Interop

Bridges matrix blocks to the numeric libraries callers hand data to:

- ``to_real_matrix``: leased read of an engine handle into a numpy array
- ``to_scipy`` / ``from_scipy``: CSR round trip with scipy.sparse
"""

import logging

import numpy as np

from ..data import MatrixBlock, Leasable, read_lease, evaluate_sparse_format
from ._arrays import to_double_matrix

__all__ = ['to_real_matrix', 'to_scipy', 'from_scipy']

logger = logging.getLogger("blockconv.convert")


def to_real_matrix(handle: Leasable) -> np.ndarray:
    """
    Copy an engine-managed matrix into a 2-D float64 array.

    The handle's read lease is held only for the copy and is released on
    every exit path.

    Args:
        handle: Object implementing ``acquire_read()`` / ``release()``

    Returns:
        New (rows, cols) array owned by the caller
    """
    with read_lease(handle) as mb:
        data = to_double_matrix(mb)
    logger.debug("to_real_matrix copied %s cells", data.shape)
    return data


def to_scipy(mb: MatrixBlock):
    """
    Convert to a scipy CSR matrix (data is copied).

    Example:
        >>> csr = to_scipy(mb)
        >>> csr.shape == mb.shape
        True
    """
    try:
        import scipy.sparse as sp
    except ImportError:
        raise ImportError("scipy required for to_scipy()")

    ri, ci, vals = mb.get_nonzero_cells()
    return sp.csr_matrix((vals, (ri, ci)), shape=mb.shape, dtype=np.float64)


def from_scipy(mat) -> MatrixBlock:
    """
    Create a matrix block from any scipy sparse matrix.

    Duplicate entries are summed; explicit zeros are dropped. The storage
    mode follows the density rule.
    """
    try:
        import scipy.sparse as sp
    except ImportError:
        raise ImportError("scipy required for from_scipy()")

    if not sp.issparse(mat):
        raise TypeError(f"Expected scipy sparse matrix, got {type(mat).__name__}")

    coo = sp.coo_matrix(mat, dtype=np.float64, copy=True)
    coo.sum_duplicates()
    rows, cols = coo.shape

    sparse = evaluate_sparse_format(rows, cols, coo.nnz)
    mb = MatrixBlock(rows, cols, sparse=sparse, estimated_nnz=coo.nnz)
    for i, j, v in zip(coo.row.tolist(), coo.col.tolist(), coo.data.tolist()):
        mb.append_value(i, j, v)
    mb.sort_sparse_rows()
    return mb
