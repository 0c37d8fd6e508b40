"""
Row / Column Partitioning

Splits a matrix block into its rows (1 x cols blocks) or its columns
(rows x 1 blocks). Partitions are always new blocks.
"""

import logging
from typing import List

from ..data import MatrixBlock

__all__ = ['partition']

logger = logging.getLogger("blockconv.convert")


def partition(mb: MatrixBlock, colwise: bool) -> List[MatrixBlock]:
    """
    Split a matrix block into column or row vectors.

    Args:
        mb: Source block (not modified)
        colwise: True for ``cols`` blocks of shape (rows, 1), False for
                 ``rows`` blocks of shape (1, cols)

    Returns:
        List of partitions; cells absent from the source stay zero

    Example:
        >>> mb = from_double_matrix([[1, 2], [3, 4], [5, 6]])
        >>> [to_double_vector(p).tolist() for p in partition(mb, colwise=True)]
        [[1.0, 3.0, 5.0], [2.0, 4.0, 6.0]]
    """
    rows, cols = mb.shape

    if colwise:
        ret = [MatrixBlock(rows, 1, sparse=False) for _ in range(cols)]
        if not mb.is_empty():
            if mb.is_sparse:
                for i, j, v in mb.iter_nonzeros():
                    ret[j].append_value(i, 0, v)
            else:
                view = mb.get_dense_view()
                for j in range(cols):
                    ret[j].init_from_array(view[:, j])
    else:
        cells = rows * cols
        sparsity = mb.nnz / cells if cells else 0.0
        estimated_nnz = int(cols * sparsity)
        ret = [MatrixBlock(1, cols, sparse=mb.is_sparse, estimated_nnz=estimated_nnz)
               for _ in range(rows)]
        if not mb.is_empty():
            for i in range(rows):
                mb.slice(i, i + 1, 0, cols, out=ret[i])

    logger.debug("partition %r colwise=%s -> %d blocks", mb, colwise, len(ret))
    return ret
