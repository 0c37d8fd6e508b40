"""
Coordinate-Map Materialization

Turns 1-indexed ``(row, col) -> value`` maps into matrix blocks.

The storage mode is chosen up front from the map size. Sparse targets
receive every cell through an unsorted per-row append and are sorted
once at the end, so unordered input costs O(nnz) appends plus one sort
per row instead of a shifting insert per cell. Dense targets are
written directly.

Entries whose value is 0, or whose row/column lies outside the target
dimensions, are skipped without error.
"""

import logging
from collections.abc import Mapping
from typing import Optional

from ..data import MatrixBlock, CTableMap, evaluate_sparse_format, infer_dimensions

__all__ = ['from_coordinate_map', 'from_ctable']

logger = logging.getLogger("blockconv.convert")


def _materialize(mapping: Mapping, rows: int, cols: int) -> MatrixBlock:
    estimated_nnz = len(mapping)
    sparse = evaluate_sparse_format(rows, cols, estimated_nnz)
    mb = MatrixBlock(rows, cols, sparse=sparse, estimated_nnz=estimated_nnz)

    # append for sparse (no shifting), direct writes for dense
    put = mb.append_value if sparse else mb.quick_set_value
    skipped = 0
    for (row, col), value in mapping.items():
        if value != 0 and 1 <= row <= rows and 1 <= col <= cols:
            put(row - 1, col - 1, value)
        else:
            skipped += 1

    if sparse:
        mb.sort_sparse_rows()

    logger.debug(
        "materialized coordinate map (%d entries, %d skipped) into %r",
        estimated_nnz, skipped, mb,
    )
    return mb


def from_coordinate_map(
    mapping: Mapping,
    rows: Optional[int] = None,
    cols: Optional[int] = None,
) -> MatrixBlock:
    """
    Materialize a coordinate map into a matrix block.

    Args:
        mapping: ``(row, col) -> value`` with 1-indexed keys (not modified)
        rows: Number of rows (default: largest row index in the map)
        cols: Number of columns (default: largest column index in the map)

    Returns:
        New matrix block of shape (rows, cols)

    Example:
        >>> mb = from_coordinate_map({(1, 1): 2.0, (3, 2): 5.0})
        >>> mb.shape, mb.nnz
        ((3, 2), 2)
    """
    if rows is None or cols is None:
        inferred_rows, inferred_cols = infer_dimensions(mapping)
        rows = inferred_rows if rows is None else rows
        cols = inferred_cols if cols is None else cols
    return _materialize(mapping, int(rows), int(cols))


def from_ctable(
    ctable: CTableMap,
    rows: Optional[int] = None,
    cols: Optional[int] = None,
) -> MatrixBlock:
    """
    Materialize a cross-tabulation map.

    Dimensions default to the map's ``max_row`` / ``max_column``.
    """
    rows = ctable.max_row if rows is None else rows
    cols = ctable.max_column if cols is None else cols
    return _materialize(ctable, int(rows), int(cols))
