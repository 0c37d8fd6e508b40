"""blockconv Data Containers.

This module provides the containers the conversion layer moves data
between, and the primitives shared by every conversion.

Type Hierarchy:

    BlockBase (ABC)
    ├── MatrixBlock          # Dense (flat row-major) or sparse (per-row) doubles
    └── FrameBlock           # Columnar table, one ValueType per column

Supporting Types:
    - ValueType: Closed set of frame column kinds (STRING, DOUBLE, INT, BOOLEAN)
    - StorageMode: DENSE | SPARSE, chosen by ``evaluate_sparse_format``
    - SparseRow: Growable (column, value) buffer with deferred sorting
    - CTableMap: Cross-tabulation coordinate map (1-indexed)
    - MatrixObject / read_lease: Engine handle and scoped read lease

Quick Start:
    >>> from blockconv.data import MatrixBlock, FrameBlock, ValueType
    >>>
    >>> mb = MatrixBlock(2, 2)
    >>> mb.init_from_array([[1.0, 0.0], [0.0, 2.0]])
    >>> mb.exam_sparsity()
    >>>
    >>> fb = FrameBlock([ValueType.DOUBLE, ValueType.STRING])
    >>> fb.append_row([1.5, "a"])
"""

# =============================================================================
# Value Kinds
# =============================================================================
from ._types import (
    ValueType,
    STRING,
    DOUBLE,
    INT,
    BOOLEAN,
    normalize_value_type,
    normalize_schema,
    n_copies,
    frequency,
    double_to_text,
)

# =============================================================================
# Storage Modes
# =============================================================================
from ._backend import (
    StorageMode,
    StorageInfo,
    estimate_size_dense,
    estimate_size_sparse,
    evaluate_sparse_format,
)

# =============================================================================
# Containers
# =============================================================================
from ._base import BlockBase
from ._matrix import IJV, SparseRow, MatrixBlock
from ._frame import ColumnArray, FrameBlock, default_column_names
from ._coordinate import CellIndex, CTableMap, infer_dimensions

# =============================================================================
# Leases
# =============================================================================
from ._ownership import Leasable, MatrixObject, read_lease


def is_matrix_like(obj) -> bool:
    """Check if object is a matrix block."""
    return isinstance(obj, MatrixBlock)


def is_frame_like(obj) -> bool:
    """Check if object is a frame block."""
    return isinstance(obj, FrameBlock)


__all__ = [
    # ---- Value Kinds ----
    'ValueType',
    'STRING',
    'DOUBLE',
    'INT',
    'BOOLEAN',
    'normalize_value_type',
    'normalize_schema',
    'n_copies',
    'frequency',
    'double_to_text',

    # ---- Storage Modes ----
    'StorageMode',
    'StorageInfo',
    'estimate_size_dense',
    'estimate_size_sparse',
    'evaluate_sparse_format',

    # ---- Containers ----
    'BlockBase',
    'IJV',
    'SparseRow',
    'MatrixBlock',
    'ColumnArray',
    'FrameBlock',
    'default_column_names',
    'CellIndex',
    'CTableMap',
    'infer_dimensions',

    # ---- Leases ----
    'Leasable',
    'MatrixObject',
    'read_lease',

    # ---- Type Checking ----
    'is_matrix_like',
    'is_frame_like',
]
