"""
blockconv - Matrix / Frame Conversion Layer

Conversion layer between the in-memory containers of a block-based
linear-algebra engine and the forms callers hand data in and out as:
- Dense / sparse matrix blocks <-> numpy arrays, vectors and lists
- Coordinate maps (1-indexed) -> matrix blocks
- Columnar frames <-> matrix blocks, string tables and pandas
- Row / column partitioning
- Diagnostic text rendering
- Pluggable storage readers / writers

Modules:
- data: MatrixBlock, FrameBlock, ValueType, CTableMap, read leases
- convert: Stateless conversions between the containers
- io: Storage boundary (format registry, text-cell, Matrix Market)

Architecture:
    ┌──────────────────────────────────────────────┐
    │   convert: arrays | coordinates | frames     │
    │            partition | render | interop      │
    ├──────────────────────────────────────────────┤
    │   data: MatrixBlock (DENSE | SPARSE)         │
    │         FrameBlock (one ValueType / column)  │
    ├──────────────────────────────────────────────┤
    │   io: reader / writer registry               │
    └──────────────────────────────────────────────┘

Example:
    >>> import blockconv as bc
    >>>
    >>> mb = bc.from_coordinate_map({(1, 1): 2.0, (3, 2): 5.0})
    >>> mb.shape, mb.nnz
    ((3, 2), 2)
    >>>
    >>> fb = bc.matrix_to_frame(mb)
    >>> print(bc.to_string(fb, decimal=1), end="")
    # FRAME: nrow = 3, ncol = 2
    # C1 C2
    # DOUBLE DOUBLE
    2.0 0.0
    0.0 0.0
    0.0 5.0
"""

__version__ = '0.1.0'

from . import data
from . import convert
from . import io

from ._config import (
    config,
    get_config,
    SparsityConfig,
    TilingConfig,
    RenderConfig,
    IOConfig,
)
from .error import (
    BlockConvError,
    ConversionIOError,
    TypeCoercionError,
    LeaseError,
)

# Re-export common types
from .data import (
    # Containers
    MatrixBlock,
    FrameBlock,
    SparseRow,
    IJV,
    CTableMap,

    # Value kinds / storage
    ValueType,
    StorageMode,
    STRING,
    DOUBLE,
    INT,
    BOOLEAN,
    evaluate_sparse_format,

    # Leases
    MatrixObject,
    read_lease,

    # Type checking
    is_matrix_like,
    is_frame_like,
)
from .convert import (
    to_double_matrix,
    to_boolean_vector,
    to_int_vector,
    to_double_vector,
    to_double_list,
    copy_to_double_vector,
    from_double_matrix,
    from_double_vector,
    from_coordinate_map,
    from_ctable,
    frame_to_matrix,
    matrix_to_frame,
    frame_to_string_array,
    string_array_to_frame,
    frame_to_pandas,
    frame_from_pandas,
    partition,
    RenderOptions,
    to_string,
    to_real_matrix,
    to_scipy,
    from_scipy,
)
from .io import (
    FileFormat,
    MatrixCharacteristics,
    ReadProperties,
    read_matrix,
    read_matrix_props,
    write_matrix,
)

__all__ = [
    # Version
    '__version__',

    # Modules
    'data',
    'convert',
    'io',

    # Configuration
    'config',
    'get_config',
    'SparsityConfig',
    'TilingConfig',
    'RenderConfig',
    'IOConfig',

    # Errors
    'BlockConvError',
    'ConversionIOError',
    'TypeCoercionError',
    'LeaseError',

    # Containers
    'MatrixBlock',
    'FrameBlock',
    'SparseRow',
    'IJV',
    'CTableMap',

    # Value kinds / storage
    'ValueType',
    'StorageMode',
    'STRING',
    'DOUBLE',
    'INT',
    'BOOLEAN',
    'evaluate_sparse_format',

    # Leases
    'MatrixObject',
    'read_lease',

    # Type checking
    'is_matrix_like',
    'is_frame_like',

    # Conversions
    'to_double_matrix',
    'to_boolean_vector',
    'to_int_vector',
    'to_double_vector',
    'to_double_list',
    'copy_to_double_vector',
    'from_double_matrix',
    'from_double_vector',
    'from_coordinate_map',
    'from_ctable',
    'frame_to_matrix',
    'matrix_to_frame',
    'frame_to_string_array',
    'string_array_to_frame',
    'frame_to_pandas',
    'frame_from_pandas',
    'partition',
    'RenderOptions',
    'to_string',
    'to_real_matrix',
    'to_scipy',
    'from_scipy',

    # Storage
    'FileFormat',
    'MatrixCharacteristics',
    'ReadProperties',
    'read_matrix',
    'read_matrix_props',
    'write_matrix',
]
