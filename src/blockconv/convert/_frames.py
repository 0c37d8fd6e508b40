"""Frame <-> Matrix Bridge.

This module converts between columnar frames and matrix blocks, and
between frames and string tables.

Conversion Paths:

    frame_to_matrix
    ├── all-DOUBLE schema    # tiled columnar -> row-major copy
    └── mixed schema         # per-cell ValueType.to_double

    matrix_to_frame
    ├── sparse source        # per-row, only stored cells are decoded
    ├── all-DOUBLE schema    # tiled row-major -> columnar copy
    └── general              # per-cell ValueType.from_double

pandas interop (``frame_to_pandas`` / ``frame_from_pandas``) is optional
and imports pandas on first use.
"""

import logging
from typing import Any, List, Optional, Sequence, Union

import numpy as np

from ..data import (
    MatrixBlock,
    FrameBlock,
    ValueType,
    DOUBLE,
    STRING,
    n_copies,
    frequency,
    normalize_schema,
)
from ..error import TypeCoercionError
from ._tiling import tiled_columns_to_rows, tiled_rows_to_columns

__all__ = [
    'frame_to_matrix',
    'matrix_to_frame',
    'frame_to_string_array',
    'string_array_to_frame',
    'frame_to_pandas',
    'frame_from_pandas',
]

logger = logging.getLogger("blockconv.convert")

SchemaLike = Optional[Union[str, ValueType, Sequence[Union[str, ValueType]]]]


# =============================================================================
# Frame -> Matrix
# =============================================================================

def frame_to_matrix(frame: FrameBlock) -> MatrixBlock:
    """Convert a frame into a matrix block.

    All-DOUBLE frames take a cache-blocked columnar copy. Other schemas
    are converted cell by cell through each column's ``to_double``. The
    result's storage mode is re-evaluated before returning.

    Raises:
        TypeCoercionError: If a cell has no numeric interpretation. The
            error carries the offending ``row``/``col``/``value``.
    """
    m, n = frame.shape
    schema = frame.schema
    mb = MatrixBlock(m, n, sparse=False)

    if frame.is_homogeneous(DOUBLE):
        buf = mb.allocate_dense_block()
        if m > 0 and n > 0:
            columns = [frame.get_column(j) for j in range(n)]
            tiled_columns_to_rows(columns, buf.reshape(m, n))
        mb.recompute_nonzeros()
    else:
        columns = [frame.get_column(j) for j in range(n)]
        for i in range(m):
            for j, vt in enumerate(schema):
                value = columns[j][i]
                try:
                    mb.append_value(i, j, vt.to_double(value))
                except TypeCoercionError as e:
                    raise TypeCoercionError(
                        f"frame_to_matrix: cell ({i}, {j}) of kind {vt.value} "
                        f"has no numeric value: {value!r}",
                        row=i, col=j, value=value,
                    ) from e

    mb.exam_sparsity()
    logger.debug("frame_to_matrix %r -> %r", frame, mb)
    return mb


# =============================================================================
# Matrix -> Frame
# =============================================================================

def _resolve_schema(schema: SchemaLike, n: int) -> List[ValueType]:
    if schema is None:
        return n_copies(n, DOUBLE)
    if isinstance(schema, (str, ValueType)):
        return n_copies(n, schema)
    schema = normalize_schema(schema)
    if len(schema) != n:
        raise ValueError(f"Schema of length {len(schema)} for a matrix with {n} columns")
    return schema


def matrix_to_frame(mb: MatrixBlock, schema: SchemaLike = None) -> FrameBlock:
    """Convert a matrix block into a frame.

    Args:
        mb: Source block (not modified)
        schema: Kind per column, or one kind for every column
                (default: all DOUBLE)

    Returns:
        Frame with default column names C1..Cn

    Notes:
        On the sparse path cells that are not stored come out as the
        column kind's null (None for STRING, 0 / False otherwise).
    """
    m, n = mb.shape
    schema = _resolve_schema(schema, n)

    if mb.is_sparse:
        frame = FrameBlock(schema)
        sparse_rows = mb.get_sparse_rows()
        for i in range(m):
            row: List[Any] = [None] * n
            srow = sparse_rows[i] if sparse_rows is not None else None
            if srow is not None and not srow.is_empty():
                for j, v in zip(srow.indexes.tolist(), srow.values.tolist()):
                    row[j] = schema[j].from_double(v)
            frame.append_row(row)
    elif n > 0 and frequency(schema, DOUBLE) == n:
        columns = np.zeros((n, m), dtype=np.float64)
        view = mb.get_dense_view()
        if view is not None and m > 0:
            tiled_rows_to_columns(view, columns)
        frame = FrameBlock.from_columns(schema, list(columns))
    else:
        frame = FrameBlock(schema)
        view = mb.get_dense_view()
        for i in range(m):
            frame.append_row([
                vt.from_double(view[i, j] if view is not None else 0.0)
                for j, vt in enumerate(schema)
            ])

    logger.debug("matrix_to_frame %r -> %r", mb, frame)
    return frame


# =============================================================================
# Frame <-> String Table
# =============================================================================

def frame_to_string_array(frame: FrameBlock) -> List[List[Optional[str]]]:
    """Render every cell of a frame as text (None for null cells)."""
    return list(frame.iter_string_rows())


def string_array_to_frame(
    data: Sequence[Sequence[Optional[str]]],
    schema: SchemaLike = None,
    names: Optional[Sequence[str]] = None,
) -> FrameBlock:
    """Build a frame from a table of strings.

    Args:
        data: Rows of cell texts, None for null
        schema: Kind per column, or one kind for every column
                (default: all STRING); cells are parsed
        names: Column names (default: C1..Cn)

    Raises:
        TypeCoercionError: If a cell cannot be parsed as its column kind
    """
    if schema is None:
        schema = n_copies(len(data[0]) if len(data) else 0, STRING)
    elif isinstance(schema, (str, ValueType)):
        if len(data):
            n = len(data[0])
        else:
            n = len(names) if names is not None else 0
        schema = n_copies(n, schema)
    else:
        schema = normalize_schema(schema)
    return FrameBlock(schema, names, data if len(data) else None)


# =============================================================================
# pandas Interop
# =============================================================================

def frame_to_pandas(frame: FrameBlock):
    """Convert a frame into a ``pandas.DataFrame`` (columns are copied)."""
    try:
        import pandas as pd
    except ImportError:
        raise ImportError("pandas required for frame_to_pandas(); install blockconv[pandas]")

    data = {}
    for j, vt in enumerate(frame.schema):
        values = frame.get_column(j).copy()
        # STRING columns stay object so nulls remain None
        data[j] = pd.Series(values, dtype=object if vt is ValueType.STRING else values.dtype)
    df = pd.DataFrame(data)
    df.columns = frame.column_names
    return df


def _infer_value_type(dtype) -> ValueType:
    kind = np.dtype(dtype).kind if isinstance(dtype, np.dtype) else 'O'
    if kind == 'f':
        return ValueType.DOUBLE
    if kind in 'iu':
        return ValueType.INT
    if kind == 'b':
        return ValueType.BOOLEAN
    return ValueType.STRING


def frame_from_pandas(df, schema: SchemaLike = None) -> FrameBlock:
    """Build a frame from a ``pandas.DataFrame``.

    Column kinds are inferred from the dtypes unless ``schema`` is given:
    float -> DOUBLE, integer -> INT, bool -> BOOLEAN, anything else ->
    STRING. Missing values in STRING columns become null.
    """
    try:
        import pandas as pd
    except ImportError:
        raise ImportError("pandas required for frame_from_pandas(); install blockconv[pandas]")

    if schema is None:
        schema = [_infer_value_type(dtype) for dtype in df.dtypes]
    else:
        schema = _resolve_schema(schema, df.shape[1])

    columns = []
    for j, vt in enumerate(schema):
        series = df.iloc[:, j]
        if vt is ValueType.STRING:
            columns.append([None if pd.isna(v) else str(v) for v in series.tolist()])
        else:
            columns.append(series.to_numpy())
    return FrameBlock.from_columns(schema, columns, [str(c) for c in df.columns])
