"""
Frame Block (Columnar Tabular Container)

A table of ``rows x cols`` cells where every column declares one
``ValueType`` and is stored as one homogeneous numpy array.

Column Storage:
    DOUBLE  -> float64 array   (null stored as 0.0)
    INT     -> int64 array     (null stored as 0)
    BOOLEAN -> bool array      (null stored as False)
    STRING  -> object array    (null stored as None)

Example:
    >>> fb = FrameBlock([ValueType.STRING, ValueType.DOUBLE], names=['id', 'x'])
    >>> fb.append_row(['a', 1.5])
    >>> fb.append_row(['b', '2.5'])
    >>> fb.get(1, 1)
    2.5
    >>> fb.get_column(1)
    array([1.5, 2.5])
"""

from typing import Any, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from ._base import BlockBase
from ._types import ValueType, normalize_schema, normalize_value_type
from ..error import TypeCoercionError

__all__ = ['ColumnArray', 'FrameBlock', 'default_column_names']

# int64 range as a float bound
_INT_LIMIT = 2.0 ** 63


def default_column_names(n: int, start: int = 1) -> List[str]:
    """Default names C1..Cn."""
    return [f"C{j}" for j in range(start, start + n)]


# =============================================================================
# Column Storage
# =============================================================================

class ColumnArray:
    """
    Growable homogeneous column of one value kind.

    Attributes:
        value_type (ValueType): Declared kind
        size (int): Number of cells
    """

    __slots__ = ('_vt', '_data', '_size')

    def __init__(self, value_type: ValueType, capacity: int = 0):
        self._vt = value_type
        self._data = self._allocate(max(int(capacity), 0))
        self._size = 0

    def _allocate(self, capacity: int) -> np.ndarray:
        if self._vt is ValueType.STRING:
            return np.full(capacity, None, dtype=object)
        return np.zeros(capacity, dtype=self._vt.numpy_dtype)

    @classmethod
    def from_values(cls, value_type: ValueType, values: Sequence[Any]) -> 'ColumnArray':
        """Build a column from a sequence, coercing each value to the kind."""
        if value_type is not ValueType.STRING and isinstance(values, np.ndarray) \
                and values.dtype.kind in 'biuf':
            if value_type is ValueType.INT and values.dtype.kind == 'f':
                bad = ~(np.isfinite(values) & (np.abs(values) < _INT_LIMIT))
                if bad.any():
                    k = int(np.argmax(bad))
                    value = float(values[k])
                    raise TypeCoercionError(
                        f"Cannot store {value!r} in a {value_type.value} column",
                        row=k, value=value,
                    )
            col = cls(value_type, 0)
            col._data = values.astype(value_type.numpy_dtype, copy=True)
            col._size = col._data.shape[0]
            return col
        col = cls(value_type, len(values))
        for value in values:
            col.append(value)
        return col

    @property
    def value_type(self) -> ValueType:
        return self._vt

    @property
    def size(self) -> int:
        return self._size

    def values(self) -> np.ndarray:
        """Typed view of the populated cells."""
        return self._data[:self._size]

    def _to_storage(self, value: Any) -> Any:
        try:
            if isinstance(value, str):
                value = self._vt.from_string(value)
            return self._vt.coerce(value)
        except (TypeError, ValueError, OverflowError) as e:
            raise TypeCoercionError(
                f"Cannot store {value!r} in a {self._vt.value} column", value=value,
            ) from e

    def _ensure_capacity(self, required: int) -> None:
        capacity = self._data.shape[0]
        if required <= capacity:
            return
        new = self._allocate(max(required, 2 * capacity, 4))
        new[:self._size] = self._data[:self._size]
        self._data = new

    def get(self, i: int) -> Any:
        value = self._data[i]
        if self._vt is ValueType.STRING:
            return value
        if self._vt is ValueType.DOUBLE:
            return float(value)
        if self._vt is ValueType.INT:
            return int(value)
        return bool(value)

    def set(self, i: int, value: Any) -> None:
        self._data[i] = self._to_storage(value)

    def append(self, value: Any) -> None:
        stored = self._to_storage(value)
        self._ensure_capacity(self._size + 1)
        self._data[self._size] = stored
        self._size += 1

    def resize(self, size: int) -> None:
        """Grow with default cells, or truncate."""
        self._ensure_capacity(size)
        if size < self._size:
            self._data[size:self._size] = self._vt.default
        self._size = size

    def copy(self) -> 'ColumnArray':
        col = ColumnArray(self._vt, 0)
        col._data = self.values().copy()
        col._size = self._size
        return col

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return f"ColumnArray({self._vt.value}, size={self._size})"


# =============================================================================
# Frame Block
# =============================================================================

class FrameBlock(BlockBase):
    """
    Columnar table with a declared value kind per column.

    Attributes:
        shape (Tuple[int, int]): Dimensions (rows, cols)
        schema (List[ValueType]): Kind per column
        column_names (List[str]): Name per column

    Invariants:
        - ``len(schema) == cols == len(column_names)``
        - every column holds exactly ``rows`` cells
    """

    def __init__(
        self,
        schema: Optional[Sequence[Union[str, ValueType]]] = None,
        names: Optional[Sequence[str]] = None,
        data: Optional[Sequence[Sequence[Any]]] = None,
    ):
        """
        Create a frame.

        Args:
            schema: Kind per column (empty frame if None)
            names: Column names (defaults to C1..Cn)
            data: Optional rows to append; string cells are parsed per kind
        """
        self._schema: List[ValueType] = normalize_schema(schema or [])
        n = len(self._schema)
        if names is None:
            self._names = default_column_names(n)
        else:
            if len(names) != n:
                raise ValueError(f"Got {len(names)} column names for {n} columns")
            self._names = [str(name) for name in names]
        self._columns: List[ColumnArray] = [
            ColumnArray(vt, len(data) if data is not None else 0) for vt in self._schema
        ]
        self._rows = 0

        if data is not None:
            for row in data:
                self.append_row(row)

    @classmethod
    def from_columns(
        cls,
        schema: Sequence[Union[str, ValueType]],
        columns: Sequence[Sequence[Any]],
        names: Optional[Sequence[str]] = None,
    ) -> 'FrameBlock':
        """Create a frame from whole columns (each copied and coerced)."""
        schema = normalize_schema(schema)
        if len(columns) != len(schema):
            raise ValueError(f"Got {len(columns)} columns for a schema of {len(schema)}")
        frame = cls(schema, names)
        lengths = {len(col) for col in columns}
        if len(lengths) > 1:
            raise ValueError(f"Columns have differing lengths: {sorted(lengths)}")
        frame._columns = [ColumnArray.from_values(vt, col) for vt, col in zip(schema, columns)]
        frame._rows = lengths.pop() if lengths else 0
        return frame

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def shape(self) -> Tuple[int, int]:
        return (self._rows, len(self._schema))

    @property
    def schema(self) -> List[ValueType]:
        return list(self._schema)

    @property
    def column_names(self) -> List[str]:
        return list(self._names)

    @column_names.setter
    def column_names(self, names: Sequence[str]) -> None:
        if len(names) != len(self._schema):
            raise ValueError(f"Got {len(names)} column names for {len(self._schema)} columns")
        self._names = [str(name) for name in names]

    def is_homogeneous(self, vt: ValueType = ValueType.DOUBLE) -> bool:
        """True if every column has kind ``vt``."""
        return all(v is vt for v in self._schema)

    # -------------------------------------------------------------------------
    # Cell / Column Access
    # -------------------------------------------------------------------------

    def _check_index(self, i: int, j: int) -> None:
        if not (0 <= i < self._rows and 0 <= j < len(self._schema)):
            raise IndexError(f"Cell ({i}, {j}) out of bounds for shape {self.shape}")

    def get(self, i: int, j: int) -> Any:
        self._check_index(i, j)
        return self._columns[j].get(i)

    def set(self, i: int, j: int, value: Any) -> None:
        self._check_index(i, j)
        self._columns[j].set(i, value)

    def get_column(self, j: int) -> np.ndarray:
        """Typed array of column ``j`` (view, do not mutate)."""
        if not 0 <= j < len(self._schema):
            raise IndexError(f"Column {j} out of bounds for {len(self._schema)} columns")
        return self._columns[j].values()

    # -------------------------------------------------------------------------
    # Appending
    # -------------------------------------------------------------------------

    def append_row(self, row: Sequence[Any]) -> None:
        """Append one row; None cells become the column kind's null."""
        if len(row) != len(self._schema):
            raise ValueError(f"Row has {len(row)} cells, frame has {len(self._schema)} columns")
        for j, (col, value) in enumerate(zip(self._columns, row)):
            try:
                col.append(value)
            except TypeCoercionError as e:
                # keep columns aligned
                for prev in self._columns[:j]:
                    prev.resize(self._rows)
                e.row, e.col = self._rows, j
                raise
        self._rows += 1

    def append_column(
        self,
        values: Sequence[Any],
        value_type: Union[str, ValueType] = ValueType.DOUBLE,
        name: Optional[str] = None,
    ) -> None:
        """Append one column; its length must match the row count of a non-empty frame."""
        vt = normalize_value_type(value_type)
        if self._schema and len(values) != self._rows:
            raise ValueError(f"Column has {len(values)} cells, frame has {self._rows} rows")
        self._columns.append(ColumnArray.from_values(vt, values))
        self._schema.append(vt)
        self._names.append(name if name is not None else f"C{len(self._schema)}")
        self._rows = len(values)

    def reset(self) -> None:
        """Drop all rows, keep schema and names."""
        self._columns = [ColumnArray(vt) for vt in self._schema]
        self._rows = 0

    # -------------------------------------------------------------------------
    # Iteration
    # -------------------------------------------------------------------------

    def _row_range(self, start: int, end: Optional[int]) -> range:
        end = self._rows if end is None else min(end, self._rows)
        return range(max(start, 0), end)

    def iter_rows(self, start: int = 0, end: Optional[int] = None) -> Iterator[List[Any]]:
        """Yield rows [start, end) as lists of cell objects."""
        for i in self._row_range(start, end):
            yield [col.get(i) for col in self._columns]

    def iter_string_rows(self, start: int = 0, end: Optional[int] = None) -> Iterator[List[Optional[str]]]:
        """Yield rows [start, end) as lists of cell texts (None for null)."""
        for i in self._row_range(start, end):
            yield [vt.to_string(col.get(i)) for vt, col in zip(self._schema, self._columns)]

    # -------------------------------------------------------------------------
    # Copy / Representation
    # -------------------------------------------------------------------------

    def copy(self) -> 'FrameBlock':
        new = FrameBlock(self._schema, self._names)
        new._columns = [col.copy() for col in self._columns]
        new._rows = self._rows
        return new

    def __repr__(self) -> str:
        return (f"FrameBlock(shape={self.shape}, "
                f"schema=[{', '.join(vt.value for vt in self._schema)}])")
