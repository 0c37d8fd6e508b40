"""
Value Kind Definitions

Provides the closed set of per-column value kinds used by frame schemas,
together with the conversions between each kind and the engine's
double-precision cell values.
"""

from typing import Any, List, Optional, Sequence, Union
from enum import Enum

import numpy as np

from ..error import TypeCoercionError

__all__ = [
    'ValueType', 'STRING', 'DOUBLE', 'INT', 'BOOLEAN',
    'normalize_value_type', 'normalize_schema', 'n_copies', 'frequency',
    'double_to_text',
]


def double_to_text(value: float) -> str:
    """Shortest round-trip text of a double ('1.0', '0.25', 'NaN')."""
    value = float(value)
    if value != value:
        return 'NaN'
    if value == float('inf'):
        return 'Infinity'
    if value == float('-inf'):
        return '-Infinity'
    return repr(value)


_INT_LIMIT = 2.0 ** 63
_INT_MAX = 2 ** 63 - 1
_INT_MIN = -2 ** 63


def _text_to_bool(text: str) -> bool:
    return text.strip().lower() == 'true'


def _parse_double(text: str) -> float:
    # float() also accepts digit-group underscores ('1_000'); cell text may not
    if '_' in text:
        raise ValueError(f"could not convert string to float: {text!r}")
    return float(text)


def _parse_int(text: str) -> int:
    text = text.strip()
    if '_' in text:
        raise ValueError(f"invalid literal for int(): {text!r}")
    return int(text)


class ValueType(Enum):
    """
    Frame Value Kind Enumeration.

    Every frame column declares exactly one kind. All conversions between
    a cell and a double dispatch on this tag.

    Example:
        >>> from blockconv.data import ValueType
        >>> ValueType.STRING.to_double("2.5")
        2.5
        >>> ValueType.BOOLEAN.from_double(3.0)
        True
    """

    STRING = 'STRING'
    DOUBLE = 'DOUBLE'
    INT = 'INT'
    BOOLEAN = 'BOOLEAN'

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"ValueType.{self.name}"

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------

    @property
    def numpy_dtype(self):
        """numpy dtype used for columnar storage of this kind."""
        return _NUMPY_DTYPES[self]

    @property
    def default(self) -> Any:
        """Value stored when a cell is set to null."""
        return _DEFAULTS[self]

    @property
    def is_numeric(self) -> bool:
        return self in (ValueType.DOUBLE, ValueType.INT)

    def coerce(self, value: Any) -> Any:
        """Convert an incoming cell value to this kind's storage type."""
        if value is None:
            return self.default
        if self is ValueType.STRING:
            return value if isinstance(value, str) else self.to_string(value)
        if self is ValueType.BOOLEAN:
            if isinstance(value, str):
                return _text_to_bool(value)
            return bool(value)
        if self is ValueType.INT:
            if isinstance(value, str):
                return _parse_int(value)
            return int(value)
        return _parse_double(value) if isinstance(value, str) else float(value)

    # -------------------------------------------------------------------------
    # Double Conversions
    # -------------------------------------------------------------------------

    def to_double(self, value: Any) -> float:
        """
        Interpret a cell of this kind as a double.

        Null cells map to 0. Strings are parsed (an empty string is 0),
        booleans map to 1/0, integers widen.

        Raises:
            TypeCoercionError: If the value has no numeric interpretation
        """
        if value is None:
            return 0.0
        try:
            if self is ValueType.STRING:
                text = str(value)
                return _parse_double(text) if text else 0.0
            if self is ValueType.BOOLEAN:
                if isinstance(value, str):
                    return 1.0 if _text_to_bool(value) else 0.0
                return 1.0 if value else 0.0
            return _parse_double(value) if isinstance(value, str) else float(value)
        except (TypeError, ValueError) as e:
            raise TypeCoercionError(
                f"Cannot interpret {value!r} of kind {self.value} as a double",
                value=value,
            ) from e

    def from_double(self, value: float) -> Any:
        """Decode a double into a value of this kind."""
        if self is ValueType.DOUBLE:
            return float(value)
        if self is ValueType.BOOLEAN:
            return value != 0.0
        if self is ValueType.INT:
            if value != value:
                return 0
            # saturate at the int64 bounds
            if value >= _INT_LIMIT:
                return _INT_MAX
            if value < -_INT_LIMIT:
                return _INT_MIN
            return int(value)
        return double_to_text(value)

    # -------------------------------------------------------------------------
    # Text Conversions
    # -------------------------------------------------------------------------

    def to_string(self, value: Any) -> Optional[str]:
        """Textual form of a cell; None stays None."""
        if value is None:
            return None
        if self is ValueType.BOOLEAN:
            return 'true' if value else 'false'
        if self is ValueType.DOUBLE:
            return double_to_text(value)
        if self is ValueType.INT:
            return str(int(value))
        return str(value)

    def from_string(self, text: Optional[str]) -> Any:
        """
        Parse a textual cell into this kind; None stays None.

        Raises:
            TypeCoercionError: If the text cannot be parsed
        """
        if text is None:
            return None
        try:
            return self.coerce(text)
        except (TypeError, ValueError) as e:
            raise TypeCoercionError(
                f"Cannot parse {text!r} as {self.value}", value=text,
            ) from e


_NUMPY_DTYPES = {
    ValueType.STRING: np.dtype(object),
    ValueType.DOUBLE: np.dtype(np.float64),
    ValueType.INT: np.dtype(np.int64),
    ValueType.BOOLEAN: np.dtype(np.bool_),
}

_DEFAULTS = {
    ValueType.STRING: None,
    ValueType.DOUBLE: 0.0,
    ValueType.INT: 0,
    ValueType.BOOLEAN: False,
}

_ALIASES = {
    'STRING': ValueType.STRING, 'STR': ValueType.STRING,
    'DOUBLE': ValueType.DOUBLE, 'FP64': ValueType.DOUBLE, 'FLOAT64': ValueType.DOUBLE,
    'INT': ValueType.INT, 'INT64': ValueType.INT, 'LONG': ValueType.INT,
    'BOOLEAN': ValueType.BOOLEAN, 'BOOL': ValueType.BOOLEAN,
}


# =============================================================================
# Module-Level Constants (For Clean Syntax)
# =============================================================================

STRING = ValueType.STRING
DOUBLE = ValueType.DOUBLE
INT = ValueType.INT
BOOLEAN = ValueType.BOOLEAN


# =============================================================================
# Schema Utilities
# =============================================================================

def normalize_value_type(vt: Union[str, ValueType]) -> ValueType:
    """
    Normalize a kind given as enum or name.

    Example:
        >>> normalize_value_type('double')
        ValueType.DOUBLE
    """
    if isinstance(vt, ValueType):
        return vt
    if isinstance(vt, str):
        try:
            return _ALIASES[vt.strip().upper()]
        except KeyError:
            raise ValueError(
                f"Invalid value type: {vt}. Valid: {[v.value for v in ValueType]}"
            ) from None
    raise TypeError(f"value type must be str or ValueType, got {type(vt)}")


def normalize_schema(schema: Sequence[Union[str, ValueType]]) -> List[ValueType]:
    return [normalize_value_type(vt) for vt in schema]


def n_copies(n: int, vt: Union[str, ValueType]) -> List[ValueType]:
    """Schema of ``n`` columns of the same kind."""
    return [normalize_value_type(vt)] * n


def frequency(schema: Sequence[ValueType], vt: ValueType) -> int:
    """Number of columns of kind ``vt`` in ``schema``."""
    return sum(1 for v in schema if v is vt)
