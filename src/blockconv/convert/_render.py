"""Diagnostic Text Rendering.

Renders matrix blocks and frames as bounded, human-readable text.

Matrix Layouts:
    - Rectangular: one line per row, cells joined by ``separator``
    - Coordinate (``sparse=True``): one ``"row col value"`` line per
      non-zero cell, 1-indexed

Frame Layout::

    # FRAME: nrow = R, ncol = C
    # <sep> name1 <sep> name2 ...
    # <sep> KIND1 <sep> KIND2 ...
    cell <sep> cell ...

Number Formatting:
    Doubles are printed in fixed-point with at least ``decimal`` and at
    most ``max(3, decimal)`` fraction digits, rounded half-to-even and
    without digit grouping. ``decimal=-1`` prints up to 3 fraction digits
    with trailing zeros removed.

Example:
    >>> mb = from_coordinate_map({(2, 2): 7.0}, rows=2, cols=2)
    >>> to_string(mb, sparse=True)
    '2 2 7.000\\n'
"""

import logging
from dataclasses import dataclass, replace
from decimal import Context, Decimal, ROUND_HALF_EVEN
from typing import Optional, Union

from .._config import config
from ..data import MatrixBlock, FrameBlock, ValueType

__all__ = [
    'RenderOptions',
    'format_decimal',
    'to_string',
]

logger = logging.getLogger("blockconv.convert")

_MIN_MAX_FRACTION_DIGITS = 3


# =============================================================================
# Options
# =============================================================================

@dataclass(frozen=True)
class RenderOptions:
    """Rendering options; unset fields come from ``config.render``."""
    sparse: bool = False           # coordinate triples instead of a grid
    separator: str = " "
    line_separator: str = "\n"
    rows_to_print: int = -1        # -1 = all
    cols_to_print: int = -1        # -1 = all
    decimal: int = 3               # -1 = default formatting

    @classmethod
    def from_config(cls, **overrides) -> 'RenderOptions':
        """Options seeded from the active render configuration."""
        rc = config.render
        base = cls(
            sparse=False,
            separator=rc.separator,
            line_separator=rc.line_separator,
            rows_to_print=rc.rows_to_print,
            cols_to_print=rc.cols_to_print,
            decimal=rc.decimal,
        )
        return replace(base, **overrides) if overrides else base


# =============================================================================
# Number Formatting
# =============================================================================

def format_decimal(value: float, decimal: int = 3) -> str:
    """
    Format a double in fixed-point notation.

    Args:
        value: Number to format
        decimal: Minimum fraction digits (-1 for none)

    Returns:
        Text such as ``'7.000'``, ``'0.125'``, ``'NaN'`` or ``'-Infinity'``
    """
    value = float(value)
    if value != value:
        return 'NaN'
    if value == float('inf'):
        return 'Infinity'
    if value == float('-inf'):
        return '-Infinity'

    min_frac = max(decimal, 0)
    max_frac = max(_MIN_MAX_FRACTION_DIGITS, min_frac)

    # exact decimal of the shortest repr, wide enough for any double
    ctx = Context(prec=max(400, 330 + max_frac))
    quantized = Decimal(repr(value)).quantize(
        Decimal(1).scaleb(-max_frac), rounding=ROUND_HALF_EVEN, context=ctx
    )
    text = format(quantized, 'f')
    if max_frac == min_frac:
        return text

    int_part, _, frac = text.partition('.')
    frac = frac.rstrip('0').ljust(min_frac, '0')
    return f"{int_part}.{frac}" if frac else int_part


# =============================================================================
# Rendering
# =============================================================================

def _limit(requested: int, available: int) -> int:
    return available if requested < 0 else min(requested, available)


def _matrix_to_string(mb: MatrixBlock, o: RenderOptions) -> str:
    rows, cols = mb.shape
    row_len = _limit(o.rows_to_print, rows)
    col_len = _limit(o.cols_to_print, cols)
    sep, lsep = o.separator, o.line_separator
    parts = []

    if o.sparse:
        if mb.is_sparse:
            cells = ((i, j, v) for i, j, v in mb.iter_nonzeros()
                     if i < row_len and j < col_len)
        else:
            cells = ((i, j, mb.quick_get_value(i, j))
                     for i in range(row_len) for j in range(col_len))
        for i, j, v in cells:
            if v != 0:
                parts.append(f"{i + 1}{sep}{j + 1}{sep}{format_decimal(v, o.decimal)}{lsep}")
    else:
        for i in range(row_len):
            parts.append(sep.join(
                format_decimal(mb.quick_get_value(i, j), o.decimal) for j in range(col_len)
            ))
            parts.append(lsep)
    return "".join(parts)


def _frame_cell(vt: ValueType, value, decimal: int) -> str:
    if value is None:
        return ""
    if vt is ValueType.DOUBLE:
        return format_decimal(value, decimal)
    return vt.to_string(value)


def _frame_to_string(frame: FrameBlock, o: RenderOptions) -> str:
    rows, cols = frame.shape
    row_len = _limit(o.rows_to_print, rows)
    col_len = _limit(o.cols_to_print, cols)
    sep, lsep = o.separator, o.line_separator
    schema = frame.schema[:col_len]

    parts = [
        f"# FRAME: nrow = {rows}, ncol = {cols}{lsep}",
        "#" + sep + sep.join(frame.column_names[:col_len]) + lsep,
        "#" + sep + sep.join(str(vt) for vt in schema) + lsep,
    ]
    for row in frame.iter_rows(0, row_len):
        parts.append(sep.join(_frame_cell(vt, row[j], o.decimal) for j, vt in enumerate(schema)))
        parts.append(lsep)
    return "".join(parts)


def to_string(
    block: Union[MatrixBlock, FrameBlock],
    options: Optional[RenderOptions] = None,
    **overrides,
) -> str:
    """
    Render a matrix block or frame as text.

    Args:
        block: Matrix block or frame (not modified)
        options: Full option set (default: from ``config.render``)
        **overrides: Individual ``RenderOptions`` fields, e.g. ``sparse=True``

    Raises:
        TypeError: If ``block`` is neither a matrix block nor a frame
    """
    opts = options if options is not None else RenderOptions.from_config()
    if overrides:
        opts = replace(opts, **overrides)

    if isinstance(block, MatrixBlock):
        return _matrix_to_string(block, opts)
    if isinstance(block, FrameBlock):
        return _frame_to_string(block, opts)
    raise TypeError(f"Cannot render {type(block).__name__}")
