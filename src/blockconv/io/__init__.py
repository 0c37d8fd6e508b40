"""blockconv Storage Boundary.

Reads and writes matrix blocks through a pluggable registry of
format-specific readers and writers.

Built-in Formats:
    - TEXT_CELL: ``"i j v"`` per non-zero cell, 1-indexed
    - MATRIX_MARKET: via ``scipy.io``

BINARY_CELL and BINARY_BLOCK have no built-in implementation; the
engine registers them with ``register_reader`` / ``register_writer``.

Example:
    >>> from blockconv.io import write_matrix, read_matrix, TEXT_CELL
    >>> write_matrix(mb, "X.txt", TEXT_CELL)
    >>> mb2 = read_matrix("X.txt", TEXT_CELL, rows=mb.rows, cols=mb.cols)
"""

from ._formats import (
    FileFormat,
    TEXT_CELL,
    MATRIX_MARKET,
    BINARY_CELL,
    BINARY_BLOCK,
    normalize_format,
    MatrixCharacteristics,
    ReadProperties,
)
from ._registry import (
    MatrixReader,
    MatrixWriter,
    register_reader,
    register_writer,
    create_matrix_reader,
    create_matrix_writer,
    registered_formats,
)
from ._text import TextCellReader, TextCellWriter, MatrixMarketReader, MatrixMarketWriter
from ._api import read_matrix, read_matrix_props, write_matrix

__all__ = [
    # ---- Formats ----
    'FileFormat',
    'TEXT_CELL',
    'MATRIX_MARKET',
    'BINARY_CELL',
    'BINARY_BLOCK',
    'normalize_format',
    'MatrixCharacteristics',
    'ReadProperties',

    # ---- Registry ----
    'MatrixReader',
    'MatrixWriter',
    'register_reader',
    'register_writer',
    'create_matrix_reader',
    'create_matrix_writer',
    'registered_formats',

    # ---- Built-in Formats ----
    'TextCellReader',
    'TextCellWriter',
    'MatrixMarketReader',
    'MatrixMarketWriter',

    # ---- Entry Points ----
    'read_matrix',
    'read_matrix_props',
    'write_matrix',
]
