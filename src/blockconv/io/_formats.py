"""
Storage Formats and Descriptors

Format tags and the metadata records passed across the storage boundary.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

from .._config import config

__all__ = [
    'FileFormat',
    'TEXT_CELL',
    'MATRIX_MARKET',
    'BINARY_CELL',
    'BINARY_BLOCK',
    'normalize_format',
    'MatrixCharacteristics',
    'ReadProperties',
]

PathLike = Union[str, os.PathLike]


class FileFormat(Enum):
    """On-disk matrix formats understood by the reader/writer registry."""

    TEXT_CELL = 'textcell'          # "i j v" per line, 1-indexed
    MATRIX_MARKET = 'mm'            # NIST Matrix Market exchange format
    BINARY_CELL = 'binarycell'      # engine-provided
    BINARY_BLOCK = 'binaryblock'    # engine-provided

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"FileFormat.{self.name}"


TEXT_CELL = FileFormat.TEXT_CELL
MATRIX_MARKET = FileFormat.MATRIX_MARKET
BINARY_CELL = FileFormat.BINARY_CELL
BINARY_BLOCK = FileFormat.BINARY_BLOCK

_ALIASES = {
    'text': FileFormat.TEXT_CELL,
    'text_cell': FileFormat.TEXT_CELL,
    'matrix_market': FileFormat.MATRIX_MARKET,
    'mtx': FileFormat.MATRIX_MARKET,
    'binary_cell': FileFormat.BINARY_CELL,
    'binary': FileFormat.BINARY_BLOCK,
    'binary_block': FileFormat.BINARY_BLOCK,
}


def normalize_format(fmt: Union[str, FileFormat]) -> FileFormat:
    """
    Convert a format tag or name to FileFormat.

    Raises:
        ValueError: If the name is not a known format
    """
    if isinstance(fmt, FileFormat):
        return fmt
    if isinstance(fmt, str):
        key = fmt.lower()
        if key in _ALIASES:
            return _ALIASES[key]
        try:
            return FileFormat(key)
        except ValueError:
            pass
    raise ValueError(f"Unknown file format: {fmt!r}")


def _default_rows_per_block() -> int:
    return config.io.rows_per_block


def _default_cols_per_block() -> int:
    return config.io.cols_per_block


@dataclass
class MatrixCharacteristics:
    """Dimensions, blocking and non-zero count of a stored matrix (-1 = unknown)."""
    rows: int = -1
    cols: int = -1
    rows_per_block: int = field(default_factory=_default_rows_per_block)
    cols_per_block: int = field(default_factory=_default_cols_per_block)
    nnz: int = -1

    @classmethod
    def of(cls, mb, rows_per_block: Optional[int] = None,
           cols_per_block: Optional[int] = None) -> 'MatrixCharacteristics':
        """Characteristics describing an in-memory matrix block."""
        mc = cls(mb.rows, mb.cols, nnz=mb.nnz)
        if rows_per_block is not None:
            mc.rows_per_block = rows_per_block
        if cols_per_block is not None:
            mc.cols_per_block = cols_per_block
        return mc


@dataclass
class ReadProperties:
    """Everything a reader needs to materialize one stored matrix."""
    path: PathLike
    format: Union[str, FileFormat] = FileFormat.TEXT_CELL
    rows: int = -1
    cols: int = -1
    rows_per_block: int = field(default_factory=_default_rows_per_block)
    cols_per_block: int = field(default_factory=_default_cols_per_block)
    expected_sparsity: float = field(default_factory=lambda: config.io.expected_sparsity)
    format_properties: Optional[Dict[str, Any]] = None

    @property
    def estimated_nnz(self) -> int:
        """Capacity hint: ``expected_sparsity * rows * cols`` (0 if unknown)."""
        if self.rows < 0 or self.cols < 0:
            return 0
        return int(self.expected_sparsity * self.rows * self.cols)
