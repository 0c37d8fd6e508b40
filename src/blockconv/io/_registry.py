"""
Reader / Writer Registry

Maps each FileFormat to a factory producing a reader or writer. The
text formats register themselves on import; binary formats are supplied
by the engine through ``register_reader`` / ``register_writer``.

Factory Signatures:
    reader factory: ``(props: ReadProperties) -> MatrixReader``
    writer factory: ``(replication: int, format_properties: dict | None) -> MatrixWriter``
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Union

from ..data import MatrixBlock
from ..error import ConversionIOError, BC_ERROR_UNKNOWN_FORMAT
from ._formats import FileFormat, PathLike, ReadProperties, normalize_format

__all__ = [
    'MatrixReader',
    'MatrixWriter',
    'ReaderFactory',
    'WriterFactory',
    'register_reader',
    'register_writer',
    'create_matrix_reader',
    'create_matrix_writer',
    'registered_formats',
]

logger = logging.getLogger("blockconv.io")


# =============================================================================
# Reader / Writer Interfaces
# =============================================================================

class MatrixReader(ABC):
    """Reads one stored matrix into a matrix block."""

    @abstractmethod
    def read_matrix(
        self,
        path: PathLike,
        rows: int,
        cols: int,
        rows_per_block: int,
        cols_per_block: int,
        estimated_nnz: int,
    ) -> MatrixBlock:
        """
        Materialize the matrix stored at ``path``.

        Args:
            path: Source location
            rows, cols: Expected dimensions (-1 = take from the data)
            rows_per_block, cols_per_block: Blocking of the stored data
            estimated_nnz: Capacity hint for the result
        """


class MatrixWriter(ABC):
    """Writes one matrix block to storage."""

    def __init__(self, replication: int = -1, format_properties: Optional[Dict[str, Any]] = None):
        self.replication = replication
        self.format_properties = dict(format_properties or {})

    @abstractmethod
    def write_matrix(
        self,
        mb: MatrixBlock,
        path: PathLike,
        rows: int,
        cols: int,
        rows_per_block: int,
        cols_per_block: int,
        nnz: int,
    ) -> None:
        """Persist ``mb`` at ``path``."""


ReaderFactory = Callable[[ReadProperties], MatrixReader]
WriterFactory = Callable[[int, Optional[Dict[str, Any]]], MatrixWriter]


# =============================================================================
# Registry
# =============================================================================

_lock = threading.Lock()
_readers: Dict[FileFormat, ReaderFactory] = {}
_writers: Dict[FileFormat, WriterFactory] = {}


def register_reader(fmt: Union[str, FileFormat], factory: ReaderFactory) -> Optional[ReaderFactory]:
    """Register the reader factory for a format; returns the one it replaces."""
    fmt = normalize_format(fmt)
    with _lock:
        previous = _readers.get(fmt)
        _readers[fmt] = factory
    logger.debug("registered reader for %s", fmt)
    return previous


def register_writer(fmt: Union[str, FileFormat], factory: WriterFactory) -> Optional[WriterFactory]:
    """Register the writer factory for a format; returns the one it replaces."""
    fmt = normalize_format(fmt)
    with _lock:
        previous = _writers.get(fmt)
        _writers[fmt] = factory
    logger.debug("registered writer for %s", fmt)
    return previous


def registered_formats() -> Dict[str, List[FileFormat]]:
    """Formats with a registered reader / writer."""
    with _lock:
        return {'readers': sorted(_readers, key=str), 'writers': sorted(_writers, key=str)}


def create_matrix_reader(props: ReadProperties) -> MatrixReader:
    """
    Create a reader for ``props.format``.

    Raises:
        ConversionIOError: If no reader is registered for the format
    """
    fmt = normalize_format(props.format)
    with _lock:
        factory = _readers.get(fmt)
    if factory is None:
        raise ConversionIOError.from_code(BC_ERROR_UNKNOWN_FORMAT, f"matrix reader '{fmt}'")
    return factory(props)


def create_matrix_writer(
    fmt: Union[str, FileFormat],
    replication: int = -1,
    format_properties: Optional[Dict[str, Any]] = None,
) -> MatrixWriter:
    """
    Create a writer for ``fmt``.

    Raises:
        ConversionIOError: If no writer is registered for the format
    """
    fmt = normalize_format(fmt)
    with _lock:
        factory = _writers.get(fmt)
    if factory is None:
        raise ConversionIOError.from_code(BC_ERROR_UNKNOWN_FORMAT, f"matrix writer '{fmt}'")
    return factory(replication, format_properties)
