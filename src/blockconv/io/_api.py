"""
Matrix Read / Write Entry Points

Every failure below the boundary (missing file, malformed content,
unknown format, reader or writer exception) reaches the caller as a
``ConversionIOError`` with the original exception chained as its cause.
"""

import logging
from typing import Any, Dict, Optional, Union

from ..data import MatrixBlock
from ..error import ConversionIOError
from ._formats import FileFormat, MatrixCharacteristics, PathLike, ReadProperties, normalize_format
from ._registry import create_matrix_reader, create_matrix_writer

__all__ = ['read_matrix', 'read_matrix_props', 'write_matrix']

logger = logging.getLogger("blockconv.io")


def read_matrix_props(props: ReadProperties) -> MatrixBlock:
    """
    Read a matrix described by ``props``.

    Raises:
        ConversionIOError: On any failure, with the cause chained
    """
    try:
        reader = create_matrix_reader(props)
        mb = reader.read_matrix(
            props.path,
            props.rows,
            props.cols,
            props.rows_per_block,
            props.cols_per_block,
            props.estimated_nnz,
        )
    except ConversionIOError:
        logger.warning("read_matrix failed for %s", props.path)
        raise
    except Exception as e:
        logger.warning("read_matrix failed for %s: %s", props.path, e)
        raise ConversionIOError(f"Failed to read matrix from {props.path}: {e}") from e

    logger.info("read %r from %s (%s)", mb, props.path, props.format)
    return mb


def read_matrix(
    path: PathLike,
    fmt: Union[str, FileFormat] = FileFormat.TEXT_CELL,
    rows: int = -1,
    cols: int = -1,
    rows_per_block: Optional[int] = None,
    cols_per_block: Optional[int] = None,
    expected_sparsity: Optional[float] = None,
    format_properties: Optional[Dict[str, Any]] = None,
) -> MatrixBlock:
    """
    Read a matrix from storage.

    Args:
        path: Source location
        fmt: Storage format
        rows, cols: Expected dimensions (-1 = take from the data)
        rows_per_block, cols_per_block: Blocking (default: ``config.io``)
        expected_sparsity: Fraction of non-zeros used to size the result
            (default: ``config.io.expected_sparsity``)
        format_properties: Format-specific options passed to the reader

    Raises:
        ConversionIOError: On any failure, with the cause chained
    """
    props = ReadProperties(path, fmt, rows, cols, format_properties=format_properties)
    if rows_per_block is not None:
        props.rows_per_block = rows_per_block
    if cols_per_block is not None:
        props.cols_per_block = cols_per_block
    if expected_sparsity is not None:
        props.expected_sparsity = expected_sparsity
    return read_matrix_props(props)


def write_matrix(
    mb: MatrixBlock,
    path: PathLike,
    fmt: Union[str, FileFormat] = FileFormat.TEXT_CELL,
    mc: Optional[MatrixCharacteristics] = None,
    replication: int = -1,
    format_properties: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Write a matrix block to storage.

    Args:
        mb: Block to persist (not modified)
        path: Target location
        fmt: Storage format
        mc: Stored characteristics (default: taken from ``mb``)
        replication: Replication factor hint (-1 = storage default)
        format_properties: Format-specific options passed to the writer

    Raises:
        ConversionIOError: On any failure, with the cause chained
    """
    if mc is None:
        mc = MatrixCharacteristics.of(mb)
    try:
        fmt = normalize_format(fmt)
        writer = create_matrix_writer(fmt, replication, format_properties)
        writer.write_matrix(mb, path, mc.rows, mc.cols, mc.rows_per_block, mc.cols_per_block, mc.nnz)
    except ConversionIOError:
        logger.warning("write_matrix failed for %s", path)
        raise
    except Exception as e:
        logger.warning("write_matrix failed for %s: %s", path, e)
        raise ConversionIOError(f"Failed to write matrix to {path}: {e}") from e

    logger.info("wrote %r to %s (%s)", mb, path, fmt)
