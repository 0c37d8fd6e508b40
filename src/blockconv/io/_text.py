"""
Built-in Text Formats

- Text cell: one ``"i j v"`` line per non-zero cell, 1-indexed
- Matrix Market: read and written through ``scipy.io``

Both readers honor known dimensions (``rows``/``cols`` >= 0) and take
them from the data otherwise.
"""

import logging
from typing import Dict, Optional, Tuple

import numpy as np

from ..data import MatrixBlock, double_to_text, evaluate_sparse_format
from ..error import ConversionIOError, BC_ERROR_DIMENSION_MISMATCH
from ..convert import from_double_matrix, from_scipy, to_scipy
from ._formats import FileFormat, PathLike, ReadProperties
from ._registry import MatrixReader, MatrixWriter, register_reader, register_writer

__all__ = [
    'TextCellReader',
    'TextCellWriter',
    'MatrixMarketReader',
    'MatrixMarketWriter',
]

logger = logging.getLogger("blockconv.io")


def _check_dimensions(mb: MatrixBlock, rows: int, cols: int, path: PathLike) -> None:
    if (rows >= 0 and mb.rows != rows) or (cols >= 0 and mb.cols != cols):
        raise ConversionIOError.from_code(
            BC_ERROR_DIMENSION_MISMATCH,
            f"{path}: stored matrix is {mb.rows}x{mb.cols}, expected {rows}x{cols}",
        )


# =============================================================================
# Text Cell
# =============================================================================

class TextCellReader(MatrixReader):
    """Reader for ``"i j v"`` cell files."""

    def __init__(self, props: Optional[ReadProperties] = None):
        self.props = props

    def read_matrix(self, path, rows, cols, rows_per_block, cols_per_block, estimated_nnz):
        # a repeated (i, j) keeps its last value
        cells: Dict[Tuple[int, int], float] = {}
        with open(path, 'r', encoding='utf-8') as fh:
            for lineno, line in enumerate(fh, start=1):
                line = line.strip()
                if not line:
                    continue
                fields = line.split()
                if len(fields) != 3:
                    raise ValueError(f"{path}:{lineno}: expected 'row col value', got {line!r}")
                cells[(int(fields[0]), int(fields[1]))] = float(fields[2])

        if rows < 0:
            rows = max((i for i, _ in cells), default=0)
        if cols < 0:
            cols = max((j for _, j in cells), default=0)
        for i, j in cells:
            if not (1 <= i <= rows and 1 <= j <= cols):
                raise ValueError(
                    f"{path}: cell ({i}, {j}) outside of {rows}x{cols}"
                )

        nnz_hint = max(estimated_nnz, len(cells))
        mb = MatrixBlock(rows, cols, sparse=evaluate_sparse_format(rows, cols, nnz_hint),
                         estimated_nnz=nnz_hint)
        if mb.is_sparse:
            for (i, j), v in cells.items():
                mb.append_value(i - 1, j - 1, v)
            mb.sort_sparse_rows()
        else:
            for (i, j), v in cells.items():
                mb.quick_set_value(i - 1, j - 1, v)
        mb.exam_sparsity()
        return mb


class TextCellWriter(MatrixWriter):
    """Writer for ``"i j v"`` cell files (non-zeros only)."""

    def write_matrix(self, mb, path, rows, cols, rows_per_block, cols_per_block, nnz):
        with open(path, 'w', encoding='utf-8') as fh:
            for i, j, v in mb.iter_nonzeros():
                fh.write(f"{i + 1} {j + 1} {double_to_text(v)}\n")


# =============================================================================
# Matrix Market
# =============================================================================

class MatrixMarketReader(MatrixReader):
    """Reader for Matrix Market files (coordinate or array)."""

    def __init__(self, props: Optional[ReadProperties] = None):
        self.props = props

    def read_matrix(self, path, rows, cols, rows_per_block, cols_per_block, estimated_nnz):
        import scipy.io
        import scipy.sparse as sp

        with open(path, 'rb') as fh:
            data = scipy.io.mmread(fh)
        if sp.issparse(data):
            mb = from_scipy(data)
        else:
            mb = from_double_matrix(np.asarray(data, dtype=np.float64))
        _check_dimensions(mb, rows, cols, path)
        return mb


class MatrixMarketWriter(MatrixWriter):
    """Writer for Matrix Market coordinate files."""

    def write_matrix(self, mb, path, rows, cols, rows_per_block, cols_per_block, nnz):
        import scipy.io

        comment = self.format_properties.get('comment', '')
        with open(path, 'wb') as fh:
            scipy.io.mmwrite(fh, to_scipy(mb), comment=comment)


register_reader(FileFormat.TEXT_CELL, TextCellReader)
register_writer(FileFormat.TEXT_CELL, TextCellWriter)
register_reader(FileFormat.MATRIX_MARKET, MatrixMarketReader)
register_writer(FileFormat.MATRIX_MARKET, MatrixMarketWriter)
