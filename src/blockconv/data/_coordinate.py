"""
Coordinate Maps

Sparse accumulation structures keyed by 1-indexed ``(row, col)`` pairs.

Any ``Mapping[Tuple[int, int], float]`` (a plain dict included) is a valid
coordinate map for materialization. ``CTableMap`` is the cross-tabulation
variant: it accumulates weights per cell and tracks the largest row and
column index seen, which serve as the default dimensions.

Example:
    >>> ctable = CTableMap()
    >>> ctable.aggregate(1, 2, 1.0)
    >>> ctable.aggregate(1, 2, 2.0)
    >>> ctable.aggregate(3, 1, 4.0)
    >>> ctable[(1, 2)], ctable.max_row, ctable.max_column
    (3.0, 3, 2)
"""

from collections.abc import Mapping
from typing import Dict, Iterator, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from ._matrix import MatrixBlock

__all__ = ['CellIndex', 'CTableMap', 'infer_dimensions']

CellIndex = Tuple[int, int]


def infer_dimensions(mapping: Mapping) -> Tuple[int, int]:
    """Dimensions implied by a coordinate map: (max row, max col), 0 if empty."""
    if isinstance(mapping, CTableMap):
        return mapping.max_row, mapping.max_column
    rows = cols = 0
    for row, col in mapping.keys():
        if row > rows:
            rows = row
        if col > cols:
            cols = col
    return int(rows), int(cols)


class CTableMap(Mapping):
    """
    Cross-tabulation map: (row, col) -> accumulated weight, 1-indexed.

    Attributes:
        max_row (int): Largest row index aggregated so far
        max_column (int): Largest column index aggregated so far
    """

    def __init__(self):
        self._cells: Dict[CellIndex, float] = {}
        self._max_row = 0
        self._max_column = 0

    def aggregate(self, row: int, col: int, weight: float) -> None:
        """Add ``weight`` to cell (row, col)."""
        key = (int(row), int(col))
        self._cells[key] = self._cells.get(key, 0.0) + float(weight)
        if key[0] > self._max_row:
            self._max_row = key[0]
        if key[1] > self._max_column:
            self._max_column = key[1]

    @property
    def max_row(self) -> int:
        return self._max_row

    @property
    def max_column(self) -> int:
        return self._max_column

    def to_matrix_block(self, rows: Optional[int] = None, cols: Optional[int] = None) -> 'MatrixBlock':
        """Materialize into a matrix block (dimensions default to max row/col)."""
        from ..convert._coordinates import from_ctable
        return from_ctable(self, rows, cols)

    # Mapping protocol

    def __getitem__(self, key: CellIndex) -> float:
        return self._cells[key]

    def __iter__(self) -> Iterator[CellIndex]:
        return iter(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __repr__(self) -> str:
        return (f"CTableMap(size={len(self._cells)}, "
                f"max_row={self._max_row}, max_column={self._max_column})")
