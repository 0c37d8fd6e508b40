"""
Cache-blocked copies between columnar and row-major layouts.

Both directions walk the grid in square tiles so that one tile of the
source and one tile of the destination stay resident in L1 while they
are transposed.
"""

from typing import Optional, Sequence

import numpy as np

from .._config import config

__all__ = ['tiled_columns_to_rows', 'tiled_rows_to_columns']


def _tile(tile_size: Optional[int]) -> int:
    if tile_size is None:
        return config.tiling.tile_size
    if tile_size < 1:
        raise ValueError(f"tile_size must be >= 1, got {tile_size}")
    return int(tile_size)


def tiled_columns_to_rows(
    columns: Sequence[np.ndarray],
    dest: np.ndarray,
    tile_size: Optional[int] = None,
) -> np.ndarray:
    """
    Copy ``n`` column arrays of length ``m`` into a row-major (m, n) array.

    Args:
        columns: Column arrays, ``columns[j][i]`` is cell (i, j)
        dest: Target array of shape (m, n), written in place
        tile_size: Tile edge (default: ``config.tiling.tile_size``)

    Returns:
        ``dest``
    """
    m, n = dest.shape
    if len(columns) != n:
        raise ValueError(f"Got {len(columns)} columns for a destination with {n} columns")
    bs = _tile(tile_size)
    for bi in range(0, m, bs):
        bimin = min(bi + bs, m)
        for bj in range(0, n, bs):
            bjmin = min(bj + bs, n)
            for j in range(bj, bjmin):
                dest[bi:bimin, j] = columns[j][bi:bimin]
    return dest


def tiled_rows_to_columns(
    src: np.ndarray,
    dest: np.ndarray,
    tile_size: Optional[int] = None,
) -> np.ndarray:
    """
    Copy a row-major (m, n) array into a column-major (n, m) array.

    Args:
        src: Source array of shape (m, n)
        dest: Target array of shape (n, m), ``dest[j]`` becomes column j
        tile_size: Tile edge (default: ``config.tiling.tile_size``)

    Returns:
        ``dest``
    """
    m, n = src.shape
    if dest.shape != (n, m):
        raise ValueError(f"Destination shape {dest.shape} does not match ({n}, {m})")
    bs = _tile(tile_size)
    for bi in range(0, m, bs):
        bimin = min(bi + bs, m)
        for bj in range(0, n, bs):
            bjmin = min(bj + bs, n)
            dest[bj:bjmin, bi:bimin] = src[bi:bimin, bj:bjmin].T
    return dest
