"""blockconv Conversions.

Stateless conversions between the data containers and external forms.
Every function allocates a new output and never mutates its input.

Module Map:

    _arrays        # MatrixBlock <-> numpy arrays / lists
    _coordinates   # (row, col) -> value maps -> MatrixBlock
    _frames        # FrameBlock <-> MatrixBlock, string tables, pandas
    _partition     # MatrixBlock -> row / column vectors
    _render        # MatrixBlock / FrameBlock -> text
    _interop       # leased handles, scipy.sparse
    _tiling        # cache-blocked layout copies shared by _frames

Example:
    >>> from blockconv.convert import from_double_matrix, to_string
    >>> mb = from_double_matrix([[1.5, 2.5], [3.5, 4.5]])
    >>> print(to_string(mb), end="")
    1.500 2.500
    3.500 4.500
"""

from ._tiling import tiled_columns_to_rows, tiled_rows_to_columns
from ._arrays import (
    to_double_matrix,
    to_boolean_vector,
    to_int_vector,
    to_double_vector,
    to_double_list,
    copy_to_double_vector,
    from_double_matrix,
    from_double_vector,
)
from ._coordinates import from_coordinate_map, from_ctable
from ._frames import (
    frame_to_matrix,
    matrix_to_frame,
    frame_to_string_array,
    string_array_to_frame,
    frame_to_pandas,
    frame_from_pandas,
)
from ._partition import partition
from ._render import RenderOptions, format_decimal, to_string
from ._interop import to_real_matrix, to_scipy, from_scipy

__all__ = [
    # ---- Tiling ----
    'tiled_columns_to_rows',
    'tiled_rows_to_columns',

    # ---- Arrays ----
    'to_double_matrix',
    'to_boolean_vector',
    'to_int_vector',
    'to_double_vector',
    'to_double_list',
    'copy_to_double_vector',
    'from_double_matrix',
    'from_double_vector',

    # ---- Coordinates ----
    'from_coordinate_map',
    'from_ctable',

    # ---- Frames ----
    'frame_to_matrix',
    'matrix_to_frame',
    'frame_to_string_array',
    'string_array_to_frame',
    'frame_to_pandas',
    'frame_from_pandas',

    # ---- Partitioning ----
    'partition',

    # ---- Rendering ----
    'RenderOptions',
    'format_decimal',
    'to_string',

    # ---- Interop ----
    'to_real_matrix',
    'to_scipy',
    'from_scipy',
]
