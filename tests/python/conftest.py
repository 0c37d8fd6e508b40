"""
Pytest configuration and shared fixtures for blockconv tests.
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

from blockconv import config
from blockconv.data import MatrixBlock, FrameBlock, ValueType


# Try to import pandas
try:
    import pandas  # noqa: F401
    HAS_PANDAS = True
except ImportError:
    HAS_PANDAS = False


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def reset_config():
    """Restore default configuration after every test."""
    yield
    config.reset()


@pytest.fixture(scope="session")
def requires_pandas():
    """Skip test if pandas is not available."""
    if not HAS_PANDAS:
        pytest.skip("pandas not available")


@pytest.fixture
def dense_array_small():
    """Small dense numpy matrix for comparison.

    Matrix:
    [[1, 0, 2, 0],
     [0, 3, 0, 4],
     [5, 0, 0, 6]]
    """
    return np.array([
        [1, 0, 2, 0],
        [0, 3, 0, 4],
        [5, 0, 0, 6]
    ], dtype=np.float64)


@pytest.fixture
def dense_block(dense_array_small):
    """Dense 3x4 block holding ``dense_array_small``."""
    mb = MatrixBlock(3, 4, sparse=False)
    mb.init_from_array(dense_array_small)
    return mb


@pytest.fixture
def sparse_block(dense_array_small):
    """Sparse 3x4 block holding ``dense_array_small``."""
    mb = MatrixBlock(3, 4, sparse=True)
    for i, j in zip(*np.nonzero(dense_array_small)):
        mb.quick_set_value(int(i), int(j), float(dense_array_small[i, j]))
    return mb


@pytest.fixture
def very_sparse_block():
    """Sparse 100x100 block with 10 non-zeros on the diagonal."""
    mb = MatrixBlock(100, 100, sparse=True)
    for k in range(10):
        mb.append_value(k * 10, k * 10, float(k + 1))
    mb.sort_sparse_rows()
    return mb


@pytest.fixture
def mixed_frame():
    """3-row frame with one column per value kind."""
    return FrameBlock(
        [ValueType.DOUBLE, ValueType.INT, ValueType.BOOLEAN, ValueType.STRING],
        names=["score", "count", "flag", "label"],
        data=[
            [1.5, 2, True, "a"],
            [0.0, 0, False, None],
            [-3.25, 7, True, "c"],
        ],
    )


# =============================================================================
# Helper Functions
# =============================================================================

def block_to_array(mb):
    """Cell-by-cell dense copy of a matrix block."""
    rows, cols = mb.shape
    out = np.zeros((rows, cols))
    for i in range(rows):
        for j in range(cols):
            out[i, j] = mb.get_value(i, j)
    return out


def assert_block_equal(mb, expected, rtol=1e-12):
    """Assert a matrix block holds ``expected`` and its nnz is exact."""
    expected = np.asarray(expected, dtype=np.float64)
    assert mb.shape == expected.shape
    np.testing.assert_allclose(block_to_array(mb), expected, rtol=rtol)
    assert mb.nnz == int(np.count_nonzero(expected))


@pytest.fixture
def check_block():
    """The ``assert_block_equal`` helper, for use inside tests."""
    return assert_block_equal
