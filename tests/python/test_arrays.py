"""
Tests for matrix <-> flat array conversions.
"""

import pytest
import numpy as np
from blockconv.data import MatrixBlock
from blockconv.convert import (
    to_double_matrix, to_boolean_vector, to_int_vector, to_double_vector,
    to_double_list, copy_to_double_vector, from_double_matrix, from_double_vector,
)


class TestToArrays:
    """Test flattening on both storage modes."""

    def test_to_double_matrix(self, dense_block, sparse_block, dense_array_small):
        for mb in (dense_block, sparse_block):
            out = to_double_matrix(mb)
            assert out.dtype == np.float64
            np.testing.assert_array_equal(out, dense_array_small)

    def test_to_double_matrix_is_copy(self, dense_block):
        out = to_double_matrix(dense_block)
        out[0, 0] = 42.0
        assert dense_block.get_value(0, 0) == 1.0

    def test_empty_block(self):
        """Test an unallocated block flattens to zeros."""
        mb = MatrixBlock(2, 3, sparse=True)
        assert to_double_matrix(mb).tolist() == [[0.0] * 3] * 2
        assert to_double_vector(mb).tolist() == [0.0] * 6

    def test_vectors_row_major(self, dense_block, sparse_block, dense_array_small):
        flat = dense_array_small.reshape(-1)
        for mb in (dense_block, sparse_block):
            np.testing.assert_array_equal(to_double_vector(mb), flat)
            np.testing.assert_array_equal(to_boolean_vector(mb), flat != 0)
            np.testing.assert_array_equal(to_int_vector(mb), flat.astype(np.int64))

    def test_int_vector_truncation(self):
        """Test truncation toward zero and NaN -> 0."""
        mb = from_double_matrix([[2.9, -2.9, float('nan'), 0.5]])
        assert to_int_vector(mb).tolist() == [2, -2, 0, 0]


class TestToDoubleList:
    """Test list flattening, including the sparse ordering."""

    def test_dense_row_major(self, dense_block, dense_array_small):
        assert to_double_list(dense_block) == dense_array_small.reshape(-1).tolist()

    def test_sparse_nonzeros_then_zeros(self, sparse_block):
        """Test sparse blocks list their non-zeros first, zeros last."""
        out = to_double_list(sparse_block)
        assert len(out) == 12
        assert out == [1.0, 2.0, 3.0, 4.0, 5.0, 6.0] + [0.0] * 6

    def test_sparse_matches_row_major_without_leading_zeros(self):
        mb = MatrixBlock(1, 3, sparse=True)
        mb.quick_set_value(0, 0, 1.0)
        mb.quick_set_value(0, 1, 2.0)
        assert to_double_list(mb) == [1.0, 2.0, 0.0]


class TestCopyToDoubleVector:
    """Test copying into a caller-owned buffer."""

    def test_dense_overwrites_range(self, dense_block, dense_array_small):
        dest = np.full(14, -1.0)
        copy_to_double_vector(dense_block, dest, 2)
        assert dest[:2].tolist() == [-1.0, -1.0]
        np.testing.assert_array_equal(dest[2:], dense_array_small.reshape(-1))

    def test_sparse_writes_nonzeros_only(self, sparse_block):
        dest = np.full(12, -1.0)
        copy_to_double_vector(sparse_block, dest)
        assert dest[0] == 1.0
        assert dest[1] == -1.0

    def test_empty_leaves_dest(self):
        dest = np.full(4, -1.0)
        copy_to_double_vector(MatrixBlock(2, 2), dest)
        assert dest.tolist() == [-1.0] * 4

    def test_too_small(self, dense_block):
        with pytest.raises(ValueError):
            copy_to_double_vector(dense_block, np.zeros(5))


class TestFromArrays:
    """Test building blocks from arrays."""

    def test_round_trip(self, dense_array_small):
        """Test from_double_matrix / to_double_matrix round trip."""
        mb = from_double_matrix(dense_array_small)
        np.testing.assert_array_equal(to_double_matrix(mb), dense_array_small)
        assert mb.nnz == 6

    def test_round_trip_sparse_result(self):
        """Test a very sparse input is stored sparse and still round-trips."""
        data = np.zeros((100, 100))
        for k in range(10):
            data[k * 10, k] = k + 1.0
        mb = from_double_matrix(data)
        assert mb.is_sparse
        assert mb.nnz == 10
        np.testing.assert_array_equal(to_double_matrix(mb), data)

    def test_density_rule_keeps_small_dense(self):
        mb = from_double_matrix([[0.0, 0.0], [0.0, 7.0]])
        assert not mb.is_sparse
        assert mb.nnz == 1

    def test_empty(self):
        assert from_double_matrix([]).shape == (0, 0)
        assert from_double_matrix(np.zeros((3, 0))).shape == (3, 0)

    def test_ragged(self):
        with pytest.raises(ValueError):
            from_double_matrix([[1.0, 2.0], [3.0]])

    def test_not_2d(self):
        with pytest.raises(ValueError):
            from_double_matrix([1.0, 2.0])

    def test_from_double_vector(self):
        row = from_double_vector([1.0, 0.0, 3.0])
        col = from_double_vector([1.0, 0.0, 3.0], column_vector=True)
        assert row.shape == (1, 3)
        assert col.shape == (3, 1)
        assert col.get_value(2, 0) == 3.0
        assert row.nnz == col.nnz == 2
