"""
Tests for read leases and numeric-library interop.
"""

import threading

import pytest
import numpy as np
import scipy.sparse as sp
from blockconv.data import MatrixObject, Leasable, read_lease
from blockconv.convert import to_real_matrix, to_scipy, from_scipy, to_double_matrix
from blockconv.error import LeaseError


# =============================================================================
# Leases
# =============================================================================

class TestMatrixObject:
    """Test lease bookkeeping on a handle."""

    def test_protocol(self, dense_block):
        assert isinstance(MatrixObject(dense_block), Leasable)

    def test_acquire_release(self, dense_block):
        handle = MatrixObject(dense_block, name="X")
        assert handle.acquire_read() is dense_block
        assert handle.is_leased
        handle.release()
        assert handle.read_count == 0

    def test_unbalanced_release(self, dense_block):
        with pytest.raises(LeaseError):
            MatrixObject(dense_block).release()

    def test_scoped_lease_releases_on_error(self, dense_block):
        handle = MatrixObject(dense_block)
        with pytest.raises(RuntimeError):
            with read_lease(handle):
                assert handle.read_count == 1
                raise RuntimeError("boom")
        assert handle.read_count == 0

    def test_concurrent_leases(self, dense_block):
        handle = MatrixObject(dense_block)

        def work():
            for _ in range(100):
                with read_lease(handle):
                    pass

        threads = [threading.Thread(target=work) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert handle.read_count == 0


class TestToRealMatrix:
    """Test leased copies."""

    def test_copy_and_release(self, sparse_block, dense_array_small):
        handle = MatrixObject(sparse_block)
        out = to_real_matrix(handle)
        np.testing.assert_array_equal(out, dense_array_small)
        assert handle.read_count == 0

    def test_release_when_copy_fails(self):
        class BrokenHandle:
            released = 0

            def acquire_read(self):
                return object()

            def release(self):
                BrokenHandle.released += 1

        with pytest.raises(AttributeError):
            to_real_matrix(BrokenHandle())
        assert BrokenHandle.released == 1


# =============================================================================
# scipy
# =============================================================================

class TestScipy:
    """Test scipy.sparse interop."""

    def test_to_scipy(self, sparse_block, dense_array_small):
        csr = to_scipy(sparse_block)
        assert csr.format == "csr"
        assert csr.nnz == 6
        np.testing.assert_array_equal(csr.toarray(), dense_array_small)

    def test_from_scipy(self, dense_array_small):
        mb = from_scipy(sp.csc_matrix(dense_array_small))
        np.testing.assert_array_equal(to_double_matrix(mb), dense_array_small)
        assert not mb.is_sparse

    def test_from_scipy_sparse_result(self):
        mat = sp.random(200, 200, density=0.01, format="coo", random_state=0)
        mb = from_scipy(mat)
        assert mb.is_sparse
        assert mb.nnz == mat.nnz
        np.testing.assert_allclose(to_double_matrix(mb), mat.toarray())

    def test_from_scipy_duplicates_summed(self):
        mat = sp.coo_matrix(([1.0, 2.0, 0.0], ([0, 0, 1], [1, 1, 0])), shape=(2, 2))
        mb = from_scipy(mat)
        assert mb.get_value(0, 1) == 3.0
        assert mb.nnz == 1
        assert mat.nnz == 3

    def test_from_scipy_rejects_dense(self):
        with pytest.raises(TypeError):
            from_scipy(np.eye(2))
