"""
Tests for the storage boundary.
"""

import pytest
import numpy as np
from blockconv import config, IOConfig
from blockconv.data import MatrixBlock
from blockconv.convert import from_double_matrix, to_double_matrix
from blockconv.error import ConversionIOError, BlockConvError
from blockconv.io import (
    FileFormat, MatrixCharacteristics, ReadProperties, MatrixReader, MatrixWriter,
    normalize_format, register_reader, register_writer, create_matrix_reader,
    create_matrix_writer, registered_formats, read_matrix, read_matrix_props, write_matrix,
)


# =============================================================================
# Formats / Descriptors
# =============================================================================

class TestFormats:
    """Test format tags and descriptors."""

    def test_normalize(self):
        assert normalize_format("text") is FileFormat.TEXT_CELL
        assert normalize_format("MM") is FileFormat.MATRIX_MARKET
        assert normalize_format(FileFormat.BINARY_BLOCK) is FileFormat.BINARY_BLOCK
        with pytest.raises(ValueError):
            normalize_format("parquet")

    def test_read_properties_estimate(self):
        props = ReadProperties("x", rows=100, cols=50, expected_sparsity=0.2)
        assert props.estimated_nnz == 1000
        assert ReadProperties("x").estimated_nnz == 0

    def test_defaults_from_config(self):
        with config.local(io=IOConfig(rows_per_block=10, cols_per_block=20)):
            mc = MatrixCharacteristics(3, 4)
        assert (mc.rows_per_block, mc.cols_per_block) == (10, 20)

    def test_characteristics_of(self, dense_block):
        mc = MatrixCharacteristics.of(dense_block)
        assert (mc.rows, mc.cols, mc.nnz) == (3, 4, 6)

    def test_builtin_registrations(self):
        formats = registered_formats()
        assert FileFormat.TEXT_CELL in formats["readers"]
        assert FileFormat.MATRIX_MARKET in formats["writers"]


# =============================================================================
# Built-in Formats
# =============================================================================

class TestTextCell:
    """Test the text-cell reader and writer."""

    def test_round_trip(self, tmp_path, dense_block, dense_array_small):
        path = tmp_path / "X.txt"
        write_matrix(dense_block, path, "textcell")
        assert path.read_text().splitlines()[0] == "1 1 1.0"
        mb = read_matrix(path, FileFormat.TEXT_CELL, rows=3, cols=4)
        np.testing.assert_array_equal(to_double_matrix(mb), dense_array_small)
        assert mb.nnz == 6

    def test_sparse_round_trip(self, tmp_path, very_sparse_block):
        path = tmp_path / "S.txt"
        write_matrix(very_sparse_block, path)
        mb = read_matrix(path, rows=100, cols=100, expected_sparsity=0.001)
        assert mb.is_sparse
        assert mb.nnz == 10
        assert mb.get_value(90, 90) == 10.0

    def test_inferred_dimensions(self, tmp_path):
        path = tmp_path / "I.txt"
        path.write_text("2 3 1.5\n\n1 1 -2\n")
        mb = read_matrix(path)
        assert mb.shape == (2, 3)
        assert mb.get_value(1, 2) == 1.5

    @pytest.mark.parametrize("n,sparsity,sparse", [(100, 0.0001, True), (2, 1.0, False)])
    def test_repeated_cell_keeps_last(self, tmp_path, n, sparsity, sparse):
        """Test a cell listed twice is stored once with its last value."""
        path = tmp_path / "D.txt"
        path.write_text("1 1 1.0\n2 2 5.0\n1 1 2.0\n")
        mb = read_matrix(path, "textcell", rows=n, cols=n, expected_sparsity=sparsity)
        assert mb.is_sparse == sparse
        assert mb.nnz == 2
        assert mb.get_value(0, 0) == 2.0
        assert to_double_matrix(mb)[0, 0] == 2.0
        assert mb.recompute_nonzeros() == 2

    def test_repeated_cell_last_zero(self, tmp_path):
        path = tmp_path / "Z.txt"
        path.write_text("1 1 3.0\n1 1 0\n")
        mb = read_matrix(path, rows=10, cols=10, expected_sparsity=0.001)
        assert mb.nnz == 0
        assert mb.get_value(0, 0) == 0.0

    def test_cell_out_of_bounds(self, tmp_path):
        path = tmp_path / "B.txt"
        path.write_text("3 1 1.0\n")
        with pytest.raises(ConversionIOError) as info:
            read_matrix(path, rows=2, cols=2)
        assert isinstance(info.value.__cause__, ValueError)

    def test_malformed_line(self, tmp_path):
        path = tmp_path / "M.txt"
        path.write_text("1 1\n")
        with pytest.raises(ConversionIOError):
            read_matrix(path)


class TestMatrixMarket:
    """Test the Matrix Market reader and writer."""

    def test_round_trip(self, tmp_path, sparse_block, dense_array_small):
        path = tmp_path / "X.mtx"
        write_matrix(sparse_block, path, FileFormat.MATRIX_MARKET)
        mb = read_matrix(path, "mm", rows=3, cols=4)
        np.testing.assert_array_equal(to_double_matrix(mb), dense_array_small)

    def test_dimension_mismatch(self, tmp_path, dense_block):
        path = tmp_path / "X.mtx"
        write_matrix(dense_block, path, "mm")
        with pytest.raises(ConversionIOError) as info:
            read_matrix(path, "mm", rows=5, cols=4)
        assert info.value.code == BlockConvError.ERROR_DIMENSION_MISMATCH
        assert "expected 5x4" in info.value.message


# =============================================================================
# Error Wrapping / Registry
# =============================================================================

class _FailingReader(MatrixReader):
    def __init__(self, props):
        self.props = props

    def read_matrix(self, path, rows, cols, rows_per_block, cols_per_block, estimated_nnz):
        raise OSError("disk on fire")


class _RecordingWriter(MatrixWriter):
    calls = []

    def write_matrix(self, mb, path, rows, cols, rows_per_block, cols_per_block, nnz):
        _RecordingWriter.calls.append((path, rows, cols, rows_per_block, nnz, self.replication))


@pytest.fixture
def binary_block_registry():
    """Register test factories for BINARY_BLOCK, restoring afterwards."""
    prev_reader = register_reader(FileFormat.BINARY_BLOCK, _FailingReader)
    prev_writer = register_writer(FileFormat.BINARY_BLOCK, _RecordingWriter)
    _RecordingWriter.calls = []
    yield
    from blockconv.io import _registry
    for table, prev in ((_registry._readers, prev_reader), (_registry._writers, prev_writer)):
        if prev is None:
            table.pop(FileFormat.BINARY_BLOCK, None)
        else:
            table[FileFormat.BINARY_BLOCK] = prev


class TestErrorWrapping:
    """Test every failure surfaces as ConversionIOError."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConversionIOError) as info:
            read_matrix(tmp_path / "nope.txt", rows=2, cols=2)
        assert isinstance(info.value.__cause__, FileNotFoundError)
        assert isinstance(info.value, BlockConvError)
        assert info.value.code == BlockConvError.ERROR_IO_ERROR

    def test_unknown_format_name(self, tmp_path):
        with pytest.raises(ConversionIOError) as info:
            read_matrix(tmp_path / "x", "parquet")
        assert isinstance(info.value.__cause__, ValueError)

    def test_unregistered_format(self, tmp_path):
        with pytest.raises(ConversionIOError) as info:
            read_matrix(tmp_path / "x", FileFormat.BINARY_CELL)
        assert info.value.code == BlockConvError.ERROR_UNKNOWN_FORMAT
        with pytest.raises(ConversionIOError):
            write_matrix(MatrixBlock(1, 1), tmp_path / "x", FileFormat.BINARY_CELL)

    def test_reader_exception_chained(self, binary_block_registry):
        props = ReadProperties("hdfs://x", FileFormat.BINARY_BLOCK, 10, 10)
        assert isinstance(create_matrix_reader(props), _FailingReader)
        with pytest.raises(ConversionIOError) as info:
            read_matrix_props(props)
        assert isinstance(info.value.__cause__, OSError)

    def test_writer_receives_characteristics(self, binary_block_registry):
        mb = from_double_matrix([[1.0, 0.0]])
        mc = MatrixCharacteristics(1, 2, rows_per_block=7, cols_per_block=7, nnz=1)
        write_matrix(mb, "out", FileFormat.BINARY_BLOCK, mc, replication=3)
        assert _RecordingWriter.calls == [("out", 1, 2, 7, 1, 3)]
        assert isinstance(create_matrix_writer("binaryblock"), _RecordingWriter)

    def test_write_to_missing_directory(self, tmp_path, dense_block):
        with pytest.raises(ConversionIOError) as info:
            write_matrix(dense_block, tmp_path / "missing" / "X.txt")
        assert isinstance(info.value.__cause__, OSError)
