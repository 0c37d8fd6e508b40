"""
Tests for diagnostic text rendering.
"""

import pytest
from blockconv import config, RenderConfig
from blockconv.data import FrameBlock, MatrixBlock, ValueType
from blockconv.convert import (
    RenderOptions, format_decimal, to_string, from_coordinate_map, from_double_matrix,
)


class TestFormatDecimal:
    """Test fixed-point number formatting."""

    @pytest.mark.parametrize("value,decimal,expected", [
        (7.0, 3, "7.000"),
        (1.5, 3, "1.500"),
        (0.0, 3, "0.000"),
        (1234567.0, 3, "1234567.000"),
        (0.0625, 3, "0.062"),
        (0.0675, 3, "0.068"),
        (2.5, 0, "2.5"),
        (2.0, 0, "2"),
        (0.12345, -1, "0.123"),
        (3.0, -1, "3"),
        (1.23456, 5, "1.23456"),
        (1e20, 1, "100000000000000000000.0"),
    ])
    def test_values(self, value, decimal, expected):
        assert format_decimal(value, decimal) == expected

    def test_special_values(self):
        assert format_decimal(float('nan')) == "NaN"
        assert format_decimal(float('inf')) == "Infinity"
        assert format_decimal(float('-inf')) == "-Infinity"


class TestMatrixRendering:
    """Test matrix layouts."""

    def test_coordinate_layout(self):
        """Test the coordinate form is 1-indexed triples."""
        mb = from_coordinate_map({(2, 2): 7.0}, rows=2, cols=2)
        assert to_string(mb, sparse=True) == "2 2 7.000\n"

    def test_coordinate_layout_sparse_storage(self, very_sparse_block):
        text = to_string(very_sparse_block, sparse=True, rows_to_print=15)
        assert text == "1 1 1.000\n11 11 2.000\n"

    def test_grid_layout(self, dense_block):
        text = to_string(dense_block, decimal=1, rows_to_print=2, cols_to_print=3)
        assert text == "1.0 0.0 2.0\n0.0 3.0 0.0\n"

    def test_grid_sparse_storage(self, sparse_block, dense_block):
        assert to_string(sparse_block) == to_string(dense_block)

    def test_separators(self):
        mb = from_double_matrix([[1.0, 2.0]])
        text = to_string(mb, separator=",", line_separator=";", decimal=-1)
        assert text == "1,2;"

    def test_options_object(self):
        mb = from_double_matrix([[1.0, 2.0]])
        opts = RenderOptions(separator="\t", decimal=2)
        assert to_string(mb, opts) == "1.00\t2.00\n"
        assert to_string(mb, opts, decimal=0) == "1\t2\n"

    def test_config_defaults(self):
        mb = from_double_matrix([[1.0, 2.0]])
        with config.local(render=RenderConfig(separator="|", decimal=1)):
            assert to_string(mb) == "1.0|2.0\n"

    def test_empty(self):
        assert to_string(MatrixBlock(0, 0)) == ""
        assert to_string(MatrixBlock(2, 2), sparse=True) == ""

    def test_unsupported(self):
        with pytest.raises(TypeError):
            to_string([[1.0]])


class TestFrameRendering:
    """Test frame layout."""

    def test_header_and_rows(self, mixed_frame):
        expected = (
            "# FRAME: nrow = 3, ncol = 4\n"
            "# score count flag label\n"
            "# DOUBLE INT BOOLEAN STRING\n"
            "1.500 2 true a\n"
            "0.000 0 false \n"
            "-3.250 7 true c\n"
        )
        assert to_string(mixed_frame) == expected

    def test_truncation(self, mixed_frame):
        text = to_string(mixed_frame, rows_to_print=1, cols_to_print=2)
        assert text == (
            "# FRAME: nrow = 3, ncol = 4\n"
            "# score count\n"
            "# DOUBLE INT\n"
            "1.500 2\n"
        )

    def test_empty_frame(self):
        frame = FrameBlock([ValueType.STRING])
        assert to_string(frame) == "# FRAME: nrow = 0, ncol = 1\n# C1\n# STRING\n"
