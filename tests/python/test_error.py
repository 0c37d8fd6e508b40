"""
Tests for the exception hierarchy and error codes.
"""

import pytest
from blockconv.error import (
    BlockConvError, ConversionIOError, TypeCoercionError, LeaseError,
    BC_ERROR_IO_ERROR, BC_ERROR_TYPE_COERCION, BC_ERROR_LEASE, BC_ERROR_DIMENSION_MISMATCH,
    error_message,
)


class TestErrorCodes:
    """Test default codes and messages."""

    @pytest.mark.parametrize("cls,code", [
        (ConversionIOError, BC_ERROR_IO_ERROR),
        (TypeCoercionError, BC_ERROR_TYPE_COERCION),
        (LeaseError, BC_ERROR_LEASE),
    ])
    def test_default_codes(self, cls, code):
        err = cls("context")
        assert err.code == code
        assert isinstance(err, BlockConvError)
        assert str(err) == f"BlockConv Error {code}: context"

    def test_default_message(self):
        err = ConversionIOError()
        assert err.message == error_message(BC_ERROR_IO_ERROR)

    def test_from_code(self):
        err = BlockConvError.from_code(BC_ERROR_DIMENSION_MISMATCH, "slice")
        assert err.code == BC_ERROR_DIMENSION_MISMATCH
        assert err.message == "slice: Dimension mismatch"

    def test_unknown_code_message(self):
        assert "999" in error_message(999)

    def test_coercion_fields(self):
        err = TypeCoercionError("bad", row=2, col=3, value="x")
        assert (err.row, err.col, err.value) == (2, 3, "x")
