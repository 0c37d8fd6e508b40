"""
Error handling for blockconv.

Error codes follow the numbering used by the engine's native API so that
failures surfacing here can be correlated with engine-side logs.
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# Error Codes
# =============================================================================

# General errors (1-9)
BC_ERROR_UNKNOWN = 1

# Argument errors (10-19)
BC_ERROR_DIMENSION_MISMATCH = 11

# Type errors (20-29)
BC_ERROR_TYPE_COERCION = 22

# I/O errors (30-39)
BC_ERROR_IO_ERROR = 30
BC_ERROR_UNKNOWN_FORMAT = 37

# Resource errors (60-69)
BC_ERROR_LEASE = 60


_ERROR_MESSAGES = {
    BC_ERROR_UNKNOWN: "Unknown error",
    BC_ERROR_DIMENSION_MISMATCH: "Dimension mismatch",
    BC_ERROR_TYPE_COERCION: "Value cannot be interpreted as a number",
    BC_ERROR_IO_ERROR: "I/O error",
    BC_ERROR_UNKNOWN_FORMAT: "No reader/writer registered for format",
    BC_ERROR_LEASE: "Unbalanced buffer lease",
}


def error_message(code: int) -> str:
    """Return the canonical message for an error code."""
    return _ERROR_MESSAGES.get(code, f"Unknown error (code={code})")


# =============================================================================
# Exception Classes
# =============================================================================

class BlockConvError(Exception):
    """
    Base exception for all blockconv errors.

    Attributes:
        code: Numeric error code (see ``BC_ERROR_*``)
        message: Human readable description, including the failing operation
    """

    ERROR_UNKNOWN = BC_ERROR_UNKNOWN
    ERROR_DIMENSION_MISMATCH = BC_ERROR_DIMENSION_MISMATCH
    ERROR_TYPE_COERCION = BC_ERROR_TYPE_COERCION
    ERROR_IO_ERROR = BC_ERROR_IO_ERROR
    ERROR_UNKNOWN_FORMAT = BC_ERROR_UNKNOWN_FORMAT
    ERROR_LEASE = BC_ERROR_LEASE

    default_code = BC_ERROR_UNKNOWN

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None):
        if code is None:
            code = self.default_code
        self.code = code
        if message is None:
            message = error_message(code)
        self.message = message
        super().__init__(f"BlockConv Error {code}: {message}")

    @classmethod
    def from_code(cls, code: int, context: str = "") -> "BlockConvError":
        """Create exception from error code with optional context."""
        base_msg = error_message(code)
        msg = f"{context}: {base_msg}" if context else base_msg
        return cls(msg, code)


class ConversionIOError(BlockConvError):
    """Any failure reported by the storage boundary (reader or writer)."""

    default_code = BC_ERROR_IO_ERROR


class TypeCoercionError(BlockConvError):
    """A frame cell could not be interpreted as a double."""

    default_code = BC_ERROR_TYPE_COERCION

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[int] = None,
        row: Optional[int] = None,
        col: Optional[int] = None,
        value: object = None,
    ):
        self.row = row
        self.col = col
        self.value = value
        super().__init__(message, code)


class LeaseError(BlockConvError):
    """Release called on a matrix handle without an active read lease."""

    default_code = BC_ERROR_LEASE


__all__ = [
    "BC_ERROR_UNKNOWN",
    "BC_ERROR_DIMENSION_MISMATCH",
    "BC_ERROR_TYPE_COERCION",
    "BC_ERROR_IO_ERROR",
    "BC_ERROR_UNKNOWN_FORMAT",
    "BC_ERROR_LEASE",
    "BlockConvError",
    "ConversionIOError",
    "TypeCoercionError",
    "LeaseError",
    "error_message",
]
