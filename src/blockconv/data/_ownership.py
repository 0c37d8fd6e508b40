"""Read Leases on Caller-Managed Matrices.

This module provides the buffer-lifetime protocol the conversion layer
honors when it reads a matrix owned by the caching engine.

Key Concepts:
    - Handle: The engine wraps each managed matrix in a handle that
      exposes ``acquire_read()`` and ``release()``.
    - Lease: Between acquire and release the engine must not evict or
      modify the block. Every acquire is paired with exactly one release.
    - Scoped Lease: ``read_lease(handle)`` releases on every exit path,
      including exceptions raised while the block is being read.

Safety Model:
    1. Conversions never hold a lease beyond the copy they perform
    2. Releasing without an active lease is an error (``LeaseError``)
    3. Concurrent read leases on one handle are allowed
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional, Protocol, Tuple, runtime_checkable

from ._matrix import MatrixBlock
from ..error import LeaseError

__all__ = [
    'Leasable',
    'MatrixObject',
    'read_lease',
]

logger = logging.getLogger("blockconv.lease")


@runtime_checkable
class Leasable(Protocol):
    """Protocol of an engine-managed matrix handle."""

    def acquire_read(self) -> MatrixBlock:
        ...

    def release(self) -> None:
        ...


# =============================================================================
# Matrix Handle
# =============================================================================

class MatrixObject:
    """In-memory engine handle holding one matrix block.

    Tracks the number of outstanding read leases so the owner can tell
    whether the block may be evicted.

    Attributes:
        name: Optional variable name, used in log messages.
        read_count: Number of active read leases.

    Example:
        >>> handle = MatrixObject(mb, name="X")
        >>> with read_lease(handle) as block:
        ...     data = to_double_matrix(block)
        >>> handle.read_count
        0
    """

    def __init__(self, block: MatrixBlock, name: Optional[str] = None):
        self._block = block
        self._name = name
        self._read_count = 0
        self._lock = threading.Lock()

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def shape(self) -> Tuple[int, int]:
        """Dimensions, available without a lease."""
        return self._block.shape

    @property
    def read_count(self) -> int:
        return self._read_count

    @property
    def is_leased(self) -> bool:
        return self._read_count > 0

    def acquire_read(self) -> MatrixBlock:
        """Take a read lease and return the block."""
        with self._lock:
            self._read_count += 1
            count = self._read_count
        logger.debug("acquire_read %s (leases=%d)", self._name or hex(id(self)), count)
        return self._block

    def release(self) -> None:
        """Return a read lease."""
        with self._lock:
            if self._read_count == 0:
                raise LeaseError(
                    f"release() on {self._name or 'matrix handle'} without an active read lease"
                )
            self._read_count -= 1
            count = self._read_count
        logger.debug("release %s (leases=%d)", self._name or hex(id(self)), count)

    def __repr__(self) -> str:
        return f"MatrixObject(name={self._name!r}, shape={self.shape}, leases={self._read_count})"


# =============================================================================
# Scoped Lease
# =============================================================================

@contextmanager
def read_lease(handle: Leasable) -> Iterator[MatrixBlock]:
    """Hold a read lease for the duration of a ``with`` block.

    Args:
        handle: Engine handle implementing ``acquire_read``/``release``.

    Yields:
        The leased matrix block (read-only by contract).
    """
    block = handle.acquire_read()
    try:
        yield block
    finally:
        handle.release()
