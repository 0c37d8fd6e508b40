"""
Block Base Classes

This module defines the abstract base class shared by the two container
kinds the conversion layer moves data between.

Type Hierarchy:

    BlockBase (ABC)
    ├── MatrixBlock - rectangular double grid, dense or sparse storage
    └── FrameBlock  - columnar table with a per-column value kind

Design Philosophy:

1. Unified Interface: Both containers expose shape, rows, cols and size, so
   renderers and conversions can dispatch on the concrete class only where
   the semantics differ.

2. Read-only Inputs: Conversions never mutate an input block. Every
   conversion allocates a fresh output block.
"""

from abc import ABC, abstractmethod
from typing import Tuple

__all__ = [
    'BlockBase',
]


class BlockBase(ABC):
    """
    Abstract base class for matrix and frame blocks.

    Required Properties (subclasses must implement):
        shape: Block dimensions (rows, cols)

    Required Methods (subclasses must implement):
        copy(): Create a deep copy
    """

    # =========================================================================
    # Abstract Properties
    # =========================================================================

    @property
    @abstractmethod
    def shape(self) -> Tuple[int, int]:
        """Block dimensions (rows, cols)."""
        ...

    @abstractmethod
    def copy(self) -> 'BlockBase':
        """Create a deep copy of this block."""
        ...

    # =========================================================================
    # Derived Properties
    # =========================================================================

    @property
    def rows(self) -> int:
        """Number of rows."""
        return self.shape[0]

    @property
    def cols(self) -> int:
        """Number of columns."""
        return self.shape[1]

    @property
    def ndim(self) -> int:
        """Number of dimensions (always 2)."""
        return 2

    @property
    def size(self) -> int:
        """Total number of cells (rows * cols)."""
        return self.shape[0] * self.shape[1]

    # =========================================================================
    # Magic Methods
    # =========================================================================

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(shape={self.shape})"

    def __str__(self) -> str:
        return self.__repr__()

    def __len__(self) -> int:
        """Return number of rows."""
        return self.shape[0]
