"""
blockconv Config - Conversion Configuration System

Provides property-based configuration for the conversion layer. Tuning
knobs (density threshold, tile edge, renderer defaults, read hints) live
here instead of in every function signature.

Example:
    # Global configuration
    blockconv.config.tiling = TilingConfig(tile_size=32)

    # Local configuration (context manager, thread-local)
    with blockconv.config.local(sparsity=SparsityConfig(threshold=0.2)):
        mb = from_double_matrix(data)
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, List
import threading


# =============================================================================
# Configuration Classes
# =============================================================================

@dataclass
class SparsityConfig:
    """Storage-mode selection."""
    threshold: float = 0.1         # sparse iff nnz/(rows*cols) below this

    def __post_init__(self):
        if not 0.0 < self.threshold <= 1.0:
            raise ValueError(f"threshold must be in (0, 1], got {self.threshold}")


@dataclass
class TilingConfig:
    """Cache-blocked copy between columnar and row-major buffers."""
    tile_size: int = 16            # square tile edge, keeps a tile pair in L1

    def __post_init__(self):
        if self.tile_size < 1:
            raise ValueError(f"tile_size must be >= 1, got {self.tile_size}")


@dataclass
class RenderConfig:
    """Defaults for diagnostic string rendering."""
    separator: str = " "
    line_separator: str = "\n"
    rows_to_print: int = -1        # -1 = all
    cols_to_print: int = -1        # -1 = all
    decimal: int = 3               # -1 = default formatting


@dataclass
class IOConfig:
    """Defaults for the storage boundary."""
    expected_sparsity: float = 0.1
    rows_per_block: int = 1000
    cols_per_block: int = 1000


# =============================================================================
# Global Configuration Manager
# =============================================================================

class BlockConvConfig:
    """
    Global configuration manager for blockconv.

    Configuration can be set globally or overridden per thread within a
    ``local()`` context.
    """

    _SECTIONS = ("sparsity", "tiling", "render", "io")

    def __init__(self):
        self._global_sparsity = SparsityConfig()
        self._global_tiling = TilingConfig()
        self._global_render = RenderConfig()
        self._global_io = IOConfig()

        # Thread-local storage for context overrides
        self._local = threading.local()

    # -------------------------------------------------------------------------
    # Property Accessors (with thread-local override support)
    # -------------------------------------------------------------------------

    def _get(self, name: str):
        value = getattr(self._local, name, None)
        if value is not None:
            return value
        return getattr(self, f"_global_{name}")

    @property
    def sparsity(self) -> SparsityConfig:
        """Get sparsity configuration."""
        return self._get("sparsity")

    @sparsity.setter
    def sparsity(self, value: SparsityConfig):
        self._global_sparsity = value

    @property
    def tiling(self) -> TilingConfig:
        """Get tiling configuration."""
        return self._get("tiling")

    @tiling.setter
    def tiling(self, value: TilingConfig):
        self._global_tiling = value

    @property
    def render(self) -> RenderConfig:
        """Get render configuration."""
        return self._get("render")

    @render.setter
    def render(self, value: RenderConfig):
        self._global_render = value

    @property
    def io(self) -> IOConfig:
        """Get I/O configuration."""
        return self._get("io")

    @io.setter
    def io(self, value: IOConfig):
        self._global_io = value

    # -------------------------------------------------------------------------
    # Convenience Properties
    # -------------------------------------------------------------------------

    @property
    def sparsity_threshold(self) -> float:
        return self.sparsity.threshold

    @property
    def tile_size(self) -> int:
        return self.tiling.tile_size

    # -------------------------------------------------------------------------
    # Context Manager Support
    # -------------------------------------------------------------------------

    def local(self, **kwargs) -> "_LocalConfigContext":
        """
        Create a local configuration context.

        Args:
            **kwargs: Configuration overrides (sparsity, tiling, render, io)

        Returns:
            Context manager
        """
        unknown = set(kwargs) - set(self._SECTIONS)
        if unknown:
            raise TypeError(f"Unknown configuration sections: {sorted(unknown)}")
        return _LocalConfigContext(self, **kwargs)

    def _set_local(self, **kwargs):
        """Set thread-local configuration, returning the previous values."""
        previous = {}
        for key, value in kwargs.items():
            previous[key] = getattr(self._local, key, None)
            if value is not None:
                setattr(self._local, key, value)
        return previous

    def _restore_local(self, previous: Dict[str, Any]):
        for key, value in previous.items():
            setattr(self._local, key, value)

    # -------------------------------------------------------------------------
    # Reset
    # -------------------------------------------------------------------------

    def reset(self):
        """Reset all configurations to defaults."""
        self._global_sparsity = SparsityConfig()
        self._global_tiling = TilingConfig()
        self._global_render = RenderConfig()
        self._global_io = IOConfig()

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return {name: asdict(self._get(name)) for name in self._SECTIONS}

    def __repr__(self) -> str:
        return f"BlockConvConfig({self.to_dict()})"


class _LocalConfigContext:
    """Context manager for local configuration override."""

    def __init__(self, config: BlockConvConfig, **kwargs):
        self._config = config
        self._kwargs = kwargs
        self._previous: Dict[str, Any] = {}

    def __enter__(self):
        self._previous = self._config._set_local(**self._kwargs)
        return self._config

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._config._restore_local(self._previous)
        return False


# =============================================================================
# Global Instance
# =============================================================================

config = BlockConvConfig()


def get_config() -> BlockConvConfig:
    """Get the global configuration instance."""
    return config


def set_tile_size(tile_size: int = 16):
    """Set the global tile edge used by tiled frame/matrix copies."""
    config.tiling = TilingConfig(tile_size=tile_size)


def set_sparsity_threshold(threshold: float = 0.1):
    """Set the global density threshold for storage-mode selection."""
    config.sparsity = SparsityConfig(threshold=threshold)


__all__: List[str] = [
    "SparsityConfig",
    "TilingConfig",
    "RenderConfig",
    "IOConfig",
    "BlockConvConfig",
    "config",
    "get_config",
    "set_tile_size",
    "set_sparsity_threshold",
]
