"""
Tests for the configuration system.
"""

import threading

import pytest
from blockconv import config
from blockconv._config import (
    SparsityConfig, TilingConfig, RenderConfig, IOConfig,
    get_config, set_tile_size, set_sparsity_threshold,
)


class TestConfigSections:
    """Test dataclass validation."""

    def test_defaults(self):
        assert config.sparsity.threshold == 0.1
        assert config.tiling.tile_size == 16
        assert config.render.decimal == 3
        assert config.io.expected_sparsity == 0.1

    def test_invalid_threshold(self):
        with pytest.raises(ValueError):
            SparsityConfig(threshold=0.0)
        with pytest.raises(ValueError):
            SparsityConfig(threshold=1.5)

    def test_invalid_tile_size(self):
        with pytest.raises(ValueError):
            TilingConfig(tile_size=0)


class TestGlobalConfig:
    """Test global setters and reset."""

    def test_setters(self):
        set_tile_size(32)
        set_sparsity_threshold(0.3)
        assert config.tile_size == 32
        assert config.sparsity_threshold == 0.3
        config.reset()
        assert config.tile_size == 16

    def test_get_config(self):
        assert get_config() is config

    def test_to_dict(self):
        d = config.to_dict()
        assert set(d) == {"sparsity", "tiling", "render", "io"}
        assert d["render"]["separator"] == " "


class TestLocalConfig:
    """Test thread-local overrides."""

    def test_local_restores(self):
        with config.local(render=RenderConfig(decimal=1)):
            assert config.render.decimal == 1
            with config.local(render=RenderConfig(decimal=5)):
                assert config.render.decimal == 5
            assert config.render.decimal == 1
        assert config.render.decimal == 3

    def test_local_restores_on_error(self):
        with pytest.raises(RuntimeError):
            with config.local(io=IOConfig(expected_sparsity=0.5)):
                raise RuntimeError("boom")
        assert config.io.expected_sparsity == 0.1

    def test_unknown_section(self):
        with pytest.raises(TypeError):
            config.local(colors=None)

    def test_local_is_thread_local(self):
        """Test overrides are invisible to other threads."""
        seen = []
        with config.local(tiling=TilingConfig(tile_size=4)):
            t = threading.Thread(target=lambda: seen.append(config.tile_size))
            t.start()
            t.join()
            assert config.tile_size == 4
        assert seen == [16]
