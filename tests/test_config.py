"""Tests for settings loading."""

from py_terrain.config import Settings, settings
from py_terrain.core.noise_field import NoiseConfig


class TestSettings:
    """Test configuration defaults and overrides."""

    def test_defaults(self, monkeypatch):
        for name in ("TERRAIN_NOISE_ZOOM", "TERRAIN_BEACH_RADIUS", "TERRAIN_DEFAULT_MAP_WIDTH"):
            monkeypatch.delenv(name, raising=False)
        config = Settings(_env_file=None)
        assert config.default_map_width == 300
        assert config.default_map_height == 300
        assert config.noise_zoom == 50.0
        assert config.noise_octaves == 4
        assert config.noise_persistence == 0.5
        assert config.beach_radius == 1

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("TERRAIN_NOISE_ZOOM", "25")
        monkeypatch.setenv("TERRAIN_LOG_FORMAT", "plain")
        config = Settings(_env_file=None)
        assert config.noise_zoom == 25.0
        assert config.log_format == "plain"

    def test_singleton(self):
        assert isinstance(settings, Settings)

    def test_noise_config_from_settings(self, monkeypatch):
        monkeypatch.setenv("TERRAIN_NOISE_OCTAVES", "6")
        monkeypatch.delenv("TERRAIN_NOISE_ZOOM", raising=False)
        config = NoiseConfig.from_settings(Settings(_env_file=None))
        assert config.octaves == 6
        assert config.zoom == 50.0
