"""Tests for visualizer configuration."""

import json

import pytest

from sacredscope.config import PROFILES, VisualizerConfig, load_config
from sacredscope.core.modes import VisualMode


class TestVisualizerConfig:
    def test_defaults(self):
        cfg = VisualizerConfig()
        assert cfg.mode is VisualMode.SACRED
        assert cfg.analysis_interval == pytest.approx(0.05)
        assert cfg.frame_size == 128
        assert cfg.sensitivity == 1.0

    @pytest.mark.parametrize("value, expected", [(5.0, 2.0), (0.0, 0.1), (1.5, 1.5)])
    def test_intensity_clamped(self, value, expected):
        assert VisualizerConfig(intensity=value).intensity == expected

    def test_mode_from_string(self):
        assert VisualizerConfig(mode="ocean").mode is VisualMode.OCEAN

    def test_invalid_mode(self):
        with pytest.raises(ValueError):
            VisualizerConfig(mode="laser")

    @pytest.mark.parametrize(
        "overrides",
        [dict(width=0), dict(height=-5), dict(fps=0), dict(analysis_hz=0), dict(frame_size=4)],
    )
    def test_invalid_values(self, overrides):
        with pytest.raises(ValueError):
            VisualizerConfig(**overrides)

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ValueError, match="bogus"):
            VisualizerConfig.from_dict({"bogus": 1})

    def test_profile(self):
        cfg = VisualizerConfig.from_profile("low", fps=None, mode="trippy")
        assert (cfg.width, cfg.height, cfg.fps) == (854, 480, 30)
        assert cfg.mode is VisualMode.TRIPPY

    def test_profile_overrides(self):
        cfg = VisualizerConfig.from_profile("high", width=640)
        assert cfg.width == 640
        assert cfg.height == PROFILES["high"]["height"]

    def test_unknown_profile(self):
        with pytest.raises(ValueError):
            VisualizerConfig.from_profile("ultra")

    def test_dict_round_trip(self):
        cfg = VisualizerConfig(mode="galaxy", seed=9, background_color=(1, 2, 3))
        assert VisualizerConfig.from_dict(cfg.to_dict()) == cfg


class TestLoadConfig:
    def test_load(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"mode": "neural", "intensity": 1.5, "width": 640, "height": 360}))
        cfg = load_config(path)
        assert cfg.mode is VisualMode.NEURAL
        assert cfg.intensity == 1.5
        assert (cfg.width, cfg.height) == (640, 360)

    def test_load_rejects_non_object(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError):
            load_config(path)

    def test_load_rejects_unknown_keys(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"mirrors": 8}))
        with pytest.raises(ValueError):
            load_config(path)
