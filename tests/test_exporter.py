"""Tests for the SessionExporter module."""

import json

import pytest

from sacredscope.config import VisualizerConfig
from sacredscope.core.palette import ColorPalette
from sacredscope.io.exporter import SessionExporter
from sacredscope.pipeline import AnalysisPipeline


class TestSessionExporter:
    """Tests for session manifest serialization."""

    @pytest.fixture
    def snapshots(self, random_frames):
        pipeline = AnalysisPipeline(seed=0)
        return [pipeline.tick(frame, time=i * 0.05) for i, frame in enumerate(random_frames[:10])]

    def test_build_manifest_structure(self, snapshots):
        manifest = SessionExporter().build_manifest(snapshots, VisualizerConfig(mode="cosmic"))

        assert "metadata" in manifest
        assert "ticks" in manifest
        assert len(manifest["ticks"]) == 10

    def test_metadata_fields(self, snapshots):
        meta = SessionExporter().build_manifest(snapshots, VisualizerConfig(mode="cosmic"))["metadata"]

        assert meta["mode"] == "cosmic"
        assert meta["n_ticks"] == 10
        assert meta["analysis_hz"] == 20.0
        assert meta["frame_size"] == 128
        assert meta["duration"] == pytest.approx(0.45)
        assert "schema_version" in meta

    def test_tick_structure(self, snapshots):
        tick = SessionExporter().build_manifest(snapshots, VisualizerConfig())["ticks"][3]

        assert tick["tick"] == 3
        assert set(tick["features"]) >= {"bass", "energy", "tempo", "mood"}
        assert set(tick["context"]) == {
            "beat_drop", "vocal_presence", "instrumental_density",
            "emotional_intensity", "genre_hint",
        }
        assert isinstance(tick["context"]["beat_drop"], bool)

    def test_precision(self, snapshots):
        tick = SessionExporter(precision=2).build_manifest(snapshots, VisualizerConfig())["ticks"][0]
        for key in ("bass", "mid", "treble", "energy"):
            value = tick["features"][key]
            assert value == round(value, 2)

    def test_palette_reloads(self, snapshots):
        tick = SessionExporter().build_manifest(snapshots, VisualizerConfig())["ticks"][-1]
        assert ColorPalette.from_dict(tick["palette"]) == snapshots[-1].palette

    def test_empty_session(self):
        manifest = SessionExporter().build_manifest([], VisualizerConfig())
        assert manifest["metadata"]["n_ticks"] == 0
        assert manifest["metadata"]["duration"] == 0.0
        assert manifest["ticks"] == []

    def test_export_json(self, snapshots, tmp_path):
        output = tmp_path / "session.json"
        written = SessionExporter().export_json(snapshots, VisualizerConfig(), output)

        assert written == output
        with open(output, encoding="utf-8") as f:
            data = json.load(f)
        assert data["metadata"]["n_ticks"] == 10
