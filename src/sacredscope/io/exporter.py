"""
Session manifest serialization.

Exports recorded analysis ticks (features, context and palette) to JSON
so a run can be inspected or replayed outside the engine.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence, Union

from sacredscope.config import VisualizerConfig
from sacredscope.pipeline import Snapshot


@dataclass
class SessionMetadata:
    """Metadata header for a session manifest."""

    mode: str
    analysis_hz: float
    frame_size: int
    n_ticks: int
    duration: float
    schema_version: str = "1.0"


class SessionExporter:
    """
    Exports recorded snapshots to a JSON manifest.

    Palette colors are written as ``hsl()`` strings, which
    ``ColorPalette.from_dict`` reads back.
    """

    def __init__(self, precision: int = 4):
        """
        Initialize the exporter.

        Args:
            precision: Decimal places for floating point feature values.
        """
        self.precision = precision

    def _round(self, value: float) -> float:
        return round(float(value), self.precision)

    def _build_tick(self, snapshot: Snapshot) -> dict[str, Any]:
        features = {
            key: self._round(value) if isinstance(value, float) else value
            for key, value in snapshot.features.to_dict().items()
        }
        context = snapshot.context.to_dict()
        context["instrumental_density"] = self._round(context["instrumental_density"])
        context["emotional_intensity"] = self._round(context["emotional_intensity"])

        return {
            "tick": snapshot.tick,
            "time": self._round(snapshot.time),
            "features": features,
            "context": context,
            "palette": snapshot.palette.to_dict(),
        }

    def build_manifest(
        self,
        snapshots: Sequence[Snapshot],
        config: VisualizerConfig,
    ) -> dict[str, Any]:
        """
        Build the complete manifest dictionary.

        Args:
            snapshots: Recorded snapshots in tick order.
            config: Configuration the session ran with.

        Returns:
            Manifest dictionary ready for serialization.
        """
        duration = snapshots[-1].time if snapshots else 0.0
        metadata = SessionMetadata(
            mode=config.mode.value,
            analysis_hz=config.analysis_hz,
            frame_size=config.frame_size,
            n_ticks=len(snapshots),
            duration=self._round(duration),
        )

        return {
            "metadata": {
                "mode": metadata.mode,
                "analysis_hz": metadata.analysis_hz,
                "frame_size": metadata.frame_size,
                "n_ticks": metadata.n_ticks,
                "duration": metadata.duration,
                "schema_version": metadata.schema_version,
            },
            "ticks": [self._build_tick(s) for s in snapshots],
        }

    def export_json(
        self,
        snapshots: Sequence[Snapshot],
        config: VisualizerConfig,
        output_path: Union[str, Path],
        indent: int = 2,
    ) -> Path:
        """
        Export the manifest to a JSON file.

        Returns:
            Path to written file.
        """
        manifest = self.build_manifest(snapshots, config)
        output_path = Path(output_path)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(manifest, f, indent=indent)

        return output_path
