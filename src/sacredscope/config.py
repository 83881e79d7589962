"""
Visualizer configuration.

A single dataclass shared by the session, the preview window and the
headless renderer, plus resolution profiles and JSON loading.
"""

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Optional, Tuple, Union

from sacredscope.core.analyzer import DEFAULT_FRAME_SIZE
from sacredscope.core.modes import VisualMode
from sacredscope.core.palette import DEFAULT_TRANSITION_SPEED

MIN_INTENSITY = 0.1
MAX_INTENSITY = 2.0

PROFILES = {
    "low": {"width": 854, "height": 480, "fps": 30},
    "medium": {"width": 1280, "height": 720, "fps": 60},
    "high": {"width": 1920, "height": 1080, "fps": 60},
}


@dataclass
class VisualizerConfig:
    """Configuration for a visualizer session."""

    width: int = 1280
    height: int = 720
    fps: int = 60

    # Analysis cadence and frame layout
    analysis_hz: float = 20.0
    frame_size: int = DEFAULT_FRAME_SIZE

    mode: VisualMode = VisualMode.SACRED
    intensity: float = 1.0
    sensitivity: float = 1.0
    transition_speed: float = DEFAULT_TRANSITION_SPEED
    seed: Optional[int] = None

    # Canvas
    background_color: Tuple[int, int, int] = (5, 5, 15)
    trail_alpha: int = 0  # 0-100

    def __post_init__(self):
        self.mode = VisualMode.parse(self.mode)
        self.intensity = max(MIN_INTENSITY, min(MAX_INTENSITY, float(self.intensity)))
        self.background_color = tuple(int(c) for c in self.background_color)
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Canvas size must be positive, got {self.width}x{self.height}")
        if self.fps <= 0:
            raise ValueError(f"fps must be positive, got {self.fps}")
        if self.analysis_hz <= 0:
            raise ValueError(f"analysis_hz must be positive, got {self.analysis_hz}")
        if self.frame_size < 8:
            raise ValueError(f"frame_size must be at least 8, got {self.frame_size}")

    @property
    def analysis_interval(self) -> float:
        """Seconds between analysis ticks."""
        return 1.0 / self.analysis_hz

    @classmethod
    def from_profile(cls, profile: str, **overrides: Any) -> "VisualizerConfig":
        if profile not in PROFILES:
            raise ValueError(f"Unknown profile {profile!r} (choose from: {', '.join(PROFILES)})")
        values = dict(PROFILES[profile])
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.from_dict(values)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VisualizerConfig":
        """Build a config from a plain dict; unknown keys raise ValueError."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["mode"] = self.mode.value
        data["background_color"] = list(self.background_color)
        return data


def load_config(path: Union[str, Path]) -> VisualizerConfig:
    """
    Load a VisualizerConfig from a JSON file.

    Args:
        path: Path to a JSON object whose keys are config field names.

    Returns:
        Parsed configuration.
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a JSON object: {path}")
    return VisualizerConfig.from_dict(data)
