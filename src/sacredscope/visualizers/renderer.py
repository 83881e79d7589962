"""
Scene renderer: resolves the active mode and emits one frame of primitives.
"""

from typing import Sequence

from sacredscope.core.analyzer import AudioFeatures
from sacredscope.core.modes import VisualMode
from sacredscope.core.palette import ColorPalette
from sacredscope.visualizers.primitives import Primitive
from sacredscope.visualizers.scenes import SCENES, Scene


class SceneRenderer:
    """
    Holds one scene instance per mode and dispatches by lookup.

    Switching modes or resizing touches only renderer state; analysis
    history lives elsewhere and is never reset from here.
    """

    def __init__(
        self,
        mode: VisualMode | str = VisualMode.SACRED,
        width: float = 1280,
        height: float = 720,
    ):
        self.scenes: dict[VisualMode, Scene] = {m: cls() for m, cls in SCENES.items()}
        self.mode = VisualMode.parse(mode)
        self.width = 0.0
        self.height = 0.0
        self.resize(width, height)

    @property
    def scene(self) -> Scene:
        return self.scenes[self.mode]

    def set_mode(self, mode: VisualMode | str):
        self.mode = VisualMode.parse(mode)

    def resize(self, width: float, height: float):
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")
        self.width = float(width)
        self.height = float(height)

    def render(
        self,
        frame: Sequence[float],
        time: float,
        features: AudioFeatures | None,
        palette: ColorPalette | None,
    ) -> list[Primitive]:
        """
        Render the active scene.

        Args:
            frame: Most recent spectrum frame.
            time: Elapsed seconds, drives animation phase.
            features: Latest published features, or None before the first tick.
            palette: Latest published palette, or None before the first tick.

        Returns:
            Primitives in paint order.
        """
        return self.scene.render(frame, time, features, palette, self.width, self.height)
