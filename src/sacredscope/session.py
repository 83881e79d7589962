"""
Visualizer session: analysis and render ticks on one timeline.

The session is driven by the caller's clock. ``pump(now)`` runs the
analysis tick when it is due; ``render(now)`` turns the latest snapshot
into primitives for the active mode.
"""

from typing import Protocol

import numpy as np

from sacredscope.config import MAX_INTENSITY, MIN_INTENSITY, VisualizerConfig
from sacredscope.core.modes import VisualMode
from sacredscope.core.simulator import SimulatedFrameSource
from sacredscope.pipeline import AnalysisPipeline, Snapshot
from sacredscope.visualizers.primitives import Primitive
from sacredscope.visualizers.renderer import SceneRenderer


class FrameSource(Protocol):
    def frame_at(self, t: float) -> np.ndarray: ...


class VisualizerSession:
    """
    Couples a frame source, the analysis pipeline and the scene renderer.

    Analysis runs at ``config.analysis_hz``. A pump that arrives late runs
    a single tick and reschedules from ``now``; missed ticks are dropped.
    """

    def __init__(
        self,
        config: VisualizerConfig | None = None,
        source: FrameSource | None = None,
        record: bool = False,
    ):
        """
        Initialize the session.

        Args:
            config: Session configuration.
            source: Frame provider. Defaults to a SimulatedFrameSource
                following the active mode.
            record: Keep every published Snapshot in ``recording``.
        """
        self.cfg = config or VisualizerConfig()

        self.pipeline = AnalysisPipeline(
            intensity=self.cfg.intensity,
            sensitivity=self.cfg.sensitivity,
            transition_speed=self.cfg.transition_speed,
            seed=self.cfg.seed,
        )
        self.renderer = SceneRenderer(self.cfg.mode, self.cfg.width, self.cfg.height)
        self.source = source if source is not None else SimulatedFrameSource(
            mode=self.cfg.mode,
            frame_size=self.cfg.frame_size,
            seed=self.cfg.seed,
        )

        self.running = False
        self.started_at: float | None = None
        self.next_tick_at: float | None = None
        self.recording: list[Snapshot] | None = [] if record else None

    @property
    def mode(self) -> VisualMode:
        return self.renderer.mode

    @property
    def snapshot(self) -> Snapshot | None:
        return self.pipeline.snapshot

    def elapsed(self, now: float) -> float:
        if self.started_at is None:
            return 0.0
        return now - self.started_at

    def start(self, now: float):
        """Start (or resume) both ticks; the first analysis runs at ``now``."""
        if self.started_at is None:
            self.started_at = now
        self.running = True
        self.next_tick_at = now

    def stop(self):
        self.running = False
        self.next_tick_at = None

    def toggle(self, now: float):
        if self.running:
            self.stop()
        else:
            self.start(now)

    def pump(self, now: float) -> Snapshot | None:
        """
        Run the analysis tick if it is due.

        Returns:
            The new Snapshot, or None when nothing ran.
        """
        if not self.running or self.next_tick_at is None or now < self.next_tick_at:
            return None

        t = self.elapsed(now)
        snapshot = self.pipeline.tick(self.source.frame_at(t), time=t)
        if self.recording is not None:
            self.recording.append(snapshot)

        interval = self.cfg.analysis_interval
        self.next_tick_at += interval
        if self.next_tick_at <= now:
            self.next_tick_at = now + interval
        return snapshot

    def render(self, now: float) -> list[Primitive]:
        """
        Primitives for the active mode at ``now``.

        Nothing is drawn while stopped. Before the first analysis tick the
        scene renders from a silent frame with fallback colors.
        """
        if not self.running:
            return []

        t = self.elapsed(now)
        snapshot = self.pipeline.snapshot
        if snapshot is None:
            return self.renderer.render(np.zeros(self.cfg.frame_size), t, None, None)
        return self.renderer.render(snapshot.frame, t, snapshot.features, snapshot.palette)

    def set_mode(self, mode: VisualMode | str):
        """Switch scenes; analysis and palette history are kept."""
        self.renderer.set_mode(mode)
        self.cfg.mode = self.renderer.mode
        if isinstance(self.source, SimulatedFrameSource):
            self.source.mode = self.renderer.mode

    def resize(self, width: int, height: int):
        self.renderer.resize(width, height)
        self.cfg.width = int(width)
        self.cfg.height = int(height)

    def set_intensity(self, intensity: float):
        self.cfg.intensity = max(MIN_INTENSITY, min(MAX_INTENSITY, float(intensity)))
        self.pipeline.intensity = self.cfg.intensity

    def set_sensitivity(self, sensitivity: float):
        self.cfg.sensitivity = float(sensitivity)
        self.pipeline.sensitivity = self.cfg.sensitivity

    def reset(self):
        """Restart playback from scratch, clearing all history."""
        self.pipeline.reset()
        self.started_at = None
        self.next_tick_at = None
        if self.recording is not None:
            self.recording.clear()
        self.running = False
