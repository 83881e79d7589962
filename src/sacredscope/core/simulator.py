"""
Synthetic spectrum frames for running the engine without audio input.

Each visual mode gets its own spectral "character" so the scene has
something musically plausible to react to.
"""

import math

import numpy as np

from sacredscope.core.analyzer import DEFAULT_FRAME_SIZE
from sacredscope.core.modes import VisualMode


class SimulatedFrameSource:
    """
    Generates spectrum frames as a function of time and mode.

    Noise and neural spikes draw from an injectable numpy Generator.
    Output is unscaled; intensity gain is applied by the pipeline.
    """

    def __init__(
        self,
        mode: VisualMode | str = VisualMode.SACRED,
        frame_size: int = DEFAULT_FRAME_SIZE,
        rng: np.random.Generator | None = None,
        seed: int | None = None,
    ):
        self.mode = VisualMode.parse(mode)
        self.frame_size = frame_size
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def _amplitude(self, i: int, base: float, t: float) -> float:
        mode = self.mode
        if mode is VisualMode.SACRED:
            # Harmonic frequencies, emphasized on 12-bin intervals
            amplitude = math.sin(t * 1.2 + base) * math.sin(t * 0.3) * 0.7
            if i % 12 == 0:
                amplitude *= 1.5
        elif mode is VisualMode.COSMIC:
            amplitude = math.sin(t * 0.8 + base * 1.5) * math.cos(t * 0.2) * 0.6
            amplitude += self.rng.random() * 0.1
        elif mode is VisualMode.FLOW:
            amplitude = math.sin(t * 1.0 + base) * math.sin(t * 0.4) * 0.5
        elif mode is VisualMode.PULSE:
            amplitude = math.sin(t * 2.0 + base) * math.sin(t * 0.6) * 0.8
            if math.floor(t * 2) % 2 == 0:
                amplitude *= 1.3
        elif mode is VisualMode.TRIPPY:
            amplitude = math.sin(t * 1.7 + base * 3) * math.cos(t * 0.7) * 0.9
            amplitude += math.sin(t * 4 + i * 0.1) * 0.2
        elif mode is VisualMode.OCEAN:
            amplitude = math.sin(t * 0.5 + base * 0.8) * math.sin(t * 0.1) * 0.4
            amplitude += math.sin(t * 0.3 + base * 2) * 0.2
        elif mode is VisualMode.NEURAL:
            amplitude = math.sin(t * 1.5 + base * 2) * 0.6
            if self.rng.random() > 0.9:
                amplitude *= 2  # spike
        elif mode is VisualMode.GALAXY:
            amplitude = math.sin(t * 0.7 + base * 1.2) * math.cos(t * 0.15) * 0.7
            amplitude += math.sin(t * 3 + base * 0.5) * 0.3
        else:
            amplitude = math.sin(t + base) * 0.5
        return amplitude

    def frame_at(self, t: float) -> np.ndarray:
        """
        Build the frame for time ``t`` (seconds).

        Returns:
            (frame_size,) float64 array of non-negative magnitudes.
        """
        n = self.frame_size
        frame = np.empty(n, dtype=np.float64)
        for i in range(n):
            base = (i / n) * math.pi * 2
            frame[i] = max(0.0, self._amplitude(i, base, t))
        return frame
