"""
Per-tick analysis pipeline.

Runs extract -> classify -> palette for one spectrum frame and
publishes the result as a single immutable Snapshot.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np

from sacredscope.core.analyzer import AudioFeatures, FeatureAnalyzer, as_frame
from sacredscope.core.context import ContextClassifier, MusicContext
from sacredscope.core.palette import DEFAULT_TRANSITION_SPEED, ColorPalette, PaletteGenerator


@dataclass(frozen=True)
class Snapshot:
    """Everything the renderer needs from one analysis tick."""

    features: AudioFeatures
    context: MusicContext
    palette: ColorPalette
    frame: np.ndarray
    tick: int
    time: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "tick": self.tick,
            "time": self.time,
            "features": self.features.to_dict(),
            "context": self.context.to_dict(),
            "palette": self.palette.to_dict(),
        }


class AnalysisPipeline:
    """
    Owns one analyzer, classifier and palette generator.

    ``snapshot`` is replaced wholesale on every tick, so readers always
    see features and palette from the same tick.
    """

    def __init__(
        self,
        intensity: float = 1.0,
        sensitivity: float = 1.0,
        transition_speed: float = DEFAULT_TRANSITION_SPEED,
        rng: np.random.Generator | None = None,
        seed: int | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            intensity: Gain applied to incoming samples.
            sensitivity: Additional gain multiplied into ``intensity``.
            transition_speed: Palette smoothing factor.
            rng: Random source for the palette generator.
            seed: Seed used when ``rng`` is None.
        """
        self.intensity = intensity
        self.sensitivity = sensitivity

        self.analyzer = FeatureAnalyzer()
        self.classifier = ContextClassifier()
        self.palettes = PaletteGenerator(
            transition_speed=transition_speed,
            rng=rng,
            seed=seed,
        )

        self.snapshot: Snapshot | None = None
        self.ticks = 0

    @property
    def gain(self) -> float:
        return self.intensity * self.sensitivity

    def tick(self, samples, time: float = 0.0) -> Snapshot:
        """
        Process one spectrum frame.

        Args:
            samples: Raw spectrum magnitudes.
            time: Timeline position of this tick in seconds.

        Returns:
            The newly published Snapshot.
        """
        frame = as_frame(samples) * self.gain
        frame.flags.writeable = False

        features = self.analyzer.analyze(frame)
        context = self.classifier.classify(
            features, frame, previous=self.analyzer.previous_features
        )
        palette = self.palettes.generate(features, context)

        self.snapshot = Snapshot(
            features=features,
            context=context,
            palette=palette,
            frame=frame,
            tick=self.ticks,
            time=time,
        )
        self.ticks += 1
        return self.snapshot

    def reset(self):
        """Clear all histories, e.g. when playback restarts."""
        self.analyzer.reset()
        self.palettes.reset()
        self.snapshot = None
        self.ticks = 0
