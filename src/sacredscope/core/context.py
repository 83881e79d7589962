"""
Higher-level musical context: beat drops, vocals, density, genre.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable

import numpy as np

from sacredscope.core.analyzer import AudioFeatures, as_frame, band_slice, safe_mean


class Genre(str, Enum):
    ELECTRONIC = "electronic"
    ACOUSTIC = "acoustic"
    CLASSICAL = "classical"
    ROCK = "rock"
    AMBIENT = "ambient"
    VOICE = "voice"
    MIXED = "mixed"  # declared, never produced by GENRE_RULES


@dataclass(frozen=True)
class MusicContext:
    """Musical situation derived fresh each tick."""

    beat_drop: bool
    vocal_presence: bool
    instrumental_density: float
    emotional_intensity: float
    genre_hint: Genre

    def to_dict(self) -> dict:
        return {
            "beat_drop": self.beat_drop,
            "vocal_presence": self.vocal_presence,
            "instrumental_density": self.instrumental_density,
            "emotional_intensity": self.emotional_intensity,
            "genre_hint": self.genre_hint.value,
        }


# Ordered (predicate, genre) rules; the first match wins.
GENRE_RULES: list[tuple[Callable[[AudioFeatures], bool], Genre]] = [
    (lambda f: f.bass > 0.7 and f.energy > 0.6, Genre.ELECTRONIC),
    (lambda f: f.harmony > 0.7 and f.energy < 0.4, Genre.CLASSICAL),
    (lambda f: f.rhythm > 0.6 and f.bass > 0.5, Genre.ROCK),
    (lambda f: f.energy < 0.3 and f.harmony > 0.5, Genre.AMBIENT),
    (lambda f: f.mid > 0.6 and f.melody > 0.5, Genre.VOICE),
]


class ContextClassifier:
    """Stateless classifier; the previous features are passed in explicitly."""

    BEAT_DROP_BASS = 0.3
    BEAT_DROP_ENERGY = 0.2
    VOCAL_THRESHOLD = 0.4
    DENSITY_FLOOR = 0.1

    def detect_beat_drop(self, features: AudioFeatures, previous: AudioFeatures | None) -> bool:
        if previous is None:
            return False
        bass_increase = features.bass - previous.bass
        energy_increase = features.energy - previous.energy
        return bass_increase > self.BEAT_DROP_BASS and energy_increase > self.BEAT_DROP_ENERGY

    def detect_vocal_presence(self, frame: np.ndarray) -> bool:
        # Low formant and presence regions of a 128-bin frame
        vocal_low = safe_mean(band_slice(frame, 8, 24))
        vocal_high = safe_mean(band_slice(frame, 80, 120))
        return (vocal_low + vocal_high) / 2.0 > self.VOCAL_THRESHOLD

    def instrumental_density(self, frame: np.ndarray) -> float:
        if len(frame) == 0:
            return 0.0
        return int(np.count_nonzero(frame > self.DENSITY_FLOOR)) / len(frame)

    def detect_genre(self, features: AudioFeatures) -> Genre:
        for predicate, genre in GENRE_RULES:
            if predicate(features):
                return genre
        return Genre.ACOUSTIC

    def classify(
        self,
        features: AudioFeatures,
        samples,
        previous: AudioFeatures | None = None,
    ) -> MusicContext:
        """
        Derive the musical context for one tick.

        Args:
            features: Features computed for this frame.
            samples: The frame the features came from.
            previous: Features from the prior tick, if any.

        Returns:
            MusicContext for this tick.
        """
        frame = as_frame(samples)
        return MusicContext(
            beat_drop=self.detect_beat_drop(features, previous),
            vocal_presence=self.detect_vocal_presence(frame),
            instrumental_density=self.instrumental_density(frame),
            emotional_intensity=(features.energy + features.dynamics + features.harmony) / 3.0,
            genre_hint=self.detect_genre(features),
        )
