"""
Feature extraction module for spectrum frames.

Turns one spectrum snapshot into scalar musical descriptors:
frequency bands, rhythm, melody, harmony, dynamics, energy,
tempo and mood. Keeps a short rolling history for the
temporal features.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable

import numpy as np

from sacredscope.core.history import RollingHistory

DEFAULT_FRAME_SIZE = 128
HISTORY_CAPACITY = 20


class Mood(str, Enum):
    CALM = "calm"
    ENERGETIC = "energetic"
    DRAMATIC = "dramatic"
    MYSTERIOUS = "mysterious"
    JOYFUL = "joyful"


@dataclass(frozen=True)
class AudioFeatures:
    """Scalar musical descriptors for a single analysis tick."""

    bass: float
    mid: float
    treble: float
    rhythm: float    # not clamped; may exceed 1.0
    melody: float    # not clamped on the first tick
    harmony: float
    dynamics: float
    energy: float
    tempo: float     # beats per minute, 60-180
    mood: Mood

    @property
    def melodic_content(self) -> float:
        return melodic_content(self.mid, self.treble)

    def to_dict(self) -> dict:
        return {
            "bass": self.bass,
            "mid": self.mid,
            "treble": self.treble,
            "rhythm": self.rhythm,
            "melody": self.melody,
            "harmony": self.harmony,
            "dynamics": self.dynamics,
            "energy": self.energy,
            "tempo": self.tempo,
            "mood": self.mood.value,
        }


# Ordered (predicate, mood) rules; the first match wins and order matters.
MOOD_RULES: list[tuple[Callable[[float, float, float], bool], Mood]] = [
    (lambda energy, harmony, dynamics: energy < 0.3 and harmony > 0.6, Mood.CALM),
    (lambda energy, harmony, dynamics: energy > 0.7 and dynamics > 0.5, Mood.ENERGETIC),
    (lambda energy, harmony, dynamics: harmony < 0.4 and dynamics > 0.6, Mood.DRAMATIC),
    (lambda energy, harmony, dynamics: energy < 0.5 and harmony < 0.5, Mood.MYSTERIOUS),
]


def as_frame(samples) -> np.ndarray:
    """Coerce input samples to a 1-D float64 array."""
    frame = np.asarray(samples, dtype=np.float64)
    if frame.ndim != 1:
        raise ValueError(f"Audio frame must be 1-D, got shape {frame.shape}")
    return frame


def band_slice(frame: np.ndarray, start: int, stop: int, reference: int = DEFAULT_FRAME_SIZE) -> np.ndarray:
    """
    Slice ``frame`` by bin indices expressed against a 128-bin reference.

    Indices scale proportionally for other frame lengths.
    """
    n = len(frame)
    lo = (start * n) // reference
    hi = (stop * n) // reference
    return frame[lo:hi]


def safe_mean(values: np.ndarray) -> float:
    """Mean of ``values``, 0.0 for an empty slice."""
    if len(values) == 0:
        return 0.0
    return float(np.mean(values))


def variance(values) -> float:
    """Population variance, 0.0 for an empty input."""
    values = np.asarray(values, dtype=np.float64)
    if values.size == 0:
        return 0.0
    return float(np.var(values))


def consistency(values) -> float:
    """Steadiness of a sequence: 1 for constant input, falling with spread."""
    if len(values) < 2:
        return 0.0
    return max(0.0, 1.0 - math.sqrt(variance(values)))


def correlation(a: np.ndarray, b: np.ndarray) -> float:
    """Pearson correlation; 0.0 when lengths differ or either side is flat."""
    if len(a) != len(b) or len(a) == 0:
        return 0.0
    da = a - a.mean()
    db = b - b.mean()
    denominator = math.sqrt(float(np.dot(da, da)) * float(np.dot(db, db)))
    if denominator == 0.0:
        return 0.0
    return float(np.dot(da, db)) / denominator


def melodic_content(mid: float, treble: float) -> float:
    return mid * 0.6 + treble * 0.8


def classify_mood(energy: float, harmony: float, dynamics: float) -> Mood:
    for predicate, mood in MOOD_RULES:
        if predicate(energy, harmony, dynamics):
            return mood
    return Mood.JOYFUL


class FeatureAnalyzer:
    """
    Extracts musical features from spectrum frames, one tick at a time.

    Owns the beat and energy histories plus the previous feature
    snapshot used for delta features. Separate instances never share state.
    """

    SEGMENTS = 8

    def __init__(self, history_capacity: int = HISTORY_CAPACITY):
        """
        Initialize the analyzer.

        Args:
            history_capacity: Max entries kept in beat/energy history.
        """
        self.beat_history: RollingHistory[float] = RollingHistory(history_capacity)
        self.energy_history: RollingHistory[float] = RollingHistory(history_capacity)
        self.current_features: AudioFeatures | None = None
        self.previous_features: AudioFeatures | None = None

    def extract_bands(self, frame: np.ndarray) -> tuple[float, float, float]:
        """Return (bass, mid, treble) band means."""
        bass = safe_mean(band_slice(frame, 0, 32))
        mid = safe_mean(band_slice(frame, 32, 96))
        treble = safe_mean(band_slice(frame, 96, DEFAULT_FRAME_SIZE))
        return bass, mid, treble

    def analyze_rhythm(self, bass: float, mid: float) -> float:
        strength = max(bass * 1.2, mid * 0.8)
        if len(self.beat_history) >= 4:
            steadiness = consistency(self.beat_history.recent(4))
            return strength * (1.0 + steadiness * 0.5)
        return strength

    def analyze_melody(self, mid: float, treble: float) -> float:
        content = melodic_content(mid, treble)
        previous = self.current_features
        if previous is not None:
            movement = abs(content - previous.melodic_content)
            return min(1.0, content + movement * 0.3)
        return content

    def analyze_harmony(self, frame: np.ndarray) -> float:
        """
        Mean correlation between adjacent spectrum segments.

        Floored at 0 so anti-correlated spectra read as "no harmony".
        """
        size = len(frame) // self.SEGMENTS
        if size == 0:
            return 0.0
        total = 0.0
        for i in range(self.SEGMENTS - 1):
            first = frame[i * size:(i + 1) * size]
            second = frame[(i + 1) * size:(i + 2) * size]
            total += correlation(first, second)
        return max(0.0, total / (self.SEGMENTS - 1))

    def analyze_dynamics(self, frame: np.ndarray) -> float:
        return min(1.0, math.sqrt(variance(frame)) * 2.0)

    def calculate_energy(self, frame: np.ndarray) -> float:
        if len(frame) == 0:
            return 0.0
        rms = math.sqrt(float(np.mean(frame * frame)))
        return min(1.0, rms * 2.0)

    def estimate_tempo(self) -> float:
        """Map recent rhythm strength onto a 60-180 BPM range."""
        if len(self.beat_history) < 8:
            return 120.0
        bpm = 60.0 + self.beat_history.mean(8) * 120.0
        return float(np.clip(bpm, 60.0, 180.0))

    def analyze(self, samples) -> AudioFeatures:
        """
        Analyze one spectrum frame.

        Args:
            samples: Sequence of N spectrum magnitudes, ascending frequency.

        Returns:
            AudioFeatures for this tick. The prior tick's features move to
            ``previous_features``.
        """
        frame = as_frame(samples)

        bass, mid, treble = self.extract_bands(frame)
        rhythm = self.analyze_rhythm(bass, mid)
        melody = self.analyze_melody(mid, treble)
        harmony = self.analyze_harmony(frame)
        dynamics = self.analyze_dynamics(frame)
        energy = self.calculate_energy(frame)
        tempo = self.estimate_tempo()
        mood = classify_mood(energy, harmony, dynamics)

        features = AudioFeatures(
            bass=bass,
            mid=mid,
            treble=treble,
            rhythm=rhythm,
            melody=melody,
            harmony=harmony,
            dynamics=dynamics,
            energy=energy,
            tempo=tempo,
            mood=mood,
        )

        self.previous_features = self.current_features
        self.current_features = features
        self.beat_history.push(rhythm)
        self.energy_history.push(energy)

        return features

    def reset(self):
        """Forget all history and prior snapshots."""
        self.beat_history.clear()
        self.energy_history.clear()
        self.current_features = None
        self.previous_features = None
