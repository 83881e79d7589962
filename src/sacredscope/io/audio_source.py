"""
Spectrum frames from an audio file.

Decodes the file with librosa and slices a mel spectrogram into one
frame per analysis tick, normalized to [0, 1].
"""

from pathlib import Path
from typing import Iterator, Union

import librosa
import numpy as np

from sacredscope.core.analyzer import DEFAULT_FRAME_SIZE

# Decibel floor mapped to 0.0; 0 dB (the loudest bin) maps to 1.0
DB_FLOOR = -80.0

# librosa.power_to_db default amin; mel power at or below this is silence
SILENCE_POWER = 1e-10


class AudioFileSource:
    """
    Precomputed mel-spectrum frames aligned to the analysis rate.

    ``frame_at(t)`` returns the frame covering time ``t``; past the end
    of the file it returns silence.
    """

    def __init__(
        self,
        audio_path: Union[str, Path],
        frame_size: int = DEFAULT_FRAME_SIZE,
        analysis_hz: float = 20.0,
        sample_rate: int = 22050,
    ):
        """
        Load and analyze the file.

        Args:
            audio_path: Path to audio file (wav, mp3, flac).
            frame_size: Number of mel bins per frame.
            analysis_hz: Frames per second of audio.
            sample_rate: Target sample rate for decoding.
        """
        self.audio_path = Path(audio_path)
        self.frame_size = frame_size
        self.analysis_hz = analysis_hz

        y, self.sample_rate = librosa.load(self.audio_path, sr=sample_rate, mono=True)
        if len(y) == 0:
            raise ValueError(f"Audio file contains no samples: {self.audio_path}")
        self.duration = librosa.get_duration(y=y, sr=self.sample_rate)

        self.hop_length = max(1, int(self.sample_rate / analysis_hz))
        self.frames = self.compute_frames(y)

    def compute_frames(self, y: np.ndarray) -> np.ndarray:
        """
        Mel spectrogram in dB, rescaled to [0, 1].

        Returns:
            (n_frames, frame_size) float64 array.
        """
        mel = librosa.feature.melspectrogram(
            y=y,
            sr=self.sample_rate,
            n_mels=self.frame_size,
            hop_length=self.hop_length,
        )
        # A digitally silent file has no reference level; keep it at the floor
        if mel.max() <= SILENCE_POWER:
            return np.zeros((mel.shape[1], self.frame_size), dtype=np.float64)
        db = librosa.power_to_db(mel, ref=np.max, amin=SILENCE_POWER, top_db=-DB_FLOOR)
        normalized = np.clip((db - DB_FLOOR) / -DB_FLOOR, 0.0, 1.0)
        return normalized.T.astype(np.float64)

    @property
    def n_frames(self) -> int:
        return len(self.frames)

    def frame_at(self, t: float) -> np.ndarray:
        index = int(t * self.analysis_hz)
        if index < 0 or index >= self.n_frames:
            return np.zeros(self.frame_size, dtype=np.float64)
        return self.frames[index]

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self.frames)
