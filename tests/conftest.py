"""Pytest configuration and shared fixtures."""

import os

import numpy as np
import pytest

# Headless pygame for canvas and CLI tests
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

FRAME_SIZE = 128
TEST_SR = 22050


@pytest.fixture
def zero_frame() -> np.ndarray:
    """Silent spectrum frame."""
    return np.zeros(FRAME_SIZE)


@pytest.fixture
def uniform_frame() -> np.ndarray:
    """Every bin at full scale."""
    return np.ones(FRAME_SIZE)


@pytest.fixture
def ramp_frame() -> np.ndarray:
    """Eight identical ramps, so adjacent segments correlate perfectly."""
    return np.tile(np.linspace(0.0, 1.0, FRAME_SIZE // 8), 8)


@pytest.fixture
def random_frames() -> list[np.ndarray]:
    """Reproducible batch of frames in [0, 1]."""
    rng = np.random.default_rng(42)
    return [rng.random(FRAME_SIZE) for _ in range(50)]


@pytest.fixture
def mixed_signal() -> tuple[np.ndarray, int]:
    """
    Chord plus 120 BPM clicks.

    Returns:
        Tuple of (audio_signal, sample_rate).
    """
    duration = 2.0
    t = np.linspace(0, duration, int(TEST_SR * duration), endpoint=False)

    # C major: C4, E4, G4
    harmonic = (
        0.2 * np.sin(2 * np.pi * 261.63 * t) +
        0.2 * np.sin(2 * np.pi * 329.63 * t) +
        0.2 * np.sin(2 * np.pi * 392.00 * t)
    )

    samples_per_beat = int(TEST_SR * 60 / 120)
    percussive = np.zeros(len(t))
    click_duration = int(TEST_SR * 0.01)
    for beat_start in range(0, len(t), samples_per_beat):
        click_end = min(beat_start + click_duration, len(t))
        decay = np.exp(-np.linspace(0, 5, click_end - beat_start))
        percussive[beat_start:click_end] = 0.5 * decay

    return (harmonic + percussive).astype(np.float32), TEST_SR


@pytest.fixture
def temp_audio_file(tmp_path, mixed_signal):
    """Create a temporary audio file for testing file I/O."""
    import soundfile as sf

    y, sr = mixed_signal
    audio_path = tmp_path / "test_audio.wav"
    sf.write(audio_path, y, sr)
    return audio_path
