"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

# Engine output rate the detector was tuned against
TEST_SR = 44100
TEST_BINS = 1024


@pytest.fixture
def sample_rate() -> int:
    """Default sample rate for tests."""
    return TEST_SR


@pytest.fixture
def n_bins() -> int:
    """Default spectrum frame length for tests."""
    return TEST_BINS


@pytest.fixture
def silent_frame(n_bins: int) -> np.ndarray:
    """All-zero spectrum frame."""
    return np.zeros(n_bins)


@pytest.fixture
def peak_frame(n_bins: int):
    """
    Factory for frames with a single peak and optional neighbours.

    Returns:
        Callable (index, magnitude, left, right) -> frame.
    """

    def _make(index: int, magnitude: float = 1.0, left: float = 0.0, right: float = 0.0):
        frame = np.zeros(n_bins)
        frame[index] = magnitude
        if index > 0:
            frame[index - 1] = left
        if index < n_bins - 1:
            frame[index + 1] = right
        return frame

    return _make


@pytest.fixture
def pure_sine(sample_rate: int) -> tuple[np.ndarray, int]:
    """
    Generate a 1 second 440Hz sine wave (A4 note) at full scale.

    Returns:
        Tuple of (audio_signal, sample_rate).
    """
    duration = 1.0
    t = np.linspace(0, duration, int(sample_rate * duration), endpoint=False)
    y = np.sin(2 * np.pi * 440.0 * t)
    return y.astype(np.float32), sample_rate


@pytest.fixture
def rising_tone(sample_rate: int) -> tuple[np.ndarray, int]:
    """
    Generate a 200Hz → 700Hz sweep preceded by half a second of silence.

    Returns:
        Tuple of (audio_signal, sample_rate).
    """
    silence = np.zeros(sample_rate // 2)
    duration = 1.0
    t = np.linspace(0, duration, int(sample_rate * duration), endpoint=False)
    freqs = np.linspace(200.0, 700.0, len(t))
    phase = 2 * np.pi * np.cumsum(freqs) / sample_rate
    sweep = np.sin(phase)
    y = np.concatenate([silence, sweep])
    return y.astype(np.float32), sample_rate


@pytest.fixture
def temp_audio_file(tmp_path, rising_tone):
    """Create a temporary audio file for testing file I/O."""
    import soundfile as sf

    y, sr = rising_tone
    audio_path = tmp_path / "test_voice.wav"
    sf.write(audio_path, y, sr)
    return audio_path
