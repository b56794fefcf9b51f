"""
Magnitude spectrum frames from PCM buffers.

Produces the fixed-length, 0 Hz to Nyquist magnitude frames the
analyzer consumes, using a Blackman-Harris window over the most recent
``2 * n_bins`` samples.
"""

import numpy as np
from scipy import signal as scipy_signal


class SpectrumProducer:
    """
    Windowed FFT over the tail of a PCM buffer.

    Magnitudes are scaled so a full-scale sine peaks near its amplitude.
    """

    def __init__(self, n_bins: int = 1024, window: str = "blackmanharris"):
        """
        Initialize the producer.

        Args:
            n_bins: Output frame length (power of two).
            window: Any window name accepted by scipy.signal.get_window.
        """
        if n_bins < 4 or n_bins & (n_bins - 1):
            raise ValueError(f"n_bins must be a power of two >= 4, got {n_bins}")
        self.n_bins = n_bins
        self.window_name = window
        self.window = scipy_signal.get_window(window, self.fft_size, fftbins=True)
        self._scale = 2.0 / np.sum(self.window)

    @property
    def fft_size(self) -> int:
        """Samples per analysis window."""
        return 2 * self.n_bins

    def _to_mono(self, samples: np.ndarray) -> np.ndarray:
        samples = np.asarray(samples, dtype=np.float64)
        if samples.ndim == 2:
            # (channels, samples) as librosa loads it
            samples = np.mean(samples, axis=0)
        elif samples.ndim != 1:
            raise ValueError(f"Expected mono or (channels, samples), got {samples.shape}")
        return samples

    def frame(self, samples: np.ndarray) -> np.ndarray:
        """
        Compute one spectrum frame from the end of ``samples``.

        Args:
            samples: Mono float PCM, or shape (channels, samples).

        Returns:
            Magnitudes of length ``n_bins``.
        """
        samples = self._to_mono(samples)

        tail = samples[-self.fft_size:]
        if len(tail) < self.fft_size:
            tail = np.pad(tail, (self.fft_size - len(tail), 0))

        spectrum = np.fft.rfft(tail * self.window)
        return np.abs(spectrum[: self.n_bins]) * self._scale

    def bin_frequencies(self, sample_rate: int) -> np.ndarray:
        """Center frequency in Hz of every output bin."""
        return np.arange(self.n_bins) * (sample_rate / 2) / self.n_bins
