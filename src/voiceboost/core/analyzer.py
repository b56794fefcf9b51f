"""
Dominant pitch extraction from magnitude spectra.

Finds the loudest bin above a noise floor, refines its position from the
neighbouring bins and converts the result to Hz and a normalized volume.
"""

from dataclasses import dataclass

import numpy as np

from voiceboost.config import NOISE_FLOOR_RATIO, SILENCE_FLOOR


@dataclass(frozen=True)
class PitchSample:
    """One tick's pitch estimate. Zero frequency and volume mean silence."""

    frequency_hz: float
    volume: float

    @classmethod
    def silence(cls) -> "PitchSample":
        return cls(frequency_hz=0.0, volume=0.0)

    @property
    def is_silent(self) -> bool:
        return self.frequency_hz == 0.0 and self.volume == 0.0


class SpectrumAnalyzer:
    """
    Estimates the dominant frequency and its volume from one spectrum frame.

    Frames are expected to span 0 Hz to Nyquist, so bin ``k`` of an
    ``N``-bin frame sits at ``k * (sample_rate / 2) / N``.
    """

    def __init__(
        self,
        sample_rate: int = 44100,
        noise_floor_ratio: float = NOISE_FLOOR_RATIO,
        silence_floor: float = SILENCE_FLOOR,
    ):
        """
        Initialize the analyzer.

        Args:
            sample_rate: Output sample rate of the audio source.
            noise_floor_ratio: Default noise floor, relative to source volume.
            silence_floor: Normalized peaks below this are treated as silence.
        """
        self.sample_rate = sample_rate
        self.noise_floor_ratio = noise_floor_ratio
        self.silence_floor = silence_floor

    @staticmethod
    def _check_inputs(frame: np.ndarray, source_volume: float) -> None:
        if frame.ndim != 1:
            raise ValueError(f"Spectrum frame must be 1-D, got shape {frame.shape}")
        if len(frame) < 3:
            raise ValueError(
                f"Spectrum frame needs at least 3 bins, got {len(frame)}"
            )
        if source_volume <= 0:
            raise ValueError(f"source_volume must be positive, got {source_volume}")

    def find_peak(
        self,
        frame: np.ndarray,
        threshold: float,
    ) -> tuple[int, float] | None:
        """
        Locate the loudest bin strictly above ``threshold``.

        Ties resolve to the lowest index.

        Returns:
            ``(index, magnitude)`` or None when no bin clears the threshold.
        """
        candidates = np.where(frame > threshold, frame, -np.inf)
        index = int(np.argmax(candidates))
        if not np.isfinite(candidates[index]):
            return None
        return index, float(frame[index])

    @staticmethod
    def refine(frame: np.ndarray, index: int) -> float:
        """
        Shift an integer peak index toward the louder neighbour.

        Edge bins and zero-magnitude peaks are returned unchanged.
        """
        peak = frame[index]
        if index <= 0 or index >= len(frame) - 1 or peak == 0:
            return float(index)

        d_left = frame[index - 1] / peak
        d_right = frame[index + 1] / peak
        return float(index + 0.5 * (d_right * d_right - d_left * d_left))

    def bin_position(
        self,
        frame: np.ndarray,
        source_volume: float = 1.0,
        noise_floor_ratio: float | None = None,
    ) -> float | None:
        """
        Continuous bin position of the dominant peak, or None if nothing
        clears the noise floor.
        """
        frame = np.asarray(frame, dtype=np.float64)
        self._check_inputs(frame, source_volume)

        if noise_floor_ratio is None:
            noise_floor_ratio = self.noise_floor_ratio

        peak = self.find_peak(frame, noise_floor_ratio * source_volume)
        if peak is None:
            return None
        return self.refine(frame, peak[0])

    def bin_to_hz(self, position: float, n_bins: int) -> float:
        """Convert a continuous bin position to Hz."""
        return position * (self.sample_rate / 2) / n_bins

    def analyze(
        self,
        frame: np.ndarray,
        source_volume: float = 1.0,
        noise_floor_ratio: float | None = None,
    ) -> PitchSample:
        """
        Estimate pitch and volume for one spectrum frame.

        Args:
            frame: Non-negative magnitudes, at least 3 bins.
            source_volume: Channel gain used to normalize magnitudes.
            noise_floor_ratio: Override for the configured noise floor.

        Returns:
            PitchSample, silent when no bin clears the noise floor or the
            normalized peak is below the silence floor.

        Raises:
            ValueError: On a malformed frame or non-positive source volume.
        """
        frame = np.asarray(frame, dtype=np.float64)
        self._check_inputs(frame, source_volume)

        if noise_floor_ratio is None:
            noise_floor_ratio = self.noise_floor_ratio

        peak = self.find_peak(frame, noise_floor_ratio * source_volume)
        if peak is None:
            return PitchSample.silence()

        index, max_value = peak
        volume = max_value / source_volume
        if volume < self.silence_floor:
            return PitchSample.silence()

        position = self.refine(frame, index)
        frequency = self.bin_to_hz(position, len(frame))

        return PitchSample(frequency_hz=frequency, volume=volume)
