"""
Temporal smoothing of pitch samples.

Blends each tick's estimate with the previous one to suppress jitter
between frames.
"""

from dataclasses import dataclass

from voiceboost.core.analyzer import PitchSample


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation from ``a`` (t=0) to ``b`` (t=1)."""
    return (1.0 - t) * a + t * b


@dataclass
class SmootherState:
    """The previous tick's smoothed output."""

    prev_frequency_hz: float = 0.0
    prev_volume: float = 0.0


def smooth_sample(
    current: PitchSample,
    state: SmootherState,
    weight: float,
    truncate_frequency: bool = False,
) -> tuple[PitchSample, SmootherState]:
    """
    Blend ``current`` toward the previous state.

    Args:
        current: This tick's raw estimate.
        state: Previous smoothed values.
        weight: Share of the previous value kept, in [0, 1].
        truncate_frequency: Truncate frequencies to whole Hz before and
            after blending.

    Returns:
        The smoothed sample and the state for the next tick.

    Raises:
        ValueError: If ``weight`` is outside [0, 1].
    """
    if not 0.0 <= weight <= 1.0:
        raise ValueError(f"Smoothing weight must be in [0, 1], got {weight}")

    frequency = current.frequency_hz
    if truncate_frequency:
        frequency = float(int(frequency))

    volume = lerp(current.volume, state.prev_volume, weight)
    frequency = lerp(frequency, state.prev_frequency_hz, weight)
    if truncate_frequency:
        frequency = float(int(frequency))

    smoothed = PitchSample(frequency_hz=frequency, volume=volume)
    return smoothed, SmootherState(prev_frequency_hz=frequency, prev_volume=volume)


class Smoother:
    """
    Single-slot exponential smoother.

    Holds the only mutable state in the pipeline. Not safe to share
    between threads.
    """

    def __init__(self, weight: float = 0.0, truncate_frequency: bool = False):
        """
        Initialize the smoother.

        Args:
            weight: Share of the previous value kept each tick (0 disables).
            truncate_frequency: Keep whole-Hz frequencies.
        """
        if not 0.0 <= weight <= 1.0:
            raise ValueError(f"Smoothing weight must be in [0, 1], got {weight}")
        self.weight = weight
        self.truncate_frequency = truncate_frequency
        self.state = SmootherState()

    def smooth(self, current: PitchSample, weight: float | None = None) -> PitchSample:
        """Smooth one sample and advance the internal state."""
        if weight is None:
            weight = self.weight
        smoothed, self.state = smooth_sample(
            current,
            self.state,
            weight,
            truncate_frequency=self.truncate_frequency,
        )
        return smoothed

    def reset(self) -> None:
        """Forget the previous tick."""
        self.state = SmootherState()
