"""
Detector configuration.

All tunables for a detection session live on a single dataclass that is
validated once, at session start.
"""

from dataclasses import asdict, dataclass
from typing import Any

# Minimum bin magnitude, relative to source volume, treated as pitch
NOISE_FLOOR_RATIO = 0.04

# Capture devices report ~0.0512 even with no input
SILENCE_FLOOR = 0.0513

NOTE_LABEL_CHOICES = ("chroma", "solfege")


@dataclass
class DetectorConfig:
    """Configuration for a single pitch/volume detection session."""

    # Control mapping
    low_freq_hz: int = 150
    high_freq_hz: int = 800
    threshold_volume: float = 1.0
    smoothing_weight: float = 0.0  # 0 = pass-through, 1 = frozen

    # Spectrum analysis
    sample_rate: int = 44100
    n_bins: int = 1024
    source_volume: float = 1.0
    noise_floor_ratio: float = NOISE_FLOOR_RATIO
    silence_floor: float = SILENCE_FLOOR

    # Offline processing
    ticks_per_second: int = 60

    # Diagnostics
    truncate_frequency: bool = False
    note_labels: str = "chroma"  # "chroma" or "solfege"

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """
        Reject configurations the pipeline cannot run with.

        Raises:
            ValueError: If any field is out of range.
        """
        if self.low_freq_hz >= self.high_freq_hz:
            raise ValueError(
                f"low_freq_hz ({self.low_freq_hz}) must be below "
                f"high_freq_hz ({self.high_freq_hz})"
            )
        if not 0.0 <= self.smoothing_weight <= 1.0:
            raise ValueError(
                f"smoothing_weight must be in [0, 1], got {self.smoothing_weight}"
            )
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.n_bins < 4 or self.n_bins & (self.n_bins - 1):
            raise ValueError(f"n_bins must be a power of two >= 4, got {self.n_bins}")
        if self.source_volume <= 0:
            raise ValueError(
                f"source_volume must be positive, got {self.source_volume}"
            )
        if self.noise_floor_ratio < 0 or self.silence_floor < 0:
            raise ValueError("noise_floor_ratio and silence_floor must be non-negative")
        if self.ticks_per_second <= 0:
            raise ValueError(
                f"ticks_per_second must be positive, got {self.ticks_per_second}"
            )
        if self.note_labels not in NOTE_LABEL_CHOICES:
            raise ValueError(
                f"note_labels must be one of {NOTE_LABEL_CHOICES}, got {self.note_labels!r}"
            )

    def to_dict(self) -> dict[str, Any]:
        """Plain dictionary view, for trace metadata."""
        return asdict(self)
