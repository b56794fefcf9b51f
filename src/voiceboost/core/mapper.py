"""
Control signal mapping.

Turns a smoothed pitch sample into a boost rate in [0.0, 1.0] and
provides note-name lookup for diagnostic display.
"""

import math

import numpy as np

from voiceboost.core.analyzer import PitchSample

CHROMA_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
SOLFEGE_NAMES = ["ド", "ド♯", "レ", "レ♯", "ミ", "ファ", "ファ♯", "ソ", "ソ♯", "ラ", "ラ♯", "シ"]

LABEL_TABLES = {
    "chroma": CHROMA_NAMES,
    "solfege": SOLFEGE_NAMES,
}

A4_HZ = 440.0
A4_MIDI = 69


def inverse_lerp(a: float, b: float, value: float) -> float:
    """Position of ``value`` between ``a`` and ``b``, clamped to [0, 1]."""
    if a == b:
        return 0.0
    return float(np.clip((value - a) / (b - a), 0.0, 1.0))


def midi_note(freq_hz: float) -> int | None:
    """Equal-tempered MIDI note number (A4 = 440 Hz), rounded down."""
    if freq_hz <= 0:
        return None
    return math.floor(A4_MIDI + 12 * math.log2(freq_hz / A4_HZ))


def note_name(freq_hz: float, names: list[str] = CHROMA_NAMES) -> str:
    """
    Pitch-class label for a frequency.

    Args:
        freq_hz: Frequency in Hz. Zero means no detected pitch.
        names: Twelve labels starting at C.

    Returns:
        The label, or an empty string for no pitch.
    """
    note = midi_note(freq_hz)
    if note is None:
        return ""
    return names[note % 12]


class ControlMapper:
    """
    Maps pitch samples to a normalized boost rate.

    Quiet input maps to 0. Louder input is rescaled linearly from
    ``low_freq_hz`` (0.0) to ``high_freq_hz`` (1.0).
    """

    def __init__(
        self,
        low_freq_hz: int = 150,
        high_freq_hz: int = 800,
        threshold_volume: float = 1.0,
    ):
        """
        Initialize the mapper.

        Args:
            low_freq_hz: Frequency mapped to 0.0.
            high_freq_hz: Frequency mapped to 1.0.
            threshold_volume: Samples quieter than this map to 0.0.
        """
        if low_freq_hz >= high_freq_hz:
            raise ValueError(
                f"low_freq_hz ({low_freq_hz}) must be below high_freq_hz ({high_freq_hz})"
            )
        self.low_freq_hz = low_freq_hz
        self.high_freq_hz = high_freq_hz
        self.threshold_volume = threshold_volume

    def map_to_control_signal(self, sample: PitchSample) -> float:
        """Boost rate in [0.0, 1.0] for one sample."""
        if sample.volume < self.threshold_volume:
            return 0.0
        return inverse_lerp(self.low_freq_hz, self.high_freq_hz, sample.frequency_hz)
