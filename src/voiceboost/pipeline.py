"""
Per-tick voice boost pipeline.

Orchestrates spectrum analysis, smoothing and control mapping for one
detection session, plus offline processing of whole audio files.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Union

import librosa
import numpy as np

from voiceboost.config import DetectorConfig
from voiceboost.core.analyzer import PitchSample, SpectrumAnalyzer
from voiceboost.core.mapper import LABEL_TABLES, ControlMapper, note_name
from voiceboost.core.smoother import Smoother
from voiceboost.core.spectrum import SpectrumProducer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TickResult:
    """Everything derived from one spectrum frame."""

    index: int
    time: float
    raw: PitchSample
    smoothed: PitchSample
    control: float
    note: str


class BoostSession:
    """
    One live detection session.

    Owns the analyzer, smoother and mapper and runs them once per tick.
    Create one per detection run and hand it to whatever schedules the
    ticks. Not thread-safe: the smoother state is single-writer.
    """

    def __init__(self, config: DetectorConfig | None = None):
        """
        Initialize the session.

        Args:
            config: Validated detector configuration (defaults if None).
        """
        self.config = config or DetectorConfig()

        self.producer = SpectrumProducer(n_bins=self.config.n_bins)
        self.analyzer = SpectrumAnalyzer(
            sample_rate=self.config.sample_rate,
            noise_floor_ratio=self.config.noise_floor_ratio,
            silence_floor=self.config.silence_floor,
        )
        self.smoother = Smoother(
            weight=self.config.smoothing_weight,
            truncate_frequency=self.config.truncate_frequency,
        )
        self.mapper = ControlMapper(
            low_freq_hz=self.config.low_freq_hz,
            high_freq_hz=self.config.high_freq_hz,
            threshold_volume=self.config.threshold_volume,
        )
        self.note_names = LABEL_TABLES[self.config.note_labels]

        self.tick_count = 0
        self.last_result: TickResult | None = None

        logger.info(
            "Boost session started: %d bins @ %d Hz, range %d-%d Hz",
            self.config.n_bins,
            self.config.sample_rate,
            self.config.low_freq_hz,
            self.config.high_freq_hz,
        )

    def process(
        self,
        frame: np.ndarray,
        source_volume: float | None = None,
        time: float | None = None,
    ) -> float:
        """
        Run one tick on a magnitude spectrum frame.

        Args:
            frame: Spectrum magnitudes, 0 Hz to Nyquist.
            source_volume: Channel gain (defaults to the configured one).
            time: Timestamp to record; defaults to the tick index / tick rate.

        Returns:
            Boost rate in [0.0, 1.0].
        """
        if source_volume is None:
            source_volume = self.config.source_volume

        raw = self.analyzer.analyze(frame, source_volume)
        smoothed = self.smoother.smooth(raw)
        control = self.mapper.map_to_control_signal(smoothed)

        if time is None:
            time = self.tick_count / self.config.ticks_per_second

        self.last_result = TickResult(
            index=self.tick_count,
            time=time,
            raw=raw,
            smoothed=smoothed,
            control=control,
            note=note_name(smoothed.frequency_hz, self.note_names),
        )
        self.tick_count += 1

        logger.debug(
            "tick %d: %.1f Hz vol %.4f -> %.3f",
            self.last_result.index,
            smoothed.frequency_hz,
            smoothed.volume,
            control,
        )
        return control

    def process_samples(
        self,
        samples: np.ndarray,
        source_volume: float | None = None,
        time: float | None = None,
    ) -> float:
        """Run one tick on the tail of a PCM buffer."""
        return self.process(self.producer.frame(samples), source_volume, time)

    def diagnostic(self) -> str:
        """Human-readable summary of the last tick."""
        if self.last_result is None:
            return ""
        sample = self.last_result.smoothed
        text = f"frequency {sample.frequency_hz:.0f} volume {sample.volume:.4f}"
        if self.last_result.note:
            text += f" note {self.last_result.note}"
        return text

    def reset(self) -> None:
        """Clear smoothing memory and tick history."""
        self.smoother.reset()
        self.tick_count = 0
        self.last_result = None

    def hop_length(self, sr: int) -> int:
        """Samples between ticks at the configured tick rate."""
        return max(1, int(sr / self.config.ticks_per_second))

    def iter_buffer(self, y: np.ndarray, sr: int) -> Iterator[TickResult]:
        """
        Tick through a whole mono signal.

        Each tick sees the samples up to the end of its hop, so the first
        ticks run on a partially zero-padded window. Buffers at another
        rate are resampled to the configured sample rate first.

        Args:
            y: Mono PCM signal.
            sr: Sample rate of ``y``.

        Yields:
            One TickResult per hop.
        """
        if sr != self.config.sample_rate:
            logger.info("Resampling buffer from %d Hz to %d Hz", sr, self.config.sample_rate)
            y = librosa.resample(
                np.asarray(y, dtype=np.float32),
                orig_sr=sr,
                target_sr=self.config.sample_rate,
            )
            sr = self.config.sample_rate

        hop = self.hop_length(sr)
        n_ticks = len(y) // hop

        for i in range(n_ticks):
            end = (i + 1) * hop
            self.process_samples(
                y[:end],
                time=float(librosa.samples_to_time(end, sr=sr)),
            )
            yield self.last_result

    def load_audio(self, audio_path: Union[str, Path]) -> tuple[np.ndarray, int]:
        """
        Load an audio file as mono at the configured sample rate.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        audio_path = Path(audio_path)
        if not audio_path.exists():
            raise FileNotFoundError(f"Audio file not found: {audio_path}")

        y, sr = librosa.load(audio_path, sr=self.config.sample_rate, mono=True)
        logger.info(
            "Loaded %s: %.2fs @ %d Hz",
            audio_path.name,
            len(y) / sr,
            sr,
        )
        return y, sr

    def process_file(self, audio_path: Union[str, Path]) -> list[TickResult]:
        """
        Run the session over an audio file.

        Args:
            audio_path: Path to an audio file (wav, flac, mp3).

        Returns:
            One TickResult per tick, in order.
        """
        y, sr = self.load_audio(audio_path)
        return list(self.iter_buffer(y, sr))
