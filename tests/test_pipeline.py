"""Tests for the BoostSession pipeline."""

import numpy as np
import pytest

from voiceboost.config import DetectorConfig
from voiceboost.core.analyzer import PitchSample
from voiceboost.pipeline import BoostSession, TickResult


class TestBoostSession:
    """Tests for per-tick processing."""

    def test_single_peak_end_to_end(self, peak_frame, sample_rate, n_bins):
        """Peak at bin 100 is far above 800 Hz, so boost is clamped to 1."""
        session = BoostSession(DetectorConfig(sample_rate=sample_rate, n_bins=n_bins))

        control = session.process(peak_frame(100, magnitude=1.0))
        result = session.last_result

        assert control == 1.0
        assert result.raw.frequency_hz == pytest.approx(100 * (sample_rate / 2) / n_bins)
        assert result.raw.volume == 1.0
        assert result.smoothed == result.raw

    def test_silent_frame_end_to_end(self, silent_frame):
        """All-zero frame yields zero everything and no note."""
        session = BoostSession()

        control = session.process(silent_frame)
        result = session.last_result

        assert control == 0.0
        assert result.smoothed == PitchSample.silence()
        assert result.note == ""

    def test_literal_threshold_comparison(self, peak_frame):
        """Default threshold of 1.0 rejects a normalized volume of 0.8."""
        session = BoostSession()

        control = session.process(peak_frame(20, magnitude=0.8))

        assert session.last_result.raw.volume == pytest.approx(0.8)
        assert control == 0.0

    def test_source_volume_override(self, peak_frame):
        """A quieter channel gain raises normalized volume past threshold."""
        session = BoostSession()

        control = session.process(peak_frame(20, magnitude=0.8), source_volume=0.5)

        assert session.last_result.raw.volume == pytest.approx(1.6)
        assert 0.0 < control < 1.0

    def test_smoothing_carries_between_ticks(self, peak_frame):
        session = BoostSession(DetectorConfig(smoothing_weight=0.5))

        session.process(peak_frame(20, magnitude=1.0))
        first = session.last_result.smoothed
        session.process(peak_frame(20, magnitude=1.0))
        second = session.last_result.smoothed

        assert first.volume == pytest.approx(0.5)
        assert second.volume == pytest.approx(0.75)
        assert second.frequency_hz > first.frequency_hz

    def test_tick_bookkeeping(self, peak_frame):
        session = BoostSession(DetectorConfig(ticks_per_second=50))

        for _ in range(3):
            session.process(peak_frame(30))

        assert session.tick_count == 3
        assert session.last_result.index == 2
        assert session.last_result.time == pytest.approx(2 / 50)

    def test_reset(self, peak_frame):
        session = BoostSession(DetectorConfig(smoothing_weight=0.5))
        session.process(peak_frame(30))

        session.reset()

        assert session.tick_count == 0
        assert session.last_result is None
        assert session.smoother.state.prev_volume == 0.0

    def test_diagnostic_before_first_tick(self):
        assert BoostSession().diagnostic() == ""

    def test_diagnostic_format(self, peak_frame, silent_frame):
        session = BoostSession()

        session.process(silent_frame)
        assert session.diagnostic() == "frequency 0 volume 0.0000"

        session.process(peak_frame(21, magnitude=1.0))
        text = session.diagnostic()
        assert text.startswith("frequency 452 volume 1.0000")
        assert text.endswith("note A")

    def test_solfege_labels(self, peak_frame):
        session = BoostSession(DetectorConfig(note_labels="solfege"))

        session.process(peak_frame(21, magnitude=1.0))

        assert session.last_result.note == "ラ"

    def test_process_samples_with_sine(self, pure_sine):
        """440 Hz sine lands a little under halfway through 150-800 Hz."""
        y, sr = pure_sine
        session = BoostSession(DetectorConfig(sample_rate=sr, threshold_volume=0.5))

        control = session.process_samples(y)

        assert control == pytest.approx((440 - 150) / 650, abs=0.04)

    def test_iter_buffer_tick_count(self, rising_tone):
        y, sr = rising_tone
        session = BoostSession(DetectorConfig(sample_rate=sr, ticks_per_second=60))

        results = list(session.iter_buffer(y, sr))

        assert len(results) == len(y) // session.hop_length(sr)
        assert all(isinstance(r, TickResult) for r in results)
        assert [r.index for r in results] == list(range(len(results)))

    def test_iter_buffer_times_increase(self, rising_tone):
        y, sr = rising_tone
        session = BoostSession(DetectorConfig(sample_rate=sr))

        times = np.array([r.time for r in session.iter_buffer(y, sr)])

        assert np.all(np.diff(times) > 0)
        assert np.isclose(np.mean(np.diff(times)), 1 / 60, rtol=0.05)

    def test_iter_buffer_silence_then_boost(self, rising_tone):
        """Leading silence gives no boost; the rising sweep does."""
        y, sr = rising_tone
        session = BoostSession(DetectorConfig(sample_rate=sr, threshold_volume=0.5))

        results = list(session.iter_buffer(y, sr))
        silent_ticks = [r for r in results if r.time <= 0.45]
        voiced_ticks = [r for r in results if r.time >= 0.6]

        assert all(r.control == 0.0 for r in silent_ticks)
        assert all(r.smoothed.is_silent for r in silent_ticks)
        assert max(r.control for r in voiced_ticks) > 0.5
        assert voiced_ticks[-1].control > voiced_ticks[0].control

    def test_iter_buffer_resamples_other_rates(self):
        """A 22050 Hz buffer fed to a 44100 Hz session keeps its true pitch."""
        buffer_sr = 22050
        t = np.linspace(0, 1.0, buffer_sr, endpoint=False)
        y = np.sin(2 * np.pi * 440.0 * t).astype(np.float32)
        config = DetectorConfig(sample_rate=44100, threshold_volume=0.5)
        session = BoostSession(config)

        results = list(session.iter_buffer(y, buffer_sr))
        bin_width = (config.sample_rate / 2) / config.n_bins

        assert results[-1].raw.frequency_hz == pytest.approx(440.0, abs=bin_width)
        assert results[-1].time == pytest.approx(1.0, abs=1 / 60)
        assert len(results) == 60

    def test_process_file(self, temp_audio_file):
        session = BoostSession(DetectorConfig(threshold_volume=0.5))

        results = session.process_file(temp_audio_file)

        assert len(results) > 0
        assert any(r.control > 0 for r in results)

    def test_process_missing_file(self, tmp_path):
        session = BoostSession()

        with pytest.raises(FileNotFoundError):
            session.process_file(tmp_path / "missing.wav")

    def test_invalid_frame_propagates(self):
        session = BoostSession()

        with pytest.raises(ValueError):
            session.process(np.array([1.0]))
