"""
Trace serialization module.

Exports per-tick pitch and boost results to JSON or NumPy for offline
inspection and for driving game logic from recorded sessions.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

import numpy as np

from voiceboost.config import DetectorConfig
from voiceboost.pipeline import TickResult

logger = logging.getLogger(__name__)


@dataclass
class TraceMetadata:
    """Metadata header for a boost trace."""

    sample_rate: int
    n_bins: int
    ticks_per_second: int
    n_ticks: int
    version: str = "1.0"


class TraceExporter:
    """Exports tick results to trace files."""

    def __init__(self, precision: int = 4):
        """
        Initialize the exporter.

        Args:
            precision: Decimal places for floating point values.
        """
        self.precision = precision

    def _round(self, value: float) -> float:
        """Round to configured precision."""
        return round(float(value), self.precision)

    def _build_tick(self, result: TickResult) -> dict[str, Any]:
        return {
            "index": result.index,
            "time": self._round(result.time),
            "frequency_hz": self._round(result.smoothed.frequency_hz),
            "volume": self._round(result.smoothed.volume),
            "raw_frequency_hz": self._round(result.raw.frequency_hz),
            "raw_volume": self._round(result.raw.volume),
            "control": self._round(result.control),
            "note": result.note,
        }

    def build_trace(
        self,
        results: list[TickResult],
        config: DetectorConfig,
    ) -> dict[str, Any]:
        """
        Build the complete trace dictionary.

        Args:
            results: Tick results in processing order.
            config: Configuration the session ran with.

        Returns:
            Trace dictionary ready for serialization.
        """
        metadata = TraceMetadata(
            sample_rate=config.sample_rate,
            n_bins=config.n_bins,
            ticks_per_second=config.ticks_per_second,
            n_ticks=len(results),
        )

        return {
            "metadata": {
                "sample_rate": metadata.sample_rate,
                "n_bins": metadata.n_bins,
                "ticks_per_second": metadata.ticks_per_second,
                "n_ticks": metadata.n_ticks,
                "version": metadata.version,
                "config": config.to_dict(),
            },
            "ticks": [self._build_tick(r) for r in results],
        }

    def export_json(
        self,
        results: list[TickResult],
        config: DetectorConfig,
        output_path: Union[str, Path],
        indent: int = 2,
    ) -> Path:
        """
        Export trace to a JSON file.

        Returns:
            Path to written file.
        """
        trace = self.build_trace(results, config)
        output_path = Path(output_path)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(trace, f, indent=indent, ensure_ascii=False)

        logger.info("Wrote %d ticks to %s", len(results), output_path)
        return output_path

    def export_numpy(
        self,
        results: list[TickResult],
        config: DetectorConfig,
        output_path: Union[str, Path],
    ) -> Path:
        """
        Export trace as a compressed .npz archive of per-tick arrays.

        Returns:
            Path to written file.
        """
        output_path = Path(output_path)

        np.savez_compressed(
            output_path,
            time=np.array([r.time for r in results], dtype=np.float64),
            frequency_hz=np.array([r.smoothed.frequency_hz for r in results]),
            volume=np.array([r.smoothed.volume for r in results]),
            raw_frequency_hz=np.array([r.raw.frequency_hz for r in results]),
            raw_volume=np.array([r.raw.volume for r in results]),
            control=np.array([r.control for r in results]),
            note=np.array([r.note for r in results], dtype=str),
            sample_rate=config.sample_rate,
            n_bins=config.n_bins,
            ticks_per_second=config.ticks_per_second,
        )

        logger.info("Wrote %d ticks to %s", len(results), output_path)
        return output_path

    def to_dict(
        self,
        results: list[TickResult],
        config: DetectorConfig,
    ) -> dict[str, Any]:
        """Return trace as dictionary (for in-memory use)."""
        return self.build_trace(results, config)
