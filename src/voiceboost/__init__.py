"""Voice pitch detection that drives a normalized boost signal."""

from voiceboost.config import DetectorConfig
from voiceboost.core.analyzer import PitchSample, SpectrumAnalyzer
from voiceboost.core.mapper import ControlMapper, note_name
from voiceboost.core.smoother import Smoother, SmootherState
from voiceboost.core.spectrum import SpectrumProducer
from voiceboost.io.exporter import TraceExporter
from voiceboost.pipeline import BoostSession, TickResult

__version__ = "0.1.0"
__all__ = [
    "DetectorConfig",
    "PitchSample",
    "SpectrumAnalyzer",
    "Smoother",
    "SmootherState",
    "ControlMapper",
    "note_name",
    "SpectrumProducer",
    "TraceExporter",
    "BoostSession",
    "TickResult",
]
