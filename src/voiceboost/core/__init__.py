"""Core pitch analysis modules."""

from voiceboost.core.analyzer import PitchSample, SpectrumAnalyzer
from voiceboost.core.mapper import ControlMapper
from voiceboost.core.smoother import Smoother
from voiceboost.core.spectrum import SpectrumProducer

__all__ = ["PitchSample", "SpectrumAnalyzer", "ControlMapper", "Smoother", "SpectrumProducer"]
