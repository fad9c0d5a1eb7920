"""Offline audio effects engine.

Pure ``SampleBuffer -> SampleBuffer`` stages (normalisation, compression,
three-band EQ, convolution reverb, fades), the pipeline that sequences
them, and the 16-bit PCM WAV codec.
"""
from .buffer import SampleBuffer
from .errors import (
  CorruptSource,
  FxEngineError,
  InvalidChannelIndex,
  InvalidInput,
  MalformedContainer,
  ProcessingCancelled,
  UnknownPreset,
  UnsupportedFormat,
)
from .params import EffectParameters, EffectToggles, ProcessingRequest
from .pipeline import (
  EffectsPipeline,
  ProcessingMetrics,
  ProcessingResult,
  process,
)
from . import pcm_codec

__all__ = [
  "SampleBuffer",
  "EffectToggles",
  "EffectParameters",
  "ProcessingRequest",
  "EffectsPipeline",
  "ProcessingMetrics",
  "ProcessingResult",
  "process",
  "pcm_codec",
  "FxEngineError",
  "InvalidInput",
  "InvalidChannelIndex",
  "MalformedContainer",
  "UnsupportedFormat",
  "CorruptSource",
  "UnknownPreset",
  "ProcessingCancelled",
]
