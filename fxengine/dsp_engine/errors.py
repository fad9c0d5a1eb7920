"""Error taxonomy for the effects engine.

Every fatal condition raised by the engine derives from FxEngineError so
callers (and the HTTP layer) can catch a single base class. Errors carry
an optional ``stage`` naming the pipeline stage they came from.
"""
from __future__ import annotations

from typing import Optional


class FxEngineError(Exception):
  error_code = "FX_ENGINE_ERROR"

  def __init__(self, message: str, stage: Optional[str] = None) -> None:
    super().__init__(message)
    self.message = message
    self.stage = stage

  def __str__(self) -> str:
    if self.stage:
      return f"[{self.stage}] {self.message}"
    return self.message


class InvalidInput(FxEngineError):
  """Malformed SampleBuffer: bad channel layout, sample rate or samples."""

  error_code = "INVALID_INPUT"


class InvalidChannelIndex(FxEngineError, IndexError):
  error_code = "INVALID_CHANNEL_INDEX"


class MalformedContainer(FxEngineError):
  """PCM container is missing a marker or declares sizes past its end."""

  error_code = "MALFORMED_CONTAINER"


class UnsupportedFormat(FxEngineError):
  error_code = "UNSUPPORTED_FORMAT"


class CorruptSource(FxEngineError):
  error_code = "CORRUPT_SOURCE"


class UnknownPreset(FxEngineError, KeyError):
  error_code = "UNKNOWN_PRESET"

  def __str__(self) -> str:
    return FxEngineError.__str__(self)


class ProcessingCancelled(FxEngineError):
  error_code = "PROCESSING_CANCELLED"
