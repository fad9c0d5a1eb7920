"""Effects processing pipeline.

Stages run in a fixed order, each gated by its toggle:

  normalize -> compression -> eq -> reverb -> fade_in -> fade_out

Every executed stage returns a fresh SampleBuffer. Progress is reported
after each executed stage as completed / enabled, ending at exactly 1.0.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from .analysis import measure_loudness
from .biquad_eq import apply_eq
from .buffer import SampleBuffer
from .compressor import Compressor
from .envelope import fade_in, fade_out
from .errors import FxEngineError, InvalidInput, ProcessingCancelled
from .normalizer import normalize
from .params import EffectParameters, ProcessingRequest
from .reverb import ConvolutionReverb, ReverbSettings

logger = logging.getLogger("fxengine.pipeline")

ProgressCallback = Callable[[float], None]
StageFn = Callable[[SampleBuffer, EffectParameters], SampleBuffer]


@dataclass(frozen=True)
class ProcessingMetrics:
  peak_before: float
  peak_after: float
  applied_stages: Tuple[str, ...]
  loudness_before: float
  loudness_after: float
  duration: float
  parameter_values: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ProcessingResult:
  buffer: SampleBuffer
  metrics: ProcessingMetrics


def _normalize_stage(buffer: SampleBuffer, params: EffectParameters) -> SampleBuffer:
  return normalize(buffer)


def _compression_stage(buffer: SampleBuffer, params: EffectParameters) -> SampleBuffer:
  comp = Compressor(
    threshold_db=params.resolved("compression_threshold"),
    ratio=params.resolved("compression_ratio"),
    attack_s=params.resolved("compression_attack"),
    release_s=params.resolved("compression_release"),
  )
  return comp.process(buffer)


def _eq_stage(buffer: SampleBuffer, params: EffectParameters) -> SampleBuffer:
  return apply_eq(
    buffer,
    low_db=params.resolved("eq_low"),
    mid_db=params.resolved("eq_mid"),
    high_db=params.resolved("eq_high"),
  )


def _fade_in_stage(buffer: SampleBuffer, params: EffectParameters) -> SampleBuffer:
  return fade_in(buffer, params.resolved("fade_in_duration"))


def _fade_out_stage(buffer: SampleBuffer, params: EffectParameters) -> SampleBuffer:
  return fade_out(buffer, params.resolved("fade_out_duration"))


class EffectsPipeline:
  """Runs a ProcessingRequest over a SampleBuffer.

  ``rng`` seeds the reverb's impulse-response noise; leave it unset for a
  fresh IR per call. ``cancel_event`` is checked between stages only.
  """

  def __init__(self, rng: Optional[np.random.Generator] = None) -> None:
    self.rng = rng

  def _reverb_stage(self, buffer: SampleBuffer, params: EffectParameters) -> SampleBuffer:
    settings = ReverbSettings(
      amount=params.resolved("reverb_amount"),
      decay_s=params.resolved("reverb_decay"),
      damping=params.resolved("reverb_damping"),
    )
    return ConvolutionReverb(settings, rng=self.rng).process(buffer)

  def _stages(self) -> Dict[str, StageFn]:
    return {
      "normalize": _normalize_stage,
      "compression": _compression_stage,
      "eq": _eq_stage,
      "reverb": self._reverb_stage,
      "fade_in": _fade_in_stage,
      "fade_out": _fade_out_stage,
    }

  def run(
    self,
    buffer: SampleBuffer,
    request: ProcessingRequest,
    on_progress: Optional[ProgressCallback] = None,
    cancel_event: Optional[threading.Event] = None,
  ) -> ProcessingResult:
    try:
      buffer.validate()
    except InvalidInput as exc:
      exc.stage = exc.stage or "validate"
      raise

    enabled = request.toggles.enabled()
    total = len(enabled)
    stages = self._stages()
    loud_before = measure_loudness(buffer)

    logger.debug("Processing %r with stages %s", buffer, list(enabled))

    current = buffer
    applied: List[str] = []
    params: Dict[str, float] = {}

    for name in enabled:
      if cancel_event is not None and cancel_event.is_set():
        raise ProcessingCancelled("processing cancelled before stage", stage=name)
      try:
        current = stages[name](current, request.parameters)
      except FxEngineError as exc:
        exc.stage = exc.stage or name
        raise
      applied.append(name)
      params.update(request.parameters.resolved_for(name))
      logger.debug("Applied %s (peak %.4f)", name, current.peak())
      if on_progress is not None:
        # exact final value even when total does not divide evenly
        on_progress(1.0 if len(applied) == total else len(applied) / total)

    if total == 0:
      # Pass-through still hands back a buffer the caller owns.
      current = buffer.copy()
      if on_progress is not None:
        on_progress(1.0)

    loud_after = measure_loudness(current)
    metrics = ProcessingMetrics(
      peak_before=loud_before.peak,
      peak_after=loud_after.peak,
      applied_stages=tuple(applied),
      loudness_before=loud_before.integrated_lufs,
      loudness_after=loud_after.integrated_lufs,
      duration=current.duration,
      parameter_values=params,
    )
    logger.info(
      "Processed %.2fs of audio: stages=%s peak %.3f -> %.3f",
      metrics.duration,
      ",".join(applied) or "none",
      metrics.peak_before,
      metrics.peak_after,
    )
    return ProcessingResult(buffer=current, metrics=metrics)


def process(
  buffer: SampleBuffer,
  request: ProcessingRequest,
  on_progress: Optional[ProgressCallback] = None,
  rng: Optional[np.random.Generator] = None,
  cancel_event: Optional[threading.Event] = None,
) -> ProcessingResult:
  return EffectsPipeline(rng=rng).run(buffer, request, on_progress=on_progress, cancel_event=cancel_event)
