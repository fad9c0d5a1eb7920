"""Measurement helpers used for processing reports.

pyloudnorm stays isolated here so the processing stages themselves only
depend on numpy and scipy.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import List

import numpy as np
import pyloudnorm as pyln

from .buffer import SampleBuffer

SILENCE_FLOOR_DB = -120.0


@dataclass
class LoudnessStats:
  integrated_lufs: float
  peak: float
  rms: float


@lru_cache(maxsize=64)
def _meter_for_sr(sr: int) -> pyln.Meter:
  return pyln.Meter(sr)


def _rms_db(x: np.ndarray) -> float:
  rms = float(np.sqrt(np.mean(np.square(x, dtype=np.float64)))) if x.size else 0.0
  if rms <= 0.0:
    return SILENCE_FLOOR_DB
  return max(20.0 * np.log10(rms), SILENCE_FLOOR_DB)


def measure_loudness(buffer: SampleBuffer) -> LoudnessStats:
  """Integrated loudness (LUFS) plus sample peak and RMS.

  Clips shorter than the meter's 400 ms gating block fall back to an
  RMS estimate, and silence reports the floor rather than -inf.
  """

  x = buffer.data
  peak = buffer.peak()
  rms = float(np.sqrt(np.mean(np.square(x, dtype=np.float64)))) if x.size else 0.0

  meter = _meter_for_sr(buffer.sample_rate)
  if buffer.duration < meter.block_size:
    integrated = _rms_db(x)
  else:
    # pyloudnorm expects [samples, channels]
    integrated = float(meter.integrated_loudness(x.T.astype(np.float64)))
    if not np.isfinite(integrated):
      integrated = SILENCE_FLOOR_DB
  return LoudnessStats(integrated_lufs=integrated, peak=peak, rms=rms)


def waveform_overview(buffer: SampleBuffer, points: int = 100) -> List[float]:
  """Mean absolute level of ``points`` equal blocks of the first channel.

  Normalised so the loudest block is 1.0; silence stays all zeros.
  """

  if points <= 0:
    return []
  ch = np.abs(buffer.channel(0).astype(np.float64))
  block = ch.size // points
  if block == 0:
    return [0.0] * points
  blocks = ch[: block * points].reshape(points, block).mean(axis=1)
  top = float(blocks.max())
  if top > 0.0:
    blocks = blocks / top
  return [float(v) for v in blocks]
