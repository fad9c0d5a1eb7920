"""Peak normalisation to a fixed full-scale ceiling."""
from __future__ import annotations

import numpy as np

from .buffer import SampleBuffer

PEAK_CEILING = 0.99


def peak_gain(buffer: SampleBuffer, ceiling: float = PEAK_CEILING) -> float:
  """Gain that brings the loudest sample of any channel to ``ceiling``.

  Silence returns 1.0.
  """
  max_abs = buffer.peak()
  if max_abs <= 0.0:
    return 1.0
  return ceiling / max_abs


def normalize(buffer: SampleBuffer) -> SampleBuffer:
  """Scale every channel by one shared gain so the peak hits 0.99."""

  gain = peak_gain(buffer)
  out = (buffer.data.astype(np.float64) * gain).astype(np.float32)
  return SampleBuffer.from_array(out, buffer.sample_rate)
