"""Linear fade envelopes."""
from __future__ import annotations

import numpy as np

from .buffer import SampleBuffer


def _fade_length(buffer: SampleBuffer, duration_s: float) -> int:
  if duration_s <= 0.0 or buffer.frame_count == 0:
    return 0
  return min(int(duration_s * buffer.sample_rate), buffer.frame_count)


def fade_in(buffer: SampleBuffer, duration_s: float) -> SampleBuffer:
  """Ramp the first ``duration_s`` seconds from 0 up to unity (gain i/n)."""

  out = buffer.copy()
  n = _fade_length(buffer, duration_s)
  if n == 0:
    return out
  gain = (np.arange(n, dtype=np.float64) / n).astype(np.float32)
  out.data[:, :n] *= gain[np.newaxis, :]
  return out


def fade_out(buffer: SampleBuffer, duration_s: float) -> SampleBuffer:
  """Ramp the last ``duration_s`` seconds down towards 0 (gain 1 - i/n)."""

  out = buffer.copy()
  n = _fade_length(buffer, duration_s)
  if n == 0:
    return out
  gain = (1.0 - np.arange(n, dtype=np.float64) / n).astype(np.float32)
  out.data[:, -n:] *= gain[np.newaxis, :]
  return out
