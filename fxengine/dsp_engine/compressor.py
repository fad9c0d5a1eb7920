"""Feed-forward dynamics compressor with a soft knee.

Gain reduction is computed from the instantaneous sample level, smoothed
by a one-pole envelope (attack when clamping harder, release when
letting go) and applied as a linear gain. The detector is linked across
channels so one gain curve drives every channel and the stereo image
does not wander.
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .buffer import SampleBuffer
from .params import clamp_parameter

KNEE_DB = 30.0
_EPS = 1e-9


@dataclass
class Compressor:
  threshold_db: float = -24.0
  ratio: float = 4.0
  attack_s: float = 0.003
  release_s: float = 0.25
  knee_db: float = KNEE_DB

  def clamped(self) -> "Compressor":
    return Compressor(
      threshold_db=clamp_parameter("compression_threshold", self.threshold_db),
      ratio=clamp_parameter("compression_ratio", self.ratio),
      attack_s=clamp_parameter("compression_attack", self.attack_s),
      release_s=clamp_parameter("compression_release", self.release_s),
      knee_db=float(max(self.knee_db, 0.0)),
    )

  def static_curve(self, level_db: np.ndarray) -> np.ndarray:
    """Target gain reduction in dB (>= 0) for each input level."""

    slope = 1.0 - 1.0 / self.ratio
    over = level_db - self.threshold_db
    half = self.knee_db / 2.0
    if half <= 0.0:
      return slope * np.maximum(over, 0.0)
    return np.where(
      over <= -half,
      0.0,
      np.where(
        over >= half,
        slope * over,
        slope * ((over + half) ** 2) / (2.0 * self.knee_db),
      ),
    )

  def smooth(self, target_db: np.ndarray, sr: int) -> np.ndarray:
    """One-pole attack/release smoothing; state starts at 0 dB."""

    attack = _coefficient(self.attack_s, sr)
    release = _coefficient(self.release_s, sr)

    env = np.empty_like(target_db)
    prev = 0.0
    for i, g in enumerate(target_db.tolist()):
      coeff = attack if g > prev else release
      prev = coeff * prev + (1.0 - coeff) * g
      env[i] = prev
    return env

  def gain_reduction(self, x: np.ndarray, sr: int) -> np.ndarray:
    """Smoothed reduction in dB for a ``[channels, frames]`` signal."""

    detector = np.max(np.abs(x), axis=0) if x.ndim > 1 else np.abs(x)
    level = 20.0 * np.log10(detector.astype(np.float64) + _EPS)
    return self.smooth(self.static_curve(level), sr)

  def process(self, buffer: SampleBuffer) -> SampleBuffer:
    if buffer.frame_count == 0:
      return buffer.copy()
    gr = self.gain_reduction(buffer.data, buffer.sample_rate)
    gain = 10 ** (-gr / 20.0)
    out = (buffer.data.astype(np.float64) * gain[np.newaxis, :]).astype(np.float32)
    return SampleBuffer.from_array(out, buffer.sample_rate)


def _coefficient(time_s: float, sr: int) -> float:
  if time_s <= 0.0:
    return 0.0
  return float(np.exp(-1.0 / (time_s * sr)))


def compress(
  buffer: SampleBuffer,
  threshold_db: float = -24.0,
  ratio: float = 4.0,
  attack_s: float = 0.003,
  release_s: float = 0.25,
) -> SampleBuffer:
  comp = Compressor(
    threshold_db=threshold_db,
    ratio=ratio,
    attack_s=attack_s,
    release_s=release_s,
  ).clamped()
  return comp.process(buffer)
