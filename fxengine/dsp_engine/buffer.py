"""SampleBuffer: the unit every processing stage consumes and produces.

Samples are stored as float32 in a single ``[channels, frames]`` array,
the same layout the rest of the engine uses for stereo signals.
"""
from __future__ import annotations

from typing import Sequence

import numpy as np

from .errors import InvalidChannelIndex, InvalidInput

MAX_CHANNELS = 2


class SampleBuffer:
  """Per-channel float32 sample storage with a sample rate.

  Stages never mutate a buffer they did not allocate; they build a new
  one with :meth:`copy` or :meth:`from_array` and hand it on.
  """

  __slots__ = ("_data", "_sample_rate")

  def __init__(self, channel_count: int, frame_count: int, sample_rate: int) -> None:
    if channel_count < 1 or channel_count > MAX_CHANNELS:
      raise InvalidInput(f"channel_count must be 1 or 2, got {channel_count}")
    if frame_count < 0:
      raise InvalidInput(f"frame_count must be >= 0, got {frame_count}")
    if sample_rate <= 0:
      raise InvalidInput(f"sample_rate must be > 0, got {sample_rate}")
    self._data = np.zeros((int(channel_count), int(frame_count)), dtype=np.float32)
    self._sample_rate = int(sample_rate)

  @classmethod
  def from_array(cls, data: np.ndarray, sample_rate: int) -> "SampleBuffer":
    """Wrap a mono ``[frames]`` or ``[channels, frames]`` array (copied)."""

    arr = np.asarray(data, dtype=np.float32)
    if arr.ndim == 1:
      arr = arr[np.newaxis, :]
    if arr.ndim != 2:
      raise InvalidInput(f"Expected mono [N] or [channels, N] audio, got shape {arr.shape}")
    buf = cls(arr.shape[0], arr.shape[1], sample_rate)
    buf._data[...] = arr
    return buf

  @classmethod
  def from_channels(cls, channels: Sequence[Sequence[float]], sample_rate: int) -> "SampleBuffer":
    if len(channels) == 0:
      raise InvalidInput("at least one channel is required")
    lengths = {len(ch) for ch in channels}
    if len(lengths) != 1:
      raise InvalidInput(f"channel lengths differ: {sorted(lengths)}")
    return cls.from_array(np.stack([np.asarray(ch, dtype=np.float32) for ch in channels]), sample_rate)

  @property
  def channel_count(self) -> int:
    return int(self._data.shape[0])

  @property
  def frame_count(self) -> int:
    return int(self._data.shape[1])

  @property
  def sample_rate(self) -> int:
    return self._sample_rate

  @property
  def duration(self) -> float:
    return self.frame_count / float(self._sample_rate)

  @property
  def data(self) -> np.ndarray:
    """The underlying ``[channels, frames]`` float32 array (not a copy)."""
    return self._data

  def channel(self, i: int) -> np.ndarray:
    """Mutable view of channel ``i``."""

    if i < 0 or i >= self.channel_count:
      raise InvalidChannelIndex(f"channel {i} out of range for {self.channel_count} channel(s)")
    return self._data[i]

  def copy(self) -> "SampleBuffer":
    return SampleBuffer.from_array(self._data, self._sample_rate)

  def peak(self) -> float:
    if self._data.size == 0:
      return 0.0
    return float(np.max(np.abs(self._data)))

  def validate(self) -> None:
    """Raise InvalidInput if the buffer cannot be processed."""

    if self._sample_rate <= 0:
      raise InvalidInput(f"sample_rate must be > 0, got {self._sample_rate}")
    if self._data.ndim != 2 or not 1 <= self._data.shape[0] <= MAX_CHANNELS:
      raise InvalidInput(f"unsupported channel layout {self._data.shape}")
    if self._data.size and not np.all(np.isfinite(self._data)):
      raise InvalidInput("buffer contains NaN or infinite samples")

  def __eq__(self, other: object) -> bool:
    if not isinstance(other, SampleBuffer):
      return NotImplemented
    return self._sample_rate == other._sample_rate and np.array_equal(self._data, other._data)

  def __repr__(self) -> str:
    return (
      f"SampleBuffer(channels={self.channel_count}, frames={self.frame_count}, "
      f"sample_rate={self._sample_rate})"
    )
