"""Canonical 16-bit PCM WAV codec.

Layout written by :func:`encode` (all fields little-endian):

  0  "RIFF"   4  riff size (36 + data)   8  "WAVE"
  12 "fmt "   16 16   20 1 (PCM)   22 channels   24 sample rate
  28 byte rate   32 block align   34 16 (bits)
  36 "data"   40 data size   44 interleaved int16 samples
"""
from __future__ import annotations

import struct

import numpy as np

from .buffer import MAX_CHANNELS, SampleBuffer
from .errors import MalformedContainer

HEADER_SIZE = 44
PCM_FORMAT = 1
BITS_PER_SAMPLE = 16
FULL_SCALE = 32767.0

_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")
_CHUNK = struct.Struct("<4sI")
_FMT = struct.Struct("<HHIIHH")


def encode(buffer: SampleBuffer) -> bytes:
  channels = buffer.channel_count
  block_align = channels * BITS_PER_SAMPLE // 8
  data_size = buffer.frame_count * block_align

  header = _HEADER.pack(
    b"RIFF",
    36 + data_size,
    b"WAVE",
    b"fmt ",
    16,
    PCM_FORMAT,
    channels,
    buffer.sample_rate,
    buffer.sample_rate * block_align,
    block_align,
    BITS_PER_SAMPLE,
    b"data",
    data_size,
  )

  clipped = np.clip(buffer.data.astype(np.float64), -1.0, 1.0)
  pcm = np.round(clipped * FULL_SCALE).astype("<i2")
  # [channels, frames] -> frame-major interleave
  return header + pcm.T.tobytes()


def decode(data: bytes) -> SampleBuffer:
  """Parse a PCM WAV container back into a SampleBuffer.

  Unknown chunks between ``fmt `` and ``data`` (LIST, fact, ...) are
  skipped; any missing marker or overrunning size is a MalformedContainer.
  """

  view = memoryview(data)
  if len(view) < 12:
    raise MalformedContainer("container shorter than RIFF header")
  riff, riff_size, wave = struct.unpack_from("<4sI4s", view, 0)
  if riff != b"RIFF":
    raise MalformedContainer("missing RIFF marker")
  if wave != b"WAVE":
    raise MalformedContainer("missing WAVE marker")
  if riff_size + 8 > len(view):
    raise MalformedContainer(f"RIFF size {riff_size} overruns {len(view)} byte buffer")

  fmt = None
  offset = 12
  end = riff_size + 8
  while offset + _CHUNK.size <= end:
    chunk_id, chunk_size = _CHUNK.unpack_from(view, offset)
    body = offset + _CHUNK.size
    if body + chunk_size > end:
      raise MalformedContainer(f"chunk {chunk_id!r} size {chunk_size} overruns container")

    if chunk_id == b"fmt ":
      if chunk_size < _FMT.size:
        raise MalformedContainer("fmt chunk too short")
      fmt = _FMT.unpack_from(view, body)
    elif chunk_id == b"data":
      if fmt is None:
        raise MalformedContainer("data chunk before fmt chunk")
      return _samples_from(view[body:body + chunk_size], fmt)

    # chunks are word aligned
    offset = body + chunk_size + (chunk_size & 1)

  if fmt is None:
    raise MalformedContainer("missing fmt marker")
  raise MalformedContainer("missing data marker")


def _samples_from(payload: memoryview, fmt: tuple) -> SampleBuffer:
  audio_format, channels, sample_rate, _byte_rate, block_align, bits = fmt
  if audio_format != PCM_FORMAT or bits != BITS_PER_SAMPLE:
    raise MalformedContainer(f"expected 16-bit PCM, got format {audio_format} with {bits} bits")
  if not 1 <= channels <= MAX_CHANNELS:
    raise MalformedContainer(f"unsupported channel count {channels}")
  if sample_rate <= 0:
    raise MalformedContainer("sample rate must be positive")
  if block_align != channels * 2:
    raise MalformedContainer(f"block align {block_align} does not match {channels} channel(s)")

  if len(payload) % block_align:
    raise MalformedContainer(f"data size {len(payload)} is not a whole number of {block_align}-byte frames")
  frames = len(payload) // block_align
  pcm = np.frombuffer(payload, dtype="<i2").reshape(frames, channels)
  return SampleBuffer.from_array(pcm.T.astype(np.float32) / FULL_SCALE, sample_rate)
