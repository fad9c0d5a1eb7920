"""Synthetic convolution reverb.

The impulse response is exponentially-shaped white noise generated fresh
on every call from the reverb parameters:

    ir[i] = uniform(-1, 1) * (1 - t / decay) ** (damping * 10),  t = i / sr

Each input channel is convolved with its own IR channel and mixed back
with the dry signal. The wet tail past the original length is dropped,
so the output has exactly as many frames as the input. A decay shorter
than one sample gives an empty IR and the input passes through unchanged.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy.signal import fftconvolve

from .buffer import SampleBuffer
from .params import clamp_parameter


@dataclass
class ReverbSettings:
    amount: float = 0.3
    decay_s: float = 1.0
    damping: float = 0.5

    def clamped(self) -> "ReverbSettings":
        return ReverbSettings(
            amount=clamp_parameter("reverb_amount", self.amount),
            decay_s=clamp_parameter("reverb_decay", self.decay_s),
            damping=clamp_parameter("reverb_damping", self.damping),
        )


def synthesize_impulse_response(
    channels: int,
    sr: int,
    decay_s: float,
    damping: float,
    rng: Optional[np.random.Generator] = None,
) -> SampleBuffer:
    """Decaying-noise IR of ``int(decay_s * sr)`` frames per channel.

    ``decay_s <= 0`` gives an empty IR.
    """

    length = int(decay_s * sr) if decay_s > 0.0 else 0
    ir = SampleBuffer(channels, length, sr)
    if length == 0:
        return ir

    rng = rng if rng is not None else np.random.default_rng()
    t = np.arange(length, dtype=np.float64) / sr
    envelope = np.power(np.clip(1.0 - t / decay_s, 0.0, 1.0), damping * 10.0)
    noise = rng.uniform(-1.0, 1.0, size=(channels, length))
    ir.data[...] = (noise * envelope[np.newaxis, :]).astype(np.float32)
    return ir


class ConvolutionReverb:
    """Convolves each channel with a freshly generated IR and mixes wet/dry."""

    def __init__(self, settings: ReverbSettings, rng: Optional[np.random.Generator] = None) -> None:
        self.settings = settings.clamped()
        self.rng = rng

    def wet(self, buffer: SampleBuffer, ir: SampleBuffer) -> np.ndarray:
        """Convolution result truncated to the input length."""

        n = buffer.frame_count
        out = np.zeros((buffer.channel_count, n), dtype=np.float64)
        if n == 0 or ir.frame_count == 0:
            return out
        for ch in range(buffer.channel_count):
            full = fftconvolve(buffer.channel(ch).astype(np.float64), ir.channel(ch).astype(np.float64))
            out[ch] = full[:n]
        return out

    def process(self, buffer: SampleBuffer) -> SampleBuffer:
        s = self.settings
        ir = synthesize_impulse_response(
            buffer.channel_count, buffer.sample_rate, s.decay_s, s.damping, rng=self.rng
        )
        if ir.frame_count == 0:
            return buffer.copy()
        dry = buffer.data.astype(np.float64)
        mixed = dry * (1.0 - s.amount) + self.wet(buffer, ir) * s.amount
        return SampleBuffer.from_array(mixed.astype(np.float32), buffer.sample_rate)


def apply_reverb(
    buffer: SampleBuffer,
    amount: float = 0.3,
    decay_s: float = 1.0,
    damping: float = 0.5,
    rng: Optional[np.random.Generator] = None,
) -> SampleBuffer:
    return ConvolutionReverb(ReverbSettings(amount=amount, decay_s=decay_s, damping=damping), rng=rng).process(buffer)
