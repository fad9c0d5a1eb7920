"""Three-band biquad EQ built on SciPy.

Coefficients follow the RBJ Audio-EQ-Cookbook shelf and peaking
formulas and are evaluated at the buffer's sample rate. Sections are
stored in sos form so the whole cascade runs through a single
`sosfilt` call per channel.

Bands:
- Low shelf at 320 Hz
- Peaking at 1 kHz, Q 1.0
- High shelf at 3.2 kHz
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Tuple

import numpy as np
from scipy.signal import sosfilt, sosfreqz

from .buffer import SampleBuffer
from .params import clamp_parameter

FilterType = Literal["peaking", "lowshelf", "highshelf"]

LOW_SHELF_HZ = 320.0
MID_PEAK_HZ = 1000.0
MID_PEAK_Q = 1.0
HIGH_SHELF_HZ = 3200.0
SHELF_SLOPE = 1.0


@dataclass
class BiquadFilter:
    """One or more cascaded biquad sections in sos form, shape (n, 6)."""

    sos: np.ndarray

    def process(self, x: np.ndarray) -> np.ndarray:
        """Apply the filter to a mono or ``[channels, samples]`` signal.

        Channels are filtered independently with the same coefficients.
        """

        if x.shape[-1] == 0:
            return x.astype(np.float32)
        y = sosfilt(self.sos, x.astype(np.float64), axis=-1)
        return np.asarray(y, dtype=np.float32)

    def then(self, other: "BiquadFilter") -> "BiquadFilter":
        return BiquadFilter(sos=np.vstack([self.sos, other.sos]))


def _clamp_freq(freq: float, sr: int) -> float:
    # Keep corner frequencies safely below Nyquist at low sample rates.
    nyq = sr * 0.5
    return float(np.clip(freq, 10.0, nyq * 0.95))


def design_biquad(
    ftype: FilterType,
    freq: float,
    sr: int,
    gain_db: float = 0.0,
    q: float = 0.707,
) -> BiquadFilter:
    """Design a single cookbook biquad section."""

    freq = _clamp_freq(freq, sr)
    a = 10 ** (gain_db / 40.0)
    w0 = 2.0 * np.pi * freq / sr
    cos_w0 = np.cos(w0)
    sin_w0 = np.sin(w0)

    if ftype == "peaking":
        alpha = sin_w0 / (2.0 * q)
        b0 = 1.0 + alpha * a
        b1 = -2.0 * cos_w0
        b2 = 1.0 - alpha * a
        a0 = 1.0 + alpha / a
        a1 = -2.0 * cos_w0
        a2 = 1.0 - alpha / a
    elif ftype in ("lowshelf", "highshelf"):
        alpha = sin_w0 / 2.0 * np.sqrt((a + 1.0 / a) * (1.0 / SHELF_SLOPE - 1.0) + 2.0)
        two_sqrt_a_alpha = 2.0 * np.sqrt(a) * alpha
        if ftype == "lowshelf":
            b0 = a * ((a + 1.0) - (a - 1.0) * cos_w0 + two_sqrt_a_alpha)
            b1 = 2.0 * a * ((a - 1.0) - (a + 1.0) * cos_w0)
            b2 = a * ((a + 1.0) - (a - 1.0) * cos_w0 - two_sqrt_a_alpha)
            a0 = (a + 1.0) + (a - 1.0) * cos_w0 + two_sqrt_a_alpha
            a1 = -2.0 * ((a - 1.0) + (a + 1.0) * cos_w0)
            a2 = (a + 1.0) + (a - 1.0) * cos_w0 - two_sqrt_a_alpha
        else:
            b0 = a * ((a + 1.0) + (a - 1.0) * cos_w0 + two_sqrt_a_alpha)
            b1 = -2.0 * a * ((a - 1.0) + (a + 1.0) * cos_w0)
            b2 = a * ((a + 1.0) + (a - 1.0) * cos_w0 - two_sqrt_a_alpha)
            a0 = (a + 1.0) - (a - 1.0) * cos_w0 + two_sqrt_a_alpha
            a1 = 2.0 * ((a - 1.0) - (a + 1.0) * cos_w0)
            a2 = (a + 1.0) - (a - 1.0) * cos_w0 - two_sqrt_a_alpha
    else:
        raise ValueError(f"Unsupported filter type: {ftype}")

    sos = np.array([[b0, b1, b2, a0, a1, a2]], dtype=np.float64) / a0
    return BiquadFilter(sos=sos)


def three_band_eq(sr: int, low_db: float, mid_db: float, high_db: float) -> BiquadFilter:
    """Low shelf -> mid peak -> high shelf cascade with clamped gains."""

    low = design_biquad("lowshelf", LOW_SHELF_HZ, sr, gain_db=clamp_parameter("eq_low", low_db))
    mid = design_biquad(
        "peaking", MID_PEAK_HZ, sr, gain_db=clamp_parameter("eq_mid", mid_db), q=MID_PEAK_Q
    )
    high = design_biquad("highshelf", HIGH_SHELF_HZ, sr, gain_db=clamp_parameter("eq_high", high_db))
    return low.then(mid).then(high)


def apply_eq(buffer: SampleBuffer, low_db: float = 0.0, mid_db: float = 0.0, high_db: float = 0.0) -> SampleBuffer:
    # All three sections always run, even at 0 dB.
    cascade = three_band_eq(buffer.sample_rate, low_db, mid_db, high_db)
    return SampleBuffer.from_array(cascade.process(buffer.data), buffer.sample_rate)


def band_gains(sr: int, freqs_hz: Tuple[float, ...], low_db: float, mid_db: float, high_db: float) -> np.ndarray:
    """Magnitude response of the cascade in dB at ``freqs_hz``."""

    cascade = three_band_eq(sr, low_db, mid_db, high_db)
    _, h = sosfreqz(cascade.sos, worN=np.asarray(freqs_hz, dtype=np.float64), fs=sr)
    return 20.0 * np.log10(np.abs(h))
