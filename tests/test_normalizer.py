import numpy as np
import pytest

from conftest import sine, zero_crossings
from fxengine.dsp_engine import SampleBuffer
from fxengine.dsp_engine.normalizer import PEAK_CEILING, normalize


def test_peak_hits_ceiling(sine_buffer):
    out = normalize(sine_buffer)
    assert out.peak() == pytest.approx(PEAK_CEILING, abs=1e-6)


def test_idempotent(stereo_noise):
    once = normalize(stereo_noise)
    twice = normalize(once)
    assert abs(twice.peak() - once.peak()) < 1e-6
    np.testing.assert_allclose(twice.data, once.data, atol=1e-6)


def test_silence_is_unchanged():
    silent = SampleBuffer(2, 1000, 44100)
    out = normalize(silent)
    assert not out.data.any()
    assert out is not silent


def test_gain_is_shared_across_channels():
    data = np.stack([
        np.full(100, 0.5, dtype=np.float32),
        np.full(100, 0.25, dtype=np.float32),
    ])
    out = normalize(SampleBuffer.from_array(data, 44100))
    assert out.channel(0)[0] == pytest.approx(0.99, abs=1e-6)
    assert out.channel(1)[0] == pytest.approx(0.495, abs=1e-6)


def test_input_is_not_mutated(sine_buffer):
    before = sine_buffer.data.copy()
    normalize(sine_buffer)
    np.testing.assert_array_equal(sine_buffer.data, before)


def test_zero_crossings_preserved():
    buf = sine(amplitude=0.1)
    out = normalize(buf)
    assert abs(zero_crossings(out.channel(0)) - zero_crossings(buf.channel(0))) <= 1
