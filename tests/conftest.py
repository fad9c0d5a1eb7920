import numpy as np
import pytest

from fxengine.dsp_engine import SampleBuffer

SR = 44100


def sine(freq=440.0, seconds=1.0, amplitude=0.5, sr=SR, channels=1):
    t = np.arange(int(seconds * sr)) / sr
    x = (amplitude * np.sin(2.0 * np.pi * freq * t)).astype(np.float32)
    return SampleBuffer.from_array(np.tile(x, (channels, 1)), sr)


def zero_crossings(x):
    signs = np.signbit(x)
    return int(np.count_nonzero(signs[1:] != signs[:-1]))


@pytest.fixture
def sine_buffer():
    return sine()


@pytest.fixture
def stereo_noise():
    rng = np.random.default_rng(1234)
    data = rng.uniform(-0.4, 0.4, size=(2, SR // 4)).astype(np.float32)
    return SampleBuffer.from_array(data, SR)
