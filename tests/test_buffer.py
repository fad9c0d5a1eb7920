import numpy as np
import pytest

from fxengine.dsp_engine import InvalidChannelIndex, InvalidInput, SampleBuffer


def test_new_buffer_is_zeroed():
    buf = SampleBuffer(2, 10, 48000)
    assert buf.channel_count == 2
    assert buf.frame_count == 10
    assert buf.sample_rate == 48000
    assert buf.data.dtype == np.float32
    assert not buf.data.any()


def test_duration():
    assert SampleBuffer(1, 22050, 44100).duration == pytest.approx(0.5)


def test_channel_is_mutable_view():
    buf = SampleBuffer(2, 4, 8000)
    buf.channel(1)[:] = 0.25
    assert np.all(buf.data[1] == 0.25)
    assert not buf.data[0].any()


@pytest.mark.parametrize("index", [2, 5, -1])
def test_channel_out_of_range(index):
    buf = SampleBuffer(2, 4, 8000)
    with pytest.raises(InvalidChannelIndex):
        buf.channel(index)


def test_channel_index_error_is_an_index_error():
    with pytest.raises(IndexError):
        SampleBuffer(1, 4, 8000).channel(1)


@pytest.mark.parametrize(
    "channels, frames, sr",
    [(0, 10, 44100), (3, 10, 44100), (1, -1, 44100), (1, 10, 0), (2, 10, -8000)],
)
def test_constructor_rejects_bad_layout(channels, frames, sr):
    with pytest.raises(InvalidInput):
        SampleBuffer(channels, frames, sr)


def test_from_channels_rejects_mismatched_lengths():
    with pytest.raises(InvalidInput):
        SampleBuffer.from_channels([[0.0, 0.1, 0.2], [0.0, 0.1]], 44100)


def test_from_array_mono_and_copy_semantics():
    src = np.array([0.1, -0.2, 0.3], dtype=np.float32)
    buf = SampleBuffer.from_array(src, 16000)
    src[0] = 1.0
    assert buf.channel_count == 1
    assert buf.channel(0)[0] == pytest.approx(0.1)

    clone = buf.copy()
    clone.channel(0)[1] = 0.9
    assert buf.channel(0)[1] == pytest.approx(-0.2)
    assert buf.peak() == pytest.approx(0.3)


def test_validate_rejects_non_finite():
    buf = SampleBuffer(1, 3, 44100)
    buf.channel(0)[1] = np.nan
    with pytest.raises(InvalidInput):
        buf.validate()


def test_empty_buffer_peak_is_zero():
    assert SampleBuffer(1, 0, 44100).peak() == 0.0
