import numpy as np
import pytest

from conftest import SR, sine
from fxengine.dsp_engine import SampleBuffer
from fxengine.dsp_engine.compressor import KNEE_DB, Compressor, compress


def test_silence_stays_silent():
    out = compress(SampleBuffer(2, 4410, SR))
    assert np.all(np.isfinite(out.data))
    assert not out.data.any()


def test_signal_below_knee_is_untouched():
    # -46 dBFS sits below threshold - knee/2 = -39 dB
    quiet = sine(amplitude=0.005)
    out = compress(quiet, threshold_db=-24.0, ratio=4.0)
    np.testing.assert_array_equal(out.data, quiet.data)


def test_loud_signal_is_reduced():
    loud = sine(amplitude=1.0)
    out = compress(loud, threshold_db=-24.0, ratio=4.0)
    tail = out.channel(0)[-SR // 4:]
    assert np.max(np.abs(tail)) < 0.5


def test_higher_ratio_compresses_harder():
    loud = sine(amplitude=0.9)
    gentle = compress(loud, ratio=2.0)
    hard = compress(loud, ratio=20.0)
    assert hard.peak() < gentle.peak()


def test_static_curve_regions_and_continuity():
    comp = Compressor(threshold_db=-24.0, ratio=4.0)
    half = KNEE_DB / 2.0
    levels = np.array([-80.0, -24.0 - half, -24.0, -24.0 + half, 0.0])
    gr = comp.static_curve(levels)
    slope = 1.0 - 1.0 / 4.0
    assert gr[0] == 0.0
    assert gr[1] == pytest.approx(0.0)
    assert 0.0 < gr[2] < slope * half
    assert gr[3] == pytest.approx(slope * half)
    assert gr[4] == pytest.approx(slope * 24.0)
    assert np.all(np.diff(gr) >= 0)


def test_hard_knee_when_knee_is_zero():
    comp = Compressor(threshold_db=-20.0, ratio=2.0, knee_db=0.0)
    gr = comp.static_curve(np.array([-30.0, -20.0, -10.0]))
    np.testing.assert_allclose(gr, [0.0, 0.0, 5.0])


def test_fast_attack_slow_release():
    burst = np.concatenate([
        np.ones(int(0.2 * SR)),
        np.full(int(0.2 * SR), 0.001),
    ]).astype(np.float32)
    comp = Compressor(threshold_db=-24.0, ratio=4.0, attack_s=0.003, release_s=0.25)
    gr = comp.gain_reduction(burst[np.newaxis, :], SR)

    assert gr[0] < gr[int(0.02 * SR)]
    assert gr[int(0.02 * SR)] > 17.0
    release = gr[int(0.2 * SR):]
    assert release[int(0.02 * SR)] > 10.0
    assert np.all(np.diff(release) <= 1e-12)


def test_smoothing_starts_from_zero_each_call():
    comp = Compressor()
    loud = np.ones((1, 100), dtype=np.float32)
    first = comp.gain_reduction(loud, SR)
    second = comp.gain_reduction(loud, SR)
    np.testing.assert_array_equal(first, second)
    assert first[0] < first[-1]


def test_detector_is_linked_across_channels():
    rng = np.random.default_rng(7)
    left = rng.uniform(-1.0, 1.0, SR // 10)
    data = np.stack([left, 0.1 * left]).astype(np.float32)
    out = compress(SampleBuffer.from_array(data, SR), threshold_db=-30.0, ratio=8.0)
    mask = np.abs(data[1]) > 1e-3
    np.testing.assert_allclose(
        out.data[0][mask] / data[0][mask],
        out.data[1][mask] / data[1][mask],
        rtol=1e-4,
    )


def test_out_of_range_parameters_are_clamped():
    comp = Compressor(threshold_db=-200.0, ratio=100.0, attack_s=-1.0, release_s=5.0).clamped()
    assert comp.threshold_db == -60.0
    assert comp.ratio == 20.0
    assert comp.attack_s == 0.0
    assert comp.release_s == 1.0


def test_input_is_not_mutated(stereo_noise):
    before = stereo_noise.data.copy()
    compress(stereo_noise, threshold_db=-40.0)
    np.testing.assert_array_equal(stereo_noise.data, before)
