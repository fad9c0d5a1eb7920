import numpy as np
import pytest

from conftest import SR, sine
from fxengine.config import DEFAULT_MAX_UPLOAD_BYTES, get_settings
from fxengine.dsp_engine import SampleBuffer
from fxengine.dsp_engine.analysis import SILENCE_FLOOR_DB, measure_loudness, waveform_overview


def test_loudness_of_full_scale_sine():
    stats = measure_loudness(sine(freq=1000.0, seconds=2.0, amplitude=1.0))
    # 0 dBFS 1 kHz sine reads about -3 LUFS
    assert -5.0 < stats.integrated_lufs < -1.0
    assert stats.peak == pytest.approx(1.0, abs=1e-4)
    assert stats.rms == pytest.approx(1.0 / np.sqrt(2.0), abs=1e-3)


def test_short_clip_falls_back_to_rms():
    stats = measure_loudness(sine(seconds=0.1, amplitude=0.5))
    assert stats.integrated_lufs == pytest.approx(20.0 * np.log10(0.5 / np.sqrt(2.0)), abs=0.1)


def test_silence_reports_floor():
    assert measure_loudness(SampleBuffer(1, SR, SR)).integrated_lufs == SILENCE_FLOOR_DB
    assert measure_loudness(SampleBuffer(1, 100, SR)).integrated_lufs == SILENCE_FLOOR_DB


def test_waveform_overview_shape():
    x = np.concatenate([np.full(500, 0.1), np.full(500, 0.4)]).astype(np.float32)
    overview = waveform_overview(SampleBuffer.from_array(x, 1000), points=10)
    assert len(overview) == 10
    assert overview[0] == pytest.approx(0.25)
    assert overview[-1] == pytest.approx(1.0)


def test_waveform_overview_of_tiny_or_silent_buffers():
    assert waveform_overview(SampleBuffer(1, 10, SR), points=100) == [0.0] * 100
    assert waveform_overview(SampleBuffer(1, 1000, SR), points=10) == [0.0] * 10
    assert waveform_overview(SampleBuffer(1, 1000, SR), points=0) == []


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("FX_LOG_LEVEL", "debug")
    monkeypatch.setenv("FX_MAX_UPLOAD_BYTES", "not-a-number")
    monkeypatch.setenv("FX_CORS_ORIGINS", "https://a.example, https://b.example")
    get_settings.cache_clear()
    try:
        settings = get_settings()
    finally:
        get_settings.cache_clear()
    assert settings.log_level == "DEBUG"
    assert settings.max_upload_bytes == DEFAULT_MAX_UPLOAD_BYTES
    assert settings.cors_origins == ("https://a.example", "https://b.example")
