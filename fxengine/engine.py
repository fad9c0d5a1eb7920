"""Bytes-in, bytes-out entry points around the DSP pipeline.

- Decodes the uploaded container via soundfile
- Runs the requested effects through the pipeline
- Encodes the result as canonical 16-bit PCM WAV
"""
import logging
import threading
from typing import Any, Dict, Optional, Tuple

import numpy as np

from fxengine.decoding import decode_source
from fxengine.dsp_engine import ProcessingRequest, ProcessingResult, pcm_codec, process
from fxengine.dsp_engine.analysis import measure_loudness, waveform_overview
from fxengine.dsp_engine.pipeline import ProgressCallback

logger = logging.getLogger("fxengine.engine")


def process_bytes(
    data: bytes,
    request: ProcessingRequest,
    on_progress: Optional[ProgressCallback] = None,
    rng: Optional[np.random.Generator] = None,
    cancel_event: Optional[threading.Event] = None,
) -> Tuple[bytes, ProcessingResult]:
    """Decode ``data``, apply ``request`` and return WAV bytes plus the result."""

    buffer = decode_source(data)
    result = process(buffer, request, on_progress=on_progress, rng=rng, cancel_event=cancel_event)
    wav = pcm_codec.encode(result.buffer)
    logger.debug("Encoded %d bytes of WAV output", len(wav))
    return wav, result


def analyze_bytes(data: bytes, points: int = 100) -> Dict[str, Any]:
    """Return basic stats and a waveform overview for an uploaded file."""

    buffer = decode_source(data)
    stats = measure_loudness(buffer)
    return {
        "sample_rate": buffer.sample_rate,
        "channels": buffer.channel_count,
        "duration": buffer.duration,
        "peak": stats.peak,
        "rms": stats.rms,
        "integrated_lufs": stats.integrated_lufs,
        "waveform": waveform_overview(buffer, points=points),
    }
