"""Decode third-party audio containers into a SampleBuffer.

Uses soundfile (libsndfile), so anything libsndfile reads works: WAV,
FLAC, OGG/Vorbis and, with libsndfile >= 1.1, MP3.
"""
import io
import logging

import numpy as np
import soundfile as sf

from fxengine.dsp_engine import CorruptSource, SampleBuffer, UnsupportedFormat
from fxengine.dsp_engine.buffer import MAX_CHANNELS

logger = logging.getLogger("fxengine.decoding")


def decode_source(data: bytes) -> SampleBuffer:
    """Decode ``data`` to float32 samples.

    Raises UnsupportedFormat when libsndfile does not recognise the
    container or it has more than two channels, and CorruptSource when the
    payload is empty or cannot be read.
    """

    if not data:
        raise CorruptSource("empty audio payload", stage="decode")

    try:
        info = sf.info(io.BytesIO(data))
    except sf.LibsndfileError as exc:
        raise UnsupportedFormat(f"Unrecognised audio container: {exc}", stage="decode") from exc

    if info.channels > MAX_CHANNELS:
        raise UnsupportedFormat(f"{info.channels}-channel audio is not supported", stage="decode")

    try:
        audio, sr = sf.read(io.BytesIO(data), dtype="float32", always_2d=True)
    except (sf.LibsndfileError, RuntimeError, ValueError) as exc:
        raise CorruptSource(f"Failed to read audio: {exc}", stage="decode") from exc

    logger.debug("Decoded %s/%s: %d frames, %d ch @ %d Hz", info.format, info.subtype, audio.shape[0], audio.shape[1], sr)
    # soundfile yields [frames, channels]
    return SampleBuffer.from_array(np.ascontiguousarray(audio.T), int(sr))
