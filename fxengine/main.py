import logging
from typing import Dict, Optional

from fastapi import FastAPI, File, Form, HTTPException, Response, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from fxengine.config import get_settings
from fxengine.dsp_engine import (
    CorruptSource,
    FxEngineError,
    ProcessingRequest,
    UnknownPreset,
    UnsupportedFormat,
)
from fxengine.dsp_engine.pipeline import ProcessingMetrics
from fxengine.engine import analyze_bytes, process_bytes
from fxengine.models import AnalysisResponse, EffectsForm, ErrorDetail, ParametersForm, PresetSummary
from fxengine.presets import list_presets, request_from_preset

logger = logging.getLogger("fxengine")

settings = get_settings()
logger.setLevel(settings.log_level)

app = FastAPI(title="FX Engine")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)


def _error(status_code: int, exc: FxEngineError) -> HTTPException:
    detail = ErrorDetail(error=exc.error_code, message=exc.message, stage=exc.stage)
    return HTTPException(status_code=status_code, detail=detail.model_dump())


def _read_upload(file: UploadFile) -> bytes:
    """Read the upload, refusing anything over the configured limit."""

    limit = get_settings().max_upload_bytes
    try:
        data = file.file.read(limit + 1)
    finally:
        file.file.close()
    if len(data) > limit:
        raise HTTPException(
            status_code=413,
            detail=ErrorDetail(error="UPLOAD_TOO_LARGE", message=f"Upload exceeds {limit} bytes").model_dump(),
        )
    return data


def _build_request(effects: Optional[str], parameters: Optional[str], preset: Optional[str]) -> ProcessingRequest:
    try:
        effects_form = EffectsForm.model_validate_json(effects) if effects else None
        params_form = ParametersForm.model_validate_json(parameters) if parameters else None
    except ValidationError as exc:
        raise HTTPException(
            status_code=400,
            detail=ErrorDetail(error="INVALID_REQUEST", message=str(exc)).model_dump(),
        ) from exc

    overrides = {
        "effects": effects_form.model_dump(exclude_unset=True) if effects_form else {},
        "parameters": params_form.model_dump(exclude_none=True) if params_form else {},
    }
    if preset:
        try:
            return request_from_preset(preset, overrides)
        except UnknownPreset as exc:
            raise _error(404, exc) from exc
    return ProcessingRequest.from_dict(overrides)


def _metric_headers(metrics: ProcessingMetrics) -> Dict[str, str]:
    return {
        "X-Fx-Peak-Before": f"{metrics.peak_before:.6f}",
        "X-Fx-Peak-After": f"{metrics.peak_after:.6f}",
        "X-Fx-Applied-Stages": ",".join(metrics.applied_stages),
        "X-Fx-Loudness-Before": f"{metrics.loudness_before:.2f}",
        "X-Fx-Loudness-After": f"{metrics.loudness_after:.2f}",
        "X-Fx-Duration": f"{metrics.duration:.6f}",
    }


@app.get("/health")
def health():
    """Static payload for uptime checks; does not touch the DSP stack."""
    return {"status": "ok"}


@app.get("/presets", response_model=list[PresetSummary])
def presets():
    return list_presets()


@app.post("/analyze", response_model=AnalysisResponse)
def analyze(file: UploadFile = File(...)):
    """Return sample rate, level stats and a 100-point waveform overview."""

    data = _read_upload(file)
    try:
        return analyze_bytes(data)
    except (UnsupportedFormat, CorruptSource) as exc:
        raise _error(400, exc) from exc


@app.post("/process")
def process(
    file: UploadFile = File(...),
    effects: Optional[str] = Form(None),
    parameters: Optional[str] = Form(None),
    preset: Optional[str] = Form(None),
):
    """Process an uploaded audio file and return 16-bit PCM WAV.

    ``effects`` and ``parameters`` are JSON objects (snake_case or camelCase
    keys). When ``preset`` is given they are merged over the preset's values.
    Metrics are returned in ``X-Fx-*`` headers.
    """

    request = _build_request(effects, parameters, preset)
    data = _read_upload(file)

    try:
        wav, result = process_bytes(data, request)
    except FxEngineError as exc:
        logger.warning("[FX] Processing rejected at stage=%s: %s", exc.stage, exc)
        raise _error(400, exc) from exc
    except MemoryError as exc:  # pragma: no cover - depends on host limits
        logger.exception("[FX] MemoryError while processing %s", file.filename)
        raise HTTPException(
            status_code=500,
            detail=ErrorDetail(error="FX_MEMORY_ERROR", message=str(exc)).model_dump(),
        ) from exc

    return Response(content=wav, media_type="audio/wav", headers=_metric_headers(result.metrics))
