"""Service configuration read from the environment.

Only the HTTP layer reads these settings; the DSP core takes everything
it needs through ProcessingRequest.
"""
import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple

DEFAULT_MAX_UPLOAD_BYTES = 100 * 1024 * 1024


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    cors_origins: Tuple[str, ...] = ("http://localhost:3000",)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logging.getLogger("fxengine.config").warning("Ignoring non-integer %s=%r", name, raw)
        return default


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    origins = os.getenv("FX_CORS_ORIGINS")
    return Settings(
        log_level=(os.getenv("FX_LOG_LEVEL") or "INFO").upper(),
        max_upload_bytes=_int_env("FX_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
        cors_origins=(
            tuple(o.strip() for o in origins.split(",") if o.strip())
            if origins
            else Settings.cors_origins
        ),
    )
