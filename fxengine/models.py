"""Pydantic models for the HTTP surface.

Field aliases accept the camelCase keys older clients send.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EffectsForm(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    normalize: bool = False
    compression: bool = False
    reverb: bool = False
    eq: bool = False
    fade_in: bool = Field(False, alias="fadeIn")
    fade_out: bool = Field(False, alias="fadeOut")


class ParametersForm(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    compression_threshold: Optional[float] = Field(None, alias="compressionThreshold")
    compression_ratio: Optional[float] = Field(None, alias="compressionRatio")
    compression_attack: Optional[float] = Field(None, alias="compressionAttack")
    compression_release: Optional[float] = Field(None, alias="compressionRelease")
    eq_low: Optional[float] = Field(None, alias="eqLow")
    eq_mid: Optional[float] = Field(None, alias="eqMid")
    eq_high: Optional[float] = Field(None, alias="eqHigh")
    reverb_amount: Optional[float] = Field(None, alias="reverbAmount")
    reverb_decay: Optional[float] = Field(None, alias="reverbDecay")
    reverb_damping: Optional[float] = Field(None, alias="reverbDamping")
    fade_in_duration: Optional[float] = Field(None, alias="fadeInDuration")
    fade_out_duration: Optional[float] = Field(None, alias="fadeOutDuration")


class AnalysisResponse(BaseModel):
    sample_rate: int
    channels: int
    duration: float
    peak: float
    rms: float
    integrated_lufs: float
    waveform: List[float]


class PresetSummary(BaseModel):
    key: str
    name: str
    effects: List[str]


class ErrorDetail(BaseModel):
    error: str
    message: str
    stage: Optional[str] = None
