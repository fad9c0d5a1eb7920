"""Request types for the processing pipeline.

Toggles and parameters are closed, frozen records: unknown keys are
rejected when a request is built, and every numeric knob is clamped to
its documented range when a stage reads it.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Mapping, Tuple

import numpy as np

# name -> (default, low, high)
PARAMETER_RANGES: Dict[str, Tuple[float, float, float]] = {
  "compression_threshold": (-24.0, -60.0, 0.0),
  "compression_ratio": (4.0, 1.0, 20.0),
  "compression_attack": (0.003, 0.0, 1.0),
  "compression_release": (0.25, 0.0, 1.0),
  "eq_low": (0.0, -12.0, 12.0),
  "eq_mid": (0.0, -12.0, 12.0),
  "eq_high": (0.0, -12.0, 12.0),
  "reverb_amount": (0.3, 0.0, 1.0),
  "reverb_decay": (1.0, 0.0, 10.0),
  "reverb_damping": (0.5, 0.0, 1.0),
  "fade_in_duration": (1.0, 0.0, 600.0),
  "fade_out_duration": (1.0, 0.0, 600.0),
}

# Which parameters belong to which toggle; used for reporting only the
# knobs of stages that actually ran.
STAGE_PARAMETERS: Dict[str, Tuple[str, ...]] = {
  "normalize": (),
  "compression": (
    "compression_threshold",
    "compression_ratio",
    "compression_attack",
    "compression_release",
  ),
  "eq": ("eq_low", "eq_mid", "eq_high"),
  "reverb": ("reverb_amount", "reverb_decay", "reverb_damping"),
  "fade_in": ("fade_in_duration",),
  "fade_out": ("fade_out_duration",),
}

_ALIASES: Dict[str, str] = {
  "fadeIn": "fade_in",
  "fadeOut": "fade_out",
  "compressionThreshold": "compression_threshold",
  "compressionRatio": "compression_ratio",
  "compressionAttack": "compression_attack",
  "compressionRelease": "compression_release",
  "eqLow": "eq_low",
  "eqMid": "eq_mid",
  "eqHigh": "eq_high",
  "reverbAmount": "reverb_amount",
  "reverbDecay": "reverb_decay",
  "reverbDamping": "reverb_damping",
  "fadeInDuration": "fade_in_duration",
  "fadeOutDuration": "fade_out_duration",
}


# Fixed processing order; request ordering never leaks into processing.
STAGE_ORDER: Tuple[str, ...] = ("normalize", "compression", "eq", "reverb", "fade_in", "fade_out")


def _canonical(key: str) -> str:
  return _ALIASES.get(key, key)


def clamp_parameter(name: str, value: float | None) -> float:
  """Return ``value`` clamped to the range of ``name``, or its default."""

  default, low, high = PARAMETER_RANGES[name]
  if value is None:
    return default
  v = float(value)
  if np.isnan(v):
    return default
  return float(min(max(v, low), high))


@dataclass(frozen=True)
class EffectToggles:
  normalize: bool = False
  compression: bool = False
  reverb: bool = False
  eq: bool = False
  fade_in: bool = False
  fade_out: bool = False

  @classmethod
  def from_dict(cls, data: Mapping[str, Any] | None) -> "EffectToggles":
    known = {f.name for f in fields(cls)}
    values: Dict[str, bool] = {}
    for key, value in (data or {}).items():
      name = _canonical(key)
      if name not in known:
        raise ValueError(f"Unknown effect: {key}")
      values[name] = bool(value)
    return cls(**values)

  def enabled(self) -> Tuple[str, ...]:
    """Names of enabled stages in pipeline order."""
    return tuple(name for name in STAGE_ORDER if getattr(self, name))


@dataclass(frozen=True)
class EffectParameters:
  """Raw knob values as supplied; ``None`` means "use the default"."""

  compression_threshold: float | None = None
  compression_ratio: float | None = None
  compression_attack: float | None = None
  compression_release: float | None = None
  eq_low: float | None = None
  eq_mid: float | None = None
  eq_high: float | None = None
  reverb_amount: float | None = None
  reverb_decay: float | None = None
  reverb_damping: float | None = None
  fade_in_duration: float | None = None
  fade_out_duration: float | None = None

  @classmethod
  def from_dict(cls, data: Mapping[str, Any] | None) -> "EffectParameters":
    values: Dict[str, float | None] = {}
    for key, value in (data or {}).items():
      name = _canonical(key)
      if name not in PARAMETER_RANGES:
        raise ValueError(f"Unknown parameter: {key}")
      values[name] = None if value is None else float(value)
    return cls(**values)

  def resolved(self, name: str) -> float:
    return clamp_parameter(name, getattr(self, name))

  def resolved_for(self, stage: str) -> Dict[str, float]:
    return {name: self.resolved(name) for name in STAGE_PARAMETERS[stage]}


@dataclass(frozen=True)
class ProcessingRequest:
  toggles: EffectToggles = field(default_factory=EffectToggles)
  parameters: EffectParameters = field(default_factory=EffectParameters)

  @classmethod
  def from_dict(cls, data: Mapping[str, Any]) -> "ProcessingRequest":
    """Build from ``{"effects": {...}, "parameters": {...}}``.

    ``toggles`` is accepted as a synonym for ``effects``.
    """

    effects = data.get("effects", data.get("toggles"))
    return cls(
      toggles=EffectToggles.from_dict(effects),
      parameters=EffectParameters.from_dict(data.get("parameters")),
    )

  def to_dict(self) -> Dict[str, Any]:
    params = {k: v for k, v in asdict(self.parameters).items() if v is not None}
    return {"effects": asdict(self.toggles), "parameters": params}
