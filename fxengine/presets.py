"""Named effect presets.

Each preset is a ProcessingRequest-shaped dict: which effects are on and
the knob values they use. Only the fixed effect set is represented.
"""
from copy import deepcopy
from typing import Any, Dict, List

from fxengine.dsp_engine import ProcessingRequest, UnknownPreset


PRESETS: Dict[str, Dict[str, Any]] = {
    "default": {
        "name": "Default",
        "effects": {"eq": True, "compression": True},
        "parameters": {
            "eq_low": 0, "eq_mid": 0, "eq_high": 0,
            "compression_threshold": -24, "compression_ratio": 2,
            "compression_attack": 0.1, "compression_release": 0.25,
            "reverb_amount": 0.3, "reverb_decay": 1.0, "reverb_damping": 0.5,
        },
    },
    "vocal_boost": {
        "name": "Vocal Boost",
        "effects": {"eq": True, "compression": True, "reverb": True},
        "parameters": {
            "eq_low": -2, "eq_mid": 3, "eq_high": 2,
            "compression_threshold": -20, "compression_ratio": 4,
            "compression_attack": 0.1, "compression_release": 0.3,
            "reverb_amount": 0.2, "reverb_decay": 1.0, "reverb_damping": 0.5,
        },
    },
    "podcast": {
        "name": "Podcast",
        "effects": {"eq": True, "compression": True},
        "parameters": {
            "eq_low": -1, "eq_mid": 2, "eq_high": 1,
            "compression_threshold": -18, "compression_ratio": 3,
            "compression_attack": 0.05, "compression_release": 0.2,
            "reverb_amount": 0.1, "reverb_decay": 0.8, "reverb_damping": 0.7,
        },
    },
    "warm_vintage": {
        "name": "Warm Vintage",
        "effects": {"eq": True, "compression": True, "reverb": True},
        "parameters": {
            "eq_low": 2, "eq_mid": 0, "eq_high": -2,
            "compression_threshold": -15, "compression_ratio": 2,
            "compression_attack": 0.1, "compression_release": 0.4,
            "reverb_amount": 0.3, "reverb_decay": 1.2, "reverb_damping": 0.4,
        },
    },
    "bright_and_clear": {
        "name": "Bright and Clear",
        "effects": {"eq": True, "compression": True},
        "parameters": {
            "eq_low": -1, "eq_mid": 0, "eq_high": 3,
            "compression_threshold": -20, "compression_ratio": 2,
            "compression_attack": 0.05, "compression_release": 0.2,
            "reverb_amount": 0.1, "reverb_decay": 0.8, "reverb_damping": 0.6,
        },
    },
    "deep_bass": {
        "name": "Deep Bass",
        "effects": {"eq": True, "compression": True},
        "parameters": {
            "eq_low": 4, "eq_mid": -1, "eq_high": -2,
            "compression_threshold": -25, "compression_ratio": 3,
            "compression_attack": 0.1, "compression_release": 0.3,
            "reverb_amount": 0.2, "reverb_decay": 1.5, "reverb_damping": 0.3,
        },
    },
    "telephone": {
        "name": "Telephone Effect",
        "effects": {"eq": True, "compression": True},
        "parameters": {
            "eq_low": -5, "eq_mid": 3, "eq_high": -5,
            "compression_threshold": -15, "compression_ratio": 5,
            "compression_attack": 0.01, "compression_release": 0.1,
            "reverb_amount": 0.1, "reverb_decay": 0.5, "reverb_damping": 0.8,
        },
    },
    "stadium_reverb": {
        "name": "Stadium Reverb",
        "effects": {"eq": True, "compression": True, "reverb": True},
        "parameters": {
            "eq_low": 1, "eq_mid": 0, "eq_high": 2,
            "compression_threshold": -20, "compression_ratio": 2,
            "compression_attack": 0.1, "compression_release": 0.4,
            "reverb_amount": 0.8, "reverb_decay": 3.0, "reverb_damping": 0.3,
        },
    },
}

# Display names double as lookup keys ("Vocal Boost" -> "vocal_boost").
_BY_NAME: Dict[str, str] = {p["name"].lower(): key for key, p in PRESETS.items()}


def _resolve_key(name: str) -> str:
    key = (name or "").strip().lower()
    if key in PRESETS:
        return key
    if key in _BY_NAME:
        return _BY_NAME[key]
    raise UnknownPreset(f"Unknown preset: {name}")


def list_presets() -> List[Dict[str, Any]]:
    """Return the preset catalog for UIs: key, display name and enabled effects."""

    return [
        {
            "key": key,
            "name": preset["name"],
            "effects": sorted(k for k, on in preset["effects"].items() if on),
        }
        for key, preset in PRESETS.items()
    ]


def get_preset(name: str) -> Dict[str, Any]:
    return deepcopy(PRESETS[_resolve_key(name)])


def request_from_preset(name: str, overrides: Dict[str, Any] | None = None) -> ProcessingRequest:
    """Build a ProcessingRequest from a preset, merging caller overrides.

    ``overrides`` has the same ``{"effects": ..., "parameters": ...}`` shape;
    each section is merged key by key over the preset's values.
    """

    preset = get_preset(name)
    merged = {
        "effects": {**preset["effects"], **((overrides or {}).get("effects") or {})},
        "parameters": {**preset["parameters"], **((overrides or {}).get("parameters") or {})},
    }
    return ProcessingRequest.from_dict(merged)
