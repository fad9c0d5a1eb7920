import pytest

from fxengine.dsp_engine import UnknownPreset
from fxengine.presets import PRESETS, get_preset, list_presets, request_from_preset


def test_catalog_lists_every_preset():
    catalog = list_presets()
    assert [p["key"] for p in catalog] == list(PRESETS)
    stadium = next(p for p in catalog if p["key"] == "stadium_reverb")
    assert stadium["name"] == "Stadium Reverb"
    assert stadium["effects"] == ["compression", "eq", "reverb"]


@pytest.mark.parametrize("name", ["vocal_boost", "Vocal Boost", "  VOCAL BOOST "])
def test_lookup_by_key_or_display_name(name):
    assert get_preset(name)["parameters"]["eq_mid"] == 3


def test_get_preset_returns_a_copy():
    preset = get_preset("podcast")
    preset["parameters"]["eq_mid"] = 12
    assert PRESETS["podcast"]["parameters"]["eq_mid"] == 2


def test_request_from_preset():
    request = request_from_preset("telephone")
    assert request.toggles.enabled() == ("compression", "eq")
    assert request.parameters.resolved("eq_low") == -5.0
    assert request.parameters.resolved("compression_ratio") == 5.0


def test_overrides_merge_over_preset():
    request = request_from_preset(
        "deep_bass",
        {"effects": {"normalize": True, "compression": False}, "parameters": {"eqLow": 6}},
    )
    assert request.toggles.enabled() == ("normalize", "eq")
    assert request.parameters.resolved("eq_low") == 6.0
    assert request.parameters.resolved("eq_high") == -2.0


def test_unknown_preset():
    with pytest.raises(UnknownPreset):
        request_from_preset("lo-fi")
    with pytest.raises(KeyError):
        get_preset("nope")
