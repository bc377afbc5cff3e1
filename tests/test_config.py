"""Tests for loading anatomical constants from YAML."""

from pathlib import Path

import pytest

from ossicles.constants import AnatomicalConstants, ParameterRange, DEFAULT_CONSTANTS
from ossicles.config import load_constants, save_constants, constants_to_dict

DEFAULT_CONFIG = Path(__file__).resolve().parents[1] / "configs" / "default.yaml"


def test_none_returns_defaults():
    assert load_constants(None) is DEFAULT_CONSTANTS


def test_shipped_config_matches_defaults():
    assert load_constants(DEFAULT_CONFIG) == DEFAULT_CONSTANTS


def test_partial_file_keeps_defaults(tmp_path):
    path = tmp_path / "partial.yaml"
    path.write_text("anatomy:\n  eardrum_area: 60.0\nranges:\n  stapes: {max: 1.5}\n")

    constants = load_constants(path)

    assert constants.eardrum_area == 60.0
    assert constants.oval_window_area == DEFAULT_CONSTANTS.oval_window_area
    assert constants.range_for('stapes') == ParameterRange(0.5, 1.5)
    assert constants.range_for('malleus') == ParameterRange(0.5, 2.0)


def test_round_trip(tmp_path):
    original = AnatomicalConstants(
        eardrum_area=60.0,
        visual_scale=8.0,
        ranges={'incus': ParameterRange(0.5, 1.5)},
    )
    path = save_constants(original, tmp_path / "nested" / "constants.yaml")
    assert path.exists()
    assert load_constants(path) == original


def test_unknown_keys_are_ignored(tmp_path, caplog):
    path = tmp_path / "extra.yaml"
    path.write_text("anatomy:\n  cochlea_length: 35.0\nnotes:\n  author: x\n")

    with caplog.at_level("WARNING", logger="ossicles.config"):
        constants = load_constants(path)

    assert constants == DEFAULT_CONSTANTS
    assert "cochlea_length" in caplog.text
    assert "notes" in caplog.text


def test_unknown_range_raises(tmp_path):
    path = tmp_path / "bad_range.yaml"
    path.write_text("ranges:\n  inputLeverArm: {min: 0.5, max: 1.5}\n")
    with pytest.raises(ValueError, match="inputLeverArm"):
        load_constants(path)


def test_invalid_value_raises(tmp_path):
    path = tmp_path / "bad_value.yaml"
    path.write_text("anatomy:\n  oval_window_area: 0.0\n")
    with pytest.raises(ValueError, match="oval_window_area"):
        load_constants(path)


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_constants(tmp_path / "missing.yaml")


def test_dict_layout():
    d = constants_to_dict(DEFAULT_CONSTANTS)
    assert set(d) == {'anatomy', 'display', 'ranges'}
    assert d['display']['visual_scale'] == 10.0
    assert d['ranges']['oval_window'] == {'min': 0.5, 'max': 2.0}
