import dataclasses

import pytest

from pdf_sign_mcp import config
from pdf_sign_mcp.errors import InvalidSettingsError
from pdf_sign_mcp.settings import (
    PlacementMode,
    Position,
    SignatureSettings,
    parse_page_range,
    pdf_point_to_ui,
    ui_to_pdf_point,
)


def test_defaults_match_config():
    settings = SignatureSettings()
    assert settings.mode is PlacementMode.ALL
    assert settings.scale == config.DEFAULT_SCALE
    assert settings.opacity == config.DEFAULT_OPACITY
    assert settings.global_position == Position(config.DEFAULT_X, config.DEFAULT_Y)
    assert settings.selected_pages == frozenset()
    assert settings.per_page_positions == {}
    assert settings.is_grayscale is False


def test_settings_are_immutable():
    settings = SignatureSettings()
    with pytest.raises(dataclasses.FrozenInstanceError):
        settings.scale = 50  # type: ignore[misc]

    changed = dataclasses.replace(settings, scale=50)
    assert changed.scale == 50
    assert settings.scale == config.DEFAULT_SCALE


def test_selected_pages_normalised_to_set():
    settings = SignatureSettings(mode="custom", selected_pages=[3, 1, 3])
    assert settings.mode is PlacementMode.CUSTOM
    assert settings.selected_pages == frozenset({1, 3})


def test_per_page_positions_are_copied():
    overrides = {0: Position(1, 2)}
    settings = SignatureSettings(per_page_positions=overrides)
    overrides[1] = Position(3, 4)
    assert 1 not in settings.per_page_positions


@pytest.mark.parametrize("scale", [0, -5])
def test_invalid_scale(scale):
    with pytest.raises(InvalidSettingsError):
        SignatureSettings(scale=scale)


@pytest.mark.parametrize("opacity", [-0.1, 1.01])
def test_invalid_opacity(opacity):
    with pytest.raises(InvalidSettingsError):
        SignatureSettings(opacity=opacity)


def test_invalid_mode():
    with pytest.raises(InvalidSettingsError, match="placement mode"):
        SignatureSettings(mode="first")


def test_position_for_falls_back_to_global():
    settings = SignatureSettings(
        global_position=Position(5, 6), per_page_positions={2: Position(7, 8)}
    )
    assert settings.position_for(2) == Position(7, 8)
    assert settings.position_for(0) == Position(5, 6)


def test_from_dict_full():
    settings = SignatureSettings.from_dict(
        {
            "mode": "CUSTOM",
            "selected_pages": [0, "2"],
            "scale": "30",
            "opacity": 0.5,
            "is_grayscale": True,
            "x": 100,
            "y": 200,
            "per_page_positions": {"2": {"x": 10, "y": 11}, 3: [12, 13]},
        }
    )
    assert settings.mode is PlacementMode.CUSTOM
    assert settings.selected_pages == frozenset({0, 2})
    assert settings.scale == 30.0
    assert settings.opacity == 0.5
    assert settings.is_grayscale is True
    assert settings.global_position == Position(100, 200)
    assert settings.per_page_positions == {2: Position(10, 11), 3: Position(12, 13)}


def test_from_dict_none_values_keep_defaults():
    settings = SignatureSettings.from_dict(
        {"mode": None, "scale": None, "x": None, "y": None, "per_page_positions": None}
    )
    assert settings == SignatureSettings()
    assert SignatureSettings.from_dict(None) == SignatureSettings()


def test_from_dict_partial_position():
    settings = SignatureSettings.from_dict({"y": 90})
    assert settings.global_position == Position(config.DEFAULT_X, 90)


def test_from_dict_rejects_garbage():
    with pytest.raises(InvalidSettingsError):
        SignatureSettings.from_dict({"scale": "big"})
    with pytest.raises(InvalidSettingsError):
        SignatureSettings.from_dict({"per_page_positions": {"1": {"x": 1}}})


def test_parse_page_range_mixed():
    assert parse_page_range("1, 3-5, 10", 10) == [0, 2, 3, 4, 9]


def test_parse_page_range_reversed_and_duplicates():
    assert parse_page_range("5-3, 4, 4", 10) == [2, 3, 4]


def test_parse_page_range_ignores_invalid_parts():
    assert parse_page_range("0, 11, abc, 2, 8-12, x-3", 10) == [1, 7, 8, 9]


def test_parse_page_range_empty():
    assert parse_page_range("", 5) == []
    assert parse_page_range(" , ", 5) == []
    assert parse_page_range("1-3", 0) == []


def test_ui_mapping_uses_letter_page():
    assert ui_to_pdf_point(50, 50) == Position(306.0, 396.0)
    assert ui_to_pdf_point(0, 100) == Position(0.0, 792.0)
    assert pdf_point_to_ui(Position(612, 198)) == (100.0, 25.0)


def test_per_page_positions_accept_pairs_and_mappings():
    settings = SignatureSettings(per_page_positions={"1": (5, 6), 2: {"x": 7, "y": 8}})
    assert settings.per_page_positions == {1: Position(5, 6), 2: Position(7, 8)}
    assert settings.position_for(1) == Position(5, 6)


def test_per_page_positions_are_read_only():
    settings = SignatureSettings(per_page_positions={0: Position(1, 2)})
    with pytest.raises(TypeError):
        settings.per_page_positions[1] = Position(3, 4)  # type: ignore[index]


def test_settings_are_hashable():
    a = SignatureSettings(mode="custom", selected_pages=[2, 1], per_page_positions={1: (5, 6)})
    b = SignatureSettings(mode="custom", selected_pages=[1, 2], per_page_positions={1: Position(5, 6)})
    assert a == b
    assert hash(a) == hash(b)
    assert len({a, b, SignatureSettings()}) == 2


@pytest.mark.parametrize(
    "kwargs",
    [
        {"selected_pages": ["two"]},
        {"per_page_positions": {"first": (1, 2)}},
        {"per_page_positions": {1: (1, 2, 3)}},
        {"global_position": "top"},
        {"scale": "big"},
        {"is_grayscale": "maybe"},
    ],
)
def test_malformed_values_raise_settings_error(kwargs):
    with pytest.raises(InvalidSettingsError):
        SignatureSettings(**kwargs)


@pytest.mark.parametrize(
    "raw,expected",
    [(True, True), (False, False), ("false", False), ("False", False), ("true", True), ("1", True), (0, False)],
)
def test_from_dict_grayscale_flag(raw, expected):
    assert SignatureSettings.from_dict({"is_grayscale": raw}).is_grayscale is expected
