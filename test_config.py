"""Tests for StyleConfig, validation and TOML configuration loading."""

import math

import pytest
from pydantic import ValidationError

from labelgen.config import Config, StyleConfig, load_config, load_styles, validate_style
from labelgen.errors import InvalidConfigurationError
from labelgen.utils.color import parse_color, scale_alpha, to_hex

CONFIG_TOML = """
[fonts]
font_dirs = ["fonts", "/opt/shared/fonts"]
google_fonts = false

[styles.default]
size = 20
halo_width = 2

[styles.city]
fonts = "Roboto:700"
size = 40
color = "#FF000080"
anchor = "Bottom-Left"
justification = "CENTER"
offset = [4, -6]
"""


def test_defaults():
    style = StyleConfig()
    assert style.size == 16
    assert style.color == (0, 0, 0, 255)
    assert style.halo_color == (255, 255, 255, 255)
    assert style.halo_width == 0
    assert style.opacity == 1.0
    assert style.anchor == "center"
    assert style.justification == "left"
    assert style.offset == (0, 0)
    assert style.font == ""


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("#0000FF", (0, 0, 255, 255)),
        ("00ff0080", (0, 255, 0, 128)),
        ((1, 2, 3), (1, 2, 3, 255)),
        ([1, 2, 3, 4], (1, 2, 3, 4)),
        (0x80FF0000, (255, 0, 0, 128)),
    ],
)
def test_parse_color(value, expected):
    assert parse_color(value) == expected
    assert StyleConfig(color=value).color == expected


@pytest.mark.parametrize("value", ["#12345", "#GGHHII", (1, 2), (0, 0, 300), True, None])
def test_parse_color_rejects(value):
    with pytest.raises(ValueError):
        parse_color(value)


def test_invalid_color_rejected_at_construction():
    with pytest.raises(ValidationError):
        StyleConfig(color="not-a-color")


def test_color_helpers():
    assert scale_alpha((10, 20, 30, 200), 0.5) == (10, 20, 30, 100)
    assert to_hex((255, 0, 16, 128)) == "#FF001080"


def test_choices_are_case_insensitive():
    style = StyleConfig(anchor="Top-Right", justification="RIGHT")
    assert style.anchor == "top_right"
    assert style.justification == "right"


def test_unknown_anchor_rejected():
    with pytest.raises(ValidationError):
        StyleConfig(anchor="middle")


def test_single_font_name():
    style = StyleConfig(fonts="Roboto:700")
    assert style.fonts == ("Roboto:700",)
    assert style.font == "Roboto:700"


def test_style_is_frozen():
    style = StyleConfig()
    with pytest.raises(ValidationError):
        style.size = 30


def test_snapshots_compare_by_value():
    a = StyleConfig(size=20, rotation=45.0)
    b = StyleConfig(size=20, rotation=45.0)
    assert a == b
    assert hash(a) == hash(b)
    assert a != a.model_copy(update={"size": 21})


def test_validate_style_passes_defaults():
    style = StyleConfig()
    assert validate_style(style) is style


@pytest.mark.parametrize(
    ("update", "field"),
    [
        ({"size": -1}, "size"),
        ({"halo_width": -1}, "halo_width"),
        ({"halo_blur": -0.5}, "halo_blur"),
        ({"halo_blur": math.inf}, "halo_blur"),
        ({"opacity": -0.1}, "opacity"),
        ({"opacity": math.nan}, "opacity"),
        ({"rotation": -1.0}, "rotation"),
        ({"color": (0, 0, 0)}, "color"),
        ({"halo_color": (0, 0, 0, 256)}, "halo_color"),
        ({"anchor": "middle"}, "anchor"),
        ({"justification": "justify"}, "justification"),
        ({"offset": (1, 2, 3)}, "offset"),
    ],
)
def test_validate_style_rejects(update, field):
    style = StyleConfig().model_copy(update=update)
    with pytest.raises(InvalidConfigurationError) as excinfo:
        validate_style(style)
    assert excinfo.value.field == field
    assert field in str(excinfo.value)


@pytest.mark.parametrize("update", [{"size": 0}, {"opacity": 0.0}, {"rotation": 360.0}, {"max_width": -5}])
def test_validate_style_boundaries(update):
    validate_style(StyleConfig(**update))


def test_load_config(tmp_path):
    config_file = tmp_path / "labelgen.toml"
    config_file.write_text(CONFIG_TOML)

    config = load_config(config_file)
    assert config.fonts.google_fonts is False
    assert config.fonts.font_dirs[0] == tmp_path / "fonts"
    assert str(config.fonts.font_dirs[1]) == "/opt/shared/fonts"

    city = config.style("city")
    assert city.fonts == ("Roboto:700",)
    assert city.color == (255, 0, 0, 128)
    assert city.anchor == "bottom_left"
    assert city.justification == "center"
    assert city.offset == (4, -6)

    assert config.style().size == 20
    assert set(load_styles(config_file)) == {"default", "city"}


def test_unknown_style_name(tmp_path):
    config = Config()
    assert config.style() == StyleConfig()
    with pytest.raises(ValueError, match="Unknown style"):
        config.style("missing")


def test_explicit_missing_config_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.toml")


def test_missing_default_config_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = load_config()
    assert config.styles == {}
    assert config.fonts.google_fonts is True


def test_default_config_is_picked_up_from_cwd(tmp_path, monkeypatch):
    (tmp_path / "labelgen.toml").write_text(CONFIG_TOML)
    monkeypatch.chdir(tmp_path)
    assert load_config().style("city").size == 40


def test_invalid_config_values(tmp_path):
    config_file = tmp_path / "labelgen.toml"
    config_file.write_text('[styles.bad]\ncolor = "#XYZ"\n')
    with pytest.raises(ValueError):
        load_config(config_file)
