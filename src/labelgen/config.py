"""Style and configuration loading and validation."""

import math
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from labelgen.errors import InvalidConfigurationError
from labelgen.types import Anchor, Justification, Offset, RGBAColor
from labelgen.utils.color import parse_color
from labelgen.utils.geometry import ANCHOR_FRACTIONS

DEFAULT_CONFIG_NAME = "labelgen.toml"
DEFAULT_STYLE_NAME = "default"


class StyleConfig(BaseModel):
    """
    Immutable snapshot of the parameters used to render one label.

    All parameters have sensible defaults. Derive variants with Pydantic's
    model_copy():

        base = StyleConfig(size=24, halo_width=2)
        rotated = base.model_copy(update={"rotation": 45.0})

    Two snapshots compare equal when every field is equal, which is how a
    caller decides whether a cached bitmap is still current.
    """

    model_config = ConfigDict(frozen=True)

    # ========================================================================
    # Font
    # ========================================================================
    fonts: tuple[str, ...] = ()
    """Font names in descending preference. Empty means the default font."""

    size: int = 16
    """Text size in pixels. Cannot be less than 0."""

    line_height: int = 0
    """Distance between baselines in pixels. 0 derives it from size."""

    # ========================================================================
    # Colors
    # ========================================================================
    color: RGBAColor = (0, 0, 0, 255)
    """Glyph fill color as RGBA in 0-255 range. Default: opaque black."""

    opacity: float = 1.0
    """Multiplier for the fill alpha, 0.0 (transparent) to 1.0 (opaque)."""

    # ========================================================================
    # Halo
    # ========================================================================
    halo_color: RGBAColor = (255, 255, 255, 255)
    """Outline color drawn around glyphs. Default: opaque white."""

    halo_width: int = 0
    """Outline width in pixels. 0 disables the halo."""

    halo_blur: float = 0.0
    """Fade-out distance of the halo towards the outside, in pixels."""

    # ========================================================================
    # Layout
    # ========================================================================
    max_width: int = 160
    """Wrap width in pixels. 0 or less keeps every paragraph on one line."""

    justification: Justification = "left"
    """Horizontal alignment of lines inside the text block."""

    # ========================================================================
    # Placement
    # ========================================================================
    anchor: Anchor = "center"
    """Part of the bitmap that sits on the map coordinate."""

    rotation: float = 0.0
    """Clockwise rotation around the anchor, 0.0 to 360.0 degrees."""

    offset: Offset = (0, 0)
    """Anchor translation in pixels. Positive values are right and down."""

    @field_validator("fonts", mode="before")
    @classmethod
    def _coerce_fonts(cls, value: Any) -> Any:
        if isinstance(value, str):
            return (value,) if value else ()
        return value

    @field_validator("color", "halo_color", mode="before")
    @classmethod
    def _coerce_color(cls, value: Any) -> RGBAColor:
        return parse_color(value)

    @field_validator("justification", "anchor", mode="before")
    @classmethod
    def _lowercase_choice(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower().replace("-", "_")
        return value

    @property
    def font(self) -> str:
        """Preferred font name, or an empty string for the default font."""
        return self.fonts[0] if self.fonts else ""


def _check_color(field: str, value: Any) -> None:
    if (
        not isinstance(value, tuple)
        or len(value) != 4
        or any(not isinstance(c, int) or c < 0 or c > 255 for c in value)
    ):
        raise InvalidConfigurationError(field, value, "expected an RGBA tuple with components in 0-255")


def _check_finite(field: str, value: float) -> None:
    if not math.isfinite(value):
        raise InvalidConfigurationError(field, value, "must be a finite number")


def validate_style(style: StyleConfig) -> StyleConfig:
    """
    Check every range constraint of a style.

    StyleConfig construction only coerces types; model_copy() skips even that,
    so rendering always calls this first.

    Args:
        style: Style to check.

    Returns:
        The same style, for chaining.

    Raises:
        InvalidConfigurationError: On the first field that violates its constraint.
    """
    if style.size < 0:
        raise InvalidConfigurationError("size", style.size, "cannot be less than 0")
    if style.line_height < 0:
        raise InvalidConfigurationError("line_height", style.line_height, "cannot be less than 0")
    if style.halo_width < 0:
        raise InvalidConfigurationError("halo_width", style.halo_width, "cannot be less than 0")

    _check_finite("halo_blur", style.halo_blur)
    if style.halo_blur < 0:
        raise InvalidConfigurationError("halo_blur", style.halo_blur, "cannot be less than 0")

    _check_finite("opacity", style.opacity)
    if not 0.0 <= style.opacity <= 1.0:
        raise InvalidConfigurationError("opacity", style.opacity, "must be between 0.0 and 1.0")

    _check_finite("rotation", style.rotation)
    if not 0.0 <= style.rotation <= 360.0:
        raise InvalidConfigurationError("rotation", style.rotation, "must be between 0.0 and 360.0")

    _check_color("color", style.color)
    _check_color("halo_color", style.halo_color)

    if style.justification not in ("left", "center", "right"):
        raise InvalidConfigurationError("justification", style.justification, "must be left, center or right")
    if style.anchor not in ANCHOR_FRACTIONS:
        raise InvalidConfigurationError(
            "anchor", style.anchor, f"must be one of {', '.join(ANCHOR_FRACTIONS)}"
        )

    if len(style.offset) != 2:
        raise InvalidConfigurationError("offset", style.offset, "expected an (x, y) pair")

    return style


class FontsConfig(BaseModel):
    """Where fonts are looked up."""

    font_dirs: list[Path] = Field(default_factory=list)
    """Extra directories scanned for .ttf/.otf files at startup."""

    google_fonts: bool = True
    """Allow "Family:weight" names to be downloaded from Google Fonts."""


class Config(BaseModel):
    """Root configuration: font lookup plus named style presets."""

    fonts: FontsConfig = Field(default_factory=FontsConfig)
    styles: dict[str, StyleConfig] = Field(default_factory=dict)

    def style(self, name: str = DEFAULT_STYLE_NAME) -> StyleConfig:
        """
        Get a named style preset.

        Args:
            name: Preset name from the [styles.<name>] tables.

        Returns:
            The preset, or StyleConfig() defaults when asking for an
            undefined "default" preset.

        Raises:
            ValueError: If a non-default preset is not defined.
        """
        if name in self.styles:
            return self.styles[name]
        if name == DEFAULT_STYLE_NAME:
            return StyleConfig()
        available = ", ".join(sorted(self.styles)) or "none"
        raise ValueError(f"Unknown style '{name}'. Available styles: {available}")


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, looks for labelgen.toml in
            the current directory and falls back to defaults when absent.

    Returns:
        Validated Config object. Relative font_dirs are resolved against the
        config file's directory.

    Raises:
        FileNotFoundError: If an explicitly given config file doesn't exist.
        ValueError: If config is invalid.
    """
    if config_path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_NAME
        if not config_path.exists():
            return Config()

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "rb") as f:
        config_dict = tomllib.load(f)

    config = Config(**config_dict)

    base_dir = config_path.parent
    config.fonts.font_dirs = [
        d if d.is_absolute() else (base_dir / d) for d in config.fonts.font_dirs
    ]
    return config


def load_styles(config_path: Path) -> dict[str, StyleConfig]:
    """
    Load only the named style presets from a TOML file.

    Args:
        config_path: Path to the TOML file.

    Returns:
        Mapping of preset name to StyleConfig.
    """
    return load_config(config_path).styles
