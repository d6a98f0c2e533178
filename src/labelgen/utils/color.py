"""Color parsing and alpha helpers."""

from typing import Any

from labelgen.types import RGBAColor


def parse_color(value: Any) -> RGBAColor:
    """
    Normalize a color specification to an RGBA tuple.

    Accepted forms:
        - (r, g, b) or (r, g, b, a) with integer components in 0-255
        - "#RRGGBB" or "#RRGGBBAA" (leading "#" optional)
        - an ARGB integer as used by Android (0xAARRGGBB)

    Args:
        value: Color specification.

    Returns:
        Tuple of (red, green, blue, alpha).

    Raises:
        ValueError: If the value cannot be interpreted as a color.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a color: {value!r}")

    if isinstance(value, int):
        if not 0 <= value <= 0xFFFFFFFF:
            raise ValueError(f"ARGB color out of range: {value:#x}")
        alpha = (value >> 24) & 0xFF
        return ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF, alpha)

    if isinstance(value, str):
        hex_str = value.strip().lstrip("#")
        if len(hex_str) not in (6, 8):
            raise ValueError(f"Hex color must have 6 or 8 digits: {value!r}")
        try:
            components = [int(hex_str[i:i + 2], 16) for i in range(0, len(hex_str), 2)]
        except ValueError as e:
            raise ValueError(f"Invalid hex color {value!r}") from e
        if len(components) == 3:
            components.append(255)
        return tuple(components)  # type: ignore[return-value]

    if isinstance(value, (tuple, list)):
        if len(value) not in (3, 4):
            raise ValueError(f"Color tuple must have 3 or 4 components: {value!r}")
        components = [int(c) for c in value]
        if any(c < 0 or c > 255 for c in components):
            raise ValueError(f"Color components must be in 0-255: {value!r}")
        if len(components) == 3:
            components.append(255)
        return tuple(components)  # type: ignore[return-value]

    raise ValueError(f"Not a color: {value!r}")


def scale_alpha(color: RGBAColor, opacity: float) -> RGBAColor:
    """Return the color with its alpha multiplied by opacity."""
    r, g, b, a = color
    return (r, g, b, round(a * opacity))


def to_hex(color: RGBAColor) -> str:
    """Format an RGBA color as "#RRGGBBAA"."""
    return "#" + "".join(f"{c:02X}" for c in color)
