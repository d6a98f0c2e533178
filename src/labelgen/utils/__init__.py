"""Utility modules."""

from labelgen.utils.color import parse_color, scale_alpha, to_hex
from labelgen.utils.geometry import (
    ANCHOR_FRACTIONS,
    anchor_fraction,
    anchor_point,
    is_identity_rotation,
    rotate_point,
    rotated_bounds,
)

__all__ = [
    "ANCHOR_FRACTIONS",
    "anchor_fraction",
    "anchor_point",
    "is_identity_rotation",
    "parse_color",
    "rotate_point",
    "rotated_bounds",
    "scale_alpha",
    "to_hex",
]
