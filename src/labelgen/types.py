"""Type aliases used across the labelgen package."""

from typing import Literal, Tuple

# Color types
RGBAColor = Tuple[int, int, int, int]  # straight-alpha RGBA in 0-255 range

# Measurements
Offset = Tuple[int, int]  # (dx, dy), positive = right/down

# Text block alignment options
Justification = Literal["left", "center", "right"]

# Which part of the bitmap is placed on the map coordinate
Anchor = Literal[
    "left",
    "center",
    "right",
    "top",
    "bottom",
    "top_left",
    "top_right",
    "bottom_left",
    "bottom_right",
]
