"""Anchor fractions and rotation geometry in bitmap pixel coordinates (y down)."""

import math

from labelgen.types import Anchor

CENTER = 0.5

# Normalized (x, y) position of each anchor on the bitmap's bounding box
ANCHOR_FRACTIONS: dict[str, tuple[float, float]] = {
    "left": (0.0, CENTER),
    "center": (CENTER, CENTER),
    "right": (1.0, CENTER),
    "top": (CENTER, 0.0),
    "bottom": (CENTER, 1.0),
    "top_left": (0.0, 0.0),
    "top_right": (1.0, 0.0),
    "bottom_left": (0.0, 1.0),
    "bottom_right": (1.0, 1.0),
}


def anchor_fraction(anchor: Anchor) -> tuple[float, float]:
    """
    Look up the normalized anchor position.

    Args:
        anchor: Anchor name.

    Returns:
        (fx, fy) with each component in {0, 0.5, 1}.
    """
    return ANCHOR_FRACTIONS[anchor]


def anchor_point(anchor: Anchor, width: float, height: float) -> tuple[float, float]:
    """Anchor position in pixels for a box of the given size."""
    fx, fy = ANCHOR_FRACTIONS[anchor]
    return (fx * width, fy * height)


def is_identity_rotation(degrees: float) -> bool:
    """True when the angle is a whole number of turns (0, 360, ...)."""
    turn = degrees % 360.0
    return math.isclose(turn, 0.0, abs_tol=1e-9) or math.isclose(turn, 360.0, abs_tol=1e-9)


def rotate_point(
    x: float, y: float, cx: float, cy: float, degrees: float
) -> tuple[float, float]:
    """
    Rotate a point clockwise (as seen on screen) around (cx, cy).

    With y pointing down, a clockwise turn maps the +x axis onto +y.

    Args:
        x: Point x.
        y: Point y.
        cx: Pivot x.
        cy: Pivot y.
        degrees: Clockwise rotation angle.

    Returns:
        The rotated point.
    """
    rad = math.radians(degrees)
    cos_a = math.cos(rad)
    sin_a = math.sin(rad)
    dx = x - cx
    dy = y - cy
    return (cx + dx * cos_a - dy * sin_a, cy + dx * sin_a + dy * cos_a)


def rotated_bounds(
    width: float, height: float, cx: float, cy: float, degrees: float
) -> tuple[int, int, int, int]:
    """
    Integer bounding box of a width x height rectangle rotated around (cx, cy).

    Corners are floored/ceiled outward so the box always contains every
    rotated pixel.

    Returns:
        (left, top, right, bottom) in the unrotated coordinate frame.
    """
    corners = [
        rotate_point(x, y, cx, cy, degrees)
        for x, y in ((0.0, 0.0), (width, 0.0), (width, height), (0.0, height))
    ]
    xs = [c[0] for c in corners]
    ys = [c[1] for c in corners]
    # Round away tiny float noise before floor/ceil so 90 degree turns stay exact
    left = math.floor(round(min(xs), 6))
    top = math.floor(round(min(ys), 6))
    right = math.ceil(round(max(xs), 6))
    bottom = math.ceil(round(max(ys), 6))
    return (left, top, right, bottom)
