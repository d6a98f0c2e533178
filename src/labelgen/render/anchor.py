"""Anchor placement, rotation and offset of a rendered label."""

import math

from PIL import Image

from labelgen.api.models import AnchorPoint, RenderResult
from labelgen.config import StyleConfig
from labelgen.utils.geometry import anchor_point, is_identity_rotation, rotated_bounds


def rotate_about(
    image: Image.Image, cx: float, cy: float, degrees: float
) -> tuple[Image.Image, tuple[float, float]]:
    """
    Rotate image content clockwise around (cx, cy) without clipping.

    The canvas grows to the rotated bounds, so every source pixel survives.

    Args:
        image: "RGBA" image.
        cx: Pivot x in image pixels.
        cy: Pivot y in image pixels.
        degrees: Clockwise angle.

    Returns:
        (rotated image, pivot position in the rotated image)
    """
    width, height = image.size
    left, top, right, bottom = rotated_bounds(width, height, cx, cy, degrees)

    # Inverse mapping: output pixel -> source pixel, rotating back counter-clockwise
    rad = math.radians(degrees)
    cos_a = math.cos(rad)
    sin_a = math.sin(rad)
    coefficients = (
        cos_a, sin_a, cx + cos_a * (left - cx) + sin_a * (top - cy),
        -sin_a, cos_a, cy - sin_a * (left - cx) + cos_a * (top - cy),
    )

    # Resample premultiplied so transparent pixels don't bleed dark fringes
    rotated = image.convert("RGBa").transform(
        (right - left, bottom - top),
        Image.Transform.AFFINE,
        coefficients,
        resample=Image.Resampling.BICUBIC,
    ).convert("RGBA")
    return rotated, (cx - left, cy - top)


def resolve(raw: Image.Image, style: StyleConfig) -> RenderResult:
    """
    Place the anchor on a raw label bitmap and apply rotation and offset.

    The anchor starts at (fx * width, fy * height) for the style's anchor.
    A rotation that is not a whole turn rotates the content around that
    point and the anchor follows it into the enlarged canvas. The offset
    then shifts the anchor coordinate only; the bitmap is left as is.

    Args:
        raw: Bitmap from the rasterizer.
        style: Anchor, rotation and offset.

    Returns:
        Final bitmap and its anchor in bitmap-local pixels.
    """
    width, height = raw.size
    x, y = anchor_point(style.anchor, width, height)

    image = raw
    if width and height and not is_identity_rotation(style.rotation):
        image, (x, y) = rotate_about(raw, x, y, style.rotation)

    dx, dy = style.offset
    return RenderResult(image=image, anchor=AnchorPoint(x + dx, y + dy))
