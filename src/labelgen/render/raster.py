"""Halo and fill rasterization of a laid out text block using Pillow."""

import logging
import math

from PIL import Image, ImageChops, ImageDraw, ImageFilter

from labelgen.config import StyleConfig
from labelgen.types import RGBAColor
from labelgen.utils.color import scale_alpha
from labelgen.utils.text import LayoutResult

logger = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)


def halo_margin(style: StyleConfig) -> int:
    """
    Padding added on every side so the halo is never clipped.

    Returns:
        halo_width + ceil(halo_blur), or 0 when the halo is disabled.
    """
    if style.halo_width <= 0:
        return 0
    return style.halo_width + math.ceil(style.halo_blur)


def ink_overhang(layout: LayoutResult) -> tuple[int, int, int, int]:
    """
    How far glyph ink reaches outside the text block, per side.

    Advances and the font box do not bound the drawn pixels: a negative left
    side bearing ("j"), a swash past the last advance or an accent above the
    ascent all draw outside them. Each glyph's box comes from Pillow at the
    same pen position glyph_mask() draws it.

    Returns:
        (left, top, right, bottom) in whole pixels, each >= 0.
    """
    font = layout.metrics.font
    if font is None:
        return (0, 0, 0, 0)

    block_width = math.ceil(layout.width)
    block_height = math.ceil(layout.height)
    left = top = right = bottom = 0

    for line in layout.lines:
        pen_x = line.x
        for char, advance in line.glyphs:
            if char.isspace():
                pen_x += advance
                continue
            x0, y0, x1, y1 = font.getbbox(char, anchor="ls")
            # ImageDraw draws at the whole-pixel pen position and renders the fraction inside the glyph
            x, y = math.floor(pen_x), math.floor(line.baseline)
            x_frac = 1 if pen_x != x else 0
            y_frac = 1 if line.baseline != y else 0
            left = max(left, -math.floor(x + x0))
            top = max(top, -math.floor(y + y0))
            right = max(right, math.ceil(x + x1) + x_frac - block_width)
            bottom = max(bottom, math.ceil(y + y1) + y_frac - block_height)
            pen_x += advance

    return (left, top, right, bottom)


def block_origin(layout: LayoutResult, style: StyleConfig) -> tuple[int, int]:
    """Top-left corner of the text block inside the raw bitmap."""
    margin = halo_margin(style)
    left, top, _, _ = ink_overhang(layout)
    return (margin + left, margin + top)


def raster_size(layout: LayoutResult, style: StyleConfig) -> tuple[int, int]:
    """Pixel size of the raw bitmap: block, ink overhang and halo margin."""
    margin = halo_margin(style)
    left, top, right, bottom = ink_overhang(layout)
    return (
        math.ceil(layout.width) + left + right + 2 * margin,
        math.ceil(layout.height) + top + bottom + 2 * margin,
    )


def glyph_mask(
    layout: LayoutResult, size: tuple[int, int], origin: tuple[int, int], stroke_width: int = 0
) -> Image.Image:
    """
    Coverage mask ("L" mode) of every glyph in the layout.

    Glyphs are drawn in painter's order (lines top to bottom, glyphs left to
    right), each one at its own pen position on the line's baseline.

    Args:
        layout: Laid out text.
        size: Mask size.
        origin: Whole-pixel position of the block's top-left corner in the mask.
        stroke_width: Outline width; 0 draws plain glyphs.

    Returns:
        Mask where 255 is full coverage.
    """
    mask = Image.new("L", size, 0)
    font = layout.metrics.font
    if font is None:
        return mask

    ox, oy = origin
    draw = ImageDraw.Draw(mask)
    for line in layout.lines:
        pen_x = ox + line.x
        baseline = oy + line.baseline
        for char, advance in line.glyphs:
            if not char.isspace():
                draw.text(
                    (pen_x, baseline),
                    char,
                    fill=255,
                    font=font,
                    anchor="ls",
                    stroke_width=stroke_width,
                    stroke_fill=255,
                )
            pen_x += advance
    return mask


def fade_edge(mask: Image.Image, blur: float) -> Image.Image:
    """
    Soften the outside of a coverage mask.

    A gaussian blur with sigma = blur / 2 spreads coverage about `blur`
    pixels outward; taking the maximum with the original keeps the stroke
    body at full coverage so only the outer edge fades.
    """
    blurred = mask.filter(ImageFilter.GaussianBlur(radius=blur / 2))
    return ImageChops.lighter(mask, blurred)


def colorize(mask: Image.Image, color: RGBAColor) -> Image.Image:
    """Straight-alpha RGBA layer of a single color with alpha = coverage * color alpha."""
    r, g, b, a = color
    layer = Image.new("RGBA", mask.size, (r, g, b, 0))
    layer.putalpha(mask.point([round(v * a / 255) for v in range(256)]))
    return layer


def rasterize(layout: LayoutResult, style: StyleConfig) -> Image.Image:
    """
    Draw the halo and fill passes of a layout into one bitmap.

    The halo pass strokes every glyph with halo_width, fades its outer edge
    over halo_blur pixels and is skipped entirely when halo_width is 0. The
    fill pass draws every glyph in color with alpha scaled by opacity. Both
    layers are alpha-over composited onto a transparent canvas, fill last,
    so fills are never covered by a neighbouring glyph's halo.

    The canvas grows by the ink overhang so glyphs reaching outside their
    advance box or the font box keep every pixel.

    Args:
        layout: Laid out text.
        style: Colors, opacity and halo settings.

    Returns:
        "RGBA" image (straight alpha) of size raster_size(layout, style).
    """
    size = raster_size(layout, style)
    canvas = Image.new("RGBA", size, TRANSPARENT)
    if layout.metrics.font is None or size[0] == 0 or size[1] == 0:
        return canvas

    origin = block_origin(layout, style)
    if style.halo_width > 0:
        halo = glyph_mask(layout, size, origin, stroke_width=style.halo_width)
        if style.halo_blur > 0:
            halo = fade_edge(halo, style.halo_blur)
        canvas = Image.alpha_composite(canvas, colorize(halo, style.halo_color))

    fill = glyph_mask(layout, size, origin)
    canvas = Image.alpha_composite(canvas, colorize(fill, scale_alpha(style.color, style.opacity)))

    logger.debug(f"Rasterized {len(layout.lines)} line(s) into {size[0]}x{size[1]}px (block at {origin})")
    return canvas
