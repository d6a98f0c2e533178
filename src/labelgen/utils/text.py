"""Text layout: hard breaks, greedy word wrapping and justification."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from labelgen.config import StyleConfig
    from labelgen.fonts.metrics import FontMetrics

logger = logging.getLogger(__name__)

HARD_BREAK = re.compile(r"\r\n|\n|\r")


@dataclass
class Line:
    """
    One laid out line of text.

    Attributes:
        text: The characters on the line (runs of whitespace collapsed to one space).
        glyphs: (character, advance) pairs; each advance includes the kerning
            towards the next character.
        width: Sum of the glyph advances in pixels.
        x: Horizontal start inside the block, from justification.
        top: Top of the line box inside the block.
        height: Line box height.
        baseline: Baseline y inside the block.
    """
    text: str
    glyphs: list[tuple[str, float]] = field(default_factory=list)
    width: float = 0.0
    x: float = 0.0
    top: float = 0.0
    height: float = 0.0
    baseline: float = 0.0


@dataclass
class LayoutResult:
    """
    Lines plus the size of the block they form.

    Attributes:
        lines: Lines from top to bottom.
        width: Widest line width.
        height: Sum of line heights.
        metrics: Font metrics the layout was measured with (also used to draw).
    """
    lines: List[Line]
    width: float
    height: float
    metrics: FontMetrics


def split_paragraphs(text: str) -> list[str]:
    """Split on explicit line breaks; every piece starts a new line."""
    return HARD_BREAK.split(text)


def wrap_paragraph(paragraph: str, metrics: FontMetrics, max_width: float) -> list[str]:
    """
    Greedily pack whitespace-delimited tokens into lines no wider than max_width.

    A token is never split: one wider than max_width is placed alone on its
    own line and overflows it.

    Args:
        paragraph: Text without hard breaks.
        metrics: Font metrics for measuring.
        max_width: Wrap width in pixels. 0 or less disables wrapping.

    Returns:
        Line texts. An empty paragraph yields a single empty line.
    """
    tokens = paragraph.split()
    if max_width <= 0 or not tokens:
        return [" ".join(tokens)]

    lines: list[str] = []
    current = ""
    for token in tokens:
        if not current:
            current = token
            continue
        candidate = f"{current} {token}"
        if metrics.measure(candidate) <= max_width:
            current = candidate
        else:
            lines.append(current)
            current = token
    lines.append(current)
    return lines


def justify_offset(justification: str, block_width: float, line_width: float) -> float:
    """Horizontal start of a line inside the block."""
    if justification == "center":
        return (block_width - line_width) / 2
    if justification == "right":
        return block_width - line_width
    return 0.0


def line_box_height(metrics: FontMetrics, style: StyleConfig) -> float:
    """Explicit line height, or size times the font's line height ratio."""
    if style.line_height > 0:
        return float(style.line_height)
    return style.size * metrics.line_height_ratio


def layout_text(text: str, metrics: FontMetrics, style: StyleConfig) -> LayoutResult:
    """
    Break text into positioned lines.

    Hard breaks always start a new line; each paragraph is then wrapped at
    style.max_width. Lines are stacked with a constant line box height and
    the font box (ascent + descent) is centered vertically in each box.

    Args:
        text: Label text.
        metrics: Font metrics to measure with.
        style: Style supplying max_width, line_height and justification.

    Returns:
        LayoutResult whose width is the widest line and whose height is the
        sum of line heights.
    """
    line_texts = [
        line_text
        for paragraph in split_paragraphs(text)
        for line_text in wrap_paragraph(paragraph, metrics, style.max_width)
    ]

    height = line_box_height(metrics, style)
    baseline_inset = (height - metrics.height) / 2 + metrics.ascent

    lines: list[Line] = []
    for i, line_text in enumerate(line_texts):
        glyphs = metrics.glyph_advances(line_text)
        top = i * height
        lines.append(Line(
            text=line_text,
            glyphs=glyphs,
            width=sum(advance for _, advance in glyphs),
            top=top,
            height=height,
            baseline=top + baseline_inset,
        ))

    block_width = max((line.width for line in lines), default=0.0)
    for line in lines:
        line.x = justify_offset(style.justification, block_width, line.width)

    block_height = height * len(lines)
    logger.debug(
        f"Laid out {len(lines)} line(s) in {block_width:.1f}x{block_height:.1f}px "
        f"with {metrics.name} at {metrics.size}px"
    )
    return LayoutResult(lines=lines, width=block_width, height=block_height, metrics=metrics)
