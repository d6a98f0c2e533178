"""Font metrics provider backed by FreeType and HarfBuzz."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Sequence

import freetype
import uharfbuzz as hb
from PIL import ImageFont

from labelgen.errors import FontNotFoundError
from labelgen.fonts import default_font_path, resolve_font

logger = logging.getLogger(__name__)

# Line box height relative to text size when no explicit line height is set
DEFAULT_LINE_HEIGHT_RATIO = 1.2

BUILTIN_FONT_NAME = "pillow-default"

# Ligatures would merge characters that are drawn one glyph at a time
_SHAPING_FEATURES = {"liga": False, "clig": False, "kern": True}


class FontMetrics:
    """
    Measurements of one font at one pixel size.

    Horizontal advances come from FreeType's unhinted (linear) advances and
    pair kerning from HarfBuzz shaping, so layout widths are resolution
    independent. Fonts without a file (Pillow's built-in font) fall back to
    Pillow's own measurement. A size of 0 yields an empty font that measures
    every character as 0 wide.

    Instances are safe to share between threads: FreeType/HarfBuzz access and
    the lazy caches are guarded by a lock.

    Attributes:
        name: Font name (file stem or BUILTIN_FONT_NAME).
        size: Pixel size.
        ascent: Distance from baseline to the top of the font box in pixels.
        descent: Distance from baseline to the bottom of the font box in pixels (positive).
        line_height_ratio: Default line height relative to size.
        font: Pillow font used for drawing, or None at size 0.
    """

    def __init__(
        self,
        name: str,
        size: int,
        ascent: float,
        descent: float,
        font: ImageFont.FreeTypeFont | None = None,
        face: freetype.Face | None = None,
        hb_font: hb.Font | None = None,
        line_height_ratio: float = DEFAULT_LINE_HEIGHT_RATIO,
    ) -> None:
        self.name = name
        self.size = size
        self.ascent = ascent
        self.descent = descent
        self.font = font
        self.line_height_ratio = line_height_ratio
        self._face = face
        self._hb_font = hb_font
        self._advances: dict[str, float] = {}
        self._kerning: dict[tuple[str, str], float] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_file(cls, font_path: Path, size: int) -> FontMetrics:
        """
        Load metrics for a font file.

        Args:
            font_path: TrueType/OpenType font file.
            size: Pixel size (> 0).

        Returns:
            FontMetrics for the file at that size.
        """
        face = freetype.Face(str(font_path))
        face.set_char_size(size * 64)  # 26.6 fixed-point, 72 dpi so points == pixels

        with open(font_path, "rb") as f:
            fontdata = f.read()
        hb_font = hb.Font(hb.Face(fontdata))
        hb_font.scale = (size * 64, size * 64)

        return cls(
            name=font_path.stem,
            size=size,
            ascent=face.size.ascender / 64,
            descent=-face.size.descender / 64,
            font=ImageFont.truetype(str(font_path), size),
            face=face,
            hb_font=hb_font,
        )

    @classmethod
    def builtin(cls, size: int) -> FontMetrics:
        """Metrics for Pillow's bundled scalable font."""
        font = ImageFont.load_default(size)
        ascent, descent = font.getmetrics()
        return cls(name=BUILTIN_FONT_NAME, size=size, ascent=ascent, descent=descent, font=font)

    @classmethod
    def empty(cls, name: str) -> FontMetrics:
        """Zero-size metrics: nothing is measured or drawn."""
        return cls(name=name, size=0, ascent=0.0, descent=0.0)

    @property
    def height(self) -> float:
        """Font box height (ascent + descent)."""
        return self.ascent + self.descent

    def advance_width(self, char: str) -> float:
        """Horizontal advance of a single character in pixels."""
        if self.size == 0:
            return 0.0
        with self._lock:
            if char not in self._advances:
                self._advances[char] = self._measure_advance(char)
            return self._advances[char]

    def kerning(self, left: str, right: str) -> float:
        """Adjustment applied between two adjacent characters in pixels (usually <= 0)."""
        if self.size == 0:
            return 0.0
        pair = (left, right)
        with self._lock:
            if pair not in self._kerning:
                self._kerning[pair] = self._measure_kerning(left, right)
            return self._kerning[pair]

    def glyph_advances(self, text: str) -> list[tuple[str, float]]:
        """
        Per-character pen advances for a run of text.

        Each advance already includes the kerning towards the following
        character, so summing them gives the run width.
        """
        advances = []
        for i, char in enumerate(text):
            advance = self.advance_width(char)
            if i + 1 < len(text):
                advance += self.kerning(char, text[i + 1])
            advances.append((char, advance))
        return advances

    def measure(self, text: str) -> float:
        """Width of a run of text in pixels (advances plus kerning)."""
        return sum(advance for _, advance in self.glyph_advances(text))

    def _measure_advance(self, char: str) -> float:
        if self._face is not None:
            self._face.load_char(char, freetype.FT_LOAD_NO_HINTING | freetype.FT_LOAD_NO_BITMAP)
            # linearHoriAdvance is 16.16 fixed-point and unaffected by hinting
            return self._face.glyph.linearHoriAdvance / 65536.0
        assert self.font is not None
        return float(self.font.getlength(char))

    def _measure_kerning(self, left: str, right: str) -> float:
        if self._hb_font is not None:
            pair_width = self._shaped_width(left + right)
            return pair_width - self._shaped_width(left) - self._shaped_width(right)
        assert self.font is not None
        pair_width = self.font.getlength(left + right)
        return float(pair_width - self.font.getlength(left) - self.font.getlength(right))

    def _shaped_width(self, text: str) -> float:
        buf = hb.Buffer()
        buf.add_str(text)
        buf.guess_segment_properties()
        hb.shape(self._hb_font, buf, _SHAPING_FEATURES)
        return sum(pos.x_advance for pos in buf.glyph_positions) / 64

    def __repr__(self) -> str:
        return f"FontMetrics(name={self.name!r}, size={self.size}, ascent={self.ascent}, descent={self.descent})"


class FontMetricsProvider:
    """
    Resolves font names to cached FontMetrics.

    One provider can serve many concurrent render calls; metrics are cached
    per (font file, size) behind a lock.
    """

    def __init__(self, allow_google: bool = True) -> None:
        """
        Initialize the provider.

        Args:
            allow_google: Whether "family:weight" names may be downloaded
                from Google Fonts.
        """
        self.allow_google = allow_google
        self._cache: dict[tuple[str, int], FontMetrics] = {}
        self._lock = threading.Lock()

    def metrics(self, font_names: Sequence[str], size: int) -> FontMetrics:
        """
        Metrics for the first resolvable font in font_names.

        Args:
            font_names: Font names in descending preference. Empty selects
                the default font.
            size: Pixel size.

        Returns:
            FontMetrics for the first font that resolves and loads.

        Raises:
            FontNotFoundError: If font_names is non-empty and none of them
                could be resolved or loaded.
        """
        if not font_names:
            return self.default_metrics(size)

        for name in font_names:
            font_path = resolve_font(name, allow_google=self.allow_google)
            if font_path is None:
                logger.debug(f"Font '{name}' not found")
                continue
            try:
                return self._load(font_path, size)
            except (freetype.FT_Exception, OSError) as e:
                logger.warning(f"Failed to load font '{name}' from {font_path}: {e}")

        raise FontNotFoundError(font_names)

    def default_metrics(self, size: int) -> FontMetrics:
        """
        Metrics for the default font. Never fails.

        Uses the first font from the registered font directories, then the
        first installed system candidate, then Pillow's built-in font.
        """
        font_path = default_font_path()
        if font_path is not None:
            try:
                return self._load(font_path, size)
            except (freetype.FT_Exception, OSError) as e:
                logger.warning(f"Failed to load default font {font_path}: {e}")

        if size == 0:
            return FontMetrics.empty(BUILTIN_FONT_NAME)
        key = (BUILTIN_FONT_NAME, size)
        with self._lock:
            if key not in self._cache:
                logger.info(f"Using Pillow built-in font at {size}px")
                self._cache[key] = FontMetrics.builtin(size)
            return self._cache[key]

    def clear(self) -> None:
        """Drop all cached metrics."""
        with self._lock:
            self._cache.clear()

    def _load(self, font_path: Path, size: int) -> FontMetrics:
        if size == 0:
            return FontMetrics.empty(font_path.stem)
        key = (str(font_path), size)
        with self._lock:
            if key not in self._cache:
                logger.debug(f"Loading metrics for {font_path.name} at {size}px")
                self._cache[key] = FontMetrics.from_file(font_path, size)
            return self._cache[key]
