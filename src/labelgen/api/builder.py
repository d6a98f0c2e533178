"""High-level API for rendering labels."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Hashable, Iterable

from labelgen.api.models import RenderResult
from labelgen.config import Config, StyleConfig, validate_style
from labelgen.errors import FontNotFoundError
from labelgen.fonts import register_fonts
from labelgen.fonts.metrics import FontMetrics, FontMetricsProvider
from labelgen.render.anchor import resolve
from labelgen.render.raster import rasterize
from labelgen.utils.text import layout_text

logger = logging.getLogger(__name__)

_default_provider: FontMetricsProvider | None = None
_provider_lock = threading.Lock()


def configure(config: Config) -> FontMetricsProvider:
    """
    Register fonts from a configuration and install a matching default provider.

    Args:
        config: Loaded configuration (see load_config()).

    Returns:
        The new default FontMetricsProvider.
    """
    global _default_provider
    register_fonts(config.fonts.font_dirs)
    provider = FontMetricsProvider(allow_google=config.fonts.google_fonts)
    with _provider_lock:
        _default_provider = provider
    return provider


def get_default_provider() -> FontMetricsProvider:
    """Shared provider, created on first use with the bundled fonts registered."""
    global _default_provider
    with _provider_lock:
        if _default_provider is None:
            register_fonts()
            _default_provider = FontMetricsProvider()
        return _default_provider


def resolve_metrics(style: StyleConfig, provider: FontMetricsProvider) -> FontMetrics:
    """
    Metrics for the style's fonts, falling back to the default font.

    A font that cannot be found is not an error for the caller: the label is
    rendered with the default font instead.
    """
    try:
        return provider.metrics(style.fonts, style.size)
    except FontNotFoundError as e:
        logger.warning(f"{e}, using default font")
        return provider.default_metrics(style.size)


def render(
    text: str,
    style: StyleConfig | None = None,
    provider: FontMetricsProvider | None = None,
) -> RenderResult:
    """
    Render a text label to a bitmap with its anchor point.

    Runs layout, rasterization and anchor resolution. The call is pure:
    identical (text, style) pairs always produce identical results.

    Args:
        text: Label text. Newlines force line breaks.
        style: Style snapshot. If None, uses StyleConfig() defaults.
        provider: Font metrics provider. If None, uses the shared default.

    Returns:
        RenderResult with the RGBA bitmap and anchor point.

    Raises:
        InvalidConfigurationError: If a style value is out of range.

    Example:
        ```python
        from labelgen import StyleConfig, render

        style = StyleConfig(size=60, color="#0000FF", opacity=0.8, anchor="right", offset=(80, 0))
        result = render("Hi", style)
        result.image.save("hi.png")
        print(result.anchor)
        ```
    """
    style = validate_style(style or StyleConfig())
    provider = provider or get_default_provider()

    metrics = resolve_metrics(style, provider)
    layout = layout_text(text, metrics, style)
    raw = rasterize(layout, style)
    result = resolve(raw, style)

    logger.debug(
        f"Rendered {text!r}: {result.width}x{result.height}px, "
        f"anchor ({result.anchor.x:.1f}, {result.anchor.y:.1f})"
    )
    return result


def render_labels(
    items: Iterable[tuple[str, StyleConfig]],
    provider: FontMetricsProvider | None = None,
    max_workers: int | None = None,
) -> list[RenderResult]:
    """
    Render many labels in parallel.

    Each label is an independent render() call on a worker thread; the
    shared provider serves font metrics to all of them.

    Args:
        items: (text, style) pairs.
        provider: Font metrics provider. If None, uses the shared default.
        max_workers: Thread pool size (ThreadPoolExecutor default if None).

    Returns:
        Results in the same order as items.

    Raises:
        InvalidConfigurationError: If any style is invalid.
    """
    provider = provider or get_default_provider()
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = [pool.submit(render, text, style, provider) for text, style in items]
        return [future.result() for future in futures]


class LabelCache:
    """
    Memoizes rendered labels per marker.

    A marker's bitmap is regenerated only when its text or style snapshot
    differs (by value) from the one it was last rendered with.

    Example:
        ```python
        cache = LabelCache()
        icon = cache.get("marker-1", "Berlin", style)
        icon = cache.get("marker-1", "Berlin", style.model_copy(update={"size": 20}))  # re-rendered
        ```
    """

    def __init__(self, provider: FontMetricsProvider | None = None) -> None:
        self._provider = provider
        self._entries: dict[Hashable, tuple[str, StyleConfig, RenderResult]] = {}
        self._lock = threading.Lock()

    def is_stale(self, key: Hashable, text: str, style: StyleConfig) -> bool:
        """True if the marker has no bitmap for exactly this text and style."""
        with self._lock:
            entry = self._entries.get(key)
        return entry is None or entry[0] != text or entry[1] != style

    def get(self, key: Hashable, text: str, style: StyleConfig) -> RenderResult:
        """
        Bitmap for a marker, rendering it if missing or stale.

        Args:
            key: Marker identifier.
            text: Label text.
            style: Style snapshot.

        Returns:
            Cached or freshly rendered RenderResult.
        """
        with self._lock:
            entry = self._entries.get(key)
        if entry is not None and entry[0] == text and entry[1] == style:
            return entry[2]

        result = render(text, style, self._provider)
        with self._lock:
            self._entries[key] = (text, style, result)
        return result

    def invalidate(self, key: Hashable) -> None:
        """Forget one marker's bitmap."""
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        """Forget every bitmap."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
