"""Text label renderer for map-marker icons."""

__version__ = "0.1.0"

# High-level Python API
from labelgen.api import (
    AnchorPoint,
    LabelCache,
    RenderResult,
    configure,
    render,
    render_labels,
)
from labelgen.config import Config, StyleConfig, load_config, load_styles, validate_style
from labelgen.errors import EmptyLabelError, FontNotFoundError, InvalidConfigurationError, LabelgenError
from labelgen.fonts.metrics import FontMetrics, FontMetricsProvider

__all__ = [
    "AnchorPoint",
    "Config",
    "EmptyLabelError",
    "FontMetrics",
    "FontMetricsProvider",
    "FontNotFoundError",
    "InvalidConfigurationError",
    "LabelCache",
    "LabelgenError",
    "RenderResult",
    "StyleConfig",
    "configure",
    "load_config",
    "load_styles",
    "render",
    "render_labels",
    "validate_style",
]
