"""Rendering API and result models."""

from labelgen.api.builder import (
    LabelCache,
    configure,
    get_default_provider,
    render,
    render_labels,
    resolve_metrics,
)
from labelgen.api.models import AnchorPoint, RenderResult

__all__ = [
    "AnchorPoint",
    "LabelCache",
    "RenderResult",
    "configure",
    "get_default_provider",
    "render",
    "render_labels",
    "resolve_metrics",
]
