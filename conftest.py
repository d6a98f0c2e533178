"""Shared pytest fixtures."""

import pytest

from labelgen.fonts import register_fonts
from labelgen.fonts.metrics import FontMetrics, FontMetricsProvider


class MonoMetrics(FontMetrics):
    """Fixed-advance metrics: every character is `advance` pixels wide, no kerning."""

    def __init__(self, size: int = 10, advance: float = 10.0) -> None:
        super().__init__(name="mono", size=size, ascent=size * 0.8, descent=size * 0.2)
        self._advance = advance

    def advance_width(self, char: str) -> float:
        return self._advance

    def kerning(self, left: str, right: str) -> float:
        return 0.0


@pytest.fixture
def mono() -> MonoMetrics:
    return MonoMetrics()


@pytest.fixture(scope="session")
def provider() -> FontMetricsProvider:
    """Offline provider using the default font of this machine."""
    register_fonts()
    return FontMetricsProvider(allow_google=False)
