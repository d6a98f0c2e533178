"""Tests for font resolution and the metrics provider."""

import pytest
import requests

from labelgen import fonts
from labelgen.errors import FontNotFoundError
from labelgen.fonts import _normalize_font_name, register_font, resolve_font
from labelgen.fonts import google
from labelgen.fonts.metrics import DEFAULT_LINE_HEIGHT_RATIO, FontMetrics


@pytest.fixture
def empty_registry(monkeypatch):
    monkeypatch.setattr(fonts, "_FONT_PATHS", {})


def test_normalize_font_name():
    assert _normalize_font_name("dejavusans") == "Dejavusans"
    assert _normalize_font_name("roboto-bold") == "Roboto-Bold"
    assert _normalize_font_name("Open Sans") == "Opensans"
    assert _normalize_font_name("noto_sans") == "Noto-Sans"


def test_registered_font_resolves_case_insensitively(tmp_path, empty_registry):
    font_file = tmp_path / "Marker-Sans.ttf"
    font_file.write_bytes(b"not really a font")
    register_font("Marker-Sans", font_file)

    assert resolve_font("marker-sans") == font_file
    assert resolve_font("MARKER-SANS", allow_google=False) == font_file
    assert fonts.get_font_path("marker-sans") == font_file


def test_weighted_name_prefers_weighted_registration(tmp_path, empty_registry):
    regular = tmp_path / "Label-Regular.ttf"
    bold = tmp_path / "Label-700.ttf"
    regular.write_bytes(b"x")
    bold.write_bytes(b"x")
    register_font("Label", regular)
    register_font("Label-700", bold)

    assert resolve_font("label:700", allow_google=False) == bold
    assert resolve_font("label", allow_google=False) == regular


def test_literal_path_resolves(tmp_path, empty_registry):
    font_file = tmp_path / "custom.otf"
    font_file.write_bytes(b"x")
    assert resolve_font(str(font_file), allow_google=False) == font_file


def test_unknown_font_is_none(empty_registry):
    assert resolve_font("", allow_google=False) is None
    assert resolve_font("no-such-font-4f1c9a", allow_google=False) is None
    assert resolve_font("no-such-font-4f1c9a:700", allow_google=False) is None


def test_register_fonts_scans_directories(tmp_path, empty_registry, monkeypatch):
    monkeypatch.setattr(fonts, "_DIRECTORY_FONTS", [])
    (tmp_path / "alpha.ttf").write_bytes(b"x")
    (tmp_path / "beta.otf").write_bytes(b"x")
    (tmp_path / "notes.txt").write_text("ignored")

    assert fonts.register_fonts([tmp_path]) == 2
    assert set(fonts.registered_fonts()) == {"Alpha", "Beta"}
    assert fonts.default_font_path() == tmp_path / "alpha.ttf"


def test_google_font_uses_cache(tmp_path, monkeypatch):
    monkeypatch.setattr(google, "CACHE_DIR", tmp_path)
    cached = tmp_path / "OpenSans-700.ttf"
    cached.write_bytes(b"x")

    def fail(*args, **kwargs):
        raise AssertionError("network should not be used")

    monkeypatch.setattr(google.requests, "get", fail)
    assert google.get_google_font("Open Sans", 700) == cached


def test_google_font_download_failure_returns_none(tmp_path, monkeypatch):
    monkeypatch.setattr(google, "CACHE_DIR", tmp_path)

    def offline(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(google.requests, "get", offline)
    assert google.get_google_font("Roboto", 400) is None


def test_extract_font_url_from_css():
    css = """
    @font-face {
      font-family: 'Roboto';
      font-weight: 700;
      src: url(https://fonts.gstatic.com/s/roboto/v30/KFOlCnqEu92Fr1MmWUlvAw.ttf) format('truetype');
    }
    """
    assert google.extract_font_url_from_css(css) == (
        "https://fonts.gstatic.com/s/roboto/v30/KFOlCnqEu92Fr1MmWUlvAw.ttf"
    )
    assert google.extract_font_url_from_css("body {}") is None


def test_unresolvable_names_raise(provider):
    with pytest.raises(FontNotFoundError) as excinfo:
        provider.metrics(["no-such-font-4f1c9a", "another-missing-font"], 12)
    assert excinfo.value.font_names == ("no-such-font-4f1c9a", "another-missing-font")


def test_empty_font_list_uses_default(provider):
    metrics = provider.metrics([], 24)
    assert metrics.size == 24
    assert metrics.ascent > 0
    assert metrics.descent >= 0
    assert metrics.font is not None
    assert metrics.line_height_ratio == DEFAULT_LINE_HEIGHT_RATIO


def test_metrics_are_cached(provider):
    assert provider.default_metrics(18) is provider.default_metrics(18)
    assert provider.default_metrics(18) is not provider.default_metrics(19)


def test_advances_are_proportional(provider):
    metrics = provider.default_metrics(40)
    assert metrics.advance_width("W") > metrics.advance_width("i") > 0
    assert metrics.advance_width(" ") > 0


def test_measure_includes_kerning(provider):
    metrics = provider.default_metrics(40)
    text = "AVATAR"
    expected = sum(metrics.advance_width(c) for c in text) + sum(
        metrics.kerning(a, b) for a, b in zip(text, text[1:])
    )
    assert metrics.measure(text) == pytest.approx(expected)
    assert metrics.measure("") == 0


def test_zero_size_metrics_are_empty(provider):
    metrics = provider.default_metrics(0)
    assert metrics.font is None
    assert metrics.measure("Hello") == 0
    assert metrics.height == 0


def test_builtin_font_metrics():
    metrics = FontMetrics.builtin(32)
    assert metrics.font is not None
    assert metrics.ascent > 0
    assert metrics.measure("Hi") > 0
