"""Fetch "Family:weight" fonts from Google Fonts into a local cache."""

import logging
import re
from pathlib import Path
from typing import Optional

import requests

logger = logging.getLogger(__name__)

CACHE_DIR = Path.home() / ".cache" / "labelgen" / "fonts"

# The v1 CSS endpoint serves TrueType URLs to clients without a browser user agent
CSS_ENDPOINT = "https://fonts.googleapis.com/css"
CSS_TIMEOUT = 10
FONT_TIMEOUT = 30

_FONT_FACE_SRC = re.compile(r"src:\s*url\((https://[^)]+\.ttf)\)")
_ANY_TTF_URL = re.compile(r"(https://[^\s'\"()]+\.ttf)")


def cached_font_path(family: str, weight: int) -> Path:
    """Cache location of a family/weight pair, e.g. OpenSans-700.ttf."""
    return CACHE_DIR / f"{family.replace(' ', '')}-{weight}.ttf"


def get_google_font(family: str, weight: int = 400) -> Optional[Path]:
    """
    Path to a Google Font file, downloading it on first use.

    Label rendering must not fail on network trouble, so every download or
    cache error is logged and reported as None; the caller then moves on to
    the next font name.

    Args:
        family: Family name as listed on Google Fonts ("Open Sans").
        weight: CSS weight (400 regular, 700 bold).

    Returns:
        Path of the cached .ttf file, or None.
    """
    target = cached_font_path(family, weight)
    if target.exists():
        logger.debug(f"Google Font {family}:{weight} served from cache")
        return target

    params = {"family": f"{family}:{weight}"}
    try:
        css = requests.get(CSS_ENDPOINT, params=params, timeout=CSS_TIMEOUT)
        css.raise_for_status()
        url = extract_font_url_from_css(css.text)
        if url is None:
            logger.error(f"Google Fonts returned no TTF source for {family}:{weight}")
            return None

        font = requests.get(url, timeout=FONT_TIMEOUT)
        font.raise_for_status()
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(font.content)
    except requests.RequestException as e:
        logger.error(f"Downloading {family}:{weight} from Google Fonts failed: {e}")
        return None
    except OSError as e:
        logger.error(f"Caching {family}:{weight} at {target} failed: {e}")
        return None

    logger.info(f"Cached Google Font {family}:{weight} at {target}")
    return target


def extract_font_url_from_css(css_content: str) -> Optional[str]:
    """First TrueType URL in a Google Fonts stylesheet, preferring @font-face src entries."""
    match = _FONT_FACE_SRC.search(css_content) or _ANY_TTF_URL.search(css_content)
    return match.group(1) if match else None
