"""Font registration and name resolution."""

import logging
import sys
import threading
from pathlib import Path
from typing import Iterable, Optional

from labelgen.fonts.google import get_google_font

logger = logging.getLogger(__name__)

FONTS_DIR = Path(__file__).parent

FONT_SUFFIXES = (".ttf", ".otf", ".ttc")

# System font directories scanned when a name is not registered
if sys.platform == "darwin":
    SYSTEM_FONT_DIRS = [Path("/System/Library/Fonts"), Path("/Library/Fonts"), Path.home() / "Library" / "Fonts"]
elif sys.platform == "win32":
    SYSTEM_FONT_DIRS = [Path("C:/Windows/Fonts")]
else:
    SYSTEM_FONT_DIRS = [
        Path("/usr/share/fonts"),
        Path("/usr/local/share/fonts"),
        Path.home() / ".local" / "share" / "fonts",
        Path.home() / ".fonts",
    ]

# Candidate default fonts, in preference order
DEFAULT_FONT_CANDIDATES = [
    # Linux
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/usr/share/fonts/truetype/freefont/FreeSans.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    # macOS
    "/System/Library/Fonts/Helvetica.ttc",
    "/Library/Fonts/Arial.ttf",
    # Windows
    "C:/Windows/Fonts/arial.ttf",
    "C:/Windows/Fonts/segoeui.ttf",
]

# Font path registry: maps normalized font names to their file paths
_FONT_PATHS: dict[str, Path] = {}
# Files found by register_fonts(), in scan order; the first is the default font
_DIRECTORY_FONTS: list[Path] = []
_SYSTEM_INDEX: dict[str, Path] | None = None
_LOCK = threading.Lock()


def _normalize_font_name(name: str) -> str:
    """
    Normalize a font name to TitleCase convention.

    Converts hyphen-separated parts to Title Case to match PostScript naming.

    Examples:
        "dejavusans" → "Dejavusans"
        "roboto-bold" → "Roboto-Bold"
        "Open Sans" → "Opensans"

    Args:
        name: Font name to normalize (can be any case)

    Returns:
        TitleCase font name
    """
    parts = name.strip().replace(" ", "").replace("_", "-").split("-")
    return "-".join(part.title() for part in parts)


def register_font(name: str, font_path: Path) -> str:
    """
    Register a single font file under a name.

    Args:
        name: Font name (any case).
        font_path: Path to a TrueType/OpenType file.

    Returns:
        The normalized registered name.
    """
    font_name = _normalize_font_name(name)
    with _LOCK:
        _FONT_PATHS[font_name] = font_path
    logger.info(f"Registered font: {font_name} from {font_path.name}")
    return font_name


def register_fonts(font_dirs: Iterable[Path] = ()) -> int:
    """
    Register fonts found in the package fonts directory and extra directories.

    Each font is registered with a TitleCase name based on its filename
    (without extension):
        - dejavu-sans.ttf → "Dejavu-Sans"
        - Roboto-Bold.ttf → "Roboto-Bold"

    Args:
        font_dirs: Additional directories to scan (non-recursive).

    Returns:
        Number of fonts registered.
    """
    registered_count = 0
    for directory in [FONTS_DIR, *font_dirs]:
        if not directory.is_dir():
            logger.warning(f"Font directory not found: {directory}")
            continue
        for font_path in sorted(directory.iterdir()):
            if font_path.suffix.lower() not in FONT_SUFFIXES:
                continue
            register_font(font_path.stem, font_path)
            with _LOCK:
                if font_path not in _DIRECTORY_FONTS:
                    _DIRECTORY_FONTS.append(font_path)
            registered_count += 1

    if registered_count == 0:
        logger.info("No custom fonts registered. Using system fonts.")
    else:
        logger.info(f"Successfully registered {registered_count} custom font(s).")
    return registered_count


def registered_fonts() -> dict[str, Path]:
    """Snapshot of the registry (name -> path)."""
    with _LOCK:
        return dict(_FONT_PATHS)


def _system_font_index() -> dict[str, Path]:
    """Lazily built map of normalized file stem -> path over system font dirs."""
    global _SYSTEM_INDEX
    with _LOCK:
        if _SYSTEM_INDEX is None:
            index: dict[str, Path] = {}
            for directory in SYSTEM_FONT_DIRS:
                if not directory.is_dir():
                    continue
                for font_path in sorted(directory.rglob("*")):
                    if font_path.suffix.lower() in FONT_SUFFIXES:
                        index.setdefault(_normalize_font_name(font_path.stem), font_path)
            logger.debug(f"Indexed {len(index)} system font(s)")
            _SYSTEM_INDEX = index
        return _SYSTEM_INDEX


def resolve_font(font_spec: str, allow_google: bool = True) -> Optional[Path]:
    """
    Resolve a font specification to a font file (case-insensitive).

    Resolution priority:
    1. Registered fonts (package fonts dir and configured font dirs)
    2. A literal path to an existing font file
    3. Installed system fonts, matched by file name
    4. Google Fonts, for "family:weight" specs (auto-download and cache)

    Args:
        font_spec: Font specification. Can be:
                  - Simple name: "dejavusans" or "DejaVuSans"
                  - With weight: "roboto:700"
                  - A file path: "/path/to/font.ttf"
        allow_google: Whether step 4 may hit the network.

    Returns:
        Path to the font file, or None if nothing matched.
    """
    font_spec = font_spec.strip()
    if not font_spec:
        return None

    # Parse family:weight format (skip Windows drive letters like C:/...)
    family, weight = font_spec, None
    if ":" in font_spec and not Path(font_spec).exists():
        family_part, weight_str = font_spec.rsplit(":", 1)
        try:
            weight = int(weight_str.strip())
            family = family_part.strip()
        except ValueError:
            logger.warning(f"Invalid font weight '{weight_str}' in '{font_spec}', using as-is")

    candidates = [_normalize_font_name(family)]
    if weight is not None:
        candidates.insert(0, f"{_normalize_font_name(family)}-{weight}")

    # 1. Registered fonts
    registry = registered_fonts()
    for name in candidates:
        if name in registry:
            logger.debug(f"Font '{name}' found in registry")
            return registry[name]

    # 2. Literal file path
    path = Path(font_spec).expanduser()
    if path.suffix.lower() in FONT_SUFFIXES and path.is_file():
        return path

    # 3. System fonts
    system_fonts = _system_font_index()
    for name in candidates:
        if name in system_fonts:
            logger.debug(f"Font '{name}' found in system fonts")
            return system_fonts[name]

    # 4. Google Fonts (only when a weight was given)
    if weight is not None and allow_google:
        logger.info(f"Font '{font_spec}' not found locally, trying Google Fonts...")
        font_path = get_google_font(family, weight)
        if font_path:
            register_font(f"{family}-{weight}", font_path)
            return font_path
        logger.warning(f"Could not download '{font_spec}' from Google Fonts")

    return None


def default_font_path() -> Optional[Path]:
    """
    First available default font file.

    Fonts found by register_fonts() win over the system candidates so a
    project can ship its own default in a fonts directory.
    """
    with _LOCK:
        if _DIRECTORY_FONTS:
            return _DIRECTORY_FONTS[0]

    for candidate in DEFAULT_FONT_CANDIDATES:
        path = Path(candidate)
        if path.is_file():
            return path
    return None


def get_font_path(font_name: str) -> Optional[Path]:
    """
    Get the file path for a registered font.

    Args:
        font_name: Font name in any case (e.g., "dejavu-sans", "Roboto-700").

    Returns:
        Path to the font file, or None if the font is not registered.
    """
    return registered_fonts().get(_normalize_font_name(font_name))
