"""Image encoding utilities using Pillow."""

from io import BytesIO
from pathlib import Path

from PIL import Image

from labelgen.errors import EmptyLabelError


def _require_pixels(img: Image.Image) -> None:
    if img.width == 0 or img.height == 0:
        raise EmptyLabelError(img.size)


def save_image_to_bytes(img: Image.Image, format: str = "PNG") -> bytes:
    """
    Encode a label bitmap in memory.

    Raises:
        EmptyLabelError: If the bitmap has no pixels.
    """
    _require_pixels(img)
    with BytesIO() as buffer:
        img.save(buffer, format=format)
        return buffer.getvalue()


def save_image(img: Image.Image, path: Path) -> Path:
    """
    Write an image to disk, creating parent directories.

    The format follows the file suffix; labels keep their alpha channel, so
    formats without one (JPEG) are rejected by Pillow.

    Raises:
        EmptyLabelError: If the bitmap has no pixels. Nothing is written.
    """
    _require_pixels(img)
    path.parent.mkdir(parents=True, exist_ok=True)
    img.save(path)
    return path
