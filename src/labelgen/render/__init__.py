"""Rasterization and placement of laid out labels."""

from labelgen.render.image import save_image, save_image_to_bytes

__all__ = [
    "save_image",
    "save_image_to_bytes",
]
