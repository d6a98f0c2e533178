"""Exceptions raised by labelgen."""

from typing import Any


class LabelgenError(Exception):
    """Base class for all labelgen errors."""


class InvalidConfigurationError(LabelgenError, ValueError):
    """
    A style value is outside its allowed range.

    Raised before any layout or drawing happens, so callers never receive a
    partially rendered bitmap.

    Attributes:
        field: Name of the offending StyleConfig field.
        value: The rejected value.
        reason: Human readable constraint that was violated.
    """

    def __init__(self, field: str, value: Any, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid style field '{field}'={value!r}: {reason}")


class FontNotFoundError(LabelgenError, LookupError):
    """None of the requested font names could be resolved to a font file."""

    def __init__(self, font_names: tuple[str, ...] | list[str]) -> None:
        self.font_names = tuple(font_names)
        super().__init__(f"No font found for {list(self.font_names)}")


class EmptyLabelError(LabelgenError, ValueError):
    """
    A label bitmap with no pixels was asked to be encoded.

    Empty or whitespace-only text and size 0 render to a 0-wide bitmap, which
    is a valid render result but cannot be written as an image file.
    """

    def __init__(self, size: tuple[int, int]) -> None:
        self.size = size
        super().__init__(f"Label bitmap is empty ({size[0]}x{size[1]}px), nothing to encode")
