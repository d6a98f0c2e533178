"""Data models for rendered labels."""

from dataclasses import dataclass

from PIL import Image

from labelgen.render.image import save_image_to_bytes


@dataclass(frozen=True)
class AnchorPoint:
    """A point in bitmap-local pixel coordinates (origin top-left, y down)."""

    x: float
    y: float

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass
class RenderResult:
    """
    A rendered label ready to be placed as a marker icon.

    The caller aligns `anchor` with the marker's world position; mapping
    world coordinates to pixels is not part of this result.

    Attributes:
        image: "RGBA" bitmap with straight (non-premultiplied) alpha.
        anchor: Anchor point in the bitmap's pixel coordinates.
    """

    image: Image.Image
    anchor: AnchorPoint

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def anchor_fraction(self) -> tuple[float, float]:
        """
        Anchor as a fraction of the bitmap size.

        This is the form most map SDKs take for marker anchors. Offsets can
        push it outside 0-1.
        """
        u = self.anchor.x / self.width if self.width else 0.0
        v = self.anchor.y / self.height if self.height else 0.0
        return (u, v)

    def to_png(self) -> bytes:
        """
        Encode the bitmap as PNG.

        Raises:
            EmptyLabelError: If the label rendered to a 0-wide or 0-high bitmap
                (empty or whitespace-only text, size 0).
        """
        return save_image_to_bytes(self.image, format="PNG")
