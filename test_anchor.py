"""Tests for anchor placement, rotation and offset."""

import pytest
from PIL import Image, ImageDraw

from labelgen.config import StyleConfig
from labelgen.render.anchor import resolve, rotate_about
from labelgen.utils.geometry import (
    ANCHOR_FRACTIONS,
    anchor_fraction,
    is_identity_rotation,
    rotate_point,
    rotated_bounds,
)


def _raw(width=40, height=20, color=(0, 128, 0, 255)):
    return Image.new("RGBA", (width, height), color)


@pytest.mark.parametrize(
    ("anchor", "expected"),
    [
        ("top_left", (0, 0)),
        ("top", (20, 0)),
        ("top_right", (40, 0)),
        ("left", (0, 10)),
        ("center", (20, 10)),
        ("right", (40, 10)),
        ("bottom_left", (0, 20)),
        ("bottom", (20, 20)),
        ("bottom_right", (40, 20)),
    ],
)
def test_anchor_positions(anchor, expected):
    result = resolve(_raw(), StyleConfig(anchor=anchor))
    assert result.anchor.as_tuple() == expected


def test_anchor_fractions_are_constants():
    assert len(ANCHOR_FRACTIONS) == 9
    for fx, fy in ANCHOR_FRACTIONS.values():
        assert fx in (0.0, 0.5, 1.0)
        assert fy in (0.0, 0.5, 1.0)
    assert anchor_fraction("bottom_left") == (0.0, 1.0)


def test_offset_moves_anchor_not_content():
    raw = _raw()
    result = resolve(raw, StyleConfig(anchor="right", offset=(80, -5)))
    assert result.anchor.as_tuple() == (120, 5)
    assert result.image.size == raw.size
    assert result.image.tobytes() == raw.tobytes()


@pytest.mark.parametrize("rotation", [0.0, 360.0])
def test_whole_turn_is_identity(rotation):
    raw = _raw()
    ImageDraw.Draw(raw).rectangle((2, 2, 8, 8), fill=(255, 0, 0, 255))
    unrotated = resolve(raw, StyleConfig(anchor="top_left"))
    rotated = resolve(raw, StyleConfig(anchor="top_left", rotation=rotation))
    assert rotated.image.tobytes() == unrotated.image.tobytes()
    assert rotated.anchor == unrotated.anchor


def test_is_identity_rotation():
    assert is_identity_rotation(0.0)
    assert is_identity_rotation(360.0)
    assert is_identity_rotation(720.0)
    assert not is_identity_rotation(90.0)
    assert not is_identity_rotation(359.5)


def test_rotate_point_is_clockwise_on_screen():
    # +x turns onto +y (down) after a quarter turn
    x, y = rotate_point(10, 0, 0, 0, 90)
    assert x == pytest.approx(0, abs=1e-9)
    assert y == pytest.approx(10)


def test_quarter_turn_swaps_dimensions():
    result = resolve(_raw(40, 20), StyleConfig(anchor="center", rotation=90.0))
    assert result.image.size == (20, 40)
    assert result.anchor.x == pytest.approx(10)
    assert result.anchor.y == pytest.approx(20)


def test_half_turn_around_bottom_anchor_flips_anchor_to_top():
    result = resolve(_raw(40, 20), StyleConfig(anchor="bottom", rotation=180.0))
    assert result.image.size == (40, 20)
    assert result.anchor.x == pytest.approx(20)
    assert result.anchor.y == pytest.approx(0)


def test_rotation_direction():
    raw = Image.new("RGBA", (40, 20), (0, 0, 0, 0))
    ImageDraw.Draw(raw).rectangle((34, 8, 39, 11), fill=(255, 0, 0, 255))

    rotated, _ = rotate_about(raw, 20, 10, 90)
    left, top, right, bottom = rotated.getchannel("A").getbbox()
    # The marker on the right end ends up at the bottom
    assert top > rotated.height / 2
    assert left < rotated.width / 2 < right


@pytest.mark.parametrize("rotation", [15.0, 45.0, 135.0, 270.0, 333.0])
@pytest.mark.parametrize("anchor", ["center", "top_left", "bottom_right"])
def test_rotation_never_clips(rotation, anchor):
    raw = _raw(30, 10)
    result = resolve(raw, StyleConfig(anchor=anchor, rotation=rotation))
    ax, ay = ANCHOR_FRACTIONS[anchor][0] * 30, ANCHOR_FRACTIONS[anchor][1] * 10

    left, top, _, _ = rotated_bounds(30, 10, ax, ay, rotation)
    for corner in ((0, 0), (30, 0), (30, 10), (0, 10)):
        x, y = rotate_point(*corner, ax, ay, rotation)
        assert -1e-6 <= x - left <= result.width + 1e-6
        assert -1e-6 <= y - top <= result.height + 1e-6

    # The anchor stays on the same content point
    assert result.anchor.x == pytest.approx(ax - left)
    assert result.anchor.y == pytest.approx(ay - top)

    # Coverage is preserved up to resampling at the edges
    original = sum(raw.getchannel("A").getdata())
    after = sum(result.image.getchannel("A").getdata())
    assert after == pytest.approx(original, rel=0.1)


def test_offset_applies_after_rotation():
    style = StyleConfig(anchor="center", rotation=90.0, offset=(5, 7))
    result = resolve(_raw(40, 20), style)
    assert result.anchor.x == pytest.approx(15)
    assert result.anchor.y == pytest.approx(27)


def test_empty_bitmap_keeps_anchor_at_origin():
    result = resolve(Image.new("RGBA", (0, 0)), StyleConfig(anchor="bottom_right", rotation=45.0, offset=(3, 4)))
    assert result.image.size == (0, 0)
    assert result.anchor.as_tuple() == (3, 4)
