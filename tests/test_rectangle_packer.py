import pytest

from glyphatlas.rectangle_packer import (
    OrientedRectangle,
    Rectangle,
    RectanglePacker,
    rate_fit,
)


def footprint(rect):
    if getattr(rect, "rotated", False):
        return rect.x, rect.y, rect.h, rect.w
    return rect.x, rect.y, rect.w, rect.h


def assert_valid_layout(rects, width, height):
    boxes = [footprint(r) for r in rects]
    for x, y, w, h in boxes:
        assert 0 <= x and 0 <= y
        assert x + w <= width and y + h <= height
    for i, (ax, ay, aw, ah) in enumerate(boxes):
        for bx, by, bw, bh in boxes[i + 1 :]:
            overlap = ax < bx + bw and bx < ax + aw and ay < by + bh and by < ay + ah
            assert not overlap


def test_rate_fit_is_smaller_slack():
    assert rate_fit(1, 1, 4, 3) == 2
    assert rate_fit(4, 3, 4, 3) == 0


def test_exact_fit():
    packer = RectanglePacker(4, 4)
    rect = Rectangle(w=4, h=4)
    assert packer.pack([rect]) == 0
    assert (rect.x, rect.y) == (0, 0)
    assert packer.spaces == []


def test_too_big():
    packer = RectanglePacker(4, 4)
    assert packer.pack([Rectangle(w=5, h=5)]) == 1


def test_degenerate_area_has_no_space():
    assert RectanglePacker(0, 5).spaces == []
    assert RectanglePacker().pack([Rectangle(w=1, h=1)]) == 1


@pytest.mark.parametrize("size", [32, 64])
def test_many_rectangles_do_not_overlap(size):
    rects = [Rectangle(w=1 + i % 7, h=1 + (i * 3) % 5) for i in range(40)]
    assert RectanglePacker(size, size).pack(rects) == 0
    assert_valid_layout(rects, size, size)


def test_partial_fit_counts_remaining():
    rects = [Rectangle(w=3, h=3) for _ in range(5)]
    remaining = RectanglePacker(6, 6).pack(rects)
    assert remaining == 1
    placed = [r for r in rects if (r.x, r.y) != (0, 0)] + [
        r for r in rects if (r.x, r.y) == (0, 0)
    ][:1]
    assert_valid_layout(placed, 6, 6)


def test_expand_empty_packer():
    packer = RectanglePacker()
    packer.expand(3, 3)
    rect = Rectangle(w=3, h=3)
    assert packer.pack([rect]) == 0


def test_oriented_rotates_to_fit():
    packer = RectanglePacker(2, 4)
    rect = OrientedRectangle(w=4, h=2)
    assert packer.pack_oriented([rect]) == 0
    assert rect.rotated is True
    assert_valid_layout([rect], 2, 4)


def test_oriented_without_rotation():
    packer = RectanglePacker(4, 2)
    rect = OrientedRectangle(w=4, h=2)
    assert packer.pack_oriented([rect]) == 0
    assert rect.rotated is False


def test_oriented_many_valid():
    rects = [OrientedRectangle(w=1 + i % 6, h=1 + (i * 5) % 4) for i in range(30)]
    assert RectanglePacker(32, 32).pack_oriented(rects) == 0
    assert_valid_layout(rects, 32, 32)