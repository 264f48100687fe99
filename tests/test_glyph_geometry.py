import math

import pytest

from glyphatlas.glyph_geometry import Bounds, GlyphGeometry
from glyphatlas.types import GlyphIdentifierType


def make_glyph(**kwargs):
    params = dict(index=7, bounds=Bounds(0.1, -0.2, 0.6, 0.7), advance=0.5, codepoint=65)
    params.update(kwargs)
    return GlyphGeometry(**params)


def test_identifier():
    glyph = make_glyph()
    assert glyph.identifier(GlyphIdentifierType.GLYPH_INDEX) == 7
    assert glyph.identifier(GlyphIdentifierType.UNICODE_CODEPOINT) == 65


def test_extended_bounds_without_miter():
    glyph = make_glyph(bounds=Bounds(0.0, 0.0, 1.0, 1.0))
    assert glyph.extended_bounds(0.5, 3.0) == Bounds(-0.25, -0.25, 1.25, 1.25)


def test_miter_callback_used_only_with_limit():
    calls = []

    def miter(bounds, border, limit):
        calls.append((border, limit))
        return Bounds(bounds.l - 5, bounds.b, bounds.r, bounds.t)

    glyph = make_glyph(miter_bounds=miter)
    plain = glyph.extended_bounds(2.0, 0.0)
    assert calls == []
    mitered = glyph.extended_bounds(2.0, 2.0)
    assert calls == [(1.0, 2.0)]
    assert mitered.l == plain.l - 5


@pytest.mark.parametrize("scale", [8.0, 13.7, 32.0])
@pytest.mark.parametrize("gscale", [1.0, 0.5])
def test_wrap_box_contains_padded_glyph(scale, gscale):
    glyph = make_glyph(geometry_scale=gscale)
    glyph.wrap_box(scale, 0.1, 0.0, False, False)
    ext = glyph.extended_bounds(glyph.box_range)
    tx, ty = glyph.box_translate
    s = glyph.box_scale
    assert (ext.l + tx) * s >= -1e-9
    assert (ext.b + ty) * s >= -1e-9
    assert (ext.r + tx) * s <= glyph.box.w + 1e-9
    assert (ext.t + ty) * s <= glyph.box.h + 1e-9
    left = (ext.l + tx) * s
    right = glyph.box.w - (ext.r + tx) * s
    assert math.isclose(left, right, abs_tol=1e-9)


@pytest.mark.parametrize("scale", [8.0, 13.7])
def test_wrap_box_pixel_aligned_origin(scale):
    glyph = make_glyph()
    glyph.wrap_box(scale, 0.1, 0.0, True)
    tx, ty = glyph.box_translate
    s = glyph.box_scale
    assert math.isclose(tx * s, round(tx * s), abs_tol=1e-9)
    assert math.isclose(ty * s, round(ty * s), abs_tol=1e-9)
    ext = glyph.extended_bounds(glyph.box_range)
    assert (ext.r + tx) * s <= glyph.box.w
    assert (ext.t + ty) * s <= glyph.box.h


def test_wrap_box_empty_bounds():
    glyph = make_glyph(bounds=Bounds(), whitespace=True)
    glyph.wrap_box(10.0, 0.1)
    assert (glyph.box.w, glyph.box.h) == (0, 0)
    assert glyph.box_translate == (0.0, 0.0)
    assert glyph.quad_plane_bounds() == Bounds()
    assert glyph.quad_atlas_bounds() == Bounds()


def test_frame_box_fixed_origin():
    glyph = make_glyph()
    glyph.frame_box(10.0, 0.1, 0.0, 20, 30, 3.0, 4.0)
    assert glyph.box_translate == (3.0, 4.0)
    assert (glyph.box.w, glyph.box.h) == (20, 30)


def test_frame_box_centers_glyph():
    glyph = make_glyph()
    glyph.frame_box(10.0, 0.1, 0.0, 20, 30)
    ext = glyph.extended_bounds(glyph.box_range)
    tx, ty = glyph.box_translate
    s = glyph.box_scale
    assert math.isclose((ext.l + tx) * s, 20 - (ext.r + tx) * s, abs_tol=1e-9)
    assert math.isclose((ext.b + ty) * s, 30 - (ext.t + ty) * s, abs_tol=1e-9)


def test_frame_box_one_fixed_axis_pixel_aligned():
    glyph = make_glyph()
    glyph.frame_box(10.0, 0.1, 0.0, 20, 30, None, 4.0, True, True)
    tx, ty = glyph.box_translate
    assert ty == 4.0
    assert math.isclose(tx * glyph.box_scale, round(tx * glyph.box_scale), abs_tol=1e-9)


def test_place_box_and_atlas_bounds():
    glyph = make_glyph()
    glyph.wrap_box(10.0, 0.1)
    glyph.place_box(5, 7)
    w, h = glyph.box.w, glyph.box.h
    assert glyph.quad_atlas_bounds() == Bounds(5.5, 7.5, 5 + w - 0.5, 7 + h - 0.5)


def test_plane_bounds_contain_shape():
    glyph = make_glyph(geometry_scale=0.5)
    glyph.wrap_box(16.0, 0.2)
    pb = glyph.quad_plane_bounds()
    gs = glyph.geometry_scale
    assert pb.l <= glyph.bounds.l * gs
    assert pb.b <= glyph.bounds.b * gs
    assert pb.r >= glyph.bounds.r * gs
    assert pb.t >= glyph.bounds.t * gs


def test_to_glyph_box():
    glyph = make_glyph()
    glyph.wrap_box(10.0, 0.1)
    glyph.place_box(2, 3)
    box = glyph.to_glyph_box()
    assert box.index == glyph.index
    assert box.advance == glyph.advance
    assert box.bounds == glyph.quad_plane_bounds()
    assert (box.rect.x, box.rect.y, box.rect.w, box.rect.h) == (2, 3, glyph.box.w, glyph.box.h)
    glyph.place_box(9, 9)
    assert (box.rect.x, box.rect.y) == (2, 3)