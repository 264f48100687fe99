import pytest

from glyphatlas.glyph_geometry import Bounds, GlyphGeometry
from glyphatlas.grid_packer import (
    GridAtlasPacker,
    GridPackingError,
    ceil_pot,
    floor_pot,
    lower_to_constraint,
    raise_to_constraint,
)
from glyphatlas.types import DimensionsConstraint


def make_glyphs(n, size=10.0, whitespace_every=0):
    glyphs = []
    for i in range(n):
        ws = bool(whitespace_every) and i % whitespace_every == 0
        glyphs.append(
            GlyphGeometry(
                index=i,
                bounds=Bounds() if ws else Bounds(0.0, 0.0, size + i, size),
                advance=1.0,
                geometry_scale=0.1,
                whitespace=ws,
            )
        )
    return glyphs


def is_pot(x):
    return x > 0 and x & (x - 1) == 0


def assert_disjoint_inside(glyphs, width, height):
    rects = [g.box for g in glyphs if not g.whitespace]
    for r in rects:
        assert 0 <= r.x and r.x + r.w <= width
        assert 0 <= r.y and r.y + r.h <= height
    for i, a in enumerate(rects):
        for b in rects[i + 1:]:
            overlap = a.x < b.x + b.w and b.x < a.x + a.w and a.y < b.y + b.h and b.y < a.y + a.h
            assert not overlap


@pytest.mark.parametrize("x", range(1, 300))
def test_floor_pot_invariant(x):
    p = floor_pot(x)
    assert is_pot(p)
    assert p <= x < 2 * p


@pytest.mark.parametrize("x", range(1, 300))
def test_ceil_pot_invariant(x):
    p = ceil_pot(x)
    assert is_pot(p)
    assert p >= x
    assert p == 1 or p // 2 < x


@pytest.mark.parametrize("constraint", list(DimensionsConstraint))
@pytest.mark.parametrize("w,h", [(37, 50), (64, 17), (5, 5), (100, 3)])
def test_lower_to_constraint(constraint, w, h):
    lw, lh = lower_to_constraint(w, h, constraint)
    assert lw <= w and lh <= h
    if constraint.is_square():
        assert lw == lh
    if constraint is DimensionsConstraint.MULTIPLE_OF_FOUR_SQUARE:
        assert lw % 4 == 0
    if constraint is DimensionsConstraint.EVEN_SQUARE:
        assert lw % 2 == 0
    if constraint in (DimensionsConstraint.POWER_OF_TWO_SQUARE, DimensionsConstraint.POWER_OF_TWO_RECTANGLE):
        assert is_pot(lw) and is_pot(lh)


@pytest.mark.parametrize("constraint", list(DimensionsConstraint))
@pytest.mark.parametrize("w,h", [(37, 50), (64, 17), (5, 5), (100, 3)])
def test_raise_to_constraint(constraint, w, h):
    rw, rh = raise_to_constraint(w, h, constraint)
    assert rw >= w and rh >= h
    if constraint.is_square():
        assert rw == rh
    if constraint is DimensionsConstraint.MULTIPLE_OF_FOUR_SQUARE:
        assert rw % 4 == 0
    if constraint in (DimensionsConstraint.POWER_OF_TWO_SQUARE, DimensionsConstraint.POWER_OF_TWO_RECTANGLE):
        assert is_pot(rw) and is_pot(rh)


def test_no_constraint_keeps_dimensions():
    assert raise_to_constraint(37, 50, DimensionsConstraint.NONE) == (37, 50)
    assert lower_to_constraint(37, 50, DimensionsConstraint.NONE) == (37, 50)


def test_empty_glyph_list():
    packer = GridAtlasPacker()
    assert packer.pack([]) == 0
    assert packer.width == -1


def test_fixed_scale_layout():
    glyphs = make_glyphs(7)
    packer = GridAtlasPacker()
    packer.scale = 32.0
    packer.px_range = 2.0
    assert packer.pack(glyphs) == 0
    assert packer.width == packer.columns * packer.cell_width
    assert packer.height == packer.rows * packer.cell_height
    assert packer.columns * packer.rows >= len(glyphs)
    assert not packer.cutoff
    assert_disjoint_inside(glyphs, packer.width, packer.height)
    assert all(g.box.w == packer.cell_width and g.box.h == packer.cell_height for g in glyphs)


def test_fixed_cells_and_columns():
    glyphs = make_glyphs(6)
    packer = GridAtlasPacker()
    packer.cell_width = packer.cell_height = 40
    packer.columns = 3
    assert packer.pack(glyphs) == 0
    assert packer.rows == 2
    assert packer.width == 3 * 40
    assert packer.height == 2 * 40
    assert packer.scale > 0
    assert_disjoint_inside(glyphs, packer.width, packer.height)


def test_remaining_glyphs_when_grid_full():
    glyphs = make_glyphs(5)
    packer = GridAtlasPacker()
    packer.columns = 2
    packer.rows = 1
    packer.cell_width = packer.cell_height = 20
    assert packer.pack(glyphs) == len(glyphs) - 2


def test_cells_too_small_for_range():
    packer = GridAtlasPacker()
    packer.cell_width = packer.cell_height = 3
    packer.px_range = 2.0
    with pytest.raises(GridPackingError):
        packer.pack(make_glyphs(3))


def test_cutoff_when_scale_exceeds_cells():
    packer = GridAtlasPacker()
    packer.scale = 100.0
    packer.cell_width = packer.cell_height = 8
    assert packer.pack(make_glyphs(2)) == 0
    assert packer.cutoff


def test_whitespace_glyphs_not_placed():
    glyphs = make_glyphs(6, whitespace_every=3)
    packer = GridAtlasPacker()
    packer.scale = 16.0
    packer.px_range = 2.0
    assert packer.pack(glyphs) == 0
    for g in glyphs:
        if g.whitespace:
            assert (g.box.w, g.box.h) == (0, 0)
        else:
            assert g.box.w > 0
    assert packer.columns * packer.rows >= sum(not g.whitespace for g in glyphs)


def test_power_of_two_square_atlas():
    glyphs = make_glyphs(9)
    packer = GridAtlasPacker()
    packer.scale = 24.0
    packer.px_range = 2.0
    packer.dimensions_constraint = DimensionsConstraint.POWER_OF_TWO_SQUARE
    assert packer.pack(glyphs) == 0
    assert packer.width == packer.height
    assert is_pot(packer.width)
    assert_disjoint_inside(glyphs, packer.width, packer.height)


def test_fixed_atlas_dimensions_search():
    glyphs = make_glyphs(10)
    packer = GridAtlasPacker()
    packer.width = packer.height = 128
    packer.px_range = 2.0
    packer.min_scale = 1.0
    assert packer.pack(glyphs) == 0
    assert packer.width == 128 and packer.height == 128
    assert packer.columns * packer.cell_width <= 128
    assert packer.scale >= packer.min_scale
    assert_disjoint_inside(glyphs, packer.width, packer.height)


def test_miter_branch_with_cells():
    glyphs = make_glyphs(4)
    packer = GridAtlasPacker()
    packer.cell_width = packer.cell_height = 48
    packer.columns = 2
    packer.px_range = 2.0
    packer.miter_limit = 1.0
    assert packer.pack(glyphs) == 0
    assert packer.scale >= packer.min_scale
    assert not packer.cutoff
    assert_disjoint_inside(glyphs, packer.width, packer.height)


def test_fixed_origin_shared_by_glyphs():
    glyphs = make_glyphs(5)
    packer = GridAtlasPacker()
    packer.scale = 20.0
    packer.px_range = 2.0
    packer.h_fixed = packer.v_fixed = True
    assert packer.pack(glyphs) == 0
    for g in glyphs:
        assert g.box_translate == pytest.approx(
            (packer.fixed_x / g.geometry_scale, packer.fixed_y / g.geometry_scale)
        )
    ox, oy = packer.fixed_origin()
    assert ox < packer.fixed_x and oy < packer.fixed_y


def test_pixel_range_combines_units():
    packer = GridAtlasPacker()
    packer.scale = 2.0
    packer.unit_range = 0.5
    packer.px_range = 1.0
    assert packer.pixel_range() == pytest.approx(2.0)


def test_pixel_aligned_origin_layout():
    glyphs = make_glyphs(4)
    packer = GridAtlasPacker()
    packer.cell_width = packer.cell_height = 36
    packer.columns = 2
    packer.px_range = 2.0
    packer.px_align_origin_x = packer.px_align_origin_y = True
    assert packer.pack(glyphs) == 0
    for g in glyphs:
        tx, ty = g.box_translate
        assert tx * g.box_scale == pytest.approx(round(tx * g.box_scale))
        assert ty * g.box_scale == pytest.approx(round(ty * g.box_scale))