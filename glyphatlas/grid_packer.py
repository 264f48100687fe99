"""Uniform grid layout of glyphs in an atlas."""

from __future__ import annotations

import copy
import math
from typing import Optional, Sequence

from glyphatlas.glyph_geometry import Bounds, GlyphGeometry
from glyphatlas.types import DimensionsConstraint

_LARGE_VALUE = 1e240
_BIG_CELL = 1 << 28


class GridPackingError(ValueError):
    """The glyphs could not be laid out into a grid with the given settings."""


def floor_pot(x: int) -> int:
    """Largest power of two not greater than ``x`` (0 for ``x`` below 1)."""
    y = 1
    while x >= y:
        y <<= 1
    return y >> 1


def ceil_pot(x: int) -> int:
    """Smallest power of two not less than ``x`` (1 for ``x`` below 2)."""
    y = 1
    while x > y:
        y <<= 1
    return y


def lower_to_constraint(
    width: int, height: int, constraint: DimensionsConstraint
) -> tuple[int, int]:
    """Shrink dimensions to the nearest ones that satisfy ``constraint``."""
    if constraint.is_square():
        width = height = min(width, height)
    if constraint is DimensionsConstraint.EVEN_SQUARE:
        width &= ~1
        height &= ~1
    elif constraint is DimensionsConstraint.MULTIPLE_OF_FOUR_SQUARE:
        width &= ~3
        height &= ~3
    elif constraint in (
        DimensionsConstraint.POWER_OF_TWO_RECTANGLE,
        DimensionsConstraint.POWER_OF_TWO_SQUARE,
    ):
        if width > 0:
            width = floor_pot(width)
        if height > 0:
            height = floor_pot(height)
    return width, height


def raise_to_constraint(
    width: int, height: int, constraint: DimensionsConstraint
) -> tuple[int, int]:
    """Grow dimensions to the nearest ones that satisfy ``constraint``."""
    if constraint.is_square():
        width = height = max(width, height)
    if constraint is DimensionsConstraint.EVEN_SQUARE:
        width += width & 1
        height += height & 1
    elif constraint is DimensionsConstraint.MULTIPLE_OF_FOUR_SQUARE:
        width += -width & 3
        height += -height & 3
    elif constraint in (
        DimensionsConstraint.POWER_OF_TWO_RECTANGLE,
        DimensionsConstraint.POWER_OF_TWO_SQUARE,
    ):
        if width > 0:
            width = ceil_pot(width)
        if height > 0:
            height = ceil_pot(height)
    return width, height


def _div_trunc(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def _fdiv(a: float, b: float) -> float:
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _ceil_div(a: int, b: int) -> int:
    return (a + b - 1) // b


class GridAtlasPacker:
    """Lays glyphs out in equally sized cells.

    Settings are plain attributes; a value of -1 (or below 1 for ``scale``)
    means the packer determines it. After :meth:`pack` the attributes hold the
    final layout.
    """

    def __init__(self) -> None:
        self.columns = -1
        self.rows = -1
        self.width = -1
        self.height = -1
        self.cell_width = -1
        self.cell_height = -1
        self.spacing = 0
        self.dimensions_constraint = DimensionsConstraint.NONE
        self.cell_dimensions_constraint = DimensionsConstraint.NONE
        self.h_fixed = False
        self.v_fixed = False
        self.scale = -1.0
        self.min_scale = 1.0
        self.fixed_x = 0.0
        self.fixed_y = 0.0
        self.unit_range = 0.0
        self.px_range = 0.0
        self.miter_limit = 0.0
        self.px_align_origin_x = False
        self.px_align_origin_y = False
        self.scale_maximization_tolerance = 0.001
        self.aligned_columns_bias = 0.125
        self.cutoff = False

    def _dimensions_rating(self, width: int, height: int, aligned: bool) -> float:
        factor = 1 - self.aligned_columns_bias if aligned else 1
        return (float(width) * width + float(height) * height) * factor

    def _max_bounds(
        self,
        glyphs: Sequence[GlyphGeometry],
        scale: float,
        range_: float,
        max_width: float = 0.0,
        max_height: float = 0.0,
    ) -> tuple[Bounds, float, float]:
        ml, mb, mr, mt = _LARGE_VALUE, _LARGE_VALUE, -_LARGE_VALUE, -_LARGE_VALUE
        for glyph in glyphs:
            if glyph.whitespace:
                continue
            shape_range = range_ / glyph.geometry_scale
            factor = glyph.geometry_scale * scale
            ext = glyph.extended_bounds(shape_range, self.miter_limit)
            l, b, r, t = ext.l * factor, ext.b * factor, ext.r * factor, ext.t * factor
            ml, mb, mr, mt = min(ml, l), min(mb, b), max(mr, r), max(mt, t)
            max_width = max(max_width, r - l)
            max_height = max(max_height, t - b)
        bounds = Bounds(ml, mb, mr, mt)
        if ml >= mr or mb >= mt:
            bounds = Bounds()
        # A pixel-aligned but unfixed origin may shift by under one pixel.
        if self.h_fixed:
            max_width = bounds.r - bounds.l
        elif self.px_align_origin_x:
            max_width += 1
        if self.v_fixed:
            max_height = bounds.t - bounds.b
        elif self.px_align_origin_y:
            max_height += 1
        return bounds, max_width, max_height

    def _scale_to_fit(
        self, glyphs: Sequence[GlyphGeometry], cell_width: int, cell_height: int
    ) -> tuple[float, Bounds, float, float]:
        if cell_width <= 0:
            cell_width = _BIG_CELL
        if cell_height <= 0:
            cell_height = _BIG_CELL
        # Half-pixel padding on each side keeps values within outer pixel centers.
        cell_width -= 1 + self.spacing
        cell_height -= 1 + self.spacing
        state: list = [Bounds(), 0.0, 0.0, False]

        def try_fit(scale: float) -> bool:
            bounds, mw, mh = self._max_bounds(
                glyphs, scale, self.unit_range + self.px_range / scale
            )
            state[:] = [bounds, mw, mh, mw <= cell_width and mh <= cell_height]
            return state[3]

        min_scale = max_scale = 1.0
        if try_fit(1.0):
            while max_scale < 1e32:
                max_scale = 2 * min_scale
                if not try_fit(max_scale):
                    break
                min_scale = max_scale
        else:
            while min_scale > 1e-32:
                min_scale = 0.5 * max_scale
                if try_fit(min_scale):
                    break
                max_scale = min_scale
        if min_scale == max_scale:
            return 0.0, state[0], state[1], state[2]
        while min_scale / max_scale < 1 - self.scale_maximization_tolerance:
            mid = 0.5 * (min_scale + max_scale)
            if try_fit(mid):
                min_scale = mid
            else:
                max_scale = mid
        if not state[3]:
            try_fit(min_scale)
        return min_scale, state[0], state[1], state[2]

    def _search_columns(
        self, glyphs: Sequence[GlyphGeometry], cell_count: int, rate
    ) -> None:
        """Try column counts for a fixed atlas size and keep the best scale."""
        best_aligned_scale = 0.0
        best_cols = 0
        best_aligned_cols = 0
        for cols in rate:
            if cols <= 0:
                continue
            rows = _ceil_div(cell_count, cols)
            if rows <= 0:
                continue
            t_width = (self.width + self.spacing) // cols
            t_height = (self.height + self.spacing) // rows
            t_width, t_height = lower_to_constraint(
                t_width, t_height, self.cell_dimensions_constraint
            )
            if t_width > 0 and t_height > 0:
                cur_scale = self._candidate_scale(glyphs, t_width, t_height)
                if cur_scale > self.scale:
                    self.scale = cur_scale
                    best_cols = cols
                if cols * t_width == self.width and cur_scale > best_aligned_scale:
                    best_aligned_scale = cur_scale
                    best_aligned_cols = cols
        if not best_cols:
            raise GridPackingError("no column count fits the atlas dimensions")
        # Prefer columns aligned with the atlas width at a slight cost to scale.
        if (
            best_aligned_scale >= self.min_scale
            and (self.aligned_columns_bias + 1) * best_aligned_scale >= self.scale
        ):
            self.scale = best_aligned_scale
            best_cols = best_aligned_cols
        self.columns = best_cols
        self.rows = _ceil_div(cell_count, self.columns)
        self.cell_width = (self.width + self.spacing) // self.columns
        self.cell_height = (self.height + self.spacing) // self.rows
        self.cell_width, self.cell_height = lower_to_constraint(
            self.cell_width, self.cell_height, self.cell_dimensions_constraint
        )

    def pack(self, glyphs: Sequence[GlyphGeometry]) -> int:
        """Lay out the glyphs; return how many did not fit into the grid.

        Raises GridPackingError if no layout is possible.
        """
        glyphs = list(glyphs)
        count = len(glyphs)
        if not count:
            return 0
        initial = copy.copy(self)
        spacing = self.spacing

        if self.columns > 0 and self.rows > 0:
            cell_count = self.columns * self.rows
        else:
            cell_count = sum(1 for glyph in glyphs if not glyph.whitespace)
            if self.columns > 0:
                self.rows = _ceil_div(cell_count, self.columns)
            elif self.rows > 0:
                self.columns = _ceil_div(cell_count, self.rows)
            elif self.width > 0 and self.cell_width > 0:
                self.columns = (self.width + spacing) // self.cell_width
                if self.columns <= 0:
                    raise GridPackingError("cell width exceeds atlas width")
                self.rows = _ceil_div(cell_count, self.columns)

        if self.width < 0 and self.cell_width > 0 and self.columns > 0:
            self.width = self.columns * self.cell_width
        if self.height < 0 and self.cell_height > 0 and self.rows > 0:
            self.height = self.rows * self.cell_height
        if self.width != initial.width or self.height != initial.height:
            self.width, self.height = raise_to_constraint(
                self.width, self.height, self.dimensions_constraint
            )

        if self.cell_width < 0 and self.width > 0 and self.columns > 0:
            self.cell_width = (self.width + spacing) // self.columns
        if self.cell_height < 0 and self.height > 0 and self.rows > 0:
            self.cell_height = (self.height + spacing) // self.rows
        if self.cell_width != initial.cell_width or self.cell_height != initial.cell_height:
            positive_w = self.cell_width > 0
            positive_h = self.cell_height > 0
            self.cell_width, self.cell_height = lower_to_constraint(
                self.cell_width, self.cell_height, self.cell_dimensions_constraint
            )
            if (self.cell_width == 0 and positive_w) or (self.cell_height == 0 and positive_h):
                raise GridPackingError("cell dimensions cannot satisfy the cell constraint")

        if (self.cell_width > 0 and self.cell_width - spacing - 1 <= self.px_range) or (
            self.cell_height > 0 and self.cell_height - spacing - 1 <= self.px_range
        ):
            raise GridPackingError("grid cells are too small for the distance range")

        max_bounds = Bounds()
        max_width = max_height = 0.0

        if self.scale <= 0:
            if self.px_range and self.miter_limit > 0:
                max_bounds, max_width, max_height = self._pack_scale_with_miters(
                    glyphs, cell_count, initial
                )
            else:
                max_bounds, max_width, max_height = self._pack_scale_linear(
                    glyphs, cell_count, initial
                )
        else:
            max_bounds, max_width, max_height = self._max_bounds(
                glyphs, self.scale, self.unit_range + self.px_range / self.scale
            )
            optimal_w = math.ceil(max_width) + spacing + 1
            optimal_h = math.ceil(max_height) + spacing + 1
            if self.cell_width < 0 or self.cell_height < 0:
                self.cell_width, self.cell_height = raise_to_constraint(
                    optimal_w, optimal_h, self.cell_dimensions_constraint
                )
            elif self.cell_width < optimal_w or self.cell_height < optimal_h:
                self.cutoff = True

        if self.h_fixed:
            if self.px_align_origin_x:
                sl = math.floor(max_bounds.l - 0.5)
                sr = math.ceil(max_bounds.r + 0.5)
                self.fixed_x = (
                    -sl + _div_trunc(self.cell_width - spacing - (sr - sl), 2)
                ) / self.scale
            else:
                self.fixed_x = (
                    -max_bounds.l + 0.5 * (self.cell_width - spacing - max_width)
                ) / self.scale
        if self.v_fixed:
            if self.px_align_origin_y:
                sb = math.floor(max_bounds.b - 0.5)
                st = math.ceil(max_bounds.t + 0.5)
                self.fixed_y = (
                    -sb + _div_trunc(self.cell_height - spacing - (st - sb), 2)
                ) / self.scale
            else:
                self.fixed_y = (
                    -max_bounds.b + 0.5 * (self.cell_height - spacing - max_height)
                ) / self.scale

        if self.width < 0 or self.height < 0:
            if self.columns <= 0:
                self._choose_columns(cell_count)
                self.rows = _ceil_div(cell_count, self.columns)
            self.width, self.height = raise_to_constraint(
                self.columns * self.cell_width,
                self.rows * self.cell_height,
                self.dimensions_constraint,
            )
            # The constraint may have grown the atlas a lot; retry with cells fitted to it.
            if (
                self.dimensions_constraint is not DimensionsConstraint.NONE
                and initial.cell_width < 0
                and initial.cell_height < 0
            ):
                self.cell_width = initial.cell_width
                self.cell_height = initial.cell_height
                self.columns = initial.columns
                self.rows = initial.rows
                self.scale = initial.scale
                return self.pack(glyphs)

        if self.columns < 0:
            self.columns = (self.width + spacing) // self.cell_width
            self.rows = _ceil_div(cell_count, self.columns)
        if self.rows * self.cell_height > self.height:
            self.rows = self.height // self.cell_height

        return self._place(glyphs)

    def _candidate_scale(
        self, glyphs: Sequence[GlyphGeometry], cell_width: int, cell_height: int
    ) -> float:
        if self.px_range and self.miter_limit > 0:
            return self._scale_to_fit(glyphs, cell_width, cell_height)[0]
        h_scale = _fdiv(
            cell_width - self._h_slack - self.spacing - 1 - self.px_range, self._base_width
        )
        v_scale = _fdiv(
            cell_height - self._v_slack - self.spacing - 1 - self.px_range, self._base_height
        )
        return min(h_scale, v_scale)

    def _pack_scale_with_miters(
        self, glyphs: Sequence[GlyphGeometry], cell_count: int, initial: "GridAtlasPacker"
    ) -> tuple[Bounds, float, float]:
        spacing = self.spacing
        max_bounds = Bounds()
        max_width = max_height = 0.0
        if self.cell_width > 0 or self.cell_height > 0:
            self.scale, max_bounds, max_width, max_height = self._scale_to_fit(
                glyphs, self.cell_width, self.cell_height
            )
            if self.scale < self.min_scale:
                self.scale = self.min_scale
                self.cutoff = True
                max_bounds, max_width, max_height = self._max_bounds(
                    glyphs,
                    self.scale,
                    self.unit_range + self.px_range / self.scale,
                    max_width,
                    max_height,
                )
        elif self.width > 0 and self.height > 0:
            candidates = []
            for q in range(math.isqrt(cell_count) + 1, 0, -1):
                candidates.append(q)
                candidates.append(_ceil_div(cell_count, q))
            self._search_columns(glyphs, cell_count, candidates)
            self.scale, max_bounds, max_width, max_height = self._scale_to_fit(
                glyphs, self.cell_width, self.cell_height
            )
            if self.scale < self.min_scale:
                self.scale = -1.0

        if self.scale <= 0:
            max_bounds, max_width, max_height = self._max_bounds(
                glyphs,
                self.min_scale,
                self.unit_range + self.px_range / self.min_scale,
                max_width,
                max_height,
            )
            self.cell_width, self.cell_height = raise_to_constraint(
                math.ceil(max_width) + spacing + 1,
                math.ceil(max_height) + spacing + 1,
                self.cell_dimensions_constraint,
            )
            self.scale, max_bounds, max_width, max_height = self._scale_to_fit(
                glyphs, self.cell_width, self.cell_height
            )
            if self.scale < self.min_scale:
                self.scale = self.min_scale
                max_bounds, max_width, max_height = self._max_bounds(
                    glyphs,
                    self.min_scale,
                    self.unit_range + self.px_range / self.min_scale,
                    max_width,
                    max_height,
                )

        if initial.rows < 0 and initial.cell_height < 0:
            optimal_w, optimal_h = raise_to_constraint(
                self.cell_width,
                math.ceil(max_height) + spacing + 1,
                self.cell_dimensions_constraint,
            )
            if optimal_h < self.cell_height and optimal_w <= self.cell_width:
                self.cell_width, self.cell_height = optimal_w, optimal_h
        return max_bounds, max_width, max_height

    def _pack_scale_linear(
        self, glyphs: Sequence[GlyphGeometry], cell_count: int, initial: "GridAtlasPacker"
    ) -> tuple[Bounds, float, float]:
        spacing = self.spacing
        px_range = self.px_range
        max_bounds, max_width, max_height = self._max_bounds(glyphs, 1.0, self.unit_range)
        h_slack = v_slack = 0
        if self.px_align_origin_x and not self.h_fixed:
            max_width -= 1
            h_slack = 1
        if self.px_align_origin_y and not self.v_fixed:
            max_height -= 1
            v_slack = 1
        self._h_slack, self._v_slack = h_slack, v_slack
        self._base_width, self._base_height = max_width, max_height

        h_scale = v_scale = 0.0
        if self.cell_width > 0:
            h_scale = _fdiv(self.cell_width - h_slack - spacing - 1 - px_range, max_width)
        if self.cell_height > 0:
            v_scale = _fdiv(self.cell_height - v_slack - spacing - 1 - px_range, max_height)
        if h_scale or v_scale:
            self.scale = min(h_scale, v_scale) if h_scale and v_scale else h_scale + v_scale
            if self.scale < self.min_scale:
                self.scale = self.min_scale
                self.cutoff = True
        elif self.width > 0 and self.height > 0:
            self._search_columns(glyphs, cell_count, range(1, self.width))
            if self.scale < self.min_scale:
                self.scale = -1.0

        if self.scale <= 0:
            self.cell_width, self.cell_height = raise_to_constraint(
                math.ceil(self.min_scale * max_width + px_range) + h_slack + spacing + 1,
                math.ceil(self.min_scale * max_height + px_range) + v_slack + spacing + 1,
                self.cell_dimensions_constraint,
            )
            h_scale = _fdiv(self.cell_width - h_slack - spacing - 1 - px_range, max_width)
            v_scale = _fdiv(self.cell_height - v_slack - spacing - 1 - px_range, max_height)
            self.scale = min(h_scale, v_scale)

        if initial.rows < 0 and initial.cell_height < 0:
            optimal_w, optimal_h = raise_to_constraint(
                self.cell_width,
                math.ceil(self.scale * max_height + px_range) + v_slack + spacing + 1,
                self.cell_dimensions_constraint,
            )
            if optimal_h < self.cell_height and optimal_w <= self.cell_width:
                self.cell_width, self.cell_height = optimal_w, optimal_h

        scale = self.scale
        max_bounds = Bounds(
            max_bounds.l * scale, max_bounds.b * scale, max_bounds.r * scale, max_bounds.t * scale
        )
        return max_bounds, max_width * scale, max_height * scale

    def _choose_columns(self, cell_count: int) -> None:
        best_rating = -1.0
        for q in range(math.isqrt(cell_count) + 1, 0, -1):
            for cols, rows in ((q, _ceil_div(cell_count, q)), (_ceil_div(cell_count, q), q)):
                if cols <= 0:
                    continue
                cur_w, cur_h = raise_to_constraint(
                    cols * self.cell_width, rows * self.cell_height, self.dimensions_constraint
                )
                rating = self._dimensions_rating(cur_w, cur_h, cols * self.cell_width == cur_w)
                if rating < best_rating or best_rating < 0:
                    best_rating = rating
                    self.columns = cols

    def _place(self, glyphs: list[GlyphGeometry]) -> int:
        count = len(glyphs)
        range_ = self.unit_range + self.px_range / self.scale
        fixed_x: Optional[float] = self.fixed_x if self.h_fixed else None
        fixed_y: Optional[float] = self.fixed_y if self.v_fixed else None
        col = row = 0
        for i, glyph in enumerate(glyphs):
            if glyph.whitespace:
                continue
            glyph.frame_box(
                self.scale,
                range_,
                self.miter_limit,
                self.cell_width - self.spacing,
                self.cell_height - self.spacing,
                fixed_x,
                fixed_y,
                self.px_align_origin_x,
                self.px_align_origin_y,
            )
            glyph.place_box(col * self.cell_width, self.height - (row + 1) * self.cell_height)
            col += 1
            if col >= self.columns:
                row += 1
                if row >= self.rows:
                    return count - i - 1
                col = 0
        return 0

    def pixel_range(self) -> float:
        """Final distance range in atlas pixels."""
        return self.px_range + self.scale * self.unit_range

    def fixed_origin(self) -> tuple[float, float]:
        """The shared glyph origin within each cell, in em units."""
        return self.fixed_x - 0.5 / self.scale, self.fixed_y - 0.5 / self.scale