"""Glyph geometry and the placement of its box in the atlas."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Optional

from glyphatlas.rectangle_packer import Rectangle
from glyphatlas.types import GlyphIdentifierType


@dataclass(frozen=True)
class Bounds:
    """Left, bottom, right and top edges."""

    l: float = 0.0
    b: float = 0.0
    r: float = 0.0
    t: float = 0.0


@dataclass
class GlyphBox:
    """Summary of a placed glyph."""

    index: int = 0
    advance: float = 0.0
    bounds: Bounds = field(default_factory=Bounds)
    rect: Rectangle = field(default_factory=Rectangle)


MiterBounds = Callable[[Bounds, float, float], Bounds]


def _div_trunc(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


class GlyphGeometry:
    """A glyph's shape bounds, metrics and its box within the atlas.

    ``bounds`` are in shape units, ``advance`` is already scaled by
    ``geometry_scale``. ``miter_bounds``, if given, receives the padded bounds,
    the border width and the miter limit and returns bounds that also enclose
    the shape's miters.
    """

    def __init__(
        self,
        index: int = 0,
        bounds: Optional[Bounds] = None,
        advance: float = 0.0,
        geometry_scale: float = 1.0,
        codepoint: int = 0,
        whitespace: bool = False,
        miter_bounds: Optional[MiterBounds] = None,
    ) -> None:
        self.index = index
        self.bounds = bounds if bounds is not None else Bounds()
        self.advance = advance
        self.geometry_scale = geometry_scale
        self.codepoint = codepoint
        self.whitespace = whitespace
        self.miter_bounds = miter_bounds
        self.box = Rectangle()
        self.box_range = 0.0
        self.box_scale = 0.0
        self.box_translate: tuple[float, float] = (0.0, 0.0)

    def identifier(self, identifier_type: GlyphIdentifierType) -> int:
        """The glyph index or code point, as requested."""
        if identifier_type is GlyphIdentifierType.GLYPH_INDEX:
            return self.index
        return self.codepoint

    def extended_bounds(self, range_: float, miter_limit: float = 0.0) -> Bounds:
        """Shape bounds padded by half the range, including miters if limited."""
        half = 0.5 * range_
        ext = Bounds(
            self.bounds.l - half,
            self.bounds.b - half,
            self.bounds.r + half,
            self.bounds.t + half,
        )
        if miter_limit > 0 and self.miter_bounds is not None:
            ext = self.miter_bounds(ext, half, miter_limit)
        return ext

    def wrap_box(
        self,
        scale: float,
        range_: float,
        miter_limit: float = 0.0,
        px_align_x: bool = False,
        px_align_y: Optional[bool] = None,
    ) -> None:
        """Size the box tightly around the glyph at the given scale and range."""
        if px_align_y is None:
            px_align_y = px_align_x
        scale *= self.geometry_scale
        range_ /= self.geometry_scale
        self.box_range = range_
        self.box_scale = scale
        bounds = self.bounds
        if not (bounds.l < bounds.r and bounds.b < bounds.t):
            self.box.w = 0
            self.box.h = 0
            self.box_translate = (0.0, 0.0)
            return
        ext = self.extended_bounds(range_, miter_limit)
        if px_align_x:
            sl = math.floor(scale * ext.l - 0.5)
            sr = math.ceil(scale * ext.r + 0.5)
            w = sr - sl
            tx = -sl / scale
        else:
            span = scale * (ext.r - ext.l)
            w = math.ceil(span) + 1
            tx = -ext.l + 0.5 * (w - span) / scale
        if px_align_y:
            sb = math.floor(scale * ext.b - 0.5)
            st = math.ceil(scale * ext.t + 0.5)
            h = st - sb
            ty = -sb / scale
        else:
            span = scale * (ext.t - ext.b)
            h = math.ceil(span) + 1
            ty = -ext.b + 0.5 * (h - span) / scale
        self.box.w = w
        self.box.h = h
        self.box_translate = (tx, ty)

    def frame_box(
        self,
        scale: float,
        range_: float,
        miter_limit: float,
        width: int,
        height: int,
        fixed_x: Optional[float] = None,
        fixed_y: Optional[float] = None,
        px_align_x: bool = False,
        px_align_y: Optional[bool] = None,
    ) -> None:
        """Center the glyph in a box of fixed size, or place it at a fixed origin."""
        if px_align_y is None:
            px_align_y = px_align_x
        scale *= self.geometry_scale
        range_ /= self.geometry_scale
        self.box_range = range_
        self.box_scale = scale
        self.box.w = width
        self.box.h = height
        if fixed_x is not None and fixed_y is not None:
            self.box_translate = (
                fixed_x / self.geometry_scale,
                fixed_y / self.geometry_scale,
            )
            return
        ext = self.extended_bounds(range_, miter_limit)
        if fixed_x is not None:
            tx = fixed_x / self.geometry_scale
        elif px_align_x:
            sl = math.floor(scale * ext.l - 0.5)
            sr = math.ceil(scale * ext.r + 0.5)
            tx = (-sl + _div_trunc(width - (sr - sl), 2)) / scale
        else:
            span = scale * (ext.r - ext.l)
            tx = -ext.l + 0.5 * (width - span) / scale
        if fixed_y is not None:
            ty = fixed_y / self.geometry_scale
        elif px_align_y:
            sb = math.floor(scale * ext.b - 0.5)
            st = math.ceil(scale * ext.t + 0.5)
            ty = (-sb + _div_trunc(height - (st - sb), 2)) / scale
        else:
            span = scale * (ext.t - ext.b)
            ty = -ext.b + 0.5 * (height - span) / scale
        self.box_translate = (tx, ty)

    def place_box(self, x: int, y: int) -> None:
        """Set the box position in the atlas."""
        self.box.x = x
        self.box.y = y

    def quad_plane_bounds(self) -> Bounds:
        """Bounds of the quad in em-scaled plane coordinates."""
        if self.box.w > 0 and self.box.h > 0:
            inv = 1 / self.box_scale
            tx, ty = self.box_translate
            gs = self.geometry_scale
            return Bounds(
                gs * (-tx + 0.5 * inv),
                gs * (-ty + 0.5 * inv),
                gs * (-tx + (self.box.w - 0.5) * inv),
                gs * (-ty + (self.box.h - 0.5) * inv),
            )
        return Bounds()

    def quad_atlas_bounds(self) -> Bounds:
        """Bounds of the quad in atlas pixel coordinates."""
        if self.box.w > 0 and self.box.h > 0:
            return Bounds(
                self.box.x + 0.5,
                self.box.y + 0.5,
                self.box.x + self.box.w - 0.5,
                self.box.y + self.box.h - 0.5,
            )
        return Bounds()

    def to_glyph_box(self) -> GlyphBox:
        """Summary of this glyph's placement."""
        return GlyphBox(
            index=self.index,
            advance=self.advance,
            bounds=self.quad_plane_bounds(),
            rect=Rectangle(self.box.x, self.box.y, self.box.w, self.box.h),
        )