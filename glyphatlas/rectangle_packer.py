"""Guillotine-style packing of rectangles into free spaces."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, TypeVar

WORST_FIT = 0x7FFFFFFF

_T = TypeVar("_T")


@dataclass
class Rectangle:
    """An axis-aligned integer rectangle."""

    x: int = 0
    y: int = 0
    w: int = 0
    h: int = 0


@dataclass
class OrientedRectangle(Rectangle):
    """A rectangle that may be placed rotated by 90 degrees."""

    rotated: bool = False


def rate_fit(w: int, h: int, sw: int, sh: int) -> int:
    """Score of placing a ``w`` x ``h`` box into a ``sw`` x ``sh`` space (lower is better)."""
    return min(sw - w, sh - h)


def _remove_unordered(items: list, index: int) -> None:
    if index != len(items) - 1:
        items[index], items[-1] = items[-1], items[index]
    items.pop()


class RectanglePacker:
    """Places rectangles into the free spaces of an area, splitting them as it goes."""

    def __init__(self, width: int = 0, height: int = 0) -> None:
        self.spaces: list[Rectangle] = []
        if width > 0 and height > 0:
            self.spaces.append(Rectangle(0, 0, width, height))

    def expand(self, width: int, height: int) -> None:
        """Grow the packing area to ``width`` x ``height``."""
        if width > 0 and height > 0:
            old_width = max((s.x + s.w for s in self.spaces), default=0)
            old_height = max((s.y + s.h for s in self.spaces), default=0)
            old_width = max(old_width, 0)
            old_height = max(old_height, 0)
            self.spaces.append(Rectangle(0, 0, width, height))
            self._split_space(len(self.spaces) - 1, old_width, old_height)

    def _split_space(self, index: int, w: int, h: int) -> None:
        space = self.spaces[index]
        _remove_unordered(self.spaces, index)
        a = Rectangle(space.x, space.y + h, w, space.h - h)
        b = Rectangle(space.x + w, space.y, space.w - w, h)
        if w * (space.h - h) < h * (space.w - w):
            a.w = space.w
        else:
            b.h = space.h
        if a.w > 0 and a.h > 0:
            self.spaces.append(a)
        if b.w > 0 and b.h > 0:
            self.spaces.append(b)

    def _best_fit(
        self, rectangles: Sequence[Rectangle], remaining: list[int]
    ) -> Optional[tuple[int, int]]:
        best_fit = WORST_FIT
        best: Optional[tuple[int, int]] = None
        for i, space in enumerate(self.spaces):
            for j, rect_index in enumerate(remaining):
                rect = rectangles[rect_index]
                if rect.w == space.w and rect.h == space.h:
                    return i, j
                if rect.w <= space.w and rect.h <= space.h:
                    fit = rate_fit(rect.w, rect.h, space.w, space.h)
                    if fit < best_fit:
                        best, best_fit = (i, j), fit
        return best

    def _best_oriented_fit(
        self, rectangles: Sequence[OrientedRectangle], remaining: list[int]
    ) -> Optional[tuple[int, int, bool]]:
        best_fit = WORST_FIT
        best: Optional[tuple[int, int, bool]] = None
        for i, space in enumerate(self.spaces):
            for j, rect_index in enumerate(remaining):
                rect = rectangles[rect_index]
                if rect.w == space.w and rect.h == space.h:
                    return i, j, False
                if rect.h == space.w and rect.w == space.h:
                    return i, j, True
                if rect.w <= space.w and rect.h <= space.h:
                    fit = rate_fit(rect.w, rect.h, space.w, space.h)
                    if fit < best_fit:
                        best, best_fit = (i, j, False), fit
                if rect.h <= space.w and rect.w <= space.h:
                    fit = rate_fit(rect.h, rect.w, space.w, space.h)
                    if fit < best_fit:
                        best, best_fit = (i, j, True), fit
        return best

    def pack(self, rectangles: Sequence[Rectangle]) -> int:
        """Set the position of each rectangle that fits; return how many did not."""
        remaining = list(range(len(rectangles)))
        while remaining:
            found = self._best_fit(rectangles, remaining)
            if found is None:
                break
            space_index, rect_pos = found
            rect = rectangles[remaining[rect_pos]]
            space = self.spaces[space_index]
            rect.x, rect.y = space.x, space.y
            self._split_space(space_index, rect.w, rect.h)
            _remove_unordered(remaining, rect_pos)
        return len(remaining)

    def pack_oriented(self, rectangles: Sequence[OrientedRectangle]) -> int:
        """Like :meth:`pack`, but rectangles may be rotated to fit."""
        remaining = list(range(len(rectangles)))
        while remaining:
            found = self._best_oriented_fit(rectangles, remaining)
            if found is None:
                break
            space_index, rect_pos, rotated = found
            rect = rectangles[remaining[rect_pos]]
            space = self.spaces[space_index]
            rect.x, rect.y = space.x, space.y
            rect.rotated = rotated
            if rotated:
                self._split_space(space_index, rect.h, rect.w)
            else:
                self._split_space(space_index, rect.w, rect.h)
            _remove_unordered(remaining, rect_pos)
        return len(remaining)