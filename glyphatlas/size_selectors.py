"""Search strategies for atlas dimensions given a minimum area."""

from __future__ import annotations

import math


class SquareSizeSelector:
    """Binary search over square sides that are multiples of ``multiple``."""

    def __init__(self, min_area: int = 0, multiple: int = 1) -> None:
        self.multiple = multiple
        self.lower_bound = 0
        self.upper_bound = -1
        if min_area > 0:
            self.lower_bound = math.isqrt(min_area - 1) // multiple + 1
        self._update_current()

    def _update_current(self) -> None:
        if self.upper_bound < 0:
            self.current = 5 * self.lower_bound // 4 + 16 // self.multiple + 1
        else:
            self.current = self.lower_bound + (self.upper_bound - self.lower_bound) // 2

    def dimensions(self) -> tuple[int, int]:
        """Current candidate width and height."""
        side = self.multiple * self.current
        return side, side

    def active(self) -> bool:
        """Whether the search is still going."""
        return self.lower_bound < self.upper_bound or self.upper_bound < 0

    def increase(self) -> None:
        """The current size was too small."""
        self.lower_bound = self.current + 1
        self._update_current()

    def decrease(self) -> None:
        """The current size fits; look for a smaller one."""
        self.upper_bound = self.current
        self._update_current()


class SquarePowerOfTwoSizeSelector:
    """Square sides that are powers of two, growing until one fits."""

    def __init__(self, min_area: int = 0) -> None:
        self.side = 1
        while self.side * self.side < min_area:
            self.side <<= 1

    def dimensions(self) -> tuple[int, int]:
        """Current candidate width and height."""
        return self.side, self.side

    def active(self) -> bool:
        """Whether the search is still going."""
        return self.side > 0

    def increase(self) -> None:
        """The current size was too small."""
        self.side <<= 1

    def decrease(self) -> None:
        """The current size fits; stop searching."""
        self.side = 0


class PowerOfTwoSizeSelector:
    """Power-of-two rectangles, width at most twice the height."""

    def __init__(self, min_area: int = 0) -> None:
        self.w = 1
        self.h = 1
        while self.w * self.h < min_area:
            self.increase()

    def dimensions(self) -> tuple[int, int]:
        """Current candidate width and height."""
        return self.w, self.h

    def active(self) -> bool:
        """Whether the search is still going."""
        return self.w > 0 and self.h > 0

    def increase(self) -> None:
        """The current size was too small."""
        if self.w == self.h:
            self.w <<= 1
        else:
            self.h = self.w

    def decrease(self) -> None:
        """The current size fits; stop searching."""
        self.w = 0
        self.h = 0