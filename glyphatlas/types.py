"""Enumerations shared across the atlas generator."""

from __future__ import annotations

from enum import Enum


class ImageType(Enum):
    """Kind of bitmap stored in the atlas."""

    HARD_MASK = "hardmask"
    SOFT_MASK = "softmask"
    SDF = "sdf"
    PSDF = "psdf"
    MSDF = "msdf"
    MTSDF = "mtsdf"

    @classmethod
    def from_name(cls, name: str) -> "ImageType":
        """Return the atlas type with the given command-line name."""
        try:
            return cls(name)
        except ValueError:
            raise ValueError(
                "Invalid atlas type. Valid types are: hardmask, softmask, sdf, psdf, msdf, mtsdf"
            ) from None


class ImageFormat(Enum):
    """File format of the atlas image output."""

    UNSPECIFIED = "unspecified"
    PNG = "png"
    BMP = "bmp"
    TIFF = "tiff"
    TEXT = "text"
    TEXT_FLOAT = "textfloat"
    BINARY = "bin"
    BINARY_FLOAT = "binfloat"
    BINARY_FLOAT_BE = "binfloatbe"

    @classmethod
    def from_name(cls, name: str) -> "ImageFormat":
        """Return the image format with the given command-line name."""
        try:
            fmt = cls(name)
        except ValueError:
            fmt = cls.UNSPECIFIED
        if fmt is cls.UNSPECIFIED:
            raise ValueError(
                "Invalid image format. Valid formats are: png, bmp, tiff, text, textfloat, bin, binfloat"
            )
        return fmt


class YDirection(Enum):
    """Orientation of the Y axis in the output."""

    BOTTOM_UP = "bottom"
    TOP_DOWN = "top"


class DimensionsConstraint(Enum):
    """Rule that atlas or cell dimensions must satisfy."""

    NONE = "none"
    SQUARE = "square"
    EVEN_SQUARE = "square2"
    MULTIPLE_OF_FOUR_SQUARE = "square4"
    POWER_OF_TWO_RECTANGLE = "potr"
    POWER_OF_TWO_SQUARE = "pots"

    def is_square(self) -> bool:
        """Whether the constraint forces width and height to be equal."""
        return self in (
            DimensionsConstraint.SQUARE,
            DimensionsConstraint.EVEN_SQUARE,
            DimensionsConstraint.MULTIPLE_OF_FOUR_SQUARE,
            DimensionsConstraint.POWER_OF_TWO_SQUARE,
        )


class GlyphIdentifierType(Enum):
    """How glyphs are identified in input and output."""

    GLYPH_INDEX = "index"
    UNICODE_CODEPOINT = "unicode"


class PackingStyle(Enum):
    """Layout strategy for the atlas."""

    TIGHT = "tight"
    GRID = "grid"