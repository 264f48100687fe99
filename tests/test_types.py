import pytest

from glyphatlas.types import (
    DimensionsConstraint,
    GlyphIdentifierType,
    ImageFormat,
    ImageType,
    PackingStyle,
    YDirection,
)


@pytest.mark.parametrize("member", list(ImageType))
def test_image_type_round_trip(member):
    assert ImageType.from_name(member.value) is member


def test_image_type_names_from_source():
    assert ImageType.from_name("hardmask") is ImageType.HARD_MASK
    assert ImageType.from_name("mtsdf") is ImageType.MTSDF


def test_image_type_unknown():
    with pytest.raises(ValueError, match="Invalid atlas type"):
        ImageType.from_name("bogus")


@pytest.mark.parametrize("member", [f for f in ImageFormat if f is not ImageFormat.UNSPECIFIED])
def test_image_format_round_trip(member):
    assert ImageFormat.from_name(member.value) is member


def test_image_format_names_from_source():
    assert ImageFormat.from_name("binfloatbe") is ImageFormat.BINARY_FLOAT_BE
    assert ImageFormat.from_name("textfloat") is ImageFormat.TEXT_FLOAT


@pytest.mark.parametrize("name", ["unspecified", "jpeg", ""])
def test_image_format_rejects(name):
    with pytest.raises(ValueError, match="Invalid image format"):
        ImageFormat.from_name(name)


@pytest.mark.parametrize(
    "constraint,expected",
    [
        (DimensionsConstraint.NONE, False),
        (DimensionsConstraint.SQUARE, True),
        (DimensionsConstraint.EVEN_SQUARE, True),
        (DimensionsConstraint.MULTIPLE_OF_FOUR_SQUARE, True),
        (DimensionsConstraint.POWER_OF_TWO_RECTANGLE, False),
        (DimensionsConstraint.POWER_OF_TWO_SQUARE, True),
    ],
)
def test_is_square(constraint, expected):
    assert constraint.is_square() is expected


def test_other_enums_distinct():
    assert len({YDirection.BOTTOM_UP, YDirection.TOP_DOWN}) == 2
    assert GlyphIdentifierType.GLYPH_INDEX is not GlyphIdentifierType.UNICODE_CODEPOINT
    assert PackingStyle("grid") is PackingStyle.GRID