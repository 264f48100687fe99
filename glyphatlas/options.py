"""Command-line options of the atlas generator."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Optional, Sequence

from glyphatlas.types import (
    DimensionsConstraint,
    GlyphIdentifierType,
    ImageFormat,
    ImageType,
    PackingStyle,
    YDirection,
)

DEFAULT_ANGLE_THRESHOLD = 3.0
DEFAULT_MITER_LIMIT = 1.0
DEFAULT_ERROR_RATIO = 1.11111111111111111

VERSION_TEXT = "Glyph Atlas Generator"

HELP_TEXT = """
Glyph Atlas Generator
----------------------------------------------------------------

INPUT SPECIFICATION
  -font <filename.ttf/otf>
      Specifies the input TrueType / OpenType font file. A font specification is required.
  -charset <filename>
      Specifies the input character set. Refer to the documentation for format of charset specification. Defaults to ASCII.
  -glyphset <filename>
      Specifies the set of input glyphs as glyph indices within the font file.
  -allglyphs
      Specifies that all glyphs within the font file are to be processed.
  -fontscale <scale>
      Specifies the scale to be applied to the glyph geometry of the font.
  -fontname <name>
      Specifies a name for the font that will be propagated into the output files as metadata.
  -and
      Separates multiple inputs to be combined into a single atlas.

ATLAS CONFIGURATION
  -type <hardmask / softmask / sdf / psdf / msdf / mtsdf>
      Selects the type of atlas to be generated.
  -format <png / bmp / tiff / text / textfloat / bin / binfloat / binfloatbe>
      Selects the format for the atlas image output. Some image formats may be incompatible with embedded output formats.
  -dimensions <width> <height>
      Sets the atlas to have fixed dimensions (width x height).
  -pots / -potr / -square / -square2 / -square4
      Picks the minimum atlas dimensions that fit all glyphs and satisfy the selected constraint:
      power of two square / ... rectangle / any square / square with side divisible by 2 / ... 4
  -uniformgrid
      Lays out the atlas into a uniform grid. Enables following options starting with -uniform:
    -uniformcols <N>
        Sets the number of grid columns.
    -uniformcell <width> <height>
        Sets fixed dimensions of the grid's cells.
    -uniformcellconstraint <none / pots / potr / square / square2 / square4>
        Constrains cell dimensions to the given rule (see -pots / ... above).
    -uniformorigin <off / on / horizontal / vertical>
        Sets whether the glyph's origin point should be fixed at the same position in each cell.
  -yorigin <bottom / top>
      Determines whether the Y-axis is oriented upwards (bottom origin, default) or downwards (top origin).

OUTPUT SPECIFICATION - one or more can be specified
  -imageout <filename.*>
      Saves the atlas as an image file with the specified format. Layout data must be stored separately.
  -json <filename.json>
      Writes the atlas's layout data, as well as other metrics into a structured JSON file.
  -csv <filename.csv>
      Writes the layout data of the glyphs into a simple CSV file.
  -shadronpreview <filename.shadron> <sample text>
      Generates a Shadron script that uses the generated atlas to draw a sample text as a preview.

GLYPH CONFIGURATION
  -size <em size>
      Specifies the size of the glyphs in the atlas bitmap in pixels per em.
  -minsize <em size>
      Specifies the minimum size. The largest possible size that fits the same atlas dimensions will be used.
  -emrange <em range>
      Specifies the SDF distance range in em's.
  -pxrange <pixel range>
      Specifies the SDF distance range in output pixels. The default value is 2.
  -pxalign <off / on / horizontal / vertical>
      Specifies whether each glyph's origin point should be aligned with the pixel grid.
  -nokerning
      Disables inclusion of kerning pair table in output files.

DISTANCE FIELD GENERATOR SETTINGS
  -angle <angle>
      Specifies the minimum angle between adjacent edges to be considered a corner. Append D for degrees. (msdf / mtsdf only)
  -coloringstrategy <simple / inktrap / distance>
      Selects the strategy of the edge coloring heuristic.
  -errorcorrection <mode>
      Changes the MSDF/MTSDF error correction mode. Use -errorcorrection help for a list of valid modes.
  -errordeviationratio <ratio>
      Sets the minimum ratio between the actual and maximum expected distance delta to be considered an error.
  -errorimproveratio <ratio>
      Sets the minimum ratio between the pre-correction distance error and the post-correction distance error.
  -miterlimit <value>
      Sets the miter limit that limits the extension of each glyph's bounding box due to very sharp corners. (psdf / msdf / mtsdf only)
  -nooverlap
      Disables resolution of overlapping contours.
  -noscanline
      Disables the scanline pass, which corrects the distance field's signs according to the non-zero fill rule.
  -seed <N>
      Sets the initial seed for the edge coloring heuristic.
  -threads <N>
      Sets the number of threads for the parallel computation. (0 = auto)
"""

ERROR_CORRECTION_HELP_TEXT = """
ERROR CORRECTION MODES
  auto-fast
      Detects inversion artifacts and distance errors that do not affect edges by range testing.
  auto-full
      Detects inversion artifacts and distance errors that do not affect edges by exact distance evaluation.
  auto-mixed (default)
      Detects inversions by distance evaluation and distance errors that do not affect edges by range testing.
  disabled
      Disables error correction.
  distance-fast
      Detects distance errors by range testing. Does not care if edges and corners are affected.
  distance-full
      Detects distance errors by exact distance evaluation. Does not care if edges and corners are affected, slow.
  edge-fast
      Detects inversion artifacts only by range testing.
  edge-full
      Detects inversion artifacts only by exact distance evaluation.
  help
      Displays this help.
"""


class OptionsError(ValueError):
    """The command line holds an invalid setting."""


class InfoRequested(Exception):
    """The command line asks for information text instead of a run."""

    def __init__(self, text: str) -> None:
        super().__init__(text)
        self.text = text


class EdgeColoring(Enum):
    """Strategy of the edge coloring heuristic."""

    SIMPLE = "simple"
    INKTRAP = "inktrap"
    DISTANCE = "distance"


class RangeMode(Enum):
    """Unit in which the distance range was given."""

    EM = "em"
    PIXEL = "pixel"


class ErrorCorrectionMode(Enum):
    DISABLED = "disabled"
    INDISCRIMINATE = "indiscriminate"
    EDGE_PRIORITY = "edge-priority"
    EDGE_ONLY = "edge-only"


class DistanceCheckMode(Enum):
    DO_NOT_CHECK_DISTANCE = "none"
    CHECK_DISTANCE_AT_EDGE = "at-edge"
    ALWAYS_CHECK_DISTANCE = "always"


@dataclass
class FontInput:
    """One font input, separated from others by ``-and``."""

    font_filename: Optional[str] = None
    variable_font: bool = False
    glyph_identifier_type: GlyphIdentifierType = GlyphIdentifierType.UNICODE_CODEPOINT
    charset_filename: Optional[str] = None
    font_scale: float = -1.0
    font_name: Optional[str] = None


@dataclass
class GridSettings:
    """Uniform grid layout settings and results."""

    cell_width: int = 0
    cell_height: int = 0
    cols: int = 0
    rows: int = 0
    fixed_origin_x: bool = False
    fixed_origin_y: bool = True


@dataclass
class ErrorCorrection:
    """MSDF error correction settings."""

    mode: ErrorCorrectionMode = ErrorCorrectionMode.EDGE_PRIORITY
    distance_check_mode: DistanceCheckMode = DistanceCheckMode.CHECK_DISTANCE_AT_EDGE
    min_deviation_ratio: float = DEFAULT_ERROR_RATIO
    min_improve_ratio: float = DEFAULT_ERROR_RATIO


@dataclass
class Configuration:
    """Settings of one atlas generation run."""

    image_type: ImageType = ImageType.MSDF
    image_format: ImageFormat = ImageFormat.UNSPECIFIED
    y_direction: YDirection = YDirection.BOTTOM_UP
    width: int = 0
    height: int = 0
    em_size: float = 0.0
    px_range: float = 0.0
    angle_threshold: float = DEFAULT_ANGLE_THRESHOLD
    miter_limit: float = DEFAULT_MITER_LIMIT
    px_align_origin_x: bool = False
    px_align_origin_y: bool = True
    grid: GridSettings = field(default_factory=GridSettings)
    edge_coloring: EdgeColoring = EdgeColoring.INKTRAP
    coloring_seed: int = 0
    error_correction: ErrorCorrection = field(default_factory=ErrorCorrection)
    overlap_support: bool = True
    scanline_pass: bool = True
    preprocess_geometry: bool = False
    kerning: bool = True
    thread_count: int = 0
    image_filename: Optional[str] = None
    json_filename: Optional[str] = None
    csv_filename: Optional[str] = None
    shadron_preview_filename: Optional[str] = None
    shadron_preview_text: Optional[str] = None

    @property
    def expensive_coloring(self) -> bool:
        """Whether edge coloring is costly enough to be run per glyph in parallel."""
        return self.edge_coloring is EdgeColoring.DISTANCE


@dataclass
class ParsedOptions:
    """Everything read from the command line, before finalization."""

    config: Configuration = field(default_factory=Configuration)
    font_input: FontInput = field(default_factory=FontInput)
    font_inputs: list = field(default_factory=list)
    image_format_name: Optional[str] = None
    fixed_width: int = -1
    fixed_height: int = -1
    fixed_cell_width: int = -1
    fixed_cell_height: int = -1
    min_em_size: float = 0.0
    range_mode: RangeMode = RangeMode.PIXEL
    range_value: float = 0.0
    packing_style: PackingStyle = PackingStyle.TIGHT
    atlas_size_constraint: DimensionsConstraint = DimensionsConstraint.NONE
    cell_size_constraint: DimensionsConstraint = DimensionsConstraint.NONE
    explicit_error_correction: bool = False
    arguments_given: bool = False
    unknown_arguments: list = field(default_factory=list)
    warnings: list = field(default_factory=list)

    @property
    def suggest_help(self) -> bool:
        """Whether any argument was not understood."""
        return bool(self.unknown_arguments)


_UNSIGNED = re.compile(r"\s*([+-]?)([0-9]+)")
_FLOAT = r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)"
_DOUBLE = re.compile(r"\s*(" + _FLOAT + ")", re.IGNORECASE)


def _parse_c_unsigned(text: str, bits: int) -> int:
    match = _UNSIGNED.fullmatch(text)
    if match is None:
        raise ValueError(f"not an unsigned integer: {text!r}")
    value = int(match.group(2))
    if value >= 1 << bits:
        raise ValueError(f"integer out of range: {text!r}")
    if match.group(1) == "-":
        value = -value % (1 << bits)
    return value


def parse_unsigned(text: str) -> int:
    """Parse a whole string as a 32-bit unsigned integer; a minus sign wraps around."""
    return _parse_c_unsigned(text, 32)


def parse_double(text: str) -> float:
    """Parse a whole string as a real number."""
    match = _DOUBLE.fullmatch(text)
    if match is None:
        raise ValueError(f"not a number: {text!r}")
    return float(match.group(1))


def parse_angle(text: str) -> float:
    """Parse an angle in radians, or in degrees when followed by ``d``."""
    match = _DOUBLE.match(text)
    if match is None:
        raise ValueError(f"not an angle: {text!r}")
    value = float(match.group(1))
    rest = text[match.end():]
    if not rest:
        return value
    if rest in ("d", "D"):
        return value * math.pi / 180
    raise ValueError(f"not an angle: {text!r}")


def parse_origin_setting(text: str) -> tuple[bool, bool]:
    """Parse an off / on / horizontal / vertical setting into (x, y) flags."""
    if text in ("off", "0", "false") or text.startswith(("disable", "n")):
        return False, False
    if text in ("on", "1", "true", "hv") or text.startswith(("enable", "y")):
        return True, True
    if text.startswith("h"):
        return True, False
    if text.startswith("v") or text in ("baseline", "default"):
        return False, True
    raise ValueError(f"unknown origin setting: {text!r}")


_EC = ErrorCorrectionMode
_DC = DistanceCheckMode
_ERROR_CORRECTION_MODES = {
    "default": (_EC.EDGE_PRIORITY, _DC.CHECK_DISTANCE_AT_EDGE),
    "auto": (_EC.EDGE_PRIORITY, _DC.CHECK_DISTANCE_AT_EDGE),
    "auto-mixed": (_EC.EDGE_PRIORITY, _DC.CHECK_DISTANCE_AT_EDGE),
    "mixed": (_EC.EDGE_PRIORITY, _DC.CHECK_DISTANCE_AT_EDGE),
    "auto-fast": (_EC.EDGE_PRIORITY, _DC.DO_NOT_CHECK_DISTANCE),
    "fast": (_EC.EDGE_PRIORITY, _DC.DO_NOT_CHECK_DISTANCE),
    "auto-full": (_EC.EDGE_PRIORITY, _DC.ALWAYS_CHECK_DISTANCE),
    "full": (_EC.EDGE_PRIORITY, _DC.ALWAYS_CHECK_DISTANCE),
    "distance": (_EC.INDISCRIMINATE, _DC.DO_NOT_CHECK_DISTANCE),
    "distance-fast": (_EC.INDISCRIMINATE, _DC.DO_NOT_CHECK_DISTANCE),
    "indiscriminate": (_EC.INDISCRIMINATE, _DC.DO_NOT_CHECK_DISTANCE),
    "indiscriminate-fast": (_EC.INDISCRIMINATE, _DC.DO_NOT_CHECK_DISTANCE),
    "distance-full": (_EC.INDISCRIMINATE, _DC.ALWAYS_CHECK_DISTANCE),
    "indiscriminate-full": (_EC.INDISCRIMINATE, _DC.ALWAYS_CHECK_DISTANCE),
    "edge-fast": (_EC.EDGE_ONLY, _DC.DO_NOT_CHECK_DISTANCE),
    "edge": (_EC.EDGE_ONLY, _DC.ALWAYS_CHECK_DISTANCE),
    "edge-full": (_EC.EDGE_ONLY, _DC.ALWAYS_CHECK_DISTANCE),
}


def parse_error_correction(text: str) -> tuple[ErrorCorrectionMode, DistanceCheckMode]:
    """Parse an error correction mode name into its mode and distance check."""
    if text.startswith("disable") or text in ("0", "none"):
        return _EC.DISABLED, _DC.DO_NOT_CHECK_DISTANCE
    try:
        return _ERROR_CORRECTION_MODES[text]
    except KeyError:
        raise ValueError(
            "Unknown error correction mode. Use -errorcorrection help for more information."
        ) from None


_Handler = Callable[..., None]
_OPTIONS: dict[str, tuple[int, _Handler]] = {}


def _option(*names: str, arity: int = 0) -> Callable[[_Handler], _Handler]:
    def register(handler: _Handler) -> _Handler:
        for name in names:
            _OPTIONS[name] = (arity, handler)
        return handler

    return register


def _positive_double(text: str, message: str, allow_zero: bool = False) -> float:
    try:
        value = parse_double(text)
    except ValueError:
        raise OptionsError(message) from None
    if not (value >= 0 if allow_zero else value > 0):
        raise OptionsError(message)
    return value


def _positive_pair(width: str, height: str, message: str) -> tuple[int, int]:
    try:
        w, h = parse_unsigned(width), parse_unsigned(height)
    except ValueError:
        raise OptionsError(message) from None
    if not (w and h):
        raise OptionsError(message)
    return w, h


@_option("-type", arity=1)
def _type(opts: ParsedOptions, value: str) -> None:
    try:
        opts.config.image_type = ImageType.from_name(value)
    except ValueError as error:
        raise OptionsError(str(error)) from None


@_option("-format", arity=1)
def _format(opts: ParsedOptions, value: str) -> None:
    try:
        opts.config.image_format = ImageFormat.from_name(value)
    except ValueError as error:
        raise OptionsError(str(error)) from None
    opts.image_format_name = value


@_option("-font", arity=1)
def _font(opts: ParsedOptions, value: str) -> None:
    opts.font_input.font_filename = value
    opts.font_input.variable_font = False


@_option("-charset", arity=1)
def _charset(opts: ParsedOptions, value: str) -> None:
    opts.font_input.charset_filename = value
    opts.font_input.glyph_identifier_type = GlyphIdentifierType.UNICODE_CODEPOINT


@_option("-glyphset", arity=1)
def _glyphset(opts: ParsedOptions, value: str) -> None:
    opts.font_input.charset_filename = value
    opts.font_input.glyph_identifier_type = GlyphIdentifierType.GLYPH_INDEX


@_option("-allglyphs")
def _allglyphs(opts: ParsedOptions) -> None:
    opts.font_input.charset_filename = None
    opts.font_input.glyph_identifier_type = GlyphIdentifierType.GLYPH_INDEX


@_option("-fontscale", arity=1)
def _fontscale(opts: ParsedOptions, value: str) -> None:
    opts.font_input.font_scale = _positive_double(
        value,
        "Invalid font scale argument. Use -fontscale <font scale> with a positive real number.",
    )


@_option("-fontname", arity=1)
def _fontname(opts: ParsedOptions, value: str) -> None:
    opts.font_input.font_name = value


@_option("-and")
def _and(opts: ParsedOptions) -> None:
    current = opts.font_input
    if (
        current.font_filename is None
        and current.charset_filename is None
        and current.font_scale < 0
    ):
        raise OptionsError("No font, character set, or font scale specified before -and separator.")
    if opts.font_inputs and opts.font_inputs[-1] == current:
        raise OptionsError(
            "No changes between subsequent inputs. A different font, character set, or font "
            "scale must be set inbetween -and separators."
        )
    opts.font_inputs.append(replace(current))
    current.font_name = None


@_option("-imageout", arity=1)
def _imageout(opts: ParsedOptions, value: str) -> None:
    opts.config.image_filename = value


@_option("-json", arity=1)
def _json(opts: ParsedOptions, value: str) -> None:
    opts.config.json_filename = value


@_option("-csv", arity=1)
def _csv(opts: ParsedOptions, value: str) -> None:
    opts.config.csv_filename = value


@_option("-shadronpreview", arity=2)
def _shadronpreview(opts: ParsedOptions, filename: str, text: str) -> None:
    opts.config.shadron_preview_filename = filename
    opts.config.shadron_preview_text = text


@_option("-dimensions", arity=2)
def _dimensions(opts: ParsedOptions, width: str, height: str) -> None:
    opts.fixed_width, opts.fixed_height = _positive_pair(
        width,
        height,
        "Invalid atlas dimensions. Use -dimensions <width> <height> with two positive integers.",
    )


def _atlas_constraint(constraint: DimensionsConstraint) -> _Handler:
    def handler(opts: ParsedOptions) -> None:
        opts.atlas_size_constraint = constraint
        opts.fixed_width = opts.fixed_height = -1

    return handler


for _name, _constraint in (
    ("-pots", DimensionsConstraint.POWER_OF_TWO_SQUARE),
    ("-potr", DimensionsConstraint.POWER_OF_TWO_RECTANGLE),
    ("-square", DimensionsConstraint.SQUARE),
    ("-square2", DimensionsConstraint.EVEN_SQUARE),
    ("-square4", DimensionsConstraint.MULTIPLE_OF_FOUR_SQUARE),
):
    _option(_name)(_atlas_constraint(_constraint))


@_option("-yorigin", arity=1)
def _yorigin(opts: ParsedOptions, value: str) -> None:
    if value == "bottom":
        opts.config.y_direction = YDirection.BOTTOM_UP
    elif value == "top":
        opts.config.y_direction = YDirection.TOP_DOWN
    else:
        raise OptionsError("Invalid Y-axis origin. Use bottom or top.")


@_option("-size", arity=1)
def _size(opts: ParsedOptions, value: str) -> None:
    opts.config.em_size = _positive_double(
        value, "Invalid em size argument. Use -size <em size> with a positive real number."
    )


@_option("-minsize", arity=1)
def _minsize(opts: ParsedOptions, value: str) -> None:
    opts.min_em_size = _positive_double(
        value,
        "Invalid minimum em size argument. Use -minsize <em size> with a positive real number.",
    )


@_option("-emrange", arity=1)
def _emrange(opts: ParsedOptions, value: str) -> None:
    opts.range_value = _positive_double(
        value,
        "Invalid range argument. Use -emrange <em range> with a positive real number.",
        allow_zero=True,
    )
    opts.range_mode = RangeMode.EM


@_option("-pxrange", arity=1)
def _pxrange(opts: ParsedOptions, value: str) -> None:
    opts.range_value = _positive_double(
        value,
        "Invalid range argument. Use -pxrange <pixel range> with a positive real number.",
        allow_zero=True,
    )
    opts.range_mode = RangeMode.PIXEL


@_option("-pxalign", arity=1)
def _pxalign(opts: ParsedOptions, value: str) -> None:
    try:
        x, y = parse_origin_setting(value)
    except ValueError:
        raise OptionsError(
            "Unknown -pxalign setting. Use one of: off, on, horizontal, vertical."
        ) from None
    opts.config.px_align_origin_x, opts.config.px_align_origin_y = x, y


@_option("-angle", arity=1)
def _angle(opts: ParsedOptions, value: str) -> None:
    try:
        opts.config.angle_threshold = parse_angle(value)
    except ValueError:
        raise OptionsError(
            "Invalid angle threshold. Use -angle <min angle> with a positive real number less "
            "than PI or a value in degrees followed by 'd' below 180d."
        ) from None


@_option("-uniformgrid")
def _uniformgrid(opts: ParsedOptions) -> None:
    opts.packing_style = PackingStyle.GRID


@_option("-uniformcols", arity=1)
def _uniformcols(opts: ParsedOptions, value: str) -> None:
    opts.packing_style = PackingStyle.GRID
    message = "Invalid number of grid columns. Use -uniformcols <N> with a positive integer."
    try:
        cols = parse_unsigned(value)
    except ValueError:
        raise OptionsError(message) from None
    if not cols:
        raise OptionsError(message)
    opts.config.grid.cols = cols


@_option("-uniformcell", arity=2)
def _uniformcell(opts: ParsedOptions, width: str, height: str) -> None:
    opts.packing_style = PackingStyle.GRID
    opts.fixed_cell_width, opts.fixed_cell_height = _positive_pair(
        width,
        height,
        "Invalid cell dimensions. Use -uniformcell <width> <height> with two positive integers.",
    )


_CELL_CONSTRAINTS = {
    "none": DimensionsConstraint.NONE,
    "rect": DimensionsConstraint.NONE,
    "pots": DimensionsConstraint.POWER_OF_TWO_SQUARE,
    "potr": DimensionsConstraint.POWER_OF_TWO_RECTANGLE,
    "square": DimensionsConstraint.SQUARE,
    "square2": DimensionsConstraint.EVEN_SQUARE,
    "square4": DimensionsConstraint.MULTIPLE_OF_FOUR_SQUARE,
}


@_option("-uniformcellconstraint", arity=1)
def _uniformcellconstraint(opts: ParsedOptions, value: str) -> None:
    opts.packing_style = PackingStyle.GRID
    try:
        opts.cell_size_constraint = _CELL_CONSTRAINTS[value]
    except KeyError:
        raise OptionsError(
            "Unknown dimensions constaint. Use -uniformcellconstraint with one of: none, pots, "
            "potr, square, square2, or square4."
        ) from None


@_option("-uniformorigin", arity=1)
def _uniformorigin(opts: ParsedOptions, value: str) -> None:
    opts.packing_style = PackingStyle.GRID
    try:
        x, y = parse_origin_setting(value)
    except ValueError:
        raise OptionsError(
            "Unknown -uniformorigin setting. Use one of: off, on, horizontal, vertical."
        ) from None
    opts.config.grid.fixed_origin_x, opts.config.grid.fixed_origin_y = x, y


@_option("-errorcorrection", arity=1)
def _errorcorrection(opts: ParsedOptions, value: str) -> None:
    if value == "help":
        raise InfoRequested(ERROR_CORRECTION_HELP_TEXT)
    try:
        mode, check = parse_error_correction(value)
    except ValueError as error:
        raise OptionsError(str(error)) from None
    opts.config.error_correction.mode = mode
    opts.config.error_correction.distance_check_mode = check
    opts.explicit_error_correction = True


@_option("-errordeviationratio", arity=1)
def _errordeviationratio(opts: ParsedOptions, value: str) -> None:
    opts.config.error_correction.min_deviation_ratio = _positive_double(
        value,
        "Invalid error deviation ratio. Use -errordeviationratio <ratio> with a positive real number.",
    )


@_option("-errorimproveratio", arity=1)
def _errorimproveratio(opts: ParsedOptions, value: str) -> None:
    opts.config.error_correction.min_improve_ratio = _positive_double(
        value,
        "Invalid error improvement ratio. Use -errorimproveratio <ratio> with a positive real number.",
    )


@_option("-coloringstrategy", "-edgecoloring", arity=1)
def _coloringstrategy(opts: ParsedOptions, value: str) -> None:
    try:
        opts.config.edge_coloring = EdgeColoring(value)
    except ValueError:
        opts.warnings.append("Unknown coloring strategy specified.")


@_option("-miterlimit", arity=1)
def _miterlimit(opts: ParsedOptions, value: str) -> None:
    opts.config.miter_limit = _positive_double(
        value,
        "Invalid miter limit argument. Use -miterlimit <limit> with a positive real number.",
        allow_zero=True,
    )


def _flag(attribute: str, value: bool) -> _Handler:
    def handler(opts: ParsedOptions) -> None:
        setattr(opts.config, attribute, value)

    return handler


for _name, _attribute, _value in (
    ("-nokerning", "kerning", False),
    ("-kerning", "kerning", True),
    ("-nopreprocess", "preprocess_geometry", False),
    ("-preprocess", "preprocess_geometry", True),
    ("-nooverlap", "overlap_support", False),
    ("-overlap", "overlap_support", True),
    ("-noscanline", "scanline_pass", False),
    ("-scanline", "scanline_pass", True),
):
    _option(_name)(_flag(_attribute, _value))


@_option("-seed", arity=1)
def _seed(opts: ParsedOptions, value: str) -> None:
    try:
        opts.config.coloring_seed = _parse_c_unsigned(value, 64)
    except ValueError:
        raise OptionsError(
            "Invalid seed. Use -seed <N> with N being a non-negative integer."
        ) from None


@_option("-threads", arity=1)
def _threads(opts: ParsedOptions, value: str) -> None:
    message = "Invalid thread count. Use -threads <N> with N being a non-negative integer."
    try:
        count = parse_unsigned(value)
    except ValueError:
        raise OptionsError(message) from None
    if count >= 1 << 31:
        raise OptionsError(message)
    opts.config.thread_count = count


@_option("-version")
def _version(opts: ParsedOptions) -> None:
    raise InfoRequested(VERSION_TEXT)


@_option("-help")
def _help(opts: ParsedOptions) -> None:
    raise InfoRequested(HELP_TEXT)


def parse_options(argv: Sequence[str]) -> ParsedOptions:
    """Read command-line arguments (without the program name).

    Raises OptionsError for an invalid setting and InfoRequested when help or
    version text is asked for. Unknown arguments are collected, not raised.
    """
    args = list(argv)
    opts = ParsedOptions(arguments_given=bool(args))
    pos = 0
    while pos < len(args):
        raw = args[pos]
        name = raw[1:] if raw.startswith("--") else raw
        spec = _OPTIONS.get(name)
        if spec is not None and pos + spec[0] < len(args):
            arity, handler = spec
            handler(opts, *args[pos + 1 : pos + 1 + arity])
            pos += 1 + arity
            continue
        opts.unknown_arguments.append(raw)
        opts.warnings.append(f"Unknown setting or insufficient parameters: {raw}")
        pos += 1
    return opts