# glyphatlas

`glyphatlas` handles the layout side of building texture atlases for
distance-field font rendering (hard mask, soft mask, SDF, PSDF, MSDF and
MTSDF atlases): which characters go in, how big each glyph's box is, and
where the boxes go in the atlas. It has no dependencies outside the standard
library.

## What is in the package

| Module | Contents |
| --- | --- |
| `glyphatlas.types` | Enumerations: `ImageType`, `ImageFormat`, `YDirection`, `DimensionsConstraint`, `GlyphIdentifierType`, `PackingStyle` |
| `glyphatlas.utf8` | `utf8_decode` – lenient UTF-8 to code points |
| `glyphatlas.charset` | `Charset`, `CharsetParseError`, `parse_int`, `combine_path` |
| `glyphatlas.rectangle_packer` | `Rectangle`, `OrientedRectangle`, `RectanglePacker`, `rate_fit` |
| `glyphatlas.size_selectors` | `SquareSizeSelector`, `SquarePowerOfTwoSizeSelector`, `PowerOfTwoSizeSelector` |
| `glyphatlas.glyph_geometry` | `Bounds`, `GlyphBox`, `GlyphGeometry` |
| `glyphatlas.grid_packer` | `GridAtlasPacker`, `GridPackingError`, `floor_pot`, `ceil_pot`, `lower_to_constraint`, `raise_to_constraint` |
| `glyphatlas.workload` | `Workload` – run numbered chunks sequentially or on threads |
| `glyphatlas.options` | `parse_options` and the atlas generator's command-line settings |

## Character sets

A charset file lists code points separated by commas, semicolons or
whitespace:

```
'A', 'B', 0x20
['a', 'z']
[0x30, 0x39]
"Hello, world!"
@include "extra.txt"
```

- Numbers are decimal or hexadecimal (`0x...`).
- `'c'` is one character, `"text"` adds every character of the string.
- `[start, end]` adds an inclusive range; either end may be a number or a
  one-character literal.
- `@include "file"` reads another file, resolved relative to the including
  one. An include that cannot be read or parsed is skipped.
- Escapes inside quotes: `\n`, `\r`, `\t`, `\s` (space), `\0`; a backslash
  before any other character stands for that character.
- A UTF-8 byte order mark at the start is accepted.

With `disable_char_literals=True` (glyphsets), quoted literals are rejected
and only numbers are accepted.

```python
from glyphatlas.charset import Charset

charset = Charset()
charset.load("charset.txt")           # or charset.parse(b"[0x41, 0x5A]")
print(len(charset), 0x41 in charset)
print(list(charset))                  # iteration is in ascending order

ascii_set = Charset.ascii()           # U+0020 through U+007E
```

`load` raises `OSError` if the file cannot be read; malformed input raises
`CharsetParseError` (a `ValueError`).

## Decoding UTF-8

```python
from glyphatlas.utf8 import utf8_decode

utf8_decode("Añ€".encode("utf-8"))   # [0x41, 0xF1, 0x20AC]
```

Decoding stops at the first NUL byte, malformed bytes are skipped and a
leading byte order mark is dropped. A `str` argument is encoded first.

## Glyph boxes

A `GlyphGeometry` holds a glyph's index, code point, shape bounds (in shape
units), advance and geometry scale. Shapes themselves are not part of the
package: instead of an outline the glyph carries its `bounds`, a `whitespace`
flag, and optionally a `miter_bounds` callable that widens padded bounds to
enclose sharp corners.

```python
from glyphatlas.glyph_geometry import Bounds, GlyphGeometry

glyph = GlyphGeometry(index=36, codepoint=0x41, bounds=Bounds(0.0, 0.0, 0.6, 0.7),
                      advance=0.65)
glyph.wrap_box(scale=32.0, range_=2 / 32.0, px_align_x=False, px_align_y=True)
glyph.place_box(0, 0)
glyph.quad_plane_bounds()   # Bounds in em units
glyph.quad_atlas_bounds()   # Bounds in atlas pixels
glyph.to_glyph_box()        # GlyphBox summary
```

`frame_box` instead places the glyph in a box of given size, centred or at a
fixed origin.

## Packing

`RectanglePacker` places rectangles into the free space of an area, setting
each rectangle's `x` and `y`, and returns how many did not fit.
`pack_oriented` may also rotate `OrientedRectangle`s.

```python
from glyphatlas.rectangle_packer import Rectangle, RectanglePacker

rects = [Rectangle(w=10, h=12), Rectangle(w=8, h=8), Rectangle(w=20, h=5)]
left_over = RectanglePacker(32, 32).pack(rects)
```

The size selectors search for atlas dimensions given a minimum area: call
`dimensions()` for the current candidate, `increase()` when it is too small,
`decrease()` when it fits, and stop when `active()` is false.

`GridAtlasPacker` lays glyphs out in equally sized cells. Its settings are
plain attributes (`columns`, `rows`, `width`, `height`, `cell_width`,
`cell_height`, `spacing`, `dimensions_constraint`,
`cell_dimensions_constraint`, `h_fixed`, `v_fixed`, `scale`, `min_scale`,
`unit_range`, `px_range`, `miter_limit`, `px_align_origin_x`,
`px_align_origin_y`); `-1` means the packer chooses. After `pack` they hold
the final layout.

```python
from glyphatlas.glyph_geometry import Bounds, GlyphGeometry
from glyphatlas.grid_packer import GridAtlasPacker

glyphs = [GlyphGeometry(index=i, codepoint=0x41 + i, bounds=Bounds(0, 0, 0.5, 0.7),
                        advance=0.6) for i in range(10)]
packer = GridAtlasPacker()
packer.min_scale = 32.0
packer.px_range = 2.0
not_fitted = packer.pack(glyphs)
print(packer.width, packer.height, packer.columns, packer.rows, packer.scale)
print(packer.pixel_range(), packer.cutoff)
```

`pack` raises `GridPackingError` when no layout is possible, for example when
cells are too small for the distance range.

## Parallel work

```python
from glyphatlas.workload import Workload

results = [0] * 100
def work(i, thread_no):
    results[i] = i * i
    return True

Workload(work, len(results)).finish(4)   # True unless a chunk failed
```

## Command-line options

`glyphatlas.options.parse_options` reads the atlas generator's options
(`-font`, `-charset`, `-glyphset`, `-type`, `-format`, `-dimensions`,
`-uniformgrid`, `-pxrange`, `-errorcorrection`, … ; `--name` is accepted as
well as `-name`) into a `ParsedOptions` holding a `Configuration` and the
font inputs.

```python
from glyphatlas.options import InfoRequested, OptionsError, parse_options

opts = parse_options(["-font", "font.ttf", "-type", "sdf", "-pxrange", "4"])
opts.config.image_type, opts.range_value, opts.unknown_arguments
```

An invalid value raises `OptionsError`; `-help`, `-version` and
`-errorcorrection help` raise `InfoRequested` carrying the text in `.text`.
Unknown arguments are collected in `unknown_arguments` and `warnings`.

## What the package does not do

- It does not read font files: glyph bounds, advances and metrics have to be
  supplied by the caller.
- It does not compute distance fields, rasterize glyphs or write atlas
  images.
- It does not write layout files (JSON, CSV or preview scripts); the options
  naming them are parsed but nothing acts on them.
- It has no command to run: `parse_options` reads the settings, but there is
  no program that carries out a whole atlas generation.