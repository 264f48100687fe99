"""Glyph atlas layout: charsets, UTF-8 decoding, glyph boxes, rectangle and grid packing, options."""

__version__ = "0.1.0"