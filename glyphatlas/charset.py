"""Character sets and the parser for charset specification files."""

from __future__ import annotations

import os
from enum import Enum, auto
from typing import Iterable, Iterator, Optional, Union

from glyphatlas.utf8 import utf8_decode

_WORD_BYTES = frozenset(
    b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_"
)
_DIGITS = frozenset(b"0123456789")
_WHITESPACE = frozenset(b" \n\r\t")
_ESCAPES = {
    ord("0"): 0,
    ord("n"): ord("\n"),
    ord("N"): ord("\n"),
    ord("r"): ord("\r"),
    ord("R"): ord("\r"),
    ord("s"): ord(" "),
    ord("S"): ord(" "),
    ord("t"): ord("\t"),
    ord("T"): ord("\t"),
}


class CharsetParseError(ValueError):
    """A charset specification could not be parsed."""


class _State(Enum):
    CLEAR = auto()
    TIGHT = auto()
    RANGE_BRACKET = auto()
    RANGE_START = auto()
    RANGE_SEPARATOR = auto()
    RANGE_END = auto()


_VALUE_STATES = (_State.CLEAR, _State.RANGE_BRACKET, _State.RANGE_SEPARATOR)


class _Reader:
    """Byte-at-a-time reader returning -1 at the end of input."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.pos = 0

    def getc(self) -> int:
        if self.pos < len(self.data):
            c = self.data[self.pos]
            self.pos += 1
            return c
        return -1

    def read_word(self, buffer: bytearray) -> int:
        while True:
            c = self.getc()
            if c in _WORD_BYTES:
                buffer.append(c)
            else:
                return c

    def read_string(self, buffer: bytearray, terminator: int) -> bool:
        escape = False
        while True:
            c = self.getc()
            if c < 0:
                return False
            if escape:
                buffer.append(_ESCAPES.get(c, c))
                escape = False
            elif c == terminator:
                return True
            elif c == ord("\\"):
                escape = True
            else:
                buffer.append(c)


def parse_int(text: str) -> int:
    """Parse a decimal or ``0x``-prefixed hexadecimal number."""
    if text[:2] in ("0x", "0X"):
        digits = text[2:]
        if any(ch not in "0123456789abcdefABCDEF" for ch in digits):
            raise ValueError(f"invalid hexadecimal number: {text!r}")
        return int(digits, 16) if digits else 0
    if any(ch not in "0123456789" for ch in text):
        raise ValueError(f"invalid decimal number: {text!r}")
    return int(text) if text else 0


def combine_path(base_path: str, rel_path: str) -> str:
    """Resolve ``rel_path`` against the directory of ``base_path``."""
    if rel_path.startswith("/") or (len(rel_path) >= 2 and rel_path[1] == ":"):
        return rel_path
    last_slash = max(base_path.rfind("/"), base_path.rfind("\\"))
    if last_slash < 0:
        return rel_path
    return base_path[: last_slash + 1] + rel_path


class Charset:
    """An ordered set of Unicode code points (or glyph indices)."""

    def __init__(self, codepoints: Iterable[int] = ()) -> None:
        self._codepoints: set[int] = set(codepoints)

    @classmethod
    def ascii(cls) -> "Charset":
        """The printable ASCII characters."""
        return cls(range(0x20, 0x7F))

    def add(self, codepoint: int) -> None:
        self._codepoints.add(codepoint)

    def remove(self, codepoint: int) -> None:
        self._codepoints.discard(codepoint)

    def __len__(self) -> int:
        return len(self._codepoints)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._codepoints))

    def __contains__(self, codepoint: object) -> bool:
        return codepoint in self._codepoints

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Charset):
            return NotImplemented
        return self._codepoints == other._codepoints

    def __repr__(self) -> str:
        return f"Charset({sorted(self._codepoints)!r})"

    def load(
        self, filename: Union[str, os.PathLike], disable_char_literals: bool = False
    ) -> None:
        """Read a charset specification file and add its contents.

        Raises OSError if the file cannot be read and CharsetParseError if it
        is malformed.
        """
        path = os.fspath(filename)
        with open(path, "rb") as f:
            data = f.read()
        self.parse(data, path, disable_char_literals)

    def parse(
        self,
        data: bytes,
        filename: Optional[str] = None,
        disable_char_literals: bool = False,
    ) -> None:
        """Parse a charset specification and add its contents.

        ``filename`` is the base for resolving ``@include`` paths.
        """
        base_path = filename or ""
        reader = _Reader(bytes(data))
        state = _State.CLEAR
        range_start = 0
        start = True

        def fail(reason: str) -> CharsetParseError:
            return CharsetParseError(f"{reason} at offset {reader.pos}")

        c = reader.getc()
        while c >= 0:
            if c in _DIGITS:
                if state not in _VALUE_STATES:
                    raise fail("unexpected number")
                buffer = bytearray([c])
                c = reader.read_word(buffer)
                try:
                    cp = parse_int(buffer.decode("ascii"))
                except ValueError:
                    raise fail("invalid number") from None
                if state is _State.CLEAR:
                    if cp >= 0:
                        self.add(cp)
                    state = _State.TIGHT
                elif state is _State.RANGE_BRACKET:
                    range_start = cp
                    state = _State.RANGE_START
                else:
                    self._codepoints.update(range(range_start, cp + 1))
                    state = _State.RANGE_END
                start = False
                continue
            if c == ord("'"):
                if state not in _VALUE_STATES or disable_char_literals:
                    raise fail("unexpected character literal")
                buffer = bytearray()
                if not reader.read_string(buffer, ord("'")):
                    raise fail("unterminated character literal")
                decoded = utf8_decode(bytes(buffer))
                if len(decoded) != 1:
                    raise fail("character literal must hold one character")
                cp = decoded[0]
                if state is _State.CLEAR:
                    if cp > 0:
                        self.add(cp)
                    state = _State.TIGHT
                elif state is _State.RANGE_BRACKET:
                    range_start = cp
                    state = _State.RANGE_START
                else:
                    self._codepoints.update(range(range_start, cp + 1))
                    state = _State.RANGE_END
            elif c == ord('"'):
                if state is not _State.CLEAR or disable_char_literals:
                    raise fail("unexpected string")
                buffer = bytearray()
                if not reader.read_string(buffer, ord('"')):
                    raise fail("unterminated string")
                self._codepoints.update(utf8_decode(bytes(buffer)))
                state = _State.TIGHT
            elif c == ord("["):
                if state is not _State.CLEAR:
                    raise fail("unexpected range start")
                state = _State.RANGE_BRACKET
            elif c == ord("]"):
                if state is not _State.RANGE_END:
                    raise fail("unexpected range end")
                state = _State.TIGHT
            elif c == ord("@"):
                if state is not _State.CLEAR:
                    raise fail("unexpected annotation")
                buffer = bytearray()
                c = reader.read_word(buffer)
                if buffer != b"include":
                    raise fail("unknown annotation")
                while c in _WHITESPACE:
                    c = reader.getc()
                if c != ord('"'):
                    raise fail("expected include path")
                buffer = bytearray()
                if not reader.read_string(buffer, ord('"')):
                    raise fail("unterminated include path")
                path = combine_path(base_path, buffer.decode("utf-8", "surrogateescape"))
                try:
                    self.load(path)
                except (OSError, CharsetParseError):
                    pass
                state = _State.TIGHT
            elif c in (ord(","), ord(";")) or c in _WHITESPACE:
                if c in (ord(","), ord(";")) and state not in (_State.CLEAR, _State.TIGHT):
                    if state is not _State.RANGE_START:
                        raise fail("unexpected separator")
                    state = _State.RANGE_SEPARATOR
                if state is _State.TIGHT:
                    state = _State.CLEAR
            elif c == 0xEF and start:
                if not (reader.getc() == 0xBB and reader.getc() == 0xBF):
                    raise fail("invalid byte order mark")
            else:
                raise fail(f"unexpected byte 0x{c:02X}")
            c = reader.getc()
            start = False

        if state not in (_State.CLEAR, _State.TIGHT):
            raise fail("unexpected end of input")