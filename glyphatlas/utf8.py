"""Lenient UTF-8 decoding into code points."""

from __future__ import annotations

from typing import Union


def utf8_decode(data: Union[bytes, str]) -> list[int]:
    """Decode UTF-8 into a list of code points.

    Decoding stops at the first NUL byte, malformed bytes are skipped and a
    leading byte order mark is dropped.
    """
    if isinstance(data, str):
        data = data.encode("utf-8", "surrogatepass")
    codepoints: list[int] = []
    start = True
    remaining = 0
    cp = 0
    for byte in data:
        if byte == 0:
            break
        if remaining > 0:
            remaining -= 1
            if byte & 0xC0 == 0x80:
                cp |= (byte & 0x3F) << (6 * remaining)
        elif not byte & 0x80:
            cp = byte
            remaining = 0
        elif byte & 0x40:
            block = 0
            while block < 4 and (byte << block) & 0x40:
                block += 1
            if block >= 4:
                continue
            cp = (byte & (0x3F >> block)) << (6 * block)
            remaining = block
        else:
            continue
        if not remaining:
            if not (start and cp == 0xFEFF):
                codepoints.append(cp)
            start = False
    return codepoints