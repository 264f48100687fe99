import pytest

from glyphatlas.utf8 import utf8_decode


@pytest.mark.parametrize("text", ["", "hello", "héllo", "€uro", "a😀b", "日本語"])
def test_round_trip_bytes(text):
    assert utf8_decode(text.encode("utf-8")) == [ord(c) for c in text]


def test_accepts_str():
    text = "Ω and ω"
    assert utf8_decode(text) == [ord(c) for c in text]


def test_leading_bom_dropped():
    assert utf8_decode(b"\xef\xbb\xbfA") == [ord("A")]


def test_bom_later_kept():
    text = "A\ufeff"
    assert utf8_decode(text.encode("utf-8")) == [ord(c) for c in text]


def test_stops_at_nul():
    assert utf8_decode(b"ab\x00cd") == [ord("a"), ord("b")]


def test_lone_continuation_skipped():
    assert utf8_decode(b"\x80A") == [ord("A")]


def test_overlong_lead_skipped():
    assert utf8_decode(b"\xf8A") == [ord("A")]