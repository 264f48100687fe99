import pytest

from glyphatlas.charset import Charset, CharsetParseError, combine_path, parse_int


def parsed(data, **kwargs):
    cs = Charset()
    cs.parse(data, **kwargs)
    return list(cs)


def test_ascii_contents():
    assert list(Charset.ascii()) == list(range(0x20, 0x7F))


def test_add_remove_contains():
    cs = Charset()
    cs.add(66)
    cs.add(65)
    cs.add(66)
    assert list(cs) == [65, 66]
    assert 65 in cs
    cs.remove(65)
    cs.remove(1000)
    assert 65 not in cs
    assert len(cs) == 1


def test_numeric_range():
    assert parsed(b"[0x41, 0x43]") == list(range(0x41, 0x44))


def test_char_literal_and_escape():
    assert parsed(b"'A'") == [ord("A")]
    assert parsed(b"'\\n'") == [ord("\n")]
    assert parsed(b"'\\s'") == [ord(" ")]


def test_string_literal_utf8():
    assert parsed('"A\u00e9"'.encode("utf-8")) == [ord("A"), 0xE9]


def test_char_range():
    assert parsed(b"['a', 'c']") == list(range(ord("a"), ord("c") + 1))


def test_bom_at_start():
    assert parsed(b"\xef\xbb\xbf65") == [65]


@pytest.mark.parametrize(
    "data",
    [
        b"[65",
        b"'AB'",
        b"65'A'",
        b"x",
        b"65 \xef\xbb\xbf",
        b"]",
        b"\"abc",
        b"@other",
        b"0xZZ",
        b"[65 66]",
    ],
)
def test_malformed(data):
    with pytest.raises(CharsetParseError):
        Charset().parse(data)


def test_disable_char_literals():
    with pytest.raises(CharsetParseError):
        Charset().parse(b"'A'", disable_char_literals=True)
    assert parsed(b"65", disable_char_literals=True) == [65]


def test_load_with_include(tmp_path):
    (tmp_path / "sub.txt").write_bytes(b"70")
    main = tmp_path / "main.txt"
    main.write_bytes(b'65 @include "sub.txt"')
    cs = Charset()
    cs.load(main)
    assert list(cs) == [65, 70]


def test_missing_include_is_ignored(tmp_path):
    main = tmp_path / "main.txt"
    main.write_bytes(b'@include "absent.txt"')
    cs = Charset()
    cs.load(main)
    assert len(cs) == 0


def test_load_missing_file(tmp_path):
    with pytest.raises(OSError):
        Charset().load(tmp_path / "nothing.txt")


def test_parse_int():
    assert parse_int("0x1F") == 0x1F
    assert parse_int("12") == 12
    with pytest.raises(ValueError):
        parse_int("12a")
    with pytest.raises(ValueError):
        parse_int("0xg")


def test_combine_path():
    assert combine_path("dir/main.txt", "sub.txt") == "dir/sub.txt"
    assert combine_path("dir\\main.txt", "sub.txt") == "dir\\sub.txt"
    assert combine_path("dir/main.txt", "/abs.txt") == "/abs.txt"
    assert combine_path("dir/main.txt", "C:x.txt") == "C:x.txt"
    assert combine_path("main.txt", "sub.txt") == "sub.txt"