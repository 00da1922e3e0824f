import pytest

from cfgtree.codepoints import (
    combine_surrogates,
    encode_utf8,
    is_high_surrogate,
    is_low_surrogate,
    parse_hex_escape,
)
from cfgtree.errors import LexicalError


@pytest.mark.parametrize("codepoint", [0x00, 0x41, 0x7F, 0x80, 0x7FF, 0x800, 0x1234, 0xFFFF, 0x10000, 0x10FFFF])
def test_encode_utf8_matches_codec(codepoint: int) -> None:
    assert encode_utf8(codepoint) == chr(codepoint).encode("utf-8")


def test_encode_utf8_lone_surrogate() -> None:
    assert encode_utf8(0xDC00) == b"\xed\xb0\x80"


@pytest.mark.parametrize("codepoint", [-1, 0x110000])
def test_encode_utf8_out_of_range(codepoint: int) -> None:
    with pytest.raises(ValueError):
        encode_utf8(codepoint)


def test_surrogate_ranges() -> None:
    assert is_high_surrogate(0xD800)
    assert is_high_surrogate(0xDBFF)
    assert not is_high_surrogate(0xDC00)
    assert is_low_surrogate(0xDC00)
    assert is_low_surrogate(0xDFFF)
    assert not is_low_surrogate(0xDBFF)


def test_combine_surrogates() -> None:
    assert combine_surrogates(0xD800, 0xDC00) == 0x10000
    assert combine_surrogates(0xD83D, 0xDE00) == 0x1F600
    assert combine_surrogates(0xDBFF, 0xDFFF) == 0x10FFFF


def test_combine_surrogates_rejects_non_pair() -> None:
    with pytest.raises(ValueError):
        combine_surrogates(0xD800, 0xD000)


@pytest.mark.parametrize(("digits", "expected"), [(b"0000", 0), (b"00e9", 0xE9), (b"ABCD", 0xABCD), (b"ffff", 0xFFFF)])
def test_parse_hex_escape(digits: bytes, expected: int) -> None:
    assert parse_hex_escape(digits) == expected


@pytest.mark.parametrize("digits", [b"123", b"12345", b"12G4", b"+123", b" 123"])
def test_parse_hex_escape_rejects(digits: bytes) -> None:
    with pytest.raises(LexicalError):
        parse_hex_escape(digits)
