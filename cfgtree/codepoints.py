"""Numeric helpers for ``\\x`` escapes: hex decoding, UTF-16 surrogate
pairing and UTF-8 encoding. Nothing here knows about the lexer."""

from __future__ import annotations

from .errors import LexicalError

HIGH_SURROGATE_MIN = 0xD800
HIGH_SURROGATE_MAX = 0xDBFF
LOW_SURROGATE_MIN = 0xDC00
LOW_SURROGATE_MAX = 0xDFFF
MAX_CODEPOINT = 0x10FFFF

HEX_DIGITS = b"0123456789abcdefABCDEF"


def parse_hex_escape(digits: bytes) -> int:
    if len(digits) != 4 or any(digit not in HEX_DIGITS for digit in digits):
        raise LexicalError("Unexpected symbol found in escape sequence")
    return int(digits, 16)


def is_high_surrogate(codepoint: int) -> bool:
    return HIGH_SURROGATE_MIN <= codepoint <= HIGH_SURROGATE_MAX


def is_low_surrogate(codepoint: int) -> bool:
    return LOW_SURROGATE_MIN <= codepoint <= LOW_SURROGATE_MAX


def combine_surrogates(high: int, low: int) -> int:
    if not is_high_surrogate(high) or not is_low_surrogate(low):
        raise ValueError(f"Not a surrogate pair: {high:#06x} {low:#06x}")
    return 0x10000 + ((high - HIGH_SURROGATE_MIN) << 10) + (low - LOW_SURROGATE_MIN)


def encode_utf8(codepoint: int) -> bytes:
    """Encode a scalar value as 1-4 UTF-8 code units.

    Surrogates are encoded like any other 3-byte value, which is what a lone
    low surrogate escape turns into.
    """
    if codepoint < 0 or codepoint > MAX_CODEPOINT:
        raise ValueError(f"Code point out of range: {codepoint:#x}")
    if codepoint < 0x80:
        return bytes((codepoint,))
    if codepoint <= 0x7FF:
        return bytes((0xC0 | (codepoint >> 6), 0x80 | (codepoint & 0x3F)))
    if codepoint <= 0xFFFF:
        return bytes(
            (
                0xE0 | (codepoint >> 12),
                0x80 | ((codepoint >> 6) & 0x3F),
                0x80 | (codepoint & 0x3F),
            )
        )
    return bytes(
        (
            0xF0 | (codepoint >> 18),
            0x80 | ((codepoint >> 12) & 0x3F),
            0x80 | ((codepoint >> 6) & 0x3F),
            0x80 | (codepoint & 0x3F),
        )
    )
