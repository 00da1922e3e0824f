from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from .codepoints import (
    HEX_DIGITS,
    combine_surrogates,
    encode_utf8,
    is_high_surrogate,
    is_low_surrogate,
    parse_hex_escape,
)
from .errors import LexicalError, UnexpectedDataEnd
from .source import ByteSource, SourceData

logger = logging.getLogger(__name__)

UTF8_BOM = b"\xef\xbb\xbf"

_KEY_BYTES = frozenset(
    b"abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_"
)
_WHITESPACE = frozenset(b" \t\n\r\v\f")


class TokenKind(str, Enum):
    UNKNOWN = "unknown"
    KEY = "key"
    VALUE = "value"
    SECTION_BEGIN = "section_begin"
    SECTION_END = "section_end"
    ENTRY_SEPARATOR = "entry_separator"
    KEY_VALUE_SEPARATOR = "key_value_separator"
    PARSE_END = "parse_end"
    PARSE_ERROR = "parse_error"


@dataclass(frozen=True)
class Token:
    kind: TokenKind = TokenKind.UNKNOWN
    text: str = ""
    offset: int = 0

    def __bool__(self) -> bool:
        return self.kind is not TokenKind.UNKNOWN


def _is_control(byte: int) -> bool:
    return byte < 0x20 or byte == 0x7F


def _is_ignored(byte: int) -> bool:
    return byte in _WHITESPACE or _is_control(byte)


class Lexer:
    """Turns a byte source into tokens, one at a time.

    The current token is computed on first access and kept until
    ``advance()``. Lexical problems never escape: they become a
    ``PARSE_ERROR`` token, after which the lexer keeps returning it.
    """

    SYMBOLS = {
        ord("{"): TokenKind.SECTION_BEGIN,
        ord("}"): TokenKind.SECTION_END,
        ord(":"): TokenKind.KEY_VALUE_SEPARATOR,
        ord(","): TokenKind.ENTRY_SEPARATOR,
    }
    KEY_SEPARATOR = ord(":")
    QUOTE = ord('"')
    ESCAPE = ord("\\")
    SIMPLE_ESCAPES = {ord("n"): b"\n", ord("r"): b"\r", ord("\\"): b"\\"}

    def __init__(self, source: ByteSource | SourceData) -> None:
        self.source = source if isinstance(source, ByteSource) else ByteSource(source)
        self.failure: LexicalError | None = None
        self._token = Token()

    @property
    def offset(self) -> int:
        return self.source.offset

    def current(self) -> Token:
        if not self._token:
            return self.advance()
        return self._token

    def advance(self) -> Token:
        if self._token.kind in (TokenKind.PARSE_END, TokenKind.PARSE_ERROR):
            return self._token
        try:
            self._token = self._read_token()
        except LexicalError as exc:
            offset = exc.offset if exc.offset is not None else self.source.offset
            self.failure = exc
            logger.debug("Lexical error at offset %d: %s", offset, exc.message)
            self._token = Token(
                TokenKind.PARSE_ERROR,
                f"Parse error at position {offset}: {exc.message}",
                offset,
            )
        return self._token

    def is_at_end(self) -> bool:
        return self._token.kind is TokenKind.PARSE_END

    def __iter__(self) -> Iterator[Token]:
        token = self.current()
        while True:
            yield token
            if token.kind in (TokenKind.PARSE_END, TokenKind.PARSE_ERROR):
                return
            token = self.advance()

    def _read_token(self) -> Token:
        if self.source.at_start:
            self._skip_bom()
        self._skip_ignored()

        start = self.source.offset
        byte = self.source.peek()
        if byte is None:
            return Token(TokenKind.PARSE_END, "", start)
        if byte in self.SYMBOLS:
            self.source.read()
            return Token(self.SYMBOLS[byte], chr(byte), start)
        if byte in _KEY_BYTES:
            return self._consume_key(start)
        if byte == self.QUOTE:
            return self._consume_value(start)
        raise LexicalError("Syntax error", start)

    def _skip_bom(self) -> None:
        if self.source.peek() != UTF8_BOM[0]:
            return
        for expected in UTF8_BOM:
            if self.source.peek() != expected:
                raise LexicalError("Wrong BOM")
            self.source.read()

    def _skip_ignored(self) -> None:
        byte = self.source.peek()
        while byte is not None and _is_ignored(byte):
            self.source.read()
            byte = self.source.peek()

    def _consume_key(self, start: int) -> Token:
        literal = bytearray()
        while True:
            byte = self.source.peek()
            if byte is None:
                raise UnexpectedDataEnd(self.source.offset)
            if byte == self.KEY_SEPARATOR or byte in _WHITESPACE:
                break
            if byte not in _KEY_BYTES:
                raise LexicalError("Unexpected symbol found in key")
            literal.append(self.source.read())
        return Token(TokenKind.KEY, literal.decode("ascii"), start)

    def _consume_value(self, start: int) -> Token:
        self.source.read()
        pieces: list[str] = []
        raw = bytearray()
        while True:
            byte = self.source.read()
            if byte == self.QUOTE:
                break
            if byte == self.ESCAPE:
                pieces.append(self._decode_raw(raw, start))
                raw.clear()
                # Escapes may yield a lone low surrogate, raw input may not.
                pieces.append(self._consume_escape().decode("utf-8", "surrogatepass"))
                continue
            if _is_control(byte):
                raise LexicalError("Unexpected character", self.source.offset - 1)
            raw.append(byte)
        pieces.append(self._decode_raw(raw, start))
        return Token(TokenKind.VALUE, "".join(pieces), start)

    @staticmethod
    def _decode_raw(raw: bytearray, start: int) -> str:
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise LexicalError(f"Malformed UTF-8 in value: {exc.reason}", start) from exc

    def _consume_escape(self) -> bytes:
        byte = self.source.read()
        if byte in self.SIMPLE_ESCAPES:
            return self.SIMPLE_ESCAPES[byte]
        if byte != ord("x"):
            raise LexicalError("Unknown escape sequence")
        codepoint = self._consume_hex()
        if is_high_surrogate(codepoint):
            for expected in (self.ESCAPE, ord("x")):
                if self.source.peek() is None:
                    raise UnexpectedDataEnd(self.source.offset)
                if self.source.peek() != expected:
                    raise LexicalError("Expected low surrogate in pair")
                self.source.read()
            low = self._consume_hex()
            if not is_low_surrogate(low):
                raise LexicalError("Wrong low surrogate in pair")
            codepoint = combine_surrogates(codepoint, low)
        return encode_utf8(codepoint)

    def _consume_hex(self) -> int:
        digits = bytearray()
        for _ in range(4):
            byte = self.source.peek()
            if byte is None:
                raise UnexpectedDataEnd(self.source.offset)
            if byte not in HEX_DIGITS:
                raise LexicalError("Unexpected symbol found in escape sequence")
            digits.append(self.source.read())
        return parse_hex_escape(bytes(digits))


def tokenize(data: ByteSource | SourceData) -> list[Token]:
    """Return every token of ``data`` including the terminal one."""
    return list(Lexer(data))
