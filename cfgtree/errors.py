from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ConfigError(RuntimeError):
    """Base class for everything raised by cfgtree."""


class LexicalError(ConfigError):
    def __init__(self, message: str, offset: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.offset = offset


class UnexpectedDataEnd(LexicalError):
    def __init__(self, offset: int | None = None) -> None:
        super().__init__("Unexpected end of data", offset)


class StreamError(LexicalError):
    def __init__(self, offset: int | None = None) -> None:
        super().__init__("Input stream error", offset)


class ParsingErrorKind(str, Enum):
    UNEXPECTED_TOKEN_RECEIVED = "unexpected_token_received"
    UNEXPECTED_DATA_END = "unexpected_data_end"


@dataclass(frozen=True)
class ParsingError:
    kind: ParsingErrorKind
    offset: int
    message: str = ""


class ConfigSyntaxError(ConfigError):
    def __init__(self, error: ParsingError) -> None:
        message = error.message or error.kind.value.replace("_", " ")
        super().__init__(f"{message} at offset {error.offset}")
        self.error = error
