from .config_model import ConfigTree
from .errors import (
    ConfigError,
    ConfigSyntaxError,
    LexicalError,
    ParsingError,
    ParsingErrorKind,
    StreamError,
    UnexpectedDataEnd,
)
from .lexer import Lexer, Token, TokenKind, tokenize
from .parser import ParsedTree, Parser, ParsingResult, parse, parse_config
from .source import ByteSource

__version__ = "0.1.0"
