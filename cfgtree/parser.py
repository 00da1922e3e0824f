from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Union

from .errors import (
    ConfigSyntaxError,
    ParsingError,
    ParsingErrorKind,
    StreamError,
    UnexpectedDataEnd,
)
from .lexer import Lexer, Token, TokenKind
from .source import ByteSource, SourceData

logger = logging.getLogger(__name__)

ParsedTree = dict[str, str]


class State(Enum):
    START = "start"
    SECTION = "section"
    SECTION_BEGIN = "section_begin"
    SECTION_END = "section_end"
    ENTRIES = "entries"
    ENTRY = "entry"
    NEXT_ENTRY = "next_entry"
    ENTRY_SEPARATOR = "entry_separator"
    KEY = "key"
    KEY_VALUE_SEPARATOR = "key_value_separator"
    VALUE = "value"
    TEXT_VALUE = "text_value"


class ProductionKind(Enum):
    SECTION_BEGIN = "section_begin"
    SECTION_END = "section_end"
    ENTRY = "entry"
    KEY = "key"
    VALUE = "value"


@dataclass(frozen=True)
class Production:
    kind: ProductionKind
    text: str = ""


@dataclass(frozen=True)
class Expect:
    states: tuple[State, ...]


@dataclass(frozen=True)
class Produce:
    productions: tuple[Production, ...]


@dataclass(frozen=True)
class Fail:
    state: State | None
    token: Token


Action = Union[Expect, Produce, Fail]


# Non-terminals: lookahead token kind -> states to match next. ``None`` is the
# fallback for any other lookahead; a missing fallback means the token is
# rejected.
EXPANSIONS: dict[State, dict[TokenKind | None, tuple[State, ...]]] = {
    State.START: {None: (State.SECTION,)},
    State.SECTION: {None: (State.SECTION_BEGIN, State.ENTRIES, State.SECTION_END)},
    State.ENTRIES: {TokenKind.KEY: (State.ENTRY, State.NEXT_ENTRY), None: ()},
    State.ENTRY: {None: (State.KEY, State.KEY_VALUE_SEPARATOR, State.VALUE)},
    State.NEXT_ENTRY: {
        TokenKind.ENTRY_SEPARATOR: (State.ENTRY_SEPARATOR, State.ENTRY, State.NEXT_ENTRY),
        None: (),
    },
    State.VALUE: {
        TokenKind.VALUE: (State.TEXT_VALUE,),
        TokenKind.SECTION_BEGIN: (State.SECTION,),
    },
}

# Terminals: the token kind each state consumes and what it emits.
TERMINALS: dict[State, tuple[TokenKind, Callable[[Token], tuple[Production, ...]]]] = {
    State.SECTION_BEGIN: (
        TokenKind.SECTION_BEGIN,
        lambda token: (Production(ProductionKind.SECTION_BEGIN),),
    ),
    State.SECTION_END: (
        TokenKind.SECTION_END,
        lambda token: (Production(ProductionKind.SECTION_END),),
    ),
    State.ENTRY_SEPARATOR: (TokenKind.ENTRY_SEPARATOR, lambda token: ()),
    State.KEY: (
        TokenKind.KEY,
        lambda token: (
            Production(ProductionKind.ENTRY),
            Production(ProductionKind.KEY, token.text),
        ),
    ),
    State.KEY_VALUE_SEPARATOR: (TokenKind.KEY_VALUE_SEPARATOR, lambda token: ()),
    State.TEXT_VALUE: (
        TokenKind.VALUE,
        lambda token: (Production(ProductionKind.VALUE, token.text),),
    ),
}


def transition(state: State, lexer: Lexer) -> Action:
    """Decide what ``state`` does with the lexer's current token.

    Terminal states consume the token when it matches and produce their
    events; non-terminal states only look at it to pick an expansion.
    """
    token = lexer.current()
    if token.kind is TokenKind.PARSE_ERROR:
        return Fail(state, token)

    if state in TERMINALS:
        expected, produce = TERMINALS[state]
        if token.kind is not expected:
            return Fail(state, token)
        lexer.advance()
        return Produce(produce(token))

    choices = EXPANSIONS[state]
    states = choices.get(token.kind, choices.get(None))
    if states is None:
        return Fail(state, token)
    return Expect(states)


@dataclass(frozen=True)
class ParsingResult:
    success: bool
    tree: ParsedTree = field(default_factory=dict)
    error: ParsingError | None = None

    def __bool__(self) -> bool:
        return self.success


class Parser:
    """Predictive LL(1) parser driven by an explicit stack of states."""

    category_separator = ":"

    def __init__(self, source: Lexer | ByteSource | SourceData) -> None:
        self.lexer = source if isinstance(source, Lexer) else Lexer(source)

    def parse(self) -> ParsingResult:
        states = [State.START]
        productions: list[Production] = []
        while states:
            action = transition(states.pop(), self.lexer)
            if isinstance(action, Fail):
                return self._fail(action)
            if isinstance(action, Expect):
                states.extend(reversed(action.states))
            else:
                productions.extend(action.productions)

        trailing = self.lexer.current()
        if trailing.kind is not TokenKind.PARSE_END:
            return self._fail(Fail(None, trailing))

        tree = build_tree(productions, self.category_separator)
        logger.debug("Parsed %d tree entries", len(tree))
        return ParsingResult(True, tree)

    def _fail(self, failure: Fail) -> ParsingResult:
        error = self._make_error(failure)
        state = failure.state.value if failure.state else "end"
        logger.debug(
            "Parse failed in state %s on %s at offset %d",
            state,
            failure.token.kind.value,
            error.offset,
        )
        return ParsingResult(False, error=error)

    def _make_error(self, failure: Fail) -> ParsingError:
        token = failure.token
        kind = ParsingErrorKind.UNEXPECTED_TOKEN_RECEIVED
        if token.kind is TokenKind.PARSE_ERROR:
            lexical = self.lexer.failure
            message = lexical.message if lexical else token.text
            if isinstance(lexical, (UnexpectedDataEnd, StreamError)):
                kind = ParsingErrorKind.UNEXPECTED_DATA_END
        elif token.kind is TokenKind.PARSE_END:
            message = "Unexpected end of data"
            kind = ParsingErrorKind.UNEXPECTED_DATA_END
        elif failure.state is None:
            message = f"Unexpected {token.text!r} after the root section"
        else:
            message = f"Unexpected {token.text!r} while expecting {failure.state.value}"
        return ParsingError(kind, token.offset, message)


def build_tree(productions: Iterable[Production], separator: str = ":") -> ParsedTree:
    """Fold production events into a flat tree keyed by category path.

    Every nested section gets an entry of its own with an empty value. The
    root section has no name and adds nothing to the path. Repeated paths
    keep the last value written.
    """
    tree: ParsedTree = {}
    path: list[str] = []
    key: str | None = None
    for production in productions:
        if production.kind is ProductionKind.SECTION_BEGIN:
            if key is not None:
                path.append(key)
                tree[separator.join(path)] = ""
                key = None
        elif production.kind is ProductionKind.SECTION_END:
            if path:
                path.pop()
        elif production.kind is ProductionKind.KEY:
            key = production.text
        elif production.kind is ProductionKind.VALUE:
            if key is not None:
                tree[separator.join([*path, key])] = production.text
    return dict(sorted(tree.items()))


def parse(data: Lexer | ByteSource | SourceData) -> ParsingResult:
    return Parser(data).parse()


def parse_config(data: Lexer | ByteSource | SourceData) -> ParsedTree:
    result = parse(data)
    if result.error is not None:
        raise ConfigSyntaxError(result.error)
    return result.tree
