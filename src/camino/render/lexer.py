"""Lexer for Camino template text.

The lexer runs in one of two modes:

- ``DEFAULT``: raw passthrough text is accumulated up to the next ``<%=``
  and emitted as a single ``TEXT`` token. ``<%=`` itself emits ``EL_START``
  and switches to ``EL`` mode.
- ``EL``: expression-language tokens (identifiers, keywords, numbers,
  single-quoted strings, punctuation). Whitespace is skipped. ``%>`` emits
  ``EL_END`` and switches back to ``DEFAULT`` mode.

Tokens are produced lazily; the parser pulls one token at a time.

Example:
    >>> [t.type.name for t in Lexer("Hi <%= name %>!")]
    ['TEXT', 'EL_START', 'IDENTIFIER', 'EL_END', 'TEXT', 'EOF']
"""

from __future__ import annotations

import string
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum, auto

from camino.constants import EL_END, EL_START
from camino.render.errors import LexicalError, Location

__all__ = ["LexerMode", "TokenType", "Token", "Lexer", "tokenize"]


class LexerMode(Enum):
    DEFAULT = auto()
    EL = auto()


class TokenType(Enum):
    """Kind of lexical token."""

    TEXT = auto()
    EL_START = auto()
    EL_END = auto()
    IDENTIFIER = auto()
    IF = auto()
    FN = auto()
    INTEGER = auto()
    FLOAT = auto()
    STRING = auto()
    LPAREN = auto()
    RPAREN = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    LBRACE = auto()
    RBRACE = auto()
    DOT = auto()
    COMMA = auto()
    MINUS = auto()
    COLON = auto()
    ARROW = auto()
    EOF = auto()


@dataclass(frozen=True, slots=True)
class Token:
    """A lexical token.

    Attributes:
        type: Token kind.
        text: Source text of the token. For ``STRING`` tokens this is the
            decoded string value, with ``''`` escapes already collapsed.
        location: Position of the token's first character.
    """

    type: TokenType
    text: str
    location: Location


_KEYWORDS: dict[str, TokenType] = {
    "if": TokenType.IF,
    "fn": TokenType.FN,
}

_PUNCTUATION: dict[str, TokenType] = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    ".": TokenType.DOT,
    ",": TokenType.COMMA,
    ":": TokenType.COLON,
}

_IDENTIFIER_START = frozenset(string.ascii_letters + "_$")
_IDENTIFIER_PART = _IDENTIFIER_START | frozenset(string.digits)
_DIGITS = frozenset(string.digits)
_WHITESPACE = frozenset(" \t\r\n")


class Lexer:
    """Converts template text into a stream of tokens.

    A lexer instance holds the scanning state for one source text and is
    consumed by iterating over it once.
    """

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0
        self._line = 1
        self._column = 1
        self._mode = LexerMode.DEFAULT

    def __iter__(self) -> Iterator[Token]:
        return self.tokens()

    @property
    def mode(self) -> LexerMode:
        return self._mode

    def tokens(self) -> Iterator[Token]:
        """Yield tokens until the end of input, finishing with ``EOF``.

        Raises:
            LexicalError: On an unrecognized character or unterminated string.
        """
        while self._pos < len(self._text):
            if self._mode is LexerMode.DEFAULT:
                yield from self._lex_text()
            else:
                token = self._lex_expression_token()
                if token is not None:
                    yield token
        yield Token(TokenType.EOF, "", self._location())

    # ------------------------------------------------------------------
    # Scanning helpers
    # ------------------------------------------------------------------

    def _location(self) -> Location:
        return Location(self._line, self._column)

    def _peek(self, offset: int = 0) -> str:
        index = self._pos + offset
        if index < len(self._text):
            return self._text[index]
        return ""

    def _advance(self, count: int = 1) -> str:
        consumed = self._text[self._pos : self._pos + count]
        for char in consumed:
            if char == "\n":
                self._line += 1
                self._column = 1
            else:
                self._column += 1
        self._pos += len(consumed)
        return consumed

    # ------------------------------------------------------------------
    # DEFAULT mode
    # ------------------------------------------------------------------

    def _lex_text(self) -> Iterator[Token]:
        start = self._location()
        end = self._text.find(EL_START, self._pos)
        if end == -1:
            end = len(self._text)
        if end > self._pos:
            yield Token(TokenType.TEXT, self._advance(end - self._pos), start)
        if self._pos < len(self._text):
            location = self._location()
            yield Token(TokenType.EL_START, self._advance(len(EL_START)), location)
            self._mode = LexerMode.EL

    # ------------------------------------------------------------------
    # EL mode
    # ------------------------------------------------------------------

    def _lex_expression_token(self) -> Token | None:
        while self._peek() and self._peek() in _WHITESPACE:
            self._advance()
        char = self._peek()
        if not char:
            return None

        location = self._location()

        if self._text.startswith(EL_END, self._pos):
            self._mode = LexerMode.DEFAULT
            return Token(TokenType.EL_END, self._advance(len(EL_END)), location)

        if char in _IDENTIFIER_START:
            start = self._pos
            while self._peek() and self._peek() in _IDENTIFIER_PART:
                self._advance()
            word = self._text[start : self._pos]
            return Token(_KEYWORDS.get(word, TokenType.IDENTIFIER), word, location)

        if char in _DIGITS:
            return self._lex_number(location)

        if char == "'":
            return self._lex_string(location)

        if char == "-":
            if self._peek(1) == ">":
                return Token(TokenType.ARROW, self._advance(2), location)
            return Token(TokenType.MINUS, self._advance(), location)

        token_type = _PUNCTUATION.get(char)
        if token_type is not None:
            return Token(token_type, self._advance(), location)

        raise LexicalError(f"Unrecognized character {char!r}", location)

    def _consume_digits(self) -> None:
        while self._peek() and self._peek() in _DIGITS:
            self._advance()

    def _lex_number(self, location: Location) -> Token:
        start = self._pos
        token_type = TokenType.INTEGER
        self._consume_digits()

        if self._peek() == ".":
            token_type = TokenType.FLOAT
            self._advance()
            self._consume_digits()

        if self._peek() in ("e", "E"):
            sign = 1 if self._peek(1) in ("+", "-") else 0
            following = self._peek(1 + sign)
            if following and following in _DIGITS:
                token_type = TokenType.FLOAT
                self._advance(1 + sign)
                self._consume_digits()

        return Token(token_type, self._text[start : self._pos], location)

    def _lex_string(self, location: Location) -> Token:
        self._advance()  # opening quote
        chunks: list[str] = []
        while True:
            end = self._text.find("'", self._pos)
            if end == -1:
                raise LexicalError("Unterminated string literal", location)
            chunks.append(self._advance(end - self._pos))
            self._advance()  # quote
            if self._peek() == "'":
                chunks.append(self._advance())
                continue
            return Token(TokenType.STRING, "".join(chunks), location)


def tokenize(text: str) -> list[Token]:
    """Tokenize template text eagerly.

    Args:
        text: Template source text.

    Returns:
        All tokens, ending with an ``EOF`` token.

    Raises:
        LexicalError: For malformed input.
    """
    return list(Lexer(text))
