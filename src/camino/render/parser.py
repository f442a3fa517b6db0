"""Recursive-descent parser for Camino templates.

Grammar (one token of lookahead, no backtracking)::

    block             := (TEXT | EL_START expression EL_END)*
    expression        := functionLiteral | primary postfix*
    primary           := '(' expression ')' | ternaryIf | identifier
                       | stringLiteral | numberLiteral
                       | listLiteral | dictionaryLiteral
    postfix           := '.' identifier | '[' expression ']'
                       | '(' expressionList ')'
    ternaryIf         := 'if' '(' expression ',' expression ',' expression ')'
    listLiteral       := '[' expressionList ']'
    dictionaryLiteral := '{' (expression ':' expression
                              (',' expression ':' expression)*)? '}'
    functionLiteral   := 'fn' '(' (identifier (',' identifier)*)? ')'
                         '->' expression
    expressionList    := (expression (',' expression)*)?

Each rule maps to one ``_parse_*`` method. The first error aborts the parse
with a ``ParseError``; there is no recovery and no partial tree.

A ``-`` immediately followed by a numeric literal is folded into the literal.
Numbers containing ``.`` or an exponent are ``DoubleLiteral``; all others are
``LongLiteral`` and must fit in a signed 64-bit integer.
"""

from __future__ import annotations

import math
from collections.abc import Iterator

from camino.constants import MAX_INTEGER, MIN_INTEGER
from camino.logging import get_logger
from camino.render.errors import Location, ParseError
from camino.render.lexer import Lexer, Token, TokenType
from camino.render.nodes import (
    Block,
    CollectionAccess,
    DictionaryLiteral,
    DoubleLiteral,
    Expression,
    FunctionCall,
    FunctionLiteral,
    Identifier,
    ListLiteral,
    LongLiteral,
    MemberAccess,
    StringLiteral,
    TernaryIf,
)

__all__ = ["Parser", "parse"]

logger = get_logger(__name__)

_NUMBER_TOKENS = (TokenType.INTEGER, TokenType.FLOAT)


def _describe(token: Token) -> str:
    if token.type is TokenType.EOF:
        return "end of input"
    if token.type is TokenType.TEXT:
        return "template text"
    if token.type is TokenType.STRING:
        return "string literal"
    return f"'{token.text}'"


class Parser:
    """Builds a ``Block`` from template text.

    A parser owns a fresh lexer and is used for exactly one parse; no state
    is shared between parser instances.

    Example:
        ```python
        block = Parser("Hello <%= name %>!").parse()
        ```
    """

    def __init__(self, text: str) -> None:
        self._tokens: Iterator[Token] = Lexer(text).tokens()
        self._current = next(self._tokens)

    # ------------------------------------------------------------------
    # Token handling
    # ------------------------------------------------------------------

    def _advance(self) -> Token:
        token = self._current
        if token.type is not TokenType.EOF:
            self._current = next(self._tokens)
        return token

    def _check(self, token_type: TokenType) -> bool:
        return self._current.type is token_type

    def _error(self, expected: str) -> ParseError:
        return ParseError(
            f"Expected {expected} but found {_describe(self._current)}",
            self._current.location,
            expected=expected,
        )

    def _expect(self, token_type: TokenType, expected: str) -> Token:
        if not self._check(token_type):
            raise self._error(expected)
        return self._advance()

    # ------------------------------------------------------------------
    # Grammar rules
    # ------------------------------------------------------------------

    def parse(self) -> Block:
        """Parse the whole template.

        Returns:
            The root ``Block`` of the template.

        Raises:
            ParseError: If the text does not match the grammar.
        """
        try:
            children = self._parse_block()
        except RecursionError:
            raise ParseError(
                "Expression nesting too deep", self._current.location
            ) from None
        return Block(location=Location(1, 1), children=children)

    def _parse_block(self) -> tuple[Expression, ...]:
        children: list[Expression] = []
        while not self._check(TokenType.EOF):
            if self._check(TokenType.TEXT):
                token = self._advance()
                children.append(
                    StringLiteral(location=token.location, value=token.text)
                )
            else:
                self._expect(TokenType.EL_START, "'<%='")
                children.append(self._parse_expression())
                self._expect(TokenType.EL_END, "'%>'")
        return tuple(children)

    def _parse_expression(self) -> Expression:
        if self._check(TokenType.FN):
            return self._parse_function_literal()

        expression = self._parse_primary()
        while True:
            if self._check(TokenType.DOT):
                dot = self._advance()
                member = self._expect(TokenType.IDENTIFIER, "member name")
                expression = MemberAccess(
                    location=dot.location, base=expression, member=member.text
                )
            elif self._check(TokenType.LBRACKET):
                bracket = self._advance()
                index = self._parse_expression()
                self._expect(TokenType.RBRACKET, "']'")
                expression = CollectionAccess(
                    location=bracket.location, base=expression, index=index
                )
            elif self._check(TokenType.LPAREN):
                paren = self._advance()
                arguments = self._parse_expression_list(TokenType.RPAREN)
                self._expect(TokenType.RPAREN, "')'")
                expression = FunctionCall(
                    location=paren.location, function=expression, arguments=arguments
                )
            else:
                return expression

    def _parse_primary(self) -> Expression:
        token = self._current
        match token.type:
            case TokenType.LPAREN:
                self._advance()
                expression = self._parse_expression()
                self._expect(TokenType.RPAREN, "')'")
                return expression
            case TokenType.IF:
                return self._parse_ternary_if()
            case TokenType.IDENTIFIER:
                self._advance()
                return Identifier(location=token.location, name=token.text)
            case TokenType.STRING:
                self._advance()
                return StringLiteral(location=token.location, value=token.text)
            case TokenType.INTEGER | TokenType.FLOAT:
                self._advance()
                return self._number(token, token.location, negative=False)
            case TokenType.MINUS:
                return self._parse_negative_number()
            case TokenType.LBRACKET:
                return self._parse_list_literal()
            case TokenType.LBRACE:
                return self._parse_dictionary_literal()
            case _:
                raise self._error("expression")

    def _parse_negative_number(self) -> Expression:
        minus = self._advance()
        number = self._current
        adjacent = Location(minus.location.line, minus.location.column + 1)
        if number.type not in _NUMBER_TOKENS or number.location != adjacent:
            raise self._error("number literal immediately after '-'")
        self._advance()
        return self._number(number, minus.location, negative=True)

    def _number(
        self, token: Token, location: Location, *, negative: bool
    ) -> LongLiteral | DoubleLiteral:
        text = f"-{token.text}" if negative else token.text
        if token.type is TokenType.FLOAT:
            value = float(text)
            if math.isinf(value):
                raise ParseError(f"Float literal {text} out of range", location)
            return DoubleLiteral(location=location, value=value)
        integer = int(text)
        if not MIN_INTEGER <= integer <= MAX_INTEGER:
            raise ParseError(
                f"Integer literal {text} out of 64-bit range", location
            )
        return LongLiteral(location=location, value=integer)

    def _parse_ternary_if(self) -> TernaryIf:
        keyword = self._advance()
        self._expect(TokenType.LPAREN, "'(' after 'if'")
        condition = self._parse_expression()
        self._expect(TokenType.COMMA, "','")
        then_value = self._parse_expression()
        self._expect(TokenType.COMMA, "','")
        else_value = self._parse_expression()
        self._expect(TokenType.RPAREN, "')'")
        return TernaryIf(
            location=keyword.location,
            condition=condition,
            then_value=then_value,
            else_value=else_value,
        )

    def _parse_list_literal(self) -> ListLiteral:
        bracket = self._advance()
        elements = self._parse_expression_list(TokenType.RBRACKET)
        self._expect(TokenType.RBRACKET, "']'")
        return ListLiteral(location=bracket.location, elements=elements)

    def _parse_dictionary_literal(self) -> DictionaryLiteral:
        brace = self._advance()
        entries: list[tuple[Expression, Expression]] = []
        if not self._check(TokenType.RBRACE):
            while True:
                key = self._parse_expression()
                self._expect(TokenType.COLON, "':'")
                entries.append((key, self._parse_expression()))
                if not self._check(TokenType.COMMA):
                    break
                self._advance()
        self._expect(TokenType.RBRACE, "'}'")
        return DictionaryLiteral(location=brace.location, entries=tuple(entries))

    def _parse_function_literal(self) -> FunctionLiteral:
        keyword = self._advance()
        self._expect(TokenType.LPAREN, "'(' after 'fn'")
        parameters: list[str] = []
        if not self._check(TokenType.RPAREN):
            while True:
                name = self._expect(TokenType.IDENTIFIER, "parameter name")
                if name.text in parameters:
                    raise ParseError(
                        f"Duplicate parameter '{name.text}'", name.location
                    )
                parameters.append(name.text)
                if not self._check(TokenType.COMMA):
                    break
                self._advance()
        self._expect(TokenType.RPAREN, "')'")
        self._expect(TokenType.ARROW, "'->'")
        body = self._parse_expression()
        return FunctionLiteral(
            location=keyword.location,
            parameters=tuple(parameters),
            body=Block(location=body.location, children=(body,)),
        )

    def _parse_expression_list(self, closing: TokenType) -> tuple[Expression, ...]:
        if self._check(closing):
            return ()
        expressions = [self._parse_expression()]
        while self._check(TokenType.COMMA):
            self._advance()
            expressions.append(self._parse_expression())
        return tuple(expressions)


def parse(text: str) -> Block:
    """Parse template text into an immutable syntax tree.

    The returned ``Block`` may be rendered any number of times, from any
    number of threads, against different environments.

    Args:
        text: Template source text.

    Returns:
        Root ``Block`` of the template.

    Raises:
        ParseError: For invalid syntax (``LexicalError`` for malformed tokens).
    """
    block = Parser(text).parse()
    logger.debug("template_parsed", nodes=len(block.children), length=len(text))
    return block
