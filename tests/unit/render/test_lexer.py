"""Unit tests for the two-mode template lexer.

Covers:
- DEFAULT mode passthrough text and the <%= / %> mode switches
- EL mode identifiers, keywords, numbers, strings and punctuation
- Locations attached to tokens
- Lexical errors for unterminated strings and unrecognized characters
"""

from __future__ import annotations

import pytest

from camino.render.errors import LexicalError, Location, ParseError
from camino.render.lexer import Lexer, LexerMode, TokenType, tokenize


def types(text: str) -> list[TokenType]:
    return [token.type for token in tokenize(text)]


class TestDefaultMode:
    """Test passthrough text handling."""

    def test_empty_input_yields_only_eof(self) -> None:
        assert types("") == [TokenType.EOF]

    def test_plain_text_is_single_token(self) -> None:
        tokens = tokenize("hello\nworld")
        assert tokens[0].type is TokenType.TEXT
        assert tokens[0].text == "hello\nworld"
        assert tokens[1].type is TokenType.EOF

    def test_closing_delimiter_in_text_is_plain_text(self) -> None:
        """%> outside an expression is ordinary text."""
        tokens = tokenize("50%> done")
        assert [t.type for t in tokens] == [TokenType.TEXT, TokenType.EOF]
        assert tokens[0].text == "50%> done"

    def test_mode_switches(self) -> None:
        assert types("Hi <%= name %>!") == [
            TokenType.TEXT,
            TokenType.EL_START,
            TokenType.IDENTIFIER,
            TokenType.EL_END,
            TokenType.TEXT,
            TokenType.EOF,
        ]

    def test_adjacent_expressions_have_no_empty_text(self) -> None:
        assert types("<%= a %><%= b %>") == [
            TokenType.EL_START,
            TokenType.IDENTIFIER,
            TokenType.EL_END,
            TokenType.EL_START,
            TokenType.IDENTIFIER,
            TokenType.EL_END,
            TokenType.EOF,
        ]

    def test_lexer_returns_to_default_mode(self) -> None:
        lexer = Lexer("<%= a %>")
        assert lexer.mode is LexerMode.DEFAULT
        list(lexer)
        assert lexer.mode is LexerMode.DEFAULT


class TestExpressionMode:
    """Test expression-language tokens."""

    def test_identifiers(self) -> None:
        tokens = tokenize("<%= _a $b c9 %>")
        idents = [t.text for t in tokens if t.type is TokenType.IDENTIFIER]
        assert idents == ["_a", "$b", "c9"]

    def test_keywords(self) -> None:
        assert types("<%= if fn iff fnx %>")[1:5] == [
            TokenType.IF,
            TokenType.FN,
            TokenType.IDENTIFIER,
            TokenType.IDENTIFIER,
        ]

    def test_keywords_are_case_sensitive(self) -> None:
        assert types("<%= IF Fn %>")[1:3] == [
            TokenType.IDENTIFIER,
            TokenType.IDENTIFIER,
        ]

    @pytest.mark.parametrize(
        ("source", "expected_type", "text"),
        [
            ("42", TokenType.INTEGER, "42"),
            ("3.0", TokenType.FLOAT, "3.0"),
            ("3.", TokenType.FLOAT, "3."),
            ("3e2", TokenType.FLOAT, "3e2"),
            ("1.5E-3", TokenType.FLOAT, "1.5E-3"),
            ("2e+4", TokenType.FLOAT, "2e+4"),
        ],
    )
    def test_numbers(self, source: str, expected_type: TokenType, text: str) -> None:
        token = tokenize(f"<%= {source} %>")[1]
        assert token.type is expected_type
        assert token.text == text

    def test_exponent_without_digits_is_not_part_of_number(self) -> None:
        tokens = tokenize("<%= 1e %>")
        assert [t.type for t in tokens[1:3]] == [
            TokenType.INTEGER,
            TokenType.IDENTIFIER,
        ]

    def test_string_with_doubled_quote_escape(self) -> None:
        token = tokenize("<%= 'it''s' %>")[1]
        assert token.type is TokenType.STRING
        assert token.text == "it's"

    def test_empty_string(self) -> None:
        token = tokenize("<%= '' %>")[1]
        assert token.type is TokenType.STRING
        assert token.text == ""

    def test_string_may_contain_closing_delimiter(self) -> None:
        tokens = tokenize("<%= '%>' %>")
        assert tokens[1].text == "%>"
        assert tokens[2].type is TokenType.EL_END

    def test_punctuation(self) -> None:
        assert types("<%= ( ) [ ] { } . , - : -> %>")[1:-2] == [
            TokenType.LPAREN,
            TokenType.RPAREN,
            TokenType.LBRACKET,
            TokenType.RBRACKET,
            TokenType.LBRACE,
            TokenType.RBRACE,
            TokenType.DOT,
            TokenType.COMMA,
            TokenType.MINUS,
            TokenType.COLON,
            TokenType.ARROW,
        ]

    def test_whitespace_is_skipped(self) -> None:
        assert types("<%=\t\r\n a \n%>") == [
            TokenType.EL_START,
            TokenType.IDENTIFIER,
            TokenType.EL_END,
            TokenType.EOF,
        ]


class TestLocations:
    """Test token locations."""

    def test_locations_are_one_based(self) -> None:
        tokens = tokenize("ab<%= x %>")
        assert tokens[0].location == Location(1, 1)
        assert tokens[1].location == Location(1, 3)
        assert tokens[2].location == Location(1, 7)

    def test_locations_track_newlines(self) -> None:
        tokens = tokenize("line1\nline2 <%=\n  value %>")
        ident = tokens[2]
        assert ident.text == "value"
        assert ident.location == Location(3, 3)

    def test_location_str(self) -> None:
        assert str(Location(2, 7)) == "line 2, column 7"


class TestLexicalErrors:
    """Test lexical error reporting."""

    def test_unterminated_string(self) -> None:
        with pytest.raises(LexicalError) as exc_info:
            tokenize("<%= 'abc %>")
        assert exc_info.value.location == Location(1, 5)
        assert "Unterminated string" in str(exc_info.value)

    def test_unrecognized_character(self) -> None:
        with pytest.raises(LexicalError) as exc_info:
            tokenize("<%= a + b %>")
        assert exc_info.value.location == Location(1, 7)
        assert "'+'" in str(exc_info.value)

    def test_lexical_error_is_parse_error(self) -> None:
        with pytest.raises(ParseError):
            tokenize("<%= # %>")

    def test_non_ascii_identifier_rejected(self) -> None:
        with pytest.raises(LexicalError):
            tokenize("<%= é %>")
