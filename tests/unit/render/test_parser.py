"""Unit tests for the recursive-descent template parser.

Covers each grammar rule, postfix chaining, negative-number folding,
numeric literal typing and parse error reporting.
"""

from __future__ import annotations

from typing import Any

import pytest

from camino.render.errors import LexicalError, Location, ParseError
from camino.render.nodes import (
    Block,
    CollectionAccess,
    DictionaryLiteral,
    DoubleLiteral,
    FunctionCall,
    FunctionLiteral,
    Identifier,
    ListLiteral,
    LongLiteral,
    MemberAccess,
    StringLiteral,
    TernaryIf,
)
from camino.render.parser import Parser, parse


def expr(source: str) -> Any:
    """Parse a single expression wrapped in <%= %>."""
    block = parse(f"<%= {source} %>")
    assert len(block.children) == 1
    return block.children[0]


class TestBlock:
    """Test top-level block structure."""

    def test_empty_template(self) -> None:
        block = parse("")
        assert block == Block(location=Location(1, 1), children=())

    def test_text_only(self) -> None:
        block = parse("just text")
        assert block.children == (
            StringLiteral(location=Location(1, 1), value="just text"),
        )

    def test_text_and_expressions(self) -> None:
        block = parse("Hello <%= name %>!")
        assert [type(c) for c in block.children] == [
            StringLiteral,
            Identifier,
            StringLiteral,
        ]

    def test_parser_instances_are_single_use(self) -> None:
        first = Parser("<%= a %>").parse()
        second = Parser("<%= a %>").parse()
        assert first == second
        assert first is not second


class TestLiterals:
    """Test literal parsing and numeric typing."""

    def test_integer(self) -> None:
        node = expr("3")
        assert isinstance(node, LongLiteral)
        assert node.value == 3

    @pytest.mark.parametrize(("source", "value"), [("3.0", 3.0), ("3e2", 300.0)])
    def test_float(self, source: str, value: float) -> None:
        node = expr(source)
        assert isinstance(node, DoubleLiteral)
        assert node.value == value

    def test_negative_integer_is_folded(self) -> None:
        node = expr("-42")
        assert node == LongLiteral(location=Location(1, 5), value=-42)

    def test_negative_float_is_folded(self) -> None:
        node = expr("-2.5")
        assert isinstance(node, DoubleLiteral)
        assert node.value == -2.5

    def test_minus_must_be_adjacent(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            expr("- 1")
        assert "immediately after '-'" in str(exc_info.value)

    def test_minus_before_identifier_is_rejected(self) -> None:
        with pytest.raises(ParseError):
            expr("-x")

    def test_integer_bounds(self) -> None:
        assert expr("9223372036854775807").value == 2**63 - 1
        assert expr("-9223372036854775808").value == -(2**63)

    @pytest.mark.parametrize("source", ["9223372036854775808", "-9223372036854775809"])
    def test_integer_overflow_is_parse_error(self, source: str) -> None:
        with pytest.raises(ParseError) as exc_info:
            expr(source)
        assert "64-bit" in str(exc_info.value)

    def test_float_overflow_is_parse_error(self) -> None:
        with pytest.raises(ParseError):
            expr("1e999")

    def test_string_with_escaped_quote(self) -> None:
        node = expr("'it''s'")
        assert node == StringLiteral(location=Location(1, 5), value="it's")

    def test_list_literal(self) -> None:
        node = expr("[1, 'a', x]")
        assert isinstance(node, ListLiteral)
        assert [type(e) for e in node.elements] == [
            LongLiteral,
            StringLiteral,
            Identifier,
        ]

    def test_empty_list(self) -> None:
        assert expr("[]") == ListLiteral(location=Location(1, 5), elements=())

    def test_dictionary_literal(self) -> None:
        node = expr("{'a': 1, b: 2}")
        assert isinstance(node, DictionaryLiteral)
        assert len(node.entries) == 2
        key, value = node.entries[1]
        assert key == Identifier(location=Location(1, 14), name="b")
        assert isinstance(value, LongLiteral)

    def test_empty_dictionary(self) -> None:
        node = expr("{}")
        assert isinstance(node, DictionaryLiteral)
        assert node.entries == ()


class TestPostfixChaining:
    """Test member, index and call postfix operators."""

    def test_member_access(self) -> None:
        node = expr("a.b")
        assert node == MemberAccess(
            location=Location(1, 6),
            base=Identifier(location=Location(1, 5), name="a"),
            member="b",
        )

    def test_chain_is_left_to_right(self) -> None:
        """a.b[0](x) is a call on an index on a member access."""
        node = expr("a.b[0](x)")
        assert isinstance(node, FunctionCall)
        assert isinstance(node.function, CollectionAccess)
        assert isinstance(node.function.base, MemberAccess)
        assert node.function.base.member == "b"
        assert node.arguments == (Identifier(location=Location(1, 12), name="x"),)

    def test_call_with_no_arguments(self) -> None:
        node = expr("now()")
        assert isinstance(node, FunctionCall)
        assert node.arguments == ()

    def test_index_on_list_literal(self) -> None:
        node = expr("[1,2][5]")
        assert isinstance(node, CollectionAccess)
        assert node.location == Location(1, 10)
        assert isinstance(node.base, ListLiteral)

    def test_parenthesized_expression_has_no_wrapper(self) -> None:
        assert expr("(a)") == Identifier(location=Location(1, 6), name="a")

    def test_call_on_parenthesized_function_literal(self) -> None:
        node = expr("(fn(x) -> x)(1)")
        assert isinstance(node, FunctionCall)
        assert isinstance(node.function, FunctionLiteral)


class TestTernaryIf:
    """Test if(condition, then, else)."""

    def test_ternary(self) -> None:
        node = expr("if(c, 1, 2)")
        assert isinstance(node, TernaryIf)
        assert node.location == Location(1, 5)
        assert node.condition == Identifier(location=Location(1, 8), name="c")

    def test_ternary_requires_three_parts(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            expr("if(c, 1)")
        assert exc_info.value.expected == "','"

    def test_ternary_result_accepts_postfix(self) -> None:
        node = expr("if(c, a, b).x")
        assert isinstance(node, MemberAccess)
        assert isinstance(node.base, TernaryIf)


class TestFunctionLiteral:
    """Test fn(params) -> body."""

    def test_function_literal(self) -> None:
        node = expr("fn(x, y) -> x")
        assert isinstance(node, FunctionLiteral)
        assert node.parameters == ("x", "y")
        assert isinstance(node.body, Block)
        assert node.body.children == (
            Identifier(location=Location(1, 17), name="x"),
        )

    def test_no_parameters(self) -> None:
        node = expr("fn() -> 1")
        assert isinstance(node, FunctionLiteral)
        assert node.parameters == ()

    def test_body_extends_over_postfix(self) -> None:
        node = expr("fn(f) -> f(1)")
        assert isinstance(node, FunctionLiteral)
        assert isinstance(node.body.children[0], FunctionCall)

    def test_nested_function_literal(self) -> None:
        node = expr("fn(x) -> fn(y) -> x")
        assert isinstance(node, FunctionLiteral)
        assert isinstance(node.body.children[0], FunctionLiteral)

    def test_duplicate_parameter_rejected(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            expr("fn(x, x) -> x")
        assert exc_info.value.location == Location(1, 11)

    def test_arrow_required(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            expr("fn(x) x")
        assert exc_info.value.expected == "'->'"


class TestParseErrors:
    """Test error reporting."""

    def test_empty_expression(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse("<%= %>")
        assert exc_info.value.location == Location(1, 5)
        assert exc_info.value.expected == "expression"

    def test_unclosed_expression(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse("a <%= b")
        assert "end of input" in str(exc_info.value)
        assert exc_info.value.expected == "'%>'"

    def test_trailing_comma_rejected(self) -> None:
        with pytest.raises(ParseError):
            parse("<%= [1, 2,] %>")

    def test_member_name_required(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse("<%= a.0 %>")
        assert exc_info.value.expected == "member name"

    def test_unbalanced_parenthesis(self) -> None:
        with pytest.raises(ParseError):
            parse("<%= (a %>")

    def test_lexical_error_surfaces_from_parse(self) -> None:
        with pytest.raises(LexicalError):
            parse("<%= 'open %>")

    def test_error_message_includes_location(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse("x\n<%= ) %>")
        assert "line 2, column 5" in str(exc_info.value)

    def test_deep_nesting_is_reported(self) -> None:
        source = "<%= " + "(" * 5000 + "a" + ")" * 5000 + " %>"
        with pytest.raises(ParseError) as exc_info:
            parse(source)
        assert "too deep" in str(exc_info.value)
