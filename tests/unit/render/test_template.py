"""Unit tests for Template and render_template."""

from __future__ import annotations

import pytest

from camino.properties import Property
from camino.render import (
    FunctionRegistry,
    ParseError,
    Template,
    UnresolvedReferenceError,
    default_registry,
    render_template,
)


class TestRenderTemplate:
    """Test the one-shot render entry point."""

    def test_hello_world(self) -> None:
        assert render_template("Hello <%= name %>!", {"name": "World"}) == (
            "Hello World!"
        )

    def test_property_objects(self) -> None:
        result = render_template(
            "/data/<%= env %>/<%= region %>",
            [Property(name="env", value="prod"), Property(name="region", value="eu")],
        )
        assert result == "/data/prod/eu"

    def test_properties_are_strings(self) -> None:
        assert render_template("<%= concat(n, n) %>", {"n": "1"}) == "11"

    def test_plain_text_passes_through(self) -> None:
        assert render_template("no expressions here %>") == "no expressions here %>"

    def test_empty_template(self) -> None:
        assert render_template("") == ""

    def test_builtins_available_by_default(self) -> None:
        assert render_template("<%= upper('x') %>") == "X"

    def test_custom_registry(self) -> None:
        registry = FunctionRegistry()
        registry.register("shout", lambda s: s + "!", min_args=1, max_args=1)
        assert render_template("<%= shout('hi') %>", registry=registry) == "hi!"

    def test_custom_registry_replaces_defaults(self) -> None:
        with pytest.raises(UnresolvedReferenceError):
            render_template("<%= upper('x') %>", registry=FunctionRegistry())

    def test_syntax_error(self) -> None:
        with pytest.raises(ParseError):
            render_template("<%= name")


class TestTemplate:
    """Test parse-once, render-many usage."""

    def test_render_many_times(self) -> None:
        template = Template("<%= greeting %>, <%= name %>")
        assert template.render({"greeting": "Hi", "name": "A"}) == "Hi, A"
        assert template.render({"greeting": "Yo", "name": "B"}) == "Yo, B"

    def test_parse_errors_raised_at_construction(self) -> None:
        with pytest.raises(ParseError):
            Template("<%= (%>")

    def test_render_errors_raised_at_render(self) -> None:
        template = Template("<%= missing %>")
        with pytest.raises(UnresolvedReferenceError):
            template.render()

    def test_evaluate_single_expression_keeps_value(self) -> None:
        assert Template("<%= [1, 2] %>").evaluate() == (1, 2)

    def test_evaluate_mixed_template_is_text(self) -> None:
        assert Template("n=<%= 1 %>").evaluate() == "n=1"

    def test_max_call_depth_is_honored(self) -> None:
        source = "<%= {'f': fn(n) -> n}.f(1) %>"
        assert Template(source).render(max_call_depth=1) == "1"

    def test_registry_argument_is_used(self) -> None:
        registry = default_registry()
        registry.register("answer", lambda: 42, min_args=0, max_args=0)
        assert Template("<%= answer() %>").render(registry=registry) == "42"

    def test_repr(self) -> None:
        assert repr(Template("a<%= b %>", name="t")) == "Template(name='t', nodes=2)"
