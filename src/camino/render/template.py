"""Parse-once, render-many template wrapper and one-shot render entry point."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from camino.constants import DEFAULT_MAX_CALL_DEPTH
from camino.logging import get_logger
from camino.properties import Property
from camino.render.environment import Environment
from camino.render.evaluator import Evaluator
from camino.render.functions import default_registry
from camino.render.nodes import Block
from camino.render.parser import parse
from camino.render.registry import FunctionRegistry
from camino.render.values import Value

__all__ = ["Template", "render_template"]

logger = get_logger(__name__)

Properties = Iterable[Property] | Mapping[str, str]


class Template:
    """A parsed template.

    Parsing happens once, in the constructor. The resulting tree is
    immutable, so ``render`` may be called repeatedly, and concurrently,
    with different properties.

    Attributes:
        source: Original template text.
        name: Optional label used in log events.
        block: Root of the parsed syntax tree.

    Example:
        ```python
        template = Template("/data/<%= env %>/<%= formatTime(now(), '%Y%m%d') %>")
        template.render({"env": "prod"})
        ```
    """

    def __init__(self, source: str, *, name: str | None = None) -> None:
        self.source = source
        self.name = name
        self.block: Block = parse(source)

    def render(
        self,
        properties: Properties = (),
        registry: FunctionRegistry | None = None,
        *,
        max_call_depth: int = DEFAULT_MAX_CALL_DEPTH,
    ) -> str:
        """Render the template.

        Args:
            properties: Root bindings, as Property objects or a mapping.
            registry: Built-in functions; defaults to ``default_registry()``.
            max_call_depth: Maximum nesting of function calls.

        Returns:
            Rendered text.

        Raises:
            RenderError: If evaluation fails.
        """
        evaluator = self._evaluator(registry, max_call_depth)
        text = evaluator.render(self.block, Environment.from_properties(properties))
        logger.debug("template_rendered", template=self.name, length=len(text))
        return text

    def evaluate(
        self,
        properties: Properties = (),
        registry: FunctionRegistry | None = None,
        *,
        max_call_depth: int = DEFAULT_MAX_CALL_DEPTH,
    ) -> Value:
        """Evaluate the template to a value.

        A template consisting of a single ``<%= ... %>`` yields that
        expression's value unconverted; anything else yields rendered text.
        """
        evaluator = self._evaluator(registry, max_call_depth)
        return evaluator.evaluate(self.block, Environment.from_properties(properties))

    @staticmethod
    def _evaluator(
        registry: FunctionRegistry | None, max_call_depth: int
    ) -> Evaluator:
        return Evaluator(
            registry if registry is not None else default_registry(),
            max_call_depth=max_call_depth,
        )

    def __repr__(self) -> str:
        return f"Template(name={self.name!r}, nodes={len(self.block.children)})"


def render_template(
    source: str,
    properties: Properties = (),
    registry: FunctionRegistry | None = None,
    *,
    max_call_depth: int = DEFAULT_MAX_CALL_DEPTH,
) -> str:
    """Parse and render template text in one call.

    Args:
        source: Template text.
        properties: Root bindings, as Property objects or a mapping.
        registry: Built-in functions; defaults to ``default_registry()``.
        max_call_depth: Maximum nesting of function calls.

    Returns:
        Rendered text.

    Raises:
        ParseError: If the text is not a valid template.
        RenderError: If evaluation fails.

    Examples:
        >>> render_template("Hello <%= name %>!", {"name": "World"})
        'Hello World!'
    """
    return Template(source).render(
        properties, registry, max_call_depth=max_call_depth
    )
