"""Camino - embedded template expression language.

Render configuration and workflow definitions parametrized with
``<%= expression %>`` escapes:

    from camino import render_template

    render_template("/logs/<%= env %>/app.log", {"env": "prod"})
"""

from __future__ import annotations

from camino.exceptions import CaminoError
from camino.properties import Property
from camino.render import (
    Environment,
    FunctionRegistry,
    ParseError,
    RenderError,
    Template,
    default_registry,
    evaluate,
    parse,
    render,
    render_template,
)

__version__ = "0.3.0"

__all__ = [
    "__version__",
    "CaminoError",
    "Property",
    "Environment",
    "FunctionRegistry",
    "ParseError",
    "RenderError",
    "Template",
    "default_registry",
    "evaluate",
    "parse",
    "render",
    "render_template",
]
