"""Template parsing and rendering for Camino.

Templates are plain text interleaved with ``<%= expression %>`` escapes.
Expressions form a small functional language used to parametrize
configuration and workflow definitions.

Expression Syntax
-----------------
- Identifiers: ``<%= name %>``
- Strings: ``<%= 'it''s' %>`` (a doubled quote escapes a quote)
- Numbers: ``<%= 42 %>``, ``<%= -3 %>``, ``<%= 2.5 %>``, ``<%= 3e2 %>``
- Lists and dictionaries: ``<%= [1, 2] %>``, ``<%= {'a': 1} %>``
- Member and index access: ``<%= job.paths[0] %>``, ``<%= conf['key'] %>``
- Calls: ``<%= upper(name) %>``
- Conditional: ``<%= if(eq(env, 'prod'), 'p', 'd') %>``
- Anonymous functions: ``<%= (fn(x) -> concat(x, '!'))(name) %>``

Module Structure
----------------
- lexer.py: Two-mode tokenizer (passthrough text / expression language)
- nodes.py: Immutable syntax tree
- parser.py: Recursive-descent parser
- values.py: Runtime value model
- environment.py: Lexical scope frames
- registry.py: Built-in function registry
- functions.py: Standard built-in functions
- evaluator.py: Tree-walking evaluator
- template.py: Parse-once/render-many wrapper
- errors.py: ParseError and RenderError taxonomy

Parsed trees are immutable and may be rendered concurrently.
"""

from __future__ import annotations

from camino.render.environment import Environment
from camino.render.errors import (
    ArityMismatchError,
    CallDepthExceededError,
    FunctionCallError,
    IndexOutOfRangeError,
    LexicalError,
    Location,
    MemberNotFoundError,
    ParseError,
    RenderError,
    RenderErrorKind,
    TemplateError,
    TypeMismatchError,
    UnresolvedReferenceError,
)
from camino.render.evaluator import Evaluator, evaluate, render
from camino.render.functions import default_registry
from camino.render.lexer import Lexer, Token, TokenType, tokenize
from camino.render.parser import Parser, parse
from camino.render.registry import FunctionRegistry
from camino.render.template import Template, render_template
from camino.render.values import BuiltinFunction, Closure, Value, to_text

__all__: list[str] = [
    # Error types
    "Location",
    "TemplateError",
    "ParseError",
    "LexicalError",
    "RenderError",
    "RenderErrorKind",
    "UnresolvedReferenceError",
    "TypeMismatchError",
    "MemberNotFoundError",
    "IndexOutOfRangeError",
    "ArityMismatchError",
    "FunctionCallError",
    "CallDepthExceededError",
    # Lexer and parser
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    "Parser",
    "parse",
    # Runtime
    "Value",
    "Closure",
    "BuiltinFunction",
    "to_text",
    "Environment",
    "FunctionRegistry",
    "default_registry",
    "Evaluator",
    "evaluate",
    "render",
    # Entry points
    "Template",
    "render_template",
]
