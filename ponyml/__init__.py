"""
Парсер гибридного языка шаблонов: JSX-разметка, интерполяция {expr:format}
и управляющие блоки {#if}/{#match}.

Строит типизированное AST для последующей генерации кода.
"""

from __future__ import annotations

from .config import ParserConfig, load_config
from .errors import ConfigError, PonymlUserError
from .expressions import ExpressionParser, TokenRunExpressionParser
from .formatting import parse_format_spec
from .lexer import tokenize
from .nodes import *  # noqa: F401,F403
from .nodes import __all__ as _nodes_all
from .parser import TemplateParser, parse_str, parse_template
from .tokens import LexerError, ParserError, Span, Token, TokenType

__all__ = [
    "ParserConfig",
    "load_config",
    "ConfigError",
    "PonymlUserError",
    "ExpressionParser",
    "TokenRunExpressionParser",
    "parse_format_spec",
    "tokenize",
    "TemplateParser",
    "parse_str",
    "parse_template",
    "LexerError",
    "ParserError",
    "Span",
    "Token",
    "TokenType",
    *_nodes_all,
]
