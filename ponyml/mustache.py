"""
Парсер интерполяции {expr} и {expr:format}.
"""

from __future__ import annotations

from .cursor import ParseCursor
from .expressions import stop_at_colon
from .nodes import Mustache
from .protocols import TemplateParserHandlers
from .tokens import Delimiter


def peek_mustache(cursor: ParseCursor) -> bool:
    return cursor.peek(Delimiter.BRACE)


def parse_mustache(handlers: TemplateParserHandlers, cursor: ParseCursor) -> Mustache:
    """
    Разбирает интерполяцию: выражение до `:` верхнего уровня и,
    если `:` есть, спецификацию форматирования после него.

    Raises:
        ParserError: При пустом выражении, ошибке в спецификации или лишних токенах
    """
    start = cursor.span()
    inner = cursor.braced()

    expression = handlers.expressions.parse_expression(inner, stop_at_colon)

    formatting = None
    if inner.match(":"):
        formatting = handlers.parse_format_spec(inner)
    inner.ensure_empty()

    return Mustache(expression, formatting, span=cursor.span_from(start))


__all__ = ["peek_mustache", "parse_mustache"]
