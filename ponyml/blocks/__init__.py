"""
Управляющие блоки: {#if ...} и {#match ...}.

Открывающий тег блока - группа `{#kw ...}`, разделители - `{:kw ...}`,
закрывающий тег - `{/kw}`. Оба вида блоков построены на общих
комбинаторах parse_until / parse_divided_until.
"""

from __future__ import annotations

from ..combinators import peek_tag, tag_keyword
from ..cursor import ParseCursor
from ..nodes import Block
from ..protocols import TemplateParserHandlers
from .if_block import parse_if_block, peek_if_opening
from .match_block import parse_match_block, peek_match_opening


def peek_block(cursor: ParseCursor) -> bool:
    """Проверяет, начинается ли в текущей позиции блок `{#...}`."""
    return peek_tag(cursor, "#")


def peek_stray_tag(cursor: ParseCursor) -> bool:
    """Разделитель `{:...}` или закрывающий тег `{/...}` вне своего блока."""
    return peek_tag(cursor, ":") or peek_tag(cursor, "/")


def parse_block(handlers: TemplateParserHandlers, cursor: ParseCursor) -> Block:
    """
    Разбирает блок, выбирая вид по ключевому слову.

    Raises:
        ParserError: Для неизвестного вида блока или при ошибке разбора
    """
    if peek_if_opening(cursor):
        return parse_if_block(handlers, cursor)

    if peek_match_opening(cursor):
        return parse_match_block(handlers, cursor)

    raise cursor.error(f"Unknown block kind `{tag_keyword(cursor)}`")


def stray_tag_error(cursor: ParseCursor):
    return cursor.error(f"Unexpected `{tag_keyword(cursor)}` outside of a matching block")


__all__ = ["peek_block", "peek_stray_tag", "parse_block", "stray_tag_error"]
