"""
Условный блок {#if}.

{#if cond}
    ...
{:else if cond}
    ...
{:else}
    ...
{/if}
"""

from __future__ import annotations

import logging
from typing import Tuple

from ..combinators import DividerRule, open_tag, parse_divided_until, parse_until, peek_tag
from ..cursor import ParseCursor
from ..nodes import Child, ElseDivider, ElseIfDivider, IfBlock, IfDivider
from ..protocols import TemplateParserHandlers
from ..tokens import ParserError

logger = logging.getLogger(__name__)

_EXPECTED_CLOSING = "`{/if}`"


def peek_if_opening(cursor: ParseCursor) -> bool:
    return peek_tag(cursor, "#", "if")


def peek_if_closing(cursor: ParseCursor) -> bool:
    return peek_tag(cursor, "/", "if")


def peek_else(cursor: ParseCursor) -> bool:
    return peek_tag(cursor, ":", "else") and not peek_tag(cursor, ":", "else", "if")


def peek_else_if(cursor: ParseCursor) -> bool:
    return peek_tag(cursor, ":", "else", "if")


def peek_if_divider(cursor: ParseCursor) -> bool:
    return peek_else(cursor) or peek_else_if(cursor)


def _make_divider_parser(handlers: TemplateParserHandlers):
    def parse_if_divider(cursor: ParseCursor) -> IfDivider:
        start = cursor.span()

        if peek_else_if(cursor):
            inner = open_tag(cursor, ":", "else", "if")
            condition = handlers.expressions.parse_expression(inner)
            inner.ensure_empty()
            return ElseIfDivider(condition, span=cursor.span_from(start))

        if peek_else(cursor):
            inner = open_tag(cursor, ":", "else")
            inner.ensure_empty("Unexpected token in `{:else}`")
            return ElseDivider(span=cursor.span_from(start))

        raise cursor.error("Expected either `{:else if ...}`, or `{:else}` here")

    return parse_if_divider


def validate_dividers(dividers: Tuple[Tuple[IfDivider, Tuple[Child, ...]], ...]) -> None:
    """
    Проверяет порядок разделителей: `{:else}` может быть только последним.

    Raises:
        ParserError: Если после `{:else}` идёт ещё один разделитель
    """
    for index, (divider, _) in enumerate(dividers[:-1]):
        if isinstance(divider, ElseDivider):
            following = dividers[index + 1][0]
            raise ParserError(
                "`{:else}` must be the last divider of an `{#if}` block",
                following.span or divider.span,
            )


def parse_if_block(handlers: TemplateParserHandlers, cursor: ParseCursor) -> IfBlock:
    """
    Разбирает блок {#if cond} ... {/if}.

    Raises:
        ParserError: При нарушении грамматики блока или порядка разделителей
    """
    start = cursor.span()

    inner = open_tag(cursor, "#", "if")
    condition = handlers.expressions.parse_expression(inner)
    inner.ensure_empty()

    children = parse_until(
        cursor,
        handlers.parse_child,
        lambda c: peek_if_divider(c) or peek_if_closing(c),
        _EXPECTED_CLOSING,
    )

    divider = DividerRule("{:else}", peek_if_divider, _make_divider_parser(handlers))
    dividers = parse_divided_until(cursor, divider, handlers.parse_child, peek_if_closing, _EXPECTED_CLOSING)

    closing = open_tag(cursor, "/", "if")
    closing.ensure_empty("Unexpected token in `{/if}`")

    validate_dividers(dividers)

    logger.debug(f"Parsed if block with {len(children)} children and {len(dividers)} dividers")
    return IfBlock(condition, children, dividers, span=cursor.span_from(start))


__all__ = [
    "peek_if_opening",
    "peek_if_closing",
    "peek_if_divider",
    "validate_dividers",
    "parse_if_block",
]
