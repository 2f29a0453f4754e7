"""
Блок сопоставления с образцом {#match}.

{#match qty}
    <!-- До первой ветки допускаются только комментарии -->
    {:case 0}
        <T>Zero</T>
    {:case 1 | 2}
        <T>Few</T>
    {:case n if n > 100}
        <T>Lots</T>
    {:case _}
        <T>Many</T>
{/match}
"""

from __future__ import annotations

import logging

from ..combinators import DividerRule, open_tag, parse_divided_until, parse_until, peek_tag
from ..cursor import ParseCursor
from ..markup import parse_comment, peek_comment
from ..nodes import CaseDivider, Comment, MatchBlock
from ..protocols import TemplateParserHandlers

logger = logging.getLogger(__name__)

_EXPECTED_CLOSING = "`{/match}`"


def peek_match_opening(cursor: ParseCursor) -> bool:
    return peek_tag(cursor, "#", "match")


def peek_match_closing(cursor: ParseCursor) -> bool:
    return peek_tag(cursor, "/", "match")


def peek_case(cursor: ParseCursor) -> bool:
    return peek_tag(cursor, ":", "case")


def _make_case_parser(handlers: TemplateParserHandlers):
    def parse_case(cursor: ParseCursor) -> CaseDivider:
        start = cursor.span()
        inner = open_tag(cursor, ":", "case")
        pattern = handlers.expressions.parse_pattern(inner)
        guard = None
        if inner.match("if"):
            guard = handlers.expressions.parse_expression(inner)
        inner.ensure_empty()
        return CaseDivider(pattern, guard, span=cursor.span_from(start))

    return parse_case


def _parse_leading_comment(cursor: ParseCursor) -> Comment:
    if not peek_comment(cursor):
        raise cursor.error("Only comments may appear before the first `{:case ...}`")
    return parse_comment(cursor)


def parse_match_block(handlers: TemplateParserHandlers, cursor: ParseCursor) -> MatchBlock:
    """
    Разбирает блок {#match expr} ... {/match}.

    Raises:
        ParserError: При нарушении грамматики блока
    """
    start = cursor.span()

    inner = open_tag(cursor, "#", "match")
    expression = handlers.expressions.parse_expression(inner)
    inner.ensure_empty()

    comments = parse_until(
        cursor,
        _parse_leading_comment,
        lambda c: peek_case(c) or peek_match_closing(c),
        _EXPECTED_CLOSING,
    )

    divider = DividerRule("{:case}", peek_case, _make_case_parser(handlers))
    cases = parse_divided_until(cursor, divider, handlers.parse_child, peek_match_closing, _EXPECTED_CLOSING)

    closing = open_tag(cursor, "/", "match")
    closing.ensure_empty("Unexpected token in `{/match}`")

    logger.debug(f"Parsed match block with {len(cases)} cases")
    return MatchBlock(expression, comments, cases, span=cursor.span_from(start))


__all__ = [
    "peek_match_opening",
    "peek_match_closing",
    "peek_case",
    "parse_match_block",
]
