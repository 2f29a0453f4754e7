"""
Парсер JSX-подобной разметки.

Разбирает элементы (с телом и самозакрывающиеся), фрагменты, атрибуты,
текст и комментарии. Вложенные узлы разбираются через handlers.parse_child,
поэтому разметка, интерполяции и блоки могут вкладываться друг в друга.

root          → fragment | element
fragment      → "<" ">" child* "<" "/" ">"
element       → "<" name attribute* "/" ">"
              | "<" name attribute* ">" child* "<" "/" name ">"
name          → IDENTIFIER (("::" | ".") IDENTIFIER)*
attribute     → "{" ".." expression "}" | IDENTIFIER ("=" value)?
value         → STRING | "{" expression "}"
comment       → "<" "!" "-" "-" token* "-" "-" ">"
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from .combinators import parse_until
from .cursor import ParseCursor, describe
from .nodes import (
    Attribute,
    AttributeValue,
    ClosedElement,
    ClosingElement,
    Comment,
    Element,
    ElementName,
    Fragment,
    NamedAttribute,
    OpeningElement,
    Root,
    SelfClosingElement,
    SpreadAttribute,
    StringLiteral,
    Text,
)
from .protocols import TemplateParserHandlers
from .tokens import Delimiter, ParserError, Span, Token, TokenType

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Просмотр вперёд
# ---------------------------------------------------------------------------

def peek_fragment(cursor: ParseCursor) -> bool:
    return cursor.peek("<") and cursor.peek(">", 2)


def peek_fragment_closing(cursor: ParseCursor) -> bool:
    return cursor.peek("<") and cursor.peek("/", 2) and cursor.peek(">", 3)


def peek_element(cursor: ParseCursor) -> bool:
    return cursor.peek("<") and cursor.peek(TokenType.IDENTIFIER, 2)


def peek_closing_tag(cursor: ParseCursor) -> bool:
    return cursor.peek("<") and cursor.peek("/", 2) and cursor.peek(TokenType.IDENTIFIER, 3)


def peek_comment(cursor: ParseCursor) -> bool:
    """
    Проверяет начало комментария `<!--`.

    Нужно четыре токена, а peek видит только три, поэтому `<`
    потребляется на копии курсора.
    """
    fork = cursor.fork()
    if fork.match("<") is None:
        return False
    return fork.peek("!") and fork.peek("-", 2) and fork.peek("-", 3)


def peek_comment_end(cursor: ParseCursor) -> bool:
    return cursor.peek("-") and cursor.peek("-", 2) and cursor.peek(">", 3)


def peek_text(cursor: ParseCursor) -> bool:
    """Текст продолжается, пока следующий токен не `<`, не `>` и не группа `{...}`."""
    return not (
        cursor.is_empty()
        or cursor.peek("<")
        or cursor.peek(">")
        or cursor.peek(Delimiter.BRACE)
    )


# ---------------------------------------------------------------------------
# Корень, фрагменты, элементы
# ---------------------------------------------------------------------------

def parse_root(handlers: TemplateParserHandlers, cursor: ParseCursor) -> Root:
    """
    Разбирает корень шаблона: элемент или фрагмент.

    Raises:
        ParserError: Если в начале нет ни элемента, ни фрагмента
    """
    if peek_fragment(cursor):
        return parse_fragment(handlers, cursor)
    if peek_element(cursor):
        return parse_element(handlers, cursor)
    raise cursor.error("Expected either element or fragment here")


def parse_fragment(handlers: TemplateParserHandlers, cursor: ParseCursor) -> Fragment:
    start = cursor.span()
    cursor.consume("<")
    cursor.consume(">")

    children = parse_until(cursor, handlers.parse_child, peek_fragment_closing, "`</>`")

    cursor.consume("<")
    cursor.consume("/")
    cursor.consume(">")
    return Fragment(children, span=cursor.span_from(start))


def parse_element(handlers: TemplateParserHandlers, cursor: ParseCursor) -> Element:
    """
    Разбирает элемент, выбирая между самозакрывающимся и элементом с телом.

    Открывающая часть тега разбирается на копии курсора; по токену после
    атрибутов (`/` или `>`) выбирается ветка, которая затем разбирается
    на настоящем курсоре.
    """
    fork = cursor.fork()
    fork.consume("<")
    parse_element_name(fork)
    parse_attributes(handlers, fork)

    if fork.peek("/"):
        return parse_self_closing_element(handlers, cursor)

    if fork.peek(">"):
        return parse_closed_element(handlers, cursor)

    raise cursor.error("Expected either opening or self-closing tag here")


def parse_self_closing_element(handlers: TemplateParserHandlers, cursor: ParseCursor) -> SelfClosingElement:
    start = cursor.span()
    cursor.consume("<")
    name = parse_element_name(cursor)
    attributes = parse_attributes(handlers, cursor)
    cursor.consume("/")
    cursor.consume(">", "Expected `>` after `/` in a self-closing tag")
    logger.debug(f"Parsed self-closing element <{name}/>")
    return SelfClosingElement(name, attributes, span=cursor.span_from(start))


def parse_opening_element(handlers: TemplateParserHandlers, cursor: ParseCursor) -> OpeningElement:
    start = cursor.span()
    cursor.consume("<")
    name = parse_element_name(cursor)
    attributes = parse_attributes(handlers, cursor)
    cursor.consume(">")
    return OpeningElement(name, attributes, span=cursor.span_from(start))


def parse_closing_element(cursor: ParseCursor) -> ClosingElement:
    start = cursor.span()
    cursor.consume("<")
    cursor.consume("/")
    name = parse_element_name(cursor)
    cursor.consume(">", f"Expected `>` to end the closing tag `</{name}>`")
    return ClosingElement(name, span=cursor.span_from(start))


def closing_tag_matches(cursor: ParseCursor, name: ElementName, strict: bool = False) -> bool:
    """
    Проверяет, закрывает ли тег `</...>` в текущей позиции элемент с именем name.

    Сегменты имён сравниваются попарно по идентификаторам. В нестрогом
    режиме лишние сегменты одного из имён игнорируются; в строгом режиме
    число сегментов тоже должно совпадать.
    """
    fork = cursor.fork()
    try:
        fork.consume("<")
        fork.consume("/")
        candidate = parse_element_name(fork)
    except ParserError:
        return False

    if strict and len(candidate.segments) != len(name.segments):
        return False
    return all(a == b for a, b in zip(candidate.segments, name.segments))


def parse_closed_element(handlers: TemplateParserHandlers, cursor: ParseCursor) -> ClosedElement:
    """
    Разбирает элемент с телом: открывающий тег, дети, закрывающий тег.

    Raises:
        ParserError: Если закрывающий тег не найден или закрывает другой элемент
    """
    start = cursor.span()
    opening = parse_opening_element(handlers, cursor)
    strict = handlers.config.strict_closing_names

    children = []
    while True:
        if cursor.is_empty():
            raise cursor.error(f"Did not find appropriate closing tag `</{opening.name}>`")

        if peek_closing_tag(cursor):
            if closing_tag_matches(cursor, opening.name, strict):
                break
            # Закрывающий тег чужого элемента: внутренний элемент не закрыт
            raise cursor.error(f"Did not find appropriate closing tag `</{opening.name}>`")

        children.append(handlers.parse_child(cursor))

    closing = parse_closing_element(cursor)
    logger.debug(f"Parsed element <{opening.name}> with {len(children)} children")
    return ClosedElement(opening, tuple(children), closing, span=cursor.span_from(start))


def parse_element_name(cursor: ParseCursor) -> ElementName:
    """
    Разбирает имя элемента: идентификатор или путь через `::` или `.`.

    Raises:
        ParserError: Если имя отсутствует или путь оборван
    """
    start = cursor.span()
    first = cursor.consume(TokenType.IDENTIFIER, "Expected an element name here")
    segments = [first.value]
    separators: List[str] = []

    while True:
        if cursor.peek(TokenType.PATH_SEP):
            separators.append(cursor.advance().value)
            segments.append(cursor.consume(TokenType.IDENTIFIER, "Expected an identifier after `::`").value)
        elif cursor.peek(".") and cursor.peek(TokenType.IDENTIFIER, 2):
            separators.append(cursor.advance().value)
            segments.append(cursor.advance().value)
        else:
            break

    return ElementName(tuple(segments), tuple(separators), span=cursor.span_from(start))


# ---------------------------------------------------------------------------
# Атрибуты
# ---------------------------------------------------------------------------

def parse_attributes(handlers: TemplateParserHandlers, cursor: ParseCursor) -> Tuple[Attribute, ...]:
    """Разбирает атрибуты, пока следующий токен не `>` и не `/`."""
    attributes: List[Attribute] = []
    while not (cursor.peek(">") or cursor.peek("/")):
        if cursor.is_empty():
            raise cursor.error("Expected `>` or `/>` to end the tag")
        attributes.append(parse_attribute(handlers, cursor))
    return tuple(attributes)


def parse_attribute(handlers: TemplateParserHandlers, cursor: ParseCursor) -> Attribute:
    if cursor.peek(Delimiter.BRACE):
        return parse_spread_attribute(handlers, cursor)
    if cursor.peek(TokenType.IDENTIFIER):
        return parse_named_attribute(handlers, cursor)
    raise cursor.error(f"Expected an attribute here, got {describe(cursor.current())}")


def parse_spread_attribute(handlers: TemplateParserHandlers, cursor: ParseCursor) -> SpreadAttribute:
    start = cursor.span()
    inner = cursor.braced()
    inner.consume(".", "Expected `..` in a spread attribute")
    inner.consume(".", "Expected `..` in a spread attribute")
    expression = handlers.expressions.parse_expression(inner)
    inner.ensure_empty()
    return SpreadAttribute(expression, span=cursor.span_from(start))


def parse_named_attribute(handlers: TemplateParserHandlers, cursor: ParseCursor) -> NamedAttribute:
    start = cursor.span()
    key = cursor.consume(TokenType.IDENTIFIER).value
    value = None
    if cursor.match("="):
        value = parse_attribute_value(handlers, cursor)
    return NamedAttribute(key, value, span=cursor.span_from(start))


def parse_attribute_value(handlers: TemplateParserHandlers, cursor: ParseCursor) -> AttributeValue:
    if cursor.peek(TokenType.STRING):
        token = cursor.advance()
        return StringLiteral(token.value, span=token.span)

    if cursor.peek(Delimiter.BRACE):
        inner = cursor.braced()
        expression = handlers.expressions.parse_expression(inner)
        inner.ensure_empty()
        return expression

    raise cursor.error("Expected a string literal or `{expression}` here")


# ---------------------------------------------------------------------------
# Текст и комментарии
# ---------------------------------------------------------------------------

def _span_of(tokens: List[Token], fallback: Span) -> Span:
    if not tokens:
        return fallback
    first, last = tokens[0], tokens[-1]
    return Span(first.position, last.end, first.line, first.column)


def parse_text(cursor: ParseCursor) -> Text:
    tokens: List[Token] = []
    start = cursor.span()
    while peek_text(cursor):
        tokens.append(cursor.advance())
    return Text(tuple(tokens), span=_span_of(tokens, start))


def parse_comment(cursor: ParseCursor) -> Comment:
    """
    Разбирает комментарий `<!-- ... -->`.

    Raises:
        ParserError: Если комментарий не закрыт
    """
    start = cursor.span()
    for punct in ("<", "!", "-", "-"):
        cursor.consume(punct, "Expected `<!--` here")

    contents: List[Token] = []
    while not peek_comment_end(cursor):
        if cursor.is_empty():
            raise cursor.error("Unterminated comment, expected `-->`")
        contents.append(cursor.advance())

    for punct in ("-", "-", ">"):
        cursor.consume(punct)
    return Comment(tuple(contents), span=cursor.span_from(start))


__all__ = [
    "peek_fragment",
    "peek_element",
    "peek_closing_tag",
    "peek_comment",
    "peek_text",
    "parse_root",
    "parse_fragment",
    "parse_element",
    "parse_closed_element",
    "parse_self_closing_element",
    "parse_element_name",
    "closing_tag_matches",
    "parse_attributes",
    "parse_attribute",
    "parse_comment",
    "parse_text",
]
