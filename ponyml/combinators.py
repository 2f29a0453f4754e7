"""
Общие комбинаторы разбора последовательностей (тела фрагментов и блоков).

- parse_until: разбирает узлы, пока не сработает предикат остановки;
- parse_divided_until: разбирает последовательность "разделитель + узлы";
- peek_tag / open_tag: просмотр и разбор тегов {#kw ...}, {:kw ...}, {/kw}
  внутри фигурных скобок без потребления токенов исходного курсора.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, Tuple, TypeVar

from .cursor import ParseCursor, TokenPattern
from .tokens import ParserError

logger = logging.getLogger(__name__)

T = TypeVar("T")
D = TypeVar("D")

StopPredicate = Callable[[ParseCursor], bool]


@dataclass(frozen=True)
class DividerRule(Generic[D]):
    """
    Разделитель блока: как его распознать и как разобрать.
    """
    name: str                                  # Имя для диагностики (например, "{:case}")
    peek: Callable[[ParseCursor], bool]        # Просмотр без потребления
    parse: Callable[[ParseCursor], D]          # Разбор с потреблением


def parse_until(
    cursor: ParseCursor,
    parse_item: Callable[[ParseCursor], T],
    stop: StopPredicate,
    expected: str,
) -> Tuple[T, ...]:
    """
    Разбирает элементы, пока stop(cursor) ложен.

    Args:
        cursor: Курсор
        parse_item: Разбор одного элемента
        stop: Предикат остановки (проверяется перед каждым элементом)
        expected: Что ожидалось в конце (для сообщения об обрыве ввода)

    Raises:
        ParserError: Если ввод закончился раньше, чем сработал предикат
    """
    items: List[T] = []
    while not stop(cursor):
        if cursor.is_empty():
            raise cursor.error(f"Unexpected end of input, expected {expected}")
        items.append(parse_item(cursor))
    return tuple(items)


def parse_divided_until(
    cursor: ParseCursor,
    divider: DividerRule[D],
    parse_item: Callable[[ParseCursor], T],
    stop: StopPredicate,
    expected: str,
) -> Tuple[Tuple[D, Tuple[T, ...]], ...]:
    """
    Разбирает пары (разделитель, элементы), пока stop(cursor) ложен.

    Элементы каждого участка разбираются до следующего разделителя
    или до срабатывания stop.
    """

    def _segment_end(c: ParseCursor) -> bool:
        return divider.peek(c) or stop(c)

    segments: List[Tuple[D, Tuple[T, ...]]] = []
    while not stop(cursor):
        if cursor.is_empty():
            raise cursor.error(f"Unexpected end of input, expected {expected}")
        head = divider.parse(cursor)
        body = parse_until(cursor, parse_item, _segment_end, expected)
        segments.append((head, body))
    logger.debug(f"Parsed {len(segments)} segment(s) divided by {divider.name}")
    return tuple(segments)


def inside_braces(cursor: ParseCursor) -> Optional[ParseCursor]:
    """
    Открывает группу в фигурных скобках на копии курсора.

    Returns:
        Курсор по содержимому группы или None, если следующий токен не `{...}`
    """
    try:
        return cursor.fork().braced()
    except ParserError:
        return None


def peek_tag(cursor: ParseCursor, *patterns: TokenPattern) -> bool:
    """Проверяет, что следующая группа `{...}` начинается с указанных токенов."""
    inner = inside_braces(cursor)
    if inner is None:
        return False
    return all(inner.peek(pattern, offset) for offset, pattern in enumerate(patterns, start=1))


def tag_keyword(cursor: ParseCursor) -> str:
    """Текст тега вида `{#kw}` для сообщений об ошибках: первые два токена группы."""
    inner = inside_braces(cursor)
    if inner is None:
        return ""
    parts = []
    for offset in (1, 2):
        token = inner.token_at(offset)
        if token is None or token.is_group:
            break
        parts.append(token.value)
    return "{" + "".join(parts) + "}"


def open_tag(cursor: ParseCursor, *patterns: TokenPattern) -> ParseCursor:
    """
    Потребляет группу `{...}` и в ней указанные токены.

    Returns:
        Курсор по оставшемуся содержимому группы (выражение, образец)
    """
    tag = "{" + str(patterns[0]) + " ".join(str(p) for p in patterns[1:]) + "}"
    inner = cursor.braced(f"Expected `{tag}` here")
    for pattern in patterns:
        inner.consume(pattern, f"Expected `{tag}` here")
    return inner


__all__ = [
    "DividerRule",
    "StopPredicate",
    "parse_until",
    "parse_divided_until",
    "inside_braces",
    "peek_tag",
    "tag_keyword",
    "open_tag",
]
