"""
Разбор встроенных выражений и образцов.

Язык выражений внутри {...}, значений атрибутов и условий блоков
разбирается внешним парсером. Ядро общается с ним через протокол
ExpressionParser; реализация по умолчанию захватывает участок токенов
целиком и возвращает его как непрозрачный узел.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Protocol, runtime_checkable

from .cursor import ParseCursor
from .nodes import Expression, Pattern
from .tokens import Span, Token

# Предикат остановки: проверяет курсор в текущей позиции, ничего не потребляя
StopPredicate = Callable[[ParseCursor], bool]


@runtime_checkable
class ExpressionParser(Protocol):
    """
    Протокол парсера выражений и образцов.

    Каждая операция потребляет ровно свой участок курсора и возвращает
    непрозрачный узел, либо бросает ParserError с сообщением и позицией.
    """

    def parse_expression(self, cursor: ParseCursor, stop: Optional[StopPredicate] = None) -> Expression:
        """
        Разбирает выражение до конца курсора или до позиции, где stop(cursor) истинен.

        Raises:
            ParserError: Если выражение пустое или некорректное
        """
        ...

    def parse_pattern(self, cursor: ParseCursor) -> Pattern:
        """
        Разбирает образец: необязательный ведущий `|`, затем альтернативы
        через `|`, до ключевого слова `if` верхнего уровня или конца курсора.

        Raises:
            ParserError: Если альтернатива пустая
        """
        ...


def _span_of(tokens: List[Token]) -> Span:
    first, last = tokens[0], tokens[-1]
    return Span(first.position, last.end, first.line, first.column)


class TokenRunExpressionParser:
    """
    Реализация ExpressionParser по умолчанию.

    Выражение - это непустой участок деревьев токенов. Группы в скобках
    атомарны, поэтому `:` или `|` внутри (), [] и {} не завершают участок.
    """

    def parse_expression(self, cursor: ParseCursor, stop: Optional[StopPredicate] = None) -> Expression:
        tokens = self._collect(cursor, stop)
        if not tokens:
            raise cursor.error("Expected an expression here")
        return Expression(tuple(tokens), span=_span_of(tokens))

    def parse_pattern(self, cursor: ParseCursor) -> Pattern:
        cursor.match("|")

        alternatives: List[Expression] = []
        while True:
            tokens = self._collect(cursor, _pattern_stop)
            if not tokens:
                raise cursor.error("Expected a pattern here")
            alternatives.append(Expression(tuple(tokens), span=_span_of(tokens)))
            if not cursor.match("|"):
                break

        span = Span(
            alternatives[0].span.position,
            alternatives[-1].span.end,
            alternatives[0].span.line,
            alternatives[0].span.column,
        )
        return Pattern(tuple(alternatives), span=span)

    @staticmethod
    def _collect(cursor: ParseCursor, stop: Optional[StopPredicate]) -> List[Token]:
        tokens: List[Token] = []
        while not cursor.is_empty():
            if stop is not None and stop(cursor):
                break
            tokens.append(cursor.advance())
        return tokens


def _pattern_stop(cursor: ParseCursor) -> bool:
    return cursor.peek("|") or cursor.peek("if")


def stop_at_colon(cursor: ParseCursor) -> bool:
    """Останавливает выражение интерполяции перед `:` спецификации формата."""
    return cursor.peek(":")


__all__ = ["ExpressionParser", "TokenRunExpressionParser", "StopPredicate", "stop_at_colon"]
