"""
Парсер спецификации форматирования интерполяции.

Грамматика (все части необязательны и идут строго в этом порядке):

format_spec := align? sign? pretty? numbers? type
align       := fill_char? ("<" | "^" | ">")
sign        := "+" | "-"
pretty      := "#"
numbers     := INTEGER ("." precision)?
             | FLOAT ("." precision)?        // ширина до точки, точность после
             | "." precision
precision   := "*" | INTEGER | IDENTIFIER "$"
type        := ε | "?" | IDENTIFIER "?" | IDENTIFIER
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

from .cursor import ParseCursor
from .lexer import TemplateLexer
from .nodes import (
    Align,
    AlignDirection,
    CountPrecision,
    FormatKind,
    FormatSpec,
    FormatType,
    ParameterPrecision,
    Precision,
    Sign,
    StarPrecision,
    literal_value,
)
from .tokens import ParserError, Token, TokenType

_NUMBERS_ERROR = "Expected [`0`] [INT] [. INT] here"

_DECIMAL_RE = re.compile(r"\d[\d_]*")
_SIMPLE_FLOAT_RE = re.compile(r"(\d[\d_]*)\.([\d_]*)")

_DIRECTIONS = {d.value: d for d in AlignDirection}


class FormatSpecParser:
    """
    Парсер спецификации форматирования с рекурсивным спуском.

    Работает с курсором по содержимому интерполяции после `:` и требует,
    чтобы спецификация занимала его до конца.
    """

    def parse(self, cursor: ParseCursor) -> FormatSpec:
        """
        Разбирает спецификацию до конца курсора.

        Raises:
            ParserError: При нарушении грамматики или лишних токенах
        """
        start = cursor.span()

        align = self._parse_align(cursor) if self._peek_align(cursor) else None
        sign = self._parse_sign(cursor) if self._peek_sign(cursor) else None
        pretty = cursor.match("#") is not None

        zero, width, precision = False, None, None
        if self._peek_numbers(cursor):
            zero, width, precision = self._parse_numbers(cursor)

        format_type = self._parse_type(cursor)
        cursor.ensure_empty()

        return FormatSpec(
            align=align,
            sign=sign,
            pretty=pretty,
            zero=zero,
            width=width,
            precision=precision,
            type=format_type,
            span=start,
        )

    # Выравнивание

    @staticmethod
    def _peek_align(cursor: ParseCursor) -> bool:
        # Направление может стоять первым или вторым токеном (после заполнителя)
        return any(cursor.peek(d, 1) or cursor.peek(d, 2) for d in _DIRECTIONS)

    def _parse_align(self, cursor: ParseCursor) -> Align:
        fill: Optional[str] = None
        if not any(cursor.peek(d) for d in _DIRECTIONS):
            fill_token = cursor.consume(TokenType.CHAR, "Expected a fill character like `'0'` here")
            fill = literal_value(fill_token.value)

        token = cursor.current()
        if token is None or token.type is not TokenType.PUNCT or token.value not in _DIRECTIONS:
            raise cursor.error("Expected one of `<`, `^`, `>` here")
        cursor.advance()
        return Align(direction=_DIRECTIONS[token.value], fill=fill)

    # Знак

    @staticmethod
    def _peek_sign(cursor: ParseCursor) -> bool:
        return cursor.peek("+") or cursor.peek("-")

    @staticmethod
    def _parse_sign(cursor: ParseCursor) -> Sign:
        if cursor.match("+"):
            return Sign.POSITIVE
        if cursor.match("-"):
            return Sign.NEGATIVE
        raise cursor.error("Expected `+` or `-` here!")

    # Ширина и точность

    @staticmethod
    def _peek_numbers(cursor: ParseCursor) -> bool:
        return cursor.peek(TokenType.INTEGER) or cursor.peek(TokenType.FLOAT) or cursor.peek(".")

    def _parse_numbers(self, cursor: ParseCursor) -> Tuple[bool, Optional[int], Optional[Precision]]:
        if cursor.peek(TokenType.INTEGER):
            token = cursor.advance()
            if not _DECIMAL_RE.fullmatch(token.value):
                raise _error_at(token, _NUMBERS_ERROR)
            zero, width = self._split_zero(token, token.value)
            precision = None
            if cursor.match("."):
                precision = self._parse_precision(cursor)
            return zero, width, precision

        if cursor.peek(TokenType.FLOAT):
            token = cursor.advance()
            m = _SIMPLE_FLOAT_RE.fullmatch(token.value)
            if m is None:
                # Экспонента или суффикс типа (f32/f64) здесь недопустимы
                raise _error_at(token, _NUMBERS_ERROR)
            int_part, after = m.group(1), m.group(2)
            if after:
                precision: Precision = CountPrecision(_to_int(after))
            else:
                # "6." - точность идёт следующими токенами: 6.* или 6.name$
                precision = self._parse_precision(cursor)
            zero, width = self._split_zero(token, int_part)
            return zero, width, precision

        if cursor.match("."):
            return False, None, self._parse_precision(cursor)

        raise cursor.error(_NUMBERS_ERROR)

    @staticmethod
    def _split_zero(token: Token, digits: str) -> Tuple[bool, int]:
        """Отделяет ведущий `0` (флаг дополнения нулями) от ширины."""
        if len(digits) > 1 and digits[0] == "0":
            if digits[1] == "0":
                raise _error_at(token, "Expected maximum one leading `0` here")
            return True, _to_int(digits[1:])
        return False, _to_int(digits)

    @staticmethod
    def _parse_precision(cursor: ParseCursor) -> Precision:
        if cursor.match("*"):
            return StarPrecision()

        if cursor.peek(TokenType.INTEGER):
            token = cursor.advance()
            if not _DECIMAL_RE.fullmatch(token.value):
                raise _error_at(token, _NUMBERS_ERROR)
            return CountPrecision(_to_int(token.value))

        if cursor.peek(TokenType.IDENTIFIER) and cursor.peek("$", 2):
            name = cursor.advance().value
            cursor.advance()
            return ParameterPrecision(name)

        raise cursor.error("Expected either integer or parameter `var$` here")

    # Тип вывода

    @staticmethod
    def _parse_type(cursor: ParseCursor) -> FormatType:
        if cursor.is_empty():
            return FormatType(FormatKind.DISPLAY)

        if cursor.match("?"):
            return FormatType(FormatKind.DEBUG)

        if cursor.peek("?", 2):
            ident = cursor.consume(TokenType.IDENTIFIER, "Expected either `x` or `X` here!")
            if ident.value == "x":
                kind = FormatKind.DEBUG_LOWER_HEX
            elif ident.value == "X":
                kind = FormatKind.DEBUG_UPPER_HEX
            else:
                raise _error_at(ident, "Expected either `x` or `X` here!")
            cursor.advance()
            return FormatType(kind)

        ident = cursor.consume(TokenType.IDENTIFIER, "Expected a format type here")
        return FormatType(FormatKind.OTHER, ident.value)


def _to_int(digits: str) -> int:
    return int(digits.replace("_", ""))


def _error_at(token: Token, message: str) -> ParserError:
    return ParserError(message, token.span)


def parse_format_spec(text: str) -> FormatSpec:
    """
    Разбирает спецификацию форматирования из строки (то, что стоит после `:`).

    Raises:
        ParserError: При синтаксической ошибке
    """
    lexer = TemplateLexer()
    tokens = lexer.tokenize(text)
    return FormatSpecParser().parse(ParseCursor(tokens, 0, lexer.end_span(text)))


__all__ = ["FormatSpecParser", "parse_format_spec"]
