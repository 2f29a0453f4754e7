"""
Курсор по последовательности токенов.

Предоставляет ограниченный просмотр вперёд (до трёх токенов) и дешёвые
спекулятивные копии (fork) для разрешения неоднозначностей грамматики.
Откат выполняется только отбрасыванием копии: операции "вернуть токен" нет.
"""

from __future__ import annotations

from typing import Optional, Sequence, Union

from .tokens import Delimiter, ParserError, Span, Token, TokenType

# Шаблон токена для peek/consume:
# - TokenType: любой токен этой категории
# - Delimiter: группа с этим разделителем
# - str: пунктуация, разделитель пути или идентификатор с точно таким текстом
TokenPattern = Union[TokenType, Delimiter, str]

_EXACT_TYPES = (TokenType.PUNCT, TokenType.PATH_SEP, TokenType.IDENTIFIER)


def token_matches(token: Optional[Token], pattern: TokenPattern) -> bool:
    """Проверяет, соответствует ли токен шаблону."""
    if token is None:
        return False
    if isinstance(pattern, TokenType):
        return token.type is pattern
    if isinstance(pattern, Delimiter):
        return token.type is TokenType.GROUP and token.delimiter is pattern
    return token.type in _EXACT_TYPES and token.value == pattern


def describe(token: Optional[Token]) -> str:
    """Короткое описание токена для сообщений об ошибках."""
    if token is None:
        return "end of input"
    if token.is_group:
        return f"`{token.delimiter.open}`"
    return f"`{token.value}`"


class ParseCursor:
    """
    Позиция в ограниченной последовательности токенов.

    Курсор неизменяемо ссылается на общий список токенов и хранит только
    индекс, поэтому fork() стоит O(1). Для содержимого группы создаётся
    отдельный курсор (braced), конец которого совпадает с закрывающей скобкой.
    """

    # Максимальная глубина просмотра вперёд для peek()
    LOOKAHEAD = 3

    def __init__(self, tokens: Sequence[Token], position: int = 0, end_span: Optional[Span] = None):
        self.tokens = tokens
        self.position = position
        self.length = len(tokens)
        # Место, на которое указывают ошибки при исчерпании токенов
        self.end_span = end_span or self._default_end_span()

    def _default_end_span(self) -> Span:
        if self.tokens:
            last = self.tokens[-1]
            return Span(last.end, last.end, last.line, last.column + (last.end - last.position))
        return Span(0, 0, 1, 1)

    # Навигация

    def is_empty(self) -> bool:
        """Проверяет, достигнут ли конец последовательности."""
        return self.position >= self.length

    def current(self) -> Optional[Token]:
        """Возвращает текущий токен или None в конце последовательности."""
        return self.token_at(1)

    def token_at(self, offset: int = 1) -> Optional[Token]:
        """Возвращает токен на смещении offset (с 1) без продвижения позиции."""
        self._check_offset(offset)
        index = self.position + offset - 1
        if index >= self.length:
            return None
        return self.tokens[index]

    def peek(self, pattern: TokenPattern, offset: int = 1) -> bool:
        """
        Проверяет без потребления, соответствует ли токен на смещении offset шаблону.

        Args:
            pattern: Шаблон токена
            offset: Смещение от текущей позиции, начиная с 1 (не больше LOOKAHEAD)
        """
        return token_matches(self.token_at(offset), pattern)

    def fork(self) -> ParseCursor:
        """Создаёт независимую копию курсора над теми же токенами."""
        return ParseCursor(self.tokens, self.position, self.end_span)

    def advance(self) -> Token:
        """
        Потребляет текущий токен и возвращает его.

        Raises:
            ParserError: Если токены закончились
        """
        token = self.current()
        if token is None:
            raise self.error("Unexpected end of input")
        self.position += 1
        return token

    def match(self, pattern: TokenPattern) -> Optional[Token]:
        """Потребляет текущий токен, если он соответствует шаблону."""
        if self.peek(pattern):
            return self.advance()
        return None

    def consume(self, pattern: TokenPattern, message: Optional[str] = None) -> Token:
        """
        Потребляет токен, соответствующий шаблону.

        Raises:
            ParserError: Если токен не соответствует шаблону
        """
        if not self.peek(pattern):
            if message is None:
                message = f"Expected {_describe_pattern(pattern)}, got {describe(self.current())}"
            raise self.error(message)
        return self.advance()

    def braced(self, message: str = "Expected `{` here") -> ParseCursor:
        """Потребляет группу в фигурных скобках и возвращает курсор по её содержимому."""
        return self.group(Delimiter.BRACE, message)

    def group(self, delimiter: Delimiter, message: Optional[str] = None) -> ParseCursor:
        """Потребляет группу с указанным разделителем и возвращает курсор по её содержимому."""
        token = self.consume(delimiter, message)
        return ParseCursor(token.children, 0, token.closing)

    def ensure_empty(self, message: Optional[str] = None) -> None:
        """
        Требует, чтобы токены закончились.

        Raises:
            ParserError: Если остались непотреблённые токены
        """
        if not self.is_empty():
            if message is None:
                message = f"Unexpected token {describe(self.current())}"
            raise self.error(message)

    # Диагностика

    def span(self) -> Span:
        """Участок текущего токена или конца последовательности."""
        token = self.current()
        return token.span if token is not None else self.end_span

    def span_from(self, start: Span) -> Span:
        """Участок от start до конца последнего потреблённого токена."""
        if self.position == 0:
            return start
        last = self.tokens[self.position - 1]
        return Span(start.position, max(start.end, last.end), start.line, start.column)

    def error(self, message: str) -> ParserError:
        """Создаёт ошибку, указывающую на текущую позицию."""
        return ParserError(message, self.span())

    def _check_offset(self, offset: int) -> None:
        if offset < 1 or offset > self.LOOKAHEAD:
            raise ValueError(f"Lookahead offset must be within 1..{self.LOOKAHEAD}, got {offset}")

    def __repr__(self) -> str:
        return f"ParseCursor(position={self.position}, length={self.length}, current={self.current()!r})"


def _describe_pattern(pattern: TokenPattern) -> str:
    if isinstance(pattern, TokenType):
        return pattern.value.lower()
    if isinstance(pattern, Delimiter):
        return f"`{pattern.open}`"
    return f"`{pattern}`"


__all__ = ["ParseCursor", "TokenPattern", "token_matches", "describe"]
