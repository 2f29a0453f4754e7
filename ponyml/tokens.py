"""
Лексические типы для парсера шаблонов.

Определяет модель токенов (включая группы-деревья в скобках),
позиционную информацию и ошибки синтаксического анализа.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from .errors import PonymlUserError


class TokenType(enum.Enum):
    """Категории токенов, которые выдаёт лексер."""

    IDENTIFIER = "IDENTIFIER"   # имена и ключевые слова (if, else, match, case)
    STRING = "STRING"           # "..." и r"..."
    CHAR = "CHAR"               # 'c'
    INTEGER = "INTEGER"         # 42, 0x2a, 7u8
    FLOAT = "FLOAT"             # 6.5, 6., 1e3, 2.0f64
    PATH_SEP = "PATH_SEP"       # ::
    PUNCT = "PUNCT"             # любой другой одиночный символ
    GROUP = "GROUP"             # ( ... ), [ ... ], { ... }


class Delimiter(enum.Enum):
    """Разделители групп токенов."""

    PAREN = ("(", ")")
    BRACKET = ("[", "]")
    BRACE = ("{", "}")

    @property
    def open(self) -> str:
        return self.value[0]

    @property
    def close(self) -> str:
        return self.value[1]

    @classmethod
    def from_open(cls, char: str) -> Delimiter:
        for delimiter in cls:
            if delimiter.open == char:
                return delimiter
        raise ValueError(f"Not an opening delimiter: {char!r}")

    @classmethod
    def from_close(cls, char: str) -> Delimiter:
        for delimiter in cls:
            if delimiter.close == char:
                return delimiter
        raise ValueError(f"Not a closing delimiter: {char!r}")


@dataclass(frozen=True)
class Span:
    """Участок исходного текста: [position, end), строка и колонка начала (с 1)."""
    position: int
    end: int
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class Token:
    """
    Токен с позиционной информацией для точной диагностики ошибок.

    Для GROUP-токенов value содержит открывающую скобку, children -
    вложенные токены, а closing - положение закрывающей скобки.
    """
    type: TokenType
    value: str
    position: int        # Позиция в исходном тексте
    line: int            # Номер строки (начиная с 1)
    column: int          # Номер колонки (начиная с 1)
    end: int             # Позиция сразу за токеном (для группы - за закрывающей скобкой)
    delimiter: Optional[Delimiter] = None
    children: Tuple[Token, ...] = ()
    closing: Optional[Span] = None

    @property
    def span(self) -> Span:
        return Span(self.position, self.end, self.line, self.column)

    @property
    def is_group(self) -> bool:
        return self.type is TokenType.GROUP

    def __repr__(self) -> str:
        if self.is_group:
            return f"Token(GROUP, {self.delimiter.open!r}, {len(self.children)} children, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


def render_tokens(tokens: Iterable[Token]) -> str:
    """
    Восстанавливает текст последовательности токенов.

    Токены склеиваются по исходному тексту; там, где в источнике между
    соседними токенами были пробельные символы, вставляется ровно один пробел.
    """
    parts: List[str] = []
    # Стек уровней: (итератор по токенам уровня, группа этого уровня)
    stack: List[Tuple[Iterator[Token], Optional[Token]]] = [(iter(tokens), None)]
    prev_end: Optional[int] = None

    while stack:
        level, group = stack[-1]
        token = next(level, None)

        if token is None:
            stack.pop()
            if group is not None:
                if group.closing is not None and group.closing.position > prev_end:
                    parts.append(" ")
                parts.append(group.delimiter.close)
                prev_end = group.end
            continue

        if prev_end is not None and token.position > prev_end:
            parts.append(" ")
        if token.is_group:
            parts.append(token.delimiter.open)
            prev_end = token.position + 1
            stack.append((iter(token.children), token))
        else:
            parts.append(token.value)
            prev_end = token.end

    return "".join(parts)


class ParserError(PonymlUserError):
    """Ошибка синтаксического анализа: сообщение и участок исходного текста."""

    def __init__(self, message: str, span: Span):
        super().__init__(f"{message} at {span.line}:{span.column}")
        self.message = message
        self.span = span
        self.line = span.line
        self.column = span.column


class LexerError(ParserError):
    """Ошибка лексического анализа."""
    pass


__all__ = [
    "TokenType",
    "Delimiter",
    "Span",
    "Token",
    "render_tokens",
    "ParserError",
    "LexerError",
]
