"""
Лексер для исходного текста шаблонов.

Разбивает текст на токены по таблице регулярных выражений и собирает
парные скобки в GROUP-токены, так что парсер работает с деревом токенов:
- Идентификаторы (ключевые слова не выделяются отдельно)
- Литералы: строки, символы, целые и вещественные числа
- Разделитель пути ::
- Одиночные символы пунктуации
- Группы ( ... ), [ ... ], { ... }
"""

from __future__ import annotations

import bisect
import logging
import re
from typing import List, Optional, Tuple

from .tokens import Delimiter, LexerError, Span, Token, TokenType

logger = logging.getLogger(__name__)

_INT_SUFFIX = r"(?:[iu](?:8|16|32|64|128|size))?"
_FLOAT_SUFFIX = r"(?:f32|f64)?"
_EXPONENT = r"[eE][+-]?_*\d[\d_]*"


class TemplateLexer:
    """
    Лексер, превращающий текст шаблона в последовательность деревьев токенов.

    Пробельные символы пропускаются, но каждый токен хранит позицию,
    строку и колонку, поэтому парсер может указать точное место ошибки.
    """

    # Спецификация токенов: (regex_pattern, token_type, ignore_flag)
    # Порядок важен: первый совпавший шаблон побеждает.
    TOKEN_SPECS = [
        # Пробелы и переводы строк (игнорируем)
        (r"\s+", "WHITESPACE", True),

        # Сырые строки r"..." и r#"..."# (до идентификаторов)
        (r'r(?P<hashes>#*)"[\s\S]*?"(?P=hashes)', "STRING", False),

        # Обычные строки с экранированием
        (r'"(?:[^"\\]|\\[\s\S])*"', "STRING", False),

        # Символьные литералы
        (r"'(?:[^'\\\n]|\\(?:u\{[0-9a-fA-F_]{1,6}\}|x[0-9a-fA-F]{2}|[^\n]))'", "CHAR", False),

        # Целые в других системах счисления (до десятичных чисел)
        (r"0x[0-9a-fA-F_]+" + _INT_SUFFIX, "INTEGER", False),
        (r"0o[0-7_]+" + _INT_SUFFIX, "INTEGER", False),
        (r"0b[01_]+" + _INT_SUFFIX, "INTEGER", False),

        # Вещественные: 6.5, 6.5e3, 1e3, а также 6. если дальше не точка и не имя
        (r"\d[\d_]*\.\d[\d_]*(?:" + _EXPONENT + r")?" + _FLOAT_SUFFIX, "FLOAT", False),
        (r"\d[\d_]*" + _EXPONENT + _FLOAT_SUFFIX, "FLOAT", False),
        (r"\d[\d_]*(?:f32|f64)", "FLOAT", False),
        (r"\d[\d_]*\.(?![.\w])", "FLOAT", False),

        # Десятичные целые
        (r"\d[\d_]*" + _INT_SUFFIX + r"(?![\w])", "INTEGER", False),
        (r"\d[\d_]*", "INTEGER", False),

        # Идентификаторы (Unicode буквы, цифры, подчёркивания; не с цифры)
        (r"[^\W\d]\w*", "IDENTIFIER", False),

        # Разделитель пути (до одиночной пунктуации)
        (r"::", "PATH_SEP", False),

        # Скобки
        (r"[(\[{]", "OPEN", False),
        (r"[)\]}]", "CLOSE", False),

        # Любой другой одиночный символ
        (r"\S", "PUNCT", False),
    ]

    def __init__(self):
        # Компилируем регулярные выражения для лучшей производительности
        self._compiled_patterns = [
            (re.compile(pattern), token_type, ignore)
            for pattern, token_type, ignore in self.TOKEN_SPECS
        ]

    def tokenize(self, text: str) -> List[Token]:
        """
        Разбивает текст на деревья токенов.

        Args:
            text: Исходный текст шаблона

        Returns:
            Список токенов верхнего уровня (группы содержат вложенные токены)

        Raises:
            LexerError: При несбалансированных или несовпадающих скобках
        """
        lines = _LineIndex(text)

        # Стек открытых групп: (открывающий токен, накопленные дети)
        stack: List[Tuple[Token, List[Token]]] = []
        top: List[Token] = []
        position = 0

        while position < len(text):
            for pattern, token_type, ignore in self._compiled_patterns:
                match = pattern.match(text, position)
                if match:
                    break
            else:
                # Недостижимо: последний шаблон совпадает с любым непробельным символом
                raise _error(lines, "Failed to tokenize", position)

            value = match.group(0)
            end = match.end()
            current = stack[-1][1] if stack else top

            if ignore:
                pass
            elif token_type == "OPEN":
                opener = _make_token(lines, TokenType.GROUP, value, position, end)
                stack.append((opener, []))
            elif token_type == "CLOSE":
                if not stack:
                    raise _error(lines, f"Unexpected closing delimiter `{value}`", position)
                opener, children = stack.pop()
                if opener.delimiter.close != value:
                    raise _error(
                        lines,
                        f"Mismatched closing delimiter `{value}`, expected `{opener.delimiter.close}`",
                        position,
                    )
                group = Token(
                    type=TokenType.GROUP,
                    value=opener.value,
                    position=opener.position,
                    line=opener.line,
                    column=opener.column,
                    end=end,
                    delimiter=opener.delimiter,
                    children=tuple(children),
                    closing=lines.span(position, end),
                )
                (stack[-1][1] if stack else top).append(group)
            else:
                current.append(_make_token(lines, TokenType[token_type], value, position, end))

            position = end

        if stack:
            opener, _ = stack[-1]
            raise _error(lines, f"Unclosed delimiter `{opener.value}`", opener.position)

        logger.debug("Tokenized %d characters into %d top-level tokens", len(text), len(top))
        return top

    def end_span(self, text: str) -> Span:
        """Участок нулевой длины в конце текста (для ошибок "unexpected end of input")."""
        return _LineIndex(text).span(len(text), len(text))


class _LineIndex:
    """Начала строк одного текста: перевод позиции в строку и колонку."""

    def __init__(self, text: str):
        self.starts = [0] + [m.end() for m in re.finditer(r"\n", text)]

    def line_column(self, position: int) -> Tuple[int, int]:
        index = bisect.bisect_right(self.starts, position) - 1
        return index + 1, position - self.starts[index] + 1

    def span(self, position: int, end: int) -> Span:
        line, column = self.line_column(position)
        return Span(position, end, line, column)


def _make_token(lines: _LineIndex, token_type: TokenType, value: str, position: int, end: int) -> Token:
    line, column = lines.line_column(position)
    delimiter: Optional[Delimiter] = None
    if token_type is TokenType.GROUP:
        delimiter = Delimiter.from_open(value)
    return Token(
        type=token_type,
        value=value,
        position=position,
        line=line,
        column=column,
        end=end,
        delimiter=delimiter,
    )


def _error(lines: _LineIndex, message: str, position: int) -> LexerError:
    return LexerError(message, lines.span(position, position + 1))


def tokenize(text: str) -> List[Token]:
    """Удобная функция для токенизации текста шаблона."""
    return TemplateLexer().tokenize(text)


__all__ = ["TemplateLexer", "tokenize"]
