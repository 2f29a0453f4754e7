"""
AST-узлы шаблона.

Определяет иерархию неизменяемых классов узлов: разметку (элементы,
фрагменты, атрибуты, текст, комментарии), интерполяцию со спецификацией
форматирования и управляющие блоки if/match.

Все последовательности хранятся в кортежах, поэтому узлы можно сравнивать
и хешировать. Поле span не участвует в сравнении.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from .tokens import Span, Token, render_tokens


@dataclass(frozen=True)
class TemplateNode:
    """Базовый класс для всех узлов AST шаблона."""
    span: Optional[Span] = field(default=None, compare=False, repr=False, kw_only=True)


# ---------------------------------------------------------------------------
# Непрозрачные узлы внешнего парсера выражений
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Expression(TemplateNode):
    """
    Выражение встроенного языка: условие блока, значение атрибута,
    содержимое интерполяции. Хранится как последовательность токенов.
    """
    tokens: Tuple[Token, ...]

    @property
    def source(self) -> str:
        return render_tokens(self.tokens)

    def __str__(self) -> str:
        return self.source


@dataclass(frozen=True)
class Pattern(TemplateNode):
    """Образец ветки {:case}: одна или несколько альтернатив, разделённых `|`."""
    alternatives: Tuple[Expression, ...]

    @property
    def source(self) -> str:
        return " | ".join(alt.source for alt in self.alternatives)

    def __str__(self) -> str:
        return self.source


# ---------------------------------------------------------------------------
# Разметка
# ---------------------------------------------------------------------------

_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F_]{1,6}\}|x[0-9a-fA-F]{2}|\n\s*|.)", re.DOTALL)
_SIMPLE_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "0": "\0", "\\": "\\", "'": "'", '"': '"'}


def unescape(body: str) -> str:
    """Раскрывает escape-последовательности в теле строкового или символьного литерала."""

    def _replace(m: re.Match) -> str:
        esc = m.group(1)
        if esc.startswith("u{"):
            return chr(int(esc[2:-1].replace("_", ""), 16))
        if esc.startswith("x") and len(esc) == 3:
            return chr(int(esc[1:], 16))
        if esc.startswith("\n"):
            # Перенос строки после `\` пропускается вместе с ведущими пробелами
            return ""
        return _SIMPLE_ESCAPES.get(esc, esc)

    return _ESCAPE_RE.sub(_replace, body)


def literal_value(raw: str) -> str:
    """Значение строкового или символьного литерала по его исходному тексту."""
    if raw.startswith("r"):
        hashes = len(raw) - len(raw.lstrip("r#")) - 1
        return raw[hashes + 2:len(raw) - hashes - 1]
    return unescape(raw[1:-1])


@dataclass(frozen=True)
class StringLiteral(TemplateNode):
    """Строковый литерал в значении атрибута: исходный текст вместе с кавычками."""
    raw: str

    @property
    def value(self) -> str:
        return literal_value(self.raw)

    def __str__(self) -> str:
        return self.raw


# Значение атрибута: строковый литерал или выражение в фигурных скобках
AttributeValue = Union[StringLiteral, Expression]


@dataclass(frozen=True)
class ElementName(TemplateNode):
    """
    Имя элемента: идентификатор или путь (a::b, a.b).

    Для сопоставления открывающего и закрывающего тегов используются
    только сегменты-идентификаторы.
    """
    segments: Tuple[str, ...]
    separators: Tuple[str, ...] = ()

    def __str__(self) -> str:
        parts = [self.segments[0]]
        for index, segment in enumerate(self.segments[1:]):
            separator = self.separators[index] if index < len(self.separators) else "::"
            parts.append(separator)
            parts.append(segment)
        return "".join(parts)


@dataclass(frozen=True)
class NamedAttribute(TemplateNode):
    """
    Именованный атрибут: key="literal", key={expr} или просто key.

    Атрибут без значения означает булев флаг присутствия.
    """
    key: str
    value: Optional[AttributeValue] = None


@dataclass(frozen=True)
class SpreadAttribute(TemplateNode):
    """Распаковка атрибутов: {..expr}"""
    expression: Expression


Attribute = Union[NamedAttribute, SpreadAttribute]


@dataclass(frozen=True)
class Text(TemplateNode):
    """Сырой текст между другими узлами: непрерывная последовательность токенов."""
    tokens: Tuple[Token, ...]

    @property
    def text(self) -> str:
        return render_tokens(self.tokens)


@dataclass(frozen=True)
class Comment(TemplateNode):
    """Комментарий <!-- ... -->, содержимое хранится как последовательность токенов."""
    tokens: Tuple[Token, ...]

    @property
    def text(self) -> str:
        return render_tokens(self.tokens)


@dataclass(frozen=True)
class OpeningElement(TemplateNode):
    """Открывающий тег <name attrs...>"""
    name: ElementName
    attributes: Tuple[Attribute, ...] = ()


@dataclass(frozen=True)
class ClosingElement(TemplateNode):
    """Закрывающий тег </name>"""
    name: ElementName


@dataclass(frozen=True)
class ClosedElement(TemplateNode):
    """
    Элемент с телом: <name attrs...> children </name>

    Имя закрывающего тега совпадает с именем открывающего посегментно.
    """
    opening: OpeningElement
    children: Tuple[Child, ...]
    closing: ClosingElement

    @property
    def name(self) -> ElementName:
        return self.opening.name

    @property
    def attributes(self) -> Tuple[Attribute, ...]:
        return self.opening.attributes


@dataclass(frozen=True)
class SelfClosingElement(TemplateNode):
    """Самозакрывающийся элемент <name attrs.../>, детей нет."""
    name: ElementName
    attributes: Tuple[Attribute, ...] = ()

    @property
    def children(self) -> Tuple[Child, ...]:
        return ()


Element = Union[ClosedElement, SelfClosingElement]


@dataclass(frozen=True)
class Fragment(TemplateNode):
    """Фрагмент <> children </>: дети без имени и атрибутов."""
    children: Tuple[Child, ...] = ()


# ---------------------------------------------------------------------------
# Спецификация форматирования
# ---------------------------------------------------------------------------

class AlignDirection(enum.Enum):
    """Направление выравнивания."""
    LEFT = "<"
    CENTER = "^"
    RIGHT = ">"


class Sign(enum.Enum):
    """Флаг знака."""
    POSITIVE = "+"
    NEGATIVE = "-"


def _char_literal(char: str) -> str:
    if char in ("'", "\\"):
        return f"'\\{char}'"
    if char == "\n":
        return "'\\n'"
    if char == "\t":
        return "'\\t'"
    if char == "\r":
        return "'\\r'"
    return f"'{char}'"


@dataclass(frozen=True)
class Align:
    """Выравнивание с необязательным символом-заполнителем."""
    direction: AlignDirection
    fill: Optional[str] = None

    def __str__(self) -> str:
        fill = _char_literal(self.fill) if self.fill is not None else ""
        return f"{fill}{self.direction.value}"


@dataclass(frozen=True)
class StarPrecision:
    """Точность `.*`: передаётся отдельным аргументом в месте использования."""

    def __str__(self) -> str:
        return "*"


@dataclass(frozen=True)
class CountPrecision:
    """Точность-число: `.5`"""
    count: int

    def __str__(self) -> str:
        return str(self.count)


@dataclass(frozen=True)
class ParameterPrecision:
    """Точность из именованного параметра: `.name$`"""
    name: str

    def __str__(self) -> str:
        return f"{self.name}$"


Precision = Union[StarPrecision, CountPrecision, ParameterPrecision]


class FormatKind(enum.Enum):
    """Тип вывода значения."""
    DISPLAY = "display"
    DEBUG = "debug"
    DEBUG_LOWER_HEX = "debug-lower-hex"
    DEBUG_UPPER_HEX = "debug-upper-hex"
    OTHER = "other"


@dataclass(frozen=True)
class FormatType:
    """
    Тип форматирования. Для OTHER в name хранится идентификатор,
    который интерпретирует внешний генератор кода.
    """
    kind: FormatKind = FormatKind.DISPLAY
    name: Optional[str] = None

    def __str__(self) -> str:
        if self.kind is FormatKind.DISPLAY:
            return ""
        if self.kind is FormatKind.DEBUG:
            return "?"
        if self.kind is FormatKind.DEBUG_LOWER_HEX:
            return "x?"
        if self.kind is FormatKind.DEBUG_UPPER_HEX:
            return "X?"
        return self.name or ""


@dataclass(frozen=True)
class FormatSpec(TemplateNode):
    """
    Спецификация форматирования после `:` в интерполяции.

    Поля следуют строго в порядке грамматики:
    align, sign, pretty (#), zero (0), width, precision, type.
    """
    align: Optional[Align] = None
    sign: Optional[Sign] = None
    pretty: bool = False
    zero: bool = False
    width: Optional[int] = None
    precision: Optional[Precision] = None
    type: FormatType = field(default_factory=FormatType)

    def __str__(self) -> str:
        """Восстанавливает исходный текст спецификации (повторный разбор даёт равный объект)."""
        out = ""
        if self.align is not None:
            out += str(self.align)
        if self.sign is not None:
            out += self.sign.value
        if self.pretty:
            out += "#"
        if self.zero:
            out += "0"
        if self.width is not None:
            out += str(self.width)
        if self.precision is not None:
            out += "." + str(self.precision)
        type_text = str(self.type)
        if type_text and out and (out[-1].isalnum() or out[-1] == "_") and (type_text[0].isalnum() or type_text[0] == "_"):
            # Иначе "6" + "x" или "6.5" + "e3" склеятся в один числовой литерал
            out += " "
        return out + type_text


@dataclass(frozen=True)
class Mustache(TemplateNode):
    """Интерполяция {expr} или {expr:format}."""
    expression: Expression
    formatting: Optional[FormatSpec] = None


# Альтернативное имя, принятое в описании языка
Interpolation = Mustache


# ---------------------------------------------------------------------------
# Управляющие блоки
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ElseDivider(TemplateNode):
    """Разделитель {:else}"""

    def __str__(self) -> str:
        return "{:else}"


@dataclass(frozen=True)
class ElseIfDivider(TemplateNode):
    """Разделитель {:else if condition}"""
    condition: Expression

    def __str__(self) -> str:
        return f"{{:else if {self.condition.source}}}"


IfDivider = Union[ElseDivider, ElseIfDivider]


@dataclass(frozen=True)
class IfBlock(TemplateNode):
    """
    Условный блок:
    {#if cond} children ({:else if cond} children | {:else} children)* {/if}
    """
    condition: Expression
    children: Tuple[Child, ...] = ()
    dividers: Tuple[Tuple[IfDivider, Tuple[Child, ...]], ...] = ()


@dataclass(frozen=True)
class CaseDivider(TemplateNode):
    """Разделитель {:case pattern} или {:case pattern if guard}"""
    pattern: Pattern
    guard: Optional[Expression] = None

    def __str__(self) -> str:
        guard = f" if {self.guard.source}" if self.guard is not None else ""
        return f"{{:case {self.pattern.source}{guard}}}"


@dataclass(frozen=True)
class MatchBlock(TemplateNode):
    """
    Блок сопоставления с образцом:
    {#match expr} comments* ({:case pattern (if guard)?} children)* {/match}
    """
    expression: Expression
    comments: Tuple[Comment, ...] = ()
    cases: Tuple[Tuple[CaseDivider, Tuple[Child, ...]], ...] = ()


Block = Union[IfBlock, MatchBlock]

# Узел-потомок внутри элемента, фрагмента или блока
Child = Union[Text, ClosedElement, SelfClosingElement, Fragment, Mustache, Comment, IfBlock, MatchBlock]

# Корень разбора
Root = Union[ClosedElement, SelfClosingElement, Fragment]


__all__ = [
    "TemplateNode",
    "Expression",
    "Pattern",
    "unescape",
    "literal_value",
    "StringLiteral",
    "AttributeValue",
    "ElementName",
    "NamedAttribute",
    "SpreadAttribute",
    "Attribute",
    "Text",
    "Comment",
    "OpeningElement",
    "ClosingElement",
    "ClosedElement",
    "SelfClosingElement",
    "Element",
    "Fragment",
    "AlignDirection",
    "Sign",
    "Align",
    "StarPrecision",
    "CountPrecision",
    "ParameterPrecision",
    "Precision",
    "FormatKind",
    "FormatType",
    "FormatSpec",
    "Mustache",
    "Interpolation",
    "ElseDivider",
    "ElseIfDivider",
    "IfDivider",
    "IfBlock",
    "CaseDivider",
    "MatchBlock",
    "Block",
    "Child",
    "Root",
]
