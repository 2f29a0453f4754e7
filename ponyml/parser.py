"""
Синтаксический анализатор шаблонов.

Связывает разметку, интерполяцию и блоки: выбирает правило для очередного
узла-потомка по просмотру вперёд, ограничивает глубину вложенности и
предоставляет точки входа для разбора текста целиком.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Tuple, Union

from . import blocks, markup, mustache
from .config import DEFAULT_CONFIG, ParserConfig
from .cursor import ParseCursor, describe
from .expressions import ExpressionParser, TokenRunExpressionParser
from .formatting import FormatSpecParser
from .lexer import TemplateLexer
from .nodes import Child, FormatSpec, Root, TemplateNode
from .tokens import ParserError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChildRule:
    """
    Правило разбора узла-потомка.
    """
    name: str                                            # Имя правила (для отладки)
    peek: Callable[[ParseCursor], bool]                  # Применимо ли правило в текущей позиции
    parse: Callable[[TemplateParser, ParseCursor], Child]  # Функция разбора


def _parse_stray_tag(parser: TemplateParser, cursor: ParseCursor) -> Child:
    raise blocks.stray_tag_error(cursor)


def _parse_stray_closing_tag(parser: TemplateParser, cursor: ParseCursor) -> Child:
    raise cursor.error("Unexpected closing tag here")


# Порядок важен: первое подходящее правило побеждает.
# Блоки и одиночные разделители проверяются раньше интерполяции,
# так как все три начинаются с группы `{...}`.
CHILD_RULES: Tuple[ChildRule, ...] = (
    ChildRule("fragment", markup.peek_fragment, markup.parse_fragment),
    ChildRule("element", markup.peek_element, markup.parse_element),
    ChildRule("comment", markup.peek_comment, lambda p, c: markup.parse_comment(c)),
    ChildRule("block", blocks.peek_block, blocks.parse_block),
    ChildRule("stray-divider", blocks.peek_stray_tag, _parse_stray_tag),
    ChildRule("mustache", mustache.peek_mustache, mustache.parse_mustache),
    ChildRule("stray-closing-tag", markup.peek_closing_tag, _parse_stray_closing_tag),
    ChildRule("text", markup.peek_text, lambda p, c: markup.parse_text(c)),
)


class TemplateParser:
    """
    Парсер шаблонов с рекурсивным спуском.

    Реализует протокол TemplateParserHandlers: парсеры разметки и блоков
    вызывают parse_child для вложенных узлов. Глубина вложенности
    ограничена config.max_depth.
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        expressions: Optional[ExpressionParser] = None,
    ):
        """
        Args:
            config: Настройки парсера (по умолчанию DEFAULT_CONFIG)
            expressions: Парсер встроенных выражений (по умолчанию TokenRunExpressionParser)
        """
        self._config = config or DEFAULT_CONFIG
        self._expressions = expressions or TokenRunExpressionParser()
        self._format_parser = FormatSpecParser()
        self._depth = 0

    @property
    def config(self) -> ParserConfig:
        return self._config

    @property
    def expressions(self) -> ExpressionParser:
        return self._expressions

    # Разбор узлов

    def parse_root(self, cursor: ParseCursor) -> Root:
        """Разбирает корень: элемент или фрагмент."""
        with self.nesting(cursor):
            return markup.parse_root(self, cursor)

    def parse_child(self, cursor: ParseCursor) -> Child:
        """
        Разбирает один узел-потомок, применяя первое подходящее правило.

        Raises:
            ParserError: Если ни одно правило не подходит (например, одиночный `>`)
        """
        with self.nesting(cursor):
            for rule in CHILD_RULES:
                if rule.peek(cursor):
                    return rule.parse(self, cursor)
            raise cursor.error(f"Unexpected {describe(cursor.current())} here")

    def parse_children(self, cursor: ParseCursor) -> Tuple[Child, ...]:
        """Разбирает узлы-потомки до конца курсора."""
        children: List[Child] = []
        while not cursor.is_empty():
            children.append(self.parse_child(cursor))
        return tuple(children)

    def parse_format_spec(self, cursor: ParseCursor) -> FormatSpec:
        return self._format_parser.parse(cursor)

    @contextmanager
    def nesting(self, cursor: ParseCursor) -> Iterator[None]:
        """
        Учитывает вход в очередной уровень вложенности.

        Raises:
            ParserError: Если глубина превышает config.max_depth
        """
        self._depth += 1
        try:
            if self._depth > self._config.max_depth:
                raise cursor.error(f"Maximum nesting depth of {self._config.max_depth} exceeded")
            yield
        finally:
            self._depth -= 1


# ---------------------------------------------------------------------------
# Точки входа
# ---------------------------------------------------------------------------

def _parse_element_rule(parser: TemplateParser, cursor: ParseCursor) -> TemplateNode:
    if not markup.peek_element(cursor):
        raise cursor.error("Expected an element here")
    with parser.nesting(cursor):
        return markup.parse_element(parser, cursor)


def _parse_fragment_rule(parser: TemplateParser, cursor: ParseCursor) -> TemplateNode:
    if not markup.peek_fragment(cursor):
        raise cursor.error("Expected a fragment here")
    with parser.nesting(cursor):
        return markup.parse_fragment(parser, cursor)


def _parse_block_rule(parser: TemplateParser, cursor: ParseCursor) -> TemplateNode:
    if not blocks.peek_block(cursor):
        raise cursor.error("Expected a block here")
    with parser.nesting(cursor):
        return blocks.parse_block(parser, cursor)


def _parse_mustache_rule(parser: TemplateParser, cursor: ParseCursor) -> TemplateNode:
    return mustache.parse_mustache(parser, cursor)


def _parse_comment_rule(parser: TemplateParser, cursor: ParseCursor) -> TemplateNode:
    if not markup.peek_comment(cursor):
        raise cursor.error("Expected `<!--` here")
    return markup.parse_comment(cursor)


ParseResult = Union[TemplateNode, Tuple[Child, ...]]

RULES: Dict[str, Callable[[TemplateParser, ParseCursor], ParseResult]] = {
    "root": lambda p, c: p.parse_root(c),
    "element": _parse_element_rule,
    "fragment": _parse_fragment_rule,
    "child": lambda p, c: p.parse_child(c),
    "children": lambda p, c: p.parse_children(c),
    "block": _parse_block_rule,
    "mustache": _parse_mustache_rule,
    "comment": _parse_comment_rule,
}


def parse_str(
    text: str,
    rule: str = "root",
    config: Optional[ParserConfig] = None,
    expressions: Optional[ExpressionParser] = None,
) -> ParseResult:
    """
    Разбирает весь текст как одну продукцию грамматики.

    Args:
        text: Исходный текст
        rule: Имя продукции (root, element, fragment, child, children, block, mustache, comment)
        config: Настройки парсера
        expressions: Парсер встроенных выражений

    Returns:
        Узел AST (для children - кортеж узлов)

    Raises:
        ParserError: При синтаксической ошибке или лишних токенах после продукции
        ValueError: При неизвестном имени продукции
    """
    if rule not in RULES:
        raise ValueError(f"Unknown rule: {rule!r}. Expected one of: {', '.join(RULES)}")

    lexer = TemplateLexer()
    tokens = lexer.tokenize(text)
    cursor = ParseCursor(tokens, 0, lexer.end_span(text))

    parser = TemplateParser(config, expressions)
    try:
        result = RULES[rule](parser, cursor)
    except RecursionError:
        # max_depth задан выше, чем позволяет стек интерпретатора
        raise ParserError("Maximum nesting depth exceeded", cursor.span()) from None
    cursor.ensure_empty()

    logger.debug(f"Parsed {rule!r} from {len(tokens)} top-level tokens")
    return result


def parse_template(
    text: str,
    config: Optional[ParserConfig] = None,
    expressions: Optional[ExpressionParser] = None,
) -> Root:
    """
    Разбирает шаблон целиком: единственный корневой элемент или фрагмент.

    Raises:
        ParserError: При синтаксической ошибке
    """
    return parse_str(text, "root", config, expressions)


__all__ = ["ChildRule", "CHILD_RULES", "TemplateParser", "RULES", "parse_str", "parse_template"]
