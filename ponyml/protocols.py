"""
Протоколы для взаимодействия частей парсера.

Парсеры разметки, интерполяции и блоков не знают о конкретном классе
ядра: они получают объект handlers и через него рекурсивно разбирают
вложенные узлы, обращаются к парсеру выражений и к конфигурации.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .config import ParserConfig
    from .cursor import ParseCursor
    from .expressions import ExpressionParser
    from .nodes import Child, FormatSpec


@runtime_checkable
class TemplateParserHandlers(Protocol):
    """
    Протокол обработчиков ядра для подпарсеров.

    Определяет типизированный интерфейс для вызова функций ядра
    из парсеров разметки и блоков без циклических импортов.
    """

    @property
    def config(self) -> ParserConfig:
        """Текущая конфигурация парсера."""
        ...

    @property
    def expressions(self) -> ExpressionParser:
        """Парсер встроенных выражений и образцов."""
        ...

    def parse_child(self, cursor: ParseCursor) -> Child:
        """
        Разбирает один узел-потомок в текущей позиции.

        Выбирает подходящее правило по просмотру вперёд (фрагмент, элемент,
        комментарий, блок, интерполяция, текст). Используется для
        рекурсивного разбора тел элементов, фрагментов и блоков.

        Raises:
            ParserError: Если ни одно правило не применимо или разбор не удался
        """
        ...

    def parse_format_spec(self, cursor: ParseCursor) -> FormatSpec:
        """Разбирает спецификацию форматирования до конца курсора."""
        ...


__all__ = ["TemplateParserHandlers"]
