"""
Тесты интерполяции {expr} и {expr:format}.
"""

import pytest

from ponyml.nodes import (
    Align,
    AlignDirection,
    CountPrecision,
    FormatKind,
    FormatSpec,
    FormatType,
    Mustache,
)
from ponyml.tokens import ParserError
from tests.infrastructure import parse


def mustache(text: str) -> Mustache:
    return parse(text, "mustache")


class TestMustache:

    def test_plain_expression(self):
        node = mustache("{name}")
        assert node.expression.source == "name"
        assert node.formatting is None

    def test_path_is_not_a_format_separator(self):
        node = mustache("{a::b::c}")
        assert node.expression.source == "a::b::c"
        assert node.formatting is None

    def test_method_call(self):
        node = mustache("{items.len():>8}")
        assert node.expression.source == "items.len()"
        assert node.formatting == FormatSpec(align=Align(AlignDirection.RIGHT), width=8)

    def test_colon_inside_group_belongs_to_expression(self):
        node = mustache("{map[a:b]:?}")
        assert node.expression.source == "map[a:b]"
        assert node.formatting.type == FormatType(FormatKind.DEBUG)

    def test_fill_align_and_debug(self):
        node = mustache("{count:'0'>3?}")
        assert node.formatting == FormatSpec(
            align=Align(AlignDirection.RIGHT, "0"),
            width=3,
            type=FormatType(FormatKind.DEBUG),
        )

    def test_fill_without_width(self):
        node = mustache("{apple:'2'>?}")
        assert node.formatting.align == Align(AlignDirection.RIGHT, "2")
        assert node.formatting.width is None

    def test_zero_padding(self):
        node = mustache("{x:05.2}")
        assert (node.formatting.zero, node.formatting.width) == (True, 5)
        assert node.formatting.precision == CountPrecision(2)

    def test_empty_format_after_colon(self):
        node = mustache("{value:}")
        assert node.formatting == FormatSpec()

    def test_empty_mustache(self):
        with pytest.raises(ParserError, match="Expected an expression here") as exc:
            mustache("{}")
        assert exc.value.column == 2

    def test_expression_required_before_colon(self):
        with pytest.raises(ParserError, match="Expected an expression here"):
            mustache("{:?}")

    def test_trailing_tokens_after_format(self):
        with pytest.raises(ParserError, match="Unexpected token `:`"):
            mustache("{x:y:z}")

    def test_bad_format_spec(self):
        with pytest.raises(ParserError, match="Expected maximum one leading `0` here"):
            mustache("{x:007}")

    def test_mustache_as_child(self):
        (node,) = parse("{user.name:?}", "children")
        assert isinstance(node, Mustache)
        assert node.expression.source == "user.name"
