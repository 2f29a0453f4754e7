"""
Тесты блока сопоставления {#match}.
"""

import re
import textwrap

import pytest

from ponyml.nodes import CaseDivider, ClosedElement, Comment, IfBlock, MatchBlock, Mustache
from ponyml.parser import parse_template
from ponyml.tokens import ParserError
from tests.infrastructure import parse, sources, texts


QUANTITY = textwrap.dedent("""\
    {#match qty}
        <!-- Only Comments can go before cases-->
        {:case 0}
            <T>Zero</T>
        {:case 1}
            <T>Singular</T>
        {:case 3..}
            <T>Many</T>
    {/match}
""")

FOOD = textwrap.dedent("""\
    <Food>
        {#match food}
            {:case Food::Fruit(Fruit::Apple(Apple { color, .. }))}
                A {color} Apple.
            {:case _}
                <!-- Not an apple -->
        {/match}
    </Food>
""")


class TestMatchBlock:

    def test_cases_in_order(self):
        block = parse(QUANTITY, "block")
        assert isinstance(block, MatchBlock)
        assert block.expression.source == "qty"
        assert texts(block.comments) == ["Only Comments can go before cases"]

        patterns = [case.pattern.source for case, _ in block.cases]
        assert patterns == ["0", "1", "3.."]
        assert all(case.guard is None for case, _ in block.cases)

        bodies = [body for _, body in block.cases]
        assert all(isinstance(body[0], ClosedElement) for body in bodies)
        assert [texts(body[0].children) for body in bodies] == [["Zero"], ["Singular"], ["Many"]]

    def test_nested_pattern(self):
        root = parse_template(FOOD)
        (block,) = root.children
        (apple, apple_body), (wildcard, wildcard_body) = block.cases
        assert apple.pattern.source == "Food::Fruit(Fruit::Apple(Apple { color, .. }))"
        assert isinstance(apple_body[1], Mustache)
        assert texts([apple_body[0], apple_body[2]]) == ["A", "Apple."]
        assert wildcard.pattern.source == "_"
        assert [type(c) for c in wildcard_body] == [Comment]

    def test_alternatives(self):
        block = parse("{#match n}{:case | 1 | 2}few{/match}", "block")
        case, _ = block.cases[0]
        assert sources(case.pattern.alternatives) == ["1", "2"]
        assert case.pattern.source == "1 | 2"

    def test_alternatives_inside_group_are_one_pattern(self):
        block = parse("{#match n}{:case Some(1 | 2)}x{/match}", "block")
        case, _ = block.cases[0]
        assert sources(case.pattern.alternatives) == ["Some(1 | 2)"]

    def test_guard(self):
        block = parse("{#match opt}{:case Some(x) if x > 5}big{/match}", "block")
        case, body = block.cases[0]
        assert case == CaseDivider(case.pattern, case.guard)
        assert case.pattern.source == "Some(x)"
        assert case.guard.source == "x > 5"
        assert texts(body) == ["big"]

    def test_no_cases(self):
        block = parse("{#match x}{/match}", "block")
        assert block.comments == ()
        assert block.cases == ()

    def test_empty_case_body(self):
        block = parse("{#match x}{:case 1}{:case 2}two{/match}", "block")
        assert block.cases[0][1] == ()
        assert texts(block.cases[1][1]) == ["two"]

    def test_blocks_inside_cases(self):
        block = parse("{#match x}{:case 1}{#if y}a{:else}b{/if}{/match}", "block")
        (inner,) = block.cases[0][1]
        assert isinstance(inner, IfBlock)

    def test_only_comments_before_first_case(self):
        with pytest.raises(ParserError, match=re.escape("Only comments may appear before the first `{:case ...}`")):
            parse("{#match x} text {:case 1}{/match}", "block")

    @pytest.mark.parametrize("text", [
        "{#match x}{:case}{/match}",
        "{#match x}{:case 1 |}{/match}",
        "{#match x}{:case if y}{/match}",
    ])
    def test_empty_pattern(self, text):
        with pytest.raises(ParserError, match="Expected a pattern here"):
            parse(text, "block")

    def test_empty_guard(self):
        with pytest.raises(ParserError, match="Expected an expression here"):
            parse("{#match x}{:case 1 if}{/match}", "block")

    def test_missing_scrutinee(self):
        with pytest.raises(ParserError, match="Expected an expression here"):
            parse("{#match}{/match}", "block")

    def test_unclosed(self):
        with pytest.raises(ParserError, match=re.escape("Unexpected end of input, expected `{/match}`")):
            parse("{#match x}{:case 1} y", "block")

    def test_tokens_in_closing_tag(self):
        with pytest.raises(ParserError, match=re.escape("Unexpected token in `{/match}`")):
            parse("{#match x}{/match x}", "block")

    def test_stray_case(self):
        with pytest.raises(ParserError, match=re.escape("Unexpected `{:case}` outside of a matching block")):
            parse_template("<p>{:case 1}</p>")
