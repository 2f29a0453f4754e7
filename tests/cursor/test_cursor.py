"""
Тесты курсора по токенам: просмотр вперёд, копии и потребление.
"""

import pytest

from ponyml.cursor import ParseCursor, describe
from ponyml.lexer import TemplateLexer
from ponyml.tokens import Delimiter, ParserError, TokenType


def cursor_for(text: str) -> ParseCursor:
    lexer = TemplateLexer()
    return ParseCursor(lexer.tokenize(text), 0, lexer.end_span(text))


class TestParseCursor:

    def test_peek_by_type_value_and_delimiter(self):
        cursor = cursor_for("< a {b}")
        assert cursor.peek("<")
        assert cursor.peek(TokenType.PUNCT)
        assert cursor.peek("a", 2)
        assert cursor.peek(TokenType.IDENTIFIER, 2)
        assert cursor.peek(Delimiter.BRACE, 3)
        assert not cursor.peek(Delimiter.PAREN, 3)

    def test_peek_does_not_consume(self):
        cursor = cursor_for("a b")
        cursor.peek("a")
        cursor.peek("b", 2)
        assert cursor.position == 0

    def test_peek_past_end_is_false(self):
        cursor = cursor_for("a")
        assert not cursor.peek("a", 2)
        assert not cursor.peek(TokenType.IDENTIFIER, 3)

    def test_lookahead_is_bounded(self):
        """Просмотр дальше трёх токенов запрещён"""
        cursor = cursor_for("a b c d")
        with pytest.raises(ValueError):
            cursor.peek("d", 4)
        with pytest.raises(ValueError):
            cursor.peek("a", 0)

    def test_exact_text_matches_only_simple_tokens(self):
        """Строковый шаблон не совпадает со строковым литералом с тем же текстом"""
        cursor = cursor_for('"a"')
        assert not cursor.peek('"a"')
        assert cursor.peek(TokenType.STRING)

    def test_fork_is_independent(self):
        cursor = cursor_for("a b c")
        fork = cursor.fork()
        fork.advance()
        fork.advance()
        assert cursor.peek("a")
        assert fork.peek("c")

    def test_match(self):
        cursor = cursor_for("a b")
        assert cursor.match("b") is None
        assert cursor.match("a").value == "a"
        assert cursor.peek("b")

    def test_consume_reports_expected_token(self):
        cursor = cursor_for("<")
        with pytest.raises(ParserError, match="Expected `>`, got `<`"):
            cursor.consume(">")

    def test_consume_custom_message(self):
        cursor = cursor_for("x")
        with pytest.raises(ParserError, match="Expected an element name here"):
            cursor.consume(TokenType.INTEGER, "Expected an element name here")

    def test_advance_at_end(self):
        cursor = cursor_for("")
        with pytest.raises(ParserError, match="Unexpected end of input"):
            cursor.advance()

    def test_ensure_empty(self):
        cursor = cursor_for("a b")
        cursor.advance()
        with pytest.raises(ParserError, match="Unexpected token `b`") as exc:
            cursor.ensure_empty()
        assert exc.value.column == 3

    def test_braced_returns_inner_cursor(self):
        cursor = cursor_for("{a b} c")
        inner = cursor.braced()
        assert inner.peek("a")
        assert inner.peek("b", 2)
        assert not inner.peek("c", 3)
        assert cursor.peek("c")

    def test_errors_in_empty_group_point_at_closing_brace(self):
        cursor = cursor_for("{ }")
        inner = cursor.braced()
        assert inner.is_empty()
        err = inner.error("Expected an expression here")
        assert (err.line, err.column) == (1, 3)

    def test_braced_requires_brace_group(self):
        cursor = cursor_for("(a)")
        with pytest.raises(ParserError):
            cursor.braced()

    def test_error_at_end_uses_end_span(self):
        cursor = cursor_for("a\nbc")
        cursor.advance()
        cursor.advance()
        err = cursor.error("boom")
        assert (err.line, err.column) == (2, 3)
        assert str(err) == "boom at 2:3"

    def test_describe(self):
        cursor = cursor_for("{x} y")
        assert describe(cursor.current()) == "`{`"
        assert describe(cursor.token_at(2)) == "`y`"
        assert describe(None) == "end of input"
