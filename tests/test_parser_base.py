import pytest

from shlang.lang_errors import ParseError, ParseErrorKind
from shlang.lexer import Lexer
from shlang.nodes import (
    Declaration,
    DontResult,
    Null,
    Number,
    ResultNode,
    Variable,
)
from shlang.parser_base import ParserBase
from shlang.spans import Span, Spanned
from shlang.tokens import TokenType


def first_token(source):
    return next(iter(Lexer(source)))


def test_text_returns_token_source():
    source = "abc + 1"
    parser = ParserBase(source)
    assert parser.text(first_token(source)) == "abc"


def test_filtered_text_removes_character():
    source = "1_000_000"
    parser = ParserBase(source)
    assert parser.filtered_text(first_token(source), "_") == "1000000"


def test_parse_num_ignores_underscores():
    source = "1_000"
    parser = ParserBase(source)
    assert parser.parse_num(first_token(source)) == Number(1000.0)


def test_parse_num_float():
    source = "3.25"
    parser = ParserBase(source)
    assert parser.parse_num(first_token(source)) == Number(3.25)


def test_peek_does_not_advance():
    parser = ParserBase("a b")
    first = parser._peek()
    assert parser._peek() == first
    assert parser._next() == first
    assert parser.text(parser._peek()) == "b"


def test_peek_some_on_empty_stream_raises():
    parser = ParserBase("")
    with pytest.raises(ParseError) as info:
        parser._peek_some()
    assert info.value.kind is ParseErrorKind.UNEXPECTED_STREAM_END
    assert info.value.span == Span.EMPTY


def test_consume_wrong_kind_raises_invalid_token():
    parser = ParserBase("1")
    with pytest.raises(ParseError) as info:
        parser._consume(TokenType.IDENTIFIER)
    assert info.value.kind is ParseErrorKind.INVALID_TOKEN
    assert info.value.payload == (TokenType.IDENTIFIER, TokenType.NUMBER)


def test_consume_ident_advances():
    parser = ParserBase("name ;")
    assert parser._consume_ident() == "name"
    assert parser._peek().kind is TokenType.SEMICOLON


def test_is_expected_returns_none_for_other_kind():
    parser = ParserBase("x")
    assert parser._is_expected(TokenType.NUMBER) is None
    assert parser._is_expected(TokenType.IDENTIFIER).kind is TokenType.IDENTIFIER


def test_filter_block_empty():
    assert ParserBase._filter_block([]) == []


def test_filter_block_wraps_trailing_value():
    decl = Spanned(Declaration("a", Spanned(Null(), Span(0, 1))), Span(0, 5))
    value = Spanned(Variable("a"), Span(6, 7))
    result = ParserBase._filter_block([decl, value])
    assert result[0] == decl
    assert result[1] == Spanned(ResultNode(value), value.span)


def test_filter_block_drops_dont_result_without_wrapping():
    value = Spanned(Number(1.0), Span(0, 1))
    marker = Spanned(DontResult(), Span(0, 0))
    assert ParserBase._filter_block([value, marker]) == [value]


def test_filter_block_leaves_trailing_declaration():
    value = Spanned(Number(1.0), Span(0, 1))
    decl = Spanned(Declaration("a", value), Span(2, 8))
    assert ParserBase._filter_block([value, decl]) == [value, decl]


def test_expect_expr_rejects_declaration():
    decl = Spanned(Declaration("a", Spanned(Null(), Span(0, 1))), Span(0, 5))
    with pytest.raises(ParseError) as info:
        ParserBase._expect_expr(decl)
    assert info.value.kind is ParseErrorKind.UNEXPECTED_VOID_EXPRESSION
    assert info.value.span == decl.span