import pytest

from shlang.lang_errors import (
    ErrorBuilder,
    InterpreterError,
    InterpreterErrorKind as IK,
    LangError,
    ParseError,
    ParseErrorKind as PK,
)
from shlang.spans import Span
from shlang.tokens import TokenType


class _Ty:
    def __init__(self, name):
        self.name = name

    def __repr__(self):
        return self.name


def test_line_pos_counts_newlines():
    builder = ErrorBuilder("a\nb\nc")
    assert builder.line_pos(Span(0, 1)) == 1
    assert builder.line_pos(Span(4, 5)) == 3


def test_build_plain_error():
    source = "var x = ;"
    builder = ErrorBuilder(source, color=False)
    assert builder.build("boom", Span(8, 9), False) == "ERROR! boom\n1 | " + source


def test_build_plain_panic():
    builder = ErrorBuilder("x", color=False)
    assert builder.build("boom", Span(0, 1), True).startswith("PANICKED! boom")


def test_build_picks_line_of_span():
    builder = ErrorBuilder("a\nbad\nc", color=False)
    assert builder.build("m", Span(2, 5), False).endswith("2 | bad")


def test_build_colours_span_red():
    builder = ErrorBuilder("a ; b")
    report = builder.build("m", Span(2, 3), False)
    assert "\x1b[31m;\x1b[0m" in report


def test_emit_writes_to_stderr(capsys):
    ErrorBuilder("x", color=False).emit("bad", Span(0, 1))
    assert capsys.readouterr().err == "ERROR! bad\n1 | x\n"


def test_parse_error_invalid_token_message():
    err = ParseError(PK.INVALID_TOKEN, Span(0, 1), TokenType.IDENTIFIER, TokenType.NUMBER)
    assert err.message() == "expected token Identifier but got token Number"


def test_parse_error_is_raisable():
    with pytest.raises(LangError) as info:
        raise ParseError(PK.UNEXPECTED_TOKEN, Span(0, 1), TokenType.RBRACE)
    assert str(info.value) == "Unexpected token RBrace"
    assert info.value.span == Span(0, 1)


@pytest.mark.parametrize(
    ("kind", "text"),
    [
        (PK.UNEXPECTED_STREAM_END, "Expected To find another token but none was found"),
        (PK.UNEXPECTED_VOID_EXPRESSION, "Unexpected void expression"),
        (PK.UNTERMINATED_PARENTHESES, "Unterminated parentheses"),
        (PK.UNEXPECTED_TOPLEVEL, "Unexpected token at toplevel"),
    ],
)
def test_parse_error_fixed_messages(kind, text):
    assert ParseError(kind, Span.EMPTY).message() == text


def test_parse_error_unspecified_message():
    msg = "Unexpected expression for constructor"
    assert ParseError(PK.UNSPECIFIED, Span(0, 1), msg).message() == msg


def test_print_msg(capsys):
    err = ParseError(PK.UNEXPECTED_VOID_EXPRESSION, Span(0, 1))
    err.print_msg(ErrorBuilder("x", color=False))
    assert capsys.readouterr().err.startswith("ERROR! Unexpected void expression")


def test_arg_size_message():
    err = InterpreterError(IK.INVALID_ARG_SIZE, Span(0, 1), 1, 2)
    assert err.message() == "Invalid argument size expected 1 argument but got 2 arguments"


def test_invalid_type_messages():
    many = InterpreterError(IK.INVALID_TYPE, Span(0, 1), [_Ty("Num"), _Ty("Str")], _Ty("Bool"))
    assert many.message() == 'Invalid types expected: "Num or  Str" but got Bool'
    one = InterpreterError(IK.INVALID_TYPE, Span(0, 1), [_Ty("Num")], _Ty("Bool"))
    assert one.message() == 'Invalid type expected: "Num" but got Bool'


def test_method_not_found_messages():
    assert (
        InterpreterError(IK.METHOD_NOT_FOUND, Span(0, 1), "len", None).message()
        == "Method len not found."
    )
    assert (
        InterpreterError(IK.METHOD_NOT_FOUND, Span(0, 1), "len", "Foo").message()
        == "Method len not found on Foo "
    )


def test_non_existent_var_message():
    err = InterpreterError(IK.NON_EXISTENT_VAR, Span(0, 1), "abc")
    assert err.message() == "Couldnt find variable with name: abc"


def test_panic_prints_panicked(capsys):
    err = InterpreterError(IK.PANIC, Span(0, 1), "stop")
    err.print_msg(ErrorBuilder("x", color=False))
    assert capsys.readouterr().err.startswith("PANICKED! stop")