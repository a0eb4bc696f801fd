import pytest

from shlang.lang_errors import LangError
from shlang.lexer import LexError, Lexer
from shlang.tokens import TokenType as T


def kinds(source):
    return [token.kind for token in Lexer(source)]


def texts(source):
    return [source[t.span.start : t.span.stop] for t in Lexer(source)]


def test_declaration_kinds():
    assert kinds("var a = 1;") == [T.VAR, T.IDENTIFIER, T.EQUAL, T.NUMBER, T.SEMICOLON]


def test_spans_cover_token_text():
    assert texts("var a = 1;") == ["var", "a", "=", "1", ";"]


def test_lexer_is_its_own_iterator():
    lexer = Lexer("a")
    assert iter(lexer) is lexer
    assert next(lexer).kind is T.IDENTIFIER
    with pytest.raises(StopIteration):
        next(lexer)


def test_number_with_underscores_and_fraction():
    source = "1_000.5"
    tokens = list(Lexer(source))
    assert [t.kind for t in tokens] == [T.NUMBER]
    assert texts(source) == [source]


def test_member_access_is_not_a_number():
    assert kinds("a.b") == [T.IDENTIFIER, T.DOT, T.IDENTIFIER]
    assert kinds("1.x") == [T.NUMBER, T.DOT, T.IDENTIFIER]


def test_two_dots_is_invalid_number():
    with pytest.raises(LexError) as info:
        list(Lexer("1.2.3"))
    assert str(info.value) == "Invalid Number"


def test_trailing_dot_is_invalid_number():
    with pytest.raises(LexError):
        list(Lexer("1."))


def test_string_escapes():
    tokens = list(Lexer('"a\\nb\\t\\"q\\""'))
    assert len(tokens) == 1
    assert tokens[0].kind is T.STR
    assert tokens[0].value == 'a\nb\t"q"'


def test_single_quoted_string_and_span():
    source = "'it\\'s'"
    (token,) = Lexer(source)
    assert token.value == "it's"
    assert source[token.span.start : token.span.stop] == source


def test_unicode_in_string():
    (token,) = Lexer('"héllo"')
    assert token.value == "héllo"


def test_invalid_escape():
    with pytest.raises(LexError) as info:
        list(Lexer('"\\q"'))
    assert str(info.value) == "invalid escape sequence"


def test_unterminated_string_ends_stream():
    assert kinds('a "abc') == [T.IDENTIFIER]


def test_two_char_operators():
    source = "+= -= *= /= == != <= >= && || ?? ??="
    assert kinds(source) == [
        T.PLUS_EQUAL,
        T.MINUS_EQUAL,
        T.STAR_EQUAL,
        T.SLASH_EQUAL,
        T.DOUBLE_EQUAL,
        T.BANG_EQUAL,
        T.LESSER_EQUAL,
        T.GREATER_EQUAL,
        T.DUAL_AMPERSAND,
        T.DUAL_PIPE,
        T.DUAL_QUESTION,
        T.QUESTION_EQUAL,
    ]
    assert texts(source) == source.split()


def test_single_char_operators():
    assert kinds("+ - * / = ! < > & | ? % : $ @") == [
        T.PLUS,
        T.MINUS,
        T.STAR,
        T.SLASH,
        T.EQUAL,
        T.BANG,
        T.LESSER,
        T.GREATER,
        T.AMPERSAND,
        T.PIPE,
        T.QUESTION,
        T.PERCENT,
        T.COLON,
        T.DOLLAR,
        T.AT,
    ]


def test_nullish_between_identifiers():
    assert kinds("a??b") == [T.IDENTIFIER, T.DUAL_QUESTION, T.IDENTIFIER]


def test_brackets():
    assert kinds("({[]})") == [T.LPAREN, T.LBRACE, T.LBRACKET, T.RBRACKET, T.RBRACE, T.RPAREN]


def test_keywords():
    assert kinds("if else func while for in null") == [
        T.IF,
        T.ELSE,
        T.FUNC,
        T.WHILE,
        T.FOR,
        T.IN,
        T.NULL,
    ]


def test_line_comments():
    assert kinds("1 // c\n2") == [T.NUMBER, T.NUMBER]
    assert kinds("1 # c\n2") == [T.NUMBER, T.NUMBER]
    assert kinds("1 // c") == [T.NUMBER]


def test_nested_block_comment():
    assert kinds("1 /* a /* b */ c */ 2") == [T.NUMBER, T.NUMBER]


def test_unterminated_block_comment_ends_stream():
    assert kinds("1 /* x") == [T.NUMBER]


def test_unexpected_char():
    with pytest.raises(LexError) as info:
        list(Lexer("a ~"))
    assert str(info.value) == "Unexpected Char ~"
    assert isinstance(info.value, LangError)


def test_non_ascii_identifier_rejected():
    with pytest.raises(LexError) as info:
        list(Lexer("é"))
    assert str(info.value) == "Identifiers can only be ASCII"