"""Splitting source text into tokens."""

from __future__ import annotations

from shlang.lang_errors import LangError
from shlang.spans import Span
from shlang.tokens import Token, TokenType, map_keyword

_WHITESPACE = frozenset(" \t\r\n")
_ASCII_DIGITS = frozenset("0123456789")

_SINGLE = {
    ".": TokenType.DOT,
    ",": TokenType.COMMA,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "%": TokenType.PERCENT,
    ":": TokenType.COLON,
    ";": TokenType.SEMICOLON,
    "$": TokenType.DOLLAR,
    "@": TokenType.AT,
}

# first char -> (second char, kind alone, kind with second char)
_DOUBLE = {
    "|": ("|", TokenType.PIPE, TokenType.DUAL_PIPE),
    "&": ("&", TokenType.AMPERSAND, TokenType.DUAL_AMPERSAND),
    "+": ("=", TokenType.PLUS, TokenType.PLUS_EQUAL),
    "*": ("=", TokenType.STAR, TokenType.STAR_EQUAL),
    "-": ("=", TokenType.MINUS, TokenType.MINUS_EQUAL),
    "!": ("=", TokenType.BANG, TokenType.BANG_EQUAL),
    "<": ("=", TokenType.LESSER, TokenType.LESSER_EQUAL),
    ">": ("=", TokenType.GREATER, TokenType.GREATER_EQUAL),
    "=": ("=", TokenType.EQUAL, TokenType.DOUBLE_EQUAL),
}

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "\\": "\\",
    "0": "\0",
    '"': '"',
    "'": "'",
}


class LexError(LangError):
    """Raised when the source cannot be split into tokens."""


class Lexer:
    """Iterator over the tokens of a source text."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0

    def __iter__(self) -> "Lexer":
        return self

    def __next__(self) -> Token:
        token = self._scan()
        if token is None:
            raise StopIteration
        return token

    def _peek(self, offset: int = 0) -> str | None:
        index = self._pos + offset
        return self._source[index] if index < len(self._source) else None

    def _advance(self) -> str | None:
        ch = self._peek()
        if ch is not None:
            self._pos += 1
        return ch

    def _scan(self) -> Token | None:
        while True:
            start = self._pos
            ch = self._advance()
            if ch is None:
                return None
            if ch in _WHITESPACE:
                continue
            if ch == "#":
                self._skip_line()
                continue
            if ch == "/":
                following = self._peek()
                if following == "/":
                    self._skip_line()
                    continue
                if following == "*":
                    if not self._skip_block_comment():
                        return None
                    continue
                if following == "=":
                    self._pos += 1
                    return Token(TokenType.SLASH_EQUAL, Span(start, self._pos))
                return Token(TokenType.SLASH, Span(start, start + 1))
            return self._token(ch, start)

    def _token(self, ch: str, start: int) -> Token | None:
        if ch in _SINGLE:
            return Token(_SINGLE[ch], Span(start, start + 1))
        if ch in _DOUBLE:
            second, short, long = _DOUBLE[ch]
            if self._peek() == second:
                self._pos += 1
                return Token(long, Span(start, self._pos))
            return Token(short, Span(start, start + 1))
        if ch in "\"'":
            return self._string(ch, start)
        if ch == "?":
            return self._question(start)
        if ch in _ASCII_DIGITS:
            return self._number(start)
        if ch.isalnum() or ch == "_":
            return self._identifier(start)
        raise LexError(Span(start, start + 1), f"Unexpected Char {ch}")

    def _skip_line(self) -> None:
        while True:
            self._advance()
            following = self._peek()
            if following is None or following == "\n":
                return

    def _skip_block_comment(self) -> bool:
        """Skip a nested block comment; False if the text ends inside it."""
        self._pos += 1
        depth = 1
        while depth:
            pair = self._source[self._pos : self._pos + 2]
            if pair == "*/":
                depth -= 1
                self._pos += 2
            elif pair == "/*":
                depth += 1
                self._pos += 2
            elif self._pos >= len(self._source):
                return False
            else:
                self._pos += 1
        return True

    def _question(self, start: int) -> Token:
        if self._peek() != "?":
            return Token(TokenType.QUESTION, Span(start, start + 1))
        self._pos += 1
        if self._peek() != "=":
            return Token(TokenType.DUAL_QUESTION, Span(start, start + 2))
        self._pos += 1
        return Token(TokenType.QUESTION_EQUAL, Span(start, start + 3))

    def _number(self, start: int) -> Token:
        dots = 0
        while (ch := self._peek()) is not None and (ch.isnumeric() or ch in "._"):
            if ch == ".":
                following = self._peek(1)
                if following is None:
                    raise LexError(Span(start, self._pos + 1), "Invalid Number")
                if following not in _ASCII_DIGITS:
                    break
                dots += 1
            self._pos += 1
        if dots > 1:
            raise LexError(Span(start, self._pos), "Invalid Number")
        return Token(TokenType.NUMBER, Span(start, self._pos))

    def _identifier(self, start: int) -> Token:
        while (ch := self._peek()) is not None and (ch.isalnum() or ch == "_"):
            self._pos += 1
        span = Span(start, self._pos)
        text = self._source[start : self._pos]
        if not text.isascii():
            raise LexError(span, "Identifiers can only be ASCII")
        return Token(map_keyword(text) or TokenType.IDENTIFIER, span)

    def _string(self, quote: str, start: int) -> Token | None:
        chars: list[str] = []
        while True:
            ch = self._advance()
            if ch is None:
                return None
            if ch == "\\":
                escaped = self._advance()
                if escaped is None:
                    return None
                try:
                    chars.append(_ESCAPES[escaped])
                except KeyError:
                    raise LexError(
                        Span(self._pos - 2, self._pos), "invalid escape sequence"
                    ) from None
            elif ch == quote:
                break
            else:
                chars.append(ch)
        return Token(TokenType.STR, Span(start, self._pos), "".join(chars))