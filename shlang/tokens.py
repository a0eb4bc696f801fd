"""Token kinds and tokens produced by the lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from shlang.spans import Span


class TokenType(Enum):
    """The kind of a token."""

    STR = "Str"
    AT = "At"
    DOLLAR = "Dollar"
    DUAL_PIPE = "DualPipe"
    DUAL_AMPERSAND = "DualAmpersand"
    NUMBER = "Number"
    IDENTIFIER = "Identifier"
    SEMICOLON = "Semicolon"
    PLUS = "Plus"
    MINUS = "Minus"
    STAR = "Star"
    SLASH = "Slash"
    LPAREN = "LParen"
    RPAREN = "RParen"
    LBRACE = "LBrace"
    RBRACE = "RBrace"
    LBRACKET = "LBracket"
    RBRACKET = "RBracket"
    EQUAL = "Equal"
    DOT = "Dot"
    LESSER = "Lesser"
    GREATER = "Greater"
    GREATER_EQUAL = "GreaterEqual"
    LESSER_EQUAL = "LesserEqual"
    COMMA = "Comma"
    COLON = "Colon"
    BANG = "Bang"
    PERCENT = "Percent"
    DOUBLE_EQUAL = "DoubleEqual"
    BANG_EQUAL = "BangEqual"
    AND = "And"
    NOT = "Not"
    OR = "Or"
    IF = "If"
    ELSE = "Else"
    FUNC = "Func"
    RETURN = "Return"
    LOOP = "Loop"
    WHILE = "While"
    BREAK = "Break"
    FALSE = "False"
    TRUE = "True"
    VAR = "Var"
    DO = "Do"
    AMPERSAND = "Ampersand"
    PIPE = "Pipe"
    NULL = "Null"
    STRUCT = "Struct"
    CONTINUE = "Continue"
    PLUS_EQUAL = "PlusEqual"
    MINUS_EQUAL = "MinusEqual"
    STAR_EQUAL = "StarEqual"
    SLASH_EQUAL = "SlashEqual"
    FOR = "For"
    IN = "In"
    QUESTION = "Question"
    DUAL_QUESTION = "DualQuestion"
    QUESTION_EQUAL = "QuestionEqual"

    def __repr__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Token:
    """A token: its kind, where it sits in the source and, for strings, its text."""

    kind: TokenType
    span: Span
    value: str | None = None

    def is_kind(self, kind: TokenType) -> bool:
        """Whether this token is of the given kind."""
        return self.kind is kind


_KEYWORDS = {
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "func": TokenType.FUNC,
    "return": TokenType.RETURN,
    "loop": TokenType.LOOP,
    "while": TokenType.WHILE,
    "break": TokenType.BREAK,
    "var": TokenType.VAR,
    "and": TokenType.AND,
    "not": TokenType.NOT,
    "or": TokenType.OR,
    "do": TokenType.DO,
    "null": TokenType.NULL,
    "struct": TokenType.STRUCT,
    "continue": TokenType.CONTINUE,
    "for": TokenType.FOR,
    "in": TokenType.IN,
}


def map_keyword(text: str) -> TokenType | None:
    """Return the keyword token kind for ``text``, or None if it is not a keyword."""
    return _KEYWORDS.get(text)