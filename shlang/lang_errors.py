"""Language errors and the rendering of error reports."""

from __future__ import annotations

import sys
from enum import Enum, auto

from shlang.spans import Span

_RED = "\x1b[31m"
_BLUE = "\x1b[34m"
_RESET = "\x1b[0m"


class ErrorBuilder:
    """Renders messages that point at a span of a source text."""

    def __init__(self, source: str, color: bool = True) -> None:
        self.source = source
        self.color = color

    def _paint(self, text: str, code: str) -> str:
        return f"{code}{text}{_RESET}" if self.color else text

    def emit(self, msg: str, span: Span) -> None:
        """Print an error report to standard error."""
        print(self.build(msg, span, False), file=sys.stderr)

    def emit_panic(self, msg: str, span: Span) -> None:
        """Print a panic report to standard error."""
        print(self.build(msg, span, True), file=sys.stderr)

    def build(self, msg: str, span: Span, panicked: bool) -> str:
        """Build the report: a heading and the marked source line."""
        position = self.line_pos(span)
        src = self.source
        marked = (
            src[: span.start]
            + self._paint(src[span.start : span.stop], _RED)
            + src[span.stop :]
        )
        lines = [line.removesuffix("\r") for line in marked.split("\n")]
        line = lines[position - 1] if position <= len(lines) else ""
        label = (
            self._paint("PANICKED!", _BLUE) if panicked else self._paint("ERROR!", _RED)
        )
        return f"{label} {msg}\n{position} {self._paint('|', _BLUE)} {line}"

    def line_pos(self, span: Span) -> int:
        """One-based line number where the span starts."""
        return self.source[: span.start].count("\n") + 1


class LangError(Exception):
    """An error in a program, tied to the span where it happened."""

    def __init__(self, span: Span, message: str = "") -> None:
        super().__init__(message)
        self.span = span
        self._message = message

    def message(self) -> str:
        """Human-readable description of the error."""
        return self._message

    def print_msg(self, err_out: ErrorBuilder) -> None:
        """Print a report for this error using ``err_out``."""
        err_out.emit(self.message(), self.span)

    def __str__(self) -> str:
        return self.message()


def _debug_str(text: str) -> str:
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
        .replace("\r", "\\r")
        .replace("\0", "\\0")
    )
    return f'"{escaped}"'


class ParseErrorKind(Enum):
    UNSPECIFIED = auto()
    INVALID_TOKEN = auto()
    UNEXPECTED_TOKEN = auto()
    UNEXPECTED_TOPLEVEL = auto()
    UNTERMINATED_PARENTHESES = auto()
    UNEXPECTED_STREAM_END = auto()
    UNEXPECTED_FIELD_NODE = auto()
    UNEXPECTED_VOID_EXPRESSION = auto()


class ParseError(LangError):
    """An error found while parsing; ``payload`` carries the kind's details."""

    def __init__(self, kind: ParseErrorKind, span: Span, *payload: object) -> None:
        self.kind = kind
        self.payload = payload
        super().__init__(span)

    def message(self) -> str:
        match self.kind:
            case ParseErrorKind.INVALID_TOKEN:
                expected, got = self.payload
                return f"expected token {expected!r} but got token {got!r}"
            case ParseErrorKind.UNEXPECTED_TOKEN:
                return f"Unexpected token {self.payload[0]!r}"
            case ParseErrorKind.UNEXPECTED_TOPLEVEL:
                return "Unexpected token at toplevel"
            case ParseErrorKind.UNEXPECTED_STREAM_END:
                return "Expected To find another token but none was found"
            case ParseErrorKind.UNTERMINATED_PARENTHESES:
                return "Unterminated parentheses"
            case ParseErrorKind.UNEXPECTED_FIELD_NODE:
                return "Invalid Node in struct feilds"
            case ParseErrorKind.UNEXPECTED_VOID_EXPRESSION:
                return "Unexpected void expression"
            case _:
                return str(self.payload[0]) if self.payload else ""


class InterpreterErrorKind(Enum):
    MIXED_TYPES = auto()
    INVALID_TYPE = auto()
    INVALID_CONTROL = auto()
    VOID_ASSIGNMENT = auto()
    NON_EXISTENT_VAR = auto()
    METHOD_NOT_FOUND = auto()
    INVALID_ASSIGNMENT = auto()
    INVALID_CONSTRUCTOR = auto()
    INVALID_OP = auto()
    INVALID_ARG_SIZE = auto()
    INVALID_BINARY = auto()
    PANIC = auto()
    UNSPECIFIED = auto()


class InterpreterError(LangError):
    """An error raised while running a program; ``payload`` carries details."""

    def __init__(self, kind: InterpreterErrorKind, span: Span, *payload: object) -> None:
        self.kind = kind
        self.payload = payload
        super().__init__(span)

    def message(self) -> str:
        p = self.payload
        match self.kind:
            case InterpreterErrorKind.METHOD_NOT_FOUND:
                method, owner = p
                if owner is None:
                    return f"Method {method} not found."
                return f"Method {method} not found on {owner} "
            case InterpreterErrorKind.MIXED_TYPES:
                return f"Mixed types: {p[0]!r} and {p[1]!r}"
            case InterpreterErrorKind.INVALID_TYPE:
                accepted, got = p
                opts = ", ".join(repr(t) for t in accepted).replace(",", " or ")
                plural = "types" if len(accepted) > 1 else "type"
                return f"Invalid {plural} expected: {_debug_str(opts)} but got {got!r}"
            case InterpreterErrorKind.INVALID_CONTROL:
                return "Unexpected control flow node"
            case InterpreterErrorKind.VOID_ASSIGNMENT:
                return "Attempted to assign void to a variable"
            case InterpreterErrorKind.NON_EXISTENT_VAR:
                return f"Couldnt find variable with name: {p[0]}"
            case InterpreterErrorKind.INVALID_ASSIGNMENT:
                return f"Attempted to assign to non existent variable with name: {p[0]}"
            case InterpreterErrorKind.INVALID_CONSTRUCTOR:
                return "Attempted to construct a non existent struct"
            case InterpreterErrorKind.INVALID_OP:
                return f"Cant do {p[0]!r} operation with type {p[1]!r}"
            case InterpreterErrorKind.INVALID_ARG_SIZE:
                expected, got = p
                expected_txt = "argument" if expected == 1 else "arguments"
                got_txt = "argument" if got == 1 else "arguments"
                return (
                    f"Invalid argument size expected {expected} {expected_txt} "
                    f"but got {got} {got_txt}"
                )
            case InterpreterErrorKind.INVALID_BINARY:
                return f"Invalid type in binary operation: {p[0]!r}"
            case _:
                return str(p[0]) if p else ""

    def print_msg(self, err_out: ErrorBuilder) -> None:
        if self.kind is InterpreterErrorKind.PANIC:
            err_out.emit_panic(self.message(), self.span)
        else:
            err_out.emit(self.message(), self.span)