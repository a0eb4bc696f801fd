"""Command line entry point: show tokens or syntax trees of programs."""

from __future__ import annotations

import sys
from typing import Callable

from shlang.lang_errors import ErrorBuilder, LangError
from shlang.lexer import Lexer
from shlang.parser import Parser
from shlang.tokens import TokenType

_AST_COMMANDS = frozenset({"ast", "a"})
_LEX_COMMANDS = frozenset({"lex", "lexer", "l"})
_HELP_COMMANDS = frozenset({"help", "h"})

_HELP = """Help

no args - starts a repl that prints the AST of each line
<file path> - checks the file for syntax errors
<ast,a> <optional file path> - reads input either from the repl or from a file and outputs the AST as text
<lex,lexer,l> <optional file path> - reads input either from the repl or from a file and lexes it printing it to stdout
"""


def lex_text(source: str) -> str:
    """One line per token: the token's text and a description of it."""
    lines = []
    for token in Lexer(source):
        text = source[token.span.start : token.span.stop]
        desc = f"{token.kind!r} {token.span!r}"
        if token.kind is TokenType.STR:
            desc += f" {token.value!r}"
        lines.append(f"{text} <-> {desc}")
    return "\n".join(lines)


def ast_text(source: str) -> str:
    """The parsed program as text: body nodes, then named functions."""
    body, functions = Parser(source).parse()
    lines = [repr(node) for node in body]
    lines.extend(f"{name} = {func!r}" for name, func in functions.items())
    return "\n".join(lines)


def _report(err: LangError, source: str, path: str | None = None) -> None:
    err.print_msg(ErrorBuilder(source, color=sys.stderr.isatty()))
    if path is not None:
        print(f"At file: {path}", file=sys.stderr)


def _render(source: str, render: Callable[[str], str], path: str | None = None) -> int:
    try:
        output = render(source)
    except LangError as err:
        _report(err, source, path)
        return 1
    if output:
        print(output)
    return 0


def _read(path: str) -> str | None:
    try:
        with open(path, encoding="utf-8") as handle:
            return handle.read()
    except OSError as err:
        print(f"Could not read {path}: {err}", file=sys.stderr)
        return None


def _from_file(path: str, render: Callable[[str], str]) -> int:
    source = _read(path)
    if source is None:
        return 1
    return _render(source, render, path)


def _check_file(path: str) -> int:
    source = _read(path)
    if source is None:
        return 1
    try:
        Parser(source).parse()
    except LangError as err:
        _report(err, source, path)
        return 1
    return 0


def _repl(render: Callable[[str], str]) -> int:
    while True:
        try:
            line = input(">: ")
        except (EOFError, KeyboardInterrupt):
            print()
            return 0
        _render(line.strip(), render)


def main(argv: list[str] | None = None) -> int:
    """Run the command line; returns the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        return _repl(ast_text)
    command = args[0].lower()
    if len(args) == 1:
        if command in _AST_COMMANDS:
            return _repl(ast_text)
        if command in _LEX_COMMANDS:
            return _repl(lex_text)
        if command in _HELP_COMMANDS:
            print(_HELP)
            return 0
        return _check_file(args[0])
    if len(args) == 2:
        if command in _AST_COMMANDS:
            return _from_file(args[1], ast_text)
        if command in _LEX_COMMANDS:
            return _from_file(args[1], lex_text)
        print(f"Invalid command: {args[0]}", file=sys.stderr)
        return 2
    print("invalid commands", file=sys.stderr)
    return 2


if __name__ == "__main__":
    sys.exit(main())