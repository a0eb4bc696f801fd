import io

import pytest

from shlang.cli import ast_text, lex_text, main
from shlang.lang_errors import ParseError
from shlang.lexer import Lexer


def test_lex_text_one_line_per_token():
    source = "var a = 'hi'"
    lines = lex_text(source).splitlines()
    assert len(lines) == len(list(Lexer(source)))
    assert lines[0].startswith("var <-> ")
    assert lines[1].startswith("a <-> ")
    assert "'hi'" in lines[-1]


def test_lex_text_empty_source():
    assert lex_text("") == ""


def test_ast_text_shows_nodes_and_functions():
    output = ast_text("func f(x){x}\n1+2")
    lines = output.splitlines()
    assert len(lines) == 2
    assert "Number(1)" in lines[0]
    assert lines[1].startswith("f = Function(x)")


def test_ast_text_raises_on_bad_syntax():
    with pytest.raises(ParseError):
        ast_text("var 1")


def test_help(capsys):
    assert main(["help"]) == 0
    assert "no args" in capsys.readouterr().out


def test_lex_file(tmp_path, capsys):
    path = tmp_path / "prog.sh"
    path.write_text("a + 1")
    assert main(["lex", str(path)]) == 0
    assert capsys.readouterr().out.strip() == lex_text("a + 1")


def test_ast_file(tmp_path, capsys):
    path = tmp_path / "prog.sh"
    path.write_text("b = 1")
    assert main(["ast", str(path)]) == 0
    assert capsys.readouterr().out.strip() == ast_text("b = 1")


def test_check_file_reports_errors(tmp_path, capsys):
    path = tmp_path / "bad.sh"
    path.write_text("var 1")
    assert main([str(path)]) == 1
    err = capsys.readouterr().err
    assert "expected token" in err
    assert f"At file: {path}" in err


def test_check_file_ok(tmp_path):
    path = tmp_path / "good.sh"
    path.write_text("var a = 1\na + 1")
    assert main([str(path)]) == 0


def test_missing_file(tmp_path):
    assert main([str(tmp_path / "missing.sh")]) == 1


def test_invalid_commands():
    assert main(["a", "b", "c"]) == 2
    assert main(["bogus", "file"]) == 2


def test_lex_repl(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("var a\n"))
    assert main(["lex"]) == 0
    out = capsys.readouterr().out
    assert lex_text("var a") in out


def test_ast_repl_reports_errors_and_continues(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("var 1\n1+2\n"))
    assert main([]) == 0
    captured = capsys.readouterr()
    assert "expected token" in captured.err
    assert ast_text("1+2") in captured.out