# shlang

Front end and value model for shlang, a small dynamically typed scripting
language. The package has:

- `shlang.lexer`: the `Lexer`, an iterator of `Token`s (`shlang.tokens`)
- `shlang.parser`: the `Parser`, a Pratt parser that builds a syntax tree of
  span-annotated nodes (`shlang.nodes`)
- `shlang.lang_errors`: `ParseError`, `InterpreterError` and `ErrorBuilder`,
  which renders an error with the source line it points at
- `shlang.values`: runtime values (`Scope`, `Struct`, `Function`, `Closure`,
  `BuiltinFunc`, `Heap`, `Ref`, `Type`) and `display` for printing them
- `shlang.spans`: `Span` and `Spanned`
- `shlang.cli`: the `shlang` command

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Command line

```
shlang                   # read lines interactively and print their syntax tree
shlang <file>            # check a file for syntax errors (exit status 1 on error)
shlang ast <file>        # print the syntax tree of a file
shlang lex <file>        # print every token of a file with its text
shlang ast               # read lines interactively and print their syntax tree
shlang lex               # read lines interactively and print their tokens
shlang help              # show usage
```

`a` is short for `ast`; `l` and `lexer` are short for `lex`. Syntax errors are
printed to standard error together with the offending line.

## Library use

```python
from shlang.lexer import Lexer
from shlang.parser import Parser
from shlang.cli import ast_text, lex_text

for token in Lexer("var a = 1 + 2;"):
    print(token.kind, token.span)

body, functions = Parser("func add(a, b) { a + b } add(1, 2)").parse()

print(ast_text("a.b().c"))
print(lex_text("x += 1"))
```

`Parser.parse` returns the top-level statements and a dict of named function
definitions (`FuncDef` nodes). `Parser.parse_expr` parses a single expression.
Syntax errors are raised as `shlang.lang_errors.ParseError`; the lexer raises
`shlang.lexer.LexError`. Both are `LangError`s carrying a `Span`, and
`print_msg` renders them through an `ErrorBuilder`:

```python
from shlang.lang_errors import ErrorBuilder, ParseError
from shlang.parser import Parser

source = "var = 1"
try:
    Parser(source).parse()
except ParseError as err:
    err.print_msg(ErrorBuilder(source))
```

## Language at a glance

```
var x = 10;
func square(n) { n * n }
var inc = @(n) n + 1;
struct Point { var x = 0; var y = 0; };
var p = Point{x: 1, y: 2};
for item in [1, 2, 3] { square(item) }
while (x > 0) { x -= 1; }
if (x == 0) { "done" } else { "busy" }
var name = null ?? "anonymous";
```

A condition that ends in a binary operator followed by a block, such as
`x > 0 {`, is read as a constructor call on the right operand; put such
conditions in parentheses.

Comments are `# ...`, `// ...` and nestable `/* ... */`.

## What it does not do

The package reads and parses shlang programs and models their runtime values,
but it does not evaluate them: there is no interpreter and no built-in
functions. `shlang <file>` only checks a file's syntax, and the interactive
prompt prints syntax trees rather than results.