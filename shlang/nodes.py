"""Syntax tree nodes and the operator tables the parser uses."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum, auto
from typing import Union

from shlang.spans import Spanned
from shlang.tokens import TokenType
from shlang.values import display


class Precedence(IntEnum):
    """Binding strength of operators, from weakest to strongest."""

    LOWEST = auto()
    ASSIGN = auto()  # =
    OR = auto()  # or, ||
    AND = auto()  # and, &&
    EQUALITY = auto()  # ==, !=
    COMPARISON = auto()  # <, >, <=, >=
    NULLISH = auto()  # ??
    SUM = auto()  # +, -
    PRODUCT = auto()  # *, /, %
    UNARY = auto()  # -, !
    CALL = auto()  # f()
    INDEX = auto()  # xs[0]
    CONSTRUCTOR = auto()  # Obj{x: 10}
    MEMBER = auto()  # obj.field


class BinaryOp(Enum):
    ADD = "Add"
    SUBTRACT = "Subtract"
    DIVIDE = "Divide"
    MULTIPLY = "Multiply"
    MODULO = "Modulo"
    AND = "And"
    OR = "OR"
    IS_EQUAL = "IsEqual"
    IS_DIFFERENT = "IsDifferent"
    GREATER = "Greater"
    LESSER = "Lesser"
    GREATER_OR_EQUAL = "GreaterOrEqual"
    LESSER_OR_EQUAL = "LesserOrEqual"
    NULL_COALESCING = "NullCoalescing"

    def __repr__(self) -> str:
        return self.value


class UnaryOp(Enum):
    NEGATIVE = "NEGATIVE"
    NOT = "NOT"

    def __repr__(self) -> str:
        return self.value


_PRECEDENCE = {
    TokenType.EQUAL: Precedence.ASSIGN,
    TokenType.QUESTION_EQUAL: Precedence.ASSIGN,
    TokenType.PLUS_EQUAL: Precedence.ASSIGN,
    TokenType.MINUS_EQUAL: Precedence.ASSIGN,
    TokenType.STAR_EQUAL: Precedence.ASSIGN,
    TokenType.SLASH_EQUAL: Precedence.ASSIGN,
    TokenType.OR: Precedence.OR,
    TokenType.DUAL_PIPE: Precedence.OR,
    TokenType.AND: Precedence.AND,
    TokenType.DUAL_AMPERSAND: Precedence.AND,
    TokenType.DOUBLE_EQUAL: Precedence.EQUALITY,
    TokenType.BANG_EQUAL: Precedence.EQUALITY,
    TokenType.GREATER: Precedence.COMPARISON,
    TokenType.GREATER_EQUAL: Precedence.COMPARISON,
    TokenType.LESSER: Precedence.COMPARISON,
    TokenType.LESSER_EQUAL: Precedence.COMPARISON,
    TokenType.DUAL_QUESTION: Precedence.NULLISH,
    TokenType.PLUS: Precedence.SUM,
    TokenType.MINUS: Precedence.SUM,
    TokenType.SLASH: Precedence.PRODUCT,
    TokenType.STAR: Precedence.PRODUCT,
    TokenType.PERCENT: Precedence.PRODUCT,
    TokenType.LPAREN: Precedence.CALL,
    TokenType.LBRACE: Precedence.CONSTRUCTOR,
    TokenType.LBRACKET: Precedence.INDEX,
    TokenType.DOT: Precedence.MEMBER,
}

_BINARY_OPS = {
    TokenType.PLUS: BinaryOp.ADD,
    TokenType.MINUS: BinaryOp.SUBTRACT,
    TokenType.SLASH: BinaryOp.DIVIDE,
    TokenType.STAR: BinaryOp.MULTIPLY,
    TokenType.PERCENT: BinaryOp.MODULO,
    TokenType.AND: BinaryOp.AND,
    TokenType.DUAL_AMPERSAND: BinaryOp.AND,
    TokenType.OR: BinaryOp.OR,
    TokenType.DUAL_PIPE: BinaryOp.OR,
    TokenType.DOUBLE_EQUAL: BinaryOp.IS_EQUAL,
    TokenType.BANG_EQUAL: BinaryOp.IS_DIFFERENT,
    TokenType.GREATER: BinaryOp.GREATER,
    TokenType.LESSER: BinaryOp.LESSER,
    TokenType.GREATER_EQUAL: BinaryOp.GREATER_OR_EQUAL,
    TokenType.LESSER_EQUAL: BinaryOp.LESSER_OR_EQUAL,
    TokenType.DUAL_QUESTION: BinaryOp.NULL_COALESCING,
}


def precedence_of(kind: TokenType) -> Precedence:
    """The precedence a token has when it follows an expression."""
    return _PRECEDENCE.get(kind, Precedence.LOWEST)


def binary_op_from(kind: TokenType) -> BinaryOp:
    """The binary operator a token stands for."""
    try:
        return _BINARY_OPS[kind]
    except KeyError:
        raise ValueError(f"Cannot convert token type {kind!r} to a BinaryOp") from None


def _block_repr(block: list) -> str:
    return "{" + ", ".join(repr(node) for node in block) + "}"


@dataclass
class Number:
    value: float

    def __repr__(self) -> str:
        return f"Number({display(float(self.value))})"


@dataclass
class Null:
    def __repr__(self) -> str:
        return "Null"


@dataclass
class Bool:
    value: bool

    def __repr__(self) -> str:
        return "true" if self.value else "false"


@dataclass
class Str:
    value: str

    def __repr__(self) -> str:
        return f'"{self.value}"'


@dataclass
class BinaryNode:
    kind: BinaryOp
    left: "NodeSpan"
    right: "NodeSpan"

    def is_op(self, kind: BinaryOp) -> bool:
        return self.kind is kind


@dataclass
class UnaryNode:
    kind: UnaryOp
    object: "NodeSpan"


@dataclass
class ResultNode:
    value: "NodeSpan"

    def __repr__(self) -> str:
        return f"Result({self.value.item!r})"


@dataclass
class ReturnNode:
    value: "NodeSpan"

    def __repr__(self) -> str:
        return f"Return({self.value.item!r})"


@dataclass
class BreakNode:
    def __repr__(self) -> str:
        return "Break"


@dataclass
class ContinueNode:
    def __repr__(self) -> str:
        return "continue"


@dataclass
class Declaration:
    var_name: str
    value: "NodeSpan"

    def __repr__(self) -> str:
        return f"Declare({self.var_name}) as {self.value!r}"


@dataclass
class Assignment:
    target: "NodeSpan"
    value: "NodeSpan"


@dataclass
class Variable:
    name: str

    def __repr__(self) -> str:
        return f"Var({self.name})"


@dataclass
class Index:
    target: "NodeSpan"
    index: "NodeSpan"

    def __repr__(self) -> str:
        return f"Index {{ target: {self.target!r}, index: {self.index!r} }}"


@dataclass
class FuncDef:
    block: list["NodeSpan"]
    args: list[str]
    captures: bool = False

    def __repr__(self) -> str:
        head = "Closure" if self.captures else "Function"
        return f"{head}({', '.join(self.args)}){_block_repr(self.block)}"


@dataclass
class ListLit:
    items: list["NodeSpan"]

    def __repr__(self) -> str:
        return "List" + _block_repr(self.items)


@dataclass
class Call:
    callee: "NodeSpan"
    args: list["NodeSpan"]


@dataclass
class Branch:
    condition: "NodeSpan"
    if_block: list["NodeSpan"]
    else_block: list["NodeSpan"] | None = None


@dataclass
class Loop:
    block: list["NodeSpan"]

    def __repr__(self) -> str:
        return "Loop" + _block_repr(self.block)


@dataclass
class While:
    condition: "NodeSpan"
    proc: list["NodeSpan"]


@dataclass
class ForLoop:
    ident: str
    list: "NodeSpan"
    proc: "list[NodeSpan]"


@dataclass
class DoBlock:
    block: list["NodeSpan"]

    def __repr__(self) -> str:
        return "Do" + _block_repr(self.block)


@dataclass
class Constructor:
    name: str
    params: dict[str, "NodeSpan"] = field(default_factory=dict)


@dataclass
class StructDef:
    """A struct definition; each field is a spanned Declaration or StructDef."""

    name: str | None
    fields: list["NodeSpan"] = field(default_factory=list)


@dataclass
class FieldAccess:
    target: "NodeSpan"
    requested: "NodeSpan"


@dataclass
class DontResult:
    def __repr__(self) -> str:
        return "DontResult"


Node = Union[
    Number,
    Null,
    Bool,
    Str,
    BinaryNode,
    UnaryNode,
    ResultNode,
    ReturnNode,
    BreakNode,
    ContinueNode,
    Declaration,
    Assignment,
    Variable,
    Index,
    FuncDef,
    ListLit,
    Call,
    Branch,
    Loop,
    While,
    ForLoop,
    DoBlock,
    Constructor,
    StructDef,
    FieldAccess,
    DontResult,
]
NodeSpan = Spanned[Node]


def can_result(node: Node) -> bool:
    """Whether a node yields a value that can be the result of a block."""
    if isinstance(node, StructDef):
        return node.name is None
    return not isinstance(
        node, (Declaration, Assignment, ReturnNode, BreakNode, ContinueNode)
    )


def wrap_in_result(node_span: NodeSpan) -> NodeSpan:
    """Wrap a node so that its value becomes the block's result."""
    return Spanned(ResultNode(node_span), node_span.span)