"""Runtime values, their types, scopes and the heap."""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum, auto
from typing import Any, Callable, Iterable

from shlang.lang_errors import InterpreterError, InterpreterErrorKind
from shlang.spans import Span


class Unit(Enum):
    """The two value-less values of the language."""

    NULL = "null"
    VOID = "void"

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return self.name.title()


class Type(Enum):
    """Built-in value types; named struct types are ``StructType``."""

    NULL = "null"
    VOID = "void"
    NUM = "num"
    CLOSURE = "closure"
    BOOL = "bool"
    STR = "str"
    FUNCTION = "func"
    LIST = "list"
    ANON_STRUCT = "struct"
    REF = "ref"

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return self.name.title().replace("_", "")


@dataclass(frozen=True)
class StructType:
    """The type of a struct with a name."""

    name: str

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f'Struct("{self.name}")'


@dataclass(frozen=True)
class Ref:
    """A key into a ``Heap``."""

    index: int

    def __repr__(self) -> str:
        return f"RefKey({self.index}v1)"


class Heap:
    """Storage for values that are shared by reference."""

    def __init__(self) -> None:
        self._slots: dict[int, Any] = {}
        self._next = 1

    def insert(self, value: Any) -> Ref:
        """Store ``value`` and return the reference to it."""
        key = Ref(self._next)
        self._next += 1
        self._slots[key.index] = value
        return key

    def __getitem__(self, key: Ref) -> Any:
        return self._slots[key.index]

    def __setitem__(self, key: Ref, value: Any) -> None:
        if key.index not in self._slots:
            raise KeyError(key)
        self._slots[key.index] = value

    def __contains__(self, key: object) -> bool:
        return isinstance(key, Ref) and key.index in self._slots

    def __len__(self) -> int:
        return len(self._slots)


@dataclass
class Closure:
    """A function value that captured the environment it was made in."""

    block: list
    args: list[str]
    env: Ref

    def __str__(self) -> str:
        return "@(" + _join_args(self.args) + ") "


@dataclass
class Function:
    """A user-defined function value."""

    block: list
    args: list[str]

    @staticmethod
    def from_closure(closure: Closure) -> "Function":
        """The function part of a closure, without its environment."""
        return Function(block=closure.block, args=closure.args)

    def __str__(self) -> str:
        return "func(" + _join_args(self.args) + ") "


def _join_args(args: list[str]) -> str:
    out = ""
    for name in args:
        out += name
        if args[-1] != name:
            out += ", "
    return out


@dataclass
class BuiltinFunc:
    """A function implemented by the host; ``function(data, ctx)`` runs it."""

    function: Callable[..., Any]
    arg_range: tuple[int, int] | None
    id: str

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BuiltinFunc):
            return NotImplemented
        return self.id == other.id

    def __repr__(self) -> str:
        return f"BuiltinFunc(id={self.id!r}, arg_size={self.arg_range!r})"


@dataclass
class NativeObject:
    """A host object; ``inner`` provides ``lang_call`` and optionally ``lang_get``."""

    id: str
    inner: Any

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NativeObject):
            return NotImplemented
        return self.id == other.id


@dataclass
class FuncData:
    """The arguments and call site handed to a builtin function."""

    args: list
    span: Span
    parent: "Scope"


class CallError(Exception):
    """Raised by a builtin: an interpreter error, or a panic carrying a value."""

    def __init__(self, value: Any, panicked: bool = False) -> None:
        super().__init__(value)
        self.value = value
        self.panicked = panicked


class NativeCallError(Exception):
    """Raised by a native object's call.

    With no message and no panic value the method was not found.
    """

    def __init__(self, message: str | None = None, *, panic: Any = None) -> None:
        super().__init__(message if message is not None else "method not found")
        self.message = message
        self.panic = panic

    @property
    def method_not_found(self) -> bool:
        return self.message is None and self.panic is None


class ControlKind(Enum):
    RETURN = auto()
    RESULT = auto()
    VALUE = auto()
    BREAK = auto()
    CONTINUE = auto()


@dataclass
class Control:
    """How evaluation of a node finished, with its value where it has one."""

    kind: ControlKind
    value: Any = None

    def into_val(self) -> Any:
        """The carried value; break and continue carry none."""
        if self.kind in (ControlKind.BREAK, ControlKind.CONTINUE):
            raise ValueError("Control node doesnt have a value")
        return self.value


@dataclass
class Scope:
    """A table of variables and structs, with an optional enclosing scope."""

    parent: "Scope | None" = None
    vars: dict[str, Any] = field(default_factory=dict)
    structs: dict[str, "Struct"] = field(default_factory=dict)

    def get_var(self, name: str) -> Any:
        """The variable's value, searching outward; None if it is not defined."""
        scope: Scope | None = self
        while scope is not None:
            if name in scope.vars:
                return scope.vars[name]
            scope = scope.parent
        return None

    def get_vars(self, names: Iterable[str]) -> list:
        """Look up several variables at once."""
        return [self.get_var(name) for name in names]

    def assign_valid(self, name: str, value: Any, span: Span) -> Unit:
        """Assign to an existing variable, raising on void or unknown names."""
        if is_void(value):
            raise InterpreterError(InterpreterErrorKind.VOID_ASSIGNMENT, span)
        if self.assign(name, value) is None:
            raise InterpreterError(InterpreterErrorKind.INVALID_ASSIGNMENT, span, name)
        return Unit.VOID

    def get_struct(self, name: str) -> "Struct | None":
        scope: Scope | None = self
        while scope is not None:
            if name in scope.structs:
                return scope.structs[name]
            scope = scope.parent
        return None

    def define(self, name: Any, value: Any) -> None:
        """Define a variable here; structs are also registered by name."""
        key = str(name)
        if isinstance(value, Struct):
            self.structs[key] = value
        self.vars[key] = value

    def assign(self, name: str, value: Any) -> Any:
        """Set the nearest variable called ``name``; None if there is none."""
        scope: Scope | None = self
        while scope is not None:
            if name in scope.vars:
                scope.vars[name] = value
                return value
            scope = scope.parent
        return None

    @staticmethod
    def from_vars(vars: dict[str, Any]) -> "Scope":
        return Scope(vars=dict(vars))

    @staticmethod
    def new_child_in(parent: "Scope") -> "Scope":
        return Scope(parent=parent)


@dataclass
class Struct:
    """A struct value: an optional name and the scope holding its fields."""

    id: str | None = None
    env: Scope = field(default_factory=Scope)

    def __post_init__(self) -> None:
        if not self.id:
            self.id = None

    def method(
        self,
        name: Any,
        arg_range: tuple[int, int] | None,
        func: Callable[..., Any],
    ) -> "Struct":
        """Add a builtin method; returns the struct for chaining."""
        key = str(name)
        return self.prop(key, BuiltinFunc(function=func, arg_range=arg_range, id=key))

    def get_prop(self, prop: str) -> Any:
        return self.env.get_var(prop)

    def get_method(self, prop: str) -> Function | None:
        value = self.env.get_var(prop)
        return value if isinstance(value, Function) else None

    def set_props(self, env: dict[str, Any]) -> "Struct":
        self.env = Scope.from_vars(env)
        return self

    def prop(self, name: Any, value: Any) -> "Struct":
        self.env.define(str(name), value)
        return self

    def insert(self, heap: Heap) -> Ref:
        """Store a copy of this struct on the heap."""
        return heap.insert(copy.deepcopy(self))

    def has_method(self, name: Any) -> bool:
        value = self.env.get_var(str(name))
        return value is not None and get_type(value) is Type.FUNCTION

    def __str__(self) -> str:
        fields = ", ".join(f"{k}:{display(v)}" for k, v in self.env.vars.items())
        return f"{self.id or ''}{{{fields}}}"


def get_type(value: Any) -> Type | StructType:
    """The language type of a runtime value."""
    match value:
        case Unit.NULL:
            return Type.NULL
        case Unit.VOID:
            return Type.VOID
        case bool():
            return Type.BOOL
        case int() | float():
            return Type.NUM
        case str():
            return Type.STR
        case list():
            return Type.LIST
        case Function() | BuiltinFunc():
            return Type.FUNCTION
        case Closure():
            return Type.CLOSURE
        case Ref():
            return Type.REF
        case Struct():
            return StructType(value.id) if value.id is not None else Type.ANON_STRUCT
        case NativeObject():
            return StructType(value.id)
    raise TypeError(f"not a language value: {value!r}")


def is_void(value: Any) -> bool:
    return value is Unit.VOID


def matches_typeof(value: Any, other: Any) -> bool:
    return get_type(value) == get_type(other)


def list_join(items: list, separator: str) -> str:
    """Render a list as ``[a<sep>b...]``."""
    if not items:
        return "[]"
    return "[" + separator.join(display(v) for v in items) + "]"


def _format_num(num: float) -> str:
    num = float(num)
    if math.isnan(num):
        return "NaN"
    if math.isinf(num):
        return "inf" if num > 0 else "-inf"
    if num.is_integer():
        if num == 0 and math.copysign(1.0, num) < 0:
            return "-0"
        return str(int(num))
    text = repr(num)
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    return text


def display(value: Any) -> str:
    """The text a value prints as."""
    match value:
        case Unit():
            return str(value)
        case bool():
            return "true" if value else "false"
        case int() | float():
            return _format_num(value)
        case str():
            return value
        case list():
            return list_join(value, ",")
        case Struct() | Function() | Closure():
            return str(value)
        case NativeObject():
            return f"{value.id}{{native}}"
        case Ref():
            return f"ref {value!r}"
    return "unnamed"