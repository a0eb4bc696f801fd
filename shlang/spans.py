"""Source spans and values tagged with the span they came from."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Span:
    """Half-open range of character offsets into a source text."""

    start: int
    stop: int

    EMPTY: ClassVar["Span"]

    def __add__(self, other: "Span | int") -> "Span":
        """Join with another span, or stretch the end by a number of characters."""
        if isinstance(other, Span):
            return Span(self.start, other.stop)
        if isinstance(other, int) and not isinstance(other, bool):
            return Span(self.start, self.stop + other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"{self.start}:{self.stop}"


Span.EMPTY = Span(0, 0)


@dataclass
class Spanned(Generic[T]):
    """An item together with the span of source it was read from."""

    item: T
    span: Span

    def swap_item(self, item: U) -> "Spanned[U]":
        """Return a new spanned value holding ``item`` at the same span."""
        return Spanned(item, self.span)

    def __repr__(self) -> str:
        return f"{self.item!r}[{self.span.start},{self.span.stop}]"