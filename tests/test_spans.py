import pytest

from shlang.spans import Span, Spanned


def test_adding_spans_joins_start_and_stop():
    assert Span(2, 4) + Span(10, 12) == Span(2, 12)


def test_adding_int_stretches_stop():
    span = Span(2, 4)
    stretched = span + 3
    assert stretched.start == span.start
    assert stretched.stop - span.stop == 3


def test_adding_other_type_fails():
    with pytest.raises(TypeError):
        Span(0, 1) + "x"


def test_empty_span():
    assert Span.EMPTY == Span(0, 0)


def test_span_repr():
    assert repr(Span(3, 7)) == "3:7"


def test_span_is_hashable_and_comparable():
    assert {Span(1, 2), Span(1, 2)} == {Span(1, 2)}


def test_swap_item_keeps_span():
    original = Spanned("a", Span(5, 6))
    swapped = original.swap_item(42)
    assert swapped.item == 42
    assert swapped.span == original.span
    assert original.item == "a"


def test_spanned_repr():
    assert repr(Spanned("x", Span(1, 4))) == "'x'[1,4]"


def test_spanned_equality():
    assert Spanned(1, Span(0, 1)) == Spanned(1, Span(0, 1))
    assert Spanned(1, Span(0, 1)) != Spanned(1, Span(0, 2))