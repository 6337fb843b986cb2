"""Tests for the filter stack."""

import pytest

from jqsh.errors import StackEmpty
from jqsh.stack import Filter, FilterStack, FilterString, join_filter


def stack_of(*pieces):
    return FilterStack([FilterString(p) for p in pieces])


def test_empty_stack_joins_to_identity():
    stack = FilterStack()
    assert stack.fragments() == []
    assert stack.joined() == "."


def test_join_preserves_push_order():
    stack = FilterStack()
    stack.push(FilterString(".items"))
    stack.push(FilterString(".[]"))
    stack.push(FilterString(".name"))
    assert stack.joined() == ".items | .[] | .name"
    assert len(stack) == 3


def test_fragment_with_pipes_is_one_entry():
    stack = stack_of(".items | .[]")
    assert len(stack) == 1
    assert stack.joined() == ".items | .[]"


def test_pop_returns_last_pushed():
    stack = stack_of("a", "b", "c")
    assert stack.pop() == ["c"]
    assert stack.pop(2) == ["a", "b"]
    assert len(stack) == 0


def test_pop_more_than_depth_empties_stack():
    stack = stack_of("a", "b")
    assert stack.pop(5) == ["a", "b"]
    assert stack.joined() == "."


def test_pop_empty_stack_fails():
    with pytest.raises(StackEmpty, match="the stack is empty"):
        FilterStack().pop()


def test_pop_zero_is_noop():
    stack = stack_of("a")
    assert stack.pop(0) == []
    assert len(stack) == 1


def test_pop_all():
    stack = stack_of("a", "b")
    assert stack.pop_all() == ["a", "b"]
    assert stack.pop_all() == []


def test_filter_protocol():
    assert isinstance(FilterString(".a"), Filter)
    assert isinstance(FilterStack(), Filter)
    assert join_filter(FilterString(".a")) == ".a"


def test_nested_stack_contributes_fragments():
    inner = stack_of(".a", ".b")
    outer = FilterStack([inner, FilterString(".c")])
    assert outer.joined() == ".a | .b | .c"
