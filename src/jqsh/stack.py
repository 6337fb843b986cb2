"""The filter stack: an ordered pipeline of jq filter fragments."""

from __future__ import annotations

from typing import List, Protocol, runtime_checkable

from .errors import StackEmpty

FILTER_JOIN = " | "
IDENTITY = "."


@runtime_checkable
class Filter(Protocol):
    """Anything that contributes fragments to a jq pipeline."""

    def fragments(self) -> List[str]: ...


class FilterString(str):
    """A single literal jq filter fragment."""

    def fragments(self) -> List[str]:
        return [str(self)]


def join_filter(filter: Filter) -> str:
    """Join the fragments of filter with pipes.

    Zero fragments join to the identity filter ".".

    Examples:
        >>> join_filter(FilterStack([FilterString("hello"), FilterString("world")]))
        'hello | world'
    """
    fragments = filter.fragments()
    if not fragments:
        return IDENTITY
    return FILTER_JOIN.join(fragments)


class FilterStack:
    """Filters in pipeline order; the last element was pushed most recently."""

    def __init__(self, filters: List[Filter] | None = None):
        self._pipe: List[Filter] = list(filters or [])

    def __len__(self) -> int:
        return len(self._pipe)

    def __iter__(self):
        return iter(self._pipe)

    def fragments(self) -> List[str]:
        """Return the raw fragment list (empty when nothing was pushed)."""
        result: List[str] = []
        for f in self._pipe:
            result.extend(f.fragments())
        return result

    def joined(self) -> str:
        return join_filter(self)

    def push(self, filter: Filter) -> None:
        self._pipe.append(filter)

    def pop(self, n: int = 1) -> List[Filter]:
        """Remove up to n of the most recently pushed filters.

        Popping more than the stack holds removes everything. StackEmpty is
        raised only when the stack is already empty.
        """
        if not self._pipe:
            raise StackEmpty()
        if n <= 0:
            return []
        n = min(n, len(self._pipe))
        popped = self._pipe[-n:]
        del self._pipe[-n:]
        return popped

    def pop_all(self) -> List[Filter]:
        popped = self._pipe
        self._pipe = []
        return popped

    def __repr__(self) -> str:
        return f"FilterStack({self.fragments()!r})"
