"""Cumulative range index.

Each element owns the contiguous sub-range ``[lower, upper]`` of
``[1, total_weight]`` whose length is its weight. Ranges are laid out in the
store's canonical order and are always rebuilt from scratch, so no boundary
outlives the mutation that invalidated it.
"""

import bisect
from collections.abc import Iterable, Iterator
from typing import Generic, NamedTuple

from weighted_object_sampler.errors import IndexInvariantError
from weighted_object_sampler.store import E


class CumulativeRange(NamedTuple):
    element: object
    lower: int
    upper: int

    @property
    def weight(self) -> int:
        return self.upper - self.lower + 1

    def is_empty(self) -> bool:
        return self.upper < self.lower

    def __contains__(self, value: object) -> bool:
        return isinstance(value, int) and self.lower <= value <= self.upper


class CumulativeIndex(Generic[E]):
    """Immutable lookup table from a drawn integer to an element."""

    def __init__(self, ranges: list[CumulativeRange]) -> None:
        self._ranges = ranges
        # Only non-empty ranges take part in resolution; their upper bounds
        # are strictly increasing.
        self._reachable = [r for r in ranges if not r.is_empty()]
        self._uppers = [r.upper for r in self._reachable]

    @classmethod
    def build(cls, items: Iterable[tuple[E, int]]) -> "CumulativeIndex[E]":
        ranges = []
        lower = 1
        for element, weight in items:
            upper = lower + weight - 1
            ranges.append(CumulativeRange(element, lower, upper))
            lower = upper + 1
        return cls(ranges)

    @classmethod
    def empty_index(cls) -> "CumulativeIndex[E]":
        return cls([])

    @property
    def ranges(self) -> list[CumulativeRange]:
        return list(self._ranges)

    @property
    def total_weight(self) -> int:
        return self._uppers[-1] if self._uppers else 0

    def is_empty(self) -> bool:
        """True if no value can be resolved (total weight is zero)."""
        return not self._uppers

    def resolve(self, value: int) -> E:
        """Return the element whose range contains ``value``."""
        position = bisect.bisect_left(self._uppers, value)
        if value < 1 or position == len(self._uppers):
            raise IndexInvariantError(
                f"Value {value} is outside [1, {self.total_weight}]"
            )
        found = self._reachable[position]
        if value not in found:
            raise IndexInvariantError(f"Value {value} fell between ranges at {found}")
        return found.element  # type: ignore[return-value]

    def __len__(self) -> int:
        return len(self._ranges)

    def __iter__(self) -> Iterator[CumulativeRange]:
        return iter(self._ranges)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CumulativeIndex):
            return NotImplemented
        return self._ranges == other._ranges

    def __repr__(self) -> str:
        return f"CumulativeIndex({self._ranges!r})"
