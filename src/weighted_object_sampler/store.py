"""Weighted element store.

Holds the set of ``(element, weight)`` pairs and their running total. The
store knows nothing about drawing: it only validates weights, enforces
uniqueness and counts mutations so the index built from it can tell when it
has gone stale.
"""

import logging
from collections.abc import Iterable, Iterator
from typing import Any, Generic, Protocol, TypeVar

from weighted_object_sampler.errors import InvalidWeightError, WeightOverflowError

logger = logging.getLogger(__name__)


class SupportsLessThan(Protocol):
    """Elements must also be hashable and totally ordered among themselves."""

    def __lt__(self, other: Any, /) -> bool: ...


E = TypeVar("E", bound=SupportsLessThan)


def validate_weight(weight: object, max_weight: int) -> int:
    """Return ``weight`` if it is a legal weight, else raise.

    Legal weights are ``int`` values (not ``bool``) in ``[0, max_weight]``.
    """
    if isinstance(weight, bool) or not isinstance(weight, int):
        raise InvalidWeightError(f"Weight must be an int, got {weight!r}")
    if weight < 0:
        raise InvalidWeightError(f"Weight must be non-negative, got {weight}")
    if weight > max_weight:
        raise InvalidWeightError(f"Weight {weight} exceeds the maximum of {max_weight}")
    return weight


class WeightedStore(Generic[E]):
    """Mapping of unique elements to unsigned integer weights."""

    def __init__(self, max_weight: int) -> None:
        self._weights: dict[E, int] = {}
        # Sorted keys, rebuilt lazily after the key set changes.
        self._order: list[E] | None = []
        self._total_weight = 0
        self._max_weight = max_weight
        self._version = 0

    @property
    def max_weight(self) -> int:
        return self._max_weight

    @property
    def version(self) -> int:
        """Counter bumped by every mutation that changes the contents."""
        return self._version

    def _touch(self) -> None:
        self._version += 1

    def _check_comparable(self, element: E, pending: dict[E, int]) -> None:
        """Raise TypeError if ``element`` cannot be ordered against the keys."""
        keys = self._weights or pending
        if keys:
            sorted((next(iter(keys)), element))

    def _check_total(self, total: int) -> int:
        if total > self._max_weight:
            logger.debug("Rejected total weight %d above %d", total, self._max_weight)
            raise WeightOverflowError(total, self._max_weight)
        return total

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def insert(self, element: E, weight: int) -> bool:
        """Add ``element`` with ``weight``.

        Returns False, leaving the store untouched, if the element is already
        present. Raises WeightOverflowError if the new total would not fit.
        """
        validate_weight(weight, self._max_weight)
        if element in self._weights:
            return False
        self._check_comparable(element, {})
        self._total_weight = self._check_total(self._total_weight + weight)
        self._weights[element] = weight
        self._order = None
        self._touch()
        return True

    def insert_many(self, entries: Iterable[tuple[E, int]]) -> int:
        """Insert every new ``(element, weight)`` pair, or none of them.

        Pairs whose element is already present, or repeated earlier in the
        batch, are skipped. All weights, orderings and the resulting total
        are checked before anything is stored. Returns the number inserted.
        """
        pending: dict[E, int] = {}
        batch_weight = 0
        for element, weight in entries:
            validate_weight(weight, self._max_weight)
            if element in self._weights or element in pending:
                continue
            self._check_comparable(element, pending)
            pending[element] = weight
            batch_weight += weight
        if not pending:
            return 0
        self._total_weight = self._check_total(self._total_weight + batch_weight)
        self._weights.update(pending)
        self._order = None
        self._touch()
        return len(pending)

    def erase(self, element: E) -> int | None:
        """Remove ``element`` and return its weight, or None if absent."""
        if element not in self._weights:
            return None
        weight = self._weights.pop(element)
        self._total_weight -= weight
        self._order = None
        self._touch()
        return weight

    def modify(self, element: E, new_weight: int) -> int | None:
        """Replace the weight of ``element`` and return the previous one.

        Returns None if the element is absent.
        """
        validate_weight(new_weight, self._max_weight)
        if element not in self._weights:
            return None
        old_weight = self._weights[element]
        self._total_weight = self._check_total(
            self._total_weight - old_weight + new_weight
        )
        self._weights[element] = new_weight
        self._touch()
        return old_weight

    def clear(self) -> None:
        self._weights.clear()
        self._order = []
        self._total_weight = 0
        self._touch()

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def contains(self, element: E) -> bool:
        return element in self._weights

    def size(self) -> int:
        return len(self._weights)

    def empty(self) -> bool:
        return not self._weights

    def total_weight(self) -> int:
        return self._total_weight

    def weight(self, element: E) -> int | None:
        return self._weights.get(element)

    def probability(self, element: E) -> float | None:
        """Return ``weight / total_weight``.

        None if the element is absent or the total weight is zero.
        """
        weight = self._weights.get(element)
        if weight is None or self._total_weight == 0:
            return None
        return weight / self._total_weight

    def elements(self) -> list[E]:
        """All elements in canonical (sorted) order.

        Sorting only happens after an insert or erase; reweighting keeps the
        cached order.
        """
        if self._order is None:
            self._order = sorted(self._weights)
        return list(self._order)

    def items(self) -> list[tuple[E, int]]:
        """``(element, weight)`` pairs in canonical (sorted) order."""
        weights = self._weights
        return [(element, weights[element]) for element in self.elements()]

    def __iter__(self) -> Iterator[E]:
        return iter(self.elements())

    def __len__(self) -> int:
        return len(self._weights)

    def copy(self) -> "WeightedStore[E]":
        other: WeightedStore[E] = WeightedStore(self._max_weight)
        other._weights = dict(self._weights)
        other._order = None if self._order is None else list(self._order)
        other._total_weight = self._total_weight
        return other
