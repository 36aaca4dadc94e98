"""The weighted random container.

:class:`WeightedSampler` composes the store, the cumulative range index and
the random engine. Mutations only touch the store; :meth:`refresh` rebuilds
the index and re-bounds the engine; :meth:`draw` resolves one random integer
through the index.
"""

import logging
from collections import Counter
from collections.abc import Iterable, Iterator
from typing import Generic

from weighted_object_sampler.config import DEFAULT_CONFIG, SamplerConfig
from weighted_object_sampler.engine import RandomEngine
from weighted_object_sampler.errors import StaleIndexError
from weighted_object_sampler.index import CumulativeIndex
from weighted_object_sampler.stats import DistributionTestResult, chi_squared_test
from weighted_object_sampler.store import E, WeightedStore

logger = logging.getLogger(__name__)


class WeightedSampler(Generic[E]):
    """A set of unique elements drawn with probability proportional to weight.

    Weights are unsigned integers no wider than ``config.weight_bits``; an
    element of weight 0 is a member but is never drawn.

    Mutations (:meth:`insert`, :meth:`erase`, :meth:`modify`, :meth:`clear`)
    are cheap and never rebuild the index, so a batch of them should be
    followed by one :meth:`refresh`. With the default configuration a draw
    from a stale sampler refreshes it first.

    Example:
        >>> sampler = WeightedSampler(seed=42)
        >>> sampler.insert("a", 1)
        True
        >>> sampler.insert("b", 3)
        True
        >>> sampler.refresh()
        >>> sampler.draw() in {"a", "b"}
        True
    """

    def __init__(
        self, seed: int | None = None, *, config: SamplerConfig | None = None
    ) -> None:
        self._config = config if config is not None else DEFAULT_CONFIG
        self._store: WeightedStore[E] = WeightedStore(self._config.max_weight)
        self._engine = RandomEngine(seed)
        self._index: CumulativeIndex[E] = CumulativeIndex.empty_index()
        # Store version the index was built from; None means never built.
        self._indexed_version: int | None = None

    @property
    def config(self) -> SamplerConfig:
        return self._config

    # -------------------------------------------------------------------------
    # Store operations
    # -------------------------------------------------------------------------

    def insert(self, element: E, weight: int) -> bool:
        """Add ``element``; False if it is already present."""
        return self._store.insert(element, weight)

    def erase(self, element: E) -> int | None:
        """Remove ``element`` and return its weight, or None if absent."""
        return self._store.erase(element)

    def modify(self, element: E, new_weight: int) -> int | None:
        """Change the weight of ``element``; returns the old weight or None."""
        return self._store.modify(element, new_weight)

    def clear(self) -> None:
        self._store.clear()

    def contains(self, element: E) -> bool:
        return self._store.contains(element)

    def size(self) -> int:
        return self._store.size()

    def empty(self) -> bool:
        return self._store.empty()

    def total_weight(self) -> int:
        return self._store.total_weight()

    def weight(self, element: E) -> int | None:
        return self._store.weight(element)

    def probability(self, element: E) -> float | None:
        """``weight / total_weight``, or None if absent or the total is zero."""
        return self._store.probability(element)

    def items(self) -> list[tuple[E, int]]:
        return self._store.items()

    def to_dict(self) -> dict[E, int]:
        return dict(self._store.items())

    def extend(self, entries: Iterable[tuple[E, int]]) -> int:
        """Insert each ``(element, weight)`` pair, skipping duplicates.

        The batch is all or nothing: if any pair has an invalid weight, an
        unorderable element, or would overflow the total, nothing is inserted.
        Returns the number of entries actually inserted.
        """
        return self._store.insert_many(entries)

    def pop(self, element: E) -> int:
        """Remove ``element`` and return its weight; KeyError if absent."""
        weight = self._store.erase(element)
        if weight is None:
            raise KeyError(element)
        return weight

    # -------------------------------------------------------------------------
    # Index and engine
    # -------------------------------------------------------------------------

    def refresh(self) -> None:
        """Rebuild the cumulative index and re-bound the random distribution.

        Linear in the number of entries, plus one sort if elements were
        inserted or erased since the previous refresh.
        """
        total = self._store.total_weight()
        if total == 0:
            self._index = CumulativeIndex.empty_index()
            self._engine.clear_bound()
        else:
            self._index = CumulativeIndex.build(self._store.items())
            self._engine.set_bound(total)
        self._indexed_version = self._store.version
        logger.debug(
            "Refreshed index: %d entries, total weight %d", self._store.size(), total
        )

    def is_stale(self) -> bool:
        """True if the contents changed since the last :meth:`refresh`."""
        return self._indexed_version != self._store.version

    @property
    def index(self) -> CumulativeIndex[E]:
        """The index built by the last refresh."""
        return self._index

    def seed(self, value: int) -> None:
        """Reseed the random engine. The index is left alone."""
        self._engine.seed(value)

    def _ensure_fresh(self) -> None:
        if not self.is_stale():
            return
        if not self._config.auto_refresh:
            raise StaleIndexError(
                "Sampler was modified since the last refresh(); call refresh() "
                "before drawing"
            )
        logger.debug("Index is stale, refreshing before draw")
        self.refresh()

    def _draw_one(self) -> E:
        return self._index.resolve(self._engine.next_value())

    def draw(self) -> E | None:
        """Draw one element, or None if the total weight is zero."""
        if self._store.total_weight() == 0:
            return None
        self._ensure_fresh()
        return self._draw_one()

    def sample(self, amount: int) -> list[E]:
        """Draw ``amount`` independent elements with replacement.

        Returns an empty list if the total weight is zero.
        """
        if amount < 0:
            raise ValueError(f"amount must be non-negative, got {amount}")
        if self._store.total_weight() == 0:
            return []
        self._ensure_fresh()
        return [self._draw_one() for _ in range(amount)]

    def test_distribution(self, num_samples: int = 10000) -> DistributionTestResult:
        """Chi-squared test ``num_samples`` draws against the weights."""
        if num_samples < 1:
            raise ValueError(f"num_samples must be positive, got {num_samples}")
        if self._store.total_weight() == 0:
            raise ValueError(
                "Cannot test the distribution of a sampler with zero total weight"
            )
        observed = Counter(self.sample(num_samples))
        return chi_squared_test(observed, self.to_dict())

    # -------------------------------------------------------------------------
    # Container protocol
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return self._store.size()

    def __bool__(self) -> bool:
        return not self._store.empty()

    def __contains__(self, element: object) -> bool:
        try:
            return self._store.contains(element)  # type: ignore[arg-type]
        except TypeError:
            # Unhashable values are never members.
            return False

    def __iter__(self) -> Iterator[E]:
        return iter(self._store)

    def __getitem__(self, element: E) -> int:
        weight = self._store.weight(element)
        if weight is None:
            raise KeyError(element)
        return weight

    def __setitem__(self, element: E, weight: int) -> None:
        if self._store.modify(element, weight) is None:
            self._store.insert(element, weight)

    def __delitem__(self, element: E) -> None:
        self.pop(element)

    def copy(self) -> "WeightedSampler[E]":
        """Copy the entries and total weight, but not the random state.

        The copy gets an engine seeded from system entropy and no index;
        reseed it with :meth:`seed` for reproducible draws.
        """
        other: WeightedSampler[E] = WeightedSampler(config=self._config)
        other._store = self._store.copy()
        logger.debug("Copied sampler with %d entries", other.size())
        return other

    __copy__ = copy

    def __repr__(self) -> str:
        entries = ", ".join(
            f"{element!r}: {weight}" for element, weight in self.items()
        )
        return f"WeightedSampler({{{entries}}})"
