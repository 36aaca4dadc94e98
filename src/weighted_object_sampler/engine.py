"""Per-instance pseudo-random engine with a uniform ``[1, bound]`` distribution."""

import logging
import random

logger = logging.getLogger(__name__)


def validate_seed(seed: object) -> int:
    if isinstance(seed, bool) or not isinstance(seed, int):
        raise TypeError(f"Seed must be an int, got {seed!r}")
    if seed < 0:
        raise ValueError(f"Seed must be non-negative, got {seed}")
    return seed


class RandomEngine:
    """A seeded Mersenne Twister drawing integers uniformly from ``[1, bound]``.

    The bound is set by the owning sampler on refresh; until then, or after it
    is cleared, the engine has no distribution to draw from.
    """

    def __init__(self, seed: int | None = None) -> None:
        if seed is None:
            self._rng = random.Random()
        else:
            self._rng = random.Random(validate_seed(seed))
        self._bound: int | None = None

    def seed(self, value: int) -> None:
        """Reseed the generator. The current bound is kept."""
        self._rng.seed(validate_seed(value))
        logger.debug("Reseeded engine with %d", value)

    @property
    def bound(self) -> int | None:
        return self._bound

    def set_bound(self, total_weight: int) -> None:
        if total_weight < 1:
            raise ValueError(f"Bound must be positive, got {total_weight}")
        self._bound = total_weight

    def clear_bound(self) -> None:
        self._bound = None

    def next_value(self) -> int:
        """Draw one integer uniformly from ``[1, bound]``."""
        if self._bound is None:
            raise RuntimeError("Engine has no distribution; refresh the sampler first")
        return self._rng.randint(1, self._bound)
