"""Exceptions raised by the weighted object sampler."""


class SamplerError(Exception):
    """Base class for every error raised by this package."""


class InvalidWeightError(SamplerError, ValueError):
    """A weight is negative, not an integer, or wider than the weight type."""


class WeightOverflowError(SamplerError, OverflowError):
    """A mutation would push the total weight past the weight type's range."""

    def __init__(self, total: int, max_weight: int) -> None:
        super().__init__(
            f"Total weight {total} exceeds the maximum of {max_weight}"
        )
        self.total = total
        self.max_weight = max_weight


class StaleIndexError(SamplerError, RuntimeError):
    """A draw was attempted after a mutation without refreshing the index."""


class IndexInvariantError(SamplerError, AssertionError):
    """A drawn value could not be resolved to an element.

    This only happens if the cumulative index is corrupt, never because the
    sampler is empty.
    """
