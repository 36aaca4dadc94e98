"""Configuration for :class:`~weighted_object_sampler.WeightedSampler`."""

from dataclasses import dataclass

MAX_WEIGHT_BITS = 64


@dataclass(frozen=True)
class SamplerConfig:
    """Tunable behaviour of a sampler.

    Attributes:
        weight_bits: Width of the unsigned weight type. Individual weights and
            the total weight must fit in ``2 ** weight_bits - 1``.
        auto_refresh: When true, drawing from a sampler whose contents changed
            since the last refresh rebuilds the index first. When false, such
            a draw raises :class:`~weighted_object_sampler.StaleIndexError`.
    """

    weight_bits: int = 32
    auto_refresh: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.weight_bits, bool) or not isinstance(self.weight_bits, int):
            raise TypeError(f"weight_bits must be an int, got {self.weight_bits!r}")
        if not 1 <= self.weight_bits <= MAX_WEIGHT_BITS:
            raise ValueError(
                f"weight_bits must be between 1 and {MAX_WEIGHT_BITS}, "
                f"got {self.weight_bits}"
            )

    @property
    def max_weight(self) -> int:
        return (1 << self.weight_bits) - 1


DEFAULT_CONFIG = SamplerConfig()
