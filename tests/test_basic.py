"""Basic behaviour of WeightedSampler: store queries, refresh and drawing."""

from collections import Counter

import pytest

from weighted_object_sampler import (
    InvalidWeightError,
    SamplerConfig,
    StaleIndexError,
    WeightedSampler,
    WeightOverflowError,
)


def test_new_sampler_is_empty() -> None:
    """A fresh sampler has no elements and no weight."""
    sampler: WeightedSampler[str] = WeightedSampler(seed=1)
    assert sampler.empty()
    assert sampler.size() == 0
    assert sampler.total_weight() == 0
    assert not sampler


def test_insert_scenario() -> None:
    """Weights add up and probabilities follow them."""
    sampler: WeightedSampler[str] = WeightedSampler(seed=1)
    assert sampler.insert("A", 1)
    assert sampler.insert("B", 2)
    assert sampler.insert("C", 3)
    assert sampler.total_weight() == 6
    sampler.refresh()

    probability = sampler.probability("B")
    assert probability is not None
    assert abs(probability - 1 / 3) < 1e-12

    assert sampler.erase("A") == 1
    assert sampler.total_weight() == 5
    assert sampler.weight("A") is None
    assert sampler.is_stale()


def test_insert_duplicate_fails() -> None:
    """Inserting a present element changes nothing."""
    sampler: WeightedSampler[str] = WeightedSampler(seed=1)
    sampler.insert("A", 4)
    assert not sampler.insert("A", 10)
    assert sampler.weight("A") == 4
    assert sampler.total_weight() == 4
    assert sampler.size() == 1


def test_insert_zero_weight() -> None:
    """Zero-weight elements are members with zero probability."""
    sampler: WeightedSampler[str] = WeightedSampler(seed=1)
    assert sampler.insert("A", 0)
    assert sampler.insert("B", 5)
    assert sampler.contains("A")
    assert sampler.probability("A") == 0.0


def test_modify_returns_previous_weight() -> None:
    """Modify swaps the weight and adjusts the total by the delta."""
    sampler: WeightedSampler[str] = WeightedSampler(seed=1)
    sampler.insert("A", 2)
    sampler.insert("B", 3)
    assert sampler.modify("A", 7) == 2
    assert sampler.weight("A") == 7
    assert sampler.total_weight() == 10


def test_missing_element_lookups() -> None:
    """Lookups and mutations on absent elements report not found."""
    sampler: WeightedSampler[str] = WeightedSampler(seed=1)
    sampler.insert("A", 2)
    assert sampler.erase("Z") is None
    assert sampler.modify("Z", 3) is None
    assert sampler.weight("Z") is None
    assert sampler.probability("Z") is None
    assert not sampler.contains("Z")
    assert sampler.total_weight() == 2


def test_probability_with_zero_total() -> None:
    """Probability is undefined when the total weight is zero."""
    sampler: WeightedSampler[str] = WeightedSampler(seed=1)
    sampler.insert("A", 0)
    assert sampler.probability("A") is None


def test_clear_resets_everything() -> None:
    """Clear removes all entries and the total weight."""
    sampler: WeightedSampler[str] = WeightedSampler(seed=1)
    sampler.insert("A", 2)
    sampler.insert("B", 3)
    sampler.refresh()
    sampler.clear()
    assert sampler.empty()
    assert sampler.total_weight() == 0
    assert sampler.draw() is None


def test_draw_on_empty_returns_none() -> None:
    """Drawing from an empty sampler gives no result."""
    sampler: WeightedSampler[str] = WeightedSampler(seed=1)
    sampler.refresh()
    assert sampler.draw() is None
    assert sampler.sample(5) == []


def test_draw_with_only_zero_weights_returns_none() -> None:
    """A sampler refreshed with zero total weight gives no result."""
    sampler: WeightedSampler[str] = WeightedSampler(seed=1)
    sampler.insert("A", 0)
    sampler.insert("B", 0)
    sampler.refresh()
    assert sampler.index.is_empty()
    assert sampler.draw() is None
    assert sampler.sample(5) == []


def test_draw_returns_member() -> None:
    """Draws only ever return positive-weight members."""
    sampler: WeightedSampler[int] = WeightedSampler(seed=7)
    for i in range(10):
        sampler.insert(i, i)
    sampler.refresh()
    for _ in range(1000):
        element = sampler.draw()
        assert element is not None
        assert 1 <= element < 10


def test_convergence_one_to_three() -> None:
    """With weights A:1, B:3, B comes up about three times as often as A."""
    sampler: WeightedSampler[str] = WeightedSampler(seed=12345)
    sampler.insert("A", 1)
    sampler.insert("B", 3)
    sampler.refresh()

    counts = Counter(sampler.sample(100_000))
    ratio = counts["B"] / counts["A"]
    assert 2.85 < ratio < 3.15, f"B/A ratio was {ratio:.3f}"


def test_sample_draws_independently() -> None:
    """Sample returns independent draws, not one draw repeated."""
    sampler: WeightedSampler[str] = WeightedSampler(seed=3)
    sampler.insert("A", 1)
    sampler.insert("B", 1)
    sampler.refresh()
    samples = sampler.sample(200)
    assert len(samples) == 200
    assert set(samples) == {"A", "B"}


def test_sample_zero_and_negative_amount() -> None:
    """Zero draws is fine, a negative amount is rejected."""
    sampler: WeightedSampler[str] = WeightedSampler(seed=3)
    sampler.insert("A", 1)
    assert sampler.sample(0) == []
    with pytest.raises(ValueError):
        sampler.sample(-1)


def test_same_seed_same_draws() -> None:
    """Two samplers with the same seed and contents draw identically."""
    first: WeightedSampler[str] = WeightedSampler(seed=99)
    second: WeightedSampler[str] = WeightedSampler(seed=99)
    for sampler in (first, second):
        sampler.extend([("A", 1), ("B", 2), ("C", 3)])
        sampler.refresh()
    assert first.sample(50) == second.sample(50)


def test_reseed_replays_draws() -> None:
    """Reseeding restarts the random sequence without touching the index."""
    sampler: WeightedSampler[str] = WeightedSampler(seed=5)
    sampler.extend([("A", 1), ("B", 2), ("C", 3)])
    sampler.refresh()
    index_before = sampler.index
    first = sampler.sample(30)
    sampler.seed(5)
    assert sampler.sample(30) == first
    assert sampler.index is index_before


def test_draw_after_mutation_refreshes_lazily() -> None:
    """A stale sampler is refreshed on the next draw."""
    sampler: WeightedSampler[str] = WeightedSampler(seed=5)
    sampler.insert("A", 1)
    sampler.refresh()
    sampler.erase("A")
    sampler.insert("B", 1)
    assert sampler.is_stale()
    assert sampler.draw() == "B"
    assert not sampler.is_stale()


def test_draw_after_erasing_earlier_entry_reaches_later_ones() -> None:
    """Later entries stay reachable after an earlier entry is removed."""
    sampler: WeightedSampler[str] = WeightedSampler(seed=11)
    sampler.insert("A", 100)
    sampler.insert("B", 1)
    sampler.refresh()
    sampler.erase("A")
    sampler.refresh()
    assert sampler.sample(10) == ["B"] * 10


def test_stale_draw_raises_without_auto_refresh() -> None:
    """With auto refresh disabled a stale draw is an error."""
    config = SamplerConfig(auto_refresh=False)
    sampler: WeightedSampler[str] = WeightedSampler(seed=5, config=config)
    sampler.insert("A", 1)
    with pytest.raises(StaleIndexError):
        sampler.draw()
    with pytest.raises(StaleIndexError):
        sampler.sample(3)
    sampler.refresh()
    assert sampler.draw() == "A"


def test_empty_draw_without_auto_refresh_returns_none() -> None:
    """Zero total weight gives no result even when stale."""
    config = SamplerConfig(auto_refresh=False)
    sampler: WeightedSampler[str] = WeightedSampler(seed=5, config=config)
    assert sampler.draw() is None
    sampler.insert("A", 0)
    assert sampler.sample(2) == []


def test_insert_unorderable_element_rejected() -> None:
    """An element that cannot be ordered with the others is refused."""
    sampler: WeightedSampler[int] = WeightedSampler(seed=1)
    assert sampler.insert(1, 1)
    with pytest.raises(TypeError):
        sampler.insert("a", 1)  # type: ignore[arg-type]
    assert sampler.to_dict() == {1: 1}
    assert sampler.total_weight() == 1
    assert sampler.draw() == 1


def test_setitem_unorderable_element_rejected() -> None:
    """Assigning a new unorderable element is refused as well."""
    sampler: WeightedSampler[int] = WeightedSampler(seed=1)
    sampler[1] = 2
    with pytest.raises(TypeError):
        sampler["a"] = 1  # type: ignore[index]
    assert list(sampler) == [1]


def test_invalid_weights_rejected() -> None:
    """Negative, fractional and boolean weights are rejected."""
    sampler: WeightedSampler[str] = WeightedSampler(seed=1)
    for bad in (-1, 1.5, True, "3", None):
        with pytest.raises(InvalidWeightError):
            sampler.insert("A", bad)  # type: ignore[arg-type]
    assert sampler.empty()


def test_invalid_weight_is_a_value_error() -> None:
    """InvalidWeightError can be caught as ValueError."""
    sampler: WeightedSampler[str] = WeightedSampler(seed=1)
    sampler.insert("A", 1)
    with pytest.raises(ValueError):
        sampler.modify("A", -3)
    assert sampler.weight("A") == 1


def test_insert_overflow_rejected() -> None:
    """An insert that overflows the total weight leaves no trace."""
    sampler: WeightedSampler[str] = WeightedSampler(seed=1)
    limit = sampler.config.max_weight
    sampler.insert("A", limit - 1)
    with pytest.raises(WeightOverflowError):
        sampler.insert("B", 2)
    assert not sampler.contains("B")
    assert sampler.total_weight() == limit - 1
    assert sampler.insert("B", 1)
    assert sampler.total_weight() == limit


def test_modify_overflow_rejected() -> None:
    """A modify that overflows the total weight leaves no trace."""
    config = SamplerConfig(weight_bits=8)
    sampler: WeightedSampler[str] = WeightedSampler(seed=1, config=config)
    sampler.insert("A", 200)
    sampler.insert("B", 50)
    with pytest.raises(OverflowError):
        sampler.modify("B", 56)
    assert sampler.weight("B") == 50
    assert sampler.total_weight() == 250


def test_single_weight_above_width_rejected() -> None:
    """A weight wider than the weight type is invalid on its own."""
    config = SamplerConfig(weight_bits=4)
    sampler: WeightedSampler[str] = WeightedSampler(seed=1, config=config)
    with pytest.raises(InvalidWeightError):
        sampler.insert("A", 16)


def test_invalid_seed_rejected() -> None:
    """Seeds are non-negative integers."""
    with pytest.raises(ValueError):
        WeightedSampler(seed=-1)
    sampler: WeightedSampler[str] = WeightedSampler(seed=1)
    with pytest.raises(TypeError):
        sampler.seed(1.5)  # type: ignore[arg-type]


def test_config_validation() -> None:
    """Weight width must be a sensible integer."""
    assert SamplerConfig().max_weight == 2**32 - 1
    assert SamplerConfig(weight_bits=64).max_weight == 2**64 - 1
    with pytest.raises(ValueError):
        SamplerConfig(weight_bits=0)
    with pytest.raises(ValueError):
        SamplerConfig(weight_bits=65)
    with pytest.raises(TypeError):
        SamplerConfig(weight_bits=True)
