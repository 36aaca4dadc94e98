"""Chi-squared goodness-of-fit check for sampled distributions.

The p-value comes from the regularized upper incomplete gamma function
``Q(k / 2, chi2 / 2)``, evaluated with its power series below ``x < a + 1``
and with a Lentz continued fraction above it.
"""

import math
from collections.abc import Hashable, Mapping
from dataclasses import dataclass

_MAX_ITERATIONS = 500
_EPSILON = 1e-15
_TINY = 1e-300


@dataclass(frozen=True)
class DistributionTestResult:
    """Outcome of a Pearson chi-squared test on a batch of samples."""

    chi_squared: float
    degrees_of_freedom: int
    p_value: float
    num_samples: int

    def passes(self, alpha: float = 0.05) -> bool:
        """True if the samples are consistent with the weights at level ``alpha``."""
        return self.p_value >= alpha


def _lower_gamma_series(a: float, x: float) -> float:
    term = 1.0 / a
    total = term
    denominator = a
    for _ in range(_MAX_ITERATIONS):
        denominator += 1.0
        term *= x / denominator
        total += term
        if abs(term) < abs(total) * _EPSILON:
            break
    return total * math.exp(-x + a * math.log(x) - math.lgamma(a))


def _upper_gamma_fraction(a: float, x: float) -> float:
    b = x + 1.0 - a
    c = 1.0 / _TINY
    d = 1.0 / b
    h = d
    for i in range(1, _MAX_ITERATIONS):
        an = -i * (i - a)
        b += 2.0
        d = an * d + b
        if abs(d) < _TINY:
            d = _TINY
        c = b + an / c
        if abs(c) < _TINY:
            c = _TINY
        d = 1.0 / d
        delta = d * c
        h *= delta
        if abs(delta - 1.0) < _EPSILON:
            break
    return h * math.exp(-x + a * math.log(x) - math.lgamma(a))


def regularized_upper_gamma(a: float, x: float) -> float:
    """``Q(a, x) = Γ(a, x) / Γ(a)`` for ``a > 0``, ``x >= 0``."""
    if a <= 0:
        raise ValueError(f"a must be positive, got {a}")
    if x < 0:
        raise ValueError(f"x must be non-negative, got {x}")
    if x == 0:
        return 1.0
    if x < a + 1.0:
        return max(0.0, 1.0 - _lower_gamma_series(a, x))
    return min(1.0, _upper_gamma_fraction(a, x))


def chi_squared_sf(statistic: float, degrees_of_freedom: int) -> float:
    """Survival function of the chi-squared distribution."""
    if degrees_of_freedom < 1:
        raise ValueError(f"degrees_of_freedom must be >= 1, got {degrees_of_freedom}")
    return regularized_upper_gamma(degrees_of_freedom / 2.0, statistic / 2.0)


def chi_squared_test(
    observed: Mapping[Hashable, int], weights: Mapping[Hashable, int]
) -> DistributionTestResult:
    """Compare observed counts against the distribution given by ``weights``.

    Only positive weights take part. A single category always passes, and any
    observation of a zero-weight category fails outright.
    """
    total_weight = sum(weights.values())
    if total_weight <= 0:
        raise ValueError("weights must have a positive total")
    num_samples = sum(observed.values())

    unexpected = [k for k, n in observed.items() if n and not weights.get(k)]
    categories = [k for k, w in weights.items() if w > 0]
    degrees_of_freedom = len(categories) - 1
    if unexpected:
        return DistributionTestResult(
            math.inf, max(degrees_of_freedom, 1), 0.0, num_samples
        )
    if degrees_of_freedom == 0 or num_samples == 0:
        return DistributionTestResult(0.0, degrees_of_freedom, 1.0, num_samples)

    chi_squared = 0.0
    for key in categories:
        expected = num_samples * weights[key] / total_weight
        chi_squared += (observed.get(key, 0) - expected) ** 2 / expected
    p_value = chi_squared_sf(chi_squared, degrees_of_freedom)
    return DistributionTestResult(chi_squared, degrees_of_freedom, p_value, num_samples)

