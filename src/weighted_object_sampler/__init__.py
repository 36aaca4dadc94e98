"""Package initialization for weighted-object-sampler.

A container of unique elements with unsigned integer weights that draws
elements with probability proportional to their weight, supporting dynamic
insertion, removal and reweighting.
"""

import logging

from weighted_object_sampler.config import SamplerConfig
from weighted_object_sampler.errors import (
    IndexInvariantError,
    InvalidWeightError,
    SamplerError,
    StaleIndexError,
    WeightOverflowError,
)
from weighted_object_sampler.index import CumulativeIndex, CumulativeRange
from weighted_object_sampler.sampler import WeightedSampler
from weighted_object_sampler.stats import DistributionTestResult

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "CumulativeIndex",
    "CumulativeRange",
    "DistributionTestResult",
    "IndexInvariantError",
    "InvalidWeightError",
    "SamplerConfig",
    "SamplerError",
    "StaleIndexError",
    "WeightOverflowError",
    "WeightedSampler",
]
