"""
Descriptive Statistics Engine
=============================

Count, mean, median, population standard deviation, extremes, linear
interpolation percentiles and exceedance probability over the valid values
of a sample set.

A sample is valid when its value is present and finite. Invalid samples are
skipped here but still counted by the quality assessment.
"""

import math
from typing import Any, Iterable, List, Optional, Sequence

import numpy as np

from climate_odds.domain.histogram import DEFAULT_BINS, build_histogram
from climate_odds.domain.models import (
    PERCENTILE_LEVELS,
    Exceedance,
    Sample,
    StatsResult,
)


def is_valid_value(value: Any) -> bool:
    """True for a present, finite number."""
    if value is None or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except TypeError:
        return False


def valid_values(samples: Iterable[Sample]) -> List[float]:
    return [float(s.value) for s in samples if is_valid_value(s.value)]


def mean(values: Sequence[float]) -> Optional[float]:
    if len(values) == 0:
        return None
    return float(np.mean(values))


def median(values: Sequence[float]) -> Optional[float]:
    """Middle value, or the average of the two middle values for even counts."""
    if len(values) == 0:
        return None
    return float(np.median(values))


def standard_deviation(values: Sequence[float]) -> Optional[float]:
    """Population standard deviation (divides by N)."""
    if len(values) == 0:
        return None
    return float(np.std(values, ddof=0))


def percentile(values: Sequence[float], p: float) -> Optional[float]:
    """
    Linear interpolation percentile.

    The rank is p/100 * (n - 1); the result interpolates between the sorted
    values at floor(rank) and ceil(rank). Values need not be sorted.
    """
    if len(values) == 0:
        return None
    if not 0 <= p <= 100:
        raise ValueError(f"Percentile must be between 0 and 100, got {p}")
    return float(np.percentile(values, p, method="linear"))


def exceedance(values: Sequence[float], threshold: Any) -> Optional[Exceedance]:
    """
    Fraction of values strictly greater than threshold.

    Returns None when there are no values or when threshold is not a finite
    number (a missing or malformed threshold skips the computation).
    """
    if len(values) == 0 or not is_valid_value(threshold):
        return None

    exceed_count = int(np.sum(np.asarray(values, dtype=float) > threshold))
    probability = exceed_count / len(values)

    return Exceedance(
        threshold=threshold,
        probability=probability,
        count=exceed_count,
        percentage=round(probability * 100, 1),
    )


def compute_stats(
    samples: Iterable[Sample],
    threshold: Optional[float] = None,
    num_bins: int = DEFAULT_BINS
) -> StatsResult:
    """
    Compute descriptive statistics of the valid values in samples.

    Args:
        samples: Sample sequence in any order
        threshold: Optional exceedance threshold (0 is a valid threshold)
        num_bins: Histogram bin count

    Returns:
        StatsResult; count == 0 (and no numeric fields) when nothing is valid
    """
    values = valid_values(samples)

    if not values:
        return StatsResult(count=0)

    ordered = sorted(values)

    return StatsResult(
        count=len(values),
        mean=mean(values),
        median=median(ordered),
        std=standard_deviation(values),
        min=ordered[0],
        max=ordered[-1],
        percentiles={f"p{p}": percentile(ordered, p) for p in PERCENTILE_LEVELS},
        exceedance=exceedance(values, threshold),
        distribution=build_histogram(values, num_bins),
    )
