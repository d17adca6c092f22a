"""
Multi-year Trend Analysis
=========================

Per-year means of the valid values and an ordinary least squares line
through (year, yearly mean).
"""

from typing import Iterable, List

import numpy as np
import pandas as pd

from climate_odds.domain.models import Sample, TrendResult, YearlyMean
from climate_odds.domain.statistics import is_valid_value


def yearly_means(samples: Iterable[Sample]) -> List[YearlyMean]:
    """
    Group samples by (effective) year and average the valid values.

    Years where no value is valid have no mean and are left out.
    """
    rows = [
        {"year": s.year, "value": float(s.value)}
        for s in samples
        if is_valid_value(s.value)
    ]
    if not rows:
        return []

    grouped = (
        pd.DataFrame(rows)
        .groupby("year")["value"]
        .agg(["mean", "count"])
        .sort_index()
    )

    return [
        YearlyMean(year=int(year), mean=float(row["mean"]), count=int(row["count"]))
        for year, row in grouped.iterrows()
    ]


def linear_regression_slope(points: List[YearlyMean]) -> float:
    """
    Least squares slope of yearly mean against year.

    Equivalent to (nΣxy - ΣxΣy) / (nΣx² - (Σx)²), computed on centered
    years to keep the sums small. Fewer than two years give 0.
    """
    if len(points) < 2:
        return 0.0

    x = np.array([p.year for p in points], dtype=float)
    y = np.array([p.mean for p in points], dtype=float)

    dx = x - x.mean()
    dy = y - y.mean()
    denominator = float(np.sum(dx * dx))
    if denominator == 0:
        return 0.0

    return float(np.sum(dx * dy)) / denominator


def trend_direction(slope: float) -> str:
    if slope > 0:
        return "increasing"
    if slope < 0:
        return "decreasing"
    return "stable"


def analyze_trend(samples: Iterable[Sample]) -> TrendResult:
    """Fit the yearly mean trend of a sample set."""
    points = yearly_means(samples)
    slope = linear_regression_slope(points)

    return TrendResult(
        yearly_means=tuple(points),
        slope=slope,
        direction=trend_direction(slope),
        change_per_decade=slope * 10,
    )
