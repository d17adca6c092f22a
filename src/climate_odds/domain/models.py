"""
Climate Query Value Objects
===========================

Request-scoped, immutable results of the windowing and aggregation engine.
`to_dict()` renders each object in the shape returned by the HTTP API.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional, Tuple

# Percentiles reported in every StatsResult
PERCENTILE_LEVELS: Tuple[int, ...] = (10, 25, 50, 75, 90, 95, 99)


@dataclass(frozen=True)
class Sample:
    """One dated value of one variable at one location."""
    date: date
    value: Optional[float]  # None when the source reported the day missing
    year: int  # Effective year after window wrap-around
    day_of_year: int  # Effective day-of-year after wrap-around (1..366)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "value": self.value,
            "year": self.year,
            "dayOfYear": self.day_of_year,
        }


@dataclass(frozen=True)
class YearRange:
    start: int
    end: int

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Year range start {self.start} is after end {self.end}")

    def years(self) -> range:
        return range(self.start, self.end + 1)

    def to_dict(self) -> Dict[str, int]:
        return {"start": self.start, "end": self.end}


@dataclass(frozen=True)
class WindowSpec:
    """Which (year, day-of-year) pairs a query samples."""
    target_day_of_year: int
    window_days: int
    year_range: YearRange

    def __post_init__(self):
        if not 1 <= self.target_day_of_year <= 366:
            raise ValueError(f"Day of year must be between 1 and 366, got {self.target_day_of_year}")
        if self.window_days < 0:
            raise ValueError(f"Window must be at least 0, got {self.window_days}")


@dataclass(frozen=True)
class Histogram:
    """Equal-width distribution. Edges and width are rounded for display."""
    bin_edges: Tuple[float, ...]
    counts: Tuple[int, ...]
    bin_width: float

    @property
    def total(self) -> int:
        return sum(self.counts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bins": list(self.bin_edges),
            "counts": list(self.counts),
            "binWidth": self.bin_width,
        }


@dataclass(frozen=True)
class Exceedance:
    threshold: float
    probability: float
    count: int
    percentage: float  # probability * 100, one decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "threshold": self.threshold,
            "probability": self.probability,
            "count": self.count,
            "percentage": f"{self.percentage:.1f}",
        }


@dataclass(frozen=True)
class StatsResult:
    """
    Descriptive statistics of the valid values of a sample set.

    When `count` is 0 every numeric field is None: callers must treat that
    as "insufficient data" rather than as a set of zeros.
    """
    count: int
    mean: Optional[float] = None
    median: Optional[float] = None
    std: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    percentiles: Optional[Dict[str, float]] = None
    exceedance: Optional[Exceedance] = None
    distribution: Optional[Histogram] = None

    @property
    def has_data(self) -> bool:
        return self.count > 0

    def to_dict(self) -> Dict[str, Any]:
        if not self.has_data:
            return {"error": "No valid data points", "count": 0}

        result = {
            "count": self.count,
            "mean": self.mean,
            "median": self.median,
            "std": self.std,
            "min": self.min,
            "max": self.max,
            "percentiles": dict(self.percentiles or {}),
        }
        if self.exceedance is not None:
            result["exceedance"] = self.exceedance.to_dict()
        if self.distribution is not None:
            result["distribution"] = self.distribution.to_dict()
        return result


@dataclass(frozen=True)
class YearlyMean:
    year: int
    mean: float
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"year": self.year, "mean": self.mean, "count": self.count}


@dataclass(frozen=True)
class TrendResult:
    yearly_means: Tuple[YearlyMean, ...]
    slope: float
    direction: str  # increasing, decreasing or stable
    change_per_decade: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "yearlyMeans": [y.to_dict() for y in self.yearly_means],
            "trend": {
                "slope": f"{self.slope:.4f}",
                "direction": self.direction,
                "changePerDecade": f"{self.change_per_decade:.2f}",
            },
        }


@dataclass(frozen=True)
class QualityResult:
    total: int
    valid: int
    missing: int
    missing_percent: float
    tier: str  # good, fair or poor
    warning: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "valid": self.valid,
            "missing": self.missing,
            "missingPercent": f"{self.missing_percent:.1f}",
            "quality": self.tier,
            "warning": self.warning,
        }
