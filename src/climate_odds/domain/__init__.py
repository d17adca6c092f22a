"""
Climate Domain Logic

Pure, synchronous windowing and aggregation:
- windowing: day-of-year window enumeration with year wrap-around
- statistics: descriptive statistics and exceedance probability
- histogram: equal-width distribution
- trend: yearly means and least squares slope
- quality: completeness tier
- narrative: human-readable summary
- variables: variable metadata registry
"""

from .histogram import build_histogram
from .narrative import summarize
from .quality import assess_quality
from .statistics import compute_stats, percentile
from .trend import analyze_trend
from .variables import VARIABLE_REGISTRY, VariableSpec, get_variable, list_variables
from .windowing import enumerate_window

__all__ = [
    "build_histogram",
    "summarize",
    "assess_quality",
    "compute_stats",
    "percentile",
    "analyze_trend",
    "VARIABLE_REGISTRY",
    "VariableSpec",
    "get_variable",
    "list_variables",
    "enumerate_window",
]
