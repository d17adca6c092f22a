"""Completeness assessment of a sample set."""

from typing import Sequence

from climate_odds.domain.models import QualityResult, Sample
from climate_odds.domain.statistics import is_valid_value

GOOD_MAX_MISSING_PERCENT = 10.0
FAIR_MAX_MISSING_PERCENT = 30.0
MISSING_DATA_WARNING = "High percentage of missing data may affect reliability"


def quality_tier(missing_percent: float) -> str:
    if missing_percent < GOOD_MAX_MISSING_PERCENT:
        return "good"
    if missing_percent < FAIR_MAX_MISSING_PERCENT:
        return "fair"
    return "poor"


def assess_quality(samples: Sequence[Sample]) -> QualityResult:
    """
    Classify how complete a sample set is.

    An empty set counts as entirely missing (100%).
    """
    total = len(samples)
    valid = sum(1 for s in samples if is_valid_value(s.value))
    missing = total - valid
    missing_percent = round(missing / total * 100, 1) if total else 100.0

    return QualityResult(
        total=total,
        valid=valid,
        missing=missing,
        missing_percent=missing_percent,
        tier=quality_tier(missing_percent),
        warning=MISSING_DATA_WARNING if missing_percent > FAIR_MAX_MISSING_PERCENT else None,
    )
