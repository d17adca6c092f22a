"""Plain-English summary of a statistics result."""

from typing import Optional

from climate_odds.domain.models import StatsResult

# Upper bounds (exclusive, in percent) of each likelihood band
LIKELIHOOD_BANDS = (
    (10.0, "This is a rare occurrence."),
    (30.0, "This happens occasionally."),
    (60.0, "This is fairly common."),
)
MOST_LIKELY_PHRASE = "This is very likely."


def likelihood_phrase(percentage: float) -> str:
    for upper, phrase in LIKELIHOOD_BANDS:
        if percentage < upper:
            return phrase
    return MOST_LIKELY_PHRASE


def _format_number(value: float) -> str:
    # 30.0 -> "30", 30.5 -> "30.5"
    return f"{value:g}"


def summarize(stats: StatsResult, variable: str, threshold: Optional[float] = None) -> str:
    """
    Render a one or two sentence summary.

    Exceedance results get a chance statement and a likelihood band; without
    a threshold the mean, median and range are reported. A result without
    valid data produces an insufficient-data sentence.
    """
    if not stats.has_data:
        return (
            f"Insufficient data: no valid {variable} observations were found "
            f"for the requested location and period."
        )

    if stats.exceedance is not None:
        exc = stats.exceedance
        shown_threshold = threshold if threshold is not None else exc.threshold
        return (
            f"There is a {exc.percentage:.1f}% chance that {variable} will exceed "
            f"{_format_number(shown_threshold)} based on historical data "
            f"({stats.count} observations). {likelihood_phrase(exc.percentage)}"
        )

    return (
        f"Historical {variable}: mean={stats.mean:.1f}, median={stats.median:.1f}, "
        f"range=[{stats.min:.1f}, {stats.max:.1f}]"
    )
