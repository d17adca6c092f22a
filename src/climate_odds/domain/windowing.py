"""
Day-of-Year Windowing
=====================

Enumerates the calendar days sampled by a WindowSpec.

For each year of the range, offsets run from target - window to
target + window. Offsets below 1 wrap to the end of the previous year
(365 + offset) and offsets above 365 wrap to the start of the next year
(offset - 365). The wrap always uses 365 days; leap years only show up in
the date conversion, where day 60 is Feb 29 and day 365 is Dec 30.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Tuple

from climate_odds.domain.models import WindowSpec

DAYS_PER_YEAR = 365


@dataclass(frozen=True)
class WindowDay:
    """One concrete day requested by a window."""
    year: int
    day_of_year: int
    date: date


def wrap_day(year: int, offset: int) -> Tuple[int, int]:
    """
    Map a raw offset to an (effective year, effective day-of-year) pair.

    >>> wrap_day(2000, -2)
    (1999, 363)
    >>> wrap_day(2000, 367)
    (2001, 2)
    """
    if offset < 1:
        return year - 1, DAYS_PER_YEAR + offset
    if offset > DAYS_PER_YEAR:
        return year + 1, offset - DAYS_PER_YEAR
    return year, offset


def day_of_year_to_date(year: int, day_of_year: int) -> date:
    """January 1st plus day_of_year - 1 days (366 rolls into the next year)."""
    return date(year, 1, 1) + timedelta(days=day_of_year - 1)


def date_to_day_of_year(value: date) -> int:
    return value.timetuple().tm_yday


def enumerate_window(window: WindowSpec) -> List[WindowDay]:
    """
    List every (year, day) pair a window samples, one per year and offset.

    The result has (end - start + 1) * (2 * window_days + 1) entries in
    year-major order; dates can repeat when neighbouring years' windows
    overlap after wrap-around.
    """
    target = window.target_day_of_year
    days: List[WindowDay] = []

    for year in window.year_range.years():
        for offset in range(target - window.window_days, target + window.window_days + 1):
            effective_year, effective_day = wrap_day(year, offset)
            days.append(
                WindowDay(
                    year=effective_year,
                    day_of_year=effective_day,
                    date=day_of_year_to_date(effective_year, effective_day),
                )
            )

    return days
