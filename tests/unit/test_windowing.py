"""
Unit Tests for Day-of-Year Windowing
=====================================

Coverage:
- ✅ Offset wrap-around into previous / next year
- ✅ Day-of-year to calendar date (leap years included)
- ✅ Window enumeration size and order
"""

from datetime import date

import pytest

from climate_odds.domain.models import WindowSpec, YearRange
from climate_odds.domain.windowing import (
    date_to_day_of_year,
    day_of_year_to_date,
    enumerate_window,
    wrap_day,
)


@pytest.mark.unit
class TestWrapDay:

    def test_offset_inside_year_is_unchanged(self):
        assert wrap_day(2000, 185) == (2000, 185)

    def test_offset_below_one_wraps_to_previous_year(self):
        assert wrap_day(2000, 0) == (1999, 365)
        assert wrap_day(2000, -2) == (1999, 363)

    def test_offset_above_365_wraps_to_next_year(self):
        assert wrap_day(2000, 366) == (2001, 1)
        assert wrap_day(2000, 367) == (2001, 2)


@pytest.mark.unit
class TestDateConversion:

    def test_first_day(self):
        assert day_of_year_to_date(2001, 1) == date(2001, 1, 1)

    def test_leap_year_day_60_is_feb_29(self):
        assert day_of_year_to_date(2000, 60) == date(2000, 2, 29)
        assert day_of_year_to_date(2001, 60) == date(2001, 3, 1)

    def test_day_365_of_leap_year_is_dec_30(self):
        assert day_of_year_to_date(2000, 365) == date(2000, 12, 30)

    def test_date_to_day_of_year(self):
        assert date_to_day_of_year(date(2023, 7, 4)) == 185
        assert date_to_day_of_year(date(2024, 12, 31)) == 366


@pytest.mark.unit
class TestEnumerateWindow:

    def test_window_size(self):
        """
        Verifies:
        - One day per (year, offset) pair
        """
        window = WindowSpec(185, 7, YearRange(1980, 1983))

        days = enumerate_window(window)

        assert len(days) == 4 * 15

    def test_zero_window_single_year(self):
        window = WindowSpec(100, 0, YearRange(2010, 2010))

        days = enumerate_window(window)

        assert len(days) == 1
        assert days[0].year == 2010
        assert days[0].day_of_year == 100

    def test_wrap_at_start_of_year(self):
        """
        Verifies:
        - target=1, window=3 covers days 363..365 of the prior year and
          1..4 of the current year, for every year
        """
        window = WindowSpec(1, 3, YearRange(2000, 2002))

        days = enumerate_window(window)

        for year in (2000, 2001, 2002):
            pairs = [(d.year, d.day_of_year) for d in days if d.year in (year - 1, year)]
            for day in (363, 364, 365):
                assert (year - 1, day) in pairs
            for day in (1, 2, 3, 4):
                assert (year, day) in pairs

        assert days[0].date == date(1999, 12, 29)

    def test_wrap_at_end_of_year(self):
        window = WindowSpec(365, 2, YearRange(2001, 2001))

        pairs = [(d.year, d.day_of_year) for d in enumerate_window(window)]

        assert pairs == [(2001, 363), (2001, 364), (2001, 365), (2002, 1), (2002, 2)]

    def test_year_major_order(self):
        window = WindowSpec(185, 1, YearRange(1990, 1991))

        years = [d.year for d in enumerate_window(window)]

        assert years == [1990, 1990, 1990, 1991, 1991, 1991]


@pytest.mark.unit
class TestWindowSpecValidation:

    def test_day_out_of_range(self):
        with pytest.raises(ValueError):
            WindowSpec(0, 7, YearRange(2000, 2001))
        with pytest.raises(ValueError):
            WindowSpec(367, 7, YearRange(2000, 2001))

    def test_negative_window(self):
        with pytest.raises(ValueError):
            WindowSpec(100, -1, YearRange(2000, 2001))

    def test_reversed_year_range(self):
        with pytest.raises(ValueError):
            YearRange(2005, 2000)
