"""
Sample Window Assembler
=======================

Turns a WindowSpec into the list of Samples fed to the aggregation engine:
one sample per (year, offset) pair, with the variable's unit conversion
applied to every value the data source returns.
"""

import logging
from typing import List

from climate_odds.domain.models import Sample, WindowSpec
from climate_odds.domain.variables import VariableSpec
from climate_odds.domain.windowing import enumerate_window
from climate_odds.infrastructure.data_sources.base import DataSource

logger = logging.getLogger(__name__)


async def assemble(
    window: WindowSpec,
    source: DataSource,
    variable: VariableSpec,
    lat: float,
    lon: float
) -> List[Sample]:
    """
    Assemble the sample set of a window.

    Args:
        window: Target day, ± window and year range
        source: Raw value provider (native units)
        variable: Registry entry giving the unit conversion
        lat: Latitude
        lon: Longitude

    Returns:
        Samples in year-major order; missing days keep value None
    """
    window_days = enumerate_window(window)
    raw_values = await source.fetch_many(
        lat, lon, variable.name, [day.date for day in window_days]
    )

    samples: List[Sample] = []
    for day in window_days:
        raw = raw_values.get(day.date)
        value = round(variable.convert(raw), 2) if raw is not None else None
        samples.append(
            Sample(date=day.date, value=value, year=day.year, day_of_year=day.day_of_year)
        )

    missing = sum(1 for s in samples if s.value is None)
    logger.info(
        f"📊 Assembled {len(samples)} {variable.name} samples "
        f"({missing} missing) for day {window.target_day_of_year} ±{window.window_days}"
    )
    return samples
