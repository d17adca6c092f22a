"""
Synthetic Climate Data Source
=============================

Deterministic stand-in for a real archive. Patterns:
- temperature: seasonal sine wave 15 ± 15 °C peaking in summer, ±5 °C noise
- precipitation: 70% dry days, otherwise uniform 0-50 mm/day
- windspeed: |5 ± 5| m/s
- humidity: 40-90 %
- dust: 0-0.5

The same (seed, location, variable, date) always yields the same value,
so repeated queries and tests are reproducible.
"""

import logging
import math
import random
from datetime import date
from typing import Optional

from climate_odds.domain.variables import KELVIN_OFFSET
from climate_odds.domain.windowing import date_to_day_of_year
from climate_odds.infrastructure.data_sources.base import DataSource

logger = logging.getLogger(__name__)


class SyntheticDataSource(DataSource):
    """Seeded generator of realistic-looking daily values."""

    name = "Synthetic climatology generator"

    def __init__(self, seed: int = 42, missing_rate: float = 0.0):
        """
        Args:
            seed: Base seed mixed into every per-day generator
            missing_rate: Fraction of days reported as missing (0-1)
        """
        if not 0.0 <= missing_rate <= 1.0:
            raise ValueError(f"missing_rate must be between 0 and 1, got {missing_rate}")
        self.seed = seed
        self.missing_rate = missing_rate
        logger.info(f"🎲 Synthetic data source ready (seed={seed}, missing_rate={missing_rate})")

    def _rng(self, lat: float, lon: float, variable: str, day: date) -> random.Random:
        return random.Random(f"{self.seed}:{lat:.4f}:{lon:.4f}:{variable}:{day.isoformat()}")

    async def fetch(
        self,
        lat: float,
        lon: float,
        variable: str,
        day: date
    ) -> Optional[float]:
        rng = self._rng(lat, lon, variable, day)

        if rng.random() < self.missing_rate:
            return None

        return self._generate(rng, variable, date_to_day_of_year(day))

    @staticmethod
    def _generate(rng: random.Random, variable: str, day_of_year: int) -> float:
        if variable == "temperature":
            # Seasonal pattern + random variation, served in Kelvin
            seasonal = 15 + 15 * math.sin((day_of_year - 80) * 2 * math.pi / 365)
            celsius = seasonal + (rng.random() - 0.5) * 10
            return celsius + KELVIN_OFFSET

        if variable == "precipitation":
            # Mostly dry days, occasional heavy rain
            return 0.0 if rng.random() < 0.7 else rng.random() * 50

        if variable == "windspeed":
            return abs(5 + (rng.random() - 0.5) * 10)

        if variable == "humidity":
            return 40 + rng.random() * 50

        if variable == "dust":
            return rng.random() * 0.5

        return rng.random() * 100
