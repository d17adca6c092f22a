"""
Data Source Interface
=====================

A data source yields one raw value (in the variable's native units) per
requested day, or None when the day is missing.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Dict, Iterable, Optional


class DataSource(ABC):
    """Point time series provider for one variable at one location."""

    name: str = "data source"

    @abstractmethod
    async def fetch(
        self,
        lat: float,
        lon: float,
        variable: str,
        day: date
    ) -> Optional[float]:
        """Raw value for a single day, or None if missing."""

    async def fetch_many(
        self,
        lat: float,
        lon: float,
        variable: str,
        days: Iterable[date]
    ) -> Dict[date, Optional[float]]:
        """
        Raw values for several days.

        The default issues one fetch per distinct day; sources with a range
        API should override it with a batched request.
        """
        values: Dict[date, Optional[float]] = {}
        for day in days:
            if day not in values:
                values[day] = await self.fetch(lat, lon, variable, day)
        return values
