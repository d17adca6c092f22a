"""
NASA POWER API Client (Infrastructure Layer)
=============================================

Client for the NASA POWER daily point API (MERRA-2 / GEOS derived
meteorology, 1981 onwards) with:
- Automatic retries on transport errors using tenacity
- One request per query: the whole date span is fetched at once
- Fill values (-999) and pre-1981 days reported as missing

API Documentation: https://power.larc.nasa.gov/docs/services/api/temporal/daily/

Usage:
    async with NasaPowerDataSource() as source:
        values = await source.fetch_many(40.71, -74.01, "temperature", days)
"""

import logging
import time
from datetime import date
from typing import Any, Dict, Iterable, Optional

import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log
)

from climate_odds.core.config import settings
from climate_odds.core.exceptions import NasaPowerAPIError, VariableNotSupportedError
from climate_odds.core.logging_config import log_api_call
from climate_odds.domain.variables import KELVIN_OFFSET
from climate_odds.infrastructure.data_sources.base import DataSource

logger = logging.getLogger(__name__)

# Variable -> (POWER parameter, offset bringing POWER units to native units)
# POWER serves temperatures in Celsius; the registry's native unit is Kelvin.
POWER_PARAMETERS: Dict[str, tuple] = {
    "temperature": ("T2M", KELVIN_OFFSET),
    "precipitation": ("PRECTOTCORR", 0.0),
    "windspeed": ("WS10M", 0.0),
    "humidity": ("RH2M", 0.0),
}

POWER_FIRST_DAY = date(1981, 1, 1)
POWER_FILL_VALUE = -999.0
POWER_DATE_FORMAT = "%Y%m%d"


class NasaPowerDataSource(DataSource):
    """
    Asynchronous NASA POWER daily point data source.

    Features:
    - Batched date-range requests
    - Automatic retries with exponential backoff
    - Missing-value handling for fill values and out-of-archive dates
    """

    name = "NASA POWER (LaRC) daily point API"

    def __init__(
        self,
        base_url: Optional[str] = None,
        community: Optional[str] = None,
        timeout: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize NASA POWER client.

        Args:
            base_url: Daily point endpoint
            community: POWER user community (RE, AG or SB)
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url or settings.NASA_POWER_BASE_URL
        self.community = community or settings.NASA_POWER_COMMUNITY
        self.timeout = timeout or settings.NASA_POWER_TIMEOUT
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        """Async context manager entry."""
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        logger.info("✅ NASA POWER API client initialized")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("🔒 NASA POWER API client closed")

    @staticmethod
    def _parameter_for(variable: str) -> tuple:
        try:
            return POWER_PARAMETERS[variable]
        except KeyError:
            raise VariableNotSupportedError("NASA POWER", variable) from None

    @retry(
        stop=stop_after_attempt(settings.NASA_POWER_MAX_RETRIES),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(httpx.TransportError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True
    )
    async def _get_json(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """GET the daily point endpoint; transport errors are retried."""
        if not self._client:
            raise RuntimeError("Client not initialized")

        started = time.perf_counter()
        response = await self._client.get(self.base_url, params=params)
        log_api_call(
            logger,
            method="GET",
            url=self.base_url,
            status_code=response.status_code,
            elapsed_ms=(time.perf_counter() - started) * 1000,
            parameter=params.get("parameters")
        )
        response.raise_for_status()
        return response.json()

    async def _request_range(
        self,
        lat: float,
        lon: float,
        parameter: str,
        start: date,
        end: date
    ) -> Dict[str, Any]:
        """
        Request one parameter over [start, end].

        Raises:
            NasaPowerAPIError: On HTTP or transport failure
        """
        params = {
            "parameters": parameter,
            "community": self.community,
            "latitude": lat,
            "longitude": lon,
            "start": start.strftime(POWER_DATE_FORMAT),
            "end": end.strftime(POWER_DATE_FORMAT),
            "format": "JSON",
        }

        logger.info(f"📡 Fetching NASA POWER {parameter} for ({lat}, {lon}) {start} → {end}")

        try:
            return await self._get_json(params)
        except httpx.HTTPStatusError as e:
            logger.error(f"❌ NASA POWER HTTP error: {e.response.status_code}")
            raise NasaPowerAPIError(e.response.status_code, e.response.text) from e
        except httpx.RequestError as e:
            logger.error(f"❌ NASA POWER request error: {e}")
            raise NasaPowerAPIError(0, str(e)) from e

    @staticmethod
    def _parse_series(data: Dict[str, Any], parameter: str) -> Dict[str, Optional[float]]:
        """Map POWER's YYYYMMDD keys to values, fill values become None."""
        try:
            series = data["properties"]["parameter"][parameter]
        except (KeyError, TypeError) as e:
            raise NasaPowerAPIError(200, f"Unexpected response layout: missing {e}") from e

        fill_value = float(data.get("header", {}).get("fill_value", POWER_FILL_VALUE))
        parsed: Dict[str, Optional[float]] = {}
        for key, value in series.items():
            if value is None or float(value) == fill_value:
                parsed[key] = None
            else:
                parsed[key] = float(value)
        return parsed

    async def fetch(
        self,
        lat: float,
        lon: float,
        variable: str,
        day: date
    ) -> Optional[float]:
        values = await self.fetch_many(lat, lon, variable, [day])
        return values[day]

    async def fetch_many(
        self,
        lat: float,
        lon: float,
        variable: str,
        days: Iterable[date]
    ) -> Dict[date, Optional[float]]:
        """
        Fetch every requested day with a single POWER request.

        Days outside the POWER archive are returned as None without being
        requested.
        """
        parameter, offset = self._parameter_for(variable)
        requested = set(days)
        values: Dict[date, Optional[float]] = {day: None for day in requested}

        in_archive = [day for day in requested if day >= POWER_FIRST_DAY]
        if not in_archive:
            logger.warning("⚠️ All requested days predate the NASA POWER archive")
            return values

        if self._client is None:
            async with self:
                data = await self._request_range(lat, lon, parameter, min(in_archive), max(in_archive))
        else:
            data = await self._request_range(lat, lon, parameter, min(in_archive), max(in_archive))

        series = self._parse_series(data, parameter)
        for day in in_archive:
            raw = series.get(day.strftime(POWER_DATE_FORMAT))
            values[day] = raw + offset if raw is not None else None

        logger.info(
            f"✅ NASA POWER returned {sum(v is not None for v in values.values())}"
            f"/{len(values)} valid days"
        )
        return values
