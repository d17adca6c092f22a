"""
Climate Query Service (Application Layer)
=========================================

Answers "how likely is VARIABLE to exceed THRESHOLD at this place and time
of year?" from a multi-year window of historical samples.

Responsibilities:
- Cache lookup and storage of complete responses
- Sample assembly through the configured data source
- Statistics, trend, quality and narrative summary
- CSV export of the full series

Usage:
    from climate_odds.services import ClimateQueryService

    service = ClimateQueryService(source, cache, exporter, settings)
    result = await service.query(lat=40.71, lon=-74.01, variable="temperature",
                                 day_of_year=185, threshold=30)
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from climate_odds.core.cache import CacheManager
from climate_odds.core.config import Settings
from climate_odds.core.exceptions import NoDataError, ValidationError
from climate_odds.core.logging_config import PerformanceLogger, log_query
from climate_odds.domain import (
    analyze_trend,
    assess_quality,
    compute_stats,
    get_variable,
    list_variables,
    summarize
)
from climate_odds.domain.models import WindowSpec, YearRange
from climate_odds.infrastructure.data_sources.base import DataSource
from climate_odds.infrastructure.exports import CSVExporter
from climate_odds.services.sample_assembler import assemble

logger = logging.getLogger(__name__)


class ClimateQueryService:
    """
    Orchestrates one climate probability query.

    The aggregation steps are pure; the data source is the only await point.
    Identical concurrent queries may each compute their result before either
    reaches the cache.
    """

    def __init__(
        self,
        source: DataSource,
        cache: Optional[CacheManager],
        exporter: CSVExporter,
        config: Settings
    ):
        """
        Initialize climate query service.

        Args:
            source: Data source used for sample assembly
            cache: Response cache, None disables caching
            exporter: CSV exporter for the full series
            config: Application settings
        """
        self.source = source
        self.cache = cache
        self.exporter = exporter
        self.config = config

    async def query(
        self,
        lat: float,
        lon: float,
        variable: str,
        day_of_year: int,
        window: Optional[int] = None,
        start_year: Optional[int] = None,
        end_year: Optional[int] = None,
        threshold: Optional[float] = None,
        location_name: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Run a climate query.

        Args:
            lat: Latitude in degrees
            lon: Longitude in degrees
            variable: Registry variable name
            day_of_year: Target day-of-year (1..366)
            window: ± days around the target (defaults to DEFAULT_WINDOW_DAYS)
            start_year: First year (defaults to DEFAULT_START_YEAR)
            end_year: Last year (defaults to DEFAULT_END_YEAR)
            threshold: Optional exceedance threshold in display units
            location_name: Optional label echoed in the metadata

        Returns:
            Response dict with meta, stats, trend, summary, distribution,
            timeseries preview, downloadUrl and cached flag

        Raises:
            UnknownVariableError: If the variable is not registered
            ValidationError: If the window parameters are out of range
            NoDataError: If the window produced no samples
            DataSourceError: If the data source fails
        """
        window = self.config.DEFAULT_WINDOW_DAYS if window is None else window
        start_year = start_year or self.config.DEFAULT_START_YEAR
        end_year = end_year or self.config.DEFAULT_END_YEAR

        variable_spec = get_variable(variable)
        self._validate(day_of_year, window, start_year, end_year)

        cache_key = CacheManager.generate_key(
            lat, lon, variable, day_of_year, window, start_year, end_year, threshold
        )
        if self.cache is not None:
            cached = self.cache.get(cache_key)
            if cached is not None:
                quality = cached["meta"]["quality"]
                log_query(logger, variable, lat, lon, quality["total"], quality["valid"], cached=True)
                return {**cached, "cached": True}

        window_spec = WindowSpec(
            target_day_of_year=day_of_year,
            window_days=window,
            year_range=YearRange(start=start_year, end=end_year),
        )

        with PerformanceLogger(f"assemble {variable} samples", __name__):
            samples = await assemble(window_spec, self.source, variable_spec, lat, lon)

        if not samples:
            raise NoDataError(variable, lat, lon)

        with PerformanceLogger(f"aggregate {len(samples)} samples", __name__):
            stats = compute_stats(samples, threshold, self.config.HISTOGRAM_BINS)
            quality = assess_quality(samples)
            trend = analyze_trend(samples)
            summary = summarize(stats, variable, threshold)

        if quality.warning:
            logger.warning(f"⚠️ {variable} at ({lat}, {lon}): {quality.warning}")

        meta = {
            "variable": variable,
            "units": variable_spec.display_units,
            "lat": lat,
            "lon": lon,
            "locationName": location_name or f"{lat}, {lon}",
            "dayOfYear": day_of_year,
            "window": window,
            "yearRange": window_spec.year_range.to_dict(),
            "dataSource": self.source.name,
            "queryDate": datetime.now(timezone.utc).isoformat(),
            "quality": quality.to_dict(),
        }

        filename = self.exporter.generate(samples, meta, stats)

        result = {
            "success": True,
            "meta": meta,
            "stats": stats.to_dict(),
            "trend": trend.to_dict(),
            "summary": summary,
            "distribution": stats.distribution.to_dict() if stats.distribution else None,
            "timeseries": [s.to_dict() for s in samples[:self.config.TIMESERIES_PREVIEW_LIMIT]],
            "downloadUrl": self.exporter.public_url(filename),
            "cached": False,
        }

        if self.cache is not None:
            self.cache.set(cache_key, result, ttl=self.config.CACHE_TTL_SECONDS)

        log_query(logger, variable, lat, lon, len(samples), stats.count, cached=False)
        return result

    def _validate(self, day_of_year: int, window: int, start_year: int, end_year: int) -> None:
        if not 1 <= day_of_year <= 366:
            raise ValidationError("dayOfYear", day_of_year, "must be between 1 and 366")
        if not 0 <= window <= self.config.MAX_WINDOW_DAYS:
            raise ValidationError(
                "window", window, f"must be between 0 and {self.config.MAX_WINDOW_DAYS}"
            )
        if start_year > end_year:
            raise ValidationError(
                "yearRange", f"{start_year}-{end_year}", "start must not be after end"
            )

    def cache_stats(self) -> Dict[str, Any]:
        """Cache statistics, or a disabled marker when caching is off."""
        if self.cache is None:
            return {"enabled": False}
        return {"enabled": True, **self.cache.get_stats()}

    def clear_cache(self) -> int:
        """
        Drop every cached response.

        Returns:
            Number of entries removed
        """
        if self.cache is None:
            return 0
        count = len(self.cache)
        self.cache.clear()
        return count

    @staticmethod
    def variables() -> List[Dict[str, Any]]:
        return list_variables()
