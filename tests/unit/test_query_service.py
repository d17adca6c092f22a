"""
Unit Tests for Sample Assembly and the Climate Query Service
=============================================================

Coverage:
- ✅ Assembler: unit conversion, rounding, missing days, wrap-around
- ✅ End-to-end query against a constant 20 °C source
- ✅ Cache hits per threshold
- ✅ All-missing windows and error paths
"""

from datetime import date
from unittest.mock import AsyncMock, patch

import pytest

from climate_odds.core.exceptions import NoDataError, UnknownVariableError, ValidationError
from climate_odds.domain.models import WindowSpec, YearRange
from climate_odds.domain.variables import get_variable
from climate_odds.services import ClimateQueryService, assemble
from climate_odds.core.config import settings
from tests.conftest import MappingDataSource


# =============================================================================
# TEST CLASS: SAMPLE ASSEMBLER
# =============================================================================

@pytest.mark.unit
@pytest.mark.asyncio
class TestAssemble:

    async def test_converts_and_rounds(self, constant_source):
        window = WindowSpec(185, 7, YearRange(1980, 1983))

        samples = await assemble(window, constant_source, get_variable("temperature"), 40.7, -74.0)

        assert len(samples) == 60
        assert {s.value for s in samples} == {20.0}

    async def test_missing_days_stay_none(self):
        source = MappingDataSource({date(2001, 7, 4): 12.346})
        window = WindowSpec(185, 1, YearRange(2001, 2001))

        samples = await assemble(window, source, get_variable("precipitation"), 0.0, 0.0)

        assert [s.value for s in samples] == [None, 12.35, None]

    async def test_wrap_around_years(self, constant_source):
        window = WindowSpec(1, 3, YearRange(2000, 2000))

        samples = await assemble(window, constant_source, get_variable("humidity"), 0.0, 0.0)

        assert [s.year for s in samples] == [1999] * 3 + [2000] * 4
        assert samples[0].date == date(1999, 12, 29)


# =============================================================================
# TEST CLASS: QUERY SERVICE
# =============================================================================

@pytest.mark.unit
@pytest.mark.asyncio
class TestClimateQueryService:

    async def test_constant_temperature_end_to_end(self, query_service):
        """
        Verifies:
        - Day 185 ±7 over 1980-1983 at a constant 20 °C gives mean/median 20,
          std 0 and a certain exceedance of 19
        """
        result = await query_service.query(
            lat=40.7, lon=-74.0, variable="temperature", day_of_year=185,
            window=7, start_year=1980, end_year=1983, threshold=19
        )

        stats = result["stats"]
        assert stats["count"] == 60
        assert stats["mean"] == 20.0
        assert stats["median"] == 20.0
        assert stats["std"] == 0.0
        assert stats["exceedance"]["probability"] == 1.0
        assert stats["exceedance"]["percentage"] == "100.0"

        assert result["success"] is True
        assert result["cached"] is False
        assert result["trend"]["trend"]["direction"] == "stable"
        assert result["distribution"]["counts"][0] == 60
        assert "This is very likely." in result["summary"]
        assert len(result["timeseries"]) == 60

    async def test_meta(self, query_service):
        result = await query_service.query(
            lat=40.7, lon=-74.0, variable="temperature", day_of_year=185,
            window=3, start_year=2000, end_year=2001
        )

        meta = result["meta"]
        assert meta["units"] == "°C"
        assert meta["locationName"] == "40.7, -74.0"
        assert meta["yearRange"] == {"start": 2000, "end": 2001}
        assert meta["dataSource"] == "Constant test source"
        assert meta["quality"]["quality"] == "good"

    async def test_defaults_from_settings(self, query_service):
        result = await query_service.query(lat=0.0, lon=0.0, variable="humidity", day_of_year=10)

        assert result["meta"]["window"] == settings.DEFAULT_WINDOW_DAYS
        assert result["meta"]["yearRange"] == {
            "start": settings.DEFAULT_START_YEAR,
            "end": settings.DEFAULT_END_YEAR,
        }
        assert len(result["timeseries"]) == settings.TIMESERIES_PREVIEW_LIMIT

    async def test_csv_export_written(self, query_service, csv_exporter):
        result = await query_service.query(
            lat=1.0, lon=2.0, variable="temperature", day_of_year=100,
            window=0, start_year=2000, end_year=2002
        )

        filename = result["downloadUrl"].rsplit("/", 1)[-1]
        assert result["downloadUrl"].startswith("/api/v1/weather/download/weather_data_temperature_")
        assert csv_exporter.resolve(filename).is_file()

    async def test_second_query_is_cached(self, query_service, constant_source, cache_manager):
        kwargs = dict(lat=40.7, lon=-74.0, variable="temperature", day_of_year=185,
                      window=2, start_year=2000, end_year=2001, threshold=25)

        first = await query_service.query(**kwargs)
        calls_after_first = constant_source.calls
        second = await query_service.query(**kwargs)

        assert first["cached"] is False
        assert second["cached"] is True
        assert constant_source.calls == calls_after_first
        assert cache_manager.stats.hits == 1

    async def test_threshold_is_part_of_the_cache_key(self, query_service):
        kwargs = dict(lat=40.7, lon=-74.0, variable="temperature", day_of_year=185,
                      window=2, start_year=2000, end_year=2001)

        await query_service.query(threshold=25, **kwargs)
        other = await query_service.query(threshold=15, **kwargs)

        assert other["cached"] is False
        assert other["stats"]["exceedance"]["threshold"] == 15

    async def test_without_cache(self, constant_source, csv_exporter):
        service = ClimateQueryService(constant_source, None, csv_exporter, settings)

        result = await service.query(lat=0.0, lon=0.0, variable="dust", day_of_year=50,
                                     window=0, start_year=2000, end_year=2000)

        assert result["cached"] is False
        assert service.cache_stats() == {"enabled": False}
        assert service.clear_cache() == 0

    async def test_all_missing(self, missing_source, cache_manager, csv_exporter):
        service = ClimateQueryService(missing_source, cache_manager, csv_exporter, settings)

        result = await service.query(lat=0.0, lon=0.0, variable="temperature", day_of_year=50,
                                     window=1, start_year=2000, end_year=2001, threshold=0)

        assert result["stats"] == {"error": "No valid data points", "count": 0}
        assert result["distribution"] is None
        assert result["meta"]["quality"]["quality"] == "poor"
        assert result["summary"].startswith("Insufficient data")
        assert result["trend"]["yearlyMeans"] == []

    async def test_no_samples_raises(self, query_service):
        with patch(
            "climate_odds.services.climate_query_service.assemble",
            AsyncMock(return_value=[])
        ):
            with pytest.raises(NoDataError):
                await query_service.query(lat=0.0, lon=0.0, variable="temperature", day_of_year=1)

    async def test_unknown_variable(self, query_service):
        with pytest.raises(UnknownVariableError):
            await query_service.query(lat=0.0, lon=0.0, variable="snowfall", day_of_year=1)

    @pytest.mark.parametrize("overrides", [
        {"day_of_year": 0},
        {"window": settings.MAX_WINDOW_DAYS + 1},
        {"start_year": 2010, "end_year": 2000},
    ])
    async def test_invalid_parameters(self, query_service, overrides):
        kwargs = dict(lat=0.0, lon=0.0, variable="temperature", day_of_year=10)
        kwargs.update(overrides)

        with pytest.raises(ValidationError):
            await query_service.query(**kwargs)

    async def test_cache_management(self, query_service):
        await query_service.query(lat=0.0, lon=0.0, variable="windspeed", day_of_year=10,
                                  window=0, start_year=2000, end_year=2000)

        stats = query_service.cache_stats()
        assert stats["enabled"] is True
        assert stats["entries"] == 1

        assert query_service.clear_cache() == 1
        assert query_service.cache_stats()["entries"] == 0


@pytest.mark.unit
def test_variables_catalogue(query_service):
    assert len(query_service.variables()) == 5
