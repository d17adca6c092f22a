"""
Pytest Configuration and Shared Fixtures
=========================================

Test setup for the Climate Odds API with dependency overrides: the routers
run against a constant data source, a fresh cache and a temporary exports
directory.
"""
import os
import tempfile
from datetime import date
from pathlib import Path
from typing import Dict, Optional

import pytest
from fastapi.testclient import TestClient

# Set test environment variables BEFORE any imports
os.environ["ENVIRONMENT"] = "testing"
os.environ["LOG_LEVEL"] = "ERROR"
os.environ["DATA_SOURCE"] = "synthetic"
os.environ["EXPORTS_DIR"] = str(Path(tempfile.mkdtemp()) / "exports")

from climate_odds.core.cache import CacheManager, CacheStats  # noqa: E402
from climate_odds.core.config import settings  # noqa: E402
from climate_odds.domain.models import Sample  # noqa: E402
from climate_odds.infrastructure.data_sources.base import DataSource  # noqa: E402
from climate_odds.infrastructure.exports import CSVExporter  # noqa: E402
from climate_odds.services import ClimateQueryService  # noqa: E402


# =============================================================================
# STUB DATA SOURCES
# =============================================================================

class ConstantDataSource(DataSource):
    """Returns the same native value for every day."""

    name = "Constant test source"

    def __init__(self, value: Optional[float]):
        self.value = value
        self.calls = 0

    async def fetch(self, lat, lon, variable, day) -> Optional[float]:
        self.calls += 1
        return self.value


class MappingDataSource(DataSource):
    """Returns values from a date -> value mapping (None when absent)."""

    name = "Mapping test source"

    def __init__(self, values: Dict[date, Optional[float]]):
        self.values = values

    async def fetch(self, lat, lon, variable, day) -> Optional[float]:
        return self.values.get(day)


# =============================================================================
# CORE FIXTURES
# =============================================================================

@pytest.fixture
def constant_source():
    """293.15 K everywhere, i.e. exactly 20.0 °C after conversion."""
    return ConstantDataSource(293.15)


@pytest.fixture
def missing_source():
    """Every day reported missing."""
    return ConstantDataSource(None)


@pytest.fixture
def cache_manager():
    return CacheManager(default_ttl=3600, max_size=100, stats=CacheStats())


@pytest.fixture
def csv_exporter(tmp_path):
    return CSVExporter(tmp_path / "exports")


@pytest.fixture
def query_service(constant_source, cache_manager, csv_exporter):
    """Query service wired to the constant source."""
    return ClimateQueryService(
        source=constant_source,
        cache=cache_manager,
        exporter=csv_exporter,
        config=settings
    )


# =============================================================================
# APP FIXTURE WITH DEPENDENCY OVERRIDES
# =============================================================================

@pytest.fixture(scope="session")
def app():
    """
    Create FastAPI app with the API routers only.

    main.py (lifespan, middleware) is exercised separately by the smoke
    tests; here the routers run against overridden dependencies.
    """
    from fastapi import FastAPI

    from climate_odds.api.routers import climate_router, health_router

    test_app = FastAPI(title="Climate Odds API - Test", version="test")
    test_app.include_router(health_router)
    test_app.include_router(climate_router)

    return test_app


@pytest.fixture
def client(app, query_service, constant_source, csv_exporter):
    """
    FastAPI test client with the query service, exporter and data source
    replaced by per-test instances.
    """
    from climate_odds.dependencies import get_csv_exporter, get_data_source, get_query_service

    app.dependency_overrides[get_query_service] = lambda: query_service
    app.dependency_overrides[get_csv_exporter] = lambda: csv_exporter
    app.dependency_overrides[get_data_source] = lambda: constant_source

    with TestClient(app) as test_client:
        yield test_client

    # Clean up overrides
    app.dependency_overrides.clear()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

def make_sample(year: int, value: Optional[float], day_of_year: int = 185) -> Sample:
    """Sample dated on day_of_year of year."""
    from climate_odds.domain.windowing import day_of_year_to_date

    return Sample(
        date=day_of_year_to_date(year, day_of_year),
        value=value,
        year=year,
        day_of_year=day_of_year
    )


@pytest.fixture
def sample_factory():
    return make_sample


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
