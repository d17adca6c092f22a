"""
Dependency Injection Module
============================

Provides dependency injection for FastAPI endpoints.
The data source, cache, CSV exporter and query service are created here,
once per process.

Usage in routers:
    @router.post("/query")
    async def query(
        request: WeatherQueryRequest,
        service: ClimateQueryService = Depends(get_query_service)
    ):
        ...
"""

from functools import lru_cache
from typing import Optional
import logging

from climate_odds.core.cache import CacheManager, CacheStats
from climate_odds.core.config import settings
from climate_odds.infrastructure.data_sources import DataSource, create_data_source
from climate_odds.infrastructure.exports import CSVExporter
from climate_odds.services import ClimateQueryService

logger = logging.getLogger(__name__)


# =================================================================
# DATA SOURCE
# =================================================================

@lru_cache()
def get_data_source() -> DataSource:
    """
    Get the configured data source (singleton pattern).

    Raises:
        ValueError: If DATA_SOURCE names an unknown variant
    """
    source = create_data_source(settings)
    logger.info(f"✅ Data source initialized: {source.name}")
    return source


# =================================================================
# CACHE
# =================================================================

@lru_cache()
def get_cache_manager() -> Optional[CacheManager]:
    """
    Get the response cache, or None when CACHE_ENABLED is false.
    """
    if not settings.CACHE_ENABLED:
        logger.info("Cache disabled (CACHE_ENABLED=false)")
        return None

    cache = CacheManager(
        default_ttl=settings.CACHE_TTL_SECONDS,
        max_size=settings.CACHE_MAX_SIZE,
        stats=CacheStats()
    )
    logger.info(
        f"✅ Cache initialized (ttl={settings.CACHE_TTL_SECONDS}s, "
        f"max_size={settings.CACHE_MAX_SIZE})"
    )
    return cache


# =================================================================
# CSV EXPORTER
# =================================================================

@lru_cache()
def get_csv_exporter() -> CSVExporter:
    exporter = CSVExporter(settings.EXPORTS_DIR)
    logger.info(f"✅ CSV exporter initialized: {exporter.output_dir}")
    return exporter


# =================================================================
# QUERY SERVICE
# =================================================================

@lru_cache()
def get_query_service() -> ClimateQueryService:
    """
    Get the climate query service wired to the singletons above.
    """
    return ClimateQueryService(
        source=get_data_source(),
        cache=get_cache_manager(),
        exporter=get_csv_exporter(),
        config=settings
    )


# =================================================================
# CLEANUP
# =================================================================

async def cleanup_dependencies():
    """
    Cleanup all dependency resources.

    This function should be called during application shutdown.
    """
    cache = get_cache_manager()
    if cache is not None:
        cache.clear()

    for factory in (get_query_service, get_csv_exporter, get_cache_manager, get_data_source):
        factory.cache_clear()

    logger.info("🧹 All dependencies cleaned up")
