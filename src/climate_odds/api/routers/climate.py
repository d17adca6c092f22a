"""
Climate Query Router
====================

Endpoints for historical climate probability queries, CSV downloads, cache
management and the variable catalogue.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from typing import Dict, Any
import logging

from climate_odds.api.schemas import ErrorEnvelope, WeatherQueryRequest
from climate_odds.core.exceptions import handle_exceptions
from climate_odds.dependencies import get_csv_exporter, get_query_service
from climate_odds.infrastructure.exports import CSVExporter
from climate_odds.services import ClimateQueryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/weather", tags=["Climate"])


@router.post(
    "/query",
    responses={
        404: {"model": ErrorEnvelope, "description": "No samples for the query"},
        422: {"model": ErrorEnvelope, "description": "Invalid query parameters"},
        502: {"model": ErrorEnvelope, "description": "Upstream data source failure"},
    }
)
@handle_exceptions
async def query_weather(
    request: WeatherQueryRequest,
    service: ClimateQueryService = Depends(get_query_service)
) -> Dict[str, Any]:
    """
    Historical probability query.

    Samples the variable over ±window days around the target day for every
    year of the range and returns statistics, trend, quality, a summary and
    a CSV download link.
    """
    logger.info(
        f"🔎 Query: {request.variable} at ({request.lat}, {request.lon}) "
        f"day {request.day_of_year} ±{request.window}"
    )
    return await service.query(
        lat=request.lat,
        lon=request.lon,
        variable=request.variable,
        day_of_year=request.day_of_year,
        window=request.window,
        start_year=request.year_range.start,
        end_year=request.year_range.end,
        threshold=request.threshold,
        location_name=request.location_name
    )


@router.get(
    "/download/{filename}",
    responses={
        400: {"model": ErrorEnvelope, "description": "Invalid file name"},
        404: {"model": ErrorEnvelope, "description": "File not found or expired"},
    }
)
@handle_exceptions
async def download_export(
    filename: str,
    exporter: CSVExporter = Depends(get_csv_exporter)
) -> FileResponse:
    """Download a CSV export produced by /query."""
    path = exporter.resolve(filename)
    return FileResponse(path, media_type="text/csv", filename=filename)


@router.get("/cache-stats")
async def get_cache_stats(
    service: ClimateQueryService = Depends(get_query_service)
) -> Dict[str, Any]:
    """Cache hit/miss statistics."""
    return service.cache_stats()


@router.delete("/cache")
async def clear_cache(
    service: ClimateQueryService = Depends(get_query_service)
) -> Dict[str, Any]:
    """Drop every cached query result."""
    cleared = service.clear_cache()
    return {"success": True, "cleared": cleared}


@router.get("/variables")
async def list_variables(
    service: ClimateQueryService = Depends(get_query_service)
) -> Dict[str, Any]:
    """Variables that can be queried, with display units."""
    variables = service.variables()
    return {"variables": variables, "count": len(variables)}
