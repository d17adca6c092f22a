"""
Health Router
=============

Liveness, readiness and version probes for orchestrators and monitoring.
"""

from fastapi import APIRouter, Depends
from datetime import datetime, timezone

from climate_odds.api.schemas import HealthResponse, ReadinessResponse, VersionResponse
from climate_odds.core.config import settings
from climate_odds.dependencies import get_csv_exporter, get_data_source
from climate_odds.domain.variables import VARIABLE_REGISTRY
from climate_odds.infrastructure.data_sources import DataSource
from climate_odds.infrastructure.exports import CSVExporter

router = APIRouter(prefix="", tags=["Health"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Liveness probe: the process is up and serving."""
    return HealthResponse(status="healthy", timestamp=_now(), version=settings.API_VERSION)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(
    source: DataSource = Depends(get_data_source),
    exporter: CSVExporter = Depends(get_csv_exporter)
):
    """
    Readiness probe.

    Ready once the exports directory exists and the variable registry is
    populated; the data source name is reported for information.
    """
    checks = {
        "data_source": source.name,
        "exports_dir": "pass" if exporter.output_dir.is_dir() else "missing",
        "variables": "pass" if VARIABLE_REGISTRY else "empty",
    }

    return ReadinessResponse(
        ready=checks["exports_dir"] == "pass" and checks["variables"] == "pass",
        timestamp=_now(),
        checks=checks
    )


@router.get("/version", response_model=VersionResponse)
async def version_info():
    return VersionResponse(
        version=settings.API_VERSION,
        environment=settings.ENVIRONMENT,
        data_source=settings.DATA_SOURCE
    )
