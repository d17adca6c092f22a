"""
Shared Response Schemas
=======================

Probe, version and error bodies reused by several routers.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any


class HealthResponse(BaseModel):
    status: str = Field(..., description="Always 'healthy' when the process answers")
    timestamp: str = Field(..., description="UTC time of the probe (ISO 8601)")
    version: str = Field(..., description="API version")


class ReadinessResponse(BaseModel):
    ready: bool = Field(..., description="True when the service can answer queries")
    timestamp: str = Field(..., description="UTC time of the probe (ISO 8601)")
    checks: Dict[str, str] = Field(..., description="Result per component")


class VersionResponse(BaseModel):
    version: str
    environment: str
    data_source: str = Field(..., description="Configured climate data source")


class ErrorResponse(BaseModel):
    """Body found under `detail` in every 4xx/5xx answer of the climate routes."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "NO_DATA",
                "message": "No data available for the specified location and time period",
                "details": {"variable": "temperature", "lat": 40.71, "lon": -74.01}
            }
        }
    )

    error: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable explanation")
    details: Optional[Dict[str, Any]] = Field(None, description="Error context")


class ErrorEnvelope(BaseModel):
    detail: ErrorResponse
