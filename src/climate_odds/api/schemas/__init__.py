"""API Schemas Module"""

from .common import (
    HealthResponse,
    ReadinessResponse,
    VersionResponse,
    ErrorResponse,
    ErrorEnvelope
)
from .climate import WeatherQueryRequest, YearRangeModel

__all__ = [
    "HealthResponse",
    "ReadinessResponse",
    "VersionResponse",
    "ErrorResponse",
    "ErrorEnvelope",
    "WeatherQueryRequest",
    "YearRangeModel",
]
