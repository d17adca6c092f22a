"""
Service Errors
==============

Errors raised at the edges of the Climate Odds service and their mapping to
HTTP responses.

    ClimateOddsException                 500
    ├── DataSourceError                  500
    │   ├── NasaPowerAPIError            502
    │   └── VariableNotSupportedError    400
    ├── UnknownVariableError             422
    ├── NoDataError                      404
    ├── ValidationError                  422
    └── ExportError                      500
        ├── ExportNotFoundError          404
        └── InvalidExportNameError       400

Empty sample sets, missing values and flat distributions inside the
statistics core are ordinary results, not errors.
"""

import logging
from functools import wraps
from typing import Any, Callable, Dict, Optional

from fastapi import HTTPException, status

logger = logging.getLogger(__name__)


class ClimateOddsException(Exception):
    """
    Root of the service error tree.

    `error_code` is the machine-readable identifier sent to clients (the
    class name unless a subclass sets one); `http_status` is the response
    status used by to_http_exception().
    """

    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message
        self.details = details or {}
        self.error_code = error_code or type(self).__name__
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Error body: {"error", "message", "details"}."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


# Data acquisition

class DataSourceError(ClimateOddsException):
    """A climate data source could not deliver."""


class NasaPowerAPIError(DataSourceError):
    """NASA POWER answered with an error status or could not be reached."""

    http_status = status.HTTP_502_BAD_GATEWAY

    def __init__(self, status_code: int, reason: str):
        super().__init__(
            message=f"NASA POWER request failed with {status_code}: {reason}",
            details={"status_code": status_code, "api": "NASA POWER"},
            error_code="NASA_POWER_API_ERROR"
        )


class VariableNotSupportedError(DataSourceError):
    http_status = status.HTTP_400_BAD_REQUEST

    def __init__(self, source: str, variable: str):
        super().__init__(
            message=f"{source} does not provide '{variable}'",
            details={"source": source, "variable": variable},
            error_code="VARIABLE_NOT_SUPPORTED"
        )


# Query input and results

class UnknownVariableError(ClimateOddsException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, variable: str):
        super().__init__(
            message=f"Unknown variable '{variable}'",
            details={"variable": variable},
            error_code="UNKNOWN_VARIABLE"
        )


class NoDataError(ClimateOddsException):
    """Not a single sample could be assembled for the query window."""

    http_status = status.HTTP_404_NOT_FOUND

    def __init__(self, variable: str, lat: float, lon: float):
        super().__init__(
            message="No data available for the specified location and time period",
            details={"variable": variable, "lat": lat, "lon": lon},
            error_code="NO_DATA"
        )


class ValidationError(ClimateOddsException):
    """A query parameter is outside its accepted range."""

    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, field: str, value: Any, reason: str):
        super().__init__(
            message=f"Invalid {field}: {reason}",
            details={"field": field, "value": str(value), "reason": reason},
            error_code="VALIDATION_FAILED"
        )


# CSV exports

class ExportError(ClimateOddsException):
    """Generating or serving a CSV export failed."""


class ExportNotFoundError(ExportError):
    """Never generated, or already removed by the age-based cleanup."""

    http_status = status.HTTP_404_NOT_FOUND

    def __init__(self, filename: str):
        super().__init__(
            message="File not found or expired",
            details={"filename": filename},
            error_code="EXPORT_NOT_FOUND"
        )


class InvalidExportNameError(ExportError):
    """The requested name would resolve outside the exports directory."""

    http_status = status.HTTP_400_BAD_REQUEST

    def __init__(self, filename: str):
        super().__init__(
            message="Invalid filename",
            details={"filename": filename},
            error_code="INVALID_EXPORT_NAME"
        )


def to_http_exception(exc: ClimateOddsException) -> HTTPException:
    """
    Wrap a service error in the HTTPException FastAPI should answer with.

    Example:
        >>> to_http_exception(UnknownVariableError("snowfall")).status_code
        422
    """
    return HTTPException(status_code=exc.http_status, detail=exc.to_dict())


def handle_exceptions(func: Callable) -> Callable:
    """
    Route decorator translating service errors into HTTP responses.

    HTTPExceptions raised by the route pass through untouched; anything
    unexpected is logged with its traceback and answered with a 500.

    Example:
        >>> @router.post("/query")
        ... @handle_exceptions
        ... async def query_climate(request: WeatherQueryRequest):
        ...     ...
    """
    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except ClimateOddsException as e:
            level = logging.ERROR if e.http_status >= 500 else logging.WARNING
            logger.log(level, f"{func.__name__} failed: [{e.error_code}] {e.message}")
            raise to_http_exception(e)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Unhandled error in {func.__name__}: {e}", exc_info=True)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail={"error": "INTERNAL_SERVER_ERROR", "message": str(e)}
            )

    return wrapper
