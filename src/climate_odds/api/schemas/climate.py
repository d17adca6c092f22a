"""
Climate Query Pydantic Schemas
==============================

Request models for the /api/v1/weather endpoints. Field names follow the
camelCase JSON of the public API; snake_case names are accepted as well.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from climate_odds.domain.variables import VARIABLE_REGISTRY
from climate_odds.domain.windowing import date_to_day_of_year

MIN_YEAR = 1980
MAX_YEAR = 2023


class YearRangeModel(BaseModel):
    """Inclusive range of years to sample."""
    start: int = Field(MIN_YEAR, ge=MIN_YEAR, le=MAX_YEAR, description="First year")
    end: int = Field(MAX_YEAR, ge=MIN_YEAR, le=MAX_YEAR, description="Last year")

    @model_validator(mode="after")
    def check_order(self):
        if self.start > self.end:
            raise ValueError("yearRange.start must not be after yearRange.end")
        return self


class WeatherQueryRequest(BaseModel):
    """Request model for a climate probability query."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "lat": 40.7128,
                "lon": -74.006,
                "dayOfYear": 185,
                "variable": "temperature",
                "threshold": 30,
                "window": 7,
                "yearRange": {"start": 1990, "end": 2020},
                "locationName": "New York"
            }
        }
    )

    lat: float = Field(..., ge=-90, le=90, description="Latitude in degrees")
    lon: float = Field(..., ge=-180, le=180, description="Longitude in degrees")
    day_of_year: Optional[int] = Field(
        None, alias="dayOfYear", ge=1, le=366, description="Target day of year"
    )
    query_date: Optional[str] = Field(
        None,
        alias="date",
        pattern=r"^\d{4}-\d{2}-\d{2}$",
        description="Target date (YYYY-MM-DD), used when dayOfYear is absent"
    )
    variable: str = Field(..., description="Variable name (see /variables)")
    threshold: Optional[float] = Field(None, description="Exceedance threshold in display units")
    window: int = Field(7, ge=0, le=30, description="± days around the target day")
    year_range: YearRangeModel = Field(default_factory=YearRangeModel, alias="yearRange")
    location_name: Optional[str] = Field(None, alias="locationName", max_length=200)

    @field_validator("variable")
    @classmethod
    def check_variable(cls, value: str) -> str:
        if value not in VARIABLE_REGISTRY:
            allowed = ", ".join(VARIABLE_REGISTRY)
            raise ValueError(f"Unknown variable '{value}' (expected one of: {allowed})")
        return value

    @model_validator(mode="after")
    def resolve_day_of_year(self):
        """Derive dayOfYear from date when only the date was given."""
        if self.day_of_year is not None:
            return self
        if self.query_date is None:
            raise ValueError("Either dayOfYear or date is required")
        try:
            parsed = datetime.strptime(self.query_date, "%Y-%m-%d").date()
        except ValueError:
            raise ValueError(f"Invalid date '{self.query_date}'") from None
        self.day_of_year = date_to_day_of_year(parsed)
        return self
