"""
Settings
========

Every tunable of the service, read from the environment (or a .env file)
through pydantic-settings.

Environment Variables (all optional):
- DATA_SOURCE: "synthetic" (default) or "nasa_power"
- SYNTHETIC_SEED: Seed for the deterministic synthetic generator
- NASA_POWER_BASE_URL: NASA POWER daily point endpoint
- CACHE_TTL_SECONDS: Lifetime of cached query results
- EXPORTS_DIR: Directory for generated CSV files
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
from pathlib import Path


class Settings(BaseSettings):
    """Service settings; field names are the environment variable names."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # =================================================================
    # APPLICATION SETTINGS
    # =================================================================
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[Path] = None
    API_VERSION: str = "1.0.0"

    # =================================================================
    # DATA SOURCE SETTINGS
    # =================================================================
    DATA_SOURCE: str = "synthetic"  # synthetic or nasa_power

    # Synthetic generator
    SYNTHETIC_SEED: int = 42
    SYNTHETIC_MISSING_RATE: float = 0.0  # Fraction of days reported missing

    # NASA POWER daily point API (no key required)
    NASA_POWER_BASE_URL: str = "https://power.larc.nasa.gov/api/temporal/daily/point"
    NASA_POWER_COMMUNITY: str = "RE"
    NASA_POWER_TIMEOUT: int = 60  # seconds
    NASA_POWER_MAX_RETRIES: int = 3

    # =================================================================
    # QUERY DEFAULTS
    # =================================================================
    DEFAULT_START_YEAR: int = 1980
    DEFAULT_END_YEAR: int = 2023
    DEFAULT_WINDOW_DAYS: int = 7  # ±7 days around target day-of-year
    MAX_WINDOW_DAYS: int = 30
    HISTOGRAM_BINS: int = 20
    TIMESERIES_PREVIEW_LIMIT: int = 100  # Full series goes to the CSV export

    # =================================================================
    # CACHE SETTINGS
    # =================================================================
    CACHE_ENABLED: bool = True
    CACHE_TTL_SECONDS: int = 3600  # 1 hour
    CACHE_MAX_SIZE: int = 1000
    CACHE_CLEANUP_INTERVAL: int = 600  # 10 minutes

    # =================================================================
    # CSV EXPORT SETTINGS
    # =================================================================
    EXPORTS_DIR: Path = Path("exports")
    EXPORT_MAX_AGE_HOURS: int = 24

    # =================================================================
    # CORS
    # =================================================================
    CORS_ORIGINS: List[str] = ["*"]  # In production, specify exact domains

    @property
    def is_production(self) -> bool:
        """Whether the service runs with production logging."""
        return self.ENVIRONMENT == "production"

    @property
    def data_source_label(self) -> str:
        """Human readable name of the configured data source."""
        if self.DATA_SOURCE == "nasa_power":
            return "NASA POWER (LaRC) daily point API"
        return "Synthetic climatology generator"

    def __repr__(self):
        return (
            f"Settings("
            f"env={self.ENVIRONMENT}, "
            f"data_source={self.DATA_SOURCE}, "
            f"cache_ttl={self.CACHE_TTL_SECONDS}, "
            f"exports_dir={self.EXPORTS_DIR})"
        )


# Global settings instance
settings = Settings()
