"""
Data Sources Infrastructure Module
==================================

Provides the raw-value providers behind the sample assembler. The variant
is chosen from configuration, never inside the statistics core.
"""

from climate_odds.core.config import Settings

from .base import DataSource
from .nasa_power_client import NasaPowerDataSource
from .synthetic import SyntheticDataSource


def create_data_source(config: Settings) -> DataSource:
    """
    Build the data source selected by config.DATA_SOURCE.

    Raises:
        ValueError: If the configured source is unknown
    """
    if config.DATA_SOURCE == "synthetic":
        return SyntheticDataSource(
            seed=config.SYNTHETIC_SEED,
            missing_rate=config.SYNTHETIC_MISSING_RATE
        )
    if config.DATA_SOURCE == "nasa_power":
        return NasaPowerDataSource(
            base_url=config.NASA_POWER_BASE_URL,
            community=config.NASA_POWER_COMMUNITY,
            timeout=config.NASA_POWER_TIMEOUT
        )
    raise ValueError(f"Unknown DATA_SOURCE '{config.DATA_SOURCE}' (expected synthetic or nasa_power)")


__all__ = [
    "DataSource",
    "NasaPowerDataSource",
    "SyntheticDataSource",
    "create_data_source",
]
