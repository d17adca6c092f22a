"""
Infrastructure Layer
====================

External integrations: climate data sources and CSV exports.
"""

from .data_sources import (
    DataSource,
    NasaPowerDataSource,
    SyntheticDataSource,
    create_data_source
)

from .exports import CSVExporter

__all__ = [
    "DataSource",
    "NasaPowerDataSource",
    "SyntheticDataSource",
    "create_data_source",
    "CSVExporter",
]
