"""CSV export infrastructure."""

from .csv_exporter import CSVExporter

__all__ = ["CSVExporter"]
