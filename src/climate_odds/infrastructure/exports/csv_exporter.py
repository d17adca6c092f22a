"""
CSV Export of Query Time Series
===============================

Writes the full sample series of a query to a CSV file, followed by
'#'-prefixed metadata and statistics lines, and serves those files back for
download.
"""

import csv
import logging
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from climate_odds.core.exceptions import ExportNotFoundError, InvalidExportNameError
from climate_odds.domain.models import Sample, StatsResult

logger = logging.getLogger(__name__)

DOWNLOAD_ROUTE = "/api/v1/weather/download"


def _fmt(value: Optional[float]) -> str:
    return f"{value:.2f}" if value is not None else "n/a"


class CSVExporter:
    """Generates, resolves and expires CSV exports in one directory."""

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def generate(
        self,
        samples: Sequence[Sample],
        meta: Dict[str, Any],
        stats: StatsResult
    ) -> str:
        """
        Write samples and a metadata/statistics footer to a new CSV file.

        Args:
            samples: Full assembled series
            meta: Query metadata (variable, units, lat, lon, dayOfYear,
                  window, yearRange, dataSource)
            stats: Statistics of the same samples

        Returns:
            Generated file name (relative to the exports directory)
        """
        timestamp = int(time.time() * 1000)
        filename = f"weather_data_{meta['variable']}_{timestamp}_{uuid.uuid4().hex[:8]}.csv"
        filepath = self.output_dir / filename

        with filepath.open("w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["Date", "Year", "Day of Year", f"{meta['variable']} ({meta['units']})"])
            for sample in samples:
                writer.writerow([
                    sample.date.isoformat(),
                    sample.year,
                    sample.day_of_year,
                    "" if sample.value is None else sample.value,
                ])

            f.write("\n")
            f.write("\n".join(self._footer_lines(meta, stats)))
            f.write("\n")

        logger.info(f"📄 CSV generated: {filename} ({len(samples)} rows)")
        return filename

    @staticmethod
    def _footer_lines(meta: Dict[str, Any], stats: StatsResult) -> List[str]:
        year_range = meta["yearRange"]
        lines = [
            "# Metadata",
            f"# Location: {meta['lat']}, {meta['lon']}",
            f"# Variable: {meta['variable']}",
            f"# Units: {meta['units']}",
            f"# Day of Year: {meta['dayOfYear']} ±{meta['window']} days",
            f"# Year Range: {year_range['start']}-{year_range['end']}",
            f"# Data Source: {meta['dataSource']}",
            f"# Generated: {datetime.now(timezone.utc).isoformat()}",
            "",
            "# Statistics",
            f"# Count: {stats.count}",
            f"# Mean: {_fmt(stats.mean)}",
            f"# Median: {_fmt(stats.median)}",
            f"# Std Dev: {_fmt(stats.std)}",
            f"# Min: {_fmt(stats.min)}",
            f"# Max: {_fmt(stats.max)}",
        ]

        percentiles = stats.percentiles or {}
        for key in ("p10", "p25", "p75", "p90"):
            lines.append(f"# {key.upper()}: {_fmt(percentiles.get(key))}")

        if stats.exceedance is not None:
            lines.append(f"# Threshold: {stats.exceedance.threshold}")
            lines.append(f"# Exceedance Probability: {stats.exceedance.percentage:.1f}%")

        return lines

    @staticmethod
    def public_url(filename: str) -> str:
        return f"{DOWNLOAD_ROUTE}/{filename}"

    def resolve(self, filename: str) -> Path:
        """
        Path of an existing export.

        Raises:
            InvalidExportNameError: If the name contains path components
            ExportNotFoundError: If the file does not exist (or expired)
        """
        if ".." in filename or "/" in filename or "\\" in filename:
            raise InvalidExportNameError(filename)

        filepath = self.output_dir / filename
        if not filepath.is_file():
            raise ExportNotFoundError(filename)
        return filepath

    def cleanup_old_files(self, max_age_hours: int = 24) -> int:
        """
        Delete exports older than max_age_hours.

        Returns:
            Number of files removed
        """
        cutoff = time.time() - max_age_hours * 3600
        removed = 0

        for filepath in self.output_dir.glob("*.csv"):
            if filepath.stat().st_mtime < cutoff:
                filepath.unlink()
                removed += 1
                logger.info(f"🧹 Deleted old export: {filepath.name}")

        return removed
