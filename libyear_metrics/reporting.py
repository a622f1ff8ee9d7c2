"""
Reporting and export utilities.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Dict, Iterable, List

import pandas as pd

from .aggregation import BuildAggregates
from .models import CategoryResult, DependencyCoordinate, ModuleDescriptor, ReportRecord


logger = logging.getLogger(__name__)

INFO_PAD_SIZE = 72
REPORT_COLUMNS = ["dependency", "version", "type", "category", "libyears"]


def format_dependency_age(coordinate: DependencyCoordinate, lib_years: float) -> List[str]:
    """Render one dependency as dot-padded lines of INFO_PAD_SIZE columns."""
    right = f" {lib_years:.2f} libyears"
    left = f"  {coordinate} "
    width = INFO_PAD_SIZE - len(right)

    if len(left) + len(right) > INFO_PAD_SIZE:
        return [left, "  ".ljust(width, ".") + right]
    return [left.ljust(width, ".") + right]


def format_category(result: CategoryResult) -> List[str]:
    if not result.updates:
        return []
    lines = [f"The following dependencies in {result.category.title} have newer versions:"]
    for update in sorted(result.updates, key=lambda u: str(u.coordinate)):
        lines.extend(format_dependency_age(update.coordinate, update.lib_years))
    lines.append("")
    return lines


def log_category(result: CategoryResult) -> None:
    # One record per block so concurrent modules do not interleave lines.
    lines = format_category(result)
    if lines:
        logger.info("\n".join(lines))


def log_build_summary(aggregates: BuildAggregates) -> None:
    logger.info("Total libyears for the entire build: %.2f", aggregates.total_lib_years)

    oldest_module = aggregates.oldest_module()
    if oldest_module is not None:
        logger.info("Oldest module: %s (%.2f libyears)", *oldest_module)

    oldest_dependency = aggregates.oldest_dependency()
    if oldest_dependency is not None:
        coordinate, lib_years = oldest_dependency
        logger.info("Oldest dependency: %s (%.2f libyears)", coordinate, lib_years)


def report_frame(records: Iterable[ReportRecord]) -> pd.DataFrame:
    rows = [
        {
            "dependency": str(record.coordinate),
            "version": record.version,
            "type": record.type,
            "category": record.category,
            "libyears": record.formatted_lib_years(),
        }
        for record in records
    ]
    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def export_report_csv(records: Iterable[ReportRecord], report_file: Path) -> Path:
    """Append report records to a CSV file, writing the header for a new file."""
    report_file = Path(report_file)
    report_file.parent.mkdir(parents=True, exist_ok=True)
    df = report_frame(records)
    new_file = not report_file.exists()
    df.to_csv(report_file, mode="a", header=new_file, index=False)
    return report_file


class CsvReportWriter:
    """Report writer appending every module's records to one CSV file."""

    def __init__(self, report_file: Path) -> None:
        self.report_file = Path(report_file)
        self._lock = threading.Lock()

    def write(self, module: ModuleDescriptor, records: Iterable[ReportRecord]) -> None:
        records = list(records)
        if not records:
            return
        with self._lock:
            try:
                export_report_csv(records, self.report_file)
            except OSError as e:
                logger.error("Failed to write report file %s: %s", self.report_file, e)


def save_results_json(results: Dict, output_dir: Path, name: str) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    results_file = output_dir / f"{name}_libyears.json"
    with open(results_file, 'w') as f:
        json.dump(results, f, indent=2, default=str)
    return results_file
