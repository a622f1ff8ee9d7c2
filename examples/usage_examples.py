#!/usr/bin/env python3
"""
Example script showing how to use the libyear-metrics tool.
"""

import logging
from pathlib import Path

from libyear_metrics.config import AnalysisConfig
from libyear_metrics.errors import ThresholdExceededError
from libyear_metrics.manifest import load_build_manifest
from libyear_metrics.session import BuildSession

MANIFEST = Path(__file__).with_name("build_manifest.json")


def example_basic_analysis():
    """Example: age every module of a build."""
    print("="*60)
    print("Example 1: Basic Analysis")
    print("="*60)

    session = BuildSession(AnalysisConfig())
    result = session.run(load_build_manifest(MANIFEST))

    print(f"\nTotal libyears: {result.total_lib_years:.2f}")
    for name, age in sorted(result.module_ages.items()):
        print(f"  {name}: {age:.2f}")


def example_threshold():
    """Example: fail when a module is more than two libyears behind."""
    print("\n" + "="*60)
    print("Example 2: Threshold")
    print("="*60)

    config = AnalysisConfig(
        max_lib_years=2.0,
        ignored_versions=(r"\d{8}\.\d+",),
        report_file="./output/libyear_report.csv",
    )
    session = BuildSession(config)
    try:
        session.run(load_build_manifest(MANIFEST), max_workers=2)
    except ThresholdExceededError as e:
        print(f"Build failed for {e.module}: {e}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    example_basic_analysis()
    example_threshold()
