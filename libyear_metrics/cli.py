"""
Command-line interface for the libyear metrics tool.
"""

import argparse
import logging
import sys
from pathlib import Path

from .config import (
    AnalysisConfig,
    DEFAULT_FETCH_RETRY_COUNT,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_SEARCH_URI,
)
from .errors import ManifestError, ThresholdExceededError
from .manifest import load_build_manifest
from .models import DependencyCategory
from .reporting import save_results_json
from .session import BuildSession

EXIT_THRESHOLD_EXCEEDED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Calculate how many libyears the dependencies of a build are behind"
    )

    parser.add_argument(
        "manifest",
        help="JSON build manifest listing modules and their dependencies"
    )

    parser.add_argument(
        "--search-uri",
        default=DEFAULT_SEARCH_URI,
        help=f"Search API used to look up release dates. Default: {DEFAULT_SEARCH_URI}"
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_HTTP_TIMEOUT_SECONDS,
        help=f"HTTP timeout in seconds. Default: {DEFAULT_HTTP_TIMEOUT_SECONDS}"
    )

    parser.add_argument(
        "--retries",
        type=int,
        default=DEFAULT_FETCH_RETRY_COUNT,
        help=f"Retries for failed lookups. Default: {DEFAULT_FETCH_RETRY_COUNT}"
    )

    parser.add_argument(
        "--max-libyears",
        type=float,
        default=0.0,
        help="Fail when a module is at least this many libyears behind. Default: 0 (disabled)"
    )

    parser.add_argument(
        "--min-libyears-for-report",
        type=float,
        default=0.0,
        help="Only write ages above this value to the report file. Default: 0"
    )

    parser.add_argument(
        "--report-file",
        default=None,
        help="CSV file to append per-dependency ages to"
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save a JSON summary of the build to"
    )

    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of modules analyzed in parallel. Default: 1"
    )

    parser.add_argument(
        "--ignore-version",
        action="append",
        default=[],
        metavar="REGEX",
        help="Never treat versions matching this pattern as the latest (repeatable)"
    )

    parser.add_argument(
        "--include",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Only analyze dependencies matching namespace[:name[:version[:type]]] (repeatable)"
    )

    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Skip dependencies matching namespace[:name[:version[:type]]] (repeatable)"
    )

    parser.add_argument("--skip-dependency-management", action="store_true")
    parser.add_argument("--skip-dependencies", action="store_true")
    parser.add_argument("--skip-plugin-management", action="store_true")
    parser.add_argument("--skip-plugin-dependencies", action="store_true")

    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar over modules"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    return parser


def config_from_args(args: argparse.Namespace) -> AnalysisConfig:
    includes = {category: list(args.include) for category in DependencyCategory} if args.include else {}
    excludes = {category: list(args.exclude) for category in DependencyCategory} if args.exclude else {}
    return AnalysisConfig(
        search_uri=args.search_uri,
        http_timeout=args.timeout,
        fetch_retry_count=args.retries,
        max_lib_years=args.max_libyears,
        min_lib_years_for_report=args.min_libyears_for_report,
        report_file=args.report_file,
        process_dependency_management=not args.skip_dependency_management,
        process_dependencies=not args.skip_dependencies,
        process_plugin_management_dependencies=not args.skip_plugin_management,
        process_plugin_dependencies=not args.skip_plugin_dependencies,
        includes=includes,
        excludes=excludes,
        ignored_versions=tuple(args.ignore_version),
    )


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    try:
        config = config_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    try:
        modules = load_build_manifest(Path(args.manifest))
    except ManifestError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    session = BuildSession(config)
    result = session.run(
        modules,
        max_workers=args.workers,
        progress=args.progress,
        raise_on_threshold=False,
    )

    if args.output_dir:
        results_file = save_results_json(
            result.to_dict(), Path(args.output_dir), Path(args.manifest).stem
        )
        print(f"Results saved to: {results_file}")

    if result.failures:
        failure: ThresholdExceededError = result.failures[0]
        print(f"Error: module {failure.module}: {failure}", file=sys.stderr)
        sys.exit(EXIT_THRESHOLD_EXCEEDED)


if __name__ == "__main__":
    main()
