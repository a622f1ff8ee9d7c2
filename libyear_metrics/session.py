"""
Build session orchestration.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from tqdm import tqdm

from .aggregation import BuildAggregates
from .analyzer import ModuleAnalyzer
from .cache import ReleaseDateCache
from .config import AnalysisConfig
from .errors import ThresholdExceededError
from .interfaces import ReleaseDateFetcher, ReportWriter, VersionResolver
from .models import ModuleDescriptor, ModuleResult
from .registry import RegistryClient
from .reporting import CsvReportWriter, log_build_summary
from .resolvers import ManifestVersionResolver, ReleaseDateResolver
from .time_utils import today_utc


logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Everything a build session produced."""

    modules: List[ModuleResult] = field(default_factory=list)
    failures: List[ThresholdExceededError] = field(default_factory=list)
    total_lib_years: float = 0.0
    module_ages: Dict[str, float] = field(default_factory=dict)
    dependency_ages: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_libyears": round(self.total_lib_years, 2),
            "modules": {name: round(age, 2) for name, age in self.module_ages.items()},
            "dependencies": {name: round(age, 2) for name, age in self.dependency_ages.items()},
            "failures": [str(failure) for failure in self.failures],
        }


class BuildSession:
    """Owns the state shared by all modules of one build.

    The release-date cache and the aggregates live here and are handed to
    every module analysis; ``reset`` prepares the session for another build.
    """

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        version_resolver: Optional[VersionResolver] = None,
        client: Optional[ReleaseDateFetcher] = None,
        report_writer: Optional[ReportWriter] = None,
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        self.config = config or AnalysisConfig()
        self.client = client if client is not None else RegistryClient(
            search_uri=self.config.search_uri,
            timeout=self.config.http_timeout,
            retry_count=self.config.fetch_retry_count,
            retry_interval=self.config.retry_interval,
        )
        self.cache = ReleaseDateCache()
        self.resolver = ReleaseDateResolver(self.client, self.cache)
        self.aggregates = BuildAggregates()
        self.version_resolver = version_resolver or ManifestVersionResolver(self.config.ignored_versions)
        if report_writer is None and self.config.report_file:
            report_writer = CsvReportWriter(Path(self.config.report_file))
        self.analyzer = ModuleAnalyzer(
            config=self.config,
            resolver=self.resolver,
            version_resolver=self.version_resolver,
            aggregates=self.aggregates,
            report_writer=report_writer,
            today=today or today_utc,
        )

    def analyze_module(self, module: ModuleDescriptor) -> ModuleResult:
        return self.analyzer.analyze(module)

    def run(
        self,
        modules: Sequence[ModuleDescriptor],
        max_workers: int = 1,
        progress: bool = False,
        raise_on_threshold: bool = True,
    ) -> BuildResult:
        """Analyze all modules, then finalize once after the last one.

        Threshold breaches do not stop other modules; the first one is raised
        after the build summary has been logged, unless ``raise_on_threshold``
        is false, in which case they are only listed in ``BuildResult.failures``.
        """
        result = BuildResult()
        self.aggregates.expect_modules(len(modules))

        def run_one(module: ModuleDescriptor) -> None:
            try:
                result.modules.append(self.analyze_module(module))
            except ThresholdExceededError as e:
                result.failures.append(e)
            finally:
                if self.aggregates.mark_module_complete():
                    self.finalize(len(modules))

        with tqdm(total=len(modules), unit="module", disable=not progress) as pbar:
            if max_workers <= 1:
                for module in modules:
                    run_one(module)
                    pbar.update(1)
            else:
                with ThreadPoolExecutor(max_workers=max_workers) as executor:
                    futures = [executor.submit(run_one, module) for module in modules]
                    for future in as_completed(futures):
                        future.result()
                        pbar.update(1)

        result.total_lib_years = self.aggregates.total_lib_years
        result.module_ages = self.aggregates.module_ages()
        result.dependency_ages = {
            str(coordinate): age for coordinate, age in self.aggregates.dependency_ages().items()
        }

        if result.failures and raise_on_threshold:
            raise result.failures[0]
        return result

    def finalize(self, module_count: int) -> None:
        if module_count > 1:
            log_build_summary(self.aggregates)

    def reset(self) -> None:
        self.cache.clear()
        self.aggregates.reset()
