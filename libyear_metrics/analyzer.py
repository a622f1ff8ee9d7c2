"""
Core analyzer turning dependency updates into libyears.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Dict, List, Optional, Set

from .aggregation import BuildAggregates
from .config import AnalysisConfig
from .errors import ThresholdExceededError
from .filters import filter_dependencies
from .interfaces import ReportWriter, VersionResolver
from .models import (
    AgedUpdate,
    CategoryResult,
    DeclaredDependency,
    DependencyCategory,
    DependencyCoordinate,
    ModuleDescriptor,
    ModuleResult,
    ReportRecord,
    UpdateCandidate,
)
from .reporting import log_category
from .resolvers import ReleaseDateResolver
from .time_utils import today_utc, weeks_between, weeks_to_years


logger = logging.getLogger(__name__)


class UpdateDetector:
    """Compute the age of an available update from the release dates of both versions."""

    def __init__(self, resolver: ReleaseDateResolver) -> None:
        self.resolver = resolver

    def evaluate(self, candidate: UpdateCandidate) -> Optional[AgedUpdate]:
        if not candidate.latest_version or candidate.current_version == candidate.latest_version:
            return None

        coordinate = candidate.coordinate
        latest_date = self.resolver.resolve(coordinate, candidate.latest_version)
        current_date = self.resolver.resolve(coordinate, candidate.current_version)
        if latest_date is None or current_date is None:
            return None

        # Upstream metadata can rank an older, date-stamped version as the newest.
        if current_date > latest_date:
            logger.debug(
                "Ignoring %s %s -> %s: latest version was released before the current one",
                coordinate,
                candidate.current_version,
                candidate.latest_version,
            )
            return None

        return AgedUpdate(
            coordinate=coordinate,
            current_date=current_date,
            latest_date=latest_date,
            lib_weeks=weeks_between(current_date, latest_date),
        )


class ModuleAnalyzer:
    """Analyze every enabled dependency category of a module."""

    def __init__(
        self,
        config: AnalysisConfig,
        resolver: ReleaseDateResolver,
        version_resolver: VersionResolver,
        aggregates: BuildAggregates,
        report_writer: Optional[ReportWriter] = None,
        today: Callable[[], date] = today_utc,
    ) -> None:
        self.config = config
        self.resolver = resolver
        self.detector = UpdateDetector(resolver)
        self.version_resolver = version_resolver
        self.aggregates = aggregates
        self.report_writer = report_writer
        self.today = today

    def analyze(self, module: ModuleDescriptor) -> ModuleResult:
        """Age the module's dependencies, raising ThresholdExceededError past the ceiling.

        Every category is evaluated and logged before the ceiling is checked.
        """
        results = []
        managed: Set[DependencyCoordinate] = set()
        for category in self.config.enabled_categories():
            dependencies = self.select_dependencies(module, category)
            if category is DependencyCategory.DEPENDENCY_MANAGEMENT:
                managed = {dep.coordinate for dep in dependencies}
            elif category is DependencyCategory.DEPENDENCIES:
                # Managed entries take precedence over direct ones.
                dependencies = [dep for dep in dependencies if dep.coordinate not in managed]
            results.append(self.analyze_dependencies(module, category, dependencies))

        result = ModuleResult(module=module.name, categories=tuple(results))
        lib_years = result.lib_years

        if lib_years != 0:
            logger.info("This module is %.2f libyears behind", lib_years)

        self.aggregates.record_module(module.name, lib_years)

        ceiling = self.config.max_lib_years
        if ceiling != 0 and lib_years >= ceiling:
            logger.info("")
            logger.error("This module exceeds the maximum dependency age of %.2f libyears", ceiling)
            raise ThresholdExceededError(ceiling, lib_years, module.name)

        return result

    def select_dependencies(
        self, module: ModuleDescriptor, category: DependencyCategory
    ) -> List[DeclaredDependency]:
        """Filtered dependencies of a category, one entry per coordinate."""
        dependencies = filter_dependencies(
            self.version_resolver.dependencies(module, category),
            self.config.includes_for(category),
            self.config.excludes_for(category),
            category.title,
        )

        selected: Dict[DependencyCoordinate, DeclaredDependency] = {}
        for dep in dependencies:
            if dep.coordinate in selected:
                logger.debug("Skipping duplicate %s %s in %s", dep.coordinate, dep.version, category.title)
                continue
            selected[dep.coordinate] = dep
        return list(selected.values())

    def analyze_category(self, module: ModuleDescriptor, category: DependencyCategory) -> CategoryResult:
        return self.analyze_dependencies(module, category, self.select_dependencies(module, category))

    def analyze_dependencies(
        self,
        module: ModuleDescriptor,
        category: DependencyCategory,
        dependencies: List[DeclaredDependency],
    ) -> CategoryResult:
        if self.report_writer is not None:
            self.report_writer.write(module, self.build_report_records(dependencies, category))

        updates: List[AgedUpdate] = []
        for candidate in self.version_resolver.lookup_updates(module, category, dependencies):
            aged = self.detector.evaluate(candidate)
            if aged is not None:
                updates.append(aged)

        result = CategoryResult(
            category=category,
            updates=tuple(sorted(updates, key=lambda u: str(u.coordinate))),
        )
        log_category(result)
        self.aggregates.record_category(result.updates)
        return result

    def build_report_records(
        self, dependencies: List[DeclaredDependency], category: DependencyCategory
    ) -> List[ReportRecord]:
        """Age of each dependency's current version relative to today."""
        today = self.today()
        minimum = self.config.min_lib_years_for_report
        records = []
        for dep in dependencies:
            lib_years = None
            released_on = self.resolver.resolve(dep.coordinate, dep.version)
            if released_on is not None:
                age = weeks_to_years(weeks_between(released_on, today))
                if age > 0 and (minimum <= 0 or age > minimum):
                    lib_years = age
            records.append(
                ReportRecord(
                    coordinate=dep.coordinate,
                    version=dep.version,
                    type=dep.type,
                    category=category.report_label,
                    lib_years=lib_years,
                )
            )
        return records
