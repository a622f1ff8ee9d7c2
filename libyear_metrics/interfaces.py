"""
Interfaces for the collaborators of the libyear analysis.
"""

from __future__ import annotations

from typing import Iterable, List, Protocol

from .models import (
    DeclaredDependency,
    DependencyCategory,
    DependencyCoordinate,
    FetchResult,
    ModuleDescriptor,
    ReportRecord,
    UpdateCandidate,
)


class ReleaseDateFetcher(Protocol):
    """Look up the release date of a single dependency version."""

    def fetch(self, coordinate: DependencyCoordinate, version: str) -> FetchResult:
        ...


class VersionResolver(Protocol):
    """Decide which versions of a module's dependencies are current and latest."""

    def dependencies(
        self, module: ModuleDescriptor, category: DependencyCategory
    ) -> List[DeclaredDependency]:
        ...

    def lookup_updates(
        self,
        module: ModuleDescriptor,
        category: DependencyCategory,
        dependencies: Iterable[DeclaredDependency],
    ) -> List[UpdateCandidate]:
        ...


class ReportWriter(Protocol):
    """Persist report records somewhere outside the analysis."""

    def write(self, module: ModuleDescriptor, records: Iterable[ReportRecord]) -> None:
        ...
