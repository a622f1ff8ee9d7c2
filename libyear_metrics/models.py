"""
Core data models for libyear metrics.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

WEEKS_PER_YEAR = 52


@dataclass(frozen=True, order=True)
class DependencyCoordinate:
    """The (namespace, name) identity of a dependency, independent of version."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}:{self.name}"

    @classmethod
    def parse(cls, value: str) -> "DependencyCoordinate":
        namespace, sep, name = value.partition(":")
        if not sep or not namespace or not name:
            raise ValueError(f"Invalid coordinate: {value!r}")
        return cls(namespace, name)


class DependencyCategory(Enum):
    """Sections of a module whose dependencies are aged, in processing order."""

    DEPENDENCY_MANAGEMENT = ("dependency_management", "Dependency Management", "Dependency Management")
    DEPENDENCIES = ("dependencies", "Dependencies", "Dependency")
    PLUGIN_MANAGEMENT_DEPENDENCIES = (
        "plugin_management_dependencies",
        "pluginManagement of plugins",
        "Plugin Management Dependency",
    )
    PLUGIN_DEPENDENCIES = ("plugin_dependencies", "Plugin Dependencies", "Plugin Dependency")

    def __init__(self, key: str, title: str, report_label: str) -> None:
        self.key = key
        self.title = title
        self.report_label = report_label


@dataclass(frozen=True)
class DeclaredDependency:
    """A dependency as declared by a module."""

    coordinate: DependencyCoordinate
    version: str
    latest: Optional[str] = None
    available: Tuple[str, ...] = ()
    type: str = "jar"


@dataclass(frozen=True)
class ModuleDescriptor:
    """A module of the build together with its declared dependencies."""

    name: str
    version: str = ""
    dependencies: Dict[DependencyCategory, List[DeclaredDependency]] = field(
        default_factory=dict, compare=False, hash=False
    )

    def declared(self, category: DependencyCategory) -> List[DeclaredDependency]:
        return list(self.dependencies.get(category, []))


@dataclass(frozen=True)
class UpdateCandidate:
    """Current and latest version of one dependency, as chosen by a version resolver."""

    coordinate: DependencyCoordinate
    current_version: str
    latest_version: Optional[str]


@dataclass(frozen=True)
class AgedUpdate:
    """An outdated dependency with the age of the version in use."""

    coordinate: DependencyCoordinate
    current_date: date
    latest_date: date
    lib_weeks: int

    def __post_init__(self) -> None:
        if self.current_date > self.latest_date:
            raise ValueError(
                f"{self.coordinate}: current release {self.current_date} "
                f"is after latest release {self.latest_date}"
            )
        if self.lib_weeks < 0:
            raise ValueError(f"{self.coordinate}: negative age of {self.lib_weeks} weeks")

    @property
    def lib_years(self) -> float:
        return self.lib_weeks / WEEKS_PER_YEAR


@dataclass(frozen=True)
class CategoryResult:
    """Aged updates found in one dependency category of a module."""

    category: DependencyCategory
    updates: Tuple[AgedUpdate, ...] = ()

    @property
    def lib_years(self) -> float:
        return sum(update.lib_years for update in self.updates)


@dataclass(frozen=True)
class ModuleResult:
    """Outcome of analyzing one module."""

    module: str
    categories: Tuple[CategoryResult, ...] = ()

    @property
    def lib_years(self) -> float:
        return sum(result.lib_years for result in self.categories)

    @property
    def updates(self) -> List[AgedUpdate]:
        return [update for result in self.categories for update in result.updates]


@dataclass(frozen=True)
class ReportRecord:
    """One row handed to a report writer."""

    coordinate: DependencyCoordinate
    version: str
    type: str
    category: str
    lib_years: Optional[float]

    def formatted_lib_years(self) -> str:
        if self.lib_years is None:
            return "unknown"
        return f"{self.lib_years:.2f}"


# Fetch outcomes returned by the registry client.

@dataclass(frozen=True)
class ReleaseDateFound:
    released_on: date


@dataclass(frozen=True)
class ReleaseDateNotFound:
    reason: str
    status_code: Optional[int] = None


@dataclass(frozen=True)
class TransientFetchFailure:
    reason: str
    attempts: int = 1


@dataclass(frozen=True)
class MalformedResponse:
    reason: str


FetchResult = Union[ReleaseDateFound, ReleaseDateNotFound, TransientFetchFailure, MalformedResponse]
