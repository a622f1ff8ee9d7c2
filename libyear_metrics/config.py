"""
Analysis settings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .models import DependencyCategory

DEFAULT_SEARCH_URI = "https://search.maven.org"
DEFAULT_HTTP_TIMEOUT_SECONDS = 5
DEFAULT_FETCH_RETRY_COUNT = 5
WILDCARD = "*"


@dataclass(frozen=True)
class AnalysisConfig:
    """Settings consumed by a build session."""

    search_uri: str = DEFAULT_SEARCH_URI
    http_timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    fetch_retry_count: int = DEFAULT_FETCH_RETRY_COUNT
    retry_interval: float = 1.0
    max_lib_years: float = 0.0
    min_lib_years_for_report: float = 0.0
    report_file: Optional[str] = None
    process_dependency_management: bool = True
    process_dependencies: bool = True
    process_plugin_management_dependencies: bool = True
    process_plugin_dependencies: bool = True
    includes: Dict[DependencyCategory, List[str]] = field(default_factory=dict, hash=False)
    excludes: Dict[DependencyCategory, List[str]] = field(default_factory=dict, hash=False)
    ignored_versions: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.http_timeout <= 0:
            raise ValueError("http_timeout must be positive")
        if self.fetch_retry_count < 0:
            raise ValueError("fetch_retry_count must not be negative")
        if self.retry_interval < 0:
            raise ValueError("retry_interval must not be negative")
        if self.max_lib_years < 0:
            raise ValueError("max_lib_years must not be negative")

    def enabled_categories(self) -> List[DependencyCategory]:
        flags = {
            DependencyCategory.DEPENDENCY_MANAGEMENT: self.process_dependency_management,
            DependencyCategory.DEPENDENCIES: self.process_dependencies,
            DependencyCategory.PLUGIN_MANAGEMENT_DEPENDENCIES: self.process_plugin_management_dependencies,
            DependencyCategory.PLUGIN_DEPENDENCIES: self.process_plugin_dependencies,
        }
        return [category for category in DependencyCategory if flags[category]]

    def includes_for(self, category: DependencyCategory) -> List[str]:
        return self.includes.get(category) or [WILDCARD]

    def excludes_for(self, category: DependencyCategory) -> List[str]:
        return self.excludes.get(category) or []
