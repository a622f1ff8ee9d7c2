"""
Release-date resolution and the default version resolver.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Iterable, List, Optional, Sequence

from packaging import version as pkg_version

from .cache import ReleaseDateCache
from .interfaces import ReleaseDateFetcher, VersionResolver
from .models import (
    DeclaredDependency,
    DependencyCategory,
    DependencyCoordinate,
    MalformedResponse,
    ModuleDescriptor,
    ReleaseDateFound,
    ReleaseDateNotFound,
    TransientFetchFailure,
    UpdateCandidate,
)


logger = logging.getLogger(__name__)

PROJECT_VERSION_PLACEHOLDER = "${project.version}"


class ReleaseDateResolver:
    """Resolve release dates through a shared cache, fetching on a miss."""

    def __init__(self, fetcher: ReleaseDateFetcher, cache: Optional[ReleaseDateCache] = None) -> None:
        self.fetcher = fetcher
        self.cache = cache if cache is not None else ReleaseDateCache()

    def resolve(self, coordinate: DependencyCoordinate, version: str) -> Optional[date]:
        cached = self.cache.get(coordinate, version)
        if cached is not None:
            logger.debug("Cache hit: release date %s %s", coordinate, version)
            return cached

        result = self.fetcher.fetch(coordinate, version)

        if isinstance(result, ReleaseDateFound):
            logger.debug("Found release date %s for %s %s", result.released_on, coordinate, version)
            return self.cache.put(coordinate, version, result.released_on)

        if isinstance(result, ReleaseDateNotFound):
            # Not cached: a version indexed later in the session can still be found.
            if result.status_code is None:
                logger.debug("Could not find artifact for %s %s", coordinate, version)
            else:
                logger.warning(
                    "Release date unavailable for %s %s (%s)", coordinate, version, result.reason
                )
            return None

        if isinstance(result, (TransientFetchFailure, MalformedResponse)):
            logger.error("Failed to fetch release date for %s %s (%s)", coordinate, version, result.reason)
            return None

        raise TypeError(f"Unexpected fetch result: {result!r}")


class ManifestVersionResolver(VersionResolver):
    """Version resolver backed by the versions declared in a build manifest.

    The latest version of a dependency is the declared ``latest`` value or,
    failing that, the highest of its ``available`` versions.
    """

    def __init__(self, ignored_versions: Sequence[str] = ()) -> None:
        self.ignored_versions = [re.compile(pattern) for pattern in ignored_versions]

    def dependencies(
        self, module: ModuleDescriptor, category: DependencyCategory
    ) -> List[DeclaredDependency]:
        resolved = []
        for dep in module.declared(category):
            if dep.version == PROJECT_VERSION_PLACEHOLDER and module.version:
                dep = DeclaredDependency(
                    coordinate=dep.coordinate,
                    version=module.version,
                    latest=dep.latest,
                    available=dep.available,
                    type=dep.type,
                )
            resolved.append(dep)
        return sorted(resolved, key=lambda dep: str(dep.coordinate))

    def lookup_updates(
        self,
        module: ModuleDescriptor,
        category: DependencyCategory,
        dependencies: Iterable[DeclaredDependency],
    ) -> List[UpdateCandidate]:
        candidates = []
        for dep in dependencies:
            latest = dep.latest
            if not latest or self.is_ignored(latest):
                latest = self.highest_version(dep.available)
            candidates.append(UpdateCandidate(dep.coordinate, dep.version, latest))
        return candidates

    def is_ignored(self, ver: str) -> bool:
        return any(pattern.fullmatch(ver) for pattern in self.ignored_versions)

    def highest_version(self, versions: Iterable[str]) -> Optional[str]:
        valid_versions = []
        for ver in versions:
            if self.is_ignored(ver):
                continue
            try:
                valid_versions.append((pkg_version.parse(ver), ver))
            except pkg_version.InvalidVersion:
                logger.debug("Skipping unparseable version %s", ver)
                continue

        if not valid_versions:
            return None
        valid_versions.sort(key=lambda item: item[0])
        return valid_versions[-1][1]
