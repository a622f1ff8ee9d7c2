"""
Include/exclude filtering of declared dependencies.
"""

from __future__ import annotations

import logging
from fnmatch import fnmatchcase
from typing import Iterable, List, Optional, Sequence

from .config import WILDCARD
from .models import DeclaredDependency


logger = logging.getLogger(__name__)


def matches(pattern: str, dependency: DeclaredDependency) -> bool:
    """Match a ``namespace[:name[:version[:type]]]`` wildcard pattern.

    Segments missing from the pattern match anything.
    """
    fields = (
        dependency.coordinate.namespace,
        dependency.coordinate.name,
        dependency.version,
        dependency.type,
    )
    segments = pattern.strip().split(":")
    if len(segments) > len(fields):
        return False
    return all(fnmatchcase(value, segment or WILDCARD) for value, segment in zip(fields, segments))


def filter_dependencies(
    dependencies: Iterable[DeclaredDependency],
    includes: Optional[Sequence[str]],
    excludes: Optional[Sequence[str]],
    section: str,
) -> List[DeclaredDependency]:
    includes = list(includes or [WILDCARD])
    excludes = list(excludes or [])

    kept = []
    for dep in dependencies:
        if not any(matches(pattern, dep) for pattern in includes):
            logger.debug("%s: %s not included", section, dep.coordinate)
            continue
        if any(matches(pattern, dep) for pattern in excludes):
            logger.debug("%s: %s excluded", section, dep.coordinate)
            continue
        kept.append(dep)
    return kept
