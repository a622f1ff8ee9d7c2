"""
Process-lifetime cache of release dates.
"""

from __future__ import annotations

import threading
from datetime import date
from typing import Dict, Optional, Tuple

from .models import DependencyCoordinate


class ReleaseDateCache:
    """Map of coordinate -> version -> release date shared by every module of a build.

    Entries are never evicted. A (coordinate, version) pair holds at most one
    date; the first write wins.
    """

    def __init__(self) -> None:
        self._dates: Dict[DependencyCoordinate, Dict[str, date]] = {}
        self._lock = threading.Lock()

    def get(self, coordinate: DependencyCoordinate, version: str) -> Optional[date]:
        with self._lock:
            return self._dates.get(coordinate, {}).get(version)

    def put(self, coordinate: DependencyCoordinate, version: str, released_on: date) -> date:
        """Store a release date and return the date now held for the pair."""
        with self._lock:
            versions = self._dates.setdefault(coordinate, {})
            return versions.setdefault(version, released_on)

    def versions(self, coordinate: DependencyCoordinate) -> Dict[str, date]:
        with self._lock:
            return dict(self._dates.get(coordinate, {}))

    def clear(self) -> None:
        with self._lock:
            self._dates.clear()

    def __contains__(self, key: Tuple[DependencyCoordinate, str]) -> bool:
        coordinate, version = key
        with self._lock:
            return version in self._dates.get(coordinate, {})

    def __len__(self) -> int:
        with self._lock:
            return sum(len(versions) for versions in self._dates.values())
