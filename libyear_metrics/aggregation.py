"""
Libyear totals accumulated over a build session.
"""

from __future__ import annotations

import threading
from typing import Dict, Iterable, Optional, Tuple

from .models import AgedUpdate, DependencyCoordinate, WEEKS_PER_YEAR


class BuildAggregates:
    """Per-module totals, per-dependency maxima and the build-wide week counter.

    Every mutation happens under a single lock held only for the update
    itself, so modules analyzed on different threads can share one instance.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._module_ages: Dict[str, float] = {}
        self._dependency_ages: Dict[DependencyCoordinate, float] = {}
        self._lib_weeks = 0
        self._expected_modules = 0
        self._completed_modules = 0

    def record_category(self, updates: Iterable[AgedUpdate]) -> float:
        """Add a category's aged updates and return its libyear subtotal."""
        subtotal = 0.0
        with self._lock:
            for update in updates:
                subtotal += update.lib_years
                self._lib_weeks += update.lib_weeks
                previous = self._dependency_ages.get(update.coordinate)
                if previous is None or previous < update.lib_years:
                    self._dependency_ages[update.coordinate] = update.lib_years
        return subtotal

    def record_module(self, module: str, lib_years: float) -> None:
        with self._lock:
            self._module_ages[module] = lib_years

    @property
    def total_lib_weeks(self) -> int:
        with self._lock:
            return self._lib_weeks

    @property
    def total_lib_years(self) -> float:
        return self.total_lib_weeks / WEEKS_PER_YEAR

    def module_ages(self) -> Dict[str, float]:
        with self._lock:
            return dict(self._module_ages)

    def dependency_ages(self) -> Dict[DependencyCoordinate, float]:
        with self._lock:
            return dict(self._dependency_ages)

    def oldest_module(self) -> Optional[Tuple[str, float]]:
        ages = self.module_ages()
        if not ages:
            return None
        return min(ages.items(), key=lambda item: (-item[1], item[0]))

    def oldest_dependency(self) -> Optional[Tuple[DependencyCoordinate, float]]:
        ages = self.dependency_ages()
        if not ages:
            return None
        return min(ages.items(), key=lambda item: (-item[1], str(item[0])))

    def expect_modules(self, count: int) -> None:
        with self._lock:
            self._expected_modules = count
            self._completed_modules = 0

    def mark_module_complete(self) -> bool:
        """Count a finished module; True only for the one that completes the build."""
        with self._lock:
            self._completed_modules += 1
            return self._completed_modules == self._expected_modules

    def reset(self) -> None:
        with self._lock:
            self._module_ages.clear()
            self._dependency_ages.clear()
            self._lib_weeks = 0
            self._expected_modules = 0
            self._completed_modules = 0
