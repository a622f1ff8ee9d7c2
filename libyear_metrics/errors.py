"""
Exceptions raised by the libyear analysis.

Per-dependency lookup problems are never raised; they are returned as fetch
results (see ``models``) and logged. Only a breached ceiling fails a build.
"""

from __future__ import annotations

from typing import Optional


class LibYearError(Exception):
    """Base class for libyear errors."""


class ManifestError(LibYearError, ValueError):
    """The build manifest could not be read."""


class ThresholdExceededError(LibYearError):
    """A module is more libyears behind than the configured ceiling allows."""

    def __init__(self, ceiling: float, lib_years: float, module: Optional[str] = None) -> None:
        self.ceiling = ceiling
        self.lib_years = lib_years
        self.module = module
        super().__init__(
            "Dependencies exceed maximum specified age in libyears "
            f"({ceiling:.2f} libyears allowed, {lib_years:.2f} found)"
        )
