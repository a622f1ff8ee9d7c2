"""Shared fakes for the libyear_metrics tests."""

from datetime import date, datetime, timezone

import pytest

from libyear_metrics.models import (
    DeclaredDependency,
    DependencyCategory,
    DependencyCoordinate,
    ModuleDescriptor,
    ReleaseDateFound,
    ReleaseDateNotFound,
)


TODAY = date(2024, 6, 1)
ONE_YEAR_AGO = date(2023, 6, 1)


def epoch_millis(day: date) -> int:
    return int(datetime(day.year, day.month, day.day, tzinfo=timezone.utc).timestamp() * 1000)


def search_body(day: date, namespace: str = "g", name: str = "a", version: str = "1.0.0") -> dict:
    return {
        "response": {
            "numFound": 1,
            "docs": [{
                "id": f"{namespace}:{name}:{version}",
                "g": namespace,
                "a": name,
                "v": version,
                "p": "jar",
                "timestamp": epoch_millis(day),
            }],
        }
    }


class FakeResponse:
    def __init__(self, status_code=200, body=None, reason=None, text=None):
        self.status_code = status_code
        self._body = body
        self._text = text
        self.reason = reason if reason is not None else {200: "OK", 404: "Not Found", 500: "Server Error"}.get(status_code, "")

    def json(self):
        if self._text is not None:
            raise ValueError(f"Expecting value: {self._text!r}")
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeSession:
    """Replays queued responses (or raises queued exceptions) per GET."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self):
        pass


class FakeFetcher:
    """Release-date fetcher serving dates from a dict and counting calls."""

    def __init__(self, dates=None, results=None):
        self.dates = dict(dates or {})
        self.results = dict(results or {})
        self.calls = []

    def fetch(self, coordinate, version):
        self.calls.append((str(coordinate), version))
        key = (str(coordinate), version)
        if key in self.results:
            return self.results[key]
        if key in self.dates:
            return ReleaseDateFound(self.dates[key])
        return ReleaseDateNotFound("no matching artifact")


def dep(coordinate, version, latest=None, available=(), type="jar"):
    return DeclaredDependency(
        coordinate=DependencyCoordinate.parse(coordinate),
        version=version,
        latest=latest,
        available=tuple(available),
        type=type,
    )


def module(name, dependencies=(), dependency_management=(), plugin_dependencies=(), version="1.0.0"):
    return ModuleDescriptor(
        name=name,
        version=version,
        dependencies={
            DependencyCategory.DEPENDENCIES: list(dependencies),
            DependencyCategory.DEPENDENCY_MANAGEMENT: list(dependency_management),
            DependencyCategory.PLUGIN_DEPENDENCIES: list(plugin_dependencies),
        },
    )


@pytest.fixture
def today():
    return lambda: TODAY
