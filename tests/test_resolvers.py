"""Tests for release-date resolution, the cache and the manifest version resolver."""

import logging
import threading
from datetime import date

from conftest import FakeFetcher, ONE_YEAR_AGO, TODAY, dep, module
from libyear_metrics.cache import ReleaseDateCache
from libyear_metrics.models import (
    DependencyCategory,
    DependencyCoordinate,
    MalformedResponse,
    ReleaseDateNotFound,
    TransientFetchFailure,
    UpdateCandidate,
)
from libyear_metrics.resolvers import ManifestVersionResolver, ReleaseDateResolver


COORD = DependencyCoordinate("g", "a")


def test_cache_first_write_wins():
    cache = ReleaseDateCache()

    assert cache.put(COORD, "1.0.0", ONE_YEAR_AGO) == ONE_YEAR_AGO
    assert cache.put(COORD, "1.0.0", TODAY) == ONE_YEAR_AGO
    assert cache.get(COORD, "1.0.0") == ONE_YEAR_AGO
    assert (COORD, "1.0.0") in cache
    assert len(cache) == 1


def test_cache_clear():
    cache = ReleaseDateCache()
    cache.put(COORD, "1.0.0", ONE_YEAR_AGO)

    cache.clear()

    assert cache.get(COORD, "1.0.0") is None
    assert len(cache) == 0


def test_cache_concurrent_writers():
    cache = ReleaseDateCache()

    def writer(offset):
        for i in range(200):
            cache.put(DependencyCoordinate("g", f"a{i}"), "1.0", date(2020, 1, 1 + offset))

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(cache) == 200
    dates = {cache.get(DependencyCoordinate("g", f"a{i}"), "1.0") for i in range(200)}
    assert dates <= {date(2020, 1, d) for d in range(1, 5)}


def test_resolve_fetches_each_version_once():
    fetcher = FakeFetcher({("g:a", "1.0.0"): ONE_YEAR_AGO})
    resolver = ReleaseDateResolver(fetcher)

    first = resolver.resolve(COORD, "1.0.0")
    second = resolver.resolve(COORD, "1.0.0")

    assert first == second == ONE_YEAR_AGO
    assert fetcher.calls == [("g:a", "1.0.0")]


def test_not_found_is_not_cached(caplog):
    fetcher = FakeFetcher()
    resolver = ReleaseDateResolver(fetcher)

    with caplog.at_level(logging.DEBUG):
        assert resolver.resolve(COORD, "1.0.0") is None
        assert resolver.resolve(COORD, "1.0.0") is None

    assert len(fetcher.calls) == 2
    assert not [r for r in caplog.records if r.levelno >= logging.ERROR]
    assert "Could not find artifact for g:a 1.0.0" in caplog.text


def test_http_not_found_logs_warning(caplog):
    fetcher = FakeFetcher(results={("g:a", "2.0.0"): ReleaseDateNotFound("Not Found", 404)})
    resolver = ReleaseDateResolver(fetcher)

    with caplog.at_level(logging.DEBUG):
        assert resolver.resolve(COORD, "2.0.0") is None

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert [r.getMessage() for r in warnings] == ["Release date unavailable for g:a 2.0.0 (Not Found)"]


def test_failures_are_logged_as_errors(caplog):
    fetcher = FakeFetcher(results={
        ("g:a", "1.0.0"): TransientFetchFailure("Read timed out", 1),
        ("g:a", "2.0.0"): MalformedResponse("unexpected response body"),
    })
    resolver = ReleaseDateResolver(fetcher)

    with caplog.at_level(logging.ERROR):
        assert resolver.resolve(COORD, "1.0.0") is None
        assert resolver.resolve(COORD, "2.0.0") is None

    messages = [r.getMessage() for r in caplog.records]
    assert messages == [
        "Failed to fetch release date for g:a 1.0.0 (Read timed out)",
        "Failed to fetch release date for g:a 2.0.0 (unexpected response body)",
    ]
    assert len(resolver.cache) == 0


def test_manifest_resolver_lists_declared_dependencies_sorted():
    mod = module(
        "core",
        dependencies=[dep("g:b", "1.0.0", latest="1.1.0"), dep("g:a", "1.0.0", latest="2.0.0")],
        dependency_management=[dep("g:a", "1.5.0", latest="2.0.0")],
    )
    resolver = ManifestVersionResolver()

    direct = resolver.dependencies(mod, DependencyCategory.DEPENDENCIES)

    assert [str(d.coordinate) for d in direct] == ["g:a", "g:b"]


def test_manifest_resolver_substitutes_project_version():
    mod = module("core", dependencies=[dep("g:a", "${project.version}", latest="3.0.0")], version="2.1.0")

    deps = ManifestVersionResolver().dependencies(mod, DependencyCategory.DEPENDENCIES)

    assert deps[0].version == "2.1.0"


def test_manifest_resolver_picks_highest_available_version():
    resolver = ManifestVersionResolver(ignored_versions=[r".*-beta.*"])
    deps = [dep("g:a", "1.0.0", available=["1.0.0", "1.10.0", "1.9.0", "2.0.0-beta1", "not a version"])]

    candidates = resolver.lookup_updates(module("core"), DependencyCategory.DEPENDENCIES, deps)

    assert candidates == [UpdateCandidate(COORD, "1.0.0", "1.10.0")]


def test_manifest_resolver_ignores_declared_latest_matching_pattern():
    resolver = ManifestVersionResolver(ignored_versions=[r"\d{8}\.\d+"])
    deps = [dep("commons-io:commons-io", "2.11.0", latest="20030203.000550")]

    candidates = resolver.lookup_updates(module("core"), DependencyCategory.DEPENDENCIES, deps)

    assert candidates[0].latest_version is None


def test_manifest_resolver_falls_back_when_declared_latest_is_ignored():
    resolver = ManifestVersionResolver(ignored_versions=[r"\d{8}\.\d+"])
    deps = [
        dep(
            "commons-io:commons-io",
            "2.11.0",
            latest="20030203.000550",
            available=["2.11.0", "2.15.1", "20030203.000550"],
        )
    ]

    candidates = resolver.lookup_updates(module("core"), DependencyCategory.DEPENDENCIES, deps)

    assert candidates[0].latest_version == "2.15.1"
