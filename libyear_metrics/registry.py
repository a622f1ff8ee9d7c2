"""
Release-date lookups against the Maven Central search API.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import requests

from .config import DEFAULT_FETCH_RETRY_COUNT, DEFAULT_HTTP_TIMEOUT_SECONDS, DEFAULT_SEARCH_URI
from .models import (
    DependencyCoordinate,
    FetchResult,
    MalformedResponse,
    ReleaseDateFound,
    ReleaseDateNotFound,
    TransientFetchFailure,
)
from .time_utils import date_from_epoch_millis


logger = logging.getLogger(__name__)

SEARCH_PATH = "/solrsearch/select"


def search_query(coordinate: DependencyCoordinate, version: str) -> str:
    return f"g:{coordinate.namespace} AND a:{coordinate.name} AND v:{version}"


def _reason(response: requests.Response) -> str:
    return response.reason or f"HTTP {response.status_code}"


class RegistryClient:
    """Fetch the release date of one dependency version.

    Each lookup is a single GET with a bounded timeout. Server errors,
    timeouts and connection failures are retried up to ``retry_count`` times;
    client errors and unparseable bodies are returned straight away.
    """

    def __init__(
        self,
        search_uri: str = DEFAULT_SEARCH_URI,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        retry_count: int = DEFAULT_FETCH_RETRY_COUNT,
        retry_interval: float = 1.0,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.search_uri = search_uri.rstrip("/")
        self.timeout = timeout
        self.retry_count = retry_count
        self.retry_interval = retry_interval
        self.session = session or requests.Session()
        self._sleep = sleep

    @property
    def url(self) -> str:
        return f"{self.search_uri}{SEARCH_PATH}"

    def fetch(self, coordinate: DependencyCoordinate, version: str) -> FetchResult:
        params = {"q": search_query(coordinate, version), "wt": "json"}
        attempts = 1 + self.retry_count
        reason = "unknown error"

        for attempt in range(1, attempts + 1):
            if attempt > 1:
                logger.debug("Retrying %s %s (attempt %d/%d)", coordinate, version, attempt, attempts)
                if self.retry_interval:
                    self._sleep(self.retry_interval)

            logger.debug("Fetching %s?q=%s", self.url, params["q"])
            try:
                with self.session.get(
                    self.url, params=params, timeout=(self.timeout, self.timeout)
                ) as response:
                    if response.status_code >= 500:
                        reason = _reason(response)
                        continue
                    if response.status_code != 200:
                        return ReleaseDateNotFound(_reason(response), response.status_code)
                    return self._parse(response)
            except requests.exceptions.ConnectTimeout:
                reason = "Connect timed out"
            except requests.Timeout:
                reason = "Read timed out"
            except requests.ConnectionError as e:
                reason = str(e) or "connection failed"
            except requests.RequestException as e:
                return TransientFetchFailure(str(e) or type(e).__name__, attempt)

        return TransientFetchFailure(reason, attempts)

    @staticmethod
    def _parse(response: requests.Response) -> FetchResult:
        try:
            body = response.json()
            query_response = body["response"]
            if int(query_response["numFound"]) == 0:
                return ReleaseDateNotFound("no matching artifact")
            timestamp = query_response["docs"][0]["timestamp"]
            return ReleaseDateFound(date_from_epoch_millis(timestamp))
        except (ValueError, KeyError, IndexError, TypeError, OverflowError, OSError) as e:
            return MalformedResponse(f"unexpected response body: {e}")

    def close(self) -> None:
        self.session.close()
