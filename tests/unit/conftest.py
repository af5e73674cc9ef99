"""Shared fixtures for unit tests.

Provides an in-memory transport that serves one paginated index plus a set
of documents, and records every request it receives.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any
from urllib.parse import parse_qs, urlsplit

import pytest

from laakhay.ffetch.core import CachePolicy, FetchResponse

INDEX_URL = "https://example.com/query-index.json"


def make_records(count: int) -> list[dict[str, Any]]:
    return [{"path": f"/doc-{i}", "title": f"Title {i}", "index": i} for i in range(count)]


def page_body(
    records: list[dict[str, Any]], offset: int, limit: int, total: int | None = None
) -> str:
    return json.dumps(
        {
            "total": len(records) if total is None else total,
            "offset": offset,
            "limit": limit,
            "data": records[offset : offset + limit],
            "columns": ["path", "title"],
        }
    )


class StubHTTPClient:
    """In-memory transport for one index and its documents.

    Attributes:
        calls: Every (url, cache policy) fetched, in request order
        max_in_flight: Highest number of concurrent fetches observed
    """

    def __init__(
        self,
        records: list[dict[str, Any]] | None = None,
        *,
        index_url: str = INDEX_URL,
        total: int | None = None,
        index_response: FetchResponse | BaseException | None = None,
        documents: dict[str, str] | None = None,
        delays: dict[str, float] | None = None,
        failures: dict[str, FetchResponse | BaseException] | None = None,
    ) -> None:
        self.records = list(records or [])
        self.index_url = index_url
        self.total = total
        self.index_response = index_response
        self.documents = dict(documents or {})
        self.delays = dict(delays or {})
        self.failures = dict(failures or {})
        self.calls: list[tuple[str, CachePolicy]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    def is_index_request(self, url: str) -> bool:
        return url.startswith(self.index_url + "?") or url.startswith(self.index_url + "&")

    @property
    def index_calls(self) -> list[str]:
        return [url for url, _ in self.calls if self.is_index_request(url)]

    @property
    def document_calls(self) -> list[str]:
        return [url for url, _ in self.calls if not self.is_index_request(url)]

    @property
    def requested_offsets(self) -> list[int]:
        return [int(parse_qs(urlsplit(url).query)["offset"][0]) for url in self.index_calls]

    async def fetch(self, url: str, cache: CachePolicy = CachePolicy.DEFAULT) -> FetchResponse:
        self.calls.append((url, cache))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self.delays.get(url)
            if delay:
                await asyncio.sleep(delay)
            if self.is_index_request(url):
                return self._respond(self.index_response) or self._page(url)
            failure = self._respond(self.failures.get(url))
            if failure is not None:
                return failure
            if url in self.documents:
                return FetchResponse(body=self.documents[url], status=200, reason="OK")
            return FetchResponse(body="Not Found", status=404, reason="Not Found")
        finally:
            self.in_flight -= 1

    async def close(self) -> None:
        self.closed = True

    @staticmethod
    def _respond(result: FetchResponse | BaseException | None) -> FetchResponse | None:
        if isinstance(result, BaseException):
            raise result
        return result

    def _page(self, url: str) -> FetchResponse:
        query = parse_qs(urlsplit(url).query)
        offset = int(query["offset"][0])
        limit = int(query["limit"][0])
        return FetchResponse(
            body=page_body(self.records, offset, limit, self.total),
            status=200,
            reason="OK",
        )


class FailingHTTPClient:
    """Transport that fails the test if it is ever used."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def fetch(self, url: str, cache: CachePolicy = CachePolicy.DEFAULT) -> FetchResponse:
        self.calls.append(url)
        pytest.fail(f"unexpected fetch of {url}")


@pytest.fixture
def index_url() -> str:
    return INDEX_URL


@pytest.fixture
def records():
    """Factory for simple index rows."""
    return make_records


@pytest.fixture
def stub_client():
    """Factory for StubHTTPClient instances."""
    return StubHTTPClient


@pytest.fixture
def failing_client() -> FailingHTTPClient:
    return FailingHTTPClient()
