"""Unit tests for the pagination engine."""

from __future__ import annotations

import asyncio
import json
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from laakhay.ffetch.core import (
    CachePolicy,
    DecodingError,
    DocumentNotFoundError,
    FetchContext,
    FetchResponse,
    NetworkError,
)
from laakhay.ffetch.runtime.pagination import PageExecutor, PagePlanner

INDEX_URL = "https://example.com/query-index.json"


def _json(rows):
    return json.dumps(rows)


async def collect(stream):
    return [entry async for entry in stream]


class TestPageExecutorStreaming:
    """Test record streaming across pages."""

    @pytest.mark.asyncio
    async def test_total_seven_chunk_three(self, stub_client, records):
        """Test requests at offsets 0, 3, 6 and seven records in order."""
        rows = records(7)
        client = stub_client(rows)
        executor = PageExecutor(client, PagePlanner(3))

        entries = await collect(executor.stream(INDEX_URL))

        assert client.requested_offsets == [0, 3, 6]
        assert entries == rows

    @pytest.mark.asyncio
    async def test_single_page(self, stub_client, records):
        client = stub_client(records(4))
        entries = await collect(PageExecutor(client, PagePlanner(255)).stream(INDEX_URL))
        assert len(entries) == 4
        assert client.index_calls == [f"{INDEX_URL}?offset=0&limit=255"]

    @pytest.mark.asyncio
    async def test_empty_index(self, stub_client):
        client = stub_client([])
        entries = await collect(PageExecutor(client, PagePlanner(10)).stream(INDEX_URL))
        assert entries == []
        assert len(client.index_calls) == 1

    @pytest.mark.asyncio
    async def test_sheet_and_existing_query(self, stub_client, records):
        url = f"{INDEX_URL}?v=2"
        client = stub_client(records(2), index_url=url)
        executor = PageExecutor(client, PagePlanner(10, "products"))

        await collect(executor.stream(url))

        assert client.index_calls == [f"{url}&offset=0&limit=10&sheet=products"]

    @pytest.mark.asyncio
    async def test_total_fixed_from_first_page(self, records):
        """Test a later page reporting a different total does not change the run."""
        rows = records(6)
        pages = [
            FetchResponse('{"total": 4, "data": %s}' % _json(rows[0:2]), 200),
            FetchResponse('{"total": 100, "data": %s}' % _json(rows[2:4]), 200),
        ]
        client = MagicMock()
        client.fetch = AsyncMock(side_effect=pages)

        entries = await collect(PageExecutor(client, PagePlanner(2)).stream(INDEX_URL))

        assert entries == rows[:4]
        assert client.fetch.await_count == 2

    @pytest.mark.asyncio
    async def test_cache_policy_passed_to_transport(self, stub_client, records):
        client = stub_client(records(1))
        executor = PageExecutor(client, PagePlanner(5), cache=CachePolicy.NO_CACHE)
        await collect(executor.stream(INDEX_URL))
        assert client.calls[0][1] == CachePolicy.NO_CACHE

    @pytest.mark.asyncio
    async def test_from_context(self, stub_client, records):
        client = stub_client(records(5))
        context = FetchContext(chunk_size=2, sheet_name="s", http_client=client)

        entries = await collect(PageExecutor.from_context(context).stream(INDEX_URL))

        assert len(entries) == 5
        assert client.requested_offsets == [0, 2, 4]
        assert all(url.endswith("&sheet=s") for url in client.index_calls)


class TestPageExecutorLaziness:
    """Test that pages are only requested when records are pulled."""

    @pytest.mark.asyncio
    async def test_next_page_only_after_previous_consumed(self, stub_client, records):
        client = stub_client(records(6))
        stream = PageExecutor(client, PagePlanner(3)).stream(INDEX_URL)

        for _ in range(3):
            await stream.__anext__()
        assert len(client.index_calls) == 1

        await stream.__anext__()
        assert len(client.index_calls) == 2
        await stream.aclose()

    @pytest.mark.asyncio
    async def test_closing_early_issues_no_more_requests(self, stub_client, records):
        client = stub_client(records(10))
        stream = PageExecutor(client, PagePlanner(2)).stream(INDEX_URL)

        await stream.__anext__()
        await stream.aclose()

        assert len(client.index_calls) == 1

    @pytest.mark.asyncio
    async def test_one_request_in_flight(self, stub_client, records):
        client = stub_client(records(9))
        await collect(PageExecutor(client, PagePlanner(2)).stream(INDEX_URL))
        assert client.max_in_flight == 1


class TestPageExecutorErrors:
    """Test fatal pagination failures."""

    @pytest.mark.asyncio
    async def test_404_is_not_found_and_emits_nothing(self, stub_client, records):
        client = stub_client(records(3), index_response=FetchResponse("nope", 404, "Not Found"))
        emitted = []

        with pytest.raises(DocumentNotFoundError):
            async for entry in PageExecutor(client, PagePlanner(3)).stream(INDEX_URL):
                emitted.append(entry)

        assert emitted == []

    @pytest.mark.asyncio
    async def test_other_status_is_network_error(self, stub_client):
        client = stub_client([], index_response=FetchResponse("", 503, "Service Unavailable"))

        with pytest.raises(NetworkError) as exc_info:
            await collect(PageExecutor(client, PagePlanner(3)).stream(INDEX_URL))

        assert exc_info.value.status_code == 503
        assert str(exc_info.value) == "HTTP 503: Service Unavailable"

    @pytest.mark.asyncio
    async def test_status_without_reason(self, stub_client):
        client = stub_client([], index_response=FetchResponse("", 500))
        with pytest.raises(NetworkError, match=r"^HTTP 500$"):
            await collect(PageExecutor(client, PagePlanner(3)).stream(INDEX_URL))

    @pytest.mark.asyncio
    async def test_failure_on_later_page_after_earlier_records(self, records):
        rows = records(4)
        client = MagicMock()
        client.fetch = AsyncMock(
            side_effect=[
                FetchResponse('{"total": 4, "data": %s}' % _json(rows[:2]), 200),
                FetchResponse("", 500, "Internal Server Error"),
            ]
        )
        emitted = []

        with pytest.raises(NetworkError):
            async for entry in PageExecutor(client, PagePlanner(2)).stream(INDEX_URL):
                emitted.append(entry)

        assert emitted == rows[:2]

    @pytest.mark.asyncio
    async def test_transport_ffetch_error_propagates_unchanged(self, stub_client):
        error = NetworkError("connection reset")
        client = stub_client([], index_response=error)
        with pytest.raises(NetworkError) as exc_info:
            await collect(PageExecutor(client, PagePlanner(3)).stream(INDEX_URL))
        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_unexpected_transport_error_becomes_network_error(self, stub_client):
        client = stub_client([], index_response=OSError("boom"))
        with pytest.raises(NetworkError, match="OSError: boom"):
            await collect(PageExecutor(client, PagePlanner(3)).stream(INDEX_URL))

    @pytest.mark.asyncio
    async def test_invalid_json_is_decoding_error(self, stub_client):
        client = stub_client([], index_response=FetchResponse("<html>", 200))
        with pytest.raises(DecodingError):
            await collect(PageExecutor(client, PagePlanner(3)).stream(INDEX_URL))

    @pytest.mark.asyncio
    async def test_errors_are_logged(self, stub_client, caplog):
        client = stub_client([], index_response=FetchResponse("", 404))
        with caplog.at_level(logging.ERROR, logger="laakhay.ffetch.runtime.pagination.telemetry"):
            with pytest.raises(DocumentNotFoundError):
                await collect(PageExecutor(client, PagePlanner(3)).stream(INDEX_URL))
        assert any(record.getMessage() == "page_error" for record in caplog.records)


class TestPageExecutorCancellation:
    """Test that cancellation propagates unchanged."""

    @pytest.mark.asyncio
    async def test_cancel_event_between_records(self, stub_client, records):
        client = stub_client(records(6))
        cancel = asyncio.Event()
        emitted = []

        with pytest.raises(asyncio.CancelledError):
            async for entry in PageExecutor(client, PagePlanner(3)).stream(
                INDEX_URL, cancel_event=cancel
            ):
                emitted.append(entry)
                if len(emitted) == 2:
                    cancel.set()

        assert len(emitted) == 2
        assert len(client.index_calls) == 1

    @pytest.mark.asyncio
    async def test_cancel_event_set_before_start(self, stub_client, records):
        client = stub_client(records(3))
        cancel = asyncio.Event()
        cancel.set()

        with pytest.raises(asyncio.CancelledError):
            stream = PageExecutor(client, PagePlanner(3)).stream(INDEX_URL, cancel_event=cancel)
            await collect(stream)

        assert client.calls == []

    @pytest.mark.asyncio
    async def test_transport_cancellation_is_not_reclassified(self, stub_client):
        client = stub_client([], index_response=asyncio.CancelledError())
        with pytest.raises(asyncio.CancelledError):
            await collect(PageExecutor(client, PagePlanner(3)).stream(INDEX_URL))

    @pytest.mark.asyncio
    async def test_task_cancellation_during_request(self, stub_client, records):
        client = stub_client(records(3), delays={f"{INDEX_URL}?offset=0&limit=3": 10})
        task = asyncio.create_task(collect(PageExecutor(client, PagePlanner(3)).stream(INDEX_URL)))
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
