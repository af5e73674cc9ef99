"""Page execution logic for streaming index records.

This module provides the PageExecutor class, the pagination engine. It
walks the page plans produced by a PagePlanner, fetches and decodes each
page, and yields the records one at a time.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from time import perf_counter
from typing import TYPE_CHECKING

from ...core.enums import CachePolicy
from ...core.exceptions import DocumentNotFoundError, FFetchError, NetworkError
from ...core.protocols import HTTP_NOT_FOUND, HTTP_OK, HTTPClient
from ...models import FFetchEntry, IndexResponse
from ..cancellation import raise_if_cancelled
from .planners import PagePlanner
from .telemetry import (
    log_page_completed,
    log_page_error,
    log_page_requested,
    log_pagination_complete,
)

if TYPE_CHECKING:
    from ...core.config import FetchContext


class PageExecutor:
    """Streams records from a paginated index.

    Exactly one page request is outstanding at a time, and the next request
    is issued only after every record of the previous page was pulled by the
    consumer. Failures are fatal for the stream; nothing is retried.

    The record count is fixed from the first response and never re-checked.
    If the index changes while it is being walked, later pages may overlap or
    skip records.
    """

    def __init__(
        self,
        http_client: HTTPClient,
        planner: PagePlanner,
        cache: CachePolicy = CachePolicy.DEFAULT,
    ) -> None:
        """Initialize page executor.

        Args:
            http_client: Transport used for page requests
            planner: Planner deciding page offsets
            cache: Cache policy for page requests
        """
        self._http = http_client
        self._planner = planner
        self._cache = cache

    @classmethod
    def from_context(cls, context: FetchContext) -> PageExecutor:
        """Build an executor from a configuration snapshot."""
        return cls(
            http_client=context.http_client,
            planner=PagePlanner(context.chunk_size, context.sheet_name),
            cache=context.cache,
        )

    async def stream(
        self,
        index_url: str,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> AsyncIterator[FFetchEntry]:
        """Yield every record of the index in order.

        Args:
            index_url: Index URL without pagination parameters
            cancel_event: Optional token checked before each request and
                between records

        Raises:
            DocumentNotFoundError: If a page answers 404
            NetworkError: On transport failure or any other non-200 status
            DecodingError: If a page body is not a valid index response
            asyncio.CancelledError: If cancelled; never reclassified
        """
        plan = self._planner.first()
        total: int | None = None
        pages = 0
        records = 0

        while plan is not None:
            raise_if_cancelled(cancel_event)
            if total is not None and plan.offset >= total:
                break

            log_page_requested(
                index_url=index_url,
                page_index=plan.page_index,
                offset=plan.offset,
                limit=plan.limit,
            )
            page_start = perf_counter()
            try:
                page = await self._fetch_page(plan.url(index_url))
            except FFetchError as e:
                log_page_error(
                    index_url=index_url,
                    page_index=plan.page_index,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                raise

            if total is None:
                total = page.total
            pages += 1
            entries = page.entries()
            log_page_completed(
                index_url=index_url,
                page_index=plan.page_index,
                records=len(entries),
                total=total,
                latency_ms=(perf_counter() - page_start) * 1000.0,
            )

            for entry in entries:
                raise_if_cancelled(cancel_event)
                yield entry
                records += 1

            plan = self._planner.next(plan, total)

        log_pagination_complete(index_url=index_url, pages=pages, records=records)

    async def _fetch_page(self, url: str) -> IndexResponse:
        """Fetch and decode a single page.

        Args:
            url: Fully built page URL

        Returns:
            Decoded page
        """
        try:
            response = await self._http.fetch(url, self._cache)
        except FFetchError:
            raise
        except Exception as e:
            raise NetworkError(f"{type(e).__name__}: {e}") from e

        if response.status == HTTP_NOT_FOUND:
            raise DocumentNotFoundError(url)
        if response.status != HTTP_OK:
            raise NetworkError(
                f"HTTP {response.status}: {response.reason}".rstrip(": "),
                status_code=response.status,
            )
        return IndexResponse.decode(response.body)
