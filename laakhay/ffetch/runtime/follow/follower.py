"""Document following for record streams.

This module provides the DocumentFollower class. For every record it
resolves a URL from one field, checks the host against the allow-list,
fetches the document and stores the parsed result on a copy of the record.

Architecture:
    Records are pulled from upstream in groups of at most ``max_concurrency``.
    All records of a group are followed concurrently; the group is emitted in
    upstream order once every follow in it has finished, and only then is the
    next group pulled. A failed follow never aborts the stream or its
    siblings: the record is emitted with ``{target}`` set to None and
    ``{target}_error`` describing the failure.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from time import perf_counter
from typing import TYPE_CHECKING, Any

from ...core.enums import CachePolicy
from ...core.exceptions import (
    DecodingError,
    FFetchError,
    InvalidURLError,
    NetworkError,
    SecurityError,
)
from ...core.protocols import HTTP_OK, HTMLParser, HTTPClient
from ...models import FFetchEntry
from ...security import AllowList, host_entry, resolve_document_url
from ..cancellation import raise_if_cancelled
from .annotations import error_field, with_document, with_error
from .telemetry import log_follow_group_completed, log_follow_record_failed

if TYPE_CHECKING:
    from ...core.config import FetchContext


class DocumentFollower:
    """Follows a URL field of each record and merges the parsed document."""

    def __init__(
        self,
        *,
        base_url: str,
        field_name: str,
        target_field: str | None = None,
        http_client: HTTPClient,
        html_parser: HTMLParser,
        allowed_hosts: AllowList,
        cache: CachePolicy = CachePolicy.DEFAULT,
        max_concurrency: int = 5,
    ) -> None:
        """Initialize document follower.

        Args:
            base_url: Index URL; relative references resolve against it
            field_name: Field holding the document reference
            target_field: Field receiving the document (defaults to field_name)
            http_client: Transport for document requests
            html_parser: Parser for fetched bodies
            allowed_hosts: Hosts permitted as follow targets
            cache: Cache policy for document requests
            max_concurrency: Maximum group size (must be positive)
        """
        if max_concurrency <= 0:
            raise ValueError(f"max_concurrency must be positive, got {max_concurrency}")
        self._base_url = base_url
        self._field = field_name
        self._target = target_field or field_name
        self._http = http_client
        self._parser = html_parser
        self._allowed = allowed_hosts
        self._cache = cache
        self._max_concurrency = max_concurrency

    @classmethod
    def from_context(
        cls,
        context: FetchContext,
        *,
        base_url: str,
        field_name: str,
        target_field: str | None = None,
    ) -> DocumentFollower:
        """Build a follower from a configuration snapshot."""
        return cls(
            base_url=base_url,
            field_name=field_name,
            target_field=target_field,
            http_client=context.http_client,
            html_parser=context.html_parser,
            allowed_hosts=context.allowed_hosts,
            cache=context.cache,
            max_concurrency=context.max_concurrency,
        )

    @property
    def target_field(self) -> str:
        return self._target

    @property
    def error_field(self) -> str:
        return error_field(self._target)

    async def stream(
        self,
        upstream: AsyncIterator[FFetchEntry],
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> AsyncIterator[FFetchEntry]:
        """Yield enriched copies of the upstream records, in upstream order.

        Args:
            upstream: Records to follow
            cancel_event: Optional token checked before each group
        """
        group: list[FFetchEntry] = []
        group_index = 0
        async for entry in upstream:
            group.append(entry)
            if len(group) < self._max_concurrency:
                continue
            for result in await self._follow_group(group, group_index, cancel_event):
                yield result
            group = []
            group_index += 1

        if group:
            for result in await self._follow_group(group, group_index, cancel_event):
                yield result

    async def _follow_group(
        self,
        group: list[FFetchEntry],
        group_index: int,
        cancel_event: asyncio.Event | None,
    ) -> list[FFetchEntry]:
        raise_if_cancelled(cancel_event)
        group_start = perf_counter()
        outcomes = await asyncio.gather(*(self._follow(entry) for entry in group))
        failures = sum(1 for _, failed in outcomes if failed)
        log_follow_group_completed(
            field_name=self._field,
            group_index=group_index,
            size=len(group),
            failures=failures,
            latency_ms=(perf_counter() - group_start) * 1000.0,
        )
        return [result for result, _ in outcomes]

    async def follow_entry(self, entry: FFetchEntry) -> FFetchEntry:
        """Follow a single record.

        Never raises for per-record failures; the failure is recorded on the
        returned copy instead. Cancellation still propagates.
        """
        result, _ = await self._follow(entry)
        return result

    async def _follow(self, entry: FFetchEntry) -> tuple[FFetchEntry, bool]:
        try:
            url = self._resolve(entry)
            document = await self._fetch_document(url)
        except FFetchError as e:
            log_follow_record_failed(
                field_name=self._field,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return with_error(entry, self._target, str(e)), True
        return with_document(entry, self._target, document), False

    def _resolve(self, entry: FFetchEntry) -> str:
        """Resolve and authorize the document URL of ``entry``.

        Raises:
            InvalidURLError: If the field is missing, not a string or unresolvable
            SecurityError: If the resolved host is not allow-listed
        """
        value = entry.get(self._field)
        if not isinstance(value, str):
            raise InvalidURLError(
                repr(value),
                f"Missing or invalid URL string in field '{self._field}'",
            )

        url = resolve_document_url(value, self._base_url)
        if url is None:
            raise InvalidURLError(
                value,
                f"Could not resolve URL from field '{self._field}': {value}",
            )

        if not self._allowed.permits(url):
            raise SecurityError(host_entry(url) or "unknown")
        return url

    async def _fetch_document(self, url: str) -> Any:
        """Fetch and parse the document at ``url``.

        Raises:
            NetworkError: On transport failure or a non-200 status
            DecodingError: If the body cannot be parsed
        """
        try:
            response = await self._http.fetch(url, self._cache)
        except Exception as e:
            raise NetworkError(f"Network error for {url}: {e}") from e

        if response.status != HTTP_OK:
            raise NetworkError(
                f"HTTP error {response.status} for {url}",
                status_code=response.status,
            )

        try:
            return self._parser.parse(response.body)
        except Exception as e:
            raise DecodingError(f"HTML parsing error for {url}: {e}") from e
