"""Fluent, lazy pipelines over paginated indices.

Architecture:
    A pipeline is an immutable value made of two parts:
    - a configuration snapshot (FetchContext)
    - a deferred producer: a function that, given a configuration snapshot
      and an optional cancellation token, returns an async iterator

    Nothing runs until a terminal consumer (``all``, ``first``, ``count``) or
    an ``async for`` pulls from the pipeline. At that point the pipeline hands
    its own snapshot to the producer chain, so every stage (pagination,
    following) sees the same configuration, wherever in the chain it was set.

Design Decisions:
    - Immutable values: every chaining call returns a new pipeline; the
      source pipeline and its configuration are never modified
    - Pull-based: operators are async generators, so ``limit`` and ``first``
      stop the upstream without fetching another page
    - Two types: FFetch carries records and can still be configured and
      followed; ``map`` returns an FFetchStream because the element type may
      change

Example:
    >>> async with ffetch("https://example.com/query-index.json") as index:
    ...     titles = await (index
    ...         .chunks(100)
    ...         .filter(lambda entry: entry.get("template") == "blog")
    ...         .follow("path", "document")
    ...         .map(lambda entry: entry["document"].title.string)
    ...         .limit(10)
    ...         .all())
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from contextlib import asynccontextmanager
from typing import Any, Generic, TypeVar

from ..core.config import FetchContext
from ..core.enums import CachePolicy
from ..core.protocols import HTMLParser, HTTPClient
from ..models import FFetchEntry
from ..runtime.follow import DocumentFollower
from ..runtime.pagination import PageExecutor
from ..security import host_entry, validate_index_url

T = TypeVar("T")
U = TypeVar("U")

Producer = Callable[[FetchContext, asyncio.Event | None], AsyncIterator[Any]]
Transform = Callable[[T], U | Awaitable[U]]
Predicate = Callable[[T], bool | Awaitable[bool]]


async def _call(fn: Callable[[Any], Any], item: Any) -> Any:
    result = fn(item)
    if inspect.isawaitable(result):
        result = await result
    return result


@asynccontextmanager
async def _closing(iterator: AsyncIterator[T]):
    """Close ``iterator`` on exit so abandoned upstreams stop fetching."""
    try:
        yield iterator
    finally:
        aclose = getattr(iterator, "aclose", None)
        if aclose is not None:
            await aclose()


def _pagination_producer(url: str) -> Producer:
    def produce(context: FetchContext, cancel_event: asyncio.Event | None) -> AsyncIterator[Any]:
        return PageExecutor.from_context(context).stream(url, cancel_event=cancel_event)

    return produce


class FFetchStream(Generic[T]):
    """Lazy, chainable stream of values.

    All operators are stateless, order-preserving and perform no I/O of
    their own.
    """

    def __init__(self, producer: Producer, context: FetchContext) -> None:
        self._producer = producer
        self._context = context

    @property
    def context(self) -> FetchContext:
        """Configuration snapshot this pipeline evaluates with."""
        return self._context

    def _chain(self, producer: Producer) -> FFetchStream[T]:
        return FFetchStream(producer, self._context)

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def map(self, transform: Transform[T, U]) -> FFetchStream[U]:
        """Apply ``transform`` to every element as it is pulled.

        Args:
            transform: Plain or async callable; may change the element type

        Returns:
            A new stream of transformed elements
        """
        upstream = self._producer

        async def produce(context: FetchContext, cancel_event: asyncio.Event | None):
            async with _closing(upstream(context, cancel_event)) as items:
                async for item in items:
                    yield await _call(transform, item)

        return FFetchStream(produce, self._context)

    def filter(self, predicate: Predicate[T]) -> FFetchStream[T]:
        """Forward only the elements for which ``predicate`` holds."""
        upstream = self._producer

        async def produce(context: FetchContext, cancel_event: asyncio.Event | None):
            async with _closing(upstream(context, cancel_event)) as items:
                async for item in items:
                    if await _call(predicate, item):
                        yield item

        return self._chain(produce)

    def limit(self, count: int) -> FFetchStream[T]:
        """Forward at most ``count`` elements, then complete.

        ``count <= 0`` yields an empty stream without starting the upstream.
        """
        upstream = self._producer

        async def produce(context: FetchContext, cancel_event: asyncio.Event | None):
            if count <= 0:
                return
            remaining = count
            async with _closing(upstream(context, cancel_event)) as items:
                async for item in items:
                    yield item
                    remaining -= 1
                    if remaining == 0:
                        break

        return self._chain(produce)

    def skip(self, count: int) -> FFetchStream[T]:
        """Discard the first ``count`` elements. ``count <= 0`` is a no-op."""
        upstream = self._producer

        async def produce(context: FetchContext, cancel_event: asyncio.Event | None):
            skipped = 0
            async with _closing(upstream(context, cancel_event)) as items:
                async for item in items:
                    if skipped < count:
                        skipped += 1
                        continue
                    yield item

        return self._chain(produce)

    def slice(self, start: int, end: int) -> FFetchStream[T]:
        """Elements ``start`` (inclusive) to ``end`` (exclusive).

        Equivalent to ``skip(start).limit(end - start)``.

        Raises:
            ValueError: Unless ``0 <= start <= end``
        """
        if start < 0 or end < start:
            raise ValueError(f"slice requires 0 <= start <= end, got start={start}, end={end}")
        return self.skip(start).limit(end - start)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def stream(self, *, cancel_event: asyncio.Event | None = None) -> AsyncIterator[T]:
        """Start evaluation and return the element iterator.

        Args:
            cancel_event: Optional token; once set, the stream raises
                ``asyncio.CancelledError`` at its next suspension point
        """
        return self._producer(self._context, cancel_event)

    def __aiter__(self) -> AsyncIterator[T]:
        return self.stream()

    async def all(self, *, cancel_event: asyncio.Event | None = None) -> list[T]:
        """Collect every element into a list."""
        async with _closing(self.stream(cancel_event=cancel_event)) as items:
            return [item async for item in items]

    async def first(self, *, cancel_event: asyncio.Event | None = None) -> T | None:
        """Return the first element, or None if the stream is empty.

        Only the data needed for the first element is fetched.
        """
        async with _closing(self.stream(cancel_event=cancel_event)) as items:
            async for item in items:
                return item
        return None

    async def count(self, *, cancel_event: asyncio.Event | None = None) -> int:
        """Count elements without keeping them."""
        total = 0
        async with _closing(self.stream(cancel_event=cancel_event)) as items:
            async for _ in items:
                total += 1
        return total


class FFetch(FFetchStream[FFetchEntry]):
    """Record pipeline over a paginated JSON index.

    The index URL's own host is always allow-listed for document following:
    the bare host when the URL uses its scheme's default port, ``host:port``
    otherwise.

    Raises:
        InvalidURLError: If ``url`` is not an absolute http(s) URL
    """

    def __init__(
        self,
        url: str,
        context: FetchContext | None = None,
        upstream: Producer | None = None,
    ) -> None:
        self.url = validate_index_url(url)
        context = context or FetchContext()
        own_host = host_entry(self.url)
        if own_host is not None and own_host not in context.allowed_hosts:
            context = context.derive(allowed_hosts=context.allowed_hosts.with_hosts([own_host]))
        super().__init__(upstream or _pagination_producer(self.url), context)

    def __repr__(self) -> str:
        return f"FFetch(url={self.url!r}, context={self._context!r})"

    def _chain(self, producer: Producer) -> FFetch:
        return FFetch(self.url, self._context, producer)

    def _with_context(self, **changes: Any) -> FFetch:
        return FFetch(self.url, self._context.derive(**changes), self._producer)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def chunks(self, size: int) -> FFetch:
        """Request ``size`` records per index page."""
        return self._with_context(chunk_size=size)

    def sheet(self, name: str) -> FFetch:
        """Select a sheet of a multi-sheet index."""
        return self._with_context(sheet_name=name)

    def max_concurrency(self, limit: int) -> FFetch:
        """Follow at most ``limit`` documents at once."""
        return self._with_context(max_concurrency=limit)

    def with_max_concurrency(self, limit: int) -> FFetch:
        """Alias of :meth:`max_concurrency`."""
        return self.max_concurrency(limit)

    def cache(self, policy: CachePolicy) -> FFetch:
        """Use ``policy`` for index and document requests."""
        return self._with_context(cache=policy)

    def reload_cache(self) -> FFetch:
        """Bypass caches for every request."""
        return self.cache(CachePolicy.NO_CACHE)

    def with_cache_reload(self, reload: bool = True) -> FFetch:
        """Bypass caches when ``reload`` is true, use the default policy otherwise."""
        return self.cache(CachePolicy.NO_CACHE if reload else CachePolicy.DEFAULT)

    def with_http_client(self, client: HTTPClient) -> FFetch:
        """Use ``client`` as transport for every request."""
        return self._with_context(http_client=client)

    def with_html_parser(self, parser: HTMLParser) -> FFetch:
        """Use ``parser`` for followed documents."""
        return self._with_context(html_parser=parser)

    def allow(self, hosts: str | Iterable[str]) -> FFetch:
        """Permit document following to additional hosts.

        Args:
            hosts: A hostname, ``host:port`` pair or ``*`` (any host), or an
                iterable of those
        """
        if isinstance(hosts, str):
            hosts = [hosts]
        return self._with_context(allowed_hosts=self._context.allowed_hosts.with_hosts(hosts))

    # ------------------------------------------------------------------
    # Following
    # ------------------------------------------------------------------

    def follow(self, field_name: str, new_field_name: str | None = None) -> FFetch:
        """Fetch and parse the document referenced by ``field_name``.

        The parsed document is stored under ``new_field_name`` (defaults to
        ``field_name``). A record whose document cannot be followed keeps
        flowing with that field set to None and ``{field}_error`` describing
        why.

        Args:
            field_name: Field holding an absolute http(s) URL or a path
                starting with ``/`` (resolved against the index URL)
            new_field_name: Field receiving the parsed document
        """
        upstream = self._producer
        base_url = self.url

        async def produce(context: FetchContext, cancel_event: asyncio.Event | None):
            follower = DocumentFollower.from_context(
                context,
                base_url=base_url,
                field_name=field_name,
                target_field=new_field_name,
            )
            async with _closing(upstream(context, cancel_event)) as entries:
                followed = follower.stream(entries, cancel_event=cancel_event)
                async with _closing(followed) as results:
                    async for entry in results:
                        yield entry

        return self._chain(produce)

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        """Close the configured transport, if it can be closed."""
        close = getattr(self._context.http_client, "close", None)
        if close is not None:
            result = close()
            if inspect.isawaitable(result):
                await result

    async def __aenter__(self) -> FFetch:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


def ffetch(url: str) -> FFetch:
    """Create a record pipeline over the index at ``url``.

    Raises:
        InvalidURLError: If ``url`` is not an absolute http(s) URL
    """
    return FFetch(url)
