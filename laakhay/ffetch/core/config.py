"""Immutable configuration snapshot for pipelines."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from ..io.http import AIOHTTPClient
from ..parsers.html import BeautifulSoupParser
from ..security.allow_list import AllowList
from .enums import CachePolicy
from .protocols import HTMLParser, HTTPClient

DEFAULT_CHUNK_SIZE = 255
DEFAULT_MAX_CONCURRENCY = 5


@dataclass(frozen=True)
class FetchContext:
    """Configuration carried by every pipeline value.

    Chaining methods never modify a context; they derive a new one with a
    single field changed.

    Attributes:
        chunk_size: Records requested per index page
        sheet_name: Sheet to select in multi-sheet indices (None = default sheet)
        max_concurrency: Documents fetched at once while following
        cache: Cache policy for index and document requests
        allowed_hosts: Hosts permitted as document-following targets
        http_client: Transport used for every request
        html_parser: Parser used for followed documents
    """

    chunk_size: int = DEFAULT_CHUNK_SIZE
    sheet_name: str | None = None
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    cache: CachePolicy = CachePolicy.DEFAULT
    allowed_hosts: AllowList = field(default_factory=AllowList)
    http_client: HTTPClient = field(default_factory=AIOHTTPClient)
    html_parser: HTMLParser = field(default_factory=BeautifulSoupParser)

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.max_concurrency <= 0:
            raise ValueError(f"max_concurrency must be positive, got {self.max_concurrency}")

    def derive(self, **changes: Any) -> FetchContext:
        """Return a copy of this context with ``changes`` applied."""
        return replace(self, **changes)
