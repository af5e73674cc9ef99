"""Collaborator protocols for transport and document parsing.

Architecture:
    The pagination engine and the document follower never talk to aiohttp
    or BeautifulSoup directly. They depend on these protocols, and the
    configuration snapshot carries the concrete implementations. Any object
    with a matching ``fetch`` or ``parse`` method can be plugged in.

Design Decision:
    Protocol chosen over an abstract base class so that test stubs and
    third-party clients need no shared ancestry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from .enums import CachePolicy

HTTP_OK = 200
HTTP_NOT_FOUND = 404


@dataclass(frozen=True)
class FetchResponse:
    """Body and status of a completed HTTP request.

    Attributes:
        body: Decoded response text
        status: HTTP status code
        reason: HTTP reason phrase, if the transport knows it
    """

    body: str
    status: int
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status == HTTP_OK


class HTTPClient(Protocol):
    """Protocol for transports used by the engine and the follower."""

    async def fetch(self, url: str, cache: CachePolicy = CachePolicy.DEFAULT) -> FetchResponse:
        """Fetch ``url`` and return its body and status.

        Args:
            url: Absolute URL to fetch
            cache: Cache policy for this request

        Raises:
            NetworkError: If the request could not be completed
        """
        ...


class HTMLParser(Protocol):
    """Protocol for parsers that turn a fetched body into a document value."""

    def parse(self, html: str) -> Any:
        """Parse ``html`` into a document.

        Raises:
            DecodingError: If the body cannot be parsed
        """
        ...
