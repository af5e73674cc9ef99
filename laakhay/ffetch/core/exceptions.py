"""Custom exception hierarchy."""

from __future__ import annotations


class FFetchError(Exception):
    """Base exception for all library errors."""

    pass


class InvalidURLError(FFetchError):
    """URL is malformed or cannot be resolved.

    Raised eagerly for a bad index URL. During document following the
    same error is rendered inline on the record instead of being raised.
    """

    def __init__(self, url: str, message: str | None = None) -> None:
        super().__init__(message or f"Invalid URL: {url}")
        self.url = url


class NetworkError(FFetchError):
    """Transport failure or unexpected HTTP status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code


class DocumentNotFoundError(FFetchError):
    """The index or a followed document answered 404."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Document not found: {url}")
        self.url = url
        self.status_code = 404


class DecodingError(FFetchError):
    """Index JSON or followed document could not be decoded."""

    pass


class SecurityError(FFetchError):
    """Host is not on the allow-list for document following."""

    def __init__(self, hostname: str) -> None:
        super().__init__(
            f"Hostname '{hostname}' is not allowed for document following. "
            "Use .allow() to permit additional hostnames."
        )
        self.hostname = hostname
