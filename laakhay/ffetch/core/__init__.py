"""Core components."""

from .enums import CacheMode, CachePolicy
from .exceptions import (
    DecodingError,
    DocumentNotFoundError,
    FFetchError,
    InvalidURLError,
    NetworkError,
    SecurityError,
)
from .protocols import FetchResponse, HTMLParser, HTTPClient
from .config import DEFAULT_CHUNK_SIZE, DEFAULT_MAX_CONCURRENCY, FetchContext  # noqa: I001

__all__ = [
    "CacheMode",
    "CachePolicy",
    "FFetchError",
    "InvalidURLError",
    "NetworkError",
    "DocumentNotFoundError",
    "DecodingError",
    "SecurityError",
    "FetchResponse",
    "HTTPClient",
    "HTMLParser",
    "FetchContext",
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_MAX_CONCURRENCY",
]
