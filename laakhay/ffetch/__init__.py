"""Laakhay FFetch - lazy, paginated streaming of JSON content indices."""

from .api import FFetch, FFetchStream, ffetch
from .core import (
    CacheMode,
    CachePolicy,
    DecodingError,
    DocumentNotFoundError,
    FetchContext,
    FetchResponse,
    FFetchError,
    HTMLParser,
    HTTPClient,
    InvalidURLError,
    NetworkError,
    SecurityError,
)
from .io import AIOHTTPClient
from .models import FFetchEntry, IndexResponse
from .parsers import BeautifulSoupParser
from .runtime import DocumentFollower, PageExecutor, PagePlan, PagePlanner
from .security import AllowList

__version__ = "0.1.0"

__all__ = [
    # Pipelines
    "FFetch",
    "FFetchStream",
    "ffetch",
    # Configuration
    "FetchContext",
    "CacheMode",
    "CachePolicy",
    "AllowList",
    # Collaborators
    "HTTPClient",
    "HTMLParser",
    "FetchResponse",
    "AIOHTTPClient",
    "BeautifulSoupParser",
    # Models
    "FFetchEntry",
    "IndexResponse",
    # Runtime
    "PageExecutor",
    "PagePlan",
    "PagePlanner",
    "DocumentFollower",
    # Exceptions
    "FFetchError",
    "InvalidURLError",
    "NetworkError",
    "DocumentNotFoundError",
    "DecodingError",
    "SecurityError",
]
