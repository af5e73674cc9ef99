"""URL resolution and host allow-listing for document following."""

from .allow_list import WILDCARD, AllowList, default_port, host_entry
from .urls import is_valid_url_string, resolve_document_url, validate_index_url

__all__ = [
    "WILDCARD",
    "AllowList",
    "default_port",
    "host_entry",
    "is_valid_url_string",
    "resolve_document_url",
    "validate_index_url",
]
