"""URL validation for index URLs and followed document references."""

from __future__ import annotations

from urllib.parse import urljoin, urlsplit

from ..core.exceptions import InvalidURLError

HTTP_PREFIXES = ("http://", "https://")
SCHEME_SEPARATOR = "://"

# Values seen in index rows that are placeholders rather than references
PLACEHOLDER_VALUES = frozenset({"not-a-url", "not-a-valid-url"})


def validate_index_url(url: str) -> str:
    """Validate the index URL a pipeline starts from.

    Args:
        url: Absolute http(s) URL of the index

    Returns:
        The URL, unchanged

    Raises:
        InvalidURLError: If the URL is blank, a ``javascript:`` URL, relative,
            not http(s), or has no host
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidURLError(str(url))
    if url.lower().startswith("javascript:"):
        raise InvalidURLError(url)
    try:
        parts = urlsplit(url)
        parts.port
    except ValueError:
        raise InvalidURLError(url) from None
    if parts.scheme.lower() not in ("http", "https") or not parts.hostname:
        raise InvalidURLError(url)
    return url


def is_valid_url_string(value: str) -> bool:
    """Cheap shape check applied before any parsing.

    Any whitespace character is rejected, not only interior spaces: tabs,
    newlines and leading or trailing blanks never occur in a usable
    reference.
    """
    if not value or value.isspace():
        return False
    if value.startswith(SCHEME_SEPARATOR):
        return False
    if any(ch.isspace() for ch in value):
        return False
    if value in PLACEHOLDER_VALUES:
        return False
    # a scheme separator anywhere but in a leading http(s) prefix
    if SCHEME_SEPARATOR in value and not value.startswith(HTTP_PREFIXES):
        return False
    return True


def resolve_document_url(value: str, base_url: str) -> str | None:
    """Resolve a record field into an absolute document URL.

    Absolute ``http://``/``https://`` references are used as-is; references
    starting with ``/`` are resolved against ``base_url``. Every other shape
    is rejected.

    Args:
        value: Raw field value
        base_url: Index URL the record came from

    Returns:
        The absolute URL, or None if ``value`` cannot be resolved
    """
    if not is_valid_url_string(value):
        return None

    if not value.startswith(HTTP_PREFIXES) and not value.startswith("/"):
        return None

    try:
        resolved = value if value.startswith(HTTP_PREFIXES) else urljoin(base_url, value)
        parts = urlsplit(resolved)
        parts.port
    except ValueError:
        # malformed authority, e.g. an unbalanced IPv6 bracket or a bad port
        return None
    if not parts.hostname:
        return None
    return resolved
