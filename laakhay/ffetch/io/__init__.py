"""Transport implementations."""

from .http import AIOHTTPClient

__all__ = ["AIOHTTPClient"]
