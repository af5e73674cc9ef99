"""Host allow-list for document following.

Membership rule:
    - ``*`` permits every URL.
    - A URL without a host is denied.
    - A URL with an explicit port that differs from its scheme's default
      port matches only the exact ``host:port`` entry.
    - Any other URL matches only the bare ``host`` entry.

A bare ``host`` entry therefore never admits a non-default port, and a
``host:port`` entry never admits the default port, even when that port is
spelled out in the URL.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from urllib.parse import SplitResult, urlsplit

WILDCARD = "*"

DEFAULT_PORTS = {
    "http": 80,
    "https": 443,
}


def default_port(scheme: str) -> int | None:
    """Default port for ``scheme``, or None if it has none."""
    return DEFAULT_PORTS.get(scheme.lower())


def _format_host(hostname: str) -> str:
    # IPv6 literals keep their brackets so "host:port" stays unambiguous
    return f"[{hostname}]" if ":" in hostname else hostname


def host_entry(url: str | SplitResult) -> str | None:
    """Allow-list entry that would admit ``url``.

    Returns:
        ``host`` for default-port URLs, ``host:port`` otherwise, or None if
        the URL has no host, an unparseable port or a malformed authority.
    """
    try:
        parts = urlsplit(url) if isinstance(url, str) else url
        port = parts.port
    except ValueError:
        return None
    if not parts.hostname:
        return None
    host = _format_host(parts.hostname)
    if port is not None and port != default_port(parts.scheme):
        return f"{host}:{port}"
    return host


@dataclass(frozen=True)
class AllowList:
    """Immutable set of hosts permitted for document following.

    Entries are bare hostnames, ``host:port`` pairs, or the wildcard ``*``.
    Hostnames compare case-insensitively.
    """

    hosts: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "hosts", frozenset(h.strip().lower() for h in self.hosts))

    @classmethod
    def of(cls, *hosts: str) -> AllowList:
        return cls(frozenset(hosts))

    def with_hosts(self, hosts: Iterable[str]) -> AllowList:
        """Return a new allow-list extended by ``hosts``."""
        return AllowList(self.hosts | frozenset(hosts))

    @property
    def allows_all(self) -> bool:
        return WILDCARD in self.hosts

    def permits(self, url: str) -> bool:
        """Check whether ``url`` may be followed."""
        if self.allows_all:
            return True
        entry = host_entry(url)
        if entry is None:
            return False
        return entry in self.hosts

    def __contains__(self, host: object) -> bool:
        return isinstance(host, str) and host.lower() in self.hosts

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.hosts))

    def __len__(self) -> int:
        return len(self.hosts)
