"""Cache policy types shared by the pagination engine and the follower.

Architecture:
    The cache policy is part of the configuration snapshot. It is handed to
    the transport on every fetch; the transport decides how to honour it.
    The default transport translates it into request headers.

Key Types:
    - CacheMode: The policy variant
    - CachePolicy: Immutable policy value (variant plus optional max age)
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class CacheMode(str, Enum):
    """Cache behaviour requested from the transport."""

    DEFAULT = "default"
    NO_CACHE = "no-cache"
    CACHE_ONLY = "cache-only"
    CACHE_ELSE_LOAD = "cache-else-load"
    MAX_AGE = "max-age"


@dataclass(frozen=True)
class CachePolicy:
    """Cache policy for index and document requests.

    Examples:
        CachePolicy.DEFAULT
        CachePolicy.NO_CACHE
        CachePolicy.with_max_age(3600)
    """

    mode: CacheMode = CacheMode.DEFAULT
    max_age: int | None = None

    DEFAULT: ClassVar["CachePolicy"]
    NO_CACHE: ClassVar["CachePolicy"]
    CACHE_ONLY: ClassVar["CachePolicy"]
    CACHE_ELSE_LOAD: ClassVar["CachePolicy"]

    def __post_init__(self) -> None:
        if self.mode is CacheMode.MAX_AGE:
            if self.max_age is None or self.max_age < 0:
                raise ValueError("CachePolicy with MAX_AGE requires a non-negative max_age")
        elif self.max_age is not None:
            raise ValueError(f"max_age is only valid with MAX_AGE, not {self.mode.value}")

    @classmethod
    def with_max_age(cls, seconds: int) -> "CachePolicy":
        """Accept cached responses up to ``seconds`` old."""
        return cls(mode=CacheMode.MAX_AGE, max_age=seconds)

    @property
    def no_cache(self) -> bool:
        return self.mode is CacheMode.NO_CACHE

    def headers(self) -> dict[str, str]:
        """Request headers expressing this policy."""
        if self.mode is CacheMode.NO_CACHE:
            return {"Cache-Control": "no-cache", "Pragma": "no-cache"}
        if self.mode is CacheMode.CACHE_ONLY:
            return {"Cache-Control": "only-if-cached"}
        if self.mode is CacheMode.CACHE_ELSE_LOAD:
            return {"Cache-Control": "max-stale"}
        if self.mode is CacheMode.MAX_AGE:
            return {"Cache-Control": f"max-age={self.max_age}"}
        return {}


CachePolicy.DEFAULT = CachePolicy()
CachePolicy.NO_CACHE = CachePolicy(mode=CacheMode.NO_CACHE)
CachePolicy.CACHE_ONLY = CachePolicy(mode=CacheMode.CACHE_ONLY)
CachePolicy.CACHE_ELSE_LOAD = CachePolicy(mode=CacheMode.CACHE_ELSE_LOAD)
