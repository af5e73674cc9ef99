"""Document following stage."""

from __future__ import annotations

from .annotations import error_field, with_document, with_error
from .follower import DocumentFollower

__all__ = [
    "DocumentFollower",
    "error_field",
    "with_document",
    "with_error",
]
