"""Copy-on-write helpers for enriching records."""

from __future__ import annotations

from typing import Any

from ...models import FFetchEntry


def error_field(target_field: str) -> str:
    """Name of the field holding a following error for ``target_field``."""
    return f"{target_field}_error"


def with_document(entry: FFetchEntry, target_field: str, document: Any) -> FFetchEntry:
    """Copy of ``entry`` with ``document`` stored under ``target_field``."""
    return {**entry, target_field: document}


def with_error(entry: FFetchEntry, target_field: str, message: str) -> FFetchEntry:
    """Copy of ``entry`` with ``target_field`` cleared and the error recorded."""
    return {**entry, target_field: None, error_field(target_field): message}
