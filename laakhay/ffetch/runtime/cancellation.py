"""Cooperative cancellation tokens for streams."""

from __future__ import annotations

import asyncio


def raise_if_cancelled(cancel_event: asyncio.Event | None) -> None:
    """Raise ``asyncio.CancelledError`` if ``cancel_event`` is set.

    Streams call this at their suspension points so that an explicit token
    behaves exactly like cancelling the consuming task.
    """
    if cancel_event is not None and cancel_event.is_set():
        raise asyncio.CancelledError("stream cancelled")
