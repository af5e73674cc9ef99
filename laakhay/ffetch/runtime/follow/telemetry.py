"""Structured logging for document following."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def log_follow_group_completed(
    *,
    field_name: str,
    group_index: int,
    size: int,
    failures: int,
    latency_ms: float | None = None,
) -> None:
    """Log a finished group of concurrent follows.

    Args:
        field_name: Source field being followed
        group_index: Zero-based index of the group
        size: Records in the group
        failures: Records annotated with an error
        latency_ms: Wall time of the group in milliseconds (optional)
    """
    logger.info(
        "follow_group_completed",
        extra={
            "field_name": field_name,
            "group_index": group_index,
            "size": size,
            "failures": failures,
            "latency_ms": latency_ms,
        },
    )


def log_follow_record_failed(
    *,
    field_name: str,
    error_type: str,
    error_message: str,
) -> None:
    """Log a record whose document could not be followed.

    Args:
        field_name: Source field being followed
        error_type: Type of error (e.g., "SecurityError", "NetworkError")
        error_message: Message stored on the record
    """
    logger.warning(
        "follow_record_failed",
        extra={
            "field_name": field_name,
            "error_type": error_type,
            "error_message": error_message,
        },
    )
