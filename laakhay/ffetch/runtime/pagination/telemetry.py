"""Structured logging for pagination runs.

This module provides telemetry hooks for the pagination engine, emitting
structured logs for observability.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def log_page_requested(*, index_url: str, page_index: int, offset: int, limit: int) -> None:
    """Log a page request about to be issued.

    Args:
        index_url: Index URL without pagination parameters
        page_index: Zero-based index of the page
        offset: Requested offset
        limit: Requested limit
    """
    logger.debug(
        "page_requested",
        extra={
            "index_url": index_url,
            "page_index": page_index,
            "offset": offset,
            "limit": limit,
        },
    )


def log_page_completed(
    *,
    index_url: str,
    page_index: int,
    records: int,
    total: int,
    latency_ms: float | None = None,
) -> None:
    """Log a decoded page.

    Args:
        index_url: Index URL without pagination parameters
        page_index: Zero-based index of the page
        records: Number of records in the page
        total: Record count fixed for this run
        latency_ms: Request and decode latency in milliseconds (optional)
    """
    logger.info(
        "page_completed",
        extra={
            "index_url": index_url,
            "page_index": page_index,
            "records": records,
            "total": total,
            "latency_ms": latency_ms,
        },
    )


def log_pagination_complete(*, index_url: str, pages: int, records: int) -> None:
    """Log the end of a pagination run.

    Args:
        index_url: Index URL without pagination parameters
        pages: Pages fetched
        records: Records emitted
    """
    logger.info(
        "pagination_complete",
        extra={
            "index_url": index_url,
            "pages": pages,
            "records": records,
        },
    )


def log_page_error(
    *,
    index_url: str,
    page_index: int,
    error_type: str,
    error_message: str,
) -> None:
    """Log a failed page request.

    Args:
        index_url: Index URL without pagination parameters
        page_index: Zero-based index of the page that failed
        error_type: Type of error (e.g., "NetworkError", "DecodingError")
        error_message: Error message
    """
    logger.error(
        "page_error",
        extra={
            "index_url": index_url,
            "page_index": page_index,
            "error_type": error_type,
            "error_message": error_message,
        },
    )
