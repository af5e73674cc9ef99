"""Pagination engine for offset-limited JSON indices.

Architecture:
    The pagination layer consists of:
    - definitions.py: Page plan structure and request URL rendering
    - planners.py: Offset planning (which page comes next)
    - executors.py: Page fetching, decoding and record streaming
    - telemetry.py: Structured logging

Usage:
    Pipelines build a PageExecutor from their configuration snapshot when
    evaluation starts and pull records from ``PageExecutor.stream``.
"""

from __future__ import annotations

from .definitions import PagePlan
from .executors import PageExecutor
from .planners import PagePlanner

__all__ = [
    "PagePlan",
    "PagePlanner",
    "PageExecutor",
]
