"""Runtime stages: pagination and document following."""

from .cancellation import raise_if_cancelled
from .follow import DocumentFollower
from .pagination import PageExecutor, PagePlan, PagePlanner

__all__ = [
    "DocumentFollower",
    "PageExecutor",
    "PagePlan",
    "PagePlanner",
    "raise_if_cancelled",
]
