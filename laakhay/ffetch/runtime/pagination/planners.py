"""Page planning logic for walking an index.

This module provides the PagePlanner class that decides which page to
request next. Unlike a fixed plan, the page sequence depends on the total
record count, which is only known after the first response.
"""

from __future__ import annotations

from .definitions import PagePlan


class PagePlanner:
    """Plans offset-limited page requests.

    Offsets start at 0 and advance by exactly ``chunk_size`` per page. The
    planner stops once the next offset would reach ``total``.
    """

    def __init__(self, chunk_size: int, sheet_name: str | None = None) -> None:
        """Initialize page planner.

        Args:
            chunk_size: Records per page (must be positive)
            sheet_name: Optional sheet to select on every page
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self._chunk_size = chunk_size
        self._sheet_name = sheet_name

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    def first(self) -> PagePlan:
        """Plan for the first page."""
        return PagePlan(offset=0, limit=self._chunk_size, sheet_name=self._sheet_name)

    def next(self, plan: PagePlan, total: int) -> PagePlan | None:
        """Plan the page after ``plan``.

        Args:
            plan: Page that was just emitted
            total: Record count fixed from the first response

        Returns:
            The next page plan, or None if ``plan`` was the last page
        """
        if plan.offset + self._chunk_size >= total:
            return None
        return PagePlan(
            offset=plan.offset + self._chunk_size,
            limit=self._chunk_size,
            sheet_name=self._sheet_name,
            page_index=plan.page_index + 1,
        )
