"""Page plan definitions.

This module defines the data structure describing a single index page
request and how it is rendered into a request URL.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote


@dataclass(frozen=True)
class PagePlan:
    """Plan for a single index page.

    Attributes:
        offset: Zero-based offset of the first record in the page
        limit: Number of records requested (the chunk size)
        sheet_name: Sheet to select, if any
        page_index: Zero-based index of this page in the run
    """

    offset: int
    limit: int
    sheet_name: str | None = None
    page_index: int = 0

    def query(self) -> str:
        """Render the pagination query string (without separator)."""
        params = [f"offset={self.offset}", f"limit={self.limit}"]
        if self.sheet_name is not None:
            params.append(f"sheet={quote(self.sheet_name, safe='')}")
        return "&".join(params)

    def url(self, base_url: str) -> str:
        """Build the request URL for this page.

        Appends to an existing query string with ``&``, otherwise starts one
        with ``?``.

        Args:
            base_url: Index URL

        Returns:
            Request URL
        """
        separator = "&" if "?" in base_url else "?"
        return f"{base_url}{separator}{self.query()}"
