"""Default document parser for followed HTML documents."""

from __future__ import annotations

from bs4 import BeautifulSoup

from ..core.exceptions import DecodingError


class BeautifulSoupParser:
    """Parse followed documents into :class:`bs4.BeautifulSoup` trees."""

    def __init__(self, features: str = "html.parser") -> None:
        self.features = features

    def parse(self, html: str) -> BeautifulSoup:
        if not isinstance(html, str):
            raise DecodingError(f"expected str, got {type(html).__name__}")
        try:
            return BeautifulSoup(html, self.features)
        except Exception as e:
            raise DecodingError(str(e) or type(e).__name__) from e
