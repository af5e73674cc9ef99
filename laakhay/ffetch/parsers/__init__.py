"""Document parsers."""

from .html import BeautifulSoupParser

__all__ = ["BeautifulSoupParser"]
