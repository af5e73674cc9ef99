"""Data models.

Architecture:
    Records are plain ``dict[str, Any]`` values (``FFetchEntry``) so that
    callers can read and extend them freely; every stage that adds a field
    does so on a copy. The page envelope is a frozen Pydantic v2 model.
"""

from .response import FFetchEntry, IndexResponse

__all__ = ["FFetchEntry", "IndexResponse"]
