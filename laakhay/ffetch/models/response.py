"""Index page envelope."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..core.exceptions import DecodingError

FFetchEntry = dict[str, Any]


class IndexResponse(BaseModel):
    """One decoded page of an index.

    Only ``total`` and ``data`` are required; ``offset`` and ``limit`` echo
    the request and default to 0. Unknown top-level fields are ignored.
    """

    total: int = Field(..., ge=0)
    offset: int = Field(default=0, ge=0)
    limit: int = Field(default=0, ge=0)
    data: list[dict[str, Any]] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="ignore")

    @classmethod
    def decode(cls, body: str | bytes) -> "IndexResponse":
        """Decode a page body.

        Raises:
            DecodingError: If the body is not JSON or lacks the envelope fields
        """
        try:
            return cls.model_validate_json(body)
        except ValidationError as e:
            errors = e.errors()
            reason = errors[0]["msg"] if errors else "unknown error"
            raise DecodingError(f"Invalid index response: {reason}") from e

    def entries(self) -> list[FFetchEntry]:
        """Rows of this page as fresh record dicts."""
        return [dict(row) for row in self.data]
