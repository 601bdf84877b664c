"""
Shared base for stored documents.

Documents are stored with camelCase keys (paidBy, publicSlug, ...) so the
remote layout stays the same whichever backend holds it. Python code uses
snake_case attributes; both spellings are accepted on input.
"""

from datetime import date
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def new_id() -> str:
    """Opaque unique identifier for a new document."""
    return uuid4().hex


def validate_iso_date(v: str) -> str:
    """Reject anything that is not a real calendar date in YYYY-MM-DD form."""
    try:
        parsed = date.fromisoformat(v)
    except (TypeError, ValueError):
        raise ValueError(f"Date must be YYYY-MM-DD, got {v!r}")
    if parsed.isoformat() != v:
        raise ValueError(f"Date must be YYYY-MM-DD, got {v!r}")
    return v


class Document(BaseModel):
    """Immutable record that round-trips through JSON storage."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        frozen=True,
    )

    def to_document(self) -> dict[str, Any]:
        """JSON-safe dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_document(cls, data: dict[str, Any]):
        return cls.model_validate(data)
