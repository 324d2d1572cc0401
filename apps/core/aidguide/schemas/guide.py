"""Guide record schemas and document mapping."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class GuideFields(BaseModel):
    """Writable guide fields; updates always replace all three."""

    title: str
    content: str
    image_path: str = Field(alias="imagePath")

    model_config = ConfigDict(populate_by_name=True)

    def to_document(self) -> dict[str, str]:
        return {"title": self.title, "content": self.content, "imagePath": self.image_path}


class Guide(BaseModel):
    id: str
    title: str
    content: str
    image_path: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_document(cls, guide_id: str, data: dict[str, Any]) -> Guide:
        """Build a guide from a stored ``guides/{guideId}`` document.

        Missing or mistyped string fields become ``""``; timestamps that are
        not yet resolved by the store become ``None``.
        """
        return cls(
            id=guide_id,
            title=_text(data.get("title")),
            content=_text(data.get("content")),
            image_path=_text(data.get("imagePath")),
            created_at=_timestamp(data.get("createdAt")),
            updated_at=_timestamp(data.get("updatedAt")),
        )


def sort_guides(guides: list[Guide]) -> list[Guide]:
    """Order by title, case-sensitive code point order."""
    return sorted(guides, key=lambda guide: guide.title)


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _timestamp(value: Any) -> datetime | None:
    return value if isinstance(value, datetime) else None
