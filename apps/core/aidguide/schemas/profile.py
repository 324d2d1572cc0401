"""Profile record schema and document mapping."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class Profile(BaseModel):
    identity_id: str
    name: str
    email: str
    phone: str
    privileged: bool = False
    created_at: datetime | None = None

    @classmethod
    def from_document(cls, identity_id: str, data: dict[str, Any]) -> Profile:
        """Build a profile from a stored ``profiles/{identityId}`` document.

        Missing or mistyped string fields become ``""``. ``privileged`` is only
        true when the stored value is literally ``True``.
        """
        created_at = data.get("createdAt")
        return cls(
            identity_id=identity_id,
            name=_text(data.get("name")),
            email=_text(data.get("email")),
            phone=_text(data.get("phone")),
            privileged=data.get("privileged") is True,
            created_at=created_at if isinstance(created_at, datetime) else None,
        )


def new_profile_document(*, name: str, email: str, phone: str) -> dict[str, Any]:
    """Fields written when a profile is created; ``createdAt`` is stamped by the store."""
    return {
        "name": name,
        "email": email,
        "phone": phone,
        "privileged": False,
    }


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""
