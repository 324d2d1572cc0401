"""Backing store interface for profile and guide documents."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

PROFILES_COLLECTION = "profiles"
GUIDES_COLLECTION = "guides"

Document = dict[str, Any]
GuideSnapshot = list[tuple[str, Document]]
SnapshotListener = Callable[[GuideSnapshot], None]
Unsubscribe = Callable[[], None]


class Store(ABC):
    """Document store holding ``profiles/{identityId}`` and ``guides/{guideId}``.

    Implementations raise ``StoreError`` for backend failures and
    ``DocumentNotFoundError`` when a targeted guide does not exist.
    ``createdAt``/``updatedAt`` are stamped by the store, never by callers.
    """

    @abstractmethod
    async def get_profile(self, identity_id: str) -> Document | None:
        """Return the profile document or ``None`` when absent."""

    @abstractmethod
    async def create_profile(self, identity_id: str, data: Document) -> None:
        """Write a new profile document and stamp ``createdAt``."""

    @abstractmethod
    async def add_guide(self, data: Document) -> tuple[str, Document]:
        """Insert a guide under a store-generated id and stamp ``createdAt``."""

    @abstractmethod
    async def update_guide(self, guide_id: str, data: Document) -> Document:
        """Overwrite the given fields of an existing guide and stamp ``updatedAt``."""

    @abstractmethod
    async def delete_guide(self, guide_id: str) -> None:
        """Remove an existing guide."""

    @abstractmethod
    async def get_guide(self, guide_id: str) -> Document | None:
        """Return the guide document or ``None`` when absent."""

    @abstractmethod
    async def list_guides(self) -> GuideSnapshot:
        """Return every guide; callers sort by title."""

    @abstractmethod
    def watch_guides(self, listener: SnapshotListener) -> Unsubscribe:
        """Register a listener for full catalog snapshots (unordered).

        The listener receives the current catalog right away and then once per
        mutation. Must be called from the event loop thread.
        """


__all__ = [
    "Document",
    "GUIDES_COLLECTION",
    "GuideSnapshot",
    "PROFILES_COLLECTION",
    "SnapshotListener",
    "Store",
    "Unsubscribe",
]
