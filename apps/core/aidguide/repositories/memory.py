"""In-memory store used for local development and tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from itertools import count
from uuid import uuid4

from aidguide.errors import DocumentNotFoundError, StoreError
from aidguide.repositories.base import (
    GUIDES_COLLECTION,
    Document,
    GuideSnapshot,
    SnapshotListener,
    Store,
    Unsubscribe,
)

_STORE_OPERATIONS = frozenset(
    {
        "get_profile",
        "create_profile",
        "add_guide",
        "update_guide",
        "delete_guide",
        "get_guide",
        "list_guides",
        "watch_guides",
    }
)


@dataclass(slots=True)
class InMemoryStore(Store):
    """Simple, deterministic document store with snapshot listeners.

    ``failpoints`` maps an operation name to a message; the next call of that
    operation raises ``StoreError`` once. ``unavailable`` makes every call fail
    until cleared, which mimics a lost connection.
    """

    profiles: dict[str, Document] = field(default_factory=dict)
    guides: dict[str, Document] = field(default_factory=dict)
    listeners: dict[int, SnapshotListener] = field(default_factory=dict)
    profile_write_count: int = 0
    guide_write_count: int = 0
    failpoints: dict[str, str] = field(default_factory=dict)
    unavailable: bool = False
    _listener_ids: count = field(default_factory=count)

    async def get_profile(self, identity_id: str) -> Document | None:
        self._maybe_fail("get_profile")
        document = self.profiles.get(identity_id)
        return dict(document) if document is not None else None

    async def create_profile(self, identity_id: str, data: Document) -> None:
        self._maybe_fail("create_profile")
        self.profiles[identity_id] = {**data, "createdAt": datetime.now(UTC)}
        self.profile_write_count += 1

    async def add_guide(self, data: Document) -> tuple[str, Document]:
        self._maybe_fail("add_guide")
        guide_id = uuid4().hex
        document = {**data, "createdAt": datetime.now(UTC)}
        self.guides[guide_id] = document
        self.guide_write_count += 1
        self._notify()
        return guide_id, dict(document)

    async def update_guide(self, guide_id: str, data: Document) -> Document:
        self._maybe_fail("update_guide")
        current = self.guides.get(guide_id)
        if current is None:
            raise DocumentNotFoundError(GUIDES_COLLECTION, guide_id)

        current.update(data)
        current["updatedAt"] = datetime.now(UTC)
        self.guide_write_count += 1
        self._notify()
        return dict(current)

    async def delete_guide(self, guide_id: str) -> None:
        self._maybe_fail("delete_guide")
        if guide_id not in self.guides:
            raise DocumentNotFoundError(GUIDES_COLLECTION, guide_id)

        del self.guides[guide_id]
        self.guide_write_count += 1
        self._notify()

    async def get_guide(self, guide_id: str) -> Document | None:
        self._maybe_fail("get_guide")
        document = self.guides.get(guide_id)
        return dict(document) if document is not None else None

    async def list_guides(self) -> GuideSnapshot:
        self._maybe_fail("list_guides")
        return self._snapshot()

    def watch_guides(self, listener: SnapshotListener) -> Unsubscribe:
        self._maybe_fail("watch_guides")
        listener_id = next(self._listener_ids)
        self.listeners[listener_id] = listener
        listener(self._snapshot())

        def unsubscribe() -> None:
            self.listeners.pop(listener_id, None)

        return unsubscribe

    def _snapshot(self) -> GuideSnapshot:
        ordered = sorted(self.guides.items(), key=lambda item: str(item[1].get("title", "")))
        return [(guide_id, dict(document)) for guide_id, document in ordered]

    def _notify(self) -> None:
        snapshot = self._snapshot()
        for listener in list(self.listeners.values()):
            listener([(guide_id, dict(document)) for guide_id, document in snapshot])

    def _maybe_fail(self, operation: str) -> None:
        if operation not in _STORE_OPERATIONS:
            return
        if self.unavailable:
            raise StoreError(f"Store unavailable during {operation}")

        message = self.failpoints.pop(operation, None)
        if message is not None:
            raise StoreError(message)


__all__ = ["InMemoryStore"]
