"""Cloud Firestore store adapter."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from aidguide.errors import DocumentNotFoundError, StoreError
from aidguide.repositories.base import (
    GUIDES_COLLECTION,
    PROFILES_COLLECTION,
    Document,
    GuideSnapshot,
    SnapshotListener,
    Store,
    Unsubscribe,
)

logger = logging.getLogger(__name__)


class FirestoreStore(Store):
    """Reads and writes ``profiles`` and ``guides`` through ``firebase_admin``.

    The Firestore client is blocking, so every call runs in a worker thread
    while the event loop keeps serving other work. Snapshot callbacks arrive on
    Firestore's listener thread and are handed back to the loop.

    Guide reads are not ordered server-side: ``order_by("title")`` would drop
    documents without a title, so ordering is left to the service layer.
    """

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_credentials(cls, *, project_id: str | None, credentials_path: str | None) -> FirestoreStore:
        import firebase_admin
        from firebase_admin import credentials, firestore

        if not firebase_admin._apps:
            options = {"projectId": project_id} if project_id else None
            credential = credentials.Certificate(credentials_path) if credentials_path else None
            firebase_admin.initialize_app(credential, options)

        return cls(firestore.client())

    async def get_profile(self, identity_id: str) -> Document | None:
        snapshot = await self._call(
            "get_profile",
            lambda: self._client.collection(PROFILES_COLLECTION).document(identity_id).get(),
        )
        return snapshot.to_dict() if snapshot.exists else None

    async def create_profile(self, identity_id: str, data: Document) -> None:
        document = {**data, "createdAt": self._server_timestamp()}
        await self._call(
            "create_profile",
            lambda: self._client.collection(PROFILES_COLLECTION).document(identity_id).set(document),
        )

    async def add_guide(self, data: Document) -> tuple[str, Document]:
        document = {**data, "createdAt": self._server_timestamp()}
        _, reference = await self._call(
            "add_guide",
            lambda: self._client.collection(GUIDES_COLLECTION).add(document),
        )
        return reference.id, dict(data)

    async def update_guide(self, guide_id: str, data: Document) -> Document:
        document = {**data, "updatedAt": self._server_timestamp()}
        await self._call(
            "update_guide",
            lambda: self._client.collection(GUIDES_COLLECTION).document(guide_id).update(document),
            guide_id=guide_id,
        )
        return dict(data)

    async def delete_guide(self, guide_id: str) -> None:
        option = self._client.write_option(exists=True)
        await self._call(
            "delete_guide",
            lambda: self._client.collection(GUIDES_COLLECTION).document(guide_id).delete(option=option),
            guide_id=guide_id,
        )

    async def get_guide(self, guide_id: str) -> Document | None:
        snapshot = await self._call(
            "get_guide",
            lambda: self._client.collection(GUIDES_COLLECTION).document(guide_id).get(),
        )
        return snapshot.to_dict() if snapshot.exists else None

    async def list_guides(self) -> GuideSnapshot:
        documents = await self._call(
            "list_guides",
            lambda: list(self._client.collection(GUIDES_COLLECTION).stream()),
        )
        return [(document.id, document.to_dict() or {}) for document in documents]

    def watch_guides(self, listener: SnapshotListener) -> Unsubscribe:
        loop = asyncio.get_running_loop()

        def on_snapshot(documents: list[Any], _changes: Any, _read_time: Any) -> None:
            snapshot = [(document.id, document.to_dict() or {}) for document in documents]
            if not loop.is_closed():
                loop.call_soon_threadsafe(listener, snapshot)

        try:
            watch = self._client.collection(GUIDES_COLLECTION).on_snapshot(on_snapshot)
        except Exception as exc:
            logger.warning("store.call_failed operation=watch_guides error=%s", type(exc).__name__)
            raise StoreError("Firestore watch_guides failed") from exc
        return watch.unsubscribe

    @staticmethod
    def _server_timestamp() -> Any:
        from firebase_admin import firestore

        return firestore.SERVER_TIMESTAMP

    @staticmethod
    async def _call(operation: str, func: Any, *, guide_id: str | None = None) -> Any:
        from google.api_core import exceptions as google_exceptions

        try:
            return await asyncio.to_thread(func)
        except google_exceptions.NotFound as exc:
            if guide_id is None:
                raise StoreError(f"Firestore {operation} target missing") from exc
            raise DocumentNotFoundError(GUIDES_COLLECTION, guide_id) from exc
        except Exception as exc:
            logger.warning("store.call_failed operation=%s error=%s", operation, type(exc).__name__)
            raise StoreError(f"Firestore {operation} failed") from exc


__all__ = ["FirestoreStore"]
