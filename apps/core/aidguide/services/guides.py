"""Guide catalog service layer."""

from __future__ import annotations

import logging

from aidguide.core.logging_safety import safe_log_identifier
from aidguide.core.streams import Subscription
from aidguide.errors import DocumentNotFoundError, ServiceError, StoreError
from aidguide.repositories.base import Document, GuideSnapshot, Store
from aidguide.schemas.error import ErrorCode
from aidguide.schemas.guide import Guide, GuideFields, sort_guides

logger = logging.getLogger(__name__)


def _not_found() -> ServiceError:
    return ServiceError(ErrorCode.NOT_FOUND, "Guide not found")


class GuideService:
    """CRUD and live subscription over the guide catalog.

    Every read goes straight to the store; nothing is cached here.
    """

    def __init__(self, store: Store) -> None:
        self._store = store

    def subscribe_guides(self) -> Subscription[list[Guide]]:
        """Open a live view of the whole catalog, ordered by title.

        The first value is the current catalog; each later addition, edit or
        removal pushes the full refreshed list. ``close()`` unsubscribes.
        """
        unsubscribe = None

        def on_close(_: Subscription[list[Guide]]) -> None:
            if unsubscribe is not None:
                unsubscribe()

        subscription: Subscription[list[Guide]] = Subscription(on_close=on_close)

        def on_snapshot(snapshot: GuideSnapshot) -> None:
            subscription.push(self._to_guides(snapshot))

        try:
            unsubscribe = self._store.watch_guides(on_snapshot)
        except StoreError as exc:
            subscription.close()
            raise self._store_failure("subscribe", exc) from exc
        logger.debug("guides.subscribed")
        return subscription

    async def list_guides(self) -> list[Guide]:
        try:
            snapshot = await self._store.list_guides()
        except StoreError as exc:
            raise self._store_failure("list", exc) from exc
        return self._to_guides(snapshot)

    async def get_guide(self, guide_id: str) -> Guide:
        try:
            document = await self._store.get_guide(guide_id)
        except StoreError as exc:
            raise self._store_failure("get", exc) from exc
        if document is None:
            raise _not_found()
        return Guide.from_document(guide_id, document)

    async def create_guide(self, title: str, content: str, image_path: str) -> Guide:
        fields = GuideFields(title=title, content=content, image_path=image_path)
        try:
            guide_id, document = await self._store.add_guide(fields.to_document())
        except StoreError as exc:
            raise self._store_failure("create", exc) from exc

        logger.info("guides.created guide_id=%s", safe_log_identifier(guide_id, prefix="gid"))
        return Guide.from_document(guide_id, document)

    async def update_guide(self, guide_id: str, title: str, content: str, image_path: str) -> Guide:
        """Replace title, content and image path; no partial merge."""
        fields = GuideFields(title=title, content=content, image_path=image_path)
        try:
            document = await self._store.update_guide(guide_id, fields.to_document())
        except DocumentNotFoundError as exc:
            raise _not_found() from exc
        except StoreError as exc:
            raise self._store_failure("update", exc) from exc

        logger.info("guides.updated guide_id=%s", safe_log_identifier(guide_id, prefix="gid"))
        return Guide.from_document(guide_id, document)

    async def delete_guide(self, guide_id: str) -> None:
        """Irreversibly remove a guide; confirmation is the caller's job."""
        try:
            await self._store.delete_guide(guide_id)
        except DocumentNotFoundError as exc:
            raise _not_found() from exc
        except StoreError as exc:
            raise self._store_failure("delete", exc) from exc

        logger.info("guides.deleted guide_id=%s", safe_log_identifier(guide_id, prefix="gid"))

    @staticmethod
    def _to_guides(snapshot: list[tuple[str, Document]]) -> list[Guide]:
        return sort_guides([Guide.from_document(guide_id, document) for guide_id, document in snapshot])

    @staticmethod
    def _store_failure(operation: str, exc: StoreError) -> ServiceError:
        logger.warning("guides.%s_failed error=%s", operation, exc)
        code = exc.code if exc.code in (ErrorCode.NETWORK_FAILURE, ErrorCode.NOT_FOUND) else ErrorCode.UNKNOWN
        return ServiceError(code, f"Guide {operation} failed")


__all__ = ["GuideService"]
