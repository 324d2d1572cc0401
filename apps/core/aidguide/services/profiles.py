"""Profile store service layer."""

from __future__ import annotations

import logging

from aidguide.core.logging_safety import safe_log_identifier
from aidguide.repositories.base import Store
from aidguide.schemas.profile import Profile, new_profile_document
from aidguide.schemas.session import Session

logger = logging.getLogger(__name__)

DEFAULT_FEDERATED_NAME = "User"


class ProfileStore:
    """One profile per identity, keyed by identity id.

    ``load``/``create``/``ensure`` propagate ``StoreError`` to the session and
    role layers, which decide how a failure surfaces. ``get_profile`` is the
    read-style entry point for callers and never raises.
    """

    def __init__(self, store: Store) -> None:
        self._store = store

    async def load(self, identity_id: str) -> Profile | None:
        document = await self._store.get_profile(identity_id)
        if document is None:
            return None
        return Profile.from_document(identity_id, document)

    async def create(self, *, identity_id: str, name: str, email: str, phone: str) -> None:
        await self._store.create_profile(
            identity_id,
            new_profile_document(name=name, email=email, phone=phone),
        )
        logger.info("profile.created identity_id=%s", safe_log_identifier(identity_id, prefix="iid"))

    async def ensure(self, *, identity_id: str, name: str | None, email: str) -> bool:
        """Create a non-privileged profile with an empty phone if none exists.

        Returns ``True`` when a profile was written. The read and the write are
        separate calls, not a transaction.
        """
        if await self._store.get_profile(identity_id) is not None:
            return False

        await self.create(
            identity_id=identity_id,
            name=name or DEFAULT_FEDERATED_NAME,
            email=email,
            phone="",
        )
        return True

    async def get_profile(self, session: Session | None) -> Profile | None:
        if session is None:
            return None

        try:
            return await self.load(session.identity_id)
        except Exception as exc:
            logger.warning(
                "profile.read_failed identity_id=%s error=%s",
                safe_log_identifier(session.identity_id, prefix="iid"),
                exc,
            )
            return None


__all__ = ["DEFAULT_FEDERATED_NAME", "ProfileStore"]
