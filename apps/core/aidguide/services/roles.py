"""Role resolution service layer."""

from __future__ import annotations

import logging

from aidguide.core.logging_safety import safe_log_identifier
from aidguide.schemas.session import Session
from aidguide.services.profiles import ProfileStore

logger = logging.getLogger(__name__)


class RoleResolver:
    """Derives the single privileged flag from a session's profile.

    Fails closed: no session, no profile, an unreadable profile, or a
    ``privileged`` value other than ``True`` all resolve to ``False``.
    """

    def __init__(self, profiles: ProfileStore) -> None:
        self._profiles = profiles

    async def is_privileged(self, session: Session | None) -> bool:
        if session is None:
            return False

        safe_identity_id = safe_log_identifier(session.identity_id, prefix="iid")
        try:
            profile = await self._profiles.load(session.identity_id)
        except Exception as exc:
            logger.warning(
                "role.lookup_failed identity_id=%s error=%s privileged=false",
                safe_identity_id,
                type(exc).__name__,
            )
            return False

        if profile is None:
            logger.info("role.profile_missing identity_id=%s privileged=false", safe_identity_id)
            return False

        return profile.privileged is True


__all__ = ["RoleResolver"]
