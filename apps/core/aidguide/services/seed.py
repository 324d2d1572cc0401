"""First-run catalog bootstrap."""

from __future__ import annotations

import asyncio
import logging

from aidguide.domain.seed_catalog import DEFAULT_GUIDES
from aidguide.schemas.guide import GuideFields
from aidguide.services.guides import GuideService

logger = logging.getLogger(__name__)


class SeedLoader:
    """Inserts the default catalog when, and only when, the catalog is empty.

    Calls are serialized within one process, so repeated or concurrent calls
    here insert the defaults at most once. Two processes racing on an empty
    store can still both insert the full set: the emptiness check and the
    inserts are separate store calls.
    """

    def __init__(self, guides: GuideService, defaults: tuple[GuideFields, ...] = DEFAULT_GUIDES) -> None:
        self._guides = guides
        self._defaults = defaults
        self._lock = asyncio.Lock()

    async def ensure_default_content(self) -> int:
        """Return the number of guides inserted (0 when the catalog was not empty)."""
        async with self._lock:
            existing = await self._guides.list_guides()
            if existing:
                logger.debug("seed.skipped existing=%s", len(existing))
                return 0

            for entry in self._defaults:
                await self._guides.create_guide(entry.title, entry.content, entry.image_path)

            logger.info("seed.inserted count=%s", len(self._defaults))
            return len(self._defaults)


__all__ = ["SeedLoader"]
