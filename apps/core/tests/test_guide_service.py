"""Guide catalog CRUD and live subscription tests."""

from __future__ import annotations

import unittest

from aidguide.errors import ServiceError
from aidguide.repositories.memory import InMemoryStore
from aidguide.schemas.error import ErrorCode
from aidguide.schemas.guide import Guide
from aidguide.services.guides import GuideService


def _titles(guides: list[Guide]) -> list[str]:
    return [guide.title for guide in guides]


class GuideSubscriptionTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.store = InMemoryStore()
        self.service = GuideService(self.store)

    async def test_catalog_is_ordered_by_title(self) -> None:
        for title in ("Zebra", "Alpha", "Beta"):
            await self.service.create_guide(title, f"Content {title}", f"{title}.png")

        subscription = self.service.subscribe_guides()

        self.assertEqual(_titles(await subscription.next(timeout=1)), ["Alpha", "Beta", "Zebra"])
        subscription.close()

    async def test_ordering_is_case_sensitive(self) -> None:
        for title in ("apple", "Zebra", "Apple"):
            await self.service.create_guide(title, "", "")

        self.assertEqual(_titles(await self.service.list_guides()), ["Apple", "Zebra", "apple"])

    async def test_every_mutation_pushes_the_full_list(self) -> None:
        subscription = self.service.subscribe_guides()
        self.assertEqual(await subscription.next(timeout=1), [])

        created = await self.service.create_guide("Burns", "Cool it", "burn.png")
        await self.service.create_guide("Acid", "Rinse", "acid.png")
        await self.service.update_guide(created.id, "Scalds", "Cool it down", "scald.png")
        await self.service.delete_guide(created.id)

        self.assertEqual(_titles(await subscription.next(timeout=1)), ["Burns"])
        self.assertEqual(_titles(await subscription.next(timeout=1)), ["Acid", "Burns"])
        self.assertEqual(_titles(await subscription.next(timeout=1)), ["Acid", "Scalds"])
        self.assertEqual(_titles(await subscription.next(timeout=1)), ["Acid"])
        subscription.close()

    async def test_unsubscribe_only_affects_that_subscriber(self) -> None:
        first = self.service.subscribe_guides()
        second = self.service.subscribe_guides()
        await first.next(timeout=1)
        await second.next(timeout=1)

        first.close()
        await self.service.create_guide("CPR", "Compress", "cpr.png")

        with self.assertRaises(StopAsyncIteration):
            await first.next(timeout=1)
        self.assertEqual(_titles(await second.next(timeout=1)), ["CPR"])
        self.assertEqual(len(self.store.listeners), 1)
        second.close()
        self.assertEqual(self.store.listeners, {})

    async def test_async_iteration_ends_after_close(self) -> None:
        await self.service.create_guide("CPR", "Compress", "cpr.png")
        received: list[list[str]] = []

        async with self.service.subscribe_guides() as subscription:
            async for guides in subscription:
                received.append(_titles(guides))
                subscription.close()

        self.assertEqual(received, [["CPR"]])

    async def test_subscribe_during_outage_fails_with_network_failure(self) -> None:
        await self.service.create_guide("CPR", "Compress", "cpr.png")
        self.store.unavailable = True

        with self.assertRaises(ServiceError) as ctx:
            self.service.subscribe_guides()

        self.assertEqual(ctx.exception.code, ErrorCode.NETWORK_FAILURE)
        self.assertEqual(self.store.listeners, {})

    async def test_listener_attach_failure_is_typed(self) -> None:
        self.store.failpoints["watch_guides"] = "listener could not attach"

        with self.assertRaises(ServiceError) as ctx:
            self.service.subscribe_guides()

        self.assertEqual(ctx.exception.code, ErrorCode.NETWORK_FAILURE)
        subscription = self.service.subscribe_guides()
        self.assertEqual(await subscription.next(timeout=1), [])
        subscription.close()


class GuideCrudTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.store = InMemoryStore()
        self.service = GuideService(self.store)

    async def test_create_update_delete_round_trip(self) -> None:
        created = await self.service.create_guide("T", "C", "P")

        catalog = await self.service.list_guides()
        self.assertEqual(len(catalog), 1)
        self.assertEqual(catalog[0].title, "T")
        self.assertEqual(catalog[0].id, created.id)
        self.assertIsNotNone(catalog[0].created_at)
        self.assertIsNone(catalog[0].updated_at)

        await self.service.update_guide(created.id, "T2", "C2", "P2")
        updated = await self.service.get_guide(created.id)
        self.assertEqual((updated.title, updated.content, updated.image_path), ("T2", "C2", "P2"))
        self.assertEqual(updated.id, created.id)
        self.assertIsNotNone(updated.updated_at)

        await self.service.delete_guide(created.id)
        with self.assertRaises(ServiceError) as ctx:
            await self.service.get_guide(created.id)
        self.assertEqual(ctx.exception.code, ErrorCode.NOT_FOUND)

    async def test_duplicate_titles_are_allowed(self) -> None:
        first = await self.service.create_guide("Burns", "A", "a.png")
        second = await self.service.create_guide("Burns", "B", "b.png")

        self.assertNotEqual(first.id, second.id)
        self.assertEqual(len(await self.service.list_guides()), 2)

    async def test_update_missing_guide_fails_with_not_found(self) -> None:
        with self.assertRaises(ServiceError) as ctx:
            await self.service.update_guide("missing", "T", "C", "P")

        self.assertEqual(ctx.exception.code, ErrorCode.NOT_FOUND)
        self.assertEqual(self.store.guide_write_count, 0)

    async def test_delete_missing_guide_fails_with_not_found(self) -> None:
        with self.assertRaises(ServiceError) as ctx:
            await self.service.delete_guide("missing")

        self.assertEqual(ctx.exception.code, ErrorCode.NOT_FOUND)

    async def test_store_failure_maps_to_network_failure(self) -> None:
        self.store.failpoints["add_guide"] = "connection reset"

        with self.assertRaises(ServiceError) as ctx:
            await self.service.create_guide("T", "C", "P")

        self.assertEqual(ctx.exception.code, ErrorCode.NETWORK_FAILURE)
        self.assertEqual(self.store.guides, {})

    async def test_failed_write_is_not_retried(self) -> None:
        created = await self.service.create_guide("T", "C", "P")
        self.store.failpoints["update_guide"] = "connection reset"

        with self.assertRaises(ServiceError):
            await self.service.update_guide(created.id, "T2", "C2", "P2")

        self.assertEqual((await self.service.get_guide(created.id)).title, "T")

    async def test_missing_document_fields_default_to_empty_strings(self) -> None:
        self.store.guides["legacy"] = {"content": "Only content"}

        guide = await self.service.get_guide("legacy")

        self.assertEqual(guide.title, "")
        self.assertEqual(guide.image_path, "")
        self.assertEqual(guide.content, "Only content")
        self.assertIsNone(guide.created_at)
