"""Settings-driven service wiring tests."""

from __future__ import annotations

import os
import unittest

from aidguide.adapters.auth import FirebaseIdentityProvider, MockIdentityProvider
from aidguide.core.config import Settings, get_settings
from aidguide.core.logging_safety import mask_email, safe_log_identifier
from aidguide.errors import ConfigurationError
from aidguide.repositories.memory import InMemoryStore
from aidguide.services.container import build_services


class _SettingsEnvCase(unittest.TestCase):
    _env_keys = (
        "AIDGUIDE_IDENTITY_PROVIDER",
        "AIDGUIDE_STORE_BACKEND",
        "AIDGUIDE_FIREBASE_API_KEY",
        "AIDGUIDE_FIREBASE_PROJECT_ID",
        "AIDGUIDE_SEED_ON_STARTUP",
    )

    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in self._env_keys}
        for key in self._env_keys:
            os.environ.pop(key, None)
        os.environ["AIDGUIDE_IDENTITY_PROVIDER"] = "mock"
        os.environ["AIDGUIDE_STORE_BACKEND"] = "memory"
        get_settings.cache_clear()

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()


class SettingsTests(_SettingsEnvCase):
    def test_environment_selects_local_backends(self) -> None:
        os.environ["AIDGUIDE_SEED_ON_STARTUP"] = "false"
        get_settings.cache_clear()

        settings = get_settings()

        self.assertEqual(settings.identity_provider, "mock")
        self.assertEqual(settings.store_backend, "memory")
        self.assertFalse(settings.seed_on_startup)

    def test_defaults_target_firebase(self) -> None:
        settings = Settings(_env_file=None, identity_provider="firebase", store_backend="firestore")

        self.assertTrue(settings.identity_toolkit_url.startswith("https://identitytoolkit.googleapis.com"))
        self.assertTrue(settings.seed_on_startup)


class BuildServicesTests(_SettingsEnvCase):
    def test_mock_and_memory_backends_are_wired(self) -> None:
        services = build_services(get_settings())

        self.assertIsInstance(services.store, InMemoryStore)
        self.assertIsInstance(services.sessions._identity, MockIdentityProvider)
        self.assertIsNotNone(services.handoff)
        self.assertIsNone(services.sessions.current_session())

    def test_firebase_identity_requires_api_key(self) -> None:
        os.environ["AIDGUIDE_IDENTITY_PROVIDER"] = "firebase"
        get_settings.cache_clear()

        with self.assertRaises(ConfigurationError):
            build_services(get_settings())

    def test_firebase_identity_with_api_key(self) -> None:
        os.environ["AIDGUIDE_IDENTITY_PROVIDER"] = "firebase"
        os.environ["AIDGUIDE_FIREBASE_API_KEY"] = "api-key-1"
        get_settings.cache_clear()

        services = build_services(get_settings())

        self.assertIsInstance(services.sessions._identity, FirebaseIdentityProvider)

    def test_firestore_requires_project(self) -> None:
        os.environ["AIDGUIDE_STORE_BACKEND"] = "firestore"
        get_settings.cache_clear()

        with self.assertRaises(ConfigurationError):
            build_services(get_settings())


class LoggingSafetyTests(unittest.TestCase):
    def test_identifiers_are_hashed_deterministically(self) -> None:
        token = safe_log_identifier("uid-123", prefix="iid")

        self.assertTrue(token.startswith("iid-"))
        self.assertNotIn("uid-123", token)
        self.assertEqual(token, safe_log_identifier("uid-123", prefix="iid"))
        self.assertEqual(safe_log_identifier(None, prefix="iid"), "iid-missing")

    def test_email_local_part_is_masked(self) -> None:
        self.assertEqual(mask_email("ana.lopez@example.com"), "a***@example.com")
        self.assertEqual(mask_email(""), "email-missing")
        self.assertEqual(mask_email("not-an-email"), "***")
