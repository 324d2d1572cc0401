"""Service wiring built once at process start."""

from __future__ import annotations

from dataclasses import dataclass

from aidguide.adapters.auth import (
    CredentialHandoff,
    FirebaseIdentityProvider,
    GoogleFederatedProvider,
    IdentityProvider,
    MockIdentityProvider,
)
from aidguide.adapters.auth.base import FederatedProvider
from aidguide.core.config import Settings
from aidguide.errors import ConfigurationError
from aidguide.repositories.base import Store
from aidguide.repositories.firestore import FirestoreStore
from aidguide.repositories.memory import InMemoryStore
from aidguide.services.guides import GuideService
from aidguide.services.profiles import ProfileStore
from aidguide.services.roles import RoleResolver
from aidguide.services.seed import SeedLoader
from aidguide.services.sessions import SessionManager


@dataclass(slots=True)
class ServiceContainer:
    store: Store
    profiles: ProfileStore
    sessions: SessionManager
    roles: RoleResolver
    guides: GuideService
    seed: SeedLoader
    handoff: CredentialHandoff | None = None


def assemble_services(
    *,
    store: Store,
    identity: IdentityProvider,
    federated: FederatedProvider,
    handoff: CredentialHandoff | None = None,
) -> ServiceContainer:
    """Wire services around explicit backends; tests pass in-memory doubles."""
    profiles = ProfileStore(store)
    guides = GuideService(store)
    return ServiceContainer(
        store=store,
        profiles=profiles,
        sessions=SessionManager(identity, federated, profiles),
        roles=RoleResolver(profiles),
        guides=guides,
        seed=SeedLoader(guides),
        handoff=handoff,
    )


def build_services(settings: Settings) -> ServiceContainer:
    """Resolve backends from configuration."""
    store: Store
    if settings.store_backend == "firestore":
        if not settings.firebase_project_id and not settings.firebase_credentials_path:
            raise ConfigurationError("Firestore backend requires a project id or credentials path")
        store = FirestoreStore.from_credentials(
            project_id=settings.firebase_project_id,
            credentials_path=settings.firebase_credentials_path,
        )
    else:
        store = InMemoryStore()

    identity: IdentityProvider
    if settings.identity_provider == "firebase":
        if not settings.firebase_api_key:
            raise ConfigurationError("Firebase identity provider requires an API key")
        identity = FirebaseIdentityProvider(
            settings.firebase_api_key,
            base_url=settings.identity_toolkit_url,
        )
    else:
        identity = MockIdentityProvider()

    handoff = CredentialHandoff()
    return assemble_services(
        store=store,
        identity=identity,
        federated=GoogleFederatedProvider(account_picker=handoff.take),
        handoff=handoff,
    )


__all__ = ["ServiceContainer", "assemble_services", "build_services"]
