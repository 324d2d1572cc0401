"""Identity provider adapters."""

from .base import FederatedProvider, IdentityProvider, IdentityProviderError
from .firebase_auth import FirebaseIdentityProvider
from .google_auth import CredentialHandoff, GoogleFederatedProvider
from .mock_auth import MockFederatedProvider, MockIdentityProvider

__all__ = [
    "CredentialHandoff",
    "FederatedProvider",
    "FirebaseIdentityProvider",
    "GoogleFederatedProvider",
    "IdentityProvider",
    "IdentityProviderError",
    "MockFederatedProvider",
    "MockIdentityProvider",
]
