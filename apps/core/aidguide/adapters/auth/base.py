"""Identity provider interfaces."""

from abc import ABC, abstractmethod

from aidguide.schemas.error import ErrorCode
from aidguide.schemas.session import FederatedCredential, ProviderUser


class IdentityProviderError(Exception):
    """Raised when a provider rejects or cannot complete an authentication call."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        self.code = code
        super().__init__(message)


class IdentityProvider(ABC):
    """Primary credential backend (email/password and federated token exchange)."""

    @abstractmethod
    async def create_user(self, email: str, password: str) -> ProviderUser:
        """Create a password credential and sign it in."""

    @abstractmethod
    async def sign_in_with_password(self, email: str, password: str) -> ProviderUser:
        """Verify a password credential."""

    @abstractmethod
    async def sign_in_with_federated(self, credential: FederatedCredential) -> ProviderUser:
        """Exchange a federated provider credential for a primary identity."""

    @abstractmethod
    async def delete_user(self, user: ProviderUser) -> None:
        """Remove a credential created in this process (compensation path)."""

    @abstractmethod
    async def sign_out(self) -> None:
        """Drop the primary credential session."""


class FederatedProvider(ABC):
    """Secondary identity provider with an interactive sign-in step."""

    provider_id: str = "google.com"

    @abstractmethod
    async def sign_in(self) -> FederatedCredential | None:
        """Run the interactive step; ``None`` means the user cancelled."""

    @abstractmethod
    async def sign_out(self) -> None:
        """Drop the federated provider's own session."""


__all__ = ["FederatedProvider", "IdentityProvider", "IdentityProviderError"]
