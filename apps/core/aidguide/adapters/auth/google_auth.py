"""Google sign-in as the federated provider."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from aidguide.adapters.auth.base import FederatedProvider
from aidguide.schemas.session import FederatedCredential

GoogleAccountPicker = Callable[[], Awaitable[FederatedCredential | None]]
GoogleSignOut = Callable[[], Awaitable[None]]


class GoogleFederatedProvider(FederatedProvider):
    """Delegates the interactive account picker to the presentation layer.

    ``account_picker`` shows Google's consent flow and resolves to the
    resulting tokens, or ``None`` when the user backs out.
    """

    provider_id = "google.com"

    def __init__(self, account_picker: GoogleAccountPicker, sign_out: GoogleSignOut | None = None) -> None:
        self._account_picker = account_picker
        self._sign_out = sign_out
        self._signed_in = False

    @property
    def signed_in(self) -> bool:
        return self._signed_in

    async def sign_in(self) -> FederatedCredential | None:
        credential = await self._account_picker()
        if credential is None:
            return None

        self._signed_in = True
        return credential.model_copy(update={"provider_id": self.provider_id})

    async def sign_out(self) -> None:
        if self._sign_out is not None:
            await self._sign_out()
        self._signed_in = False


class CredentialHandoff:
    """Account picker fed by a credential the presentation layer already obtained.

    ``offer`` stores the tokens from the client-side Google consent screen (or
    ``None`` for a dismissed picker); the next ``take`` consumes them.
    """

    def __init__(self) -> None:
        self._pending: FederatedCredential | None = None

    def offer(self, credential: FederatedCredential | None) -> None:
        self._pending = credential

    async def take(self) -> FederatedCredential | None:
        credential, self._pending = self._pending, None
        return credential


__all__ = ["CredentialHandoff", "GoogleAccountPicker", "GoogleFederatedProvider"]
