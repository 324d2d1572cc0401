"""Mock identity providers for local development and tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import uuid4

from aidguide.adapters.auth.base import FederatedProvider, IdentityProvider, IdentityProviderError
from aidguide.schemas.error import ErrorCode
from aidguide.schemas.session import FederatedCredential, ProviderUser

_MIN_PASSWORD_LENGTH = 6


@dataclass(slots=True)
class _Account:
    identity_id: str
    email: str
    password: str | None = None
    display_name: str | None = None
    avatar_url: str | None = None
    federated_subject: str | None = None


class MockIdentityProvider(IdentityProvider):
    """Deterministic in-memory credential backend.

    Federated credentials are accepted when ``id_token`` has the form
    ``google:<subject>:<email>[:<display name>]``. ``fail_next`` raises the
    given error code once on the next call of any operation.
    """

    def __init__(self) -> None:
        self.accounts: dict[str, _Account] = {}
        self.signed_in_identity_id: str | None = None
        self.sign_out_count = 0
        self.fail_next: ErrorCode | None = None

    async def create_user(self, email: str, password: str) -> ProviderUser:
        self._maybe_fail()
        normalized = email.strip().lower()
        if "@" not in normalized or len(password) < _MIN_PASSWORD_LENGTH:
            raise IdentityProviderError(ErrorCode.INVALID_CREDENTIAL, "INVALID_EMAIL_OR_WEAK_PASSWORD")
        if self._find_by_email(normalized) is not None:
            raise IdentityProviderError(ErrorCode.ACCOUNT_EXISTS, "EMAIL_EXISTS")

        account = _Account(identity_id=f"uid-{uuid4().hex[:16]}", email=normalized, password=password)
        self.accounts[account.identity_id] = account
        return self._sign_in(account, is_new_user=True)

    async def sign_in_with_password(self, email: str, password: str) -> ProviderUser:
        self._maybe_fail()
        account = self._find_by_email(email.strip().lower())
        if account is None or account.password is None or account.password != password:
            raise IdentityProviderError(ErrorCode.INVALID_CREDENTIAL, "INVALID_LOGIN_CREDENTIALS")
        return self._sign_in(account)

    async def sign_in_with_federated(self, credential: FederatedCredential) -> ProviderUser:
        self._maybe_fail()
        parts = (credential.id_token or "").split(":", 3)
        if len(parts) < 3 or parts[0] != "google" or not parts[1] or not parts[2]:
            raise IdentityProviderError(ErrorCode.INVALID_CREDENTIAL, "INVALID_IDP_RESPONSE")

        subject, email = parts[1], parts[2].lower()
        display_name = parts[3] if len(parts) == 4 else None
        for account in self.accounts.values():
            if account.federated_subject == subject:
                return self._sign_in(account)

        existing = self._find_by_email(email)
        if existing is not None:
            raise IdentityProviderError(ErrorCode.CREDENTIAL_CONFLICT, "FEDERATED_USER_ID_ALREADY_LINKED")

        account = _Account(
            identity_id=f"uid-{uuid4().hex[:16]}",
            email=email,
            display_name=display_name,
            avatar_url=f"https://avatars.example/{subject}.png",
            federated_subject=subject,
        )
        self.accounts[account.identity_id] = account
        return self._sign_in(account, is_new_user=True)

    async def delete_user(self, user: ProviderUser) -> None:
        self._maybe_fail()
        self.accounts.pop(user.identity_id, None)
        if self.signed_in_identity_id == user.identity_id:
            self.signed_in_identity_id = None

    async def sign_out(self) -> None:
        self.signed_in_identity_id = None
        self.sign_out_count += 1

    def _sign_in(self, account: _Account, *, is_new_user: bool = False) -> ProviderUser:
        self.signed_in_identity_id = account.identity_id
        return ProviderUser(
            identity_id=account.identity_id,
            email=account.email,
            display_name=account.display_name,
            avatar_url=account.avatar_url,
            id_token=f"mock-token-{account.identity_id}",
            is_new_user=is_new_user,
        )

    def _find_by_email(self, email: str) -> _Account | None:
        for account in self.accounts.values():
            if account.email == email:
                return account
        return None

    def _maybe_fail(self) -> None:
        if self.fail_next is None:
            return
        code, self.fail_next = self.fail_next, None
        raise IdentityProviderError(code, f"Injected {code} failure")


@dataclass
class MockFederatedProvider(FederatedProvider):
    """Federated provider whose account picker replays queued results.

    Queue ``None`` to simulate the user closing the picker.
    """

    queued: list[FederatedCredential | None] = field(default_factory=list)
    signed_in: bool = False
    sign_out_count: int = 0
    fail_sign_out: bool = False

    def queue_account(self, subject: str, email: str, display_name: str | None = None) -> None:
        token = f"google:{subject}:{email}" + (f":{display_name}" if display_name else "")
        self.queued.append(FederatedCredential(id_token=token))

    def queue_cancel(self) -> None:
        self.queued.append(None)

    async def sign_in(self) -> FederatedCredential | None:
        credential = self.queued.pop(0) if self.queued else None
        self.signed_in = credential is not None
        return credential

    async def sign_out(self) -> None:
        self.sign_out_count += 1
        if self.fail_sign_out:
            raise IdentityProviderError(ErrorCode.NETWORK_FAILURE, "Injected federated sign-out failure")
        self.signed_in = False


__all__ = ["MockFederatedProvider", "MockIdentityProvider"]
