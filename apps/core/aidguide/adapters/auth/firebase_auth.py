"""Firebase Auth adapter over the Identity Toolkit REST API."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

import httpx

from aidguide.adapters.auth.base import IdentityProvider, IdentityProviderError
from aidguide.core.config import IDENTITY_TOOLKIT_URL
from aidguide.schemas.error import ErrorCode
from aidguide.schemas.session import FederatedCredential, ProviderUser

logger = logging.getLogger(__name__)

_INVALID_CREDENTIAL_REASONS = frozenset(
    {
        "EMAIL_NOT_FOUND",
        "INVALID_PASSWORD",
        "INVALID_LOGIN_CREDENTIALS",
        "INVALID_EMAIL",
        "MISSING_EMAIL",
        "MISSING_PASSWORD",
        "WEAK_PASSWORD",
        "USER_DISABLED",
        "INVALID_IDP_RESPONSE",
        "INVALID_ID_TOKEN",
    }
)
_CONFLICT_REASONS = frozenset({"FEDERATED_USER_ID_ALREADY_LINKED", "EMAIL_EXISTS", "CREDENTIAL_TOO_OLD_LOGIN_AGAIN"})
_IDP_REQUEST_URI = "http://localhost"


class FirebaseIdentityProvider(IdentityProvider):
    """Signs users up and in against Firebase Auth.

    Holds the primary session's id token between calls; ``sign_out`` drops it.
    Every call is a single attempt with no retry.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = IDENTITY_TOOLKIT_URL,
        client: httpx.AsyncClient | None = None,
        timeout: float = 20.0,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._client = client
        self._timeout = timeout
        self._id_token: str | None = None

    @property
    def id_token(self) -> str | None:
        return self._id_token

    async def create_user(self, email: str, password: str) -> ProviderUser:
        body = await self._post(
            "accounts:signUp",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return self._accept(body, is_new_user=True)

    async def sign_in_with_password(self, email: str, password: str) -> ProviderUser:
        body = await self._post(
            "accounts:signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return self._accept(body)

    async def sign_in_with_federated(self, credential: FederatedCredential) -> ProviderUser:
        post_body: dict[str, str] = {"providerId": credential.provider_id}
        if credential.id_token:
            post_body["id_token"] = credential.id_token
        if credential.access_token:
            post_body["access_token"] = credential.access_token
        if len(post_body) == 1:
            raise IdentityProviderError(ErrorCode.INVALID_CREDENTIAL, "Federated credential carries no token")

        body = await self._post(
            "accounts:signInWithIdp",
            {
                "postBody": urlencode(post_body),
                "requestUri": _IDP_REQUEST_URI,
                "returnIdpCredential": True,
                "returnSecureToken": True,
            },
            federated=True,
        )
        if body.get("needConfirmation"):
            raise IdentityProviderError(
                ErrorCode.CREDENTIAL_CONFLICT,
                "Account exists with a different sign-in method",
            )
        return self._accept(body, is_new_user=bool(body.get("isNewUser")))

    async def delete_user(self, user: ProviderUser) -> None:
        token = user.id_token or self._id_token
        if not token:
            raise IdentityProviderError(ErrorCode.UNKNOWN, "No id token available to delete the account")

        await self._post("accounts:delete", {"idToken": token})
        if token == self._id_token:
            self._id_token = None

    async def sign_out(self) -> None:
        self._id_token = None

    def _accept(self, body: dict[str, Any], *, is_new_user: bool = False) -> ProviderUser:
        identity_id = str(body.get("localId") or "").strip()
        if not identity_id:
            raise IdentityProviderError(ErrorCode.UNKNOWN, "Provider response missing user identity")

        self._id_token = body.get("idToken")
        return ProviderUser(
            identity_id=identity_id,
            email=str(body.get("email") or ""),
            display_name=body.get("displayName") or None,
            avatar_url=body.get("photoUrl") or None,
            id_token=self._id_token,
            is_new_user=is_new_user,
        )

    async def _post(self, method: str, payload: dict[str, Any], *, federated: bool = False) -> dict[str, Any]:
        url = f"{self._base_url}/{method}"
        try:
            if self._client is not None:
                response = await self._client.post(url, params={"key": self._api_key}, json=payload)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(url, params={"key": self._api_key}, json=payload)
        except httpx.RequestError as exc:
            logger.warning("identity.request_failed method=%s error=%s", method, type(exc).__name__)
            raise IdentityProviderError(ErrorCode.NETWORK_FAILURE, "Identity service unreachable") from exc

        try:
            body = response.json()
        except ValueError:
            body = {}
        if response.status_code >= 400:
            raise self._error_for(response.status_code, body, federated=federated)
        return body if isinstance(body, dict) else {}

    @staticmethod
    def _error_for(status_code: int, body: Any, *, federated: bool) -> IdentityProviderError:
        error = body.get("error") if isinstance(body, dict) else None
        message = str(error.get("message") or "") if isinstance(error, dict) else ""
        # Messages look like "WEAK_PASSWORD : Password should be at least 6 characters".
        reason = message.split(" ", 1)[0].strip()

        if status_code >= 500:
            code = ErrorCode.NETWORK_FAILURE
        elif federated and reason in _CONFLICT_REASONS:
            code = ErrorCode.CREDENTIAL_CONFLICT
        elif reason == "EMAIL_EXISTS":
            code = ErrorCode.ACCOUNT_EXISTS
        elif reason in _INVALID_CREDENTIAL_REASONS:
            code = ErrorCode.INVALID_CREDENTIAL
        else:
            code = ErrorCode.UNKNOWN

        logger.info("identity.rejected status=%s reason=%s code=%s", status_code, reason or "none", code)
        return IdentityProviderError(code, reason or f"Identity service returned {status_code}")


__all__ = ["FirebaseIdentityProvider"]
