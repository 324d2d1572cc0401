"""Firebase Identity Toolkit adapter tests over a mocked transport."""

from __future__ import annotations

import json
import unittest
from urllib.parse import parse_qs

import httpx

from aidguide.adapters.auth.base import IdentityProviderError
from aidguide.adapters.auth.firebase_auth import FirebaseIdentityProvider
from aidguide.schemas.error import ErrorCode
from aidguide.schemas.session import FederatedCredential, ProviderUser


def _error(status_code: int, message: str) -> httpx.Response:
    return httpx.Response(status_code, json={"error": {"code": status_code, "message": message}})


class _RecordingTransport:
    def __init__(self, responses: list[httpx.Response | Exception]) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def body(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)


class FirebaseIdentityProviderTests(unittest.IsolatedAsyncioTestCase):
    def _provider(self, *responses: httpx.Response | Exception) -> tuple[FirebaseIdentityProvider, _RecordingTransport]:
        transport = _RecordingTransport(list(responses))
        client = httpx.AsyncClient(transport=httpx.MockTransport(transport))
        self.addAsyncCleanup(client.aclose)
        return FirebaseIdentityProvider("api-key-1", client=client), transport

    async def test_sign_up_posts_credentials_and_keeps_token(self) -> None:
        provider, transport = self._provider(
            httpx.Response(200, json={"localId": "uid-1", "email": "ana@example.com", "idToken": "tok-1"}),
        )

        user = await provider.create_user("ana@example.com", "secret-1")

        request = transport.requests[0]
        self.assertTrue(request.url.path.endswith("/accounts:signUp"))
        self.assertEqual(request.url.params["key"], "api-key-1")
        self.assertEqual(
            transport.body(),
            {"email": "ana@example.com", "password": "secret-1", "returnSecureToken": True},
        )
        self.assertEqual(user.identity_id, "uid-1")
        self.assertTrue(user.is_new_user)
        self.assertEqual(provider.id_token, "tok-1")

    async def test_existing_email_maps_to_account_exists(self) -> None:
        provider, _ = self._provider(_error(400, "EMAIL_EXISTS"))

        with self.assertRaises(IdentityProviderError) as ctx:
            await provider.create_user("ana@example.com", "secret-1")

        self.assertEqual(ctx.exception.code, ErrorCode.ACCOUNT_EXISTS)

    async def test_weak_password_message_with_detail_maps_to_invalid_credential(self) -> None:
        provider, _ = self._provider(_error(400, "WEAK_PASSWORD : Password should be at least 6 characters"))

        with self.assertRaises(IdentityProviderError) as ctx:
            await provider.create_user("ana@example.com", "123")

        self.assertEqual(ctx.exception.code, ErrorCode.INVALID_CREDENTIAL)
        self.assertEqual(str(ctx.exception), "WEAK_PASSWORD")

    async def test_bad_login_maps_to_invalid_credential(self) -> None:
        provider, transport = self._provider(_error(400, "INVALID_LOGIN_CREDENTIALS"))

        with self.assertRaises(IdentityProviderError) as ctx:
            await provider.sign_in_with_password("ana@example.com", "wrong-pass")

        self.assertTrue(transport.requests[0].url.path.endswith("/accounts:signInWithPassword"))
        self.assertEqual(ctx.exception.code, ErrorCode.INVALID_CREDENTIAL)
        self.assertIsNone(provider.id_token)

    async def test_server_error_maps_to_network_failure(self) -> None:
        provider, _ = self._provider(httpx.Response(503, text="unavailable"))

        with self.assertRaises(IdentityProviderError) as ctx:
            await provider.sign_in_with_password("ana@example.com", "secret-1")

        self.assertEqual(ctx.exception.code, ErrorCode.NETWORK_FAILURE)

    async def test_transport_error_maps_to_network_failure(self) -> None:
        provider, transport = self._provider(httpx.ConnectError("connection refused"))

        with self.assertRaises(IdentityProviderError) as ctx:
            await provider.sign_in_with_password("ana@example.com", "secret-1")

        self.assertEqual(ctx.exception.code, ErrorCode.NETWORK_FAILURE)
        self.assertEqual(len(transport.requests), 1)

    async def test_unrecognized_rejection_maps_to_unknown(self) -> None:
        provider, _ = self._provider(_error(400, "OPERATION_NOT_ALLOWED"))

        with self.assertRaises(IdentityProviderError) as ctx:
            await provider.sign_in_with_password("ana@example.com", "secret-1")

        self.assertEqual(ctx.exception.code, ErrorCode.UNKNOWN)

    async def test_federated_exchange_sends_google_token(self) -> None:
        provider, transport = self._provider(
            httpx.Response(
                200,
                json={
                    "localId": "uid-9",
                    "email": "luis@example.com",
                    "displayName": "Luis",
                    "photoUrl": "https://photos.example/luis.png",
                    "idToken": "tok-9",
                    "isNewUser": True,
                },
            ),
        )

        user = await provider.sign_in_with_federated(FederatedCredential(id_token="google-id-token"))

        self.assertTrue(transport.requests[0].url.path.endswith("/accounts:signInWithIdp"))
        post_body = parse_qs(transport.body()["postBody"])
        self.assertEqual(post_body["id_token"], ["google-id-token"])
        self.assertEqual(post_body["providerId"], ["google.com"])
        self.assertEqual(user.display_name, "Luis")
        self.assertEqual(user.avatar_url, "https://photos.example/luis.png")
        self.assertTrue(user.is_new_user)

    async def test_federated_needs_confirmation_is_a_conflict(self) -> None:
        provider, _ = self._provider(
            httpx.Response(200, json={"localId": "uid-9", "email": "luis@example.com", "needConfirmation": True}),
        )

        with self.assertRaises(IdentityProviderError) as ctx:
            await provider.sign_in_with_federated(FederatedCredential(access_token="google-access"))

        self.assertEqual(ctx.exception.code, ErrorCode.CREDENTIAL_CONFLICT)

    async def test_federated_email_exists_is_a_conflict(self) -> None:
        provider, _ = self._provider(_error(400, "EMAIL_EXISTS"))

        with self.assertRaises(IdentityProviderError) as ctx:
            await provider.sign_in_with_federated(FederatedCredential(id_token="google-id-token"))

        self.assertEqual(ctx.exception.code, ErrorCode.CREDENTIAL_CONFLICT)

    async def test_federated_credential_without_tokens_is_rejected_locally(self) -> None:
        provider, transport = self._provider()

        with self.assertRaises(IdentityProviderError) as ctx:
            await provider.sign_in_with_federated(FederatedCredential())

        self.assertEqual(ctx.exception.code, ErrorCode.INVALID_CREDENTIAL)
        self.assertEqual(transport.requests, [])

    async def test_delete_and_sign_out_drop_the_token(self) -> None:
        provider, transport = self._provider(
            httpx.Response(200, json={"localId": "uid-1", "email": "ana@example.com", "idToken": "tok-1"}),
            httpx.Response(200, json={}),
        )
        user = await provider.create_user("ana@example.com", "secret-1")

        await provider.delete_user(user)

        self.assertTrue(transport.requests[1].url.path.endswith("/accounts:delete"))
        self.assertEqual(transport.body(1), {"idToken": "tok-1"})
        self.assertIsNone(provider.id_token)

    async def test_sign_out_is_local(self) -> None:
        provider, transport = self._provider(
            httpx.Response(200, json={"localId": "uid-1", "email": "ana@example.com", "idToken": "tok-1"}),
        )
        await provider.sign_in_with_password("ana@example.com", "secret-1")

        await provider.sign_out()

        self.assertIsNone(provider.id_token)
        self.assertEqual(len(transport.requests), 1)

    async def test_delete_without_any_token_fails(self) -> None:
        provider, _ = self._provider()

        with self.assertRaises(IdentityProviderError):
            await provider.delete_user(ProviderUser(identity_id="uid-1"))
