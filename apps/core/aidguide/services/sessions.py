"""Session manager service layer."""

from __future__ import annotations

import logging

from aidguide.adapters.auth.base import FederatedProvider, IdentityProvider, IdentityProviderError
from aidguide.core.logging_safety import mask_email, safe_log_identifier
from aidguide.core.streams import Broadcaster, Subscription
from aidguide.errors import ServiceError, StoreError
from aidguide.schemas.error import ErrorCode
from aidguide.schemas.session import OriginProvider, ProviderUser, Session
from aidguide.services.profiles import ProfileStore

logger = logging.getLogger(__name__)

_PASSWORD_PROVIDER: OriginProvider = "password"
_FEDERATED_PROVIDER: OriginProvider = "google.com"


class SessionManager:
    """Owns the client's single active session.

    Every sign-in replaces the current session and every sign-out clears it;
    both are pushed to ``session_changes()`` subscribers. Each operation makes a
    single attempt and reports failures as ``ServiceError``.
    """

    def __init__(
        self,
        identity: IdentityProvider,
        federated: FederatedProvider,
        profiles: ProfileStore,
    ) -> None:
        self._identity = identity
        self._federated = federated
        self._profiles = profiles
        self._session: Session | None = None
        self._changes: Broadcaster[Session | None] = Broadcaster()

    def current_session(self) -> Session | None:
        return self._session

    def session_changes(self) -> Subscription[Session | None]:
        """Live session values, starting with the current one."""
        return self._changes.subscribe(self._session)

    async def create_account(self, email: str, password: str, name: str, phone: str) -> Session:
        """Create a password credential plus its non-privileged profile.

        The two writes are not transactional. When the profile write fails the
        new credential is deleted again; if that cleanup also fails the error
        details report ``state=CREDENTIAL_ONLY`` and the credential is orphaned.
        Either way the primary provider has already moved to the new identity, so
        any previous session is cleared as well.
        """
        safe_email = mask_email(email)
        try:
            user = await self._identity.create_user(email, password)
        except IdentityProviderError as exc:
            logger.info("session.create_account_rejected email=%s code=%s", safe_email, exc.code)
            raise self._provider_error(exc) from exc
        except Exception as exc:
            logger.exception("session.create_account_failed email=%s", safe_email)
            raise ServiceError(ErrorCode.UNKNOWN, "Account creation failed") from exc

        try:
            await self._profiles.create(
                identity_id=user.identity_id,
                name=name,
                email=email,
                phone=phone,
            )
        except Exception as exc:
            raise await self._compensate_account(user, exc) from exc

        session = self._to_session(user, origin=_PASSWORD_PROVIDER, fallback_email=email)
        self._activate(session)
        return session

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        safe_email = mask_email(email)
        try:
            user = await self._identity.sign_in_with_password(email, password)
        except IdentityProviderError as exc:
            logger.info("session.sign_in_rejected email=%s code=%s", safe_email, exc.code)
            raise self._provider_error(exc) from exc
        except Exception as exc:
            logger.exception("session.sign_in_failed email=%s", safe_email)
            raise ServiceError(ErrorCode.UNKNOWN, "Sign-in failed") from exc

        session = self._to_session(user, origin=_PASSWORD_PROVIDER, fallback_email=email)
        self._activate(session)
        return session

    async def sign_in_with_federated_provider(self) -> Session:
        """Sign in through the federated provider, creating a profile on first use."""
        try:
            credential = await self._federated.sign_in()
        except IdentityProviderError as exc:
            raise self._provider_error(exc) from exc
        except Exception as exc:
            logger.exception("session.federated_picker_failed")
            raise ServiceError(ErrorCode.UNKNOWN, "Federated sign-in failed") from exc

        if credential is None:
            logger.info("session.federated_cancelled")
            raise ServiceError(ErrorCode.USER_CANCELLED, "Sign-in was cancelled")

        try:
            user = await self._identity.sign_in_with_federated(credential)
        except Exception as exc:
            await self._terminate_federated()
            if isinstance(exc, IdentityProviderError):
                logger.info("session.federated_rejected code=%s", exc.code)
                raise self._provider_error(exc) from exc
            logger.exception("session.federated_exchange_failed")
            raise ServiceError(ErrorCode.UNKNOWN, "Federated sign-in failed") from exc

        safe_identity_id = safe_log_identifier(user.identity_id, prefix="iid")
        try:
            created = await self._profiles.ensure(
                identity_id=user.identity_id,
                name=user.display_name,
                email=user.email,
            )
        except Exception as exc:
            # The primary provider already switched to this identity, so the previous
            # session is gone too. Profile bootstrap is retried by the next sign-in.
            logger.warning("session.federated_profile_failed identity_id=%s error=%s", safe_identity_id, exc)
            await self._reset()
            raise ServiceError(ErrorCode.NETWORK_FAILURE, "Profile could not be created") from exc

        logger.info(
            "session.federated_signed_in identity_id=%s new_user=%s profile_created=%s",
            safe_identity_id,
            user.is_new_user,
            created,
        )
        session = self._to_session(user, origin=_FEDERATED_PROVIDER, fallback_email="")
        self._activate(session)
        return session

    async def sign_out(self) -> None:
        """Terminate the federated and the primary session, then clear local state.

        Both providers are always asked to sign out, even if the first one fails.
        """
        await self._reset()

    def _activate(self, session: Session) -> None:
        self._session = session
        logger.info(
            "session.signed_in identity_id=%s provider=%s",
            safe_log_identifier(session.identity_id, prefix="iid"),
            session.origin_provider,
        )
        self._changes.publish(session)

    async def _reset(self) -> None:
        await self._terminate_providers()
        if self._session is None:
            return

        logger.info("session.signed_out identity_id=%s", safe_log_identifier(self._session.identity_id, prefix="iid"))
        self._session = None
        self._changes.publish(None)

    async def _terminate_providers(self) -> None:
        await self._terminate_federated()
        try:
            await self._identity.sign_out()
        except Exception as exc:
            logger.warning("session.primary_sign_out_failed error=%s", type(exc).__name__)

    async def _terminate_federated(self) -> None:
        try:
            await self._federated.sign_out()
        except Exception as exc:
            logger.warning("session.federated_sign_out_failed error=%s", type(exc).__name__)

    async def _compensate_account(self, user: ProviderUser, cause: Exception) -> ServiceError:
        safe_identity_id = safe_log_identifier(user.identity_id, prefix="iid")
        code = ErrorCode.NETWORK_FAILURE if isinstance(cause, StoreError) else ErrorCode.UNKNOWN
        try:
            await self._identity.delete_user(user)
        except Exception as exc:
            logger.warning(
                "session.account_orphaned identity_id=%s state=CREDENTIAL_ONLY error=%s",
                safe_identity_id,
                type(exc).__name__,
            )
            await self._reset()
            return ServiceError(
                code,
                "Profile could not be created; credential left without a profile",
                details={"state": "CREDENTIAL_ONLY", "identity_id": user.identity_id},
            )

        logger.warning("session.account_rolled_back identity_id=%s error=%s", safe_identity_id, cause)
        await self._reset()
        return ServiceError(
            code,
            "Profile could not be created; account creation was rolled back",
            details={"state": "ROLLED_BACK"},
        )

    @staticmethod
    def _provider_error(exc: IdentityProviderError) -> ServiceError:
        return ServiceError(exc.code, str(exc) or "Authentication failed")

    @staticmethod
    def _to_session(user: ProviderUser, *, origin: OriginProvider, fallback_email: str) -> Session:
        return Session(
            identity_id=user.identity_id,
            email=user.email or fallback_email,
            display_name=user.display_name,
            avatar_url=user.avatar_url,
            origin_provider=origin,
        )


__all__ = ["SessionManager"]
