"""Dependency wiring for routes."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, Request

from aidguide.core.logging_safety import safe_log_identifier
from aidguide.errors import ServiceError
from aidguide.schemas.error import ErrorCode
from aidguide.schemas.session import Session
from aidguide.services.container import ServiceContainer
from aidguide.services.guides import GuideService
from aidguide.services.profiles import ProfileStore
from aidguide.services.roles import RoleResolver
from aidguide.services.sessions import SessionManager

logger = logging.getLogger(__name__)


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def get_session_manager(services: Annotated[ServiceContainer, Depends(get_services)]) -> SessionManager:
    return services.sessions


def get_role_resolver(services: Annotated[ServiceContainer, Depends(get_services)]) -> RoleResolver:
    return services.roles


def get_guide_service(services: Annotated[ServiceContainer, Depends(get_services)]) -> GuideService:
    return services.guides


def get_profile_store(services: Annotated[ServiceContainer, Depends(get_services)]) -> ProfileStore:
    return services.profiles


def require_session(
    request: Request,
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
) -> Session:
    session = sessions.current_session()
    if session is None:
        logger.warning("bridge.rejected method=%s path=%s reason=no_session", request.method, request.url.path)
        raise ServiceError(ErrorCode.UNAUTHORIZED, "Sign-in required")
    return session


async def require_privileged(
    request: Request,
    session: Annotated[Session, Depends(require_session)],
    roles: Annotated[RoleResolver, Depends(get_role_resolver)],
) -> Session:
    """Gate catalog mutations on the privileged role."""
    if not await roles.is_privileged(session):
        logger.warning(
            "bridge.rejected method=%s path=%s identity_id=%s reason=not_privileged",
            request.method,
            request.url.path,
            safe_log_identifier(session.identity_id, prefix="iid"),
        )
        raise ServiceError(ErrorCode.FORBIDDEN, "Privileged role required")
    return session
