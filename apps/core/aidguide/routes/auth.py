"""Session and role routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from aidguide.errors import ServiceError
from aidguide.routes.dependencies import (
    get_profile_store,
    get_role_resolver,
    get_services,
    get_session_manager,
)
from aidguide.schemas.auth import (
    CreateAccountRequest,
    FederatedSignInRequest,
    PasswordSignInRequest,
    RoleResponse,
)
from aidguide.schemas.error import ErrorCode, ErrorResponse
from aidguide.schemas.profile import Profile
from aidguide.schemas.session import FederatedCredential, Session
from aidguide.services.container import ServiceContainer
from aidguide.services.profiles import ProfileStore
from aidguide.services.roles import RoleResolver
from aidguide.services.sessions import SessionManager

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/accounts",
    response_model=Session,
    status_code=status.HTTP_201_CREATED,
    responses={401: {"model": ErrorResponse}, 409: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def create_account(
    payload: CreateAccountRequest,
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
) -> Session:
    return await sessions.create_account(payload.email, payload.password, payload.name, payload.phone)


@router.post(
    "/sessions",
    response_model=Session,
    responses={401: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def sign_in_with_password(
    payload: PasswordSignInRequest,
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
) -> Session:
    return await sessions.sign_in_with_password(payload.email, payload.password)


@router.post(
    "/sessions/federated",
    response_model=Session,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def sign_in_with_federated_provider(
    payload: FederatedSignInRequest,
    services: Annotated[ServiceContainer, Depends(get_services)],
) -> Session:
    if services.handoff is None:
        raise ServiceError(ErrorCode.UNKNOWN, "Federated sign-in is not wired for this client")

    credential = None
    if payload.id_token or payload.access_token:
        credential = FederatedCredential(id_token=payload.id_token, access_token=payload.access_token)
    services.handoff.offer(credential)
    return await services.sessions.sign_in_with_federated_provider()


@router.get(
    "/sessions/current",
    response_model=Session,
    responses={404: {"model": ErrorResponse}},
)
async def get_current_session(
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
) -> Session:
    session = sessions.current_session()
    if session is None:
        raise ServiceError(ErrorCode.NOT_FOUND, "No active session")
    return session


@router.delete("/sessions/current", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
) -> Response:
    await sessions.sign_out()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/role", response_model=RoleResponse)
async def get_role(
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
    roles: Annotated[RoleResolver, Depends(get_role_resolver)],
) -> RoleResponse:
    return RoleResponse(privileged=await roles.is_privileged(sessions.current_session()))


@router.get(
    "/profile",
    response_model=Profile,
    responses={404: {"model": ErrorResponse}},
)
async def get_profile(
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
    profiles: Annotated[ProfileStore, Depends(get_profile_store)],
) -> Profile:
    profile = await profiles.get_profile(sessions.current_session())
    if profile is None:
        raise ServiceError(ErrorCode.NOT_FOUND, "Profile not found")
    return profile
