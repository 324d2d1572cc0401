"""FastAPI bridge between the presentation layer and the client core."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from aidguide.core.config import Settings, get_settings
from aidguide.core.logging_safety import configure_logging
from aidguide.errors import ServiceError
from aidguide.routes import auth_router, guides_router
from aidguide.schemas.error import ErrorCode
from aidguide.services.container import ServiceContainer, build_services

logger = logging.getLogger(__name__)

_STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.INVALID_CREDENTIAL: 401,
    ErrorCode.ACCOUNT_EXISTS: 409,
    ErrorCode.USER_CANCELLED: 400,
    ErrorCode.CREDENTIAL_CONFLICT: 409,
    ErrorCode.NETWORK_FAILURE: 503,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.UNKNOWN: 500,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.FORBIDDEN: 403,
}


def status_for(code: ErrorCode) -> int:
    return _STATUS_BY_CODE.get(code, 500)


def create_app(services: ServiceContainer | None = None, settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    services = services or build_services(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        if settings.seed_on_startup:
            try:
                inserted = await services.seed.ensure_default_content()
            except ServiceError as exc:
                logger.warning("startup.seed_failed code=%s", exc.code)
            else:
                logger.info("startup.seed_checked inserted=%s", inserted)
        yield

    app = FastAPI(title="Aidguide Client Core", version="1.0.0", lifespan=lifespan)
    app.state.services = services

    @app.exception_handler(ServiceError)
    async def handle_service_error(_, exc: ServiceError) -> JSONResponse:
        return JSONResponse(
            status_code=status_for(exc.code),
            content=exc.payload.model_dump(mode="json", exclude_none=True),
        )

    api_prefix = "/api/v1"
    app.include_router(auth_router, prefix=api_prefix)
    app.include_router(guides_router, prefix=api_prefix)

    return app
