"""Guide catalog routes."""

import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, WebSocket, WebSocketDisconnect, status
from pydantic import TypeAdapter
from starlette.websockets import WebSocketState

from aidguide.routes.dependencies import get_guide_service, require_privileged, require_session
from aidguide.schemas.error import ErrorResponse
from aidguide.schemas.guide import Guide, GuideFields
from aidguide.schemas.session import Session
from aidguide.services.container import ServiceContainer
from aidguide.services.guides import GuideService

router = APIRouter(prefix="/guides", tags=["Guides"])
logger = logging.getLogger(__name__)

_CATALOG_ADAPTER = TypeAdapter(list[Guide])
_WS_UNAUTHORIZED = 4401


@router.get("", response_model=list[Guide], responses={401: {"model": ErrorResponse}})
async def list_guides(
    _session: Annotated[Session, Depends(require_session)],
    service: Annotated[GuideService, Depends(get_guide_service)],
) -> list[Guide]:
    return await service.list_guides()


@router.get(
    "/{guideId}",
    response_model=Guide,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_guide(
    guide_id: Annotated[str, Path(alias="guideId")],
    _session: Annotated[Session, Depends(require_session)],
    service: Annotated[GuideService, Depends(get_guide_service)],
) -> Guide:
    return await service.get_guide(guide_id)


@router.post(
    "",
    response_model=Guide,
    status_code=status.HTTP_201_CREATED,
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def create_guide(
    payload: GuideFields,
    _session: Annotated[Session, Depends(require_privileged)],
    service: Annotated[GuideService, Depends(get_guide_service)],
) -> Guide:
    return await service.create_guide(payload.title, payload.content, payload.image_path)


@router.put(
    "/{guideId}",
    response_model=Guide,
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def update_guide(
    guide_id: Annotated[str, Path(alias="guideId")],
    payload: GuideFields,
    _session: Annotated[Session, Depends(require_privileged)],
    service: Annotated[GuideService, Depends(get_guide_service)],
) -> Guide:
    return await service.update_guide(guide_id, payload.title, payload.content, payload.image_path)


@router.delete(
    "/{guideId}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def delete_guide(
    guide_id: Annotated[str, Path(alias="guideId")],
    _session: Annotated[Session, Depends(require_privileged)],
    service: Annotated[GuideService, Depends(get_guide_service)],
) -> Response:
    await service.delete_guide(guide_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.websocket("/stream")
async def stream_guides(websocket: WebSocket) -> None:
    """Push the full title-ordered catalog on connect and after every change."""
    services: ServiceContainer = websocket.app.state.services
    if services.sessions.current_session() is None:
        await websocket.close(code=_WS_UNAUTHORIZED, reason="Sign-in required")
        return

    await websocket.accept()
    subscription = services.guides.subscribe_guides()

    async def forward_snapshots() -> None:
        async for guides in subscription:
            await websocket.send_text(_CATALOG_ADAPTER.dump_json(guides).decode("utf-8"))

    async def wait_for_disconnect() -> None:
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            pass

    forward_task = asyncio.create_task(forward_snapshots())
    client_task = asyncio.create_task(wait_for_disconnect())
    try:
        done, pending = await asyncio.wait(
            [forward_task, client_task],
            return_when=asyncio.FIRST_COMPLETED,
        )
        for task in pending:
            task.cancel()
        for task in done:
            if not task.cancelled() and task.exception() is not None:
                logger.warning("guides.stream_failed error=%s", type(task.exception()).__name__)
    finally:
        subscription.close()
        if websocket.client_state == WebSocketState.CONNECTED:
            await websocket.close()
