import logging
import uuid
from collections.abc import Awaitable, Callable

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from app.core.ordering import ReorderError
from app.dependencies import get_content_store, request_id
from app.schemas.reorder import ReorderRequest
from app.services.content_store import ContentStore, ContentStoreError

router = APIRouter()
logger = logging.getLogger(__name__)


async def _reorder(
    request: Request,
    operation: Callable[[uuid.UUID, list[uuid.UUID]], Awaitable[None]],
    parent_id: uuid.UUID,
    body: ReorderRequest,
) -> Response:
    logger.info(
        "Received reorder request",
        extra={"request_id": request_id(request), "parent_id": str(parent_id), "count": len(body.ids)},
    )
    try:
        await operation(parent_id, body.ids)
    except ReorderError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    except ContentStoreError:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Reorder failed")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/menus/{menu_id}/sections/order", status_code=status.HTTP_204_NO_CONTENT)
async def reorder_sections(
    menu_id: uuid.UUID,
    body: ReorderRequest,
    request: Request,
    store: ContentStore = Depends(get_content_store),
) -> Response:
    return await _reorder(request, store.reorder_sections, menu_id, body)


@router.put("/sections/{section_id}/items/order", status_code=status.HTTP_204_NO_CONTENT)
async def reorder_items(
    section_id: uuid.UUID,
    body: ReorderRequest,
    request: Request,
    store: ContentStore = Depends(get_content_store),
) -> Response:
    return await _reorder(request, store.reorder_items, section_id, body)


@router.put("/menus/{menu_id}/promotions/order", status_code=status.HTTP_204_NO_CONTENT)
async def reorder_promotions(
    menu_id: uuid.UUID,
    body: ReorderRequest,
    request: Request,
    store: ContentStore = Depends(get_content_store),
) -> Response:
    return await _reorder(request, store.reorder_promotions, menu_id, body)
