import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.dependencies import get_content_store, get_now
from app.schemas.analytics import DailyViewsResponse, TopPromotionsResponse
from app.services import reports
from app.services.content_store import ContentStore, ContentStoreError

router = APIRouter()


@router.get("/menus/{menu_id}/daily-views", response_model=DailyViewsResponse)
async def get_daily_views(
    menu_id: uuid.UUID,
    days: int = Query(14, ge=1, le=90),
    store: ContentStore = Depends(get_content_store),
    now: datetime = Depends(get_now),
) -> DailyViewsResponse:
    try:
        return await reports.daily_views(store, menu_id, days, now)
    except ContentStoreError:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Analytics unavailable")


@router.get("/menus/{menu_id}/top-promotions", response_model=TopPromotionsResponse)
async def get_top_promotions(
    menu_id: uuid.UUID,
    days: int = Query(30, ge=1, le=90),
    limit: int = Query(10, ge=1, le=100),
    store: ContentStore = Depends(get_content_store),
    now: datetime = Depends(get_now),
) -> TopPromotionsResponse:
    try:
        return await reports.top_promotions(store, menu_id, days, now, limit)
    except ContentStoreError:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Analytics unavailable")
