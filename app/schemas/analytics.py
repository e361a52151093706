import uuid
from datetime import date

from pydantic import BaseModel


class DailyViews(BaseModel):
    date: date
    views: int


class DailyViewsResponse(BaseModel):
    menu_id: uuid.UUID
    days: int
    total_views: int
    daily_views: list[DailyViews]


class PromoStats(BaseModel):
    promotion_id: uuid.UUID
    title: str
    clicks: int


class TopPromotionsResponse(BaseModel):
    menu_id: uuid.UUID
    days: int
    promotions: list[PromoStats]
