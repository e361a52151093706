"""
Admin analytics read side: rolling daily view buckets and promotion ranking.

Days are UTC calendar days. A window of N days covers today and the N-1
days before it, oldest bucket first.
"""

import uuid
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta, timezone

from app.schemas.analytics import DailyViews, DailyViewsResponse, PromoStats, TopPromotionsResponse
from app.services.content_store import ContentStore


def window_bounds(days: int, now: datetime) -> tuple[datetime, datetime]:
    today = now.astimezone(timezone.utc).date()
    start = datetime.combine(today - timedelta(days=days - 1), time.min, tzinfo=timezone.utc)
    end = datetime.combine(today, time.max, tzinfo=timezone.utc)
    return start, end


def daily_buckets(timestamps: Iterable[datetime], days: int, today: date) -> list[DailyViews]:
    counts = {today - timedelta(days=offset): 0 for offset in range(days - 1, -1, -1)}
    for ts in timestamps:
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        day = ts.astimezone(timezone.utc).date()
        if day in counts:
            counts[day] += 1
    return [DailyViews(date=day, views=views) for day, views in counts.items()]


def rank_promotions(rows: Iterable[tuple[uuid.UUID, str, int]], limit: int) -> list[PromoStats]:
    stats = [PromoStats(promotion_id=pid, title=title, clicks=clicks) for pid, title, clicks in rows]
    # Stable: equal click counts keep the store's sort order.
    stats.sort(key=lambda s: s.clicks, reverse=True)
    return stats[:limit]


async def daily_views(store: ContentStore, menu_id: uuid.UUID, days: int, now: datetime) -> DailyViewsResponse:
    start, end = window_bounds(days, now)
    timestamps = await store.get_view_timestamps(menu_id, start, end)
    buckets = daily_buckets(timestamps, days, end.date())
    return DailyViewsResponse(
        menu_id=menu_id,
        days=days,
        total_views=sum(b.views for b in buckets),
        daily_views=buckets,
    )


async def top_promotions(
    store: ContentStore, menu_id: uuid.UUID, days: int, now: datetime, limit: int = 10
) -> TopPromotionsResponse:
    since, _ = window_bounds(days, now)
    rows = await store.get_promotion_click_counts(menu_id, since)
    return TopPromotionsResponse(menu_id=menu_id, days=days, promotions=rank_promotions(rows, limit))
