"""
Wake-up planning for scheduled promotions.

Instead of re-evaluating every promotion on a fixed tick, a caller asks for
the next instant at which any promotion changes eligibility and sleeps until
then. The fixed interval stays available as an upper bound.
"""

from collections.abc import Iterable
from datetime import datetime, timedelta

from app.schemas.records import PromotionRecord, as_utc

# ends_at is inclusive, so a promotion drops out one tick after it.
RESOLUTION = timedelta(microseconds=1)


def next_transition_instant(promotions: Iterable[PromotionRecord], now: datetime) -> datetime | None:
    """Earliest instant strictly after ``now`` at which an active promotion flips state."""
    now = as_utc(now)
    candidates: list[datetime] = []
    for promotion in promotions:
        if not promotion.is_active:
            continue
        if promotion.starts_at is not None and promotion.starts_at > now:
            candidates.append(promotion.starts_at)
        if promotion.ends_at is not None:
            expiry = promotion.ends_at + RESOLUTION
            if expiry > now:
                candidates.append(expiry)
    return min(candidates, default=None)


def refresh_after_seconds(
    next_transition: datetime | None,
    now: datetime,
    max_interval_seconds: int,
) -> int:
    """Seconds a client should wait before asking again, capped by the polling interval."""
    now = as_utc(now)
    if next_transition is None:
        return max_interval_seconds
    remaining = (next_transition - now).total_seconds()
    # Round up so the client lands after the boundary, never before it.
    whole = int(remaining) if remaining == int(remaining) else int(remaining) + 1
    return max(1, min(max_interval_seconds, whole))
