"""
Visibility and schedule rules.

Sections and items are eligible purely by their ``is_visible`` flag.
Promotions are eligible while active and inside their (inclusive) window;
a missing bound leaves that side open. A naive ``now`` is read as UTC. Inverted windows are not
special-cased: the literal comparison makes them never eligible.
"""

from datetime import datetime
from enum import Enum

from app.schemas.records import ItemRecord, PromotionRecord, SectionRecord, as_utc


class PromotionPhase(str, Enum):
    INACTIVE = "inactive"
    PENDING = "pending"
    LIVE = "live"
    EXPIRED = "expired"


def is_promotion_live(promotion: PromotionRecord, now: datetime) -> bool:
    now = as_utc(now)
    if not promotion.is_active:
        return False
    if promotion.starts_at is not None and now < promotion.starts_at:
        return False
    if promotion.ends_at is not None and now > promotion.ends_at:
        return False
    return True


def is_eligible(entity: SectionRecord | ItemRecord | PromotionRecord, now: datetime) -> bool:
    if isinstance(entity, PromotionRecord):
        return is_promotion_live(entity, now)
    return entity.is_visible


def promotion_phase(promotion: PromotionRecord, now: datetime) -> PromotionPhase:
    now = as_utc(now)
    if not promotion.is_active:
        return PromotionPhase.INACTIVE
    if promotion.starts_at is not None and now < promotion.starts_at:
        return PromotionPhase.PENDING
    if promotion.ends_at is not None and now > promotion.ends_at:
        return PromotionPhase.EXPIRED
    return PromotionPhase.LIVE
