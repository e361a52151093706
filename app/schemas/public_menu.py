import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from app.core.localization import Language
from app.core.targets import PromotionTarget
from app.core.themes import MenuTheme

_VIEW_CONFIG = {"frozen": True}


class MenuHeaderView(BaseModel):
    id: uuid.UUID
    slug: str
    name: str
    logo_url: str | None
    theme: MenuTheme
    theme_class: str
    cta_label: str | None = None
    cta_url: str | None = None
    pos_url: str | None = None
    delivery_url: str | None = None
    hide_branding: bool = False

    model_config = _VIEW_CONFIG


class ItemView(BaseModel):
    id: uuid.UUID
    name: str
    description: str | None
    pairing: str | None
    price: Decimal
    price_label: str
    image_url: str
    is_recommended: bool
    is_vegan: bool
    is_spicy: bool
    is_gluten_free: bool
    is_dairy_free: bool
    allergens: tuple[str, ...]

    model_config = _VIEW_CONFIG


class SectionView(BaseModel):
    id: uuid.UUID
    name: str
    description: str | None
    items: tuple[ItemView, ...]

    model_config = _VIEW_CONFIG


class PromotionView(BaseModel):
    id: uuid.UUID
    title: str
    description: str | None
    price_text: str
    image_url: str | None
    target: PromotionTarget
    starts_at: datetime | None
    ends_at: datetime | None
    ab_group: str | None
    ab_weight: int | None

    model_config = _VIEW_CONFIG


class PublicMenuView(BaseModel):
    menu: MenuHeaderView
    lang: Language
    as_of: datetime
    next_transition_at: datetime | None
    sections: tuple[SectionView, ...]
    promotions: tuple[PromotionView, ...]

    model_config = _VIEW_CONFIG


class HighlightView(BaseModel):
    section_id: uuid.UUID
    section_name: str
    item: ItemView

    model_config = _VIEW_CONFIG


class PrintMenuView(BaseModel):
    menu: PublicMenuView
    highlights: tuple[HighlightView, ...]

    model_config = _VIEW_CONFIG


class ScheduleResponse(BaseModel):
    as_of: datetime
    next_transition_at: datetime | None
    refresh_after_seconds: int
