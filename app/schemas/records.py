"""
Read-side records produced by the ContentStore.

Each record mirrors the public column projection of its table: the owning
tenant's identity is never part of a record. Records are immutable so the
assembler can treat them as plain values.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator, model_validator

from app.core.targets import PromotionTarget, promotion_target
from app.models.menu import MenuStatus

_RECORD_CONFIG = {"from_attributes": True, "frozen": True, "extra": "ignore"}


def as_utc(value: datetime | None) -> datetime | None:
    # sqlite hands back naive datetimes; everything stored is UTC.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class MenuRecord(BaseModel):
    id: uuid.UUID
    name: str
    name_en: str | None = None
    name_pt: str | None = None
    slug: str
    logo_url: str | None = None
    status: MenuStatus
    theme: str = "editorial"
    cta_label: str | None = None
    cta_url: str | None = None
    pos_url: str | None = None
    delivery_url: str | None = None
    hide_branding: bool = False

    model_config = _RECORD_CONFIG


class SectionRecord(BaseModel):
    id: uuid.UUID
    menu_id: uuid.UUID
    name: str
    name_en: str | None = None
    name_pt: str | None = None
    description: str | None = None
    description_en: str | None = None
    description_pt: str | None = None
    sort_order: int = 0
    is_visible: bool = True

    model_config = _RECORD_CONFIG


class ItemRecord(BaseModel):
    id: uuid.UUID
    section_id: uuid.UUID
    name: str
    name_en: str | None = None
    name_pt: str | None = None
    description: str | None = None
    description_en: str | None = None
    description_pt: str | None = None
    pairing: str | None = None
    pairing_en: str | None = None
    pairing_pt: str | None = None
    price: Decimal = Field(ge=0)
    image_url: str | None = None
    is_visible: bool = True
    is_recommended: bool = False
    is_vegan: bool = False
    is_spicy: bool = False
    is_gluten_free: bool = False
    is_dairy_free: bool = False
    allergens: tuple[str, ...] = ()
    sort_order: int = 0

    model_config = _RECORD_CONFIG

    @field_validator("allergens", mode="before")
    @classmethod
    def _dedupe_allergens(cls, value):
        if value is None:
            return ()
        return tuple(dict.fromkeys(value))


class PromotionRecord(BaseModel):
    id: uuid.UUID
    menu_id: uuid.UUID
    title: str
    title_en: str | None = None
    title_pt: str | None = None
    description: str | None = None
    description_en: str | None = None
    description_pt: str | None = None
    price_text: str
    price_text_en: str | None = None
    price_text_pt: str | None = None
    image_url: str | None = None
    is_active: bool = True
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    linked_section_id: uuid.UUID | None = None
    linked_item_id: uuid.UUID | None = None
    ab_group: str | None = None
    ab_weight: int | None = Field(default=None, ge=1, le=100)
    sort_order: int = 0

    model_config = _RECORD_CONFIG

    @field_validator("starts_at", "ends_at")
    @classmethod
    def _normalise_instant(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)

    @model_validator(mode="after")
    def _single_target(self) -> "PromotionRecord":
        promotion_target(self.linked_section_id, self.linked_item_id)
        return self

    @property
    def target(self) -> PromotionTarget:
        return promotion_target(self.linked_section_id, self.linked_item_id)
