import uuid
from datetime import datetime, timezone
from decimal import Decimal

from app.models.menu import MenuStatus
from app.schemas.records import ItemRecord, MenuRecord, PromotionRecord, SectionRecord

NOW = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_menu(**overrides) -> MenuRecord:
    fields = {
        "id": uuid.uuid4(),
        "name": "La Cocina",
        "slug": "la-cocina",
        "status": MenuStatus.PUBLISHED,
        "theme": "editorial",
    }
    fields.update(overrides)
    return MenuRecord(**fields)


def make_section(menu: MenuRecord, **overrides) -> SectionRecord:
    fields = {"id": uuid.uuid4(), "menu_id": menu.id, "name": "Entradas", "sort_order": 0}
    fields.update(overrides)
    return SectionRecord(**fields)


def make_item(section: SectionRecord, **overrides) -> ItemRecord:
    fields = {
        "id": uuid.uuid4(),
        "section_id": section.id,
        "name": "Empanada",
        "price": Decimal("3500"),
        "sort_order": 0,
    }
    fields.update(overrides)
    return ItemRecord(**fields)


def make_promotion(menu: MenuRecord, **overrides) -> PromotionRecord:
    fields = {
        "id": uuid.uuid4(),
        "menu_id": menu.id,
        "title": "2x1",
        "price_text": "$5.000",
        "sort_order": 0,
    }
    fields.update(overrides)
    return PromotionRecord(**fields)
