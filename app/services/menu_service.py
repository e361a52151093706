import logging
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import select

from app.core.assembler import MenuNotFoundError, assemble
from app.core.localization import Language
from app.database import AsyncSessionLocal
from app.metrics import MENU_ASSEMBLIES
from app.models import Item, Menu, MenuStatus, Promotion, Section
from app.schemas.public_menu import PublicMenuView
from app.services.content_store import ContentStore, ContentStoreError

logger = logging.getLogger(__name__)

DEMO_SLUG = "demo"
# Demo content belongs to no real tenant.
DEMO_OWNER_ID = uuid.UUID(int=0)

_DEMO_MENU = {
    "name": "Casa Demo",
    "name_en": "Demo House",
    "name_pt": "Casa Demo",
    "theme": "editorial",
    "cta_label": "Reservar",
}

_DEMO_SECTIONS = [
    {
        "name": "Entradas",
        "name_en": "Starters",
        "name_pt": "Entradas",
        "description": "Para compartir",
        "description_en": "To share",
        "items": [
            {"name": "Ceviche de reineta", "name_en": "Reineta ceviche", "price": Decimal("8900"),
             "is_recommended": True, "is_gluten_free": True, "allergens": ["seafood"]},
            {"name": "Empanadas de queso", "name_en": "Cheese empanadas", "price": Decimal("5500")},
            {"name": "Hummus de la casa", "name_en": "House hummus", "price": Decimal("6200"),
             "is_vegan": True, "is_dairy_free": True},
        ],
    },
    {
        "name": "Fondos",
        "name_en": "Mains",
        "name_pt": "Pratos principais",
        "items": [
            {"name": "Lomo a lo pobre", "name_en": "Steak with fries and eggs", "price": Decimal("14900"),
             "is_recommended": True, "allergens": ["egg"]},
            {"name": "Curry de garbanzos", "name_en": "Chickpea curry", "price": Decimal("11500"),
             "is_vegan": True, "is_spicy": True, "is_gluten_free": True},
        ],
    },
    {
        "name": "Postres",
        "name_en": "Desserts",
        "name_pt": "Sobremesas",
        "items": [
            {"name": "Leche asada", "name_en": "Baked milk custard", "price": Decimal("4900"),
             "allergens": ["egg"]},
            {"name": "Brownie con nueces", "name_en": "Walnut brownie", "price": Decimal("5200"),
             "allergens": ["nuts", "egg"]},
        ],
    },
]


async def load_public_menu(
    store: ContentStore,
    slug: str,
    now: datetime,
    lang: Language,
    theme: str | None = None,
) -> PublicMenuView:
    """
    Fetch the published menu for ``slug`` and assemble it.

    Raises MenuNotFoundError when the slug does not resolve to a published
    menu and lets ContentStoreError through untouched.
    """
    try:
        menu = await store.get_published_menu_by_slug(slug)
        if menu is None:
            raise MenuNotFoundError(f"No published menu for slug {slug!r}")
        sections = await store.get_visible_sections(menu.id)
        items = await store.get_visible_items([s.id for s in sections])
        promotions = await store.get_active_promotions(menu.id)
    except MenuNotFoundError:
        MENU_ASSEMBLIES.labels("not_found").inc()
        raise
    except ContentStoreError:
        MENU_ASSEMBLIES.labels("store_error").inc()
        raise

    view = assemble(menu, sections, items, promotions, now, lang, theme)
    MENU_ASSEMBLIES.labels("served").inc()
    logger.debug(
        "Assembled public menu",
        extra={
            "slug": slug,
            "lang": lang.value,
            "section_count": len(view.sections),
            "promotion_count": len(view.promotions),
        },
    )
    return view


async def seed_demo_menu() -> None:
    """Create the published demo menu if it does not exist. Called once on startup."""
    async with AsyncSessionLocal() as db:
        result = await db.execute(select(Menu.id).where(Menu.slug == DEMO_SLUG).limit(1))
        if result.scalars().first() is not None:
            return

        menu = Menu(owner_id=DEMO_OWNER_ID, slug=DEMO_SLUG, status=MenuStatus.PUBLISHED, **_DEMO_MENU)
        db.add(menu)
        await db.flush()  # obtain menu.id before inserting sections

        first_recommended: Item | None = None
        for section_order, section_data in enumerate(_DEMO_SECTIONS):
            section_fields = {k: v for k, v in section_data.items() if k != "items"}
            section = Section(menu_id=menu.id, sort_order=section_order, **section_fields)
            db.add(section)
            await db.flush()
            for item_order, item_data in enumerate(section_data["items"]):
                item = Item(section_id=section.id, sort_order=item_order, **item_data)
                db.add(item)
                if first_recommended is None and item.is_recommended:
                    first_recommended = item
        await db.flush()

        now = datetime.now(timezone.utc)
        db.add(
            Promotion(
                menu_id=menu.id,
                title="Menú del día",
                title_en="Lunch special",
                description="Entrada, fondo y postre",
                description_en="Starter, main and dessert",
                price_text="$12.900",
                linked_item_id=first_recommended.id if first_recommended else None,
                sort_order=0,
            )
        )
        db.add(
            Promotion(
                menu_id=menu.id,
                title="Happy hour",
                price_text="2x1",
                starts_at=now,
                ends_at=now + timedelta(days=30),
                sort_order=1,
            )
        )
        await db.commit()
        logger.info("Seeded demo menu", extra={"slug": DEMO_SLUG, "menu_id": str(menu.id)})
