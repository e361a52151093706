"""
SQLAlchemy-backed content store.

Public reads select an explicit column whitelist per table so the owning
tenant's identity never leaves the database on the visitor path. Read
failures are re-raised as ContentStoreError and never retried here.
"""

import logging
import uuid
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.ordering import plan_reorder
from app.models import Item, Menu, MenuStatus, MenuView, PromoClick, Promotion, Section
from app.schemas.records import ItemRecord, MenuRecord, PromotionRecord, SectionRecord

logger = logging.getLogger(__name__)

PUBLIC_MENU_COLUMNS = (
    "id", "name", "name_en", "name_pt", "slug", "logo_url", "status", "theme",
    "cta_label", "cta_url", "pos_url", "delivery_url", "hide_branding",
)
PUBLIC_SECTION_COLUMNS = (
    "id", "menu_id", "name", "name_en", "name_pt",
    "description", "description_en", "description_pt", "sort_order", "is_visible",
)
PUBLIC_ITEM_COLUMNS = (
    "id", "section_id", "name", "name_en", "name_pt",
    "description", "description_en", "description_pt",
    "pairing", "pairing_en", "pairing_pt", "price", "image_url", "sort_order",
    "is_visible", "is_recommended", "is_vegan", "is_spicy", "is_gluten_free",
    "is_dairy_free", "allergens",
)
PUBLIC_PROMOTION_COLUMNS = (
    "id", "menu_id", "title", "title_en", "title_pt",
    "description", "description_en", "description_pt",
    "price_text", "price_text_en", "price_text_pt", "image_url", "is_active",
    "starts_at", "ends_at", "linked_section_id", "linked_item_id",
    "ab_group", "ab_weight", "sort_order",
)


class ContentStoreError(Exception):
    """The backing store could not be read or written."""


def _project(model, columns: Sequence[str]):
    return select(*(getattr(model, column) for column in columns))


class ContentStore:
    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def _rows(self, stmt) -> list[dict]:
        try:
            result = await self._db.execute(stmt)
        except SQLAlchemyError as exc:
            logger.error("Content store read failed", extra={"error": str(exc)})
            raise ContentStoreError(str(exc)) from exc
        return [dict(row._mapping) for row in result]

    async def _commit(self, *, add: Sequence = (), statements: Sequence = ()) -> None:
        try:
            self._db.add_all(add)
            for stmt in statements:
                await self._db.execute(stmt)
            await self._db.commit()
        except SQLAlchemyError as exc:
            await self._db.rollback()
            logger.error("Content store write failed", extra={"error": str(exc)})
            raise ContentStoreError(str(exc)) from exc

    # -----------------------------------------------------------------------
    # Public reads
    # -----------------------------------------------------------------------

    async def get_published_menu_by_slug(self, slug: str) -> MenuRecord | None:
        rows = await self._rows(
            _project(Menu, PUBLIC_MENU_COLUMNS)
            .where(Menu.slug == slug, Menu.status == MenuStatus.PUBLISHED)
            .limit(1)
        )
        return MenuRecord.model_validate(rows[0]) if rows else None

    async def get_visible_sections(self, menu_id: uuid.UUID) -> list[SectionRecord]:
        rows = await self._rows(
            _project(Section, PUBLIC_SECTION_COLUMNS)
            .where(Section.menu_id == menu_id, Section.is_visible.is_(True))
            .order_by(Section.sort_order)
        )
        return [SectionRecord.model_validate(row) for row in rows]

    async def get_visible_items(self, section_ids: Sequence[uuid.UUID]) -> list[ItemRecord]:
        if not section_ids:
            return []
        rows = await self._rows(
            _project(Item, PUBLIC_ITEM_COLUMNS)
            .where(Item.section_id.in_(section_ids), Item.is_visible.is_(True))
            .order_by(Item.sort_order)
        )
        return [ItemRecord.model_validate(row) for row in rows]

    async def get_active_promotions(self, menu_id: uuid.UUID) -> list[PromotionRecord]:
        rows = await self._rows(
            _project(Promotion, PUBLIC_PROMOTION_COLUMNS)
            .where(Promotion.menu_id == menu_id, Promotion.is_active.is_(True))
            .order_by(Promotion.sort_order)
        )
        return [PromotionRecord.model_validate(row) for row in rows]

    # -----------------------------------------------------------------------
    # Analytics writes
    # -----------------------------------------------------------------------

    async def insert_menu_view(self, menu_id: uuid.UUID, user_agent: str | None) -> None:
        await self._commit(add=[MenuView(menu_id=menu_id, user_agent=user_agent)])

    async def insert_promo_click(self, promotion_id: uuid.UUID) -> None:
        await self._commit(add=[PromoClick(promotion_id=promotion_id)])

    # -----------------------------------------------------------------------
    # Analytics reads
    # -----------------------------------------------------------------------

    async def get_view_timestamps(
        self, menu_id: uuid.UUID, start: datetime, end: datetime
    ) -> list[datetime]:
        rows = await self._rows(
            select(MenuView.viewed_at).where(
                MenuView.menu_id == menu_id,
                MenuView.viewed_at >= start,
                MenuView.viewed_at <= end,
            )
        )
        return [row["viewed_at"] for row in rows]

    async def get_promotion_click_counts(
        self, menu_id: uuid.UUID, since: datetime
    ) -> list[tuple[uuid.UUID, str, int]]:
        """(promotion_id, title, clicks) for every promotion of the menu, in sort order."""
        clicks = (
            select(PromoClick.promotion_id, func.count(PromoClick.id).label("clicks"))
            .where(PromoClick.clicked_at >= since)
            .group_by(PromoClick.promotion_id)
            .subquery()
        )
        rows = await self._rows(
            select(Promotion.id, Promotion.title, func.coalesce(clicks.c.clicks, 0).label("clicks"))
            .outerjoin(clicks, clicks.c.promotion_id == Promotion.id)
            .where(Promotion.menu_id == menu_id)
            .order_by(Promotion.sort_order, Promotion.created_at)
        )
        return [(row["id"], row["title"], int(row["clicks"])) for row in rows]

    # -----------------------------------------------------------------------
    # Reorder command
    # -----------------------------------------------------------------------

    async def _reorder(self, model, parent_column, parent_id: uuid.UUID, ordered_ids: Sequence[uuid.UUID]) -> None:
        rows = await self._rows(select(model.id).where(parent_column == parent_id))
        positions = plan_reorder((row["id"] for row in rows), ordered_ids)
        await self._commit(
            statements=[
                update(model).where(model.id == entity_id).values(sort_order=position)
                for entity_id, position in positions.items()
            ]
        )
        logger.info(
            "Reordered %s",
            model.__tablename__,
            extra={"parent_id": str(parent_id), "count": len(positions)},
        )

    async def reorder_sections(self, menu_id: uuid.UUID, ordered_ids: Sequence[uuid.UUID]) -> None:
        await self._reorder(Section, Section.menu_id, menu_id, ordered_ids)

    async def reorder_items(self, section_id: uuid.UUID, ordered_ids: Sequence[uuid.UUID]) -> None:
        await self._reorder(Item, Item.section_id, section_id, ordered_ids)

    async def reorder_promotions(self, menu_id: uuid.UUID, ordered_ids: Sequence[uuid.UUID]) -> None:
        await self._reorder(Promotion, Promotion.menu_id, menu_id, ordered_ids)
