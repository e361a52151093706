"""
Public menu assembly.

Turns the raw records of one menu into the read-only view a visitor sees at
a given instant and in a given language. Assembly is a pure function of its
arguments: same records, same ``now``, same ``lang`` give an equal view.
"""

import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime

from app.core.eligibility import is_eligible
from app.core.imagery import fallback_image, format_price, pairing_suggestion
from app.core.localization import Language, localize
from app.core.scheduling import next_transition_instant
from app.core.themes import theme_config
from app.models.menu import MenuStatus
from app.schemas.public_menu import (
    HighlightView,
    ItemView,
    MenuHeaderView,
    PromotionView,
    PublicMenuView,
    SectionView,
)
from app.schemas.records import ItemRecord, MenuRecord, PromotionRecord, SectionRecord, as_utc


class MenuNotFoundError(Exception):
    """The menu does not exist or is not published."""


@dataclass(frozen=True)
class MenuFilters:
    vegan: bool = False
    spicy: bool = False
    recommended: bool = False
    gluten_free: bool = False
    dairy_free: bool = False
    nut_free: bool = False

    @property
    def active(self) -> bool:
        return any(
            (self.vegan, self.spicy, self.recommended, self.gluten_free, self.dairy_free, self.nut_free)
        )

    def matches(self, item: ItemView) -> bool:
        if self.vegan and not item.is_vegan:
            return False
        if self.spicy and not item.is_spicy:
            return False
        if self.recommended and not item.is_recommended:
            return False
        if self.gluten_free and not item.is_gluten_free:
            return False
        if self.dairy_free and not item.is_dairy_free:
            return False
        if self.nut_free and "nuts" in item.allergens:
            return False
        return True


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _by_sort_order(records: Iterable, now: datetime) -> list:
    # sorted() is stable: equal sort_order keeps input order.
    return sorted((r for r in records if is_eligible(r, now)), key=lambda r: r.sort_order)


def _item_view(item: ItemRecord, lang: Language) -> ItemView:
    name = localize(item, "name", lang)
    pairing = localize(item, "pairing", lang)
    if not pairing and item.is_recommended:
        pairing = pairing_suggestion(item.name)
    return ItemView(
        id=item.id,
        name=name,
        description=localize(item, "description", lang),
        pairing=pairing or None,
        price=item.price,
        price_label=format_price(item.price),
        image_url=item.image_url or fallback_image(item.name),
        is_recommended=item.is_recommended,
        is_vegan=item.is_vegan,
        is_spicy=item.is_spicy,
        is_gluten_free=item.is_gluten_free,
        is_dairy_free=item.is_dairy_free,
        allergens=item.allergens,
    )


def _promotion_view(promotion: PromotionRecord, lang: Language) -> PromotionView:
    return PromotionView(
        id=promotion.id,
        title=localize(promotion, "title", lang),
        description=localize(promotion, "description", lang),
        price_text=localize(promotion, "price_text", lang),
        image_url=promotion.image_url,
        target=promotion.target,
        starts_at=promotion.starts_at,
        ends_at=promotion.ends_at,
        ab_group=promotion.ab_group,
        ab_weight=promotion.ab_weight,
    )


def _header_view(menu: MenuRecord, lang: Language, theme: str | None) -> MenuHeaderView:
    config = theme_config(theme or menu.theme)
    return MenuHeaderView(
        id=menu.id,
        slug=menu.slug,
        name=localize(menu, "name", lang),
        logo_url=menu.logo_url,
        theme=config.id,
        theme_class=config.class_name,
        cta_label=menu.cta_label,
        cta_url=menu.cta_url,
        pos_url=menu.pos_url,
        delivery_url=menu.delivery_url,
        hide_branding=menu.hide_branding,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def assemble(
    menu: MenuRecord | None,
    sections: Sequence[SectionRecord],
    items: Sequence[ItemRecord],
    promotions: Sequence[PromotionRecord],
    now: datetime,
    lang: Language,
    theme: str | None = None,
) -> PublicMenuView:
    if menu is None or menu.status != MenuStatus.PUBLISHED:
        raise MenuNotFoundError("Menu not found")
    now = as_utc(now)

    items_by_section: dict[uuid.UUID, list[ItemRecord]] = {}
    for item in items:
        items_by_section.setdefault(item.section_id, []).append(item)

    section_views: list[SectionView] = []
    for section in _by_sort_order((s for s in sections if s.menu_id == menu.id), now):
        item_views = tuple(
            _item_view(item, lang) for item in _by_sort_order(items_by_section.get(section.id, ()), now)
        )
        if not item_views:
            continue
        section_views.append(
            SectionView(
                id=section.id,
                name=localize(section, "name", lang),
                description=localize(section, "description", lang),
                items=item_views,
            )
        )

    menu_promotions = [p for p in promotions if p.menu_id == menu.id]
    promotion_views = tuple(_promotion_view(p, lang) for p in _by_sort_order(menu_promotions, now))

    return PublicMenuView(
        menu=_header_view(menu, lang, theme),
        lang=lang,
        as_of=now,
        next_transition_at=next_transition_instant(menu_promotions, now),
        sections=tuple(section_views),
        promotions=promotion_views,
    )


def highlights(view: PublicMenuView, limit: int | None = None) -> tuple[HighlightView, ...]:
    """Recommended items in section-major, item-minor encounter order."""
    picked = [
        HighlightView(section_id=section.id, section_name=section.name, item=item)
        for section in view.sections
        for item in section.items
        if item.is_recommended
    ]
    if limit is not None:
        picked = picked[:limit]
    return tuple(picked)


def apply_filters(view: PublicMenuView, filters: MenuFilters) -> PublicMenuView:
    if not filters.active:
        return view
    sections = []
    for section in view.sections:
        kept = tuple(item for item in section.items if filters.matches(item))
        if kept:
            sections.append(section.model_copy(update={"items": kept}))
    return view.model_copy(update={"sections": tuple(sections)})
