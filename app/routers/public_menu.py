import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.config import settings
from app.core.assembler import MenuFilters, MenuNotFoundError, apply_filters, highlights
from app.core.localization import parse_language
from app.core.scheduling import refresh_after_seconds
from app.dependencies import get_content_store, get_now, request_id
from app.schemas.public_menu import HighlightView, PrintMenuView, PublicMenuView, ScheduleResponse
from app.services import menu_service
from app.services.content_store import ContentStore, ContentStoreError

router = APIRouter()
logger = logging.getLogger(__name__)


async def _load(
    request: Request,
    store: ContentStore,
    slug: str,
    now: datetime,
    lang: str | None,
    theme: str | None = None,
) -> PublicMenuView:
    try:
        return await menu_service.load_public_menu(store, slug, now, parse_language(lang), theme)
    except MenuNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu not found")
    except ContentStoreError:
        logger.warning(
            "Menu fetch failed",
            extra={"request_id": request_id(request), "slug": slug},
        )
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Menu temporarily unavailable",
        )


@router.get("/{slug}", response_model=PublicMenuView)
async def get_public_menu(
    slug: str,
    request: Request,
    lang: str | None = None,
    theme: str | None = None,
    vegan: bool = False,
    spicy: bool = False,
    recommended: bool = False,
    gluten_free: bool = False,
    dairy_free: bool = False,
    nut_free: bool = False,
    store: ContentStore = Depends(get_content_store),
    now: datetime = Depends(get_now),
) -> PublicMenuView:
    view = await _load(request, store, slug, now, lang, theme)
    filters = MenuFilters(
        vegan=vegan,
        spicy=spicy,
        recommended=recommended,
        gluten_free=gluten_free,
        dairy_free=dairy_free,
        nut_free=nut_free,
    )
    return apply_filters(view, filters)


@router.get("/{slug}/highlights", response_model=list[HighlightView])
async def get_highlights(
    slug: str,
    request: Request,
    lang: str | None = None,
    store: ContentStore = Depends(get_content_store),
    now: datetime = Depends(get_now),
) -> list[HighlightView]:
    view = await _load(request, store, slug, now, lang)
    return list(highlights(view))


@router.get("/{slug}/print", response_model=PrintMenuView)
async def get_print_menu(
    slug: str,
    request: Request,
    lang: str | None = None,
    theme: str | None = None,
    store: ContentStore = Depends(get_content_store),
    now: datetime = Depends(get_now),
) -> PrintMenuView:
    view = await _load(request, store, slug, now, lang, theme)
    return PrintMenuView(menu=view, highlights=highlights(view, limit=settings.print_highlight_limit))


@router.get("/{slug}/schedule", response_model=ScheduleResponse)
async def get_schedule(
    slug: str,
    request: Request,
    store: ContentStore = Depends(get_content_store),
    now: datetime = Depends(get_now),
) -> ScheduleResponse:
    view = await _load(request, store, slug, now, None)
    return ScheduleResponse(
        as_of=now,
        next_transition_at=view.next_transition_at,
        refresh_after_seconds=refresh_after_seconds(
            view.next_transition_at, now, settings.promotion_refresh_seconds
        ),
    )
