from collections.abc import MutableMapping
from typing import Any

from fastapi import APIRouter, Depends, Request, Response, status

from app.dependencies import get_session_markers, get_tracker
from app.services.tracker import AnalyticsTracker

router = APIRouter()


# Path ids are plain strings: malformed ids are the tracker's to drop silently,
# so they must not turn into a 422 here.
@router.post("/menus/{menu_id}/view", status_code=status.HTTP_204_NO_CONTENT)
async def track_menu_view(
    menu_id: str,
    request: Request,
    source: str | None = None,
    tracker: AnalyticsTracker = Depends(get_tracker),
    markers: MutableMapping[str, Any] | None = Depends(get_session_markers),
) -> Response:
    await tracker.track_view(menu_id, markers, request.headers.get("user-agent"), source)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/promotions/{promotion_id}/click", status_code=status.HTTP_204_NO_CONTENT)
async def track_promo_click(
    promotion_id: str,
    tracker: AnalyticsTracker = Depends(get_tracker),
    markers: MutableMapping[str, Any] | None = Depends(get_session_markers),
) -> Response:
    await tracker.track_click(promotion_id, markers)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
