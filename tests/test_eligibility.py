from datetime import datetime, timedelta, timezone

import pytest

from app.core.eligibility import PromotionPhase, is_eligible, promotion_phase
from tests.factories import NOW, make_item, make_menu, make_promotion, make_section

MENU = make_menu()
HOUR = timedelta(hours=1)


def test_sections_and_items_follow_visibility_flag():
    section = make_section(MENU)
    hidden = make_section(MENU, is_visible=False)
    assert is_eligible(section, NOW)
    assert not is_eligible(hidden, NOW)
    assert not is_eligible(make_item(section, is_visible=False), NOW)
    assert is_eligible(make_item(hidden), NOW)


@pytest.mark.parametrize(
    "starts_at, ends_at, expected",
    [
        (None, None, True),
        (NOW - HOUR, None, True),
        (NOW + HOUR, None, False),
        (None, NOW + HOUR, True),
        (None, NOW - HOUR, False),
        (NOW, NOW, True),  # both bounds inclusive
        (NOW - HOUR, NOW + HOUR, True),
        (NOW + HOUR, NOW - HOUR, False),  # inverted window
    ],
)
def test_promotion_window(starts_at, ends_at, expected):
    promotion = make_promotion(MENU, starts_at=starts_at, ends_at=ends_at)
    assert is_eligible(promotion, NOW) is expected


def test_inactive_promotion_is_never_eligible():
    promotion = make_promotion(MENU, is_active=False)
    assert not is_eligible(promotion, NOW)
    assert promotion_phase(promotion, NOW) is PromotionPhase.INACTIVE


def test_expired_open_start_promotion():
    promotion = make_promotion(MENU, ends_at=datetime(2020, 1, 1, tzinfo=timezone.utc))
    assert not is_eligible(promotion, datetime(2025, 1, 1, tzinfo=timezone.utc))


def test_reevaluation_walks_pending_live_expired():
    promotion = make_promotion(MENU, starts_at=NOW + HOUR, ends_at=NOW + 2 * HOUR)
    assert promotion_phase(promotion, NOW) is PromotionPhase.PENDING
    assert promotion_phase(promotion, NOW + HOUR) is PromotionPhase.LIVE
    assert promotion_phase(promotion, NOW + 2 * HOUR) is PromotionPhase.LIVE
    assert promotion_phase(promotion, NOW + 3 * HOUR) is PromotionPhase.EXPIRED


def test_naive_instants_are_read_as_utc():
    promotion = make_promotion(MENU, starts_at=datetime(2025, 1, 1, 13, 0))
    assert promotion.starts_at.tzinfo is timezone.utc
    assert not is_eligible(promotion, NOW)


def test_naive_now_is_read_as_utc():
    promotion = make_promotion(MENU, starts_at=NOW - HOUR, ends_at=NOW + HOUR)
    naive_now = NOW.replace(tzinfo=None)
    assert is_eligible(promotion, naive_now)
    assert promotion_phase(promotion, naive_now + 2 * HOUR) is PromotionPhase.EXPIRED
