from datetime import timedelta

from app.core.eligibility import is_eligible
from app.core.scheduling import RESOLUTION, next_transition_instant, refresh_after_seconds
from tests.factories import NOW, make_menu, make_promotion

MENU = make_menu()


def test_no_bounded_promotions_means_no_transition():
    assert next_transition_instant([make_promotion(MENU)], NOW) is None
    assert next_transition_instant([], NOW) is None


def test_picks_earliest_future_boundary():
    starts_soon = make_promotion(MENU, starts_at=NOW + timedelta(minutes=5))
    ends_later = make_promotion(MENU, ends_at=NOW + timedelta(minutes=30))
    assert next_transition_instant([ends_later, starts_soon], NOW) == NOW + timedelta(minutes=5)


def test_end_boundary_lands_just_after_inclusive_end():
    promotion = make_promotion(MENU, ends_at=NOW + timedelta(minutes=1))
    wake_at = next_transition_instant([promotion], NOW)
    assert wake_at == NOW + timedelta(minutes=1) + RESOLUTION
    assert is_eligible(promotion, wake_at - RESOLUTION)
    assert not is_eligible(promotion, wake_at)


def test_past_boundaries_and_inactive_promotions_are_ignored():
    expired = make_promotion(MENU, ends_at=NOW - timedelta(days=1))
    started = make_promotion(MENU, starts_at=NOW - timedelta(days=1))
    inactive = make_promotion(MENU, is_active=False, starts_at=NOW + timedelta(minutes=1))
    assert next_transition_instant([expired, started, inactive], NOW) is None


def test_refresh_after_is_capped_by_polling_interval():
    assert refresh_after_seconds(None, NOW, 20) == 20
    assert refresh_after_seconds(NOW + timedelta(hours=1), NOW, 20) == 20
    assert refresh_after_seconds(NOW + timedelta(seconds=5), NOW, 20) == 5
    assert refresh_after_seconds(NOW + timedelta(seconds=4, milliseconds=1), NOW, 20) == 5
    assert refresh_after_seconds(NOW + RESOLUTION, NOW, 20) == 1


def test_naive_now_is_read_as_utc():
    ending = make_promotion(MENU, ends_at=NOW + timedelta(seconds=10))
    naive_now = NOW.replace(tzinfo=None)
    assert next_transition_instant([ending], naive_now) == ending.ends_at + RESOLUTION
    assert refresh_after_seconds(ending.ends_at + RESOLUTION, naive_now, 20) == 11
