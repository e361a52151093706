import uuid

import pytest

from app.services.tracker import (
    MENU_VIEW_KEY,
    PROMO_CLICK_KEY,
    AnalyticsTracker,
    TrackOutcome,
    build_user_agent,
    is_valid_identifier,
)
from app.services.analytics_sink import KafkaAnalyticsSink
from shared.events import MenuViewedEvent, PromoClickedEvent
from tests.fakes import BrokenSession, FakeContentStore

MENU_ID = "a1a1a1a1-b2b2-c3c3-d4d4-e5e5e5e5e5e5"
PROMO_ID = str(uuid.uuid4())


@pytest.fixture
def store():
    return FakeContentStore()


@pytest.fixture
def tracker(store):
    return AnalyticsTracker(store)


async def test_view_is_recorded_once_per_session(tracker, store):
    session: dict = {}
    assert await tracker.track_view(MENU_ID, session, "Mozilla/5.0") is TrackOutcome.RECORDED
    assert await tracker.track_view(MENU_ID, session, "Mozilla/5.0") is TrackOutcome.DUPLICATE
    assert store.menu_views == [(uuid.UUID(MENU_ID), "Mozilla/5.0")]
    assert session == {f"{MENU_VIEW_KEY}{MENU_ID}": "true"}


async def test_new_session_tracks_again(tracker, store):
    await tracker.track_view(MENU_ID, {})
    await tracker.track_view(MENU_ID, {})
    assert len(store.menu_views) == 2


async def test_click_is_recorded_once_per_session(tracker, store):
    session: dict = {}
    await tracker.track_click(PROMO_ID, session)
    await tracker.track_click(PROMO_ID, session)
    assert store.promo_clicks == [uuid.UUID(PROMO_ID)]
    assert session[f"{PROMO_CLICK_KEY}{PROMO_ID}"] == "true"


async def test_identifier_case_does_not_split_the_session_marker(tracker, store):
    session: dict = {}
    assert await tracker.track_view(MENU_ID, session) is TrackOutcome.RECORDED
    assert await tracker.track_view(MENU_ID.upper(), session) is TrackOutcome.DUPLICATE
    assert await tracker.track_click(PROMO_ID.upper(), session) is TrackOutcome.RECORDED
    assert await tracker.track_click(PROMO_ID, session) is TrackOutcome.DUPLICATE
    assert len(store.menu_views) == 1
    assert len(store.promo_clicks) == 1
    assert f"{PROMO_CLICK_KEY}{PROMO_ID}" in session


@pytest.mark.parametrize("bad_id", ["not-a-uuid", "", "a1a1a1a1", MENU_ID + "0", "g" * 8 + MENU_ID[8:], None])
async def test_malformed_ids_never_reach_the_store(tracker, store, bad_id):
    session: dict = {}
    assert await tracker.track_click(bad_id, session) is TrackOutcome.REJECTED
    assert await tracker.track_view(bad_id, session) is TrackOutcome.REJECTED
    assert store.promo_clicks == []
    assert store.menu_views == []
    assert session == {}


async def test_store_failure_is_swallowed_and_not_marked(tracker, store):
    session: dict = {}
    store.fail_writes = True
    assert await tracker.track_view(MENU_ID, session) is TrackOutcome.FAILED
    assert session == {}

    store.fail_writes = False
    assert await tracker.track_view(MENU_ID, session) is TrackOutcome.RECORDED
    assert len(store.menu_views) == 1


async def test_missing_session_store_tracks_every_time(tracker, store):
    await tracker.track_click(PROMO_ID, None)
    await tracker.track_click(PROMO_ID, None)
    assert len(store.promo_clicks) == 2


async def test_broken_session_store_does_not_crash(tracker, store):
    assert await tracker.track_view(MENU_ID, BrokenSession()) is TrackOutcome.RECORDED
    assert await tracker.track_view(MENU_ID, BrokenSession()) is TrackOutcome.RECORDED
    assert len(store.menu_views) == 2


async def test_source_is_part_of_the_dedup_key(tracker, store):
    session: dict = {}
    await tracker.track_view(MENU_ID, session, "UA", source="qr")
    await tracker.track_view(MENU_ID, session, "UA", source="qr")
    await tracker.track_view(MENU_ID, session, "UA")
    assert [ua for _, ua in store.menu_views] == ["UA | source:qr", "UA"]
    assert f"{MENU_VIEW_KEY}{MENU_ID}:qr" in session


def test_user_agent_is_truncated():
    assert len(build_user_agent("x" * 2000)) == 512
    assert len(build_user_agent("x" * 600, "s" * 100)) == 512
    assert build_user_agent(None, "y" * 40) == " | source:" + "y" * 32
    assert build_user_agent("UA", "") == "UA"


def test_identifier_format():
    assert is_valid_identifier(MENU_ID)
    assert is_valid_identifier(MENU_ID.upper())
    assert not is_valid_identifier("-" * 36)
    assert not is_valid_identifier(123)


class RecordingProducer:
    def __init__(self) -> None:
        self.sent: list[tuple[str, bytes, bytes]] = []

    async def send_and_wait(self, topic, key=None, value=None, headers=None) -> None:
        self.sent.append((topic, key, value))


async def test_kafka_sink_publishes_events():
    producer = RecordingProducer()
    tracker = AnalyticsTracker(KafkaAnalyticsSink(producer))

    assert await tracker.track_view(MENU_ID, {}, "UA") is TrackOutcome.RECORDED
    assert await tracker.track_click(PROMO_ID, {}) is TrackOutcome.RECORDED

    (view_topic, view_key, view_payload), (click_topic, _, click_payload) = producer.sent
    assert view_topic == "menu.viewed"
    assert view_key == MENU_ID.encode()
    assert MenuViewedEvent.model_validate_json(view_payload).user_agent == "UA"
    assert click_topic == "promo.clicked"
    assert str(PromoClickedEvent.model_validate_json(click_payload).promotion_id) == PROMO_ID
