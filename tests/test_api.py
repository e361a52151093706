import uuid
from datetime import timedelta

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.middleware.sessions import SessionMiddleware

from app.dependencies import get_content_store, get_now
from app.middleware.metrics import normalise_path
from app.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware
from app.models.menu import MenuStatus
from app.routers import admin, public_menu, tracking
from tests.factories import NOW, make_item, make_menu, make_promotion, make_section
from tests.fakes import FakeContentStore


@pytest.fixture
def store():
    menu = make_menu(slug="la-cocina", name="La Cocina", name_en="The Kitchen")
    draft = make_menu(slug="borrador", status=MenuStatus.DRAFT)
    starters = make_section(menu, name="Entradas", name_en="Starters", sort_order=0)
    mains = make_section(menu, name="Fondos", sort_order=1)
    hidden = make_section(menu, name="Oculta", is_visible=False)
    return FakeContentStore(
        menus=[menu, draft],
        sections=[starters, mains, hidden],
        items=[
            make_item(starters, name="Ceviche", is_recommended=True, is_gluten_free=True),
            make_item(mains, name="Lomo", is_recommended=True, sort_order=0),
            make_item(mains, name="Curry", is_vegan=True, sort_order=1),
            make_item(hidden, name="Secreto"),
        ],
        promotions=[
            make_promotion(menu, title="Siempre", linked_section_id=mains.id),
            make_promotion(menu, title="Pronto", starts_at=NOW + timedelta(seconds=8), sort_order=1),
        ],
    )


@pytest.fixture
def client(store):
    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(SessionMiddleware, secret_key="test", max_age=None)
    app.include_router(public_menu.router, prefix="/menus")
    app.include_router(tracking.router, prefix="/track")
    app.include_router(admin.router, prefix="/admin")
    app.dependency_overrides[get_content_store] = lambda: store
    app.dependency_overrides[get_now] = lambda: NOW
    with TestClient(app) as test_client:
        yield test_client


def test_public_menu(client):
    response = client.get("/menus/la-cocina", params={"lang": "en"})
    assert response.status_code == 200
    body = response.json()
    assert body["menu"]["name"] == "The Kitchen"
    assert body["lang"] == "en"
    assert [s["name"] for s in body["sections"]] == ["Starters", "Fondos"]
    assert [p["title"] for p in body["promotions"]] == ["Siempre"]
    assert body["promotions"][0]["target"]["kind"] == "section"
    assert "owner_id" not in body["menu"]
    assert response.headers[REQUEST_ID_HEADER]


def test_unknown_language_falls_back_to_spanish(client):
    body = client.get("/menus/la-cocina", params={"lang": "xx"}).json()
    assert body["lang"] == "es"
    assert body["sections"][0]["name"] == "Entradas"


def test_filters_and_theme_override(client):
    body = client.get("/menus/la-cocina", params={"vegan": "true", "theme": "modern"}).json()
    assert body["menu"]["theme"] == "modern"
    assert [i["name"] for s in body["sections"] for i in s["items"]] == ["Curry"]


def test_missing_and_draft_menus_are_404(client):
    assert client.get("/menus/nope").status_code == 404
    assert client.get("/menus/borrador").status_code == 404


def test_store_failure_is_503_not_404(client, store):
    store.fail_reads = True
    response = client.get("/menus/la-cocina")
    assert response.status_code == 503


def test_highlights_and_print(client):
    highlights = client.get("/menus/la-cocina/highlights").json()
    assert [h["item"]["name"] for h in highlights] == ["Ceviche", "Lomo"]

    printed = client.get("/menus/la-cocina/print").json()
    assert len(printed["highlights"]) == 2
    assert printed["menu"]["menu"]["slug"] == "la-cocina"


def test_schedule_points_at_next_promotion_boundary(client):
    body = client.get("/menus/la-cocina/schedule").json()
    assert body["refresh_after_seconds"] == 8
    assert body["next_transition_at"] is not None


def test_view_tracking_is_deduplicated_by_session_cookie(client, store):
    menu_id = store.menus[0].id
    first = client.post(f"/track/menus/{menu_id}/view", headers={"User-Agent": "pytest"})
    second = client.post(f"/track/menus/{menu_id}/view", headers={"User-Agent": "pytest"})
    assert first.status_code == second.status_code == 204
    assert store.menu_views == [(menu_id, "pytest")]


def test_click_tracking_rejects_malformed_ids_silently(client, store):
    assert client.post("/track/promotions/not-a-uuid/click").status_code == 204
    assert store.promo_clicks == []


def test_click_tracking_survives_store_failure(client, store):
    store.fail_writes = True
    promotion_id = store.promotions[0].id
    assert client.post(f"/track/promotions/{promotion_id}/click").status_code == 204
    assert store.promo_clicks == []


def test_reorder_sections(client, store):
    menu_id = store.menus[0].id
    ids = [s.id for s in store.sections if s.menu_id == menu_id]
    new_order = list(reversed(ids))

    response = client.put(f"/admin/menus/{menu_id}/sections/order", json={"ids": [str(i) for i in new_order]})
    assert response.status_code == 204
    positions = {s.id: s.sort_order for s in store.sections}
    assert [positions[i] for i in new_order] == [0, 1, 2]


def test_reorder_with_foreign_id_is_422(client, store):
    menu_id = store.menus[0].id
    response = client.put(
        f"/admin/menus/{menu_id}/sections/order", json={"ids": [str(uuid.uuid4())]}
    )
    assert response.status_code == 422


def test_reorder_items_changes_public_order(client, store):
    mains = store.sections[1]
    lomo, curry = [i.id for i in store.items if i.section_id == mains.id]

    response = client.put(f"/admin/sections/{mains.id}/items/order", json={"ids": [str(curry), str(lomo)]})
    assert response.status_code == 204

    body = client.get("/menus/la-cocina").json()
    assert [i["name"] for i in body["sections"][1]["items"]] == ["Curry", "Lomo"]


def test_reorder_items_with_item_from_another_section_is_422(client, store):
    starters = store.sections[0]
    foreign = [i.id for i in store.items if i.section_id != starters.id]
    response = client.put(
        f"/admin/sections/{starters.id}/items/order", json={"ids": [str(i) for i in foreign]}
    )
    assert response.status_code == 422


def test_reorder_promotions(client, store):
    menu_id = store.menus[0].id
    ids = [p.id for p in store.promotions]

    response = client.put(
        f"/admin/menus/{menu_id}/promotions/order", json={"ids": [str(i) for i in reversed(ids)]}
    )
    assert response.status_code == 204
    assert {p.title: p.sort_order for p in store.promotions} == {"Pronto": 0, "Siempre": 1}


def test_reorder_store_failure_is_503(client, store):
    store.fail_writes = True
    menu_id = store.menus[0].id
    ids = [str(p.id) for p in store.promotions]
    response = client.put(f"/admin/menus/{menu_id}/promotions/order", json={"ids": ids})
    assert response.status_code == 503


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/menus/la-cocina", "/menus/{slug}"),
        ("/menus/la-cocina/print", "/menus/{slug}/print"),
        ("/track/menus/a1a1a1a1-b2b2-c3c3-d4d4-e5e5e5e5e5e5/view", "/track/menus/{id}/view"),
    ],
)
def test_metrics_path_normalisation(path, expected):
    assert normalise_path(path) == expected
