import json
import uuid

import pytest
from sqlalchemy import select

from tripfit.models.models import Outfit, OutfitRating, User

from tests.conftest import TEST_USER_ID

WEATHER = {"temperature": 14, "description": "light rain", "city": "Paris", "country": "FR"}
OUTFIT = {"top": "Breton shirt", "bottom": "Tailored trousers", "shoes": "Ankle boots", "accessories": ["Scarf"]}


def _payload(**overrides):
    body = {
        "destination": "Paris",
        "date": "2026-11-02T09:30:00.000Z",
        "occasion": "dinner",
        "vibe": "chic",
        "weather": WEATHER,
        "outfit": OUTFIT,
        "imageUrl": "/placeholder.svg?height=400&width=300",
        "culturalNotes": "Understated neutrals.",
    }
    body.update(overrides)
    return body


async def _create(client, **overrides) -> dict:
    resp = await client.post("/v1/outfits", json=_payload(**overrides))
    assert resp.status_code == 200, resp.text
    return resp.json()


@pytest.mark.asyncio
async def test_save_and_fetch_outfit(client, test_user):
    created = await _create(client)
    assert created["destination"] == "Paris"
    assert created["date"] == "2026-11-02"
    assert created["isPublic"] is False
    assert created["shareUrl"] is None
    assert created["outfit"] == OUTFIT

    listed = (await client.get("/v1/outfits")).json()
    assert [o["id"] for o in listed] == [created["id"]]

    fetched = await client.get(f"/v1/outfits/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["weather"] == WEATHER


@pytest.mark.asyncio
async def test_stringified_payloads_are_stored_as_objects(client, test_user, db_sessions):
    created = await _create(client, weather=json.dumps(WEATHER), outfit=json.dumps(OUTFIT))
    assert created["weather"] == WEATHER

    async with db_sessions() as session:
        row = await session.get(Outfit, uuid.UUID(created["id"]))
        assert isinstance(row.weather, dict)
        assert isinstance(row.outfit, dict)
        assert row.outfit["shoes"] == "Ankle boots"


@pytest.mark.asyncio
async def test_unparsable_payload_is_rejected(client, test_user):
    resp = await client.post("/v1/outfits", json=_payload(weather="{not json"))
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_legacy_string_rows_read_back_as_objects(client, test_user, db_sessions):
    async with db_sessions() as session:
        outfit = Outfit(user_id=TEST_USER_ID, destination="Lisbon", weather=json.dumps(json.dumps(WEATHER)), outfit="")
        session.add(outfit)
        await session.commit()
        outfit_id = outfit.id

    body = (await client.get(f"/v1/outfits/{outfit_id}")).json()
    assert body["weather"] == WEATHER
    assert body["outfit"] == {}


@pytest.mark.asyncio
async def test_toggle_public_twice_clears_share(client, test_user):
    created = await _create(client)

    on = (await client.patch(f"/v1/outfits/{created['id']}", json={"isPublic": True})).json()
    assert on["isPublic"] is True
    assert on["shareUrl"].startswith("http://test/v1/outfits/shared/")
    share_id = on["shareUrl"].rsplit("/", 1)[1]
    assert len(share_id) == 8

    shared = await client.get(f"/v1/outfits/shared/{share_id}")
    assert shared.status_code == 200
    assert shared.json()["id"] == created["id"]

    off = (await client.patch(f"/v1/outfits/{created['id']}", json={"isPublic": False})).json()
    assert off["isPublic"] is False
    assert off["shareUrl"] is None

    gone = await client.get(f"/v1/outfits/shared/{share_id}")
    assert gone.status_code == 404


@pytest.mark.asyncio
async def test_share_url_uses_configured_base(client, test_user, monkeypatch):
    from tripfit.core.config import settings

    monkeypatch.setattr(settings, "SHARE_BASE_URL", "https://tripfit.example/s/")
    created = await _create(client)
    on = (await client.patch(f"/v1/outfits/{created['id']}", json={"isPublic": True, "name": "Paris nights"})).json()
    assert on["shareUrl"].startswith("https://tripfit.example/s/")
    assert on["name"] == "Paris nights"


@pytest.mark.asyncio
async def test_rating_upsert_and_validation(client, test_user, db_sessions):
    created = await _create(client)
    url = f"/v1/outfits/{created['id']}/rating"

    assert (await client.post(url, json={"rating": 4})).json()["rating"] == 4
    assert (await client.post(url, json={"rating": 2})).json()["rating"] == 2
    for bad in (0, 6, 3.5, "5", True, None):
        resp = await client.post(url, json={"rating": bad})
        assert resp.status_code == 400, bad

    async with db_sessions() as session:
        rows = (await session.execute(select(OutfitRating))).scalars().all()
        assert [r.rating for r in rows] == [2]

    fetched = (await client.get(f"/v1/outfits/{created['id']}")).json()
    assert fetched["rating"] == 2


@pytest.mark.asyncio
async def test_outfits_are_owner_scoped(client, test_user, db_sessions):
    other_id = uuid.uuid4()
    async with db_sessions() as session:
        session.add(User(id=other_id, email="other@example.com"))
        outfit = Outfit(user_id=other_id, destination="Berlin", weather={}, outfit={})
        session.add(outfit)
        await session.commit()
        foreign_id = outfit.id

    assert (await client.get(f"/v1/outfits/{foreign_id}")).status_code == 404
    assert (await client.delete(f"/v1/outfits/{foreign_id}")).status_code == 404
    assert (await client.post(f"/v1/outfits/{foreign_id}/rating", json={"rating": 5})).status_code == 404
    assert (await client.get("/v1/outfits")).json() == []


@pytest.mark.asyncio
async def test_delete_outfit(client, test_user):
    created = await _create(client)
    await client.post(f"/v1/outfits/{created['id']}/rating", json={"rating": 5})
    resp = await client.delete(f"/v1/outfits/{created['id']}")
    assert resp.status_code == 204
    assert (await client.get(f"/v1/outfits/{created['id']}")).status_code == 404
