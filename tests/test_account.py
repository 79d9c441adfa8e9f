import uuid

import pytest
from sqlalchemy import func, select

from tripfit.auth.passwords import hash_pw
from tripfit.models.models import (
    Account,
    Outfit,
    OutfitRating,
    PasswordResetToken,
    Profile,
    User,
    WardrobeItem,
)

from tests.conftest import TEST_USER_ID


@pytest.fixture
async def user_with_password(db_sessions):
    async with db_sessions() as session:
        session.add(User(id=TEST_USER_ID, email="pat@example.com", password_hash=hash_pw("old pass")))
        await session.commit()


@pytest.mark.asyncio
async def test_change_password(client, user_with_password):
    missing = await client.put("/v1/user/password", json={"currentPassword": "old pass"})
    assert missing.status_code == 400

    wrong = await client.put("/v1/user/password", json={"currentPassword": "nope", "newPassword": "x"})
    assert wrong.status_code == 401

    ok = await client.put("/v1/user/password", json={"currentPassword": "old pass", "newPassword": "new pass"})
    assert ok.status_code == 200

    login = await client.post("/v1/auth/login", json={"email": "pat@example.com", "password": "new pass"})
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_change_password_without_one_set(client, test_user):
    resp = await client.put("/v1/user/password", json={"currentPassword": "a", "newPassword": "b"})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_delete_account_removes_everything(client, test_user, db_sessions):
    from datetime import datetime, timedelta, timezone

    other_id = uuid.uuid4()
    async with db_sessions() as session:
        session.add(User(id=other_id, email="friend@example.com"))
        mine = Outfit(user_id=TEST_USER_ID, destination="Cairo", weather={}, outfit={})
        theirs = Outfit(user_id=other_id, destination="Lima", weather={}, outfit={})
        session.add_all([mine, theirs])
        await session.flush()
        session.add_all(
            [
                OutfitRating(user_id=TEST_USER_ID, outfit_id=mine.id, rating=5),
                OutfitRating(user_id=other_id, outfit_id=mine.id, rating=3),
                OutfitRating(user_id=other_id, outfit_id=theirs.id, rating=4),
                WardrobeItem(user_id=TEST_USER_ID, name="Hat", type="hat", category="accessory"),
                Account(user_id=TEST_USER_ID, provider="google", provider_user_id="g-1"),
                PasswordResetToken(
                    user_id=TEST_USER_ID,
                    token_hash="abc",
                    expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
                ),
            ]
        )
        await session.commit()

    resp = await client.delete("/v1/user")
    assert resp.status_code == 204

    async with db_sessions() as session:
        for model in (Outfit, WardrobeItem, Profile, Account, PasswordResetToken):
            count = await session.scalar(select(func.count()).select_from(model).where(model.user_id == TEST_USER_ID))
            assert count == 0, model.__name__
        assert await session.get(User, TEST_USER_ID) is None
        ratings = (await session.execute(select(OutfitRating))).scalars().all()
        assert [r.rating for r in ratings] == [4]
        assert await session.get(User, other_id) is not None
