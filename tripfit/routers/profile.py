import uuid
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tripfit.auth.deps import get_current_user_id
from tripfit.core.db import get_session
from tripfit.models.models import Profile, User
from tripfit.schemas.profile import AvatarIn, ProfileOut, ProfileUpdateIn, ProfileUserOut

router = APIRouter(prefix="/profile", tags=["profile"])

# ProfileUpdateIn fields that live in Profile.preferences, keyed by their wire name
PREFERENCE_FIELDS = {
    "height": "height",
    "weight": "weight",
    "style": "style",
    "favorite_colors": "favoriteColors",
    "favorite_brands": "favoriteBrands",
    "size_preferences": "sizePreferences",
    "seasonal_preferences": "seasonalPreferences",
}


def _iso(dt: Optional[datetime]) -> Optional[str]:
    return dt.isoformat() if dt else None


def _to_out(profile: Profile, user: Optional[User]) -> ProfileOut:
    return ProfileOut(
        id=str(profile.id),
        user_id=str(profile.user_id),
        gender=profile.gender,
        body_type=profile.body_type,
        preferences=profile.preferences or {},
        user=ProfileUserOut(email=user.email, name=user.name, image=user.image) if user else None,
        created_at=_iso(profile.created_at),
        updated_at=_iso(profile.updated_at),
    )


async def _load_user(session: AsyncSession, user_id: uuid.UUID) -> User:
    user = await session.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="user_not_found")
    return user


async def _get_or_create_profile(session: AsyncSession, user_id: uuid.UUID) -> Profile:
    res = await session.execute(select(Profile).where(Profile.user_id == user_id))
    profile = res.scalar_one_or_none()
    if profile:
        return profile
    profile = Profile(id=uuid.uuid4(), user_id=user_id, preferences={})
    session.add(profile)
    await session.commit()
    await session.refresh(profile)
    return profile


@router.get("", response_model=ProfileOut)
async def get_profile(
    session: AsyncSession = Depends(get_session),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    user = await _load_user(session, user_id)
    profile = await _get_or_create_profile(session, user_id)
    return _to_out(profile, user)


@router.put("", response_model=ProfileOut)
async def update_profile(
    body: ProfileUpdateIn,
    session: AsyncSession = Depends(get_session),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    user = await _load_user(session, user_id)
    profile = await _get_or_create_profile(session, user_id)

    if body.name is not None:
        user.name = body.name
    if body.gender is not None:
        profile.gender = body.gender
    if body.body_type is not None:
        profile.body_type = body.body_type

    prefs = dict(profile.preferences or {})
    if body.preferences:
        prefs.update(body.preferences)
    for attr, key in PREFERENCE_FIELDS.items():
        value = getattr(body, attr)
        if value is not None:
            prefs[key] = value
    # reassign so the JSON column is flagged dirty
    profile.preferences = prefs

    await session.commit()
    await session.refresh(profile)
    await session.refresh(user)
    return _to_out(profile, user)


@router.patch("/avatar", response_model=ProfileOut)
async def update_avatar(
    body: AvatarIn,
    session: AsyncSession = Depends(get_session),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    if not body.image_url:
        raise HTTPException(status_code=400, detail="image_url_required")
    user = await _load_user(session, user_id)
    user.image = body.image_url
    await session.commit()
    await session.refresh(user)
    profile = await _get_or_create_profile(session, user_id)
    return _to_out(profile, user)
