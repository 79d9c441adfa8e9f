from __future__ import annotations

import secrets
import string
import uuid
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tripfit.auth.deps import get_current_user_id
from tripfit.core.config import settings
from tripfit.core.db import get_session
from tripfit.models.models import Outfit, OutfitRating
from tripfit.schemas.outfits import OutfitCreate, OutfitOut, OutfitUpdate, RatingIn, RatingOut
from tripfit.services.payloads import coerce_object

router = APIRouter(prefix="/outfits", tags=["outfits"])

SHARE_CODE_ATTEMPTS = 5


def _iso(dt: Optional[datetime]) -> Optional[str]:
    return dt.isoformat() if dt else None


def _generate_share_code(length: int = 8) -> str:
    alphabet = string.ascii_letters + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def _share_url(request: Request, code: Optional[str]) -> Optional[str]:
    if not code:
        return None
    if settings.SHARE_BASE_URL:
        return f"{settings.SHARE_BASE_URL.rstrip('/')}/{code}"
    base = str(request.base_url).rstrip("/")
    return f"{base}{settings.API_PREFIX}/outfits/shared/{code}"


def _to_out(request: Request, o: Outfit, rating: Optional[int] = None) -> OutfitOut:
    return OutfitOut(
        id=str(o.id),
        name=o.name,
        destination=o.destination,
        date=o.trip_date.isoformat() if o.trip_date else None,
        occasion=o.occasion,
        vibe=o.vibe,
        weather=coerce_object(o.weather),
        outfit=coerce_object(o.outfit),
        image_url=o.image_url,
        cultural_notes=o.cultural_notes,
        is_public=bool(o.is_public),
        share_url=_share_url(request, o.share_id) if o.is_public else None,
        rating=rating,
        created_at=_iso(o.created_at),
        updated_at=_iso(o.updated_at),
    )


async def _owned_outfit(session: AsyncSession, user_id: uuid.UUID, outfit_id: uuid.UUID) -> Outfit:
    res = await session.execute(select(Outfit).where(Outfit.id == outfit_id, Outfit.user_id == user_id))
    outfit = res.scalar_one_or_none()
    if not outfit:
        raise HTTPException(status_code=404, detail="outfit_not_found")
    return outfit


async def _my_rating(session: AsyncSession, user_id: uuid.UUID, outfit_id: uuid.UUID) -> Optional[int]:
    res = await session.execute(
        select(OutfitRating.rating).where(OutfitRating.user_id == user_id, OutfitRating.outfit_id == outfit_id)
    )
    return res.scalar_one_or_none()


@router.post("", response_model=OutfitOut)
async def create_outfit(
    body: OutfitCreate,
    request: Request,
    session: AsyncSession = Depends(get_session),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    outfit = Outfit(
        id=uuid.uuid4(),
        user_id=user_id,
        name=body.name,
        destination=body.destination,
        trip_date=body.date,
        occasion=body.occasion,
        vibe=body.vibe,
        weather=body.weather,
        outfit=body.outfit,
        image_url=body.image_url,
        cultural_notes=body.cultural_notes,
        is_public=False,
    )
    session.add(outfit)
    await session.commit()
    await session.refresh(outfit)
    return _to_out(request, outfit)


@router.get("", response_model=list[OutfitOut])
async def list_outfits(
    request: Request,
    session: AsyncSession = Depends(get_session),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    res = await session.execute(
        select(Outfit).where(Outfit.user_id == user_id).order_by(Outfit.created_at.desc())
    )
    outfits = res.scalars().all()
    ratings_res = await session.execute(
        select(OutfitRating.outfit_id, OutfitRating.rating).where(OutfitRating.user_id == user_id)
    )
    ratings = {oid: rating for oid, rating in ratings_res.all()}
    return [_to_out(request, o, ratings.get(o.id)) for o in outfits]


@router.get("/shared/{share_id}", response_model=OutfitOut)
async def get_shared_outfit(share_id: str, request: Request, session: AsyncSession = Depends(get_session)):
    res = await session.execute(select(Outfit).where(Outfit.share_id == share_id, Outfit.is_public.is_(True)))
    outfit = res.scalar_one_or_none()
    if not outfit:
        raise HTTPException(status_code=404, detail="outfit_not_found")
    return _to_out(request, outfit)


@router.get("/{outfit_id}", response_model=OutfitOut)
async def get_outfit(
    outfit_id: uuid.UUID,
    request: Request,
    session: AsyncSession = Depends(get_session),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    outfit = await _owned_outfit(session, user_id, outfit_id)
    return _to_out(request, outfit, await _my_rating(session, user_id, outfit.id))


@router.patch("/{outfit_id}", response_model=OutfitOut)
async def update_outfit(
    outfit_id: uuid.UUID,
    body: OutfitUpdate,
    request: Request,
    session: AsyncSession = Depends(get_session),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    outfit = await _owned_outfit(session, user_id, outfit_id)
    if body.name is not None:
        outfit.name = body.name
    if body.is_public is not None:
        outfit.is_public = body.is_public
        if not body.is_public:
            outfit.share_id = None

    if outfit.is_public and not outfit.share_id:
        for _ in range(SHARE_CODE_ATTEMPTS):
            outfit.share_id = _generate_share_code()
            try:
                await session.commit()
                break
            except IntegrityError:
                await session.rollback()
                outfit = await _owned_outfit(session, user_id, outfit_id)
                outfit.is_public = True
                if body.name is not None:
                    outfit.name = body.name
        else:
            raise HTTPException(status_code=500, detail="share_code_generation_failed")
    else:
        await session.commit()

    await session.refresh(outfit)
    return _to_out(request, outfit, await _my_rating(session, user_id, outfit.id))


@router.post("/{outfit_id}/rating", response_model=RatingOut)
async def rate_outfit(
    outfit_id: uuid.UUID,
    body: RatingIn,
    session: AsyncSession = Depends(get_session),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    value = body.rating
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 5:
        raise HTTPException(status_code=400, detail="invalid_rating")
    await _owned_outfit(session, user_id, outfit_id)

    res = await session.execute(
        select(OutfitRating).where(OutfitRating.user_id == user_id, OutfitRating.outfit_id == outfit_id)
    )
    rating = res.scalar_one_or_none()
    if rating:
        rating.rating = value
    else:
        rating = OutfitRating(id=uuid.uuid4(), user_id=user_id, outfit_id=outfit_id, rating=value)
        session.add(rating)
    await session.commit()
    await session.refresh(rating)
    return RatingOut(outfit_id=str(outfit_id), rating=rating.rating, updated_at=_iso(rating.updated_at))


@router.delete("/{outfit_id}", status_code=204)
async def delete_outfit(
    outfit_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    outfit = await _owned_outfit(session, user_id, outfit_id)
    await session.execute(delete(OutfitRating).where(OutfitRating.outfit_id == outfit.id))
    await session.delete(outfit)
    await session.commit()
    return Response(status_code=204)
