import uuid
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tripfit.auth.deps import get_current_user_id
from tripfit.core.db import get_session
from tripfit.models.models import WardrobeItem
from tripfit.schemas.wardrobe import WardrobeItemIn, WardrobeItemOut

router = APIRouter(prefix="/wardrobe", tags=["wardrobe"])


def _iso(dt: Optional[datetime]) -> Optional[str]:
    return dt.isoformat() if dt else None


def _to_out(item: WardrobeItem) -> WardrobeItemOut:
    return WardrobeItemOut(
        id=str(item.id),
        name=item.name,
        type=item.type,
        category=item.category,
        weather=item.weather or [],
        occasions=item.occasions or [],
        image_url=item.image_url,
        created_at=_iso(item.created_at),
        updated_at=_iso(item.updated_at),
    )


async def _owned_item(session: AsyncSession, user_id: uuid.UUID, item_id: uuid.UUID) -> WardrobeItem:
    res = await session.execute(
        select(WardrobeItem).where(WardrobeItem.id == item_id, WardrobeItem.user_id == user_id)
    )
    item = res.scalar_one_or_none()
    if not item:
        raise HTTPException(status_code=404, detail="item_not_found")
    return item


@router.get("", response_model=list[WardrobeItemOut])
async def list_items(
    session: AsyncSession = Depends(get_session),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    res = await session.execute(
        select(WardrobeItem).where(WardrobeItem.user_id == user_id).order_by(WardrobeItem.created_at.desc())
    )
    return [_to_out(i) for i in res.scalars().all()]


@router.post("", response_model=WardrobeItemOut)
async def create_item(
    body: WardrobeItemIn,
    session: AsyncSession = Depends(get_session),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    if not body.name or not body.type or not body.category:
        raise HTTPException(status_code=400, detail="missing_required_fields")
    item = WardrobeItem(
        id=uuid.uuid4(),
        user_id=user_id,
        name=body.name,
        type=body.type,
        category=body.category,
        weather=body.weather or [],
        occasions=body.occasions or [],
        image_url=body.image_url,
    )
    session.add(item)
    await session.commit()
    await session.refresh(item)
    return _to_out(item)


@router.put("/{item_id}", response_model=WardrobeItemOut)
async def update_item(
    item_id: uuid.UUID,
    body: WardrobeItemIn,
    session: AsyncSession = Depends(get_session),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    item = await _owned_item(session, user_id, item_id)
    for field in ("name", "type", "category", "weather", "occasions", "image_url"):
        value = getattr(body, field)
        if value is not None:
            setattr(item, field, value)
    await session.commit()
    await session.refresh(item)
    return _to_out(item)


@router.delete("/{item_id}", status_code=204)
async def delete_item(
    item_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    item = await _owned_item(session, user_id, item_id)
    await session.delete(item)
    await session.commit()
    return Response(status_code=204)
