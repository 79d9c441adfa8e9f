import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tripfit.auth.deps import get_current_user_id
from tripfit.auth.passwords import hash_pw, verify_pw
from tripfit.core.db import get_session
from tripfit.models.models import (
    Account,
    Outfit,
    OutfitRating,
    PasswordResetToken,
    Profile,
    User,
    WardrobeItem,
)
from tripfit.schemas.base import ApiModel

router = APIRouter(prefix="/user", tags=["user"])
logger = logging.getLogger("uvicorn.error")


class ChangePasswordIn(ApiModel):
    current_password: Optional[str] = None
    new_password: Optional[str] = None


@router.put("/password")
async def change_password(
    body: ChangePasswordIn,
    session: AsyncSession = Depends(get_session),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    if not body.current_password or not body.new_password:
        raise HTTPException(status_code=400, detail="missing_required_fields")
    user = await session.get(User, user_id)
    if not user or not user.password_hash:
        raise HTTPException(status_code=404, detail="password_not_set")
    if not verify_pw(user.password_hash, body.current_password):
        raise HTTPException(status_code=401, detail="invalid_current_password")
    user.password_hash = hash_pw(body.new_password)
    await session.commit()
    return {"ok": True}


@router.delete("", status_code=204)
async def delete_account(
    session: AsyncSession = Depends(get_session),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    res = await session.execute(select(User.id).where(User.id == user_id))
    if res.scalar_one_or_none() is None:
        raise HTTPException(status_code=404, detail="user_not_found")
    owned_outfits = select(Outfit.id).where(Outfit.user_id == user_id)
    try:
        # Children first; one commit for the whole account
        await session.execute(
            delete(OutfitRating).where(
                (OutfitRating.user_id == user_id) | OutfitRating.outfit_id.in_(owned_outfits)
            )
        )
        await session.execute(delete(Outfit).where(Outfit.user_id == user_id))
        await session.execute(delete(WardrobeItem).where(WardrobeItem.user_id == user_id))
        await session.execute(delete(Profile).where(Profile.user_id == user_id))
        await session.execute(delete(PasswordResetToken).where(PasswordResetToken.user_id == user_id))
        await session.execute(delete(Account).where(Account.user_id == user_id))
        await session.execute(delete(User).where(User.id == user_id))
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error("account delete failed user_id=%s err=%s", user_id, e)
        raise HTTPException(status_code=500, detail=f"account_delete_failed: {e}")
    logger.info("account deleted user_id=%s", user_id)
    return Response(status_code=204)
