import hashlib
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import uuid4

import jwt
from fastapi import APIRouter, Depends, HTTPException
from pydantic import EmailStr
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from tripfit.auth.google import verify_google_id_token
from tripfit.auth.jwt import decode_token, mint_access, mint_refresh
from tripfit.auth.passwords import hash_pw, needs_rehash, verify_pw
from tripfit.core.clients import ServiceClients, get_clients
from tripfit.core.config import settings
from tripfit.core.db import get_session
from tripfit.models.models import Account, PasswordResetToken, Profile, User
from tripfit.notifications.providers import EmailSendError
from tripfit.schemas.base import ApiModel
from tripfit.services.notifications.service import EmailService

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger("uvicorn.error")


class SignupIn(ApiModel):
    email: EmailStr
    password: str
    name: str
    gender: Optional[str] = None
    body_type: Optional[str] = None
    height: Optional[float] = None
    weight: Optional[float] = None


class LoginIn(ApiModel):
    email: EmailStr
    password: str


class TokenOut(ApiModel):
    access: str
    refresh: str


class GoogleIn(ApiModel):
    id_token: str


class RefreshIn(ApiModel):
    refresh: str


class PasswordResetRequestIn(ApiModel):
    email: EmailStr


class PasswordResetRequestOut(ApiModel):
    ok: bool = True
    message: str = "If an account exists, you will receive a password reset email"
    reset_token: Optional[str] = None
    expires_at: Optional[str] = None


class PasswordResetConfirmIn(ApiModel):
    token: str
    new_password: str


def _tokens(user: User) -> TokenOut:
    return TokenOut(access=mint_access(str(user.id)), refresh=mint_refresh(str(user.id)))


def _hash_reset_token(token: str) -> str:
    raw = f"{token}{settings.SECRET_KEY}".encode()
    return hashlib.sha256(raw).hexdigest()


def _as_utc(dt: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


@router.post("/signup", response_model=TokenOut)
async def signup(body: SignupIn, session: AsyncSession = Depends(get_session)):
    if not body.password or not body.name.strip():
        raise HTTPException(status_code=400, detail="missing_required_fields")
    existing = await session.execute(select(User).where(User.email == body.email))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="email_exists")
    user = User(id=uuid4(), email=body.email, name=body.name.strip(), password_hash=hash_pw(body.password))
    session.add(user)
    session.add(
        Profile(
            id=uuid4(),
            user_id=user.id,
            gender=body.gender,
            body_type=body.body_type,
            preferences={"height": body.height, "weight": body.weight},
        )
    )
    await session.commit()
    return _tokens(user)


@router.post("/login", response_model=TokenOut)
async def login(body: LoginIn, session: AsyncSession = Depends(get_session)):
    res = await session.execute(select(User).where(User.email == body.email))
    user = res.scalar_one_or_none()
    if not user or not user.password_hash or not verify_pw(user.password_hash, body.password):
        raise HTTPException(status_code=401, detail="invalid_credentials")
    if needs_rehash(user.password_hash):
        user.password_hash = hash_pw(body.password)
        await session.commit()
    return _tokens(user)


@router.post("/google", response_model=TokenOut)
async def google_exchange(body: GoogleIn, session: AsyncSession = Depends(get_session)):
    if not settings.ENABLE_GOOGLE_AUTH:
        raise HTTPException(status_code=404, detail="google_auth_disabled")
    try:
        info = verify_google_id_token(body.id_token)
    except ValueError:
        raise HTTPException(status_code=401, detail="invalid_google_token")
    user = await _upsert_oauth_user(
        session, "google", info["sub"], info.get("email"), info.get("name"), info.get("picture"), info
    )
    return _tokens(user)


@router.post("/refresh", response_model=TokenOut)
async def refresh_token(body: RefreshIn):
    try:
        data = decode_token(body.refresh)
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="invalid_refresh")
    if data.get("typ") != "refresh":
        raise HTTPException(status_code=401, detail="invalid_refresh")
    uid = data["sub"]
    return TokenOut(access=mint_access(uid), refresh=mint_refresh(uid))


@router.post("/password-reset/request", response_model=PasswordResetRequestOut)
async def request_password_reset(
    body: PasswordResetRequestIn,
    session: AsyncSession = Depends(get_session),
    clients: ServiceClients = Depends(get_clients),
):
    res = await session.execute(select(User).where(User.email == body.email))
    user = res.scalar_one_or_none()
    if not user or not user.password_hash:
        # Same answer whether or not the account exists
        return PasswordResetRequestOut()

    now = datetime.now(timezone.utc)
    await session.execute(
        update(PasswordResetToken)
        .where(PasswordResetToken.user_id == user.id, PasswordResetToken.used_at.is_(None))
        .values(used_at=now)
    )

    token = secrets.token_urlsafe(32)
    expires_at = now + timedelta(minutes=settings.PASSWORD_RESET_TTL_MINUTES)
    session.add(
        PasswordResetToken(
            id=uuid4(),
            user_id=user.id,
            token_hash=_hash_reset_token(token),
            expires_at=expires_at,
        )
    )
    await session.commit()

    reset_url = f"{settings.APP_PUBLIC_URL.rstrip('/')}/reset-password?token={token}"
    try:
        await EmailService(clients.email).send_password_reset(
            body.email, reset_url, ttl_minutes=settings.PASSWORD_RESET_TTL_MINUTES
        )
    except EmailSendError as e:
        logger.error("password reset email failed user_id=%s reason=%s", user.id, e)
        raise HTTPException(status_code=500, detail=f"failed to send reset email: {e}")

    if settings.APP_ENV != "prod":
        return PasswordResetRequestOut(reset_token=token, expires_at=expires_at.isoformat())
    return PasswordResetRequestOut()


@router.post("/password-reset/confirm", response_model=TokenOut)
async def confirm_password_reset(body: PasswordResetConfirmIn, session: AsyncSession = Depends(get_session)):
    if not body.token or not body.new_password:
        raise HTTPException(status_code=400, detail="missing_required_fields")
    now = datetime.now(timezone.utc)
    res = await session.execute(
        select(PasswordResetToken).where(PasswordResetToken.token_hash == _hash_reset_token(body.token))
    )
    prt = res.scalar_one_or_none()
    if not prt or prt.used_at or _as_utc(prt.expires_at) < now:
        raise HTTPException(status_code=400, detail="invalid_reset_token")
    user = await session.get(User, prt.user_id)
    if not user:
        raise HTTPException(status_code=400, detail="invalid_reset_token")
    user.password_hash = hash_pw(body.new_password)
    prt.used_at = now
    await session.commit()
    return _tokens(user)


async def _upsert_oauth_user(
    session: AsyncSession,
    provider: str,
    provider_user_id: str,
    email: str | None,
    name: str | None,
    image: str | None,
    raw_profile: dict,
) -> User:
    res = await session.execute(
        select(User).join(Account, Account.user_id == User.id).where(
            Account.provider == provider, Account.provider_user_id == provider_user_id
        )
    )
    user = res.scalar_one_or_none()
    if user:
        return user
    # Link to an existing credential account with the same email
    if email:
        res = await session.execute(select(User).where(User.email == email))
        user = res.scalar_one_or_none()
    if user is None:
        user = User(id=uuid4(), email=email, name=name, image=image)
        session.add(user)
        await session.flush()
    session.add(Account(user_id=user.id, provider=provider, provider_user_id=provider_user_id, raw_profile=raw_profile))
    await session.commit()
    return user
