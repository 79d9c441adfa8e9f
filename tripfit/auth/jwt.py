import time
import jwt
from typing import Any, Dict

from tripfit.core.config import settings


def mint_access(user_id: str) -> str:
    now = int(time.time())
    return jwt.encode(
        {"sub": user_id, "iat": now, "exp": now + settings.JWT_ACCESS_TTL_SECONDS, "typ": "access"},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALG,
    )


def mint_refresh(user_id: str) -> str:
    now = int(time.time())
    return jwt.encode(
        {"sub": user_id, "iat": now, "exp": now + settings.JWT_REFRESH_TTL_SECONDS, "typ": "refresh"},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALG,
    )


def decode_token(tok: str) -> Dict[str, Any]:
    return jwt.decode(tok, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
