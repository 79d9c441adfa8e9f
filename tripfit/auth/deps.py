import uuid
import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from tripfit.auth.jwt import decode_token

bearer = HTTPBearer(auto_error=False)


def _subject(creds: HTTPAuthorizationCredentials) -> uuid.UUID:
    data = decode_token(creds.credentials)
    if data.get("typ") != "access":
        raise jwt.InvalidTokenError("not an access token")
    return uuid.UUID(data["sub"])


def get_current_user_id(creds: HTTPAuthorizationCredentials = Depends(bearer)) -> uuid.UUID:
    if not creds:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthorized")
    try:
        return _subject(creds)
    except (jwt.PyJWTError, KeyError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthorized")
