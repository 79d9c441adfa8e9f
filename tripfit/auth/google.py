from google.oauth2 import id_token
from google.auth.transport import requests as grequests

from tripfit.core.config import settings


def verify_google_id_token(token: str) -> dict:
    if not settings.GOOGLE_AUDIENCE:
        raise ValueError("GOOGLE_AUDIENCE_not_configured")
    return id_token.verify_oauth2_token(token, grequests.Request(), settings.GOOGLE_AUDIENCE)
