import logging
from typing import Optional

import httpx

from tripfit.notifications.providers.base import EmailSendError
from tripfit.notifications.types import Email

RESEND_URL = "https://api.resend.com/emails"


class ResendEmailProvider:
    def __init__(self, api_key: str, sender: str, http_client: Optional[httpx.AsyncClient] = None):
        self.api_key = api_key
        self.sender = sender
        self.http_client = http_client

    async def _post(self, payload: dict) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        if self.http_client is not None:
            return await self.http_client.post(RESEND_URL, json=payload, headers=headers)
        async with httpx.AsyncClient(timeout=10.0) as client:
            return await client.post(RESEND_URL, json=payload, headers=headers)

    async def send(self, email: Email) -> None:
        payload = {"from": self.sender, "to": [email.to], "subject": email.subject, "html": email.html}
        try:
            resp = await self._post(payload)
        except httpx.HTTPError as e:
            raise EmailSendError(f"failed to send email: {e}") from e
        if resp.status_code >= 400:
            raise EmailSendError(f"failed to send email: status={resp.status_code} body={resp.text[:200]}")
        logging.getLogger("notifications").info("email sent to=%s subject=%s", email.to, email.subject)
