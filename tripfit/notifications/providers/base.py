from typing import Protocol
from tripfit.notifications.types import Email


class EmailSendError(RuntimeError):
    pass


class EmailProvider(Protocol):
    async def send(self, email: Email) -> None:
        ...
