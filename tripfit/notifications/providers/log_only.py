import logging
from tripfit.notifications.types import Email


class LogEmailProvider:
    """Used when no email provider is configured; nothing leaves the process."""

    async def send(self, email: Email) -> None:
        logging.getLogger("notifications").info("email to=%s subject=%s", email.to, email.subject)
