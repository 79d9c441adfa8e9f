from tripfit.notifications.providers.base import EmailProvider, EmailSendError
from tripfit.notifications.providers.log_only import LogEmailProvider
from tripfit.notifications.providers.resend import ResendEmailProvider

__all__ = [
    "EmailProvider",
    "EmailSendError",
    "LogEmailProvider",
    "ResendEmailProvider",
]
