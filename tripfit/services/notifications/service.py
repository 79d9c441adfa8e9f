import logging

from tripfit.core.config import Settings
from tripfit.notifications.providers import EmailProvider, LogEmailProvider, ResendEmailProvider
from tripfit.notifications.types import Email

RESET_TEMPLATE = """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #333;">Password Reset Request</h2>
  <p>Hello,</p>
  <p>You requested a password reset for your account.</p>
  <p>Click the button below to reset your password:</p>
  <div style="text-align: center; margin: 30px 0;">
    <a href="{reset_url}"
       style="background-color: #007bff; color: white; padding: 12px 24px; text-decoration: none; border-radius: 5px; display: inline-block;">
      Reset Password
    </a>
  </div>
  <p>This link will expire in {ttl_minutes} minutes.</p>
  <p>If you didn't request this, you can safely ignore this email.</p>
</div>
"""


def build_email_provider(cfg: Settings) -> EmailProvider:
    if cfg.EMAIL_PROVIDER == "resend":
        if cfg.RESEND_API_KEY:
            return ResendEmailProvider(cfg.RESEND_API_KEY, cfg.EMAIL_FROM)
        logging.getLogger("notifications").warning("EMAIL_PROVIDER=resend but RESEND_API_KEY is not set; logging emails instead")
    return LogEmailProvider()


class EmailService:
    def __init__(self, provider: EmailProvider) -> None:
        self.provider = provider

    async def send_password_reset(self, to: str, reset_url: str, ttl_minutes: int = 60) -> None:
        html = RESET_TEMPLATE.format(reset_url=reset_url, ttl_minutes=ttl_minutes)
        await self.provider.send(Email(to=to, subject="Reset Your Password", html=html))
