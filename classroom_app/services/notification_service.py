# classroom_app/services/notification_service.py
"""Credential e-mails for newly created accounts.

Sending is fire-and-forget: routers schedule ``send_credentials`` as a
background task after the creating transaction has committed, and delivery
failures are logged, never raised.
"""
from dataclasses import dataclass
from typing import List, Optional
import logging

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType

from ..core.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credentials:
    name: str
    email: str
    password: str
    role: str


class EmailService:
    def __init__(self, config: Optional[ConnectionConfig] = None):
        self.conf = config or ConnectionConfig(
            MAIL_USERNAME=settings.mail_username,
            MAIL_PASSWORD=settings.mail_password,
            MAIL_FROM=settings.mail_from,
            MAIL_FROM_NAME=settings.mail_from_name,
            MAIL_PORT=settings.mail_port,
            MAIL_SERVER=settings.mail_server,
            MAIL_STARTTLS=settings.mail_starttls,
            MAIL_SSL_TLS=settings.mail_ssl_tls,
            USE_CREDENTIALS=bool(settings.mail_username),
            SUPPRESS_SEND=1 if settings.mail_suppress_send else 0,
        )
        self.mailer = FastMail(self.conf)

    @staticmethod
    def _credentials_body(credentials: Credentials) -> str:
        return (
            f"<p>Hello {credentials.name},</p>"
            f"<p>An account with the role <b>{credentials.role}</b> has been created for you.</p>"
            f"<p>Email: {credentials.email}<br>Password: {credentials.password}</p>"
            "<p>Please change your password after your first login.</p>"
        )

    async def send_credentials(self, credentials_list: List[Credentials]) -> int:
        """Send one e-mail per account. Returns how many were handed to the mailer."""
        sent = 0
        for credentials in credentials_list:
            message = MessageSchema(
                subject="Your classroom account",
                recipients=[credentials.email],
                body=self._credentials_body(credentials),
                subtype=MessageType.html,
            )
            try:
                await self.mailer.send_message(message)
                sent += 1
            except Exception as e:
                logger.error(f"Failed to send credentials to {credentials.email}: {e}")
        logger.info(f"Credential e-mails sent: {sent}/{len(credentials_list)}")
        return sent


async def send_credentials_in_background(credentials_list: List[Credentials]) -> None:
    """Entry point for ``BackgroundTasks``"""
    if not credentials_list:
        return
    try:
        service = EmailService()
    except Exception as e:
        logger.error(f"E-mail service is not configured: {e}")
        return
    await service.send_credentials(credentials_list)
