"""
SMTP email sender. smtplib is blocking, so send() hands the work to a thread.
Without smtp_user configured sending is a logged no-op.
"""
import asyncio
import logging
import smtplib
from email.message import EmailMessage

from notestore.core.config import settings

logger = logging.getLogger(__name__)


class EmailSender:
    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        user: str | None = None,
        password: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.host = host or settings.smtp_host
        self.port = port or settings.smtp_port
        self.user = settings.smtp_user if user is None else user
        self.password = settings.smtp_password if password is None else password
        self.timeout = timeout or settings.email_timeout

    @property
    def enabled(self) -> bool:
        return bool(self.user)

    def _send_sync(self, to: str, subject: str, html: str) -> None:
        msg = EmailMessage()
        msg["From"] = self.user
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content("Your mail client does not support HTML messages.")
        msg.add_alternative(html, subtype="html")

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            server.starttls()
            server.login(self.user, self.password)
            server.send_message(msg)

    async def send(self, to: str, subject: str, html: str) -> None:
        if not self.enabled:
            logger.info("email_disabled")
            return
        await asyncio.to_thread(self._send_sync, to, subject, html)
