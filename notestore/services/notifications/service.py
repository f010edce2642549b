"""
Уведомления о покупке: запись в таблицу аудита и письмо-чек.
Обе операции best-effort: ошибки и таймауты логируются и не пробрасываются,
чтобы не откатывать уже выданный доступ.
"""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable

from notestore.core.config import settings
from notestore.models.entities import User
from notestore.services.audit.service import SheetAuditLogger
from notestore.services.email.sender import EmailSender
from notestore.services.email.templates import render_receipt
from notestore.utils.metrics import notification_failures_total

logger = logging.getLogger(__name__)


class Notifier:
    def __init__(
        self,
        audit: SheetAuditLogger | None = None,
        email: EmailSender | None = None,
        audit_timeout: float | None = None,
        email_timeout: float | None = None,
    ) -> None:
        self.audit = audit or SheetAuditLogger()
        self.email = email or EmailSender()
        self.audit_timeout = audit_timeout or settings.audit_timeout
        self.email_timeout = email_timeout or settings.email_timeout

    async def _best_effort(self, sink: str, call: Awaitable[Any], timeout: float, user_id: str) -> bool:
        try:
            await asyncio.wait_for(call, timeout=timeout)
            return True
        except asyncio.TimeoutError:
            notification_failures_total.labels(sink=sink).inc()
            logger.warning("notification_timeout", extra={"sink": sink, "user_id": user_id})
        except Exception as e:
            notification_failures_total.labels(sink=sink).inc()
            logger.warning("notification_failed", extra={"sink": sink, "user_id": user_id, "error": str(e)})
        return False

    async def purchase(
        self,
        user: User,
        titles: list[str],
        total: int,
        *,
        status: str,
        subject: str,
        amount_label: str | int | None = None,
    ) -> None:
        """Audit record + receipt email. Never raises."""
        record = {
            "Date": datetime.now(timezone.utc).isoformat(),
            "Name": user.name,
            "Email": user.email,
            "Item": ", ".join(titles),
            "Amount": total if amount_label is None else amount_label,
            "Status": status,
        }
        await self._best_effort("audit", self.audit.append(record), self.audit_timeout, user.id)
        html = render_receipt(user.name, titles, total)
        await self._best_effort("email", self.email.send(user.email, subject, html), self.email_timeout, user.id)
