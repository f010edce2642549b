"""
Журнал покупок во внешнюю таблицу (SheetDB-совместимый endpoint).
Пустой sheetdb_url - логирование отключено.
"""
import logging
from typing import Any

import httpx

from notestore.core.config import settings

logger = logging.getLogger(__name__)


class SheetAuditLogger:
    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = settings.sheetdb_url if url is None else url
        self.timeout = settings.audit_timeout if timeout is None else timeout
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    async def append(self, record: dict[str, Any]) -> None:
        """POST {"data": [record]}. Raises on transport or HTTP errors; callers decide."""
        if not self.enabled:
            return
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.post(self.url, json={"data": [record]})
            resp.raise_for_status()
