"""
Razorpay orders API client using httpx async client.
Only order creation and callback signature verification are needed.
"""
import hashlib
import hmac
import logging
import time

import httpx
from pydantic import BaseModel, ConfigDict

from notestore.core.config import settings
from notestore.core.errors import PaymentGatewayError
from notestore.utils.metrics import gateway_request_duration_seconds


logger = logging.getLogger(__name__)


class Order(BaseModel):
    """Gateway order descriptor. Extra fields from the gateway are kept as-is."""

    model_config = ConfigDict(extra="allow")

    id: str
    amount: int
    currency: str
    receipt: str | None = None
    status: str = "created"


class RazorpayClient:
    def __init__(
        self,
        key_id: str | None = None,
        key_secret: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.key_id = key_id or settings.razorpay_key_id
        self.key_secret = key_secret or settings.razorpay_key_secret
        self.base_url = (base_url or settings.razorpay_api_base).rstrip("/")
        self.timeout = timeout or settings.gateway_timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            auth=(self.key_id, self.key_secret),
            timeout=self.timeout,
            transport=self._transport,
        )

    async def create_order(self, amount_minor: int, currency: str, receipt: str) -> Order:
        """Mint an order. Any transport error, timeout or non-2xx -> PaymentGatewayError."""
        start = time.monotonic()
        try:
            async with self._client() as client:
                resp = await client.post(
                    "/orders",
                    json={"amount": amount_minor, "currency": currency, "receipt": receipt},
                )
                resp.raise_for_status()
                return Order.model_validate(resp.json())
        except httpx.TimeoutException as e:
            logger.warning("gateway_timeout", extra={"receipt": receipt, "error": str(e)})
            raise PaymentGatewayError("Payment gateway timed out") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("gateway_error", extra={"receipt": receipt, "error": str(e)})
            raise PaymentGatewayError("Payment failed") from e
        finally:
            gateway_request_duration_seconds.labels(method="create_order").observe(time.monotonic() - start)


def verify_payment_signature(order_id: str, payment_id: str, signature: str, key_secret: str | None = None) -> bool:
    """Razorpay checkout signature: hex HMAC-SHA256 of "order_id|payment_id" with the key secret."""
    secret = key_secret or settings.razorpay_key_secret
    expected = hmac.new(
        secret.encode("utf-8"),
        f"{order_id}|{payment_id}".encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return hmac.compare_digest(expected, signature or "")
