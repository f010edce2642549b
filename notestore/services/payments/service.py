"""
PaymentService - оформление заказа в платёжном шлюзе и подтверждение оплаты.

Ответственности:
- create_order: сверка суммы с корзиной на сервере, создание order в шлюзе,
  запись заказа (id, пользователь, сумма) в хранилище
- verify_payment: выдача доступа по текущей корзине, только для ожидающего заказа
  этого пользователя с той же суммой; заказ подтверждается один раз.
  Затем best-effort аудит и письмо-чек

Жизненный цикл попытки: CREATED -> VERIFIED -> SETTLED, либо CREATED -> FAILED.
"""
import logging
import time
from enum import Enum
from typing import Protocol

from pydantic import BaseModel, Field

from notestore.core.config import settings
from notestore.core.errors import PaymentGatewayError, ValidationError
from notestore.models.entities import OrderRecord, Snapshot
from notestore.services.cart.service import CartService
from notestore.services.entitlements.service import EntitlementService
from notestore.services.notifications.service import Notifier
from notestore.services.payments.gateway import Order
from notestore.utils.currency import to_minor_units
from notestore.utils.metrics import (
    orders_created_total,
    orders_failed_total,
    payments_verified_total,
)

logger = logging.getLogger(__name__)


class CheckoutState(str, Enum):
    CREATED = "created"
    VERIFIED = "verified"
    SETTLED = "settled"
    FAILED = "failed"


class PaymentGateway(Protocol):
    async def create_order(self, amount_minor: int, currency: str, receipt: str) -> Order: ...


class VerificationResult(BaseModel):
    state: CheckoutState
    order_id: str
    note_ids: list[int] = Field(default_factory=list)
    titles: list[str] = Field(default_factory=list)
    total: int = 0


class PaymentService:
    def __init__(
        self,
        cart: CartService,
        entitlements: EntitlementService,
        gateway: PaymentGateway,
        notifier: Notifier,
        currency: str | None = None,
    ) -> None:
        self.cart = cart
        self.entitlements = entitlements
        self.gateway = gateway
        self.notifier = notifier
        self.currency = currency or settings.payment_currency

    @staticmethod
    def _make_receipt() -> str:
        return f"ord_{int(time.time() * 1000)}"

    async def create_order(self, user_id: str, amount) -> Order:
        """
        amount - сумма в рупиях от клиента; принимается только если совпадает
        с итогом корзины, посчитанным на сервере.
        """
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValidationError("Amount must be a positive integer")
        view = await self.cart.view_cart(user_id)
        if view.total != amount:
            logger.warning(
                "order_amount_mismatch",
                extra={"user_id": user_id, "amount": amount, "error": f"cart_total={view.total}"},
            )
            raise ValidationError("Amount does not match cart total")

        receipt = self._make_receipt()
        try:
            order = await self.gateway.create_order(to_minor_units(amount), self.currency, receipt)
        except PaymentGatewayError as e:
            orders_failed_total.labels(reason="gateway").inc()
            logger.error(
                "order_create_failed",
                extra={"user_id": user_id, "amount": amount, "receipt": receipt,
                       "state": CheckoutState.FAILED.value, "error": e.detail},
            )
            raise

        def record(snapshot: Snapshot) -> None:
            snapshot.orders.append(
                OrderRecord(id=order.id, user_id=user_id, amount=amount, currency=self.currency)
            )

        await self.cart.store.commit(record)
        orders_created_total.inc()
        logger.info(
            "order_created",
            extra={"user_id": user_id, "order_id": order.id, "amount": amount, "currency": self.currency,
                   "receipt": receipt, "state": CheckoutState.CREATED.value},
        )
        return order

    async def verify_payment(self, user_id: str, order_id: str) -> VerificationResult:
        """
        Подтверждение заказа order_id, созданного этим пользователем через create_order.
        Идемпотентно: повтор с уже подтверждённым заказом ничего не выдаёт.
        Ошибки аудита/почты не откатывают выдачу - платёж уже списан шлюзом.
        """
        if not order_id:
            raise ValidationError("order_id is required")
        receipt = await self.entitlements.grant_from_payment(user_id, order_id)
        logger.info(
            "payment_verified",
            extra={"user_id": user_id, "order_id": order_id, "items": receipt.note_ids, "amount": receipt.total,
                   "state": CheckoutState.VERIFIED.value},
        )

        if receipt.granted_anything:
            payments_verified_total.labels(outcome="granted").inc()
            await self.notifier.purchase(
                receipt.user,
                receipt.titles,
                receipt.total,
                status="Paid",
                subject="Purchase Receipt",
            )
        else:
            payments_verified_total.labels(outcome="noop").inc()

        logger.info("payment_settled", extra={"user_id": user_id, "order_id": order_id, "state": CheckoutState.SETTLED.value})
        return VerificationResult(
            state=CheckoutState.SETTLED,
            order_id=order_id,
            note_ids=receipt.note_ids,
            titles=receipt.titles,
            total=receipt.total,
        )
