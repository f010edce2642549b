"""
EntitlementService - выдача доступа к заметкам.

- grant_free: бесплатная заметка, проверка и запись в одном commit
- grant_from_payment: всё содержимое корзины по подтверждённому заказу, корзина очищается
- has_access: чистое чтение purchased_notes
"""
import logging

from pydantic import BaseModel, Field

from notestore.core.errors import Conflict, Forbidden, NotFound, ValidationError
from notestore.db.store import EntityStore
from notestore.models.entities import Note, Snapshot, User
from notestore.services.notifications.service import Notifier
from notestore.utils.metrics import entitlements_granted_total

logger = logging.getLogger(__name__)


class PurchaseReceipt(BaseModel):
    user: User
    order_id: str | None = None
    note_ids: list[int] = Field(default_factory=list)
    titles: list[str] = Field(default_factory=list)
    total: int = 0

    @property
    def granted_anything(self) -> bool:
        return bool(self.note_ids)


def _require_user(snapshot: Snapshot, user_id: str) -> User:
    user = snapshot.find_user(user_id)
    if user is None:
        raise NotFound("User not found")
    return user


class EntitlementService:
    def __init__(self, store: EntityStore, notifier: Notifier) -> None:
        self.store = store
        self.notifier = notifier

    async def grant_free(self, user_id: str, note_id: int) -> Note:
        """
        Выдать бесплатную заметку. Повторный вызов для той же пары -> Conflict,
        побочные эффекты (аудит, письмо) только при первой выдаче.
        """

        def mutate(snapshot: Snapshot) -> tuple[User, Note]:
            user = _require_user(snapshot, user_id)
            note = snapshot.find_note(note_id)
            if note is None:
                raise NotFound("Note not found")
            if not note.is_free:
                raise ValidationError("Note is not free")
            if not user.grant(note_id):
                raise Conflict("Note already claimed")
            return user.model_copy(deep=True), note

        user, note = await self.store.commit(mutate)
        entitlements_granted_total.labels(source="free").inc()
        logger.info("free_note_claimed", extra={"user_id": user_id, "note_id": note_id})

        await self.notifier.purchase(
            user,
            [note.title],
            0,
            status="Claimed",
            subject="Free Note Claimed",
            amount_label="0 (Free)",
        )
        return note

    async def grant_from_payment(self, user_id: str, order_id: str) -> PurchaseReceipt:
        """
        Выдать доступ ко всему, что лежит в корзине на момент commit, и очистить корзину.
        Заказ должен принадлежать пользователю, ждать подтверждения и совпадать по сумме
        с корзиной; после выдачи он помечается settled. Повтор с тем же заказом
        (в том числе параллельный) ничего не выдаёт.
        """

        def mutate(snapshot: Snapshot) -> PurchaseReceipt:
            user = _require_user(snapshot, user_id)
            order = snapshot.find_order(order_id)
            if order is None or order.user_id != user_id:
                raise Forbidden("Unknown order")
            receipt = PurchaseReceipt(user=user.model_copy(deep=True), order_id=order_id)
            if not order.is_pending:
                return receipt

            cart_total = sum(n.price for n in snapshot.notes_by_ids(user.cart))
            if cart_total != order.amount:
                raise ValidationError("Cart changed since the order was created")

            for nid in list(user.cart):
                note = snapshot.find_note(nid)
                if note is None:
                    # Удалена из каталога после добавления в корзину: в сумму заказа не входила
                    logger.warning("cart_dangling_note_dropped", extra={"user_id": user_id, "note_id": nid})
                    continue
                if user.grant(nid):
                    receipt.note_ids.append(nid)
                    receipt.titles.append(note.title)
                    receipt.total += note.price
            user.cart = []
            order.status = "settled"
            receipt.user = user.model_copy(deep=True)
            return receipt

        receipt = await self.store.commit(mutate)
        if receipt.granted_anything:
            entitlements_granted_total.labels(source="payment").inc(len(receipt.note_ids))
        return receipt

    async def has_access(self, user_id: str, note_id: int) -> bool:
        snapshot = await self.store.load()
        user = snapshot.find_user(user_id)
        return user is not None and user.owns(note_id)

    async def purchased_notes(self, user_id: str) -> list[Note]:
        """Заметки пользователя для дашборда; висячие id (удалённые заметки) отфильтрованы."""
        snapshot = await self.store.load()
        user = _require_user(snapshot, user_id)
        return snapshot.notes_by_ids(user.purchased_notes)
