import logging
from enum import Enum
from typing import Iterable

from pydantic import BaseModel

from notestore.core.errors import Conflict, NotFound
from notestore.db.store import EntityStore
from notestore.models.entities import Note, Snapshot
from notestore.services.entitlements.service import EntitlementService

logger = logging.getLogger(__name__)


class CartAddOutcome(str, Enum):
    ADDED = "added"
    ALREADY_IN_CART = "already_in_cart"
    ALREADY_OWNED = "already_owned"
    CLAIMED_FREE = "claimed_free"


class CartView(BaseModel):
    items: list[Note]
    total: int


def compute_total(notes: Iterable[Note]) -> int:
    """Sum of integer prices. Prices are validated when a note is created."""
    return sum(int(n.price) for n in notes)


class CartService:
    def __init__(self, store: EntityStore, entitlements: EntitlementService) -> None:
        self.store = store
        self.entitlements = entitlements

    async def add_to_cart(self, user_id: str, note_id: int) -> CartAddOutcome:
        snapshot = await self.store.load()
        note = snapshot.find_note(note_id)
        if note is None:
            raise NotFound("Note not found")
        user = snapshot.find_user(user_id)
        if user is None:
            raise NotFound("User not found")
        if user.owns(note_id):
            return CartAddOutcome.ALREADY_OWNED

        if note.is_free:
            try:
                await self.entitlements.grant_free(user_id, note_id)
            except Conflict:
                return CartAddOutcome.ALREADY_OWNED
            return CartAddOutcome.CLAIMED_FREE

        def mutate(snap: Snapshot) -> CartAddOutcome:
            # Повторная проверка внутри commit: состояние могло измениться после load()
            u = snap.find_user(user_id)
            if u is None:
                raise NotFound("User not found")
            if snap.find_note(note_id) is None:
                raise NotFound("Note not found")
            if u.owns(note_id):
                return CartAddOutcome.ALREADY_OWNED
            if note_id in u.cart:
                return CartAddOutcome.ALREADY_IN_CART
            u.cart.append(note_id)
            return CartAddOutcome.ADDED

        outcome = await self.store.commit(mutate)
        logger.info("cart_add", extra={"user_id": user_id, "note_id": note_id, "state": outcome.value})
        return outcome

    async def remove_from_cart(self, user_id: str, note_id: int) -> None:
        def mutate(snap: Snapshot) -> None:
            u = snap.find_user(user_id)
            if u is None:
                raise NotFound("User not found")
            if note_id in u.cart:
                u.cart.remove(note_id)

        await self.store.commit(mutate)

    async def view_cart(self, user_id: str) -> CartView:
        snapshot = await self.store.load()
        user = snapshot.find_user(user_id)
        if user is None:
            raise NotFound("User not found")
        items = snapshot.notes_by_ids(user.cart)
        return CartView(items=items, total=compute_total(items))
