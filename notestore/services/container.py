"""Сборка сервисов поверх одного EntityStore. Создаётся один раз на процесс."""
from dataclasses import dataclass
from pathlib import Path

from notestore.core.config import settings
from notestore.db.store import EntityStore
from notestore.services.auth.session import SessionTokens
from notestore.services.cart.service import CartService
from notestore.services.catalog.service import CatalogService
from notestore.services.entitlements.service import EntitlementService
from notestore.services.files.service import NoteFileService
from notestore.services.notifications.service import Notifier
from notestore.services.payments.gateway import RazorpayClient
from notestore.services.payments.service import PaymentGateway, PaymentService
from notestore.services.users.service import UserService


@dataclass
class Services:
    store: EntityStore
    tokens: SessionTokens
    users: UserService
    catalog: CatalogService
    entitlements: EntitlementService
    cart: CartService
    payments: PaymentService
    files: NoteFileService


def build_services(
    store: EntityStore | None = None,
    *,
    gateway: PaymentGateway | None = None,
    notifier: Notifier | None = None,
    notes_dir: str | Path | None = None,
    tokens: SessionTokens | None = None,
) -> Services:
    store = store or EntityStore(settings.data_file)
    notifier = notifier or Notifier()
    notes_dir = notes_dir or settings.notes_dir
    entitlements = EntitlementService(store, notifier)
    cart = CartService(store, entitlements)
    return Services(
        store=store,
        tokens=tokens or SessionTokens(),
        users=UserService(store),
        catalog=CatalogService(store, notes_dir),
        entitlements=entitlements,
        cart=cart,
        payments=PaymentService(cart, entitlements, gateway or RazorpayClient(), notifier),
        files=NoteFileService(store, entitlements, notes_dir),
    )
