"""
Сущности хранилища: User, Note, GalleryItem, SiteSettings и Snapshot целиком.
Ключи JSON - camelCase, как в уже существующих data.json; в коде - snake_case.
"""
from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Role(str, Enum):
    ADMIN = "admin"
    STANDARD = "standard"


class _Entity(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _dedupe(ids: list[int]) -> list[int]:
    seen: set[int] = set()
    out: list[int] = []
    for i in ids:
        if i not in seen:
            seen.add(i)
            out.append(i)
    return out


class User(_Entity):
    id: str
    email: str
    # Opaque credential: pbkdf2 hash string (legacy documents may hold plaintext)
    password: str = ""
    name: str = ""
    phone: str = ""
    address: str = ""
    is_admin: bool = False
    is_banned: bool = False
    cart: list[int] = Field(default_factory=list)
    purchased_notes: list[int] = Field(default_factory=list)

    @field_validator("cart", "purchased_notes", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return [] if v is None else v

    @field_validator("cart", "purchased_notes")
    @classmethod
    def _unique_ids(cls, v: list[int]) -> list[int]:
        return _dedupe(v)

    @property
    def role(self) -> Role:
        return Role.ADMIN if self.is_admin else Role.STANDARD

    def owns(self, note_id: int) -> bool:
        return note_id in self.purchased_notes

    def grant(self, note_id: int) -> bool:
        """Add entitlement; the id leaves the cart in the same step. False if already held."""
        if note_id in self.cart:
            self.cart.remove(note_id)
        if note_id in self.purchased_notes:
            return False
        self.purchased_notes.append(note_id)
        return True


class Note(_Entity):
    id: int
    title: str
    category: str = ""
    price: int = Field(0, ge=0)
    file_type: Literal["file", "link"] = "link"
    file_link: str = "#"
    file_name: str = ""

    @property
    def is_free(self) -> bool:
        return self.price == 0


class GalleryItem(_Entity):
    id: int
    url: str


class SiteSettings(_Entity):
    hero_type: Literal["image", "video"] = "image"
    hero_url: str = "#"
    youtube_url: str = "#"


class OrderRecord(_Entity):
    """Заказ шлюза, созданный для пользователя. Подтверждается ровно один раз."""

    id: str
    user_id: str
    # Сумма в рупиях (итог корзины на момент create_order)
    amount: int = Field(..., gt=0)
    currency: str = "INR"
    status: Literal["pending", "settled"] = "pending"

    @property
    def is_pending(self) -> bool:
        return self.status == "pending"


class Snapshot(_Entity):
    """Полное состояние хранилища в памяти."""

    users: list[User] = Field(default_factory=list)
    notes: list[Note] = Field(default_factory=list)
    gallery: list[GalleryItem] = Field(default_factory=list)
    settings: SiteSettings = Field(default_factory=SiteSettings)
    orders: list[OrderRecord] = Field(default_factory=list)
    # Счётчик id заметок: id удалённых заметок не переиспользуются
    last_note_id: int = 0

    @field_validator("gallery", "orders", mode="before")
    @classmethod
    def _lists_none_as_empty(cls, v):
        return [] if v is None else v

    @field_validator("settings", mode="before")
    @classmethod
    def _settings_none_as_default(cls, v):
        return {} if v is None else v

    def find_user(self, user_id: str) -> User | None:
        return next((u for u in self.users if u.id == user_id), None)

    def find_user_by_email(self, email: str) -> User | None:
        return next((u for u in self.users if u.email == email), None)

    def find_note(self, note_id: int) -> Note | None:
        return next((n for n in self.notes if n.id == note_id), None)

    def find_order(self, order_id: str) -> OrderRecord | None:
        return next((o for o in self.orders if o.id == order_id), None)

    def notes_by_ids(self, ids: list[int]) -> list[Note]:
        """Existing notes for the given ids, in id-list order; dangling ids are skipped."""
        by_id = {n.id: n for n in self.notes}
        return [by_id[i] for i in ids if i in by_id]

    def next_note_id(self) -> int:
        top = max((n.id for n in self.notes), default=0)
        self.last_note_id = max(self.last_note_id, top) + 1
        return self.last_note_id

    def next_gallery_id(self) -> int:
        return max((g.id for g in self.gallery), default=0) + 1
