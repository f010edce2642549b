from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from notestore.models.entities import Note


class NoteSummary(BaseModel):
    """Карточка заметки для каталога и корзины: без ссылки и имени файла."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    title: str
    category: str = ""
    price: int = 0
    file_type: Literal["file", "link"] = "link"

    @classmethod
    def from_note(cls, note: Note) -> "NoteSummary":
        return cls(
            id=note.id,
            title=note.title,
            category=note.category,
            price=note.price,
            file_type=note.file_type,
        )


class NoteCreate(BaseModel):
    title: str
    category: str = ""
    # int или строка из формы; проверка в CatalogService.add_note
    price: int | str
    file_name: str | None = None
    file_link: str | None = None


class GalleryCreate(BaseModel):
    url: str


class HeroUpdate(BaseModel):
    hero_url: str | None = None
    hero_type: Literal["image", "video"] | None = None
    youtube_url: str | None = None


class CartOut(BaseModel):
    items: list[NoteSummary]
    total: int
    razorpay_key: str
    currency: str
