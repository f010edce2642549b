"""Каталог заметок, галерея и настройки главной страницы (hero)."""
import logging
from pathlib import Path
from typing import Any

from notestore.core.config import settings
from notestore.core.errors import NotFound, ValidationError
from notestore.db.store import EntityStore
from notestore.models.entities import GalleryItem, Note, SiteSettings, Snapshot

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "All"


def parse_price(value: Any) -> int:
    """Цена - неотрицательное целое; строки вида "500" допускаются (формы)."""
    if isinstance(value, bool):
        raise ValidationError("Price must be a non-negative integer")
    if isinstance(value, str):
        value = value.strip()
        if not (value.isascii() and value.isdecimal()):
            raise ValidationError("Price must be a non-negative integer")
        return int(value)
    if isinstance(value, int) and value >= 0:
        return value
    raise ValidationError("Price must be a non-negative integer")


class CatalogService:
    def __init__(self, store: EntityStore, notes_dir: str | Path | None = None) -> None:
        self.store = store
        self.notes_dir = Path(notes_dir or settings.notes_dir)

    # ------------------------------------------------------------------
    # Browsing
    # ------------------------------------------------------------------

    async def list_notes(self, search: str | None = None, category: str | None = None) -> list[Note]:
        snapshot = await self.store.load()
        notes = snapshot.notes
        if category and category != ALL_CATEGORIES:
            notes = [n for n in notes if n.category == category]
        term = (search or "").strip().lower()
        if term:
            notes = [n for n in notes if term in n.title.lower()]
        return notes

    async def categories(self) -> list[str]:
        snapshot = await self.store.load()
        seen: list[str] = []
        for n in snapshot.notes:
            if n.category not in seen:
                seen.append(n.category)
        return [ALL_CATEGORIES, *seen]

    async def home(self, latest: int = 3) -> dict[str, Any]:
        snapshot = await self.store.load()
        return {
            "notes": list(reversed(snapshot.notes[-latest:])) if latest > 0 else [],
            "gallery": snapshot.gallery,
            "settings": snapshot.settings,
        }

    async def get_note(self, note_id: int) -> Note:
        snapshot = await self.store.load()
        note = snapshot.find_note(note_id)
        if note is None:
            raise NotFound("Note not found")
        return note

    # ------------------------------------------------------------------
    # Admin: notes
    # ------------------------------------------------------------------

    def _check_stored_file(self, file_name: str) -> None:
        if Path(file_name).name != file_name or file_name in (".", ".."):
            raise ValidationError("file_name must be a plain file name")
        if not (self.notes_dir / file_name).is_file():
            raise ValidationError("file_name does not exist in notes storage")

    async def add_note(
        self,
        title: str,
        category: str,
        price: Any,
        file_name: str | None = None,
        file_link: str | None = None,
    ) -> Note:
        title = (title or "").strip()
        if not title:
            raise ValidationError("Title is required")
        price_value = parse_price(price)
        if file_name:
            self._check_stored_file(file_name)
            file_type, link, name = "file", "#", file_name
        else:
            file_type, link, name = "link", (file_link or "#").strip() or "#", ""

        def mutate(snapshot: Snapshot) -> Note:
            note = Note(
                id=snapshot.next_note_id(),
                title=title,
                category=(category or "").strip(),
                price=price_value,
                file_type=file_type,
                file_link=link,
                file_name=name,
            )
            snapshot.notes.append(note)
            return note

        note = await self.store.commit(mutate)
        logger.info("note_added", extra={"note_id": note.id, "amount": note.price})
        return note

    async def delete_note(self, note_id: int) -> None:
        """Удаление из каталога; уже выданные права у пользователей не трогаем."""

        def mutate(snapshot: Snapshot) -> None:
            before = len(snapshot.notes)
            snapshot.notes = [n for n in snapshot.notes if n.id != note_id]
            if len(snapshot.notes) == before:
                raise NotFound("Note not found")

        await self.store.commit(mutate)
        logger.info("note_deleted", extra={"note_id": note_id})

    # ------------------------------------------------------------------
    # Admin: gallery & hero
    # ------------------------------------------------------------------

    async def add_gallery_item(self, url: str) -> GalleryItem:
        url = (url or "").strip()
        if not url:
            raise ValidationError("url is required")

        def mutate(snapshot: Snapshot) -> GalleryItem:
            item = GalleryItem(id=snapshot.next_gallery_id(), url=url)
            snapshot.gallery.append(item)
            return item

        return await self.store.commit(mutate)

    async def delete_gallery_item(self, item_id: int) -> None:
        def mutate(snapshot: Snapshot) -> None:
            snapshot.gallery = [g for g in snapshot.gallery if g.id != item_id]

        await self.store.commit(mutate)

    async def update_hero(
        self,
        hero_url: str | None = None,
        hero_type: str | None = None,
        youtube_url: str | None = None,
    ) -> SiteSettings:
        if hero_type is not None and hero_type not in ("image", "video"):
            raise ValidationError("hero_type must be 'image' or 'video'")

        def mutate(snapshot: Snapshot) -> SiteSettings:
            if hero_url:
                snapshot.settings.hero_url = hero_url
            if hero_type:
                snapshot.settings.hero_type = hero_type
            if youtube_url:
                snapshot.settings.youtube_url = youtube_url
            return snapshot.settings.model_copy()

        return await self.store.commit(mutate)
