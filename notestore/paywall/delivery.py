"""
Execution: resolve_note_file(note, notes_dir) -> NoteFile.
Файл ищется только по имени, сохранённому в записи Note; путь от клиента не принимается.
Имя для скачивания строится из названия заметки, сохранённое имя наружу не отдаётся.
"""
from __future__ import annotations

import logging
import mimetypes
import re
from pathlib import Path

from notestore.core.errors import NotFound
from notestore.models.entities import Note
from notestore.paywall.models import NoteFile

logger = logging.getLogger(__name__)

DEFAULT_MEDIA_TYPE = "application/pdf"
_SLUG_STRIP = re.compile(r"[^a-z0-9]+")


def download_name(note: Note) -> str:
    """Имя файла для Content-Disposition: slug названия + расширение сохранённого файла.

    "Contract Law", x7f3.pdf -> contract-law.pdf; без латиницы в названии -> note-<id>.pdf
    """
    slug = _SLUG_STRIP.sub("-", note.title.lower()).strip("-")[:80].rstrip("-")
    suffix = Path(note.file_name).suffix.lower()
    if not re.fullmatch(r"\.[a-z0-9]{1,8}", suffix):
        suffix = ""
    return (slug or f"note-{note.id}") + suffix


def resolve_note_file(note: Note, notes_dir: str | Path) -> NoteFile:
    if note.file_type != "file" or not note.file_name:
        raise NotFound("Note has no stored file")

    base = Path(notes_dir).resolve()
    name = note.file_name
    # Только простое имя файла внутри notes_dir
    if Path(name).name != name or name in (".", ".."):
        logger.warning("note_file_name_rejected", extra={"note_id": note.id})
        raise NotFound("File not found")
    path = (base / name).resolve()
    if path.parent != base or not path.is_file():
        raise NotFound("File not found")

    media_type = mimetypes.guess_type(name)[0] or DEFAULT_MEDIA_TYPE
    return NoteFile(path=path, media_type=media_type, download_name=download_name(note))
