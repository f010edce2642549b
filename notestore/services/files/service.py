import logging
from pathlib import Path

from notestore.core.config import settings
from notestore.core.errors import Forbidden, NotFound, Unauthorized
from notestore.db.store import EntityStore
from notestore.models.entities import Note
from notestore.paywall import AccessContext, DenyReason, NoteFile, decide_access, resolve_note_file
from notestore.services.auth.identity import RequestIdentity
from notestore.services.entitlements.service import EntitlementService

logger = logging.getLogger(__name__)


class NoteFileService:
    """Отдаёт содержимое заметки только владельцу; заметка адресуется по id."""

    def __init__(
        self,
        store: EntityStore,
        entitlements: EntitlementService,
        notes_dir: str | Path | None = None,
    ) -> None:
        self.store = store
        self.entitlements = entitlements
        self.notes_dir = Path(notes_dir or settings.notes_dir)

    async def _authorize(self, identity: RequestIdentity | None, note_id: int) -> Note:
        user_id = identity.user_id if identity else None
        owns = bool(user_id) and await self.entitlements.has_access(user_id, note_id)
        decision = decide_access(AccessContext(user_id=user_id, note_id=note_id, owns_note=owns))
        if not decision.allowed:
            if decision.reason is DenyReason.UNAUTHENTICATED:
                raise Unauthorized()
            logger.info("note_access_denied", extra={"user_id": user_id, "note_id": note_id})
            raise Forbidden("Access denied")

        snapshot = await self.store.load()
        note = snapshot.find_note(note_id)
        if note is None:
            raise NotFound("Note not found")
        return note

    async def get_viewable_note(self, identity: RequestIdentity | None, note_id: int) -> Note:
        """Данные для страницы чтения (ссылка или файл по id)."""
        return await self._authorize(identity, note_id)

    async def stream_note(self, identity: RequestIdentity | None, note_id: int) -> NoteFile:
        note = await self._authorize(identity, note_id)
        return resolve_note_file(note, self.notes_dir)
