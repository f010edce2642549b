"""
Catalog browsing, the buyer dashboard and gated reading of purchased notes.
Purchased content is addressed by note id only. Public listings carry
NoteSummary; the link and stored file name appear only on /read/{id}.
"""
from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse

from notestore.api.deps import get_identity, get_services, require_identity
from notestore.models.entities import Note
from notestore.schemas.catalog import NoteSummary
from notestore.services.auth.identity import RequestIdentity
from notestore.services.container import Services

router = APIRouter(tags=["store"])


@router.get("/")
async def home(services: Services = Depends(get_services)):
    page = await services.catalog.home()
    page["notes"] = [NoteSummary.from_note(n) for n in page["notes"]]
    return page


@router.get("/store")
async def store(
    search: str | None = Query(None),
    category: str | None = Query(None),
    services: Services = Depends(get_services),
):
    notes = await services.catalog.list_notes(search=search, category=category)
    return {
        "notes": [NoteSummary.from_note(n) for n in notes],
        "categories": await services.catalog.categories(),
        "active_filter": category or "All",
        "search": search or "",
    }


@router.get("/notes/{note_id}", response_model=NoteSummary)
async def note_detail(note_id: int, services: Services = Depends(get_services)):
    """Карточка заметки в каталоге (без содержимого)."""
    return NoteSummary.from_note(await services.catalog.get_note(note_id))


@router.get("/dashboard")
async def dashboard(
    identity: RequestIdentity = Depends(require_identity),
    services: Services = Depends(get_services),
):
    notes = await services.entitlements.purchased_notes(identity.user_id)
    return {"is_admin": identity.is_admin, "my_notes": [NoteSummary.from_note(n) for n in notes]}


@router.get("/read/{note_id}", response_model=Note)
async def read_note(
    note_id: int,
    identity: RequestIdentity | None = Depends(get_identity),
    services: Services = Depends(get_services),
):
    return await services.files.get_viewable_note(identity, note_id)


@router.get("/notes/{note_id}/stream")
async def stream_note(
    note_id: int,
    identity: RequestIdentity | None = Depends(get_identity),
    services: Services = Depends(get_services),
):
    note_file = await services.files.stream_note(identity, note_id)
    return FileResponse(
        note_file.path,
        media_type=note_file.media_type,
        filename=note_file.download_name,
        content_disposition_type="inline",
    )
