"""
Admin API: catalog notes, gallery, hero settings, users.
Role policy is applied once for the whole router (require_admin).
"""
from fastapi import APIRouter, Body, Depends

from notestore.api.deps import get_services, require_admin
from notestore.models.entities import GalleryItem, Note, SiteSettings
from notestore.schemas.catalog import GalleryCreate, HeroUpdate, NoteCreate
from notestore.schemas.users import ChangePasswordRequest, UserOut
from notestore.services.auth.identity import RequestIdentity
from notestore.services.container import Services

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/dashboard")
async def dashboard(services: Services = Depends(get_services)):
    snapshot = await services.store.load()
    users = await services.users.list_users()
    return {
        "all_users": [UserOut.from_user(u) for u in users],
        "all_notes": snapshot.notes,
        "gallery": snapshot.gallery,
        "settings": snapshot.settings,
    }


# ---------- Notes ----------
@router.post("/notes", response_model=Note, status_code=201)
async def add_note(body: NoteCreate = Body(...), services: Services = Depends(get_services)):
    return await services.catalog.add_note(
        body.title,
        body.category,
        body.price,
        file_name=body.file_name,
        file_link=body.file_link,
    )


@router.delete("/notes/{note_id}")
async def delete_note(note_id: int, services: Services = Depends(get_services)):
    await services.catalog.delete_note(note_id)
    return {"status": "ok"}


# ---------- Gallery & hero ----------
@router.post("/gallery", response_model=GalleryItem, status_code=201)
async def add_gallery(body: GalleryCreate = Body(...), services: Services = Depends(get_services)):
    return await services.catalog.add_gallery_item(body.url)


@router.delete("/gallery/{item_id}")
async def delete_gallery(item_id: int, services: Services = Depends(get_services)):
    await services.catalog.delete_gallery_item(item_id)
    return {"status": "ok"}


@router.put("/hero", response_model=SiteSettings)
async def update_hero(body: HeroUpdate = Body(...), services: Services = Depends(get_services)):
    return await services.catalog.update_hero(body.hero_url, body.hero_type, body.youtube_url)


# ---------- Users ----------
@router.post("/users/{user_id}/toggle-ban", response_model=UserOut)
async def toggle_ban(user_id: str, services: Services = Depends(get_services)):
    user = await services.users.toggle_ban(user_id)
    return UserOut.from_user(user)


@router.delete("/users/{user_id}")
async def delete_user(user_id: str, services: Services = Depends(get_services)):
    await services.users.delete_user(user_id)
    return {"status": "ok"}


@router.post("/change-password")
async def change_password(
    body: ChangePasswordRequest = Body(...),
    identity: RequestIdentity = Depends(require_admin),
    services: Services = Depends(get_services),
):
    await services.users.change_password(identity.user_id, body.new_password)
    return {"status": "ok"}
