from fastapi import APIRouter, Depends

from notestore.api.deps import get_services, require_identity
from notestore.core.config import settings
from notestore.schemas.catalog import CartOut, NoteSummary
from notestore.services.auth.identity import RequestIdentity
from notestore.services.container import Services

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartOut)
async def view_cart(
    identity: RequestIdentity = Depends(require_identity),
    services: Services = Depends(get_services),
):
    view = await services.cart.view_cart(identity.user_id)
    return CartOut(
        items=[NoteSummary.from_note(n) for n in view.items],
        total=view.total,
        razorpay_key=settings.razorpay_key_id,
        currency=settings.payment_currency,
    )


@router.post("/add/{note_id}")
async def add_to_cart(
    note_id: int,
    identity: RequestIdentity = Depends(require_identity),
    services: Services = Depends(get_services),
):
    """Бесплатная заметка выдаётся сразу и в корзину не попадает."""
    outcome = await services.cart.add_to_cart(identity.user_id, note_id)
    return {"outcome": outcome.value}


@router.post("/remove/{note_id}")
async def remove_from_cart(
    note_id: int,
    identity: RequestIdentity = Depends(require_identity),
    services: Services = Depends(get_services),
):
    await services.cart.remove_from_cart(identity.user_id, note_id)
    return {"status": "ok"}
