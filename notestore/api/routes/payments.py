"""
Checkout: order creation in the gateway and verification of the paid order.
verify-payment checks the gateway signature before granting anything
(payment_signature_required, on by default). The order itself is always
checked against the one create-order stored for this user.
"""
import logging

from fastapi import APIRouter, Body, Depends

from notestore.api.deps import get_services, require_identity
from notestore.core.config import settings
from notestore.core.errors import Forbidden
from notestore.schemas.payments import CreateOrderRequest, VerifyPaymentRequest, VerifyPaymentResponse
from notestore.services.auth.identity import RequestIdentity
from notestore.services.container import Services
from notestore.services.payments.gateway import verify_payment_signature

logger = logging.getLogger(__name__)

router = APIRouter(tags=["payments"])


@router.post("/create-order")
async def create_order(
    body: CreateOrderRequest = Body(...),
    identity: RequestIdentity = Depends(require_identity),
    services: Services = Depends(get_services),
):
    order = await services.payments.create_order(identity.user_id, body.amount)
    return order.model_dump()


@router.post("/verify-payment", response_model=VerifyPaymentResponse)
async def verify_payment(
    body: VerifyPaymentRequest | None = Body(None),
    identity: RequestIdentity = Depends(require_identity),
    services: Services = Depends(get_services),
):
    body = body or VerifyPaymentRequest()
    if settings.payment_signature_required and not verify_payment_signature(
        body.razorpay_order_id, body.razorpay_payment_id, body.razorpay_signature
    ):
        logger.warning(
            "payment_signature_invalid",
            extra={"user_id": identity.user_id, "order_id": body.razorpay_order_id},
        )
        raise Forbidden("Invalid payment signature")

    result = await services.payments.verify_payment(identity.user_id, body.razorpay_order_id)
    return VerifyPaymentResponse(state=result.state.value, granted=result.note_ids, total=result.total)
