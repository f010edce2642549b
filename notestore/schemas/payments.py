from pydantic import BaseModel, Field, StrictInt


class CreateOrderRequest(BaseModel):
    # Сумма в рупиях; сверяется с корзиной на сервере
    amount: StrictInt


class VerifyPaymentRequest(BaseModel):
    """Поля callback'а Razorpay Checkout; подпись проверяется при payment_signature_required."""

    razorpay_order_id: str = ""
    razorpay_payment_id: str = ""
    razorpay_signature: str = ""


class VerifyPaymentResponse(BaseModel):
    status: str = "success"
    state: str
    granted: list[int] = Field(default_factory=list)
    total: int = 0
