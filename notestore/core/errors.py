"""
Типизированные ошибки домена. Каждая знает свой HTTP-статус;
перевод в ответ делает обработчик в notestore.main.
"""
from __future__ import annotations


class NoteStoreError(Exception):
    status_code: int = 500
    default_detail: str = "Internal error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFound(NoteStoreError):
    status_code = 404
    default_detail = "Not found"


class Unauthorized(NoteStoreError):
    status_code = 401
    default_detail = "Authentication required"


class Forbidden(NoteStoreError):
    status_code = 403
    default_detail = "Forbidden"


class Conflict(NoteStoreError):
    status_code = 409
    default_detail = "Conflict"


class ValidationError(NoteStoreError):
    status_code = 422
    default_detail = "Invalid input"


class PaymentGatewayError(NoteStoreError):
    status_code = 502
    default_detail = "Payment failed"


class StoreCorrupt(NoteStoreError):
    status_code = 503
    default_detail = "Storage unavailable"
