"""
Decision только: decide_access(ctx) -> AccessDecision.
Чистая функция, без I/O.
"""
from __future__ import annotations

from notestore.paywall.models import AccessContext, AccessDecision, DenyReason


def decide_access(ctx: AccessContext) -> AccessDecision:
    """
    Доступ к содержимому заметки:
    - нет пользователя -> отказ (unauthenticated)
    - заметка не в purchased_notes -> отказ (not_entitled)
    - иначе разрешено
    """
    if ctx.user_id is None:
        return AccessDecision(allowed=False, reason=DenyReason.UNAUTHENTICATED)
    if not ctx.owns_note:
        return AccessDecision(allowed=False, reason=DenyReason.NOT_ENTITLED)
    return AccessDecision(allowed=True)
