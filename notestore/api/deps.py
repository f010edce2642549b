"""
FastAPI dependencies: services container, request-scoped identity, role policy.
Identity is resolved once per request from the signed session cookie
(or an "Authorization: Bearer <token>" header for API clients).
"""
from fastapi import Depends, Request

from notestore.core.config import settings
from notestore.core.errors import Forbidden, Unauthorized
from notestore.services.auth.identity import RequestIdentity
from notestore.services.container import Services


def get_services(request: Request) -> Services:
    return request.app.state.services


def _session_token(request: Request) -> str | None:
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        return token
    auth = request.headers.get("Authorization", "")
    if auth.lower().startswith("bearer "):
        return auth[7:].strip() or None
    return None


async def get_identity(
    request: Request,
    services: Services = Depends(get_services),
) -> RequestIdentity | None:
    user_id = services.tokens.resolve(_session_token(request))
    if not user_id:
        return None
    user = await services.users.get(user_id)
    # Удалённый или забаненный пользователь - как будто сессии нет
    if user is None or user.is_banned:
        return None
    return RequestIdentity.from_user(user)


async def require_identity(identity: RequestIdentity | None = Depends(get_identity)) -> RequestIdentity:
    if identity is None:
        raise Unauthorized()
    return identity


async def require_admin(identity: RequestIdentity = Depends(require_identity)) -> RequestIdentity:
    if not identity.is_admin:
        raise Forbidden("Admin role required")
    return identity
