"""
Registration and login (cookie session + bearer token in the body).
Login is rate limited per client IP.
"""
from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response, status

from notestore.api.deps import get_services, require_identity
from notestore.core.config import settings
from notestore.models.entities import User
from notestore.schemas.users import LoginRequest, RegisterRequest, SessionOut, UserOut
from notestore.services.auth.identity import RequestIdentity
from notestore.services.auth.login_rate_limit import get_client_ip, login_limiter
from notestore.services.container import Services

router = APIRouter(prefix="/auth", tags=["auth"])


def _start_session(response: Response, services: Services, user: User) -> SessionOut:
    token = services.tokens.issue(user.id)
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.session_ttl,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite=settings.session_cookie_samesite,
    )
    return SessionOut(access_token=token, user=UserOut.from_user(user))


def _enforce_rate_limit(request: Request) -> str:
    client_ip = get_client_ip(request)
    if not login_limiter.hit(client_ip):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many login attempts. Try again later.",
        )
    return client_ip


@router.post("/register", response_model=SessionOut, status_code=status.HTTP_201_CREATED)
async def register(
    response: Response,
    body: RegisterRequest = Body(...),
    services: Services = Depends(get_services),
):
    """Register and log in right away."""
    user = await services.users.register(body.email, body.password, body.name, body.phone, body.address)
    return _start_session(response, services, user)


@router.post("/login", response_model=SessionOut)
async def login(
    request: Request,
    response: Response,
    body: LoginRequest = Body(...),
    services: Services = Depends(get_services),
):
    client_ip = _enforce_rate_limit(request)
    user = await services.users.authenticate(body.email, body.password)
    login_limiter.reset(client_ip)
    return _start_session(response, services, user)


@router.post("/admin-login", response_model=SessionOut)
async def admin_login(
    request: Request,
    response: Response,
    body: LoginRequest = Body(...),
    services: Services = Depends(get_services),
):
    client_ip = _enforce_rate_limit(request)
    user = await services.users.authenticate_admin(body.email, body.password)
    login_limiter.reset(client_ip)
    return _start_session(response, services, user)


@router.post("/logout")
async def logout(response: Response):
    """Tokens are stateless; dropping the cookie ends the browser session."""
    response.delete_cookie(settings.session_cookie_name)
    return {"message": "Successfully logged out"}


@router.get("/me", response_model=UserOut)
async def me(
    identity: RequestIdentity = Depends(require_identity),
    services: Services = Depends(get_services),
):
    user = await services.users.get(identity.user_id)
    return UserOut.from_user(user)
