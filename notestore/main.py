"""
Main FastAPI application for the notes store.
Serves health, auth, catalog, cart, checkout, gated note streaming, admin and metrics.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from notestore.api.routes import admin, auth, cart, health, payments, store
from notestore.core.config import settings
from notestore.core.errors import NoteStoreError
from notestore.core.logging import configure_logging, log_requests
from notestore.services.container import Services, build_services
from notestore.utils.metrics import router as metrics_router

logger = logging.getLogger(__name__)


def create_app(services: Services | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging()
        svc = app.state.services
        # StoreCorrupt здесь фатален: приложение не стартует
        await svc.store.open()
        await svc.users.ensure_admin(settings.admin_email, settings.admin_password)
        yield

    app = FastAPI(
        title="Notes Store API",
        description="Catalog, checkout and access-gated delivery of purchased notes",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.services = services or build_services()

    # CORS
    origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    if not origins:
        origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.middleware("http")(log_requests)

    @app.exception_handler(NoteStoreError)
    async def handle_domain_error(request: Request, exc: NoteStoreError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "request_failed",
                extra={"path": request.url.path, "method": request.method,
                       "status_code": exc.status_code, "error": exc.detail},
            )
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    # Routers
    app.include_router(health.router, tags=["health"])
    app.include_router(auth.router)
    app.include_router(store.router)
    app.include_router(cart.router)
    app.include_router(payments.router)
    app.include_router(admin.router)
    app.include_router(metrics_router)
    return app


app = create_app()
