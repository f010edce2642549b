from fastapi import APIRouter, Depends, Response

from notestore.api.deps import get_services
from notestore.core.errors import StoreCorrupt
from notestore.services.container import Services


router = APIRouter()


@router.get("/health")
def health() -> dict:
    """Liveness check - always returns 200 if app is running."""
    return {"status": "ok"}


@router.get("/ready")
async def readiness(response: Response, services: Services = Depends(get_services)) -> dict:
    """Readiness check - returns 503 if the data document cannot be read."""
    try:
        await services.store.load()
        return {"status": "ready"}
    except StoreCorrupt as e:
        response.status_code = 503
        return {"status": "not_ready", "error": e.detail}
