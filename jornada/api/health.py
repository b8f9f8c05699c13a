"""Health endpoints: liveness plus a readiness check that touches the store."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from jornada.core.config import settings
from jornada.core.errors import StorageError
from jornada.core.storage import DurableStore, get_store
from jornada.models.progress import COMPLETED_DAYS_KEY

logger = logging.getLogger("jornada")

root_router = APIRouter(tags=["health"])


@root_router.get("/healthz")
def healthz():
    """Lightweight liveness check (no deps)."""
    return {"status": "ok"}


@root_router.get("/readyz")
def readyz(store: DurableStore = Depends(get_store)):
    """Readiness check: the durable store answers a read."""
    try:
        store.get(COMPLETED_DAYS_KEY)
    except StorageError as e:
        logger.warning(f"readyz.store_unavailable: {e}")
        return JSONResponse(
            status_code=503,
            content={"ok": False, "store": type(store).__name__, "backend": settings.STORE_BACKEND},
        )
    return {"ok": True, "store": type(store).__name__, "backend": settings.STORE_BACKEND}
