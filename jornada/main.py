import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

# Load env from the working directory's .env
if "PYTEST_CURRENT_TEST" not in os.environ:
    load_dotenv()

from jornada.core.config import settings, validate_config
from jornada.core.logging import configure_logging
from jornada.core.middleware.request_id import RequestIdMiddleware
from jornada.core.errors import (
    AppError,
    app_error_handler,
    http_error_handler,
    unhandled_exception_handler,
)
from jornada.core.storage import get_store
from jornada.features.lifecycle.service import on_launch
from jornada.api import backup, gamification, gratitude, health, lifecycle, progress, today

configure_logging(settings.ENV)
validate_config(strict=getattr(settings, "CONFIG_STRICT", False))


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = logging.getLogger("jornada")
    logger.info("Starting Jornada backend...")
    try:
        on_launch(get_store())
    except Exception:
        # best-effort
        logger.error("lifecycle.launch.failed", exc_info=True)
    try:
        yield
    finally:
        logger.info("Stopping Jornada backend...")


app = FastAPI(title="Jornada Bíblica - Backend", lifespan=lifespan)

# Middlewares
app.add_middleware(RequestIdMiddleware)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(HTTPException, http_error_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.root_router, tags=["health"])
app.include_router(progress.router, tags=["progress"])
app.include_router(today.router, tags=["today"])
app.include_router(gamification.router, tags=["gamification"])
app.include_router(gratitude.router, tags=["gratitude"])
app.include_router(backup.router, tags=["backup"])
app.include_router(lifecycle.router, tags=["lifecycle"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("jornada.main:app", host="127.0.0.1", port=int(os.getenv("PORT", "8000")))
