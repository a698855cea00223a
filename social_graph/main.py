"""Application entry point for the relationship backend."""
from __future__ import annotations

import asyncio
import logging
import os
from typing import Iterable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .database import create_session, init_db
from .routers import auth_router, friends_router, profiles_router, users_router
from .services import StorageError, run_consistency_sweep

logger = logging.getLogger(__name__)

settings = get_settings()
APP_NAME = settings.app_name
API_VERSION = settings.api_version
SWEEP_INTERVAL_MINUTES = settings.consistency_sweep_minutes
DISABLE_SWEEP = SWEEP_INTERVAL_MINUTES == 0 or os.getenv("PYTEST_CURRENT_TEST") is not None

app = FastAPI(title=APP_NAME, version=API_VERSION)

cors_origins = os.getenv("CORS_ORIGINS")
if cors_origins:
    origins: Iterable[str] = [origin.strip() for origin in cors_origins.split(",") if origin.strip()]
else:
    origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(users_router)
app.include_router(friends_router)
app.include_router(profiles_router)

_sweep_task: asyncio.Task[None] | None = None
_sweep_stop = asyncio.Event()


async def _run_sweep_once() -> None:
    """Execute a single follow-graph sweep in a worker thread."""

    try:
        await asyncio.to_thread(run_consistency_sweep, create_session)
    except StorageError:
        logger.exception("Scheduled follow-graph sweep failed")
    except Exception:
        logger.exception("Unexpected error during follow-graph sweep")


async def _sweep_loop() -> None:
    while not _sweep_stop.is_set():
        await _run_sweep_once()
        try:
            await asyncio.wait_for(_sweep_stop.wait(), timeout=SWEEP_INTERVAL_MINUTES * 60)
        except asyncio.TimeoutError:
            continue


@app.on_event("startup")
async def _startup() -> None:
    """Ensure database schema and the optional sweep are ready before serving."""

    try:
        init_db()
    except Exception:
        logger.exception("Database initialisation failed")
        raise

    if DISABLE_SWEEP:
        logger.info("Follow-graph sweep disabled")
        return

    global _sweep_task
    if _sweep_task is None or _sweep_task.done():
        _sweep_stop.clear()
        _sweep_task = asyncio.create_task(_sweep_loop())
        logger.info("Follow-graph sweep scheduled every %d minutes", SWEEP_INTERVAL_MINUTES)


@app.on_event("shutdown")
async def _shutdown() -> None:
    if _sweep_task is None:
        return

    _sweep_stop.set()
    await _sweep_task


@app.get("/api", tags=["system"])
def api_info() -> dict[str, str]:
    return {"service": APP_NAME, "version": API_VERSION}


@app.get("/health", tags=["system"])
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
