"""Rollcall API: application object, startup/shutdown and router registration.

Invariants:
    - Every router is listed by hand in ROUTERS (no discovery)
    - The engine and the per-event lock registry are created inside the lifespan,
      on the event loop that serves requests, and the engine is disposed on shutdown
    - Allowed CORS origins come from settings

Design Decisions:
    - Lifespan context manager instead of @app.on_event hooks
    - Exception handlers live in api/error_handlers.py and are installed last
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rollcall.api.error_handlers import register_error_handlers
from rollcall.api.routes import availability, candidates, events, health, maintenance
from rollcall.config import get_settings
from rollcall.infrastructure.database import init_db
from rollcall.infrastructure.event_locks import init_event_locks
from rollcall.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)

ROUTERS = (
    health.router,
    availability.router,
    candidates.router,
    events.router,
    maintenance.router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    init_event_locks(settings.ledger_lock_timeout_seconds)
    logger.info(
        f"Rollcall API ready (lock timeout {settings.ledger_lock_timeout_seconds}s, "
        f"max attempts {settings.ledger_max_attempts})",
    )
    try:
        yield
    finally:
        await manager.dispose()
        logger.info("Rollcall API stopped")


app = FastAPI(title="Rollcall API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

for router in ROUTERS:
    app.include_router(router)

register_error_handlers(app)
