"""Campus Ambassador API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CampusError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database connectivity verified on startup; failure stops the process
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import campus_api.models  # noqa: F401
from campus_api.api.error_handlers import register_error_handlers
from campus_api.api.routes import auth, ca, dashboard, health, tasks
from campus_api.config import get_settings
from campus_api.infrastructure.database import init_db
from campus_api.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_dsn,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if not await manager.health_check():
        logger.critical("Database connection failed, shutting down")
        raise SystemExit(1)
    logger.info(f"Campus API started (database: {settings.database_name})")
    yield
    await manager.dispose()
    logger.info("Campus API shutting down")


app = FastAPI(
    title="Campus Ambassador API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(ca.router)
app.include_router(dashboard.router)
app.include_router(tasks.router)

register_error_handlers(app)
