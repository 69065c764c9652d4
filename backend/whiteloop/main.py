"""Whiteloop API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map WhiteloopError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup and disposed on shutdown via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Schema comes from alembic; auto_create_schema exists for local runs only
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from whiteloop.api.error_handlers import register_error_handlers
from whiteloop.api.routes import (
    applications, health, insights, matches, participants, projects,
    studies, webhooks,
)
from whiteloop.config import get_settings
from whiteloop.infrastructure.database import init_db
from whiteloop.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.auto_create_schema:
        await manager.create_schema()
    logger.info("Whiteloop API started")
    yield
    logger.info("Whiteloop API shutting down")
    await manager.dispose()


app = FastAPI(
    title="Whiteloop API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(participants.router)
app.include_router(projects.router)
app.include_router(studies.router)
app.include_router(applications.router)
app.include_router(matches.router)
app.include_router(webhooks.router)
app.include_router(insights.router)

register_error_handlers(app)
