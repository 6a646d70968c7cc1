"""Mentorflow API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map MentorflowError → {success: false, error, code}
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup and disposed on shutdown via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Generated notebooks served from notebook_output_dir under /notebooks,
      mounted after the API routers so /api/* takes precedence
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from mentorflow.api.error_handlers import register_error_handlers
from mentorflow.api.routes import agent, drafts, health, mentor, messages, students
from mentorflow.config import get_settings
from mentorflow.infrastructure.database import init_db
from mentorflow.infrastructure.observability import setup_logging

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
    Path(settings.notebook_output_dir).mkdir(parents=True, exist_ok=True)
    logger.info("Mentorflow API started")
    yield
    await manager.dispose()
    logger.info("Mentorflow API shutting down")


app = FastAPI(title="Mentorflow API", version="0.1.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(messages.router)
app.include_router(drafts.router)
app.include_router(students.router)
app.include_router(agent.router)
app.include_router(mentor.router)

app.mount(
    "/notebooks",
    StaticFiles(directory=settings.notebook_output_dir, check_dir=False),
    name="notebooks",
)

register_error_handlers(app)
