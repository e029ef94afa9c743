from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from alembic import command
from alembic.config import Config
from dotenv import load_dotenv
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .db import Database
from .errors import register_exception_handlers
from .middleware import SecurityHeadersMiddleware
from .routers import (
    auth,
    community,
    content,
    journal,
    meditations,
    moods,
    reminders,
    reports,
    resources,
    system,
    users,
    water,
)
from .seed import ensure_seed_data
from .settings import Settings

load_dotenv()

logging.basicConfig(level="INFO")
logger = logging.getLogger(__name__)

API_PREFIX = "/api"


def _alembic_config(database_url: str) -> Config:
    base_dir = Path(__file__).resolve().parent.parent
    cfg = Config(str(base_dir / "alembic.ini"))
    cfg.set_main_option("script_location", str(base_dir / "alembic"))
    # Escape % for configparser interpolation
    cfg.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    return cfg


def run_migrations(database_url: str) -> None:
    logger.info("run_migrations: Upgrading schema to head...")
    try:
        command.upgrade(_alembic_config(database_url), "head")
    except Exception as e:
        logger.error(f"run_migrations: Error occurred: {e}", exc_info=True)
        raise
    logger.info("run_migrations: Completed successfully.")


def run_startup_tasks(settings: Settings, database: Database) -> None:
    logger.info("run_startup_tasks: Starting...")
    if settings.run_migrations:
        run_migrations(settings.database_url)
    else:
        logger.info("run_startup_tasks: Migrations disabled, skipping.")
    session = database.session()
    try:
        ensure_seed_data(session)
    finally:
        session.close()
    logger.info("Startup tasks completed.")


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """
    Build the API application.

    ``database`` may be supplied to share an already-initialized pool (tests);
    otherwise one is created from ``settings`` when the app starts.
    """
    settings = settings or Settings.from_env()
    logging.getLogger().setLevel(settings.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting application...")
        db = database or Database(settings)
        app.state.db = db
        # Server won't accept requests until these complete
        run_startup_tasks(settings, db)
        logger.info("MindHaven API server ready")
        yield
        logger.info("Shutting down application...")
        db.dispose()

    app = FastAPI(
        title="MindHaven API",
        version="1.0.0",
        description="Mental-wellness backend: journaling, mood and water tracking, reminders, and a community forum",
        lifespan=lifespan,
    )
    app.state.settings = settings

    if "*" in settings.cors_origins:
        logger.warning(
            "CORS is configured to allow all origins. "
            "This is insecure for production. Set CORS_ORIGINS to specific domains."
        )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Accept", "Origin", "X-Requested-With"],
        max_age=600,
    )
    app.add_middleware(SecurityHeadersMiddleware)

    register_exception_handlers(app)

    api = APIRouter(prefix=API_PREFIX)
    api.include_router(system.router)
    api.include_router(auth.router)
    api.include_router(users.router)
    api.include_router(community.router)
    api.include_router(reports.router)
    api.include_router(journal.router)
    api.include_router(moods.router)
    api.include_router(water.router)
    api.include_router(reminders.router)
    api.include_router(meditations.router)
    api.include_router(resources.router)
    api.include_router(content.router)
    app.include_router(api)

    return app


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "mindhaven.main:create_app",
        factory=True,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )
