"""Student Records API: FastAPI application factory and entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map StudentRecordsError → structured JSON responses
    - Pool opened, verified and schema ensured in the lifespan before traffic;
      any failure there aborts startup
    - Pool and repository live on app.state and are closed on shutdown

Design Decisions:
    - create_app(settings) factory: tests and the server build the same app
      from explicit settings instead of module globals
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from student_records.api.error_handlers import register_error_handlers
from student_records.api.rendering import STATIC_DIR
from student_records.api.routes import health, students
from student_records.config import Settings, get_settings
from student_records.core.errors import StudentRecordsError
from student_records.infrastructure.database import DatabaseSessionManager
from student_records.infrastructure.observability import setup_logging
from student_records.infrastructure.schema import ensure_schema
from student_records.infrastructure.student_repository import SqlStudentRepository

logger = logging.getLogger(__name__)


def build_db_manager(settings: Settings) -> DatabaseSessionManager:
    return DatabaseSessionManager(
        settings.sqlalchemy_url(),
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        queue_limit=settings.db_queue_limit,
        pool_recycle=settings.db_pool_recycle,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    db = build_db_manager(settings)
    try:
        await db.open()
        await ensure_schema(db)
    except StudentRecordsError as e:
        logger.critical(
            f"Database initialization failed: {e.message}",
            extra={"error_code": e.code},
        )
        await db.close()
        raise
    app.state.db = db
    app.state.students = SqlStudentRepository(db)
    logger.info("Student Records API started")
    try:
        yield
    finally:
        logger.info("Student Records API shutting down")
        app.state.students = None
        app.state.db = None
        await db.close()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        title="Student Records API", version="1.0.0", lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = None
    app.state.students = None

    register_error_handlers(app)
    app.include_router(health.router)
    app.include_router(students.router)
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    return app


app = create_app()
