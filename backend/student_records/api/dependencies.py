"""Request Dependencies: hand lifespan-owned objects to route handlers.

Invariants:
    - Objects live on app.state, created and closed by the lifespan
    - Tests swap them through app.dependency_overrides
    - A request served before startup wired the repository gets a 503 from the
      domain error handler, not an unhandled exception
"""

from fastapi import Request

from student_records.config import Settings
from student_records.core.errors import StoreUnavailableError
from student_records.core.repository_protocols import StudentRepository
from student_records.infrastructure.database import DatabaseSessionManager


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_student_repository(request: Request) -> StudentRepository:
    repository = getattr(request.app.state, "students", None)
    if repository is None:
        raise StoreUnavailableError("repository not initialized", "dependency")
    return repository


def get_db_manager(request: Request) -> DatabaseSessionManager | None:
    return getattr(request.app.state, "db", None)
