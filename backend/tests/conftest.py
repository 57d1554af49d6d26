"""Root conftest: temp SQLite store, pool manager and app client fixtures.

Invariants:
    - Every test gets a fresh SQLite file database under tmp_path
    - Tests never reach a real MySQL server (DATABASE_URL forced to SQLite)
    - app.state is wired by hand: httpx ASGITransport does not run the lifespan
"""

import os

import pytest
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")

from student_records.config import Settings  # noqa: E402
from student_records.infrastructure.schema import ensure_schema  # noqa: E402
from student_records.infrastructure.student_repository import SqlStudentRepository  # noqa: E402
from student_records.main import build_db_manager, create_app  # noqa: E402


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'students.db'}",
        log_format="text",
    )


@pytest.fixture
async def db(settings):
    manager = build_db_manager(settings)
    await manager.open()
    await ensure_schema(manager)
    yield manager
    await manager.close()


@pytest.fixture
def repository(db):
    return SqlStudentRepository(db)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
async def client(app, db, repository):
    """Test client over the real repository and pool."""
    app.state.db = db
    app.state.students = repository
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()
