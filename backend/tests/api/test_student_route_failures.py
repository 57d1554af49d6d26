"""Store Failures at the Route Boundary: fixed messages, no leaks, no crashes.

Invariants:
    - list failures → 500 "Error loading students" (HTML) / {"error": "Error fetching students"}
    - insert failures → 500 "Failed to add student", including driver errors
      outside SQLAlchemy's hierarchy
    - Ages beyond the INTEGER column are rejected before the store is reached
    - Internal error detail never appears in the response body
    - Repeated failures leave the pool with zero checked-out connections
"""

import pytest
from sqlalchemy import text

from student_records.api.dependencies import get_student_repository
from student_records.core.errors import QueryFailureError, StoreUnavailableError
from student_records.infrastructure.student_repository import SqlStudentRepository
from tests.fakes import FailingRepository

STORE_ERRORS = [
    StoreUnavailableError("connection refused by 10.0.0.5", "list_students"),
    QueryFailureError("syntax error near SELEC", "list_students"),
]


@pytest.fixture(params=STORE_ERRORS, ids=["store_unavailable", "query_failure"])
def failing(request, app):
    """Repository raising each store error the pool can produce."""
    repo = FailingRepository(request.param)
    app.dependency_overrides[get_student_repository] = lambda: repo
    return repo


class OverflowingRepository(SqlStudentRepository):
    """Real repository that hands the driver an age no INTEGER column holds."""

    async def insert(self, name: str, age: int, classroom: str) -> int:
        return await super().insert(name, age * 10**20, classroom)


@pytest.fixture
def overflowing(app, db):
    repo = OverflowingRepository(db)
    app.dependency_overrides[get_student_repository] = lambda: repo
    return repo


async def test_roster_page_failure(client, failing):
    """GET / answers the plain-text load error."""
    res = await client.get("/")
    assert res.status_code == 500
    assert res.text == "Error loading students"


async def test_api_list_failure(client, failing):
    """GET /api/students answers the JSON fetch error."""
    res = await client.get("/api/students")
    assert res.status_code == 500
    assert res.json() == {"error": "Error fetching students"}


async def test_form_create_failure(client, failing):
    """A form post that fails in the store answers plain text, once."""
    res = await client.post(
        "/add-student", data={"name": "John", "age": "15", "classroom": "10A"},
    )
    assert res.status_code == 500
    assert res.text == "Failed to add student"
    assert failing.calls == 1


async def test_json_create_failure(client, failing):
    """A JSON post that fails in the store answers an error object."""
    res = await client.post(
        "/add-student", json={"name": "John", "age": 15, "classroom": "10A"},
    )
    assert res.status_code == 500
    assert res.json() == {"error": "Failed to add student"}


async def test_failure_detail_not_exposed(client, failing):
    """Hosts and SQL fragments from the cause stay in the logs."""
    res = await client.get("/api/students")
    assert "10.0.0.5" not in res.text
    assert "SELEC" not in res.text


async def test_huge_json_age_rejected_before_store(client):
    """An age past the INTEGER range is a 400, not a driver failure."""
    res = await client.post(
        "/add-student", json={"name": "Big", "age": 10**20, "classroom": "1A"},
    )
    assert res.status_code == 400
    assert res.json() == {"error": "All fields are required"}
    assert (await client.get("/api/students")).json() == []


async def test_huge_form_age_rejected_before_store(client):
    """The form path applies the same INTEGER bound."""
    res = await client.post(
        "/add-student",
        data={"name": "Big", "age": "100000000000000000000", "classroom": "1A"},
    )
    assert res.status_code == 400
    assert res.text == "All fields are required"


async def test_driver_overflow_on_form_post_gets_fixed_message(client, db, overflowing):
    """A non-SQLAlchemy driver error still becomes the plain-text create error."""
    res = await client.post(
        "/add-student", data={"name": "Big", "age": "15", "classroom": "1A"},
    )
    assert res.status_code == 500
    assert res.headers["content-type"].startswith("text/plain")
    assert res.text == "Failed to add student"
    assert db.checked_out == 0


async def test_driver_overflow_on_json_post_gets_fixed_message(client, db, overflowing):
    """The JSON flow answers {"error": ...}, not the catch-all envelope."""
    res = await client.post(
        "/add-student", json={"name": "Big", "age": 15, "classroom": "1A"},
    )
    assert res.status_code == 500
    assert res.json() == {"error": "Failed to add student"}
    assert db.checked_out == 0


async def _drop_students_table(db):
    async with db.connection("test_drop") as conn:
        await conn.execute(text("DROP TABLE students"))
        await conn.commit()


async def test_real_store_failures_do_not_leak_connections(client, db):
    """More failed listings than the pool holds still leave nothing checked out."""
    await _drop_students_table(db)
    for _ in range(db.capacity + 5):
        res = await client.get("/api/students")
        assert res.status_code == 500
        assert res.json() == {"error": "Error fetching students"}
    assert db.checked_out == 0
    assert db.waiting == 0


async def test_real_insert_failures_do_not_leak_connections(client, db):
    """Failed inserts release their connections and the pool stays healthy."""
    await _drop_students_table(db)
    for _ in range(db.capacity + 5):
        res = await client.post(
            "/add-student", json={"name": "John", "age": 15, "classroom": "10A"},
        )
        assert res.status_code == 500
    assert db.checked_out == 0
    assert await db.health_check() is True


async def test_service_keeps_answering_after_failures(client, db):
    await _drop_students_table(db)
    await client.get("/")
    res = await client.get("/health")
    assert res.status_code == 200
