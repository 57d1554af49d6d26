"""Student Repository: the only code that reads or writes the students table.

Invariants:
    - Every statement is a parameterized SQLAlchemy expression (no string-built SQL)
    - One pooled connection and one statement per operation; release on every path
    - list_all() orders by created_at DESC, id DESC and returns [] for an empty table
    - insert() commits immediately; no transaction spans more than one statement
"""

import logging

from sqlalchemy import insert, select

from student_records.infrastructure.database import DatabaseSessionManager
from student_records.models.student import Student
from student_records.schemas.student import StudentRead

logger = logging.getLogger(__name__)


class SqlStudentRepository:
    """StudentRepository backed by the pooled SQL store."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    async def list_all(self) -> list[StudentRead]:
        query = select(Student.__table__).order_by(
            Student.created_at.desc(), Student.id.desc(),
        )
        async with self._db.connection("list_students") as conn:
            result = await conn.execute(query)
            rows = result.mappings().all()
        return [StudentRead.model_validate(dict(row)) for row in rows]

    async def insert(self, name: str, age: int, classroom: str) -> int:
        stmt = insert(Student).values(name=name, age=age, classroom=classroom)
        async with self._db.connection("insert_student") as conn:
            result = await conn.execute(stmt)
            student_id = result.inserted_primary_key[0]
            await conn.commit()
        logger.info("Student added", extra={"student_id": student_id})
        return student_id
