"""Student ORM: the only persisted entity, append-only.

Invariants:
    - id is an auto-increment integer primary key, assigned by the store
    - name, age, classroom are non-nullable
    - created_at defaults to the store's current time (server-side)
    - No update or delete path exists anywhere in the service

Design Decisions:
    - server_default=func.now() over a Python default: the store stamps the row,
      matching CURRENT_TIMESTAMP on MySQL and SQLite alike
    - Composite index on (created_at, id): the listing orders by both
"""

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from student_records.db.base import Base


class Student(Base):
    """A student entry on the roster."""
    __tablename__ = "students"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    classroom: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(),
    )

    __table_args__ = (
        Index("ix_students_created_at_id", "created_at", "id"),
    )
