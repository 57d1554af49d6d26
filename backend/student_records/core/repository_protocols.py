"""Boundary Protocols: contracts between request handlers and persistence.

Invariants:
    - Handlers depend on StudentRepository, never on the SQL implementation
    - Implementations provided by infrastructure via dependency injection
"""

from typing import Protocol

from student_records.schemas.student import StudentRead


class StudentRepository(Protocol):
    """Contract for student persistence: implemented by infrastructure."""
    async def list_all(self) -> list[StudentRead]: ...
    async def insert(self, name: str, age: int, classroom: str) -> int: ...
