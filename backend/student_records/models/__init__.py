"""ORM Models: imported here so Base.metadata is populated before create_all."""

from student_records.models.student import Student  # noqa: F401
