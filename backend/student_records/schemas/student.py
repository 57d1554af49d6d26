"""Student Schemas: presence/type validation for new entries, read model for listings.

Invariants:
    - name, age, classroom must all be present and non-empty (whitespace-only is empty)
    - age coerces to a positive int that fits the INTEGER column; anything else
      counts as missing
    - Age strings must be integer literals ("25", " 25 "); "25.0" and "25abc" are rejected
    - Every rejection surfaces as FieldValidationError ("All fields are required"),
      never as a distinct "invalid" error
    - Upper age bound (1-100 in the form widget) is NOT enforced server-side

Design Decisions:
    - parse_student_form wraps Pydantic so form bodies and JSON bodies share one path
    - Numbers sent for text fields are stringified (JSON clients send classroom 10)
"""

import re
from datetime import datetime
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from student_records.core.errors import FieldValidationError

REQUIRED_FIELDS = ("name", "age", "classroom")
MAX_AGE = 2_147_483_647  # signed 32-bit INTEGER column

_INTEGER_LITERAL = re.compile(r"[+-]?\d+")


class StudentCreate(BaseModel):
    """Validated input for a new student."""
    name: str = Field(min_length=1)
    age: int = Field(gt=0, le=MAX_AGE)
    classroom: str = Field(min_length=1)

    @field_validator("name", "classroom", mode="before")
    @classmethod
    def normalize_text(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            v = str(v)
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("age", mode="before")
    @classmethod
    def coerce_age(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("age must be a number")
        if isinstance(v, str):
            v = v.strip()
            if not _INTEGER_LITERAL.fullmatch(v):
                raise ValueError("age must be a whole number")
            return int(v)
        return v


class StudentRead(BaseModel):
    """Student as returned by listings."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    age: int
    classroom: str
    created_at: datetime


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def parse_student_form(data: Mapping[str, Any]) -> StudentCreate:
    """Validate a raw form/JSON mapping into a StudentCreate.

    Raises FieldValidationError listing the offending fields when any field
    is absent, blank, or fails coercion.
    """
    missing = [f for f in REQUIRED_FIELDS if _is_blank(data.get(f))]
    if missing:
        raise FieldValidationError(missing)
    try:
        return StudentCreate.model_validate({f: data[f] for f in REQUIRED_FIELDS})
    except ValidationError as e:
        raise FieldValidationError(
            sorted({str(err["loc"][0]) for err in e.errors()}),
        ) from e
