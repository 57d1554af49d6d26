"""Student Routes: roster page, JSON listing, and the create form/API.

Invariants:
    - Validation runs before the repository is touched; a 400 never mutates the store
    - Store failures answer with a fixed per-endpoint message; the cause is logged only
    - HTML mode redirects (302) after create; API mode answers 201 with a message
    - Routes hold no state; the repository arrives through a dependency

Design Decisions:
    - Body read by hand (form or JSON) instead of a Pydantic body parameter:
      both encodings share one validation path and one error message
    - Content negotiation driven by settings.response_mode ("auto" inspects the request)
"""

import json
import logging
from typing import Any, Mapping

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import (
    JSONResponse, PlainTextResponse, RedirectResponse, Response,
)
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from student_records.api.dependencies import get_app_settings, get_student_repository
from student_records.api.rendering import render_roster
from student_records.config import Settings
from student_records.core.errors import FieldValidationError, StudentRecordsError
from student_records.core.repository_protocols import StudentRepository
from student_records.schemas.student import parse_student_form

logger = logging.getLogger(__name__)
router = APIRouter(tags=["students"])

LOAD_ERROR_MESSAGE = "Error loading students"
FETCH_ERROR_MESSAGE = "Error fetching students"
CREATE_ERROR_MESSAGE = "Failed to add student"
CREATED_MESSAGE = "Student added successfully"


def _is_json_body(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    return content_type.split(";")[0].strip().lower() == "application/json"


def wants_json(request: Request, mode: str) -> bool:
    """Decide whether a request gets API (JSON) or HTML-flow responses."""
    if mode != "auto":
        return mode == "json"
    if _is_json_body(request):
        return True
    accept = request.headers.get("accept", "").lower()
    return "application/json" in accept and "text/html" not in accept


async def _read_body(request: Request) -> Mapping[str, Any]:
    if _is_json_body(request):
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Malformed JSON body", extra={"path": request.url.path})
            return {}
        return payload if isinstance(payload, dict) else {}
    try:
        return await request.form()
    except (StarletteHTTPException, MultiPartException) as e:
        logger.warning(
            f"Unparseable form body: {e}", extra={"path": request.url.path},
        )
        return {}


def _error(message: str, status_code: int, as_json: bool) -> Response:
    if as_json:
        return JSONResponse(status_code=status_code, content={"error": message})
    return PlainTextResponse(message, status_code=status_code)


@router.get("/")
async def roster_page(
    request: Request,
    students: StudentRepository = Depends(get_student_repository),
):
    """Render the roster with the add-student form."""
    try:
        rows = await students.list_all()
    except StudentRecordsError as e:
        logger.error(
            f"Error fetching students: {e.message}",
            extra={"error_code": e.code, "path": request.url.path},
        )
        return PlainTextResponse(
            LOAD_ERROR_MESSAGE, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return render_roster(request, rows)


@router.get("/api/students")
async def list_students(
    request: Request,
    students: StudentRepository = Depends(get_student_repository),
):
    """Return all students, newest first."""
    try:
        rows = await students.list_all()
    except StudentRecordsError as e:
        logger.error(
            f"Error fetching students: {e.message}",
            extra={"error_code": e.code, "path": request.url.path},
        )
        return _error(FETCH_ERROR_MESSAGE, status.HTTP_500_INTERNAL_SERVER_ERROR, True)
    return [row.model_dump(mode="json") for row in rows]


@router.post("/add-student")
async def add_student(
    request: Request,
    students: StudentRepository = Depends(get_student_repository),
    settings: Settings = Depends(get_app_settings),
):
    """Validate and persist a new student."""
    as_json = wants_json(request, settings.response_mode)
    try:
        body = await _read_body(request)
        new_student = parse_student_form(body)
    except FieldValidationError as e:
        logger.warning(
            f"Rejected student: missing {', '.join(e.fields)}",
            extra={"error_code": e.code, "path": request.url.path},
        )
        return _error(e.message, status.HTTP_400_BAD_REQUEST, as_json)

    try:
        student_id = await students.insert(
            new_student.name, new_student.age, new_student.classroom,
        )
    except StudentRecordsError as e:
        logger.error(
            f"Error creating student: {e.message}",
            extra={"error_code": e.code, "path": request.url.path},
        )
        return _error(CREATE_ERROR_MESSAGE, status.HTTP_500_INTERNAL_SERVER_ERROR, as_json)

    if as_json:
        return JSONResponse(
            status_code=status.HTTP_201_CREATED,
            content={"message": CREATED_MESSAGE, "id": student_id},
        )
    return RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)
