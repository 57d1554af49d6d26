"""Error Handlers: last-resort answers for failures that escape a route.

Invariants:
    - StudentRecordsError → its own http_status with the to_response() envelope;
      database-category messages are replaced by a generic one
    - Any other exception → 500 INTERNAL_ERROR, never the exception text

Reached when a dependency fails before the route body runs (no repository
wired yet) or when something outside the domain hierarchy is raised. Routes
translate the failures they expect into their own fixed messages.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from student_records.core.errors import (
    ErrorCategory, ErrorSeverity, StudentRecordsError,
)

logger = logging.getLogger(__name__)

STORE_ERROR_MESSAGE = "Database temporarily unavailable"
INTERNAL_ERROR_MESSAGE = "An unexpected error occurred"


async def student_records_error_handler(
    request: Request, exc: StudentRecordsError,
) -> JSONResponse:
    logger.error(
        f"Request failed outside a route: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    body = exc.to_response()
    if exc.category is ErrorCategory.DATABASE:
        body["error"]["message"] = STORE_ERROR_MESSAGE
    return JSONResponse(status_code=exc.http_status, content=body)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.url.path}",
        exc_info=exc,
        extra={"path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": INTERNAL_ERROR_MESSAGE,
                "category": ErrorCategory.INTERNAL.value,
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the domain and catch-all handlers on the app."""
    app.add_exception_handler(StudentRecordsError, student_records_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
