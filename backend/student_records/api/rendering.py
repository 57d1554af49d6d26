"""View Renderer: roster page through auto-escaping Jinja2 templates.

Invariants:
    - Student fields are always escaped; nothing is string-built into markup
    - An empty roster renders the empty-state row, never an error
"""

from pathlib import Path
from typing import Sequence

from fastapi import Request, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from student_records.schemas.student import StudentRead

PACKAGE_DIR = Path(__file__).resolve().parent.parent
TEMPLATES_DIR = PACKAGE_DIR / "templates"
STATIC_DIR = PACKAGE_DIR / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render_roster(
    request: Request,
    students: Sequence[StudentRead],
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    """Render the roster page with the add-student form."""
    return templates.TemplateResponse(
        request, "index.html", {"students": students}, status_code=status_code,
    )
