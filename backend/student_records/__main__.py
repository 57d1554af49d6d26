"""Run the service with uvicorn: ``python -m student_records``."""

import uvicorn

from student_records.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "student_records.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
