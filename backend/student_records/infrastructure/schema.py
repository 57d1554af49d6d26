"""Schema Initializer: idempotent creation of the students table.

Invariants:
    - Runs to completion before the app accepts traffic (called from lifespan)
    - Idempotent: existing tables are left untouched (create_all checkfirst)
    - Any failure propagates; startup aborts rather than serving a partial schema
"""

import logging

from student_records.db.base import Base
from student_records.infrastructure.database import DatabaseSessionManager
import student_records.models  # noqa: F401  (registers tables on Base.metadata)

logger = logging.getLogger(__name__)


async def ensure_schema(db: DatabaseSessionManager) -> None:
    """Create all known tables that do not exist yet."""
    async with db.connection("ensure_schema") as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)
        await conn.commit()
    logger.info(
        "Schema ensured",
        extra={"count": len(Base.metadata.tables)},
    )
