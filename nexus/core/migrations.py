"""
Boot-time schema management.

Creates any table the models define that the database does not have yet.
Existing tables are left alone; altering columns is out of scope here.
"""

from sqlalchemy import inspect
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlmodel import SQLModel

import nexus.models  # noqa: F401  (registers every table on SQLModel.metadata)
from nexus.core.logging import get_logger

logger = get_logger(__name__)


def _create_missing_tables(conn: Connection) -> list[str]:
    existing = set(inspect(conn).get_table_names())
    missing = [table for table in SQLModel.metadata.sorted_tables if table.name not in existing]

    for table in missing:
        table.create(conn)
        logger.info("table_created", table=table.name)

    return [table.name for table in missing]


async def run_migrations(engine: AsyncEngine) -> list[str]:
    """
    Create missing tables.

    Failures are logged, not raised. Features backed by a table that could not
    be created fail at request time, and cascades skip that table.

    Returns:
        Names of the tables created
    """
    try:
        async with engine.begin() as conn:
            created = await conn.run_sync(_create_missing_tables)
    except SQLAlchemyError as e:
        logger.error("migrations_failed", error=str(e))
        return []

    logger.info("migrations_complete", created=created)
    return created
