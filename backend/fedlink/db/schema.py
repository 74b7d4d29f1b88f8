"""Schema Creation — idempotent CREATE TABLE IF NOT EXISTS for every model.

Invariants:
    - create_schema() can run any number of times without error or duplicate structures
    - All model modules are imported before metadata is used (fedlink.models)
    - Storage errors are logged and re-raised, never swallowed
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from fedlink.db.base import Base
import fedlink.models  # noqa: F401

logger = logging.getLogger(__name__)


async def create_schema(engine: AsyncEngine) -> list[str]:
    """Create every table that does not exist yet. Returns the table names in metadata order."""
    tables = [t.name for t in Base.metadata.sorted_tables]
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    except SQLAlchemyError as e:
        logger.error(f"Error initializing database: {e}", exc_info=True)
        raise
    logger.info(f"Schema ready ({len(tables)} tables)")
    return tables


async def drop_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
