"""Schema Init Command — `python -m fedlink.db.init_schema`.

Invariants:
    - Exits with status 1 when DATABASE_URL is not configured (fail fast)
    - Storage errors are logged and terminate the command with status 1
    - Engine is always disposed, success or failure
"""

import asyncio
import logging
import sys

from fedlink.config import get_settings
from fedlink.core.errors import ConfigurationError
from fedlink.db.schema import create_schema
from fedlink.db.session import create_engine_for
from fedlink.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


async def run(database_url: str) -> list[str]:
    engine = create_engine_for(database_url)
    try:
        logger.info("Creating tables...")
        return await create_schema(engine)
    finally:
        await engine.dispose()


def main() -> int:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    try:
        database_url = settings.require_database_url()
    except ConfigurationError as e:
        logger.error(e.message, extra={"error_code": e.code})
        return 1
    try:
        asyncio.run(run(database_url))
    except Exception:
        logger.error("Database initialization failed", exc_info=True)
        return 1
    logger.info("Database initialization completed successfully.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
