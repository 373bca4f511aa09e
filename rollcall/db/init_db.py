"""
Create all tables on the configured database.

Run once before first start:
  python -m rollcall.db.init_db
"""
import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

import rollcall.core.models  # noqa: F401  registers every table on Base.metadata
from rollcall.core.config import settings
from rollcall.core.logging import configure_logging
from rollcall.db.session import Base, engine

logger = logging.getLogger(__name__)


async def create_tables(db_engine: AsyncEngine) -> None:
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tables ready: %s", ", ".join(sorted(Base.metadata.tables)))


async def main() -> None:
    configure_logging(settings.log_level)
    try:
        await create_tables(engine)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
