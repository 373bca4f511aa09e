from typing import Any, AsyncGenerator, Dict

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from rollcall.core.config import settings


def _engine_options(database_url: str) -> Dict[str, Any]:
    if make_url(database_url).get_backend_name() == "sqlite":
        # aiosqlite runs the connection in a worker thread
        return {"connect_args": {"check_same_thread": False}}
    # Hosted Postgres drops idle connections; test them before use.
    return {"pool_pre_ping": True, "pool_recycle": 300}


engine = create_async_engine(settings.database_url, future=True, **_engine_options(settings.database_url))

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session per request, rolled back if the request fails mid-transaction."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
