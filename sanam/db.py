# sanam/db.py
# Direct Postgres connection, only used for the health check. All data access goes through supabase.
from sqlalchemy import text
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from .config import get_settings

_engine = None
_SessionLocal = None


def _ensure_engine():
    global _engine, _SessionLocal
    if _engine is None:
        db_url = get_settings().db_url
        if not db_url:
            # defer failure until a DB-using endpoint is called
            raise RuntimeError("SUPABASE_DB_URL is not set")
        _engine = create_async_engine(db_url, echo=False, pool_size=2, max_overflow=0)
        _SessionLocal = async_sessionmaker(_engine, expire_on_commit=False)


async def ping() -> int:
    _ensure_engine()
    async with _SessionLocal() as session:
        result = await session.execute(text("select 1"))
        return result.scalar_one()
