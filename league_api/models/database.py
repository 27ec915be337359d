"""Database configuration and base models"""

from datetime import datetime, timezone
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from league_api.core.config import settings


class Base(DeclarativeBase):
    """Base class for all database models"""

    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; treat them as UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_async_url(db_url: str) -> str:
    """Convert a plain SQLAlchemy URL to its async driver variant"""
    if db_url.startswith("sqlite:///"):
        return db_url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    if db_url.startswith("postgresql://"):
        return db_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return db_url


MAX_ROW_ID = 2**63 - 1


def parse_record_id(value) -> int | None:
    """Integer primary key from a path segment, None if it cannot name a row"""
    try:
        record_id = int(value)
    except (TypeError, ValueError):
        return None
    if not 1 <= record_id <= MAX_ROW_ID:
        return None
    return record_id


def fold_case(value):
    return value.lower() if isinstance(value, str) else value


def enable_sqlite_pragmas(engine) -> None:
    """
    Turn on foreign keys and WAL for every new SQLite connection

    Also replaces the built-in ASCII-only lower() with a Unicode one, so
    the lower(email) index and lookups fold case like other engines do.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        dbapi_conn.create_function("lower", 1, fold_case, deterministic=True)
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA busy_timeout=30000")  # 30 seconds
        cursor.close()


db_url = settings.db_url
if db_url.startswith("sqlite:///") and ":memory:" not in db_url:
    Path(db_url.replace("sqlite:///", "", 1)).parent.mkdir(parents=True, exist_ok=True)

engine = create_async_engine(
    to_async_url(db_url),
    echo=False,
)

if "sqlite" in db_url:
    enable_sqlite_pragmas(engine)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncSession:
    """Dependency for getting async database session"""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db():
    """Initialize database (create tables)"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db():
    """Close database connections"""
    await engine.dispose()
