"""Database connection and session management."""
import logging

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from studio_planner.config.settings import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """Let the sqlite driver emit BEGIN itself so SAVEPOINT works.

    pysqlite/aiosqlite defer BEGIN until the first DML statement, which breaks
    ``session.begin_nested()``. The allocation and execution writes rely on
    savepoints to roll back a single constraint violation.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _do_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_engine_for_url(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine, applying sqlite-specific setup when needed."""
    if url.startswith("sqlite"):
        new_engine = create_async_engine(url, echo=echo, future=True)
        enable_sqlite_savepoints(new_engine)
        return new_engine

    return create_async_engine(
        url,
        echo=echo,
        future=True,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_timeout=30,
        pool_recycle=300,
        pool_pre_ping=True,
    )


engine = create_engine_for_url(settings.database_url, echo=settings.debug)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncSession:
    """
    Dependency that provides a database session.

    Commits when the request handler returns and rolls back if it raises.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db():
    """Initialize database tables."""
    # Import models so they are registered on the metadata
    import studio_planner.models  # noqa: F401

    if settings.database_url.startswith("sqlite"):
        async with engine.connect() as conn:
            await conn.execute(text("PRAGMA foreign_keys=ON"))
            await conn.commit()
    elif not settings.debug:
        logger.info("Skipping create_all outside debug; run alembic upgrade head")
        return

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_all_engines():
    """Dispose the database engine."""
    await engine.dispose()
