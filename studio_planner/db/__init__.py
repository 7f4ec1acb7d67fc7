"""Database package."""
from studio_planner.db.database import (
    Base,
    async_session_maker,
    close_all_engines,
    create_engine_for_url,
    enable_sqlite_savepoints,
    engine,
    get_db,
    init_db,
)

__all__ = [
    "Base",
    "async_session_maker",
    "close_all_engines",
    "create_engine_for_url",
    "enable_sqlite_savepoints",
    "engine",
    "get_db",
    "init_db",
]
