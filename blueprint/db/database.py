"""
Relational database connection management following FastAPI best practices

Driver mapping:
  postgresql://  -> postgresql+asyncpg://
  sqlite://      -> sqlite+aiosqlite://
"""

from typing import AsyncGenerator, Optional

from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from blueprint.core.config import config
from blueprint.core.errors import ErrorResponse
from blueprint.core.logger import logger
from blueprint.models import Base


class Database:
    """Database connection manager"""

    engine: Optional[AsyncEngine] = None
    session_factory: Optional[async_sessionmaker] = None


db = Database()


def to_async_url(database_url: str) -> str:
    """Convert a sync database URL to its async driver equivalent"""
    replacements = [
        ("postgresql://", "postgresql+asyncpg://"),
        ("postgres://", "postgresql+asyncpg://"),
        ("sqlite://", "sqlite+aiosqlite://"),
    ]
    for sync_prefix, async_prefix in replacements:
        if database_url.startswith(sync_prefix):
            return database_url.replace(sync_prefix, async_prefix, 1)
    return database_url


def _redact(url: str) -> str:
    return url.split("@")[-1] if "@" in url else url


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite leaves foreign key enforcement off per connection unless asked"""
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)


def _engine_kwargs(database_url: str) -> dict:
    if database_url.startswith("sqlite"):
        return {"echo": config.database_echo}

    return {
        "echo": config.database_echo,
        "pool_size": 10,
        "max_overflow": 20,
        "pool_pre_ping": True,
        "pool_recycle": 1800,
    }


async def connect_to_database(database_url: Optional[str] = None) -> AsyncEngine:
    """Create the engine and session factory"""
    url = to_async_url(database_url or config.database_url)
    logger.info("Connecting to database...", metadata={"url": _redact(url)})

    try:
        db.engine = create_async_engine(url, **_engine_kwargs(url))
        enable_sqlite_foreign_keys(db.engine)
        db.session_factory = async_sessionmaker(db.engine, class_=AsyncSession, expire_on_commit=False)

        await ping_database()

        logger.info(
            "Successfully connected to database",
            metadata={"event": "database_connected", "dialect": db.engine.dialect.name}
        )
        return db.engine
    except (SQLAlchemyError, OSError) as e:
        logger.error(
            f"Could not connect to database: {e}",
            metadata={"event": "database_connection_error", "error": str(e)}
        )
        raise ErrorResponse(f"Could not connect to database: {e}", status_code=503)


async def ping_database() -> None:
    """Run a trivial statement to verify connectivity"""
    if db.engine is None:
        raise ErrorResponse("Database not initialized", status_code=503)

    async with db.engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def create_schema() -> None:
    """Create any missing tables"""
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info(
        "Database schema ensured",
        metadata={"event": "database_schema_ready", "tables": list(Base.metadata.tables.keys())}
    )


async def close_database_connection():
    """Dispose engine connections"""
    logger.info("Closing database connections...")
    if db.engine is not None:
        await db.engine.dispose()
    db.engine = None
    db.session_factory = None


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Per-request unit of work"""
    if db.session_factory is None:
        raise ErrorResponse("Database not initialized", status_code=503)

    async with db.session_factory() as session:
        yield session
