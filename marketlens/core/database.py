"""
Database configuration with async engine, session management and retry logic
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy import event, text
from sqlalchemy.exc import DisconnectionError, OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from marketlens.core.config import settings
from marketlens.core.logging import log


class DatabaseConfig:
    """Database configuration with environment-based settings"""

    def __init__(self, database_url: Optional[str] = None):
        self.database_url = database_url or settings.database_url
        self.pool_size = settings.db_pool_size
        self.max_overflow = settings.db_max_overflow
        self.pool_pre_ping = settings.db_pool_pre_ping
        self.echo = settings.db_echo

        # Advanced pool settings
        self.pool_recycle = 3600  # Recycle connections after 1 hour
        self.pool_timeout = 30  # Pool timeout in seconds

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def async_url(self) -> str:
        """Convert sync URL to async URL"""
        url = str(self.database_url)
        if url.startswith("postgresql://"):
            return url.replace("postgresql://", "postgresql+asyncpg://", 1)
        if url.startswith("sqlite://"):
            return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return url

    @property
    def async_engine_kwargs(self) -> dict:
        """Get async engine configuration"""
        if self.is_sqlite:
            return {"echo": self.echo}

        return {
            "echo": self.echo,
            "pool_pre_ping": self.pool_pre_ping,
            "pool_size": self.pool_size,
            "max_overflow": self.max_overflow,
            "pool_recycle": self.pool_recycle,
            "pool_timeout": self.pool_timeout,
            "connect_args": {
                "server_settings": {
                    "application_name": settings.PROJECT_NAME,
                    "jit": "off",
                }
            },
        }


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Turn on foreign key enforcement for every new SQLite connection"""

    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(database_url: Optional[str] = None, **overrides) -> AsyncEngine:
    """Create an async engine for the given URL (defaults to settings)"""
    config = DatabaseConfig(database_url)
    kwargs = config.async_engine_kwargs
    kwargs.update(overrides)

    engine = create_async_engine(config.async_url, **kwargs)
    if config.is_sqlite:
        enable_sqlite_foreign_keys(engine)
    return engine


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


# Initialize configuration
db_config = DatabaseConfig()

async_engine = build_engine()
AsyncSessionLocal = build_sessionmaker(async_engine)


# Retry decorator for database operations
db_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    reraise=True,
    retry=retry_if_exception_type((OperationalError, DisconnectionError)),
)


class DatabaseSessionManager:
    """Manages database session lifecycle with proper error handling"""

    def __init__(self, engine: AsyncEngine = None, sessionmaker: async_sessionmaker = None):
        self._engine = engine
        self._sessionmaker = sessionmaker

    async def init(self):
        """Initialize the database connection"""
        if self._engine is None:
            self._engine = async_engine
            self._sessionmaker = AsyncSessionLocal

        # Test connection
        try:
            async with self._engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                log.info("Database connection established successfully")
        except Exception as e:
            log.error("Failed to connect to database: {}", e)
            raise

    async def close(self):
        """Close database connection"""
        if self._engine is None:
            return

        await self._engine.dispose()
        self._engine = None
        self._sessionmaker = None
        log.info("Database connection closed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a transactional scope with proper error handling"""
        if self._sessionmaker is None:
            await self.init()

        async with self._sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except Exception as e:
                await session.rollback()
                log.error("Database session error: {}", e)
                raise


# Global session manager instance
db_manager = DatabaseSessionManager()


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Async session dependency with proper lifecycle management"""
    async with db_manager.session() as session:
        yield session


async def init_db(engine: AsyncEngine = None):
    """Create all tables (use the Alembic revision in production)"""
    # Register table metadata
    import marketlens.models  # noqa: F401

    engine = engine or async_engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    log.info("Database tables created")


async def check_database_health(session: AsyncSession) -> dict:
    """Check database health and connection status"""
    try:
        result = await session.execute(text("SELECT 1"))
        return {"status": "healthy" if result.scalar() == 1 else "unhealthy"}
    except Exception as e:
        log.error("Database health check failed: {}", e)
        return {"status": "unhealthy", "error": str(e)}


__all__ = [
    "async_engine",
    "AsyncSessionLocal",
    "build_engine",
    "build_sessionmaker",
    "get_async_session",
    "init_db",
    "check_database_health",
    "db_manager",
    "db_retry",
    "DatabaseSessionManager",
]
