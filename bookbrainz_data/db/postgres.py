"""
BookBrainz Data - Database Client with Async Support

Owns the SQLAlchemy async engine and session factory. Production runs on
PostgreSQL through asyncpg; the same client drives SQLite through aiosqlite.
The client is passed explicitly to whoever needs a session; there is no
module-level instance.
"""
from typing import Any, AsyncGenerator, Dict, Optional, Sequence
from contextlib import asynccontextmanager

from sqlalchemy import delete, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from bookbrainz_data.config import DatabaseConfig
from bookbrainz_data.core.errors import classify_error
from bookbrainz_data.db.models import Base
from bookbrainz_data.observability.logging import get_logger


logger = get_logger("bookbrainz_data.db.postgres")


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class PostgresClient:
    """
    Async database client for BookBrainz data operations.

    Features:
    - Connection pooling with asyncpg
    - Transactional session context manager (commit or roll back)
    - Schema creation for fresh databases
    - Table truncation for test teardown
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        pool_size: int = 10,
        max_overflow: int = 20,
        pool_timeout: int = 30,
        echo: bool = False
    ):
        self.database_url = database_url or DatabaseConfig().url
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout
        self.echo = echo

        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> "PostgresClient":
        """Build a client from a DatabaseConfig section."""
        return cls(
            database_url=config.url,
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
            echo=config.echo,
        )

    @property
    def backend(self) -> str:
        """Backend name of the configured URL ("postgresql", "sqlite", ...)."""
        return make_url(self.database_url).get_backend_name()

    def _engine_options(self) -> Dict[str, Any]:
        """Engine keyword arguments for the configured backend."""
        if self.backend == "sqlite":
            return {"echo": self.echo}
        return {
            "echo": self.echo,
            "pool_size": self.pool_size,
            "max_overflow": self.max_overflow,
            "pool_timeout": self.pool_timeout,
            "pool_pre_ping": True,
            "pool_recycle": 1800,
            "connect_args": {"command_timeout": 60},
        }

    async def initialize(self) -> None:
        """Initialize database engine and session factory."""
        self._engine = create_async_engine(self.database_url, **self._engine_options())

        if self.backend == "sqlite":
            event.listen(self._engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

        logger.info(
            "Database client initialized",
            backend=self.backend,
            pool_size=self.pool_size if self.backend != "sqlite" else None,
        )

    async def close(self) -> None:
        """Close database connections."""
        if self._engine:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database connections closed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Open a session whose body runs as one transaction.

        Commits when the body completes, rolls back on any error. Store
        integrity failures surface as ConstraintViolationError.
        """
        if not self._session_factory:
            await self.initialize()

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                error = classify_error(e)
                logger.warning("Transaction rolled back", error_code=error.error_code, error=error.message)
                raise error from e
            except Exception:
                await session.rollback()
                raise

    async def create_tables(self) -> None:
        """Create all database tables."""
        if not self._engine:
            await self.initialize()
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created", table_count=len(Base.metadata.tables))

    async def drop_tables(self) -> None:
        """Drop all database tables."""
        if not self._engine:
            await self.initialize()
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.info("Database tables dropped")

    async def truncate_tables(self, table_names: Optional[Sequence[str]] = None) -> None:
        """
        Remove every row from the named tables (all tables by default).

        Test-only helper. PostgreSQL uses TRUNCATE ... CASCADE; other backends
        delete in reverse foreign-key order.
        """
        if not self._engine:
            await self.initialize()

        names = set(table_names) if table_names is not None else set(Base.metadata.tables)
        unknown = names - set(Base.metadata.tables)
        if unknown:
            raise ValueError(f"Unknown tables: {sorted(unknown)}")

        tables = [t for t in reversed(Base.metadata.sorted_tables) if t.name in names]
        if not tables:
            return

        async with self._engine.begin() as conn:
            if self.backend == "postgresql":
                joined = ", ".join(t.name for t in tables)
                await conn.execute(text(f"TRUNCATE {joined} RESTART IDENTITY CASCADE"))
            else:
                for table in tables:
                    await conn.execute(delete(table))

        logger.debug("Tables truncated", tables=sorted(names))
