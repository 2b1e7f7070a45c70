"""
asyncpg connection pool and the query handle used by every repository.
"""
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List, Optional

import asyncpg
from asyncpg import Connection, Pool, Record

from ..config.settings import get_settings
from ..core.exceptions import StorageError

logger = logging.getLogger(__name__)

# Errors raised by the driver or the socket underneath it
DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


class DatabaseManager:
    """Lazily created asyncpg pool exposing fetch/fetchrow/fetchval/execute.

    Driver failures surface as StorageError with the driver exception chained.
    """

    def __init__(self, database_url: Optional[str] = None, **pool_config):
        """
        Args:
            database_url: PostgreSQL DSN; defaults to DATABASE_URL. A
                ``+asyncpg`` driver suffix is removed.
            **pool_config: Overrides for asyncpg.create_pool (min_size,
                max_size, command_timeout, ...)
        """
        settings = get_settings()
        self.dsn = (database_url or settings.database_url).replace("+asyncpg", "")
        self.pool_config = {**settings.pool_config(), **pool_config}
        self.application_name = settings.app_name
        self.pool: Optional[Pool] = None

    async def create_pool(self) -> Pool:
        """Open the pool on first use; later calls return the same pool."""
        if self.pool is not None:
            return self.pool

        logger.info(
            f"Opening connection pool ({self.pool_config.get('min_size')}"
            f"-{self.pool_config.get('max_size')} connections)"
        )
        try:
            self.pool = await asyncpg.create_pool(
                self.dsn,
                server_settings={"application_name": self.application_name},
                **self.pool_config
            )
        except DRIVER_ERRORS as e:
            logger.error(f"Could not open connection pool: {e}")
            raise StorageError(str(e), operation="create_pool") from e
        return self.pool

    async def close_pool(self) -> None:
        if self.pool is None:
            return
        await self.pool.close()
        self.pool = None
        logger.info("Connection pool closed")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[Connection]:
        """Borrow a pooled connection for the duration of the block."""
        pool = await self.create_pool()
        async with pool.acquire() as connection:
            yield connection

    async def _call(self, operation: str, query: str, *args: Any, **kwargs: Any) -> Any:
        try:
            async with self.acquire() as connection:
                return await getattr(connection, operation)(query, *args, **kwargs)
        except DRIVER_ERRORS as e:
            logger.error(f"Database {operation} failed: {e}")
            raise StorageError(str(e), operation=operation) from e

    async def execute(self, query: str, *args, timeout: Optional[float] = None) -> str:
        """Run a statement; returns the command status, e.g. ``'DELETE 3'``."""
        return await self._call("execute", query, *args, timeout=timeout)

    async def fetch(self, query: str, *args, timeout: Optional[float] = None) -> List[Record]:
        return await self._call("fetch", query, *args, timeout=timeout)

    async def fetchrow(self, query: str, *args, timeout: Optional[float] = None) -> Optional[Record]:
        return await self._call("fetchrow", query, *args, timeout=timeout)

    async def fetchval(
        self,
        query: str,
        *args,
        column: int = 0,
        timeout: Optional[float] = None
    ) -> Any:
        return await self._call("fetchval", query, *args, column=column, timeout=timeout)

    async def health_check(self) -> bool:
        """True when the database answers ``SELECT 1``."""
        try:
            return await self.fetchval("SELECT 1") == 1
        except StorageError:
            return False


_database: Optional[DatabaseManager] = None


def get_database(database_url: Optional[str] = None) -> DatabaseManager:
    """Process-wide DatabaseManager, created on first call."""
    global _database
    if _database is None:
        _database = DatabaseManager(database_url)
    return _database


async def init_database(database_url: Optional[str] = None) -> DatabaseManager:
    """Create the process-wide manager and open its pool."""
    database = get_database(database_url)
    await database.create_pool()
    logger.info("Database ready")
    return database


async def close_database() -> None:
    """Close and forget the process-wide manager."""
    global _database
    if _database is not None:
        await _database.close_pool()
        _database = None
