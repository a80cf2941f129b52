"""PostgreSQL connection pool shared by every governance store.

The pool is built from the `storage.postgres` settings section. Besides
connections it reports which governance migration the database is at, so
the health endpoint can flag a database whose tables were never created.
"""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import asyncpg

from governor.config.models.storage import PostgresConfig
from governor.db.errors import ConnectionError
from governor.observability.logging import get_logger

logger = get_logger(__name__)

# Latest revision under governor/db/migrations/versions
EXPECTED_REVISION = "001"


def resolve_dsn(config: PostgresConfig) -> str:
    """Pick the connection URL for a postgres settings section.

    Args:
        config: The `storage.postgres` settings section

    Returns:
        `config.connection_url`, else GOVERNOR_DATABASE_URL or DATABASE_URL

    Raises:
        ConnectionError: If no URL is configured anywhere
    """
    dsn = (
        config.connection_url
        or os.environ.get("GOVERNOR_DATABASE_URL")
        or os.environ.get("DATABASE_URL")
    )
    if not dsn:
        raise ConnectionError(
            "No PostgreSQL URL configured. Set storage.postgres.connection_url, "
            "GOVERNOR_STORAGE__POSTGRES__CONNECTION_URL or DATABASE_URL."
        )
    return dsn


class PostgresPool:
    """asyncpg pool for the task, trust-config, audit and milestone stores.

    Usage:
        pool = PostgresPool.from_config(settings.storage.postgres)
        async with pool.acquire() as conn:
            count = await conn.fetchval("SELECT count(*) FROM tasks")
        await pool.close()
    """

    def __init__(self, dsn: str, config: PostgresConfig | None = None) -> None:
        """Initialize pool configuration.

        Args:
            dsn: Database connection string
            config: Pool sizing and timeouts; defaults apply when None
        """
        self._dsn = dsn
        self._config = config or PostgresConfig()
        self._pool: asyncpg.Pool | None = None

    @classmethod
    def from_config(cls, config: PostgresConfig) -> "PostgresPool":
        """Build a pool from the `storage.postgres` settings section.

        Raises:
            ConnectionError: If no connection URL can be resolved
        """
        return cls(resolve_dsn(config), config)

    async def connect(self) -> None:
        """Open the pool. Safe to call more than once.

        Raises:
            ConnectionError: If the database cannot be reached
        """
        if self._pool is not None:
            return

        try:
            self._pool = await asyncpg.create_pool(
                dsn=self._dsn,
                min_size=self._config.min_pool_size,
                max_size=self._config.max_pool_size,
                max_inactive_connection_lifetime=(
                    self._config.max_inactive_connection_lifetime
                ),
                command_timeout=self._config.command_timeout,
            )
        except Exception as e:
            logger.error("postgres_pool_connection_failed", error=str(e))
            raise ConnectionError(f"Failed to connect to PostgreSQL: {e}", cause=e) from e

        logger.info(
            "postgres_pool_connected",
            min_size=self._config.min_pool_size,
            max_size=self._config.max_pool_size,
        )

    async def close(self) -> None:
        """Close the pool, waiting for connections to be released."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("postgres_pool_closed")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        """Borrow a connection, connecting first if needed.

        Raises:
            ConnectionError: On driver errors raised while the connection is held
        """
        if self._pool is None:
            await self.connect()

        try:
            async with self._pool.acquire() as connection:  # type: ignore[union-attr]
                yield connection
        except asyncpg.PostgresError as e:
            logger.error("postgres_connection_error", error=str(e))
            raise ConnectionError(f"PostgreSQL error: {e}", cause=e) from e

    async def schema_revision(self) -> str | None:
        """Return the applied alembic revision, or None before any migration."""
        async with self.acquire() as conn:
            try:
                return await conn.fetchval("SELECT version_num FROM alembic_version LIMIT 1")
            except asyncpg.UndefinedTableError:
                return None

    async def health_check(self) -> tuple[bool, str | None]:
        """Check connectivity and the governance schema.

        Returns:
            (healthy, message); message explains an unhealthy or outdated result
        """
        if self._pool is None:
            return False, "pool not connected"

        try:
            revision = await self.schema_revision()
        except Exception as e:
            logger.warning("postgres_health_check_failed", error=str(e))
            return False, str(e)

        if revision is None:
            return False, "governance tables not migrated"
        if revision != EXPECTED_REVISION:
            return True, f"schema at revision {revision}, expected {EXPECTED_REVISION}"
        return True, None

    @property
    def is_connected(self) -> bool:
        """Whether the pool has been opened."""
        return self._pool is not None
