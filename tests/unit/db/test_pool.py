"""Unit tests for PostgresPool."""

from unittest.mock import AsyncMock, MagicMock, patch

import asyncpg
import pytest

from governor.config.models.storage import PostgresConfig
from governor.db.errors import ConnectionError
from governor.db.pool import EXPECTED_REVISION, PostgresPool, resolve_dsn


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GOVERNOR_DATABASE_URL", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)


def _connected_pool(conn: AsyncMock) -> PostgresPool:
    pool = PostgresPool("postgresql://localhost/governor")
    raw = MagicMock()
    raw.acquire.return_value.__aenter__.return_value = conn
    raw.acquire.return_value.__aexit__.return_value = False
    pool._pool = raw
    return pool


class TestResolveDsn:
    """Tests for resolve_dsn."""

    def test_config_url_wins(
        self, clean_env: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("DATABASE_URL", "postgresql://env/db")
        config = PostgresConfig(connection_url="postgresql://config/db")

        assert resolve_dsn(config) == "postgresql://config/db"

    def test_governor_env_before_generic(
        self, clean_env: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GOVERNOR_DATABASE_URL", "postgresql://governor/db")
        monkeypatch.setenv("DATABASE_URL", "postgresql://generic/db")

        assert resolve_dsn(PostgresConfig()) == "postgresql://governor/db"

    def test_missing_url_raises(self, clean_env: None) -> None:
        with pytest.raises(ConnectionError, match="No PostgreSQL URL"):
            resolve_dsn(PostgresConfig())


class TestConnect:
    """Tests for PostgresPool.connect."""

    @pytest.mark.asyncio
    async def test_uses_config_sizes(self) -> None:
        config = PostgresConfig(
            connection_url="postgresql://localhost/governor",
            min_pool_size=2,
            max_pool_size=4,
            command_timeout=5.0,
        )
        pool = PostgresPool.from_config(config)

        with patch("governor.db.pool.asyncpg.create_pool", new=AsyncMock()) as create_pool:
            await pool.connect()
            await pool.connect()

        create_pool.assert_awaited_once()
        kwargs = create_pool.call_args.kwargs
        assert kwargs["dsn"] == "postgresql://localhost/governor"
        assert kwargs["min_size"] == 2
        assert kwargs["max_size"] == 4
        assert kwargs["command_timeout"] == 5.0
        assert pool.is_connected is True

    @pytest.mark.asyncio
    async def test_connect_failure_wrapped(self) -> None:
        pool = PostgresPool("postgresql://localhost/governor")

        with (
            patch(
                "governor.db.pool.asyncpg.create_pool",
                new=AsyncMock(side_effect=OSError("refused")),
            ),
            pytest.raises(ConnectionError) as exc_info,
        ):
            await pool.connect()

        assert isinstance(exc_info.value.cause, OSError)
        assert pool.is_connected is False


class TestHealthCheck:
    """Tests for schema-aware health checks."""

    @pytest.mark.asyncio
    async def test_not_connected(self) -> None:
        pool = PostgresPool("postgresql://localhost/governor")

        assert await pool.health_check() == (False, "pool not connected")

    @pytest.mark.asyncio
    async def test_current_revision_is_healthy(self) -> None:
        conn = AsyncMock()
        conn.fetchval.return_value = EXPECTED_REVISION

        assert await _connected_pool(conn).health_check() == (True, None)

    @pytest.mark.asyncio
    async def test_other_revision_is_reported(self) -> None:
        conn = AsyncMock()
        conn.fetchval.return_value = "000"

        healthy, message = await _connected_pool(conn).health_check()

        assert healthy is True
        assert message is not None
        assert "000" in message

    @pytest.mark.asyncio
    async def test_unmigrated_database_is_unhealthy(self) -> None:
        conn = AsyncMock()
        conn.fetchval.side_effect = asyncpg.UndefinedTableError(
            'relation "alembic_version" does not exist'
        )

        assert await _connected_pool(conn).health_check() == (
            False,
            "governance tables not migrated",
        )

    @pytest.mark.asyncio
    async def test_query_failure_is_unhealthy(self) -> None:
        conn = AsyncMock()
        conn.fetchval.side_effect = OSError("connection reset")

        healthy, message = await _connected_pool(conn).health_check()

        assert healthy is False
        assert message == "connection reset"
