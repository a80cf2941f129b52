"""Unit tests for API dependency wiring."""

from collections.abc import AsyncIterator
from unittest.mock import patch

import pytest

from governor.api import dependencies
from governor.api.exceptions import StoreUnavailableError
from governor.audit.stores.inmemory import InMemoryAuditSink
from governor.config.settings import Settings
from governor.guardrails.stores.inmemory import InMemoryTrustConfigStore
from governor.schedule.stores.inmemory import InMemoryMilestoneStore
from governor.tasks.stores.inmemory import InMemoryTaskStore


@pytest.fixture
async def fresh_dependencies() -> AsyncIterator[None]:
    await dependencies.reset_dependencies()
    yield
    await dependencies.reset_dependencies()


class TestStoreSelection:
    @pytest.mark.asyncio
    async def test_inmemory_backend(self, fresh_dependencies: None) -> None:
        with patch.object(dependencies, "get_settings", return_value=Settings()):
            assert isinstance(await dependencies.get_task_store(), InMemoryTaskStore)
            assert isinstance(
                await dependencies.get_trust_config_store(), InMemoryTrustConfigStore
            )
            assert isinstance(await dependencies.get_audit_sink(), InMemoryAuditSink)
            assert isinstance(await dependencies.get_milestone_store(), InMemoryMilestoneStore)

    @pytest.mark.asyncio
    async def test_stores_are_cached(self, fresh_dependencies: None) -> None:
        with patch.object(dependencies, "get_settings", return_value=Settings()):
            first = await dependencies.get_task_store()
            second = await dependencies.get_task_store()

        assert first is second

    @pytest.mark.asyncio
    async def test_unreachable_database_is_store_unavailable(
        self, fresh_dependencies: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GOVERNOR_STORAGE__BACKEND", "postgres")
        monkeypatch.setenv(
            "GOVERNOR_STORAGE__POSTGRES__CONNECTION_URL", "postgresql://u:p@127.0.0.1:1/none"
        )
        settings = Settings()

        with (
            patch.object(dependencies, "get_settings", return_value=settings),
            patch(
                "governor.db.pool.asyncpg.create_pool",
                side_effect=OSError("connection refused"),
            ),
            pytest.raises(StoreUnavailableError),
        ):
            await dependencies.get_task_store()


class TestSharedServices:
    @pytest.mark.asyncio
    async def test_audit_logger_shared(self, fresh_dependencies: None) -> None:
        sink = InMemoryAuditSink()
        with patch.object(dependencies, "get_settings", return_value=Settings()):
            first = dependencies.get_audit_logger(sink)
            second = dependencies.get_audit_logger(sink)

        assert first is second
        assert first.is_active is True

    @pytest.mark.asyncio
    async def test_dispatcher_uses_dispatch_config(self, fresh_dependencies: None) -> None:
        with patch.object(dependencies, "get_settings", return_value=Settings()):
            dispatcher = dependencies.get_dispatcher(InMemoryTaskStore())

        assert dispatcher.resolve_limit(None) == 10
        assert dispatcher.resolve_limit(500) == 50
