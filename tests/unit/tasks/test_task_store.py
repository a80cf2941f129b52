"""Unit tests for InMemoryTaskStore and the task/agent models."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest

from governor.tasks.models import (
    Agent,
    AssigneeType,
    HealthStatus,
    Task,
    TaskPriority,
    TaskStatus,
    utc_now,
)
from governor.tasks.stores.inmemory import InMemoryTaskStore

BASE = datetime(2025, 3, 1, 9, 0, tzinfo=UTC)


@pytest.fixture
def store() -> InMemoryTaskStore:
    return InMemoryTaskStore()


class TestAgentAvailability:
    def test_default_agent_available(self, make_agent: Callable[..., Agent]) -> None:
        assert make_agent().is_available is True

    @pytest.mark.parametrize(
        "overrides",
        [
            {"is_active": False},
            {"paused_at": BASE},
            {"consecutive_failures": 3, "max_consecutive_failures": 3},
            {"health_status": HealthStatus.FAILING},
        ],
    )
    def test_unavailable(self, make_agent: Callable[..., Agent], overrides: dict) -> None:
        assert make_agent(**overrides).is_available is False

    def test_degraded_still_available(self, make_agent: Callable[..., Agent]) -> None:
        assert make_agent(health_status=HealthStatus.DEGRADED).is_available is True


class TestFetchQueuedTasks:
    """Tests for InMemoryTaskStore.fetch_queued_tasks."""

    @pytest.mark.asyncio
    async def test_orders_by_priority_then_age(
        self, store: InMemoryTaskStore, make_task: Callable[..., Task]
    ) -> None:
        low = make_task(priority=TaskPriority.LOW, created_at=BASE)
        critical_new = make_task(
            priority=TaskPriority.CRITICAL, created_at=BASE + timedelta(minutes=2)
        )
        medium = make_task(priority=TaskPriority.MEDIUM, created_at=BASE)
        critical_old = make_task(
            priority=TaskPriority.CRITICAL, created_at=BASE + timedelta(minutes=1)
        )
        for task in (low, critical_new, medium, critical_old):
            await store.save_task(task)

        tasks = await store.fetch_queued_tasks(limit=10)

        assert [t.id for t in tasks] == [critical_old.id, critical_new.id, medium.id, low.id]

    @pytest.mark.asyncio
    async def test_respects_limit(
        self, store: InMemoryTaskStore, make_task: Callable[..., Task]
    ) -> None:
        for _ in range(5):
            await store.save_task(make_task())

        assert len(await store.fetch_queued_tasks(limit=2)) == 2

    @pytest.mark.asyncio
    async def test_filters_non_dispatchable(
        self, store: InMemoryTaskStore, make_task: Callable[..., Task], org_id: str
    ) -> None:
        dispatchable = make_task()
        await store.save_task(dispatchable)
        await store.save_task(make_task(status=TaskStatus.PENDING))
        await store.save_task(make_task(deleted_at=utc_now()))
        await store.save_task(
            Task(
                organization_id=org_id,
                status=TaskStatus.QUEUED,
                assigned_type=AssigneeType.USER,
                assigned_agent_id="user-1",
            )
        )
        await store.save_task(
            Task(organization_id=org_id, status=TaskStatus.QUEUED, assigned_type=AssigneeType.AGENT)
        )

        tasks = await store.fetch_queued_tasks(limit=10)

        assert [t.id for t in tasks] == [dispatchable.id]


class TestAgents:
    @pytest.mark.asyncio
    async def test_fetch_agents_by_ids_omits_unknown(
        self, store: InMemoryTaskStore, make_agent: Callable[..., Agent]
    ) -> None:
        await store.save_agent(make_agent("agent-1"))
        await store.save_agent(make_agent("agent-2"))

        agents = await store.fetch_agents_by_ids(["agent-1", "missing", "agent-1"])

        assert list(agents) == ["agent-1"]

    @pytest.mark.asyncio
    async def test_get_active_task_count(
        self, store: InMemoryTaskStore, make_task: Callable[..., Task], org_id: str
    ) -> None:
        await store.save_task(make_task(status=TaskStatus.QUEUED))
        await store.save_task(make_task(status=TaskStatus.IN_PROGRESS))
        await store.save_task(make_task(status=TaskStatus.FAILED))

        assert await store.get_active_task_count(org_id) == 2
        assert await store.get_active_task_count("other-org") == 0
