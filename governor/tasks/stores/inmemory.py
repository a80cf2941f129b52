"""In-memory implementation of TaskStore."""

from collections.abc import Iterable

from governor.tasks.models import ACTIVE_STATUSES, Agent, Task
from governor.tasks.store import TaskStore


class InMemoryTaskStore(TaskStore):
    """In-memory implementation of TaskStore for testing and development.

    Uses simple dict storage with linear scan for queries.
    Not suitable for production use.
    """

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._tasks: dict[str, Task] = {}
        self._agents: dict[str, Agent] = {}

    async def save_task(self, task: Task) -> str:
        """Create or replace a task."""
        self._tasks[task.id] = task
        return task.id

    async def get_task(self, task_id: str) -> Task | None:
        """Get a task by ID."""
        return self._tasks.get(task_id)

    async def fetch_queued_tasks(self, limit: int) -> list[Task]:
        """Get dispatchable tasks in priority order."""
        results = [task for task in self._tasks.values() if task.is_dispatchable]
        results.sort(key=lambda t: (t.priority_rank, t.created_at))
        return results[:limit]

    async def fetch_agents_by_ids(self, agent_ids: Iterable[str]) -> dict[str, Agent]:
        """Get agents keyed by ID."""
        return {
            agent_id: self._agents[agent_id]
            for agent_id in set(agent_ids)
            if agent_id in self._agents
        }

    async def get_active_task_count(self, organization_id: str) -> int:
        """Count active tasks for an organization."""
        return sum(
            1
            for task in self._tasks.values()
            if task.organization_id == organization_id
            and task.status in ACTIVE_STATUSES
            and not task.is_deleted
        )

    async def save_agent(self, agent: Agent) -> str:
        """Create or replace an agent."""
        self._agents[agent.id] = agent
        return agent.id

    def clear(self) -> None:
        """Clear all stored data. Useful for testing."""
        self._tasks.clear()
        self._agents.clear()
