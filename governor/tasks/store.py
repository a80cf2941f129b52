"""TaskStore abstract interface."""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from governor.tasks.models import Agent, Task


class TaskStore(ABC):
    """Abstract interface for task and agent storage.

    The dispatcher and hard-limit checker only read through this
    interface; writes exist for the API and scheduled milestones.
    """

    @abstractmethod
    async def save_task(self, task: Task) -> str:
        """Create or replace a task."""
        pass

    @abstractmethod
    async def get_task(self, task_id: str) -> Task | None:
        """Get a task by ID."""
        pass

    @abstractmethod
    async def fetch_queued_tasks(self, limit: int) -> list[Task]:
        """Get dispatchable tasks.

        Filters for:
        - status = queued
        - assigned_type = agent with an assigned agent
        - not soft-deleted

        Args:
            limit: Maximum tasks to return

        Returns:
            Tasks ordered by priority rank (critical first), then
            created_at ascending
        """
        pass

    @abstractmethod
    async def fetch_agents_by_ids(self, agent_ids: Iterable[str]) -> dict[str, Agent]:
        """Get agents in one batched read, keyed by ID. Unknown IDs are omitted."""
        pass

    @abstractmethod
    async def get_active_task_count(self, organization_id: str) -> int:
        """Count queued, in-progress and in-review tasks, excluding soft-deleted."""
        pass

    @abstractmethod
    async def save_agent(self, agent: Agent) -> str:
        """Create or replace an agent."""
        pass
