"""In-memory implementation of MilestoneStore."""

from datetime import datetime

from governor.schedule.milestones import Milestone
from governor.schedule.store import MilestoneStore
from governor.tasks.models import Task


class InMemoryMilestoneStore(MilestoneStore):
    """In-memory implementation of MilestoneStore for testing and development.

    Uses simple dict storage with linear scan for queries.
    Not suitable for production use.
    """

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._milestones: dict[str, Milestone] = {}
        self._templates: dict[str, list[Task]] = {}

    async def save(self, milestone: Milestone) -> str:
        """Create or replace a milestone."""
        self._milestones[milestone.id] = milestone
        return milestone.id

    async def get(self, milestone_id: str) -> Milestone | None:
        """Get a milestone by ID."""
        return self._milestones.get(milestone_id)

    async def list_due(self, now: datetime) -> list[Milestone]:
        """Get milestones that should run."""
        results = [
            m
            for m in self._milestones.values()
            if m.is_schedule_active
            and m.next_run_at is not None
            and m.next_run_at <= now
            and m.deleted_at is None
        ]
        results.sort(key=lambda m: m.next_run_at)  # type: ignore[arg-type,return-value]
        return results

    async def list_template_tasks(self, milestone_id: str) -> list[Task]:
        """Get template tasks, skipping soft-deleted ones."""
        return [t for t in self._templates.get(milestone_id, []) if t.deleted_at is None]

    async def save_template_task(self, milestone_id: str, task: Task, sort_order: int = 0) -> str:
        """Attach a task template to a milestone."""
        self.add_template_task(milestone_id, task)
        return task.id

    def add_template_task(self, milestone_id: str, task: Task) -> None:
        """Attach a task template synchronously. Useful for test setup."""
        self._templates.setdefault(milestone_id, []).append(task)

    def clear(self) -> None:
        """Clear all stored data. Useful for testing."""
        self._milestones.clear()
        self._templates.clear()
