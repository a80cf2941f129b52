"""MilestoneStore abstract interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING

from governor.tasks.models import Task

if TYPE_CHECKING:
    from governor.schedule.milestones import Milestone


class MilestoneStore(ABC):
    """Abstract interface for scheduled milestones and their task templates."""

    @abstractmethod
    async def save(self, milestone: "Milestone") -> str:
        """Create or replace a milestone."""
        pass

    @abstractmethod
    async def get(self, milestone_id: str) -> "Milestone | None":
        """Get a milestone by ID."""
        pass

    @abstractmethod
    async def list_due(self, now: datetime) -> list["Milestone"]:
        """Get milestones that should run.

        Filters for:
        - is_schedule_active
        - next_run_at set and <= now
        - not soft-deleted

        Returns:
            Milestones ordered by next_run_at ascending
        """
        pass

    @abstractmethod
    async def list_template_tasks(self, milestone_id: str) -> list[Task]:
        """Get the tasks cloned on every run, in display order."""
        pass

    @abstractmethod
    async def save_template_task(self, milestone_id: str, task: Task, sort_order: int = 0) -> str:
        """Attach a task template to a milestone.

        Args:
            milestone_id: Owning milestone
            task: Template; only title, priority and assignee are kept
            sort_order: Position among the milestone's templates

        Returns:
            Template ID
        """
        pass
