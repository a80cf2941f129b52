"""Scheduled milestones.

A milestone with an active schedule clones its template tasks as new
pending tasks every time it comes due, then moves its next run forward.
"""

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, Field

from governor.observability.logging import get_logger
from governor.observability.metrics import MILESTONE_RUNS
from governor.schedule.calculator import next_run
from governor.schedule.models import RecurrenceSpec, RecurrenceType
from governor.schedule.store import MilestoneStore
from governor.tasks.models import StatusChange, Task, TaskStatus
from governor.tasks.store import TaskStore

logger = get_logger(__name__)


def _aware(now: datetime | None) -> datetime:
    """Current time when None; a naive instant is taken to be UTC."""
    if now is None:
        return datetime.now(UTC)
    if now.tzinfo is None:
        return now.replace(tzinfo=UTC)
    return now


class Milestone(BaseModel):
    """A group of tasks that may run on a schedule."""

    id: str = Field(default_factory=lambda: str(uuid4()), description="Unique identifier")
    organization_id: str = Field(..., description="Owning organization")
    project_id: str | None = Field(default=None, description="Owning project")
    name: str = Field(default="", description="Display name")
    schedule: RecurrenceSpec | None = Field(default=None)
    is_schedule_active: bool = Field(default=False)
    next_run_at: datetime | None = Field(default=None)
    last_run_at: datetime | None = Field(default=None)
    deleted_at: datetime | None = Field(default=None, description="Soft-delete marker")

    @property
    def has_schedule(self) -> bool:
        return self.schedule is not None and self.schedule.type != RecurrenceType.NONE


class MilestoneRunResult(BaseModel):
    """Outcome of running one due milestone."""

    milestone_id: str
    tasks_created: int = 0
    next_run_at: datetime | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None


class MilestoneScheduler:
    """Keeps milestone run times current and runs the ones that are due."""

    def __init__(self, milestone_store: MilestoneStore, task_store: TaskStore) -> None:
        self._milestones = milestone_store
        self._tasks = task_store

    def refresh_next_run(self, milestone: Milestone, now: datetime) -> Milestone:
        """Return a copy with next_run_at recomputed for the current schedule."""
        if not milestone.is_schedule_active or not milestone.has_schedule:
            return milestone.model_copy(update={"next_run_at": None})
        return milestone.model_copy(
            update={"next_run_at": next_run(milestone.schedule, now)}
        )

    async def create_milestone(
        self,
        milestone: Milestone,
        templates: list[Task] | None = None,
        now: datetime | None = None,
    ) -> Milestone:
        """Store a new milestone and its template tasks.

        A real schedule activates the milestone and gets its first run time.

        Args:
            milestone: Milestone to create; activation and next run are recomputed
            templates: Tasks cloned on every run, in order
            now: Reference instant for the first run

        Returns:
            The stored milestone
        """
        prepared = self.refresh_next_run(
            milestone.model_copy(update={"is_schedule_active": milestone.has_schedule}),
            _aware(now),
        )
        await self._milestones.save(prepared)
        for position, template in enumerate(templates or []):
            await self._milestones.save_template_task(prepared.id, template, position)

        logger.info(
            "milestone_created",
            milestone_id=prepared.id,
            organization_id=prepared.organization_id,
            templates=len(templates or []),
            next_run_at=prepared.next_run_at.isoformat() if prepared.next_run_at else None,
        )
        return prepared

    async def update_schedule(
        self,
        milestone_id: str,
        schedule: RecurrenceSpec | None,
        now: datetime | None = None,
    ) -> Milestone | None:
        """Replace a milestone's schedule; a real schedule activates it."""
        milestone = await self._milestones.get(milestone_id)
        if milestone is None:
            return None

        updated = milestone.model_copy(update={"schedule": schedule})
        updated = updated.model_copy(update={"is_schedule_active": updated.has_schedule})
        updated = self.refresh_next_run(updated, _aware(now))
        await self._milestones.save(updated)
        logger.info(
            "milestone_schedule_updated",
            milestone_id=milestone_id,
            active=updated.is_schedule_active,
            next_run_at=updated.next_run_at.isoformat() if updated.next_run_at else None,
        )
        return updated

    async def toggle_schedule(
        self, milestone_id: str, active: bool, now: datetime | None = None
    ) -> Milestone | None:
        """Pause or resume a milestone's schedule."""
        milestone = await self._milestones.get(milestone_id)
        if milestone is None:
            return None

        updated = self.refresh_next_run(
            milestone.model_copy(update={"is_schedule_active": active}),
            _aware(now),
        )
        await self._milestones.save(updated)
        return updated

    async def run_due(self, now: datetime | None = None) -> list[MilestoneRunResult]:
        """Run every active milestone whose next run has arrived.

        One failing milestone is reported in its result and does not stop
        the others.
        """
        now = _aware(now)
        due = await self._milestones.list_due(now)
        results: list[MilestoneRunResult] = []

        for milestone in due:
            try:
                results.append(await self._run(milestone, now))
                MILESTONE_RUNS.labels(outcome="success").inc()
            except Exception as e:
                logger.error(
                    "milestone_run_failed",
                    milestone_id=milestone.id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                MILESTONE_RUNS.labels(outcome="failed").inc()
                results.append(MilestoneRunResult(milestone_id=milestone.id, error=str(e)))

        return results

    async def _run(self, milestone: Milestone, now: datetime) -> MilestoneRunResult:
        templates = await self._milestones.list_template_tasks(milestone.id)
        for template in templates:
            await self._tasks.save_task(self._clone(template, milestone, now))

        upcoming = next_run(milestone.schedule, now)
        await self._milestones.save(
            milestone.model_copy(
                update={
                    "last_run_at": now,
                    "next_run_at": upcoming,
                    "is_schedule_active": upcoming is not None,
                }
            )
        )

        logger.info(
            "milestone_processed",
            milestone_id=milestone.id,
            name=milestone.name,
            tasks_cloned=len(templates),
            next_run_at=upcoming.isoformat() if upcoming else None,
        )
        return MilestoneRunResult(
            milestone_id=milestone.id,
            tasks_created=len(templates),
            next_run_at=upcoming,
        )

    @staticmethod
    def _clone(template: Task, milestone: Milestone, now: datetime) -> Task:
        return Task(
            organization_id=template.organization_id,
            title=template.title,
            priority=template.priority,
            assigned_agent_id=template.assigned_agent_id,
            assigned_type=template.assigned_type,
            milestone_id=milestone.id,
            status=TaskStatus.PENDING,
            created_at=now,
            updated_at=now,
            status_history=[
                StatusChange(
                    from_status=TaskStatus.DRAFT,
                    to_status=TaskStatus.PENDING,
                    note=f"Scheduled run of milestone {milestone.name or milestone.id}",
                    changed_at=now,
                )
            ],
        )
