"""Scheduled milestones workflow.

Runs hourly on the hour and clones the template tasks of every milestone
that has come due.
"""

from dataclasses import dataclass, field
from datetime import datetime

from governor.observability.logging import get_logger
from governor.schedule.milestones import MilestoneRunResult, MilestoneScheduler

logger = get_logger(__name__)


@dataclass
class ScheduledMilestonesInput:
    """Input for the scheduled milestones workflow."""

    now: datetime | None = None  # None = current time


@dataclass
class ScheduledMilestonesOutput:
    """Output from the scheduled milestones workflow."""

    milestones_run: int
    tasks_created: int
    success: bool
    results: list[MilestoneRunResult] = field(default_factory=list)
    error: str | None = None


class ProcessScheduledMilestonesWorkflow:
    """Workflow that runs due milestones.

    Idempotent per hour: a milestone's next_run_at moves past `now` as
    soon as it has run, so a repeated trigger finds nothing to do.
    """

    WORKFLOW_NAME = "process-scheduled-milestones"
    CRON_SCHEDULE = "0 * * * *"  # Hourly

    def __init__(self, scheduler: MilestoneScheduler) -> None:
        self._scheduler = scheduler

    async def run(self, input_data: ScheduledMilestonesInput) -> ScheduledMilestonesOutput:
        """Run every due milestone."""
        try:
            results = await self._scheduler.run_due(input_data.now)
        except Exception as e:
            logger.error("process_scheduled_milestones_failed", error=str(e))
            return ScheduledMilestonesOutput(
                milestones_run=0, tasks_created=0, success=False, error=str(e)
            )

        created = sum(r.tasks_created for r in results)
        logger.info(
            "scheduled_milestones_processed",
            milestones=len(results),
            failed=sum(1 for r in results if not r.success),
            tasks_created=created,
        )
        return ScheduledMilestonesOutput(
            milestones_run=len(results),
            tasks_created=created,
            success=all(r.success for r in results),
            results=results,
        )
