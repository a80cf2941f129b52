"""Scheduled milestone endpoints.

Every change to a milestone's schedule or activation recomputes its next
run time before it is stored.
"""

from fastapi import APIRouter, status

from governor.api.dependencies import MilestoneSchedulerDep
from governor.api.exceptions import NotFoundError, StoreUnavailableError
from governor.api.models.governance import (
    CreateMilestoneRequest,
    ToggleScheduleRequest,
    UpdateScheduleRequest,
)
from governor.db.errors import StoreError
from governor.observability.logging import get_logger
from governor.schedule.milestones import Milestone
from governor.tasks.models import AssigneeType, Task

logger = get_logger(__name__)

router = APIRouter(prefix="/milestones")


@router.post("", response_model=Milestone, status_code=status.HTTP_201_CREATED)
async def create_milestone(
    body: CreateMilestoneRequest,
    scheduler: MilestoneSchedulerDep,
) -> Milestone:
    """Create a milestone with its template tasks."""
    milestone = Milestone(
        organization_id=body.organization_id,
        project_id=body.project_id,
        name=body.name,
        schedule=body.schedule,
    )
    templates = [
        Task(
            organization_id=body.organization_id,
            title=item.title,
            priority=item.priority,
            assigned_agent_id=item.assigned_agent_id,
            assigned_type=AssigneeType.AGENT if item.assigned_agent_id else None,
        )
        for item in body.tasks
    ]
    try:
        return await scheduler.create_milestone(milestone, templates)
    except StoreError as e:
        raise StoreUnavailableError("Milestone store unavailable") from e


@router.put("/{milestone_id}/schedule", response_model=Milestone)
async def update_schedule(
    milestone_id: str,
    body: UpdateScheduleRequest,
    scheduler: MilestoneSchedulerDep,
) -> Milestone:
    """Replace a milestone's schedule."""
    try:
        milestone = await scheduler.update_schedule(milestone_id, body.schedule)
    except StoreError as e:
        raise StoreUnavailableError("Milestone store unavailable") from e
    if milestone is None:
        raise NotFoundError(f"Milestone {milestone_id} not found")
    return milestone


@router.post("/{milestone_id}/schedule/toggle", response_model=Milestone)
async def toggle_schedule(
    milestone_id: str,
    body: ToggleScheduleRequest,
    scheduler: MilestoneSchedulerDep,
) -> Milestone:
    """Pause or resume a milestone's schedule."""
    try:
        milestone = await scheduler.toggle_schedule(milestone_id, body.active)
    except StoreError as e:
        raise StoreUnavailableError("Milestone store unavailable") from e
    if milestone is None:
        raise NotFoundError(f"Milestone {milestone_id} not found")
    logger.info(
        "milestone_schedule_toggled", milestone_id=milestone_id, active=body.active
    )
    return milestone
