"""Request and response models for governance endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from governor.guardrails.models import ActionRequest
from governor.schedule.models import RecurrenceSpec
from governor.tasks.models import TaskPriority


class ProcessQueueRequest(BaseModel):
    """Body of POST /v1/queue/process."""

    limit: int | None = Field(
        default=None, description="Batch size; defaults to 10 and is capped at 50"
    )


class EvaluateRequest(BaseModel):
    """Body of POST /v1/guardrails/evaluate."""

    organization_id: str = Field(..., min_length=1)
    request: ActionRequest
    task_id: str | None = None
    agent_id: str | None = None


class FilterRequest(BaseModel):
    """Body of POST /v1/guardrails/filter."""

    organization_id: str = Field(..., min_length=1)
    requests: list[ActionRequest] = Field(default_factory=list)
    task_id: str | None = None
    agent_id: str | None = None


class NextRunRequest(BaseModel):
    """Body of POST /v1/schedules/next-run.

    `schedule` is left loosely typed so malformed schedules produce a null
    next run rather than a validation error.
    """

    schedule: Any = None
    now: datetime | None = None


class NextRunResponse(BaseModel):
    """Next trigger instant, or null when the schedule never fires again."""

    next_run_at: datetime | None = None
    schedule: RecurrenceSpec | None = None


class TemplateTaskRequest(BaseModel):
    """One task cloned on every run of a milestone."""

    title: str = Field(..., min_length=1)
    priority: TaskPriority = TaskPriority.MEDIUM
    assigned_agent_id: str | None = None


class CreateMilestoneRequest(BaseModel):
    """Body of POST /v1/milestones."""

    organization_id: str = Field(..., min_length=1)
    name: str = ""
    project_id: str | None = None
    schedule: RecurrenceSpec | None = None
    tasks: list[TemplateTaskRequest] = Field(default_factory=list)


class UpdateScheduleRequest(BaseModel):
    """Body of PUT /v1/milestones/{milestone_id}/schedule. A null schedule clears it."""

    schedule: RecurrenceSpec | None = None


class ToggleScheduleRequest(BaseModel):
    """Body of POST /v1/milestones/{milestone_id}/schedule/toggle."""

    active: bool
