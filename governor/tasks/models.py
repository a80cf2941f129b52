"""Task and agent domain models."""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class TaskStatus(str, Enum):
    """Lifecycle states of a task."""

    DRAFT = "draft"
    PENDING = "pending"
    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


ACTIVE_STATUSES: frozenset[TaskStatus] = frozenset(
    {TaskStatus.QUEUED, TaskStatus.IN_PROGRESS, TaskStatus.REVIEW}
)


class TaskPriority(str, Enum):
    """Task priority. Order with PRIORITY_RANK, never by value."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_RANK: dict[TaskPriority, int] = {
    TaskPriority.CRITICAL: 0,
    TaskPriority.HIGH: 1,
    TaskPriority.MEDIUM: 2,
    TaskPriority.LOW: 3,
}

assert set(PRIORITY_RANK) == set(TaskPriority), "unranked task priority"


class AssigneeType(str, Enum):
    """Kind of assignee a task is routed to."""

    USER = "user"
    AGENT = "agent"


class HealthStatus(str, Enum):
    """Agent health as reported by the execution service."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    FAILING = "failing"
    STOPPED = "stopped"


class StatusChange(BaseModel):
    """One entry in a task's status history."""

    model_config = ConfigDict(frozen=True)

    from_status: TaskStatus
    to_status: TaskStatus
    changed_by: str = Field(default="system")
    changed_by_type: str = Field(default="system", description="user, agent or system")
    note: str | None = None
    changed_at: datetime = Field(default_factory=utc_now)


class Task(BaseModel):
    """Unit of work owned by an organization."""

    id: str = Field(default_factory=lambda: str(uuid4()), description="Unique identifier")
    organization_id: str = Field(..., description="Owning organization")
    title: str = Field(default="", description="Short description")
    status: TaskStatus = Field(default=TaskStatus.DRAFT)
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM)
    assigned_agent_id: str | None = Field(default=None, description="Assigned agent")
    assigned_type: AssigneeType | None = Field(default=None)
    milestone_id: str | None = Field(default=None, description="Owning milestone")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    started_at: datetime | None = None
    completed_at: datetime | None = None
    deleted_at: datetime | None = Field(default=None, description="Soft-delete marker")
    status_history: list[StatusChange] = Field(default_factory=list)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def priority_rank(self) -> int:
        return PRIORITY_RANK[self.priority]

    @property
    def is_dispatchable(self) -> bool:
        """Whether the dispatcher may pick this task up."""
        return (
            self.status == TaskStatus.QUEUED
            and self.assigned_type == AssigneeType.AGENT
            and self.assigned_agent_id is not None
            and not self.is_deleted
        )


class Agent(BaseModel):
    """Autonomous agent that executes tasks."""

    id: str = Field(default_factory=lambda: str(uuid4()), description="Unique identifier")
    organization_id: str | None = Field(default=None, description="Owning organization")
    alias: str = Field(default="", description="Display name")
    is_active: bool = Field(default=True)
    paused_at: datetime | None = Field(default=None)
    consecutive_failures: int = Field(default=0, ge=0)
    max_consecutive_failures: int = Field(default=3, ge=0)
    health_status: HealthStatus = Field(default=HealthStatus.HEALTHY)

    @property
    def is_available(self) -> bool:
        """Active, not paused, below the failure threshold, and not failing."""
        return (
            self.is_active
            and self.paused_at is None
            and self.consecutive_failures < self.max_consecutive_failures
            and self.health_status != HealthStatus.FAILING
        )
