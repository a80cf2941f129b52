"""Task status state machine.

draft -> pending -> queued -> in_progress -> {review, failed, cancelled}
review -> {completed, in_progress}
{completed, failed, cancelled} -> pending (re-open / retry)

Work that has not started (draft, pending, queued) may also be cancelled.
"""

from datetime import UTC, datetime

from governor.tasks.errors import InvalidTransitionError
from governor.tasks.models import StatusChange, Task, TaskStatus

ALLOWED_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.DRAFT: frozenset({TaskStatus.PENDING, TaskStatus.CANCELLED}),
    TaskStatus.PENDING: frozenset({TaskStatus.QUEUED, TaskStatus.CANCELLED}),
    TaskStatus.QUEUED: frozenset({TaskStatus.IN_PROGRESS, TaskStatus.CANCELLED}),
    TaskStatus.IN_PROGRESS: frozenset(
        {TaskStatus.REVIEW, TaskStatus.FAILED, TaskStatus.CANCELLED}
    ),
    TaskStatus.REVIEW: frozenset({TaskStatus.COMPLETED, TaskStatus.IN_PROGRESS}),
    TaskStatus.COMPLETED: frozenset({TaskStatus.PENDING}),
    TaskStatus.FAILED: frozenset({TaskStatus.PENDING}),
    TaskStatus.CANCELLED: frozenset({TaskStatus.PENDING}),
}

DISPATCH_TERMINAL: frozenset[TaskStatus] = frozenset(
    {TaskStatus.COMPLETED, TaskStatus.CANCELLED}
)


def can_transition(from_status: TaskStatus, to_status: TaskStatus) -> bool:
    return to_status in ALLOWED_TRANSITIONS[from_status]


def is_dispatch_terminal(status: TaskStatus) -> bool:
    """Completed and cancelled tasks are never dispatched again; failed ones may be retried."""
    return status in DISPATCH_TERMINAL


def transition(
    task: Task,
    to_status: TaskStatus,
    *,
    changed_by: str = "system",
    changed_by_type: str = "system",
    note: str | None = None,
    now: datetime | None = None,
) -> Task:
    """Return a copy of the task moved to a new status.

    Appends a history entry and maintains started_at / completed_at.

    Raises:
        InvalidTransitionError: If the move is not allowed
    """
    if not can_transition(task.status, to_status):
        raise InvalidTransitionError(task.id, task.status, to_status)

    now = now or datetime.now(UTC)
    change = StatusChange(
        from_status=task.status,
        to_status=to_status,
        changed_by=changed_by,
        changed_by_type=changed_by_type,
        note=note,
        changed_at=now,
    )

    updates: dict = {
        "status": to_status,
        "updated_at": now,
        "status_history": [*task.status_history, change],
    }
    if to_status == TaskStatus.IN_PROGRESS and task.started_at is None:
        updates["started_at"] = now
    if to_status == TaskStatus.COMPLETED:
        updates["completed_at"] = now
    elif to_status == TaskStatus.PENDING:
        # Re-opened work starts a fresh run
        updates["started_at"] = None
        updates["completed_at"] = None

    return task.model_copy(update=updates)
