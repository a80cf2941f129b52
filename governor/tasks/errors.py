"""Task domain errors."""

from governor.tasks.models import TaskStatus


class InvalidTransitionError(Exception):
    """Raised when a task status change is not allowed."""

    def __init__(self, task_id: str, from_status: TaskStatus, to_status: TaskStatus) -> None:
        super().__init__(
            f"Task {task_id} cannot move from {from_status.value} to {to_status.value}"
        )
        self.task_id = task_id
        self.from_status = from_status
        self.to_status = to_status
