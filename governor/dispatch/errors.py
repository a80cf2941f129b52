"""Dispatch errors."""


class TaskExecutionError(Exception):
    """Raised when the execution service cannot be reached or answers garbage."""

    def __init__(self, message: str, task_id: str | None = None) -> None:
        super().__init__(message)
        self.task_id = task_id
