"""Task queue dispatch.

Contains:
- TaskDispatcher, the batch dispatch loop
- Execution service collaborators
- Batch and per-task result models
"""

from governor.dispatch.dispatcher import TaskDispatcher
from governor.dispatch.errors import TaskExecutionError
from governor.dispatch.executor import HttpTaskExecutor, TaskExecutor
from governor.dispatch.models import (
    AGENT_NOT_AVAILABLE,
    BatchResult,
    ExecutionOutcome,
    TaskResult,
)

__all__ = [
    "AGENT_NOT_AVAILABLE",
    "BatchResult",
    "ExecutionOutcome",
    "HttpTaskExecutor",
    "TaskDispatcher",
    "TaskExecutionError",
    "TaskExecutor",
    "TaskResult",
]
