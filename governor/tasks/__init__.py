"""Tasks and agents.

Contains:
- Task and Agent models with priority ranking and availability
- The task status state machine
- Task stores
"""

from governor.tasks.errors import InvalidTransitionError
from governor.tasks.models import (
    ACTIVE_STATUSES,
    PRIORITY_RANK,
    Agent,
    AssigneeType,
    HealthStatus,
    StatusChange,
    Task,
    TaskPriority,
    TaskStatus,
)
from governor.tasks.store import TaskStore
from governor.tasks.transitions import can_transition, is_dispatch_terminal, transition

__all__ = [
    "ACTIVE_STATUSES",
    "PRIORITY_RANK",
    "Agent",
    "AssigneeType",
    "HealthStatus",
    "InvalidTransitionError",
    "StatusChange",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "TaskStore",
    "can_transition",
    "is_dispatch_terminal",
    "transition",
]
