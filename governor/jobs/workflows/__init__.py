"""Timer-triggered workflow definitions.

This module contains:
- ProcessTaskQueueWorkflow: Dispatches queued agent tasks
- ProcessScheduledMilestonesWorkflow: Runs due scheduled milestones
"""

from governor.jobs.workflows.process_queue import (
    ProcessQueueInput,
    ProcessQueueOutput,
    ProcessTaskQueueWorkflow,
)
from governor.jobs.workflows.scheduled_milestones import (
    ProcessScheduledMilestonesWorkflow,
    ScheduledMilestonesInput,
    ScheduledMilestonesOutput,
)

__all__ = [
    "ProcessTaskQueueWorkflow",
    "ProcessQueueInput",
    "ProcessQueueOutput",
    "ProcessScheduledMilestonesWorkflow",
    "ScheduledMilestonesInput",
    "ScheduledMilestonesOutput",
]
