"""Task queue workflow.

Timer-triggered wrapper around one dispatch batch. Runs every minute by
default; the batch itself is bounded, so overlapping triggers only ever
see a small slice of the queue.
"""

from dataclasses import dataclass, field

from governor.dispatch.dispatcher import TaskDispatcher
from governor.dispatch.models import TaskResult
from governor.observability.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ProcessQueueInput:
    """Input for the task queue workflow."""

    limit: int | None = None  # None = configured default


@dataclass
class ProcessQueueOutput:
    """Output from the task queue workflow."""

    processed: int
    succeeded: int
    failed: int
    success: bool
    results: list[TaskResult] = field(default_factory=list)
    error: str | None = None


class ProcessTaskQueueWorkflow:
    """Workflow that dispatches one batch of queued agent tasks.

    Never raises: a batch that cannot even read the queue is reported as
    an unsuccessful run with zero tasks processed.
    """

    WORKFLOW_NAME = "process-task-queue"
    CRON_SCHEDULE = "* * * * *"  # Every minute

    def __init__(self, dispatcher: TaskDispatcher) -> None:
        """Initialize workflow.

        Args:
            dispatcher: Dispatcher that runs the batch
        """
        self._dispatcher = dispatcher

    async def run(self, input_data: ProcessQueueInput) -> ProcessQueueOutput:
        """Execute one dispatch batch."""
        try:
            batch = await self._dispatcher.process_queue(input_data.limit)
        except Exception as e:
            logger.error(
                "process_task_queue_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            return ProcessQueueOutput(
                processed=0, succeeded=0, failed=0, success=False, error=str(e)
            )

        return ProcessQueueOutput(
            processed=batch.processed,
            succeeded=batch.success,
            failed=batch.failed,
            success=True,
            results=batch.results,
        )
