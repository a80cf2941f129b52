"""Queue dispatcher.

Processes one bounded batch of queued tasks sequentially. Each task gets a
single execution attempt; failures are isolated to that task's result.
"""

import asyncio
import time

from governor.config.models.dispatch import DispatchConfig
from governor.dispatch.executor import TaskExecutor
from governor.dispatch.models import AGENT_NOT_AVAILABLE, BatchResult, TaskResult
from governor.observability.logging import get_logger
from governor.observability.metrics import DISPATCH_BATCH_LATENCY, DISPATCH_TASK_RESULTS
from governor.tasks.models import Task
from governor.tasks.store import TaskStore

logger = get_logger(__name__)


class TaskDispatcher:
    """Pulls queued agent tasks and hands them to the execution service.

    Batches run sequentially with a fixed pause between invocations, which
    bounds burst load on the execution service. `request_shutdown` stops a
    running batch between tasks, never in the middle of one.
    """

    def __init__(
        self,
        task_store: TaskStore,
        executor: TaskExecutor,
        config: DispatchConfig | None = None,
    ) -> None:
        """Initialize dispatcher.

        Args:
            task_store: Source of queued tasks and agent state
            executor: Execution service collaborator
            config: Batch size and pacing; defaults apply when None
        """
        self._task_store = task_store
        self._executor = executor
        self._config = config or DispatchConfig()
        self._shutdown_requested = False

    def resolve_limit(self, limit: int | None) -> int:
        """Apply the default and clamp to [1, max_limit]."""
        if limit is None:
            return self._config.default_limit
        return max(1, min(limit, self._config.max_limit))

    def request_shutdown(self) -> None:
        """Stop the current batch after the task in flight."""
        self._shutdown_requested = True
        logger.info("dispatch_shutdown_requested")

    @property
    def shutdown_requested(self) -> bool:
        return self._shutdown_requested

    async def process_queue(self, limit: int | None = None) -> BatchResult:
        """Process up to `limit` queued tasks.

        Store read failures propagate; everything that happens to an
        individual task is reported in its result instead.
        """
        batch_limit = self.resolve_limit(limit)
        start = time.perf_counter()

        tasks = await self._task_store.fetch_queued_tasks(batch_limit)
        if not tasks:
            logger.debug("dispatch_queue_empty", limit=batch_limit)
            return BatchResult()

        agent_ids = {t.assigned_agent_id for t in tasks if t.assigned_agent_id}
        agents = await self._task_store.fetch_agents_by_ids(agent_ids)
        available = {agent_id for agent_id, agent in agents.items() if agent.is_available}

        logger.info(
            "dispatch_batch_started",
            tasks=len(tasks),
            agents=len(agent_ids),
            available_agents=len(available),
            limit=batch_limit,
        )

        results: list[TaskResult] = []
        invoked = 0
        for task in tasks:
            if self._shutdown_requested:
                logger.info(
                    "dispatch_batch_interrupted",
                    handled=len(results),
                    remaining=len(tasks) - len(results),
                )
                break

            if task.assigned_agent_id not in available:
                logger.info(
                    "dispatch_task_skipped",
                    task_id=task.id,
                    agent_id=task.assigned_agent_id,
                    reason=AGENT_NOT_AVAILABLE,
                )
                results.append(
                    TaskResult(task_id=task.id, success=False, error=AGENT_NOT_AVAILABLE)
                )
                DISPATCH_TASK_RESULTS.labels(outcome="agent_unavailable").inc()
                continue

            if invoked and self._config.inter_task_delay_seconds > 0:
                await asyncio.sleep(self._config.inter_task_delay_seconds)
            invoked += 1

            results.append(await self._run_task(task))

        batch = BatchResult.from_results(results)
        DISPATCH_BATCH_LATENCY.observe(time.perf_counter() - start)
        logger.info(
            "dispatch_batch_completed",
            processed=batch.processed,
            success=batch.success,
            failed=batch.failed,
        )
        return batch

    async def _run_task(self, task: Task) -> TaskResult:
        agent_id = task.assigned_agent_id or ""
        try:
            outcome = await self._executor.execute(task.id, agent_id)
        except Exception as e:
            error = str(e) or type(e).__name__
            logger.warning(
                "dispatch_task_error",
                task_id=task.id,
                agent_id=agent_id,
                error=error,
                error_type=type(e).__name__,
            )
            DISPATCH_TASK_RESULTS.labels(outcome="error").inc()
            return TaskResult(task_id=task.id, success=False, error=error)

        if outcome.success:
            logger.info("dispatch_task_succeeded", task_id=task.id, agent_id=agent_id)
            DISPATCH_TASK_RESULTS.labels(outcome="success").inc()
            return TaskResult(task_id=task.id, success=True)

        error = outcome.error or "Unknown error"
        logger.warning(
            "dispatch_task_failed", task_id=task.id, agent_id=agent_id, error=error
        )
        DISPATCH_TASK_RESULTS.labels(outcome="failed").inc()
        return TaskResult(task_id=task.id, success=False, error=error)
