"""In-process periodic job runner.

Used when no external scheduler drives the workflows. Each job runs in its
own loop; a failing run is logged and the job simply runs again at its
next interval.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from governor.observability.logging import get_logger

logger = get_logger(__name__)


@dataclass
class PeriodicJob:
    """A coroutine factory run on a fixed interval."""

    name: str
    interval_seconds: float
    run: Callable[[], Awaitable[Any]]


class JobRunner:
    """Runs registered jobs until stopped."""

    def __init__(self) -> None:
        self._jobs: list[PeriodicJob] = []
        self._tasks: list[asyncio.Task] = []
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def register(
        self, name: str, interval_seconds: float, run: Callable[[], Awaitable[Any]]
    ) -> None:
        """Add a job. Must be called before `start`."""
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._jobs.append(PeriodicJob(name, interval_seconds, run))

    async def start(self) -> None:
        """Start one background loop per job."""
        if self._running:
            logger.warning("job_runner_already_running")
            return

        self._running = True
        self._tasks = [
            asyncio.create_task(self._loop(job), name=f"job-{job.name}") for job in self._jobs
        ]
        logger.info("job_runner_started", jobs=[job.name for job in self._jobs])

    async def stop(self) -> None:
        """Stop every job loop."""
        if not self._running:
            return

        self._running = False
        for task in self._tasks:
            task.cancel()
        for task in self._tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._tasks = []
        logger.info("job_runner_stopped")

    async def _loop(self, job: PeriodicJob) -> None:
        while self._running:
            try:
                await job.run()
            except Exception as e:
                logger.error("job_run_error", job=job.name, error=str(e))

            await asyncio.sleep(job.interval_seconds)
