"""Background jobs.

This module provides the timer-triggered entry points:
- Task queue dispatch
- Scheduled milestone runs

Workflows declare WORKFLOW_NAME and CRON_SCHEDULE for external schedulers.
JobRunner runs them in-process when no external scheduler is used.
"""

from governor.jobs.runner import JobRunner, PeriodicJob

__all__ = ["JobRunner", "PeriodicJob"]
