"""Organization-wide hard-limit checks.

Results are advisory: violations are reported as strings and the caller
decides whether to block or warn.
"""

from typing import TYPE_CHECKING

from governor.guardrails.models import HardLimitResult, TrustConfiguration
from governor.observability.logging import get_logger
from governor.observability.metrics import HARD_LIMIT_VIOLATIONS

if TYPE_CHECKING:
    from governor.tasks.store import TaskStore

logger = get_logger(__name__)


class HardLimitChecker:
    """Compares live aggregate state against configured ceilings."""

    def __init__(self, task_store: "TaskStore | None" = None) -> None:
        """Initialize the checker.

        Args:
            task_store: Source of active task counts; None disables checks
        """
        self._task_store = task_store

    async def check_hard_limits(
        self, config: TrustConfiguration, organization_id: str
    ) -> HardLimitResult:
        """Check an organization's limits.

        Returns within_limits=True with no violations when no store is
        configured or the store cannot be read.
        """
        if self._task_store is None:
            return HardLimitResult(within_limits=True)

        try:
            active = await self._task_store.get_active_task_count(organization_id)
        except Exception as e:
            logger.warning(
                "hard_limit_check_failed",
                organization_id=organization_id,
                error=str(e),
            )
            return HardLimitResult(within_limits=True)

        violations: list[str] = []
        if active >= config.max_total_active_tasks:
            violations.append(
                f"Active task limit reached: {active}/{config.max_total_active_tasks}"
            )
            HARD_LIMIT_VIOLATIONS.labels(limit="max_total_active_tasks").inc()
            logger.info(
                "hard_limit_reached",
                organization_id=organization_id,
                limit="max_total_active_tasks",
                active=active,
                maximum=config.max_total_active_tasks,
            )

        return HardLimitResult(within_limits=not violations, violations=violations)
