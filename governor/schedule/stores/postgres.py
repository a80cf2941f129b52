"""PostgreSQL implementation of MilestoneStore.

Uses asyncpg for async database access.
"""

import json
from datetime import datetime
from typing import Any

from governor.db.errors import ConnectionError
from governor.db.pool import PostgresPool
from governor.observability.logging import get_logger
from governor.schedule.milestones import Milestone
from governor.schedule.models import RecurrenceSpec
from governor.schedule.store import MilestoneStore
from governor.tasks.models import AssigneeType, Task, TaskPriority, TaskStatus

logger = get_logger(__name__)

_MILESTONE_COLUMNS = """
    id, organization_id, project_id, name, schedule, is_schedule_active,
    next_run_at, last_run_at, deleted_at
"""


class PostgresMilestoneStore(MilestoneStore):
    """PostgreSQL implementation of MilestoneStore.

    Milestones live in the milestones table; the tasks cloned on each run
    come from milestone_task_templates.
    """

    def __init__(self, pool: PostgresPool) -> None:
        """Initialize with connection pool.

        Args:
            pool: PostgreSQL connection pool
        """
        self._pool = pool

    async def save(self, milestone: Milestone) -> str:
        """Upsert a milestone."""
        schedule = (
            json.dumps(milestone.schedule.model_dump(mode="json", by_alias=True))
            if milestone.schedule
            else None
        )
        try:
            async with self._pool.acquire() as conn:
                await conn.execute(
                    f"""
                    INSERT INTO milestones ({_MILESTONE_COLUMNS})
                    VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
                    ON CONFLICT (id) DO UPDATE SET
                        project_id = EXCLUDED.project_id,
                        name = EXCLUDED.name,
                        schedule = EXCLUDED.schedule,
                        is_schedule_active = EXCLUDED.is_schedule_active,
                        next_run_at = EXCLUDED.next_run_at,
                        last_run_at = EXCLUDED.last_run_at,
                        deleted_at = EXCLUDED.deleted_at,
                        updated_at = NOW()
                    """,
                    milestone.id,
                    milestone.organization_id,
                    milestone.project_id,
                    milestone.name,
                    schedule,
                    milestone.is_schedule_active,
                    milestone.next_run_at,
                    milestone.last_run_at,
                    milestone.deleted_at,
                )
                return milestone.id
        except Exception as e:
            logger.error(
                "postgres_save_milestone_error", milestone_id=milestone.id, error=str(e)
            )
            raise ConnectionError(f"Failed to save milestone: {e}", cause=e) from e

    async def get(self, milestone_id: str) -> Milestone | None:
        """Get a milestone by ID."""
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"SELECT {_MILESTONE_COLUMNS} FROM milestones WHERE id = $1",
                    milestone_id,
                )
                if row:
                    return self._row_to_milestone(row)
                return None
        except Exception as e:
            logger.error(
                "postgres_get_milestone_error", milestone_id=milestone_id, error=str(e)
            )
            raise ConnectionError(f"Failed to get milestone: {e}", cause=e) from e

    async def list_due(self, now: datetime) -> list[Milestone]:
        """Get milestones that should run."""
        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(
                    f"""
                    SELECT {_MILESTONE_COLUMNS}
                    FROM milestones
                    WHERE is_schedule_active = true
                      AND next_run_at IS NOT NULL
                      AND next_run_at <= $1
                      AND deleted_at IS NULL
                    ORDER BY next_run_at ASC
                    """,
                    now,
                )
                return [self._row_to_milestone(row) for row in rows]
        except Exception as e:
            logger.error("postgres_list_due_milestones_error", error=str(e))
            raise ConnectionError(f"Failed to list due milestones: {e}", cause=e) from e

    async def list_template_tasks(self, milestone_id: str) -> list[Task]:
        """Get template tasks in sort order."""
        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(
                    """
                    SELECT t.id, m.organization_id, t.title, t.priority,
                           t.assigned_agent_id, t.assigned_type, t.created_at
                    FROM milestone_task_templates t
                    JOIN milestones m ON m.id = t.milestone_id
                    WHERE t.milestone_id = $1
                      AND t.deleted_at IS NULL
                    ORDER BY t.sort_order ASC, t.created_at ASC
                    """,
                    milestone_id,
                )
                return [self._row_to_template(row, milestone_id) for row in rows]
        except Exception as e:
            logger.error(
                "postgres_list_template_tasks_error",
                milestone_id=milestone_id,
                error=str(e),
            )
            raise ConnectionError(f"Failed to list template tasks: {e}", cause=e) from e

    async def save_template_task(self, milestone_id: str, task: Task, sort_order: int = 0) -> str:
        """Insert or replace a template task."""
        try:
            async with self._pool.acquire() as conn:
                await conn.execute(
                    """
                    INSERT INTO milestone_task_templates (
                        id, milestone_id, title, priority,
                        assigned_agent_id, assigned_type, sort_order
                    )
                    VALUES ($1, $2, $3, $4, $5, $6, $7)
                    ON CONFLICT (id) DO UPDATE SET
                        title = EXCLUDED.title,
                        priority = EXCLUDED.priority,
                        assigned_agent_id = EXCLUDED.assigned_agent_id,
                        assigned_type = EXCLUDED.assigned_type,
                        sort_order = EXCLUDED.sort_order
                    """,
                    task.id,
                    milestone_id,
                    task.title,
                    task.priority.value,
                    task.assigned_agent_id,
                    task.assigned_type.value if task.assigned_type else None,
                    sort_order,
                )
                return task.id
        except Exception as e:
            logger.error(
                "postgres_save_template_task_error",
                milestone_id=milestone_id,
                error=str(e),
            )
            raise ConnectionError(f"Failed to save template task: {e}", cause=e) from e

    def _row_to_milestone(self, row: Any) -> Milestone:
        schedule = row["schedule"]
        if isinstance(schedule, str):
            schedule = json.loads(schedule)
        return Milestone(
            id=str(row["id"]),
            organization_id=str(row["organization_id"]),
            project_id=str(row["project_id"]) if row["project_id"] else None,
            name=row["name"] or "",
            schedule=RecurrenceSpec.model_validate(schedule) if schedule else None,
            is_schedule_active=row["is_schedule_active"],
            next_run_at=row["next_run_at"],
            last_run_at=row["last_run_at"],
            deleted_at=row["deleted_at"],
        )

    def _row_to_template(self, row: Any, milestone_id: str) -> Task:
        return Task(
            id=str(row["id"]),
            organization_id=str(row["organization_id"]),
            title=row["title"] or "",
            status=TaskStatus.DRAFT,
            priority=TaskPriority(row["priority"]),
            assigned_agent_id=(
                str(row["assigned_agent_id"]) if row["assigned_agent_id"] else None
            ),
            assigned_type=AssigneeType(row["assigned_type"]) if row["assigned_type"] else None,
            milestone_id=milestone_id,
            created_at=row["created_at"],
            updated_at=row["created_at"],
        )
