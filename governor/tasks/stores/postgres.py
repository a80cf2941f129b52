"""PostgreSQL implementation of TaskStore.

Uses asyncpg for async database access.
"""

import json
from collections.abc import Iterable
from typing import Any

from governor.db.errors import ConnectionError
from governor.db.pool import PostgresPool
from governor.observability.logging import get_logger
from governor.tasks.models import (
    Agent,
    AssigneeType,
    HealthStatus,
    StatusChange,
    Task,
    TaskPriority,
    TaskStatus,
)
from governor.tasks.store import TaskStore

logger = get_logger(__name__)

_TASK_COLUMNS = """
    id, organization_id, title, status, priority, assigned_agent_id,
    assigned_type, milestone_id, created_at, updated_at, started_at,
    completed_at, deleted_at, status_history
"""

_AGENT_COLUMNS = """
    id, organization_id, alias, is_active, paused_at, consecutive_failures,
    max_consecutive_failures, health_status
"""

# Explicit rank; never ORDER BY the priority text
_PRIORITY_RANK_SQL = """
    CASE priority
        WHEN 'critical' THEN 0
        WHEN 'high' THEN 1
        WHEN 'medium' THEN 2
        WHEN 'low' THEN 3
        ELSE 4
    END
"""


class PostgresTaskStore(TaskStore):
    """PostgreSQL implementation of TaskStore.

    Uses asyncpg connection pool for efficient database access.
    """

    def __init__(self, pool: PostgresPool) -> None:
        """Initialize with connection pool.

        Args:
            pool: PostgreSQL connection pool
        """
        self._pool = pool

    async def save_task(self, task: Task) -> str:
        """Upsert a task."""
        try:
            async with self._pool.acquire() as conn:
                await conn.execute(
                    f"""
                    INSERT INTO tasks ({_TASK_COLUMNS})
                    VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13, $14)
                    ON CONFLICT (id) DO UPDATE SET
                        title = EXCLUDED.title,
                        status = EXCLUDED.status,
                        priority = EXCLUDED.priority,
                        assigned_agent_id = EXCLUDED.assigned_agent_id,
                        assigned_type = EXCLUDED.assigned_type,
                        milestone_id = EXCLUDED.milestone_id,
                        updated_at = EXCLUDED.updated_at,
                        started_at = EXCLUDED.started_at,
                        completed_at = EXCLUDED.completed_at,
                        deleted_at = EXCLUDED.deleted_at,
                        status_history = EXCLUDED.status_history
                    """,
                    task.id,
                    task.organization_id,
                    task.title,
                    task.status.value,
                    task.priority.value,
                    task.assigned_agent_id,
                    task.assigned_type.value if task.assigned_type else None,
                    task.milestone_id,
                    task.created_at,
                    task.updated_at,
                    task.started_at,
                    task.completed_at,
                    task.deleted_at,
                    json.dumps([c.model_dump(mode="json") for c in task.status_history]),
                )
                logger.debug("task_saved", task_id=task.id, status=task.status.value)
                return task.id
        except Exception as e:
            logger.error("postgres_save_task_error", task_id=task.id, error=str(e))
            raise ConnectionError(f"Failed to save task: {e}", cause=e) from e

    async def get_task(self, task_id: str) -> Task | None:
        """Get a task by ID."""
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"SELECT {_TASK_COLUMNS} FROM tasks WHERE id = $1",
                    task_id,
                )
                if row:
                    return self._row_to_task(row)
                return None
        except Exception as e:
            logger.error("postgres_get_task_error", task_id=task_id, error=str(e))
            raise ConnectionError(f"Failed to get task: {e}", cause=e) from e

    async def fetch_queued_tasks(self, limit: int) -> list[Task]:
        """Get dispatchable tasks in priority order."""
        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(
                    f"""
                    SELECT {_TASK_COLUMNS}
                    FROM tasks
                    WHERE status = 'queued'
                      AND assigned_type = 'agent'
                      AND assigned_agent_id IS NOT NULL
                      AND deleted_at IS NULL
                    ORDER BY {_PRIORITY_RANK_SQL} ASC, created_at ASC
                    LIMIT $1
                    """,
                    limit,
                )
                return [self._row_to_task(row) for row in rows]
        except Exception as e:
            logger.error("postgres_fetch_queued_tasks_error", error=str(e))
            raise ConnectionError(f"Failed to fetch queued tasks: {e}", cause=e) from e

    async def fetch_agents_by_ids(self, agent_ids: Iterable[str]) -> dict[str, Agent]:
        """Get agents keyed by ID in one query."""
        ids = sorted(set(agent_ids))
        if not ids:
            return {}
        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(
                    f"SELECT {_AGENT_COLUMNS} FROM agents WHERE id = ANY($1::text[])",
                    ids,
                )
                agents = [self._row_to_agent(row) for row in rows]
                return {agent.id: agent for agent in agents}
        except Exception as e:
            logger.error("postgres_fetch_agents_error", count=len(ids), error=str(e))
            raise ConnectionError(f"Failed to fetch agents: {e}", cause=e) from e

    async def get_active_task_count(self, organization_id: str) -> int:
        """Count active tasks for an organization."""
        try:
            async with self._pool.acquire() as conn:
                count = await conn.fetchval(
                    """
                    SELECT COUNT(*)
                    FROM tasks
                    WHERE organization_id = $1
                      AND status IN ('queued', 'in_progress', 'review')
                      AND deleted_at IS NULL
                    """,
                    organization_id,
                )
                return int(count or 0)
        except Exception as e:
            logger.error(
                "postgres_active_task_count_error",
                organization_id=organization_id,
                error=str(e),
            )
            raise ConnectionError(f"Failed to count active tasks: {e}", cause=e) from e

    async def save_agent(self, agent: Agent) -> str:
        """Upsert an agent."""
        try:
            async with self._pool.acquire() as conn:
                await conn.execute(
                    f"""
                    INSERT INTO agents ({_AGENT_COLUMNS})
                    VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
                    ON CONFLICT (id) DO UPDATE SET
                        organization_id = EXCLUDED.organization_id,
                        alias = EXCLUDED.alias,
                        is_active = EXCLUDED.is_active,
                        paused_at = EXCLUDED.paused_at,
                        consecutive_failures = EXCLUDED.consecutive_failures,
                        max_consecutive_failures = EXCLUDED.max_consecutive_failures,
                        health_status = EXCLUDED.health_status
                    """,
                    agent.id,
                    agent.organization_id,
                    agent.alias,
                    agent.is_active,
                    agent.paused_at,
                    agent.consecutive_failures,
                    agent.max_consecutive_failures,
                    agent.health_status.value,
                )
                return agent.id
        except Exception as e:
            logger.error("postgres_save_agent_error", agent_id=agent.id, error=str(e))
            raise ConnectionError(f"Failed to save agent: {e}", cause=e) from e

    def _row_to_task(self, row: Any) -> Task:
        history = row["status_history"] or "[]"
        if isinstance(history, str):
            history = json.loads(history)
        return Task(
            id=str(row["id"]),
            organization_id=str(row["organization_id"]),
            title=row["title"] or "",
            status=TaskStatus(row["status"]),
            priority=TaskPriority(row["priority"]),
            assigned_agent_id=(
                str(row["assigned_agent_id"]) if row["assigned_agent_id"] else None
            ),
            assigned_type=AssigneeType(row["assigned_type"]) if row["assigned_type"] else None,
            milestone_id=str(row["milestone_id"]) if row["milestone_id"] else None,
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            started_at=row["started_at"],
            completed_at=row["completed_at"],
            deleted_at=row["deleted_at"],
            status_history=[StatusChange.model_validate(c) for c in history],
        )

    def _row_to_agent(self, row: Any) -> Agent:
        return Agent(
            id=str(row["id"]),
            organization_id=str(row["organization_id"]) if row["organization_id"] else None,
            alias=row["alias"] or "",
            is_active=row["is_active"],
            paused_at=row["paused_at"],
            consecutive_failures=row["consecutive_failures"],
            max_consecutive_failures=row["max_consecutive_failures"],
            health_status=HealthStatus(row["health_status"]),
        )
