"""PostgreSQL implementation of AuditSink.

Uses asyncpg for async database access.
"""

import json
from uuid import UUID

from governor.audit.models import AuditRecord, ExecutionEvent
from governor.audit.store import AuditSink
from governor.db.errors import ConnectionError
from governor.db.pool import PostgresPool
from governor.observability.logging import get_logger

logger = get_logger(__name__)


class PostgresAuditSink(AuditSink):
    """PostgreSQL implementation of AuditSink.

    Writes to guardrail_audit_log and execution_audit_log. Rows are never
    updated once inserted.
    """

    def __init__(self, pool: PostgresPool) -> None:
        """Initialize with connection pool.

        Args:
            pool: PostgreSQL connection pool
        """
        self._pool = pool

    async def insert_record(self, record: AuditRecord) -> UUID:
        """Append a guardrail audit record."""
        try:
            async with self._pool.acquire() as conn:
                await conn.execute(
                    """
                    INSERT INTO guardrail_audit_log (
                        id, organization_id, task_id, agent_id, category,
                        action, decision, decided_by, trust_level_required,
                        trust_level_current, rationale, metadata, created_at
                    ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13)
                    """,
                    record.id,
                    record.organization_id,
                    record.task_id,
                    record.agent_id,
                    record.category,
                    record.action,
                    record.decision,
                    record.decided_by,
                    record.trust_level_required,
                    record.trust_level_current,
                    record.rationale,
                    json.dumps(record.metadata, default=str),
                    record.timestamp,
                )
                logger.debug("audit_record_saved", record_id=str(record.id))
                return record.id
        except Exception as e:
            logger.error(
                "postgres_insert_audit_record_error",
                record_id=str(record.id),
                error=str(e),
            )
            raise ConnectionError(f"Failed to insert audit record: {e}", cause=e) from e

    async def insert_event(self, event: ExecutionEvent) -> UUID:
        """Append an execution event."""
        try:
            async with self._pool.acquire() as conn:
                await conn.execute(
                    """
                    INSERT INTO execution_audit_log (
                        id, event_type, organization_id, execution_id,
                        provider, model, input_tokens, output_tokens,
                        duration_ms, cost_cents, tool_name, tool_input,
                        tool_output, tool_success, agent_id, task_id,
                        step_index, error_message, error_code, created_at
                    ) VALUES (
                        $1, $2, $3, $4, $5, $6, $7, $8, $9, $10,
                        $11, $12, $13, $14, $15, $16, $17, $18, $19, $20
                    )
                    """,
                    event.id,
                    event.event_type.value,
                    event.organization_id,
                    event.execution_id,
                    event.provider,
                    event.model,
                    event.input_tokens,
                    event.output_tokens,
                    event.duration_ms,
                    event.cost_cents,
                    event.tool_name,
                    json.dumps(event.tool_input, default=str)
                    if event.tool_input is not None
                    else None,
                    event.tool_output,
                    event.tool_success,
                    event.agent_id,
                    event.task_id,
                    event.step_index,
                    event.error_message,
                    event.error_code,
                    event.timestamp,
                )
                logger.debug(
                    "execution_event_saved",
                    event_id=str(event.id),
                    event_type=event.event_type.value,
                )
                return event.id
        except Exception as e:
            logger.error(
                "postgres_insert_execution_event_error",
                event_id=str(event.id),
                error=str(e),
            )
            raise ConnectionError(f"Failed to insert execution event: {e}", cause=e) from e
