"""Best-effort audit logger.

Callers hand entries to `AuditLogger.log`, which returns immediately. A
background worker drains a bounded queue into the audit sink. Entries that
cannot be queued or written are counted and logged at warning level; they
never surface to the caller.
"""

import asyncio
import functools
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from governor.audit.costs import estimate_cost_cents
from governor.audit.models import (
    AuditEntry,
    AuditRecord,
    ExecutionEvent,
    ExecutionEventType,
)
from governor.audit.store import AuditSink
from governor.config.models.audit import AuditConfig
from governor.observability.logging import get_logger
from governor.observability.metrics import (
    AUDIT_DROPPED,
    AUDIT_WRITE_FAILURES,
    AUDIT_WRITES,
)

if TYPE_CHECKING:
    from governor.guardrails.models import GuardrailDecision

logger = get_logger(__name__)

TRUNCATION_MARKER = "...[truncated]"


def truncate_bytes(text: str, max_bytes: int) -> str:
    """Bound text to max_bytes UTF-8 bytes, marker included."""
    encoded = text.encode("utf-8")
    if len(encoded) <= max_bytes:
        return text
    budget = max(max_bytes - len(TRUNCATION_MARKER.encode("utf-8")), 0)
    # errors="ignore" drops a multi-byte character split at the cut
    return encoded[:budget].decode("utf-8", errors="ignore") + TRUNCATION_MARKER


def sanitize_tool_input(tool_input: dict[str, Any], max_chars: int = 500) -> dict[str, Any]:
    """Prepare tool input for the audit trail.

    Keys starting with an underscore are internal and dropped. Long string
    values are truncated with a trailing ellipsis.
    """
    sanitized: dict[str, Any] = {}
    for key, value in tool_input.items():
        if key.startswith("_"):
            continue
        if isinstance(value, str) and len(value) > max_chars:
            sanitized[key] = value[:max_chars] + "..."
        else:
            sanitized[key] = value
    return sanitized


def _kind(entry: AuditEntry) -> str:
    return "record" if isinstance(entry, AuditRecord) else "event"


def _best_effort(method: Callable[..., None]) -> Callable[..., None]:
    """Skip inactive loggers and contain errors raised while building an entry."""

    @functools.wraps(method)
    def wrapper(self: "AuditLogger", *args: Any, **kwargs: Any) -> None:
        if not self.is_active:
            return
        try:
            method(self, *args, **kwargs)
        except Exception as e:
            self._failed += 1
            logger.warning("audit_entry_rejected", helper=method.__name__, error=str(e))

    return wrapper


class AuditLogger:
    """Fire-and-forget writer for audit records and execution events.

    The worker starts lazily on the first `log` call made from inside a
    running event loop, or explicitly via `start`. With no sink, or when
    disabled, every call is a no-op.

    The worker follows the running event loop. When the logger is first used
    from a different loop, pending entries move to a fresh queue owned by
    that loop and a new worker is started there.
    """

    def __init__(
        self,
        sink: AuditSink | None = None,
        *,
        enabled: bool = True,
        queue_size: int = 1000,
        tool_output_max_bytes: int = 10_000,
        tool_input_max_chars: int = 500,
    ) -> None:
        """Initialize the logger.

        Args:
            sink: Destination for entries; None makes the logger a no-op
            enabled: Master switch
            queue_size: Maximum entries waiting to be written
            tool_output_max_bytes: Byte bound for stored tool output
            tool_input_max_chars: Length bound for string tool input values
        """
        self._sink = sink
        self._enabled = enabled
        self._tool_output_max_bytes = tool_output_max_bytes
        self._tool_input_max_chars = tool_input_max_chars
        self._queue: asyncio.Queue[AuditEntry] = asyncio.Queue(maxsize=queue_size)
        self._worker: asyncio.Task | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._dropped = 0
        self._failed = 0

    @classmethod
    def from_config(cls, sink: AuditSink | None, config: AuditConfig) -> "AuditLogger":
        """Build a logger from the audit configuration section."""
        return cls(
            sink,
            enabled=config.enabled,
            queue_size=config.queue_size,
            tool_output_max_bytes=config.tool_output_max_bytes,
            tool_input_max_chars=config.tool_input_max_chars,
        )

    @property
    def is_active(self) -> bool:
        """Whether entries are actually written anywhere."""
        return self._enabled and self._sink is not None

    @property
    def dropped_count(self) -> int:
        """Entries dropped because the queue was full."""
        return self._dropped

    @property
    def failed_count(self) -> int:
        """Entries the sink failed to write."""
        return self._failed

    @property
    def pending(self) -> int:
        """Entries queued but not yet written."""
        return self._queue.qsize()

    def log(self, entry: AuditEntry) -> None:
        """Queue an entry for writing. Never raises, never blocks."""
        if not self.is_active:
            return

        try:
            prepared = self._prepare(entry)
            self._queue.put_nowait(prepared)
        except asyncio.QueueFull:
            self._dropped += 1
            AUDIT_DROPPED.labels(kind=_kind(entry)).inc()
            logger.warning(
                "audit_entry_dropped",
                kind=_kind(entry),
                entry_id=str(entry.id),
                queue_size=self._queue.maxsize,
            )
            return
        except Exception as e:
            self._failed += 1
            logger.warning("audit_entry_rejected", error=str(e))
            return

        self._ensure_worker()

    async def start(self) -> None:
        """Start the background worker if it is not already running."""
        if not self.is_active:
            return
        self._ensure_worker()

    async def flush(self) -> None:
        """Wait until every queued entry has been handled."""
        if not self.is_active:
            return
        self._ensure_worker()
        await self._queue.join()

    async def stop(self) -> None:
        """Drain the queue, then stop the worker."""
        if self._worker is None:
            return

        await self.flush()
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None
        logger.info("audit_logger_stopped", dropped=self._dropped, failed=self._failed)

    def _ensure_worker(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop yet; entries wait in the queue until one starts the worker
            return
        if self._loop is not None and self._loop is not loop:
            self._rebind()
        if self._worker is not None and not self._worker.done():
            return
        self._loop = loop
        self._worker = loop.create_task(self._drain(), name="audit-logger")

    def _rebind(self) -> None:
        """Move pending entries to a queue usable from the running loop."""
        queue: asyncio.Queue[AuditEntry] = asyncio.Queue(maxsize=self._queue.maxsize)
        while not self._queue.empty():
            queue.put_nowait(self._queue.get_nowait())
        self._queue = queue
        # The old worker belongs to a loop that is no longer running here
        self._worker = None
        logger.debug("audit_logger_rebound", pending=queue.qsize())

    async def _drain(self) -> None:
        while True:
            entry = await self._queue.get()
            try:
                await self._write(entry)
            finally:
                self._queue.task_done()

    async def _write(self, entry: AuditEntry) -> None:
        kind = _kind(entry)
        try:
            if isinstance(entry, AuditRecord):
                await self._sink.insert_record(entry)  # type: ignore[union-attr]
            else:
                await self._sink.insert_event(entry)  # type: ignore[union-attr]
        except Exception as e:
            self._failed += 1
            AUDIT_WRITE_FAILURES.labels(kind=kind).inc()
            logger.warning(
                "audit_write_failed",
                kind=kind,
                entry_id=str(entry.id),
                organization_id=entry.organization_id,
                error=str(e),
            )
            return
        AUDIT_WRITES.labels(kind=kind).inc()

    def _prepare(self, entry: AuditEntry) -> AuditEntry:
        if isinstance(entry, ExecutionEvent) and entry.tool_output is not None:
            bounded = truncate_bytes(entry.tool_output, self._tool_output_max_bytes)
            if bounded != entry.tool_output:
                return entry.model_copy(update={"tool_output": bounded})
        return entry

    # Helpers

    @_best_effort
    def log_guardrail_decision(
        self,
        decision: "GuardrailDecision",
        *,
        action: str,
        organization_id: str,
        task_id: str | None = None,
        agent_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Project a guardrail decision into an audit record."""
        self.log(
            AuditRecord(
                organization_id=organization_id,
                task_id=task_id,
                agent_id=agent_id,
                category=decision.category.value if decision.category else None,
                action=action,
                decision=decision.decision,
                trust_level_required=decision.trust_level_required,
                trust_level_current=decision.trust_level_current,
                rationale=decision.rationale,
                metadata=metadata or {},
            )
        )

    @_best_effort
    def log_llm_call(
        self,
        organization_id: str,
        *,
        provider: str,
        model: str,
        input_tokens: int,
        output_tokens: int,
        duration_ms: int,
        execution_id: str | None = None,
        agent_id: str | None = None,
        task_id: str | None = None,
        step_index: int | None = None,
    ) -> None:
        """Record an LLM call with its derived cost."""
        self.log(
            ExecutionEvent(
                event_type=ExecutionEventType.LLM_CALL,
                organization_id=organization_id,
                execution_id=execution_id,
                provider=provider,
                model=model,
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                duration_ms=duration_ms,
                cost_cents=estimate_cost_cents(model, input_tokens, output_tokens),
                agent_id=agent_id,
                task_id=task_id,
                step_index=step_index,
            )
        )

    @_best_effort
    def log_tool_call(
        self,
        organization_id: str,
        *,
        tool_name: str,
        tool_input: dict[str, Any],
        tool_output: str,
        success: bool,
        duration_ms: int,
        execution_id: str | None = None,
        agent_id: str | None = None,
        task_id: str | None = None,
        step_index: int | None = None,
    ) -> None:
        """Record a tool invocation and its (truncated) result."""
        self.log(
            ExecutionEvent(
                event_type=ExecutionEventType.TOOL_CALL,
                organization_id=organization_id,
                execution_id=execution_id,
                tool_name=tool_name,
                tool_input=sanitize_tool_input(tool_input, self._tool_input_max_chars),
                tool_output=tool_output,
                tool_success=success,
                duration_ms=duration_ms,
                agent_id=agent_id,
                task_id=task_id,
                step_index=step_index,
            )
        )

    @_best_effort
    def log_execution_error(
        self,
        organization_id: str,
        *,
        error_message: str,
        error_code: str | None = None,
        execution_id: str | None = None,
        agent_id: str | None = None,
        task_id: str | None = None,
    ) -> None:
        """Record an error raised during execution."""
        self.log(
            ExecutionEvent(
                event_type=ExecutionEventType.ERROR,
                organization_id=organization_id,
                execution_id=execution_id,
                error_message=error_message,
                error_code=error_code,
                agent_id=agent_id,
                task_id=task_id,
            )
        )

    @_best_effort
    def log_plan_generated(
        self,
        organization_id: str,
        *,
        task_id: str,
        provider: str,
        model: str,
        input_tokens: int,
        output_tokens: int,
        duration_ms: int,
        agent_id: str | None = None,
    ) -> None:
        """Record generation of an execution plan with its derived cost."""
        self.log(
            ExecutionEvent(
                event_type=ExecutionEventType.PLAN_GENERATED,
                organization_id=organization_id,
                task_id=task_id,
                agent_id=agent_id,
                provider=provider,
                model=model,
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                duration_ms=duration_ms,
                cost_cents=estimate_cost_cents(model, input_tokens, output_tokens),
            )
        )

    @_best_effort
    def log_plan_approved(
        self,
        organization_id: str,
        *,
        task_id: str,
        execution_id: str | None = None,
        agent_id: str | None = None,
    ) -> None:
        """Record approval of a generated plan."""
        self.log(
            ExecutionEvent(
                event_type=ExecutionEventType.PLAN_APPROVED,
                organization_id=organization_id,
                execution_id=execution_id,
                task_id=task_id,
                agent_id=agent_id,
            )
        )
