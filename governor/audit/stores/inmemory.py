"""In-memory implementation of AuditSink."""

from uuid import UUID

from governor.audit.models import AuditRecord, ExecutionEvent
from governor.audit.store import AuditSink


class InMemoryAuditSink(AuditSink):
    """In-memory implementation of AuditSink for testing and development.

    Keeps entries in insertion order. Not suitable for production use.
    """

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._records: list[AuditRecord] = []
        self._events: list[ExecutionEvent] = []

    async def insert_record(self, record: AuditRecord) -> UUID:
        """Append a guardrail audit record."""
        self._records.append(record)
        return record.id

    async def insert_event(self, event: ExecutionEvent) -> UUID:
        """Append an execution event."""
        self._events.append(event)
        return event.id

    @property
    def records(self) -> list[AuditRecord]:
        """Records written so far."""
        return list(self._records)

    @property
    def events(self) -> list[ExecutionEvent]:
        """Events written so far."""
        return list(self._events)

    def clear(self) -> None:
        """Clear all stored data. Useful for testing."""
        self._records.clear()
        self._events.clear()
