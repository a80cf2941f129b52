"""AuditSink abstract interface."""

from abc import ABC, abstractmethod
from uuid import UUID

from governor.audit.models import AuditRecord, ExecutionEvent


class AuditSink(ABC):
    """Append-only destination for audit records and execution events.

    The governance core only writes; reading back is left to reporting
    tools.
    """

    @abstractmethod
    async def insert_record(self, record: AuditRecord) -> UUID:
        """Append a guardrail audit record."""
        pass

    @abstractmethod
    async def insert_event(self, event: ExecutionEvent) -> UUID:
        """Append an execution event."""
        pass
