"""Audit trail for guardrail decisions and agent execution.

Contains:
- AuditRecord and ExecutionEvent models
- Cost estimation for LLM calls
- The best-effort AuditLogger
- Append-only audit sinks
"""

from governor.audit.costs import estimate_cost_cents
from governor.audit.logger import AuditLogger, sanitize_tool_input, truncate_bytes
from governor.audit.models import AuditRecord, ExecutionEvent, ExecutionEventType
from governor.audit.store import AuditSink

__all__ = [
    "AuditLogger",
    "AuditRecord",
    "AuditSink",
    "ExecutionEvent",
    "ExecutionEventType",
    "estimate_cost_cents",
    "sanitize_tool_input",
    "truncate_bytes",
]
