"""Audit trail configuration."""

from pydantic import BaseModel, Field


class AuditConfig(BaseModel):
    """Best-effort audit logger configuration.

    The logger never blocks callers: entries go into a bounded queue that a
    background worker drains into the audit sink. When the queue is full
    new entries are dropped and counted.
    """

    enabled: bool = Field(default=True, description="Write audit entries to the sink")
    queue_size: int = Field(
        default=1000,
        ge=1,
        description="Maximum number of entries waiting to be written",
    )
    tool_output_max_bytes: int = Field(
        default=10_000,
        ge=16,
        description="Tool output is truncated to this many UTF-8 bytes",
    )
    tool_input_max_chars: int = Field(
        default=500,
        ge=1,
        description="String values in audited tool input are truncated to this length",
    )
