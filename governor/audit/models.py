"""Audit domain models.

Both record kinds are append-only and immutable once created.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class AuditRecord(BaseModel):
    """One guardrail decision, projected for compliance review."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    organization_id: str = Field(..., description="Owning organization")
    task_id: str | None = Field(default=None, description="Related task")
    agent_id: str | None = Field(default=None, description="Acting agent")
    category: str | None = Field(
        default=None, description="Guardrail category, None for unguarded actions"
    )
    action: str = Field(..., description="Requested action identifier")
    decision: str = Field(..., description="approved or denied")
    decided_by: str = Field(default="system", description="Who made the decision")
    trust_level_required: int = Field(default=0, ge=0, le=3)
    trust_level_current: int = Field(default=0, ge=0, le=3)
    rationale: str = Field(..., description="Compliance-readable explanation")
    metadata: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=utc_now, description="Decision time")


class ExecutionEventType(str, Enum):
    """Kinds of execution events."""

    LLM_CALL = "llm_call"
    TOOL_CALL = "tool_call"
    PLAN_GENERATED = "plan_generated"
    PLAN_APPROVED = "plan_approved"
    ERROR = "error"


class ExecutionEvent(BaseModel):
    """Cost and usage record for agent execution."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    event_type: ExecutionEventType
    organization_id: str = Field(..., description="Owning organization")
    execution_id: str | None = Field(default=None, description="Execution run")

    # LLM usage
    provider: str | None = None
    model: str | None = None
    input_tokens: int | None = Field(default=None, ge=0)
    output_tokens: int | None = Field(default=None, ge=0)
    duration_ms: int | None = Field(default=None, ge=0)
    cost_cents: int = Field(default=0, ge=0, description="Derived from the price table")

    # Tool usage
    tool_name: str | None = None
    tool_input: dict[str, Any] | None = None
    tool_output: str | None = None
    tool_success: bool | None = None

    agent_id: str | None = None
    task_id: str | None = None
    step_index: int | None = None

    error_message: str | None = None
    error_code: str | None = None

    timestamp: datetime = Field(default_factory=utc_now, description="Event time")


AuditEntry = AuditRecord | ExecutionEvent
