"""Trust configuration and guardrail decision models."""

from enum import Enum, IntEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class TrustLevel(IntEnum):
    """How autonomously an agent may act within a category.

    Higher levels are strictly more permissive.
    """

    SUPERVISED = 0
    GUIDED = 1
    TRUSTED = 2
    AUTONOMOUS = 3


class GuardrailCategory(str, Enum):
    """Risk buckets, each with its own trust threshold."""

    TASK_EXECUTION = "task_execution"
    DECOMPOSITION = "decomposition"
    SKILL_CREATION = "skill_creation"
    TOOL_USAGE = "tool_usage"
    CONTENT_PUBLISHING = "content_publishing"
    EXTERNAL_ACTIONS = "external_actions"
    SPENDING = "spending"
    AGENT_CREATION = "agent_creation"


DecisionKind = Literal["approved", "denied"]

TrustLevelValue = Annotated[int, Field(ge=0, le=3)]


class TrustConfiguration(BaseModel):
    """Per-organization trust levels and hard limits.

    Mutated by organization admins; the evaluator only reads it.
    """

    model_config = ConfigDict(frozen=True)

    organization_id: str = Field(..., description="Owning organization")

    trust_task_execution: TrustLevelValue = 0
    trust_decomposition: TrustLevelValue = 0
    trust_skill_creation: TrustLevelValue = 0
    trust_tool_usage: TrustLevelValue = 0
    trust_content_publishing: TrustLevelValue = 0
    trust_external_actions: TrustLevelValue = 0
    trust_spending: TrustLevelValue = 0
    trust_agent_creation: TrustLevelValue = 0

    # Hard limits (non-overridable ceilings)
    max_total_active_tasks: int = Field(default=25, gt=0)
    max_subtasks_per_parent: int = Field(default=10, gt=0)
    max_cost_per_task_cents: int = Field(default=500, ge=0)
    max_concurrent_agents: int = Field(default=4, gt=0)
    max_retries_per_subtask: int = Field(default=3, ge=0)
    monthly_spend_budget_cents: int = Field(
        default=0, ge=0, description="0 disables automatic spending"
    )

    def level_for(self, category: GuardrailCategory) -> int:
        """Return the configured trust level for a category."""
        return getattr(self, _CATEGORY_FIELDS[category])

    @classmethod
    def supervised(
        cls, organization_id: str, max_total_active_tasks: int = 25
    ) -> "TrustConfiguration":
        """Most restrictive configuration, used when none is stored."""
        return cls(
            organization_id=organization_id,
            max_total_active_tasks=max_total_active_tasks,
        )


_CATEGORY_FIELDS: dict[GuardrailCategory, str] = {
    GuardrailCategory.TASK_EXECUTION: "trust_task_execution",
    GuardrailCategory.DECOMPOSITION: "trust_decomposition",
    GuardrailCategory.SKILL_CREATION: "trust_skill_creation",
    GuardrailCategory.TOOL_USAGE: "trust_tool_usage",
    GuardrailCategory.CONTENT_PUBLISHING: "trust_content_publishing",
    GuardrailCategory.EXTERNAL_ACTIONS: "trust_external_actions",
    GuardrailCategory.SPENDING: "trust_spending",
    GuardrailCategory.AGENT_CREATION: "trust_agent_creation",
}

assert set(_CATEGORY_FIELDS) == set(GuardrailCategory), "unmapped guardrail category"
assert set(_CATEGORY_FIELDS.values()) <= set(TrustConfiguration.model_fields)


class GuardrailRule(BaseModel):
    """Requirement attached to a guarded action."""

    model_config = ConfigDict(frozen=True)

    action_id: str
    category: GuardrailCategory
    min_level: TrustLevel
    label: str = Field(..., description="Human-readable label for the audit trail")


class ActionRequest(BaseModel):
    """An action an agent proposes to perform."""

    action_id: str = Field(..., min_length=1)
    input: dict[str, Any] = Field(default_factory=dict)


class GuardrailDecision(BaseModel):
    """Outcome of evaluating one action request. Never persisted directly."""

    model_config = ConfigDict(frozen=True)

    allowed: bool
    decision: DecisionKind
    category: GuardrailCategory | None = None
    trust_level_required: int
    trust_level_current: int
    rationale: str


class BlockedRequest(BaseModel):
    """A denied request together with the decision that blocked it."""

    request: ActionRequest
    decision: GuardrailDecision


class GuardrailFilterResult(BaseModel):
    """Requests partitioned by guardrail outcome, in submission order."""

    allowed: list[ActionRequest] = Field(default_factory=list)
    blocked: list[BlockedRequest] = Field(default_factory=list)


class HardLimitResult(BaseModel):
    """Advisory result of an organization-wide limit check."""

    within_limits: bool
    violations: list[str] = Field(default_factory=list)
