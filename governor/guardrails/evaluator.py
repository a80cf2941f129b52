"""Trust-gated guardrail evaluator.

Evaluation is synchronous and does no I/O beyond handing one audit record
to the best-effort audit logger. Denials are ordinary return values.
"""

from governor.audit.logger import AuditLogger, sanitize_tool_input
from governor.guardrails.models import (
    ActionRequest,
    BlockedRequest,
    GuardrailDecision,
    GuardrailFilterResult,
    GuardrailRule,
    TrustConfiguration,
)
from governor.guardrails.rules import DEFAULT_RULES
from governor.observability.logging import get_logger
from governor.observability.metrics import GUARDRAIL_DECISIONS

logger = get_logger(__name__)

UNGUARDED_RATIONALE = "unguarded: action {action} has no guardrail rule"


class GuardrailEvaluator:
    """Decides whether an agent may perform a requested action.

    A request is allowed when the organization's trust level for the rule's
    category is at least the rule's minimum. Actions missing from the rule
    table are always allowed. Every evaluation produces exactly one audit
    record.
    """

    def __init__(
        self,
        audit_logger: AuditLogger,
        rules: dict[str, GuardrailRule] | None = None,
        tool_input_max_chars: int = 500,
    ) -> None:
        """Initialize the evaluator.

        Args:
            audit_logger: Best-effort sink for decision records
            rules: Rule table keyed by action id; defaults to the built-in table
            tool_input_max_chars: Length bound for string input values in audit metadata
        """
        self._audit = audit_logger
        self._rules = DEFAULT_RULES if rules is None else rules
        self._tool_input_max_chars = tool_input_max_chars

    def evaluate(
        self,
        request: ActionRequest,
        config: TrustConfiguration,
        organization_id: str,
        task_id: str | None = None,
        agent_id: str | None = None,
    ) -> GuardrailDecision:
        """Evaluate one action request against the trust configuration."""
        rule = self._rules.get(request.action_id)
        if rule is None:
            decision = GuardrailDecision(
                allowed=True,
                decision="approved",
                category=None,
                trust_level_required=0,
                trust_level_current=0,
                rationale=UNGUARDED_RATIONALE.format(action=request.action_id),
            )
        else:
            decision = self._compare(rule, config)

        GUARDRAIL_DECISIONS.labels(
            category=decision.category.value if decision.category else "unguarded",
            decision=decision.decision,
        ).inc()
        if not decision.allowed:
            logger.info(
                "guardrail_denied",
                action=request.action_id,
                organization_id=organization_id,
                task_id=task_id,
                agent_id=agent_id,
                required=decision.trust_level_required,
                current=decision.trust_level_current,
            )

        label = rule.label if rule is not None else request.action_id
        self._record(request, decision, label, organization_id, task_id, agent_id)
        return decision

    def filter_requests(
        self,
        requests: list[ActionRequest],
        config: TrustConfiguration,
        organization_id: str,
        task_id: str | None = None,
        agent_id: str | None = None,
    ) -> GuardrailFilterResult:
        """Evaluate every request and partition by outcome, preserving order."""
        result = GuardrailFilterResult()
        for request in requests:
            decision = self.evaluate(request, config, organization_id, task_id, agent_id)
            if decision.allowed:
                result.allowed.append(request)
            else:
                result.blocked.append(BlockedRequest(request=request, decision=decision))
        return result

    def _record(
        self,
        request: ActionRequest,
        decision: GuardrailDecision,
        label: str,
        organization_id: str,
        task_id: str | None,
        agent_id: str | None,
    ) -> None:
        try:
            self._audit.log_guardrail_decision(
                decision,
                action=label,
                organization_id=organization_id,
                task_id=task_id,
                agent_id=agent_id,
                metadata={
                    "tool_name": request.action_id,
                    "input": sanitize_tool_input(
                        request.input, self._tool_input_max_chars
                    ),
                },
            )
        except Exception as e:
            logger.warning(
                "guardrail_audit_failed",
                action=request.action_id,
                organization_id=organization_id,
                error=str(e),
            )

    @staticmethod
    def _compare(rule: GuardrailRule, config: TrustConfiguration) -> GuardrailDecision:
        current = config.level_for(rule.category)
        required = int(rule.min_level)
        category = rule.category.value

        if current >= required:
            return GuardrailDecision(
                allowed=True,
                decision="approved",
                category=rule.category,
                trust_level_required=required,
                trust_level_current=current,
                rationale=f"Trust level {current} >= required {required} for {category}",
            )
        return GuardrailDecision(
            allowed=False,
            decision="denied",
            category=rule.category,
            trust_level_required=required,
            trust_level_current=current,
            rationale=(
                f"Trust level {current} < required {required} for {category}. "
                f'Action "{rule.label}" blocked.'
            ),
        )
