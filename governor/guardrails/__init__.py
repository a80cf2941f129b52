"""Trust-gated guardrails for agent actions.

Contains:
- Trust configuration and decision models
- The static rule table
- GuardrailEvaluator and HardLimitChecker
- Trust configuration stores
"""

from governor.guardrails.evaluator import GuardrailEvaluator
from governor.guardrails.limits import HardLimitChecker
from governor.guardrails.models import (
    ActionRequest,
    BlockedRequest,
    GuardrailCategory,
    GuardrailDecision,
    GuardrailFilterResult,
    GuardrailRule,
    HardLimitResult,
    TrustConfiguration,
    TrustLevel,
)
from governor.guardrails.rules import DEFAULT_RULES, get_rule
from governor.guardrails.store import TrustConfigStore

__all__ = [
    "ActionRequest",
    "BlockedRequest",
    "DEFAULT_RULES",
    "GuardrailCategory",
    "GuardrailDecision",
    "GuardrailEvaluator",
    "GuardrailFilterResult",
    "GuardrailRule",
    "HardLimitChecker",
    "HardLimitResult",
    "TrustConfigStore",
    "TrustConfiguration",
    "TrustLevel",
    "get_rule",
]
