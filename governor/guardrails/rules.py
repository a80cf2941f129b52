"""Static guardrail rule table.

Actions not listed here are informational and always allowed.
"""

from governor.guardrails.models import GuardrailCategory, GuardrailRule, TrustLevel


def _rule(
    action_id: str, category: GuardrailCategory, min_level: TrustLevel, label: str
) -> GuardrailRule:
    return GuardrailRule(
        action_id=action_id, category=category, min_level=min_level, label=label
    )


DEFAULT_RULES: dict[str, GuardrailRule] = {
    rule.action_id: rule
    for rule in (
        _rule("create_task", GuardrailCategory.TASK_EXECUTION, TrustLevel.GUIDED, "Create task"),
        _rule("assign_task", GuardrailCategory.TASK_EXECUTION, TrustLevel.GUIDED, "Assign task"),
        _rule(
            "update_task_status",
            GuardrailCategory.TASK_EXECUTION,
            TrustLevel.GUIDED,
            "Update task status",
        ),
        _rule(
            "cancel_tree", GuardrailCategory.TASK_EXECUTION, TrustLevel.GUIDED, "Cancel task tree"
        ),
        _rule(
            "preview_plan", GuardrailCategory.DECOMPOSITION, TrustLevel.SUPERVISED, "Preview plan"
        ),
        _rule("create_skill", GuardrailCategory.SKILL_CREATION, TrustLevel.TRUSTED, "Create skill"),
        _rule(
            "publish_blog_post",
            GuardrailCategory.CONTENT_PUBLISHING,
            TrustLevel.TRUSTED,
            "Publish blog post",
        ),
        _rule(
            "create_landing_page",
            GuardrailCategory.CONTENT_PUBLISHING,
            TrustLevel.TRUSTED,
            "Create landing page",
        ),
        _rule(
            "execute_openclaw",
            GuardrailCategory.EXTERNAL_ACTIONS,
            TrustLevel.TRUSTED,
            "Execute external action",
        ),
        _rule("send_message", GuardrailCategory.TOOL_USAGE, TrustLevel.GUIDED, "Send message"),
    )
}


def get_rule(
    action_id: str, rules: dict[str, GuardrailRule] | None = None
) -> GuardrailRule | None:
    """Look up the rule guarding an action, or None if it is unguarded."""
    table = DEFAULT_RULES if rules is None else rules
    return table.get(action_id)
