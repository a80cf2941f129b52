"""Unit tests for trust configuration and the rule table."""

import pytest
from pydantic import ValidationError

from governor.guardrails.models import (
    ActionRequest,
    GuardrailCategory,
    TrustConfiguration,
    TrustLevel,
)
from governor.guardrails.rules import DEFAULT_RULES, get_rule


class TestTrustConfiguration:
    """Tests for TrustConfiguration."""

    def test_supervised_defaults(self) -> None:
        config = TrustConfiguration.supervised("org-1")

        for category in GuardrailCategory:
            assert config.level_for(category) == 0
        assert config.max_total_active_tasks == 25
        assert config.monthly_spend_budget_cents == 0

    def test_supervised_with_custom_ceiling(self) -> None:
        config = TrustConfiguration.supervised("org-1", max_total_active_tasks=7)
        assert config.max_total_active_tasks == 7

    def test_level_for_maps_categories(self) -> None:
        config = TrustConfiguration(
            organization_id="org-1", trust_spending=3, trust_tool_usage=1
        )
        assert config.level_for(GuardrailCategory.SPENDING) == 3
        assert config.level_for(GuardrailCategory.TOOL_USAGE) == 1

    @pytest.mark.parametrize("level", [-1, 4])
    def test_trust_level_out_of_range_rejected(self, level: int) -> None:
        with pytest.raises(ValidationError):
            TrustConfiguration(organization_id="org-1", trust_decomposition=level)

    def test_active_task_ceiling_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            TrustConfiguration(organization_id="org-1", max_total_active_tasks=0)

    def test_frozen(self) -> None:
        config = TrustConfiguration.supervised("org-1")
        with pytest.raises(ValidationError):
            config.trust_spending = 3  # type: ignore[misc]


class TestActionRequest:
    def test_requires_action_id(self) -> None:
        with pytest.raises(ValidationError):
            ActionRequest(action_id="")

    def test_input_defaults_empty(self) -> None:
        assert ActionRequest(action_id="create_task").input == {}


class TestDefaultRules:
    """Tests for the built-in rule table."""

    @pytest.mark.parametrize(
        ("action_id", "category", "level"),
        [
            ("create_task", GuardrailCategory.TASK_EXECUTION, TrustLevel.GUIDED),
            ("assign_task", GuardrailCategory.TASK_EXECUTION, TrustLevel.GUIDED),
            ("update_task_status", GuardrailCategory.TASK_EXECUTION, TrustLevel.GUIDED),
            ("cancel_tree", GuardrailCategory.TASK_EXECUTION, TrustLevel.GUIDED),
            ("preview_plan", GuardrailCategory.DECOMPOSITION, TrustLevel.SUPERVISED),
            ("create_skill", GuardrailCategory.SKILL_CREATION, TrustLevel.TRUSTED),
            ("publish_blog_post", GuardrailCategory.CONTENT_PUBLISHING, TrustLevel.TRUSTED),
            ("create_landing_page", GuardrailCategory.CONTENT_PUBLISHING, TrustLevel.TRUSTED),
            ("execute_openclaw", GuardrailCategory.EXTERNAL_ACTIONS, TrustLevel.TRUSTED),
            ("send_message", GuardrailCategory.TOOL_USAGE, TrustLevel.GUIDED),
        ],
    )
    def test_rule(
        self, action_id: str, category: GuardrailCategory, level: TrustLevel
    ) -> None:
        rule = get_rule(action_id)
        assert rule is not None
        assert rule.category == category
        assert rule.min_level == level

    def test_table_size(self) -> None:
        assert len(DEFAULT_RULES) == 10

    def test_unknown_action_has_no_rule(self) -> None:
        assert get_rule("list_tasks") is None
