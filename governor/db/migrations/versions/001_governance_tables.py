"""Create governance tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19

Tables: orchestrator_config, agents, tasks, milestones,
milestone_task_templates, guardrail_audit_log, execution_audit_log
"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB, UUID

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def _trust_level(name: str) -> sa.Column:
    return sa.Column(name, sa.SmallInteger, nullable=False, server_default="0")


def upgrade() -> None:
    """Create governance tables."""
    # orchestrator_config: one row per organization
    op.create_table(
        "orchestrator_config",
        sa.Column("organization_id", sa.Text, primary_key=True),
        _trust_level("trust_task_execution"),
        _trust_level("trust_decomposition"),
        _trust_level("trust_skill_creation"),
        _trust_level("trust_tool_usage"),
        _trust_level("trust_content_publishing"),
        _trust_level("trust_external_actions"),
        _trust_level("trust_spending"),
        _trust_level("trust_agent_creation"),
        sa.Column("max_total_active_tasks", sa.Integer, nullable=False, server_default="25"),
        sa.Column("max_subtasks_per_parent", sa.Integer, nullable=False, server_default="10"),
        sa.Column("max_cost_per_task_cents", sa.Integer, nullable=False, server_default="500"),
        sa.Column("max_concurrent_agents", sa.Integer, nullable=False, server_default="4"),
        sa.Column("max_retries_per_subtask", sa.Integer, nullable=False, server_default="3"),
        sa.Column("monthly_spend_budget_cents", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("NOW()")),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("NOW()")),
        *[
            sa.CheckConstraint(f"{col} BETWEEN 0 AND 3", name=f"ck_{col}_range")
            for col in (
                "trust_task_execution",
                "trust_decomposition",
                "trust_skill_creation",
                "trust_tool_usage",
                "trust_content_publishing",
                "trust_external_actions",
                "trust_spending",
                "trust_agent_creation",
            )
        ],
    )

    # agents table
    op.create_table(
        "agents",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("organization_id", sa.Text),
        sa.Column("alias", sa.Text, nullable=False, server_default=""),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("paused_at", sa.TIMESTAMP(timezone=True)),
        sa.Column("consecutive_failures", sa.Integer, nullable=False, server_default="0"),
        sa.Column("max_consecutive_failures", sa.Integer, nullable=False, server_default="3"),
        sa.Column("health_status", sa.String(20), nullable=False, server_default="healthy"),
    )

    # milestones table
    op.create_table(
        "milestones",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("organization_id", sa.Text, nullable=False),
        sa.Column("project_id", sa.Text),
        sa.Column("name", sa.Text, nullable=False, server_default=""),
        sa.Column("schedule", JSONB),
        sa.Column("is_schedule_active", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("next_run_at", sa.TIMESTAMP(timezone=True)),
        sa.Column("last_run_at", sa.TIMESTAMP(timezone=True)),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True)),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("NOW()")),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("NOW()")),
    )
    op.create_index(
        "idx_milestones_next_run",
        "milestones",
        ["next_run_at"],
        postgresql_where=sa.text("is_schedule_active = true AND next_run_at IS NOT NULL"),
    )

    op.create_table(
        "milestone_task_templates",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("milestone_id", sa.Text, sa.ForeignKey("milestones.id"), nullable=False),
        sa.Column("title", sa.Text, nullable=False, server_default=""),
        sa.Column("priority", sa.String(20), nullable=False, server_default="medium"),
        sa.Column("assigned_agent_id", sa.Text),
        sa.Column("assigned_type", sa.String(20)),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True)),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("NOW()")),
    )
    op.create_index(
        "idx_milestone_task_templates_milestone",
        "milestone_task_templates",
        ["milestone_id", "sort_order"],
    )

    # tasks table
    op.create_table(
        "tasks",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("organization_id", sa.Text, nullable=False),
        sa.Column("title", sa.Text, nullable=False, server_default=""),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("priority", sa.String(20), nullable=False, server_default="medium"),
        sa.Column("assigned_agent_id", sa.Text, sa.ForeignKey("agents.id")),
        sa.Column("assigned_type", sa.String(20)),
        sa.Column("milestone_id", sa.Text, sa.ForeignKey("milestones.id")),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("NOW()")),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("NOW()")),
        sa.Column("started_at", sa.TIMESTAMP(timezone=True)),
        sa.Column("completed_at", sa.TIMESTAMP(timezone=True)),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True)),
        sa.Column("status_history", JSONB, nullable=False, server_default="[]"),
    )
    op.create_index(
        "idx_tasks_dispatch",
        "tasks",
        ["status", "created_at"],
        postgresql_where=sa.text(
            "assigned_type = 'agent' AND assigned_agent_id IS NOT NULL AND deleted_at IS NULL"
        ),
    )
    op.create_index(
        "idx_tasks_active",
        "tasks",
        ["organization_id", "status"],
        postgresql_where=sa.text("deleted_at IS NULL"),
    )

    # guardrail_audit_log table (append-only)
    op.create_table(
        "guardrail_audit_log",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("organization_id", sa.Text, nullable=False),
        sa.Column("task_id", sa.Text),
        sa.Column("agent_id", sa.Text),
        sa.Column("category", sa.String(50)),
        sa.Column("action", sa.Text, nullable=False),
        sa.Column("decision", sa.String(20), nullable=False),
        sa.Column("decided_by", sa.Text, nullable=False, server_default="system"),
        sa.Column("trust_level_required", sa.SmallInteger, nullable=False),
        sa.Column("trust_level_current", sa.SmallInteger, nullable=False),
        sa.Column("rationale", sa.Text, nullable=False),
        sa.Column("metadata", JSONB, nullable=False, server_default="{}"),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("NOW()")),
    )
    op.create_index(
        "idx_guardrail_audit_org_created",
        "guardrail_audit_log",
        ["organization_id", sa.text("created_at DESC")],
    )

    # execution_audit_log table (append-only)
    op.create_table(
        "execution_audit_log",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("event_type", sa.String(30), nullable=False),
        sa.Column("organization_id", sa.Text, nullable=False),
        sa.Column("execution_id", sa.Text),
        sa.Column("provider", sa.String(50)),
        sa.Column("model", sa.Text),
        sa.Column("input_tokens", sa.Integer),
        sa.Column("output_tokens", sa.Integer),
        sa.Column("duration_ms", sa.Integer),
        sa.Column("cost_cents", sa.Integer, nullable=False, server_default="0"),
        sa.Column("tool_name", sa.Text),
        sa.Column("tool_input", JSONB),
        sa.Column("tool_output", sa.Text),
        sa.Column("tool_success", sa.Boolean),
        sa.Column("agent_id", sa.Text),
        sa.Column("task_id", sa.Text),
        sa.Column("step_index", sa.Integer),
        sa.Column("error_message", sa.Text),
        sa.Column("error_code", sa.Text),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("NOW()")),
    )
    op.create_index(
        "idx_execution_audit_org_created",
        "execution_audit_log",
        ["organization_id", sa.text("created_at DESC")],
    )
    op.create_index(
        "idx_execution_audit_task",
        "execution_audit_log",
        ["task_id"],
        postgresql_where=sa.text("task_id IS NOT NULL"),
    )


def downgrade() -> None:
    """Drop governance tables."""
    op.drop_table("execution_audit_log")
    op.drop_table("guardrail_audit_log")
    op.drop_table("tasks")
    op.drop_table("milestone_task_templates")
    op.drop_table("milestones")
    op.drop_table("agents")
    op.drop_table("orchestrator_config")
