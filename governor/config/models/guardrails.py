"""Guardrail configuration."""

from pydantic import BaseModel, Field


class GuardrailsConfig(BaseModel):
    """Defaults applied when an organization has no stored trust configuration."""

    default_max_total_active_tasks: int = Field(
        default=25,
        gt=0,
        description="Active-task ceiling for organizations without a stored configuration",
    )
