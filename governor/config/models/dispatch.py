"""Task dispatch configuration."""

from pydantic import BaseModel, Field, SecretStr, model_validator


class DispatchConfig(BaseModel):
    """Queue dispatch configuration.

    A batch processes tasks sequentially with a fixed pause between
    invocations, so batch size and delay together bound the load put on
    the execution service.
    """

    default_limit: int = Field(
        default=10,
        ge=1,
        description="Tasks per batch when the caller gives no limit",
    )
    max_limit: int = Field(
        default=50,
        ge=1,
        le=50,
        description="Hard cap on tasks per batch",
    )
    inter_task_delay_seconds: float = Field(
        default=0.1,
        ge=0.0,
        description="Pause between sequential task invocations",
    )
    executor_url: str = Field(
        default="http://localhost:54321/functions/v1/agent-executor",
        description="Endpoint of the agent execution service",
    )
    executor_token: SecretStr | None = Field(
        default=None,
        description="Bearer token for the execution service (GOVERNOR_DISPATCH__EXECUTOR_TOKEN)",
    )
    executor_timeout_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Timeout for a single execution request",
    )

    @model_validator(mode="after")
    def _default_within_cap(self) -> "DispatchConfig":
        if self.default_limit > self.max_limit:
            raise ValueError("default_limit must not exceed max_limit")
        return self
