"""Background job configuration."""

from pydantic import BaseModel, Field


class JobsConfig(BaseModel):
    """In-process job runner configuration.

    Disabled by default: production deployments trigger the workflows from
    an external cron.
    """

    run_in_process: bool = Field(
        default=False, description="Run workflows inside the API process"
    )
    queue_interval_seconds: float = Field(
        default=60.0, gt=0, description="Pause between task queue batches"
    )
    milestone_interval_seconds: float = Field(
        default=3600.0, gt=0, description="Pause between scheduled milestone runs"
    )
