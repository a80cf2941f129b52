"""Dispatch result models."""

from pydantic import BaseModel, Field

AGENT_NOT_AVAILABLE = "agent not available"


class ExecutionOutcome(BaseModel):
    """What the execution service reported for one task."""

    success: bool
    error: str | None = None


class TaskResult(BaseModel):
    """Per-task dispatch outcome."""

    task_id: str
    success: bool
    error: str | None = None


class BatchResult(BaseModel):
    """Aggregate outcome of one dispatch batch."""

    processed: int = Field(default=0, description="Tasks handled in this batch")
    success: int = Field(default=0)
    failed: int = Field(default=0)
    results: list[TaskResult] = Field(default_factory=list)

    @classmethod
    def from_results(cls, results: list[TaskResult]) -> "BatchResult":
        succeeded = sum(1 for r in results if r.success)
        return cls(
            processed=len(results),
            success=succeeded,
            failed=len(results) - succeeded,
            results=results,
        )
