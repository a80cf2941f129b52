"""API request and response models."""

from governor.api.models.errors import ErrorBody, ErrorCode, ErrorDetail, ErrorResponse
from governor.api.models.governance import (
    EvaluateRequest,
    FilterRequest,
    NextRunRequest,
    NextRunResponse,
    ProcessQueueRequest,
)
from governor.api.models.health import ComponentHealth, HealthResponse

__all__ = [
    "ComponentHealth",
    "ErrorBody",
    "ErrorCode",
    "ErrorDetail",
    "ErrorResponse",
    "EvaluateRequest",
    "FilterRequest",
    "HealthResponse",
    "NextRunRequest",
    "NextRunResponse",
    "ProcessQueueRequest",
]
