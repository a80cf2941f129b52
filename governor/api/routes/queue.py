"""Task queue dispatch endpoint."""

from fastapi import APIRouter

from governor.api.dependencies import DispatcherDep
from governor.api.exceptions import StoreUnavailableError
from governor.api.models.governance import ProcessQueueRequest
from governor.db.errors import StoreError
from governor.dispatch.models import BatchResult
from governor.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/queue/process", response_model=BatchResult)
async def process_queue(
    dispatcher: DispatcherDep,
    body: ProcessQueueRequest | None = None,
) -> BatchResult:
    """Dispatch one batch of queued agent tasks.

    Per-task failures are reported in the result list; only a failure to
    read the queue itself is an error response.
    """
    limit = body.limit if body else None
    try:
        return await dispatcher.process_queue(limit)
    except StoreError as e:
        logger.error("process_queue_store_error", error=str(e))
        raise StoreUnavailableError("Task store unavailable") from e
