"""Schedule calculation endpoint."""

from datetime import UTC, datetime

from fastapi import APIRouter

from governor.api.models.governance import NextRunRequest, NextRunResponse
from governor.schedule.calculator import coerce_spec, next_run

router = APIRouter(prefix="/schedules")


@router.post("/next-run", response_model=NextRunResponse)
async def compute_next_run(body: NextRunRequest) -> NextRunResponse:
    """Compute the next trigger instant for a schedule.

    Malformed schedules yield `next_run_at: null`, never an error.
    """
    spec = coerce_spec(body.schedule)
    now = body.now or datetime.now(UTC)
    return NextRunResponse(next_run_at=next_run(spec, now), schedule=spec)
