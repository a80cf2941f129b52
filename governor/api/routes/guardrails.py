"""Guardrail evaluation endpoints."""

from fastapi import APIRouter

from governor.api.dependencies import (
    GuardrailEvaluatorDep,
    SettingsDep,
    TrustConfigStoreDep,
)
from governor.api.exceptions import StoreUnavailableError
from governor.api.models.governance import EvaluateRequest, FilterRequest
from governor.config.settings import Settings
from governor.db.errors import StoreError
from governor.guardrails.models import (
    GuardrailDecision,
    GuardrailFilterResult,
    TrustConfiguration,
)
from governor.guardrails.store import TrustConfigStore

router = APIRouter(prefix="/guardrails")


async def _load_config(
    store: TrustConfigStore, settings: Settings, organization_id: str
) -> TrustConfiguration:
    try:
        return await store.get_config_or_default(
            organization_id,
            max_total_active_tasks=settings.guardrails.default_max_total_active_tasks,
        )
    except StoreError as e:
        raise StoreUnavailableError("Trust configuration unavailable") from e


@router.post("/evaluate", response_model=GuardrailDecision)
async def evaluate(
    body: EvaluateRequest,
    evaluator: GuardrailEvaluatorDep,
    store: TrustConfigStoreDep,
    settings: SettingsDep,
) -> GuardrailDecision:
    """Decide whether one proposed action is allowed.

    A denial is a normal 200 response with `allowed: false`.
    """
    config = await _load_config(store, settings, body.organization_id)
    return evaluator.evaluate(
        body.request,
        config,
        body.organization_id,
        task_id=body.task_id,
        agent_id=body.agent_id,
    )


@router.post("/filter", response_model=GuardrailFilterResult)
async def filter_requests(
    body: FilterRequest,
    evaluator: GuardrailEvaluatorDep,
    store: TrustConfigStoreDep,
    settings: SettingsDep,
) -> GuardrailFilterResult:
    """Partition several proposed actions into allowed and blocked."""
    config = await _load_config(store, settings, body.organization_id)
    return evaluator.filter_requests(
        body.requests,
        config,
        body.organization_id,
        task_id=body.task_id,
        agent_id=body.agent_id,
    )
