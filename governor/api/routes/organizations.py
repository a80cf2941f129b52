"""Per-organization trust configuration and limit endpoints."""

from fastapi import APIRouter

from governor.api.dependencies import (
    HardLimitCheckerDep,
    SettingsDep,
    TrustConfigStoreDep,
)
from governor.api.exceptions import InvalidRequestError, StoreUnavailableError
from governor.db.errors import StoreError
from governor.guardrails.models import HardLimitResult, TrustConfiguration
from governor.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/organizations")


@router.get("/{organization_id}/trust-config", response_model=TrustConfiguration)
async def get_trust_config(
    organization_id: str,
    store: TrustConfigStoreDep,
    settings: SettingsDep,
) -> TrustConfiguration:
    """Get the organization's trust configuration (supervised defaults if unset)."""
    try:
        return await store.get_config_or_default(
            organization_id,
            max_total_active_tasks=settings.guardrails.default_max_total_active_tasks,
        )
    except StoreError as e:
        raise StoreUnavailableError("Trust configuration unavailable") from e


@router.put("/{organization_id}/trust-config", response_model=TrustConfiguration)
async def put_trust_config(
    organization_id: str,
    config: TrustConfiguration,
    store: TrustConfigStoreDep,
) -> TrustConfiguration:
    """Replace the organization's trust configuration."""
    if config.organization_id != organization_id:
        raise InvalidRequestError("organization_id in body does not match path")
    try:
        await store.save_config(config)
    except StoreError as e:
        raise StoreUnavailableError("Trust configuration unavailable") from e
    logger.info("trust_config_updated", organization_id=organization_id)
    return config


@router.get("/{organization_id}/limits", response_model=HardLimitResult)
async def get_limits(
    organization_id: str,
    checker: HardLimitCheckerDep,
    store: TrustConfigStoreDep,
    settings: SettingsDep,
) -> HardLimitResult:
    """Report whether the organization is within its hard limits."""
    try:
        config = await store.get_config_or_default(
            organization_id,
            max_total_active_tasks=settings.guardrails.default_max_total_active_tasks,
        )
    except StoreError as e:
        raise StoreUnavailableError("Trust configuration unavailable") from e
    return await checker.check_hard_limits(config, organization_id)
