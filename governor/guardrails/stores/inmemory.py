"""In-memory implementation of TrustConfigStore."""

from governor.guardrails.models import TrustConfiguration
from governor.guardrails.store import TrustConfigStore


class InMemoryTrustConfigStore(TrustConfigStore):
    """In-memory TrustConfigStore for testing and development."""

    def __init__(self) -> None:
        self._configs: dict[str, TrustConfiguration] = {}

    async def get_config(self, organization_id: str) -> TrustConfiguration | None:
        return self._configs.get(organization_id)

    async def save_config(self, config: TrustConfiguration) -> str:
        self._configs[config.organization_id] = config
        return config.organization_id
