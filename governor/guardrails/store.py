"""TrustConfigStore abstract interface."""

from abc import ABC, abstractmethod

from governor.guardrails.models import TrustConfiguration


class TrustConfigStore(ABC):
    """Abstract interface for per-organization trust configuration."""

    @abstractmethod
    async def get_config(self, organization_id: str) -> TrustConfiguration | None:
        """Get the stored configuration for an organization."""
        pass

    @abstractmethod
    async def save_config(self, config: TrustConfiguration) -> str:
        """Create or replace an organization's configuration."""
        pass

    async def get_config_or_default(
        self, organization_id: str, *, max_total_active_tasks: int = 25
    ) -> TrustConfiguration:
        """Get the stored configuration, falling back to supervised everywhere."""
        config = await self.get_config(organization_id)
        if config is None:
            return TrustConfiguration.supervised(
                organization_id, max_total_active_tasks=max_total_active_tasks
            )
        return config
