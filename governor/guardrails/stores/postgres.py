"""PostgreSQL implementation of TrustConfigStore.

Reads and writes the orchestrator_config table.
"""

from typing import Any

from governor.db.errors import ConnectionError
from governor.db.pool import PostgresPool
from governor.guardrails.models import TrustConfiguration
from governor.guardrails.store import TrustConfigStore
from governor.observability.logging import get_logger

logger = get_logger(__name__)

_COLUMNS = [
    name for name in TrustConfiguration.model_fields if name != "organization_id"
]


class PostgresTrustConfigStore(TrustConfigStore):
    """PostgreSQL implementation of TrustConfigStore."""

    def __init__(self, pool: PostgresPool) -> None:
        """Initialize with connection pool.

        Args:
            pool: PostgreSQL connection pool
        """
        self._pool = pool

    async def get_config(self, organization_id: str) -> TrustConfiguration | None:
        """Get the stored configuration for an organization."""
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    SELECT organization_id, {", ".join(_COLUMNS)}
                    FROM orchestrator_config
                    WHERE organization_id = $1
                    """,
                    organization_id,
                )
                if row:
                    return self._row_to_config(row)
                return None
        except Exception as e:
            logger.error(
                "postgres_get_trust_config_error",
                organization_id=organization_id,
                error=str(e),
            )
            raise ConnectionError(f"Failed to get trust configuration: {e}", cause=e) from e

    async def save_config(self, config: TrustConfiguration) -> str:
        """Upsert an organization's configuration."""
        placeholders = ", ".join(f"${i}" for i in range(2, len(_COLUMNS) + 2))
        updates = ", ".join(f"{col} = EXCLUDED.{col}" for col in _COLUMNS)
        try:
            async with self._pool.acquire() as conn:
                await conn.execute(
                    f"""
                    INSERT INTO orchestrator_config (organization_id, {", ".join(_COLUMNS)})
                    VALUES ($1, {placeholders})
                    ON CONFLICT (organization_id) DO UPDATE SET
                        {updates},
                        updated_at = NOW()
                    """,
                    config.organization_id,
                    *(getattr(config, col) for col in _COLUMNS),
                )
                logger.debug(
                    "trust_config_saved", organization_id=config.organization_id
                )
                return config.organization_id
        except Exception as e:
            logger.error(
                "postgres_save_trust_config_error",
                organization_id=config.organization_id,
                error=str(e),
            )
            raise ConnectionError(f"Failed to save trust configuration: {e}", cause=e) from e

    def _row_to_config(self, row: Any) -> TrustConfiguration:
        return TrustConfiguration(
            organization_id=str(row["organization_id"]),
            **{col: row[col] for col in _COLUMNS},
        )
