"""Execution service collaborators.

The dispatcher only needs `execute(task_id, agent_id)`. The execution
service is responsible for claiming the task atomically before doing work.
"""

from typing import Protocol

import httpx

from governor.config.models.dispatch import DispatchConfig
from governor.dispatch.errors import TaskExecutionError
from governor.dispatch.models import ExecutionOutcome
from governor.observability.logging import get_logger

logger = get_logger(__name__)


class TaskExecutor(Protocol):
    """Runs one task on one agent."""

    async def execute(self, task_id: str, agent_id: str) -> ExecutionOutcome: ...


class HttpTaskExecutor:
    """Invoke the agent execution service over HTTP.

    Posts {"taskId", "agentId"} with bearer authentication. A run succeeds
    only when the service answers 2xx with `"success": true`.
    """

    def __init__(
        self,
        url: str,
        token: str | None = None,
        timeout_seconds: float = 300.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize executor.

        Args:
            url: Execution endpoint
            token: Bearer token, omitted from requests when None
            timeout_seconds: Per-request timeout
            client: Preconfigured client, mainly for tests
        """
        self._url = url
        self._token = token
        self._timeout = timeout_seconds
        self._client = client
        self._owns_client = client is None

    @classmethod
    def from_config(cls, config: DispatchConfig) -> "HttpTaskExecutor":
        token = config.executor_token.get_secret_value() if config.executor_token else None
        return cls(
            url=config.executor_url,
            token=token,
            timeout_seconds=config.executor_timeout_seconds,
        )

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure HTTP client is initialized."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def execute(self, task_id: str, agent_id: str) -> ExecutionOutcome:
        """Run a task once.

        Raises:
            TaskExecutionError: On transport failure or a non-JSON response
        """
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        client = await self._ensure_client()
        try:
            response = await client.post(
                self._url,
                json={"taskId": task_id, "agentId": agent_id},
                headers=headers,
                timeout=self._timeout,
            )
        except httpx.TimeoutException as e:
            raise TaskExecutionError(
                f"Execution timed out after {self._timeout}s", task_id=task_id
            ) from e
        except httpx.HTTPError as e:
            raise TaskExecutionError(str(e) or type(e).__name__, task_id=task_id) from e

        try:
            body = response.json()
        except ValueError as e:
            raise TaskExecutionError(
                f"Invalid response from execution service: HTTP {response.status_code}",
                task_id=task_id,
            ) from e

        if not isinstance(body, dict):
            body = {}

        if response.is_success and body.get("success") is True:
            return ExecutionOutcome(success=True)

        logger.debug(
            "execution_unsuccessful",
            task_id=task_id,
            status_code=response.status_code,
        )
        return ExecutionOutcome(success=False, error=body.get("error") or "Unknown error")

    async def close(self) -> None:
        """Close the HTTP client if this executor created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
