"""Shared test fixtures for the Governor test suite."""

import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

from governor.guardrails.models import TrustConfiguration
from governor.tasks.models import Agent, AssigneeType, Task, TaskPriority, TaskStatus


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "app_name = 'test'",
                "development.toml": "debug = true",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            toml_file = test_config_dir / filename
            toml_file.write_text(content)

    return _create_toml_files


class EnvOverrideContext:
    """Context manager for temporarily setting environment variables."""

    def __init__(self, overrides: dict[str, str]) -> None:
        self.overrides = overrides
        self.original_env: dict[str, str | None] = {}

    def __enter__(self) -> None:
        for key, value in self.overrides.items():
            self.original_env[key] = os.environ.get(key)
            os.environ[key] = value

    def __exit__(self, *args: Any) -> None:
        for key in self.overrides:
            if self.original_env[key] is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = self.original_env[key]


@pytest.fixture
def env_override() -> Generator[Callable[[dict[str, str]], EnvOverrideContext], None, None]:
    """Context manager for temporarily setting environment variables.

    Usage:
        def test_something(env_override):
            with env_override({"GOVERNOR_DEBUG": "true"}):
                # test code here
    """

    def _env_override(overrides: dict[str, str]) -> EnvOverrideContext:
        return EnvOverrideContext(overrides)

    yield _env_override


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test.

    This ensures test isolation for configuration tests.
    """
    from governor.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def org_id() -> str:
    return "org-1"


@pytest.fixture
def supervised_config(org_id: str) -> TrustConfiguration:
    """Trust level 0 in every category."""
    return TrustConfiguration.supervised(org_id)


@pytest.fixture
def make_task(org_id: str) -> Callable[..., Task]:
    """Factory for queued agent tasks."""

    def _make_task(
        agent_id: str = "agent-1",
        priority: TaskPriority = TaskPriority.MEDIUM,
        status: TaskStatus = TaskStatus.QUEUED,
        **kwargs: Any,
    ) -> Task:
        return Task(
            organization_id=kwargs.pop("organization_id", org_id),
            status=status,
            priority=priority,
            assigned_agent_id=agent_id,
            assigned_type=AssigneeType.AGENT,
            **kwargs,
        )

    return _make_task


@pytest.fixture
def make_agent(org_id: str) -> Callable[..., Agent]:
    """Factory for agents, available unless told otherwise."""

    def _make_agent(agent_id: str = "agent-1", **kwargs: Any) -> Agent:
        return Agent(id=agent_id, organization_id=org_id, **kwargs)

    return _make_agent
