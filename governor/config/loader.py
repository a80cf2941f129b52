"""TOML configuration loader.

Reads config/default.toml and the optional config/{GOVERNOR_ENV}.toml
overlay, deep-merges them, and validates the governance sections against
their models so a bad limit or queue size fails at load time with the file
that introduced it, instead of surfacing later as a dispatch or audit error.
"""

import os
import re
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from governor.config.models.audit import AuditConfig
from governor.config.models.dispatch import DispatchConfig
from governor.config.models.guardrails import GuardrailsConfig
from governor.config.models.jobs import JobsConfig
from governor.config.models.storage import StorageConfig

# Sections whose values change authorization, dispatch or audit behaviour
VALIDATED_SECTIONS: dict[str, type[BaseModel]] = {
    "storage": StorageConfig,
    "audit": AuditConfig,
    "dispatch": DispatchConfig,
    "guardrails": GuardrailsConfig,
    "jobs": JobsConfig,
}

_ENV_NAME = re.compile(r"^[A-Za-z0-9_-]+$")


class ConfigurationError(ValueError):
    """Raised when a configuration file holds invalid governance settings."""

    def __init__(self, message: str, source: Path | None = None) -> None:
        super().__init__(message)
        self.source = source


def get_config_dir() -> Path:
    """Get the configuration directory path.

    GOVERNOR_CONFIG_DIR takes precedence. Otherwise the current directory
    and up to four parents are searched for a `config/` directory.

    Returns:
        Path to the configuration directory

    Raises:
        FileNotFoundError: If GOVERNOR_CONFIG_DIR points at a missing directory
    """
    config_dir_env = os.environ.get("GOVERNOR_CONFIG_DIR")
    if config_dir_env:
        path = Path(config_dir_env)
        if not path.exists():
            raise FileNotFoundError(f"Config directory not found: {config_dir_env}")
        return path

    current = Path.cwd()
    for _ in range(5):
        config_path = current / "config"
        if config_path.exists():
            return config_path
        current = current.parent

    return Path("config")


def get_environment() -> str:
    """Get the deployment environment name.

    Returns:
        GOVERNOR_ENV, defaulting to 'development'

    Raises:
        ConfigurationError: If the name could escape the config directory
    """
    env = os.environ.get("GOVERNOR_ENV", "development")
    if not _ENV_NAME.match(env):
        raise ConfigurationError(f"Invalid GOVERNOR_ENV: {env!r}")
    return env


def load_toml(file_path: Path) -> dict[str, Any]:
    """Load a TOML file.

    Args:
        file_path: Path to the TOML file

    Returns:
        Parsed contents

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence.

    Args:
        base: Base dictionary, left unmodified
        override: Values that win on conflict; nested tables merge recursively

    Returns:
        New merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def validate_sections(config: dict[str, Any], source: Path | None = None) -> None:
    """Validate the governance sections present in a configuration dict.

    Sections that are absent are left to model defaults. Other sections
    (api, observability) are validated later by Settings.

    Args:
        config: Merged configuration dictionary
        source: File that produced the values, used in error messages

    Raises:
        ConfigurationError: If a section is not a table or fails validation
    """
    origin = f" in {source}" if source else ""
    for name, model in VALIDATED_SECTIONS.items():
        if name not in config:
            continue
        section = config[name]
        if not isinstance(section, dict):
            raise ConfigurationError(f"[{name}]{origin} must be a table", source)
        try:
            model.model_validate(section)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc']) or name}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigurationError(f"Invalid [{name}]{origin}: {problems}", source) from e


def load_config() -> dict[str, Any]:
    """Load and validate configuration from TOML files.

    Loading order:
    1. config/default.toml (required)
    2. config/{GOVERNOR_ENV}.toml (optional)

    Each step is validated after merging, so an error names the file that
    introduced it.

    Returns:
        Merged configuration dictionary

    Raises:
        FileNotFoundError: If default.toml is missing
        ConfigurationError: If a governance section is invalid
    """
    config_dir = get_config_dir()
    env = get_environment()

    default_path = config_dir / "default.toml"
    if not default_path.exists():
        raise FileNotFoundError(
            f"Default configuration file not found: {default_path}. "
            "Create config/default.toml or set GOVERNOR_CONFIG_DIR."
        )

    config = load_toml(default_path)
    validate_sections(config, default_path)

    env_path = config_dir / f"{env}.toml"
    if env_path.exists():
        config = deep_merge(config, load_toml(env_path))
        validate_sections(config, env_path)

    return config
