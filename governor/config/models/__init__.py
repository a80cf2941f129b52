"""Configuration model exports.

This module exports all configuration models for easy access:

    from governor.config.models import DispatchConfig, StorageConfig
"""

from governor.config.models.api import APIConfig
from governor.config.models.audit import AuditConfig
from governor.config.models.dispatch import DispatchConfig
from governor.config.models.guardrails import GuardrailsConfig
from governor.config.models.jobs import JobsConfig
from governor.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
)
from governor.config.models.storage import PostgresConfig, StorageConfig

__all__ = [
    # API
    "APIConfig",
    # Audit
    "AuditConfig",
    # Dispatch
    "DispatchConfig",
    # Guardrails
    "GuardrailsConfig",
    # Jobs
    "JobsConfig",
    # Observability
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    # Storage
    "PostgresConfig",
    "StorageConfig",
]
