"""Trust configuration store implementations."""

from governor.guardrails.stores.inmemory import InMemoryTrustConfigStore
from governor.guardrails.stores.postgres import PostgresTrustConfigStore

__all__ = ["InMemoryTrustConfigStore", "PostgresTrustConfigStore"]
