"""Task store implementations."""

from governor.tasks.stores.inmemory import InMemoryTaskStore
from governor.tasks.stores.postgres import PostgresTaskStore

__all__ = ["InMemoryTaskStore", "PostgresTaskStore"]
