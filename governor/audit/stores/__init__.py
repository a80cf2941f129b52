"""Audit sink implementations."""

from governor.audit.stores.inmemory import InMemoryAuditSink
from governor.audit.stores.postgres import PostgresAuditSink

__all__ = ["InMemoryAuditSink", "PostgresAuditSink"]
