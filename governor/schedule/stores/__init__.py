"""Milestone store implementations."""

from governor.schedule.stores.inmemory import InMemoryMilestoneStore
from governor.schedule.stores.postgres import PostgresMilestoneStore

__all__ = ["InMemoryMilestoneStore", "PostgresMilestoneStore"]
