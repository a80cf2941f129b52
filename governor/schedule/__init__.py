"""Recurring schedules.

Contains:
- RecurrenceSpec and the pure next-run calculator
- Scheduled milestones that clone tasks when due
"""

from governor.schedule.calculator import coerce_spec, next_run, next_run_iso
from governor.schedule.models import RecurrenceSpec, RecurrenceType

__all__ = [
    "RecurrenceSpec",
    "RecurrenceType",
    "coerce_spec",
    "next_run",
    "next_run_iso",
]
