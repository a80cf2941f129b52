"""Next-run calculation for recurring triggers.

`next_run` is pure and total: malformed input yields None, never an
exception, so automated triggers fail safe by not firing.

Calendar arithmetic happens in the timezone of `now`; a naive `now` is
taken to be UTC. A monthly day that does not exist in a month (31 in
April) is clamped to that month's last day.
"""

import calendar
from collections.abc import Mapping
from datetime import UTC, date, datetime, time, timedelta, tzinfo
from typing import Any

from pydantic import ValidationError

from governor.observability.logging import get_logger
from governor.schedule.models import RecurrenceSpec, RecurrenceType

logger = get_logger(__name__)

SpecInput = RecurrenceSpec | Mapping[str, Any] | None


def coerce_spec(spec: SpecInput) -> RecurrenceSpec | None:
    """Validate raw schedule input, returning None when it is unusable."""
    if spec is None or isinstance(spec, RecurrenceSpec):
        return spec
    if not isinstance(spec, Mapping):
        return None
    try:
        return RecurrenceSpec.model_validate(dict(spec))
    except (ValidationError, TypeError, ValueError) as e:
        logger.debug("recurrence_spec_invalid", error=str(e))
        return None


def next_run(spec: SpecInput, now: datetime) -> datetime | None:
    """Compute the next trigger instant strictly after `now`.

    Returns None for `none` schedules, past one-time runs, candidates beyond
    the end date, and malformed input.
    """
    parsed = coerce_spec(spec)
    if parsed is None:
        return None

    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    try:
        candidate = _candidate(parsed, now)
    except (OverflowError, ValueError) as e:
        logger.debug("next_run_out_of_range", error=str(e))
        return None

    if candidate is None or candidate <= now:
        return None

    if parsed.end_date is not None:
        end_of_day = datetime.combine(parsed.end_date, time.max, tzinfo=now.tzinfo)
        if candidate > end_of_day:
            return None

    return candidate


def next_run_iso(spec: SpecInput, now: datetime) -> str | None:
    """ISO-8601 rendering of `next_run`."""
    result = next_run(spec, now)
    return result.isoformat() if result is not None else None


def _candidate(spec: RecurrenceSpec, now: datetime) -> datetime | None:
    tz = now.tzinfo
    today = now.date()

    if spec.type == RecurrenceType.ONCE:
        if spec.run_date is None:
            return None
        return _at_hour(spec.run_date, spec.hour, tz)

    if spec.type == RecurrenceType.DAILY:
        candidate = _at_hour(today, spec.hour, tz)
        if candidate <= now:
            candidate = _at_hour(today + timedelta(days=1), spec.hour, tz)
        return candidate

    if spec.type == RecurrenceType.WEEKLY:
        target = spec.day_of_week if spec.day_of_week is not None else 0
        # date.weekday() is Monday=0; schedules use Sunday=0
        current = (today.weekday() + 1) % 7
        day = today + timedelta(days=(target - current) % 7)
        candidate = _at_hour(day, spec.hour, tz)
        if candidate <= now:
            candidate = _at_hour(day + timedelta(days=7), spec.hour, tz)
        return candidate

    if spec.type == RecurrenceType.MONTHLY:
        target = spec.day_of_month if spec.day_of_month is not None else 1
        candidate = _at_hour(_clamped_day(today.year, today.month, target), spec.hour, tz)
        if candidate <= now:
            if today.month == 12:
                year, month = today.year + 1, 1
            else:
                year, month = today.year, today.month + 1
            candidate = _at_hour(_clamped_day(year, month, target), spec.hour, tz)
        return candidate

    return None


def _at_hour(day: date, hour: int, tz: tzinfo | None) -> datetime:
    return datetime.combine(day, time(hour=hour), tzinfo=tz)


def _clamped_day(year: int, month: int, day: int) -> date:
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last))
