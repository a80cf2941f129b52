"""Unit tests for next-run calculation."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from governor.schedule.calculator import coerce_spec, next_run, next_run_iso
from governor.schedule.models import RecurrenceSpec, RecurrenceType

# 2025-03-05 is a Wednesday
WEDNESDAY_10AM = datetime(2025, 3, 5, 10, 0, tzinfo=UTC)


class TestCoerceSpec:
    def test_accepts_camel_case(self) -> None:
        spec = coerce_spec({"type": "weekly", "dayOfWeek": 3, "hour": 9, "endDate": "2025-06-01"})

        assert spec is not None
        assert spec.type == RecurrenceType.WEEKLY
        assert spec.day_of_week == 3
        assert spec.end_date is not None
        assert spec.end_date.isoformat() == "2025-06-01"

    def test_accepts_snake_case(self) -> None:
        spec = coerce_spec({"type": "monthly", "day_of_month": 15})
        assert spec is not None
        assert spec.day_of_month == 15

    def test_iso_timestamp_dates_keep_date_part(self) -> None:
        spec = coerce_spec({"type": "once", "runDate": "2025-03-10T18:30:00Z"})
        assert spec is not None
        assert spec.run_date is not None
        assert spec.run_date.isoformat() == "2025-03-10"

    @pytest.mark.parametrize(
        "raw",
        [
            {"type": "weekly", "hour": 25},
            {"type": "fortnightly"},
            {"type": "weekly", "dayOfWeek": 7},
            {"type": "once", "runDate": "not-a-date"},
            "daily",
            42,
        ],
    )
    def test_malformed_returns_none(self, raw: object) -> None:
        assert coerce_spec(raw) is None  # type: ignore[arg-type]

    def test_passes_models_through(self) -> None:
        spec = RecurrenceSpec(type=RecurrenceType.DAILY)
        assert coerce_spec(spec) is spec


class TestNextRun:
    """Tests for next_run."""

    def test_weekly_same_weekday_after_hour(self) -> None:
        """Weekly on Wednesday at 09:00 from Wednesday 10:00 is next Wednesday."""
        result = next_run({"type": "weekly", "dayOfWeek": 3, "hour": 9}, WEDNESDAY_10AM)
        assert result == datetime(2025, 3, 12, 9, 0, tzinfo=UTC)

    def test_weekly_same_weekday_before_hour(self) -> None:
        result = next_run({"type": "weekly", "dayOfWeek": 3, "hour": 11}, WEDNESDAY_10AM)
        assert result == datetime(2025, 3, 5, 11, 0, tzinfo=UTC)

    def test_weekly_sunday_is_zero(self) -> None:
        result = next_run({"type": "weekly", "dayOfWeek": 0, "hour": 8}, WEDNESDAY_10AM)
        assert result == datetime(2025, 3, 9, 8, 0, tzinfo=UTC)

    def test_daily_later_today(self) -> None:
        result = next_run({"type": "daily", "hour": 17}, WEDNESDAY_10AM)
        assert result == datetime(2025, 3, 5, 17, 0, tzinfo=UTC)

    def test_daily_exactly_now_rolls_to_tomorrow(self) -> None:
        """The result is strictly after now."""
        result = next_run({"type": "daily", "hour": 10}, WEDNESDAY_10AM)
        assert result == datetime(2025, 3, 6, 10, 0, tzinfo=UTC)

    def test_once_in_future(self) -> None:
        result = next_run({"type": "once", "runDate": "2025-03-10", "hour": 6}, WEDNESDAY_10AM)
        assert result == datetime(2025, 3, 10, 6, 0, tzinfo=UTC)

    def test_once_yesterday_is_none(self) -> None:
        assert next_run({"type": "once", "runDate": "2025-03-04"}, WEDNESDAY_10AM) is None

    def test_once_without_date_is_none(self) -> None:
        assert next_run({"type": "once"}, WEDNESDAY_10AM) is None

    def test_monthly_clamps_to_last_day(self) -> None:
        """Day 31 in April fires on the 30th."""
        now = datetime(2025, 4, 10, 12, 0, tzinfo=UTC)
        result = next_run({"type": "monthly", "dayOfMonth": 31, "hour": 9}, now)
        assert result == datetime(2025, 4, 30, 9, 0, tzinfo=UTC)

    def test_monthly_clamps_in_february(self) -> None:
        now = datetime(2025, 1, 31, 10, 0, tzinfo=UTC)
        result = next_run({"type": "monthly", "dayOfMonth": 31, "hour": 9}, now)
        assert result == datetime(2025, 2, 28, 9, 0, tzinfo=UTC)

    def test_monthly_rolls_over_year(self) -> None:
        now = datetime(2025, 12, 20, 0, 0, tzinfo=UTC)
        result = next_run({"type": "monthly", "dayOfMonth": 15}, now)
        assert result == datetime(2026, 1, 15, 0, 0, tzinfo=UTC)

    def test_candidate_after_end_date_is_none(self) -> None:
        spec = {"type": "daily", "hour": 9, "endDate": "2025-03-05"}
        assert next_run(spec, WEDNESDAY_10AM) is None

    def test_end_date_is_inclusive(self) -> None:
        spec = {"type": "daily", "hour": 23, "endDate": "2025-03-05"}
        assert next_run(spec, WEDNESDAY_10AM) == datetime(2025, 3, 5, 23, 0, tzinfo=UTC)

    def test_none_type_never_fires(self) -> None:
        assert next_run({"type": "none"}, WEDNESDAY_10AM) is None
        assert next_run(None, WEDNESDAY_10AM) is None

    def test_malformed_is_none(self) -> None:
        assert next_run({"type": "weekly", "hour": "noon"}, WEDNESDAY_10AM) is None

    def test_naive_now_treated_as_utc(self) -> None:
        result = next_run({"type": "daily", "hour": 12}, datetime(2025, 3, 5, 10, 0))
        assert result == datetime(2025, 3, 5, 12, 0, tzinfo=UTC)

    def test_uses_timezone_of_now(self) -> None:
        plus_two = timezone(timedelta(hours=2))
        now = datetime(2025, 3, 5, 10, 0, tzinfo=plus_two)

        result = next_run({"type": "daily", "hour": 9}, now)

        assert result == datetime(2025, 3, 6, 9, 0, tzinfo=plus_two)
        assert result is not None
        assert result.utcoffset() == timedelta(hours=2)

    def test_iso_rendering(self) -> None:
        assert next_run_iso({"type": "daily", "hour": 17}, WEDNESDAY_10AM) == (
            "2025-03-05T17:00:00+00:00"
        )
        assert next_run_iso({"type": "none"}, WEDNESDAY_10AM) is None
