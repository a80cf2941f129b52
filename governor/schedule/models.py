"""Recurrence specification models."""

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class RecurrenceType(str, Enum):
    """How often a scheduled trigger fires."""

    NONE = "none"
    ONCE = "once"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class RecurrenceSpec(BaseModel):
    """When a recurring trigger fires.

    Accepts snake_case or camelCase keys (`dayOfWeek`, `runDate`, ...).
    Triggers always fire on the hour.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    type: RecurrenceType = Field(default=RecurrenceType.NONE)
    hour: int = Field(default=0, ge=0, le=23, description="Hour of day to fire")
    day_of_week: int | None = Field(
        default=None, ge=0, le=6, description="0 = Sunday; weekly only"
    )
    day_of_month: int | None = Field(default=None, ge=1, le=31, description="Monthly only")
    run_date: date | None = Field(default=None, description="Date of a one-time run")
    end_date: date | None = Field(
        default=None, description="Last date (inclusive) a recurring trigger may fire"
    )

    @field_validator("run_date", "end_date", mode="before")
    @classmethod
    def _date_part(cls, value: Any) -> Any:
        """Accept full ISO timestamps and keep their date."""
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str) and "T" in value:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        return value
