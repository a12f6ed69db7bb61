"""
Schedule data models for the Ceremony Slot Engine.

This module defines the derived and output types of the pipeline:
1. AvailabilityInterval - the unit every pipeline stage operates on
2. Slot - a concrete bookable range of fixed duration
3. SlotSearchResult - the ordered slot list plus an optional warning code
"""

from dataclasses import dataclass
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict, model_validator
from datetime import date as date_type, time as time_type, datetime

from slot_engine.errors import SlotWarning


@dataclass(frozen=True, order=True)
class AvailabilityInterval:
    """A free (date, start, end) range. Derived, never persisted."""
    date: date_type
    start_time: time_type
    end_time: time_type

    @property
    def start(self) -> datetime:
        return datetime.combine(self.date, self.start_time)

    @property
    def end(self) -> datetime:
        return datetime.combine(self.date, self.end_time)

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)


class Slot(BaseModel):
    """A bookable ceremony slot where both resources are free."""

    date: date_type = Field(description="Calendar date")
    start_time: time_type = Field(description="Start of the ceremony")
    end_time: time_type = Field(description="End of the ceremony")

    @model_validator(mode='after')
    def validate_times(self):
        if self.start_time >= self.end_time:
            raise ValueError("End time must be strictly after start time")
        return self

    @property
    def duration_minutes(self) -> int:
        delta = datetime.combine(self.date, self.end_time) - datetime.combine(self.date, self.start_time)
        return int(delta.total_seconds() // 60)

    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "date": "2025-03-04",
            "start_time": "10:00:00",
            "end_time": "11:00:00"
        }
    })


class SlotSearchResult(BaseModel):
    """Ordered slots plus an optional warning explaining an empty result."""

    slots: List[Slot] = Field(default_factory=list)
    warning: Optional[SlotWarning] = Field(default=None)
    message: str = Field(default="", description="Human-readable explanation of the warning")

    @property
    def count(self) -> int:
        return len(self.slots)

    @property
    def is_empty(self) -> bool:
        return not self.slots
