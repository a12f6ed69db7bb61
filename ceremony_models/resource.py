"""
Resource and Availability data models for the Ceremony Slot Engine.

This module defines the 'Supply' side of the engine:
1. Resources (Celebrants / BABS and Venues / locaties) with a validity window
2. Recurring Rules (closed tagged variant, validated at construction)
3. Exceptions (Blocked dates and already booked ceremonies)

Every model accepts both snake_case names and the camelCase column names of
the persisted rows (e.g. `dayOfWeek`, `validFrom`, `allDay`).
"""

from enum import Enum
from typing import Annotated, List, Literal, Optional, Set, Union
from datetime import date as date_type, time as time_type

from dateutil.rrule import rrulestr
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from slot_engine.errors import ConfigurationError


ROW_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ResourceKind(str, Enum):
    """The two resource types a ceremony needs."""
    BABS = "babs"          # Celebrant (buitengewoon ambtenaar burgerlijke stand)
    LOCATIE = "locatie"    # Venue


class _RuleBase(BaseModel):
    """Fields shared by every recurring availability rule."""
    model_config = ROW_CONFIG

    id: Optional[str] = Field(default=None, description="Row identifier")
    start_time: time_type = Field(description="Wall-clock start, resource-local")
    end_time: time_type = Field(description="Wall-clock end, resource-local")
    valid_from: date_type = Field(description="First date the rule applies (inclusive)")
    valid_until: Optional[date_type] = Field(default=None, description="Last date (inclusive), open-ended if None")
    description: Optional[str] = Field(default=None)

    @model_validator(mode='after')
    def validate_window(self):
        if self.start_time >= self.end_time:
            raise ConfigurationError(
                f"Rule {self.id or '<new>'}: end time {self.end_time} must be after start time {self.start_time}"
            )
        if self.valid_until is not None and self.valid_until < self.valid_from:
            raise ConfigurationError(
                f"Rule {self.id or '<new>'}: validUntil {self.valid_until} is before validFrom {self.valid_from}"
            )
        return self


class WeeklyRule(_RuleBase):
    """Every week on one weekday."""
    rule_type: Literal["weekly"] = "weekly"
    day_of_week: int = Field(ge=0, le=6, description="0=Sunday, 6=Saturday")


class MonthlyWeekdayRule(_RuleBase):
    """The Nth weekday of every month, e.g. '2nd Tuesday'."""
    rule_type: Literal["monthly_weekday"] = "monthly_weekday"
    day_of_week: int = Field(ge=0, le=6, description="0=Sunday, 6=Saturday")
    week_of_month: int = Field(ge=1, le=5, description="1-4 = Nth occurrence, 5 = last occurrence")


class IntervalWeeksRule(_RuleBase):
    """Every N weeks on one weekday, counted from valid_from (biweekly, triweekly...)."""
    rule_type: Literal["interval_weeks"] = "interval_weeks"
    day_of_week: int = Field(ge=0, le=6, description="0=Sunday, 6=Saturday")
    interval_weeks: int = Field(ge=1, description="Repeat every N weeks")


class WorkdaysRule(_RuleBase):
    """Monday to Friday."""
    rule_type: Literal["workdays"] = "workdays"


class MonthlyDayRule(_RuleBase):
    """A fixed day of every month. Months without that day are skipped."""
    rule_type: Literal["monthly_day"] = "monthly_day"
    day_of_month: int = Field(ge=1, le=31)


class RRuleRule(_RuleBase):
    """Free-form RFC 5545 recurrence, anchored at valid_from."""
    rule_type: Literal["rrule"] = "rrule"
    rrule_string: str = Field(min_length=1, description="e.g. 'RRULE:FREQ=WEEKLY;BYDAY=SA'")

    @model_validator(mode='after')
    def validate_rrule(self):
        # Anchored at valid_from; an embedded DTSTART would override it
        if "DTSTART" in self.rrule_string.upper():
            raise ConfigurationError(
                f"Rule {self.id or '<new>'}: rrule must not carry DTSTART, use valid_from instead"
            )
        try:
            rrulestr(self.rrule_string)
        except (ValueError, TypeError) as e:
            raise ConfigurationError(f"Rule {self.id or '<new>'}: invalid rrule '{self.rrule_string}': {e}") from e
        return self


RecurringRule = Annotated[
    Union[WeeklyRule, MonthlyWeekdayRule, IntervalWeeksRule, WorkdaysRule, MonthlyDayRule, RRuleRule],
    Field(discriminator="rule_type"),
]


class BlockedDate(BaseModel):
    """A one-off subtraction from whatever the rules produced for a date."""
    model_config = ROW_CONFIG

    id: Optional[str] = None
    blocked_date: date_type
    all_day: bool = Field(default=True, description="If False, only [start_time, end_time) is removed")
    start_time: Optional[time_type] = None
    end_time: Optional[time_type] = None
    reason: Optional[str] = None

    @model_validator(mode='after')
    def validate_partial_block(self):
        if self.all_day:
            return self
        if self.start_time is None or self.end_time is None:
            raise ConfigurationError(
                f"Blocked date {self.blocked_date}: start and end time are required when not all day"
            )
        if self.start_time >= self.end_time:
            raise ConfigurationError(
                f"Blocked date {self.blocked_date}: end time must be after start time"
            )
        return self


class BookedCeremony(BaseModel):
    """An existing reservation that occupies the resource."""
    model_config = ROW_CONFIG

    reference: Optional[str] = Field(default=None, validation_alias=AliasChoices("reference", "id"))
    date: date_type = Field(validation_alias=AliasChoices("date", "datum"))
    start_time: time_type = Field(validation_alias=AliasChoices("start_time", "startTime", "startTijd"))
    end_time: time_type = Field(validation_alias=AliasChoices("end_time", "endTime", "eindTijd"))

    @model_validator(mode='after')
    def validate_times(self):
        if self.start_time >= self.end_time:
            raise ConfigurationError(f"Ceremony {self.reference}: end time must be after start time")
        return self

    def as_block(self) -> BlockedDate:
        """A booked ceremony removes availability exactly like a partial block."""
        return BlockedDate(
            blocked_date=self.date,
            all_day=False,
            start_time=self.start_time,
            end_time=self.end_time,
            reason=f"Booked ceremony {self.reference or ''}".strip(),
        )


class Resource(BaseModel):
    """
    A bookable resource: owns recurring rules, blocked dates and bookings.
    The engine reads these as a snapshot and never mutates them.
    """
    model_config = ROW_CONFIG

    id: str = Field(min_length=1, description="Unique identifier")
    kind: ResourceKind
    name: str = Field(default="", validation_alias=AliasChoices("name", "naam"))
    active: bool = Field(default=True, validation_alias=AliasChoices("active", "actief"))

    # Overall validity window (beschikbaarVanaf / beschikbaarTot)
    available_from: Optional[date_type] = Field(
        default=None,
        validation_alias=AliasChoices("available_from", "availableFrom", "beschikbaarVanaf"),
    )
    available_until: Optional[date_type] = Field(
        default=None,
        validation_alias=AliasChoices("available_until", "availableUntil", "beschikbaarTot"),
    )

    rules: List[RecurringRule] = Field(default_factory=list)
    blocked_dates: List[BlockedDate] = Field(default_factory=list)
    booked_ceremonies: List[BookedCeremony] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_availability_window(self):
        if self.available_from and self.available_until and self.available_until < self.available_from:
            raise ConfigurationError(
                f"{self.kind.value} {self.id}: available_until {self.available_until} is before available_from {self.available_from}"
            )
        return self

    @property
    def has_rule_data(self) -> bool:
        return bool(self.rules)

    def exceptions(self) -> List[BlockedDate]:
        """Blocked dates plus booked ceremonies, as one block list."""
        return list(self.blocked_dates) + [c.as_block() for c in self.booked_ceremonies]

    def is_valid_on(self, day: date_type) -> bool:
        if self.available_from and day < self.available_from:
            return False
        if self.available_until and day > self.available_until:
            return False
        return True


class Celebrant(Resource):
    """BABS: a civil celebrant with spoken languages."""
    kind: ResourceKind = ResourceKind.BABS
    spoken_languages: Set[str] = Field(
        default_factory=lambda: {"nl"},
        validation_alias=AliasChoices("spoken_languages", "spokenLanguages", "talen"),
    )

    @field_validator('spoken_languages')
    @classmethod
    def normalize_languages(cls, v):
        return {lang.strip().lower() for lang in v if lang and lang.strip()}

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "id": "babs_jansen",
            "name": "P. Jansen",
            "talen": ["nl", "en"],
            "rules": [
                {"ruleType": "weekly", "dayOfWeek": 2, "startTime": "09:00", "endTime": "17:00", "validFrom": "2025-01-01"}
            ],
            "blockedDates": [{"blockedDate": "2025-04-27", "allDay": True, "reason": "Koningsdag"}]
        }
    })


class Venue(Resource):
    """Locatie: the place where the ceremony is held."""
    kind: ResourceKind = ResourceKind.LOCATIE
