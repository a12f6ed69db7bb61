"""
Data models package for the Ceremony Slot Engine.

This package exports the three pillars of the data architecture:
1. Demand (CeremonyTypeConstraint)
2. Supply (Celebrant, Venue, RecurringRule variants, BlockedDate, BookedCeremony)
3. Output (AvailabilityInterval, Slot, SlotSearchResult)
"""

from .ceremony import CeremonyTypeConstraint

from .resource import (
    ResourceKind,
    Resource,
    Celebrant,
    Venue,
    RecurringRule,
    WeeklyRule,
    MonthlyWeekdayRule,
    IntervalWeeksRule,
    WorkdaysRule,
    MonthlyDayRule,
    RRuleRule,
    BlockedDate,
    BookedCeremony,
)

from .schedule import (
    AvailabilityInterval,
    Slot,
    SlotSearchResult,
)

__all__ = [
    # --- Demand Models ---
    "CeremonyTypeConstraint",

    # --- Resource & Availability Models ---
    "ResourceKind",
    "Resource",
    "Celebrant",
    "Venue",
    "RecurringRule",
    "WeeklyRule",
    "MonthlyWeekdayRule",
    "IntervalWeeksRule",
    "WorkdaysRule",
    "MonthlyDayRule",
    "RRuleRule",
    "BlockedDate",
    "BookedCeremony",

    # --- Output Models ---
    "AvailabilityInterval",
    "Slot",
    "SlotSearchResult",
]
