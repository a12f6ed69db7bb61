"""
Recurrence Expander.

Turns recurring availability rules plus a date window into concrete
`AvailabilityInterval`s, one per matching date. Overlapping rules are NOT
deduplicated here; the intersector treats a resource's expansion as the union
of all its rules.

Weekdays follow the persisted rows: 0=Sunday ... 6=Saturday.
"""

import logging
from datetime import date as date_type, datetime, time as time_type, timedelta
from typing import Callable, Dict, Iterator, List, Optional

from dateutil.rrule import rrulestr

from ceremony_models import (
    AvailabilityInterval,
    IntervalWeeksRule,
    MonthlyDayRule,
    MonthlyWeekdayRule,
    RecurringRule,
    Resource,
    RRuleRule,
    WeeklyRule,
    WorkdaysRule,
)
from .errors import ConfigurationError, InvalidWindowError

logger = logging.getLogger(__name__)

LAST_WEEK_OF_MONTH = 5


def sunday_based_weekday(day: date_type) -> int:
    """Python's Monday=0 weekday converted to the Sunday=0 convention."""
    return (day.weekday() + 1) % 7


def expand(rules: List[RecurringRule], window_start: date_type, window_end: date_type) -> List[AvailabilityInterval]:
    """
    Expand every rule over [window_start, window_end] (both inclusive).

    Raises:
        InvalidWindowError: window_end is before window_start
        ConfigurationError: a rule's validUntil is before its validFrom
    """
    if window_end < window_start:
        raise InvalidWindowError(f"Window end {window_end} is before window start {window_start}")

    intervals: List[AvailabilityInterval] = []

    for rule in rules:
        _check_rule(rule)

        # Intersection of the request window and the rule's validity range
        first = max(window_start, rule.valid_from)
        last = window_end if rule.valid_until is None else min(window_end, rule.valid_until)
        if last < first:
            continue

        for day in _matching_dates(rule, first, last):
            intervals.append(AvailabilityInterval(day, rule.start_time, rule.end_time))

    intervals.sort()
    logger.debug(f"Expanded {len(rules)} rules over {window_start}..{window_end} into {len(intervals)} intervals")
    return intervals


def expand_resource(resource: Resource, window_start: date_type, window_end: date_type) -> List[AvailabilityInterval]:
    """Expand a resource's rules, clamped to its own availability window."""
    if window_end < window_start:
        raise InvalidWindowError(f"Window end {window_end} is before window start {window_start}")
    if not resource.active:
        logger.info(f"{resource.kind.value} {resource.id} is inactive, no availability")
        return []

    start = max(window_start, resource.available_from) if resource.available_from else window_start
    end = min(window_end, resource.available_until) if resource.available_until else window_end
    if end < start:
        return []

    return expand(resource.rules, start, end)


def _check_rule(rule: RecurringRule) -> None:
    # Models validate this at construction; rows built with model_construct skip that.
    if rule.valid_until is not None and rule.valid_until < rule.valid_from:
        raise ConfigurationError(
            f"Rule {rule.id or '<unnamed>'}: validUntil {rule.valid_until} is before validFrom {rule.valid_from}"
        )
    if rule.start_time >= rule.end_time:
        raise ConfigurationError(f"Rule {rule.id or '<unnamed>'}: end time must be after start time")


def _days(first: date_type, last: date_type) -> Iterator[date_type]:
    current = first
    while current <= last:
        yield current
        current += timedelta(days=1)


# --- Date Matchers ---

def _match_weekly(rule: WeeklyRule, day: date_type) -> bool:
    return sunday_based_weekday(day) == rule.day_of_week


def _match_workdays(rule: WorkdaysRule, day: date_type) -> bool:
    return day.weekday() < 5


def _match_monthly_weekday(rule: MonthlyWeekdayRule, day: date_type) -> bool:
    if sunday_based_weekday(day) != rule.day_of_week:
        return False
    if rule.week_of_month == LAST_WEEK_OF_MONTH:
        # Last occurrence: one week later falls in the next month
        return (day + timedelta(days=7)).month != day.month
    return (day.day - 1) // 7 + 1 == rule.week_of_month


def _match_interval_weeks(rule: IntervalWeeksRule, day: date_type) -> bool:
    if sunday_based_weekday(day) != rule.day_of_week:
        return False
    whole_weeks = (day - rule.valid_from).days // 7
    return whole_weeks % rule.interval_weeks == 0


def _match_monthly_day(rule: MonthlyDayRule, day: date_type) -> bool:
    return day.day == rule.day_of_month


_MATCHERS: Dict[type, Callable[[RecurringRule, date_type], bool]] = {
    WeeklyRule: _match_weekly,
    WorkdaysRule: _match_workdays,
    MonthlyWeekdayRule: _match_monthly_weekday,
    IntervalWeeksRule: _match_interval_weeks,
    MonthlyDayRule: _match_monthly_day,
}


def _matching_dates(rule: RecurringRule, first: date_type, last: date_type) -> Iterator[date_type]:
    if isinstance(rule, RRuleRule):
        yield from _rrule_dates(rule, first, last)
        return

    matcher: Optional[Callable] = _MATCHERS.get(type(rule))
    if matcher is None:
        raise ConfigurationError(f"Unsupported rule type: {getattr(rule, 'rule_type', type(rule).__name__)}")

    for day in _days(first, last):
        if matcher(rule, day):
            yield day


def _rrule_dates(rule: RRuleRule, first: date_type, last: date_type) -> Iterator[date_type]:
    try:
        recurrence = rrulestr(rule.rrule_string, dtstart=datetime.combine(rule.valid_from, time_type.min))
        occurrences = recurrence.between(
            datetime.combine(first, time_type.min),
            datetime.combine(last, time_type.max),
            inc=True,
        )
    except (ValueError, TypeError) as e:
        raise ConfigurationError(f"Rule {rule.id or '<unnamed>'}: invalid rrule '{rule.rrule_string}': {e}") from e

    seen = set()
    for occurrence in occurrences:
        # Sub-daily frequencies collapse onto one interval per date
        if occurrence.date() not in seen:
            seen.add(occurrence.date())
            yield occurrence.date()
