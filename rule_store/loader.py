"""
Row loading for the Availability Rule Store.

Turns loosely-typed persisted rows (camelCase columns, legacy rule types,
the old `beschikbaarheid` JSON blob) into validated models. Malformed rows
raise ConfigurationError, or are logged and skipped in best-effort mode.
"""

import logging
from datetime import date as date_type, time as time_type
from typing import Any, Dict, Iterable, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from ceremony_models import BlockedDate, BookedCeremony, RecurringRule, WeeklyRule
from slot_engine.errors import ConfigurationError

logger = logging.getLogger(__name__)

_RULE_ADAPTER = TypeAdapter(RecurringRule)

# Index = day_of_week (0=Sunday), as stored by the booking system
DUTCH_DAY_NAMES = ["zondag", "maandag", "dinsdag", "woensdag", "donderdag", "vrijdag", "zaterdag"]

LEGACY_RULE_TYPES = {
    "biweekly": ("interval_weeks", 2),
    "triweekly": ("interval_weeks", 3),
}

M = TypeVar("M", bound=BaseModel)


def _normalize_rule_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Map legacy rule types onto the closed variant set."""
    data = dict(row)
    type_key = "ruleType" if "ruleType" in data else "rule_type"
    rule_type = data.get(type_key)

    if rule_type in LEGACY_RULE_TYPES:
        new_type, default_interval = LEGACY_RULE_TYPES[rule_type]
        data[type_key] = new_type
        if data.get("intervalWeeks") is None and data.get("interval_weeks") is None:
            data["interval_weeks"] = default_interval
            data.pop("intervalWeeks", None)

    return data


def parse_rule(row: Mapping[str, Any]) -> RecurringRule:
    """Validate one rule row. Raises ConfigurationError on malformed data."""
    try:
        return _RULE_ADAPTER.validate_python(_normalize_rule_row(row))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid recurring rule {row.get('id', '<unnamed>')}: {e}") from e


def _load_rows(rows: Iterable[Mapping[str, Any]], parse, label: str, best_effort: bool) -> List[Any]:
    loaded = []
    for i, row in enumerate(rows):
        try:
            loaded.append(parse(row))
        except ConfigurationError as e:
            if not best_effort:
                raise
            logger.warning(f"Skipping invalid {label} {i}: {e}")
    return loaded


def _model_parser(model_class: Type[M], label: str):
    def parse(row: Mapping[str, Any]) -> M:
        try:
            return model_class.model_validate(dict(row))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid {label} {row.get('id', '<unnamed>')}: {e}") from e
    return parse


def load_rule_rows(rows: Iterable[Mapping[str, Any]], best_effort: bool = False) -> List[RecurringRule]:
    return _load_rows(rows, parse_rule, "recurring rule", best_effort)


def load_block_rows(rows: Iterable[Mapping[str, Any]], best_effort: bool = False) -> List[BlockedDate]:
    return _load_rows(rows, _model_parser(BlockedDate, "blocked date"), "blocked date", best_effort)


def load_ceremony_rows(rows: Iterable[Mapping[str, Any]], best_effort: bool = False) -> List[BookedCeremony]:
    return _load_rows(rows, _model_parser(BookedCeremony, "booked ceremony"), "booked ceremony", best_effort)


def _parse_range(value: str) -> tuple:
    start_raw, sep, end_raw = value.partition("-")
    if not sep:
        raise ConfigurationError(f"Invalid time range '{value}', expected 'HH:MM-HH:MM'")
    try:
        return time_type.fromisoformat(start_raw.strip()), time_type.fromisoformat(end_raw.strip())
    except ValueError as e:
        raise ConfigurationError(f"Invalid time range '{value}': {e}") from e


def rules_from_weekly_blob(blob: Optional[Mapping[str, Any]], valid_from: Optional[date_type] = None,
                           valid_until: Optional[date_type] = None) -> List[WeeklyRule]:
    """
    Convert the legacy `beschikbaarheid` blob into weekly rules.

    {"maandag": ["09:00-12:00", "13:00-17:00"], "zaterdag": []}

    A day that is missing, or listed with no ranges, yields no availability.
    """
    if not blob:
        return []
    if not isinstance(blob, Mapping):
        raise ConfigurationError(f"Availability blob must be an object, got {type(blob).__name__}")

    anchor = valid_from or date_type.min
    rules: List[WeeklyRule] = []

    for day_name, ranges in blob.items():
        key = str(day_name).strip().lower()
        if key not in DUTCH_DAY_NAMES:
            raise ConfigurationError(f"Unknown day '{day_name}' in availability blob")
        if not isinstance(ranges, (list, tuple)):
            raise ConfigurationError(f"Ranges for '{day_name}' must be a list")

        for value in ranges:
            start, end = _parse_range(str(value))
            rules.append(WeeklyRule(
                day_of_week=DUTCH_DAY_NAMES.index(key),
                start_time=start,
                end_time=end,
                valid_from=anchor,
                valid_until=valid_until,
                description=f"beschikbaarheid {key} {value}",
            ))

    return rules
