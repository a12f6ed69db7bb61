from datetime import date, time

import pytest
from pydantic import ValidationError

from ceremony_models import (
    BlockedDate,
    BookedCeremony,
    Celebrant,
    CeremonyTypeConstraint,
    MonthlyWeekdayRule,
    RRuleRule,
    Slot,
    Venue,
    WeeklyRule,
)
from slot_engine.errors import ConfigurationError


def test_rule_requires_start_before_end():
    with pytest.raises(ConfigurationError):
        WeeklyRule(day_of_week=2, start_time=time(17), end_time=time(9), valid_from=date(2025, 1, 1))


def test_rule_valid_until_before_valid_from_is_configuration_error():
    with pytest.raises(ConfigurationError):
        WeeklyRule(
            day_of_week=2,
            start_time=time(9),
            end_time=time(17),
            valid_from=date(2025, 3, 1),
            valid_until=date(2025, 2, 1),
        )


def test_rule_field_bounds_are_validated():
    with pytest.raises(ValidationError):
        WeeklyRule(day_of_week=7, start_time=time(9), end_time=time(17), valid_from=date(2025, 1, 1))
    with pytest.raises(ValidationError):
        MonthlyWeekdayRule(
            day_of_week=2, week_of_month=6, start_time=time(9), end_time=time(17), valid_from=date(2025, 1, 1)
        )


def test_rule_accepts_camel_case_columns():
    rule = WeeklyRule.model_validate({
        "ruleType": "weekly",
        "dayOfWeek": 4,
        "startTime": "13:00:00",
        "endTime": "17:00:00",
        "validFrom": "2025-01-01",
        "validUntil": None,
    })
    assert rule.day_of_week == 4
    assert rule.start_time == time(13)
    assert rule.valid_until is None


def test_invalid_rrule_is_configuration_error():
    with pytest.raises(ConfigurationError):
        RRuleRule(rrule_string="RRULE:FREQ=SOMETIMES", start_time=time(9), end_time=time(12), valid_from=date(2025, 1, 1))


def test_partial_block_requires_times():
    with pytest.raises(ConfigurationError):
        BlockedDate(blocked_date=date(2025, 3, 4), all_day=False, start_time=time(12))

    block = BlockedDate(blocked_date=date(2025, 3, 4))
    assert block.all_day is True


def test_booked_ceremony_reads_original_columns_and_acts_as_block():
    ceremony = BookedCeremony.model_validate(
        {"id": "cer_1", "datum": "2025-03-11", "startTijd": "11:00", "eindTijd": "12:00"}
    )
    block = ceremony.as_block()
    assert block.blocked_date == date(2025, 3, 11)
    assert block.all_day is False
    assert (block.start_time, block.end_time) == (time(11), time(12))


def test_resource_availability_window_is_validated():
    with pytest.raises(ConfigurationError):
        Venue(id="loc_1", available_from=date(2025, 6, 1), available_until=date(2025, 1, 1))


def test_celebrant_languages_are_normalized_and_default_to_dutch():
    celebrant = Celebrant.model_validate({"id": "babs_1", "naam": "Jan", "talen": ["NL", " en "]})
    assert celebrant.spoken_languages == {"nl", "en"}
    assert celebrant.name == "Jan"
    assert Celebrant(id="babs_2").spoken_languages == {"nl"}


def test_resource_with_rules_from_rows():
    venue = Venue.model_validate({
        "id": "loc_1",
        "beschikbaarVanaf": "2025-01-01",
        "rules": [
            {"ruleType": "workdays", "startTime": "10:00", "endTime": "16:00", "validFrom": "2025-01-01"},
            {"ruleType": "monthly_day", "dayOfMonth": 15, "startTime": "10:00", "endTime": "12:00", "validFrom": "2025-01-01"},
        ],
    })
    assert venue.available_from == date(2025, 1, 1)
    assert [r.rule_type for r in venue.rules] == ["workdays", "monthly_day"]
    assert venue.has_rule_data


def test_ceremony_type_reads_original_columns():
    ceremony_type = CeremonyTypeConstraint.model_validate({"naam": "Engels", "talen": ["EN"], "duurMinuten": 45})
    assert ceremony_type.required_languages == {"en"}
    assert ceremony_type.duration_minutes == 45
    assert CeremonyTypeConstraint().required_languages == set()


def test_slot_duration_and_serialization():
    slot = Slot(date=date(2025, 3, 4), start_time=time(10), end_time=time(11, 30))
    assert slot.duration_minutes == 90
    assert slot.model_dump(mode="json") == {"date": "2025-03-04", "start_time": "10:00:00", "end_time": "11:30:00"}


def test_rrule_with_own_dtstart_is_configuration_error():
    with pytest.raises(ConfigurationError, match="DTSTART"):
        RRuleRule(
            rrule_string="DTSTART:20250101T000000Z\nRRULE:FREQ=WEEKLY;BYDAY=TU",
            start_time=time(9),
            end_time=time(17),
            valid_from=date(2025, 1, 1),
        )
