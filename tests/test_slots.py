from datetime import date, time

import pytest

from ceremony_models import AvailabilityInterval
from slot_engine.config import EngineSettings
from slot_engine.errors import InvalidDurationError, LanguageMismatch, SlotWarning
from slot_engine.slots import generate_slots, languages_compatible, slice_interval, validate_duration

DAY = date(2025, 3, 4)


def iv(start, end, day=DAY):
    return AvailabilityInterval(day, start, end)


def test_slices_back_to_back_slots():
    result = generate_slots([iv(time(10), time(16))], 60)

    assert result.warning is None
    assert [s.start_time for s in result.slots] == [time(h) for h in range(10, 16)]
    assert all(s.duration_minutes == 60 for s in result.slots)


def test_trailing_remainder_is_dropped():
    slots = slice_interval(iv(time(10), time(12, 30)), 60)
    assert [(s.start_time, s.end_time) for s in slots] == [(time(10), time(11)), (time(11), time(12))]


def test_interval_shorter_than_duration_gives_no_slots():
    assert generate_slots([iv(time(10), time(10, 45))], 60).is_empty


def test_slots_never_cross_their_interval_end():
    intervals = [iv(time(9), time(10, 50)), iv(time(13), time(14, 40)), iv(time(9), time(9, 30), date(2025, 3, 5))]
    result = generate_slots(intervals, 25)

    for slot in result.slots:
        assert any(
            i.date == slot.date and i.start_time <= slot.start_time and slot.end_time <= i.end_time
            for i in intervals
        )


@pytest.mark.parametrize("duration", [14, 481, 0, -60])
def test_duration_out_of_bounds_is_rejected(duration):
    with pytest.raises(InvalidDurationError):
        generate_slots([iv(time(10), time(16))], duration)


@pytest.mark.parametrize("duration", [15, 480])
def test_duration_bounds_are_inclusive(duration):
    validate_duration(duration)


def test_non_integer_duration_is_rejected():
    with pytest.raises(InvalidDurationError):
        validate_duration(60.5)
    with pytest.raises(InvalidDurationError):
        validate_duration(True)


def test_duration_bounds_come_from_settings():
    settings = EngineSettings(min_duration_minutes=30, max_duration_minutes=120, default_duration_minutes=60)
    with pytest.raises(InvalidDurationError):
        validate_duration(20, settings)
    with pytest.raises(InvalidDurationError):
        validate_duration(180, settings)


def test_language_mismatch_returns_warning_and_no_slots():
    result = generate_slots([iv(time(10), time(16))], 60, required_languages={"en"}, resource_languages={"nl"})

    assert result.is_empty
    assert result.warning is LanguageMismatch
    assert result.warning == SlotWarning.LANGUAGE_MISMATCH
    assert "en" in result.message


def test_one_shared_language_is_enough():
    result = generate_slots([iv(time(10), time(12))], 60, required_languages={"en", "de"}, resource_languages={"nl", "DE"})
    assert result.count == 2


def test_empty_requirement_is_always_compatible():
    assert languages_compatible(set(), set())
    assert languages_compatible(None, {"nl"})
    assert not languages_compatible({"fr"}, set())


def test_overlapping_intervals_do_not_produce_overlapping_slots():
    result = generate_slots([iv(time(10), time(12)), iv(time(11), time(13))], 60)

    assert [s.start_time for s in result.slots] == [time(10), time(11), time(12)]


def test_slots_are_ordered_by_date_then_time():
    intervals = [iv(time(14), time(16), date(2025, 3, 5)), iv(time(10), time(12)), iv(time(8), time(9), date(2025, 3, 5))]
    result = generate_slots(intervals, 60)

    keys = [(s.date, s.start_time) for s in result.slots]
    assert keys == sorted(keys)
    assert keys[0] == (DAY, time(10))
