from datetime import date, time

from ceremony_models import AvailabilityInterval, BlockedDate, BookedCeremony, Venue
from slot_engine.blocking import apply_exceptions, resolve_resource, subtract_interval

from helpers import TUESDAY, weekly

DAY = date(2025, 3, 4)


def iv(start, end, day=DAY):
    return AvailabilityInterval(day, start, end)


def partial(start, end, day=DAY):
    return BlockedDate(blocked_date=day, all_day=False, start_time=start, end_time=end)


def test_all_day_block_removes_only_that_date():
    other_day = date(2025, 3, 5)
    intervals = [iv(time(9), time(12)), iv(time(13), time(17)), iv(time(9), time(17), other_day)]

    result = apply_exceptions(intervals, [BlockedDate(blocked_date=DAY, all_day=True)])

    assert result == [iv(time(9), time(17), other_day)]


def test_block_inside_interval_splits_it():
    result = apply_exceptions([iv(time(10), time(16))], [partial(time(12), time(13))])
    assert result == [iv(time(10), time(12)), iv(time(13), time(16))]


def test_block_overlapping_start_or_end_truncates():
    assert subtract_interval(iv(time(10), time(16)), time(9), time(11)) == [iv(time(11), time(16))]
    assert subtract_interval(iv(time(10), time(16)), time(15), time(18)) == [iv(time(10), time(15))]


def test_block_covering_interval_removes_it():
    assert subtract_interval(iv(time(10), time(12)), time(9), time(13)) == []
    assert subtract_interval(iv(time(10), time(12)), time(10), time(12)) == []


def test_block_touching_interval_changes_nothing():
    assert subtract_interval(iv(time(10), time(12)), time(12), time(13)) == [iv(time(10), time(12))]


def test_multiple_partial_blocks_apply_cumulatively():
    blocks = [partial(time(10), time(11)), partial(time(12), time(13)), partial(time(15), time(17))]
    result = apply_exceptions([iv(time(9), time(16))], blocks)
    assert result == [iv(time(9), time(10)), iv(time(11), time(12)), iv(time(13), time(15))]


def test_applying_blocks_twice_is_idempotent():
    intervals = [iv(time(9), time(17)), iv(time(10), time(16)), iv(time(9), time(12), date(2025, 3, 6))]
    blocks = [
        partial(time(11), time(12)),
        partial(time(14), time(15)),
        BlockedDate(blocked_date=date(2025, 3, 6)),
    ]

    once = apply_exceptions(intervals, blocks)
    assert apply_exceptions(once, blocks) == once


def test_blocks_on_other_dates_have_no_effect():
    intervals = [iv(time(9), time(17))]
    assert apply_exceptions(intervals, [BlockedDate(blocked_date=date(2025, 3, 5))]) == intervals


def test_resolve_resource_subtracts_blocks_and_booked_ceremonies():
    venue = Venue(
        id="loc_1",
        rules=[weekly(TUESDAY, time(9), time(17))],
        blocked_dates=[BlockedDate(blocked_date=date(2025, 3, 11))],
        booked_ceremonies=[BookedCeremony(date=DAY, start_time=time(11), end_time=time(12), reference="cer_1")],
    )

    result = resolve_resource(venue, date(2025, 3, 1), date(2025, 3, 12))

    assert result == [iv(time(9), time(11)), iv(time(12), time(17))]
