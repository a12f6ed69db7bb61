"""Rule builders and weekday constants shared by the tests."""

from datetime import date

from ceremony_models import WeeklyRule

# Sunday=0, as stored in the rule rows
SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY = range(7)


def weekly(day_of_week, start, end, valid_from=date(2025, 1, 1), valid_until=None):
    return WeeklyRule(
        day_of_week=day_of_week,
        start_time=start,
        end_time=end,
        valid_from=valid_from,
        valid_until=valid_until,
    )


def every_day(start, end, valid_from=date(2025, 1, 1)):
    return [weekly(day, start, end, valid_from) for day in range(7)]
