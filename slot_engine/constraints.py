"""
Celebrant Eligibility Validation.

This module answers the binary question: "Can celebrant X perform a ceremony
on date D at time T?" and, when not, says why. It backs the lookup of
available celebrants for an already chosen date and time.
"""

from dataclasses import dataclass
from datetime import date as date_type, datetime, time as time_type, timedelta
from typing import Iterable, Optional

from ceremony_models import Celebrant
from .expander import expand_resource
from .intersector import merge_intervals
from .slots import languages_compatible


@dataclass
class ConstraintViolation:
    """Detailed reason for rejection."""
    constraint_type: str  # e.g., "Language", "Validity", "Booked", "Blocked", "Schedule", "Missing"
    reason: str
    resource_id: str
    date: date_type
    start_time: time_type


class CelebrantAvailabilityChecker:
    """
    Validates hard constraints for one celebrant at one date/time.
    Checks run cheapest-first, the first failure wins.
    """

    def __init__(self, default_languages: Optional[Iterable[str]] = None):
        # Assumed for celebrants stored without any language
        self.default_languages = set(default_languages or {"nl"})

    def check(
        self,
        celebrant: Celebrant,
        on_date: date_type,
        start_time: time_type,
        duration_minutes: int,
        required_languages: Optional[Iterable[str]] = None,
    ) -> Optional[ConstraintViolation]:
        """
        Master validation function. Returns None if Valid, Violation object if Invalid.
        """
        start_dt = datetime.combine(on_date, start_time)
        end_dt = start_dt + timedelta(minutes=duration_minutes)
        if end_dt.date() != on_date:
            return ConstraintViolation(
                "Schedule", "Ceremony would run past midnight", celebrant.id, on_date, start_time
            )
        end_time = end_dt.time()

        # 1. Language (cheap, no date logic)
        violation = self._check_language(celebrant, on_date, start_time, required_languages)
        if violation: return violation

        # 2. Validity window (beschikbaarVanaf / beschikbaarTot)
        violation = self._check_validity(celebrant, on_date, start_time)
        if violation: return violation

        # 3. Existing ceremonies
        violation = self._check_bookings(celebrant, on_date, start_time, end_time)
        if violation: return violation

        # 4. Blocked dates
        violation = self._check_blocked(celebrant, on_date, start_time, end_time)
        if violation: return violation

        # 5. Recurring schedule must cover the whole ceremony
        return self._check_schedule(celebrant, on_date, start_time, end_time)

    def _check_language(self, celebrant: Celebrant, on_date: date_type, start: time_type,
                        required_languages: Optional[Iterable[str]]) -> Optional[ConstraintViolation]:
        required = set(required_languages or [])
        spoken = celebrant.spoken_languages or self.default_languages
        if languages_compatible(required, spoken):
            return None
        return ConstraintViolation(
            "Language",
            f"Missing required language (has: {', '.join(sorted(spoken))}, "
            f"needs: {', '.join(sorted(required))})",
            celebrant.id, on_date, start,
        )

    def _check_validity(self, celebrant: Celebrant, on_date: date_type, start: time_type) -> Optional[ConstraintViolation]:
        if not celebrant.active:
            return ConstraintViolation("Validity", f"{celebrant.name or celebrant.id} is inactive", celebrant.id, on_date, start)
        if celebrant.available_from and on_date < celebrant.available_from:
            return ConstraintViolation(
                "Validity", f"Not yet available (available from {celebrant.available_from})", celebrant.id, on_date, start
            )
        if celebrant.available_until and on_date > celebrant.available_until:
            return ConstraintViolation(
                "Validity", f"No longer available (available until {celebrant.available_until})", celebrant.id, on_date, start
            )
        return None

    def _check_bookings(self, celebrant: Celebrant, on_date: date_type, start: time_type,
                        end: time_type) -> Optional[ConstraintViolation]:
        for ceremony in celebrant.booked_ceremonies:
            # Standard Overlap Logic: StartA < EndB and StartB < EndA
            if ceremony.date == on_date and ceremony.start_time < end and start < ceremony.end_time:
                return ConstraintViolation(
                    "Booked",
                    f"Already has ceremony at {ceremony.start_time:%H:%M}-{ceremony.end_time:%H:%M}",
                    celebrant.id, on_date, start,
                )
        return None

    def _check_blocked(self, celebrant: Celebrant, on_date: date_type, start: time_type,
                       end: time_type) -> Optional[ConstraintViolation]:
        for block in celebrant.blocked_dates:
            if block.blocked_date != on_date:
                continue
            if block.all_day or (block.start_time < end and start < block.end_time):
                reason = f"Date {on_date} is blocked"
                if block.reason:
                    reason += f" ({block.reason})"
                return ConstraintViolation("Blocked", reason, celebrant.id, on_date, start)
        return None

    def _check_schedule(self, celebrant: Celebrant, on_date: date_type, start: time_type,
                        end: time_type) -> Optional[ConstraintViolation]:
        if not celebrant.has_rule_data:
            return ConstraintViolation("Schedule", "No availability configured", celebrant.id, on_date, start)

        intervals = merge_intervals(expand_resource(celebrant, on_date, on_date))
        # Ceremony must fit ENTIRELY within one availability block
        for interval in intervals:
            if interval.start_time <= start and end <= interval.end_time:
                return None

        return ConstraintViolation(
            "Schedule",
            f"Not working at {start:%H:%M}-{end:%H:%M}",
            celebrant.id, on_date, start,
        )
