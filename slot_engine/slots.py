"""
Slot Generator & Language Filter.

Slices intersected availability into back-to-back ceremony slots of a fixed
duration and drops everything when the celebrant speaks none of the ceremony
type's required languages.
"""

import logging
from datetime import timedelta
from typing import Iterable, List, Optional, Set

from ceremony_models import AvailabilityInterval, Slot, SlotSearchResult
from .config import EngineSettings
from .errors import InvalidDurationError, SlotWarning
from .intersector import merge_intervals

logger = logging.getLogger(__name__)


def validate_duration(duration_minutes: int, settings: Optional[EngineSettings] = None) -> None:
    """Reject durations outside [min, max] before any computation."""
    settings = settings or EngineSettings()
    if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
        raise InvalidDurationError(f"Duration must be a whole number of minutes, got {duration_minutes!r}")
    if not (settings.min_duration_minutes <= duration_minutes <= settings.max_duration_minutes):
        raise InvalidDurationError(
            f"Duration must be between {settings.min_duration_minutes} and "
            f"{settings.max_duration_minutes} minutes, got {duration_minutes}"
        )


def _normalize(languages: Optional[Iterable[str]]) -> Set[str]:
    return {lang.strip().lower() for lang in (languages or []) if lang and lang.strip()}


def languages_compatible(required_languages: Optional[Iterable[str]], resource_languages: Optional[Iterable[str]]) -> bool:
    """True when there is no requirement or at least one required language is spoken."""
    required = _normalize(required_languages)
    if not required:
        return True
    return bool(required & _normalize(resource_languages))


def language_mismatch_message(required_languages: Iterable[str], resource_languages: Iterable[str]) -> str:
    required = ", ".join(sorted(_normalize(required_languages)))
    spoken = ", ".join(sorted(_normalize(resource_languages))) or "none"
    return f"The celebrant speaks none of the required languages. Required: {required}, celebrant speaks: {spoken}"


def slice_interval(interval: AvailabilityInterval, duration_minutes: int) -> List[Slot]:
    """Back-to-back slots from the interval start; no slot crosses the interval end."""
    step = timedelta(minutes=duration_minutes)
    interval_end = interval.end

    slots = []
    cursor = interval.start
    while cursor + step <= interval_end:
        slot_end = cursor + step
        slots.append(Slot(date=interval.date, start_time=cursor.time(), end_time=slot_end.time()))
        cursor = slot_end
    return slots


def generate_slots(
    intervals: List[AvailabilityInterval],
    duration_minutes: int,
    required_languages: Optional[Iterable[str]] = None,
    resource_languages: Optional[Iterable[str]] = None,
    settings: Optional[EngineSettings] = None,
) -> SlotSearchResult:
    """
    Generate slots ordered by (date, start_time).

    Raises:
        InvalidDurationError: duration outside the configured bounds
    Returns:
        SlotSearchResult, with the `language_mismatch` warning and no slots
        when the language requirement cannot be met.
    """
    validate_duration(duration_minutes, settings)

    if not languages_compatible(required_languages, resource_languages):
        message = language_mismatch_message(required_languages, resource_languages or [])
        logger.warning(message)
        return SlotSearchResult(warning=SlotWarning.LANGUAGE_MISMATCH, message=message)

    # Union-and-merge first so overlapping rules never yield overlapping slots
    merged = merge_intervals(intervals)

    slots: List[Slot] = []
    for interval in merged:
        slots.extend(slice_interval(interval, duration_minutes))

    slots.sort(key=lambda s: (s.date, s.start_time))
    logger.debug(f"Generated {len(slots)} slots of {duration_minutes} min from {len(merged)} intervals")
    return SlotSearchResult(slots=slots)
