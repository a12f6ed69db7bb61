"""
The Ceremony Slot Finding Engine.

This module wires the pipeline together for one request:
1. Parameter validation (duration, window) before any data access
2. Snapshot lookup of the celebrant and the venue
3. Language compatibility with the ceremony type
4. Expand -> apply exceptions (per resource) -> intersect -> generate slots

The engine is stateless and read-only over its inputs; concurrent requests
need no locking. Authorization is the caller's concern.
"""

import logging
from dataclasses import dataclass, field
from datetime import date as date_type, time as time_type, timedelta
from typing import Iterable, List, Optional, Tuple

from ceremony_models import Celebrant, CeremonyTypeConstraint, SlotSearchResult, Venue
from rule_store import AvailabilityRuleStore
from .blocking import apply_exceptions
from .config import EngineSettings
from .constraints import CelebrantAvailabilityChecker, ConstraintViolation
from .errors import InvalidWindowError, ResourceNotFoundError, SlotWarning
from .expander import expand_resource
from .intersector import intersect
from .slots import generate_slots, language_mismatch_message, languages_compatible, validate_duration

logger = logging.getLogger(__name__)


@dataclass
class CelebrantAvailability:
    """Result of looking up celebrants for a fixed date and time."""
    available: List[Celebrant] = field(default_factory=list)
    skipped: List[ConstraintViolation] = field(default_factory=list)


class SlotFinder:
    """
    Main slot finding engine.
    Ingests a rule store snapshot, outputs ordered ceremony slots.
    """

    def __init__(self, store: AvailabilityRuleStore, settings: Optional[EngineSettings] = None):
        self.store = store
        self.settings = settings or EngineSettings()
        self.checker = CelebrantAvailabilityChecker(self.settings.default_languages)

    def find_slots(
        self,
        celebrant_id: str,
        venue_id: str,
        window_start: Optional[date_type] = None,
        window_end: Optional[date_type] = None,
        duration_minutes: Optional[int] = None,
        ceremony_type: Optional[CeremonyTypeConstraint] = None,
    ) -> SlotSearchResult:
        """
        Slots where both the celebrant and the venue are free.

        Raises:
            InvalidDurationError / InvalidWindowError: before any computation
            ConfigurationError: malformed rule data
        """
        duration = self._resolve_duration(duration_minutes, ceremony_type)
        validate_duration(duration, self.settings)
        start, end = self.resolve_window(window_start, window_end)

        logger.info(
            f"Searching {duration} min slots for BABS {celebrant_id} at locatie {venue_id} ({start}..{end})"
        )

        # 1. Load the snapshot
        try:
            celebrant, venue = self._load_pair(celebrant_id, venue_id)
        except ResourceNotFoundError as e:
            logger.warning(str(e))
            return SlotSearchResult(warning=SlotWarning.RESOURCE_NOT_FOUND, message=str(e))

        # 2. Language gate (before any date work)
        required = ceremony_type.required_languages if ceremony_type else set()
        spoken = celebrant.spoken_languages or self.settings.default_languages
        if not languages_compatible(required, spoken):
            message = language_mismatch_message(required, spoken)
            logger.warning(f"BABS {celebrant.id}: {message}")
            return SlotSearchResult(warning=SlotWarning.LANGUAGE_MISMATCH, message=message)

        # 3. Expand each resource once, apply its own exceptions, then intersect
        celebrant_expanded = expand_resource(celebrant, start, end)
        venue_expanded = expand_resource(venue, start, end)
        both_free = intersect(
            apply_exceptions(celebrant_expanded, celebrant.exceptions()),
            apply_exceptions(venue_expanded, venue.exceptions()),
        )

        # 4. Slice into ceremony slots
        result = generate_slots(both_free, duration, required, spoken, self.settings)

        if result.is_empty and result.warning is None and not intersect(celebrant_expanded, venue_expanded):
            # The recurring schedules never meet, blocks aside
            message = f"The schedules of BABS {celebrant.id} and locatie {venue.id} never overlap between {start} and {end}"
            logger.info(message)
            return SlotSearchResult(warning=SlotWarning.NO_OVERLAP, message=message)

        logger.info(f"Found {result.count} slots for BABS {celebrant.id} at locatie {venue.id}")
        return result

    def find_available_celebrants(
        self,
        celebrant_ids: Iterable[str],
        on_date: date_type,
        start_time: time_type,
        duration_minutes: Optional[int] = None,
        required_languages: Optional[Iterable[str]] = None,
    ) -> CelebrantAvailability:
        """
        Which of the given celebrants can perform a ceremony at a fixed date and time.
        Skipped celebrants come with the reason they were rejected.
        """
        duration = duration_minutes if duration_minutes is not None else self.settings.default_duration_minutes
        validate_duration(duration, self.settings)
        required = set(required_languages or [])

        result = CelebrantAvailability()
        for celebrant_id in celebrant_ids:
            try:
                celebrant = self.store.get_celebrant(celebrant_id)
            except ResourceNotFoundError as e:
                result.skipped.append(ConstraintViolation("Missing", str(e), celebrant_id, on_date, start_time))
                continue

            violation = self.checker.check(celebrant, on_date, start_time, duration, required)
            if violation is None:
                result.available.append(celebrant)
            else:
                logger.debug(f"{celebrant.name or celebrant.id}: {violation.reason}")
                result.skipped.append(violation)

        result.available.sort(key=lambda c: (c.name, c.id))
        logger.info(
            f"{len(result.available)} of {len(result.available) + len(result.skipped)} BABS available "
            f"on {on_date} at {start_time:%H:%M}"
        )
        return result

    def resolve_window(self, window_start: Optional[date_type], window_end: Optional[date_type]) -> Tuple[date_type, date_type]:
        """Apply defaults and enforce end >= start and the maximum span."""
        start = window_start or date_type.today()
        end = window_end or start + timedelta(days=self.settings.default_window_days)

        if end < start:
            raise InvalidWindowError(f"Window end {end} is before window start {start}")
        if (end - start).days > self.settings.max_window_days:
            raise InvalidWindowError(
                f"Window {start}..{end} spans {(end - start).days} days, maximum is {self.settings.max_window_days}"
            )
        return start, end

    def _resolve_duration(self, duration_minutes: Optional[int], ceremony_type: Optional[CeremonyTypeConstraint]) -> int:
        if duration_minutes is not None:
            return duration_minutes
        if ceremony_type is not None:
            return ceremony_type.duration_minutes
        return self.settings.default_duration_minutes

    def _load_pair(self, celebrant_id: str, venue_id: str) -> Tuple[Celebrant, Venue]:
        celebrant = self.store.get_celebrant(celebrant_id)
        venue = self.store.get_venue(venue_id)

        # A resource without any rule is indistinguishable from an unknown one
        for resource in (celebrant, venue):
            if not resource.has_rule_data:
                raise ResourceNotFoundError(resource.id, resource.kind.value)
        return celebrant, venue

