"""
In-memory Availability Rule Store.

Holds one consistent snapshot of celebrants and venues for the duration of a
request. Snapshots are plain dicts (as produced by the persistence layer or
a JSON fixture):

{
  "celebrants": [{"id": ..., "talen": [...], "rules": [...], "blockedDates": [...],
                  "bookedCeremonies": [...], "beschikbaarheid": {...}}],
  "venues": [...]
}
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Type, Union

from pydantic import ValidationError

from ceremony_models import Celebrant, Resource, Venue
from slot_engine.errors import ConfigurationError, ResourceNotFoundError
from .loader import load_block_rows, load_ceremony_rows, load_rule_rows, rules_from_weekly_blob

logger = logging.getLogger(__name__)

_RULE_KEYS = ("rules", "recurringRules", "recurring_rules")
_BLOCK_KEYS = ("blockedDates", "blocked_dates")
_CEREMONY_KEYS = ("bookedCeremonies", "booked_ceremonies", "ceremonies")
_BLOB_KEYS = ("beschikbaarheid", "weekly_availability")


def _pop_first(row: Dict[str, Any], keys: Iterable[str]) -> Any:
    value = None
    for key in keys:
        if key in row:
            found = row.pop(key)
            if value is None:
                value = found
    return value


def build_resource(model_class: Type[Resource], row: Mapping[str, Any], best_effort: bool = False) -> Resource:
    """Validate a resource row together with its rule, block and booking rows."""
    data = dict(row)
    rule_rows = _pop_first(data, _RULE_KEYS) or []
    block_rows = _pop_first(data, _BLOCK_KEYS) or []
    ceremony_rows = _pop_first(data, _CEREMONY_KEYS) or []
    blob = _pop_first(data, _BLOB_KEYS)

    try:
        resource = model_class.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid {model_class.__name__.lower()} {data.get('id', '<unnamed>')}: {e}") from e

    rules = load_rule_rows(rule_rows, best_effort)
    if not rules and blob:
        # Old weekly JSON availability, only used when no recurring rules exist
        rules = rules_from_weekly_blob(blob, resource.available_from, resource.available_until)
        logger.info(f"{resource.kind.value} {resource.id}: using {len(rules)} rules from legacy availability blob")

    return resource.model_copy(update={
        "rules": rules,
        "blocked_dates": load_block_rows(block_rows, best_effort),
        "booked_ceremonies": load_ceremony_rows(ceremony_rows, best_effort),
    })


class InMemoryRuleStore:
    """Read-only lookups of celebrants and venues by ID."""

    def __init__(self, celebrants: Iterable[Celebrant] = (), venues: Iterable[Venue] = ()):
        # Index resources for O(1) lookup
        self._celebrants: Dict[str, Celebrant] = {}
        self._venues: Dict[str, Venue] = {}
        for celebrant in celebrants:
            self.add_celebrant(celebrant)
        for venue in venues:
            self.add_venue(venue)

    def add_celebrant(self, celebrant: Celebrant) -> None:
        self._celebrants[celebrant.id] = celebrant

    def add_venue(self, venue: Venue) -> None:
        self._venues[venue.id] = venue

    def get_celebrant(self, celebrant_id: str) -> Celebrant:
        try:
            return self._celebrants[celebrant_id]
        except KeyError:
            raise ResourceNotFoundError(celebrant_id, "babs") from None

    def get_venue(self, venue_id: str) -> Venue:
        try:
            return self._venues[venue_id]
        except KeyError:
            raise ResourceNotFoundError(venue_id, "locatie") from None

    def celebrant_ids(self) -> List[str]:
        return sorted(self._celebrants)

    def venue_ids(self) -> List[str]:
        return sorted(self._venues)

    @classmethod
    def from_snapshot(cls, data: Mapping[str, Any], best_effort: bool = False) -> "InMemoryRuleStore":
        """Build a store from snapshot dicts. ConfigurationError aborts unless best_effort."""
        celebrants = [build_resource(Celebrant, row, best_effort) for row in data.get("celebrants", [])]
        venues = [build_resource(Venue, row, best_effort) for row in data.get("venues", [])]
        logger.info(f"📂 Loaded snapshot: {len(celebrants)} celebrants, {len(venues)} venues")
        return cls(celebrants, venues)

    @classmethod
    def from_json_file(cls, path: Union[str, Path], best_effort: bool = False) -> "InMemoryRuleStore":
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls.from_snapshot(data, best_effort=best_effort)
