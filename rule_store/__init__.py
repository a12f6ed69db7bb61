"""
Availability Rule Store.

The engine reads resources through the `AvailabilityRuleStore` interface; the
persistence layer (out of scope) is expected to serve a transactionally
consistent snapshot per request. `InMemoryRuleStore` is the bundled
implementation, loadable from snapshot dicts or a JSON file.
"""

from typing import Protocol

from ceremony_models import Celebrant, Venue

from .loader import (
    load_block_rows,
    load_ceremony_rows,
    load_rule_rows,
    parse_rule,
    rules_from_weekly_blob,
)
from .memory import InMemoryRuleStore, build_resource


class AvailabilityRuleStore(Protocol):
    """Lookup interface; both methods raise ResourceNotFoundError for unknown IDs."""

    def get_celebrant(self, celebrant_id: str) -> Celebrant: ...

    def get_venue(self, venue_id: str) -> Venue: ...


__all__ = [
    "AvailabilityRuleStore",
    "InMemoryRuleStore",
    "build_resource",
    "parse_rule",
    "load_rule_rows",
    "load_block_rows",
    "load_ceremony_rows",
    "rules_from_weekly_blob",
]
