"""Shared fixtures: one Tuesday-only BABS and one every-day venue."""

from datetime import time
from pathlib import Path

import pytest

from ceremony_models import Celebrant, Venue
from rule_store import InMemoryRuleStore
from slot_engine.engine import SlotFinder

from helpers import TUESDAY, every_day, weekly


@pytest.fixture
def sample_snapshot_path():
    return Path(__file__).resolve().parents[1] / "data" / "sample_snapshot.json"


@pytest.fixture
def babs():
    return Celebrant(
        id="babs_jansen",
        name="P. Jansen",
        spoken_languages={"nl"},
        rules=[weekly(TUESDAY, time(9), time(17))],
    )


@pytest.fixture
def venue():
    return Venue(id="loc_stadhuis", name="Stadhuis", rules=every_day(time(10), time(16)))


@pytest.fixture
def store(babs, venue):
    return InMemoryRuleStore([babs], [venue])


@pytest.fixture
def finder(store):
    return SlotFinder(store)
