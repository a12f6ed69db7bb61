"""
Main Execution Script for the Ceremony Slot Engine.

Loads an availability snapshot (JSON), searches ceremony slots for one
celebrant/venue pair and prints a report. Optionally exports the result as
JSON for a frontend.

    python find_slots.py data/sample_snapshot.json --babs babs_jansen --locatie loc_stadhuis \
        --start 2025-03-03 --end 2025-03-09 --duration 60 --talen en
"""

import argparse
import json
import logging
import sys
from datetime import date, time
from typing import List, Optional

from ceremony_models import CeremonyTypeConstraint, SlotSearchResult
from rule_store import InMemoryRuleStore
from slot_engine.config import EngineSettings
from slot_engine.engine import SlotFinder
from slot_engine.errors import SlotEngineError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger("Main")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Find ceremony slots where a BABS and a locatie are both free.")
    parser.add_argument("snapshot", help="Path to the availability snapshot JSON file")
    parser.add_argument("--babs", help="Celebrant ID")
    parser.add_argument("--locatie", help="Venue ID")
    parser.add_argument("--start", type=date.fromisoformat, default=None, help="Window start (YYYY-MM-DD), default today")
    parser.add_argument("--end", type=date.fromisoformat, default=None, help="Window end (YYYY-MM-DD), inclusive")
    parser.add_argument("--duration", type=int, default=None, help="Ceremony duration in minutes")
    parser.add_argument("--talen", default="", help="Comma separated required languages, e.g. 'en,de'")
    parser.add_argument("--at", type=time.fromisoformat, default=None,
                        help="Instead of slots, list celebrants available at this time on --start")
    parser.add_argument("--export", default=None, help="Write the result as JSON to this file")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def export_result(result: SlotSearchResult, filename: str) -> None:
    """Serializes the slot list, grouped by date, for the frontend."""
    logger.info(f"💾 Exporting slots to {filename}...")

    data = {
        "count": result.count,
        "warning": result.warning.value if result.warning else None,
        "message": result.message,
        "slots": {},
    }
    for slot in result.slots:
        data["slots"].setdefault(slot.date.isoformat(), []).append(slot.model_dump(mode='json'))

    with open(filename, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2)
    logger.info("✅ Slots exported.")


def print_report(result: SlotSearchResult) -> None:
    print("\n" + "=" * 50)
    print("📅 AVAILABLE CEREMONY SLOTS")
    print("=" * 50)

    if result.warning:
        print(f"⚠️  [{result.warning.value}] {result.message}")

    current_day = None
    for slot in result.slots:
        if slot.date != current_day:
            current_day = slot.date
            print(f"\n{current_day:%A %d %B %Y}")
        print(f"   {slot.start_time:%H:%M} - {slot.end_time:%H:%M}")

    print(f"\nTotal: {result.count} slots")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    required = {lang for lang in args.talen.split(",") if lang.strip()}

    try:
        settings = EngineSettings.from_env()
        store = InMemoryRuleStore.from_json_file(args.snapshot, best_effort=settings.best_effort)
        finder = SlotFinder(store, settings)

        # --- Mode 1: Celebrants for a fixed moment ---
        if args.at is not None:
            on_date = args.start or date.today()
            lookup = finder.find_available_celebrants(
                store.celebrant_ids(), on_date, args.at, args.duration, required
            )
            print(f"\n✅ Available on {on_date} at {args.at:%H:%M}:")
            for celebrant in lookup.available:
                print(f"   {celebrant.name or celebrant.id} ({', '.join(sorted(celebrant.spoken_languages))})")
            for violation in lookup.skipped:
                print(f"❌ {violation.resource_id}: {violation.reason}")
            return 0

        # --- Mode 2: Slot search for a pair ---
        if not args.babs or not args.locatie:
            logger.error("❌ --babs and --locatie are required for a slot search")
            return 2

        ceremony_type = CeremonyTypeConstraint(required_languages=required) if required else None
        result = finder.find_slots(
            args.babs, args.locatie,
            window_start=args.start,
            window_end=args.end,
            duration_minutes=args.duration,
            ceremony_type=ceremony_type,
        )
    except (SlotEngineError, OSError, json.JSONDecodeError) as e:
        logger.error(f"❌ {e}")
        return 1

    print_report(result)
    if args.export:
        export_result(result, args.export)
    return 0


if __name__ == "__main__":
    sys.exit(main())
