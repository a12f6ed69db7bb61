"""
Exception Resolver.

Applies blocked dates (full-day or partial) and booked ceremonies to the
intervals produced by the expander:
- All-day block: every interval on that date disappears
- Partial block: the blocked range is subtracted (removed, truncated or split)
- Several partial blocks on one date apply cumulatively
"""

import logging
from collections import defaultdict
from dataclasses import replace
from datetime import date as date_type, time as time_type
from typing import Dict, List

from ceremony_models import AvailabilityInterval, BlockedDate, Resource
from .expander import expand_resource

logger = logging.getLogger(__name__)


def apply_exceptions(intervals: List[AvailabilityInterval], blocks: List[BlockedDate]) -> List[AvailabilityInterval]:
    """
    Subtract blocks from intervals. Idempotent: applying the same blocks twice
    yields the same result as applying them once.
    """
    if not blocks:
        return sorted(intervals)

    blocks_by_date: Dict[date_type, List[BlockedDate]] = defaultdict(list)
    for block in blocks:
        blocks_by_date[block.blocked_date].append(block)

    intervals_by_date: Dict[date_type, List[AvailabilityInterval]] = defaultdict(list)
    for interval in intervals:
        intervals_by_date[interval.date].append(interval)

    result: List[AvailabilityInterval] = []
    for day in sorted(intervals_by_date):
        day_intervals = intervals_by_date[day]
        day_blocks = blocks_by_date.get(day)

        if not day_blocks:
            result.extend(day_intervals)
            continue

        if any(block.all_day for block in day_blocks):
            logger.debug(f"{day}: all-day block removes {len(day_intervals)} intervals")
            continue

        # Full block set for this date before moving on
        for block in day_blocks:
            day_intervals = [
                piece
                for interval in day_intervals
                for piece in subtract_interval(interval, block.start_time, block.end_time)
            ]
        result.extend(day_intervals)

    result.sort()
    return result


def subtract_interval(interval: AvailabilityInterval, block_start: time_type, block_end: time_type) -> List[AvailabilityInterval]:
    """
    Remove [block_start, block_end) from one interval.

    Returns 0, 1 or 2 intervals:
    1. No overlap -> interval unchanged
    2. Block covers the interval -> []
    3. Block covers the start -> [tail]
    4. Block covers the end -> [head]
    5. Block inside -> [head, tail]
    """
    if block_end <= interval.start_time or block_start >= interval.end_time:
        return [interval]

    pieces = []
    if block_start > interval.start_time:
        pieces.append(replace(interval, end_time=block_start))
    if block_end < interval.end_time:
        pieces.append(replace(interval, start_time=block_end))
    return pieces


def resolve_resource(resource: Resource, window_start: date_type, window_end: date_type) -> List[AvailabilityInterval]:
    """Expanded availability of a resource minus its blocked dates and bookings."""
    expanded = expand_resource(resource, window_start, window_end)
    resolved = apply_exceptions(expanded, resource.exceptions())
    logger.debug(
        f"{resource.kind.value} {resource.id}: {len(expanded)} expanded -> {len(resolved)} after exceptions"
    )
    return resolved
