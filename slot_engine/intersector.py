"""
Dual-Resource Intersector.

Merges the resolved availability of two independent resources into the
intervals where both are free. Per date, each side is sorted and merged
(union of all its rules), then a two-pointer sweep emits the overlaps.
"""

import logging
from collections import defaultdict
from dataclasses import replace
from datetime import date as date_type
from typing import Dict, Iterable, List

from ceremony_models import AvailabilityInterval

logger = logging.getLogger(__name__)


def _group_by_date(intervals: Iterable[AvailabilityInterval]) -> Dict[date_type, List[AvailabilityInterval]]:
    grouped: Dict[date_type, List[AvailabilityInterval]] = defaultdict(list)
    for interval in intervals:
        grouped[interval.date].append(interval)
    return grouped


def _merge_day(intervals: List[AvailabilityInterval]) -> List[AvailabilityInterval]:
    """Union of same-date intervals; overlapping or adjacent ones are joined."""
    if not intervals:
        return []

    ordered = sorted(intervals)
    merged = [ordered[0]]

    for current in ordered[1:]:
        last = merged[-1]
        if current.start_time <= last.end_time:
            if current.end_time > last.end_time:
                merged[-1] = replace(last, end_time=current.end_time)
        else:
            merged.append(current)

    return merged


def merge_intervals(intervals: Iterable[AvailabilityInterval]) -> List[AvailabilityInterval]:
    """Union-and-merge per date, ordered by (date, start_time)."""
    grouped = _group_by_date(intervals)
    merged: List[AvailabilityInterval] = []
    for day in sorted(grouped):
        merged.extend(_merge_day(grouped[day]))
    return merged


def intersect(a: List[AvailabilityInterval], b: List[AvailabilityInterval]) -> List[AvailabilityInterval]:
    """
    Intervals where both sides are free. Commutative.
    Dates present on only one side contribute nothing.
    """
    a_by_date = _group_by_date(a)
    b_by_date = _group_by_date(b)

    result: List[AvailabilityInterval] = []

    for day in sorted(a_by_date.keys() & b_by_date.keys()):
        left = _merge_day(a_by_date[day])
        right = _merge_day(b_by_date[day])

        overlaps = []
        i = j = 0
        while i < len(left) and j < len(right):
            start = max(left[i].start_time, right[j].start_time)
            end = min(left[i].end_time, right[j].end_time)
            if start < end:
                overlaps.append(AvailabilityInterval(day, start, end))

            # Advance whichever interval finishes first
            if left[i].end_time < right[j].end_time:
                i += 1
            else:
                j += 1

        result.extend(_merge_day(overlaps))

    logger.debug(f"Intersected {len(a)} x {len(b)} intervals into {len(result)}")
    return result
