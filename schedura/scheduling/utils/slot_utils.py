"""
Interval helpers shared by the scheduling modules.

Every function works on anything with ``start`` and ``end`` attributes
(TimeSlot, BusyBlock, ProposedSlot) and treats intervals as half-open.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

import pytz

from ..core.constants import BUSY
from ..core.time_slot import TimeSlot

logger = logging.getLogger(__name__)


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize an instant to UTC. Naive datetimes are taken to be UTC already."""
    if value is None:
        return None
    if value.tzinfo is None:
        return pytz.UTC.localize(value)
    return value.astimezone(pytz.UTC)


def is_empty(interval) -> bool:
    return interval.start >= interval.end


def overlaps(a, b) -> bool:
    """True if the intervals share any time. Touching endpoints do not overlap."""
    if is_empty(a) or is_empty(b):
        return False
    return a.start < b.end and b.start < a.end


def contains(outer, inner) -> bool:
    return outer.start <= inner.start and inner.end <= outer.end


def merge_and_sort(intervals: Iterable) -> List:
    """
    Drop empty intervals and order the rest by start.
    Overlapping intervals are kept apart so callers can still tell them apart.
    """
    kept = []
    for interval in intervals:
        if is_empty(interval):
            logger.debug(f"Ignoring empty interval {interval.start} - {interval.end}")
            continue
        kept.append(interval)
    return sorted(kept, key=lambda interval: interval.start)


def coalesce(intervals: Iterable) -> List[TimeSlot]:
    """Merge overlapping or touching intervals into continuous occupied regions."""
    merged: List[TimeSlot] = []
    for interval in merge_and_sort(intervals):
        if merged and interval.start <= merged[-1].end:
            last = merged[-1]
            if interval.end > last.end:
                merged[-1] = TimeSlot(last.start, interval.end, last.occupant)
        else:
            merged.append(TimeSlot(interval.start, interval.end, getattr(interval, "occupant", BUSY)))
    return merged


def busy_blocks_to_slots(busy_blocks: Iterable) -> List[TimeSlot]:
    """Convert busy blocks into UTC time slots, skipping blocks that occupy no time."""
    slots = []
    for block in busy_blocks:
        slot = TimeSlot(to_utc(block.start), to_utc(block.end), getattr(block, "title", None) or BUSY)
        if slot.is_empty():
            logger.debug(f"Ignoring busy block {block.title!r}: start {block.start} is not before end {block.end}")
            continue
        slots.append(slot)
    return merge_and_sort(slots)
