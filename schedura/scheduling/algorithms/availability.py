"""
Free-window search inside a single working day.
"""

import logging
from datetime import datetime, timedelta
from typing import Iterable, List

from ..core.constants import AVAILABLE
from ..core.time_slot import TimeSlot
from ..utils.slot_utils import merge_and_sort

logger = logging.getLogger(__name__)


def find_free_windows(day_start: datetime, day_end: datetime, occupied: Iterable,
                      min_duration: timedelta = timedelta(0)) -> List[TimeSlot]:
    """
    Return every maximal free interval of [day_start, day_end) that is at
    least ``min_duration`` long, in chronological order.

    ``occupied`` may hold overlapping or nested intervals; they are swept as
    one continuous region. Empty intervals are ignored.
    """
    if day_start >= day_end:
        return []

    relevant = [
        interval for interval in merge_and_sort(occupied)
        if interval.start < day_end and interval.end > day_start
    ]

    windows: List[TimeSlot] = []
    cursor = day_start
    for interval in relevant:
        if cursor < interval.start:
            gap = TimeSlot(cursor, interval.start, AVAILABLE)
            if gap.duration() >= min_duration:
                windows.append(gap)
        cursor = max(cursor, interval.end)
        if cursor >= day_end:
            break

    if cursor < day_end:
        gap = TimeSlot(cursor, day_end, AVAILABLE)
        if gap.duration() >= min_duration:
            windows.append(gap)

    logger.debug(
        f"Free windows in [{day_start.isoformat()}, {day_end.isoformat()}) "
        f"with min {min_duration}: {len(windows)} of {len(relevant)} occupied intervals swept"
    )
    return windows
