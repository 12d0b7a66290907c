"""
Confidence scoring for committed slots.
"""

from datetime import datetime, timedelta
from ..core.constants import (
    EVENING_PENALTY,
    EVENING_WINDOW_HOURS,
    HIGH_PRIORITY_LATE_PENALTY,
    HIGH_PRIORITY_LATE_WINDOW_HOURS,
)
from ..core.models import Task


def calculate_confidence(task: Task, slot_start: datetime, day_end: datetime) -> float:
    """
    Heuristic placement quality in [0, 1], not a probability.
    Starts at 1.0 and applies multiplicative penalties for late placements:
    - Starts less than 2h before the working day ends: x0.8
    - High priority task starting less than 4h before the end: x0.9
    """
    confidence = 1.0
    time_until_end = day_end - slot_start

    if time_until_end < timedelta(hours=EVENING_WINDOW_HOURS):
        confidence *= EVENING_PENALTY

    if task.priority == "high" and time_until_end < timedelta(hours=HIGH_PRIORITY_LATE_WINDOW_HOURS):
        confidence *= HIGH_PRIORITY_LATE_PENALTY

    return max(0.0, min(1.0, confidence))
