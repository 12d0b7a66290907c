"""
Time slot representation for the scheduling system.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any
from .constants import AVAILABLE, BUFFER, BUSY


@dataclass(frozen=True, repr=False)
class TimeSlot:
    """
    A half-open interval [start, end) that holds exactly one thing:
    - Free time (occupant=AVAILABLE)
    - An existing commitment (occupant=BUSY or the busy block's title)
    - A committed task (occupant=task id)
    - A break around a committed task (occupant=BUFFER)
    """
    start: datetime
    end: datetime
    occupant: Any = AVAILABLE

    def duration(self) -> timedelta:
        return self.end - self.start

    def is_empty(self) -> bool:
        return self.start >= self.end

    def __lt__(self, other):
        return self.start < other.start

    def __repr__(self):
        span = f"{self.start.isoformat()} - {self.end.isoformat()}"
        if self.occupant == AVAILABLE:
            return f"AvailableSlot({span})"
        elif self.occupant == BUFFER:
            return f"BufferSlot({span})"
        elif self.occupant == BUSY:
            return f"BusySlot({span})"
        else:
            return f"TaskSlot({span}, {self.occupant})"
