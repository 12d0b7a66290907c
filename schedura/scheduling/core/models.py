"""
Value records consumed and produced by the scheduling engine.

Everything here is immutable: the engine never mutates caller input and
always returns new collections.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional, Tuple

from .constants import DEFAULT_PRIORITY


@dataclass(frozen=True)
class Task:
    id: str
    title: str
    duration: int  # minutes
    priority: str = DEFAULT_PRIORITY
    earliest_start: Optional[datetime] = None
    latest_start: Optional[datetime] = None
    travel_buffer: Optional[int] = None  # minutes
    category: Optional[str] = None

    @property
    def effective_minutes(self) -> int:
        return self.duration + (self.travel_buffer or 0)

    @property
    def effective_duration(self) -> timedelta:
        return timedelta(minutes=self.effective_minutes)


@dataclass(frozen=True)
class BusyBlock:
    start: datetime
    end: datetime
    title: Optional[str] = None


@dataclass(frozen=True)
class Constraint:
    working_hours_start: str  # "HH:MM"
    working_hours_end: str  # "HH:MM"
    timezone: str = "UTC"
    max_daily_hours: Optional[float] = None
    preferred_break_minutes: Optional[int] = None
    exclude_weekends: bool = False


@dataclass(frozen=True)
class ProposedSlot:
    task_id: str
    start: datetime
    end: datetime
    confidence: float
    conflicts: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "task_id": self.task_id,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "confidence": self.confidence,
            "conflicts": list(self.conflicts),
        }


@dataclass(frozen=True)
class UnplacedTask:
    task_id: str
    reason: str

    def to_dict(self) -> dict:
        return {"task_id": self.task_id, "reason": self.reason}


@dataclass(frozen=True)
class ScheduleResult:
    placed: Tuple[ProposedSlot, ...] = field(default_factory=tuple)
    unplaced: Tuple[UnplacedTask, ...] = field(default_factory=tuple)

    def slot_for(self, task_id: str) -> Optional[ProposedSlot]:
        for slot in self.placed:
            if slot.task_id == task_id:
                return slot
        return None

    def to_dict(self) -> dict:
        return {
            "placed": [slot.to_dict() for slot in self.placed],
            "unplaced": [entry.to_dict() for entry in self.unplaced],
        }
