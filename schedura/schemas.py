from pydantic import BaseModel
from datetime import datetime
from typing import Optional, List
import enum

from .scheduling import Task, BusyBlock, Constraint


class Priority(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

# ----------------- Input Schemas ---------------------

class TaskIn(BaseModel):
    id: str
    title: str = ""
    duration: int  # in minutes; non-positive values come back as unplaced
    priority: Priority = Priority.MEDIUM
    earliest_start: Optional[datetime] = None
    latest_start: Optional[datetime] = None
    travel_buffer: Optional[int] = None  # in minutes
    category: Optional[str] = None

    def to_task(self) -> Task:
        return Task(
            id=self.id,
            title=self.title,
            duration=self.duration,
            priority=self.priority.value,
            earliest_start=self.earliest_start,
            latest_start=self.latest_start,
            travel_buffer=self.travel_buffer,
            category=self.category,
        )

class BusyBlockIn(BaseModel):
    start: datetime
    end: datetime
    title: Optional[str] = None

    def to_busy_block(self) -> BusyBlock:
        return BusyBlock(start=self.start, end=self.end, title=self.title)

class ConstraintIn(BaseModel):
    working_hours_start: str = "09:00"
    working_hours_end: str = "17:00"
    timezone: Optional[str] = None  # falls back to SCHEDULER_DEFAULT_TIMEZONE
    max_daily_hours: Optional[float] = None
    preferred_break_minutes: Optional[int] = None
    exclude_weekends: bool = False

    def to_constraint(self, default_timezone: str) -> Constraint:
        return Constraint(
            working_hours_start=self.working_hours_start,
            working_hours_end=self.working_hours_end,
            timezone=self.timezone or default_timezone,
            max_daily_hours=self.max_daily_hours,
            preferred_break_minutes=self.preferred_break_minutes,
            exclude_weekends=self.exclude_weekends,
        )

class ScheduleRequest(BaseModel):
    tasks: List[TaskIn] = []
    busy_blocks: List[BusyBlockIn] = []
    constraints: ConstraintIn = ConstraintIn()
    now: Optional[datetime] = None
    horizon_days: Optional[int] = None

class AvailabilityRequest(BaseModel):
    busy_blocks: List[BusyBlockIn] = []
    constraints: ConstraintIn = ConstraintIn()
    duration: int = 30  # in minutes
    now: Optional[datetime] = None
    horizon_days: Optional[int] = None

# ----------------- Output Schemas ---------------------

class ProposedSlotOut(BaseModel):
    task_id: str
    start: datetime
    end: datetime
    confidence: float
    conflicts: List[str] = []

    class Config:
        from_attributes = True

class UnplacedTaskOut(BaseModel):
    task_id: str
    reason: str

    class Config:
        from_attributes = True

class ScheduleResponse(BaseModel):
    placed: List[ProposedSlotOut]
    unplaced: List[UnplacedTaskOut]

class FreeWindowOut(BaseModel):
    start: datetime
    end: datetime
    duration_minutes: int

class AvailabilityResponse(BaseModel):
    windows: List[FreeWindowOut]
