"""
Time-related constraint checking functions.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

import pytz

from ..core.constants import SATURDAY, SUNDAY
from ..core.exceptions import ConfigurationError
from ..core.models import Constraint, Task
from ..core.time_slot import TimeSlot
from ..utils.slot_utils import to_utc


# Why a free window could not host a task
REJECT_LENGTH = "length"
REJECT_EARLIEST = "earliest"
REJECT_LATEST = "latest"


def parse_time_of_day(value: str, field_name: str) -> time:
    """Parse an "HH:MM" string."""
    try:
        hours, minutes = str(value).split(":")
        return time(int(hours), int(minutes))
    except ValueError:
        raise ConfigurationError(f"{field_name} must be an HH:MM time of day, got {value!r}")


def resolve_timezone(name: str):
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        raise ConfigurationError(f"Unknown timezone {name!r}")


class WorkingHours:
    """
    A validated Constraint: the daily working window in a concrete timezone
    plus the per-run placement policy (daily cap, breaks, weekends).
    """
    def __init__(self, tz, day_start: time, day_end: time, max_daily_minutes: Optional[float] = None,
                 break_minutes: int = 0, exclude_weekends: bool = False):
        self.tz = tz
        self.day_start = day_start
        self.day_end = day_end
        self.max_daily_minutes = max_daily_minutes
        self.break_minutes = break_minutes
        self.exclude_weekends = exclude_weekends

    @classmethod
    def from_constraint(cls, constraint: Constraint) -> "WorkingHours":
        """Validate a Constraint. Any problem is fatal to the run."""
        tz = resolve_timezone(constraint.timezone)
        day_start = parse_time_of_day(constraint.working_hours_start, "working_hours_start")
        day_end = parse_time_of_day(constraint.working_hours_end, "working_hours_end")
        if day_start >= day_end:
            raise ConfigurationError(
                f"working_hours_start {constraint.working_hours_start} must be before "
                f"working_hours_end {constraint.working_hours_end}"
            )

        max_daily_minutes = None
        if constraint.max_daily_hours is not None:
            if constraint.max_daily_hours <= 0:
                raise ConfigurationError(f"max_daily_hours must be positive, got {constraint.max_daily_hours}")
            max_daily_minutes = constraint.max_daily_hours * 60

        break_minutes = constraint.preferred_break_minutes or 0
        if break_minutes < 0:
            raise ConfigurationError(f"preferred_break_minutes cannot be negative, got {break_minutes}")

        return cls(tz, day_start, day_end, max_daily_minutes, break_minutes, constraint.exclude_weekends)

    def localize(self, day: date, time_of_day: time) -> datetime:
        """Wall-clock time on ``day`` in the run's timezone, as a UTC instant."""
        local = self.tz.normalize(self.tz.localize(datetime.combine(day, time_of_day)))
        return local.astimezone(pytz.UTC)

    def day_window(self, day: date) -> TimeSlot:
        return TimeSlot(self.localize(day, self.day_start), self.localize(day, self.day_end))

    def local_date(self, instant: datetime) -> date:
        return to_utc(instant).astimezone(self.tz).date()

    def earliest_start(self, now: datetime, rounding_minutes: int) -> datetime:
        """``now`` rounded forward on the local clock, as a UTC instant."""
        local_now = to_utc(now).astimezone(self.tz)
        rounded = self.tz.normalize(round_up(local_now, rounding_minutes))
        return rounded.astimezone(pytz.UTC)

    def is_workday(self, day: date) -> bool:
        if self.exclude_weekends and day.weekday() in (SATURDAY, SUNDAY):
            return False
        return True

    def __repr__(self):
        return (f"WorkingHours({self.day_start.strftime('%H:%M')}-{self.day_end.strftime('%H:%M')} "
                f"{self.tz.zone})")


def round_up(instant: datetime, minutes: int) -> datetime:
    """Round an instant forward to the next multiple of ``minutes`` past the hour."""
    if minutes <= 0:
        return instant
    floored = instant.replace(minute=0, second=0, microsecond=0)
    elapsed = instant - floored
    step = timedelta(minutes=minutes)
    steps = -(-elapsed // step)
    return floored + steps * step


def fit_task_in_window(task: Task, window: TimeSlot) -> Tuple[Optional[datetime], Optional[str]]:
    """
    Find where the task would start inside a free window.

    Returns (start, None) when the task fits, or (None, rejection) where the
    rejection names the check that failed.
    """
    needed = task.effective_duration
    start = window.start

    earliest = to_utc(task.earliest_start)
    if earliest is not None and earliest > start:
        start = earliest
        if start + needed > window.end:
            return None, REJECT_EARLIEST

    if start + needed > window.end:
        return None, REJECT_LENGTH

    latest = to_utc(task.latest_start)
    if latest is not None and start > latest:
        return None, REJECT_LATEST

    return start, None
