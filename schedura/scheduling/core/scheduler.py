"""
Main scheduler class that orchestrates all scheduling operations.
"""

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

import pytz

from .constants import (
    DEFAULT_HORIZON_DAYS,
    DEFAULT_ROUNDING_MINUTES,
    REASON_DAILY_CAP,
    REASON_DUPLICATE_TASK,
    REASON_EARLIEST_START,
    REASON_INVALID_DURATION,
    REASON_INVALID_TRAVEL_BUFFER,
    REASON_LATEST_START,
    REASON_NO_WINDOW,
)
from .exceptions import ConfigurationError
from .models import BusyBlock, Constraint, ProposedSlot, ScheduleResult, Task, UnplacedTask
from .time_slot import TimeSlot
from ..algorithms.availability import find_free_windows
from ..algorithms.ordering import order_tasks, resolve_tie_break, shortest_first
from ..constraints.time_constraints import (
    REJECT_EARLIEST,
    REJECT_LATEST,
    WorkingHours,
    fit_task_in_window,
)
from ..scoring.confidence import calculate_confidence
from ..utils.slot_utils import busy_blocks_to_slots, to_utc

logger = logging.getLogger(__name__)

# ================================
# INITIALIZATION & SETUP
# ================================

class TaskScheduler:
    """
    Greedy, single-pass scheduler. Tasks are visited in priority order and
    each one takes the first free window that satisfies its constraints.
    A committed slot is never moved to make room for a later task.

    The scheduler holds only validated configuration, so one instance can
    serve any number of independent runs.
    """
    def __init__(self, constraints: Constraint, horizon_days: int = DEFAULT_HORIZON_DAYS,
                 tie_break=shortest_first, rounding_minutes: int = DEFAULT_ROUNDING_MINUTES):
        if not isinstance(horizon_days, int) or horizon_days <= 0:
            raise ConfigurationError(f"horizon_days must be a positive integer, got {horizon_days!r}")
        if rounding_minutes < 0:
            raise ConfigurationError(f"rounding_minutes cannot be negative, got {rounding_minutes}")

        self.constraints = constraints
        self.working_hours = WorkingHours.from_constraint(constraints)
        self.horizon_days = horizon_days
        self.tie_break = resolve_tie_break(tie_break)
        self.rounding_minutes = rounding_minutes

    def _candidate_days(self, now: datetime) -> List[Tuple[date, TimeSlot, datetime]]:
        """
        Working windows for every day in the horizon as (day, window, day_end).
        Windows are clipped so nothing starts before ``now``.
        """
        earliest = self.working_hours.earliest_start(now, self.rounding_minutes)
        first_day = self.working_hours.local_date(now)

        days = []
        for offset in range(self.horizon_days):
            day = first_day + timedelta(days=offset)
            if not self.working_hours.is_workday(day):
                logger.debug(f"Skipping non-working day {day}")
                continue
            window = self.working_hours.day_window(day)
            start = max(window.start, earliest)
            if start >= window.end:
                continue
            days.append((day, TimeSlot(start, window.end), window.end))
        return days

# ================================
# CORE SCHEDULING LOGIC
# ================================

    def schedule(self, tasks: Iterable[Task], busy_blocks: Iterable[BusyBlock],
                 now: Optional[datetime] = None) -> ScheduleResult:
        """
        Place tasks around the busy blocks.
        ``now`` is read once per run; pass it explicitly for repeatable results.
        """
        now = to_utc(now) if now is not None else datetime.now(pytz.UTC)
        days = self._candidate_days(now)
        occupied: List[TimeSlot] = busy_blocks_to_slots(busy_blocks)
        minutes_per_day: Dict[date, int] = defaultdict(int)

        placed: List[ProposedSlot] = []
        unplaced: List[UnplacedTask] = []

        valid_tasks = self._reject_malformed(tasks, unplaced)
        ordered = order_tasks(valid_tasks, self.tie_break)
        logger.info(
            f"Scheduling {len(ordered)} tasks around {len(occupied)} busy blocks "
            f"({len(days)} working days from {now.isoformat()}, {self.working_hours})"
        )

        for task in ordered:
            slot, day, day_end, reason = self._find_slot(task, days, occupied, minutes_per_day)
            if slot is None:
                logger.warning(f"Task {task.id!r} ({task.title!r}) left unscheduled: {reason}")
                unplaced.append(UnplacedTask(task.id, reason))
                continue

            self._commit(slot, day, task, occupied, minutes_per_day)
            proposed = ProposedSlot(
                task_id=task.id,
                start=slot.start,
                end=slot.end,
                confidence=calculate_confidence(task, slot.start, day_end),
            )
            logger.info(
                f"Placed task {task.id!r} ({task.priority}) at {proposed.start.isoformat()} - "
                f"{proposed.end.isoformat()} (confidence {proposed.confidence:.2f})"
            )
            placed.append(proposed)

        return ScheduleResult(placed=tuple(placed), unplaced=tuple(unplaced))

# ================================
# SCHEDULING HELPER METHODS
# ================================

    def _reject_malformed(self, tasks: Iterable[Task], unplaced: List[UnplacedTask]) -> List[Task]:
        """Filter out tasks that can never be placed, recording why."""
        valid = []
        seen_ids = set()
        for task in tasks:
            if task.duration is None or task.duration <= 0:
                reason = REASON_INVALID_DURATION
            elif task.travel_buffer is not None and task.travel_buffer < 0:
                reason = REASON_INVALID_TRAVEL_BUFFER
            elif task.id in seen_ids:
                reason = REASON_DUPLICATE_TASK
            else:
                seen_ids.add(task.id)
                valid.append(task)
                continue
            logger.warning(f"Rejecting task {task.id!r}: {reason}")
            unplaced.append(UnplacedTask(task.id, reason))
        return valid

    def _find_slot(self, task: Task, days, occupied: List[TimeSlot],
                   minutes_per_day: Dict[date, int]):
        """
        Walk the candidate days in order and return the first fitting slot as
        (slot, day, day_end, None), or (None, None, None, reason).
        """
        needed = task.effective_duration
        cap = self.working_hours.max_daily_minutes
        saw_window = capped = False
        rejections = set()

        for day, window, day_end in days:
            if cap is not None and minutes_per_day[day] + task.effective_minutes > cap:
                capped = True
                continue

            for free in find_free_windows(window.start, window.end, occupied, needed):
                saw_window = True
                start, rejection = fit_task_in_window(task, free)
                if start is not None:
                    return TimeSlot(start, start + needed, task.id), day, day_end, None
                logger.debug(f"Task {task.id!r} rejected window {free!r}: {rejection}")
                rejections.add(rejection)

        if REJECT_LATEST in rejections:
            reason = REASON_LATEST_START
        elif REJECT_EARLIEST in rejections:
            reason = REASON_EARLIEST_START
        elif capped and not saw_window:
            reason = REASON_DAILY_CAP
        else:
            reason = REASON_NO_WINDOW
        return None, None, None, reason

    def _commit(self, slot: TimeSlot, day: date, task: Task, occupied: List[TimeSlot],
                minutes_per_day: Dict[date, int]):
        """Add a placed slot, widened by the preferred break, to the occupied set."""
        pad = timedelta(minutes=self.working_hours.break_minutes)
        occupied.append(TimeSlot(slot.start - pad, slot.end + pad, task.id))
        occupied.sort()
        minutes_per_day[day] += task.effective_minutes

# ================================
# AVAILABILITY QUERIES
# ================================

    def find_availability(self, busy_blocks: Iterable[BusyBlock], duration: int,
                          now: Optional[datetime] = None) -> List[TimeSlot]:
        """Free windows of at least ``duration`` minutes across the horizon, without placing anything."""
        if duration is None or duration <= 0:
            raise ConfigurationError(f"duration must be a positive number of minutes, got {duration!r}")
        now = to_utc(now) if now is not None else datetime.now(pytz.UTC)
        occupied = busy_blocks_to_slots(busy_blocks)
        needed = timedelta(minutes=duration)

        windows: List[TimeSlot] = []
        for _day, window, _day_end in self._candidate_days(now):
            windows.extend(find_free_windows(window.start, window.end, occupied, needed))
        logger.info(f"Found {len(windows)} free windows of at least {duration} minutes")
        return windows

    def __repr__(self):
        return f"TaskScheduler({self.working_hours}, horizon={self.horizon_days} days)"


# ================================
# FUNCTIONAL ENTRY POINTS
# ================================

def schedule_tasks(tasks: Iterable[Task], busy_blocks: Iterable[BusyBlock], constraints: Constraint,
                   now: Optional[datetime] = None, horizon_days: Optional[int] = None,
                   tie_break=None) -> ScheduleResult:
    """Run one scheduling pass. Configuration errors raise ConfigurationError."""
    scheduler = TaskScheduler(
        constraints,
        horizon_days=DEFAULT_HORIZON_DAYS if horizon_days is None else horizon_days,
        tie_break=tie_break or shortest_first,
    )
    return scheduler.schedule(tasks, busy_blocks, now=now)


def find_availability(busy_blocks: Iterable[BusyBlock], constraints: Constraint, duration: int,
                      now: Optional[datetime] = None, horizon_days: Optional[int] = None) -> List[TimeSlot]:
    scheduler = TaskScheduler(
        constraints,
        horizon_days=DEFAULT_HORIZON_DAYS if horizon_days is None else horizon_days,
    )
    return scheduler.find_availability(busy_blocks, duration, now=now)
