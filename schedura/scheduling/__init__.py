"""
Schedura Scheduling System

A greedy task-to-timeslot engine: orders tasks by priority, finds free
windows inside working hours and commits each task to the first one that
fits. Works independently of the API layer.
"""

from .core.scheduler import TaskScheduler, schedule_tasks, find_availability
from .core.models import Task, BusyBlock, Constraint, ProposedSlot, UnplacedTask, ScheduleResult
from .core.time_slot import TimeSlot
from .core.exceptions import SchedulingError, ConfigurationError
from .core.constants import AVAILABLE, BUSY, BUFFER

# Version for future API compatibility
__version__ = "1.0.0"
