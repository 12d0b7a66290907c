from dataclasses import replace
from datetime import timedelta
from itertools import combinations

import pytest

from conftest import NEW_YORK, ny
from schedura.scheduling import (
    BusyBlock,
    ConfigurationError,
    ScheduleResult,
    Task,
    TaskScheduler,
    schedule_tasks,
)
from schedura.scheduling.core.constants import (
    REASON_DAILY_CAP,
    REASON_DUPLICATE_TASK,
    REASON_EARLIEST_START,
    REASON_INVALID_DURATION,
    REASON_INVALID_TRAVEL_BUFFER,
    REASON_LATEST_START,
    REASON_NO_WINDOW,
)
from schedura.scheduling.utils.slot_utils import overlaps


def minutes(slot):
    return (slot.end - slot.start) / timedelta(minutes=1)


# ================================
# SCENARIOS
# ================================

def test_single_task_lands_at_start_of_day(constraint, now):
    result = schedule_tasks([Task("1", "Meeting", 60, "high")], [], constraint, now=now)

    assert len(result.placed) == 1
    slot = result.placed[0]
    assert slot.task_id == "1"
    assert slot.start == ny(2024, 1, 8, 9)
    assert slot.end == ny(2024, 1, 8, 10)
    assert slot.confidence > 0
    assert slot.conflicts == ()
    assert result.unplaced == ()


def test_tasks_avoid_busy_block(constraint, now):
    tasks = [Task("A", "Task A", 60, "high"), Task("B", "Task B", 30, "medium")]
    busy = [BusyBlock(ny(2024, 1, 8, 10), ny(2024, 1, 8, 11), "Existing meeting")]

    result = schedule_tasks(tasks, busy, constraint, now=now)

    assert len(result.placed) == 2
    for slot in result.placed:
        assert not overlaps(slot, busy[0])
    assert result.slot_for("A").start <= result.slot_for("B").start
    assert result.slot_for("A").start == ny(2024, 1, 8, 9)
    assert result.slot_for("B").start == ny(2024, 1, 8, 11)


def test_earliest_start_is_respected(constraint, now):
    task = Task("1", "Afternoon task", 60, "high", earliest_start=ny(2024, 1, 8, 14))
    result = schedule_tasks([task], [], constraint, now=now)
    assert result.placed[0].start == ny(2024, 1, 8, 14)


def test_task_longer_than_free_time_is_unplaced(constraint, now):
    task = Task("1", "Long task", 600, "high")
    busy = [BusyBlock(ny(2024, 1, 8, 9), ny(2024, 1, 8, 16), "Long meeting")]

    result = schedule_tasks([task], busy, constraint, now=now, horizon_days=1)

    assert result.placed == ()
    assert [(u.task_id, u.reason) for u in result.unplaced] == [("1", REASON_NO_WINDOW)]


def test_short_task_takes_the_small_gap(constraint, now):
    tasks = [Task("long", "Long", 45, "medium"), Task("short", "Short", 20, "medium")]
    busy = [BusyBlock(ny(2024, 1, 8, 9, 30), ny(2024, 1, 8, 16), "Workshop")]

    result = schedule_tasks(tasks, busy, constraint, now=now)

    assert result.slot_for("short").start == ny(2024, 1, 8, 9)
    assert result.slot_for("short").end == ny(2024, 1, 8, 9, 20)
    assert result.slot_for("long").start == ny(2024, 1, 8, 16)
    assert result.slot_for("long").confidence == pytest.approx(0.8)


# ================================
# PROPERTIES
# ================================

def test_empty_input(constraint, now):
    result = schedule_tasks([], [], constraint, now=now)
    assert result == ScheduleResult()
    assert result.to_dict() == {"placed": [], "unplaced": []}


def test_higher_priority_starts_first(constraint, now):
    tasks = [Task("low", "Low", 60, "low"), Task("high", "High", 30, "high")]
    result = schedule_tasks(tasks, [], constraint, now=now)
    assert result.slot_for("high").start < result.slot_for("low").start


def test_busy_week_invariants(constraint, now):
    priorities = ["high", "medium", "low"]
    tasks = [
        Task(f"t{i}", f"Task {i}", 15 + (i * 37) % 180, priorities[i % 3], travel_buffer=(i % 2) * 10)
        for i in range(40)
    ]
    busy = [
        BusyBlock(ny(2024, 1, 8 + day, 10 + day % 3), ny(2024, 1, 8 + day, 12 + day % 3, 30), "Meeting")
        for day in range(7)
    ] + [BusyBlock(ny(2024, 1, 9, 14), ny(2024, 1, 9, 15))]

    result = schedule_tasks(tasks, busy, constraint, now=now)
    by_id = {task.id: task for task in tasks}

    assert len(result.placed) + len(result.unplaced) == len(tasks)
    for a, b in combinations(result.placed, 2):
        assert not overlaps(a, b)
    for slot in result.placed:
        task = by_id[slot.task_id]
        assert minutes(slot) >= task.duration + (task.travel_buffer or 0)
        for block in busy:
            assert not overlaps(slot, block)
        local_start = slot.start.astimezone(NEW_YORK)
        local_end = slot.end.astimezone(NEW_YORK)
        assert local_start.date() == local_end.date()
        assert local_start.time() >= ny(2024, 1, 8, 9).time()
        assert local_end.time() <= ny(2024, 1, 8, 17).time()
        assert 0.0 <= slot.confidence <= 1.0


def test_identical_inputs_give_identical_results(constraint, now):
    tasks = [Task(str(i), "Task", 25 + i * 5, ["low", "high"][i % 2]) for i in range(12)]
    busy = [BusyBlock(ny(2024, 1, 8, 11), ny(2024, 1, 8, 13))]
    first = schedule_tasks(tasks, busy, constraint, now=now)
    second = schedule_tasks(list(tasks), list(busy), constraint, now=now)
    assert first.to_dict() == second.to_dict()


def test_inputs_are_not_mutated(constraint, now):
    tasks = [Task("b", "B", 60, "low"), Task("a", "A", 30, "high")]
    busy = [BusyBlock(ny(2024, 1, 8, 10), ny(2024, 1, 8, 11))]
    snapshot = (list(tasks), list(busy))
    schedule_tasks(tasks, busy, constraint, now=now)
    assert (tasks, busy) == snapshot


# ================================
# TASK CONSTRAINTS
# ================================

def test_latest_start_that_cannot_be_met(constraint, now):
    task = Task("1", "Early only", 60, "high", latest_start=ny(2024, 1, 8, 9, 30))
    busy = [BusyBlock(ny(2024, 1, 8, 9), ny(2024, 1, 8, 10))]
    result = schedule_tasks([task], busy, constraint, now=now, horizon_days=2)
    assert [(u.task_id, u.reason) for u in result.unplaced] == [("1", REASON_LATEST_START)]


def test_latest_start_that_can_be_met(constraint, now):
    task = Task("1", "Before noon", 60, "high", latest_start=ny(2024, 1, 8, 12))
    busy = [BusyBlock(ny(2024, 1, 8, 9), ny(2024, 1, 8, 11, 30))]
    result = schedule_tasks([task], busy, constraint, now=now)
    assert result.placed[0].start == ny(2024, 1, 8, 11, 30)


def test_earliest_start_too_late_in_the_day(constraint, now):
    task = Task("1", "Late", 60, "medium", earliest_start=ny(2024, 1, 8, 16, 30))
    result = schedule_tasks([task], [], constraint, now=now, horizon_days=1)
    assert [(u.task_id, u.reason) for u in result.unplaced] == [("1", REASON_EARLIEST_START)]


def test_earliest_start_moves_task_to_a_later_day(constraint, now):
    task = Task("1", "Wednesday", 60, "medium", earliest_start=ny(2024, 1, 10, 13, 10))
    result = schedule_tasks([task], [], constraint, now=now)
    assert result.placed[0].start == ny(2024, 1, 10, 13, 10)


def test_travel_buffer_extends_the_slot(constraint, now):
    tasks = [Task("1", "Offsite", 30, "high", travel_buffer=15), Task("2", "Next", 30, "medium")]
    result = schedule_tasks(tasks, [], constraint, now=now)
    assert result.slot_for("1").end == ny(2024, 1, 8, 9, 45)
    assert result.slot_for("2").start == ny(2024, 1, 8, 9, 45)


# ================================
# RUN POLICY
# ================================

def test_run_starting_mid_day_rounds_now_forward(constraint):
    result = schedule_tasks([Task("1", "Task", 30)], [], constraint, now=ny(2024, 1, 8, 10, 7))
    assert result.placed[0].start == ny(2024, 1, 8, 10, 15)


def test_run_after_working_hours_uses_next_day(constraint):
    result = schedule_tasks([Task("1", "Task", 30)], [], constraint, now=ny(2024, 1, 8, 18))
    assert result.placed[0].start == ny(2024, 1, 9, 9)


def test_task_that_does_not_fit_before_day_end_moves_to_next_day(constraint, now):
    busy = [BusyBlock(ny(2024, 1, 8, 9), ny(2024, 1, 8, 16, 30))]
    result = schedule_tasks([Task("1", "Task", 60)], busy, constraint, now=now)
    assert result.placed[0].start == ny(2024, 1, 9, 9)


def test_preferred_break_between_placements(constraint, now):
    constraint = replace(constraint, preferred_break_minutes=15)
    tasks = [Task("1", "First", 60, "high"), Task("2", "Second", 30, "medium")]
    result = schedule_tasks(tasks, [], constraint, now=now)
    assert result.slot_for("2").start == ny(2024, 1, 8, 10, 15)


def test_daily_cap_pushes_work_to_next_day(constraint, now):
    constraint = replace(constraint, max_daily_hours=1.5)
    tasks = [Task("1", "First", 60, "high"), Task("2", "Second", 60, "high")]
    result = schedule_tasks(tasks, [], constraint, now=now)
    assert result.slot_for("1").start == ny(2024, 1, 8, 9)
    assert result.slot_for("2").start == ny(2024, 1, 9, 9)


def test_daily_cap_with_short_horizon(constraint, now):
    constraint = replace(constraint, max_daily_hours=1)
    tasks = [Task("1", "First", 60, "high"), Task("2", "Second", 60, "high")]
    result = schedule_tasks(tasks, [], constraint, now=now, horizon_days=1)
    assert [(u.task_id, u.reason) for u in result.unplaced] == [("2", REASON_DAILY_CAP)]


def test_weekends_can_be_excluded(constraint):
    friday_morning = ny(2024, 1, 12, 6)
    busy = [BusyBlock(ny(2024, 1, 12, 9), ny(2024, 1, 12, 17), "Offsite")]
    task = Task("1", "Task", 60)

    with_weekends = schedule_tasks([task], busy, constraint, now=friday_morning)
    assert with_weekends.placed[0].start == ny(2024, 1, 13, 9)

    weekdays_only = schedule_tasks([task], busy, replace(constraint, exclude_weekends=True), now=friday_morning)
    assert weekdays_only.placed[0].start == ny(2024, 1, 15, 9)


def test_longest_first_policy_is_pluggable(constraint, now):
    tasks = [Task("short", "Short", 20), Task("long", "Long", 45)]
    result = schedule_tasks(tasks, [], constraint, now=now, tie_break="longest_first")
    assert result.slot_for("long").start == ny(2024, 1, 8, 9)


def test_working_hours_follow_daylight_saving(constraint):
    result = schedule_tasks([Task("1", "Task", 60)], [], constraint, now=ny(2024, 3, 11, 6))
    assert result.placed[0].start == ny(2024, 3, 11, 9)
    assert result.placed[0].start.hour == 13


def test_busy_block_from_previous_evening(constraint, now):
    busy = [BusyBlock(ny(2024, 1, 7, 20), ny(2024, 1, 8, 10), "Overnight shift")]
    result = schedule_tasks([Task("1", "Task", 30)], busy, constraint, now=now)
    assert result.placed[0].start == ny(2024, 1, 8, 10)


def test_inverted_busy_block_is_ignored(constraint, now):
    busy = [BusyBlock(ny(2024, 1, 8, 12), ny(2024, 1, 8, 9), "Broken")]
    result = schedule_tasks([Task("1", "Task", 30)], busy, constraint, now=now)
    assert result.placed[0].start == ny(2024, 1, 8, 9)


# ================================
# MALFORMED INPUT & CONFIGURATION
# ================================

def test_malformed_tasks_are_reported(constraint, now):
    tasks = [
        Task("zero", "Zero", 0),
        Task("negative", "Negative", -30),
        Task("buffer", "Bad buffer", 30, travel_buffer=-5),
        Task("ok", "Fine", 30),
        Task("ok", "Same id", 30),
    ]
    result = schedule_tasks(tasks, [], constraint, now=now)

    assert [slot.task_id for slot in result.placed] == ["ok"]
    assert [(u.task_id, u.reason) for u in result.unplaced] == [
        ("zero", REASON_INVALID_DURATION),
        ("negative", REASON_INVALID_DURATION),
        ("buffer", REASON_INVALID_TRAVEL_BUFFER),
        ("ok", REASON_DUPLICATE_TASK),
    ]


@pytest.mark.parametrize("horizon", [0, -3])
def test_non_positive_horizon_is_fatal(constraint, now, horizon):
    with pytest.raises(ConfigurationError):
        schedule_tasks([Task("1", "Task", 30)], [], constraint, now=now, horizon_days=horizon)


def test_invalid_timezone_is_fatal(constraint, now):
    with pytest.raises(ConfigurationError):
        schedule_tasks([Task("1", "Task", 30)], [], replace(constraint, timezone="Nowhere/Land"), now=now)


def test_inverted_working_hours_are_fatal(constraint, now):
    bad = replace(constraint, working_hours_start="18:00", working_hours_end="08:00")
    with pytest.raises(ConfigurationError):
        schedule_tasks([], [], bad, now=now)


# ================================
# AVAILABILITY
# ================================

def test_find_availability_lists_windows_across_days(constraint, now):
    scheduler = TaskScheduler(constraint, horizon_days=2)
    busy = [BusyBlock(ny(2024, 1, 8, 9, 30), ny(2024, 1, 8, 16, 45))]
    windows = scheduler.find_availability(busy, 30, now=now)
    assert [(w.start, w.end) for w in windows] == [
        (ny(2024, 1, 8, 9), ny(2024, 1, 8, 9, 30)),
        (ny(2024, 1, 9, 9), ny(2024, 1, 9, 17)),
    ]


def test_find_availability_rejects_bad_duration(constraint, now):
    with pytest.raises(ConfigurationError):
        TaskScheduler(constraint).find_availability([], 0, now=now)
