"""
Task ordering policy for the placement loop.

Tasks are placed by priority weight, highest first. Ties are broken by a
pluggable policy; the default places shorter tasks first so that long,
harder-to-place tasks still get the remaining room.
"""

from typing import Callable, Dict, Iterable, List

from ..core.constants import DEFAULT_PRIORITY, PRIORITY_WEIGHTS
from ..core.exceptions import ConfigurationError
from ..core.models import Task

TieBreak = Callable[[Task], float]


def shortest_first(task: Task) -> float:
    return task.duration


def longest_first(task: Task) -> float:
    return -task.duration


TIE_BREAKS: Dict[str, TieBreak] = {
    "shortest_first": shortest_first,
    "longest_first": longest_first,
}


def priority_weight(task: Task) -> int:
    """Unknown priorities are weighted like medium."""
    return PRIORITY_WEIGHTS.get(task.priority, PRIORITY_WEIGHTS[DEFAULT_PRIORITY])


def resolve_tie_break(tie_break) -> TieBreak:
    """Accept a policy name or a key function."""
    if callable(tie_break):
        return tie_break
    try:
        return TIE_BREAKS[tie_break]
    except KeyError:
        raise ConfigurationError(
            f"Unknown tie-break policy {tie_break!r}, expected one of {sorted(TIE_BREAKS)}"
        )


def order_tasks(tasks: Iterable[Task], tie_break=shortest_first) -> List[Task]:
    """Return the tasks in placement order. Equal keys keep their input order."""
    key_func = resolve_tie_break(tie_break)
    return sorted(tasks, key=lambda task: (-priority_weight(task), key_func(task)))
