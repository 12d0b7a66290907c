"""
Errors raised by the scheduling system.
"""


class SchedulingError(Exception):
    """Base class for scheduling errors."""


class ConfigurationError(SchedulingError):
    """
    The run's configuration cannot be used (bad timezone, working hours,
    horizon...). Fatal to the whole scheduling run.
    """
