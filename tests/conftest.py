from datetime import datetime

import pytest
import pytz

from schedura.scheduling import Constraint

NEW_YORK = pytz.timezone("America/New_York")


def ny(year, month, day, hour, minute=0):
    """Wall-clock time in New York as an aware datetime."""
    return NEW_YORK.localize(datetime(year, month, day, hour, minute))


def utc(year, month, day, hour, minute=0):
    return pytz.UTC.localize(datetime(year, month, day, hour, minute))


@pytest.fixture
def constraint():
    return Constraint(working_hours_start="09:00", working_hours_end="17:00", timezone="America/New_York")


@pytest.fixture
def now():
    # Monday morning, before working hours
    return ny(2024, 1, 8, 6)
