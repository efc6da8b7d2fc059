"""
Shared fixtures for the test suite.
"""

import pendulum
import pytest

from eolia.domain.models import DaySchedule, TimeInterval, WorkingHours

TZ = "Europe/Paris"


def fixed_clock(value: str):
    """Return a clock frozen at ``value`` in the practitioner's timezone."""
    instant = pendulum.parse(value, tz=TZ)
    return lambda: instant


def hours_of(slots):
    return [slot.start.format("HH:mm") for slot in slots]


def day_schedule(*intervals, enabled=True):
    return DaySchedule(
        enabled=enabled,
        slots=[TimeInterval.from_strings(start, end) for start, end in intervals],
    )


@pytest.fixture
def monday():
    return pendulum.date(2024, 11, 25)


@pytest.fixture
def morning_hours():
    return WorkingHours(days={"monday": day_schedule(("09:00", "12:00"))})
