"""
Core business logic for generating bookable appointment slots.

Pure domain logic: no API calls, no database, no I/O. The only ambient
input, the current instant, comes from an injectable clock.
"""

import logging
from datetime import date, time
from typing import Callable, Iterable, List, Optional

import pendulum
from pendulum import DateTime

from .exceptions import InvalidDurationError
from .models import ExistingBooking, Slot, WorkingHours

logger = logging.getLogger(__name__)

Clock = Callable[[], DateTime]


class SlotGenerator:
    """
    Generates the bookable start times of one calendar day.

    Algorithm:
    1. Resolve the weekday schedule for the date
    2. For each open interval, step a cursor by the appointment duration
    3. Keep candidates that fit the interval, overlap no booking and lie
       strictly in the future
    4. Sort and de-duplicate the result

    Candidates are always duration-aligned from the interval start: a
    rejected candidate is not retried at a finer step.
    """

    def __init__(self, timezone: str = "Europe/Paris", clock: Optional[Clock] = None):
        self.timezone = timezone
        self._clock = clock or (lambda: pendulum.now(self.timezone))

    def now(self) -> DateTime:
        return self._clock()

    def generate(
        self,
        day: date,
        working_hours: WorkingHours,
        existing_bookings: Iterable[ExistingBooking],
        duration_minutes: int,
    ) -> List[Slot]:
        """
        Generate the ordered bookable slots for ``day``.

        Args:
            day: Target calendar day (only its date part is used)
            working_hours: Practitioner's weekly working hours
            existing_bookings: Non-cancelled appointments of that day
            duration_minutes: Length of the appointment type being booked

        Returns:
            Slots sorted ascending by start time, without duplicates

        Raises:
            InvalidDurationError: If duration_minutes is not positive
        """
        if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int) or duration_minutes <= 0:
            raise InvalidDurationError(
                f"Appointment duration must be a positive number of minutes, got {duration_minutes!r}"
            )

        schedule = working_hours.schedule_for(day)
        if schedule is None or not schedule.enabled or not schedule.slots:
            return []

        bookings = list(existing_bookings)
        now = self.now()
        found: List[Slot] = []

        for interval in schedule.slots:
            if not interval.is_well_formed():
                logger.debug("Skipping malformed interval %s on %s", interval, day)
                continue

            cursor = self._at(day, interval.start)
            interval_end = self._at(day, interval.end)

            while cursor.add(minutes=duration_minutes) <= interval_end:
                candidate_end = cursor.add(minutes=duration_minutes)

                is_free = not any(
                    booking.overlaps(cursor, candidate_end) for booking in bookings
                )

                if is_free and cursor > now:
                    found.append(Slot(start=cursor, duration_minutes=duration_minutes))

                cursor = candidate_end

        # Overlapping or unsorted intervals can yield repeats and disorder
        unique = {slot.start: slot for slot in found}
        return [unique[start] for start in sorted(unique)]

    def bookable_dates(
        self,
        start: date,
        days: int,
        working_hours: WorkingHours,
    ) -> List[date]:
        """
        List the dates a patient can pick on the booking calendar.

        Dates before today and weekdays without opening hours are left out.
        """
        today = self.now().in_timezone(self.timezone).date()
        first = pendulum.date(start.year, start.month, start.day)
        dates: List[date] = []

        for offset in range(max(days, 0)):
            current = first.add(days=offset)
            if current < today:
                continue
            if working_hours.is_open_on(current):
                dates.append(current)

        return dates

    def _at(self, day: date, wall_time: time) -> DateTime:
        return pendulum.datetime(
            day.year,
            day.month,
            day.day,
            wall_time.hour,
            wall_time.minute,
            tz=self.timezone,
        )
