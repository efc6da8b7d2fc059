"""
Domain models for working hours, bookings and generated slots.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from typing import Any, Dict, List, Optional

from pendulum import DateTime

logger = logging.getLogger(__name__)

# Fixed keys of the working-hours mapping, indexed by date.weekday() (0=Monday)
WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

WEEKDAY_LABELS_FR = {
    0: "lundi",
    1: "mardi",
    2: "mercredi",
    3: "jeudi",
    4: "vendredi",
    5: "samedi",
    6: "dimanche",
}


def parse_hhmm(value: str) -> time:
    """
    Parse an ``"HH:mm"`` 24-hour string into a time object.

    A single-digit hour (``"9:00"``) is accepted as well.

    Raises:
        ValueError: If the value is not in ``HH:mm`` form
    """
    if not isinstance(value, str):
        raise ValueError(f"Expected an 'HH:mm' string, got {value!r}")

    parts = value.strip().split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts) \
            or len(parts[0]) not in (1, 2) or len(parts[1]) != 2:
        raise ValueError(f"Time must be in 'HH:mm' format, got {value!r}")

    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Time out of range: {value!r}")

    return time(hour=hour, minute=minute)


def format_hhmm(value: time) -> str:
    return f"{value.hour:02d}:{value.minute:02d}"


@dataclass(frozen=True)
class TimeInterval:
    """
    An open interval of a working day, in wall-clock time.

    Unlike a booking, an interval is not validated on construction: a
    practitioner may have saved ``start >= end``, and such an interval simply
    contributes no slots.
    """
    start: time
    end: time

    @classmethod
    def from_strings(cls, start: str, end: str) -> "TimeInterval":
        return cls(start=parse_hhmm(start), end=parse_hhmm(end))

    def is_well_formed(self) -> bool:
        return self.start < self.end

    def to_dict(self) -> Dict[str, str]:
        return {"start": format_hhmm(self.start), "end": format_hhmm(self.end)}

    def __str__(self) -> str:
        return f"{format_hhmm(self.start)} - {format_hhmm(self.end)}"


@dataclass
class DaySchedule:
    """Opening intervals of one weekday, in display order."""
    enabled: bool = False
    slots: List[TimeInterval] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DaySchedule":
        slots: List[TimeInterval] = []
        for item in data.get("slots") or []:
            try:
                slots.append(TimeInterval.from_strings(item["start"], item["end"]))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping unreadable interval %r: %s", item, e)
        return cls(enabled=bool(data.get("enabled", False)), slots=slots)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "slots": [interval.to_dict() for interval in self.slots],
        }


@dataclass
class WorkingHours:
    """
    Weekly recurring availability of a practitioner.

    A weekday that is missing from ``days`` is closed, exactly like one
    whose schedule is disabled.
    """
    days: Dict[str, DaySchedule] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "WorkingHours":
        """
        Build working hours from the configuration store's JSON shape.

        Example:
            {"monday": {"enabled": true, "slots": [{"start": "09:00", "end": "12:00"}]}}
        """
        days: Dict[str, DaySchedule] = {}

        for key, value in (data or {}).items():
            day_name = str(key).lower()
            if day_name not in WEEKDAYS:
                logger.warning("Ignoring unknown weekday key in working hours: %r", key)
                continue
            if value is None:
                continue
            days[day_name] = DaySchedule.from_dict(value)

        return cls(days=days)

    @classmethod
    def default(cls) -> "WorkingHours":
        """Monday to Friday, 09:00-12:00 and 14:00-18:00."""
        days: Dict[str, DaySchedule] = {}
        for day_name in WEEKDAYS:
            if day_name in ("saturday", "sunday"):
                days[day_name] = DaySchedule(enabled=False, slots=[])
            else:
                days[day_name] = DaySchedule(
                    enabled=True,
                    slots=[
                        TimeInterval.from_strings("09:00", "12:00"),
                        TimeInterval.from_strings("14:00", "18:00"),
                    ],
                )
        return cls(days=days)

    def to_dict(self) -> Dict[str, Any]:
        return {
            day_name: self.days[day_name].to_dict()
            for day_name in WEEKDAYS
            if day_name in self.days
        }

    def schedule_for(self, day: date) -> Optional[DaySchedule]:
        """Return the schedule for the weekday of ``day``, if any."""
        return self.days.get(WEEKDAYS[day.weekday()])

    def is_open_on(self, day: date) -> bool:
        schedule = self.schedule_for(day)
        return bool(schedule and schedule.enabled and schedule.slots)


@dataclass(frozen=True)
class ExistingBooking:
    """
    A confirmed, non-cancelled appointment of the practitioner.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def overlaps(self, start: DateTime, end: DateTime) -> bool:
        """Half-open overlap test; touching intervals do not overlap."""
        return start < self.end and end > self.start


@dataclass(frozen=True, order=True)
class Slot:
    """
    A bookable appointment start time.
    """
    start: DateTime
    duration_minutes: int

    @property
    def end(self) -> DateTime:
        return self.start.add(minutes=self.duration_minutes)

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: jour DD/MM/YYYY | HH:mm – HH:mm (N min)
        """
        weekday = WEEKDAY_LABELS_FR[self.start.weekday()]
        date_str = self.start.format("DD/MM/YYYY")
        time_str = f"{self.start.format('HH:mm')} – {self.end.format('HH:mm')}"

        return f"{weekday} {date_str} | {time_str} ({self.duration_minutes} min)"


@dataclass(frozen=True)
class Motif:
    """Appointment type offered on the booking page."""
    label: str
    duration_minutes: int


DEFAULT_MOTIFS = (
    Motif(label="Première consultation", duration_minutes=60),
    Motif(label="Suivi", duration_minutes=45),
    Motif(label="Consultation courte", duration_minutes=30),
)


class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


@dataclass
class Practitioner:
    """Account owner offering appointments on a public booking page."""
    id: str
    username: str
    name: str
    working_hours: WorkingHours = field(default_factory=WorkingHours)
    specialty: Optional[str] = None


@dataclass
class Appointment:
    """An appointment as stored by the appointment repository."""
    id: str
    practitioner_id: str
    patient_id: Optional[str]
    start: DateTime
    end: DateTime
    motif: Optional[str] = None
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
