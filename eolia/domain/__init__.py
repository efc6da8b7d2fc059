"""
Domain layer - Pure business logic without external dependencies.
"""

from .booking import BookingRequest
from .models import (
    Appointment,
    AppointmentStatus,
    DaySchedule,
    ExistingBooking,
    Motif,
    Practitioner,
    Slot,
    TimeInterval,
    WorkingHours,
)
from .slot_generator import SlotGenerator

__all__ = [
    "Appointment",
    "AppointmentStatus",
    "BookingRequest",
    "DaySchedule",
    "ExistingBooking",
    "Motif",
    "Practitioner",
    "Slot",
    "SlotGenerator",
    "TimeInterval",
    "WorkingHours",
]
