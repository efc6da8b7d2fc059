"""
Application services for the public booking page.

The service coordinates fetching practitioner data and existing
appointments through a repository adapter and delegates slot generation to
the domain-level ``SlotGenerator``. The repository is described by a simple
protocol so tests and the CLI can swap in the in-memory implementation.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Protocol, Sequence

import pendulum
from pendulum import DateTime

from ..domain.booking import BookingRequest
from ..domain.exceptions import SlotUnavailableError, UnknownMotifError
from ..domain.models import (
    DEFAULT_MOTIFS,
    Appointment,
    ExistingBooking,
    Motif,
    Practitioner,
    Slot,
)
from ..domain.slot_generator import SlotGenerator

logger = logging.getLogger(__name__)


class AppointmentRepository(Protocol):
    """Protocol describing the storage behaviour needed by the service."""

    def get_practitioner(self, username: str) -> Practitioner:
        """Return the practitioner owning the public page ``username``."""

    def list_bookings(
        self,
        practitioner_id: str,
        start: DateTime,
        end: DateTime,
    ) -> List[ExistingBooking]:
        """Return non-cancelled appointments overlapping ``[start, end)``."""

    def find_patient_id(self, practitioner_id: str, email: str) -> Optional[str]:
        """Return the id of the practitioner's patient with this email, if any."""

    def create_patient(self, practitioner_id: str, request: BookingRequest) -> str:
        """Store a new patient and return its id."""

    def create_appointment(
        self,
        practitioner_id: str,
        patient_id: str,
        start: DateTime,
        end: DateTime,
        motif: str,
    ) -> Appointment:
        """Store a scheduled appointment."""


class BookingService:
    """
    Orchestrates availability lookups and booking writes.

    Existing appointments are fetched fresh on every call; nothing is
    cached between requests.
    """

    def __init__(
        self,
        repository: AppointmentRepository,
        slot_generator: SlotGenerator,
        motifs: Sequence[Motif] = DEFAULT_MOTIFS,
    ) -> None:
        self._repository = repository
        self._slot_generator = slot_generator
        self._motifs = list(motifs)

    @property
    def motifs(self) -> List[Motif]:
        return list(self._motifs)

    def find_motif(self, label: str) -> Motif:
        for motif in self._motifs:
            if motif.label.lower() == label.strip().lower():
                return motif

        available = ", ".join(m.label for m in self._motifs)
        raise UnknownMotifError(f"Unknown motif: '{label}'. Available: {available}")

    def available_slots(
        self,
        *,
        username: str,
        day: date,
        duration_minutes: int,
    ) -> List[Slot]:
        """Return the bookable slots of ``username`` on ``day``."""
        practitioner = self._repository.get_practitioner(username)
        return self._slots_for(practitioner, day, duration_minutes)

    def bookable_dates(
        self,
        *,
        username: str,
        start: date,
        days: int,
    ) -> List[date]:
        """Return the dates that can be picked on the booking calendar."""
        practitioner = self._repository.get_practitioner(username)
        return self._slot_generator.bookable_dates(
            start=start,
            days=days,
            working_hours=practitioner.working_hours,
        )

    def book(
        self,
        *,
        username: str,
        start: DateTime,
        request: BookingRequest,
    ) -> Appointment:
        """
        Book ``start`` for the patient described by ``request``.

        The day's slots are generated again from a fresh read of the
        appointments just before writing. Two concurrent bookers can still
        both pass this check; only the store could rule that out.

        Raises:
            UnknownMotifError: If the requested motif is not configured
            SlotUnavailableError: If ``start`` is no longer offered
        """
        motif = self.find_motif(request.motif)
        practitioner = self._repository.get_practitioner(username)

        local_start = start.in_timezone(self._slot_generator.timezone)
        slots = self._slots_for(practitioner, local_start.date(), motif.duration_minutes)

        if local_start not in {slot.start for slot in slots}:
            raise SlotUnavailableError(
                f"Slot {local_start.format('DD/MM/YYYY HH:mm')} is no longer available"
            )

        patient_id = self._repository.find_patient_id(practitioner.id, request.email)
        if patient_id is None:
            patient_id = self._repository.create_patient(practitioner.id, request)
            logger.info("Created patient %s for practitioner %s", patient_id, practitioner.id)

        appointment = self._repository.create_appointment(
            practitioner_id=practitioner.id,
            patient_id=patient_id,
            start=local_start,
            end=local_start.add(minutes=motif.duration_minutes),
            motif=motif.label,
        )
        logger.info("Booked appointment %s at %s", appointment.id, local_start.to_iso8601_string())

        return appointment

    def _slots_for(
        self,
        practitioner: Practitioner,
        day: date,
        duration_minutes: int,
    ) -> List[Slot]:
        day_start = pendulum.datetime(
            day.year, day.month, day.day, tz=self._slot_generator.timezone
        )
        bookings = self._repository.list_bookings(
            practitioner.id,
            day_start,
            day_start.add(days=1),
        )

        return self._slot_generator.generate(
            day,
            practitioner.working_hours,
            bookings,
            duration_minutes,
        )
