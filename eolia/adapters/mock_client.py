"""
In-memory appointment repository for running without the hosted database.
"""

import json
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

import pendulum
from pendulum import DateTime

from ..domain.booking import BookingRequest, normalize_phone
from ..domain.exceptions import PractitionerNotFoundError
from ..domain.models import (
    Appointment,
    AppointmentStatus,
    ExistingBooking,
    Practitioner,
    WorkingHours,
)

DEFAULT_DATA_FILE = Path(__file__).parent / "mock_data.json"


class MockClient:
    """
    Repository holding practitioners, patients and appointments in memory.

    Seed data is loaded from mock_data.json (or a given file); writes only
    live as long as the instance.
    """

    def __init__(self, data_file: Optional[Path] = None, timezone: str = "Europe/Paris", data: Optional[Dict[str, Any]] = None):
        """
        Initialize the mock repository.

        Args:
            data_file: JSON seed file, defaults to the bundled mock_data.json
            timezone: IANA timezone naive timestamps are read in
            data: Seed data given directly, takes precedence over data_file
        """
        self.timezone = timezone
        if data is None:
            data = self._load_data(data_file or DEFAULT_DATA_FILE)

        self.practitioners: List[Dict[str, Any]] = list(data.get("practitioners", []))
        self.patients: List[Dict[str, Any]] = list(data.get("patients", []))
        self.appointments: List[Dict[str, Any]] = list(data.get("appointments", []))

    @staticmethod
    def _load_data(data_file: Path) -> Dict[str, Any]:
        if not data_file.exists():
            return {}

        with open(data_file, "r", encoding="utf-8") as f:
            return json.load(f)

    def get_practitioner(self, username: str) -> Practitioner:
        for row in self.practitioners:
            if row.get("username", "").lower() == username.lower():
                return Practitioner(
                    id=row["id"],
                    username=row["username"],
                    name=row.get("name", ""),
                    working_hours=WorkingHours.from_dict(row.get("working_hours")),
                    specialty=row.get("specialty"),
                )

        raise PractitionerNotFoundError(f"No practitioner with username '{username}'")

    def list_bookings(
        self,
        practitioner_id: str,
        start: DateTime,
        end: DateTime,
    ) -> List[ExistingBooking]:
        bookings: List[ExistingBooking] = []

        for row in self.appointments:
            if row.get("user_id") != practitioner_id:
                continue
            if row.get("status") == AppointmentStatus.CANCELLED.value:
                continue

            booking_start = pendulum.parse(row["start_time"], tz=self.timezone)
            booking_end = pendulum.parse(row["end_time"], tz=self.timezone)
            if booking_start < end and booking_end > start:
                bookings.append(ExistingBooking(start=booking_start, end=booking_end))

        return bookings

    def find_patient_id(self, practitioner_id: str, email: str) -> Optional[str]:
        for row in self.patients:
            if row.get("user_id") == practitioner_id and row.get("email") == email:
                return row["id"]
        return None

    def create_patient(self, practitioner_id: str, request: BookingRequest) -> str:
        patient_id = str(uuid.uuid4())
        self.patients.append(
            {
                "id": patient_id,
                "user_id": practitioner_id,
                "first_name": request.first_name,
                "last_name": request.last_name,
                "email": request.email,
                "phone": normalize_phone(request.phone),
                "gdpr_consent": request.gdpr_consent,
            }
        )
        return patient_id

    def create_appointment(
        self,
        practitioner_id: str,
        patient_id: str,
        start: DateTime,
        end: DateTime,
        motif: str,
    ) -> Appointment:
        appointment = Appointment(
            id=str(uuid.uuid4()),
            practitioner_id=practitioner_id,
            patient_id=patient_id,
            start=start,
            end=end,
            motif=motif,
            status=AppointmentStatus.SCHEDULED,
        )
        self.appointments.append(
            {
                "id": appointment.id,
                "user_id": practitioner_id,
                "patient_id": patient_id,
                "start_time": start.to_iso8601_string(),
                "end_time": end.to_iso8601_string(),
                "motif": motif,
                "status": appointment.status.value,
            }
        )
        return appointment
