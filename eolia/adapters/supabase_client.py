"""
Supabase (PostgREST) client for practitioner and appointment data.
"""

import logging
from typing import Any, Dict, List, Optional

import pendulum
import requests
from pendulum import DateTime

from ..domain.booking import BookingRequest, normalize_phone
from ..domain.exceptions import PractitionerNotFoundError, RepositoryError
from ..domain.models import (
    Appointment,
    AppointmentStatus,
    ExistingBooking,
    Practitioner,
    WorkingHours,
)

logger = logging.getLogger(__name__)


class SupabaseClient:
    """
    Client for the hosted database's REST interface.

    Reads profiles and appointments, writes patients and appointments.
    """

    REST_PATH = "/rest/v1"

    def __init__(self, url: str, api_key: str, timezone: str = "Europe/Paris", timeout: int = 30):
        """
        Initialize the REST client.

        Args:
            url: Project URL, e.g. https://xyz.supabase.co
            api_key: Project API key
            timezone: IANA timezone appointments are converted to
            timeout: Request timeout in seconds
        """
        self.base_url = url.rstrip("/") + self.REST_PATH
        self.timezone = timezone
        self.timeout = timeout
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def get_practitioner(self, username: str) -> Practitioner:
        """
        Fetch the practitioner owning the public booking page ``username``.

        Raises:
            PractitionerNotFoundError: If no profile has this username
            RepositoryError: If the API call fails
        """
        rows = self._get(
            "profiles",
            [
                ("select", "id,name,username,specialty,working_hours"),
                ("username", f"eq.{username}"),
            ],
        )

        if not rows:
            raise PractitionerNotFoundError(f"No practitioner with username '{username}'")

        row = rows[0]
        try:
            working_hours = WorkingHours.from_dict(row.get("working_hours"))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise RepositoryError(f"Invalid working hours for '{username}': {e}") from e

        return Practitioner(
            id=row["id"],
            username=row.get("username") or username,
            name=row.get("name") or "",
            working_hours=working_hours,
            specialty=row.get("specialty"),
        )

    def list_bookings(
        self,
        practitioner_id: str,
        start: DateTime,
        end: DateTime,
    ) -> List[ExistingBooking]:
        """
        Fetch non-cancelled appointments overlapping ``[start, end)``.

        An appointment that began the evening before and runs past ``start``
        is included.
        """
        rows = self._get(
            "appointments",
            [
                ("select", "start_time,end_time"),
                ("user_id", f"eq.{practitioner_id}"),
                ("start_time", f"lt.{end.in_timezone('UTC').to_iso8601_string()}"),
                ("end_time", f"gt.{start.in_timezone('UTC').to_iso8601_string()}"),
                ("status", f"neq.{AppointmentStatus.CANCELLED.value}"),
            ],
        )

        bookings: List[ExistingBooking] = []
        for row in rows:
            try:
                bookings.append(
                    ExistingBooking(
                        start=self._parse_datetime(row["start_time"]),
                        end=self._parse_datetime(row["end_time"]),
                    )
                )
            except (KeyError, ValueError) as e:
                logger.warning("Skipping unparseable appointment row %r: %s", row, e)

        return bookings

    def find_patient_id(self, practitioner_id: str, email: str) -> Optional[str]:
        rows = self._get(
            "patients",
            [
                ("select", "id"),
                ("user_id", f"eq.{practitioner_id}"),
                ("email", f"eq.{email}"),
            ],
        )
        return rows[0]["id"] if rows else None

    def create_patient(self, practitioner_id: str, request: BookingRequest) -> str:
        row = self._insert(
            "patients",
            {
                "user_id": practitioner_id,
                "first_name": request.first_name,
                "last_name": request.last_name,
                "email": request.email,
                "phone": normalize_phone(request.phone),
                "gdpr_consent": request.gdpr_consent,
            },
        )
        return row["id"]

    def create_appointment(
        self,
        practitioner_id: str,
        patient_id: str,
        start: DateTime,
        end: DateTime,
        motif: str,
    ) -> Appointment:
        row = self._insert(
            "appointments",
            {
                "user_id": practitioner_id,
                "patient_id": patient_id,
                "start_time": start.in_timezone("UTC").to_iso8601_string(),
                "end_time": end.in_timezone("UTC").to_iso8601_string(),
                "motif": motif,
                "status": AppointmentStatus.SCHEDULED.value,
            },
        )

        return Appointment(
            id=row["id"],
            practitioner_id=practitioner_id,
            patient_id=patient_id,
            start=start,
            end=end,
            motif=motif,
            status=AppointmentStatus(row.get("status") or AppointmentStatus.SCHEDULED.value),
        )

    def _get(self, table: str, params: List[tuple]) -> List[Dict[str, Any]]:
        url = f"{self.base_url}/{table}"

        try:
            response = requests.get(url, headers=self.headers, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise RepositoryError(f"Failed to query '{table}': {e}") from e
        except ValueError as e:
            raise RepositoryError(f"Invalid JSON response from '{table}': {e}") from e

        if not isinstance(data, list):
            raise RepositoryError(f"Unexpected response from '{table}': expected a list")

        return data

    def _insert(self, table: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}/{table}"
        headers = {**self.headers, "Prefer": "return=representation"}

        try:
            response = requests.post(url, headers=headers, json=payload, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise RepositoryError(f"Failed to insert into '{table}': {e}") from e
        except ValueError as e:
            raise RepositoryError(f"Invalid JSON response from '{table}': {e}") from e

        if not isinstance(data, list) or not data:
            raise RepositoryError(f"Insert into '{table}' returned no row")

        return data[0]

    def _parse_datetime(self, value: str) -> DateTime:
        """
        Parse an ISO 8601 timestamp into the practitioner's timezone.
        """
        dt = pendulum.parse(value)

        if isinstance(dt, DateTime):
            return dt.in_timezone(self.timezone)

        raise ValueError(f"Could not parse datetime: {value}")
