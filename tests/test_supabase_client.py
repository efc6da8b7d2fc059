"""
Tests for the Supabase REST adapter.
"""

from unittest.mock import MagicMock, patch

import pendulum
import pytest
import requests

from eolia.adapters.supabase_client import SupabaseClient
from eolia.domain.booking import BookingRequest
from eolia.domain.exceptions import PractitionerNotFoundError, RepositoryError
from eolia.domain.models import AppointmentStatus

TZ = "Europe/Paris"


def json_response(payload):
    response = MagicMock()
    response.json.return_value = payload
    return response


@pytest.fixture
def client():
    return SupabaseClient(url="https://demo.supabase.co/", api_key="secret", timezone=TZ)


class TestSupabaseClient:

    def test_headers_and_base_url(self, client):
        assert client.base_url == "https://demo.supabase.co/rest/v1"
        assert client.headers["apikey"] == "secret"
        assert client.headers["Authorization"] == "Bearer secret"

    @patch("eolia.adapters.supabase_client.requests.get")
    def test_get_practitioner(self, mock_get, client):
        mock_get.return_value = json_response([
            {
                "id": "p-1",
                "username": "claire",
                "name": "Claire Martin",
                "specialty": "Sophrologue",
                "working_hours": {"monday": {"enabled": True, "slots": [{"start": "09:00", "end": "12:00"}]}},
            }
        ])

        practitioner = client.get_practitioner("claire")

        assert practitioner.id == "p-1"
        assert practitioner.specialty == "Sophrologue"
        assert practitioner.working_hours.is_open_on(pendulum.date(2024, 11, 25))

        args, kwargs = mock_get.call_args
        assert args[0] == "https://demo.supabase.co/rest/v1/profiles"
        assert ("username", "eq.claire") in kwargs["params"]

    @patch("eolia.adapters.supabase_client.requests.get")
    def test_get_practitioner_not_found(self, mock_get, client):
        mock_get.return_value = json_response([])

        with pytest.raises(PractitionerNotFoundError):
            client.get_practitioner("nobody")

    @patch("eolia.adapters.supabase_client.requests.get")
    def test_get_practitioner_with_invalid_hours(self, mock_get, client):
        mock_get.return_value = json_response([
            {"id": "p-1", "working_hours": {"monday": "open"}}
        ])

        with pytest.raises(RepositoryError, match="Invalid working hours"):
            client.get_practitioner("claire")

    @patch("eolia.adapters.supabase_client.requests.get")
    def test_list_bookings(self, mock_get, client):
        mock_get.return_value = json_response([
            {"start_time": "2024-11-25T09:00:00+00:00", "end_time": "2024-11-25T10:00:00+00:00"},
            {"start_time": "not a date", "end_time": "2024-11-25T10:00:00+00:00"},
        ])
        start = pendulum.datetime(2024, 11, 25, tz=TZ)

        bookings = client.list_bookings("p-1", start, start.add(days=1))

        assert len(bookings) == 1
        assert bookings[0].start.format("HH:mm") == "10:00"
        assert bookings[0].start.timezone_name == TZ

        params = mock_get.call_args.kwargs["params"]
        assert ("user_id", "eq.p-1") in params
        assert ("status", "neq.cancelled") in params
        assert ("start_time", "lt.2024-11-25T23:00:00Z") in params
        assert ("end_time", "gt.2024-11-24T23:00:00Z") in params

    @patch("eolia.adapters.supabase_client.requests.get")
    def test_request_failure_raises_repository_error(self, mock_get, client):
        mock_get.side_effect = requests.exceptions.ConnectionError("boom")

        with pytest.raises(RepositoryError, match="Failed to query 'profiles'"):
            client.get_practitioner("claire")

    @patch("eolia.adapters.supabase_client.requests.get")
    def test_non_list_payload(self, mock_get, client):
        mock_get.return_value = json_response({"message": "oops"})

        with pytest.raises(RepositoryError, match="expected a list"):
            client.find_patient_id("p-1", "a@b.fr")

    @patch("eolia.adapters.supabase_client.requests.get")
    def test_find_patient_id(self, mock_get, client):
        mock_get.return_value = json_response([{"id": "pat-1"}])

        assert client.find_patient_id("p-1", "a@b.fr") == "pat-1"

        mock_get.return_value = json_response([])
        assert client.find_patient_id("p-1", "a@b.fr") is None

    @patch("eolia.adapters.supabase_client.requests.post")
    def test_create_patient(self, mock_post, client):
        mock_post.return_value = json_response([{"id": "pat-9"}])
        request = BookingRequest(
            first_name="Léa",
            last_name="Durand",
            email="lea@example.fr",
            phone="06 12 34 56 78",
            motif="Suivi",
            gdpr_consent=True,
        )

        assert client.create_patient("p-1", request) == "pat-9"

        kwargs = mock_post.call_args.kwargs
        assert kwargs["json"]["phone"] == "0612345678"
        assert kwargs["json"]["user_id"] == "p-1"
        assert kwargs["headers"]["Prefer"] == "return=representation"

    @patch("eolia.adapters.supabase_client.requests.post")
    def test_create_appointment(self, mock_post, client):
        mock_post.return_value = json_response([{"id": "a-1", "status": "scheduled"}])
        start = pendulum.datetime(2024, 11, 25, 9, 0, tz=TZ)

        appointment = client.create_appointment("p-1", "pat-1", start, start.add(minutes=45), "Suivi")

        assert appointment.id == "a-1"
        assert appointment.status is AppointmentStatus.SCHEDULED
        payload = mock_post.call_args.kwargs["json"]
        assert payload["start_time"] == "2024-11-25T08:00:00Z"
        assert payload["end_time"] == "2024-11-25T08:45:00Z"
        assert payload["status"] == "scheduled"

    @patch("eolia.adapters.supabase_client.requests.post")
    def test_empty_insert_response(self, mock_post, client):
        mock_post.return_value = json_response([])

        with pytest.raises(RepositoryError, match="returned no row"):
            client.create_appointment(
                "p-1", "pat-1",
                pendulum.datetime(2024, 11, 25, 9, tz=TZ),
                pendulum.datetime(2024, 11, 25, 10, tz=TZ),
                "Suivi",
            )
