"""
Tests for booking request validation and phone helpers.
"""

import pytest
from pydantic import ValidationError

from eolia.domain.booking import (
    BookingRequest,
    format_phone_number,
    is_valid_email,
    is_valid_french_phone,
    normalize_phone,
)


def make_request(**overrides):
    data = {
        "first_name": "Sophie",
        "last_name": "Bernard",
        "email": "sophie.bernard@example.fr",
        "phone": "06 12 34 56 78",
        "motif": "Suivi",
        "gdpr_consent": True,
    }
    data.update(overrides)
    return BookingRequest(**data)


class TestPhoneHelpers:

    @pytest.mark.parametrize("phone", ["0612345678", "06 12 34 56 78", "+33 6 12 34 56 78", "33612345678"])
    def test_valid_french_phone(self, phone):
        assert is_valid_french_phone(phone)

    @pytest.mark.parametrize("phone", ["612345678", "12345", "+44 20 7946 0958", ""])
    def test_invalid_french_phone(self, phone):
        assert not is_valid_french_phone(phone)

    def test_format_phone_number(self):
        assert format_phone_number("0612345678") == "06 12 34 56 78"
        assert format_phone_number("+33612345678") == "06 12 34 56 78"
        assert format_phone_number("+44 20") == "+44 20"

    def test_normalize_phone(self):
        assert normalize_phone(" 06 12 34\t56 78 ") == "0612345678"

    def test_is_valid_email(self):
        assert is_valid_email("a@b.fr")
        assert not is_valid_email("a@b")
        assert not is_valid_email("a b@c.fr")


class TestBookingRequest:

    def test_valid_request(self):
        request = make_request(first_name="  Sophie ")

        assert request.first_name == "Sophie"
        assert request.gdpr_consent is True

    def test_consent_required(self):
        with pytest.raises(ValidationError, match="consent"):
            make_request(gdpr_consent=False)

    def test_invalid_email(self):
        with pytest.raises(ValidationError, match="invalid email"):
            make_request(email="sophie.example.fr")

    def test_invalid_phone(self):
        with pytest.raises(ValidationError, match="invalid phone"):
            make_request(phone="12 34")

    def test_blank_name(self):
        with pytest.raises(ValidationError, match="required"):
            make_request(last_name="   ")
