"""
Booking request validation and French phone number helpers.
"""

import re

from pydantic import BaseModel, field_validator

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _digits(phone: str) -> str:
    return re.sub(r"\D", "", phone)


def is_valid_french_phone(phone: str) -> bool:
    """Accept national (0612345678) and international (+33612345678) forms."""
    cleaned = _digits(phone)
    return (
        (len(cleaned) == 10 and cleaned.startswith("0"))
        or (len(cleaned) == 11 and cleaned.startswith("33"))
    )


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def format_phone_number(phone: str) -> str:
    """
    Format a French number as ``06 12 34 56 78``.

    Numbers that are not French are returned unchanged.
    """
    cleaned = _digits(phone)

    if len(cleaned) == 10 and cleaned.startswith("0"):
        return " ".join(cleaned[i:i + 2] for i in range(0, 10, 2))

    if len(cleaned) == 11 and cleaned.startswith("33"):
        return format_phone_number("0" + cleaned[2:])

    return phone


def normalize_phone(phone: str) -> str:
    """Strip whitespace, the form in which patient phones are stored."""
    return re.sub(r"\s", "", phone)


class BookingRequest(BaseModel):
    """Patient details submitted from the public booking page."""
    first_name: str
    last_name: str
    email: str
    phone: str
    motif: str
    gdpr_consent: bool = False

    @field_validator("first_name", "last_name", "motif")
    @classmethod
    def validate_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("field is required")
        return value

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        value = value.strip()
        if not is_valid_email(value):
            raise ValueError(f"invalid email address: {value!r}")
        return value

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: str) -> str:
        if not is_valid_french_phone(value):
            raise ValueError(f"invalid phone number (expected e.g. 06 12 34 56 78): {value!r}")
        return value

    @field_validator("gdpr_consent")
    @classmethod
    def validate_consent(cls, value: bool) -> bool:
        if not value:
            raise ValueError("consent to personal data processing is required")
        return value
