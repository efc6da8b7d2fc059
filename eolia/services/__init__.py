"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .booking_service import AppointmentRepository, BookingService

__all__ = ["AppointmentRepository", "BookingService"]
