"""
Booking draft value objects.

A draft is everything a client collects before a booking exists. It is passed
explicitly through validation, availability and pricing and can be serialized
back to JSON for preview screens.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional

from .booking import parse_timestamp, format_timestamp
from .exceptions import ValidationError


@dataclass
class OccupantDetails:
    """Person who will occupy the room or use the service."""

    name: str = ''
    phone: str = ''
    gender: Optional[str] = None
    email: Optional[str] = None
    home_location: str = ''

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'OccupantDetails':
        data = data or {}
        if not isinstance(data, dict):
            raise ValidationError('occupant_details must be an object')
        return cls(
            name=_text(data.get('name')),
            phone=_text(data.get('phone') or data.get('phone_number')),
            gender=data.get('gender') or None,
            email=_text(data.get('email')) or None,
            home_location=_text(data.get('home_location') or data.get('location')),
        )


@dataclass
class OfficerDetails:
    """Sponsoring staff member for non-member bookings."""

    name: str = ''
    designation: str = ''
    phone: str = ''
    email: str = ''
    gender: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional['OfficerDetails']:
        if not data:
            return None
        if not isinstance(data, dict):
            raise ValidationError('officer_details must be an object')
        return cls(
            name=_text(data.get('name')),
            designation=_text(data.get('designation')),
            phone=_text(data.get('phone') or data.get('phone_number')),
            email=_text(data.get('email')),
            gender=data.get('gender') or None,
        )


@dataclass
class BookingDraft:
    """Unpersisted booking request."""

    booking_type: str
    booking_for: str
    relation: str
    location: str
    category: str
    check_in: datetime
    check_out: datetime
    occupant: OccupantDetails = field(default_factory=OccupantDetails)
    officer: Optional[OfficerDetails] = None
    resource_id: Optional[int] = None
    guest_count: Optional[int] = None
    remarks: str = ''

    @classmethod
    def from_dict(cls, data: dict) -> 'BookingDraft':
        """
        Build a draft from request JSON.

        ``category`` may also be sent as ``room_type`` or ``service_type``.
        Client-supplied prices are never read.

        Raises:
            ValidationError: If the interval is missing or malformed
        """
        if not isinstance(data, dict):
            raise ValidationError('Booking data is required')

        check_in = data.get('check_in')
        check_out = data.get('check_out')
        if not check_in or not check_out:
            raise ValidationError('Check-in and check-out dates are required')
        try:
            check_in = parse_timestamp(check_in)
            check_out = parse_timestamp(check_out)
        except ValueError:
            raise ValidationError('Invalid check-in or check-out date')

        resource_id = data.get('resource_id')
        guest_count = data.get('guest_count')
        try:
            resource_id = int(resource_id) if resource_id not in (None, '') else None
            guest_count = int(guest_count) if guest_count not in (None, '') else None
        except (TypeError, ValueError):
            raise ValidationError('resource_id and guest_count must be integers')

        return cls(
            booking_type=_text(data.get('booking_type')) or 'room',
            booking_for=_text(data.get('booking_for')),
            relation=_text(data.get('relation')),
            location=_text(data.get('location')),
            category=_text(data.get('category') or data.get('room_type') or data.get('service_type')),
            check_in=check_in,
            check_out=check_out,
            occupant=OccupantDetails.from_dict(data.get('occupant_details')),
            officer=OfficerDetails.from_dict(data.get('officer_details')),
            resource_id=resource_id,
            guest_count=guest_count,
            remarks=_text(data.get('remarks')),
        )

    def to_dict(self) -> dict:
        """Serialize the draft to JSON-safe primitives."""
        data = asdict(self)
        data['check_in'] = format_timestamp(self.check_in)
        data['check_out'] = format_timestamp(self.check_out)
        data['occupant_details'] = data.pop('occupant')
        data['officer_details'] = data.pop('officer')
        return data


def _text(value) -> str:
    """Coerce optional input to a stripped string."""
    if value is None:
        return ''
    return str(value).strip()
