"""
Booking request validation.

Checks run in a fixed order and the first failure wins:

1. Interval well-formed (not in the past, check-in before check-out)
2. Category permitted for the requesting actor
3. Occupant details complete
4. Sponsoring officer details (non-member channel only)
5. Relation consistent with booking_for

Each check returns ``(is_valid, error_message)`` so callers that need every
problem at once can run them individually.
"""

from datetime import date, datetime
from typing import Optional

from utils.datetime_helpers import get_today
from utils.messages import get_message
from utils.validators import validate_email, validate_phone
from .booking import (
    BOOKING_TYPES, BOOKING_FOR, RELATIONS, LOCATIONS, CATEGORIES,
    GATED_CATEGORIES, PRIVILEGED_DESIGNATIONS, GENDERS
)
from .booking_draft import BookingDraft
from .exceptions import ValidationError


def check_interval(draft: BookingDraft, today: date = None) -> tuple:
    """
    Check the requested interval.

    A check-in earlier than the start of ``today`` (default: the venue's
    current date) is in the past; a same-day check-in is accepted.
    """
    today = today or get_today()
    if draft.check_in < datetime.combine(today, datetime.min.time()):
        return False, get_message('past_check_in')
    if draft.check_in >= draft.check_out:
        return False, get_message('invalid_interval')
    return True, ''


def is_privileged(actor) -> bool:
    """True if the actor may book gated categories."""
    if actor is None:
        return False
    if getattr(actor, 'is_admin', False):
        return True
    return (getattr(actor, 'designation', None) or '').upper() in PRIVILEGED_DESIGNATIONS


def check_category_permitted(draft: BookingDraft, actor=None) -> tuple:
    """Check location, category and the designation gate."""
    if draft.booking_type not in BOOKING_TYPES:
        return False, get_message('invalid_booking_type')
    if draft.location not in LOCATIONS:
        return False, get_message('invalid_location')
    if draft.category not in CATEGORIES[draft.booking_type]:
        return False, get_message('invalid_category', kind=draft.booking_type, location=draft.location)
    if draft.category in GATED_CATEGORIES.get(draft.location, ()) and not is_privileged(actor):
        return False, get_message('category_not_permitted', category=draft.category, location=draft.location)
    if draft.guest_count is not None and draft.guest_count < 1:
        return False, get_message('invalid_guest_count')
    return True, ''


def check_occupant_details(draft: BookingDraft, channel: str = 'member') -> tuple:
    """Check occupant fields; email is mandatory on the non-member channel."""
    occupant = draft.occupant
    if not occupant.name:
        return False, get_message('occupant_name_required')
    if not validate_phone(occupant.phone):
        return False, get_message('occupant_phone_invalid')
    if channel == 'non_member' and not validate_email(occupant.email):
        return False, get_message('occupant_email_invalid')
    if channel != 'non_member' and occupant.email and not validate_email(occupant.email):
        return False, get_message('occupant_email_invalid')
    if occupant.gender and occupant.gender not in GENDERS:
        return False, get_message('invalid_gender')
    if not occupant.home_location:
        return False, get_message('occupant_location_required')
    return True, ''


def check_officer_details(draft: BookingDraft, channel: str = 'member') -> tuple:
    """Check the sponsoring officer; only applies to the non-member channel."""
    if channel != 'non_member':
        return True, ''
    officer = draft.officer
    if officer is None:
        return False, get_message('officer_required')
    if not officer.name:
        return False, get_message('officer_name_required')
    if not officer.designation:
        return False, get_message('officer_designation_required')
    if not validate_phone(officer.phone):
        return False, get_message('officer_phone_invalid')
    if not validate_email(officer.email):
        return False, get_message('officer_email_invalid')
    return True, ''


def check_relation(draft: BookingDraft) -> tuple:
    """Check relation against the booking_for vocabulary."""
    if draft.booking_for not in BOOKING_FOR:
        return False, get_message('invalid_booking_for')
    if draft.relation not in RELATIONS[draft.booking_for]:
        return False, get_message('invalid_relation', relation=draft.relation or 'None',
                                  booking_for=draft.booking_for)
    return True, ''


def validate_booking_draft(
    draft: BookingDraft,
    actor=None,
    channel: str = 'member',
    today: Optional[date] = None
) -> None:
    """
    Run all checks in order and stop at the first failure.

    Args:
        draft: Booking draft
        actor: Requesting user (None for non-members)
        channel: 'member' or 'non_member'
        today: Reference date for the past-date check

    Raises:
        ValidationError: With the reason of the first failing check
    """
    checks = (
        lambda: check_interval(draft, today),
        lambda: check_category_permitted(draft, actor),
        lambda: check_occupant_details(draft, channel),
        lambda: check_officer_details(draft, channel),
        lambda: check_relation(draft),
    )
    for check in checks:
        is_valid, error = check()
        if not is_valid:
            raise ValidationError(error)
