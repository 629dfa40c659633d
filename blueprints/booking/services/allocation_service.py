"""
Allocation Service - Business logic for the two booking paths.

Handles:
- Channel resolution (member / non-member)
- Direct-allocation eligibility
- Submission: validate, then either bind the selected resource now (direct
  path) or queue the booking for an administrator (admin path)
- Preview pricing for the direct path
- Admin allocation: candidate lookup and atomic bind-and-confirm
"""

import logging
from dataclasses import replace
from datetime import date
from typing import Any, Dict, Optional

from models.booking_availability import (
    get_available_resources,
    group_resources_by_floor,
    is_resource_available,
)
from models.booking_crud import create_booking, get_booking_row
from models.booking_draft import BookingDraft
from models.booking_state import change_booking_status
from models.booking_validation import validate_booking_draft
from models.booking import parse_timestamp
from models.exceptions import NotFoundError, ValidationError
from models.pricing import calculate_total_cost, count_nights, get_payer_class, get_rate
from models.resource import get_resource_by_id
from utils.messages import get_message

logger = logging.getLogger(__name__)


def _is_authenticated(actor) -> bool:
    return actor is not None and getattr(actor, 'is_authenticated', False)


def resolve_channel(actor) -> str:
    """Authenticated callers book on the member channel, anonymous ones on non_member."""
    return 'member' if _is_authenticated(actor) else 'non_member'


def is_direct_allocation_eligible(actor, booking_for: str, relation: str) -> bool:
    """
    Decide who picks the resource.

    Eligible iff the actor is an admin, the booking is for Self, or the guest
    is a Batchmate. Everything else goes to the admin path.
    """
    if _is_authenticated(actor) and getattr(actor, 'is_admin', False):
        return True
    if booking_for == 'Self':
        return True
    return booking_for == 'Guest' and relation == 'Batchmate'


def submit_booking(draft: BookingDraft, actor=None, today: Optional[date] = None) -> Dict[str, Any]:
    """
    Validate and persist a booking request.

    Direct path: the selected resource is re-checked and priced on the server
    inside the insert transaction. A resource that lost availability since the
    preview fails with ConflictError; no other resource is substituted.

    Admin path: any client-selected resource is dropped; the booking is stored
    pending with no resource and zero cost.

    Args:
        draft: Booking draft from the client
        actor: Current user, or None for non-members
        today: Reference date for the past-date check

    Returns:
        dict: {'booking': dict, 'allocation': 'direct' | 'admin'}

    Raises:
        ValidationError: Draft rejected by the validator or no resource selected
        ConflictError: Selected resource no longer free
        NotFoundError: Selected resource does not exist
    """
    channel = resolve_channel(actor)
    validate_booking_draft(draft, actor=actor, channel=channel, today=today)

    user_id = actor.id if channel == 'member' else None
    created_by = actor.username if channel == 'member' else 'guest'

    if is_direct_allocation_eligible(actor, draft.booking_for, draft.relation):
        if draft.resource_id is None:
            raise ValidationError(get_message('resource_selection_required', kind=draft.booking_type))

        booking = create_booking(draft, channel, user_id=user_id, created_by=created_by,
                                 bind_resource=True)
        allocation = 'direct'
    else:
        draft = replace(draft, resource_id=None)
        booking = create_booking(draft, channel, user_id=user_id, created_by=created_by,
                                 bind_resource=False)
        allocation = 'admin'

    logger.info('Booking %s submitted on %s channel via %s path',
                booking['id'], channel, allocation)
    return {'booking': booking, 'allocation': allocation}


def quote_booking(draft: BookingDraft, resource_id: int) -> Dict[str, Any]:
    """
    Price a draft against a resource for preview.

    The figure is informational; the stored price is always recomputed on
    the server.

    Raises:
        ValidationError: Interval is not well-formed
        NotFoundError: Unknown resource
    """
    if draft.check_in >= draft.check_out:
        raise ValidationError(get_message('invalid_interval'))

    resource = get_resource_by_id(resource_id)
    if not resource or not resource['active']:
        raise NotFoundError(get_message('resource_not_found'), resource_id=resource_id)

    payer_class = get_payer_class(draft.booking_for, draft.relation)
    return {
        'resource_id': resource['id'],
        'nights': count_nights(draft.check_in, draft.check_out),
        'payer_class': payer_class,
        'rate': get_rate(resource, payer_class),
        'total_cost': calculate_total_cost(
            resource, draft.check_in, draft.check_out, draft.booking_for, draft.relation
        ),
        'available': bool(not resource['is_blocked'] and is_resource_available(
            resource['id'], draft.check_in, draft.check_out
        )),
    }


def get_allocation_candidates(booking_id: int) -> Dict[str, Any]:
    """
    Free resources matching a booking's own location, category and interval.

    The booking's current resource (if any) is reported as available to itself.

    Returns:
        dict: {'resources': list, 'by_floor': dict}

    Raises:
        NotFoundError: Unknown booking
    """
    booking = get_booking_row(booking_id)
    resources = get_available_resources(
        booking['booking_type'],
        booking['location'],
        booking['category'],
        parse_timestamp(booking['check_in']),
        parse_timestamp(booking['check_out']),
        min_capacity=booking['guest_count'] if booking['booking_type'] == 'service' else None,
        exclude_booking_id=booking_id
    )
    return {'resources': resources, 'by_floor': group_resources_by_floor(resources)}


def assign_and_confirm(booking_id: int, resource_id: int, changed_by: str, remarks: str = '') -> dict:
    """
    Bind a resource to a pending booking and confirm it in one transaction.

    If another administrator bound an overlapping booking to the same resource
    first, this raises ConflictError and leaves the booking pending.
    """
    return change_booking_status(booking_id, 'confirmed', changed_by,
                                 remarks=remarks, resource_id=resource_id)
