"""
Booking lifecycle state management.
Handles status transitions, resource binding on confirmation, occupancy
events, payment status and history.

Lifecycle:
    pending -> confirmed | rejected
    confirmed -> completed | cancelled
    completed -> cancelled
    rejected, cancelled: terminal
"""

import logging

from database import get_db
from utils.messages import get_message
from .booking import PAYMENT_STATUSES, parse_timestamp
from .booking_availability import assert_resource_bindable
from .booking_crud import get_booking_by_id, get_booking_row, record_history
from .exceptions import TransitionError, ValidationError
from .pricing import calculate_total_cost

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

VALID_TRANSITIONS = {
    'pending': ('confirmed', 'rejected'),
    'confirmed': ('completed', 'cancelled'),
    'completed': ('cancelled',),
    'rejected': (),
    'cancelled': (),
}

PAYMENT_TRANSITIONS = {
    'pending': ('paid', 'failed'),
    'paid': (),
    'failed': (),
}

# Statuses that still allow moving the booking to another resource
REALLOCATABLE_STATUSES = ('pending', 'confirmed')


# =============================================================================
# TRANSITION RULES
# =============================================================================

def get_allowed_transitions(current_status: str) -> tuple:
    """Statuses reachable from ``current_status`` in one step."""
    return VALID_TRANSITIONS.get(current_status, ())


def validate_status_transition(current_status: str, new_status: str) -> None:
    """
    Check a status change against the lifecycle.

    Raises:
        TransitionError: If the change is not an allowed edge
    """
    if new_status not in get_allowed_transitions(current_status):
        raise TransitionError(
            get_message('invalid_transition', current=current_status, new=new_status),
            current_status=current_status,
            requested_status=new_status
        )


def _booking_binding_view(booking: dict) -> dict:
    """Fields assert_resource_bindable needs, with parsed timestamps."""
    return {
        'booking_type': booking['booking_type'],
        'location': booking['location'],
        'category': booking['category'],
        'check_in': parse_timestamp(booking['check_in']),
        'check_out': parse_timestamp(booking['check_out']),
        'guest_count': booking.get('guest_count'),
    }


def _price_for(resource: dict, booking: dict) -> int:
    return calculate_total_cost(
        resource,
        parse_timestamp(booking['check_in']),
        parse_timestamp(booking['check_out']),
        booking['booking_for'],
        booking['relation']
    )


# =============================================================================
# STATUS CHANGES
# =============================================================================

def change_booking_status(
    booking_id: int,
    new_status: str,
    changed_by: str,
    remarks: str = '',
    resource_id: int = None
) -> dict:
    """
    Move a booking along its lifecycle.

    Confirming with ``resource_id`` on an unbound booking binds the resource
    and computes the price in the same transaction, after re-checking
    availability. A bound booking keeps its resource; passing a different
    one is rejected (use reallocate_booking).

    Args:
        booking_id: Booking ID
        new_status: Target status
        changed_by: Username making the change
        remarks: Optional remarks stored on the booking and history
        resource_id: Resource to bind when confirming

    Returns:
        dict: Updated booking

    Raises:
        NotFoundError: Unknown booking or resource
        TransitionError: Edge not allowed, or confirm preconditions unmet
        ConflictError: Resource taken or blocked at bind time
        ValidationError: Resource does not match the booking
    """
    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')

        booking = get_booking_row(booking_id, cursor)
        current_status = booking['status']
        validate_status_transition(current_status, new_status)

        bound_resource_id = booking['resource_id']
        total_cost = booking['total_cost'] or 0

        if new_status == 'confirmed':
            kind = booking['booking_type']

            if resource_id and bound_resource_id and int(resource_id) != bound_resource_id:
                raise TransitionError(get_message('already_allocated'), resource_id=bound_resource_id)

            if not bound_resource_id and not resource_id:
                raise TransitionError(get_message('resource_required_to_confirm', kind=kind))

            # A bound resource was checked when it was bound; blocking it
            # later only affects new allocations.
            if not bound_resource_id:
                resource = assert_resource_bindable(
                    cursor, int(resource_id), _booking_binding_view(booking),
                    exclude_booking_id=booking_id
                )
                total_cost = _price_for(resource, booking)
                bound_resource_id = resource['id']
                record_history(cursor, booking_id, 'resource', 'bound', None,
                               str(bound_resource_id), changed_by, remarks)

            if total_cost <= 0:
                raise TransitionError(get_message('price_required_to_confirm'))

        cursor.execute('''
            UPDATE bookings
            SET status = ?,
                resource_id = ?,
                total_cost = ?,
                remarks = COALESCE(NULLIF(?, ''), remarks),
                updated_at = CURRENT_TIMESTAMP
            WHERE id = ?
        ''', (new_status, bound_resource_id, total_cost, remarks or '', booking_id))

        record_history(cursor, booking_id, 'status', 'changed', current_status, new_status,
                       changed_by, remarks)

        db.commit()

    except Exception:
        db.rollback()
        raise

    logger.info('Booking %s: %s -> %s by %s', booking_id, current_status, new_status, changed_by)
    return get_booking_by_id(booking_id)


def reallocate_booking(booking_id: int, resource_id: int, changed_by: str, remarks: str = '') -> dict:
    """
    Move a pending or confirmed booking to another resource.

    The overlap check ignores the booking itself. The price is recomputed
    only while pending; a confirmed booking keeps its agreed cost.

    Raises:
        NotFoundError: Unknown booking or resource
        TransitionError: Booking is completed or terminal
        ConflictError: New resource taken or blocked
        ValidationError: New resource does not match the booking
    """
    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')

        booking = get_booking_row(booking_id, cursor)
        status = booking['status']
        if status not in REALLOCATABLE_STATUSES:
            raise TransitionError(
                get_message('invalid_transition', current=status, new='reallocated'),
                current_status=status
            )

        resource = assert_resource_bindable(
            cursor, int(resource_id), _booking_binding_view(booking),
            exclude_booking_id=booking_id
        )

        total_cost = booking['total_cost'] or 0
        if status == 'pending':
            total_cost = _price_for(resource, booking)

        cursor.execute('''
            UPDATE bookings
            SET resource_id = ?,
                total_cost = ?,
                updated_at = CURRENT_TIMESTAMP
            WHERE id = ?
        ''', (resource['id'], total_cost, booking_id))

        previous = booking['resource_id']
        record_history(cursor, booking_id, 'resource', 'reallocated',
                       str(previous) if previous else None, str(resource['id']),
                       changed_by, remarks)

        db.commit()

    except Exception:
        db.rollback()
        raise

    logger.info('Booking %s reallocated to resource %s by %s', booking_id, resource['id'], changed_by)
    return get_booking_by_id(booking_id)


# =============================================================================
# OCCUPANCY EVENTS
# =============================================================================

def _has_occupancy_event(cursor, booking_id: int, action: str) -> bool:
    cursor.execute('''
        SELECT 1 FROM booking_status_history
        WHERE booking_id = ? AND field = 'occupancy' AND action = ?
    ''', (booking_id, action))
    return cursor.fetchone() is not None


def check_in_booking(booking_id: int, changed_by: str) -> dict:
    """
    Record guest arrival.

    A confirmed booking becomes completed. Repeating the call on a completed
    booking is a no-op.

    Raises:
        TransitionError: Booking is pending, rejected or cancelled
    """
    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')

        booking = get_booking_row(booking_id, cursor)
        status = booking['status']

        if status == 'completed':
            db.commit()
            return get_booking_by_id(booking_id)

        validate_status_transition(status, 'completed')

        cursor.execute('''
            UPDATE bookings
            SET status = 'completed', updated_at = CURRENT_TIMESTAMP
            WHERE id = ?
        ''', (booking_id,))
        record_history(cursor, booking_id, 'status', 'changed', status, 'completed',
                       changed_by, 'Checked in')
        record_history(cursor, booking_id, 'occupancy', 'check_in', None, None, changed_by)

        db.commit()

    except Exception:
        db.rollback()
        raise

    logger.info('Booking %s checked in by %s', booking_id, changed_by)
    return get_booking_by_id(booking_id)


def check_out_booking(booking_id: int, changed_by: str) -> dict:
    """
    Record guest departure.

    A confirmed booking becomes completed. On a completed booking the
    check-out is recorded once; further calls are no-ops.

    Raises:
        TransitionError: Booking is pending, rejected or cancelled
    """
    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')

        booking = get_booking_row(booking_id, cursor)
        status = booking['status']

        if status == 'confirmed':
            cursor.execute('''
                UPDATE bookings
                SET status = 'completed', updated_at = CURRENT_TIMESTAMP
                WHERE id = ?
            ''', (booking_id,))
            record_history(cursor, booking_id, 'status', 'changed', status, 'completed',
                           changed_by, 'Checked out')
        elif status != 'completed':
            raise TransitionError(
                get_message('invalid_transition', current=status, new='completed'),
                current_status=status
            )

        if not _has_occupancy_event(cursor, booking_id, 'check_out'):
            record_history(cursor, booking_id, 'occupancy', 'check_out', None, None, changed_by)
            logger.info('Booking %s checked out by %s', booking_id, changed_by)

        db.commit()

    except Exception:
        db.rollback()
        raise

    return get_booking_by_id(booking_id)


# =============================================================================
# PAYMENT
# =============================================================================

def set_payment_status(booking_id: int, payment_status: str, changed_by: str, notes: str = '') -> dict:
    """
    Record the payment outcome.

    Payment is tracked independently of the booking status and moves only
    from pending to paid or failed.

    Raises:
        ValidationError: Unknown payment status
        TransitionError: Payment already settled
    """
    if payment_status not in PAYMENT_STATUSES:
        raise ValidationError(f'Invalid payment status: {payment_status}')

    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')

        booking = get_booking_row(booking_id, cursor)
        current = booking['payment_status']
        if payment_status not in PAYMENT_TRANSITIONS.get(current, ()):
            raise TransitionError(
                get_message('invalid_payment_transition', current=current, new=payment_status),
                current_status=current
            )

        cursor.execute('''
            UPDATE bookings
            SET payment_status = ?, updated_at = CURRENT_TIMESTAMP
            WHERE id = ?
        ''', (payment_status, booking_id))
        record_history(cursor, booking_id, 'payment', 'changed', current, payment_status,
                       changed_by, notes)

        db.commit()

    except Exception:
        db.rollback()
        raise

    logger.info('Booking %s payment %s -> %s by %s', booking_id, current, payment_status, changed_by)
    return get_booking_by_id(booking_id)


# =============================================================================
# HISTORY
# =============================================================================

def get_status_history(booking_id: int) -> list:
    """
    Get the change history of a booking, oldest first.

    Raises:
        NotFoundError: If the booking does not exist
    """
    db = get_db()
    cursor = db.cursor()
    get_booking_row(booking_id, cursor)

    cursor.execute('''
        SELECT id, field, action, from_value, to_value, changed_by, notes, created_at
        FROM booking_status_history
        WHERE booking_id = ?
        ORDER BY id
    ''', (booking_id,))
    return [dict(row) for row in cursor.fetchall()]
