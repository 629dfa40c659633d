"""
Resource availability resolution.

A booking blocks its resource for [check_in, check_out) unless it is rejected
or cancelled. Bookings without a bound resource block nothing.
"""

from datetime import datetime

from database import get_db
from utils.messages import get_message
from .booking import RELEASING_STATUSES, format_timestamp
from .exceptions import ConflictError, NotFoundError, ValidationError


# =============================================================================
# OVERLAP
# =============================================================================

def get_conflicting_bookings(
    resource_ids: list,
    check_in: datetime,
    check_out: datetime,
    exclude_booking_id: int = None,
    cursor=None
) -> list:
    """
    Find bookings that occupy any of the resources during the interval.

    Args:
        resource_ids: Resource IDs to check
        check_in: Requested check-in
        check_out: Requested check-out
        exclude_booking_id: Booking to ignore (the one being allocated)
        cursor: Active transaction cursor

    Returns:
        list: Conflicting booking dicts (id, resource_id, check_in, check_out, status)
    """
    if not resource_ids:
        return []

    cur = cursor or get_db().cursor()

    placeholders_resources = ','.join('?' * len(resource_ids))
    placeholders_states = ','.join('?' * len(RELEASING_STATUSES))

    query = f'''
        SELECT id, resource_id, check_in, check_out, status, application_number
        FROM bookings
        WHERE resource_id IN ({placeholders_resources})
          AND check_in < ?
          AND check_out > ?
          AND status NOT IN ({placeholders_states})
    '''
    params = list(resource_ids) + [format_timestamp(check_out), format_timestamp(check_in)]
    params.extend(RELEASING_STATUSES)

    if exclude_booking_id:
        query += ' AND id != ?'
        params.append(exclude_booking_id)

    query += ' ORDER BY check_in'

    cur.execute(query, params)
    return [dict(row) for row in cur.fetchall()]


def is_resource_available(
    resource_id: int,
    check_in: datetime,
    check_out: datetime,
    exclude_booking_id: int = None,
    cursor=None
) -> bool:
    """True if no active booking overlaps the interval on this resource."""
    conflicts = get_conflicting_bookings(
        [resource_id], check_in, check_out,
        exclude_booking_id=exclude_booking_id, cursor=cursor
    )
    return len(conflicts) == 0


# =============================================================================
# RESOLVER
# =============================================================================

def get_available_resources(
    resource_kind: str,
    location: str,
    category: str,
    check_in: datetime,
    check_out: datetime,
    min_capacity: int = None,
    exclude_booking_id: int = None
) -> list:
    """
    Resources of a kind/location/category that are free for the interval.

    Blocked and inactive resources are skipped. An empty result is a normal
    outcome, not an error.

    Args:
        resource_kind: 'room' or 'service'
        location: Site code
        category: Room category or service type
        check_in: Requested check-in
        check_out: Requested check-out
        min_capacity: Minimum capacity (services)
        exclude_booking_id: Booking whose own allocation should not count

    Returns:
        list: Resource dicts ordered by floor then name
    """
    db = get_db()
    cursor = db.cursor()

    query = '''
        SELECT * FROM resources
        WHERE resource_kind = ?
          AND location = ?
          AND category = ?
          AND is_blocked = 0
          AND active = 1
    '''
    params = [resource_kind, location, category]

    if min_capacity:
        query += ' AND capacity >= ?'
        params.append(min_capacity)

    query += ' ORDER BY floor, name'

    cursor.execute(query, params)
    candidates = [dict(row) for row in cursor.fetchall()]

    if not candidates:
        return []

    conflicts = get_conflicting_bookings(
        [c['id'] for c in candidates], check_in, check_out,
        exclude_booking_id=exclude_booking_id, cursor=cursor
    )
    occupied = {c['resource_id'] for c in conflicts}

    return [c for c in candidates if c['id'] not in occupied]


def group_resources_by_floor(resources: list) -> dict:
    """
    Group resolver output by floor for presentation.

    Returns:
        dict: {floor: [resource, ...]} in first-seen order
    """
    groups = {}
    for resource in resources:
        groups.setdefault(resource.get('floor') or 'Unassigned', []).append(resource)
    return groups


# =============================================================================
# BIND-TIME CHECK
# =============================================================================

def assert_resource_bindable(
    cursor,
    resource_id: int,
    booking: dict,
    exclude_booking_id: int = None
) -> dict:
    """
    Re-check a resource against current state just before binding it.

    Must run inside the write transaction that performs the bind.

    Args:
        cursor: Active transaction cursor
        resource_id: Resource chosen by the actor
        booking: Dict with booking_type, location, category, check_in,
                 check_out (datetime) and optional guest_count
        exclude_booking_id: Booking being allocated

    Returns:
        dict: The resource row

    Raises:
        NotFoundError: Unknown or inactive resource
        ValidationError: Resource kind/location/category does not match
        ConflictError: Resource blocked or overlapping an active booking
    """
    cursor.execute('SELECT * FROM resources WHERE id = ?', (resource_id,))
    row = cursor.fetchone()
    if not row or not row['active']:
        raise NotFoundError(get_message('resource_not_found'), resource_id=resource_id)
    resource = dict(row)

    kind = booking['booking_type']
    if (resource['resource_kind'] != kind
            or resource['location'] != booking['location']
            or resource['category'] != booking['category']):
        raise ValidationError(get_message('resource_mismatch', kind=kind))

    guest_count = booking.get('guest_count')
    if kind == 'service' and guest_count and (resource['capacity'] or 0) < guest_count:
        raise ValidationError(get_message('resource_mismatch', kind=kind))

    if resource['is_blocked']:
        raise ConflictError(get_message('resource_blocked_error', kind=kind), resource_id=resource_id)

    conflicts = get_conflicting_bookings(
        [resource_id], booking['check_in'], booking['check_out'],
        exclude_booking_id=exclude_booking_id, cursor=cursor
    )
    if conflicts:
        raise ConflictError(
            get_message('resource_unavailable', kind=kind),
            resource_id=resource_id,
            conflicting_booking_ids=[c['id'] for c in conflicts]
        )

    return resource
