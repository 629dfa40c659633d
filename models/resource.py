"""
Bookable resource data access functions.
Rooms and services share one table, discriminated by resource_kind.
"""

import logging

from database import get_db
from utils.validators import validate_rate, validate_room_number
from .booking import BOOKING_TYPES, LOCATIONS, CATEGORIES
from .exceptions import ValidationError, NotFoundError

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('name', 'location', 'category', 'floor', 'capacity',
                   'member_rate', 'guest_rate', 'is_blocked', 'active')


def get_resources(
    resource_kind: str = None,
    location: str = None,
    category: str = None,
    floor: str = None,
    include_blocked: bool = True,
    active_only: bool = True
) -> list:
    """
    Get resources matching the filters.

    Args:
        resource_kind: 'room' or 'service' (optional)
        location: Site code (optional)
        category: Room category or service type (optional)
        floor: Floor label (optional)
        include_blocked: If False, skip blocked resources
        active_only: If True, only return active resources

    Returns:
        List of resource dicts
    """
    db = get_db()
    cursor = db.cursor()

    query = 'SELECT * FROM resources WHERE 1=1'
    params = []

    if resource_kind:
        query += ' AND resource_kind = ?'
        params.append(resource_kind)

    if location:
        query += ' AND location = ?'
        params.append(location)

    if category:
        query += ' AND category = ?'
        params.append(category)

    if floor:
        query += ' AND floor = ?'
        params.append(floor)

    if not include_blocked:
        query += ' AND is_blocked = 0'

    if active_only:
        query += ' AND active = 1'

    query += ' ORDER BY resource_kind, location, name'

    cursor.execute(query, params)
    return [dict(row) for row in cursor.fetchall()]


def get_resource_by_id(resource_id: int, cursor=None) -> dict:
    """
    Get resource by ID.

    Args:
        resource_id: Resource ID
        cursor: Active transaction cursor

    Returns:
        Resource dict or None if not found
    """
    cur = cursor or get_db().cursor()
    cur.execute('SELECT * FROM resources WHERE id = ?', (resource_id,))
    row = cur.fetchone()
    return dict(row) if row else None


def _validate_resource(data: dict) -> None:
    """Validate a complete resource definition."""
    kind = data.get('resource_kind')
    if kind not in BOOKING_TYPES:
        raise ValidationError('Resource kind must be room or service')
    if not data.get('name'):
        raise ValidationError('Resource name is required')
    if kind == 'room' and not validate_room_number(data['name']):
        raise ValidationError('Invalid room number')
    if data.get('location') not in LOCATIONS:
        raise ValidationError('Please select a valid SPORTI location')
    if data.get('category') not in CATEGORIES[kind]:
        raise ValidationError(f"Invalid {kind} type: {data.get('category')}")
    if kind == 'room' and not data.get('floor'):
        raise ValidationError('Floor is required for rooms')
    if kind == 'service':
        try:
            capacity = int(data.get('capacity') or 0)
        except (TypeError, ValueError):
            capacity = 0
        if capacity < 1:
            raise ValidationError('Service capacity must be at least 1')
    for rate_field in ('member_rate', 'guest_rate'):
        if not validate_rate(data.get(rate_field)):
            raise ValidationError(f'{rate_field} must be a non-negative whole amount')


def create_resource(
    resource_kind: str,
    name: str,
    location: str,
    category: str,
    member_rate: int,
    guest_rate: int,
    floor: str = None,
    capacity: int = None,
    is_blocked: bool = False
) -> int:
    """
    Create a room or service.

    Returns:
        New resource ID

    Raises:
        ValidationError: If the definition is incomplete or a duplicate
    """
    data = {
        'resource_kind': resource_kind, 'name': (name or '').strip(), 'location': location,
        'category': category, 'floor': floor, 'capacity': capacity,
        'member_rate': member_rate, 'guest_rate': guest_rate,
    }
    _validate_resource(data)

    db = get_db()
    cursor = db.cursor()

    cursor.execute('''
        SELECT id FROM resources
        WHERE resource_kind = ? AND location = ? AND name = ?
    ''', (resource_kind, location, data['name']))
    if cursor.fetchone():
        raise ValidationError(f"{resource_kind.capitalize()} {data['name']} already exists at {location}")

    cursor.execute('''
        INSERT INTO resources (resource_kind, name, location, category, floor, capacity,
                               member_rate, guest_rate, is_blocked)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
    ''', (resource_kind, data['name'], location, category, floor,
          int(capacity) if capacity else None, int(member_rate), int(guest_rate),
          1 if is_blocked else 0))
    db.commit()

    logger.info('Created %s %s at %s (id=%s)', resource_kind, data['name'], location, cursor.lastrowid)
    return cursor.lastrowid


def update_resource(resource_id: int, **kwargs) -> dict:
    """
    Update resource fields.

    Rate changes never touch existing bookings; prices are frozen per booking.

    Args:
        resource_id: Resource ID
        **kwargs: Fields to update (see EDITABLE_FIELDS)

    Returns:
        Updated resource dict

    Raises:
        NotFoundError: If the resource does not exist
        ValidationError: If the resulting definition is invalid
    """
    existing = get_resource_by_id(resource_id)
    if not existing:
        raise NotFoundError('Resource not found')

    updates = {k: v for k, v in kwargs.items() if k in EDITABLE_FIELDS}
    if not updates:
        return existing

    merged = dict(existing)
    merged.update(updates)
    _validate_resource(merged)

    if 'is_blocked' in updates:
        updates['is_blocked'] = 1 if updates['is_blocked'] else 0
    if 'active' in updates:
        updates['active'] = 1 if updates['active'] else 0

    set_clause = ', '.join(f'{field} = ?' for field in updates)
    values = list(updates.values()) + [resource_id]

    db = get_db()
    cursor = db.cursor()
    cursor.execute(f'''
        UPDATE resources
        SET {set_clause}, updated_at = CURRENT_TIMESTAMP
        WHERE id = ?
    ''', values)
    db.commit()

    return get_resource_by_id(resource_id)


def set_resource_blocked(resource_id: int, blocked: bool) -> dict:
    """
    Block or unblock a resource.

    Existing bookings keep their allocation; only future availability changes.
    """
    resource = update_resource(resource_id, is_blocked=bool(blocked))
    logger.info('Resource %s %s', resource_id, 'blocked' if blocked else 'unblocked')
    return resource
