"""
Booking CRUD operations.
Handles creation, lookup and listing of bookings. Status changes live in
booking_state.py; bookings are never deleted.
"""

import logging
from datetime import date

from flask import current_app

from database import get_db
from utils.messages import get_message
from utils.datetime_helpers import get_today
from .booking import BOOKING_CHANNELS, booking_to_dict, format_timestamp
from .booking_availability import assert_resource_bindable
from .booking_draft import BookingDraft
from .exceptions import NotFoundError
from .pricing import calculate_total_cost

logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION NUMBER GENERATION
# =============================================================================

def generate_application_number(cursor=None, issue_date: date = None, max_retries: int = 5) -> str:
    """
    Generate a unique application number for a non-member booking.

    Format: PPYYMMDDNNN where:
    - PP = APPLICATION_NUMBER_PREFIX (config)
    - YYMMDD = Issue date
    - NNN = Daily sequential (001-999)

    Example: SP250116001 = First application on Jan 16, 2025

    Args:
        cursor: Active transaction cursor
        issue_date: Date of issue (default: today)
        max_retries: Max attempts on collision

    Returns:
        str: Unique application number

    Raises:
        ValueError: If unable to generate unique number
    """
    prefix = current_app.config.get('APPLICATION_NUMBER_PREFIX', 'SP')
    issue_date = issue_date or get_today()
    date_prefix = f"{prefix}{issue_date.strftime('%y%m%d')}"

    cur = cursor or get_db().cursor()

    for attempt in range(max_retries):
        cur.execute('''
            SELECT MAX(CAST(SUBSTR(application_number, ?, 3) AS INTEGER)) as max_seq
            FROM bookings
            WHERE application_number LIKE ?
        ''', (len(date_prefix) + 1, f'{date_prefix}%'))

        result = cur.fetchone()
        next_seq = (result['max_seq'] or 0) + 1 + attempt

        if next_seq > 999:
            raise ValueError(f"Daily application limit (999) reached for {issue_date.isoformat()}")

        application_number = f"{date_prefix}{next_seq:03d}"

        cur.execute('SELECT id FROM bookings WHERE application_number = ?', (application_number,))
        if not cur.fetchone():
            return application_number

    raise ValueError("Could not generate a unique application number")


# =============================================================================
# HISTORY
# =============================================================================

def record_history(cursor, booking_id: int, field: str, action: str,
                   from_value: str = None, to_value: str = None,
                   changed_by: str = None, notes: str = '') -> None:
    """Append a status/payment/occupancy/resource entry to the booking history."""
    cursor.execute('''
        INSERT INTO booking_status_history
        (booking_id, field, action, from_value, to_value, changed_by, notes, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
    ''', (booking_id, field, action, from_value, to_value, changed_by, notes))


# =============================================================================
# CREATE
# =============================================================================

def create_booking(
    draft: BookingDraft,
    channel: str,
    user_id: int = None,
    created_by: str = None,
    bind_resource: bool = False
) -> dict:
    """
    Persist a validated draft as a pending booking.

    With ``bind_resource`` the draft's resource is re-checked against current
    bookings inside the insert transaction and priced server-side. Without it
    the booking waits for an administrator: no resource, total_cost 0.

    Args:
        draft: Validated booking draft
        channel: 'member' or 'non_member'
        user_id: Booking member (member channel)
        created_by: Username or 'guest'
        bind_resource: Bind draft.resource_id now (direct allocation)

    Returns:
        dict: Created booking

    Raises:
        ConflictError: Selected resource lost availability
        ValidationError: Selected resource does not match the draft
        NotFoundError: Selected resource does not exist
    """
    if channel not in BOOKING_CHANNELS:
        raise ValueError(f"Unknown booking channel: {channel}")

    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')

        resource_id = None
        total_cost = 0
        if bind_resource:
            resource = assert_resource_bindable(cursor, draft.resource_id, {
                'booking_type': draft.booking_type,
                'location': draft.location,
                'category': draft.category,
                'check_in': draft.check_in,
                'check_out': draft.check_out,
                'guest_count': draft.guest_count,
            })
            resource_id = resource['id']
            total_cost = calculate_total_cost(
                resource, draft.check_in, draft.check_out, draft.booking_for, draft.relation
            )

        application_number = None
        if channel == 'non_member':
            application_number = generate_application_number(cursor)

        occupant = draft.occupant
        officer = draft.officer

        cursor.execute('''
            INSERT INTO bookings (
                application_number, channel, user_id,
                booking_type, booking_for, relation, location, category,
                check_in, check_out, guest_count, resource_id, total_cost,
                status, payment_status,
                occupant_name, occupant_phone, occupant_gender, occupant_email, occupant_location,
                officer_name, officer_designation, officer_phone, officer_email, officer_gender,
                remarks, created_by, created_at
            ) VALUES (
                ?, ?, ?,
                ?, ?, ?, ?, ?,
                ?, ?, ?, ?, ?,
                'pending', 'pending',
                ?, ?, ?, ?, ?,
                ?, ?, ?, ?, ?,
                ?, ?, CURRENT_TIMESTAMP
            )
        ''', (
            application_number, channel, user_id,
            draft.booking_type, draft.booking_for, draft.relation, draft.location, draft.category,
            format_timestamp(draft.check_in), format_timestamp(draft.check_out),
            draft.guest_count, resource_id, total_cost,
            occupant.name, occupant.phone, occupant.gender, occupant.email, occupant.home_location,
            officer.name if officer else None,
            officer.designation if officer else None,
            officer.phone if officer else None,
            officer.email if officer else None,
            officer.gender if officer else None,
            draft.remarks or None, created_by
        ))

        booking_id = cursor.lastrowid

        record_history(cursor, booking_id, 'status', 'created', None, 'pending', created_by,
                       'Booking submitted')
        if resource_id:
            record_history(cursor, booking_id, 'resource', 'bound', None, str(resource_id),
                           created_by, 'Selected at submission')

        db.commit()

    except Exception:
        db.rollback()
        raise

    logger.info('Booking %s created (channel=%s, resource=%s, cost=%s)',
                booking_id, channel, resource_id, total_cost)
    return get_booking_by_id(booking_id)


# =============================================================================
# READ
# =============================================================================

BOOKING_SELECT = '''
    SELECT b.*, r.name as resource_name, r.floor as resource_floor
    FROM bookings b
    LEFT JOIN resources r ON b.resource_id = r.id
'''


def get_booking_row(booking_id: int, cursor=None) -> dict:
    """
    Get the raw booking row.

    Raises:
        NotFoundError: If the booking does not exist
    """
    cur = cursor or get_db().cursor()
    cur.execute('SELECT * FROM bookings WHERE id = ?', (booking_id,))
    row = cur.fetchone()
    if not row:
        raise NotFoundError(get_message('booking_not_found'), booking_id=booking_id)
    return dict(row)


def get_booking_by_id(booking_id: int) -> dict:
    """
    Get booking by ID.

    Args:
        booking_id: Booking ID

    Returns:
        dict: Booking

    Raises:
        NotFoundError: If the booking does not exist
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute(BOOKING_SELECT + ' WHERE b.id = ?', (booking_id,))
    row = cursor.fetchone()
    if not row:
        raise NotFoundError(get_message('booking_not_found'), booking_id=booking_id)
    return booking_to_dict(row)


def get_booking_by_application_number(application_number: str) -> dict:
    """
    Get a non-member booking by its application number.

    Raises:
        NotFoundError: If no booking carries that number
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute(BOOKING_SELECT + ' WHERE b.application_number = ?',
                   ((application_number or '').strip().upper(),))
    row = cursor.fetchone()
    if not row:
        raise NotFoundError(get_message('booking_not_found'), application_number=application_number)
    return booking_to_dict(row)


def list_bookings(
    status: str = None,
    payment_status: str = None,
    booking_type: str = None,
    location: str = None,
    channel: str = None,
    user_id: int = None,
    search: str = None,
    date_from: str = None,
    date_to: str = None,
    page: int = 1,
    per_page: int = 20
) -> dict:
    """
    Get filtered bookings with pagination.

    Args:
        status: Booking status filter
        payment_status: Payment status filter
        booking_type: 'room' or 'service'
        location: Site code
        channel: 'member' or 'non_member'
        user_id: Only this member's bookings
        search: Occupant name/phone or application number
        date_from: Stays checking out on or after this date (YYYY-MM-DD)
        date_to: Stays checking in on or before this date (YYYY-MM-DD)
        page: Page number
        per_page: Items per page

    Returns:
        dict: {items: list, total: int, page: int, per_page: int, pages: int}
    """
    db = get_db()
    cursor = db.cursor()

    where = ' WHERE 1=1'
    params = []

    filters = (
        ('b.status', status),
        ('b.payment_status', payment_status),
        ('b.booking_type', booking_type),
        ('b.location', location),
        ('b.channel', channel),
        ('b.user_id', user_id),
    )
    for column, value in filters:
        if value:
            where += f' AND {column} = ?'
            params.append(value)

    if date_from:
        where += ' AND b.check_out >= ?'
        params.append(date_from)

    if date_to:
        where += ' AND b.check_in <= ?'
        params.append(f'{date_to} 23:59:59')

    if search:
        where += ''' AND (
            b.occupant_name LIKE ? OR b.occupant_phone LIKE ? OR b.application_number LIKE ?
        )'''
        search_param = f'%{search}%'
        params.extend([search_param, search_param, search_param])

    cursor.execute('SELECT COUNT(*) as total FROM bookings b' + where, params)
    total = cursor.fetchone()['total']

    page = max(1, page)
    query = BOOKING_SELECT + where + ' ORDER BY b.check_in DESC, b.id DESC LIMIT ? OFFSET ?'
    cursor.execute(query, params + [per_page, (page - 1) * per_page])

    return {
        'items': [booking_to_dict(row) for row in cursor.fetchall()],
        'total': total,
        'page': page,
        'per_page': per_page,
        'pages': (total + per_page - 1) // per_page
    }
