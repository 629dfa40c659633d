"""
Booking vocabulary and serialization.
Fixed enumerations shared by the validator, the resolver and the state machine.
"""

from datetime import datetime

from utils.datetime_helpers import get_timezone


# =============================================================================
# VOCABULARY
# =============================================================================

BOOKING_TYPES = ('room', 'service')
BOOKING_FOR = ('Self', 'Guest')
BOOKING_CHANNELS = ('member', 'non_member')

RELATIONS = {
    'Self': ('Self', 'Spouse', 'Children', 'Parents'),
    'Guest': ('Batchmate', 'Friend', 'Relative', 'Acquaintance', 'Spouse'),
}

LOCATIONS = ('SPORTI-1', 'SPORTI-2')

CATEGORIES = {
    'room': ('Standard', 'VIP', 'Family'),
    'service': ('Conference Room', 'Main Function Hall'),
}

# location -> categories only privileged actors may book
GATED_CATEGORIES = {
    'SPORTI-2': ('VIP',),
}
PRIVILEGED_DESIGNATIONS = ('ADGP', 'DGP')

GENDERS = ('Male', 'Female', 'Other')

BOOKING_STATUSES = ('pending', 'confirmed', 'rejected', 'completed', 'cancelled')
PAYMENT_STATUSES = ('pending', 'paid', 'failed')

# Bookings in these states never occupy a resource
RELEASING_STATUSES = ('rejected', 'cancelled')

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'


# =============================================================================
# HELPERS
# =============================================================================

def format_timestamp(value: datetime) -> str:
    """Format a datetime the way it is stored in the database."""
    return value.strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value) -> datetime:
    """
    Parse a stored or client-supplied timestamp.

    Accepts datetime objects, 'YYYY-MM-DD' and ISO 8601 strings. Values with
    a UTC offset are converted to the venue timezone; the result is naive
    venue-local time.

    Raises:
        ValueError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
    else:
        raise ValueError(f'Invalid timestamp: {value!r}')
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(get_timezone())
    return parsed.replace(tzinfo=None, microsecond=0)


def booking_to_dict(row) -> dict:
    """
    Convert a bookings row to the public booking shape.

    Occupant and officer columns are folded into nested dicts.

    Args:
        row: sqlite3.Row or dict from the bookings table (optionally joined
             with resource_name / resource_floor)

    Returns:
        dict: Booking record
    """
    data = dict(row)
    booking = {
        'id': data['id'],
        'application_number': data.get('application_number'),
        'channel': data['channel'],
        'user_id': data.get('user_id'),
        'booking_type': data['booking_type'],
        'booking_for': data['booking_for'],
        'relation': data['relation'],
        'location': data['location'],
        'category': data['category'],
        'check_in': data['check_in'],
        'check_out': data['check_out'],
        'guest_count': data.get('guest_count'),
        'resource_id': data.get('resource_id'),
        'resource_name': data.get('resource_name'),
        'total_cost': data['total_cost'],
        'status': data['status'],
        'payment_status': data['payment_status'],
        'occupant_details': {
            'name': data['occupant_name'],
            'phone': data['occupant_phone'],
            'gender': data.get('occupant_gender'),
            'email': data.get('occupant_email'),
            'home_location': data['occupant_location'],
        },
        'officer_details': None,
        'remarks': data.get('remarks'),
        'created_by': data.get('created_by'),
        'created_at': data.get('created_at'),
        'updated_at': data.get('updated_at'),
    }
    if data.get('officer_name'):
        booking['officer_details'] = {
            'name': data['officer_name'],
            'designation': data.get('officer_designation'),
            'phone': data.get('officer_phone'),
            'email': data.get('officer_email'),
            'gender': data.get('officer_gender'),
        }
    return booking
