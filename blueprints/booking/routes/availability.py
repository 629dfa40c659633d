"""
Availability API routes.
Public lookups of free rooms and services for a requested interval.
"""

from flask import current_app, request

from models.booking import LOCATIONS, CATEGORIES, parse_timestamp
from models.booking_availability import get_available_resources, group_resources_by_floor
from models.exceptions import ValidationError
from utils.api_response import api_success
from utils.messages import get_message


def _read_availability_query(resource_kind: str) -> dict:
    """
    Parse and check availability query parameters.

    Raises:
        ValidationError: Missing or malformed parameters
    """
    args = request.args
    location = args.get('location', '').strip()
    category = (args.get('category') or args.get(f'{resource_kind}_type') or '').strip()

    if location not in LOCATIONS:
        raise ValidationError(get_message('invalid_location'))
    if category not in CATEGORIES[resource_kind]:
        raise ValidationError(get_message('invalid_category', kind=resource_kind, location=location))

    try:
        check_in = parse_timestamp(args.get('check_in'))
        check_out = parse_timestamp(args.get('check_out'))
    except ValueError:
        raise ValidationError('Invalid check-in or check-out date')

    if check_in >= check_out:
        raise ValidationError(get_message('invalid_interval'))

    guest_count = args.get('guest_count', type=int)
    if guest_count is not None and guest_count < 1:
        raise ValidationError(get_message('invalid_guest_count'))

    return {
        'location': location,
        'category': category,
        'check_in': check_in,
        'check_out': check_out,
        'guest_count': guest_count,
    }


def register_routes(bp):
    """Register availability routes on the blueprint."""

    def _available(resource_kind: str):
        query = _read_availability_query(resource_kind)
        resources = get_available_resources(
            resource_kind,
            query['location'],
            query['category'],
            query['check_in'],
            query['check_out'],
            min_capacity=query['guest_count'] if resource_kind == 'service' else None
        )
        return api_success(data={
            'resources': resources,
            'by_floor': group_resources_by_floor(resources),
            'count': len(resources),
        })

    @bp.route('/rooms/available')
    def available_rooms():
        """
        Free rooms for a location, category and interval.

        Query: location, category (or room_type), check_in, check_out
        """
        return _available('room')

    @bp.route('/services/available')
    def available_services():
        """
        Free services for a location, type and interval.

        Query: location, category (or service_type), check_in, check_out, guest_count
        """
        return _available('service')

    @bp.route('/health')
    def health():
        """Liveness probe."""
        return api_success(data={
            'status': 'ok',
            'app': current_app.config.get('APP_NAME'),
            'version': current_app.config.get('APP_VERSION'),
        })
