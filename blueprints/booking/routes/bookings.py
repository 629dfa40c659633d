"""
Booking API routes: submission, preview pricing, admin allocation and
lifecycle actions.

Model and service functions raise BookingError subclasses; the app-level
error handlers turn them into JSON responses.
"""

from flask import abort, current_app, request
from flask_login import login_required, current_user

from blueprints.booking.services.allocation_service import (
    submit_booking, quote_booking, get_allocation_candidates, assign_and_confirm
)
from models.booking import BOOKING_STATUSES
from models.booking_crud import get_booking_by_id, get_booking_by_application_number, list_bookings
from models.booking_draft import BookingDraft
from models.booking_state import (
    change_booking_status, reallocate_booking, check_in_booking, check_out_booking,
    set_payment_status, get_status_history
)
from models.exceptions import ValidationError
from utils.api_response import api_success, api_error
from utils.datetime_helpers import get_today
from utils.decorators import role_required
from utils.messages import get_message
from utils.validators import sanitize_input


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def _require_resource_id(data: dict) -> int:
    resource_id = data.get('resource_id')
    try:
        return int(resource_id)
    except (TypeError, ValueError):
        raise ValidationError('resource_id is required')


def register_routes(bp):
    """Register booking API routes on the blueprint."""

    # ============================================================================
    # SUBMISSION
    # ============================================================================

    @bp.route('/bookings', methods=['POST'])
    def create_booking_route():
        """
        Submit a booking request.

        Anonymous callers book on the non-member channel and receive an
        application number. Self and Batchmate bookings must carry a
        resource_id; other guests are queued for allocation.
        """
        draft = BookingDraft.from_dict(_json_body())
        result = submit_booking(draft, actor=current_user, today=get_today())
        booking = result['booking']

        if booking['application_number']:
            message = get_message('booking_created_non_member', number=booking['application_number'])
        else:
            message = get_message('booking_created')

        return api_success(
            data=booking,
            message=message,
            status=201,
            allocation=result['allocation']
        )

    @bp.route('/bookings/quote', methods=['POST'])
    def quote_booking_route():
        """Preview the price of a draft against a selected resource."""
        data = _json_body()
        draft = BookingDraft.from_dict(data)
        return api_success(data=quote_booking(draft, _require_resource_id(data)))

    # ============================================================================
    # READ
    # ============================================================================

    @bp.route('/bookings', methods=['GET'])
    @login_required
    def list_bookings_route():
        """
        List bookings with filters and pagination.

        Administrators see every booking; members only their own.
        """
        args = request.args
        per_page = args.get('per_page', current_app.config['ITEMS_PER_PAGE'], type=int)
        result = list_bookings(
            status=args.get('status'),
            payment_status=args.get('payment_status'),
            booking_type=args.get('booking_type'),
            location=args.get('location'),
            channel=args.get('channel'),
            user_id=None if current_user.is_admin else current_user.id,
            search=args.get('search', '').strip() or None,
            date_from=args.get('date_from'),
            date_to=args.get('date_to'),
            page=args.get('page', 1, type=int),
            per_page=max(1, min(per_page, current_app.config['MAX_ITEMS_PER_PAGE']))
        )
        return api_success(data=result)

    @bp.route('/bookings/<int:booking_id>', methods=['GET'])
    @login_required
    def booking_detail(booking_id):
        """Booking details for its owner or an administrator."""
        booking = get_booking_by_id(booking_id)
        if not current_user.is_admin and booking['user_id'] != current_user.id:
            abort(403)
        return api_success(data=booking)

    @bp.route('/bookings/application/<application_number>', methods=['GET'])
    def booking_by_application(application_number):
        """Status lookup for non-member applicants."""
        return api_success(data=get_booking_by_application_number(application_number))

    @bp.route('/bookings/<int:booking_id>/history', methods=['GET'])
    @login_required
    @role_required('admin')
    def booking_history(booking_id):
        """Status, payment, occupancy and resource change history."""
        return api_success(data=get_status_history(booking_id))

    # ============================================================================
    # ADMIN ALLOCATION AND LIFECYCLE
    # ============================================================================

    @bp.route('/bookings/<int:booking_id>/candidates', methods=['GET'])
    @login_required
    @role_required('admin')
    def booking_candidates(booking_id):
        """Resources an administrator may assign to this booking."""
        return api_success(data=get_allocation_candidates(booking_id))

    @bp.route('/bookings/<int:booking_id>/status', methods=['PUT'])
    @login_required
    @role_required('admin')
    def update_booking_status(booking_id):
        """
        Change booking status.

        Request JSON:
            {"status": "confirmed", "remarks": "...", "resource_id": 3}

        Confirming with resource_id binds and prices the booking atomically.
        """
        data = _json_body()
        new_status = data.get('status')
        if new_status not in BOOKING_STATUSES:
            return api_error(f'Invalid status: {new_status}', status=400)

        remarks = sanitize_input(data.get('remarks'), max_length=500)
        if new_status == 'confirmed' and data.get('resource_id') is not None:
            booking = assign_and_confirm(booking_id, _require_resource_id(data),
                                         current_user.username, remarks)
        else:
            booking = change_booking_status(booking_id, new_status, current_user.username, remarks)

        return api_success(data=booking, message=get_message('booking_status_updated', status=new_status))

    @bp.route('/bookings/<int:booking_id>/resource', methods=['PUT'])
    @login_required
    @role_required('admin')
    def reallocate_booking_route(booking_id):
        """Move a pending or confirmed booking to another resource."""
        data = _json_body()
        booking = reallocate_booking(booking_id, _require_resource_id(data), current_user.username,
                                     sanitize_input(data.get('remarks'), max_length=500))
        return api_success(data=booking, message=get_message('booking_reallocated'))

    @bp.route('/bookings/<int:booking_id>/payment', methods=['PUT'])
    @login_required
    @role_required('admin')
    def update_payment_status(booking_id):
        """Mark payment as paid or failed."""
        data = _json_body()
        payment_status = data.get('payment_status')
        booking = set_payment_status(booking_id, payment_status, current_user.username,
                                     sanitize_input(data.get('notes'), max_length=500))
        return api_success(data=booking, message=get_message('payment_status_updated', status=payment_status))

    @bp.route('/bookings/<int:booking_id>/checkin', methods=['PUT'])
    @login_required
    @role_required('admin')
    def check_in(booking_id):
        """Record arrival; repeating it is harmless."""
        booking = check_in_booking(booking_id, current_user.username)
        return api_success(data=booking, message=get_message('checked_in'))

    @bp.route('/bookings/<int:booking_id>/checkout', methods=['PUT'])
    @login_required
    @role_required('admin')
    def check_out(booking_id):
        """Record departure; repeating it is harmless."""
        booking = check_out_booking(booking_id, current_user.username)
        return api_success(data=booking, message=get_message('checked_out'))
