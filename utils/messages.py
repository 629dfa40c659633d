"""
Centralized user-facing messages.
All caller-visible text lives here for consistency.
"""

MESSAGES = {
    # Success messages
    'login_success': 'Welcome {name}',
    'logout_success': 'Signed out',
    'booking_created': 'Booking request submitted',
    'booking_created_non_member': 'Booking request submitted. Your application number is {number}',
    'booking_status_updated': 'Booking {status} successfully',
    'payment_status_updated': 'Payment marked as {status}',
    'checked_in': 'Checked in successfully',
    'checked_out': 'Checked out successfully',
    'booking_reallocated': 'Booking moved to another resource',
    'resource_created': 'Resource created successfully',
    'resource_updated': 'Resource updated successfully',
    'resource_blocked': 'Resource blocked',
    'resource_unblocked': 'Resource unblocked',

    # Validation messages (booking validator, fixed order)
    'past_check_in': 'Check-in date cannot be in the past',
    'invalid_interval': 'Check-out date must be after check-in date',
    'invalid_location': 'Please select a valid SPORTI location',
    'invalid_booking_type': 'Booking type must be room or service',
    'invalid_category': 'Please select a valid {kind} type for {location}',
    'category_not_permitted': '{category} rooms at {location} are reserved for senior officers',
    'occupant_name_required': 'Occupant name is required',
    'occupant_phone_invalid': 'Valid 10-digit occupant phone number is required',
    'occupant_email_invalid': 'Valid occupant email is required',
    'occupant_location_required': 'Occupant home location is required',
    'invalid_gender': 'Gender must be Male, Female or Other',
    'officer_required': 'Officer details are required for non-member bookings',
    'officer_name_required': 'Officer name is required',
    'officer_designation_required': 'Officer designation is required',
    'officer_phone_invalid': 'Valid 10-digit officer phone number is required',
    'officer_email_invalid': 'Valid officer email is required',
    'invalid_booking_for': 'Booking must be for Self or Guest',
    'invalid_relation': 'Relation {relation} is not allowed for {booking_for} bookings',
    'resource_selection_required': 'Please select a {kind}',
    'invalid_guest_count': 'Number of guests must be at least 1',

    # Conflict / transition / lookup messages
    'resource_unavailable': 'The selected {kind} is no longer available for these dates. Please choose another {kind} or time',
    'resource_blocked_error': 'The selected {kind} is blocked',
    'resource_mismatch': 'The selected {kind} does not match the booking location or category',
    'invalid_transition': 'Cannot change booking status from {current} to {new}',
    'invalid_payment_transition': 'Cannot change payment status from {current} to {new}',
    'resource_required_to_confirm': 'A {kind} must be assigned before confirming',
    'price_required_to_confirm': 'Booking cannot be confirmed with a zero total cost',
    'already_allocated': 'Booking already has a resource; use re-allocation to change it',
    'booking_not_found': 'Booking not found',
    'resource_not_found': 'Resource not found',

    # Auth
    'invalid_credentials': 'Invalid username or password',
    'account_disabled': 'Your account has been disabled. Contact the administrator',
    'permission_denied': 'You do not have permission for this action',
    'login_required': 'Login required',
}


def get_message(key: str, **kwargs) -> str:
    """
    Get a message by key with optional formatting.

    Args:
        key: Message key
        **kwargs: Format arguments

    Returns:
        Formatted message string
    """
    message = MESSAGES.get(key, key)
    if kwargs:
        return message.format(**kwargs)
    return message
