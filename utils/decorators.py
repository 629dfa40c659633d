"""
Route decorators for authentication and authorization.
Provides role-based access control for routes.
"""

from functools import wraps
from flask import abort
from flask_login import login_required, current_user


def role_required(role: str):
    """
    Decorator to require a user role for a route.

    Usage:
        @bp.route('/bookings/<int:booking_id>/status', methods=['PUT'])
        @login_required
        @role_required('admin')
        def update_status(booking_id):
            ...

    Args:
        role: Role name required (e.g., 'admin')

    Returns:
        Decorator function
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated or current_user.role != role:
                abort(403)

            return func(*args, **kwargs)
        return wrapper
    return decorator


# Re-export login_required for convenience
__all__ = ['login_required', 'role_required']
