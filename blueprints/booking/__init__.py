"""
Booking blueprint initialization.
Registers the JSON API (availability, bookings, resource administration).

Individual route logic is in:
- routes/availability.py - Availability lookup and health check
- routes/bookings.py - Booking submission, allocation and lifecycle
- routes/resources.py - Room and service administration
"""

from flask import Blueprint

# Create main booking blueprint (mounted under /api)
booking_bp = Blueprint('booking', __name__)

from blueprints.booking.routes import availability
from blueprints.booking.routes import bookings
from blueprints.booking.routes import resources

availability.register_routes(booking_bp)
bookings.register_routes(booking_bp)
resources.register_routes(booking_bp)
