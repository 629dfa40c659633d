"""
Booking price calculation.
Pure functions: rate card + interval + payer class -> total cost.
"""

import math
from datetime import datetime, timedelta


SECONDS_PER_NIGHT = timedelta(days=1).total_seconds()


def get_payer_class(booking_for: str, relation: str) -> str:
    """
    Resolve which rate applies.

    Self bookings and Batchmate guests pay the member rate; every other
    guest relation pays the guest rate.

    Returns:
        str: 'member' or 'guest'
    """
    if booking_for == 'Self':
        return 'member'
    if booking_for == 'Guest' and relation == 'Batchmate':
        return 'member'
    return 'guest'


def count_nights(check_in: datetime, check_out: datetime) -> int:
    """
    Number of billable nights (or days for services).

    Partial days round up; the minimum is one night.
    """
    seconds = (check_out - check_in).total_seconds()
    return max(1, math.ceil(seconds / SECONDS_PER_NIGHT))


def get_rate(rate_card: dict, payer_class: str) -> int:
    """
    Read the nightly rate for a payer class from a resource row or rate card.

    Accepts either {'member_rate': .., 'guest_rate': ..} (resource rows) or
    {'member': .., 'guest': ..} (plain rate cards).
    """
    rate = rate_card.get(f'{payer_class}_rate')
    if rate is None:
        rate = rate_card.get(payer_class)
    return int(rate or 0)


def calculate_total_cost(
    rate_card: dict,
    check_in: datetime,
    check_out: datetime,
    booking_for: str,
    relation: str
) -> int:
    """
    Calculate total cost for a booking.

    Args:
        rate_card: Resource row or {'member': int, 'guest': int}
        check_in: Check-in timestamp
        check_out: Check-out timestamp (after check_in)
        booking_for: 'Self' or 'Guest'
        relation: Relation of the occupant

    Returns:
        int: nights * rate for the payer class, never negative

    Example:
        3 nights, Self, member rate 1000 -> 3000
    """
    payer_class = get_payer_class(booking_for, relation)
    rate = get_rate(rate_card, payer_class)
    return max(0, count_nights(check_in, check_out) * rate)
