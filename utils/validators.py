"""
Input validation helper functions.
Provides validation for common input types.
"""

import re


def validate_email(email: str) -> bool:
    """
    Validate basic local@domain.tld email format.

    Args:
        email: Email address to validate

    Returns:
        True if valid email format
    """
    if not email:
        return False

    pattern = r'^[^\s@]+@[^\s@]+\.[^\s@]+$'
    return bool(re.match(pattern, email))


def validate_phone(phone: str) -> bool:
    """
    Validate a 10-digit phone number (digits only, no separators).

    Args:
        phone: Phone number to validate

    Returns:
        True if valid phone format
    """
    if not phone:
        return False

    return bool(re.fullmatch(r'[0-9]{10}', phone))


def validate_rate(value) -> bool:
    """
    Validate a nightly rate: a non-negative integer.

    Args:
        value: Rate to validate

    Returns:
        True if valid rate
    """
    if isinstance(value, bool):
        return False
    try:
        return int(value) >= 0 and float(value) == int(value)
    except (TypeError, ValueError):
        return False


def validate_room_number(room: str) -> bool:
    """
    Validate room number format.
    Accepts: alphanumeric with optional dash (e.g. "101", "A12", "VIP-3")

    Args:
        room: Room number to validate

    Returns:
        True if valid room format
    """
    if not room:
        return False

    return bool(re.match(r'^[A-Z0-9-]{1,10}$', room.upper()))


def sanitize_input(text, max_length: int = None) -> str:
    """
    Sanitize text input by trimming and limiting length.

    Args:
        text: Text to sanitize; other scalars are converted to text
        max_length: Maximum length (optional)

    Returns:
        Sanitized text
    """
    if not text:
        return ''

    sanitized = str(text).strip()

    if max_length and len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized
