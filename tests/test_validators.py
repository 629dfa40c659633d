"""
Tests for input validation utilities.
"""

from utils.validators import (
    validate_email,
    validate_phone,
    validate_rate,
    validate_room_number,
    sanitize_input
)


class TestValidateEmail:
    """Tests for email validation."""

    def test_valid_email(self):
        """Test valid email formats."""
        assert validate_email('user@example.com') is True
        assert validate_email('user.name@example.com') is True
        assert validate_email('user+tag@example.co.in') is True

    def test_invalid_email(self):
        """Test invalid email formats."""
        assert validate_email('') is False
        assert validate_email(None) is False
        assert validate_email('invalid') is False
        assert validate_email('missing@domain') is False
        assert validate_email('@nodomain.com') is False
        assert validate_email('spaces in@email.com') is False


class TestValidatePhone:
    """Tests for 10-digit phone validation."""

    def test_valid_phone(self):
        assert validate_phone('9876543210') is True
        assert validate_phone('0000000000') is True

    def test_invalid_phone(self):
        assert validate_phone('') is False
        assert validate_phone(None) is False
        assert validate_phone('987654321') is False
        assert validate_phone('98765432101') is False
        assert validate_phone('98765 43210') is False
        assert validate_phone('+919876543210') is False
        assert validate_phone('98765abcde') is False
        # Non-ASCII digits (Devanagari, Arabic-Indic)
        assert validate_phone('\u096F\u096E\u096D\u096C\u096B\u096A\u0969\u0968\u0967\u0966') is False
        assert validate_phone('\u0669' * 10) is False


class TestValidateRate:
    """Tests for rate validation."""

    def test_valid_rates(self):
        assert validate_rate(0) is True
        assert validate_rate(800) is True
        assert validate_rate('1500') is True

    def test_invalid_rates(self):
        assert validate_rate(-1) is False
        assert validate_rate(None) is False
        assert validate_rate('abc') is False
        assert validate_rate(12.5) is False
        assert validate_rate(True) is False


class TestValidateRoomNumber:
    """Tests for room number validation."""

    def test_valid_room_numbers(self):
        assert validate_room_number('101') is True
        assert validate_room_number('A12') is True
        assert validate_room_number('vip-3') is True

    def test_invalid_room_numbers(self):
        assert validate_room_number('') is False
        assert validate_room_number('Room 101') is False
        assert validate_room_number('12345678901') is False


class TestSanitizeInput:
    """Tests for text sanitization."""

    def test_trims_and_limits(self):
        assert sanitize_input('  hello  ') == 'hello'
        assert sanitize_input('abcdef', max_length=3) == 'abc'

    def test_empty_input(self):
        assert sanitize_input(None) == ''
        assert sanitize_input('') == ''

    def test_non_string_input(self):
        assert sanitize_input(5) == '5'
        assert sanitize_input(12.5, max_length=2) == '12'
