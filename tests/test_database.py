"""
Database tests.
Tests database initialization, seed data and integrity constraints.
"""

import sqlite3

import pytest
from database import get_db


def test_database_tables(app):
    """Test that all required tables exist."""
    with app.app_context():
        db = get_db()
        cursor = db.cursor()

        # Get all tables
        cursor.execute("SELECT name FROM sqlite_master WHERE type='table' ORDER BY name")
        tables = [row[0] for row in cursor.fetchall()]

        # Required tables
        required_tables = ['users', 'resources', 'bookings', 'booking_status_history']

        for table in required_tables:
            assert table in tables, f"Table {table} should exist"


def test_seed_data(app):
    """Test that seed data was created correctly."""
    with app.app_context():
        db = get_db()
        cursor = db.cursor()

        # Check seeded accounts exist
        cursor.execute("SELECT username, role FROM users ORDER BY username")
        users = {row['username']: row['role'] for row in cursor.fetchall()}
        assert users == {'admin': 'admin', 'member': 'member'}

        # Check rooms and services exist
        cursor.execute("SELECT resource_kind, COUNT(*) as total FROM resources GROUP BY resource_kind")
        counts = {row['resource_kind']: row['total'] for row in cursor.fetchall()}
        assert counts['room'] >= 6, "Should have at least 6 rooms"
        assert counts['service'] >= 3, "Should have at least 3 services"


def test_booking_interval_constraint(app):
    """check_out must be after check_in at the storage level too."""
    with app.app_context():
        db = get_db()
        with pytest.raises(sqlite3.IntegrityError):
            db.execute('''
                INSERT INTO bookings (
                    channel, booking_type, booking_for, relation, location, category,
                    check_in, check_out, occupant_name, occupant_phone, occupant_location
                ) VALUES ('member', 'room', 'Self', 'Self', 'SPORTI-1', 'Standard',
                          '2030-01-05 12:00:00', '2030-01-05 12:00:00',
                          'Ravi', '9876543210', 'Bengaluru')
            ''')
        db.rollback()


def test_unknown_status_rejected(app):
    """Status values outside the lifecycle are refused by the schema."""
    with app.app_context():
        db = get_db()
        with pytest.raises(sqlite3.IntegrityError):
            db.execute('''
                INSERT INTO bookings (
                    channel, booking_type, booking_for, relation, location, category,
                    check_in, check_out, status, occupant_name, occupant_phone, occupant_location
                ) VALUES ('member', 'room', 'Self', 'Self', 'SPORTI-1', 'Standard',
                          '2030-01-05 12:00:00', '2030-01-06 12:00:00', 'archived',
                          'Ravi', '9876543210', 'Bengaluru')
            ''')
        db.rollback()
