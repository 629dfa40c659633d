"""
Pytest configuration and fixtures.
Ensures tests use an isolated test database, not the production database.
"""

import os
import pytest
import tempfile
from datetime import date, timedelta

# Set test database path BEFORE importing app
# This ensures all tests use an isolated database
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), 'sporti_booking_test.db')
os.environ['DATABASE_PATH'] = TEST_DB_PATH


@pytest.fixture(scope='session', autouse=True)
def setup_test_environment():
    """Set up test environment before any tests run."""
    # Ensure test database path is set
    os.environ['DATABASE_PATH'] = TEST_DB_PATH
    os.environ['FLASK_ENV'] = 'test'

    yield

    # Cleanup: remove test database after all tests
    for suffix in ('', '-wal', '-shm'):
        path = TEST_DB_PATH + suffix
        if os.path.exists(path):
            try:
                os.remove(path)
            except PermissionError:
                pass  # Windows may have file locked


@pytest.fixture
def app():
    """
    Create test application with a freshly seeded database.

    Requests made through the test clients run in their own app context so
    each one resolves its own logged-in user. Tests that call model functions
    directly open ``with app.app_context():`` themselves.
    """
    from app import create_app
    from database import init_db

    # Ensure test database path
    os.environ['DATABASE_PATH'] = TEST_DB_PATH

    app = create_app('test')
    app.config['TESTING'] = True
    app.config['WTF_CSRF_ENABLED'] = False
    app.config['DATABASE_PATH'] = TEST_DB_PATH

    with app.app_context():
        init_db()

    yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def authenticated_client(app, client):
    """Create test client logged in as the seeded administrator."""
    response = client.post('/login', data={
        'username': 'admin',
        'password': 'admin123'
    })
    assert response.status_code == 200
    return client


@pytest.fixture
def member_client(app):
    """Create a separate test client logged in as the seeded member."""
    member = app.test_client()
    response = member.post('/login', data={
        'username': 'member',
        'password': 'member123'
    })
    assert response.status_code == 200
    return member


@pytest.fixture
def resource_id(app):
    """Look up a seeded resource ID: resource_id('room', 'SPORTI-1', '101')."""
    from database import get_db

    def _lookup(resource_kind, location, name):
        with app.app_context():
            cursor = get_db().cursor()
            cursor.execute('''
                SELECT id FROM resources
                WHERE resource_kind = ? AND location = ? AND name = ?
            ''', (resource_kind, location, name))
            return cursor.fetchone()['id']

    return _lookup


@pytest.fixture
def booking_payload():
    """
    Build booking request JSON for a future stay.

    Defaults to a two-night Self booking of a Standard room at SPORTI-1,
    thirty days from today. Keyword arguments override top-level fields.
    """
    def _build(days_ahead=30, nights=2, non_member=False, **overrides):
        check_in = date.today() + timedelta(days=days_ahead)
        payload = {
            'booking_type': 'room',
            'booking_for': 'Self',
            'relation': 'Self',
            'location': 'SPORTI-1',
            'category': 'Standard',
            'check_in': check_in.isoformat(),
            'check_out': (check_in + timedelta(days=nights)).isoformat(),
            'occupant_details': {
                'name': 'Ravi Kumar',
                'phone': '9876543210',
                'gender': 'Male',
                'email': 'ravi.kumar@example.com',
                'home_location': 'Bengaluru',
            },
        }
        if non_member:
            payload['officer_details'] = {
                'name': 'Anita Rao',
                'designation': 'SP',
                'phone': '9123456780',
                'email': 'anita.rao@example.com',
                'gender': 'Female',
            }
        payload.update(overrides)
        return payload

    return _build
