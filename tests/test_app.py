"""
Test application factory, configuration and CLI commands.
"""

import pytest
from app import create_app
from config import ProductionConfig


class TestAppFactory:
    """Test Flask application factory."""

    def test_create_app_development(self):
        """Test app creation with development config."""
        app = create_app('development')
        assert app is not None
        assert app.config['DEBUG'] is True
        assert app.config['TESTING'] is False

    def test_create_app_test(self):
        """Test app creation with test config."""
        app = create_app('test')
        assert app is not None
        assert app.config['TESTING'] is True
        assert app.config['WTF_CSRF_ENABLED'] is False

    def test_app_has_blueprints(self):
        """Test that all blueprints are registered."""
        app = create_app('test')
        blueprint_names = list(app.blueprints.keys())

        assert 'auth' in blueprint_names
        assert 'booking' in blueprint_names

    def test_app_has_extensions(self):
        """Test that extensions are initialized."""
        app = create_app('test')

        # Check login manager
        assert hasattr(app, 'login_manager')


class TestAppConfiguration:
    """Test application configuration."""

    def test_secret_key_set(self):
        """Test that secret key is configured."""
        app = create_app('test')
        assert app.config['SECRET_KEY'] is not None
        assert len(app.config['SECRET_KEY']) > 0

    def test_booking_settings(self):
        """Test booking-specific settings."""
        app = create_app('test')
        assert app.config['TIMEZONE'] == 'Asia/Kolkata'
        assert app.config['APPLICATION_NUMBER_PREFIX'] == 'SP'
        assert app.config.get('APP_NAME') == 'SPORTI Booking'

    def test_production_requires_secret_key(self, monkeypatch):
        """Production refuses to start without a strong secret key."""
        monkeypatch.delenv('SECRET_KEY', raising=False)
        with pytest.raises(ValueError):
            ProductionConfig.validate()

        monkeypatch.setenv('SECRET_KEY', 'short')
        with pytest.raises(ValueError):
            ProductionConfig.validate()


class TestCLICommands:
    """Test CLI command registration."""

    def test_cli_commands_registered(self):
        """Test that CLI commands are registered."""
        app = create_app('test')

        # Get registered CLI commands
        commands = list(app.cli.commands.keys())

        assert 'init-db' in commands
        assert 'create-user' in commands

    def test_create_user_command(self, app):
        """create-user adds a member with a designation."""
        from database import get_db

        runner = app.test_cli_runner()
        result = runner.invoke(args=[
            'create-user', 'dgp_office', 'dgp@example.com',
            '--role', 'member', '--designation', 'dgp', '--password', 'secret123'
        ])
        assert 'User created successfully' in result.output

        with app.app_context():
            cursor = get_db().cursor()
            cursor.execute("SELECT role, designation FROM users WHERE username = 'dgp_office'")
            row = cursor.fetchone()
            assert row['role'] == 'member'
            assert row['designation'] == 'DGP'

    def test_create_user_duplicate_fails(self, app):
        """create-user reports a duplicate username as a command error."""
        runner = app.test_cli_runner()
        result = runner.invoke(args=[
            'create-user', 'admin', 'other@example.com', '--password', 'secret123'
        ])
        assert result.exit_code != 0
        assert 'Error creating user' in result.output
