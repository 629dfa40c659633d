"""
SPORTI Booking - Facility booking core
Flask application factory and initialization
"""

import os
import click
import logging
import sqlite3
from flask import Flask, g
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Import configuration
from config import config

# Import extensions
from extensions import login_manager, csrf

# Import database functions
from database import close_db, init_db

from models.exceptions import BookingError
from utils.api_response import api_error
from utils.messages import get_message


def create_app(config_name=None):
    """
    Application factory for Flask app.

    Args:
        config_name: Configuration name ('development', 'production', 'test')

    Returns:
        Flask application instance
    """
    # Determine config
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    # Create Flask app
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])

    # Initialize extensions
    initialize_extensions(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register CLI commands
    register_cli_commands(app)

    # Register teardown handlers
    register_teardown_handlers(app)

    # Configure logging
    configure_logging(app)

    return app


def initialize_extensions(app):
    """Initialize Flask extensions."""
    # Initialize Flask-Login
    login_manager.init_app(app)
    # Initialize CSRF Protection
    csrf.init_app(app)


def register_blueprints(app):
    """Register Flask blueprints."""
    # Import blueprints
    from blueprints.auth.routes import auth_bp
    from blueprints.booking import booking_bp

    # JSON clients authenticate with the session cookie; no form tokens
    csrf.exempt(auth_bp)
    csrf.exempt(booking_bp)

    # Register blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(booking_bp, url_prefix='/api')


def register_error_handlers(app):
    """Register error handlers."""

    @app.errorhandler(BookingError)
    def booking_error(error):
        """Validation, conflict, transition and not-found errors."""
        if error.status_code == 409:
            app.logger.info('%s: %s %s', type(error).__name__, error.message, error.details)
        return api_error(error.message, status=error.status_code,
                         error_type=type(error).__name__, **error.details)

    @app.errorhandler(404)
    def not_found_error(error):
        """Handle 404 errors."""
        return api_error('Not found', status=404)

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        # Rollback database on error
        db = g.get('db')
        if db:
            db.rollback()
        return api_error('Internal server error', status=500)

    @app.errorhandler(403)
    def forbidden_error(error):
        """Handle 403 errors."""
        return api_error(get_message('permission_denied'), status=403)


def register_cli_commands(app):
    """Register Flask CLI commands."""

    @app.cli.command('init-db')
    def init_db_command():
        """Initialize database with schema and seed data."""
        click.echo('Initializing database...')
        with app.app_context():
            init_db()
        click.echo('Database initialized successfully!')

    @app.cli.command('create-user')
    @click.argument('username')
    @click.argument('email')
    @click.option('--role', type=click.Choice(['member', 'admin']), default='member')
    @click.option('--designation', default=None, help='Service designation, e.g. SP or DGP')
    @click.option('--phone', default=None)
    @click.password_option()
    def create_user_command(username, email, role, designation, phone, password):
        """Create a new user."""
        from models.user import create_user

        with app.app_context():
            try:
                user_id = create_user(
                    username=username,
                    email=email,
                    password=password,
                    role=role,
                    designation=designation,
                    phone=phone
                )
                click.echo(f'User created successfully! ID: {user_id}')
            except (ValueError, sqlite3.IntegrityError) as e:
                raise click.ClickException(f'Error creating user: {e}')


def register_teardown_handlers(app):
    """Register teardown handlers."""

    @app.teardown_appcontext
    def teardown_db(error):
        """Close database connection at end of request."""
        close_db(error)


def configure_logging(app):
    """Configure application logging."""
    if not app.debug and not app.testing:
        log_dir = app.config['LOG_DIR']
        level = logging.getLevelName(app.config['LOG_LEVEL'].upper())
        os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.FileHandler(os.path.join(log_dir, 'sporti_booking.log'))
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s %(name)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(level)
        app.logger.addHandler(file_handler)

        # Model and service modules log through logging.getLogger(__name__)
        for name in ('models', 'blueprints'):
            logging.getLogger(name).addHandler(file_handler)
            logging.getLogger(name).setLevel(level)

        app.logger.setLevel(level)
        app.logger.info('%s %s startup', app.config['APP_NAME'], app.config['APP_VERSION'])
    else:
        app.logger.setLevel(logging.DEBUG)
        logging.getLogger('models').setLevel(logging.DEBUG)


# Create application instance for development server
if __name__ == '__main__':
    app = create_app()
    # host='0.0.0.0' allows access from other devices on the network
    app.run(host='0.0.0.0', debug=True)
